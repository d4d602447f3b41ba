"""
Command line entrypoint.

``terminal`` mode animates a single line on stdout; ``serve`` mode runs the
engine headless behind the FastAPI control surface.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional, TextIO

from .config import EngineConfig, build_engine, load_profile
from .energy import LevelMeter
from .errors import ConfigurationError
from .scheduler import AsyncioFrameScheduler
from .sinks import MemorySink, TerminalSink
from .utils.logging import configure_logging

LOG = logging.getLogger(__name__)


def _install_signal_handlers(stop_event: asyncio.Event) -> List[int]:
    """
    Route SIGINT/SIGTERM to ``stop_event`` on the running loop.

    Returns the signals actually installed so they can be removed again.
    """

    loop = asyncio.get_running_loop()

    def _handle_signal(signum: int) -> None:
        LOG.info("Received signal %s, stopping animation...", signum)
        stop_event.set()

    installed: List[int] = []
    for signame in ("SIGINT", "SIGTERM"):
        signum = getattr(signal, signame)
        try:
            loop.add_signal_handler(signum, _handle_signal, signum)
        except (NotImplementedError, RuntimeError):
            # Event loops without signal support, or not the main thread.
            continue
        installed.append(signum)
    return installed


def _remove_signal_handlers(signals: List[int]) -> None:
    loop = asyncio.get_running_loop()
    for signum in signals:
        loop.remove_signal_handler(signum)


async def animate(
    config: EngineConfig,
    *,
    seconds: Optional[float] = None,
    stream: Optional[TextIO] = None,
    install_signals: bool = True,
) -> None:
    """
    Animate ``config`` on a terminal stream until stopped or ``seconds`` pass.
    """

    scheduler = AsyncioFrameScheduler(fps=config.fps)
    sink = TerminalSink(stream)
    engine = build_engine(config, sink, scheduler=scheduler)

    stop_event = asyncio.Event()
    installed = _install_signal_handlers(stop_event) if install_signals else []

    engine.start()
    try:
        if seconds is None:
            await stop_event.wait()
        else:
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=seconds)
            except asyncio.TimeoutError:
                pass
    finally:
        _remove_signal_handlers(installed)
        engine.stop()
        scheduler.cancel()
        sink.close()


async def serve(config: EngineConfig, host: str = "127.0.0.1", port: int = 8080) -> None:
    """
    Run the engine headless behind the control API.
    """

    import uvicorn

    from .api.server import create_app

    meter = LevelMeter()
    scheduler = AsyncioFrameScheduler(fps=config.fps)
    engine = build_engine(config, MemorySink(), scheduler=scheduler, energy_provider=meter)

    @asynccontextmanager
    async def app_lifespan(_app) -> AsyncIterator[None]:
        LOG.info("Engine lifespan starting")
        engine.start()
        try:
            yield
        finally:
            engine.stop()
            scheduler.cancel()
            LOG.info("Engine lifespan shutting down")

    app = create_app(engine, meter=meter, config=config, lifespan=app_lifespan)
    server_config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        log_config=None,
        log_level="info",
        reload=False,
    )
    server = uvicorn.Server(config=server_config)
    await server.serve()


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Crypto text terminal animation")
    parser.add_argument("--profile", default="default", help="profile to load")
    parser.add_argument("--profiles-file", type=Path, default=None, help="alternative profiles YAML")
    parser.add_argument("--mode", choices=("terminal", "serve"), default="terminal")
    parser.add_argument("--fps", type=float, default=None, help="override the profile frame rate")
    parser.add_argument("--seed", type=int, default=None, help="seed the glitch random source")
    parser.add_argument("--seconds", type=float, default=None, help="stop after this many seconds")
    parser.add_argument("--host", default="127.0.0.1", help="bind host for the API server")
    parser.add_argument("--port", type=int, default=8080, help="bind port for the API server")
    parser.add_argument("--log-level", default="WARNING", help="logging level")
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> EngineConfig:
    config = load_profile(args.profile, args.profiles_file)
    overrides = {}
    if args.fps is not None:
        overrides["fps"] = args.fps
    if args.seed is not None:
        overrides["seed"] = args.seed
    if overrides:
        config = EngineConfig.model_validate({**config.model_dump(), **overrides})
    return config


def run(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    level = getattr(logging, str(args.log_level).upper(), logging.WARNING)
    # stdout belongs to the animation in terminal mode.
    configure_logging(level=level, stream=sys.stderr if args.mode == "terminal" else None)

    try:
        config = resolve_config(args)
    except ConfigurationError as exc:
        LOG.error("%s", exc)
        raise SystemExit(2) from exc

    try:
        if args.mode == "serve":
            asyncio.run(serve(config, host=args.host, port=args.port))
        else:
            asyncio.run(animate(config, seconds=args.seconds))
    except KeyboardInterrupt:
        LOG.info("Interrupted by user.")


if __name__ == "__main__":
    run()
