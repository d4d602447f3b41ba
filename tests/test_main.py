import asyncio
import io
import signal
import sys

import pytest

from cryptotext.config import EngineConfig
from cryptotext.main import animate, parse_args, resolve_config
from cryptotext.sinks import ERASE_LINE


def test_resolve_config_applies_overrides() -> None:
    args = parse_args(["--profile", "calm", "--fps", "12", "--seed", "3"])
    config = resolve_config(args)

    assert config.profile == "calm"
    assert config.fps == 12.0
    assert config.seed == 3
    assert config.line_duration == 16.0


def test_animate_runs_for_given_time() -> None:
    stream = io.StringIO()
    config = EngineConfig(fps=60, seed=1)

    asyncio.run(animate(config, seconds=0.25, stream=stream, install_signals=False))

    output = stream.getvalue()
    assert ERASE_LINE in output
    assert output.endswith("\n")


@pytest.mark.skipif(sys.platform == "win32", reason="loop signal handlers need a unix event loop")
def test_animate_restores_signal_handlers() -> None:
    before = signal.getsignal(signal.SIGTERM)
    if before is not signal.SIG_DFL:
        pytest.skip("SIGTERM already handled by the test runner")

    asyncio.run(animate(EngineConfig(fps=60, seed=1), seconds=0.05, stream=io.StringIO()))

    assert signal.getsignal(signal.SIGTERM) is before
