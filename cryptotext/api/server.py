"""
FastAPI control surface for the crypto text engine.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from ..config import EngineConfig, build_engine, load_profiles
from ..energy import LevelMeter
from ..engine import CryptoTextEngine
from ..errors import ConfigurationError, InvalidCommand
from ..sinks import MemorySink
from . import schemas

LOG = logging.getLogger(__name__)


def create_app(
    engine: Optional[CryptoTextEngine] = None,
    *,
    meter: Optional[LevelMeter] = None,
    config: Optional[EngineConfig] = None,
    profiles_path: Optional[Path] = None,
    lifespan: Optional[Callable[..., object]] = None,
) -> FastAPI:
    """
    Build the control API around ``engine``.

    Without an engine, one is built from ``config`` writing to a
    :class:`MemorySink` and reading its energy from ``meter``. A given engine
    whose energy provider is a :class:`LevelMeter` is fed through that meter;
    any other engine has no meter and ``POST /energy`` answers 409.
    """

    engine_config = config or EngineConfig()
    level_meter: Optional[LevelMeter]
    if engine is None:
        level_meter = meter or LevelMeter()
        text_engine = build_engine(engine_config, MemorySink(), energy_provider=level_meter)
    else:
        text_engine = engine
        level_meter = meter
        if level_meter is None and isinstance(engine.energy_provider, LevelMeter):
            level_meter = engine.energy_provider

    app = FastAPI(title="Crypto Text Engine API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.engine = text_engine
    app.state.meter = level_meter

    @app.get("/healthz")
    async def healthz() -> dict:
        return {"status": "ok", "profile": engine_config.profile, "running": text_engine.running}

    @app.get("/profiles")
    async def list_profiles() -> dict:
        try:
            profiles = load_profiles(profiles_path)
        except ConfigurationError as exc:
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return {"profiles": profiles}

    @app.get("/state")
    async def get_state() -> dict:
        return text_engine.snapshot()

    @app.get("/text", response_model=schemas.TextResponse)
    async def get_text() -> schemas.TextResponse:
        return schemas.TextResponse(
            text=text_engine.get_current_rendered_text(),
            index=text_engine.index,
            phase=text_engine.timeline.phase,
        )

    @app.post("/transport")
    async def apply_transport(payload: schemas.TransportCommandRequest) -> dict:
        try:
            snapshot = text_engine.apply(payload.op)
        except InvalidCommand as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {"state": snapshot}

    @app.post("/controls", response_model=schemas.ApplyResponse)
    async def update_control(payload: schemas.ControlUpdateRequest) -> schemas.ApplyResponse:
        applied = text_engine.set_control(payload.name, payload.value)
        if not applied:
            LOG.debug("Ignored control %s=%r", payload.name, payload.value)
        return schemas.ApplyResponse(applied=applied, state=text_engine.snapshot())

    @app.put("/lines", response_model=schemas.ApplyResponse)
    async def replace_lines(payload: schemas.LinesUpdateRequest) -> schemas.ApplyResponse:
        applied = text_engine.set_lines(payload.lines)
        return schemas.ApplyResponse(applied=applied, state=text_engine.snapshot())

    @app.post("/energy")
    async def push_energy(payload: schemas.EnergyRequest) -> dict:
        if level_meter is None:
            raise HTTPException(status_code=409, detail="engine energy is not fed by a level meter")
        if payload.samples is not None:
            level_meter.on_sample(payload.samples)
        elif payload.level is not None:
            level_meter.push_level(payload.level)
        else:
            raise HTTPException(status_code=400, detail="level or samples is required")
        return {"level": level_meter.level}

    return app
