"""
Engine configuration and YAML profiles.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .controls import DEFAULT_TEXT_GLITCH, DEFAULT_TEXT_SPEED
from .energy import EnergyProvider, SyntheticEnergy
from .engine import CryptoTextEngine
from .errors import ConfigurationError
from .timeline import DEFAULT_LINE_DURATION, normalise_duration

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
PROFILES_PATH = CONFIG_DIR / "profiles.yaml"

LOG = logging.getLogger(__name__)


class ControlsModel(BaseModel):
    text_speed: float = Field(default=DEFAULT_TEXT_SPEED, alias="textSpeed")
    text_glitch: float = Field(default=DEFAULT_TEXT_GLITCH, alias="textGlitch")
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_controls(self) -> Dict[str, Any]:
        payload = dict(self.model_extra or {})
        payload["textSpeed"] = self.text_speed
        payload["textGlitch"] = self.text_glitch
        return payload


class EngineConfig(BaseModel):
    profile: str = "default"
    lines: Optional[List[str]] = None
    line_duration: float = Field(default=DEFAULT_LINE_DURATION, alias="lineDuration")
    controls: ControlsModel = Field(default_factory=ControlsModel)
    fps: float = 30.0
    energy: Literal["none", "synthetic"] = "none"
    seed: Optional[int] = None
    model_config = ConfigDict(populate_by_name=True)

    @field_validator("lines", mode="before")
    @classmethod
    def _empty_lines_use_default(cls, value: object) -> object:
        if not value:
            return None
        return value

    @field_validator("line_duration", mode="before")
    @classmethod
    def _positive_duration(cls, value: object) -> float:
        return normalise_duration(value)

    @field_validator("fps", mode="before")
    @classmethod
    def _clamp_fps(cls, value: object) -> float:
        try:
            return max(1.0, min(240.0, float(value)))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 30.0


def load_profiles(path: Optional[Path] = None) -> Dict[str, dict]:
    target = Path(path) if path is not None else PROFILES_PATH
    try:
        with target.open("r", encoding="utf-8") as handle:
            profiles = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        profiles = {}
    if not isinstance(profiles, dict):
        raise ConfigurationError(f"Profiles file {target} must contain a mapping")
    return profiles


def load_profile(name: str = "default", path: Optional[Path] = None) -> EngineConfig:
    profiles = load_profiles(path)
    if name not in profiles:
        raise ConfigurationError(f"Unknown profile '{name}'")
    payload = dict(profiles.get(name) or {})
    payload.setdefault("profile", name)
    try:
        config = EngineConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid profile '{name}': {exc}") from exc
    LOG.info("Loaded profile '%s'", name)
    return config


def build_engine(
    config: EngineConfig,
    sink: Any,
    *,
    scheduler: Any = None,
    energy_provider: Optional[EnergyProvider] = None,
) -> CryptoTextEngine:
    """
    Create a :class:`CryptoTextEngine` from ``config``.

    An explicit ``energy_provider`` wins over the configured energy mode.
    """

    rng = random.Random(config.seed)
    if energy_provider is None and config.energy == "synthetic":
        energy_provider = SyntheticEnergy(rng=random.Random(config.seed))
    return CryptoTextEngine(
        sink,
        lines=config.lines,
        line_duration=config.line_duration,
        energy_provider=energy_provider,
        controls=config.controls.to_controls(),
        rng=rng,
        scheduler=scheduler,
    )
