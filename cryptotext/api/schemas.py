"""
Pydantic schemas for the HTTP control surface.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TransportCommandRequest(BaseModel):
    op: str

    @field_validator("op", mode="before")
    @classmethod
    def _normalise_op(cls, value: object) -> str:
        result = str(value or "").strip()
        if not result:
            raise ValueError("op is required")
        return result


class ControlUpdateRequest(BaseModel):
    name: str = Field(validation_alias=AliasChoices("name", "control"))
    # Left untyped: non-numeric values are accepted and ignored by the engine.
    value: Any = None

    model_config = ConfigDict(populate_by_name=True)


class LinesUpdateRequest(BaseModel):
    lines: Any = None


class EnergyRequest(BaseModel):
    level: Optional[float] = None
    samples: Optional[List[float]] = Field(
        default=None,
        validation_alias=AliasChoices("samples", "pcm"),
    )

    model_config = ConfigDict(populate_by_name=True)


class TextResponse(BaseModel):
    text: str
    index: int
    phase: float


class ApplyResponse(BaseModel):
    applied: bool
    state: dict
