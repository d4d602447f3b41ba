"""
Control registry for the crypto text engine.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

TEXT_SPEED = "textSpeed"
TEXT_GLITCH = "textGlitch"

DEFAULT_TEXT_SPEED = 1.0
DEFAULT_TEXT_GLITCH = 0.3

_FIELD_MAP = {
    TEXT_SPEED: "text_speed",
    "text_speed": "text_speed",
    TEXT_GLITCH: "text_glitch",
    "text_glitch": "text_glitch",
}


def is_number(value: object) -> bool:
    """
    True for real numbers that are not booleans and not NaN.
    """

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    try:
        return not math.isnan(float(value))  # type: ignore[arg-type]
    except OverflowError:
        return True


def as_real(value: object) -> Optional[float]:
    """
    Return ``value`` as a float, or ``None`` when it is not a number.

    Numbers too large for a float become signed infinity.
    """

    if not is_number(value):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except OverflowError:
        return math.inf if value > 0 else -math.inf  # type: ignore[operator]


@dataclass
class Controls:
    """
    Named numeric parameters.

    ``textSpeed`` and ``textGlitch`` drive the engine; any other name is kept
    in ``extras`` untouched. Values are not clamped here, consumers clamp at
    the point of use.
    """

    text_speed: float = DEFAULT_TEXT_SPEED
    text_glitch: float = DEFAULT_TEXT_GLITCH
    extras: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, object]]) -> "Controls":
        controls = cls()
        for name, value in (payload or {}).items():
            controls.set(str(name), value)
        return controls

    def set(self, name: str, value: object) -> bool:
        number = as_real(value)
        # Non-finite values cannot be reported back as JSON.
        if number is None or not math.isfinite(number):
            return False
        attr = _FIELD_MAP.get(name)
        if attr is not None:
            setattr(self, attr, number)
        else:
            self.extras[name] = number
        return True

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        attr = _FIELD_MAP.get(name)
        if attr is not None:
            return getattr(self, attr)
        return self.extras.get(name, default)

    def to_dict(self) -> dict:
        payload = dict(self.extras)
        payload[TEXT_SPEED] = float(self.text_speed)
        payload[TEXT_GLITCH] = float(self.text_glitch)
        return payload
