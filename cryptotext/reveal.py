"""
Reveal envelope: how much of a line is visible at a given phase.
"""

from __future__ import annotations

import math


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def smoothstep(x: float) -> float:
    x = clamp01(x)
    return x * x * (3.0 - 2.0 * x)


def line_phase(elapsed: float, line_duration: float) -> float:
    return elapsed / line_duration


def reveal_fraction(phase: float) -> float:
    """
    Symmetric fade-in/fade-out envelope over ``phase`` in ``[0, 1)``.

    The first half reveals the line, the second half dissolves it. Both ends
    have a zero slope so line changes do not jump.
    """

    if phase < 0.5:
        return smoothstep(phase / 0.5)
    return smoothstep((1.0 - phase) / 0.5)


def visible_length(length: int, fraction: float) -> int:
    return max(0, min(length, int(math.floor(length * fraction))))


def revealed_prefix(line: str, phase: float) -> str:
    return line[: visible_length(len(line), reveal_fraction(phase))]
