"""
Crypto glitch transform.

Characters of the revealed text are swapped for symbolic glyphs with a
probability driven by the glitch control, the sampled energy and the position
of the line within its envelope.
"""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence

from .reveal import clamp01

GLYPH_PALETTE = "01ΔΣΞΩ≈∿λµΩƒ≋▌▐▒░▓█#/%\\|+<>⧉⧖⧈◊⌁⌂↯"

# Structural characters stay readable.
SEPARATORS = frozenset(" \u00a0/\\|:-—·,")


def center_weight(phase: float) -> float:
    """0 at the start and end of a line, 1 at its midpoint."""
    return 1.0 - abs(phase - 0.5) * 2.0


def glitch_intensity(text_glitch: float, energy: float, phase: float) -> float:
    weight = center_weight(phase)
    return clamp01(text_glitch * 0.7 + energy * 0.6 * (0.3 + 0.7 * weight))


def breathing(t: float, position: int) -> float:
    """Per-position oscillation in ``[0, 1]``."""
    return (math.sin(t * 1.7 + position * 13.37) + 1.0) * 0.5


def is_protected(char: str) -> bool:
    return char in SEPARATORS or char.isspace()


def apply_glitch(
    text: str,
    phase: float,
    energy: float,
    t: float,
    *,
    text_glitch: float,
    rng: Optional[random.Random] = None,
    palette: Sequence[str] = GLYPH_PALETTE,
) -> str:
    """
    Return ``text`` with some characters replaced by glyphs from ``palette``.

    Parameters
    ----------
    text:
        Revealed prefix of the current line.
    phase:
        Line phase in ``[0, 1)``.
    energy:
        Sampled energy in ``[0, 1]``.
    t:
        Running line time, drives the per-position breathing modulation.
    text_glitch:
        Base glitch control value.
    rng:
        Random source. A fresh :class:`random.Random` is used when omitted.
    """

    if not text:
        return ""
    source = rng if rng is not None else random.Random()
    intensity = glitch_intensity(text_glitch, energy, phase)

    out = []
    for position, char in enumerate(text):
        if is_protected(char):
            out.append(char)
            continue
        prob = intensity * breathing(t, position)
        if source.random() < prob:
            out.append(source.choice(palette))
        else:
            out.append(char)
    return "".join(out)
