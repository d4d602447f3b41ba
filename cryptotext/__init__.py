"""
Crypto text engine package.

An ambient "terminal hacker" text animation: lines are revealed and dissolved
along a smoothstep envelope while a probabilistic glitch swaps characters for
symbolic glyphs, optionally modulated by an external energy signal.
"""

from __future__ import annotations

from .controls import Controls
from .engine import DEFAULT_LINES, CryptoTextEngine, EngineState
from .errors import ConfigurationError, CryptoTextError, InvalidCommand
from .glitch import GLYPH_PALETTE, apply_glitch
from .reveal import reveal_fraction, smoothstep
from .timeline import LineTimeline, TimelineSnapshot

__all__ = [
    "Controls",
    "ConfigurationError",
    "CryptoTextEngine",
    "CryptoTextError",
    "DEFAULT_LINES",
    "EngineState",
    "GLYPH_PALETTE",
    "InvalidCommand",
    "LineTimeline",
    "TimelineSnapshot",
    "apply_glitch",
    "reveal_fraction",
    "smoothstep",
]
