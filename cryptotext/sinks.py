"""
Output sinks receiving rendered frames.

A sink is anything exposing ``write(text)``; the engine writes one full frame
per call.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

ERASE_LINE = "\r\x1b[2K"


class MemorySink:
    """
    Keep the most recent frame in memory.
    """

    def __init__(self) -> None:
        self.text = ""
        self.frames = 0

    def write(self, text: str) -> None:
        self.text = text
        self.frames += 1


class TerminalSink:
    """
    Redraw a single terminal line in place.
    """

    def __init__(self, stream: Optional[TextIO] = None, *, prefix: str = "") -> None:
        self.stream = stream if stream is not None else sys.stdout
        self.prefix = prefix

    def write(self, text: str) -> None:
        self.stream.write(f"{ERASE_LINE}{self.prefix}{text}")
        self.stream.flush()

    def close(self) -> None:
        self.stream.write("\n")
        self.stream.flush()
