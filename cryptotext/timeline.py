"""
Line timeline for the crypto text engine.

The timeline only knows how many lines exist and how long each one lasts; the
engine owns the line contents and the transport state.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict

LOG = logging.getLogger(__name__)

DEFAULT_LINE_DURATION = 11.0


def normalise_duration(value: object, default: float = DEFAULT_LINE_DURATION) -> float:
    """
    Return ``value`` as a positive finite duration, or ``default`` otherwise.
    """

    if isinstance(value, bool):
        return default
    try:
        duration = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(duration) or duration <= 0:
        return default
    return duration


@dataclass(frozen=True, slots=True)
class TimelineSnapshot:
    """
    Immutable snapshot of the timeline position.
    """

    index: int
    elapsed: float
    line_duration: float
    line_count: int

    @property
    def phase(self) -> float:
        return self.elapsed / self.line_duration

    def to_dict(self) -> dict:
        return {
            "index": int(self.index),
            "elapsed": float(self.elapsed),
            "lineDuration": float(self.line_duration),
            "lineCount": int(self.line_count),
            "phase": float(self.phase),
        }


class LineTimeline:
    """
    ``(index, elapsed)`` state machine cycling through ``line_count`` lines.

    Parameters
    ----------
    line_count:
        Number of lines in the cycle, at least one.
    line_duration:
        Seconds a line occupies end-to-end. Invalid values fall back to
        :data:`DEFAULT_LINE_DURATION`.
    """

    def __init__(self, line_count: int, line_duration: float = DEFAULT_LINE_DURATION) -> None:
        self._line_count = max(1, int(line_count))
        self._line_duration = normalise_duration(line_duration)
        self._index = 0
        self._elapsed = 0.0

        self._observer_counter = 0
        self._observers: Dict[int, Callable[[TimelineSnapshot], None]] = {}

    # ------------------------------------------------------------------ helpers

    def _notify(self, snapshot: TimelineSnapshot) -> None:
        if not self._observers:
            return
        for token, callback in dict(self._observers).items():
            try:
                callback(snapshot)
            except Exception:
                LOG.exception("Timeline observer %s failed.", token)

    # ------------------------------------------------------------------ properties

    @property
    def index(self) -> int:
        return self._index

    @property
    def elapsed(self) -> float:
        return self._elapsed

    @property
    def line_duration(self) -> float:
        return self._line_duration

    @property
    def line_count(self) -> int:
        return self._line_count

    @property
    def phase(self) -> float:
        return self._elapsed / self._line_duration

    # ------------------------------------------------------------------ public API

    def subscribe(self, callback: Callable[[TimelineSnapshot], None]) -> int:
        """
        Register ``callback`` for line changes and return an unsubscribe token.
        """

        if not callable(callback):
            raise TypeError("callback must be callable")
        self._observer_counter += 1
        token = self._observer_counter
        self._observers[token] = callback
        return token

    def unsubscribe(self, token: int) -> None:
        self._observers.pop(token, None)

    def snapshot(self) -> TimelineSnapshot:
        return TimelineSnapshot(
            index=self._index,
            elapsed=self._elapsed,
            line_duration=self._line_duration,
            line_count=self._line_count,
        )

    def reset(self) -> None:
        previous = self._index
        self._index = 0
        self._elapsed = 0.0
        if previous != 0:
            self._notify(self.snapshot())

    def set_line_count(self, line_count: int) -> None:
        """
        Change the cycle length and rewind to the first line.
        """

        self._line_count = max(1, int(line_count))
        self._index = 0
        self._elapsed = 0.0
        self._notify(self.snapshot())

    def advance(self, dt: float, speed: float) -> int:
        """
        Move the timeline forward by ``dt * speed`` seconds.

        Returns the number of line boundaries crossed. Lines crossed within a
        single call are skipped, only the final position is observable.

        The wrap is computed with ``divmod`` on the total, which is exact. It
        can land one line earlier than repeated subtraction would when the
        total sits on a boundary that the duration does not represent
        exactly (``0.5`` over ``0.1`` seconds crosses 4 lines, not 5).
        """

        step = max(0.0, float(dt)) * max(0.0, float(speed))
        if not math.isfinite(step):
            step = 0.0
        self._elapsed += step
        if self._elapsed < self._line_duration:
            return 0

        wraps, remainder = divmod(self._elapsed, self._line_duration)
        crossed = int(wraps)
        self._elapsed = remainder if remainder < self._line_duration else 0.0
        self._index = (self._index + crossed) % self._line_count
        LOG.debug("Timeline crossed %d line(s), now on line %d", crossed, self._index)
        self._notify(self.snapshot())
        return crossed
