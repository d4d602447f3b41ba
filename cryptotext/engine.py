"""
Crypto text engine.

Cycles through message lines, revealing and dissolving each one with a
smoothstep envelope while a probabilistic glitch swaps characters for glyphs.
The engine owns no clock: an external scheduler (or the caller) drives it one
frame at a time through :meth:`CryptoTextEngine.on_frame` or
:meth:`CryptoTextEngine.tick`.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from enum import Enum
from typing import Any, List, Mapping, Optional

from .controls import Controls
from .energy import EnergyProvider, constant_energy, effective_speed, sample_energy
from .errors import ConfigurationError, InvalidCommand
from .glitch import GLYPH_PALETTE, apply_glitch
from .reveal import revealed_prefix
from .timeline import DEFAULT_LINE_DURATION, LineTimeline, TimelineSnapshot, normalise_duration

LOG = logging.getLogger(__name__)

MIN_FRAME_DT = 0.001

DEFAULT_LINES = (
    "ABSTRACT HACKERS RADIO // CHANNEL: 0x1F | MODE: LIQUID BLUEPRINT EQ",
    "STREAM ROUTING: WEB_RADIO ⇒ TERMINAL_UI ⇒ LIQUID_EQUALIZER ⇒ LISTENER",
    "NO AUDIO INPUT BOUND — SYNTHETIC PROBABILISTIC EQ MODE",
    "SESSION LOG: WIREFRAME GRID ACTIVE / PARTICLE FEED REROUTED TO EQ",
    "SCANNING PORTS 8000–8100 FOR LIVE STREAM ENDPOINTS…",
    "PIPELINE: GRID_OSCILLATOR × PARTICLE_FIELD × CRYPTO_TYPING_ENGINE",
)


class EngineState(str, Enum):
    """Transport states."""

    STOPPED = "stopped"
    RUNNING = "running"


def coerce_lines(value: object) -> Optional[List[str]]:
    """
    Return a copy of ``value`` as a list of strings, or ``None`` when it is
    not a non-empty sequence. Strings themselves are not line sequences.
    """

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return None
    if not value:
        return None
    return [str(line) for line in value]


class CryptoTextEngine:
    """
    Stateful text animation driven by external frame ticks.

    Parameters
    ----------
    sink:
        Object with a ``write(text)`` method receiving each rendered frame.
    lines:
        Lines to cycle through. Falls back to :data:`DEFAULT_LINES`.
    line_duration:
        Seconds per line. Non-positive values fall back to the default.
    energy_provider:
        Zero-argument callable returning the current energy level.
    controls:
        Initial control overrides such as ``{"textSpeed": 1.5}``.
    rng:
        Random source for the glitch transform.
    scheduler:
        Object with ``request_frame(callback)``. Without one, the caller is
        responsible for invoking :meth:`on_frame` or :meth:`tick`.
    """

    def __init__(
        self,
        sink: Any = None,
        *,
        lines: Optional[Sequence[str]] = None,
        line_duration: float = DEFAULT_LINE_DURATION,
        energy_provider: Optional[EnergyProvider] = None,
        controls: Optional[Mapping[str, object]] = None,
        rng: Optional[random.Random] = None,
        scheduler: Any = None,
    ) -> None:
        if sink is None or not callable(getattr(sink, "write", None)):
            raise ConfigurationError("CryptoTextEngine requires an output sink with a write() method")
        self.sink = sink

        self._lines = coerce_lines(lines) or list(DEFAULT_LINES)

        duration = normalise_duration(line_duration)
        if duration != line_duration:
            LOG.warning("Invalid line duration %r; using %.1fs", line_duration, duration)

        self.energy_provider: EnergyProvider = (
            energy_provider if callable(energy_provider) else constant_energy(0.0)
        )
        self.controls = Controls.from_mapping(controls)
        self.palette = GLYPH_PALETTE
        self.rng = rng if rng is not None else random.Random()
        self.scheduler = scheduler

        self.timeline = LineTimeline(len(self._lines), duration)
        self.state = EngineState.STOPPED
        self.last_tick: Optional[float] = None

    # ------------------------------------------------------------------ properties

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    @property
    def line_duration(self) -> float:
        return self.timeline.line_duration

    @property
    def running(self) -> bool:
        return self.state is EngineState.RUNNING

    @property
    def index(self) -> int:
        return self.timeline.index

    @property
    def elapsed(self) -> float:
        return self.timeline.elapsed

    @property
    def current_line(self) -> str:
        return self._lines[self.timeline.index]

    # ------------------------------------------------------------------ transport

    def start(self) -> None:
        if self.running:
            return
        self.state = EngineState.RUNNING
        self.last_tick = None
        LOG.info("Crypto text engine started on line %d", self.timeline.index)
        self._request_frame()

    def stop(self) -> None:
        if not self.running:
            return
        self.state = EngineState.STOPPED
        LOG.info("Crypto text engine stopped on line %d", self.timeline.index)

    def reset(self) -> None:
        self.timeline.reset()

    def apply(self, op: str) -> dict:
        """
        Dispatch a named transport command and return the new snapshot.
        """

        command = str(op or "").strip().lower()
        if command in {"start", "play"}:
            self.start()
        elif command in {"stop", "pause"}:
            self.stop()
        elif command == "reset":
            self.reset()
        else:
            raise InvalidCommand(f"Unsupported transport op '{op}'")
        return self.snapshot()

    # ------------------------------------------------------------------ content

    def set_lines(self, lines: object) -> bool:
        candidate = coerce_lines(lines)
        if candidate is None:
            return False
        self._lines = candidate
        self.timeline.set_line_count(len(candidate))
        LOG.debug("Loaded %d line(s)", len(candidate))
        return True

    def set_control(self, name: str, value: object) -> bool:
        return self.controls.set(name, value)

    def subscribe(self, callback) -> int:
        """Observe line changes, see :meth:`LineTimeline.subscribe`."""
        return self.timeline.subscribe(callback)

    def unsubscribe(self, token: int) -> None:
        self.timeline.unsubscribe(token)

    # ------------------------------------------------------------------ frames

    def _request_frame(self) -> None:
        if self.scheduler is not None:
            self.scheduler.request_frame(self.on_frame)

    def _render(self, energy: float) -> str:
        line = self._lines[self.timeline.index]
        if not line:
            return ""
        phase = self.timeline.phase
        return apply_glitch(
            revealed_prefix(line, phase),
            phase,
            energy,
            self.timeline.elapsed,
            text_glitch=self.controls.text_glitch,
            rng=self.rng,
            palette=self.palette,
        )

    def on_frame(self, timestamp: float) -> None:
        """
        Scheduler callback: derive ``dt`` from ``timestamp`` and tick.
        """

        if not self.running:
            return
        if self.last_tick is None:
            self.last_tick = timestamp
        dt = max(MIN_FRAME_DT, timestamp - self.last_tick)
        self.last_tick = timestamp

        self.tick(dt)

        if self.running:
            self._request_frame()

    def tick(self, dt: float) -> str:
        """
        Advance the animation by ``dt`` seconds, write and return the frame.
        """

        energy = sample_energy(self.energy_provider)
        speed = effective_speed(self.controls.text_speed, energy)
        self.timeline.advance(dt, speed)
        text = self._render(energy)
        self.sink.write(text)
        return text

    def get_current_rendered_text(self) -> str:
        """
        Render the current frame without advancing or writing it.
        """

        return self._render(sample_energy(self.energy_provider))

    def snapshot(self) -> dict:
        timeline: TimelineSnapshot = self.timeline.snapshot()
        return {
            "state": self.state.value,
            "timeline": timeline.to_dict(),
            "controls": self.controls.to_dict(),
            "lines": self.lines,
        }
