"""
Energy sampling and energy providers.

An energy provider is any zero-argument callable returning a level, ideally
in ``[0, 1]``. The engine never trusts it directly: :func:`sample_energy`
turns every failure into a neutral zero.
"""

from __future__ import annotations

import logging
import math
import random
import time
from typing import Callable, Iterable, Optional

from .controls import as_real
from .reveal import clamp01

LOG = logging.getLogger(__name__)

EnergyProvider = Callable[[], object]


def sample_energy(provider: Optional[EnergyProvider]) -> float:
    """
    Call ``provider`` and normalise the result into ``[0, 1]``.

    Exceptions, non-numeric results and NaN all sample as ``0.0``.
    """

    if provider is None:
        return 0.0
    try:
        value = provider()
    except Exception as exc:
        LOG.debug("Energy provider failed: %s", exc)
        return 0.0
    number = as_real(value)
    if number is None:
        return 0.0
    return clamp01(number)


def effective_speed(text_speed: float, energy: float) -> float:
    """Base speed scaled into the 60%..140% band by ``energy``."""
    return max(0.0, text_speed) * (0.6 + 0.8 * energy)


def constant_energy(value: float = 0.0) -> EnergyProvider:
    def provider() -> float:
        return value

    return provider


class SyntheticEnergy:
    """
    Drifting pseudo equaliser level for runs without an audio input.
    """

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
        jitter: float = 0.08,
    ) -> None:
        self._clock = clock if clock is not None else time.monotonic
        self._rng = rng if rng is not None else random.Random()
        self.jitter = max(0.0, float(jitter))

    def __call__(self) -> float:
        t = self._clock()
        swell = 0.5 + 0.25 * math.sin(t * 0.9) + 0.15 * math.sin(t * 2.3 + 1.1)
        return clamp01(swell + (self._rng.random() - 0.5) * self.jitter)


class LevelMeter:
    """
    Smoothed audio level fed from PCM blocks or pre-computed levels.

    ``attack`` and ``release`` are the fractions of the distance to a new
    target covered per update when the level rises or falls.
    """

    def __init__(self, attack: float = 0.6, release: float = 0.15, sensitivity: float = 1.0) -> None:
        self.attack = clamp01(attack)
        self.release = clamp01(release)
        self.sensitivity = max(0.0, float(sensitivity))
        self._level = 0.0

    @property
    def level(self) -> float:
        return self._level

    def push_level(self, value: float) -> None:
        number = as_real(value)
        if number is None:
            return
        scaled = number * self.sensitivity
        # inf * 0 with a muted meter.
        target = 0.0 if math.isnan(scaled) else clamp01(scaled)
        coeff = self.attack if target > self._level else self.release
        self._level += (target - self._level) * coeff

    def on_sample(self, pcm: Iterable[float]) -> None:
        samples = [number for number in map(as_real, pcm) if number is not None]
        if not samples:
            return
        rms = math.sqrt(sum(sample * sample for sample in samples) / len(samples))
        self.push_level(rms)

    def reset(self) -> None:
        self._level = 0.0

    def __call__(self) -> float:
        return self._level
