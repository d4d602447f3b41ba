import math
import random

import pytest

from cryptotext.energy import (
    LevelMeter,
    SyntheticEnergy,
    constant_energy,
    effective_speed,
    sample_energy,
)


def _raising() -> float:
    raise RuntimeError("analyser offline")


@pytest.mark.parametrize(
    "provider, expected",
    [
        (constant_energy(0.25), 0.25),
        (constant_energy(1.5), 1.0),
        (constant_energy(-2.0), 0.0),
        (constant_energy(float("inf")), 1.0),
        (constant_energy(float("-inf")), 0.0),
        (constant_energy(float("nan")), 0.0),
        (lambda: "loud", 0.0),
        (lambda: None, 0.0),
        (lambda: True, 0.0),
        (lambda: 10**400, 1.0),
        (lambda: -(10**400), 0.0),
        (_raising, 0.0),
        (None, 0.0),
    ],
)
def test_sample_energy_normalises(provider, expected) -> None:
    assert sample_energy(provider) == expected


def test_effective_speed_band() -> None:
    assert effective_speed(1.0, 0.0) == pytest.approx(0.6)
    assert effective_speed(1.0, 1.0) == pytest.approx(1.4)
    assert effective_speed(2.0, 0.5) == pytest.approx(2.0)
    assert effective_speed(-1.0, 1.0) == 0.0


def test_level_meter_smooths_levels() -> None:
    meter = LevelMeter(attack=0.5, release=0.25)
    assert meter() == 0.0

    meter.push_level(1.0)
    assert meter() == pytest.approx(0.5)

    meter.push_level(0.0)
    assert meter() == pytest.approx(0.375)

    meter.push_level("loud")  # type: ignore[arg-type]
    assert meter() == pytest.approx(0.375)

    meter.reset()
    assert meter.level == 0.0


def test_level_meter_uses_rms_of_samples() -> None:
    meter = LevelMeter(attack=1.0, release=1.0)
    meter.on_sample([0.5, -0.5, 0.5, -0.5])
    assert meter() == pytest.approx(0.5)

    meter.on_sample([])
    assert meter() == pytest.approx(0.5)

    meter.on_sample([3.0, -3.0])
    assert meter() == 1.0


def test_level_meter_sensitivity() -> None:
    meter = LevelMeter(attack=1.0, release=1.0, sensitivity=2.0)
    meter.push_level(0.2)
    assert meter() == pytest.approx(0.4)


def test_synthetic_energy_stays_in_range() -> None:
    now = [0.0]
    energy = SyntheticEnergy(clock=lambda: now[0], rng=random.Random(5))
    for step in range(500):
        now[0] = step * 0.1
        value = energy()
        assert 0.0 <= value <= 1.0
        assert not math.isnan(value)


def test_synthetic_energy_is_seedable() -> None:
    first = SyntheticEnergy(clock=lambda: 1.0, rng=random.Random(9))
    second = SyntheticEnergy(clock=lambda: 1.0, rng=random.Random(9))
    assert [first() for _ in range(5)] == [second() for _ in range(5)]


def test_level_meter_accepts_oversized_integers() -> None:
    meter = LevelMeter(attack=1.0, release=1.0)
    meter.push_level(10**400)
    assert meter() == 1.0

    meter.on_sample([10**400, 0.0])
    assert meter() == 1.0


def test_muted_meter_ignores_oversized_levels() -> None:
    meter = LevelMeter(attack=1.0, release=1.0, sensitivity=0.0)
    meter.push_level(10**400)
    assert meter() == 0.0
