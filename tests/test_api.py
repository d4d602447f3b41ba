import random

import pytest
from fastapi.testclient import TestClient

from cryptotext.api.server import create_app
from cryptotext.energy import LevelMeter
from cryptotext.engine import CryptoTextEngine
from cryptotext.sinks import MemorySink


def make_client():
    meter = LevelMeter(attack=0.5, release=0.5)
    engine = CryptoTextEngine(
        MemorySink(),
        lines=["ALPHA", "BRAVO"],
        line_duration=10.0,
        energy_provider=meter,
        controls={"textGlitch": 0.0},
        rng=random.Random(1),
    )
    return TestClient(create_app(engine, meter=meter)), engine, meter


def test_healthz_and_profiles() -> None:
    client, _, _ = make_client()

    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

    profiles = client.get("/profiles").json()["profiles"]
    assert "default" in profiles


def test_state_and_text() -> None:
    client, engine, _ = make_client()
    engine.timeline.advance(5.0, 1.0)

    state = client.get("/state").json()
    assert state["state"] == "stopped"
    assert state["timeline"]["phase"] == 0.5
    assert state["lines"] == ["ALPHA", "BRAVO"]

    text = client.get("/text").json()
    assert text == {"text": "ALPHA", "index": 0, "phase": 0.5}


def test_transport_commands() -> None:
    client, engine, _ = make_client()

    response = client.post("/transport", json={"op": "start"})
    assert response.status_code == 200
    assert response.json()["state"]["state"] == "running"
    assert engine.running

    response = client.post("/transport", json={"op": "stop"})
    assert response.json()["state"]["state"] == "stopped"

    assert client.post("/transport", json={"op": "rewind"}).status_code == 400
    assert client.post("/transport", json={"op": ""}).status_code == 422


def test_controls_update_and_ignore_invalid() -> None:
    client, engine, _ = make_client()

    response = client.post("/controls", json={"name": "textSpeed", "value": 1.5})
    body = response.json()
    assert body["applied"] is True
    assert body["state"]["controls"]["textSpeed"] == 1.5

    response = client.post("/controls", json={"name": "textSpeed", "value": "fast"})
    body = response.json()
    assert response.status_code == 200
    assert body["applied"] is False
    assert engine.controls.text_speed == 1.5


def test_lines_update_and_ignore_empty() -> None:
    client, engine, _ = make_client()

    response = client.put("/lines", json={"lines": []})
    assert response.status_code == 200
    assert response.json()["applied"] is False
    assert engine.lines == ["ALPHA", "BRAVO"]

    response = client.put("/lines", json={"lines": ["ONE", "TWO", "THREE"]})
    assert response.json()["applied"] is True
    assert engine.lines == ["ONE", "TWO", "THREE"]


def test_energy_feeds_meter() -> None:
    client, engine, meter = make_client()

    response = client.post("/energy", json={"level": 1.0})
    assert response.json()["level"] == 0.5

    response = client.post("/energy", json={"samples": [1.0, -1.0]})
    assert response.json()["level"] == 0.75

    assert client.post("/energy", json={}).status_code == 400

    engine.tick(1.0)
    # 0.6 + 0.8 * 0.75
    assert engine.elapsed == pytest.approx(1.2)


def test_default_app_builds_engine() -> None:
    client = TestClient(create_app())
    state = client.get("/state").json()
    assert state["timeline"]["lineDuration"] == 11.0
    assert len(state["lines"]) == 6


def test_oversized_control_value_is_ignored() -> None:
    client, engine, _ = make_client()

    response = client.post("/controls", json={"name": "textGlitch", "value": 10**400})
    assert response.status_code == 200
    assert response.json()["applied"] is False
    assert engine.controls.text_glitch == 0.0


def test_energy_uses_engine_meter_when_none_given() -> None:
    meter = LevelMeter(attack=1.0, release=1.0)
    engine = CryptoTextEngine(MemorySink(), lines=["ALPHA"], line_duration=10.0, energy_provider=meter)
    client = TestClient(create_app(engine))

    response = client.post("/energy", json={"level": 1.0})
    assert response.json()["level"] == 1.0

    engine.tick(1.0)
    assert engine.elapsed == pytest.approx(1.4)


def test_energy_conflict_without_meter() -> None:
    engine = CryptoTextEngine(MemorySink(), lines=["ALPHA"], energy_provider=lambda: 0.5)
    client = TestClient(create_app(engine))

    assert client.post("/energy", json={"level": 1.0}).status_code == 409
