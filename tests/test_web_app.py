"""Tests for the Flask JSON API."""

import random
from datetime import date

import pytest

from kickabout.services import (
    InMemoryStore, MissingIdentityError, ServiceFactory, StaticIdentityProvider, StoreError
)
from kickabout.ui import create_app
from kickabout.ui.web_app import WebAppState
from kickabout.utils import AppConfig

KEY = "club-key"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def client(store):
    config = AppConfig(roster_key=KEY, secret_key="test-secret")
    factory = ServiceFactory(config, store=store, rng=random.Random(3), today=lambda: date(2025, 6, 1))
    app = create_app(config, factory=factory)
    app.testing = True
    return app.test_client()


@pytest.fixture
def signed_in(client):
    response = client.post("/api/session", json={"owner_id": "owner-1"})
    assert response.status_code == 200
    return client


def _add(client, name, rating, key=KEY):
    return client.post("/api/players", json={"name": name, "rating": rating, "key": key})


def test_health_and_options(client):
    assert client.get("/api/health").get_json()["status"] == "ok"

    options = client.get("/api/options").get_json()
    assert options["positions"] == ["Goalkeeper", "Defender", "Midfielder", "Forward", "Winger"]
    assert options["rating"] == {"min": 1.0, "max": 10.0, "step": 0.5, "default": 7.0}


def test_requests_without_identity_are_rejected(client):
    response = client.get("/api/players")
    assert response.status_code == 401
    assert response.get_json()["success"] is False

    assert _add(client, "Ali", 7).status_code == 401


def test_session_lifecycle(client):
    assert client.get("/api/session").get_json()["signed_in"] is False
    assert client.post("/api/session", json={"owner_id": "  "}).status_code == 401

    client.post("/api/session", json={"owner_id": "owner-1"})
    body = client.get("/api/session").get_json()
    assert body["signed_in"] is True
    assert body["owner_id"] == "owner-1"

    client.delete("/api/session")
    assert client.get("/api/session").get_json()["signed_in"] is False


def test_first_player_free_then_key_required(signed_in):
    first = _add(signed_in, "Ali", 7, key=None)
    assert first.status_code == 201
    assert first.get_json()["player"]["id"]

    rejected = _add(signed_in, "Ben", 6, key="wrong")
    assert rejected.status_code == 403

    players = signed_in.get("/api/players").get_json()
    assert players["count"] == 1
    assert players["requires_key_to_add"] is True

    assert _add(signed_in, "Ben", 6).status_code == 201
    assert signed_in.get("/api/players").get_json()["count"] == 2


def test_invalid_player_data(signed_in):
    response = _add(signed_in, "", 7)
    assert response.status_code == 400
    assert "name" in response.get_json()["error"]

    assert _add(signed_in, "Ali", 11).status_code == 400
    assert _add(signed_in, "Ali", 6.25).status_code == 400


def test_update_and_delete_player(signed_in):
    player_id = _add(signed_in, "Ali", 7).get_json()["player"]["id"]

    response = signed_in.put(f"/api/players/{player_id}", json={"rating": 8.5, "key": "wrong"})
    assert response.status_code == 403

    response = signed_in.put(
        f"/api/players/{player_id}",
        json={"rating": 8.5, "position": "Defender"},
        headers={"X-Roster-Key": KEY},
    )
    assert response.status_code == 200
    assert response.get_json()["player"]["rating"] == 8.5
    assert response.get_json()["player"]["position"] == "Defender"

    assert signed_in.delete(f"/api/players/{player_id}").status_code == 403
    assert signed_in.delete(f"/api/players/{player_id}", json={"key": KEY}).status_code == 200
    assert signed_in.delete(f"/api/players/{player_id}", json={"key": KEY}).status_code == 404
    assert signed_in.get("/api/players").get_json()["count"] == 0


def test_update_with_null_rating_keeps_current_rating(signed_in):
    player_id = _add(signed_in, "Ali", 8.5).get_json()["player"]["id"]

    response = signed_in.put(f"/api/players/{player_id}", json={"rating": None, "key": KEY})
    assert response.status_code == 400
    assert signed_in.get("/api/players").get_json()["players"][0]["rating"] == 8.5


def test_state_uses_injected_identity(store):
    factory = ServiceFactory(AppConfig(roster_key=KEY), store=store)
    identity = StaticIdentityProvider()
    state = WebAppState(factory, identity=identity)

    with pytest.raises(MissingIdentityError):
        state.current_service()

    identity.owner_id = "owner-1"
    service = state.current_service()
    assert service.owner_id == "owner-1"
    assert state.current_service() is service


def test_state_drops_least_recently_used_sessions(store):
    factory = ServiceFactory(AppConfig(roster_key=KEY), store=store)
    state = WebAppState(factory, identity=StaticIdentityProvider(), max_services=2)

    first = state.service_for("a")
    state.service_for("b")
    assert state.service_for("a") is first
    state.service_for("c")

    assert state.active_owner_ids() == ["a", "c"]
    assert state.service_for("a") is first
    assert state.service_for("b") is not None
    assert state.active_owner_ids() == ["a", "b"]


def test_evicted_owner_reloads_from_store(client):
    state = client.application.extensions["kickabout_state"]
    state.max_services = 1

    client.post("/api/session", json={"owner_id": "owner-1"})
    _add(client, "Ali", 7)
    state.service_for("someone-else")
    assert state.active_owner_ids() == ["someone-else"]

    players = client.get("/api/players").get_json()["players"]
    assert [p["name"] for p in players] == ["Ali"]


def test_attendance_endpoints(signed_in):
    ids = [_add(signed_in, name, rating).get_json()["player"]["id"]
           for name, rating in [("Ali", 9), ("Ben", 7), ("Cat", 6)]]

    body = signed_in.get("/api/attendance").get_json()
    assert body["date"] == "2025-06-01"
    assert body["attendee_ids"] == []

    body = signed_in.post(f"/api/attendance/{ids[0]}", json={"attending": True}).get_json()
    assert body["attending"] is True
    assert body["attendee_ids"] == [ids[0]]

    body = signed_in.post(f"/api/attendance/{ids[0]}").get_json()
    assert body["attending"] is False

    body = signed_in.post("/api/attendance/all").get_json()
    assert sorted(body["attendee_ids"]) == sorted(ids)

    body = signed_in.post("/api/attendance/all", json={"attending": False}).get_json()
    assert body["attendee_ids"] == []

    assert signed_in.post("/api/attendance/unknown", json={"attending": True}).status_code == 404
    assert signed_in.post(f"/api/attendance/{ids[1]}", json={"attending": "maybe"}).status_code == 400


def test_teams_and_coin_toss_flow(signed_in):
    ids = [_add(signed_in, f"P{rating}", rating).get_json()["player"]["id"] for rating in (9, 7, 6, 4)]

    toss = signed_in.post("/api/coin-toss").get_json()
    assert toss["success"] is False
    assert "Generate teams" in toss["guidance"]

    guidance = signed_in.post("/api/teams")
    assert guidance.status_code == 200
    assert guidance.get_json()["success"] is False
    assert "at least 2" in guidance.get_json()["guidance"]

    for player_id in ids:
        signed_in.post(f"/api/attendance/{player_id}", json={"attending": True})

    teams = signed_in.post("/api/teams").get_json()["teams"]
    assert [p["rating"] for p in teams["team1"]] == [9, 4]
    assert [p["rating"] for p in teams["team2"]] == [7, 6]
    assert teams["rating_difference"] == 0
    assert teams["summary"]["team1"]["label"] == "Blue Team"

    toss = signed_in.post("/api/coin-toss").get_json()
    assert toss["winner"] in ("team1", "team2")
    assert toss["winner_label"] in ("Blue Team", "Red Team")
    assert toss["reveal_delay_ms"] == 2000

    current = signed_in.get("/api/teams").get_json()
    assert current["toss_winner"] == toss["winner"]

    signed_in.post(f"/api/attendance/{ids[0]}", json={"attending": False})
    assert signed_in.get("/api/teams").get_json()["teams"] is None


def test_store_failure_reports_error_and_keeps_state(signed_in, store, monkeypatch):
    player_id = _add(signed_in, "Ali", 7).get_json()["player"]["id"]

    def fail(records):
        raise StoreError("database unavailable")

    monkeypatch.setattr(store, "upsert", fail)
    response = signed_in.post(f"/api/attendance/{player_id}", json={"attending": True})
    assert response.status_code == 502
    assert response.get_json()["error"] == "database unavailable"

    monkeypatch.undo()
    assert signed_in.get("/api/attendance").get_json()["attendee_ids"] == []
