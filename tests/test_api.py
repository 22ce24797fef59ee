from __future__ import annotations

import logging

import pytest

from src.roomease.roomease.common.web import GENERIC_ERROR
from src.roomease.roomease.main import create_app
from tests.fakes import FLOOR_1, ROOM_A, ROOM_B


@pytest.fixture
def client(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=world.container)
    return app.test_client()


def _login(client, email, password="password123"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def test_protected_routes_require_login(client):
    assert client.get("/api/floors").status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_login_and_me(client):
    assert _login(client, "user2@uptm.edu.my", "wrong").status_code == 401

    resp = _login(client, "user2@uptm.edu.my")
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "staff"
    assert client.get("/api/auth/me").get_json()["id"] == 2

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_staff_request_flow(client, world):
    _login(client, "user2@uptm.edu.my")

    resp = client.post("/api/transfers/requests", json={"transfer_room_id": ROOM_B, "reason": "window seat"})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "pending"
    assert body["delivery"]["in_app_created"] == 1

    again = client.post("/api/transfers/requests", json={"transfer_room_id": ROOM_B, "reason": "again"})
    assert again.status_code == 400
    assert again.get_json()["error"] == "You already have a pending request"
    assert client.get("/api/transfers/requests/pending").get_json() == {"has_pending": True}

    # staff cannot decide
    assert client.post(f"/api/transfers/{body['id']}/approve").status_code == 403

    client.post("/api/auth/logout")
    _login(client, "user1@uptm.edu.my")
    pending = client.get("/api/transfers?status=pending").get_json()
    assert [p["name"] for p in pending] == ["Aisyah"]

    approved = client.post(f"/api/transfers/{body['id']}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["status"] == "approved"
    assert world.users.get_by_id(2).room_id == ROOM_B
    assert client.get("/api/transfers?status=bogus").status_code == 400


def test_admin_room_management(client):
    _login(client, "user1@uptm.edu.my")

    created = client.post("/api/rooms", json={"name": "A103", "floor_id": FLOOR_1, "capacity": 2})
    assert created.status_code == 201
    dup = client.post("/api/rooms", json={"name": "A103", "floor_id": FLOOR_1, "capacity": 2})
    assert dup.status_code == 409
    assert client.post("/api/rooms", json={"name": "A104", "capacity": 2}).status_code == 400
    assert client.patch(f"/api/rooms/{ROOM_A}", json={"capacity": 0}).status_code == 400

    rooms = client.get(f"/api/floors/{FLOOR_1}/rooms").get_json()
    assert {r["name"] for r in rooms} == {"A101", "A102", "A103"}
    assert client.get("/api/rooms/404/capacity").get_json() == {"room_id": 404, "capacity": None}

    assigned = client.post(f"/api/rooms/{ROOM_A}/assign", json={"user_id": 4})
    assert assigned.status_code == 200
    assert client.get("/api/staff/unassigned").get_json() == []


def test_staff_cannot_manage_rooms(client):
    _login(client, "user2@uptm.edu.my")
    assert client.post("/api/rooms", json={"name": "X", "floor_id": FLOOR_1, "capacity": 1}).status_code == 403
    assert client.get("/api/staff/404").status_code == 404


def test_notification_inbox(client, world):
    world.notifications.create(user_id=2, message="hello")
    _login(client, "user2@uptm.edu.my")

    assert client.get("/api/notifications/unread-count").get_json() == {"unread": 1}
    items = client.get("/api/notifications").get_json()
    assert items[0]["message"] == "hello"
    assert client.post(f"/api/notifications/{items[0]['id']}/read").status_code == 200
    assert client.post("/api/notifications/999/read").status_code == 404
    assert client.get("/api/notifications/unread-count").get_json() == {"unread": 0}


def test_bad_body_fields_are_validation_errors(client):
    _login(client, "user1@uptm.edu.my")

    missing = client.post("/api/rooms", json={"name": "A104", "capacity": 2})
    assert missing.status_code == 400
    assert missing.get_json()["error"] == "floor_id is required"
    assert client.post("/api/transfers/direct", json={"user_id": "three", "room_id": ROOM_B}).status_code == 400


def test_internal_errors_are_logged_and_answered_500(client, world, monkeypatch, caplog):
    def broken(user_id):
        raise KeyError("faculty_id")

    monkeypatch.setattr(world.container.user_service, "fetch_profile", broken)
    _login(client, "user2@uptm.edu.my")

    with caplog.at_level(logging.ERROR):
        resp = client.get("/api/profile")

    assert resp.status_code == 500
    assert resp.get_json()["error"] == GENERIC_ERROR
    assert any(r.exc_info and "profile" in r.getMessage() for r in caplog.records)
