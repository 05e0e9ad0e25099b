from __future__ import annotations

import pytest

from src.academy_system.academy_system.main import create_app


@pytest.fixture
def app(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, code):
    return client.post("/api/auth/login", json={"code": code})


def _admin(client):
    resp = _login(client, "V9-912999")
    assert resp.status_code == 200
    return resp


def test_protected_routes_need_login(client):
    assert client.get("/api/users").status_code == 401
    assert client.get("/api/auth/me").status_code == 401


def test_unknown_code_is_401(client):
    resp = _login(client, "P-000000")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "Invalid code"


def test_admin_login_and_saved_accounts(client):
    body = _admin(client).get_json()
    assert body["user"]["user_type"] == "admin"

    me = client.get("/api/auth/me").get_json()["user"]
    assert me["code"] == "V9-912999"

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401

    saved = client.get("/api/auth/saved-accounts").get_json()
    assert [a["code"] for a in saved["accounts"]] == ["V9-912999"]
    assert saved["today_login"]["code"] == "V9-912999"

    assert client.post("/api/auth/quick-login", json={"code": "V9-912999"}).status_code == 200


def test_learner_cannot_manage_users(client):
    _admin(client)
    created = client.post(
        "/api/users", json={"user_type": "student", "full_name": "Lina", "phone": "0501"}
    )
    assert created.status_code == 201
    code = created.get_json()["user"]["code"]

    client.post("/api/auth/logout")
    assert _login(client, code).status_code == 200
    assert client.post("/api/users", json={"user_type": "student"}).status_code == 403


def test_absence_excuse_approval_flow(client):
    _admin(client)
    player = client.post(
        "/api/users",
        json={"user_type": "player", "full_name": "Omar", "phone": "0502", "guardian_phone": "0503"},
    ).get_json()["user"]

    marked = client.post(
        "/api/attendance", json={"player_id": player["id"], "status": "absent", "date": "2026-03-02"}
    )
    assert marked.status_code == 201

    client.post("/api/auth/logout")
    assert _login(client, player["code"]).status_code == 200
    submitted = client.post("/api/excuses", json={"absence_date": "2026-03-02", "reason": "Fever"})
    assert submitted.status_code == 201
    excuse_id = submitted.get_json()["excuse"]["id"]

    client.post("/api/auth/logout")
    _admin(client)
    decided = client.post(f"/api/excuses/{excuse_id}/approve", json={"trainer_response": "OK"})
    assert decided.status_code == 200
    body = decided.get_json()
    assert body["excuse"]["status"] == "approved"
    assert body["attendance_updated"] is True

    again = client.post(f"/api/excuses/{excuse_id}/reject", json={})
    assert again.status_code == 400

    history = client.get(f"/api/attendance/players/{player['id']}").get_json()
    assert history["records"][0]["status"] == "excused"
    assert history["statistics"]["excused"] == 1


def test_maintenance_status_is_public(client):
    resp = client.get("/api/settings/maintenance")
    assert resp.status_code == 200
    assert resp.get_json()["maintenance_mode"] is False


def test_send_notification_function(client):
    resp = client.post(
        "/functions/send-notification",
        json={"phone": "0500000000", "message": "Training moved to 6pm", "title": "Schedule"},
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Notification sent"}

    _admin(client)
    notices = client.get("/api/notifications").get_json()["notifications"]
    assert notices[0]["phone_number"] == "0500000000"


def test_send_notification_rejects_bad_body(client):
    resp = client.post("/functions/send-notification", data="not json", content_type="application/json")
    assert resp.status_code == 500
    assert "error" in resp.get_json()


def test_send_notification_stores_unlisted_types(client):
    resp = client.post(
        "/functions/send-notification",
        json={"phone": "0500000000", "message": "Marked present", "title": "Attendance", "type": "attendance"},
    )
    assert resp.status_code == 200

    _admin(client)
    notices = client.get("/api/notifications").get_json()["notifications"]
    assert notices[0]["type"] == "attendance"
