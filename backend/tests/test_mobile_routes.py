from __future__ import annotations

import importlib
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from command_center.actions import mobile
from command_center.config import get_settings
from command_center.db.session import session_scope
from command_center.main import app
from command_center.repositories import deadlines, journal

mobile_routes = importlib.import_module("command_center.mobile_routes")


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _fail_scope(*_args, **_kwargs):
    raise AssertionError("database must not be touched")


def test_capture_rejects_missing_api_key(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mobile_routes, "session_scope", _fail_scope)
    response = client.post("/api/mobile", json={"type": "journal", "payload": {"content": "hi"}})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


def test_capture_rejects_wrong_api_key(client: TestClient) -> None:
    response = client.post(
        "/api/mobile",
        json={"type": "journal", "payload": {"content": "hi"}},
        headers={"x-api-key": "wrong"},
    )
    assert response.status_code == 401


def test_listing_courses_requires_api_key(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(mobile_routes, "session_scope", _fail_scope)
    response = client.get("/api/mobile/courses")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_capture_rejects_unknown_type(client: TestClient, api_headers: dict) -> None:
    response = client.post("/api/mobile", json={"type": "note", "payload": {}}, headers=api_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request format"
    assert "type" in body["details"]


def test_capture_rejects_non_json_body(client: TestClient, api_headers: dict) -> None:
    response = client.post(
        "/api/mobile",
        content=b"not json",
        headers={**api_headers, "content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON body"


@pytest.mark.usefixtures("database")
def test_journal_capture_upserts_todays_entry(client: TestClient, api_headers: dict) -> None:
    for content in ("First thought", "Second thought"):
        payload = {"type": "journal", "payload": {"content": content}}
        response = client.post("/api/mobile", json=payload, headers=api_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Journal entry saved."}

    with session_scope(commit=False) as session:
        entries = journal.list(session)
    assert len(entries) == 1
    assert entries[0].content == "Second thought"


def test_journal_capture_validates_payload(client: TestClient, api_headers: dict) -> None:
    response = client.post("/api/mobile", json={"type": "journal", "payload": {"content": ""}}, headers=api_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid journal payload"


@pytest.mark.usefixtures("database")
def test_course_deadline_capture_resolves_course_code(client: TestClient, api_headers: dict) -> None:
    client.post("/api/courses", json={"title": "Corporate Finance", "code": "FIN501"})

    response = client.post(
        "/api/mobile",
        json={
            "type": "deadline",
            "payload": {"courseCode": "fin501", "title": "Problem set 3", "dateStr": "Nov 15, 2025"},
        },
        headers=api_headers,
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Course deadline added."
    with session_scope(commit=False) as session:
        stored = deadlines.list(session)
    assert len(stored) == 1
    assert stored[0].type == mobile.COURSE_DEADLINE_TYPE
    assert stored[0].course.code == "FIN501"
    assert stored[0].due_date == datetime(2025, 11, 15, tzinfo=timezone.utc)
    assert stored[0].description.startswith("Added via mobile on ")


@pytest.mark.usefixtures("database")
def test_course_deadline_capture_with_unknown_code(client: TestClient, api_headers: dict) -> None:
    response = client.post(
        "/api/mobile",
        json={"type": "deadline", "payload": {"courseCode": "XYZ999", "title": "Essay", "dateStr": "Nov 15"}},
        headers=api_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Course code 'XYZ999' not found."}


def test_course_deadline_capture_requires_fields(client: TestClient, api_headers: dict) -> None:
    response = client.post(
        "/api/mobile",
        json={"type": "deadline", "payload": {"title": "Essay"}},
        headers=api_headers,
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid course deadline payload"
    assert "courseCode" in body["details"]


@pytest.mark.usefixtures("database")
def test_task_capture_stores_generic_task(client: TestClient, api_headers: dict) -> None:
    response = client.post(
        "/api/mobile",
        json={"type": "task", "payload": {"title": "Call recruiter", "dateStr": "Nov 15, 2025"}},
        headers=api_headers,
    )
    assert response.status_code == 200
    with session_scope(commit=False) as session:
        stored = deadlines.list(session)
    assert stored[0].type == mobile.TASK_TYPE
    assert stored[0].course_id is None


@pytest.mark.usefixtures("database")
def test_task_capture_with_unparseable_date(client: TestClient, api_headers: dict) -> None:
    response = client.post(
        "/api/mobile",
        json={"type": "task", "payload": {"title": "Call recruiter", "dateStr": "qwerty"}},
        headers=api_headers,
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error.startswith("Invalid date format: 'qwerty'.")
    assert "Nov 15" in error


def test_parse_mobile_date_fills_current_year() -> None:
    now = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
    assert mobile.parse_mobile_date("Nov 15", now=now) == datetime(2025, 11, 15, tzinfo=timezone.utc)


def test_parse_mobile_date_uses_local_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MBA_LOCAL_TIMEZONE", "Asia/Kolkata")
    get_settings.cache_clear()
    now = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
    parsed = mobile.parse_mobile_date("Nov 15, 2025", now=now)
    assert parsed == datetime(2025, 11, 14, 18, 30, tzinfo=timezone.utc)


def test_parse_mobile_date_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Invalid date format"):
        mobile.parse_mobile_date("qwerty")


@pytest.mark.usefixtures("database")
def test_courses_are_listed_by_code(client: TestClient, api_headers: dict) -> None:
    client.post("/api/courses", json={"title": "Marketing", "code": "MKT501"})
    client.post("/api/courses", json={"title": "Accounting", "code": "ACC501"})

    response = client.get("/api/mobile/courses", headers=api_headers)

    assert response.status_code == 200
    assert [course["code"] for course in response.json()] == ["ACC501", "MKT501"]
    assert set(response.json()[0]) == {"id", "code", "title"}


@pytest.mark.usefixtures("database")
def test_deadline_listing_embeds_course_summary(client: TestClient, api_headers: dict) -> None:
    course = client.post("/api/courses", json={"title": "Corporate Finance", "code": "FIN501"}).json()
    client.post(
        "/api/deadlines",
        json={"title": "Memo", "due_date": "2025-02-01", "type": "Assignment", "course_id": course["data"]["course_id"]},
    )
    client.post("/api/deadlines", json={"title": "Visa", "due_date": "2025-02-02", "type": "Personal", "category": "Other"})

    response = client.get("/api/mobile/deadline", headers=api_headers)

    assert response.status_code == 200
    items = response.json()
    assert items[0]["courses"] == {"code": "FIN501", "title": "Corporate Finance"}
    assert "course" not in items[0]
    assert items[1]["courses"] is None


@pytest.mark.usefixtures("database")
def test_fcm_registration_is_idempotent(client: TestClient, api_headers: dict) -> None:
    first = client.post("/api/mobile/fcm/register", json={"token": "device-token-0001"}, headers=api_headers)
    second = client.post("/api/mobile/fcm/register", json={"token": "device-token-0001"}, headers=api_headers)
    assert first.status_code == 200
    assert second.json() == {"success": True, "message": "FCM token registered."}


def test_fcm_registration_rejects_short_token(client: TestClient, api_headers: dict) -> None:
    response = client.post("/api/mobile/fcm/register", json={"token": "short"}, headers=api_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid token format."


def test_reminders_require_cron_secret(client: TestClient) -> None:
    response = client.post("/api/mobile/fcm/register/remind", params={"secret": "nope"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized: Invalid cron secret."}


@pytest.mark.usefixtures("database")
def test_reminders_with_nothing_due(client: TestClient, cron_secret: str) -> None:
    response = client.post("/api/mobile/fcm/register/remind", params={"secret": cron_secret})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "No deadlines approaching in the next 30 minutes."


def test_reminder_failures_are_reported(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, cron_secret: str
) -> None:
    def explode(_settings):
        raise RuntimeError("FIREBASE_PROJECT_ID environment variable is not set.")

    monkeypatch.setattr(mobile_routes, "send_due_reminders", explode)
    response = client.post("/api/mobile/fcm/register/remind", params={"secret": cron_secret})
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "FIREBASE_PROJECT_ID environment variable is not set."}


def test_fcm_registration_checks_api_key_before_reading_body(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(mobile, "register_fcm_token", _fail_scope)
    response = client.post(
        "/api/mobile/fcm/register",
        content=b"not json",
        headers={"content-type": "application/json"},
    )
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


def test_fcm_registration_rejects_non_json_body(client: TestClient, api_headers: dict) -> None:
    response = client.post(
        "/api/mobile/fcm/register",
        content=b"not json",
        headers={**api_headers, "content-type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid JSON body"}


def test_fcm_registration_without_token_object(client: TestClient, api_headers: dict) -> None:
    response = client.post("/api/mobile/fcm/register", json=["device-token-0001"], headers=api_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid token format."


def _broken_scope(*_args, **_kwargs):
    raise RuntimeError("connection refused")


def test_course_listing_store_failure_is_json(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, api_headers: dict
) -> None:
    monkeypatch.setattr(mobile_routes, "session_scope", _broken_scope)
    response = client.get("/api/mobile/courses", headers=api_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "connection refused"}


def test_deadline_listing_store_failure_is_json(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, api_headers: dict
) -> None:
    monkeypatch.setattr(mobile_routes, "session_scope", _broken_scope)
    response = client.get("/api/mobile/deadline", headers=api_headers)
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "connection refused"}
