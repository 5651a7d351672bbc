from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from command_center.config import get_settings
from command_center.db.session import session_scope
from command_center.notifications import (
    NotificationError,
    build_reminder,
    mint_access_token,
    send_due_reminders,
)
from command_center.records import Deadline, DeadlineCourse
from command_center.repositories import courses, deadlines, fcm_tokens
from command_center.schemas import CourseInput
from command_center.telemetry import register_listener

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def _deadline(**overrides) -> Deadline:
    fields = {
        "id": "deadline-1",
        "created_at": NOW,
        "title": "Valuation memo",
        "due_date": NOW + timedelta(minutes=20),
        "type": "Assignment",
    }
    fields.update(overrides)
    return Deadline(**fields)


def _refuse_token(_settings) -> str:
    raise AssertionError("access token must not be minted")


def test_build_reminder_uses_course_code() -> None:
    reminder = build_reminder(_deadline(course=DeadlineCourse(code="FIN501", title="Corporate Finance")), 30)
    assert reminder.title == "Deadline Alert: FIN501"
    assert reminder.body == '"Valuation memo" is due in the next 30 minutes! Stay focused.'


def test_build_reminder_without_course() -> None:
    assert build_reminder(_deadline(), 15).title == "Deadline Alert: Course"


def test_mint_access_token_requires_service_account() -> None:
    with pytest.raises(NotificationError):
        mint_access_token(get_settings())


def test_mint_access_token_rejects_malformed_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREBASE_SERVICE_ACCOUNT_KEY", "{not json")
    get_settings.cache_clear()
    with pytest.raises(NotificationError, match="FIREBASE_SERVICE_ACCOUNT_KEY"):
        mint_access_token(get_settings())


@pytest.mark.usefixtures("database")
def test_no_due_deadlines_skips_token_minting() -> None:
    run = send_due_reminders(now=NOW, token_provider=_refuse_token)
    assert run.success is True
    assert run.message == "No deadlines approaching in the next 30 minutes."
    assert run.sent == 0


@pytest.mark.usefixtures("database")
def test_due_deadlines_without_devices() -> None:
    with session_scope() as session:
        deadlines.add_raw(session, title="Quiz", due_date=NOW + timedelta(minutes=5), type="Quiz")

    run = send_due_reminders(now=NOW, token_provider=_refuse_token)

    assert run.message == "Deadlines found, but no mobile devices registered."
    assert run.processed == 1


@pytest.mark.usefixtures("database")
def test_missing_project_id_is_an_error() -> None:
    with session_scope() as session:
        deadlines.add_raw(session, title="Quiz", due_date=NOW + timedelta(minutes=5), type="Quiz")
        fcm_tokens.register(session, "device-token-0001")

    with pytest.raises(NotificationError, match="FIREBASE_PROJECT_ID"):
        send_due_reminders(now=NOW, token_provider=_refuse_token)


@pytest.mark.usefixtures("database")
def test_sends_one_message_per_device_and_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "mba-demo")
    get_settings.cache_clear()
    with session_scope() as session:
        course = courses.add_course(session, CourseInput(title="Corporate Finance", code="FIN501"))
        deadlines.add_raw(
            session,
            title="Valuation memo",
            due_date=NOW + timedelta(minutes=10),
            type="Coursework",
            course_id=course.id,
        )
        deadlines.add_raw(session, title="Call recruiter", due_date=NOW + timedelta(minutes=25), type="Task")
        deadlines.add_raw(session, title="Next week", due_date=NOW + timedelta(days=7), type="Task")
        done = deadlines.add_raw(session, title="Already done", due_date=NOW + timedelta(minutes=5), type="Task")
        deadlines.set_completed(session, done.id, True)
        fcm_tokens.register(session, "device-token-0001")
        fcm_tokens.register(session, "device-token-0002")

    requests: list = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        requests.append((request, body))
        if body["message"]["token"] == "device-token-0002":
            return httpx.Response(404, json={"error": {"status": "NOT_FOUND"}})
        return httpx.Response(200, json={"name": "projects/mba-demo/messages/1"})

    events = []
    register_listener(events.append)
    minted = []

    def provider(settings) -> str:
        minted.append(settings.firebase_project_id)
        return "access-token"

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        run = send_due_reminders(now=NOW, token_provider=provider, client=client)

    assert minted == ["mba-demo"]
    assert len(requests) == 4
    first_request, first_body = requests[0]
    assert str(first_request.url) == "https://fcm.googleapis.com/v1/projects/mba-demo/messages:send"
    assert first_request.headers["Authorization"] == "Bearer access-token"
    assert first_body["message"]["notification"]["title"] == "Deadline Alert: FIN501"
    assert first_body["message"]["android"] == {"priority": "HIGH"}
    assert run.processed == 2
    assert run.sent == 2
    assert run.message == "Processed 2 deadlines. Sent 2 notifications."
    assert events[-1].name == "reminders.run"
    assert events[-1].payload["tokens"] == 2


@pytest.mark.usefixtures("database")
def test_transport_errors_count_as_unsent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREBASE_PROJECT_ID", "mba-demo")
    get_settings.cache_clear()
    with session_scope() as session:
        deadlines.add_raw(session, title="Quiz", due_date=NOW + timedelta(minutes=5), type="Quiz")
        fcm_tokens.register(session, "device-token-0001")

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        run = send_due_reminders(now=NOW, token_provider=lambda _settings: "access-token", client=client)

    assert run.success is True
    assert run.sent == 0
    assert run.processed == 1
