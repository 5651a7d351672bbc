"""Deadline reminders pushed through Firebase Cloud Messaging (HTTP v1)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from pydantic import BaseModel

from .config import Settings, get_settings
from .db.session import session_scope
from .records import Deadline
from .repositories import deadlines, fcm_tokens
from .telemetry import emit_event

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"
FCM_TIMEOUT_SECONDS = 10.0

TokenProvider = Callable[[Settings], str]


class NotificationError(RuntimeError):
    """Raised when push delivery cannot even be attempted."""


@dataclass(frozen=True)
class Reminder:
    deadline_id: str
    title: str
    body: str


class ReminderRun(BaseModel):
    success: bool = True
    message: str
    processed: int = 0
    sent: int = 0


def mint_access_token(settings: Settings) -> str:
    """Exchange the service-account JSON for a short-lived OAuth 2.0 token."""
    if not settings.firebase_service_account_key:
        raise NotificationError("FIREBASE_SERVICE_ACCOUNT_KEY environment variable is not set.")
    try:
        info = json.loads(settings.firebase_service_account_key)
        credentials = service_account.Credentials.from_service_account_info(info, scopes=[FCM_SCOPE])
        credentials.refresh(Request())
    except (ValueError, GoogleAuthError) as exc:
        logger.error("FCM token generation failed: %s", exc)
        raise NotificationError(
            "Failed to generate OAuth 2.0 token. Check FIREBASE_SERVICE_ACCOUNT_KEY format."
        ) from exc
    if not credentials.token:
        raise NotificationError("Failed to mint access token: authorization returned no token.")
    return credentials.token


def build_reminder(deadline: Deadline, window_minutes: int) -> Reminder:
    label = deadline.course.code if deadline.course and deadline.course.code else "Course"
    return Reminder(
        deadline_id=deadline.id,
        title=f"Deadline Alert: {label}",
        body=f'"{deadline.title}" is due in the next {window_minutes} minutes! Stay focused.',
    )


def send_notification(
    client: httpx.Client,
    *,
    url: str,
    access_token: str,
    device_token: str,
    reminder: Reminder,
) -> bool:
    payload = {
        "message": {
            "token": device_token,
            "notification": {"title": reminder.title, "body": reminder.body},
            "android": {"priority": "HIGH"},
        }
    }
    try:
        response = client.post(url, json=payload, headers={"Authorization": f"Bearer {access_token}"})
    except httpx.HTTPError as exc:
        logger.warning("FCM request failed for deadline %s: %s", reminder.deadline_id, exc)
        return False
    if response.is_success:
        return True
    logger.warning(
        "FCM API call failed for deadline %s with status %s: %s",
        reminder.deadline_id,
        response.status_code,
        response.text,
    )
    return False


def send_due_reminders(
    settings: Optional[Settings] = None,
    *,
    now: Optional[datetime] = None,
    token_provider: TokenProvider = mint_access_token,
    client: Optional[httpx.Client] = None,
) -> ReminderRun:
    """Notify every registered device about open deadlines due within the reminder window.

    The OAuth token is only minted once there is something to deliver.
    """
    resolved = settings or get_settings()
    window = resolved.reminder_window_minutes
    start = now or datetime.now(timezone.utc)
    end = start + timedelta(minutes=window)

    with session_scope(commit=False) as session:
        due = [item for item in deadlines.due_between(session, start, end) if not item.is_completed]
        tokens: List[str] = fcm_tokens.list_tokens(session) if due else []

    if not due:
        run = ReminderRun(message=f"No deadlines approaching in the next {window} minutes.")
        emit_event("reminders.run", processed=0, sent=0, tokens=0)
        return run
    if not tokens:
        run = ReminderRun(message="Deadlines found, but no mobile devices registered.", processed=len(due))
        emit_event("reminders.run", processed=len(due), sent=0, tokens=0)
        return run
    if not resolved.firebase_project_id:
        raise NotificationError("FIREBASE_PROJECT_ID environment variable is not set.")

    access_token = token_provider(resolved)
    url = FCM_SEND_URL.format(project_id=resolved.firebase_project_id)
    local_client = client or httpx.Client(timeout=FCM_TIMEOUT_SECONDS)
    close_client = client is None
    sent = 0
    try:
        for deadline in due:
            reminder = build_reminder(deadline, window)
            for device_token in tokens:
                if send_notification(
                    local_client,
                    url=url,
                    access_token=access_token,
                    device_token=device_token,
                    reminder=reminder,
                ):
                    sent += 1
    finally:
        if close_client:
            local_client.close()

    emit_event("reminders.run", processed=len(due), sent=sent, tokens=len(tokens))
    return ReminderRun(
        message=f"Processed {len(due)} deadlines. Sent {sent} notifications.",
        processed=len(due),
        sent=sent,
    )


__all__ = [
    "FCM_SCOPE",
    "FCM_SEND_URL",
    "NotificationError",
    "Reminder",
    "ReminderRun",
    "build_reminder",
    "mint_access_token",
    "send_due_reminders",
    "send_notification",
]
