"""Quick-capture operations used by the mobile companion app."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import dateparser
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from ..db.session import session_scope
from ..repositories import courses, deadlines, fcm_tokens
from ..results import ActionResult
from ..views import CALENDAR, course_paths
from .base import apply_mutation, validate
from .journal import local_today, save_journal_entry

COURSE_DEADLINE_TYPE = "Coursework"
TASK_TYPE = "Task"
MIN_TOKEN_LENGTH = 10


class FcmTokenInput(BaseModel):
    token: str = Field(..., min_length=MIN_TOKEN_LENGTH)


def parse_mobile_date(
    date_str: str,
    *,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Parse free-form dates such as ``"Nov 15"`` or ``"Nov 15, 2025"`` into UTC.

    A missing year resolves to the current year in the configured timezone.
    Raises ``ValueError`` when nothing can be parsed.
    """
    resolved = settings or get_settings()
    moment = (now or datetime.now(timezone.utc)).astimezone(ZoneInfo(resolved.local_timezone))
    parsed = dateparser.parse(
        date_str,
        settings={
            "TIMEZONE": resolved.local_timezone,
            "TO_TIMEZONE": "UTC",
            "RETURN_AS_TIMEZONE_AWARE": True,
            "RELATIVE_BASE": moment.replace(tzinfo=None),
            "PREFER_DATES_FROM": "current_period",
        },
    )
    if parsed is None:
        raise ValueError(f"Invalid date format: '{date_str}'.")
    return parsed.astimezone(timezone.utc)


def _mobile_description(settings: Settings) -> str:
    return f"Added via mobile on {local_today(settings).strftime('%m/%d/%Y')}"


def save_mobile_journal(content: Optional[str], *, settings: Optional[Settings] = None) -> ActionResult:
    """Upsert today's journal entry, where "today" is the configured local date."""
    resolved = settings or get_settings()
    result = save_journal_entry(local_today(resolved), content)
    if result.success:
        result.message = "Journal entry saved."
    return result


def add_course_deadline(
    course_code: str,
    title: str,
    date_str: str,
    *,
    settings: Optional[Settings] = None,
) -> ActionResult:
    resolved = settings or get_settings()
    with session_scope(commit=False) as session:
        course = courses.find_by_code(session, course_code)
    if course is None:
        return ActionResult.invalid("courseCode", f"Course code '{course_code}' not found.")

    try:
        due_date = parse_mobile_date(date_str, settings=resolved)
    except ValueError as exc:
        return ActionResult.invalid("dateStr", str(exc))

    description = _mobile_description(resolved)
    return apply_mutation(
        "mobile.deadline_added",
        lambda session: deadlines.add_raw(
            session,
            title=title,
            due_date=due_date,
            type=COURSE_DEADLINE_TYPE,
            course_id=course.id,
            description=description,
        ),
        paths=[CALENDAR, *course_paths(course.id)],
        message="Course deadline added.",
        payload=lambda deadline: {"deadline_id": deadline.id, "course_id": deadline.course_id},
    )


def add_task(title: str, date_str: str, *, settings: Optional[Settings] = None) -> ActionResult:
    resolved = settings or get_settings()
    try:
        due_date = parse_mobile_date(date_str, settings=resolved)
    except ValueError as exc:
        return ActionResult.invalid(
            "dateStr",
            f"{exc} Please use a recognizable format (e.g., 'Nov 15' or 'Nov 15, 2025').",
        )

    description = _mobile_description(resolved)
    return apply_mutation(
        "mobile.task_added",
        lambda session: deadlines.add_raw(
            session,
            title=title,
            due_date=due_date,
            type=TASK_TYPE,
            description=description,
        ),
        paths=[CALENDAR],
        message="Task added.",
        payload=lambda deadline: {"deadline_id": deadline.id},
    )


def register_fcm_token(token: Optional[str]) -> ActionResult:
    data, failure = validate(FcmTokenInput, "Invalid token format.", dict(token=token))
    if failure:
        return failure
    return apply_mutation(
        "fcm.token_registered",
        lambda session: fcm_tokens.register(session, data.token),
        paths=[],
        message="FCM token registered.",
        payload=lambda created: {"created": created},
    )


__all__ = [
    "COURSE_DEADLINE_TYPE",
    "TASK_TYPE",
    "add_course_deadline",
    "add_task",
    "parse_mobile_date",
    "register_fcm_token",
    "save_mobile_journal",
]
