"""Deadline mutations and the advisor-backed priority summary."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..advisors import AdvisorError
from ..advisors.deadline_prioritizer import MAX_DEADLINES, build_request, prioritize_deadlines
from ..config import Settings
from ..db.session import session_scope
from ..metrics import group_deadlines_by_priority, open_deadlines
from ..records import Deadline
from ..repositories import deadlines
from ..results import ActionResult
from ..schemas import DeadlineInput
from ..views import CALENDAR, course_paths
from .base import apply_mutation, validate

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = "AI prioritization is unavailable right now. Your deadlines are listed by due date."
EMPTY_SUMMARY = "No upcoming deadlines. Enjoy the breathing room!"
REQUIRED_FIELDS_MESSAGE = "Missing required fields (Course, Title, Due Date, Type)."


class DeadlinePrioritySummary(BaseModel):
    overall_summary: str
    ranked: bool = False
    priorities: Dict[str, str] = Field(default_factory=dict)
    groups: Dict[str, List[Deadline]] = Field(default_factory=dict)


def _deadline_paths(*course_ids: Optional[str]) -> List[str]:
    paths = [CALENDAR]
    for course_id in course_ids:
        for path in course_paths(course_id):
            if path not in paths:
                paths.append(path)
    return paths


def _payload(deadline: Deadline) -> Dict[str, Any]:
    return {
        "deadline_id": deadline.id,
        "course_id": deadline.course_id,
        "deadline": deadline.model_dump(mode="json"),
    }


def add_deadline(**fields: Any) -> ActionResult:
    """Insert a deadline.

    ``category="Course"`` requires ``course_id``; ``category="Other"`` always
    stores a task without a course.
    """
    data, failure = validate(DeadlineInput, REQUIRED_FIELDS_MESSAGE, fields)
    if failure:
        return failure
    return apply_mutation(
        "deadline.added",
        lambda session: deadlines.add(session, data),
        paths=_deadline_paths(data.course_id),
        message="Deadline added successfully!",
        payload=_payload,
    )


def update_deadline(deadline_id: Optional[str], **fields: Any) -> ActionResult:
    if not deadline_id:
        return ActionResult.invalid("id", "Deadline ID is missing.")
    data, failure = validate(DeadlineInput, "Missing required fields.", fields)
    if failure:
        return failure

    previous_course: Dict[str, Optional[str]] = {}

    def write(session):
        existing = deadlines.get(session, deadline_id)
        previous_course["id"] = existing.course_id if existing else None
        return deadlines.update(session, deadline_id, data)

    return apply_mutation(
        "deadline.updated",
        write,
        paths=lambda updated: _deadline_paths(previous_course.get("id"), updated.course_id),
        message="Deadline updated.",
        payload=_payload,
    )


def delete_deadline(deadline_id: Optional[str]) -> ActionResult:
    if not deadline_id:
        return ActionResult.invalid("id", "Deadline ID is missing.")
    return apply_mutation(
        "deadline.deleted",
        lambda session: deadlines.delete(session, deadline_id),
        paths=_deadline_paths,
        message="Deadline deleted.",
        payload=lambda course_id: {"deadline_id": deadline_id, "course_id": course_id},
    )


def toggle_deadline_completion(deadline_id: Optional[str], current_state: bool) -> ActionResult:
    """Persist the negation of ``current_state`` as the client last saw it."""
    if not deadline_id:
        return ActionResult.invalid("id", "Deadline ID is missing.")
    return apply_mutation(
        "deadline.toggled",
        lambda session: deadlines.set_completed(session, deadline_id, not current_state),
        paths=lambda updated: _deadline_paths(updated.course_id),
        message="Deadline updated.",
        payload=lambda updated: {**_payload(updated), "is_completed": updated.is_completed},
    )


def get_deadline_priority_summary(
    now: Optional[datetime] = None,
    *,
    settings: Optional[Settings] = None,
) -> DeadlinePrioritySummary:
    """Rank the next open deadlines; falls back to a neutral summary on advisor failure."""
    moment = now or datetime.now(timezone.utc)
    with session_scope(commit=False) as session:
        pending = deadlines.list(session, include_completed=False)
    upcoming = open_deadlines(pending, limit=MAX_DEADLINES)

    if not upcoming:
        return DeadlinePrioritySummary(
            overall_summary=EMPTY_SUMMARY,
            groups=group_deadlines_by_priority([], {}),
        )

    try:
        response = prioritize_deadlines(build_request(upcoming, moment.date()), settings=settings)
    except AdvisorError as exc:
        logger.warning("Deadline prioritization unavailable: %s", exc)
        return DeadlinePrioritySummary(
            overall_summary=FALLBACK_SUMMARY,
            groups=group_deadlines_by_priority(upcoming, {}),
        )

    known_ids = {deadline.id for deadline in upcoming}
    priorities = {
        item.id: item.priority for item in response.prioritized_list if item.id in known_ids
    }
    return DeadlinePrioritySummary(
        overall_summary=response.overall_summary,
        ranked=True,
        priorities=priorities,
        groups=group_deadlines_by_priority(upcoming, priorities),
    )


__all__ = [
    "DeadlinePrioritySummary",
    "add_deadline",
    "delete_deadline",
    "get_deadline_priority_summary",
    "toggle_deadline_completion",
    "update_deadline",
]
