"""Module, course and attendance-session mutations."""

from __future__ import annotations

from typing import Any, Optional

from ..repositories import courses
from ..results import ActionResult
from ..schemas import CourseInput, ModuleInput, SessionInput
from ..views import ATTENDANCE, CALENDAR, COURSES, course_paths
from .base import apply_mutation, validate


def add_module(title: Optional[str], semester: Optional[str] = None) -> ActionResult:
    data, failure = validate(ModuleInput, "Module title is required.", dict(title=title, semester=semester))
    if failure:
        return failure
    return apply_mutation(
        "module.added",
        lambda session: courses.add_module(session, data),
        paths=[COURSES],
        message="Module added successfully!",
        payload=lambda module: {"module_id": module.id, "module": module.model_dump(mode="json")},
    )


def add_course(**fields: Any) -> ActionResult:
    """Insert a course; ``module_id`` of ``""``/``"none"`` means unassigned."""
    data, failure = validate(CourseInput, "Invalid course details.", fields)
    if failure:
        return failure
    return apply_mutation(
        "course.added",
        lambda session: courses.add_course(session, data),
        paths=[COURSES, ATTENDANCE, CALENDAR],
        message="Course added successfully!",
        payload=lambda course: {"course_id": course.id, "course": course.model_dump(mode="json")},
    )


def update_course(course_id: Optional[str], **fields: Any) -> ActionResult:
    if not course_id:
        return ActionResult.invalid("id", "Course ID is missing.")
    data, failure = validate(CourseInput, "Invalid course details.", fields)
    if failure:
        return failure
    return apply_mutation(
        "course.updated",
        lambda session: courses.update_course(session, course_id, data),
        paths=[*course_paths(course_id), CALENDAR],
        message="Course updated successfully!",
        payload=lambda course: {"course_id": course.id, "course": course.model_dump(mode="json")},
    )


def add_session(
    course_id: Optional[str],
    date: Any,
    status: Optional[str],
) -> ActionResult:
    """Record one class meeting. Several sessions on the same date are allowed."""
    data, failure = validate(
        SessionInput,
        "Missing required fields.",
        dict(
            course_id=course_id,
            date=date,
            status=status,
        ),
    )
    if failure:
        return failure
    return apply_mutation(
        "session.added",
        lambda session: courses.add_session(session, data.course_id, data.date, data.status),
        paths=course_paths(data.course_id),
        message="Session added!",
        payload=lambda entry: {
            "session_id": entry.id,
            "course_id": entry.course_id,
            "session": entry.model_dump(mode="json"),
        },
    )


def delete_session(session_id: Optional[str]) -> ActionResult:
    if not session_id:
        return ActionResult.invalid("id", "Session ID is missing.")
    return apply_mutation(
        "session.deleted",
        lambda session: courses.delete_session(session, session_id),
        paths=course_paths,
        message="Session deleted.",
        payload=lambda course_id: {"session_id": session_id, "course_id": course_id},
    )


__all__ = ["add_course", "add_module", "add_session", "delete_session", "update_course"]
