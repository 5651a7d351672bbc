"""Derived attendance, completion and priority metrics.

Every function here is pure: it works on records that were already fetched
from the store and never touches the database.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Mapping, Optional, Sequence

from .records import AttendanceSession, Course, Deadline, KeyResult

BunkSeverity = Literal["critical", "warning", "healthy"]

ATTENDED_STATUSES = frozenset({"present", "proxy"})
NOT_CONDUCTED_STATUS = "not-taken"
PRIORITY_ORDER: tuple[str, ...] = ("High", "Medium", "Low")
UNRANKED = "Unranked"


@dataclass(frozen=True)
class CourseStats:
    course_id: str
    scheduled: int
    present: int
    proxy: int
    absent: int
    not_taken: int
    conducted: int
    attended: int
    attendance_percentage: int
    bunks_left: Optional[int]
    severity: Optional[BunkSeverity]

    def as_dict(self) -> Dict[str, object]:
        return {
            "course_id": self.course_id,
            "scheduled": self.scheduled,
            "present": self.present,
            "proxy": self.proxy,
            "absent": self.absent,
            "not_taken": self.not_taken,
            "conducted": self.conducted,
            "attended": self.attended,
            "attendance_percentage": self.attendance_percentage,
            "bunks_left": self.bunks_left,
            "severity": self.severity,
        }


def attendance_percentage(sessions: Iterable[AttendanceSession]) -> int:
    """Share of conducted sessions that were attended, as a rounded percent.

    A course with nothing conducted yet reports 100.
    """
    conducted = 0
    attended = 0
    for entry in sessions:
        if entry.status == NOT_CONDUCTED_STATUS:
            continue
        conducted += 1
        if entry.status in ATTENDED_STATUSES:
            attended += 1
    if conducted == 0:
        return 100
    return _round_half_up(attended / conducted * 100)


def is_attendance_set(total_scheduled_sessions: int, mandatory_attendance_percentage: float) -> bool:
    return total_scheduled_sessions > 0 and 0 <= mandatory_attendance_percentage <= 100


def bunks_allowed(total_scheduled_sessions: int, mandatory_attendance_percentage: float) -> Optional[int]:
    if not is_attendance_set(total_scheduled_sessions, mandatory_attendance_percentage):
        return None
    min_required = math.ceil(mandatory_attendance_percentage / 100 * total_scheduled_sessions)
    return total_scheduled_sessions - min_required


def bunks_left(
    total_scheduled_sessions: int,
    mandatory_attendance_percentage: float,
    absent_count: int,
) -> Optional[int]:
    """Remaining allowed absences, or ``None`` when no attendance rule is set."""
    allowed = bunks_allowed(total_scheduled_sessions, mandatory_attendance_percentage)
    if allowed is None:
        return None
    return allowed - absent_count


def bunk_severity(remaining: Optional[int]) -> Optional[BunkSeverity]:
    if remaining is None:
        return None
    if remaining <= 0:
        return "critical"
    if remaining == 1:
        return "warning"
    return "healthy"


def completion_percentage(completed: int, total: int) -> float:
    if total <= 0:
        return 100.0
    return completed / total * 100


def key_result_progress(key_results: Sequence[KeyResult]) -> float:
    completed = sum(1 for result in key_results if result.is_completed)
    return completion_percentage(completed, len(key_results))


def deadline_completion(deadlines: Sequence[Deadline]) -> float:
    completed = sum(1 for deadline in deadlines if deadline.is_completed)
    return completion_percentage(completed, len(deadlines))


def course_stats(course: Course, sessions: Iterable[AttendanceSession]) -> CourseStats:
    owned = [entry for entry in sessions if entry.course_id == course.id]
    counts = Counter(entry.status for entry in owned)
    conducted = len(owned) - counts[NOT_CONDUCTED_STATUS]
    attended = counts["present"] + counts["proxy"]
    if course.total_scheduled_sessions == 0:
        percentage = 100
    else:
        percentage = attendance_percentage(owned)
    remaining = bunks_left(
        course.total_scheduled_sessions,
        course.mandatory_attendance_percentage,
        counts["absent"],
    )
    return CourseStats(
        course_id=course.id,
        scheduled=course.total_scheduled_sessions,
        present=counts["present"],
        proxy=counts["proxy"],
        absent=counts["absent"],
        not_taken=counts[NOT_CONDUCTED_STATUS],
        conducted=conducted,
        attended=attended,
        attendance_percentage=percentage,
        bunks_left=remaining,
        severity=bunk_severity(remaining),
    )


def order_deadlines(deadlines: Iterable[Deadline]) -> List[Deadline]:
    """Order by due date, then due time with all-day (null) entries first."""
    return sorted(
        deadlines,
        key=lambda item: (
            item.due_date,
            item.due_time is not None,
            item.due_time or "",
        ),
    )


def open_deadlines(
    deadlines: Iterable[Deadline],
    *,
    limit: Optional[int] = None,
) -> List[Deadline]:
    """Non-completed deadlines, soonest first."""
    pending = [deadline for deadline in deadlines if not deadline.is_completed]
    ordered = order_deadlines(pending)
    if limit is not None:
        ordered = ordered[:limit]
    return ordered


def group_deadlines_by_priority(
    deadlines: Sequence[Deadline],
    priorities: Mapping[str, str],
) -> Dict[str, List[Deadline]]:
    """Bucket deadlines under the advisor's priority labels.

    Ids the advisor invented are ignored; deadlines it did not rank land in
    ``Unranked``. Buckets keep the deadline ordering they were given.
    """
    groups: Dict[str, List[Deadline]] = {label: [] for label in (*PRIORITY_ORDER, UNRANKED)}
    for deadline in deadlines:
        label = priorities.get(deadline.id)
        if label not in PRIORITY_ORDER:
            label = UNRANKED
        groups[label].append(deadline)
    return groups


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


__all__ = [
    "BunkSeverity",
    "CourseStats",
    "attendance_percentage",
    "bunk_severity",
    "bunks_allowed",
    "bunks_left",
    "completion_percentage",
    "course_stats",
    "deadline_completion",
    "group_deadlines_by_priority",
    "is_attendance_set",
    "key_result_progress",
    "open_deadlines",
    "order_deadlines",
]
