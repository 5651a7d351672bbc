"""Domain records returned by the repositories."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

AttendanceStatus = Literal["present", "absent", "proxy", "not-taken"]
SkillType = Literal["Hard", "Soft"]
Priority = Literal["High", "Medium", "Low"]


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class Module(_Record):
    id: str
    created_at: datetime
    title: str
    semester: Optional[str] = None


class Course(_Record):
    id: str
    created_at: datetime
    title: str
    code: Optional[str] = None
    professor: Optional[str] = None
    term: Optional[str] = None
    total_scheduled_sessions: int = 0
    mandatory_attendance_percentage: int = 75
    module_id: Optional[str] = None


class AttendanceSession(_Record):
    """A single class meeting and how it was attended."""

    id: str
    created_at: datetime
    course_id: str
    date: datetime
    status: AttendanceStatus

    @field_validator("date", "created_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return _as_utc(value)


class DeadlineCourse(_Record):
    code: Optional[str] = None
    title: str


class Deadline(_Record):
    id: str
    created_at: datetime
    course_id: Optional[str] = None
    title: str
    due_date: datetime
    due_time: Optional[str] = None
    type: str
    description: Optional[str] = None
    is_completed: bool = False
    course: Optional[DeadlineCourse] = None

    @field_validator("due_date", "created_at")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def course_label(self) -> str:
        if self.course is None:
            return "Task"
        return self.course.code or self.course.title


class SkillConfidenceLog(_Record):
    id: str
    created_at: datetime
    skill_id: str
    confidence_level: int


class Skill(_Record):
    id: str
    created_at: datetime
    name: str
    type: SkillType
    notes: Optional[str] = None
    latest_confidence: int


class KeyResult(_Record):
    id: str
    created_at: datetime
    objective_id: str
    description: str
    is_completed: bool = False


class Objective(_Record):
    id: str
    created_at: datetime
    title: str
    semester: Optional[str] = None
    key_results: List[KeyResult] = Field(default_factory=list)


class JournalEntry(_Record):
    id: str
    created_at: datetime
    entry_date: date
    content: str


class AlternativeSolution(BaseModel):
    solution: Optional[str] = None
    pros: Optional[str] = None
    cons: Optional[str] = None


class CaseStudyScorecard(BaseModel):
    """Advisor-produced rating stored verbatim alongside a case study."""

    problem_definition: float = Field(ge=0, le=5)
    analysis_depth: float = Field(ge=0, le=5)
    framework_application: float = Field(ge=0, le=5)
    recommendation_quality: float = Field(ge=0, le=5)
    overall_score: float = Field(ge=0, le=5)
    feedback: str = ""


class CaseStudy(_Record):
    id: str
    created_at: datetime
    updated_at: datetime
    case_title: str
    case_subject: Optional[str] = None
    protagonist: Optional[str] = None
    core_problem: Optional[str] = None
    case_source_url: Optional[str] = None
    case_source_file: Optional[str] = None
    strengths: Optional[str] = None
    weaknesses: Optional[str] = None
    opportunities: Optional[str] = None
    threats: Optional[str] = None
    frameworks: List[str] = Field(default_factory=list)
    alternative_solutions: List[AlternativeSolution] = Field(default_factory=list)
    recommendation: Optional[str] = None
    justification: Optional[str] = None
    framework_inputs: Dict[str, object] = Field(default_factory=dict)
    ai_report: Optional[str] = None
    rating: Optional[CaseStudyScorecard] = None


class CaseStudySummary(_Record):
    id: str
    case_title: str
    case_subject: Optional[str] = None
    updated_at: datetime


__all__ = [
    "AlternativeSolution",
    "AttendanceSession",
    "AttendanceStatus",
    "CaseStudy",
    "CaseStudyScorecard",
    "CaseStudySummary",
    "Course",
    "Deadline",
    "DeadlineCourse",
    "JournalEntry",
    "KeyResult",
    "Module",
    "Objective",
    "Priority",
    "Skill",
    "SkillConfidenceLog",
    "SkillType",
]
