"""Input schemas validated before any mutation reaches the store."""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationInfo,
    field_validator,
)

from .records import AlternativeSolution, AttendanceStatus, SkillType

DeadlineCategory = Literal["Course", "Other"]

_URL_ADAPTER: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)
_EMPTY_REFERENCES = {"", "none", "null"}

# Mirrors the VARCHAR widths in db/models.py.
ID_LENGTH = 36
CODE_LENGTH = 32
LABEL_LENGTH = 64


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _EMPTY_REFERENCES:
        return None
    return value


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class ModuleInput(_Input):
    title: str = Field(..., min_length=1)
    semester: Optional[str] = Field(default=None, max_length=LABEL_LENGTH)


class CourseInput(_Input):
    title: str = Field(..., min_length=1)
    code: Optional[str] = Field(default=None, max_length=CODE_LENGTH)
    professor: Optional[str] = None
    term: Optional[str] = Field(default=None, max_length=LABEL_LENGTH)
    total_scheduled_sessions: int = Field(default=0, ge=0)
    mandatory_attendance_percentage: int = Field(default=75, ge=0, le=100)
    module_id: Optional[str] = Field(default=None, max_length=ID_LENGTH)

    @field_validator("module_id", mode="before")
    @classmethod
    def _normalize_module(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("code")
    @classmethod
    def _upper_code(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value:
            return None
        return value.upper()


class SessionInput(_Input):
    course_id: str = Field(..., min_length=1, max_length=ID_LENGTH)
    date: datetime
    status: AttendanceStatus

    @field_validator("date", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value

    @field_validator("date")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return _utc(value)


class DeadlineInput(_Input):
    title: str = Field(..., min_length=1)
    due_date: date
    due_time: Optional[str] = Field(default=None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    type: str = Field(..., min_length=1, max_length=CODE_LENGTH)
    description: Optional[str] = None
    category: DeadlineCategory = "Course"
    course_id: Optional[str] = Field(default=None, max_length=ID_LENGTH, validate_default=True)

    @field_validator("due_time", "description", mode="before")
    @classmethod
    def _empty_optional(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("course_id", mode="before")
    @classmethod
    def _normalize_course(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("course_id")
    @classmethod
    def _course_matches_category(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        category = info.data.get("category")
        if category == "Course" and not value:
            raise ValueError("Please select a course for course deadlines.")
        if category == "Other":
            return None
        return value

    def due_timestamp(self) -> datetime:
        """Combine the date and optional HH:MM into one UTC timestamp."""
        if self.due_time:
            hours, minutes = (int(part) for part in self.due_time.split(":"))
            moment = time(hour=hours, minute=minutes)
        else:
            moment = time.min
        return datetime.combine(self.due_date, moment, tzinfo=timezone.utc)


class SkillInput(_Input):
    name: str = Field(..., min_length=1)
    type: SkillType
    notes: Optional[str] = None
    confidence: int = Field(default=1, ge=1, le=5)


class SkillDetailsInput(_Input):
    name: str = Field(..., min_length=1)
    type: SkillType
    notes: Optional[str] = None


class ConfidenceInput(_Input):
    skill_id: str = Field(..., min_length=1)
    level: int = Field(..., ge=1, le=5)


class ObjectiveInput(_Input):
    title: str = Field(..., min_length=1)
    semester: Optional[str] = Field(default=None, max_length=LABEL_LENGTH)
    key_results: List[str] = Field(default_factory=list)

    @field_validator("key_results")
    @classmethod
    def _require_key_result(cls, value: List[str]) -> List[str]:
        cleaned = [entry.strip() for entry in value if entry and entry.strip()]
        if not cleaned:
            raise ValueError("At least one key result is required.")
        return cleaned


class JournalEntryInput(_Input):
    entry_date: date
    content: str = Field(..., min_length=1)


class CaseStudyInput(_Input):
    case_title: str = Field(..., min_length=3)
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
    framework_inputs: Dict[str, Any] = Field(default_factory=dict)
    ai_report: Optional[str] = None

    @field_validator("case_source_url")
    @classmethod
    def _valid_url(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            _URL_ADAPTER.validate_python(value)
        except ValueError as exc:
            raise ValueError("Must be a valid URL") from exc
        return value


__all__ = [
    "CaseStudyInput",
    "ConfidenceInput",
    "CourseInput",
    "DeadlineCategory",
    "DeadlineInput",
    "JournalEntryInput",
    "ModuleInput",
    "ObjectiveInput",
    "SessionInput",
    "SkillDetailsInput",
    "SkillInput",
]
