"""ORM models backing the MBA Command Center record store."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import JSON

from .base import Base, CreatedAtMixin, TimestampMixin

JSONType = JSON


def _uuid() -> str:
    return str(uuid.uuid4())


class ModuleModel(CreatedAtMixin, Base):
    __tablename__ = "modules"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    semester: Mapped[str | None] = mapped_column(String(64), nullable=True)

    courses: Mapped[list["CourseModel"]] = relationship(back_populates="module")


class CourseModel(CreatedAtMixin, Base):
    __tablename__ = "courses"
    __table_args__ = (
        Index("ix_courses_code", "code"),
        CheckConstraint("total_scheduled_sessions >= 0", name="ck_courses_total_sessions"),
        CheckConstraint(
            "mandatory_attendance_percentage >= 0 AND mandatory_attendance_percentage <= 100",
            name="ck_courses_mandatory_attendance",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    professor: Mapped[str | None] = mapped_column(Text, nullable=True)
    term: Mapped[str | None] = mapped_column(String(64), nullable=True)
    total_scheduled_sessions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    mandatory_attendance_percentage: Mapped[int] = mapped_column(Integer, default=75, nullable=False)
    module_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("modules.id", ondelete="SET NULL"), nullable=True
    )

    module: Mapped[Optional[ModuleModel]] = relationship(back_populates="courses")
    sessions: Mapped[list["SessionModel"]] = relationship(back_populates="course")
    deadlines: Mapped[list["DeadlineModel"]] = relationship(back_populates="course")


class SessionModel(CreatedAtMixin, Base):
    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_course_date", "course_id", "date"),
        CheckConstraint(
            "status IN ('present', 'absent', 'proxy', 'not-taken')", name="ck_sessions_status"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    course_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("courses.id"), nullable=False
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)

    course: Mapped[CourseModel] = relationship(back_populates="sessions")


class DeadlineModel(CreatedAtMixin, Base):
    __tablename__ = "deadlines"
    __table_args__ = (Index("ix_deadlines_due_date", "due_date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    course_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("courses.id"), nullable=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    due_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    course: Mapped[Optional[CourseModel]] = relationship(back_populates="deadlines")


class SkillModel(CreatedAtMixin, Base):
    __tablename__ = "skills"
    __table_args__ = (
        CheckConstraint("type IN ('Hard', 'Soft')", name="ck_skills_type"),
        CheckConstraint(
            "latest_confidence >= 1 AND latest_confidence <= 5", name="ck_skills_latest_confidence"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(8), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    latest_confidence: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    confidence_logs: Mapped[list["SkillConfidenceLogModel"]] = relationship(
        back_populates="skill",
        cascade="all, delete-orphan",
        order_by="SkillConfidenceLogModel.created_at",
    )


class SkillConfidenceLogModel(CreatedAtMixin, Base):
    __tablename__ = "skill_confidence_logs"
    __table_args__ = (Index("ix_skill_confidence_logs_skill", "skill_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    skill_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False
    )
    confidence_level: Mapped[int] = mapped_column(Integer, nullable=False)

    skill: Mapped[SkillModel] = relationship(back_populates="confidence_logs")


class ObjectiveModel(CreatedAtMixin, Base):
    __tablename__ = "objectives"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    semester: Mapped[str | None] = mapped_column(String(64), nullable=True)

    key_results: Mapped[list["KeyResultModel"]] = relationship(
        back_populates="objective",
        cascade="all, delete-orphan",
        order_by="KeyResultModel.created_at",
    )


class KeyResultModel(CreatedAtMixin, Base):
    __tablename__ = "key_results"
    __table_args__ = (Index("ix_key_results_objective", "objective_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    objective_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("objectives.id", ondelete="CASCADE"), nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    objective: Mapped[ObjectiveModel] = relationship(back_populates="key_results")


class JournalEntryModel(CreatedAtMixin, Base):
    __tablename__ = "journal_entries"
    __table_args__ = (Index("ix_journal_entries_entry_date", "entry_date", unique=True),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)


class CaseStudyModel(TimestampMixin, Base):
    __tablename__ = "case_studies"
    __table_args__ = (Index("ix_case_studies_updated", "updated_at"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    case_title: Mapped[str] = mapped_column(Text, nullable=False)
    case_subject: Mapped[str | None] = mapped_column(Text)
    protagonist: Mapped[str | None] = mapped_column(Text)
    core_problem: Mapped[str | None] = mapped_column(Text)
    case_source_url: Mapped[str | None] = mapped_column(Text)
    case_source_file: Mapped[str | None] = mapped_column(Text)
    strengths: Mapped[str | None] = mapped_column(Text)
    weaknesses: Mapped[str | None] = mapped_column(Text)
    opportunities: Mapped[str | None] = mapped_column(Text)
    threats: Mapped[str | None] = mapped_column(Text)
    frameworks: Mapped[list[str]] = mapped_column(JSONType, default=list, nullable=False)
    alternative_solutions: Mapped[list[dict]] = mapped_column(JSONType, default=list, nullable=False)
    recommendation: Mapped[str | None] = mapped_column(Text)
    justification: Mapped[str | None] = mapped_column(Text)
    framework_inputs: Mapped[dict] = mapped_column(JSONType, default=dict, nullable=False)
    ai_report: Mapped[str | None] = mapped_column(Text)
    rating: Mapped[dict | None] = mapped_column(JSONType, nullable=True)


class FcmTokenModel(CreatedAtMixin, Base):
    __tablename__ = "fcm_tokens"
    __table_args__ = (Index("ix_fcm_tokens_token", "token", unique=True),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    token: Mapped[str] = mapped_column(Text, nullable=False)


__all__ = [
    "CaseStudyModel",
    "CourseModel",
    "DeadlineModel",
    "FcmTokenModel",
    "JournalEntryModel",
    "KeyResultModel",
    "ModuleModel",
    "ObjectiveModel",
    "SessionModel",
    "SkillConfidenceLogModel",
    "SkillModel",
]
