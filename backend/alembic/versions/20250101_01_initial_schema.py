"""Initial MBA Command Center schema."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "20250101_01_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(length=36), primary_key=True, nullable=False)


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "modules",
        _id(),
        _created_at(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("semester", sa.String(length=64), nullable=True),
    )

    op.create_table(
        "courses",
        _id(),
        _created_at(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=True),
        sa.Column("professor", sa.Text(), nullable=True),
        sa.Column("term", sa.String(length=64), nullable=True),
        sa.Column("total_scheduled_sessions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("mandatory_attendance_percentage", sa.Integer(), nullable=False, server_default="75"),
        sa.Column("module_id", sa.String(length=36), sa.ForeignKey("modules.id", ondelete="SET NULL"), nullable=True),
        sa.CheckConstraint("total_scheduled_sessions >= 0", name="ck_courses_total_sessions"),
        sa.CheckConstraint(
            "mandatory_attendance_percentage >= 0 AND mandatory_attendance_percentage <= 100",
            name="ck_courses_mandatory_attendance",
        ),
    )
    op.create_index("ix_courses_code", "courses", ["code"])

    op.create_table(
        "sessions",
        _id(),
        _created_at(),
        sa.Column("course_id", sa.String(length=36), sa.ForeignKey("courses.id"), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.CheckConstraint("status IN ('present', 'absent', 'proxy', 'not-taken')", name="ck_sessions_status"),
    )
    op.create_index("ix_sessions_course_date", "sessions", ["course_id", "date"])

    op.create_table(
        "deadlines",
        _id(),
        _created_at(),
        sa.Column("course_id", sa.String(length=36), sa.ForeignKey("courses.id"), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("due_time", sa.String(length=5), nullable=True),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_deadlines_due_date", "deadlines", ["due_date"])

    op.create_table(
        "skills",
        _id(),
        _created_at(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=8), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("latest_confidence", sa.Integer(), nullable=False, server_default="1"),
        sa.CheckConstraint("type IN ('Hard', 'Soft')", name="ck_skills_type"),
        sa.CheckConstraint("latest_confidence >= 1 AND latest_confidence <= 5", name="ck_skills_latest_confidence"),
    )

    op.create_table(
        "skill_confidence_logs",
        _id(),
        _created_at(),
        sa.Column("skill_id", sa.String(length=36), sa.ForeignKey("skills.id", ondelete="CASCADE"), nullable=False),
        sa.Column("confidence_level", sa.Integer(), nullable=False),
    )
    op.create_index("ix_skill_confidence_logs_skill", "skill_confidence_logs", ["skill_id"])

    op.create_table(
        "objectives",
        _id(),
        _created_at(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("semester", sa.String(length=64), nullable=True),
    )

    op.create_table(
        "key_results",
        _id(),
        _created_at(),
        sa.Column(
            "objective_id",
            sa.String(length=36),
            sa.ForeignKey("objectives.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_key_results_objective", "key_results", ["objective_id"])

    op.create_table(
        "journal_entries",
        _id(),
        _created_at(),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
    )
    op.create_index("ix_journal_entries_entry_date", "journal_entries", ["entry_date"], unique=True)

    op.create_table(
        "case_studies",
        _id(),
        _created_at(),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("case_title", sa.Text(), nullable=False),
        sa.Column("case_subject", sa.Text(), nullable=True),
        sa.Column("protagonist", sa.Text(), nullable=True),
        sa.Column("core_problem", sa.Text(), nullable=True),
        sa.Column("case_source_url", sa.Text(), nullable=True),
        sa.Column("case_source_file", sa.Text(), nullable=True),
        sa.Column("strengths", sa.Text(), nullable=True),
        sa.Column("weaknesses", sa.Text(), nullable=True),
        sa.Column("opportunities", sa.Text(), nullable=True),
        sa.Column("threats", sa.Text(), nullable=True),
        sa.Column("frameworks", sa.JSON(), nullable=False),
        sa.Column("alternative_solutions", sa.JSON(), nullable=False),
        sa.Column("recommendation", sa.Text(), nullable=True),
        sa.Column("justification", sa.Text(), nullable=True),
        sa.Column("framework_inputs", sa.JSON(), nullable=False),
        sa.Column("ai_report", sa.Text(), nullable=True),
        sa.Column("rating", sa.JSON(), nullable=True),
    )
    op.create_index("ix_case_studies_updated", "case_studies", ["updated_at"])

    op.create_table(
        "fcm_tokens",
        _id(),
        _created_at(),
        sa.Column("token", sa.Text(), nullable=False),
    )
    op.create_index("ix_fcm_tokens_token", "fcm_tokens", ["token"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_fcm_tokens_token", table_name="fcm_tokens")
    op.drop_table("fcm_tokens")
    op.drop_index("ix_case_studies_updated", table_name="case_studies")
    op.drop_table("case_studies")
    op.drop_index("ix_journal_entries_entry_date", table_name="journal_entries")
    op.drop_table("journal_entries")
    op.drop_index("ix_key_results_objective", table_name="key_results")
    op.drop_table("key_results")
    op.drop_table("objectives")
    op.drop_index("ix_skill_confidence_logs_skill", table_name="skill_confidence_logs")
    op.drop_table("skill_confidence_logs")
    op.drop_table("skills")
    op.drop_index("ix_deadlines_due_date", table_name="deadlines")
    op.drop_table("deadlines")
    op.drop_index("ix_sessions_course_date", table_name="sessions")
    op.drop_table("sessions")
    op.drop_index("ix_courses_code", table_name="courses")
    op.drop_table("courses")
    op.drop_table("modules")
