"""Mutation operations against a throwaway SQLite record store."""

from __future__ import annotations

import importlib
from datetime import date, datetime, timezone

import pytest
from sqlalchemy import func, select

from command_center import actions
from command_center.actions import base as action_base
from command_center.cache import view_cache
from command_center.config import get_settings
from command_center.db.models import KeyResultModel, SkillConfidenceLogModel
from command_center.db.session import session_scope
from command_center.repositories import journal, objectives, skills
from command_center.telemetry import register_listener
from command_center.views import COURSES, course_detail_view, course_path, courses_view, goals_view

pytestmark = pytest.mark.usefixtures("database")

skills_module = importlib.import_module("command_center.repositories.skills")


def _course_id(code: str = "FIN501") -> str:
    result = actions.add_course(title="Corporate Finance", code=code, total_scheduled_sessions=20)
    assert result.success, result
    return result.data["course_id"]


def test_add_course_assigns_optional_module() -> None:
    module = actions.add_module("Core Term 1", "Fall 2025")
    assert module.success
    module_id = module.data["module_id"]

    assigned = actions.add_course(title="Strategy", code="str600", module_id=module_id)
    unassigned = actions.add_course(title="Ethics", code="eth100", module_id="none")

    assert assigned.message == "Course added successfully!"
    assert assigned.data["course"]["module_id"] == module_id
    assert assigned.data["course"]["code"] == "STR600"
    assert unassigned.data["course"]["module_id"] is None


def test_add_course_with_unknown_module_is_not_found() -> None:
    result = actions.add_course(title="Strategy", module_id="missing-module")
    assert not result.success
    assert result.kind == "not_found"


def test_update_missing_course_reports_not_found() -> None:
    result = actions.update_course("missing", title="Anything")
    assert not result.success
    assert result.kind == "not_found"
    assert "missing" in result.message


def test_sessions_accept_duplicate_dates_and_feed_attendance() -> None:
    course_id = _course_id()
    first = actions.add_session(course_id, "2025-01-15", "present")
    second = actions.add_session(course_id, "2025-01-15", "absent")
    assert first.success and second.success
    assert first.message == "Session added!"

    detail = course_detail_view(course_id)
    assert len(detail.sessions) == 2
    assert detail.overview.stats["attendance_percentage"] == 50

    removed = actions.delete_session(first.data["session_id"])
    assert removed.success
    assert removed.data["course_id"] == course_id
    assert len(course_detail_view(course_id).sessions) == 1


def test_add_session_for_unknown_course_is_not_found() -> None:
    result = actions.add_session("ghost", "2025-01-15", "present")
    assert result.kind == "not_found"


def test_add_session_rejects_bad_status_before_store(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_scope(*_args, **_kwargs):
        raise AssertionError("store must not be touched")

    monkeypatch.setattr(action_base, "session_scope", fail_scope)
    result = actions.add_session("course", "2025-01-15", "late")
    assert result.kind == "validation"
    assert result.message == "Missing required fields."
    assert "status" in result.errors


def test_course_deadline_without_course_fails_validation_without_store(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail_scope(*_args, **_kwargs):
        raise AssertionError("store must not be touched")

    monkeypatch.setattr(action_base, "session_scope", fail_scope)
    result = actions.add_deadline(title="Essay", due_date="2025-02-01", type="Assignment", category="Course")

    assert not result.success
    assert result.kind == "validation"
    assert result.errors["course_id"] == ["Please select a course for course deadlines."]


def test_other_deadline_is_stored_without_course() -> None:
    course_id = _course_id()
    result = actions.add_deadline(
        title="Renew visa",
        due_date="2025-02-01",
        due_time="09:15",
        type="Personal",
        category="Other",
        course_id=course_id,
    )
    assert result.success
    deadline = result.data["deadline"]
    assert deadline["course_id"] is None
    assert deadline["is_completed"] is False
    assert deadline["due_date"].startswith("2025-02-01T09:15:00")


def test_toggle_deadline_twice_restores_state() -> None:
    course_id = _course_id()
    created = actions.add_deadline(title="Case memo", due_date="2025-02-01", type="Assignment", course_id=course_id)
    deadline_id = created.data["deadline_id"]

    first = actions.toggle_deadline_completion(deadline_id, False)
    second = actions.toggle_deadline_completion(deadline_id, True)

    assert first.data["is_completed"] is True
    assert second.data["is_completed"] is False


def test_update_deadline_moving_course_revalidates_both_courses() -> None:
    old_course = _course_id("FIN501")
    new_course = _course_id("MKT501")
    created = actions.add_deadline(title="Memo", due_date="2025-02-01", type="Assignment", course_id=old_course)
    course_detail_view(old_course)
    course_detail_view(new_course)

    result = actions.update_deadline(
        created.data["deadline_id"],
        title="Memo v2",
        due_date="2025-02-03",
        type="Assignment",
        course_id=new_course,
    )

    assert result.success
    cached = view_cache.cached_paths()
    assert course_path(old_course) not in cached
    assert course_path(new_course) not in cached


def test_delete_missing_deadline_is_not_found() -> None:
    assert actions.delete_deadline("ghost").kind == "not_found"


def test_skill_confidence_updates_projection_and_history() -> None:
    added = actions.add_skill("Financial modelling", "Hard", "Excel + DCF", 2)
    skill_id = added.data["skill_id"]

    updated = actions.update_skill_confidence(skill_id, 4)
    assert updated.success
    assert updated.message == "Confidence updated."

    with session_scope(commit=False) as session:
        history = skills.history(session, skill_id)
        latest = {skill.id: skill.latest_confidence for skill in skills.list(session)}
    assert [entry.confidence_level for entry in history] == [2, 4]
    assert latest[skill_id] == 4


def test_skill_confidence_rolls_back_projection_when_log_write_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    added = actions.add_skill("Negotiation", "Soft", None, 3)
    skill_id = added.data["skill_id"]

    def broken_log(**_kwargs):
        raise RuntimeError("log table unavailable")

    monkeypatch.setattr(skills_module, "SkillConfidenceLogModel", broken_log)
    result = actions.update_skill_confidence(skill_id, 5)

    assert not result.success
    assert result.kind == "store"
    assert result.message == "log table unavailable"
    with session_scope(commit=False) as session:
        stored = {skill.id: skill.latest_confidence for skill in skills.list(session)}
        logs = session.execute(
            select(func.count()).select_from(SkillConfidenceLogModel).where(SkillConfidenceLogModel.skill_id == skill_id)
        ).scalar_one()
    assert stored[skill_id] == 3
    assert logs == 1


def test_skill_confidence_out_of_range_is_rejected() -> None:
    added = actions.add_skill("Public speaking", "Soft")
    result = actions.update_skill_confidence(added.data["skill_id"], 6)
    assert result.kind == "validation"
    assert "level" in result.errors


def test_delete_skill_removes_history() -> None:
    added = actions.add_skill("SQL", "Hard", confidence=1)
    skill_id = added.data["skill_id"]
    actions.update_skill_confidence(skill_id, 2)

    assert actions.delete_skill(skill_id).success
    with session_scope(commit=False) as session:
        remaining = session.execute(select(func.count()).select_from(SkillConfidenceLogModel)).scalar_one()
    assert remaining == 0


def test_objective_lifecycle_cascades_key_results() -> None:
    created = actions.add_objective("Land a summer internship", "Spring", ["Apply to 20 firms", " ", "Two mock interviews"])
    assert created.success
    assert created.data["key_result_count"] == 2
    objective_id = created.data["objective_id"]

    key_result_id = created.data["objective"]["key_results"][0]["id"]
    assert actions.toggle_key_result(key_result_id, False).data["is_completed"] is True
    assert goals_view().objectives[0].progress == 50.0

    assert actions.delete_objective(objective_id).success
    with session_scope(commit=False) as session:
        assert objectives.count_key_results(session, objective_id) == 0
        assert session.execute(select(func.count()).select_from(KeyResultModel)).scalar_one() == 0


def test_objective_requires_title_and_key_result() -> None:
    assert actions.add_objective("   ", None, ["One"]).errors == {"title": ["Objective title is required."]}
    missing = actions.add_objective("Network", None, [])
    assert missing.kind == "validation"
    assert missing.message == "At least one key result is required."


def test_journal_entry_upsert_keeps_one_row_per_date() -> None:
    first = actions.save_journal_entry("2025-03-01", "Learned about WACC.")
    second = actions.save_journal_entry(date(2025, 3, 1), "Rewrote the reflection.")

    assert first.message == "Entry saved!"
    assert second.success
    with session_scope(commit=False) as session:
        entries = journal.list(session)
    assert len(entries) == 1
    assert entries[0].content == "Rewrote the reflection."


def test_journal_requires_content() -> None:
    result = actions.save_journal_entry("2025-03-01", "")
    assert result.kind == "validation"
    assert result.message == "Missing date or content."


def test_local_today_respects_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MBA_LOCAL_TIMEZONE", "Asia/Kolkata")
    get_settings.cache_clear()
    late_evening_utc = datetime(2025, 3, 1, 20, 0, tzinfo=timezone.utc)
    assert actions.local_today(now=late_evening_utc) == date(2025, 3, 2)


def test_case_study_crud() -> None:
    created = actions.create_case_study(
        case_title="Netflix streaming pivot",
        case_subject="Strategy",
        frameworks=["SWOT"],
        alternative_solutions=[{"solution": "License content", "pros": "Cheap", "cons": "Weak moat"}],
        case_source_url="https://example.com/netflix",
    )
    assert created.success
    assert created.message == "Successfully created case study."
    case_id = created.data["case_id"]

    updated = actions.update_case_study(case_id, case_title="Netflix pivot revisited", recommendation="Build originals")
    assert updated.data["case_study"]["recommendation"] == "Build originals"

    invalid = actions.update_case_study(case_id, case_title="Netflix", case_source_url="nope")
    assert invalid.kind == "validation"
    assert invalid.errors["case_source_url"] == ["Must be a valid URL"]

    assert actions.delete_case_study(case_id).success
    assert actions.delete_case_study(case_id).kind == "not_found"


def test_mutations_invalidate_cached_views_after_commit() -> None:
    _course_id("FIN501")
    assert len(courses_view().courses) == 1
    assert COURSES in view_cache.cached_paths()

    _course_id("MKT501")

    assert COURSES not in view_cache.cached_paths()
    assert len(courses_view().courses) == 2


def test_failed_mutation_leaves_cache_untouched() -> None:
    courses_view()
    result = actions.update_course("missing", title="Nope")
    assert result.kind == "not_found"
    assert COURSES in view_cache.cached_paths()


def test_successful_mutation_emits_telemetry() -> None:
    events = []
    register_listener(events.append)

    course_id = _course_id()

    assert events[-1].name == "course.added"
    assert events[-1].payload["course_id"] == course_id
    assert "/courses" in events[-1].payload["paths"]
    assert "course" not in events[-1].payload


@pytest.mark.parametrize(
    ("call", "field"),
    [
        (lambda: actions.add_deadline(title="Essay", due_date="2025-02-01", type="x" * 40, category="Other"), "type"),
        (lambda: actions.add_course(title="Finance", code="F" * 33), "code"),
        (lambda: actions.add_course(title="Finance", term="t" * 65), "term"),
        (lambda: actions.add_module("Core", "s" * 65), "semester"),
        (lambda: actions.add_objective("Network", "s" * 65, ["Meet alumni"]), "semester"),
    ],
)
def test_overlong_strings_fail_validation_before_store(
    monkeypatch: pytest.MonkeyPatch, call, field: str
) -> None:
    def fail_scope(*_args, **_kwargs):
        raise AssertionError("store must not be touched")

    monkeypatch.setattr(action_base, "session_scope", fail_scope)
    result = call()

    assert result.kind == "validation"
    assert field in result.errors
