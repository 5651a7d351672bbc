from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from command_center.results import field_errors
from command_center.schemas import (
    CaseStudyInput,
    CourseInput,
    DeadlineInput,
    ObjectiveInput,
    SessionInput,
)


@pytest.mark.parametrize("raw", ["", "none", "NULL", "  "])
def test_course_input_treats_empty_module_reference_as_unassigned(raw: str) -> None:
    course = CourseInput(title="Marketing", code="mkt101", module_id=raw)
    assert course.module_id is None
    assert course.code == "MKT101"


def test_session_input_normalizes_date_only_values_to_utc_midnight() -> None:
    parsed = SessionInput(course_id="c", date=date(2025, 1, 15), status="present")
    assert parsed.date == datetime(2025, 1, 15, tzinfo=timezone.utc)


def test_session_input_rejects_unknown_status() -> None:
    with pytest.raises(ValidationError) as excinfo:
        SessionInput(course_id="c", date="2025-01-15", status="late")
    assert "status" in field_errors(excinfo.value)


def test_course_deadline_requires_course_id() -> None:
    with pytest.raises(ValidationError) as excinfo:
        DeadlineInput(title="Essay", due_date="2025-02-01", type="Assignment", category="Course")
    errors = field_errors(excinfo.value)
    assert errors["course_id"] == ["Please select a course for course deadlines."]


def test_other_deadline_drops_course_id() -> None:
    parsed = DeadlineInput(
        title="Renew visa",
        due_date="2025-02-01",
        type="Personal",
        category="Other",
        course_id="course-1",
    )
    assert parsed.course_id is None


def test_deadline_timestamp_combines_date_and_time() -> None:
    with_time = DeadlineInput(
        title="Quiz",
        due_date="2025-02-01",
        due_time="14:30",
        type="Quiz",
        course_id="course-1",
    )
    without_time = DeadlineInput(title="Quiz", due_date="2025-02-01", due_time="", type="Quiz", course_id="c")
    assert with_time.due_timestamp() == datetime(2025, 2, 1, 14, 30, tzinfo=timezone.utc)
    assert without_time.due_time is None
    assert without_time.due_timestamp() == datetime(2025, 2, 1, tzinfo=timezone.utc)


def test_deadline_rejects_malformed_time() -> None:
    with pytest.raises(ValidationError) as excinfo:
        DeadlineInput(title="Quiz", due_date="2025-02-01", due_time="25:00", type="Quiz", course_id="c")
    assert "due_time" in field_errors(excinfo.value)


def test_objective_requires_a_non_blank_key_result() -> None:
    with pytest.raises(ValidationError) as excinfo:
        ObjectiveInput(title="Land internship", key_results=["", "   "])
    assert field_errors(excinfo.value)["key_results"] == ["At least one key result is required."]

    parsed = ObjectiveInput(title="Land internship", key_results=[" Apply to 10 firms ", ""])
    assert parsed.key_results == ["Apply to 10 firms"]


def test_case_study_validates_title_and_url() -> None:
    with pytest.raises(ValidationError) as excinfo:
        CaseStudyInput(case_title="ab", case_source_url="not a url")
    errors = field_errors(excinfo.value)
    assert "case_title" in errors
    assert errors["case_source_url"] == ["Must be a valid URL"]

    parsed = CaseStudyInput(case_title="Netflix pivot", case_source_url="")
    assert parsed.case_source_url is None
