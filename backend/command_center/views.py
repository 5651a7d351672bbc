"""Cached dashboard views and the paths mutations revalidate."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .cache import view_cache
from .db.session import session_scope
from .metrics import course_stats, deadline_completion, key_result_progress
from .records import (
    AttendanceSession,
    CaseStudy,
    CaseStudySummary,
    Course,
    Deadline,
    JournalEntry,
    Module,
    Objective,
    Skill,
)
from .repositories import case_studies, courses, deadlines, journal, objectives, skills

COURSES = "/courses"
ATTENDANCE = "/attendance"
CALENDAR = "/calendar"
SKILLS = "/skills"
GOALS = "/goals"
JOURNAL = "/journal"
CASE_STUDIES = "/case-studies"


def course_path(course_id: str) -> str:
    return f"{COURSES}/{course_id}"


def case_study_path(case_id: str) -> str:
    return f"{CASE_STUDIES}/{case_id}"


def course_paths(course_id: Optional[str]) -> List[str]:
    """Views that render a course's attendance or deadlines."""
    paths = [COURSES, ATTENDANCE]
    if course_id:
        paths.append(course_path(course_id))
    return paths


class CourseOverview(BaseModel):
    course: Course
    module_title: Optional[str] = None
    stats: Dict[str, object]


class CoursesView(BaseModel):
    modules: List[Module] = Field(default_factory=list)
    courses: List[CourseOverview] = Field(default_factory=list)


class CourseDetailView(BaseModel):
    overview: CourseOverview
    sessions: List[AttendanceSession] = Field(default_factory=list)
    deadlines: List[Deadline] = Field(default_factory=list)


class AttendanceView(BaseModel):
    courses: List[CourseOverview] = Field(default_factory=list)
    below_requirement: List[str] = Field(default_factory=list)


class CalendarCourse(BaseModel):
    id: str
    title: str
    code: Optional[str] = None


class CalendarView(BaseModel):
    deadlines: List[Deadline] = Field(default_factory=list)
    courses: List[CalendarCourse] = Field(default_factory=list)
    completion_percentage: float = 100.0


class SkillsView(BaseModel):
    skills: List[Skill] = Field(default_factory=list)


class ObjectiveProgress(BaseModel):
    objective: Objective
    progress: float


class GoalsView(BaseModel):
    objectives: List[ObjectiveProgress] = Field(default_factory=list)


class JournalView(BaseModel):
    entries: List[JournalEntry] = Field(default_factory=list)


class CaseStudiesView(BaseModel):
    case_studies: List[CaseStudySummary] = Field(default_factory=list)


def _overviews() -> tuple[List[Module], List[CourseOverview]]:
    with session_scope(commit=False) as session:
        modules = courses.list_modules(session)
        course_list = courses.list_courses(session)
        sessions = courses.list_sessions(session)
    module_titles = {module.id: module.title for module in modules}
    overviews = [
        CourseOverview(
            course=course,
            module_title=module_titles.get(course.module_id or ""),
            stats=course_stats(course, sessions).as_dict(),
        )
        for course in course_list
    ]
    return modules, overviews


def courses_view() -> CoursesView:
    def build() -> CoursesView:
        modules, overviews = _overviews()
        return CoursesView(modules=modules, courses=overviews)

    return view_cache.get_or_build(COURSES, build)


def attendance_view() -> AttendanceView:
    def build() -> AttendanceView:
        _, overviews = _overviews()
        below = [
            overview.course.id
            for overview in overviews
            if overview.stats["attendance_percentage"] < overview.course.mandatory_attendance_percentage
        ]
        return AttendanceView(courses=overviews, below_requirement=below)

    return view_cache.get_or_build(ATTENDANCE, build)


def course_detail_view(course_id: str) -> CourseDetailView:
    """Raises ``LookupError`` when the course does not exist."""

    def build() -> CourseDetailView:
        with session_scope(commit=False) as session:
            course = courses.get_course(session, course_id)
            if course is None:
                raise LookupError(f"Course '{course_id}' does not exist.")
            sessions = courses.list_sessions(session, course_id)
            owned_deadlines = deadlines.list_for_course(session, course_id)
            module_title = None
            if course.module_id:
                module_title = next(
                    (module.title for module in courses.list_modules(session) if module.id == course.module_id),
                    None,
                )
        overview = CourseOverview(
            course=course,
            module_title=module_title,
            stats=course_stats(course, sessions).as_dict(),
        )
        return CourseDetailView(overview=overview, sessions=sessions, deadlines=owned_deadlines)

    return view_cache.get_or_build(course_path(course_id), build)


def calendar_view() -> CalendarView:
    def build() -> CalendarView:
        with session_scope(commit=False) as session:
            items = deadlines.list(session)
            course_list = courses.list_courses(session)
        return CalendarView(
            deadlines=items,
            courses=[CalendarCourse(id=course.id, title=course.title, code=course.code) for course in course_list],
            completion_percentage=deadline_completion(items),
        )

    return view_cache.get_or_build(CALENDAR, build)


def skills_view() -> SkillsView:
    def build() -> SkillsView:
        with session_scope(commit=False) as session:
            return SkillsView(skills=skills.list(session))

    return view_cache.get_or_build(SKILLS, build)


def goals_view() -> GoalsView:
    def build() -> GoalsView:
        with session_scope(commit=False) as session:
            items = objectives.list(session)
        return GoalsView(
            objectives=[
                ObjectiveProgress(objective=objective, progress=key_result_progress(objective.key_results))
                for objective in items
            ]
        )

    return view_cache.get_or_build(GOALS, build)


def journal_view() -> JournalView:
    def build() -> JournalView:
        with session_scope(commit=False) as session:
            return JournalView(entries=journal.list(session))

    return view_cache.get_or_build(JOURNAL, build)


def case_studies_view() -> CaseStudiesView:
    def build() -> CaseStudiesView:
        with session_scope(commit=False) as session:
            return CaseStudiesView(case_studies=case_studies.list(session))

    return view_cache.get_or_build(CASE_STUDIES, build)


def case_study_view(case_id: str) -> CaseStudy:
    """Raises ``LookupError`` when the case study does not exist."""

    def build() -> CaseStudy:
        with session_scope(commit=False) as session:
            case = case_studies.get(session, case_id)
        if case is None:
            raise LookupError(f"Case study '{case_id}' does not exist.")
        return case

    return view_cache.get_or_build(case_study_path(case_id), build)


__all__ = [
    "ATTENDANCE",
    "CALENDAR",
    "CASE_STUDIES",
    "COURSES",
    "GOALS",
    "JOURNAL",
    "SKILLS",
    "attendance_view",
    "calendar_view",
    "case_studies_view",
    "case_study_path",
    "case_study_view",
    "course_detail_view",
    "course_path",
    "course_paths",
    "courses_view",
    "goals_view",
    "journal_view",
    "skills_view",
]
