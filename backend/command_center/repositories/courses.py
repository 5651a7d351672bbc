"""Database-backed repository for modules, courses and attendance sessions."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import CourseModel, ModuleModel, SessionModel
from ..records import AttendanceSession, Course, Module
from ..schemas import CourseInput, ModuleInput


class CourseRepository:
    """Reads and writes the ``modules``, ``courses`` and ``sessions`` tables."""

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def list_modules(self, session: Session) -> List[Module]:
        stmt = select(ModuleModel).order_by(ModuleModel.created_at.asc())
        return [Module.model_validate(model) for model in session.execute(stmt).scalars()]

    def add_module(self, session: Session, data: ModuleInput) -> Module:
        model = ModuleModel(title=data.title, semester=data.semester or None)
        session.add(model)
        session.flush()
        return Module.model_validate(model)

    # ------------------------------------------------------------------
    # Courses
    # ------------------------------------------------------------------

    def list_courses(self, session: Session, *, order_by_code: bool = False) -> List[Course]:
        order = CourseModel.code.asc() if order_by_code else CourseModel.created_at.asc()
        stmt = select(CourseModel).order_by(order)
        return [Course.model_validate(model) for model in session.execute(stmt).scalars()]

    def get_course(self, session: Session, course_id: str) -> Optional[Course]:
        model = session.get(CourseModel, course_id)
        return Course.model_validate(model) if model else None

    def find_by_code(self, session: Session, code: str) -> Optional[Course]:
        stmt = select(CourseModel).where(CourseModel.code == code.strip().upper()).limit(1)
        model = session.execute(stmt).scalars().first()
        return Course.model_validate(model) if model else None

    def add_course(self, session: Session, data: CourseInput) -> Course:
        self._require_module(session, data.module_id)
        model = CourseModel()
        self._apply_course(model, data)
        session.add(model)
        session.flush()
        return Course.model_validate(model)

    def update_course(self, session: Session, course_id: str, data: CourseInput) -> Course:
        model = self._require_course(session, course_id)
        self._require_module(session, data.module_id)
        self._apply_course(model, data)
        session.flush()
        return Course.model_validate(model)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def list_sessions(self, session: Session, course_id: Optional[str] = None) -> List[AttendanceSession]:
        stmt = select(SessionModel).order_by(SessionModel.date.desc())
        if course_id is not None:
            stmt = stmt.where(SessionModel.course_id == course_id)
        return [AttendanceSession.model_validate(model) for model in session.execute(stmt).scalars()]

    def add_session(self, session: Session, course_id: str, when: datetime, status: str) -> AttendanceSession:
        self._require_course(session, course_id)
        model = SessionModel(course_id=course_id, date=when, status=status)
        session.add(model)
        session.flush()
        return AttendanceSession.model_validate(model)

    def delete_session(self, session: Session, session_id: str) -> str:
        """Delete a session and return the id of the course that owned it."""
        model = session.get(SessionModel, session_id)
        if model is None:
            raise LookupError(f"Session '{session_id}' does not exist.")
        course_id = model.course_id
        session.delete(model)
        session.flush()
        return course_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_course(self, session: Session, course_id: str) -> CourseModel:
        model = session.get(CourseModel, course_id)
        if model is None:
            raise LookupError(f"Course '{course_id}' does not exist.")
        return model

    def _require_module(self, session: Session, module_id: Optional[str]) -> None:
        if module_id is not None and session.get(ModuleModel, module_id) is None:
            raise LookupError(f"Module '{module_id}' does not exist.")

    def _apply_course(self, model: CourseModel, data: CourseInput) -> None:
        model.title = data.title
        model.code = data.code
        model.professor = data.professor or None
        model.term = data.term or None
        model.total_scheduled_sessions = data.total_scheduled_sessions
        model.mandatory_attendance_percentage = data.mandatory_attendance_percentage
        model.module_id = data.module_id


courses = CourseRepository()

__all__ = ["CourseRepository", "courses"]
