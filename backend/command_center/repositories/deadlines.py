"""Database-backed repository for deadlines and generic tasks."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..db.models import CourseModel, DeadlineModel
from ..records import Deadline
from ..schemas import DeadlineInput


class DeadlineRepository:
    def list(self, session: Session, *, include_completed: bool = True) -> List[Deadline]:
        stmt = (
            select(DeadlineModel)
            .options(selectinload(DeadlineModel.course))
            .order_by(DeadlineModel.due_date.asc(), DeadlineModel.due_time.asc().nulls_first())
        )
        if not include_completed:
            stmt = stmt.where(DeadlineModel.is_completed.is_(False))
        return [Deadline.model_validate(model) for model in session.execute(stmt).scalars()]

    def list_for_course(self, session: Session, course_id: str) -> List[Deadline]:
        stmt = (
            select(DeadlineModel)
            .options(selectinload(DeadlineModel.course))
            .where(DeadlineModel.course_id == course_id)
            .order_by(DeadlineModel.due_date.asc())
        )
        return [Deadline.model_validate(model) for model in session.execute(stmt).scalars()]

    def due_between(self, session: Session, start: datetime, end: datetime) -> List[Deadline]:
        stmt = (
            select(DeadlineModel)
            .options(selectinload(DeadlineModel.course))
            .where(DeadlineModel.due_date >= start, DeadlineModel.due_date <= end)
            .order_by(DeadlineModel.due_date.asc())
        )
        return [Deadline.model_validate(model) for model in session.execute(stmt).scalars()]

    def get(self, session: Session, deadline_id: str) -> Optional[Deadline]:
        model = session.get(DeadlineModel, deadline_id)
        return Deadline.model_validate(model) if model else None

    def add(self, session: Session, data: DeadlineInput) -> Deadline:
        self._require_course(session, data.course_id)
        model = DeadlineModel(is_completed=False)
        self._apply(model, data)
        session.add(model)
        session.flush()
        return Deadline.model_validate(model)

    def add_raw(
        self,
        session: Session,
        *,
        title: str,
        due_date: datetime,
        type: str,
        course_id: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Deadline:
        """Insert a deadline whose timestamp was resolved by the caller."""
        self._require_course(session, course_id)
        model = DeadlineModel(
            course_id=course_id,
            title=title,
            due_date=due_date,
            due_time=None,
            type=type,
            description=description,
            is_completed=False,
        )
        session.add(model)
        session.flush()
        return Deadline.model_validate(model)

    def update(self, session: Session, deadline_id: str, data: DeadlineInput) -> Deadline:
        model = self._require_model(session, deadline_id)
        self._require_course(session, data.course_id)
        self._apply(model, data)
        session.flush()
        return Deadline.model_validate(model)

    def set_completed(self, session: Session, deadline_id: str, completed: bool) -> Deadline:
        model = self._require_model(session, deadline_id)
        model.is_completed = completed
        session.flush()
        return Deadline.model_validate(model)

    def delete(self, session: Session, deadline_id: str) -> Optional[str]:
        """Delete a deadline and return its course id (``None`` for tasks)."""
        model = self._require_model(session, deadline_id)
        course_id = model.course_id
        session.delete(model)
        session.flush()
        return course_id

    def _require_model(self, session: Session, deadline_id: str) -> DeadlineModel:
        model = session.get(DeadlineModel, deadline_id)
        if model is None:
            raise LookupError(f"Deadline '{deadline_id}' does not exist.")
        return model

    def _require_course(self, session: Session, course_id: Optional[str]) -> None:
        if course_id is not None and session.get(CourseModel, course_id) is None:
            raise LookupError(f"Course '{course_id}' does not exist.")

    def _apply(self, model: DeadlineModel, data: DeadlineInput) -> None:
        model.course_id = data.course_id
        model.title = data.title
        model.due_date = data.due_timestamp()
        model.due_time = data.due_time
        model.type = data.type
        model.description = data.description


deadlines = DeadlineRepository()

__all__ = ["DeadlineRepository", "deadlines"]
