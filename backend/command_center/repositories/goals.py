"""Database-backed repository for objectives and their key results."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..db.models import KeyResultModel, ObjectiveModel
from ..records import KeyResult, Objective
from ..schemas import ObjectiveInput


class ObjectiveRepository:
    def list(self, session: Session) -> List[Objective]:
        stmt = (
            select(ObjectiveModel)
            .options(selectinload(ObjectiveModel.key_results))
            .order_by(ObjectiveModel.created_at.desc())
        )
        return [Objective.model_validate(model) for model in session.execute(stmt).scalars()]

    def add(self, session: Session, data: ObjectiveInput) -> Objective:
        model = ObjectiveModel(title=data.title, semester=data.semester or None)
        session.add(model)
        session.flush()
        for description in data.key_results:
            model.key_results.append(
                KeyResultModel(objective_id=model.id, description=description, is_completed=False)
            )
        session.flush()
        return Objective.model_validate(model)

    def set_key_result_completed(self, session: Session, key_result_id: str, completed: bool) -> KeyResult:
        model = session.get(KeyResultModel, key_result_id)
        if model is None:
            raise LookupError(f"Key result '{key_result_id}' does not exist.")
        model.is_completed = completed
        session.flush()
        return KeyResult.model_validate(model)

    def delete(self, session: Session, objective_id: str) -> None:
        model = session.get(ObjectiveModel, objective_id)
        if model is None:
            raise LookupError(f"Objective '{objective_id}' does not exist.")
        session.delete(model)
        session.flush()

    def count_key_results(self, session: Session, objective_id: str) -> int:
        stmt = select(KeyResultModel.id).where(KeyResultModel.objective_id == objective_id)
        return len(session.execute(stmt).scalars().all())


objectives = ObjectiveRepository()

__all__ = ["ObjectiveRepository", "objectives"]
