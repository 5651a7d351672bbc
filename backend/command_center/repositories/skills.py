"""Database-backed repository for skills and their confidence history."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import SkillConfidenceLogModel, SkillModel
from ..records import Skill, SkillConfidenceLog
from ..schemas import SkillDetailsInput, SkillInput


class SkillRepository:
    """Keeps ``skills.latest_confidence`` in step with the append-only log.

    Both writes happen on the caller's session, so a single ``session_scope``
    commits or rolls back the projection and the log entry together.
    """

    def list(self, session: Session) -> List[Skill]:
        stmt = select(SkillModel).order_by(SkillModel.type.asc(), SkillModel.name.asc())
        return [Skill.model_validate(model) for model in session.execute(stmt).scalars()]

    def add(self, session: Session, data: SkillInput) -> Skill:
        model = SkillModel(
            name=data.name,
            type=data.type,
            notes=data.notes or None,
            latest_confidence=data.confidence,
        )
        session.add(model)
        session.flush()
        session.add(SkillConfidenceLogModel(skill_id=model.id, confidence_level=data.confidence))
        session.flush()
        return Skill.model_validate(model)

    def update_details(self, session: Session, skill_id: str, data: SkillDetailsInput) -> Skill:
        model = self._require_model(session, skill_id)
        model.name = data.name
        model.type = data.type
        model.notes = data.notes or None
        session.flush()
        return Skill.model_validate(model)

    def record_confidence(self, session: Session, skill_id: str, level: int) -> Skill:
        model = self._require_model(session, skill_id)
        model.latest_confidence = level
        session.add(SkillConfidenceLogModel(skill_id=model.id, confidence_level=level))
        session.flush()
        return Skill.model_validate(model)

    def history(self, session: Session, skill_id: str) -> List[SkillConfidenceLog]:
        self._require_model(session, skill_id)
        stmt = (
            select(SkillConfidenceLogModel)
            .where(SkillConfidenceLogModel.skill_id == skill_id)
            .order_by(SkillConfidenceLogModel.created_at.asc())
        )
        return [SkillConfidenceLog.model_validate(model) for model in session.execute(stmt).scalars()]

    def delete(self, session: Session, skill_id: str) -> None:
        model = self._require_model(session, skill_id)
        session.delete(model)
        session.flush()

    def _require_model(self, session: Session, skill_id: str) -> SkillModel:
        model = session.get(SkillModel, skill_id)
        if model is None:
            raise LookupError(f"Skill '{skill_id}' does not exist.")
        return model


skills = SkillRepository()

__all__ = ["SkillRepository", "skills"]
