"""Database-backed repository for case study analyses."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import CaseStudyModel
from ..records import CaseStudy, CaseStudyScorecard, CaseStudySummary
from ..schemas import CaseStudyInput


class CaseStudyRepository:
    def list(self, session: Session) -> List[CaseStudySummary]:
        stmt = select(CaseStudyModel).order_by(CaseStudyModel.updated_at.desc())
        return [CaseStudySummary.model_validate(model) for model in session.execute(stmt).scalars()]

    def get(self, session: Session, case_id: str) -> Optional[CaseStudy]:
        model = session.get(CaseStudyModel, case_id)
        return CaseStudy.model_validate(model) if model else None

    def create(self, session: Session, data: CaseStudyInput) -> CaseStudy:
        model = CaseStudyModel()
        self._apply(model, data)
        session.add(model)
        session.flush()
        return CaseStudy.model_validate(model)

    def update(self, session: Session, case_id: str, data: CaseStudyInput) -> CaseStudy:
        model = self._require_model(session, case_id)
        self._apply(model, data)
        session.flush()
        return CaseStudy.model_validate(model)

    def set_rating(self, session: Session, case_id: str, rating: CaseStudyScorecard) -> CaseStudy:
        model = self._require_model(session, case_id)
        model.rating = rating.model_dump(mode="json")
        session.flush()
        return CaseStudy.model_validate(model)

    def delete(self, session: Session, case_id: str) -> None:
        model = self._require_model(session, case_id)
        session.delete(model)
        session.flush()

    def _require_model(self, session: Session, case_id: str) -> CaseStudyModel:
        model = session.get(CaseStudyModel, case_id)
        if model is None:
            raise LookupError(f"Case study '{case_id}' does not exist.")
        return model

    def _apply(self, model: CaseStudyModel, data: CaseStudyInput) -> None:
        model.case_title = data.case_title
        model.case_subject = data.case_subject
        model.protagonist = data.protagonist
        model.core_problem = data.core_problem
        model.case_source_url = data.case_source_url
        model.case_source_file = data.case_source_file
        model.strengths = data.strengths
        model.weaknesses = data.weaknesses
        model.opportunities = data.opportunities
        model.threats = data.threats
        model.frameworks = list(data.frameworks)
        model.alternative_solutions = [
            solution.model_dump(mode="json") for solution in data.alternative_solutions
        ]
        model.recommendation = data.recommendation
        model.justification = data.justification
        model.framework_inputs = dict(data.framework_inputs)
        model.ai_report = data.ai_report


case_studies = CaseStudyRepository()

__all__ = ["CaseStudyRepository", "case_studies"]
