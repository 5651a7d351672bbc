"""Case study mutations plus the advisor-backed rating and framework helpers."""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..advisors import AdvisorError, case_study_advisor
from ..advisors.case_study_advisor import CaseStudyRatingRequest, FrameworkRecommendationRequest
from ..config import Settings
from ..db.session import session_scope
from ..records import CaseStudy
from ..repositories import case_studies
from ..results import ActionResult
from ..schemas import CaseStudyInput
from ..views import CASE_STUDIES, case_study_path
from .base import apply_mutation, validate

logger = logging.getLogger(__name__)

RATING_UNAVAILABLE = "The case study could not be rated right now. Please try again later."
INVALID_CASE_MESSAGE = "Missing Fields. Failed to Create Case Study."


def _payload(case: CaseStudy) -> dict:
    return {"case_id": case.id, "case_study": case.model_dump(mode="json")}


def create_case_study(**fields: Any) -> ActionResult:
    data, failure = validate(CaseStudyInput, INVALID_CASE_MESSAGE, fields)
    if failure:
        return failure
    return apply_mutation(
        "case_study.created",
        lambda session: case_studies.create(session, data),
        paths=lambda case: [CASE_STUDIES, case_study_path(case.id)],
        message="Successfully created case study.",
        payload=_payload,
    )


def update_case_study(case_id: Optional[str], **fields: Any) -> ActionResult:
    if not case_id:
        return ActionResult.invalid("id", "Case study ID is missing.")
    data, failure = validate(CaseStudyInput, "Missing Fields. Failed to Update Case Study.", fields)
    if failure:
        return failure
    return apply_mutation(
        "case_study.updated",
        lambda session: case_studies.update(session, case_id, data),
        paths=[CASE_STUDIES, case_study_path(case_id)],
        message="Successfully updated case study.",
        payload=_payload,
    )


def delete_case_study(case_id: Optional[str]) -> ActionResult:
    if not case_id:
        return ActionResult.invalid("id", "Case study ID is missing.")
    return apply_mutation(
        "case_study.deleted",
        lambda session: case_studies.delete(session, case_id),
        paths=[CASE_STUDIES, case_study_path(case_id)],
        message="Case study deleted.",
        payload=lambda _: {"case_id": case_id},
    )


def rate_case_study(case_id: Optional[str], *, settings: Optional[Settings] = None) -> ActionResult:
    """Ask the rating advisor for a scorecard and store it on the case.

    An advisor failure leaves the stored case untouched.
    """
    if not case_id:
        return ActionResult.invalid("id", "Case study ID is missing.")
    with session_scope(commit=False) as session:
        case = case_studies.get(session, case_id)
    if case is None:
        return ActionResult.not_found(f"Case study '{case_id}' does not exist.")

    try:
        scorecard = case_study_advisor.rate_case_study(CaseStudyRatingRequest.from_case(case), settings=settings)
    except AdvisorError as exc:
        logger.warning("Case study rating unavailable for %s: %s", case_id, exc)
        return ActionResult.delegate_failure(RATING_UNAVAILABLE)

    return apply_mutation(
        "case_study.rated",
        lambda session: case_studies.set_rating(session, case_id, scorecard),
        paths=[CASE_STUDIES, case_study_path(case_id)],
        message="Case study rated.",
        payload=lambda rated: {
            "case_id": rated.id,
            "overall_score": scorecard.overall_score,
            "rating": scorecard.model_dump(mode="json"),
        },
    )


def recommend_frameworks(
    case_title: Optional[str],
    case_subject: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
) -> List[str]:
    """Advisory framework list; empty when the advisor is unavailable."""
    if not case_title or not case_title.strip():
        return []
    request = FrameworkRecommendationRequest(case_title=case_title.strip(), case_subject=(case_subject or "").strip())
    try:
        return case_study_advisor.recommend_frameworks(request, settings=settings)
    except AdvisorError as exc:
        logger.warning("Framework recommendation unavailable: %s", exc)
        return []


__all__ = [
    "create_case_study",
    "delete_case_study",
    "rate_case_study",
    "recommend_frameworks",
    "update_case_study",
]
