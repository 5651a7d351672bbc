"""Case study advisors: framework recommendations and analysis rating."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..config import Settings
from ..records import CaseStudy, CaseStudyScorecard
from .base import run_json_advisor

FRAMEWORK_INSTRUCTIONS = (
    "You are an expert in business strategy and analysis. Given the title and subject of a case study, "
    "recommend a list of relevant business frameworks that can be used to analyse the case. Consider "
    "frameworks like Porter's Five Forces, SWOT Analysis, PESTLE, Value Chain Analysis and others."
)

RATING_INSTRUCTIONS = (
    "You are an MBA case competition judge. Score the student's case analysis from 0 to 5 on problem "
    "definition, analysis depth, framework application and recommendation quality, then give an overall "
    "score from 0 to 5 and two or three sentences of constructive feedback. Judge only what is written."
)


class FrameworkRecommendationRequest(BaseModel):
    case_title: str
    case_subject: str = ""


class FrameworkRecommendationResponse(BaseModel):
    frameworks: List[str] = Field(default_factory=list)


class CaseStudyRatingRequest(BaseModel):
    case_title: str
    case_subject: Optional[str] = None
    protagonist: Optional[str] = None
    core_problem: Optional[str] = None
    swot: dict = Field(default_factory=dict)
    frameworks: List[str] = Field(default_factory=list)
    framework_inputs: dict = Field(default_factory=dict)
    alternative_solutions: List[dict] = Field(default_factory=list)
    recommendation: Optional[str] = None
    justification: Optional[str] = None

    @classmethod
    def from_case(cls, case: CaseStudy) -> "CaseStudyRatingRequest":
        return cls(
            case_title=case.case_title,
            case_subject=case.case_subject,
            protagonist=case.protagonist,
            core_problem=case.core_problem,
            swot={
                "strengths": case.strengths,
                "weaknesses": case.weaknesses,
                "opportunities": case.opportunities,
                "threats": case.threats,
            },
            frameworks=list(case.frameworks),
            framework_inputs=dict(case.framework_inputs),
            alternative_solutions=[solution.model_dump() for solution in case.alternative_solutions],
            recommendation=case.recommendation,
            justification=case.justification,
        )


def recommend_frameworks(
    request: FrameworkRecommendationRequest,
    *,
    settings: Optional[Settings] = None,
) -> List[str]:
    response = run_json_advisor(
        name="Framework Recommender",
        instructions=FRAMEWORK_INSTRUCTIONS,
        context=request.model_dump(mode="json"),
        response_model=FrameworkRecommendationResponse,
        settings=settings,
    )
    seen: set[str] = set()
    frameworks: List[str] = []
    for name in response.frameworks:
        cleaned = name.strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            frameworks.append(cleaned)
    return frameworks


def rate_case_study(
    request: CaseStudyRatingRequest,
    *,
    settings: Optional[Settings] = None,
) -> CaseStudyScorecard:
    return run_json_advisor(
        name="Case Study Rater",
        instructions=RATING_INSTRUCTIONS,
        context=request.model_dump(mode="json"),
        response_model=CaseStudyScorecard,
        settings=settings,
    )


__all__ = [
    "CaseStudyRatingRequest",
    "FrameworkRecommendationRequest",
    "FrameworkRecommendationResponse",
    "rate_case_study",
    "recommend_frameworks",
]
