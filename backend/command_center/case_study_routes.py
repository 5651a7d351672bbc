"""Dashboard endpoints for case study analyses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel
from starlette.responses import JSONResponse

from . import actions
from .records import CaseStudy
from .responses import action_response, body_fields
from .views import CaseStudiesView, case_studies_view, case_study_view

router = APIRouter(prefix="/api/case-studies", tags=["case-studies"])


class FrameworkRequest(BaseModel):
    case_title: Optional[str] = None
    case_subject: Optional[str] = None


class FrameworkResponse(BaseModel):
    frameworks: List[str]


@router.get("", response_model=CaseStudiesView)
def list_case_studies() -> CaseStudiesView:
    return case_studies_view()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_case_study(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    return action_response(actions.create_case_study(**payload), created=True)


@router.post("/frameworks", response_model=FrameworkResponse)
def recommend_frameworks(payload: FrameworkRequest) -> FrameworkResponse:
    return FrameworkResponse(frameworks=actions.recommend_frameworks(payload.case_title, payload.case_subject))


@router.get("/{case_id}", response_model=CaseStudy)
def get_case_study(case_id: str) -> CaseStudy:
    try:
        return case_study_view(case_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put("/{case_id}")
def update_case_study(case_id: str, payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    return action_response(actions.update_case_study(case_id, **body_fields(payload, "case_id")))


@router.post("/{case_id}/rate")
def rate_case_study(case_id: str) -> JSONResponse:
    return action_response(actions.rate_case_study(case_id))


@router.delete("/{case_id}")
def delete_case_study(case_id: str) -> JSONResponse:
    return action_response(actions.delete_case_study(case_id))


__all__ = ["router"]
