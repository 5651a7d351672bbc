"""Dashboard endpoints for skills, goals and the reflection journal."""

from __future__ import annotations

from typing import Any, List, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from . import actions
from .db.session import session_scope
from .records import SkillConfidenceLog
from .repositories import skills
from .responses import action_response
from .views import GoalsView, JournalView, SkillsView, goals_view, journal_view, skills_view

router = APIRouter(prefix="/api", tags=["growth"])


class SkillRequest(BaseModel):
    name: Any = None
    type: Any = None
    notes: Optional[str] = None
    confidence: Any = 1


class ConfidenceRequest(BaseModel):
    level: Any = None


class ObjectiveRequest(BaseModel):
    title: Optional[str] = None
    semester: Optional[str] = None
    key_results: List[str] = Field(default_factory=list)


class ToggleRequest(BaseModel):
    current_state: bool


class JournalRequest(BaseModel):
    entry_date: Any = None
    content: Optional[str] = None


@router.get("/skills", response_model=SkillsView)
def list_skills() -> SkillsView:
    return skills_view()


@router.post("/skills", status_code=status.HTTP_201_CREATED)
def create_skill(payload: SkillRequest) -> JSONResponse:
    result = actions.add_skill(payload.name, payload.type, payload.notes, payload.confidence)
    return action_response(result, created=True)


@router.put("/skills/{skill_id}")
def update_skill(skill_id: str, payload: SkillRequest) -> JSONResponse:
    return action_response(actions.update_skill_details(skill_id, payload.name, payload.type, payload.notes))


@router.post("/skills/{skill_id}/confidence")
def update_confidence(skill_id: str, payload: ConfidenceRequest) -> JSONResponse:
    return action_response(actions.update_skill_confidence(skill_id, payload.level))


@router.get("/skills/{skill_id}/history", response_model=List[SkillConfidenceLog])
def confidence_history(skill_id: str) -> List[SkillConfidenceLog]:
    try:
        with session_scope(commit=False) as session:
            return skills.history(session, skill_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.delete("/skills/{skill_id}")
def delete_skill(skill_id: str) -> JSONResponse:
    return action_response(actions.delete_skill(skill_id))


@router.get("/goals", response_model=GoalsView)
def list_goals() -> GoalsView:
    return goals_view()


@router.post("/goals", status_code=status.HTTP_201_CREATED)
def create_objective(payload: ObjectiveRequest) -> JSONResponse:
    result = actions.add_objective(payload.title, payload.semester, payload.key_results)
    return action_response(result, created=True)


@router.post("/goals/key-results/{key_result_id}/toggle")
def toggle_key_result(key_result_id: str, payload: ToggleRequest) -> JSONResponse:
    return action_response(actions.toggle_key_result(key_result_id, payload.current_state))


@router.delete("/goals/{objective_id}")
def delete_objective(objective_id: str) -> JSONResponse:
    return action_response(actions.delete_objective(objective_id))


@router.get("/journal", response_model=JournalView)
def list_journal() -> JournalView:
    return journal_view()


@router.put("/journal")
def save_journal(payload: JournalRequest) -> JSONResponse:
    return action_response(actions.save_journal_entry(payload.entry_date, payload.content))


__all__ = ["router"]
