"""Dashboard endpoints for deadlines and the calendar."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, status
from pydantic import BaseModel
from starlette.responses import JSONResponse

from . import actions
from .actions.deadlines import DeadlinePrioritySummary
from .responses import action_response, body_fields
from .views import CalendarView, calendar_view

router = APIRouter(prefix="/api/deadlines", tags=["deadlines"])


class ToggleRequest(BaseModel):
    current_state: bool


@router.get("", response_model=CalendarView)
def list_deadlines() -> CalendarView:
    return calendar_view()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_deadline(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    return action_response(actions.add_deadline(**payload), created=True)


@router.get("/priority", response_model=DeadlinePrioritySummary)
def deadline_priorities() -> DeadlinePrioritySummary:
    return actions.get_deadline_priority_summary()


@router.put("/{deadline_id}")
def update_deadline(deadline_id: str, payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    return action_response(actions.update_deadline(deadline_id, **body_fields(payload, "deadline_id")))


@router.post("/{deadline_id}/toggle")
def toggle_deadline(deadline_id: str, payload: ToggleRequest) -> JSONResponse:
    return action_response(actions.toggle_deadline_completion(deadline_id, payload.current_state))


@router.delete("/{deadline_id}")
def delete_deadline(deadline_id: str) -> JSONResponse:
    return action_response(actions.delete_deadline(deadline_id))


__all__ = ["router"]
