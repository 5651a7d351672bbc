"""Dashboard endpoints for modules, courses and attendance."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException, status
from pydantic import BaseModel
from starlette.responses import JSONResponse

from . import actions
from .db.session import session_scope
from .records import AttendanceSession, Module
from .repositories import courses
from .responses import action_response, body_fields
from .views import AttendanceView, CourseDetailView, CoursesView, attendance_view, course_detail_view, courses_view

router = APIRouter(prefix="/api", tags=["courses"])


class SessionRequest(BaseModel):
    date: Any = None
    status: Any = None


class ModuleRequest(BaseModel):
    title: Any = None
    semester: Any = None


@router.get("/modules", response_model=List[Module])
def list_modules() -> List[Module]:
    with session_scope(commit=False) as session:
        return courses.list_modules(session)


@router.post("/modules", status_code=status.HTTP_201_CREATED)
def create_module(payload: ModuleRequest) -> JSONResponse:
    return action_response(actions.add_module(payload.title, payload.semester), created=True)


@router.get("/courses", response_model=CoursesView)
def list_courses() -> CoursesView:
    return courses_view()


@router.post("/courses", status_code=status.HTTP_201_CREATED)
def create_course(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    return action_response(actions.add_course(**payload), created=True)


@router.get("/courses/{course_id}", response_model=CourseDetailView)
def get_course(course_id: str) -> CourseDetailView:
    try:
        return course_detail_view(course_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put("/courses/{course_id}")
def update_course(course_id: str, payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    return action_response(actions.update_course(course_id, **body_fields(payload, "course_id")))


@router.get("/courses/{course_id}/sessions", response_model=List[AttendanceSession])
def list_sessions(course_id: str) -> List[AttendanceSession]:
    with session_scope(commit=False) as session:
        if courses.get_course(session, course_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Course '{course_id}' does not exist.",
            )
        return courses.list_sessions(session, course_id)


@router.post("/courses/{course_id}/sessions", status_code=status.HTTP_201_CREATED)
def create_session(course_id: str, payload: SessionRequest) -> JSONResponse:
    return action_response(actions.add_session(course_id, payload.date, payload.status), created=True)


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str) -> JSONResponse:
    return action_response(actions.delete_session(session_id))


@router.get("/attendance", response_model=AttendanceView)
def attendance_overview() -> AttendanceView:
    return attendance_view()


__all__ = ["router"]
