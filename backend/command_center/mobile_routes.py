"""Endpoints used by the mobile companion app and the reminder cron job.

Every mobile endpoint rejects a missing or wrong ``x-api-key`` header before
touching the database. The reminder endpoint is guarded by the cron secret
instead.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse

from .actions import mobile
from .config import Settings, get_settings
from .db.session import session_scope
from .notifications import send_due_reminders
from .repositories import courses, deadlines
from .results import ActionResult, field_errors

router = APIRouter(prefix="/api/mobile", tags=["mobile"])
logger = logging.getLogger(__name__)

UNAUTHORIZED = "Unauthorized"


class MobileRequest(BaseModel):
    type: Literal["journal", "deadline", "task"]
    payload: Any = None


class JournalPayload(BaseModel):
    content: str = Field(..., min_length=1)


class DeadlinePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_code: str = Field(..., min_length=1, alias="courseCode")
    title: str = Field(..., min_length=1)
    date_str: str = Field(..., min_length=1, alias="dateStr")


class TaskPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    date_str: str = Field(..., min_length=1, alias="dateStr")


class MobileCourse(BaseModel):
    id: str
    code: Optional[str] = None
    title: str


def _authorized(api_key: Optional[str], settings: Settings) -> bool:
    expected = settings.mobile_api_key
    if not expected or not api_key:
        return False
    return secrets.compare_digest(api_key, expected)


def _failure(error: str, status_code: int, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error, **extra})


def _mobile_response(result: ActionResult) -> JSONResponse:
    if result.success:
        return JSONResponse(status_code=status.HTTP_200_OK, content={"success": True, "message": result.message})
    if result.kind == "store":
        return _failure(result.message or "An internal server error occurred.", status.HTTP_500_INTERNAL_SERVER_ERROR)
    return _failure(result.message, status.HTTP_400_BAD_REQUEST)


def _dispatch(request: MobileRequest, settings: Settings) -> JSONResponse:
    if request.type == "journal":
        try:
            journal_payload = JournalPayload.model_validate(request.payload)
        except ValidationError as exc:
            return _failure("Invalid journal payload", status.HTTP_400_BAD_REQUEST, details=field_errors(exc))
        return _mobile_response(mobile.save_mobile_journal(journal_payload.content, settings=settings))

    if request.type == "deadline":
        try:
            deadline_payload = DeadlinePayload.model_validate(request.payload)
        except ValidationError as exc:
            return _failure("Invalid course deadline payload", status.HTTP_400_BAD_REQUEST, details=field_errors(exc))
        result = mobile.add_course_deadline(
            deadline_payload.course_code,
            deadline_payload.title,
            deadline_payload.date_str,
            settings=settings,
        )
        return _mobile_response(result)

    try:
        task_payload = TaskPayload.model_validate(request.payload)
    except ValidationError as exc:
        return _failure("Invalid task payload", status.HTTP_400_BAD_REQUEST, details=field_errors(exc))
    return _mobile_response(mobile.add_task(task_payload.title, task_payload.date_str, settings=settings))


@router.post("")
async def mobile_capture(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    if not _authorized(x_api_key, settings):
        return _failure(UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED)

    try:
        body = await request.json()
    except ValueError:
        return _failure("Invalid JSON body", status.HTTP_400_BAD_REQUEST)

    try:
        parsed = MobileRequest.model_validate(body)
    except ValidationError as exc:
        return _failure("Invalid request format", status.HTTP_400_BAD_REQUEST, details=field_errors(exc))

    try:
        return await run_in_threadpool(_dispatch, parsed, settings)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Mobile %s request failed", parsed.type)
        return _failure(str(exc) or "An internal server error occurred.", status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/courses", response_model=List[MobileCourse])
def mobile_courses(
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Any:
    if not _authorized(x_api_key, settings):
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": UNAUTHORIZED})
    try:
        with session_scope(commit=False) as session:
            course_list = courses.list_courses(session, order_by_code=True)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Fetching mobile courses failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Failed to fetch courses."},
        )
    return [MobileCourse(id=course.id, code=course.code, title=course.title) for course in course_list]


@router.get("/deadline")
def mobile_deadlines(
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Any:
    if not _authorized(x_api_key, settings):
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"error": UNAUTHORIZED})
    try:
        with session_scope(commit=False) as session:
            items = deadlines.list(session)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Fetching mobile deadlines failed")
        return _failure(str(exc) or "Failed to fetch deadlines.", status.HTTP_500_INTERNAL_SERVER_ERROR)
    payload: List[Dict[str, Any]] = []
    for item in items:
        entry = item.model_dump(mode="json", exclude={"course"})
        entry["courses"] = item.course.model_dump(mode="json") if item.course else None
        payload.append(entry)
    return payload


@router.post("/fcm/register")
async def register_fcm_token(
    request: Request,
    x_api_key: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    if not _authorized(x_api_key, settings):
        return _failure(UNAUTHORIZED, status.HTTP_401_UNAUTHORIZED)

    try:
        body = await request.json()
    except ValueError:
        return _failure("Invalid JSON body", status.HTTP_400_BAD_REQUEST)

    token = body.get("token") if isinstance(body, dict) else None
    return _mobile_response(await run_in_threadpool(mobile.register_fcm_token, token))


@router.post("/fcm/register/remind")
def send_reminders(
    secret: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    expected = settings.cron_secret
    if not expected or not secret or not secrets.compare_digest(secret, expected):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized: Invalid cron secret."},
        )
    try:
        run = send_due_reminders(settings)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Reminder run failed")
        return _failure(
            str(exc) or "An internal server error occurred during scheduling.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse(status_code=status.HTTP_200_OK, content=run.model_dump())


__all__ = ["router"]
