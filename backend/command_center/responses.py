"""HTTP translation of action results."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from fastapi import status
from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse

from .results import ActionResult, FailureKind

FAILURE_STATUS: Dict[FailureKind, int] = {
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "store": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "delegate": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(result: ActionResult, *, created: bool = False) -> int:
    if result.success:
        return status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return FAILURE_STATUS.get(result.kind or "store", status.HTTP_500_INTERNAL_SERVER_ERROR)


def action_response(result: ActionResult, *, created: bool = False) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(result, created=created),
        content=jsonable_encoder(result.model_dump(exclude_none=True)),
    )


def body_fields(payload: Mapping[str, Any], *path_keys: str) -> Dict[str, Any]:
    """Drop body keys that repeat a path parameter; the path value wins."""
    return {key: value for key, value in payload.items() if key not in path_keys}


__all__ = ["FAILURE_STATUS", "action_response", "body_fields", "status_for"]
