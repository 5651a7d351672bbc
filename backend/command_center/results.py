"""Structured outcomes returned by every mutation operation."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

FailureKind = Literal["validation", "store", "delegate", "not_found"]


class ActionResult(BaseModel):
    success: bool
    message: str
    kind: Optional[FailureKind] = None
    errors: Dict[str, List[str]] = Field(default_factory=dict)
    data: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, message: str, **data: Any) -> "ActionResult":
        return cls(success=True, message=message, data=data or None)

    @classmethod
    def validation_failure(cls, exc: ValidationError, message: str) -> "ActionResult":
        return cls(success=False, message=message, kind="validation", errors=field_errors(exc))

    @classmethod
    def invalid(cls, field: str, error: str) -> "ActionResult":
        return cls(success=False, message=error, kind="validation", errors={field: [error]})

    @classmethod
    def not_found(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message, kind="not_found")

    @classmethod
    def store_failure(cls, exc: Exception) -> "ActionResult":
        return cls(success=False, message=str(exc) or exc.__class__.__name__, kind="store")

    @classmethod
    def delegate_failure(cls, message: str) -> "ActionResult":
        return cls(success=False, message=message, kind="delegate")


def field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Flatten pydantic errors into ``{"field.path": [messages]}``."""
    flattened: Dict[str, List[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        flattened.setdefault(location, []).append(message)
    return flattened


__all__ = ["ActionResult", "FailureKind", "field_errors"]
