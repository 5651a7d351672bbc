"""Shared mutation pipeline: validate, write once, revalidate views, report."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from ..cache import view_cache
from ..db.session import session_scope
from ..results import ActionResult
from ..telemetry import emit_event

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
ResultT = TypeVar("ResultT")

Paths = Union[Iterable[str], Callable[[Any], Iterable[str]]]


def validate(
    schema: Type[InputT],
    message: str,
    fields: Mapping[str, Any],
) -> Tuple[Optional[InputT], Optional[ActionResult]]:
    """Parse ``fields`` into ``schema``; on failure return a field-tagged result instead."""
    try:
        return schema.model_validate(fields), None
    except ValidationError as exc:
        return None, ActionResult.validation_failure(exc, message)


def apply_mutation(
    event: str,
    write: Callable[[Session], ResultT],
    *,
    paths: Paths,
    message: str,
    payload: Optional[Callable[[ResultT], Dict[str, Any]]] = None,
) -> ActionResult:
    """Run ``write`` in one transaction, then invalidate the views that show it.

    ``LookupError`` from the repositories becomes a not-found result; any other
    store error is logged and surfaced with its raw message. Views are only
    invalidated once the commit has returned.
    """
    try:
        with session_scope() as session:
            outcome = write(session)
    except LookupError as exc:
        logger.info("%s rejected: %s", event, exc)
        return ActionResult.not_found(str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("%s failed", event)
        return ActionResult.store_failure(exc)

    resolved_paths = list(paths(outcome) if callable(paths) else paths)
    view_cache.invalidate_many(resolved_paths)
    data = payload(outcome) if payload else {}
    emit_event(event, paths=resolved_paths, **data)
    return ActionResult.ok(message, **data)


__all__ = ["apply_mutation", "validate"]
