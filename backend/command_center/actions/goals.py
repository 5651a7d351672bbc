"""Objective and key-result mutations."""

from __future__ import annotations

from typing import Iterable, Optional

from ..repositories import objectives
from ..results import ActionResult
from ..schemas import ObjectiveInput
from ..views import GOALS
from .base import apply_mutation, validate


def add_objective(
    title: Optional[str],
    semester: Optional[str] = None,
    key_results: Optional[Iterable[str]] = None,
) -> ActionResult:
    if not title or not title.strip():
        return ActionResult.invalid("title", "Objective title is required.")
    data, failure = validate(
        ObjectiveInput,
        "At least one key result is required.",
        dict(
            title=title,
            semester=semester,
            key_results=list(key_results or []),
        ),
    )
    if failure:
        return failure
    return apply_mutation(
        "objective.added",
        lambda session: objectives.add(session, data),
        paths=[GOALS],
        message="Objective added successfully!",
        payload=lambda objective: {
            "objective_id": objective.id,
            "key_result_count": len(objective.key_results),
            "objective": objective.model_dump(mode="json"),
        },
    )


def toggle_key_result(key_result_id: Optional[str], current_state: bool) -> ActionResult:
    if not key_result_id:
        return ActionResult.invalid("id", "Key Result ID is missing.")
    return apply_mutation(
        "key_result.toggled",
        lambda session: objectives.set_key_result_completed(session, key_result_id, not current_state),
        paths=[GOALS],
        message="Key result updated.",
        payload=lambda result: {"key_result_id": result.id, "is_completed": result.is_completed},
    )


def delete_objective(objective_id: Optional[str]) -> ActionResult:
    """Delete an objective together with all of its key results."""
    if not objective_id:
        return ActionResult.invalid("id", "Objective ID is missing.")
    return apply_mutation(
        "objective.deleted",
        lambda session: objectives.delete(session, objective_id),
        paths=[GOALS],
        message="Objective deleted.",
        payload=lambda _: {"objective_id": objective_id},
    )


__all__ = ["add_objective", "delete_objective", "toggle_key_result"]
