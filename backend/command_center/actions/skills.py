"""Skill mutations."""

from __future__ import annotations

from typing import Optional

from ..repositories import skills
from ..results import ActionResult
from ..schemas import ConfidenceInput, SkillDetailsInput, SkillInput
from ..views import SKILLS
from .base import apply_mutation, validate


def add_skill(
    name: Optional[str],
    type: Optional[str],
    notes: Optional[str] = None,
    confidence: Optional[int] = 1,
) -> ActionResult:
    data, failure = validate(
        SkillInput,
        "Skill name and type are required.",
        dict(
            name=name,
            type=type,
            notes=notes,
            confidence=confidence if confidence is not None else 1,
        ),
    )
    if failure:
        return failure
    return apply_mutation(
        "skill.added",
        lambda session: skills.add(session, data),
        paths=[SKILLS],
        message="Skill added successfully!",
        payload=lambda skill: {"skill_id": skill.id, "skill": skill.model_dump(mode="json")},
    )


def update_skill_details(
    skill_id: Optional[str],
    name: Optional[str],
    type: Optional[str],
    notes: Optional[str] = None,
) -> ActionResult:
    if not skill_id:
        return ActionResult.invalid("id", "Skill ID is missing.")
    data, failure = validate(SkillDetailsInput, "Missing required fields.", dict(name=name, type=type, notes=notes))
    if failure:
        return failure
    return apply_mutation(
        "skill.updated",
        lambda session: skills.update_details(session, skill_id, data),
        paths=[SKILLS],
        message="Skill updated.",
        payload=lambda skill: {"skill_id": skill.id, "skill": skill.model_dump(mode="json")},
    )


def update_skill_confidence(skill_id: Optional[str], level: Optional[int]) -> ActionResult:
    """Set the latest confidence and append the history row in one transaction."""
    if not skill_id:
        return ActionResult.invalid("id", "Skill ID is missing.")
    data, failure = validate(
        ConfidenceInput,
        "Confidence must be between 1 and 5.",
        dict(skill_id=skill_id, level=level),
    )
    if failure:
        return failure
    return apply_mutation(
        "skill.confidence_updated",
        lambda session: skills.record_confidence(session, data.skill_id, data.level),
        paths=[SKILLS],
        message="Confidence updated.",
        payload=lambda skill: {"skill_id": skill.id, "level": skill.latest_confidence},
    )


def delete_skill(skill_id: Optional[str]) -> ActionResult:
    if not skill_id:
        return ActionResult.invalid("id", "Skill ID is missing.")
    return apply_mutation(
        "skill.deleted",
        lambda session: skills.delete(session, skill_id),
        paths=[SKILLS],
        message="Skill deleted.",
        payload=lambda _: {"skill_id": skill_id},
    )


__all__ = ["add_skill", "delete_skill", "update_skill_confidence", "update_skill_details"]
