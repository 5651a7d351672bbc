"""Deadline prioritization advisor.

The advisor only ever sees a bounded slice of open deadlines and its ranking
is advisory: nothing here recomputes or second-guesses the priorities beyond
checking the reply's shape.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from ..config import Settings
from ..records import Deadline, Priority
from .base import run_json_advisor

logger = logging.getLogger(__name__)

MAX_DEADLINES = 10
MAX_RANKED = 5

PRIORITIZER_INSTRUCTIONS = (
    "You are an MBA productivity expert. Analyse the list of upcoming non-completed academic deadlines. "
    "Weigh proximity to the current date and the general nature of MBA deadlines (exams and major "
    "assignments are High, small tasks are Medium or Low). Produce an overall_summary of exactly three "
    "motivating sentences: the first states the total number of urgent tasks, the second names the most "
    "critical task and gives a single action item, the third is a general encouraging statement. Produce a "
    "prioritized_list with the ids and a High/Medium/Low priority for the top 5 most urgent deadlines. "
    "Return only a JSON object."
)


class DeadlinePriorityItem(BaseModel):
    id: str
    title: str
    course: str
    due_date: str


class DeadlinePriorityRequest(BaseModel):
    current_date: str
    deadlines: List[DeadlinePriorityItem] = Field(default_factory=list, max_length=MAX_DEADLINES)


class PrioritizedDeadline(BaseModel):
    id: str
    priority: Priority


class DeadlinePriorityResponse(BaseModel):
    overall_summary: str
    prioritized_list: List[PrioritizedDeadline] = Field(default_factory=list, max_length=MAX_RANKED)


def build_request(deadlines: Sequence[Deadline], today: date) -> DeadlinePriorityRequest:
    items = [
        DeadlinePriorityItem(
            id=deadline.id,
            title=deadline.title,
            course=deadline.course_label,
            due_date=deadline.due_date.date().isoformat(),
        )
        for deadline in list(deadlines)[:MAX_DEADLINES]
    ]
    return DeadlinePriorityRequest(current_date=today.isoformat(), deadlines=items)


def prioritize_deadlines(
    request: DeadlinePriorityRequest,
    *,
    settings: Optional[Settings] = None,
) -> DeadlinePriorityResponse:
    return run_json_advisor(
        name="Deadline Prioritizer",
        instructions=PRIORITIZER_INSTRUCTIONS,
        context=request.model_dump(mode="json"),
        response_model=DeadlinePriorityResponse,
        settings=settings,
    )


__all__ = [
    "DeadlinePriorityItem",
    "DeadlinePriorityRequest",
    "DeadlinePriorityResponse",
    "MAX_DEADLINES",
    "MAX_RANKED",
    "PrioritizedDeadline",
    "build_request",
    "prioritize_deadlines",
]
