"""Mutation operations exposed to the dashboard and mobile routes."""

from .case_studies import (
    create_case_study,
    delete_case_study,
    rate_case_study,
    recommend_frameworks,
    update_case_study,
)
from .courses import add_course, add_module, add_session, delete_session, update_course
from .deadlines import (
    DeadlinePrioritySummary,
    add_deadline,
    delete_deadline,
    get_deadline_priority_summary,
    toggle_deadline_completion,
    update_deadline,
)
from .goals import add_objective, delete_objective, toggle_key_result
from .journal import local_today, save_journal_entry
from .skills import add_skill, delete_skill, update_skill_confidence, update_skill_details

__all__ = [
    "DeadlinePrioritySummary",
    "add_course",
    "add_deadline",
    "add_module",
    "add_objective",
    "add_session",
    "add_skill",
    "create_case_study",
    "delete_case_study",
    "delete_deadline",
    "delete_objective",
    "delete_session",
    "delete_skill",
    "get_deadline_priority_summary",
    "local_today",
    "rate_case_study",
    "recommend_frameworks",
    "save_journal_entry",
    "toggle_deadline_completion",
    "toggle_key_result",
    "update_case_study",
    "update_course",
    "update_deadline",
    "update_skill_confidence",
    "update_skill_details",
]
