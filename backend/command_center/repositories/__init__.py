"""Repositories that translate between ORM rows and domain records."""

from .case_studies import CaseStudyRepository, case_studies
from .courses import CourseRepository, courses
from .deadlines import DeadlineRepository, deadlines
from .fcm_tokens import FcmTokenRepository, fcm_tokens
from .goals import ObjectiveRepository, objectives
from .journal import JournalRepository, journal
from .skills import SkillRepository, skills

__all__ = [
    "CaseStudyRepository",
    "CourseRepository",
    "DeadlineRepository",
    "FcmTokenRepository",
    "JournalRepository",
    "ObjectiveRepository",
    "SkillRepository",
    "case_studies",
    "courses",
    "deadlines",
    "fcm_tokens",
    "journal",
    "objectives",
    "skills",
]
