"""Advisory integrations with the hosted language model."""

from .base import AdvisorError

__all__ = ["AdvisorError"]
