"""Database-backed repository for the reflection journal."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import JournalEntryModel
from ..records import JournalEntry


class JournalRepository:
    def list(self, session: Session, *, limit: Optional[int] = None) -> List[JournalEntry]:
        stmt = select(JournalEntryModel).order_by(JournalEntryModel.entry_date.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return [JournalEntry.model_validate(model) for model in session.execute(stmt).scalars()]

    def upsert(self, session: Session, entry_date: date, content: str) -> JournalEntry:
        """Insert the entry for ``entry_date`` or overwrite the existing content."""
        model = self._find(session, entry_date)
        if model is None:
            model = JournalEntryModel(entry_date=entry_date, content=content)
            session.add(model)
        else:
            model.content = content
        session.flush()
        return JournalEntry.model_validate(model)

    def _find(self, session: Session, entry_date: date) -> Optional[JournalEntryModel]:
        stmt = select(JournalEntryModel).where(JournalEntryModel.entry_date == entry_date)
        return session.execute(stmt).scalar_one_or_none()


journal = JournalRepository()

__all__ = ["JournalRepository", "journal"]
