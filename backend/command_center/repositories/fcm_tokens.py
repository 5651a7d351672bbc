"""Database-backed registry of push notification tokens."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db.models import FcmTokenModel


class FcmTokenRepository:
    def register(self, session: Session, token: str) -> bool:
        """Store ``token`` once; returns ``True`` when it was not known before."""
        stmt = select(FcmTokenModel).where(FcmTokenModel.token == token)
        if session.execute(stmt).scalar_one_or_none() is not None:
            return False
        session.add(FcmTokenModel(token=token))
        session.flush()
        return True

    def list_tokens(self, session: Session) -> List[str]:
        stmt = select(FcmTokenModel.token).order_by(FcmTokenModel.created_at.asc())
        return list(session.execute(stmt).scalars())


fcm_tokens = FcmTokenRepository()

__all__ = ["FcmTokenRepository", "fcm_tokens"]
