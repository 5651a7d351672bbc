"""Journal mutations."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..config import Settings, get_settings
from ..repositories import journal
from ..results import ActionResult
from ..schemas import JournalEntryInput
from ..views import JOURNAL
from .base import apply_mutation, validate


def local_today(settings: Optional[Settings] = None, *, now: Optional[datetime] = None) -> date:
    """Today's date in the configured local timezone."""
    resolved = settings or get_settings()
    try:
        zone = ZoneInfo(resolved.local_timezone)
    except ZoneInfoNotFoundError as exc:
        raise RuntimeError(f"Unknown MBA_LOCAL_TIMEZONE '{resolved.local_timezone}'") from exc
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(zone).date()


def save_journal_entry(entry_date: Union[date, str, None], content: Optional[str]) -> ActionResult:
    """Create or overwrite the single entry for ``entry_date``."""
    data, failure = validate(
        JournalEntryInput,
        "Missing date or content.",
        dict(
            entry_date=entry_date,
            content=content,
        ),
    )
    if failure:
        return failure
    return apply_mutation(
        "journal.saved",
        lambda session: journal.upsert(session, data.entry_date, data.content),
        paths=[JOURNAL],
        message="Entry saved!",
        payload=lambda entry: {
            "entry_id": entry.id,
            "entry_date": entry.entry_date.isoformat(),
            "entry": entry.model_dump(mode="json"),
        },
    )


__all__ = ["local_today", "save_journal_entry"]
