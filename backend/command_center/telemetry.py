"""Structured events for mutations and reminder runs.

Each event is written as one ``EVENT {...}`` JSON log line and handed to any
in-process listeners. Payloads carry identifiers and counts only; nested
records are dropped so log lines stay small.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from threading import RLock
from typing import Any, Callable, Dict, List, Mapping

logger = logging.getLogger("command_center.telemetry")

Listener = Callable[["TelemetryEvent"], None]


@dataclass(frozen=True)
class TelemetryEvent:
    name: str
    payload: Dict[str, Any]
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc), compare=False)


_listeners: List[Listener] = []
_lock = RLock()


def register_listener(listener: Listener) -> None:
    with _lock:
        _listeners.append(listener)


def clear_listeners() -> None:
    with _lock:
        _listeners.clear()


def event_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Keep the scalar entries of ``data`` and lists of scalars (such as view paths)."""
    kept: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            if all(not isinstance(item, (dict, list, tuple)) for item in value):
                kept[key] = [_normalize(item) for item in value]
        elif not isinstance(value, dict):
            kept[key] = _normalize(value)
    return kept


def emit_event(name: str, **fields: Any) -> TelemetryEvent:
    event = TelemetryEvent(name=name, payload=event_fields(fields))

    with _lock:
        listeners = list(_listeners)
    for listener in listeners:
        try:
            listener(event)
        except Exception:  # noqa: BLE001
            logger.exception("Telemetry listener failed for %s", name)

    logger.info("EVENT %s", json.dumps({"event": name, **event.payload}, default=str))
    return event


def _normalize(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


__all__ = [
    "TelemetryEvent",
    "clear_listeners",
    "emit_event",
    "event_fields",
    "register_listener",
]
