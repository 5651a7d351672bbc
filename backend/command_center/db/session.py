"""Engine and session helpers for the record store.

Both SQLite and PostgreSQL URLs are accepted. SQLite connections switch on
foreign-key enforcement so ``ON DELETE`` rules match PostgreSQL.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import Settings, get_settings

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker[Session]] = None

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def engine_options(settings: Settings) -> Dict[str, Any]:
    """Keyword arguments for ``create_engine`` derived from ``settings``."""
    database_url = settings.database_url or ""
    options: Dict[str, Any] = {"echo": settings.database_echo}
    if not _is_sqlite(database_url):
        options.update(
            pool_pre_ping=True,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        return options

    options["connect_args"] = {"check_same_thread": False}
    if database_url in IN_MEMORY_URLS:
        # A single shared connection, otherwise each session gets an empty database.
        options["poolclass"] = StaticPool
    return options


def _enforce_foreign_keys(dbapi_connection, _connection_record) -> None:  # type: ignore[no-untyped-def]
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def get_engine() -> Engine:
    """Build the process-wide engine on first use.

    Raises ``RuntimeError`` when ``MBA_DATABASE_URL`` is not configured.
    """
    global _engine, _session_factory
    if _engine is not None:
        return _engine

    settings = get_settings()
    if not settings.database_url:
        raise RuntimeError("MBA_DATABASE_URL must be configured before using the database.")

    engine = create_engine(settings.database_url, **engine_options(settings))
    if _is_sqlite(settings.database_url):
        event.listen(engine, "connect", _enforce_foreign_keys)

    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return engine


def get_session_factory() -> sessionmaker[Session]:
    if _session_factory is None:
        get_engine()
    assert _session_factory is not None
    return _session_factory


@contextmanager
def session_scope(*, commit: bool = True) -> Iterator[Session]:
    """Yield a session for one operation.

    With ``commit=False`` the session is only read from; either way any
    exception rolls it back before propagating.
    """
    session = get_session_factory()()
    try:
        yield session
        if commit:
            session.commit()
    except Exception:  # noqa: BLE001
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "dispose_engine",
    "engine_options",
    "get_engine",
    "get_session_factory",
    "session_scope",
]
