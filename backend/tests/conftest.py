from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

import pytest

os.environ.setdefault("MBA_ADVISOR_MODE", "off")
os.environ.setdefault("MBA_LOCAL_TIMEZONE", "UTC")

from command_center.cache import view_cache  # noqa: E402
from command_center.config import get_settings  # noqa: E402
from command_center.db.base import Base  # noqa: E402
from command_center.db.session import dispose_engine, get_engine  # noqa: E402
from command_center.telemetry import clear_listeners  # noqa: E402

MOBILE_KEY = "test-mobile-key"
CRON_SECRET = "test-cron-secret"


@pytest.fixture(autouse=True)
def _isolated_state(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("MBA_ADVISOR_MODE", "off")
    monkeypatch.setenv("MBA_LOCAL_TIMEZONE", "UTC")
    monkeypatch.setenv("MOBILE_API_KEY", MOBILE_KEY)
    monkeypatch.setenv("CRON_SECRET", CRON_SECRET)
    get_settings.cache_clear()
    view_cache.clear()
    clear_listeners()
    yield
    view_cache.clear()
    clear_listeners()
    dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    db_path = tmp_path / "command_center.db"
    monkeypatch.setenv("MBA_DATABASE_URL", f"sqlite:///{db_path}")
    get_settings.cache_clear()
    dispose_engine()
    engine = get_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
    dispose_engine()


@pytest.fixture
def api_headers() -> dict[str, str]:
    return {"x-api-key": MOBILE_KEY}


@pytest.fixture
def cron_secret() -> str:
    return CRON_SECRET
