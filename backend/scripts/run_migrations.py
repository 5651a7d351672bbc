"""Bring the record store schema up to date before the API starts.

The database is probed with ``SELECT 1`` until it answers (containers often
start the app before PostgreSQL accepts connections), then Alembic upgrades
to the requested revision. ``--sql`` renders the migration SQL instead of
applying it and skips the probe.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError

LOGGER = logging.getLogger("command_center.migrations")
BACKEND_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG = BACKEND_ROOT / "alembic.ini"
DEFAULT_TIMEOUT = int(os.getenv("MBA_DB_MIGRATION_TIMEOUT", "60"))
DEFAULT_POLL_INTERVAL = float(os.getenv("MBA_DB_MIGRATION_POLL_INTERVAL", "3"))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Apply record store migrations once the database is reachable.")
    parser.add_argument("--revision", default=os.getenv("MBA_DB_MIGRATION_REVISION", "head"))
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT, help="Seconds to wait for the database.")
    parser.add_argument("--poll-interval", type=float, default=DEFAULT_POLL_INTERVAL)
    parser.add_argument("--config", default=str(DEFAULT_CONFIG), help="Path to alembic.ini.")
    parser.add_argument("--database-url", default=None, help="Overrides MBA_DATABASE_URL.")
    parser.add_argument("--sql", action="store_true", help="Print the migration SQL instead of running it.")
    return parser.parse_args(argv)


def get_alembic_config(config_path: str = str(DEFAULT_CONFIG)) -> Config:
    config = Config(config_path)
    config.set_main_option("script_location", str(BACKEND_ROOT / "alembic"))
    return config


def resolve_database_url(config: Config, override: Optional[str] = None) -> str:
    """Pick the URL to migrate: ``override``, then ``sqlalchemy.url``, then ``MBA_DATABASE_URL``.

    The chosen URL is written back into ``config`` for ``alembic/env.py``.
    """
    url = override or config.get_main_option("sqlalchemy.url") or os.getenv("MBA_DATABASE_URL")
    if not url:
        raise RuntimeError("MBA_DATABASE_URL must be set before running migrations.")
    # ConfigParser interpolation treats % as a directive.
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    return url


def _probe(engine: Engine) -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def wait_for_database(database_url: str, *, timeout: int, poll_interval: float) -> None:
    """Block until the database answers or ``timeout`` seconds pass.

    Connection errors are retried; any other SQLAlchemy error aborts at once.
    At least one probe is always made.
    """
    give_up_at = time.monotonic() + timeout
    engine = create_engine(database_url, pool_pre_ping=True)
    attempts = 0
    last_error: Optional[Exception] = None
    try:
        while True:
            attempts += 1
            try:
                _probe(engine)
            except OperationalError as exc:
                last_error = exc
                LOGGER.warning("Database not reachable (attempt %s): %s", attempts, exc)
            except SQLAlchemyError as exc:
                last_error = exc
                LOGGER.error("Database probe failed: %s", exc)
                break
            else:
                LOGGER.info("Database reachable after %s attempt(s).", attempts)
                return
            if time.monotonic() >= give_up_at:
                break
            time.sleep(poll_interval)
    finally:
        engine.dispose()

    raise RuntimeError(f"Database did not become ready within {timeout}s.") from last_error


def run_migrations(
    revision: str = "head",
    *,
    timeout: int = DEFAULT_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    config: Optional[Config] = None,
    database_url: Optional[str] = None,
    sql_only: bool = False,
) -> None:
    config = config or get_alembic_config()
    url = resolve_database_url(config, database_url)
    if sql_only:
        command.upgrade(config, revision, sql=True)
        return
    wait_for_database(url, timeout=timeout, poll_interval=poll_interval)
    LOGGER.info("Upgrading schema to %s", revision)
    command.upgrade(config, revision)
    LOGGER.info("Schema is at %s.", revision)


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(
        level=os.getenv("MBA_DB_MIGRATION_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    args = parse_args(argv)
    try:
        run_migrations(
            args.revision,
            timeout=args.timeout,
            poll_interval=args.poll_interval,
            config=get_alembic_config(args.config),
            database_url=args.database_url,
            sql_only=args.sql,
        )
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Migration run failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
