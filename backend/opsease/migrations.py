"""Bring the OpsEase schema to the Alembic head before the API serves traffic.

Several workers may boot at once, so the upgrade runs under an exclusive file
lock next to ``alembic.ini``. Databases built with ``Base.metadata.create_all``
(the test suite, early installs) have no ``alembic_version`` table; they are
recognised by their tables and stamped instead of being migrated twice.
"""

from __future__ import annotations

import errno
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, NamedTuple, Optional, Sequence

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine.reflection import Inspector

from .database import SQLALCHEMY_DATABASE_URL

LOGGER = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent
LOCK_FILENAME = ".alembic-migration.lock"
LOCK_RETRY_DELAY = 0.25
LOCK_TIMEOUT_ENV = "ALEMBIC_MIGRATION_LOCK_TIMEOUT"
DEFAULT_LOCK_TIMEOUT = 30.0

if os.name == "posix":  # pragma: no cover - platform specific
    import fcntl
else:  # pragma: no cover - platform specific
    import msvcrt


class SchemaSentinel(NamedTuple):
    revision: str
    matches: Callable[[Inspector], bool]


# Newest first.
SCHEMA_SENTINELS: Sequence[SchemaSentinel] = (
    SchemaSentinel(
        "20241015_0001",
        lambda inspector: all(
            inspector.has_table(name) for name in ("ledger_entries", "invoices", "orders")
        ),
    ),
)


def _read_lock_timeout() -> float:
    raw = os.getenv(LOCK_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_LOCK_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        LOGGER.warning(
            "Ignoring %s=%r; waiting %.1f seconds for the migration lock",
            LOCK_TIMEOUT_ENV,
            raw,
            DEFAULT_LOCK_TIMEOUT,
        )
        return DEFAULT_LOCK_TIMEOUT
    return value


def _lock_is_held_elsewhere(error: OSError) -> bool:
    if isinstance(error, BlockingIOError):
        return True
    if error.errno in {errno.EACCES, errno.EAGAIN, errno.EBUSY}:
        return True
    # ERROR_SHARING_VIOLATION (32) and ERROR_LOCK_VIOLATION (33) on Windows.
    return getattr(error, "winerror", None) in {32, 33}


def _try_lock(handle) -> None:
    if os.name == "posix":  # pragma: no cover - platform specific
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    else:  # pragma: no cover - platform specific
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)


def _unlock(handle) -> None:
    if os.name == "posix":  # pragma: no cover - platform specific
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
    else:  # pragma: no cover - platform specific
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)


@contextmanager
def _migration_lock(path: Path, *, timeout: float) -> Iterator[None]:
    path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout
    with path.open("a+") as handle:
        while True:
            try:
                _try_lock(handle)
                break
            except OSError as error:
                if not _lock_is_held_elsewhere(error):
                    raise
                if time.monotonic() >= deadline:
                    raise TimeoutError(
                        f"Another process kept {path.name} locked for {timeout:.1f}s"
                    ) from error
                time.sleep(LOCK_RETRY_DELAY)
        LOGGER.debug("Holding migration lock %s", path)
        try:
            yield
        finally:
            try:
                _unlock(handle)
            except OSError:  # pragma: no cover - released when the handle closes
                LOGGER.debug("Could not release migration lock %s", path, exc_info=True)


def detect_unversioned_revision(inspector: Inspector) -> Optional[str]:
    """Return the revision an unversioned schema corresponds to, if any."""

    for sentinel in SCHEMA_SENTINELS:
        if sentinel.matches(inspector):
            return sentinel.revision
    return None


def _alembic_config(database_url: str) -> Config:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url)
    return config


def run_database_migrations() -> None:
    """Upgrade the configured database to the latest revision."""

    # env.py imports ``backend.opsease``; make the project root importable.
    project_root = str(BACKEND_DIR.parent)
    if project_root not in sys.path:
        sys.path.insert(0, project_root)

    database_url = os.getenv("DATABASE_URL") or SQLALCHEMY_DATABASE_URL
    config = _alembic_config(database_url)
    head_revision = ScriptDirectory.from_config(config).get_current_head()

    with _migration_lock(BACKEND_DIR / LOCK_FILENAME, timeout=_read_lock_timeout()):
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        engine = create_engine(database_url, connect_args=connect_args)
        try:
            inspector = inspect(engine)
            versioned = inspector.has_table("alembic_version")
            detected = None if versioned else detect_unversioned_revision(inspector)
        finally:
            engine.dispose()

        if detected is not None:
            LOGGER.info("Existing OpsEase tables match revision %s; stamping", detected)
            command.stamp(config, detected)
            if detected == head_revision:
                return

        LOGGER.info("Upgrading database schema to %s", head_revision)
        command.upgrade(config, "head")
