from __future__ import annotations

from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import create_engine, inspect, text

from backend.opsease.database import Base
from backend.opsease.migrations import (
    DEFAULT_LOCK_TIMEOUT,
    LOCK_TIMEOUT_ENV,
    _read_lock_timeout,
    detect_unversioned_revision,
    run_database_migrations,
)

BACKEND_DIR = Path(__file__).resolve().parents[1]


def _configure_alembic_script() -> ScriptDirectory:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    return ScriptDirectory.from_config(config)


def _current_version(url: str) -> str:
    engine = create_engine(url, connect_args={"check_same_thread": False})
    try:
        with engine.connect() as connection:
            return connection.scalar(text("SELECT version_num FROM alembic_version"))
    finally:
        engine.dispose()


def test_run_database_migrations_creates_schema_on_empty_database(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'fresh.db'}"
    monkeypatch.setenv("DATABASE_URL", url)

    run_database_migrations()

    engine = create_engine(url, connect_args={"check_same_thread": False})
    tables = set(inspect(engine).get_table_names())
    engine.dispose()
    assert {
        "alembic_version",
        "customers",
        "suppliers",
        "orders",
        "production_plans",
        "invoices",
        "ledger_entries",
        "expenses",
        "stock_items",
        "stock_transactions",
        "employees",
        "attendance",
        "worker_payments",
        "operational_metric_events",
    } <= tables
    assert _current_version(url) == _configure_alembic_script().get_current_head()


def test_run_database_migrations_upgrades_unrelated_existing_database(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'legacy.db'}"
    engine = create_engine(url, connect_args={"check_same_thread": False})
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE legacy_table (id INTEGER PRIMARY KEY)"))
    engine.dispose()

    monkeypatch.setenv("DATABASE_URL", url)
    run_database_migrations()

    engine = create_engine(url, connect_args={"check_same_thread": False})
    tables = inspect(engine).get_table_names()
    engine.dispose()
    assert "legacy_table" in tables
    assert "ledger_entries" in tables
    assert _current_version(url) == _configure_alembic_script().get_current_head()


def test_run_database_migrations_stamps_head_for_current_schema(tmp_path, monkeypatch) -> None:
    url = f"sqlite:///{tmp_path / 'current.db'}"
    engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    engine.dispose()

    monkeypatch.setenv("DATABASE_URL", url)
    run_database_migrations()

    assert _current_version(url) == _configure_alembic_script().get_current_head()


def test_read_lock_timeout_falls_back_on_invalid_values(monkeypatch) -> None:
    monkeypatch.setenv(LOCK_TIMEOUT_ENV, "soon")
    assert _read_lock_timeout() == DEFAULT_LOCK_TIMEOUT

    monkeypatch.setenv(LOCK_TIMEOUT_ENV, "-1")
    assert _read_lock_timeout() == DEFAULT_LOCK_TIMEOUT

    monkeypatch.setenv(LOCK_TIMEOUT_ENV, "2.5")
    assert _read_lock_timeout() == 2.5


def test_detect_unversioned_revision_requires_core_tables(tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'partial.db'}")
    with engine.begin() as connection:
        connection.execute(text("CREATE TABLE ledger_entries (id INTEGER PRIMARY KEY)"))
    assert detect_unversioned_revision(inspect(engine)) is None

    Base.metadata.create_all(bind=engine, checkfirst=True)
    assert detect_unversioned_revision(inspect(engine)) == "20241015_0001"
    engine.dispose()
