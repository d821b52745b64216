"""Tests for database engine and session management."""

import pytest
from sqlalchemy import inspect

from periodic_costing.models import PeriodRecord
from periodic_costing.services import costing_service
from periodic_costing.services.database import (
    create_database_engine,
    init_database,
    reset_database,
    session_scope,
)


class TestEngineSetup:
    """Tests for engine creation and table initialization."""

    def test_init_creates_costing_tables(self):
        engine = create_database_engine("sqlite:///:memory:")
        try:
            init_database(engine)
            tables = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

        assert {
            "period_records",
            "consumption_ledger_entries",
            "cost_allocation_entries",
        } <= tables

    def test_sqlite_foreign_keys_enabled(self):
        engine = create_database_engine("sqlite:///:memory:")
        try:
            with engine.connect() as connection:
                result = connection.exec_driver_sql("PRAGMA foreign_keys").scalar()
        finally:
            engine.dispose()

        assert result == 1

    def test_reset_requires_confirmation(self):
        with pytest.raises(ValueError):
            reset_database()


class TestSessionScope:
    """Tests for session_scope() transaction handling."""

    def test_commits_on_success(self, test_db, work_period):
        with session_scope() as session:
            session.add(costing_service.create_period_record(work_period, 1))

        assert test_db().query(PeriodRecord).count() == 1

    def test_rolls_back_on_error(self, test_db, work_period):
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(costing_service.create_period_record(work_period, 1))
                session.flush()
                raise RuntimeError("abort")

        assert test_db().query(PeriodRecord).count() == 0
