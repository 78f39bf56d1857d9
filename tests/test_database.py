from datetime import date

import pytest
from sqlalchemy import inspect, text
from sqlmodel import Session

from kouhia.application.entry_service import (
    create_entry,
    list_entries,
    set_entry_deleted,
)
from kouhia.application.undo_service import entry_history
from kouhia.infrastructure.database import repositories
from kouhia.infrastructure.database.database import ConstraintViolation, transaction
from kouhia.infrastructure.database.undo_models import UndoLogRecord


def test_schema_columns(engine):
    inspector = inspect(engine)

    hours = {column["name"]: column for column in inspector.get_columns("hours")}
    assert list(hours) == ["entry_id", "date", "time", "deleted"]
    assert all(not hours[name]["nullable"] for name in ("date", "time", "deleted"))

    undolog = {column["name"]: column for column in inspector.get_columns("undolog")}
    assert list(undolog) == ["row_id", "entry_id", "deleted_old", "processed"]

    (foreign_key,) = inspector.get_foreign_keys("undolog")
    assert foreign_key["referred_table"] == "hours"
    assert foreign_key["constrained_columns"] == ["entry_id"]
    assert foreign_key["referred_columns"] == ["entry_id"]


def test_deleted_flag_domain_is_enforced(engine, session: Session):
    if engine.dialect.name != "sqlite":
        pytest.skip("Boolean domain check only applies to SQLite")

    with pytest.raises(ConstraintViolation):
        session.connection().execute(
            text(
                "INSERT INTO hours (date, time, deleted) VALUES ('2024-01-01', 1.0, 2)"
            )
        )
    session.rollback()


def test_dangling_journal_reference_is_rejected(session: Session):
    session.add(UndoLogRecord(entry_id=404, deleted_old=True))
    with pytest.raises(ConstraintViolation):
        session.flush()
    session.rollback()


def test_failed_journal_append_aborts_create(session: Session, monkeypatch):
    def _fail(self, entry_id, deleted_old):
        raise RuntimeError("journal unavailable")

    monkeypatch.setattr(repositories.UndoJournalRepository, "append", _fail)

    with pytest.raises(RuntimeError):
        create_entry(session, date(2024, 1, 1), 8.0)

    monkeypatch.undo()
    assert list(list_entries(session, include_deleted=True)) == []


def test_failed_journal_append_aborts_update(session: Session, monkeypatch):
    entry_id = create_entry(session, date(2024, 1, 1), 8.0)

    def _fail(self, entry_id, deleted_old):
        raise RuntimeError("journal unavailable")

    monkeypatch.setattr(repositories.UndoJournalRepository, "append", _fail)

    with pytest.raises(RuntimeError):
        set_entry_deleted(session, entry_id, True)

    monkeypatch.undo()
    assert [entry.deleted for entry in list_entries(session, include_deleted=True)] == [
        False
    ]
    assert len(entry_history(session, entry_id)) == 1


def test_transaction_rolls_back_on_error(session: Session):
    with pytest.raises(ValueError):
        with transaction(session):
            repositories.EntryRepository(session).add(date(2024, 1, 1), 1.0)
            raise ValueError("abort")

    assert list(list_entries(session, include_deleted=True)) == []
