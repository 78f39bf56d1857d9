"""Infrastructure layer - Repository implementations.

Repositories only flush. Committing is left to the caller so that an entry
write and its journal row always land in the same transaction.
"""

from collections.abc import Callable, Iterable, Iterator
from datetime import date
from typing import Generic, TypeVar

from sqlalchemy import func, update
from sqlmodel import Session, col, select
from sqlmodel.sql.expression import SelectOfScalar

from ...domain.constants import CREATION_DELETED_OLD
from ...domain.entities import Entry as DomainEntry
from ...domain.entities import UndoJournalRow, format_date
from ...domain.exceptions import NotFoundError
from .models import HoursRecord
from .undo_models import UndoLogRecord
from .undo_replay import is_undo_replay

RecordT = TypeVar("RecordT", HoursRecord, UndoLogRecord)
DomainT = TypeVar("DomainT")


class QueryListing(Generic[RecordT, DomainT]):
    """A lazy, restartable view over a select statement.

    The query runs each time the listing is iterated, so iterating again
    after further writes sees the current rows.
    """

    def __init__(
        self,
        session: Session,
        statement: SelectOfScalar[RecordT],
        to_domain: Callable[[RecordT], DomainT],
    ):
        self.session = session
        self.statement = statement
        self.to_domain = to_domain

    def __iter__(self) -> Iterator[DomainT]:
        for record in self.session.exec(self.statement):
            yield self.to_domain(record)


class UndoJournalRepository:
    """Repository for undo journal persistence operations."""

    def __init__(self, session: Session):
        self.session = session

    def append(self, entry_id: int, deleted_old: bool) -> UndoJournalRow:
        """Append a journal row. Only called from the entry write path."""
        record = UndoLogRecord(entry_id=entry_id, deleted_old=deleted_old)
        self.session.add(record)
        self.session.flush()
        return record.to_domain()

    def find_by_id(self, row_id: int) -> UndoJournalRow | None:
        record = self.session.get(UndoLogRecord, row_id)
        return record.to_domain() if record else None

    def get(self, row_id: int) -> UndoJournalRow:
        row = self.find_by_id(row_id)
        if row is None:
            raise NotFoundError(f"Undo journal row {row_id} not found")
        return row

    def pending(self) -> QueryListing[UndoLogRecord, UndoJournalRow]:
        """Unprocessed rows, oldest first."""
        statement = (
            select(UndoLogRecord)
            .where(col(UndoLogRecord.processed).is_(False))
            .order_by(col(UndoLogRecord.row_id))
        )
        return QueryListing(self.session, statement, UndoLogRecord.to_domain)

    def find_by_entry(self, entry_id: int) -> list[UndoJournalRow]:
        records = self.session.exec(
            select(UndoLogRecord)
            .where(UndoLogRecord.entry_id == entry_id)
            .order_by(col(UndoLogRecord.row_id))
        ).all()
        return [record.to_domain() for record in records]

    def claim(self, row_id: int) -> bool:
        """Flip ``processed`` from false to true.

        Returns False when the row was already processed. The conditional
        update is the only place the transition happens, so two concurrent
        claims on one row cannot both succeed.
        """
        result = self.session.exec(
            update(UndoLogRecord)
            .where(
                col(UndoLogRecord.row_id) == row_id,
                col(UndoLogRecord.processed).is_(False),
            )
            .values(processed=True)
        )
        return result.rowcount == 1


class EntryRepository:
    """Repository for hours persistence operations.

    Every insert and every update of ``deleted`` appends an undo journal row
    unless the session is replaying an undo.
    """

    def __init__(self, session: Session, journal: UndoJournalRepository | None = None):
        self.session = session
        self.journal = journal or UndoJournalRepository(session)

    def _journal_write(self, entry_id: int, deleted_old: bool) -> None:
        if is_undo_replay(self.session):
            return
        self.journal.append(entry_id, deleted_old)

    def add(self, entry_date: date, time: float) -> DomainEntry:
        record = HoursRecord(date=format_date(entry_date), time=time, deleted=False)
        self.session.add(record)
        self.session.flush()
        entry = record.to_domain()
        self._journal_write(entry.entry_id, CREATION_DELETED_OLD)
        return entry

    def _lock(self, entry_id: int) -> HoursRecord | None:
        # Reread under a row lock so deleted_old is the committed value
        return self.session.exec(
            select(HoursRecord)
            .where(col(HoursRecord.entry_id) == entry_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).first()

    def set_deleted(self, entry_id: int, deleted: bool) -> DomainEntry:
        record = self._lock(entry_id)
        if record is None:
            raise NotFoundError(f"Entry {entry_id} not found")

        deleted_old = record.deleted
        # Journaled even when the value does not change
        record.deleted = deleted
        self.session.add(record)
        self.session.flush()
        self._journal_write(entry_id, deleted_old)
        return record.to_domain()

    def find_by_id(self, entry_id: int) -> DomainEntry | None:
        record = self.session.get(HoursRecord, entry_id)
        return record.to_domain() if record else None

    def get(self, entry_id: int) -> DomainEntry:
        entry = self.find_by_id(entry_id)
        if entry is None:
            raise NotFoundError(f"Entry {entry_id} not found")
        return entry

    def find_all(
        self, include_deleted: bool = False
    ) -> QueryListing[HoursRecord, DomainEntry]:
        statement = select(HoursRecord).order_by(col(HoursRecord.entry_id))
        if not include_deleted:
            statement = statement.where(col(HoursRecord.deleted).is_(False))
        return QueryListing(self.session, statement, HoursRecord.to_domain)

    def find_ids_by_dates(self, dates: Iterable[date]) -> list[int]:
        date_strings = sorted({format_date(d) for d in dates})
        if not date_strings:
            return []
        ids = self.session.exec(
            select(HoursRecord.entry_id)
            .where(col(HoursRecord.date).in_(date_strings))
            .order_by(col(HoursRecord.entry_id))
        ).all()
        return [entry_id for entry_id in ids if entry_id is not None]

    def latest(self, n: int) -> list[DomainEntry]:
        """Newest non-deleted entries first."""
        records = self.session.exec(
            select(HoursRecord)
            .where(col(HoursRecord.deleted).is_(False))
            .order_by(col(HoursRecord.entry_id).desc())
            .limit(n)
        ).all()
        return [record.to_domain() for record in records]

    def total_time(self) -> float:
        total = self.session.exec(
            select(func.coalesce(func.sum(HoursRecord.time), 0.0)).where(
                col(HoursRecord.deleted).is_(False)
            )
        ).one()
        return float(total)
