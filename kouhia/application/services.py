"""Application layer - Record store and undo journal facades."""

from collections.abc import Iterable, Sequence
from datetime import date

from sqlmodel import Session

from ..domain.entities import Entry, UndoJournalRow
from . import entry_service, undo_service


class RecordStore:
    """Application service for hours entries."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, entry_date: date | str, time: float) -> int:
        return entry_service.create_entry(self.session, entry_date, time)

    def set_deleted(self, entry_id: int, deleted: bool) -> Entry:
        return entry_service.set_entry_deleted(self.session, entry_id, deleted)

    def get(self, entry_id: int) -> Entry:
        return entry_service.get_entry(self.session, entry_id)

    def list(self, include_deleted: bool = False) -> Iterable[Entry]:
        return entry_service.list_entries(self.session, include_deleted)

    def delete(self, entry_ids: Iterable[int]) -> int:
        return len(entry_service.delete_entries(self.session, entry_ids))

    def delete_by_date(self, dates: Iterable[date | str]) -> int:
        return entry_service.delete_entries_by_date(self.session, dates)

    def tail(self, n: int | None = None) -> Sequence[Entry]:
        return entry_service.tail_entries(self.session, n)

    def balance(self) -> float:
        return entry_service.hour_balance(self.session)


class UndoJournal:
    """Application service for the undo journal."""

    def __init__(self, session: Session):
        self.session = session

    def pending(self) -> Iterable[UndoJournalRow]:
        return undo_service.pending(self.session)

    def get(self, row_id: int) -> UndoJournalRow:
        return undo_service.get_journal_row(self.session, row_id)

    def history(self, entry_id: int) -> list[UndoJournalRow]:
        return undo_service.entry_history(self.session, entry_id)

    def mark_processed(self, row_id: int) -> bool:
        return undo_service.mark_processed(self.session, row_id)

    def revert(self, row_id: int) -> UndoJournalRow:
        return undo_service.revert(self.session, row_id)

    def process_pending(self, limit: int | None = None) -> int:
        return undo_service.process_pending(self.session, limit)
