"""Database-backed undo journal service.

Every entry mutation leaves an ``undolog`` row with the entry's previous
deleted flag. Reverting a row writes that flag back, without journaling the
write, and marks the row processed.
"""

from typing import Final

from sqlmodel import Session

from ..domain.entities import UndoJournalRow
from ..domain.exceptions import NotFoundError, StaleRevertError
from ..infrastructure.database.database import transaction
from ..infrastructure.database.repositories import (
    EntryRepository,
    QueryListing,
    UndoJournalRepository,
)
from ..infrastructure.database.undo_models import UndoLogRecord
from ..infrastructure.database.undo_replay import undo_replay
from ..logging_config import get_logger
from ..logging_utils import log_database_operation

logger: Final = get_logger(__name__)


def pending(session: Session) -> QueryListing[UndoLogRecord, UndoJournalRow]:
    """Unprocessed journal rows, oldest first. The query runs when iterated."""
    return UndoJournalRepository(session).pending()


def get_journal_row(session: Session, row_id: int) -> UndoJournalRow:
    return UndoJournalRepository(session).get(row_id)


def entry_history(session: Session, entry_id: int) -> list[UndoJournalRow]:
    """All journal rows of an entry, oldest first."""
    return UndoJournalRepository(session).find_by_entry(entry_id)


def mark_processed(session: Session, row_id: int) -> bool:
    """Mark a journal row processed.

    Marking an already processed row is a no-op.

    Returns:
        True if this call did the transition

    Raises:
        NotFoundError: If the row does not exist
    """
    with transaction(session):
        journal = UndoJournalRepository(session)
        journal.get(row_id)
        claimed = journal.claim(row_id)

    if not claimed:
        logger.debug("Undo journal row already processed", row_id=row_id)
    return claimed


def revert(session: Session, row_id: int) -> UndoJournalRow:
    """Undo the mutation recorded by a journal row.

    Claiming the row and restoring the entry's flag commit together or not
    at all. The restoring write is not journaled.

    Raises:
        NotFoundError: If the row or its entry does not exist
        StaleRevertError: If the row was already processed
    """
    logger.debug("Reverting undo journal row", row_id=row_id)

    try:
        with transaction(session):
            journal = UndoJournalRepository(session)
            row = journal.get(row_id)
            if not journal.claim(row_id):
                raise StaleRevertError(row_id)
            with undo_replay(session):
                EntryRepository(session, journal).set_deleted(
                    row.entry_id, row.deleted_old
                )
    except NotFoundError as e:
        logger.warning("Cannot revert undo journal row", row_id=row_id, error=str(e))
        raise
    except StaleRevertError:
        logger.info("Undo journal row already reverted", row_id=row_id)
        raise

    log_database_operation(
        operation="revert",
        table="undolog",
        success=True,
        row_id=row_id,
        entry_id=row.entry_id,
    )
    logger.info(
        "Undo journal row reverted",
        row_id=row_id,
        entry_id=row.entry_id,
        deleted=row.deleted_old,
    )
    return UndoJournalRow(
        row_id=row.row_id,
        entry_id=row.entry_id,
        deleted_old=row.deleted_old,
        processed=True,
    )


def process_pending(session: Session, limit: int | None = None) -> int:
    """Revert pending journal rows oldest first.

    Rows another processor got to first are skipped.

    Returns:
        Number of rows reverted by this call
    """
    row_ids = [row.row_id for row in pending(session)]
    if limit is not None:
        row_ids = row_ids[:limit]

    reverted = 0
    for row_id in row_ids:
        try:
            revert(session, row_id)
        except StaleRevertError:
            continue
        reverted += 1

    logger.info("Processed pending undo rows", reverted=reverted, seen=len(row_ids))
    return reverted
