from collections.abc import Iterable
from datetime import date
from typing import Final

from sqlmodel import Session

from ..config import settings
from ..domain.entities import Entry, to_date, validate_deleted, validate_time
from ..domain.exceptions import NotFoundError, ValidationError
from ..infrastructure.database.database import transaction
from ..infrastructure.database.models import HoursRecord
from ..infrastructure.database.repositories import EntryRepository, QueryListing
from ..logging_config import get_logger
from ..logging_utils import log_database_operation

logger: Final = get_logger(__name__)


def create_entry(session: Session, entry_date: date | str, time: float) -> int:
    """Log ``time`` hours on ``entry_date`` (a date, "now" or YYYY-MM-DD).

    The entry and its creation journal row are committed together.

    Returns:
        The store-assigned entry id
    """
    logger.debug("Creating entry", date=str(entry_date), time=time)
    day = to_date(entry_date)
    validate_time(time)

    with transaction(session):
        entry = EntryRepository(session).add(day, time)

    log_database_operation(
        operation="create", table="hours", success=True, entry_id=entry.entry_id
    )
    logger.info("Entry created", entry_id=entry.entry_id, date=str(day))
    return entry.entry_id


def set_entry_deleted(session: Session, entry_id: int, deleted: bool) -> Entry:
    """Set the soft delete flag of an entry.

    Raises:
        ValidationError: If deleted is not a bool
        NotFoundError: If the entry does not exist
    """
    logger.debug("Setting entry deleted flag", entry_id=entry_id, deleted=deleted)
    validate_deleted(deleted)

    try:
        with transaction(session):
            entry = EntryRepository(session).set_deleted(entry_id, deleted)
    except NotFoundError:
        logger.warning("Entry update failed - not found", entry_id=entry_id)
        raise

    log_database_operation(
        operation="update", table="hours", success=True, entry_id=entry_id
    )
    return entry


def get_entry(session: Session, entry_id: int) -> Entry:
    return EntryRepository(session).get(entry_id)


def list_entries(
    session: Session, include_deleted: bool = False
) -> QueryListing[HoursRecord, Entry]:
    """All entries ordered by id. The query runs when iterated."""
    return EntryRepository(session).find_all(include_deleted=include_deleted)


def delete_entries(session: Session, entry_ids: Iterable[int]) -> list[Entry]:
    """Soft delete several entries at once.

    Raises:
        NotFoundError: If any id does not exist; nothing is deleted then
    """
    ids: Final = sorted(set(entry_ids))
    logger.debug("Soft deleting entries", entry_ids=ids)

    try:
        with transaction(session):
            repository = EntryRepository(session)
            entries = [repository.set_deleted(entry_id, True) for entry_id in ids]
    except NotFoundError as e:
        logger.warning("Entry deletion failed", entry_ids=ids, error=str(e))
        raise

    logger.info("Entries soft deleted", count=len(entries))
    return entries


def delete_entries_by_date(session: Session, dates: Iterable[date | str]) -> int:
    """Soft delete every entry logged on one of ``dates``.

    Already deleted entries are updated (and journaled) as well.

    Returns:
        Number of entries touched
    """
    unique_dates: Final = {to_date(value) for value in dates}
    logger.debug("Soft deleting entries by date", dates=sorted(map(str, unique_dates)))

    with transaction(session):
        repository = EntryRepository(session)
        entry_ids = repository.find_ids_by_dates(unique_dates)
        for entry_id in entry_ids:
            repository.set_deleted(entry_id, True)

    logger.info("Entries soft deleted by date", count=len(entry_ids))
    return len(entry_ids)


def tail_entries(session: Session, n: int | None = None) -> list[Entry]:
    """Latest non-deleted entries, newest first."""
    count = settings.tail_default_count if n is None else n
    if count < 0:
        raise ValidationError(f"Entry count cannot be negative, got {count}")
    return EntryRepository(session).latest(count)


def hour_balance(session: Session) -> float:
    """Sum of hours over non-deleted entries."""
    return EntryRepository(session).total_time()
