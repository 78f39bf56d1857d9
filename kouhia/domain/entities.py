"""Pure domain entities without infrastructure dependencies."""

import math
from dataclasses import dataclass
from datetime import date, datetime

from .constants import DATE_FORMAT, TODAY_KEYWORD
from .exceptions import ValidationError


def parse_date(text: str) -> date:
    """Parse an entry date.

    Args:
        text: "now" for today's local date, otherwise a YYYY-MM-DD string

    Raises:
        ValidationError: If the text is not a valid date
    """
    value = text.strip()
    if value == TODAY_KEYWORD:
        return datetime.now().date()
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise ValidationError(
            f"Invalid date {text!r}, expected '{TODAY_KEYWORD}' or YYYY-MM-DD"
        ) from e


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def to_date(value: date | str) -> date:
    """Accept a date as given, or parse it from text with ``parse_date``.

    Raises:
        ValidationError: If value is neither a date nor valid date text
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise ValidationError(f"Entry date must be a date, got {value!r}")


def validate_deleted(deleted: bool) -> None:
    """Raises ValidationError unless deleted is exactly True or False."""
    if not isinstance(deleted, bool):
        raise ValidationError(f"Deleted flag must be True or False, got {deleted!r}")


def validate_time(time: float) -> None:
    """Validate an hour amount.

    Negative amounts are allowed, they reduce the hour balance.

    Raises:
        ValidationError: If time is not a finite number
    """
    if isinstance(time, bool) or not isinstance(time, int | float):
        raise ValidationError(f"Hour amount must be a number, got {time!r}")
    if not math.isfinite(time):
        raise ValidationError(f"Hour amount must be finite, got {time!r}")


@dataclass(frozen=True)
class Entry:
    """A logged amount of hours for a calendar date."""

    entry_id: int
    date: date
    time: float
    deleted: bool = False


@dataclass(frozen=True)
class UndoJournalRow:
    """The deleted state an entry had before one of its mutations."""

    row_id: int
    entry_id: int
    deleted_old: bool
    processed: bool = False
