from sqlalchemy import REAL, Boolean, Column, Integer, Text
from sqlmodel import Field, SQLModel

from ...domain.entities import Entry as DomainEntry
from ...domain.entities import parse_date


class HoursRecord(SQLModel, table=True):  # type: ignore[call-arg]
    """A time entry. Rows are soft deleted, never removed."""

    __tablename__: str = "hours"  # type: ignore[assignment]

    entry_id: int | None = Field(
        default=None, sa_column=Column(Integer, primary_key=True)
    )
    date: str = Field(sa_column=Column(Text, nullable=False))
    time: float = Field(sa_column=Column(REAL, nullable=False))
    deleted: bool = Field(
        default=False,
        sa_column=Column(
            Boolean(create_constraint=True, name="ck_hours_deleted"), nullable=False
        ),
    )

    def to_domain(self) -> DomainEntry:
        """Convert persistence model to domain entity."""
        if self.entry_id is None:
            raise ValueError("Cannot convert an unsaved hours record")
        return DomainEntry(
            entry_id=self.entry_id,
            date=parse_date(self.date),
            time=self.time,
            deleted=self.deleted,
        )
