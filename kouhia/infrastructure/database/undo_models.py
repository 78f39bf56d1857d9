"""Database models for the undo journal.

Every insert into ``hours`` and every update of its ``deleted`` flag leaves
one ``undolog`` row holding the flag value from before the change.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel

from ...domain.entities import UndoJournalRow


class UndoLogRecord(SQLModel, table=True):  # type: ignore[call-arg]
    """Append-only journal row. Only ``processed`` ever changes."""

    __tablename__: str = "undolog"  # type: ignore[assignment]

    row_id: int | None = Field(
        default=None, sa_column=Column(Integer, primary_key=True)
    )
    entry_id: int = Field(
        sa_column=Column(Integer, ForeignKey("hours.entry_id"), nullable=False)
    )
    deleted_old: bool = Field(
        sa_column=Column(
            Boolean(create_constraint=True, name="ck_undolog_deleted_old"),
            nullable=False,
        )
    )
    processed: bool = Field(
        default=False,
        sa_column=Column(
            Boolean(create_constraint=True, name="ck_undolog_processed"),
            nullable=False,
        ),
    )

    def to_domain(self) -> UndoJournalRow:
        """Convert persistence model to domain entity."""
        if self.row_id is None:
            raise ValueError("Cannot convert an unsaved undo log record")
        return UndoJournalRow(
            row_id=self.row_id,
            entry_id=self.entry_id,
            deleted_old=self.deleted_old,
            processed=self.processed,
        )
