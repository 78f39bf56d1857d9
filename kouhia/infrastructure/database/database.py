from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine

from ...config import settings
from ...logging_config import get_logger

# Table models register themselves on SQLModel.metadata when imported
from . import models, undo_models  # noqa: F401

logger = get_logger(__name__)

# CHECK and foreign key failures surface unchanged from the driver
ConstraintViolation = IntegrityError


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Make SQLite enforce ``undolog.entry_id REFERENCES hours``."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def _get_engine() -> Engine:
    database_url = settings.database_url
    connect_args: dict[str, bool] = {}
    engine_kwargs: dict[str, int | bool] = {}

    if settings.is_sqlite:
        sqlite_path = settings.sqlite_path
        if sqlite_path is not None and not sqlite_path.parent.exists():
            sqlite_path.parent.mkdir(parents=True)
            logger.info("Created database directory", path=str(sqlite_path.parent))
    elif "postgresql" in database_url:
        engine_kwargs["pool_pre_ping"] = True
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    engine = create_engine(
        database_url,
        # echo=True,  # Enable for SQL debugging
        connect_args=connect_args,
        **engine_kwargs,
    )
    if settings.is_sqlite:
        enable_sqlite_foreign_keys(engine)
    return engine


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


_engine: Engine | None = None


def get_main_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = _get_engine()
    return _engine


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Commit everything done in the block, or roll all of it back."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
