"""Session-scoped replay suppression.

Writes made while an undo is being replayed must not be journaled, or every
revert would append a new undo row of its own. The flag lives in
``Session.info`` so it travels with the transaction instead of being global.
"""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlmodel import Session

_UNDO_REPLAY_KEY = "kouhia.undo_replay"


def is_undo_replay(session: Session) -> bool:
    return bool(session.info.get(_UNDO_REPLAY_KEY, False))


@contextmanager
def undo_replay(session: Session) -> Iterator[Session]:
    """Suppress journaling on ``session`` for the duration of the block.

    The previous value is restored on exit, also when the block raises.
    """
    previous = session.info.get(_UNDO_REPLAY_KEY, False)
    session.info[_UNDO_REPLAY_KEY] = True
    try:
        yield session
    finally:
        session.info[_UNDO_REPLAY_KEY] = previous
