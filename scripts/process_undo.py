#!/usr/bin/env python3
"""
Revert pending undo journal rows against the configured database.

Rows are processed oldest first. Rows that another processor already
handled are skipped. Set DATABASE_URL to point at a database other than the
default ~/.kouhia/db.sqlite3.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlmodel import Session

from kouhia.application.undo_service import pending, process_pending
from kouhia.config import settings
from kouhia.infrastructure.database.database import get_main_engine, init_db
from kouhia.logging_config import setup_logging


def main() -> int:
    """Drain the undo journal, optionally limited to the first N rows."""
    limit = int(sys.argv[1]) if len(sys.argv) > 1 else None

    setup_logging()
    engine = get_main_engine()
    init_db(engine)

    print(f"📊 Database: {settings.database_url}")

    with Session(engine) as session:
        waiting = len(list(pending(session)))
        print(f"🔍 {waiting} pending undo rows")

        reverted = process_pending(session, limit=limit)
        print(f"✅ Reverted {reverted} undo rows")

    return 0


if __name__ == "__main__":
    sys.exit(main())
