"""Infrastructure and technical constants."""

from typing import Final

DEFAULT_DATABASE_DIR: Final = ".kouhia"
DEFAULT_DATABASE_FILE: Final = "db.sqlite3"
DEFAULT_TAIL_COUNT: Final = 10
