from pathlib import Path
from typing import Final

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_DATABASE_DIR, DEFAULT_DATABASE_FILE, DEFAULT_TAIL_COUNT


def _default_database_url() -> str:
    database_path = Path.home() / DEFAULT_DATABASE_DIR / DEFAULT_DATABASE_FILE
    return f"sqlite:///{database_path}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env files."""

    debug: bool = Field(default=False, description="Enable debug mode")

    # Database configuration
    database_url: str = Field(
        default_factory=_default_database_url,
        description="Database connection URL",
    )

    # Ledger configuration
    tail_default_count: int = Field(
        default=DEFAULT_TAIL_COUNT,
        ge=1,
        description="Number of entries shown by tail when no count is given",
    )

    # Logging configuration
    log_to_file: bool = Field(
        default=False, description="Force logging to file even in debug mode"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Expand a leading ~ in SQLite file URLs."""
        prefix = "sqlite:///"
        if v.startswith(prefix + "~"):
            return prefix + str(Path(v[len(prefix) :]).expanduser())
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def sqlite_path(self) -> Path | None:
        """Get the database file path for file-backed SQLite URLs."""
        prefix = "sqlite:///"
        if not self.database_url.startswith(prefix):
            return None
        raw_path = self.database_url[len(prefix) :]
        if not raw_path or raw_path == ":memory:":
            return None
        return Path(raw_path)


# Global settings instance
settings: Final = Settings()
