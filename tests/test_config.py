from pathlib import Path

from kouhia.config import Settings


def test_default_database_lives_in_home(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = Settings(_env_file=None)

    assert settings.is_sqlite
    assert settings.sqlite_path == Path.home() / ".kouhia" / "db.sqlite3"
    assert settings.tail_default_count == 10


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@localhost:5432/kouhia")
    settings = Settings(_env_file=None)

    assert settings.is_sqlite is False
    assert settings.sqlite_path is None


def test_home_relative_sqlite_url_is_expanded():
    settings = Settings(_env_file=None, database_url="sqlite:///~/hours.db")
    assert settings.sqlite_path == Path.home() / "hours.db"


def test_in_memory_sqlite_has_no_path():
    settings = Settings(_env_file=None, database_url="sqlite://")
    assert settings.is_sqlite
    assert settings.sqlite_path is None
