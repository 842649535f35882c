# app/tests/test_settings.py
import pytest
from pydantic import ValidationError as SettingsError

from app.core.settings import Settings, with_driver
from app.domain import REVIEW_TEXT_COLUMN_LENGTH


@pytest.mark.parametrize("raw,expected", [
    ("postgres://u:p@db:5432/cinema", "postgresql+asyncpg://u:p@db:5432/cinema"),
    ("postgresql://u:p@db/cinema", "postgresql+asyncpg://u:p@db/cinema"),
    ("postgresql+psycopg://u:p@db/cinema", "postgresql+asyncpg://u:p@db/cinema"),
    ("postgresql+asyncpg://u:p@db/cinema", "postgresql+asyncpg://u:p@db/cinema"),
    ('"postgresql://u:p@db/cinema"', "postgresql+asyncpg://u:p@db/cinema"),
    ("sqlite:///./dev.db", "sqlite+aiosqlite:///./dev.db"),
])
def test_async_driver_is_forced(raw, expected):
    assert with_driver(raw) == expected
    assert Settings(DATABASE_URL=raw).async_database_url == expected


def test_sync_driver_for_migrations():
    assert with_driver("postgresql+asyncpg://u:p@db/cinema", sync=True) == "postgresql+psycopg://u:p@db/cinema"
    assert with_driver("postgres://u:p@db/cinema", sync=True) == "postgresql+psycopg://u:p@db/cinema"
    assert with_driver("sqlite+aiosqlite:///./dev.db", sync=True) == "sqlite:///./dev.db"


def test_empty_url_rejected():
    with pytest.raises(ValueError):
        with_driver("  ")


def test_review_text_limit_cannot_exceed_column():
    assert Settings().review_text_max_length == REVIEW_TEXT_COLUMN_LENGTH
    assert Settings(REVIEW_TEXT_MAX_LENGTH=500).review_text_max_length == 500
    with pytest.raises(SettingsError):
        Settings(REVIEW_TEXT_MAX_LENGTH=REVIEW_TEXT_COLUMN_LENGTH + 1)
    with pytest.raises(SettingsError):
        Settings(REVIEW_TEXT_MAX_LENGTH=0)
