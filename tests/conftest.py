"""Pytest configuration and shared fixtures."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from fulltextsearch.core.database import create_database_engine
from tests.models import Article, Author, Base


def _search_terms(predicate: str) -> list[str]:
    return [term.strip('"*').lower() for term in predicate.split() if term.strip('"*')]


def sqlite_contains(value: str | None, predicate: str) -> int:
    """Stand-in for SQL Server CONTAINS: every term must appear."""
    if value is None:
        return 0
    text = value.lower()
    return int(all(term in text for term in _search_terms(predicate)))


def sqlite_freetext(value: str | None, predicate: str) -> int:
    """Stand-in for SQL Server FREETEXT: any term may appear."""
    if value is None:
        return 0
    text = value.lower()
    return int(any(term in text for term in _search_terms(predicate)))


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create an in-memory SQLite engine with the full-text rewrite installed.

    SQLite has no CONTAINS/FREETEXT, so Python functions with the same names
    are registered on each connection.
    """
    engine = create_database_engine("sqlite:///:memory:", echo=False, rewrite=True)

    @event.listens_for(engine, "connect")
    def register_full_text_functions(dbapi_connection, connection_record):
        dbapi_connection.create_function("CONTAINS", 2, sqlite_contains)
        dbapi_connection.create_function("FREETEXT", 2, sqlite_freetext)

    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def test_db(engine: Engine) -> Generator[Session, None, None]:
    """Provide a session bound to the in-memory engine."""
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def articles(test_db: Session) -> list[Article]:
    """Create a small set of articles."""
    author = Author(name="Aesop")
    rows = [
        Article(
            title="The quick brown fox",
            body="A fox jumps over the lazy dog",
            author=author,
        ),
        Article(
            title="Slow turtles",
            body="The tortoise beats the hare",
            author=author,
        ),
        Article(
            title="Lazy afternoons",
            body="Nothing quick happens here",
        ),
    ]
    test_db.add_all(rows)
    test_db.commit()
    return rows


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary data directory for testing.

    Sets FULLTEXTSEARCH_DATA_DIR environment variable and cleans up after.
    Also resets the global database engine to ensure isolation.
    """
    from fulltextsearch.config.settings import get_settings
    from fulltextsearch.core.database import reset_engine

    # Reset any cached settings
    get_settings.cache_clear()

    data_dir = tmp_path / "fulltextsearch"

    old_value = os.environ.get("FULLTEXTSEARCH_DATA_DIR")
    os.environ["FULLTEXTSEARCH_DATA_DIR"] = str(data_dir)

    # Reset engine to pick up new data dir
    reset_engine()

    try:
        yield data_dir
    finally:
        # Reset engine before restoring env
        reset_engine()

        if old_value is not None:
            os.environ["FULLTEXTSEARCH_DATA_DIR"] = old_value
        else:
            os.environ.pop("FULLTEXTSEARCH_DATA_DIR", None)

        # Clear cached settings
        get_settings.cache_clear()
