"""Engines with the full-text rewrite installed."""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from fulltextsearch.config import get_settings
from fulltextsearch.core.interceptor import FullTextInterceptor

# Shared by every engine created here; install() is idempotent per engine.
interceptor = FullTextInterceptor()

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def create_database_engine(
    database_url: str | None = None,
    echo: bool | None = None,
    rewrite: bool | None = None,
) -> Engine:
    """Create an engine whose statements pass through the full-text rewrite.

    Args:
        database_url: Database connection string. Defaults to settings.
        echo: Whether to echo SQL statements. Defaults to settings.
        rewrite: Whether to install the CONTAINS/FREETEXT rewrite. Defaults to settings.
    """
    settings = get_settings()
    if database_url is None:
        if not settings.database_url:
            settings.ensure_data_dir()
        database_url = settings.resolved_database_url

    engine = create_engine(database_url, echo=settings.echo_sql if echo is None else echo)

    if settings.rewrite_enabled if rewrite is None else rewrite:
        interceptor.install(engine)
    return engine


def get_engine() -> Engine:
    """Get or create the default engine."""
    global _engine
    if _engine is None:
        _engine = create_database_engine()
    return _engine


def get_session() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine(), autoflush=False)
    return _session_factory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Session that commits on success and rolls back on error.

    Usage:
        with session_scope() as session:
            rows = session.scalars(search_contains(select(Article), lambda a: a.title, "fox"))
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_engine() -> None:
    """Dispose of the default engine so the next call rebuilds it from settings."""
    global _engine, _session_factory
    if _engine is not None:
        interceptor.remove(_engine)
        _engine.dispose()
    _engine = None
    _session_factory = None
