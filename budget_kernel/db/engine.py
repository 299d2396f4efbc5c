"""
Module: budget_kernel.db.engine
Responsibility: Owns the process-wide SQLAlchemy engine and session factory
    for the budget store, plus the transactional ``session_scope`` helper.
Architecture position: Kernel > DB.  May import from db/base.py.  Imports
    models only inside create_tables()/drop_tables() so the budget tables are
    registered on Base.metadata.

Invariants enforced:
    - SQLite URLs share one connection (StaticPool), so an in-memory store
      is the same database for every session.

Failure modes:
    - RuntimeError if get_engine/get_session is called before
      init_engine_from_url().
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from budget_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def init_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """
    Point the budget store at ``database_url``.  A second call replaces the first.

    Args:
        database_url: SQLAlchemy URL, e.g. ``sqlite://`` for an in-memory store.
        echo: If True, log all SQL statements.
    """
    global _engine, _SessionFactory

    if database_url.startswith("sqlite"):
        _engine = create_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        _engine = create_engine(database_url, echo=echo, pool_pre_ping=True)

    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)
    logger.info("engine_initialized", extra={"dialect": _engine.dialect.name})
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine


def get_session() -> Session:
    """New session on the budget store; the caller closes it."""
    if _SessionFactory is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _SessionFactory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Commit on normal exit, roll back and re-raise on error, always close.

    Usage:
        with session_scope() as session:
            session.add(BudgetMonth.from_record(record))
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("budget_store_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    from budget_kernel.db.base import Base
    import budget_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    from budget_kernel.db.base import Base
    import budget_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose the engine and forget the session factory.  For tests."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
