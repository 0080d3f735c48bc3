"""
Module: inventory_kernel.db.engine
Responsibility: Owns the one SQLAlchemy engine the kernel talks to, hands out
    sessions bound to it, and wraps a unit of work in a transaction.
Architecture position: Kernel > DB.  Imports only db/base.py (and models,
    lazily, so create_tables sees every table).

Supported backends:
    - SQLite.  In-memory URLs share a single connection so every session
      sees the same database.
    - PostgreSQL via psycopg2 (``postgres`` extra), pooled with pre-ping.

Sessions do not expire on commit: ledger DTOs read in a transaction stay
usable after it closes.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_sessions: sessionmaker[Session] | None = None

_IN_MEMORY = (None, "", ":memory:")


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 10,
    pool_recycle: int = 1800,
) -> Engine:
    """Create the kernel's engine, replacing any earlier one.

    Pool settings apply to server databases only.
    """
    global _engine, _sessions

    reset_engine()
    url = make_url(database_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in _IN_MEMORY:
            options["poolclass"] = StaticPool
    else:
        options = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_pre_ping": True,
            "pool_recycle": pool_recycle,
        }

    _engine = create_engine(url, echo=echo, **options)
    _sessions = sessionmaker(bind=_engine, expire_on_commit=False)

    logger.info(
        "engine_initialized",
        extra={"backend": backend, "database": url.database or ":memory:"},
    )
    return _engine


def _initialized() -> tuple[Engine, sessionmaker[Session]]:
    if _engine is None or _sessions is None:
        raise RuntimeError("Engine not initialized. Call init_engine_from_url() first.")
    return _engine, _sessions


def get_engine() -> Engine:
    return _initialized()[0]


def get_session() -> Session:
    """A new session on the kernel engine. The caller closes it."""
    return _initialized()[1]()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    One transaction around a block of work.

    Commits when the block exits normally; rolls back and re-raises when it
    raises.  The session is closed either way.

    Usage:
        with session_scope() as session:
            engine = build_valuation_engine(session, config)
            summary = engine.get_total_inventory_value()
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    from inventory_kernel.db.base import Base
    import inventory_kernel.models  # noqa: F401

    Base.metadata.create_all(get_engine())


def drop_tables() -> None:
    """Drop every kernel table. Test teardown only."""
    from inventory_kernel.db.base import Base
    import inventory_kernel.models  # noqa: F401

    Base.metadata.drop_all(get_engine())


def reset_engine() -> None:
    """Dispose of the engine, if any, and forget the session factory."""
    global _engine, _sessions

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _sessions = None
