"""SQLAlchemy engine management.

The service runs on SQLite only (in-memory by default, or a file URL such as
`sqlite+pysqlite:///storefront.db`); the migrations use SQLite DDL. No
declarative models are defined; repositories issue SQLAlchemy Core text
queries.

Every unit of work goes through `transaction()` or `connection()`. Both hold
a process-wide lock for the whole block: the in-memory database is a single
DBAPI connection shared by all request threads, and SQLite admits one writer
at a time anyway.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from storefront.config import get_config

logger = logging.getLogger(__name__)


def _db_url() -> str:
    return get_config().database.url


# Module-level cached Engine so repositories share one connection pool
_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None

# Reentrant: seeding inside a reset may nest units of work on one thread
_DB_LOCK = threading.RLock()


def get_engine(url: str | None = None) -> Engine:
    """Return a singleton SQLAlchemy Engine for the given URL.

    For SQLite in-memory URLs, use a StaticPool so a single connection stays
    alive across request threads; otherwise every checkout would see an
    empty database.
    """
    global _ENGINE, _ENGINE_URL
    resolved_url = url or _db_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        if ":memory:" in resolved_url:
            kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        if _ENGINE is not None:
            _ENGINE.dispose()
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url
        logger.info("db.engine.created dialect=%s", _ENGINE.dialect.name)

    return _ENGINE


@contextmanager
def transaction(engine: Engine | None = None) -> Iterator[Connection]:
    """`engine.begin()` under the database lock: commit on exit, rollback on error."""
    engine = engine or get_engine()
    with _DB_LOCK:
        with engine.begin() as conn:
            yield conn


@contextmanager
def connection(engine: Engine | None = None) -> Iterator[Connection]:
    """Read-only `engine.connect()` under the database lock.

    All queries in the block see one consistent state; nothing else can
    commit in between.
    """
    engine = engine or get_engine()
    with _DB_LOCK:
        with engine.connect() as conn:
            yield conn


__all__ = ["get_engine", "transaction", "connection"]
