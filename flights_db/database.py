"""Database helpers for the flight reservation system."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Tuple

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Connection, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DEFAULT_DB_URL
from .models import Base

logger = logging.getLogger(__name__)

SERIALIZABLE = "SERIALIZABLE"
READ_COMMITTED = "READ COMMITTED"


def _install_sqlite_begin(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, decide when and how a transaction starts.

    Serializable transactions begin with ``BEGIN IMMEDIATE`` so the write lock
    is held from the first read, everything else with a deferred ``BEGIN``.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn: Connection):
        if conn.get_execution_options().get("isolation_level") == SERIALIZABLE:
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def create_session_factory(
    db_url: str | URL = DEFAULT_DB_URL,
    *,
    echo: bool = False,
    connect_args: Dict[str, object] | None = None,
) -> Tuple[Engine, sessionmaker[Session]]:
    """Return an engine/session factory pair configured for SQLite by default."""

    url = make_url(db_url)
    is_sqlite = url.get_backend_name() == "sqlite"
    engine_kwargs: Dict[str, object] = {"echo": echo}

    if is_sqlite:
        final_connect_args: Dict[str, object] = {"check_same_thread": False, "timeout": 30}
        if connect_args:
            final_connect_args.update(connect_args)
        if url.database in (None, "", ":memory:"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        final_connect_args = dict(connect_args or {})
        engine_kwargs["isolation_level"] = READ_COMMITTED

    engine = create_engine(url, connect_args=final_connect_args, **engine_kwargs)
    if is_sqlite:
        _install_sqlite_begin(engine)
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    logger.debug("Created engine for %s", url.render_as_string(hide_password=True))
    return engine, session_factory


def init_db(db_url: str | URL = DEFAULT_DB_URL, *, echo: bool = False) -> sessionmaker[Session]:
    """Create all tables and return a session factory."""

    engine, session_factory = create_session_factory(db_url, echo=echo)
    Base.metadata.create_all(engine)
    return session_factory


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def serializable_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Like :func:`session_scope`, but the transaction runs at SERIALIZABLE isolation.

    The isolation level is set on the pooled connection for this scope only;
    the pool restores the engine default when the session closes.
    """

    session = session_factory()
    try:
        session.connection(execution_options={"isolation_level": SERIALIZABLE})
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
