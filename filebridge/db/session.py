"""
FileBridge Database Session Management.

Single entry point for DB initialisation plus a context manager for
read-only access. Uses the global EngineRegistry.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Iterable, Optional

from sqlalchemy import MetaData
from sqlalchemy.orm import Session, sessionmaker

from filebridge.db.base import Base, engine_registry

logger = logging.getLogger("filebridge.db.session")

CORE_ENGINE = "filebridge_core"

_session_factory: Optional[sessionmaker] = None


def init_db(
    db_url: str,
    create_tables: bool = False,
    extra_metadata: Iterable[MetaData] = (),
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> sessionmaker:
    """
    Initialise the FileBridge database.

    1. Registers the "filebridge_core" engine in the EngineRegistry.
    2. Optionally creates the content tables and any record tables passed in
       ``extra_metadata`` (``filebridge init`` and tests only).
    3. Stores the session factory as the module-level singleton.

    Returns:
        The ``sessionmaker`` bound to the engine.
    """
    global _session_factory

    engine = engine_registry.register(
        CORE_ENGINE, db_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        pool_pre_ping=pool_pre_ping,
        echo=echo,
    )

    if create_tables:
        Base.metadata.create_all(engine)
        for metadata in extra_metadata:
            metadata.create_all(engine)
        logger.info(f"Created tables on {engine.url.render_as_string(hide_password=True)}")

    _session_factory = engine_registry.get_session_factory(CORE_ENGINE)
    return _session_factory


def get_session_factory() -> sessionmaker:
    """Get the session factory created by init_db()."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory


def get_session() -> Session:
    """New session on the FileBridge database. Caller closes it."""
    return get_session_factory()()


@contextmanager
def session_scope(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Provide a session for a single call and always close it.

    Writes are committed on success and rolled back on error.
    """
    session = (factory or get_session_factory())()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
