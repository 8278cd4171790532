"""
FileBridge Database Base — SQLAlchemy declarative base, mixins, engine registry.

Provides:
- Base: SQLAlchemy declarative base for the platform content tables
- TimestampMixin: created_date, last_modified_date
- EngineRegistry: named engines + session factories
- new_record_id: key-prefixed 18-character record ids
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import Column, DateTime, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all FileBridge platform models."""
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Adds created_date and last_modified_date columns."""
    created_date = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    last_modified_date = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )


def new_record_id(key_prefix: str) -> str:
    """Build an 18-character record id: 3-char key prefix + 15 hex chars."""
    if len(key_prefix) != 3:
        raise ValueError(f"key_prefix must be 3 characters, got '{key_prefix}'")
    return f"{key_prefix}{uuid.uuid4().hex[:15]}"


class EngineRegistry:
    """
    Registry of named SQLAlchemy engines.

    Usage:
        registry = EngineRegistry()
        registry.register("filebridge_core", "postgresql://...")
        session = registry.get_session("filebridge_core")
    """

    def __init__(self):
        self._engines: Dict[str, Engine] = {}
        self._session_factories: Dict[str, sessionmaker] = {}

    def register(
        self,
        name: str,
        url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
        pool_pre_ping: bool = True,
        **kwargs: Any,
    ) -> Engine:
        """Register a new database engine. Replaces an existing one with the same name."""
        if url.startswith("sqlite"):
            # SQLite pools take no sizing arguments; in-memory DBs must share one connection
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs.setdefault("poolclass", StaticPool)
            kwargs.setdefault("connect_args", {"check_same_thread": False})
            engine = create_engine(url, **kwargs)
        else:
            engine = create_engine(
                url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=pool_pre_ping,
                **kwargs,
            )
        if name in self._engines:
            self._engines[name].dispose()
        self._engines[name] = engine
        self._session_factories[name] = sessionmaker(bind=engine)
        return engine

    def get(self, name: str) -> Engine:
        """Get a registered engine by name."""
        if name not in self._engines:
            raise KeyError(f"Engine '{name}' not registered. Available: {list(self._engines.keys())}")
        return self._engines[name]

    def get_session_factory(self, name: str) -> sessionmaker:
        if name not in self._session_factories:
            raise KeyError(
                f"Session factory '{name}' not found. Available: {list(self._session_factories.keys())}"
            )
        return self._session_factories[name]

    def get_session(self, name: str) -> Session:
        """Get a new session for a registered engine."""
        return self.get_session_factory(name)()

    def dispose(self, name: Optional[str] = None) -> None:
        """Dispose one or all engines (close connection pools)."""
        if name:
            engine = self._engines.pop(name, None)
            self._session_factories.pop(name, None)
            if engine is not None:
                engine.dispose()
        else:
            for engine in self._engines.values():
                engine.dispose()
            self._engines.clear()
            self._session_factories.clear()

    @property
    def registered_names(self) -> list:
        return list(self._engines.keys())


# Global engine registry
engine_registry = EngineRegistry()
