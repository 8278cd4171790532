"""
FileBridge Runtime — wires configuration, storage, schema and services.

Ties together:
- PlatformConfig (filebridge.yaml)
- ObjectRegistryManager (record classes of the configured apps)
- SchemaService + generated record tables
- RecordStore, RelatedFilesService, ObjectDescribeService
- AsyncLogQueue (structured JSONL logging)

Lifecycle:
    runtime = init_runtime()
    runtime.startup()
    runtime.related_files.get_related_files("Contact", "account_id", account_id)
    runtime.shutdown()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sqlalchemy import MetaData, Table
from sqlalchemy.orm import sessionmaker

from filebridge.db.session import init_db
from filebridge.describe.service import ObjectDescribeService
from filebridge.engine.config import PlatformConfig, get_platform_config
from filebridge.engine.logging import (
    AsyncLogQueue,
    init_logging,
    log,
    log_system_event,
    shutdown_logging,
)
from filebridge.engine.registry import ObjectRegistryManager, object_registry
from filebridge.engine.security import RecordAccessPolicy
from filebridge.files.service import RelatedFilesService
from filebridge.schema.service import SchemaService
from filebridge.store.record_store import RecordStore
from filebridge.store.record_tables import build_record_tables

logger = logging.getLogger("filebridge.engine.runtime")


class FileBridgeRuntime:
    """
    Owns the services behind the related-files and describe operations.

    Args:
        config: Platform config; defaults to the loaded filebridge.yaml.
        registry: Object registry holding the @record classes.
        session_factory: Use an existing sessionmaker instead of init_db().
        create_tables: Create content and record tables on startup.
        file_logging: Start the structured JSONL log queue.
    """

    def __init__(
        self,
        config: Optional[PlatformConfig] = None,
        registry: Optional[ObjectRegistryManager] = None,
        session_factory: Optional[sessionmaker] = None,
        create_tables: bool = False,
        file_logging: bool = True,
    ):
        self.config = config or get_platform_config()
        self.registry = registry or object_registry
        self._session_factory = session_factory
        self._create_tables = create_tables
        self._file_logging = file_logging

        # Initialized in startup()
        self.schema: Optional[SchemaService] = None
        self.metadata: Optional[MetaData] = None
        self.tables: Dict[str, Table] = {}
        self.store: Optional[RecordStore] = None
        self.related_files: Optional[RelatedFilesService] = None
        self.describe: Optional[ObjectDescribeService] = None
        self.log_queue: Optional[AsyncLogQueue] = None

        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def startup(self) -> None:
        if self._started:
            logger.warning("Runtime already started")
            return

        logger.info("Starting FileBridge runtime...")
        cfg = self.config

        # 1. Logging
        logging.getLogger("filebridge").setLevel(cfg.logging.level)
        if self._file_logging and cfg.logging.structured:
            q = cfg.logging.async_queue
            self.log_queue = init_logging(
                log_dir=cfg.logging.directory,
                flush_interval_ms=q.flush_interval_ms,
                flush_batch_size=q.flush_batch_size,
                max_queue_size=q.max_queue_size,
                slow_threshold_ms=cfg.logging.slow_threshold_ms,
            )

        # 2. Record classes of the configured apps
        for app_name in cfg.apps:
            self.registry.load_app(app_name)

        # 3. Schema + record tables
        self.schema = SchemaService.from_registry(
            self.registry,
            link_type=cfg.files.link_type,
            link_field=cfg.files.link_field,
        )
        self.metadata = MetaData()
        self.tables = build_record_tables(self.schema, self.metadata)

        # 4. Database
        if self._session_factory is None:
            db = cfg.database
            self._session_factory = init_db(
                db.url,
                create_tables=self._create_tables,
                extra_metadata=[self.metadata],
                pool_size=db.pool_size,
                max_overflow=db.max_overflow,
                pool_timeout=db.pool_timeout,
                pool_recycle=db.pool_recycle,
                pool_pre_ping=db.pool_pre_ping,
                echo=db.echo,
            )

        # 5. Services
        self.store = RecordStore(self._session_factory, self.schema, self.tables)
        self.related_files = RelatedFilesService(self.store, icon_name=cfg.files.icon_name)
        self.describe = ObjectDescribeService(
            self.schema,
            RecordAccessPolicy(),
            link_type=cfg.files.link_type,
            link_field=cfg.files.link_field,
        )

        self._started = True
        log(log_system_event("platform_started", details=self.status()))
        logger.info(f"FileBridge runtime started ({len(self.tables)} record types)")

    def shutdown(self) -> None:
        if not self._started:
            return
        logger.info("Shutting down FileBridge runtime...")
        log(log_system_event("platform_shutdown"))
        if self.log_queue is not None:
            shutdown_logging()
            self.log_queue = None
        self._started = False
        logger.info("FileBridge runtime shut down")

    def status(self) -> Dict[str, Any]:
        status: Dict[str, Any] = {
            "environment": self.config.environment,
            "apps": list(self.config.apps),
            "record_types": self.schema.type_names() if self.schema else [],
        }
        if self.log_queue:
            status["log_queue"] = {
                "pending": self.log_queue.pending_count,
                "dropped": self.log_queue.dropped_count,
            }
        return status


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_runtime: Optional[FileBridgeRuntime] = None


def get_runtime() -> FileBridgeRuntime:
    """
    Get the global runtime, creating and starting it from filebridge.yaml
    on first use.
    """
    global _runtime
    if _runtime is None:
        _runtime = FileBridgeRuntime()
    if not _runtime.is_started:
        _runtime.startup()
    return _runtime


def init_runtime(**kwargs: Any) -> FileBridgeRuntime:
    """
    Create the global runtime (not yet started).

    Args:
        **kwargs: Passed to FileBridgeRuntime.__init__().
    """
    global _runtime
    if _runtime is not None:
        _runtime.shutdown()
    _runtime = FileBridgeRuntime(**kwargs)
    return _runtime


def reset_runtime() -> None:
    """Shut down and drop the global runtime."""
    global _runtime
    if _runtime is not None:
        _runtime.shutdown()
    _runtime = None
