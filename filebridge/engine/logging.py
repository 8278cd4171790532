"""
FileBridge Logging — structured JSONL trail for queries, describes and operations.

Layout on disk (one file per day):

    {log_dir}/records/execution/2024-05-01.jsonl     record store queries
    {log_dir}/records/performance/2024-05-01.jsonl   queries slower than the threshold
    {log_dir}/schema/execution/...                   describe calls
    {log_dir}/web_apis/execution/...                 getRelatedFiles / getObjectDescribe
    {log_dir}/web_apis/performance/...               slow operation calls
    {log_dir}/system/execution/...                   startup / shutdown

Entries are pushed to an AsyncLogQueue and written by a background thread, so
logging never blocks or changes an operation's result. Diagnostics still go
through the standard ``logging`` module under ``filebridge.*`` names.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from datetime import date, datetime, timezone
from pathlib import Path
from queue import Empty, Full, Queue
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger("filebridge.engine.logging")

# object_type → categories it may be written under
OBJECT_TYPE_CATEGORIES = {
    "records": ["execution", "performance"],
    "schema": ["execution"],
    "web_apis": ["execution", "performance"],
    "system": ["execution"],
}

DEFAULT_SLOW_THRESHOLD_MS = 500.0


class LogEntry:
    """One JSON line, routed by object type and category."""

    __slots__ = ("object_type", "category", "data")

    def __init__(self, object_type: str, category: str, data: Dict[str, Any]):
        self.object_type = object_type
        self.category = category
        self.data = data

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))

    def as_performance(self) -> Optional["LogEntry"]:
        """Copy of this entry for the performance trail, if the type has one."""
        if "performance" not in OBJECT_TYPE_CATEGORIES.get(self.object_type, ()):
            return None
        return LogEntry(self.object_type, "performance", dict(self.data, slow=True))


class FileLogger:
    """
    Appends entries to ``{log_dir}/{object_type}/{category}/{YYYY-MM-DD}.jsonl``.

    Safe to call from several threads: appends to the same file are serialized.
    """

    def __init__(self, log_dir: str = "logs"):
        self._log_dir = Path(log_dir)
        self._locks: Dict[Path, threading.Lock] = defaultdict(threading.Lock)
        for object_type, categories in OBJECT_TYPE_CATEGORIES.items():
            for category in categories:
                (self._log_dir / object_type / category).mkdir(parents=True, exist_ok=True)

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def path_for(self, entry: LogEntry, day: Optional[date] = None) -> Path:
        day = day or date.today()
        return self._log_dir / entry.object_type / entry.category / f"{day.isoformat()}.jsonl"

    def write(self, entry: LogEntry) -> None:
        self.write_batch([entry])

    def write_batch(self, entries: List[LogEntry]) -> None:
        """Append entries, opening each target file once per batch."""
        today = date.today()
        by_path: Dict[Path, List[str]] = defaultdict(list)
        for entry in entries:
            by_path[self.path_for(entry, today)].append(entry.to_json())

        for path, lines in by_path.items():
            path.parent.mkdir(parents=True, exist_ok=True)
            with self._locks[path]:
                with open(path, "a", encoding="utf-8") as f:
                    f.write("\n".join(lines) + "\n")


_STOP = object()


class AsyncLogQueue:
    """
    Bounded queue drained by a daemon thread.

    The writer blocks up to ``flush_interval_ms`` for the first entry, then
    takes whatever else is waiting (up to ``flush_batch_size``) and writes it
    as one batch. A full queue drops the entry and counts it.
    """

    def __init__(
        self,
        file_logger: FileLogger,
        flush_interval_ms: int = 100,
        flush_batch_size: int = 50,
        max_queue_size: int = 10000,
    ):
        self._file_logger = file_logger
        self._interval = flush_interval_ms / 1000.0
        self._batch_size = max(1, flush_batch_size)
        self._queue: Queue = Queue(maxsize=max_queue_size)
        self._thread: Optional[threading.Thread] = None
        self._dropped = 0

    @property
    def pending_count(self) -> int:
        return self._queue.qsize()

    @property
    def dropped_count(self) -> int:
        return self._dropped

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._thread = threading.Thread(target=self._run, name="filebridge-log-writer", daemon=True)
        self._thread.start()
        logger.info("Async log queue started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the writer thread and write whatever is still queued."""
        if self._thread is not None:
            try:
                self._queue.put(_STOP, timeout=timeout)
            except Full:
                logger.warning("Log writer did not take the stop marker")
            self._thread.join(timeout=timeout)
            self._thread = None
        self._write(self._take_waiting([]))
        logger.info(f"Async log queue stopped (dropped: {self._dropped})")

    def push(self, entry: LogEntry) -> bool:
        """Queue an entry without blocking. Returns False if it was dropped."""
        try:
            self._queue.put_nowait(entry)
        except Full:
            self._dropped += 1
            return False
        return True

    def _run(self) -> None:
        while True:
            try:
                first = self._queue.get(timeout=self._interval)
            except Empty:
                continue
            if first is _STOP:
                return
            batch, stopping = self._take_batch(first)
            self._write(batch)
            if stopping:
                return

    def _take_batch(self, first: LogEntry) -> Tuple[List[LogEntry], bool]:
        batch = [first]
        while len(batch) < self._batch_size:
            try:
                item = self._queue.get_nowait()
            except Empty:
                break
            if item is _STOP:
                return batch, True
            batch.append(item)
        return batch, False

    def _take_waiting(self, batch: List[LogEntry]) -> List[LogEntry]:
        while True:
            try:
                item = self._queue.get_nowait()
            except Empty:
                return batch
            if item is not _STOP:
                batch.append(item)

    def _write(self, batch: List[LogEntry]) -> None:
        if not batch:
            return
        try:
            self._file_logger.write_batch(batch)
        except OSError as e:
            logger.error(f"Failed to write {len(batch)} log entries: {e}")


# ---------------------------------------------------------------------------
# Entry builders
# ---------------------------------------------------------------------------

def _entry_data(
    event: str,
    level: str,
    object_ref: str,
    execution_id: Optional[str] = None,
    user_id: Optional[Any] = None,
    error: Optional[str] = None,
    **fields: Any,
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
        "object_ref": object_ref,
    }
    if execution_id:
        data["execution_id"] = execution_id
    if user_id is not None:
        data["user_id"] = user_id
    data.update(fields)
    if error:
        data["error"] = error
    return data


def log_query_execution(
    collection: str,
    query: str,
    row_count: int,
    duration_ms: float,
    execution_id: Optional[str] = None,
    user_id: Optional[Any] = None,
    success: bool = True,
    error: Optional[str] = None,
) -> LogEntry:
    """Entry for one record store query (rendered text, rows, timing)."""
    data = _entry_data(
        "query_executed",
        "INFO" if success else "ERROR",
        f"records.{collection}",
        execution_id=execution_id,
        user_id=user_id,
        collection=collection,
        query=query,
        row_count=row_count,
        duration_ms=round(duration_ms, 3),
        success=success,
        error=error,
    )
    return LogEntry("records", "execution", data)


def log_describe(
    type_name: str,
    field_count: int,
    relationship_count: int,
    execution_id: Optional[str] = None,
) -> LogEntry:
    data = _entry_data(
        "type_described",
        "INFO",
        f"schema.{type_name}",
        execution_id=execution_id,
        field_count=field_count,
        relationship_count=relationship_count,
    )
    return LogEntry("schema", "execution", data)


def log_operation_call(
    operation: str,
    inputs: Dict[str, Any],
    duration_ms: float,
    success: bool,
    execution_id: Optional[str] = None,
    user_id: Optional[Any] = None,
    result_count: Optional[int] = None,
    error: Optional[str] = None,
) -> LogEntry:
    """Entry for one web API call; ``result_count`` is set for list results."""
    data = _entry_data(
        "operation_called",
        "INFO" if success else "ERROR",
        f"web_apis.{operation}",
        execution_id=execution_id,
        user_id=user_id,
        inputs=inputs,
        duration_ms=round(duration_ms, 3),
        success=success,
        error=error,
    )
    if result_count is not None:
        data["result_count"] = result_count
    return LogEntry("web_apis", "execution", data)


def log_system_event(
    event: str,
    level: str = "INFO",
    details: Optional[Dict[str, Any]] = None,
) -> LogEntry:
    data = _entry_data(event, level, "system")
    if details:
        data["details"] = details
    return LogEntry("system", "execution", data)


# ---------------------------------------------------------------------------
# Global queue
# ---------------------------------------------------------------------------

_global_queue: Optional[AsyncLogQueue] = None
_slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS


def init_logging(
    log_dir: str = "logs",
    flush_interval_ms: int = 100,
    flush_batch_size: int = 50,
    max_queue_size: int = 10000,
    slow_threshold_ms: float = DEFAULT_SLOW_THRESHOLD_MS,
) -> AsyncLogQueue:
    """Create and start the global queue, replacing (and stopping) any previous one."""
    global _global_queue, _slow_threshold_ms
    if _global_queue is not None:
        _global_queue.stop()
    _slow_threshold_ms = slow_threshold_ms
    _global_queue = AsyncLogQueue(
        FileLogger(log_dir=log_dir),
        flush_interval_ms=flush_interval_ms,
        flush_batch_size=flush_batch_size,
        max_queue_size=max_queue_size,
    )
    _global_queue.start()
    return _global_queue


def get_log_queue() -> Optional[AsyncLogQueue]:
    return _global_queue


def log(entry: LogEntry) -> bool:
    """
    Queue an entry on the global queue. Entries whose ``duration_ms`` reaches
    the slow threshold are also queued to the performance trail.

    Returns False when no queue is running or the entry was dropped.
    """
    if _global_queue is None:
        logger.debug(f"No log queue, dropping '{entry.data.get('event')}' entry")
        return False
    queued = _global_queue.push(entry)
    duration = entry.data.get("duration_ms")
    if queued and duration is not None and duration >= _slow_threshold_ms:
        slow = entry.as_performance()
        if slow is not None:
            _global_queue.push(slow)
    return queued


def shutdown_logging() -> None:
    """Stop the global queue after writing what is still pending."""
    global _global_queue, _slow_threshold_ms
    if _global_queue is not None:
        _global_queue.stop()
        _global_queue = None
    _slow_threshold_ms = DEFAULT_SLOW_THRESHOLD_MS
