"""
FileBridge Web APIs — the two operations called by the related-files widget.

    get_related_files(objectName, fieldName, fieldValue) -> [ {Id, Title, ...}, ... ]
    get_object_describe(myObjectName) -> {name, localName, ..., childRelationships}

Both run against the global runtime (see ``filebridge.engine.runtime``) and
return JSON-compatible dicts keyed by the platform field names. Every call
writes a ``web_apis/execution`` log entry; errors are logged and re-raised
unchanged.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List

from filebridge.decorators.core import web_api
from filebridge.engine.context import get_execution_context
from filebridge.engine.errors import FileBridgeError
from filebridge.engine.logging import log, log_operation_call
from filebridge.engine.runtime import get_runtime

logger = logging.getLogger("filebridge.api")


def _log_call(operation: str, inputs: Dict[str, Any], start: float, **outcome: Any) -> None:
    ctx = get_execution_context()
    log(log_operation_call(
        operation=operation,
        inputs=inputs,
        duration_ms=(time.monotonic() - start) * 1000,
        execution_id=ctx.execution_id if ctx else None,
        user_id=ctx.user_id if ctx else None,
        **outcome,
    ))


def _run_operation(operation: str, inputs: Dict[str, Any], call: Callable[[], Any]) -> Any:
    start = time.monotonic()
    try:
        result = call()
    except FileBridgeError as e:
        _log_call(operation, inputs, start, success=False, error=e.message)
        logger.warning(f"{operation} failed: {e.error_type}: {e.message}")
        raise
    except Exception as e:
        _log_call(operation, inputs, start, success=False, error=str(e))
        logger.exception(f"Unhandled error in {operation}: {e}")
        raise

    _log_call(
        operation, inputs, start,
        success=True,
        result_count=len(result) if isinstance(result, list) else None,
    )
    return result


@web_api(name="getRelatedFiles", method="GET", path="/files/related")
def get_related_files(objectName: str, fieldName: str, fieldValue: str) -> List[Dict[str, Any]]:
    """Files linked to the ``objectName`` records whose ``fieldName`` equals ``fieldValue``."""

    def call() -> List[Dict[str, Any]]:
        files = get_runtime().related_files.get_related_files(objectName, fieldName, fieldValue)
        return [f.to_api_dict() for f in files]

    inputs = {"objectName": objectName, "fieldName": fieldName, "fieldValue": fieldValue}
    return _run_operation("getRelatedFiles", inputs, call)


@web_api(name="getObjectDescribe", method="GET", path="/objects/describe")
def get_object_describe(myObjectName: str) -> Dict[str, Any]:
    """Labels, fields and file-capable child relationships of ``myObjectName``."""

    def call() -> Dict[str, Any]:
        return get_runtime().describe.get_object_describe(myObjectName).to_api_dict()

    return _run_operation("getObjectDescribe", {"myObjectName": myObjectName}, call)
