"""
FileBridge Error Hierarchy — Structured exceptions surfaced to the calling layer.

Every failure in a related-files or describe call is fatal to that call and is
raised as-is: no retries, no partial results. Errors carry enough context to be
serialized into the structured log files.

Hierarchy:
    FileBridgeError
    ├── FileBridgeQueryError          — Filter query malformed / unknown type or field
    ├── FileBridgeSchemaError         — Record type lookup / describe failed
    ├── FileBridgeValidationError     — Identifier or input validation failed
    ├── FileBridgeSecurityError       — Access denied / no execution context
    ├── FileBridgeObjectNotFoundError — Object reference not found in registry
    └── FileBridgeConfigError         — Invalid filebridge.yaml
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class FileBridgeError(Exception):
    """
    Base error for all FileBridge failures.
    All context is kept serializable to JSON.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.execution_id: Optional[str] = context.get("execution_id")
        self.object_ref: Optional[str] = context.get("object_ref")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to a JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "execution_id": self.execution_id,
            "object_ref": self.object_ref,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("execution_id", "object_ref")
            },
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.object_ref:
            parts.append(f"object_ref={self.object_ref}")
        if self.execution_id:
            parts.append(f"execution_id={self.execution_id}")
        return " | ".join(parts)


class FileBridgeQueryError(FileBridgeError):
    """
    The record store could not run a filter query: unknown record type,
    unknown field, or a failure reported by the database.
    """

    def __init__(self, message: str, **context: Any):
        self.record_type: Optional[str] = context.get("record_type")
        self.field_name: Optional[str] = context.get("field_name")
        self.query: Optional[str] = context.get("query")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["record_type"] = self.record_type
        d["field_name"] = self.field_name
        d["query"] = self.query
        return d


class FileBridgeSchemaError(FileBridgeError):
    """Record type is not known to the schema service."""

    def __init__(self, message: str, **context: Any):
        self.type_name: Optional[str] = context.get("type_name")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["type_name"] = self.type_name
        return d


class FileBridgeValidationError(FileBridgeError):
    """Input validation failed. Includes field-level error details."""

    def __init__(self, message: str, **context: Any):
        self.validation_errors: Optional[List[Any]] = context.get("validation_errors")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["validation_errors"] = self.validation_errors
        return d


class FileBridgeSecurityError(FileBridgeError):
    """Access denied, or no execution context where one is required."""

    def __init__(self, message: str, **context: Any):
        self.user_id: Optional[Any] = context.get("user_id")
        self.user_groups: Optional[list] = context.get("user_groups")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["user_id"] = self.user_id
        d["user_groups"] = self.user_groups
        return d


class FileBridgeObjectNotFoundError(FileBridgeError):
    """Object reference not found in the registry."""
    pass


class FileBridgeConfigError(FileBridgeError):
    """Configuration error — invalid filebridge.yaml."""
    pass
