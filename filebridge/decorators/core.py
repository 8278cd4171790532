"""
FileBridge Decorators — @record, @web_api and record relationship helpers.

These decorators:
1. Register the class/function in the ObjectRegistryManager
2. Attach metadata for the engine (labels, key prefix, permissions, etc.)
3. Do NOT intercept execution
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from filebridge.engine.registry import RegisteredObject, object_registry

logger = logging.getLogger("filebridge.decorators")


# ---------------------------------------------------------------------------
# Helper to attach metadata + register
# ---------------------------------------------------------------------------

def _register_decorator(
    func_or_class: Any,
    object_type: str,
    metadata: Dict[str, Any],
) -> Any:
    """Attach metadata to a decorated function/class and register it."""
    func_or_class._filebridge_type = object_type
    func_or_class._filebridge_meta = metadata

    name = metadata.get("name") or getattr(func_or_class, "__name__", str(func_or_class))
    module = getattr(func_or_class, "__module__", "")
    app_name = _infer_app(module)
    folder = "records" if object_type == "record" else "web_apis"
    object_ref = f"{app_name}.{folder}.{name}" if app_name else f"{folder}.{name}"

    reg = RegisteredObject(
        object_ref=object_ref,
        object_type=object_type,
        app_name=app_name or None,
        name=name,
        module_path=module,
        handler=func_or_class,
        metadata=metadata,
    )
    object_registry.register(reg)

    logger.debug(f"Registered {object_type}: {object_ref}")
    return func_or_class


def _infer_app(module_path: str) -> str:
    """Infer app name from module path: apps.crm.records.account → crm."""
    parts = module_path.split(".")
    if "apps" in parts:
        idx = parts.index("apps")
        if idx + 1 < len(parts):
            return parts[idx + 1]
    return ""


def _to_snake(name: str) -> str:
    """Convert CamelCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def _humanize(name: str) -> str:
    """CamelCase or snake_case → 'Title Case' label."""
    return _to_snake(name).replace("_", " ").strip().title()


# ---------------------------------------------------------------------------
# @record
# ---------------------------------------------------------------------------

def record(cls: Optional[type] = None, **kwargs: Any) -> Any:
    """
    Decorator for records — Pydantic data models describing a record type.

    Meta options:
        namespace      — prefix for the type and field names ("ns" → "ns__Type")
        label          — singular display label (default: humanized class name)
        label_plural   — plural display label (default: label + "s")
        key_prefix     — three-character id prefix
        files_enabled  — whether files can be linked to records of this type
        permissions    — {"view": [groups]}; "*" means everyone
        table_name     — storage table (default: snake_case plural)
    """
    def decorator(klass: type) -> type:
        metadata = build_record_metadata(klass, name=kwargs.get("name"))
        return _register_decorator(klass, "record", metadata)

    if cls is not None:
        return decorator(cls)
    return decorator


def build_record_metadata(klass: type, name: Optional[str] = None) -> Dict[str, Any]:
    """Read a record class's Meta into the registry metadata dict."""
    meta = getattr(klass, "Meta", None)
    namespace = getattr(meta, "namespace", None)
    local_name = name or klass.__name__
    label = getattr(meta, "label", None) or _humanize(local_name)
    return {
        "name": f"{namespace}__{local_name}" if namespace else local_name,
        "local_name": local_name,
        "namespace": namespace,
        "label": label,
        "label_plural": getattr(meta, "label_plural", None) or f"{label}s",
        "key_prefix": getattr(meta, "key_prefix", None),
        "files_enabled": getattr(meta, "files_enabled", False),
        "permissions": getattr(meta, "permissions", {}),
        "table_name": getattr(meta, "table_name", _to_snake(local_name) + "s"),
    }


# ---------------------------------------------------------------------------
# @web_api
# ---------------------------------------------------------------------------

def web_api(
    func: Optional[Callable] = None,
    *,
    name: Optional[str] = None,
    method: str = "GET",
    path: str = "",
    version: str = "v1",
    permissions: Optional[List[str]] = None,
) -> Any:
    """Decorator for web APIs — expose functions as invokable operations."""
    metadata = {
        "name": name,
        "method": method,
        "path": path,
        "version": version,
        "permissions": permissions or [],
    }

    def decorator(fn: Callable) -> Callable:
        metadata["name"] = metadata["name"] or fn.__name__

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            return fn(*args, **kwargs)

        return _register_decorator(wrapper, "web_api", metadata)

    if func is not None:
        return decorator(func)
    return decorator


# ---------------------------------------------------------------------------
# Record relationship and picklist helpers
# ---------------------------------------------------------------------------

def has_many(
    target: str,
    field: Optional[str] = None,
    back_ref: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Declare a has-many (child) relationship on a record.

    ``field`` is the foreign-key field on the target pointing back at this
    record; defaults to ``<this_record>_id`` resolved by the schema service.
    """
    return {
        "_relationship": "has_many",
        "target": target,
        "field": field,
        "back_ref": back_ref,
    }


def belongs_to(
    target: str,
    field: Optional[str] = None,
    required: bool = False,
) -> Dict[str, Any]:
    """
    Declare a belongs-to (parent) relationship on a record.

    ``field`` is the local foreign-key field; defaults to ``<target>_id``.
    """
    return {
        "_relationship": "belongs_to",
        "target": target,
        "field": field,
        "required": required,
    }


def picklist_value(
    value: str,
    label: Optional[str] = None,
    active: bool = True,
    default: bool = False,
) -> Dict[str, Any]:
    """Declare one picklist option for ``Field(json_schema_extra={"choices": [...]})``."""
    return {
        "value": value,
        "label": label if label is not None else value,
        "active": active,
        "default": default,
    }
