"""
FileBridge Record Parser — @record Pydantic model → structured type metadata.

Reads a record class once: scalar fields (type, label, help text, picklist
options, foreign-key target), relationship declarations (has_many /
belongs_to) and the Meta options captured by ``@record``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, get_args, get_origin

from pydantic.fields import FieldInfo

from filebridge.decorators.core import _humanize, _to_snake, build_record_metadata

logger = logging.getLogger("filebridge.schema.parser")


def _get_field_type_name(annotation: Any) -> str:
    """Extract the base type name from a possibly-Optional annotation."""
    origin = get_origin(annotation)
    if origin is list:
        return "list"
    if origin is dict:
        return "dict"

    args = get_args(annotation)
    if args:
        # Optional[str] → str, Optional[List[str]] → list
        non_none = [a for a in args if a is not type(None)]
        if non_none:
            inner = non_none[0]
            origin_inner = get_origin(inner)
            if origin_inner is list:
                return "list"
            if origin_inner is dict:
                return "dict"
            if hasattr(inner, "__name__"):
                return inner.__name__
            return str(inner)

    if hasattr(annotation, "__name__"):
        return annotation.__name__

    return str(annotation)


def _is_optional(annotation: Any) -> bool:
    args = get_args(annotation)
    if args:
        return type(None) in args
    return False


def _is_relationship(field_info: FieldInfo) -> bool:
    default = field_info.default
    return isinstance(default, dict) and "_relationship" in default


def _get_extra(field_info: FieldInfo) -> Dict[str, Any]:
    extra = getattr(field_info, "json_schema_extra", None) or {}
    return extra if isinstance(extra, dict) else {}


def _get_max_length(field_info: FieldInfo) -> Optional[int]:
    for m in getattr(field_info, "metadata", []):
        if hasattr(m, "max_length"):
            return m.max_length
    return None


def _get_choices(field_info: FieldInfo) -> List[Dict[str, Any]]:
    """
    Normalise ``json_schema_extra["choices"]`` into picklist entries.

    Plain strings are active options labelled with their own value;
    dicts come from ``picklist_value()``.
    """
    entries: List[Dict[str, Any]] = []
    for choice in _get_extra(field_info).get("choices") or []:
        if isinstance(choice, dict):
            entries.append({
                "value": choice["value"],
                "label": choice.get("label", choice["value"]),
                "active": choice.get("active", True),
                "default": choice.get("default", False),
            })
        else:
            entries.append({"value": str(choice), "label": str(choice), "active": True, "default": False})
    return entries


# ---------------------------------------------------------------------------
# Parsed structures
# ---------------------------------------------------------------------------

class ParsedField:
    """Parsed scalar field from a Pydantic record."""

    def __init__(
        self,
        name: str,
        local_name: str,
        python_type: str,
        label: str,
        help_text: Optional[str] = None,
        nullable: bool = False,
        max_length: Optional[int] = None,
        picklist: Optional[List[Dict[str, Any]]] = None,
        reference_to: Optional[str] = None,
    ):
        self.name = name
        self.local_name = local_name
        self.python_type = python_type
        self.label = label
        self.help_text = help_text
        self.nullable = nullable
        self.max_length = max_length
        self.picklist = picklist or []
        self.reference_to = reference_to

    @property
    def is_picklist(self) -> bool:
        return bool(self.picklist)


class ParsedRelationship:
    """Parsed relationship declaration."""

    def __init__(
        self,
        name: str,
        rel_type: str,  # "has_many" | "belongs_to"
        target: str,
        field: str,
        back_ref: Optional[str] = None,
        required: bool = False,
    ):
        self.name = name
        self.rel_type = rel_type
        self.target = target
        self.field = field
        self.back_ref = back_ref
        self.required = required


class ParsedRecord:
    """Fully parsed @record with fields, relationships, and Meta."""

    def __init__(
        self,
        record_class: type,
        type_name: str,
        local_name: str,
        namespace: Optional[str],
        label: str,
        label_plural: str,
        key_prefix: Optional[str],
        files_enabled: bool,
        view_groups: List[str],
        table_name: str,
        fields: List[ParsedField],
        relationships: List[ParsedRelationship],
    ):
        self.record_class = record_class
        self.type_name = type_name
        self.local_name = local_name
        self.namespace = namespace
        self.label = label
        self.label_plural = label_plural
        self.key_prefix = key_prefix
        self.files_enabled = files_enabled
        self.view_groups = view_groups
        self.table_name = table_name
        self.fields = fields
        self.relationships = relationships


def qualify(name: str, namespace: Optional[str]) -> str:
    """Prefix a local name with its namespace: ("amount", "billing") → "billing__amount"."""
    return f"{namespace}__{name}" if namespace else name


def strip_namespace(name: str, namespace: Optional[str]) -> str:
    """Inverse of qualify(): drop a leading ``<namespace>__`` if present."""
    prefix = f"{namespace}__" if namespace else None
    if prefix and name.startswith(prefix):
        return name[len(prefix):]
    return name


def parse_record(record_class: type) -> ParsedRecord:
    """
    Parse a @record-decorated Pydantic class into structured data.

    Args:
        record_class: The Pydantic BaseModel class decorated with @record.

    Returns:
        ParsedRecord with fields, relationships, and Meta.
    """
    meta = getattr(record_class, "_filebridge_meta", None) or build_record_metadata(record_class)
    namespace = meta.get("namespace")
    local_type_name = meta["local_name"]

    fields: List[ParsedField] = []
    relationships: List[ParsedRelationship] = []

    model_fields = record_class.model_fields if hasattr(record_class, "model_fields") else {}

    for field_name, field_info in model_fields.items():
        if _is_relationship(field_info):
            rel_data = field_info.default
            rel_type = rel_data["_relationship"]
            if rel_type == "has_many":
                fk = rel_data.get("field") or f"{_to_snake(local_type_name)}_id"
            else:
                fk = rel_data.get("field") or f"{_to_snake(rel_data['target'])}_id"
            relationships.append(ParsedRelationship(
                name=field_name,
                rel_type=rel_type,
                target=rel_data["target"],
                field=fk,
                back_ref=rel_data.get("back_ref"),
                required=rel_data.get("required", False),
            ))
            continue

        annotation = field_info.annotation or str
        extra = _get_extra(field_info)
        fields.append(ParsedField(
            name=qualify(field_name, namespace),
            local_name=field_name,
            python_type=_get_field_type_name(annotation),
            label=field_info.title or extra.get("label") or _humanize(field_name),
            help_text=extra.get("help_text") or field_info.description or None,
            nullable=_is_optional(annotation),
            max_length=_get_max_length(field_info),
            picklist=_get_choices(field_info),
        ))

    # Point belongs_to foreign-key fields at their target type
    by_local = {f.local_name: f for f in fields}
    for rel in relationships:
        if rel.rel_type == "belongs_to" and rel.field in by_local:
            by_local[rel.field].reference_to = rel.target
        elif rel.rel_type == "belongs_to":
            logger.warning(
                f"{meta['name']}.{rel.name}: foreign key field '{rel.field}' is not declared"
            )

    return ParsedRecord(
        record_class=record_class,
        type_name=meta["name"],
        local_name=local_type_name,
        namespace=namespace,
        label=meta["label"],
        label_plural=meta["label_plural"],
        key_prefix=meta.get("key_prefix"),
        files_enabled=bool(meta.get("files_enabled")),
        view_groups=list((meta.get("permissions") or {}).get("view", [])),
        table_name=meta["table_name"],
        fields=fields,
        relationships=relationships,
    )
