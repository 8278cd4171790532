"""
FileBridge Schema Service — type, field, picklist and relationship metadata.

Built from @record classes (normally everything in the object registry).
Answers, per record type: its labels and key prefix, its fields with their
picklist options and foreign-key targets, and its child relationships. Also
enumerates which types a foreign key may reference, including the
polymorphic file-link key ``ContentDocumentLink.LinkedEntityId``.

Lookups of type and field names are case-insensitive; results always carry
the canonical names.

Usage:
    schema = SchemaService.from_registry()
    info = schema.describe("Account")
    targets = schema.get_reference_targets("ContentDocumentLink", "LinkedEntityId")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from filebridge.engine.errors import FileBridgeSchemaError
from filebridge.engine.registry import ObjectRegistryManager, object_registry
from filebridge.schema.parser import ParsedField, ParsedRecord, parse_record, qualify

logger = logging.getLogger("filebridge.schema.service")

ID_FIELD = "Id"
LINK_TYPE = "ContentDocumentLink"
LINK_FIELD = "LinkedEntityId"


@dataclass
class PicklistEntry:
    value: str
    label: str
    active: bool = True
    default: bool = False


@dataclass
class FieldDescribe:
    name: str
    local_name: str
    label: str
    help_text: Optional[str] = None
    python_type: str = "str"
    picklist_values: List[PicklistEntry] = field(default_factory=list)
    reference_to: List[str] = field(default_factory=list)


@dataclass
class ChildRelationship:
    """A child type pointing at the described type through ``field``."""
    relationship_name: Optional[str]
    child_type: str
    field: str


@dataclass
class RecordTypeInfo:
    name: str
    local_name: str
    label: str
    label_plural: str
    key_prefix: Optional[str]
    files_enabled: bool
    view_groups: List[str]
    table_name: str
    fields: Dict[str, FieldDescribe] = field(default_factory=dict)
    child_relationships: List[ChildRelationship] = field(default_factory=list)


class SchemaService:
    """Read-only metadata catalog over a set of record classes."""

    def __init__(
        self,
        records: Iterable[type] = (),
        link_type: str = LINK_TYPE,
        link_field: str = LINK_FIELD,
    ):
        self._records: Dict[str, ParsedRecord] = {}
        self._lookup: Dict[str, str] = {}  # lower-case name → canonical name
        self._link_type = link_type
        self._link_field = link_field
        for record_class in records:
            self.add_record(record_class)

    @classmethod
    def from_registry(
        cls,
        registry: Optional[ObjectRegistryManager] = None,
        **kwargs,
    ) -> "SchemaService":
        """Build from every active @record in the registry."""
        return cls((registry or object_registry).record_classes(), **kwargs)

    def add_record(self, record_class: type) -> ParsedRecord:
        parsed = parse_record(record_class)
        self._records[parsed.type_name] = parsed
        self._lookup[parsed.type_name.lower()] = parsed.type_name
        logger.debug(f"Schema: added {parsed.type_name} ({len(parsed.fields)} fields)")
        return parsed

    # -------------------------------------------------------------------
    # Type lookups
    # -------------------------------------------------------------------

    def has_type(self, type_name: str) -> bool:
        return bool(type_name) and type_name.lower() in self._lookup

    def type_names(self) -> List[str]:
        return sorted(self._records.keys())

    def resolve_type_name(self, type_name: str) -> str:
        """Return the canonical spelling of a type name, or raise."""
        canonical = self._lookup.get((type_name or "").lower())
        if canonical is None:
            raise FileBridgeSchemaError(
                f"Unknown record type: '{type_name}'",
                type_name=type_name,
            )
        return canonical

    def get_parsed(self, type_name: str) -> ParsedRecord:
        return self._records[self.resolve_type_name(type_name)]

    def find_field(self, type_name: str, field_name: str) -> Optional[ParsedField]:
        """
        Find a scalar field by full or local name (case-insensitive).
        Returns None for unknown fields and for the implicit Id field.
        """
        parsed = self.get_parsed(type_name)
        wanted = (field_name or "").lower()
        for f in parsed.fields:
            if f.name.lower() == wanted or f.local_name.lower() == wanted:
                return f
        return None

    def is_id_field(self, field_name: str) -> bool:
        return (field_name or "").lower() == ID_FIELD.lower()

    # -------------------------------------------------------------------
    # Describe
    # -------------------------------------------------------------------

    def describe(self, type_name: str) -> RecordTypeInfo:
        """
        Describe one record type.

        Raises:
            FileBridgeSchemaError: Unknown type name.
        """
        parsed = self.get_parsed(type_name)
        fields = {
            f.name: FieldDescribe(
                name=f.name,
                local_name=f.local_name,
                label=f.label,
                help_text=f.help_text,
                python_type=f.python_type,
                picklist_values=[PicklistEntry(**entry) for entry in f.picklist],
                reference_to=[f.reference_to] if f.reference_to else [],
            )
            for f in parsed.fields
        }
        return RecordTypeInfo(
            name=parsed.type_name,
            local_name=parsed.local_name,
            label=parsed.label,
            label_plural=parsed.label_plural,
            key_prefix=parsed.key_prefix,
            files_enabled=parsed.files_enabled,
            view_groups=parsed.view_groups,
            table_name=parsed.table_name,
            fields=fields,
            child_relationships=self._child_relationships(parsed),
        )

    def get_type(self, type_name: str) -> RecordTypeInfo:
        """Alias of describe()."""
        return self.describe(type_name)

    def field_names(self, type_name: str) -> List[str]:
        """Full field names of a type, in declaration order."""
        return [f.name for f in self.get_parsed(type_name).fields]

    def _child_relationships(self, parent: ParsedRecord) -> List[ChildRelationship]:
        """
        Named relationships come from the parent's has_many declarations.
        A child's belongs_to(parent) with no matching has_many is reported
        with no relationship name.
        """
        result: List[ChildRelationship] = []
        covered = set()

        for rel in parent.relationships:
            if rel.rel_type != "has_many":
                continue
            child_name = self._lookup.get(rel.target.lower())
            if child_name is None:
                logger.warning(f"{parent.type_name}.{rel.name}: unknown child type '{rel.target}'")
                continue
            child = self._records[child_name]
            fk = qualify(rel.field, child.namespace)
            result.append(ChildRelationship(rel.name, child.type_name, fk))
            covered.add((child.type_name, rel.field))

        for child in self._records.values():
            for rel in child.relationships:
                if rel.rel_type != "belongs_to":
                    continue
                if rel.target.lower() != parent.type_name.lower():
                    continue
                if (child.type_name, rel.field) in covered:
                    continue
                result.append(ChildRelationship(None, child.type_name, qualify(rel.field, child.namespace)))

        return result

    # -------------------------------------------------------------------
    # Reference targets
    # -------------------------------------------------------------------

    def get_reference_targets(self, type_name: str, field_name: str) -> List[str]:
        """
        Types that ``type_name.field_name`` may reference.

        The file-link key references every file-enabled record type.
        """
        if (
            (type_name or "").lower() == self._link_type.lower()
            and (field_name or "").lower() == self._link_field.lower()
        ):
            return [name for name, parsed in sorted(self._records.items()) if parsed.files_enabled]

        f = self.find_field(type_name, field_name)
        if f is None:
            if self.is_id_field(field_name):
                return []
            raise FileBridgeSchemaError(
                f"Unknown field '{field_name}' on '{type_name}'",
                type_name=type_name,
                field_name=field_name,
            )
        if f.reference_to and self.has_type(f.reference_to):
            return [self.resolve_type_name(f.reference_to)]
        return []
