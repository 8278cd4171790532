"""
FileBridge Object Describe — field and child-relationship metadata for a type.

Only relationships that can lead to files are reported: the child type must
be one the file-link key (``ContentDocumentLink.LinkedEntityId``) may
reference, the caller must be able to view it, and the relationship must
have a name. Relationship labels are not part of the schema metadata and are
not returned.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Set

from filebridge.decorators.core import _humanize
from filebridge.describe.models import (
    FieldDescriptor,
    PicklistOption,
    RelationshipDescriptor,
    TypeDescriptor,
)
from filebridge.engine.context import get_execution_context
from filebridge.engine.logging import log, log_describe
from filebridge.engine.security import RecordAccessPolicy
from filebridge.schema.parser import strip_namespace
from filebridge.schema.service import (
    LINK_FIELD,
    LINK_TYPE,
    ChildRelationship,
    FieldDescribe,
    RecordTypeInfo,
    SchemaService,
)

logger = logging.getLogger("filebridge.describe.service")


class ObjectDescribeService:
    """
    Builds TypeDescriptors from the schema service.

    Args:
        schema: Schema service holding the registered record types.
        policy: Decides which child types the caller may see.
        link_type / link_field: The polymorphic file-link foreign key.
    """

    def __init__(
        self,
        schema: SchemaService,
        policy: Optional[RecordAccessPolicy] = None,
        link_type: str = LINK_TYPE,
        link_field: str = LINK_FIELD,
    ):
        self._schema = schema
        self._policy = policy or RecordAccessPolicy()
        self._link_type = link_type
        self._link_field = link_field

    def get_object_describe(self, type_name: str) -> TypeDescriptor:
        """
        Describe ``type_name``.

        Raises:
            FileBridgeSchemaError: Unknown type name.
        """
        info = self._schema.describe(type_name)
        fields = {f.local_name: self._field_descriptor(f) for f in info.fields.values()}

        allowed = self.file_linkable_types()
        relationships: Dict[str, RelationshipDescriptor] = {}
        for child in info.child_relationships:
            if not (child.relationship_name or "").strip():
                continue
            if child.child_type not in allowed:
                continue
            relationships[child.relationship_name] = self._relationship_descriptor(child)

        descriptor = TypeDescriptor(
            name=info.name,
            local_name=info.local_name,
            label=info.label,
            label_plural=info.label_plural,
            key_prefix=info.key_prefix,
            field_descriptors=fields,
            child_relationships=relationships,
        )

        ctx = get_execution_context()
        log(log_describe(
            type_name=info.name,
            field_count=len(fields),
            relationship_count=len(relationships),
            execution_id=ctx.execution_id if ctx else None,
        ))
        return descriptor

    def file_linkable_types(self) -> Set[str]:
        """Types the file-link key may reference that the caller can view."""
        targets: List[RecordTypeInfo] = [
            self._schema.describe(name)
            for name in self._schema.get_reference_targets(self._link_type, self._link_field)
        ]
        return {t.name for t in self._policy.filter_accessible(targets)}

    # -------------------------------------------------------------------
    # Shaping
    # -------------------------------------------------------------------

    @staticmethod
    def _field_descriptor(f: FieldDescribe) -> FieldDescriptor:
        return FieldDescriptor(
            name=f.name,
            local_name=f.local_name,
            label=f.label,
            help_text=f.help_text,
            picklist_values=[
                PicklistOption(label=entry.label, value=entry.value)
                for entry in f.picklist_values
                if entry.active
            ],
        )

    def _relationship_descriptor(self, child: ChildRelationship) -> RelationshipDescriptor:
        child_info = self._schema.describe(child.child_type)
        fk = self._schema.find_field(child.child_type, child.field)
        if fk is not None:
            field_label = fk.label
        else:
            namespace = self._schema.get_parsed(child.child_type).namespace
            field_label = _humanize(strip_namespace(child.field, namespace))
        return RelationshipDescriptor(
            relationship_name=child.relationship_name,
            field_name=child.field,
            field_label=field_label,
            object_name=child_info.name,
            object_label=child_info.label,
            object_label_plural=child_info.label_plural,
        )
