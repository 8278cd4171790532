"""FileBridge schema service — record type metadata built from @record classes."""

from filebridge.schema.service import (
    ChildRelationship,
    FieldDescribe,
    PicklistEntry,
    RecordTypeInfo,
    SchemaService,
)

__all__ = ["SchemaService", "RecordTypeInfo", "FieldDescribe", "PicklistEntry", "ChildRelationship"]
