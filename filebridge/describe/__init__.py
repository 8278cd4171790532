"""FileBridge describe — record type metadata for the file widget."""

from filebridge.describe.models import (
    FieldDescriptor,
    PicklistOption,
    RelationshipDescriptor,
    TypeDescriptor,
)
from filebridge.describe.service import ObjectDescribeService

__all__ = [
    "ObjectDescribeService",
    "TypeDescriptor",
    "FieldDescriptor",
    "PicklistOption",
    "RelationshipDescriptor",
]
