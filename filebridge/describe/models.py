"""
FileBridge Describe Models — the getObjectDescribe response shape.

Field names serialize with camelCase aliases:
    {name, localName, label, labelPlural, keyPrefix, fields, childRelationships}
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _DescribeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PicklistOption(_DescribeModel):
    label: str
    value: str


class FieldDescriptor(_DescribeModel):
    name: str
    local_name: str = Field(alias="localName")
    label: str
    help_text: Optional[str] = Field(default=None, alias="helpText")
    picklist_values: List[PicklistOption] = Field(default_factory=list, alias="picklistValues")


class RelationshipDescriptor(_DescribeModel):
    """A named child relationship whose child type can carry file links."""
    relationship_name: str = Field(alias="relationshipName")
    field_name: str = Field(alias="fieldName")
    field_label: str = Field(alias="fieldLabel")
    object_name: str = Field(alias="objectName")
    object_label: str = Field(alias="objectLabel")
    object_label_plural: str = Field(alias="objectLabelPlural")


class TypeDescriptor(_DescribeModel):
    name: str
    local_name: str = Field(alias="localName")
    label: str
    label_plural: str = Field(alias="labelPlural")
    key_prefix: Optional[str] = Field(default=None, alias="keyPrefix")
    field_descriptors: Dict[str, FieldDescriptor] = Field(default_factory=dict, alias="fields")
    child_relationships: Dict[str, RelationshipDescriptor] = Field(
        default_factory=dict, alias="childRelationships"
    )

    def to_api_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
