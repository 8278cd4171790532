"""
FileBridge File Models — file summaries and the related-files output shape.

FileSummary: One linked file (latest published version), keyed by file id.
RelatedFile: The record returned to the UI widget, with platform field names
             (Id, ContentDocumentId, ..., LastModifiedDateTimestamp).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from filebridge.files.formatting import as_utc, human_readable_size, to_epoch_millis

DEFAULT_ICON_NAME = "doctype:attachment"


# ---------------------------------------------------------------------------
# File summary
# ---------------------------------------------------------------------------

class FileSummary(BaseModel):
    """
    Latest published version of a file linked to an anchor record.

    Two summaries with the same ``id`` describe the same file; the link
    query returns one per linking record and the resolver collapses them.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Content version id")
    content_document_id: str = Field(description="Parent document id")
    title: str = Field(description="File title")
    owner_id: Optional[str] = Field(default=None, description="Owning user id")
    owner_name: Optional[str] = Field(default=None, description="Owner display name")
    content_size: int = Field(default=0, description="Size in bytes")
    path_on_client: Optional[str] = Field(default=None, description="Original client path")
    file_extension: Optional[str] = Field(default=None)
    file_type: Optional[str] = Field(default=None, description="File type classification, e.g. PDF")
    created_date: Optional[datetime] = Field(default=None)
    last_modified_date: Optional[datetime] = Field(default=None)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "FileSummary":
        """Build from a ``RecordStore.select_file_links`` row (extra keys ignored)."""
        data = {name: row.get(name) for name in cls.model_fields}
        data["content_size"] = int(data.get("content_size") or 0)
        data["created_date"] = as_utc(data.get("created_date"))
        data["last_modified_date"] = as_utc(data.get("last_modified_date"))
        return cls(**data)

    @property
    def created_timestamp(self) -> int:
        return to_epoch_millis(self.created_date)

    @property
    def last_modified_timestamp(self) -> int:
        return to_epoch_millis(self.last_modified_date)

    def to_related_file(self, icon_name: str = DEFAULT_ICON_NAME) -> "RelatedFile":
        return RelatedFile(
            id=self.id,
            content_document_id=self.content_document_id,
            title=self.title,
            owner_id=self.owner_id,
            owner_name=self.owner_name,
            content_size=self.content_size,
            human_readable_content_size=human_readable_size(self.content_size),
            path_on_client=self.path_on_client,
            file_extension=self.file_extension,
            file_type=self.file_type,
            file_type_icon_name=icon_name,
            created_date=self.created_date,
            created_date_timestamp=self.created_timestamp,
            last_modified_date=self.last_modified_date,
            last_modified_date_timestamp=self.last_modified_timestamp,
        )


def compare_by_last_modified(a: FileSummary, b: FileSummary) -> int:
    """
    Comparator for ``functools.cmp_to_key``: newest last-modified first.

    Returns the sign of ``b - a`` on epoch millis without computing the
    difference. The same file, or equal timestamps, compare as 0.
    """
    if a.id == b.id:
        return 0
    mine = a.last_modified_timestamp
    other = b.last_modified_timestamp
    if other > mine:
        return 1
    if other < mine:
        return -1
    return 0


# ---------------------------------------------------------------------------
# Output shape
# ---------------------------------------------------------------------------

class RelatedFile(BaseModel):
    """One entry of the related-files response."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(alias="Id")
    content_document_id: str = Field(alias="ContentDocumentId")
    title: str = Field(alias="Title")
    owner_id: Optional[str] = Field(default=None, alias="OwnerId")
    owner_name: Optional[str] = Field(default=None, alias="OwnerName")
    content_size: int = Field(default=0, alias="ContentSize")
    human_readable_content_size: str = Field(alias="HumanReadableContentSize")
    path_on_client: Optional[str] = Field(default=None, alias="PathOnClient")
    file_extension: Optional[str] = Field(default=None, alias="FileExtension")
    file_type: Optional[str] = Field(default=None, alias="FileType")
    file_type_icon_name: str = Field(default=DEFAULT_ICON_NAME, alias="FileTypeIconName")
    created_date: Optional[datetime] = Field(default=None, alias="CreatedDate")
    created_date_timestamp: int = Field(default=0, alias="CreatedDateTimestamp")
    last_modified_date: Optional[datetime] = Field(default=None, alias="LastModifiedDate")
    last_modified_date_timestamp: int = Field(default=0, alias="LastModifiedDateTimestamp")

    def to_api_dict(self) -> Dict[str, Any]:
        """JSON-compatible dict keyed by the platform field names."""
        return self.model_dump(by_alias=True, mode="json")
