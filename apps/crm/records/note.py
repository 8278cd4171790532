"""Note record — free text attached to an Account. Files cannot be linked to notes."""

from typing import Optional

from pydantic import BaseModel, Field


@record
class Note(BaseModel):
    title: str = Field(max_length=80)
    body: Optional[str] = Field(default=None)
    parent_id: str = Field(max_length=18, title="Parent ID")

    # Relationships
    parent: Optional["Account"] = belongs_to("Account", field="parent_id")

    class Meta:
        key_prefix = "002"
        permissions = {"view": ["*"]}
