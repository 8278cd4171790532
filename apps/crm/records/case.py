"""Case record — a support ticket; only the support group can view cases."""

from typing import Optional

from pydantic import BaseModel, Field


@record
class Case(BaseModel):
    """
    Belongs to an Account (named through Account.cases) and optionally to a
    Contact. Contact declares no has_many for cases, so that link is an
    unnamed child relationship of Contact.
    """

    subject: str = Field(max_length=255)
    status: str = Field(
        default="new",
        json_schema_extra={"choices": ["new", "working", "escalated", "closed"]},
    )
    priority: str = Field(
        default="medium",
        json_schema_extra={"choices": ["low", "medium", "high"]},
    )
    is_escalated: bool = Field(default=False)
    account_id: Optional[str] = Field(default=None, max_length=18, title="Account ID")
    contact_id: Optional[str] = Field(default=None, max_length=18, title="Contact ID")

    # Relationships
    account: Optional["Account"] = belongs_to("Account")
    contact: Optional["Contact"] = belongs_to("Contact")

    class Meta:
        key_prefix = "500"
        files_enabled = True
        permissions = {"view": ["support"]}
