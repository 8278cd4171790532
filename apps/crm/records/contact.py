"""Contact record — a person at an Account."""

from typing import Optional

from pydantic import BaseModel, Field


@record
class Contact(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=40)
    last_name: str = Field(max_length=80)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=40)
    lead_source: Optional[str] = Field(
        default=None,
        description="Where the contact came from",
        json_schema_extra={
            "choices": [
                picklist_value("web", label="Web"),
                picklist_value("referral", label="Referral"),
                picklist_value("trade_show", label="Trade Show", active=False),
            ],
        },
    )
    account_id: Optional[str] = Field(default=None, max_length=18, title="Account ID")
    reports_to_id: Optional[str] = Field(default=None, max_length=18, title="Reports To ID")

    # Relationships
    account: Optional["Account"] = belongs_to("Account")
    reports_to: Optional["Contact"] = belongs_to("Contact", field="reports_to_id")

    class Meta:
        key_prefix = "003"
        files_enabled = True
        permissions = {"view": ["*"]}
