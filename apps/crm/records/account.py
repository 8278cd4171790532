"""Account record — the parent most related-files lookups start from."""

from typing import List, Optional

from pydantic import BaseModel, Field


@record
class Account(BaseModel):
    """
    A customer or partner organisation.

    Demonstrates:
      - Picklists with an inactive option (industry "Agriculture")
      - Named child relationships to file-enabled types (contacts, opportunities,
        cases, invoices) and to a type without files (notes)
    """

    name: str = Field(max_length=255, title="Account Name")
    account_number: Optional[str] = Field(default=None, max_length=40)
    industry: Optional[str] = Field(
        default=None,
        json_schema_extra={
            "choices": [
                picklist_value("Technology"),
                picklist_value("Finance"),
                picklist_value("Healthcare"),
                picklist_value("Agriculture", active=False),
            ],
        },
    )
    type: Optional[str] = Field(
        default="Prospect",
        title="Account Type",
        json_schema_extra={"choices": ["Prospect", "Customer", "Partner"]},
    )
    website: Optional[str] = Field(default=None, max_length=255)
    annual_revenue: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = Field(
        default=None,
        json_schema_extra={"help_text": "Internal notes about the account"},
    )

    # Relationships
    contacts: List["Contact"] = has_many("Contact")
    opportunities: List["Opportunity"] = has_many("Opportunity")
    cases: List["Case"] = has_many("Case")
    notes: List["Note"] = has_many("Note", field="parent_id")
    invoices: List["Invoice"] = has_many("billing__Invoice", field="account_id")

    class Meta:
        label = "Account"
        key_prefix = "001"
        files_enabled = True
        permissions = {"view": ["*"]}
