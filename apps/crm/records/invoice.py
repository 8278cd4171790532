"""Invoice record — lives in the "billing" namespace (type name billing__Invoice)."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


@record
class Invoice(BaseModel):
    invoice_number: str = Field(max_length=30)
    status: str = Field(
        default="draft",
        json_schema_extra={
            "choices": [
                picklist_value("draft", label="Draft"),
                picklist_value("sent", label="Sent"),
                picklist_value("paid", label="Paid"),
                picklist_value("void", label="Void", active=False),
            ],
        },
    )
    total: Decimal = Field(default=Decimal("0"), ge=0)
    due_date: Optional[date] = Field(default=None)
    account_id: Optional[str] = Field(default=None, max_length=18, title="Account ID")

    # Relationships
    account: Optional["Account"] = belongs_to("Account")

    class Meta:
        namespace = "billing"
        key_prefix = "a01"
        files_enabled = True
        table_name = "billing_invoices"
        permissions = {"view": ["*"]}
