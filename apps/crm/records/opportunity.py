"""Opportunity record — a pending deal, visible to the sales team only."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


@record
class Opportunity(BaseModel):
    name: str = Field(max_length=120)
    stage: str = Field(
        default="prospecting",
        json_schema_extra={
            "choices": [
                picklist_value("prospecting", label="Prospecting", default=True),
                picklist_value("negotiation", label="Negotiation"),
                picklist_value("closed_won", label="Closed Won"),
                picklist_value("closed_lost", label="Closed Lost"),
                picklist_value("on_hold", label="On Hold", active=False),
            ],
        },
    )
    amount: Optional[float] = Field(default=None, ge=0)
    close_date: Optional[date] = Field(default=None)
    account_id: Optional[str] = Field(default=None, max_length=18, title="Account ID")

    # Relationships
    account: Optional["Account"] = belongs_to("Account")

    class Meta:
        label_plural = "Opportunities"
        key_prefix = "006"
        files_enabled = True
        table_name = "opportunities"
        permissions = {"view": ["sales", "sales_managers"]}
