"""CRM Records. Each record is defined in its own module."""

from .account import Account
from .contact import Contact
from .opportunity import Opportunity
from .case import Case
from .note import Note
from .invoice import Invoice

# Resolve cross-file forward references (e.g. Account ↔ Contact)
for _model in (Account, Contact, Opportunity, Case, Note, Invoice):
    _model.model_rebuild()

__all__ = ["Account", "Contact", "Opportunity", "Case", "Note", "Invoice"]
