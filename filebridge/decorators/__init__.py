"""FileBridge decorators — public re-exports."""

from filebridge.decorators.core import (
    belongs_to,
    has_many,
    picklist_value,
    record,
    web_api,
)

__all__ = ["record", "web_api", "has_many", "belongs_to", "picklist_value"]
