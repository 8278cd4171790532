"""FileBridge record store — validated filter queries over records and file links."""

from filebridge.store.query import (
    FilterQuery,
    escape_literal,
    quote_literal,
    validate_identifier,
    validate_record_id,
)
from filebridge.store.record_store import RecordStore
from filebridge.store.record_tables import build_record_tables

__all__ = [
    "RecordStore",
    "FilterQuery",
    "build_record_tables",
    "escape_literal",
    "quote_literal",
    "validate_identifier",
    "validate_record_id",
]
