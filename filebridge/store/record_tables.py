"""
FileBridge Record Tables — SQLAlchemy tables generated from @record types.

Every record type gets a table with a key-prefixed string ``id`` primary key
and one column per scalar field (named by the field's local name).
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    LargeBinary,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)

from filebridge.schema.parser import ParsedField, ParsedRecord
from filebridge.schema.service import SchemaService

logger = logging.getLogger("filebridge.store.record_tables")

# Pydantic type name → SQLAlchemy column type
TYPE_MAPPING = {
    "str": String,
    "int": Integer,
    "float": Numeric,
    "Decimal": Numeric,
    "bool": Boolean,
    "datetime": DateTime,
    "date": Date,
    "dict": JSON,
    "list": JSON,
    "bytes": LargeBinary,
}


def _column_for(f: ParsedField) -> Column:
    col_type = TYPE_MAPPING.get(f.python_type, String)
    if col_type is String:
        type_instance = String(f.max_length) if f.max_length else Text()
    elif col_type is DateTime:
        type_instance = DateTime(timezone=True)
    else:
        type_instance = col_type()
    return Column(f.local_name, type_instance, nullable=True)


def build_record_table(parsed: ParsedRecord, metadata: MetaData) -> Table:
    """Build (or return the existing) Table for one parsed record."""
    if parsed.table_name in metadata.tables:
        return metadata.tables[parsed.table_name]
    columns = [Column("id", String(18), primary_key=True)]
    columns.extend(_column_for(f) for f in parsed.fields)
    return Table(parsed.table_name, metadata, *columns)


def build_record_tables(
    schema: SchemaService,
    metadata: Optional[MetaData] = None,
) -> Dict[str, Table]:
    """
    Build tables for every type in the schema.

    Returns:
        Mapping of canonical type name → Table. ``metadata`` holds them all
        so callers can ``metadata.create_all(engine)``.
    """
    metadata = metadata if metadata is not None else MetaData()
    tables: Dict[str, Table] = {}
    for type_name in schema.type_names():
        tables[type_name] = build_record_table(schema.get_parsed(type_name), metadata)
    logger.debug(f"Built {len(tables)} record tables")
    return tables
