"""
FileBridge Record Store — filter queries over record tables and file links.

Two read primitives back the related-files lookup:

    select_ids(type_name, field_name, value)
        SELECT Id FROM <type> WHERE <field> = '<value>'
    select_file_links(entity_ids)
        one row per (linked record, file) pair, joined to the file's latest
        published version and its owner

Type and field names are checked against the schema service before a
statement is built; values are always bound parameters.
"""

from __future__ import annotations

import logging
import time
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy import Table, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from filebridge.db.content_models import (
    ContentDocument,
    ContentDocumentLink,
    ContentVersion,
    User,
)
from filebridge.db.session import session_scope
from filebridge.engine.context import get_execution_context
from filebridge.engine.errors import (
    FileBridgeQueryError,
    FileBridgeSchemaError,
    FileBridgeValidationError,
)
from filebridge.engine.logging import log, log_query_execution
from filebridge.schema.service import LINK_FIELD, LINK_TYPE, SchemaService
from filebridge.store.query import FilterQuery, validate_record_id
from filebridge.store.record_tables import build_record_tables

logger = logging.getLogger("filebridge.store.record_store")


def _coerce(value: Any, python_type: str, query: FilterQuery) -> Any:
    """Convert a caller-supplied filter value to the column's Python type."""
    if value is None or python_type in ("str", "list", "dict"):
        return value
    text = str(value).strip()
    try:
        if python_type == "int":
            return int(text)
        if python_type == "float":
            return float(text)
        if python_type == "Decimal":
            return Decimal(text)
        if python_type == "bool":
            lowered = text.lower()
            if lowered not in ("true", "false"):
                raise ValueError(text)
            return lowered == "true"
        if python_type == "datetime":
            return datetime.fromisoformat(text)
        if python_type == "date":
            return date.fromisoformat(text)
    except (ValueError, InvalidOperation) as e:
        raise FileBridgeQueryError(
            f"Value {value!r} is not a valid {python_type} for {query.collection}.{query.field}",
            record_type=query.collection,
            field_name=query.field,
            query=query.render(),
        ) from e
    return value


class RecordStore:
    """
    Executes filter queries against the record tables and the content tables.

    Args:
        session_factory: SQLAlchemy sessionmaker bound to the FileBridge DB.
        schema: Schema service used to validate type and field names.
        tables: Canonical type name → Table; built from the schema when omitted.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        schema: SchemaService,
        tables: Optional[Dict[str, Table]] = None,
    ):
        self._session_factory = session_factory
        self._schema = schema
        self._tables = tables if tables is not None else build_record_tables(schema)

    # -------------------------------------------------------------------
    # Anchor record ids
    # -------------------------------------------------------------------

    def select_ids(self, type_name: str, field_name: str, value: Any) -> Set[str]:
        """
        Ids of the ``type_name`` records whose ``field_name`` equals ``value``.

        Raises:
            FileBridgeQueryError: Unknown type or field, bad value, or a
                database failure.
        """
        try:
            query = FilterQuery(collection=type_name, field=field_name, value=value)
        except FileBridgeValidationError as e:
            raise FileBridgeQueryError(
                e.message,
                record_type=type_name,
                field_name=field_name,
                validation_errors=e.validation_errors,
            ) from e

        try:
            canonical = self._schema.resolve_type_name(type_name)
        except FileBridgeSchemaError as e:
            raise FileBridgeQueryError(
                f"Record type '{type_name}' is not supported",
                record_type=type_name,
                field_name=field_name,
                query=query.render(),
            ) from e

        table = self._tables.get(canonical)
        if table is None:
            raise FileBridgeQueryError(
                f"No storage table for record type '{canonical}'",
                record_type=canonical,
                query=query.render(),
            )

        if self._schema.is_id_field(field_name):
            column = table.c.id
            bound_value = value
        else:
            parsed_field = self._schema.find_field(canonical, field_name)
            if parsed_field is None:
                raise FileBridgeQueryError(
                    f"No such column '{field_name}' on entity '{canonical}'",
                    record_type=canonical,
                    field_name=field_name,
                    query=query.render(),
                )
            column = table.c[parsed_field.local_name]
            bound_value = _coerce(value, parsed_field.python_type, query)

        stmt = select(table.c.id).where(column == bound_value)
        rows = self._execute(canonical, query, stmt)
        ids = {row[0] for row in rows}
        logger.debug(f"{query.render()} → {len(ids)} ids")
        return ids

    # -------------------------------------------------------------------
    # File links
    # -------------------------------------------------------------------

    def select_file_links(self, entity_ids: Iterable[str]) -> List[Dict[str, Any]]:
        """
        One row per link from any of ``entity_ids`` to a file, carrying the
        file's latest published version. The same file appears once per
        linking record.
        """
        ids = sorted(set(entity_ids))
        if not ids:
            return []
        try:
            for entity_id in ids:
                validate_record_id(entity_id)
        except FileBridgeValidationError as e:
            raise FileBridgeQueryError(
                e.message,
                record_type=LINK_TYPE,
                field_name=LINK_FIELD,
                validation_errors=e.validation_errors,
            ) from e

        query = FilterQuery(
            collection=LINK_TYPE,
            field=LINK_FIELD,
            value=ids,
            fields=("ContentDocumentId",),
            operator="IN",
        )
        stmt = (
            select(
                ContentVersion.id.label("id"),
                ContentVersion.content_document_id.label("content_document_id"),
                ContentVersion.title.label("title"),
                ContentVersion.owner_id.label("owner_id"),
                User.name.label("owner_name"),
                ContentVersion.content_size.label("content_size"),
                ContentVersion.path_on_client.label("path_on_client"),
                ContentVersion.file_extension.label("file_extension"),
                ContentVersion.file_type.label("file_type"),
                ContentVersion.created_date.label("created_date"),
                ContentVersion.last_modified_date.label("last_modified_date"),
                ContentDocumentLink.linked_entity_id.label("linked_entity_id"),
            )
            .select_from(ContentDocumentLink)
            .join(ContentDocument, ContentDocument.id == ContentDocumentLink.content_document_id)
            .join(ContentVersion, ContentVersion.id == ContentDocument.latest_published_version_id)
            .outerjoin(User, User.id == ContentVersion.owner_id)
            .where(
                ContentDocumentLink.linked_entity_id.in_(ids),
                ContentDocument.is_deleted.is_(False),
            )
        )
        rows = self._execute(LINK_TYPE, query, stmt)
        return [dict(row._mapping) for row in rows]

    # -------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------

    def _execute(self, collection: str, query: FilterQuery, stmt) -> List[Any]:
        ctx = get_execution_context()
        start = time.monotonic()
        try:
            with session_scope(self._session_factory) as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as e:
            duration_ms = (time.monotonic() - start) * 1000
            log(log_query_execution(
                collection=collection,
                query=query.render(),
                row_count=0,
                duration_ms=duration_ms,
                execution_id=ctx.execution_id if ctx else None,
                user_id=ctx.user_id if ctx else None,
                success=False,
                error=str(e),
            ))
            logger.error(f"Query failed: {query.render()}: {e}")
            raise FileBridgeQueryError(
                f"Query failed on '{collection}': {e}",
                record_type=collection,
                field_name=query.field,
                query=query.render(),
            ) from e

        duration_ms = (time.monotonic() - start) * 1000
        log(log_query_execution(
            collection=collection,
            query=query.render(),
            row_count=len(rows),
            duration_ms=duration_ms,
            execution_id=ctx.execution_id if ctx else None,
            user_id=ctx.user_id if ctx else None,
        ))
        return rows
