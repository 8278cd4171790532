"""
FileBridge Filter Queries — identifier validation and literal quoting.

Type and field names are trusted only after they pass ``validate_identifier``
and the schema service confirms they exist; values are never spliced into
SQL — the record store binds them as parameters. ``FilterQuery.render()``
produces the query text (with quoted, escaped literals) used in logs and
error messages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Tuple

from filebridge.engine.errors import FileBridgeValidationError

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]{0,79}$")
RECORD_ID_PATTERN = re.compile(r"^[A-Za-z0-9]{15,18}$")

# Order matters: backslash first so later escapes are not doubled
_ESCAPES = (
    ("\\", "\\\\"),
    ("'", "\\'"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def validate_identifier(name: Any, kind: str = "identifier") -> str:
    """
    Check that ``name`` is a plain schema identifier.

    Raises:
        FileBridgeValidationError: Empty, non-string, or containing anything
            other than letters, digits and underscores.
    """
    if not isinstance(name, str) or not IDENTIFIER_PATTERN.match(name):
        raise FileBridgeValidationError(
            f"Invalid {kind}: {name!r}",
            validation_errors=[{"field": kind, "value": repr(name), "error": "invalid identifier"}],
        )
    return name


def validate_record_id(value: Any) -> str:
    """
    Check that ``value`` looks like a record id (15-18 alphanumerics).

    Raises:
        FileBridgeValidationError: Anything else.
    """
    if not isinstance(value, str) or not RECORD_ID_PATTERN.match(value):
        raise FileBridgeValidationError(
            f"Invalid record id: {value!r}",
            validation_errors=[{"field": "record id", "value": repr(value), "error": "invalid record id"}],
        )
    return value


def escape_literal(value: Any) -> str:
    """Escape a value for use inside a single-quoted query literal."""
    text = "" if value is None else str(value)
    for raw, escaped in _ESCAPES:
        text = text.replace(raw, escaped)
    return text


def quote_literal(value: Any) -> str:
    """Escape and wrap a value in single quotes: O'Brien → 'O\\'Brien'."""
    if value is None:
        return "null"
    return f"'{escape_literal(value)}'"


@dataclass(frozen=True)
class FilterQuery:
    """
    A single-condition filter over a named collection.

    operator is "=" (value is a scalar) or "IN" (value is an iterable).
    """
    collection: str
    field: str
    value: Any
    fields: Tuple[str, ...] = ("Id",)
    operator: str = "="

    def __post_init__(self):
        validate_identifier(self.collection, "record type")
        validate_identifier(self.field, "field name")
        for name in self.fields:
            validate_identifier(name, "field name")
        if self.operator not in ("=", "IN"):
            raise FileBridgeValidationError(f"Unsupported operator: {self.operator!r}")

    def render(self) -> str:
        """Query text with quoted literals, e.g. SELECT Id FROM Account WHERE Name = 'Acme'."""
        if self.operator == "IN":
            literal = "(" + ", ".join(quote_literal(v) for v in _as_iterable(self.value)) + ")"
        else:
            literal = quote_literal(self.value)
        return (
            f"SELECT {', '.join(self.fields)} FROM {self.collection} "
            f"WHERE {self.field} {self.operator} {literal}"
        )

    def __str__(self) -> str:
        return self.render()


def _as_iterable(value: Any) -> Iterable[Any]:
    if isinstance(value, (str, bytes)):
        return [value]
    return sorted(value, key=str)
