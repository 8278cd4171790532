"""Unit tests for filebridge.store.query — identifier validation and literal quoting."""

import pytest

from filebridge.engine.errors import FileBridgeValidationError
from filebridge.store.query import (
    FilterQuery,
    escape_literal,
    quote_literal,
    validate_identifier,
    validate_record_id,
)


class TestValidateIdentifier:
    @pytest.mark.parametrize("name", ["Account", "billing__Invoice", "account_id", "A1"])
    def test_accepts_plain_identifiers(self, name):
        assert validate_identifier(name) == name

    @pytest.mark.parametrize("name", [
        "",
        None,
        42,
        "1Account",
        "Account; DROP TABLE users",
        "name = 'x' OR 1=1",
        "account-id",
        "Ac count",
        "x" * 81,
    ])
    def test_rejects_everything_else(self, name):
        with pytest.raises(FileBridgeValidationError):
            validate_identifier(name, "field name")

    def test_error_names_the_kind(self):
        with pytest.raises(FileBridgeValidationError, match="Invalid record type"):
            validate_identifier("bad name", "record type")


class TestValidateRecordId:
    def test_accepts_15_and_18_chars(self):
        assert validate_record_id("003000000000001")
        assert validate_record_id("003a1b2c3d4e5f6a7b")

    @pytest.mark.parametrize("value", ["003", "003' OR '1'='1", None, "0" * 19])
    def test_rejects(self, value):
        with pytest.raises(FileBridgeValidationError):
            validate_record_id(value)


class TestLiterals:
    def test_escape_quotes_and_backslashes(self):
        assert escape_literal("O'Brien") == "O\\'Brien"
        assert escape_literal('say "hi"') == 'say \\"hi\\"'
        assert escape_literal("a\\b") == "a\\\\b"

    def test_backslash_escaped_first(self):
        assert escape_literal("\\'") == "\\\\\\'"

    def test_escape_control_characters(self):
        assert escape_literal("a\nb\tc\r") == "a\\nb\\tc\\r"

    def test_escape_none_and_numbers(self):
        assert escape_literal(None) == ""
        assert escape_literal(12) == "12"

    def test_quote_literal(self):
        assert quote_literal("Acme") == "'Acme'"
        assert quote_literal("x' OR '1'='1") == "'x\\' OR \\'1\\'=\\'1'"
        assert quote_literal(None) == "null"


class TestFilterQuery:
    def test_render_equals(self):
        q = FilterQuery(collection="Contact", field="account_id", value="001abc")
        assert q.render() == "SELECT Id FROM Contact WHERE account_id = '001abc'"
        assert str(q) == q.render()

    def test_render_quotes_hostile_value(self):
        q = FilterQuery(collection="Account", field="name", value="a' OR name != '")
        assert q.render() == "SELECT Id FROM Account WHERE name = 'a\\' OR name != \\''"

    def test_render_in(self):
        q = FilterQuery(
            collection="ContentDocumentLink",
            field="LinkedEntityId",
            value={"003b", "003a"},
            fields=("ContentDocumentId",),
            operator="IN",
        )
        assert q.render() == (
            "SELECT ContentDocumentId FROM ContentDocumentLink "
            "WHERE LinkedEntityId IN ('003a', '003b')"
        )

    def test_rejects_bad_collection(self):
        with pytest.raises(FileBridgeValidationError, match="record type"):
            FilterQuery(collection="Contact WHERE 1=1", field="name", value="x")

    def test_rejects_bad_field(self):
        with pytest.raises(FileBridgeValidationError, match="field name"):
            FilterQuery(collection="Contact", field="name--", value="x")

    def test_rejects_bad_operator(self):
        with pytest.raises(FileBridgeValidationError, match="Unsupported operator"):
            FilterQuery(collection="Contact", field="name", value="x", operator="LIKE")

    def test_is_frozen(self):
        q = FilterQuery(collection="Contact", field="name", value="x")
        with pytest.raises(AttributeError):
            q.value = "y"
