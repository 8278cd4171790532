"""Unit tests for filebridge.files.models — summaries, ordering, output shape."""

import functools
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from filebridge.files.models import (
    DEFAULT_ICON_NAME,
    FileSummary,
    RelatedFile,
    compare_by_last_modified,
)


def _summary(file_id, modified=None, **extra):
    data = {
        "id": file_id,
        "content_document_id": f"doc-{file_id}",
        "title": f"File {file_id}",
        "last_modified_date": modified,
    }
    data.update(extra)
    return FileSummary(**data)


def _millis(ms):
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


class TestCompareByLastModified:
    def test_newer_sorts_first(self):
        newer = _summary("A", _millis(5000))
        older = _summary("B", _millis(3000))
        assert compare_by_last_modified(newer, older) == -1
        assert compare_by_last_modified(older, newer) == 1

    def test_equal_timestamps(self):
        a = _summary("A", _millis(4000))
        b = _summary("B", _millis(4000))
        assert compare_by_last_modified(a, b) == 0

    def test_same_file(self):
        a = _summary("A", _millis(1000))
        other_copy = _summary("A", _millis(9000))
        assert compare_by_last_modified(a, a) == 0
        assert compare_by_last_modified(a, other_copy) == 0

    def test_missing_timestamp_counts_as_zero(self):
        undated = _summary("A")
        dated = _summary("B", _millis(1))
        assert compare_by_last_modified(undated, dated) == 1
        assert compare_by_last_modified(undated, _summary("C")) == 0

    def test_sorted_descending(self):
        files = [
            _summary("A", _millis(3000)),
            _summary("B", _millis(5000)),
            _summary("C", None),
            _summary("D", _millis(4000)),
        ]
        ordered = sorted(files, key=functools.cmp_to_key(compare_by_last_modified))
        assert [f.id for f in ordered] == ["B", "D", "A", "C"]


class TestFileSummary:
    def test_from_row(self):
        row = {
            "id": "068000000000001",
            "content_document_id": "069000000000001",
            "title": "Contract",
            "owner_id": "005000000000001",
            "owner_name": "Ada Lovelace",
            "content_size": "2048",
            "path_on_client": "Contract.pdf",
            "file_extension": "pdf",
            "file_type": "PDF",
            "created_date": datetime(2024, 1, 1),
            "last_modified_date": datetime(2024, 2, 1, tzinfo=timezone.utc),
            "linked_entity_id": "003000000000001",
        }
        summary = FileSummary.from_row(row)
        assert summary.content_size == 2048
        assert summary.owner_name == "Ada Lovelace"
        assert summary.created_date.tzinfo is timezone.utc
        assert summary.created_timestamp == 1704067200000
        assert not hasattr(summary, "linked_entity_id")

    def test_from_row_missing_size(self):
        summary = FileSummary.from_row({"id": "A", "content_document_id": "D", "title": "t"})
        assert summary.content_size == 0
        assert summary.last_modified_timestamp == 0

    def test_negative_size_formats_as_zero(self):
        related = _summary("A", content_size=-1).to_related_file()
        assert related.content_size == -1
        assert related.human_readable_content_size == "0"

    def test_frozen(self):
        with pytest.raises(ValidationError):
            _summary("A").title = "renamed"


class TestRelatedFile:
    def test_to_related_file(self):
        summary = _summary(
            "A",
            _millis(5000),
            content_size=1536,
            file_type="PDF",
            file_extension="pdf",
            created_date=_millis(1000),
        )
        related = summary.to_related_file()
        assert related.human_readable_content_size == "1KB"
        assert related.file_type_icon_name == DEFAULT_ICON_NAME
        assert related.created_date_timestamp == 1000
        assert related.last_modified_date_timestamp == 5000

    def test_custom_icon(self):
        related = _summary("A").to_related_file("doctype:unknown")
        assert related.file_type_icon_name == "doctype:unknown"

    def test_api_dict_uses_platform_names(self):
        related = _summary("A", _millis(5000), content_size=0).to_related_file()
        data = related.to_api_dict()
        assert set(data) == {
            "Id", "ContentDocumentId", "Title", "OwnerId", "OwnerName",
            "ContentSize", "HumanReadableContentSize", "PathOnClient",
            "FileExtension", "FileType", "FileTypeIconName",
            "CreatedDate", "CreatedDateTimestamp",
            "LastModifiedDate", "LastModifiedDateTimestamp",
        }
        assert data["Id"] == "A"
        assert data["HumanReadableContentSize"] == "0"
        assert data["LastModifiedDateTimestamp"] == 5000
        assert isinstance(data["LastModifiedDate"], str)

    def test_populate_by_alias(self):
        related = RelatedFile(
            Id="A", ContentDocumentId="D", Title="t", HumanReadableContentSize="0"
        )
        assert related.id == "A"
        assert related.file_type_icon_name == DEFAULT_ICON_NAME
