"""
FileBridge Related Files — files linked to the records matched by a filter.

Flow of get_related_files(object_name, field_name, field_value):
    1. Anchor ids:  SELECT Id FROM <object_name> WHERE <field_name> = '<field_value>'
    2. No anchors → [] (the link query is not run)
    3. Link rows:   latest published version of every file linked to an anchor
    4. Deduplicate by file id (one row arrives per linking record)
    5. Sort by last-modified timestamp, newest first
    6. Project to RelatedFile (adds the readable size and the icon name)

Query errors from the record store propagate unchanged.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Dict, List

from filebridge.files.models import (
    DEFAULT_ICON_NAME,
    FileSummary,
    RelatedFile,
    compare_by_last_modified,
)
from filebridge.store.record_store import RecordStore

logger = logging.getLogger("filebridge.files.service")


class RelatedFilesService:
    """
    Resolves the files related to a parent record.

    Args:
        store: Record store used for both queries.
        icon_name: Icon classifier stamped on every result.
    """

    def __init__(self, store: RecordStore, icon_name: str = DEFAULT_ICON_NAME):
        self._store = store
        self._icon_name = icon_name

    def get_related_files(
        self,
        object_name: str,
        field_name: str,
        field_value: Any,
    ) -> List[RelatedFile]:
        anchor_ids = self._store.select_ids(object_name, field_name, field_value)
        if not anchor_ids:
            logger.debug(f"No {object_name} records with {field_name} = {field_value!r}")
            return []

        rows = self._store.select_file_links(anchor_ids)
        files = self.deduplicate(FileSummary.from_row(row) for row in rows)
        ordered = sorted(files, key=functools.cmp_to_key(compare_by_last_modified))

        logger.debug(
            f"{object_name}.{field_name}: {len(anchor_ids)} anchors, "
            f"{len(rows)} links, {len(ordered)} files"
        )
        return [summary.to_related_file(self._icon_name) for summary in ordered]

    @staticmethod
    def deduplicate(summaries) -> List[FileSummary]:
        """Collapse summaries sharing a file id, keeping the first seen."""
        unique: Dict[str, FileSummary] = {}
        for summary in summaries:
            unique.setdefault(summary.id, summary)
        return list(unique.values())
