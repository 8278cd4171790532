"""FileBridge files — related-files lookup and file summary formatting."""

from filebridge.files.formatting import SIZE_UNITS, human_readable_size, to_epoch_millis
from filebridge.files.models import FileSummary, RelatedFile, compare_by_last_modified
from filebridge.files.service import RelatedFilesService

__all__ = [
    "RelatedFilesService",
    "FileSummary",
    "RelatedFile",
    "compare_by_last_modified",
    "human_readable_size",
    "to_epoch_millis",
    "SIZE_UNITS",
]
