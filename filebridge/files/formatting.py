"""
FileBridge File Formatting — byte sizes and timestamps for file summaries.

    human_readable_size(1536)      → "1KB"
    to_epoch_millis(datetime(...)) → 1700000000000
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional, Union

# Sizes that need a unit past "EB" raise IndexError; the table is not extended.
SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "EB"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _digit_groups(size: Union[int, float, Decimal]) -> int:
    groups = max(int(math.floor(math.log(size) / math.log(1024))), 0)
    # Float log can land one group off at exact powers of 1024
    while groups > 0 and size < 1024 ** groups:
        groups -= 1
    while size >= 1024 ** (groups + 1):
        groups += 1
    return groups


def human_readable_size(size: Optional[Union[int, float, Decimal]]) -> str:
    """
    Format a byte count with a single binary unit, truncating the value.

    ``0 → "0"``, ``500 → "500B"``, ``1536 → "1KB"``, ``1048576 → "1MB"``.
    """
    if size is None or size <= 0:
        return "0"
    groups = _digit_groups(size)
    value = int(size // (1024 ** groups))
    return f"{value}{SIZE_UNITS[groups]}"


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite returns them naive)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_epoch_millis(value: Optional[datetime]) -> int:
    """Milliseconds since the Unix epoch; a missing timestamp counts as 0."""
    if value is None:
        return 0
    return (as_utc(value) - _EPOCH) // timedelta(milliseconds=1)
