"""
FileBridge Security — record type visibility for the current caller.

Sharing rules and field-level security are enforced by the platform before
FileBridge runs; the only check made here is whether the caller may see a
record type at all, from the record's ``Meta.permissions["view"]`` groups.

Rules:
- system_admin users see every type
- ``"*"`` in the view groups grants everyone
- otherwise the caller needs at least one matching group
- with no execution context only ``"*"`` types are visible
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from filebridge.engine.context import ExecutionContext, get_execution_context

logger = logging.getLogger("filebridge.engine.security")

WILDCARD = "*"


class RecordAccessPolicy:
    """Decides which record types the calling user can view."""

    def can_view(self, view_groups: Iterable[str], ctx: Optional[ExecutionContext] = None) -> bool:
        """
        Check whether the caller may view a record type.

        Args:
            view_groups: Groups from the record's ``Meta.permissions["view"]``.
            ctx: Execution context; defaults to the current one.
        """
        if ctx is None:
            ctx = get_execution_context()

        groups = set(view_groups or [])
        if WILDCARD in groups:
            return True
        if ctx is None:
            return False
        if ctx.is_system_admin:
            return True
        return bool(groups & set(ctx.user_groups))

    def filter_accessible(
        self,
        type_infos: Iterable,
        ctx: Optional[ExecutionContext] = None,
    ) -> List:
        """Keep only the record types (RecordTypeInfo) the caller can view."""
        if ctx is None:
            ctx = get_execution_context()
        accessible = [t for t in type_infos if self.can_view(t.view_groups, ctx)]
        logger.debug(
            f"Accessible types for {ctx.username if ctx else 'anonymous'}: "
            f"{[t.name for t in accessible]}"
        )
        return accessible
