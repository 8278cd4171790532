"""
FileBridge Execution Context — who is calling the current operation.

FileBridge does not authenticate anyone. The invoking layer (a web handler,
the CLI, a test) puts an ExecutionContext in place before calling an
operation; the describe service reads the caller's groups to decide which
child types are visible, and the log entries carry the execution id.

    with caller(ExecutionContext.for_groups("alice", {"sales"})):
        get_object_describe("Account")
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, Optional, Set

from filebridge.engine.errors import FileBridgeSecurityError

SYSTEM_ADMIN = "system_admin"

current_execution_context: ContextVar[Optional["ExecutionContext"]] = ContextVar(
    "filebridge_execution_context", default=None
)


def _new_execution_id() -> str:
    return f"exec_{uuid.uuid4().hex[:12]}"


@dataclass
class ExecutionContext:
    user_id: Any
    username: str
    user_type: str  # "basic" | "system_admin" | "service_account"
    user_groups: Set[str] = field(default_factory=set)
    execution_id: str = field(default_factory=_new_execution_id)
    app_name: Optional[str] = None

    @classmethod
    def system(cls, username: str = "system", app_name: Optional[str] = None) -> "ExecutionContext":
        """A system administrator: every record type is visible."""
        return cls(
            user_id=username,
            username=username,
            user_type=SYSTEM_ADMIN,
            user_groups={"system_admins"},
            app_name=app_name,
        )

    @classmethod
    def for_groups(
        cls,
        username: str,
        groups: Iterable[str],
        app_name: Optional[str] = None,
    ) -> "ExecutionContext":
        """A basic user who sees ``"*"`` types plus those shared with ``groups``."""
        return cls(
            user_id=username,
            username=username,
            user_type="basic",
            user_groups={g for g in groups if g},
            app_name=app_name,
        )

    @property
    def is_system_admin(self) -> bool:
        return self.user_type == SYSTEM_ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "user_type": self.user_type,
            "user_groups": sorted(self.user_groups),
            "execution_id": self.execution_id,
            "app_name": self.app_name,
        }


def set_execution_context(ctx: ExecutionContext) -> None:
    current_execution_context.set(ctx)


def get_execution_context() -> Optional[ExecutionContext]:
    """The caller of the running operation, or None when nobody set one."""
    return current_execution_context.get()


def require_execution_context() -> ExecutionContext:
    ctx = current_execution_context.get()
    if ctx is None:
        raise FileBridgeSecurityError("No execution context — caller unknown")
    return ctx


def clear_execution_context() -> None:
    current_execution_context.set(None)


@contextmanager
def caller(ctx: ExecutionContext) -> Iterator[ExecutionContext]:
    """Run a block as ``ctx``, restoring the previous caller afterwards."""
    token = current_execution_context.set(ctx)
    try:
        yield ctx
    finally:
        current_execution_context.reset(token)
