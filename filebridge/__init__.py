"""
FileBridge — related files and record describe helpers for a Python
application platform.

Auto-injects the record decorators into Python builtins so that app record
modules never need to write ``from filebridge.decorators import …``.

After ``import filebridge`` the following names are available globally:

    @record, @web_api, has_many, belongs_to, picklist_value
"""

__version__ = "1.0.0"
__all__ = ["engine", "decorators", "db", "schema", "store", "files", "describe"]


def _inject_decorators_into_builtins() -> None:
    """
    Push every public decorator from ``filebridge.decorators`` into
    ``builtins``. Safe to call multiple times — skips if already injected.
    """
    import builtins

    if getattr(builtins, "_filebridge_decorators_injected", False):
        return

    from filebridge.decorators import (
        belongs_to,
        has_many,
        picklist_value,
        record,
        web_api,
    )

    _names = {
        "record": record,
        "web_api": web_api,
        "has_many": has_many,
        "belongs_to": belongs_to,
        "picklist_value": picklist_value,
    }

    for name, obj in _names.items():
        setattr(builtins, name, obj)

    builtins._filebridge_decorators_injected = True


_inject_decorators_into_builtins()
