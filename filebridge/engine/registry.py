"""
FileBridge Object Registry — the record classes and web APIs known to the process.

``@record`` registers a record class when its module is imported and
``@web_api`` registers an operation. Apps are plain packages: loading app
``crm`` means importing ``apps.crm.records``.

    object_registry.load_app("crm")
    object_registry.record_classes()          # → [Account, Contact, ...]
    object_registry.resolve("crm.records.Account")
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set

from filebridge.engine.errors import FileBridgeObjectNotFoundError

logger = logging.getLogger("filebridge.engine.registry")

# object_type → log / reference folder
OBJECT_CATEGORIES = {
    "record": "records",
    "web_api": "web_apis",
}
OBJECT_TYPES = frozenset(OBJECT_CATEGORIES)


@dataclass
class RegisteredObject:
    object_ref: str          # "crm.records.Account", "web_apis.getRelatedFiles"
    object_type: str         # "record" | "web_api"
    app_name: Optional[str]  # None for objects outside apps/
    name: str
    module_path: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    handler: Optional[Callable] = None  # record class or operation function
    is_active: bool = True

    @property
    def category(self) -> str:
        return OBJECT_CATEGORIES[self.object_type]


class ObjectRegistryManager:
    """Registrations keyed by object ref, in registration order."""

    def __init__(self):
        self._objects: Dict[str, RegisteredObject] = {}

    def register(self, obj: RegisteredObject) -> None:
        """Add ``obj``; a second registration of the same ref replaces the first."""
        if obj.object_type not in OBJECT_TYPES:
            raise ValueError(f"Invalid object type: {obj.object_type}. Valid: {sorted(OBJECT_TYPES)}")
        self._objects.pop(obj.object_ref, None)
        self._objects[obj.object_ref] = obj
        logger.debug(f"Registered {obj.object_type} {obj.object_ref}")

    def unregister(self, object_ref: str) -> None:
        self._objects.pop(object_ref, None)

    def resolve(self, object_ref: str) -> Optional[RegisteredObject]:
        return self._objects.get(object_ref)

    def resolve_or_raise(self, object_ref: str) -> RegisteredObject:
        obj = self._objects.get(object_ref)
        if obj is None:
            raise FileBridgeObjectNotFoundError(
                f"Object not found: {object_ref}",
                object_ref=object_ref,
            )
        return obj

    def get_by_type(self, object_type: str, app_name: Optional[str] = None) -> List[RegisteredObject]:
        return [
            o for o in self._objects.values()
            if o.object_type == object_type and (app_name is None or o.app_name == app_name)
        ]

    def get_by_app(self, app_name: str) -> List[RegisteredObject]:
        return [o for o in self._objects.values() if o.app_name == app_name]

    def record_classes(self, app_name: Optional[str] = None) -> List[type]:
        """Classes of the active @record registrations."""
        return [
            o.handler for o in self.get_by_type("record", app_name)
            if o.is_active and o.handler is not None
        ]

    def get_all_refs(self) -> Set[str]:
        return set(self._objects)

    def contains(self, object_ref: str) -> bool:
        return object_ref in self._objects

    @property
    def count(self) -> int:
        return len(self._objects)

    def clear(self) -> None:
        self._objects.clear()

    def load_app(self, app_name: str) -> int:
        """
        Import ``apps.<app_name>.records``; its @record classes register on import.

        Returns:
            How many records the app has registered.

        Raises:
            ImportError: The app package or its records module is missing.
        """
        importlib.import_module(f"apps.{app_name}.records")
        count = len(self.get_by_type("record", app_name=app_name))
        logger.info(f"Loaded app '{app_name}': {count} records")
        return count


object_registry = ObjectRegistryManager()
