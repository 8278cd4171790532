"""
FileBridge Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, Optional

import pytest
from sqlalchemy import MetaData

import filebridge  # noqa: F401  (injects @record & co. into builtins)


# ---------------------------------------------------------------------------
# Global singletons, reset between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset config, runtime, logging and execution context around each test."""
    import filebridge.engine.config as cfg_mod
    from filebridge.engine.context import clear_execution_context
    from filebridge.engine.logging import shutdown_logging
    from filebridge.engine.runtime import reset_runtime

    cfg_mod._platform_config = None
    clear_execution_context()
    yield
    reset_runtime()
    shutdown_logging()
    clear_execution_context()
    cfg_mod._platform_config = None


@pytest.fixture
def tmp_dir(tmp_path):
    """Provide a clean temp directory."""
    return tmp_path


# ---------------------------------------------------------------------------
# CRM demo records + schema
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def crm():
    """The CRM demo app's record module (imported once per session)."""
    import apps.crm.records as records

    return records


@pytest.fixture
def crm_classes(crm):
    return [crm.Account, crm.Contact, crm.Opportunity, crm.Case, crm.Note, crm.Invoice]


@pytest.fixture
def schema(crm_classes):
    from filebridge.schema.service import SchemaService

    return SchemaService(crm_classes)


@pytest.fixture
def record_metadata():
    return MetaData()


@pytest.fixture
def record_tables(schema, record_metadata):
    from filebridge.store.record_tables import build_record_tables

    return build_record_tables(schema, record_metadata)


@pytest.fixture
def session_factory(record_tables, record_metadata):
    """In-memory SQLite database with content and record tables."""
    from filebridge.db.base import engine_registry
    from filebridge.db.session import CORE_ENGINE, init_db

    factory = init_db("sqlite://", create_tables=True, extra_metadata=[record_metadata])
    yield factory
    engine_registry.dispose(CORE_ENGINE)


@pytest.fixture
def store(session_factory, schema, record_tables):
    from filebridge.store.record_store import RecordStore

    return RecordStore(session_factory, schema, record_tables)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

def _ts(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 12, 0, 0, tzinfo=timezone.utc)


class ContentSeeder:
    """Inserts users, records and linked files into the test database."""

    def __init__(self, session_factory, tables):
        self._factory = session_factory
        self._tables = tables

    def user(self, name: str, username: Optional[str] = None) -> str:
        from filebridge.db.base import new_record_id
        from filebridge.db.content_models import USER_KEY_PREFIX, User

        user_id = new_record_id(USER_KEY_PREFIX)
        with self._factory() as session:
            session.add(User(id=user_id, username=username or name.lower().replace(" ", "."), name=name))
            session.commit()
        return user_id

    def record(self, type_name: str, key_prefix: str, **values) -> str:
        from filebridge.db.base import new_record_id

        record_id = new_record_id(key_prefix)
        with self._factory() as session:
            session.execute(self._tables[type_name].insert().values(id=record_id, **values))
            session.commit()
        return record_id

    def file(
        self,
        title: str,
        size: int,
        modified: Optional[datetime],
        linked_to: Iterable[str],
        owner_id: Optional[str] = None,
        extension: str = "pdf",
        file_type: str = "PDF",
        deleted: bool = False,
        versions: int = 1,
    ) -> Dict[str, str]:
        """
        Create a document with ``versions`` versions (the last one published)
        linked to every id in ``linked_to``. Returns the document and
        latest version ids.
        """
        from filebridge.db.base import new_record_id
        from filebridge.db.content_models import (
            CONTENT_DOCUMENT_KEY_PREFIX,
            CONTENT_DOCUMENT_LINK_KEY_PREFIX,
            CONTENT_VERSION_KEY_PREFIX,
            ContentDocument,
            ContentDocumentLink,
            ContentVersion,
        )

        created = _ts(2023, 12, 1)
        document_id = new_record_id(CONTENT_DOCUMENT_KEY_PREFIX)
        version_ids = [new_record_id(CONTENT_VERSION_KEY_PREFIX) for _ in range(versions)]

        with self._factory() as session:
            session.add(ContentDocument(
                id=document_id,
                title=title,
                owner_id=owner_id,
                latest_published_version_id=version_ids[-1],
                is_deleted=deleted,
                created_date=created,
                last_modified_date=modified or created,
            ))
            for number, version_id in enumerate(version_ids, start=1):
                is_latest = number == versions
                session.add(ContentVersion(
                    id=version_id,
                    content_document_id=document_id,
                    title=title if is_latest else f"{title} (v{number})",
                    version_number=number,
                    content_size=size if is_latest else size // 2,
                    path_on_client=f"{title}.{extension}",
                    file_extension=extension,
                    file_type=file_type,
                    owner_id=owner_id,
                    is_latest=is_latest,
                    created_date=created,
                    last_modified_date=(modified or created) if is_latest else created,
                ))
            for entity_id in linked_to:
                session.add(ContentDocumentLink(
                    id=new_record_id(CONTENT_DOCUMENT_LINK_KEY_PREFIX),
                    content_document_id=document_id,
                    linked_entity_id=entity_id,
                ))
            session.commit()
        return {"document_id": document_id, "version_id": version_ids[-1]}


@pytest.fixture
def seeder(session_factory, record_tables):
    return ContentSeeder(session_factory, record_tables)


@pytest.fixture
def seeded(seeder):
    """
    Two accounts with contacts and files:

    Acme: contacts c1, c2
        old      — c1            — 2024-01-01 — 500 B
        shared   — c1 and c2     — 2024-03-01 — 1536 B
        newest   — c2, 2 versions — 2024-05-01 — 1 MB
        deleted  — c1 (deleted document)
    Globex: contact c3
        globex   — c3            — 2024-06-01
    """
    owner = seeder.user("Ada Lovelace")
    acme = seeder.record("Account", "001", name="Acme", industry="Technology")
    globex = seeder.record("Account", "001", name="Globex")
    c1 = seeder.record("Contact", "003", last_name="One", account_id=acme)
    c2 = seeder.record("Contact", "003", last_name="Two", account_id=acme)
    c3 = seeder.record("Contact", "003", last_name="Three", account_id=globex)

    files = {
        "old": seeder.file("old", 500, _ts(2024, 1, 1), [c1], owner_id=owner),
        "shared": seeder.file("shared", 1536, _ts(2024, 3, 1), [c1, c2], owner_id=owner),
        "newest": seeder.file("newest", 1048576, _ts(2024, 5, 1), [c2], owner_id=owner, versions=2),
        "deleted": seeder.file("deleted", 10, _ts(2024, 7, 1), [c1], deleted=True),
        "globex": seeder.file("globex", 2048, _ts(2024, 6, 1), [c3], owner_id=owner),
    }
    return {
        "owner": owner,
        "acme": acme,
        "globex": globex,
        "contacts": {"c1": c1, "c2": c2, "c3": c3},
        "files": files,
    }


# ---------------------------------------------------------------------------
# Execution contexts
# ---------------------------------------------------------------------------

@pytest.fixture
def execution_context():
    """A basic user in the sales group."""
    from filebridge.engine.context import ExecutionContext

    return ExecutionContext(
        user_id="005000000000001",
        username="test_user",
        user_type="basic",
        user_groups={"sales"},
        app_name="crm",
    )


@pytest.fixture
def admin_context():
    """Create a system_admin ExecutionContext."""
    from filebridge.engine.context import ExecutionContext

    return ExecutionContext(
        user_id="005000000000000",
        username="admin",
        user_type="system_admin",
        user_groups={"system_admins"},
        app_name=None,
    )
