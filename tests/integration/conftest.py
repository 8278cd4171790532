"""
Integration test fixtures — a FileBridge project on disk with a SQLite file DB.

Run: pytest tests/integration/ -v -m integration
"""

from __future__ import annotations

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: end-to-end runs against an on-disk project")


@pytest.fixture
def integration_project(tmp_path, crm):
    """
    Create a project directory with filebridge.yaml pointing at a SQLite
    file database and the CRM app.
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "filebridge.yaml").write_text(
        "platform:\n"
        "  name: IntegrationTestPlatform\n"
        "  version: '2.0.0'\n"
        "environment: dev\n"
        "database:\n"
        f"  url: sqlite:///{(root / 'filebridge.db').as_posix()}\n"
        "logging:\n"
        f"  directory: {(root / '.filebridge' / 'logs').as_posix()}\n"
        "files:\n"
        "  icon_name: doctype:unknown\n"
        "apps:\n"
        "  - crm\n",
        encoding="utf-8",
    )
    return root
