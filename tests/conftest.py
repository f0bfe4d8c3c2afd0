"""
Shared fixtures.

No Postgres required — every store here runs against a throwaway SQLite
file, with foreign keys switched on by the engine factory so cascades
behave as they do on Postgres.
"""

from __future__ import annotations

import pytest

from client_manager.store import ClientStore


@pytest.fixture
def sqlite_url(tmp_path, monkeypatch) -> str:
    url = f"sqlite:///{tmp_path / 'clients.db'}"
    monkeypatch.setenv("CLIENTS_DB_URL", url)
    monkeypatch.delenv("CLIENTS_ADMIN_DB_URL", raising=False)
    return url


@pytest.fixture
def store(sqlite_url):
    with ClientStore(sqlite_url) as s:
        s.ensure_schema()
        yield s
