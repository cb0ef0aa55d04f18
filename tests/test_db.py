from __future__ import annotations

import tempfile
from pathlib import Path

import pytest
import sqlalchemy as sa

from padstore.core import db as dbmod
from padstore.core.db import MAX_CONNECTIONS, Database, normalize_uri
from padstore.core.documents import DocumentStore
from padstore.core.errors import ConnectionError


def test_normalize_uri_rewrites_legacy_postgres_scheme():
    assert normalize_uri("postgres://u:p@h:5432/db") == "postgresql://u:p@h:5432/db"
    assert normalize_uri("postgresql://u@h/db") == "postgresql://u@h/db"
    assert normalize_uri(" sqlite:///x.db ") == "sqlite:///x.db"


def test_connect_creates_table_and_bounds_pool(db):
    with db.reader() as con:
        cols = [r[1] for r in con.execute(sa.text("PRAGMA table_info(document)"))]
    assert cols == ["id", "text", "language"]
    assert db.engine.pool.size() == MAX_CONNECTIONS


def test_connect_is_idempotent_across_restarts():
    with tempfile.TemporaryDirectory() as td:
        uri = f"sqlite:///{Path(td) / 'pad.db'}"
        first = Database.connect(uri)
        DocumentStore(first).store("abc", "hello", "python")
        first.close()

        second = Database.connect(uri)
        try:
            store = DocumentStore(second)
            assert store.count() == 1
            assert store.load("abc").text == "hello"
        finally:
            second.close()


def test_connect_failure_raises_connection_error():
    with tempfile.TemporaryDirectory() as td:
        missing = Path(td) / "no" / "such" / "dir" / "pad.db"
        with pytest.raises(ConnectionError) as ei:
            Database.connect(f"sqlite:///{missing}")
        assert ei.value.__cause__ is not None


def test_connect_rejects_garbage_uri():
    with pytest.raises(ConnectionError):
        Database.connect("not a uri at all")


def _break_statement(monkeypatch, prefix):
    """Make the startup statement starting with `prefix` query a table that does not exist."""
    real = dbmod.text

    def fake(sql):
        if sql.strip().startswith(prefix):
            return real("SELECT * FROM no_such_table")
        return real(sql)

    monkeypatch.setattr(dbmod, "text", fake)


def test_failed_liveness_check_is_fatal(monkeypatch):
    _break_statement(monkeypatch, "SELECT 1")
    with tempfile.TemporaryDirectory() as td:
        with pytest.raises(ConnectionError) as ei:
            Database.connect(f"sqlite:///{Path(td) / 'pad.db'}")
        assert ei.value.__cause__ is not None


def test_failed_schema_creation_is_fatal(monkeypatch):
    _break_statement(monkeypatch, "CREATE TABLE")
    with tempfile.TemporaryDirectory() as td:
        with pytest.raises(ConnectionError) as ei:
            Database.connect(f"sqlite:///{Path(td) / 'pad.db'}")
        assert ei.value.__cause__ is not None


def test_failed_row_count_check_is_not_fatal(monkeypatch):
    _break_statement(monkeypatch, "SELECT COUNT(*)")
    with tempfile.TemporaryDirectory() as td:
        handle = Database.connect(f"sqlite:///{Path(td) / 'pad.db'}")
        try:
            store = DocumentStore(handle)
            store.store("abc", "still usable")
            assert store.count() == 1
        finally:
            handle.close()
