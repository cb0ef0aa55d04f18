from __future__ import annotations

import tempfile
from pathlib import Path

from padstore.core.config import Settings
from padstore.core.db import Database
from padstore.core.documents import DocumentStore
from padstore.core.errors import ConnectionError
from padstore.services.bootstrap import Connected, Degraded, connect_database, resolve_server_config


def test_no_uri_runs_without_persistence_and_never_connects():
    calls = []

    def connector(uri):
        calls.append(uri)
        raise AssertionError("must not connect")

    cfg = resolve_server_config(Settings.from_env({}), connector=connector)
    assert cfg.database is None
    assert cfg.persistence is False
    assert cfg.expiry_days == 1
    assert calls == []


def test_failed_connection_degrades_instead_of_aborting():
    def connector(uri):
        raise ConnectionError("connection refused")

    settings = Settings.from_env({"POSTGRES_URI": "postgresql://nobody@127.0.0.1:1/none", "EXPIRY_DAYS": "3"})
    cfg = resolve_server_config(settings, connector=connector)
    assert cfg.database is None
    assert cfg.expiry_days == 3


def test_unreachable_database_degrades_with_real_connector():
    with tempfile.TemporaryDirectory() as td:
        uri = f"sqlite:///{Path(td) / 'missing' / 'pad.db'}"
        outcome = connect_database(uri)
    assert isinstance(outcome, Degraded)
    assert "startup check failed" in outcome.reason


def test_reachable_database_enables_persistence():
    with tempfile.TemporaryDirectory() as td:
        settings = Settings.from_env({"POSTGRES_URI": f"sqlite:///{Path(td) / 'pad.db'}"})
        outcome = connect_database(settings.database_uri)
        assert isinstance(outcome, Connected)
        outcome.store.db.close()

        cfg = resolve_server_config(settings)
        try:
            assert isinstance(cfg.database, DocumentStore)
            cfg.database.store("abc", "hello", "rust")
            assert cfg.database.count() == 1
        finally:
            cfg.database.db.close()


def test_missing_uri_outcome_is_degraded():
    outcome = connect_database(None, connector=Database.connect)
    assert outcome == Degraded("no database URI configured")
