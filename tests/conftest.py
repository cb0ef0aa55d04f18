from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Iterator

import pytest

from padstore.core.db import Database
from padstore.core.documents import DocumentStore


@pytest.fixture()
def db() -> Iterator[Database]:
    with tempfile.TemporaryDirectory() as td:
        handle = Database.connect(f"sqlite:///{Path(td) / 'pad.db'}")
        try:
            yield handle
        finally:
            handle.close()


@pytest.fixture()
def store(db: Database) -> DocumentStore:
    return DocumentStore(db)
