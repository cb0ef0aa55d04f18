from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .errors import ConnectionError

logger = logging.getLogger(__name__)

MAX_CONNECTIONS = 5
CONNECT_TIMEOUT_SEC = 10

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS document (
  id TEXT PRIMARY KEY,
  text TEXT NOT NULL,
  language TEXT
)
"""


def normalize_uri(uri: str) -> str:
    """Rewrite the legacy `postgres://` scheme that hosting platforms still hand out."""
    uri = uri.strip()
    if uri.startswith("postgres://"):
        return "postgresql://" + uri[len("postgres://"):]
    return uri


def _engine_for(uri: str) -> Engine:
    url = make_url(normalize_uri(uri))
    backend = url.get_backend_name()
    if backend == "sqlite":
        if url.database in (None, "", ":memory:"):
            # a single shared connection, otherwise every checkout sees an empty database
            return create_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
        return create_engine(
            url,
            pool_size=MAX_CONNECTIONS,
            max_overflow=0,
            connect_args={"check_same_thread": False},
        )
    connect_args = {"connect_timeout": CONNECT_TIMEOUT_SEC} if backend == "postgresql" else {}
    return create_engine(
        url,
        pool_size=MAX_CONNECTIONS,
        max_overflow=0,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


class Database:
    """Shared handle over a bounded connection pool.

    Build it with `Database.connect(uri)`, which also verifies the server is
    reachable and that the `document` table exists. The handle is shared by
    every store operation; call `close()` to release the pool.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def connect(cls, uri: str) -> "Database":
        logger.info("Connecting to database...")
        try:
            engine = _engine_for(uri)
        except (SQLAlchemyError, ImportError, ValueError) as exc:
            logger.error("Database engine could not be created: %s", exc)
            raise ConnectionError(f"invalid database URI or driver: {exc}") from exc

        try:
            with engine.connect() as con:
                logger.info("Database connection established")
                try:
                    con.execute(text("SELECT 1"))
                except SQLAlchemyError as exc:
                    logger.error("Database connection test failed: %s", exc)
                    raise
                logger.info("Database connection test successful")

                logger.info("Checking/creating document table...")
                try:
                    con.execute(text(SCHEMA_SQL))
                    con.commit()
                except SQLAlchemyError as exc:
                    logger.error("Failed to create document table: %s", exc)
                    raise
                logger.info("Document table verified/created")

                # Advisory only; a freshly created role may not be able to read yet
                try:
                    con.execute(text("SELECT COUNT(*) FROM document")).scalar_one()
                    logger.info("Document table accessible, ready for operations")
                except SQLAlchemyError as exc:
                    con.rollback()
                    logger.warning("Could not query document table: %s", exc)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise ConnectionError(f"database startup check failed: {exc}") from exc

        return cls(engine)

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Yield a pooled connection inside a transaction; commits on success, rolls back on error."""
        with self.engine.begin() as con:
            yield con

    @contextmanager
    def reader(self) -> Iterator[Connection]:
        with self.engine.connect() as con:
            yield con

    def close(self) -> None:
        self.engine.dispose()
