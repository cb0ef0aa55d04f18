from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from padstore.core.config import Settings
from padstore.core.db import Database
from padstore.core.documents import DocumentStore
from padstore.core.errors import ConnectionError
from padstore.core.logging import log_exception
from padstore.services.context import ServerConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Connected:
    store: DocumentStore


@dataclass(frozen=True)
class Degraded:
    reason: str


DatabaseOutcome = Union[Connected, Degraded]


def connect_database(
    uri: Optional[str],
    connector: Callable[[str], Database] = Database.connect,
) -> DatabaseOutcome:
    """Try to enable persistence. Never raises ConnectionError; it becomes Degraded."""
    if not uri:
        logger.warning("No POSTGRES_URI environment variable found. Running without persistence!")
        return Degraded("no database URI configured")

    logger.info("Database URI is set (%d chars), initializing connection...", len(uri))
    try:
        db = connector(uri)
    except ConnectionError as exc:
        log_exception("Database connection FAILED", exc)
        logger.error("Starting without database persistence")
        return Degraded(str(exc))

    logger.info("Database connection SUCCESSFUL")
    return Connected(DocumentStore(db))


def resolve_server_config(
    settings: Settings,
    connector: Callable[[str], Database] = Database.connect,
) -> ServerConfig:
    outcome = connect_database(settings.database_uri, connector)
    if isinstance(outcome, Connected):
        database: Optional[DocumentStore] = outcome.store
    else:
        logger.info("Persistence disabled: %s", outcome.reason)
        database = None
    return ServerConfig(expiry_days=settings.expiry_days, database=database, settings=settings)
