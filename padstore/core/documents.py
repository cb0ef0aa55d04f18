from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError

from .db import Database
from .errors import NotFoundError, StoreError
from .models import PersistedDocument

logger = logging.getLogger(__name__)


@dataclass
class DocumentStore:
    """Load, upsert and count rows of the `document` table."""

    db: Database

    LOAD_SQL = "SELECT text, language FROM document WHERE id = :id"
    UPSERT_SQL = (
        "INSERT INTO document (id, text, language) VALUES (:id, :text, :language) "
        "ON CONFLICT (id) DO UPDATE SET text = excluded.text, language = excluded.language"
    )
    COUNT_SQL = "SELECT COUNT(*) FROM document"

    def load(self, document_id: str) -> PersistedDocument:
        logger.debug("Loading document with ID: %s", document_id)
        try:
            with self.db.reader() as con:
                row = con.execute(sa.text(self.LOAD_SQL), {"id": document_id}).mappings().first()
        except SQLAlchemyError as exc:
            logger.warning("Failed to load document %s: %s", document_id, exc)
            raise StoreError(f"failed to load document {document_id}: {exc}") from exc

        if row is None:
            logger.info("Document not found: %s", document_id)
            raise NotFoundError(document_id)

        logger.info("Successfully loaded document: %s", document_id)
        return PersistedDocument(text=row["text"], language=row["language"])

    def store(self, document_id: str, text: str, language: Optional[str] = None) -> None:
        """Insert or fully overwrite a document.

        Both `text` and `language` are replaced; passing `language=None`
        clears a previously stored language. Raises StoreError when the
        statement fails or does not report exactly one affected row, in
        which case the transaction is rolled back.
        """
        logger.debug("Storing document with ID: %s", document_id)
        params = {"id": document_id, "text": text, "language": language}
        try:
            with self.db.begin() as con:
                affected = con.execute(sa.text(self.UPSERT_SQL), params).rowcount
                if affected != 1:
                    msg = (
                        f"expected store() to receive 1 row affected, "
                        f"but it affected {affected} rows instead"
                    )
                    logger.error(msg)
                    raise StoreError(msg)
        except SQLAlchemyError as exc:
            logger.error("Failed to store document %s: %s", document_id, exc)
            raise StoreError(f"failed to store document {document_id}: {exc}") from exc

        logger.info("Successfully stored document: %s", document_id)

    def store_document(self, document_id: str, document: PersistedDocument) -> None:
        self.store(document_id, document.text, document.language)

    def count(self) -> int:
        logger.debug("Counting documents in database")
        try:
            with self.db.reader() as con:
                n = int(con.execute(sa.text(self.COUNT_SQL)).scalar_one())
        except SQLAlchemyError as exc:
            logger.warning("Failed to count documents: %s", exc)
            raise StoreError(f"failed to count documents: {exc}") from exc
        logger.info("Database contains %d documents", n)
        return n
