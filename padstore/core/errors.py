from __future__ import annotations


class PadstoreError(Exception):
    """Base class for errors raised by the persistence and bootstrap layers."""


class ConnectionError(PadstoreError):  # noqa: A001
    """Connecting, probing or preparing the schema failed at startup."""


class NotFoundError(PadstoreError):
    def __init__(self, document_id: str):
        super().__init__(f"document not found: {document_id}")
        self.document_id = document_id


class StoreError(PadstoreError):
    """A query failed or a write did not affect exactly one row."""


class ConfigParseError(PadstoreError, ValueError):
    def __init__(self, name: str, raw: str, reason: str = "not a valid integer"):
        super().__init__(f"Unable to parse {name}={raw!r}: {reason}")
        self.name = name
        self.raw = raw
