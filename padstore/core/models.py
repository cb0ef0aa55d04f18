from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class PersistedDocument(BaseModel):
    """A document as stored in the `document` table."""

    text: str
    # None is meaningful (no language chosen) and is stored as NULL
    language: Optional[str] = None


class Stats(BaseModel):
    start_time: int
    database_size: int
    persistence: bool
