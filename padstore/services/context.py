from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from padstore.core.config import Settings
from padstore.core.documents import DocumentStore


@dataclass(frozen=True)
class ServerConfig:
    """Process-wide server configuration, resolved once at startup.

    `database` is None when the server runs without persistence.
    `expiry_days` is advisory and not consumed here.
    """

    expiry_days: int
    database: Optional[DocumentStore]
    settings: Settings
    start_time: int = field(default_factory=lambda: int(time.time()))

    @property
    def persistence(self) -> bool:
        return self.database is not None
