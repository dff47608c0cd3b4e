"""Cache entry models — the on-disk shape of cached registry responses."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """One cached payload: ``{"data": ..., "timestamp": "<RFC3339>"}``."""

    data: Any = None
    timestamp: datetime


class CacheEntryInfo(BaseModel):
    """Summary of a cache file, for ``cache info``."""

    key: str
    stored_at: datetime | None = None
    age: timedelta | None = None
    expired: bool = False
    size_bytes: int = 0
    readable: bool = True

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "key": self.key,
            "stored_at": self.stored_at.isoformat() if self.stored_at is not None else None,
            "age_seconds": round(self.age.total_seconds()) if self.age is not None else None,
            "expired": self.expired,
            "size_bytes": self.size_bytes,
            "readable": self.readable,
        }
