"""
Response cache — on-disk JSON store for registry payloads with a TTL.

One file per key under the cache directory (``<key>.json``), holding
``{"data": <payload>, "timestamp": "<RFC3339>"}`` pretty-printed.

Writes overwrite the file in place.  A crash mid-write can leave a
truncated entry behind; the next ``get`` reports it as
``CacheDecodeError`` and the caller refetches, which rewrites it.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError

from brew_search.core.models.cache import CacheEntry, CacheEntryInfo

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
CACHE_SUFFIX = ".json"


class CacheError(Exception):
    """Base class for cache failures.  Never fatal to a run."""


class CacheMiss(CacheError):
    """No entry stored for the key."""


class CacheExpired(CacheError):
    """Entry older than the TTL.  The file has already been removed."""


class CacheDecodeError(CacheError):
    """Entry exists but cannot be decoded into the expected shape."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ResponseCache:
    """Key/value store of JSON payloads with per-entry expiry.

    Args:
        directory: Where cache files live.
        ttl: Maximum age before an entry counts as stale.
        clock: Returns the current (timezone-aware) time.
    """

    def __init__(
        self,
        directory: Path,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.directory = directory
        self.ttl = ttl
        self._clock = clock

    def __repr__(self) -> str:
        return f"<ResponseCache dir={str(self.directory)!r} ttl={self.ttl}>"

    def prepare(self) -> None:
        """Create the cache directory.

        Raises:
            CacheError: If the directory cannot be created.
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Cannot create cache directory {self.directory}: {e}") from e

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}{CACHE_SUFFIX}"

    # ── Read ────────────────────────────────────────────────────

    def get(self, key: str, shape: Any = None) -> Any:
        """Return the payload stored under ``key``.

        Args:
            key: Cache key (e.g. ``"formulae"``).
            shape: Optional type the payload must validate as
                (e.g. ``list[dict[str, Any]]``).

        Raises:
            CacheMiss: No file for the key.
            CacheExpired: The entry is older than the TTL (file deleted).
            CacheDecodeError: The file or payload cannot be decoded.
        """
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise CacheMiss(f"cache miss: {key}") from e
        except OSError as e:
            raise CacheDecodeError(f"cannot read cache entry {key}: {e}") from e

        entry = self._decode_entry(key, raw)

        age = self._clock() - entry.timestamp
        if age > self.ttl:
            path.unlink(missing_ok=True)
            logger.debug("cache EXPIRED for %s (age %s)", key, age)
            raise CacheExpired(f"cache expired: {key}")

        if shape is None:
            logger.debug("cache HIT for %s (age %s)", key, age)
            return entry.data

        try:
            data = TypeAdapter(shape).validate_python(entry.data)
        except ValidationError as e:
            raise CacheDecodeError(f"cache entry {key} has unexpected shape: {e}") from e
        logger.debug("cache HIT for %s (age %s)", key, age)
        return data

    def _decode_entry(self, key: str, raw: str) -> CacheEntry:
        try:
            entry = CacheEntry.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            raise CacheDecodeError(f"corrupt cache entry {key}: {e}") from e
        if entry.timestamp.tzinfo is None:
            # Written by something else; treat naive stamps as UTC.
            entry.timestamp = entry.timestamp.replace(tzinfo=UTC)
        return entry

    # ── Write ───────────────────────────────────────────────────

    def set(self, key: str, payload: Any) -> None:
        """Store ``payload`` under ``key``, replacing any previous entry.

        Raises:
            CacheError: If the payload cannot be serialized or written.
        """
        entry = CacheEntry(data=payload, timestamp=self._clock())
        try:
            content = json.dumps(entry.model_dump(mode="json"), indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CacheError(f"cannot serialize cache entry {key}: {e}") from e

        path = self.path_for(key)
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise CacheError(f"cannot write cache entry {key}: {e}") from e
        logger.debug("cache STORE for %s (%d bytes)", key, len(content))

    def clear(self) -> int:
        """Delete every ``*.json`` entry.  Other files are left alone.

        Returns:
            Number of entries removed.
        """
        if not self.directory.is_dir():
            return 0

        removed = 0
        for path in sorted(self.directory.iterdir()):
            if path.suffix != CACHE_SUFFIX or not path.is_file():
                continue
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Cannot remove cache entry %s: %s", path, e)
        logger.info("Cleared %d cache entries from %s", removed, self.directory)
        return removed

    # ── Inspection ──────────────────────────────────────────────

    def entries(self) -> list[CacheEntryInfo]:
        """Describe every entry without deleting stale ones."""
        if not self.directory.is_dir():
            return []

        now = self._clock()
        infos: list[CacheEntryInfo] = []
        for path in sorted(self.directory.glob(f"*{CACHE_SUFFIX}")):
            info = CacheEntryInfo(key=path.stem, size_bytes=path.stat().st_size)
            try:
                entry = self._decode_entry(path.stem, path.read_text(encoding="utf-8"))
            except (CacheDecodeError, OSError):
                info.readable = False
                infos.append(info)
                continue
            info.stored_at = entry.timestamp
            info.age = now - entry.timestamp
            info.expired = info.age > self.ttl
            infos.append(info)
        return infos
