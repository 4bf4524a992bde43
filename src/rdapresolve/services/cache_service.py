"""
Disk cache for bootstrap registry documents.

One file per key directly under the cache root. Entries older than the TTL
are treated as expired on read.
"""

import os
import tempfile
import time
from datetime import timedelta
from pathlib import Path

import structlog

from ..errors import CacheError

logger = structlog.get_logger(__name__)

DEFAULT_TTL = timedelta(hours=24)
CACHE_SUBPATH = Path(".cache") / "rdap"


def default_cache_dir() -> Path:
    """~/.cache/rdap, or a relative .cache/rdap when there is no home directory."""
    try:
        return Path.home() / CACHE_SUBPATH
    except (RuntimeError, KeyError):
        return CACHE_SUBPATH


class CacheService:
    """TTL-bounded key/value store of byte payloads on disk."""

    def __init__(self, cache_dir: Path | None = None, ttl: timedelta = DEFAULT_TTL):
        self.cache_dir = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        self.ttl = ttl

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Cannot create cache directory {self.cache_dir}: {e}") from e

    def _path(self, key: str) -> Path:
        return self.cache_dir / key

    def is_expired(self, key: str) -> bool:
        """
        Compare the entry's modification time against the TTL.

        A metadata read failure counts as not expired, so a transient stat
        error serves from cache instead of evicting a valid entry.
        """
        try:
            modified = os.path.getmtime(self._path(key))
        except OSError as e:
            logger.debug("Cache metadata unreadable, treating as fresh", key=key, error=str(e))
            return False
        return time.time() - modified > self.ttl.total_seconds()

    def get(self, key: str, *, evict: bool = True) -> bytes | None:
        """
        Return the cached bytes for ``key``, or None if absent or expired.

        Expired entries are deleted unless ``evict`` is False, in which case
        they stay on disk for ``get_stale``.
        """
        path = self._path(key)
        if not path.exists():
            return None

        if self.is_expired(key):
            logger.debug("Cache expired", key=key)
            if evict:
                try:
                    path.unlink()
                except OSError as e:
                    logger.warning("Failed to remove expired cache entry", key=key, error=str(e))
            return None

        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning("Failed to read cache entry", key=key, error=str(e))
            return None

    def get_stale(self, key: str) -> bytes | None:
        """Return the cached bytes regardless of age."""
        try:
            return self._path(key).read_bytes()
        except OSError:
            return None

    def set(self, key: str, data: bytes) -> None:
        """Replace the entry for ``key`` with ``data``."""
        path = self._path(key)
        try:
            # Write a complete file, then swap it in
            fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise CacheError(f"Failed to write cache entry {key}: {e}") from e
        logger.debug("Cache stored", key=key, size=len(data))

    def delete(self, key: str) -> None:
        """Remove the entry for ``key`` if present."""
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise CacheError(f"Failed to delete cache entry {key}: {e}") from e

    def clear(self) -> None:
        """Delete every regular file directly under the cache root."""
        try:
            for entry in sorted(self.cache_dir.iterdir()):
                if entry.is_file():
                    entry.unlink()
        except OSError as e:
            raise CacheError(f"Failed to clear cache {self.cache_dir}: {e}") from e
        logger.info("Cache cleared", cache_dir=str(self.cache_dir))
