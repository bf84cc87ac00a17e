"""
Tagged cache backed by the application's SQLite database.

Values are stored as JSON snapshots with an absolute expiry time. Each entry
may carry tags; evicting a tag removes every entry written with it, which is
how content edits invalidate listings without enumerating key names.

The store lives in the same database file as the content, so the web
process and the ``patternhub`` CLI see the same entries.
"""
import json
import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterable, TypeVar

from patternhub.core.logging_config import log_cache_operation
from patternhub.db.database import get_connection

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()

# Fixed pool of producer locks shared by all keys
LOCK_STRIPES = 64


class CacheStore:
    """Time-boxed key/value cache with tag-based invalidation."""

    def __init__(
        self,
        connect: Callable[[], sqlite3.Connection] = get_connection,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._connect = connect
        self._clock = clock
        self._key_locks = tuple(threading.RLock() for _ in range(LOCK_STRIPES))

    @contextmanager
    def _session(self):
        conn = self._connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _key_lock(self, key: str) -> threading.RLock:
        return self._key_locks[hash(key) % LOCK_STRIPES]

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _lookup(self, key: str) -> Any:
        try:
            with self._session() as conn:
                row = conn.execute(
                    "SELECT value, expires_at FROM cache_entries WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error:
            logger.error("Cache lookup failed key=%s", key, exc_info=True)
            return _MISSING

        if row is None or row["expires_at"] <= self._clock():
            log_cache_operation(logger, "get", key, hit=False)
            return _MISSING
        log_cache_operation(logger, "get", key, hit=True)
        return json.loads(row["value"])

    def get(self, key: str, default: Any = None) -> Any:
        """Return the unexpired value stored under *key*, else *default*."""
        value = self._lookup(key)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def keys(self) -> list[str]:
        """Return every unexpired key, sorted."""
        with self._session() as conn:
            rows = conn.execute(
                "SELECT key FROM cache_entries WHERE expires_at > ? ORDER BY key",
                (self._clock(),),
            ).fetchall()
        return [r["key"] for r in rows]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def put(self, key: str, value: Any, ttl: int, tags: Iterable[str] = ()) -> Any:
        """
        Store a JSON snapshot of *value* under *key* for *ttl* seconds.

        Returns the snapshot as it will be read back, so callers see the
        same shape on a miss as on a hit.
        """
        payload = json.dumps(value, ensure_ascii=False)
        expires_at = self._clock() + ttl
        unique_tags = sorted(set(tags))
        try:
            with self._session() as conn:
                conn.execute("DELETE FROM cache_tags WHERE key = ?", (key,))
                conn.execute(
                    """
                    INSERT INTO cache_entries (key, value, expires_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        expires_at = excluded.expires_at
                    """,
                    (key, payload, expires_at),
                )
                conn.executemany(
                    "INSERT OR IGNORE INTO cache_tags (tag, key) VALUES (?, ?)",
                    [(tag, key) for tag in unique_tags],
                )
        except sqlite3.Error:
            logger.error("Cache write failed key=%s", key, exc_info=True)
        else:
            log_cache_operation(logger, "put", key)
        return json.loads(payload)

    def remember_for(
        self,
        key: str,
        ttl: int,
        producer: Callable[[], T],
        tags: Iterable[str] = (),
    ) -> T:
        """
        Return the cached value for *key*, computing it with *producer* on a miss.

        Concurrent misses for the same key inside this process wait on a
        striped lock, so *producer* runs once and the waiters read its result.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        with self._key_lock(key):
            value = self._lookup(key)
            if value is not _MISSING:
                return value
            logger.trace("Cache miss, producing key=%s", key)  # type: ignore[attr-defined]
            return self.put(key, producer(), ttl, tags)

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def _delete_keys(self, conn: sqlite3.Connection, keys: list[str]) -> int:
        if not keys:
            return 0
        placeholders = ", ".join("?" for _ in keys)
        conn.execute(f"DELETE FROM cache_tags WHERE key IN ({placeholders})", keys)
        cursor = conn.execute(
            f"DELETE FROM cache_entries WHERE key IN ({placeholders})", keys
        )
        return cursor.rowcount

    def forget(self, key: str) -> bool:
        """Evict a single key."""
        with self._session() as conn:
            removed = self._delete_keys(conn, [key])
        log_cache_operation(logger, "forget", key)
        return removed > 0

    def forget_all(self, tags: Iterable[str]) -> int:
        """Evict every entry written with any of *tags*."""
        unique_tags = sorted(set(tags))
        if not unique_tags:
            return 0
        placeholders = ", ".join("?" for _ in unique_tags)
        with self._session() as conn:
            rows = conn.execute(
                f"SELECT DISTINCT key FROM cache_tags WHERE tag IN ({placeholders})",
                unique_tags,
            ).fetchall()
            removed = self._delete_keys(conn, [r["key"] for r in rows])
        logger.info("Cache evicted %s entries for tags=%s", removed, ",".join(unique_tags))
        return removed

    def forget_tag_prefixes(self, prefixes: Iterable[str]) -> int:
        """Evict every entry carrying a tag that starts with one of *prefixes*."""
        removed = 0
        with self._session() as conn:
            for prefix in prefixes:
                rows = conn.execute(
                    "SELECT DISTINCT key FROM cache_tags WHERE substr(tag, 1, ?) = ?",
                    (len(prefix), prefix),
                ).fetchall()
                removed += self._delete_keys(conn, [r["key"] for r in rows])
        logger.info("Cache evicted %s entries by tag prefix", removed)
        return removed

    def forget_prefix(self, prefix: str) -> int:
        """Evict every key starting with *prefix*."""
        with self._session() as conn:
            rows = conn.execute(
                "SELECT key FROM cache_entries WHERE substr(key, 1, ?) = ?",
                (len(prefix), prefix),
            ).fetchall()
            removed = self._delete_keys(conn, [r["key"] for r in rows])
        logger.info("Cache evicted %s entries with prefix=%s", removed, prefix)
        return removed

    def purge_expired(self) -> int:
        """Delete entries whose TTL has elapsed."""
        with self._session() as conn:
            rows = conn.execute(
                "SELECT key FROM cache_entries WHERE expires_at <= ?",
                (self._clock(),),
            ).fetchall()
            removed = self._delete_keys(conn, [r["key"] for r in rows])
        logger.info("Cache purged %s expired entries", removed)
        return removed

    def flush(self) -> int:
        """Drop every cache entry."""
        with self._session() as conn:
            conn.execute("DELETE FROM cache_tags")
            removed = conn.execute("DELETE FROM cache_entries").rowcount
        logger.info("Cache flushed (%s entries)", removed)
        return removed


cache = CacheStore()


def get_cache() -> CacheStore:
    """FastAPI dependency returning the process-wide cache store."""
    return cache
