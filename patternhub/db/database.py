"""Database connection helpers and initialization."""

import logging
import os
import sqlite3
from contextlib import contextmanager

from patternhub.core.config import settings

logger = logging.getLogger(__name__)


def database_path() -> str:
    """Return the file path from DATABASE_URL (strip "sqlite:///")."""
    return settings.DATABASE_URL.replace("sqlite:///", "")


def _ensure_directory(path: str) -> None:
    db_dir = os.path.dirname(path) or "."
    os.makedirs(db_dir, exist_ok=True)


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection with row factory."""
    path = database_path()
    _ensure_directory(path)
    logger.trace("Opening database connection to %s", path)
    conn = sqlite3.connect(path, check_same_thread=False, timeout=30)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


@contextmanager
def get_db():
    """Context manager that yields a database connection and auto-commits/rolls back."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
        logger.trace("Database transaction committed")
    except Exception:
        logger.error("Database transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()
        logger.trace("Database connection closed")


def init_db() -> None:
    """Initialize the database by creating all tables."""
    logger.info("Initializing database schema at %s", database_path())
    from patternhub.db import schema
    schema.create_tables()
