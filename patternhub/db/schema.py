"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.

Localized columns (name, description, content_paths) hold JSON objects
mapping a locale code to its value, e.g. {"zh": "单例模式", "en": "Singleton"}.
"""
from patternhub.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    email             TEXT    NOT NULL UNIQUE,
    username          TEXT    NOT NULL UNIQUE,
    full_name         TEXT,
    hashed_password   TEXT    NOT NULL,
    role              TEXT    NOT NULL DEFAULT 'editor'
                              CHECK(role IN ('admin', 'editor')),
    is_active         INTEGER NOT NULL DEFAULT 1,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_PATTERN_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS pattern_categories (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL DEFAULT '{}',
    description TEXT    NOT NULL DEFAULT '{}',
    slug        TEXT    NOT NULL UNIQUE,
    sort_order  INTEGER NOT NULL DEFAULT 0,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_DESIGN_PATTERNS_TABLE = """
CREATE TABLE IF NOT EXISTS design_patterns (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    category_id   INTEGER NOT NULL REFERENCES pattern_categories(id) ON DELETE RESTRICT,
    name          TEXT    NOT NULL DEFAULT '{}',
    description   TEXT    NOT NULL DEFAULT '{}',
    slug          TEXT    NOT NULL UNIQUE,
    content_paths TEXT    NOT NULL DEFAULT '{}',
    is_published  INTEGER NOT NULL DEFAULT 0,
    sort_order    INTEGER NOT NULL DEFAULT 0,
    created_at    TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at    TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_CACHE_ENTRIES_TABLE = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key         TEXT    PRIMARY KEY,
    value       TEXT    NOT NULL,
    expires_at  REAL    NOT NULL
);
"""

CREATE_CACHE_TAGS_TABLE = """
CREATE TABLE IF NOT EXISTS cache_tags (
    tag         TEXT    NOT NULL,
    key         TEXT    NOT NULL REFERENCES cache_entries(key) ON DELETE CASCADE,
    PRIMARY KEY (tag, key)
);
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_design_patterns_category ON design_patterns(category_id)",
    "CREATE INDEX IF NOT EXISTS idx_cache_tags_key ON cache_tags(key)",
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_PATTERN_CATEGORIES_TABLE,
    CREATE_DESIGN_PATTERNS_TABLE,
    CREATE_CACHE_ENTRIES_TABLE,
    CREATE_CACHE_TAGS_TABLE,
]


def create_tables() -> None:
    """Create all tables and indexes (IF NOT EXISTS – safe on every restart)."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        for ddl in ALL_TABLES:
            cursor.execute(ddl)
        for ddl in INDEXES:
            cursor.execute(ddl)
        conn.commit()
    finally:
        conn.close()
