"""
Repository layer for DesignPattern persistence.
All SQL for the `design_patterns` table lives here.
"""
import sqlite3
from typing import Mapping, Optional
from datetime import datetime, timezone
import logging

from patternhub.core.locale import dump_localized
from patternhub.core.logging_config import log_db_timing
from patternhub.models.pattern import Pattern

logger = logging.getLogger(__name__)

_LOCALIZED_COLUMNS = {"name", "description", "content_paths"}


class PatternRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing PatternRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, pattern_id: int) -> Optional[Pattern]:
        row = self._conn.execute(
            "SELECT * FROM design_patterns WHERE id = ?", (pattern_id,)
        ).fetchone()
        return Pattern.from_row(row) if row else None

    @log_db_timing
    def get_by_slug(self, slug: str) -> Optional[Pattern]:
        row = self._conn.execute(
            "SELECT * FROM design_patterns WHERE slug = ?", (slug,)
        ).fetchone()
        return Pattern.from_row(row) if row else None

    @log_db_timing
    def list_all(
        self,
        category_id: Optional[int] = None,
        published_only: bool = False,
    ) -> list[Pattern]:
        clauses = []
        params: list = []
        if category_id is not None:
            clauses.append("category_id = ?")
            params.append(category_id)
        if published_only:
            clauses.append("is_published = 1")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"SELECT * FROM design_patterns {where} ORDER BY sort_order, slug",
            params,
        ).fetchall()
        return [Pattern.from_row(r) for r in rows]

    @log_db_timing
    def list_related(self, pattern: Pattern, limit: int) -> list[Pattern]:
        """Other published patterns from the same category."""
        rows = self._conn.execute(
            """
            SELECT * FROM design_patterns
            WHERE category_id = ? AND id != ? AND is_published = 1
            ORDER BY sort_order, slug
            LIMIT ?
            """,
            (pattern.category_id, pattern.id, limit),
        ).fetchall()
        return [Pattern.from_row(r) for r in rows]

    @log_db_timing
    def list_recent(self, limit: int) -> list[Pattern]:
        rows = self._conn.execute(
            "SELECT * FROM design_patterns ORDER BY created_at DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [Pattern.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM design_patterns").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        category_id: int,
        slug: str,
        name: Mapping[str, str],
        description: Optional[Mapping[str, str]] = None,
        is_published: bool = False,
        sort_order: int = 0,
    ) -> Pattern:
        logger.info("Creating pattern record slug=%s", slug)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO design_patterns (
                category_id, name, description, slug, content_paths,
                is_published, sort_order, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, '{}', ?, ?, ?, ?)
            """,
            (
                category_id, dump_localized(name), dump_localized(description), slug,
                int(is_published), sort_order, now, now,
            ),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, pattern_id: int, **fields) -> Optional[Pattern]:
        """Update arbitrary fields on a pattern."""
        if not fields:
            logger.trace("No pattern fields to update id=%s", pattern_id)
            return self.get_by_id(pattern_id)

        logger.info("Updating pattern record id=%s", pattern_id)
        for column in _LOCALIZED_COLUMNS & fields.keys():
            fields[column] = dump_localized(fields[column])
        if "is_published" in fields:
            fields["is_published"] = int(fields["is_published"])
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [pattern_id]
        self._conn.execute(
            f"UPDATE design_patterns SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(pattern_id)

    @log_db_timing
    def delete(self, pattern_id: int) -> bool:
        logger.info("Deleting pattern record id=%s", pattern_id)
        cursor = self._conn.execute(
            "DELETE FROM design_patterns WHERE id = ?", (pattern_id,)
        )
        logger.info("Pattern delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
