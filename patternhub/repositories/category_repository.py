"""
Repository layer for PatternCategory persistence.
All SQL for the `pattern_categories` table lives here.
"""
import sqlite3
from typing import Mapping, Optional
from datetime import datetime, timezone
import logging

from patternhub.core.locale import dump_localized
from patternhub.core.logging_config import log_db_timing
from patternhub.models.category import Category

logger = logging.getLogger(__name__)


class CategoryRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing CategoryRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, category_id: int) -> Optional[Category]:
        row = self._conn.execute(
            "SELECT * FROM pattern_categories WHERE id = ?", (category_id,)
        ).fetchone()
        return Category.from_row(row) if row else None

    @log_db_timing
    def get_by_slug(self, slug: str) -> Optional[Category]:
        row = self._conn.execute(
            "SELECT * FROM pattern_categories WHERE slug = ?", (slug,)
        ).fetchone()
        return Category.from_row(row) if row else None

    @log_db_timing
    def list_all(self) -> list[Category]:
        rows = self._conn.execute(
            "SELECT * FROM pattern_categories ORDER BY sort_order, slug"
        ).fetchall()
        return [Category.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM pattern_categories"
        ).fetchone()[0]

    @log_db_timing
    def count_patterns(self, category_id: int) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM design_patterns WHERE category_id = ?",
            (category_id,),
        ).fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        slug: str,
        name: Mapping[str, str],
        description: Optional[Mapping[str, str]] = None,
        sort_order: int = 0,
    ) -> Category:
        logger.info("Creating category record slug=%s", slug)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO pattern_categories (name, description, slug, sort_order, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (dump_localized(name), dump_localized(description), slug, sort_order, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(
        self,
        category_id: int,
        slug: Optional[str] = None,
        name: Optional[Mapping[str, str]] = None,
        description: Optional[Mapping[str, str]] = None,
        sort_order: Optional[int] = None,
    ) -> Optional[Category]:
        fields: dict = {}
        if slug is not None:
            fields["slug"] = slug
        if name is not None:
            fields["name"] = dump_localized(name)
        if description is not None:
            fields["description"] = dump_localized(description)
        if sort_order is not None:
            fields["sort_order"] = sort_order

        if not fields:
            logger.trace("No category fields to update id=%s", category_id)
            return self.get_by_id(category_id)

        logger.info("Updating category record id=%s", category_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [category_id]
        self._conn.execute(
            f"UPDATE pattern_categories SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(category_id)

    @log_db_timing
    def delete(self, category_id: int) -> bool:
        """Delete a category. Fails while patterns reference it (ON DELETE RESTRICT)."""
        logger.info("Deleting category record id=%s", category_id)
        cursor = self._conn.execute(
            "DELETE FROM pattern_categories WHERE id = ?", (category_id,)
        )
        logger.info("Category delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
