"""
Repository layer for admin accounts (`users` table).
"""
import sqlite3
from typing import Optional
import logging

from patternhub.core.logging_config import log_db_timing
from patternhub.models.user import User, UserRole

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserRepository")
        self._conn = conn

    @log_db_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        row = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def find_by_login(self, login: str) -> Optional[User]:
        """Match *login* against the username first, then the email address."""
        row = self._conn.execute(
            """
            SELECT * FROM users
            WHERE username = :login OR lower(email) = lower(:login)
            ORDER BY username = :login DESC
            LIMIT 1
            """,
            {"login": login},
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def create(
        self,
        email: str,
        username: str,
        hashed_password: str,
        role: UserRole = UserRole.ADMIN,
        full_name: Optional[str] = None,
    ) -> User:
        logger.info("Creating %s account username=%s", role.value, username)
        cursor = self._conn.execute(
            """
            INSERT INTO users (email, username, full_name, hashed_password, role)
            VALUES (?, ?, ?, ?, ?)
            """,
            (email, username, full_name, hashed_password, role.value),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]
