"""
Admin sign-in: checks a username/email and password and issues a bearer token.
"""
import sqlite3
from typing import Optional
import logging

from fastapi import HTTPException, status

from patternhub.core.config import settings
from patternhub.core.security import create_access_token, verify_password
from patternhub.models.user import User
from patternhub.repositories.user_repository import UserRepository
from patternhub.schemas.token import AccessToken

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._users = UserRepository(conn)

    def authenticate(self, login: str, password: str) -> Optional[User]:
        """Return the matching account, or None when the credentials are wrong."""
        user = self._users.find_by_login(login)
        if user is None or not verify_password(password, user.hashed_password):
            return None
        return user

    def login(self, login: str, password: str) -> AccessToken:
        logger.info("Sign-in attempt for '%s'", login)
        user = self.authenticate(login, password)
        if user is None:
            logger.warning("Rejected credentials for '%s'", login)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not user.is_active:
            logger.warning("Disabled account tried to sign in id=%s", user.id)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Inactive user account",
            )

        logger.info("Signed in %s id=%s", user.label, user.id)
        return AccessToken(
            access_token=create_access_token(user.id, user.role.value),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )
