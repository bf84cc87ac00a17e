"""
FastAPI dependency injection helpers for the database, the admin gate, and
the request locale.
"""
from typing import Generator, Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
import logging

from patternhub.core.config import settings
from patternhub.core.locale import LocaleContext
from patternhub.core.security import read_access_subject
from patternhub.db.database import get_db
from patternhub.models.user import User
from patternhub.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/admin/auth/login")


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Locale
# ---------------------------------------------------------------------------

def get_locale_context(
    request: Request,
    lang: Optional[str] = Query(None, description="Override the display language"),
) -> LocaleContext:
    """Resolve the request language: ``?lang=``, then the locale cookie, then the default."""
    ctx = LocaleContext.resolve(lang, request.cookies.get(settings.LOCALE_COOKIE_NAME))
    logger.trace("Resolved request locale=%s", ctx.locale)
    return ctx


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def get_current_user(
    token: str = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> User:
    """Resolve the bearer token to an account, or fail with 401."""
    try:
        user_id = read_access_subject(token)
    except JWTError as exc:
        logger.warning("Rejected bearer token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = UserRepository(conn).get_by_id(user_id)
    if user is None:
        logger.warning("Token subject id=%s has no account", user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.trace("Authenticated user id=%s", user.id)
    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_active:
        logger.warning("Inactive user account id=%s", current_user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user account",
        )
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Gate for every /admin route except sign-in; editors get 403."""
    if not current_user.is_admin:
        logger.warning(
            "User id=%s with role %s refused admin access",
            current_user.id,
            current_user.role.value,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to perform this action",
        )
    return current_user
