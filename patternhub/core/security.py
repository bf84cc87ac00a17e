"""
Admin credentials: bcrypt password hashes and signed bearer tokens.

Tokens carry the account id in ``sub``, its role, and ``type=access``.
There are no refresh tokens; an expired token means signing in again.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
import logging

from jose import JWTError, jwt
from passlib.context import CryptContext

from patternhub.core.config import settings

logger = logging.getLogger(__name__)

TOKEN_TYPE = "access"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    logger.trace("Hashing admin password")
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    logger.trace("Verifying admin password")
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    issued = datetime.now(tz=timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "type": TOKEN_TYPE,
        "iat": issued,
        "exp": issued + lifetime,
    }
    logger.info("Issued access token for user id=%s (expires in %s)", user_id, lifetime)
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_access_subject(token: str) -> int:
    """
    Verify *token* and return the account id it was issued for.

    Raises:
        jose.JWTError: bad signature, expired, wrong type or missing subject.
    """
    claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if claims.get("type") != TOKEN_TYPE:
        raise JWTError("not an access token")
    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        raise JWTError("token subject is not an account id")
    return int(subject)
