"""
Admin authentication endpoints:
  POST /admin/auth/login – OAuth2 password flow, returns an access token
  GET  /admin/auth/me    – Return the signed-in admin's profile
"""
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
import logging

from patternhub.core.dependencies import db_dependency, get_current_active_user
from patternhub.models.user import User
from patternhub.schemas.token import AccessToken
from patternhub.schemas.user import UserResponse
from patternhub.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Admin: Authentication"])


@router.post(
    "/login",
    response_model=AccessToken,
    summary="Login with username/email and password (OAuth2 Password Flow)",
)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    conn=Depends(db_dependency),
):
    """
    Standard OAuth2 Password Flow endpoint.
    - **username**: your username *or* email address
    - **password**: your password
    """
    logger.info("Login requested for username=%s", form_data.username)
    service = AuthService(conn)
    return service.login(form_data.username, form_data.password)


@router.get("/me", response_model=UserResponse, summary="Current admin profile")
def me(current_user: User = Depends(get_current_active_user)):
    return current_user
