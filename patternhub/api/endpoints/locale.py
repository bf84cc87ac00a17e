"""
Language switch:
  GET /change-locale/{locale} – Store the locale cookie and go back
"""
from urllib.parse import urlsplit

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse
import logging

from patternhub.core.config import settings
from patternhub.core.locale import is_supported

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Locale"])

LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


@router.get("/change-locale/{locale}", summary="Switch the display language")
def change_locale(locale: str, request: Request):
    """Persist *locale* in a cookie and redirect to the referring page (or home)."""
    if not is_supported(locale):
        logger.warning("Rejected locale switch to %s", locale)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported locale '{locale}'",
        )

    target = "/"
    referer = request.headers.get("referer")
    # Only follow referers pointing back at this site
    if referer and urlsplit(referer).netloc in ("", request.url.netloc):
        target = referer

    logger.info("Switching locale to %s", locale)
    response = RedirectResponse(target, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        settings.LOCALE_COOKIE_NAME,
        locale,
        max_age=LOCALE_COOKIE_MAX_AGE,
        samesite="lax",
    )
    return response
