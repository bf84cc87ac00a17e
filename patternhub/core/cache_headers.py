"""
HTTP caching headers for the public catalogue.

Successful GET responses outside the admin and API-docs paths are marked
``Cache-Control: public, max-age=<PAGE_CACHE_MAX_AGE>`` and lose any
``Pragma``/``Expires`` headers. The page language can come from the locale
cookie, so responses also vary on ``Cookie``.
"""
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from patternhub.core.config import settings

logger = logging.getLogger(__name__)

PRIVATE_PREFIXES = ("/admin", "/docs", "/redoc", "/openapi.json")


def is_public_path(path: str) -> bool:
    return not any(path == p or path.startswith(p + "/") for p in PRIVATE_PREFIXES)


class PageCacheHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if (
            request.method == "GET"
            and response.status_code == 200
            and is_public_path(request.url.path)
        ):
            response.headers["Cache-Control"] = f"public, max-age={settings.PAGE_CACHE_MAX_AGE}"
            response.headers["Vary"] = "Cookie"
            for name in ("Pragma", "Expires"):
                if name in response.headers:
                    del response.headers[name]
            logger.trace("Cache headers set path=%s", request.url.path)  # type: ignore[attr-defined]
        return response
