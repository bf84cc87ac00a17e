"""
Central router – registers the public pages and the admin API.
"""
from fastapi import APIRouter
import logging

from patternhub.api.endpoints import (
    admin_auth,
    admin_categories,
    admin_dashboard,
    admin_patterns,
    locale,
    markdown,
    pages,
)

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/admin")
admin_router.include_router(admin_auth.router)
admin_router.include_router(admin_dashboard.router)
admin_router.include_router(admin_categories.router)
admin_router.include_router(admin_patterns.router)

api_router = APIRouter()

logger.info("Registering API routers")
api_router.include_router(pages.router)
api_router.include_router(locale.router)
api_router.include_router(markdown.router)
api_router.include_router(admin_router)
