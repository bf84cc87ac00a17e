"""
GET /admin/dashboard: catalogue counts and the latest patterns. Never cached.
"""
from fastapi import APIRouter, Depends

from patternhub.core.dependencies import db_dependency, require_admin
from patternhub.schemas.pages import DashboardPage
from patternhub.services.page_service import PageService

router = APIRouter(
    prefix="/dashboard",
    tags=["Admin: Dashboard"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=DashboardPage, summary="Dashboard widgets")
def dashboard(conn=Depends(db_dependency)):
    return PageService(conn).dashboard()
