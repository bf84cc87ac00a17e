"""
Public catalogue pages (JSON view-models, localized per request):
  GET /                           – Home: categories with published patterns
  GET /patterns                   – Pattern index grouped by category
  GET /patterns/category/{slug}   – One category and its patterns
  GET /patterns/{slug}            – Pattern detail with rendered article
  GET /categories[/{slug}]        – Legacy routes, redirected
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
import logging

from patternhub.core.dependencies import db_dependency, get_locale_context
from patternhub.core.locale import LocaleContext
from patternhub.schemas.pages import CategoryListPage, CategoryPage, PatternPage
from patternhub.services.page_service import PageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


@router.get("/", response_model=CategoryListPage, summary="Home page")
def home(
    conn=Depends(db_dependency),
    ctx: LocaleContext = Depends(get_locale_context),
):
    """Categories in sort order, each with its published patterns."""
    logger.info("Serving home page")
    return PageService(conn).home(ctx)


@router.get("/patterns", response_model=CategoryListPage, summary="Pattern index")
def pattern_index(
    conn=Depends(db_dependency),
    ctx: LocaleContext = Depends(get_locale_context),
):
    logger.info("Serving pattern index")
    return PageService(conn).pattern_index(ctx)


@router.get("/patterns/category/{slug}", response_model=CategoryPage, summary="Category page")
def category_page(
    slug: str,
    conn=Depends(db_dependency),
    ctx: LocaleContext = Depends(get_locale_context),
):
    logger.info("Serving category page slug=%s", slug)
    return PageService(conn).category_page(slug, ctx)


@router.get("/patterns/{slug}", response_model=PatternPage, summary="Pattern detail page")
def pattern_page(
    slug: str,
    conn=Depends(db_dependency),
    ctx: LocaleContext = Depends(get_locale_context),
):
    """
    Rendered article, table of contents and related patterns.
    Unpublished patterns are not found.
    """
    logger.info("Serving pattern page slug=%s", slug)
    return PageService(conn).pattern_page(slug, ctx)


@router.get("/categories", include_in_schema=False)
def legacy_category_index():
    return RedirectResponse("/patterns", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/categories/{slug}", include_in_schema=False)
def legacy_category_page(slug: str):
    logger.trace("Redirecting legacy category route slug=%s", slug)
    return RedirectResponse(
        f"/patterns/category/{slug}", status_code=status.HTTP_307_TEMPORARY_REDIRECT
    )
