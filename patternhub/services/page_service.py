"""
Read-only view-models for the public site and the admin dashboard.

Each page is built for one ``LocaleContext`` and cached as a JSON snapshot
tagged with the entities it was built from.
"""
import sqlite3
from typing import Optional
import logging

from fastapi import HTTPException, status

from patternhub.core.cache import CacheStore, cache as default_cache
from patternhub.core.cache_keys import CacheKeys, CacheTags
from patternhub.core.config import settings
from patternhub.core.locale import LocaleContext
from patternhub.models.category import Category
from patternhub.models.pattern import Pattern
from patternhub.repositories.category_repository import CategoryRepository
from patternhub.repositories.content_repository import ContentRepository
from patternhub.repositories.pattern_repository import PatternRepository
from patternhub.schemas.pages import (
    CategoryListPage,
    CategoryPage,
    DashboardPage,
    PatternPage,
    PatternSummary,
)
from patternhub.services.markdown_service import MarkdownRenderer, renderer as default_renderer
from patternhub.services.pattern_service import PatternService

logger = logging.getLogger(__name__)

DASHBOARD_RECENT_LIMIT = 5


def _summary(pattern: Pattern, ctx: LocaleContext) -> dict:
    return {
        "id": pattern.id,
        "slug": pattern.slug,
        "name": pattern.display_name(ctx),
        "description": pattern.display_description(ctx),
        "sort_order": pattern.sort_order,
    }


def _category_block(category: Category, patterns: list[Pattern], ctx: LocaleContext) -> dict:
    return {
        "id": category.id,
        "slug": category.slug,
        "name": category.display_name(ctx),
        "description": category.display_description(ctx),
        "sort_order": category.sort_order,
        "patterns": [_summary(p, ctx) for p in patterns],
    }


class PageService:
    def __init__(
        self,
        conn: sqlite3.Connection,
        cache: Optional[CacheStore] = None,
        content: Optional[ContentRepository] = None,
        renderer: Optional[MarkdownRenderer] = None,
    ) -> None:
        logger.trace("Initializing PageService")
        self._categories = CategoryRepository(conn)
        self._patterns = PatternRepository(conn)
        self._content = content or ContentRepository()
        self._renderer = renderer or default_renderer
        self._cache = cache or default_cache
        self._pattern_service = PatternService(
            conn, cache=self._cache, content=self._content, renderer=self._renderer
        )

    def _catalog(self, ctx: LocaleContext, include_empty: bool) -> dict:
        """Categories in sort order with their published patterns."""
        blocks = []
        for category in self._categories.list_all():
            patterns = self._patterns.list_all(category_id=category.id, published_only=True)
            if not patterns and not include_empty:
                continue
            blocks.append(_category_block(category, patterns, ctx))
        return {"locale": ctx.locale, "categories": blocks}

    def _remember_catalog(self, key: str, ttl: int, ctx: LocaleContext, include_empty: bool) -> dict:
        # Every category or pattern mutation evicts the catalog tag
        return self._cache.remember_for(
            key, ttl, lambda: self._catalog(ctx, include_empty), tags=[CacheTags.CATALOG]
        )

    # ------------------------------------------------------------------
    # Public pages
    # ------------------------------------------------------------------

    def home(self, ctx: LocaleContext) -> CategoryListPage:
        """Categories that have at least one published pattern."""
        logger.info("Building home page locale=%s", ctx.locale)
        data = self._remember_catalog(
            CacheKeys.home_categories(ctx.locale), settings.CACHE_TTL_HOME, ctx, include_empty=False
        )
        return CategoryListPage.model_validate(data)

    def pattern_index(self, ctx: LocaleContext) -> CategoryListPage:
        """Every category, grouped with its published patterns."""
        logger.info("Building pattern index locale=%s", ctx.locale)
        data = self._remember_catalog(
            CacheKeys.pattern_index_categories(ctx.locale),
            settings.CACHE_TTL_CATEGORIES,
            ctx,
            include_empty=True,
        )
        return CategoryListPage.model_validate(data)

    def category_page(self, slug: str, ctx: LocaleContext) -> CategoryPage:
        logger.info("Building category page slug=%s locale=%s", slug, ctx.locale)
        category = self._categories.get_by_slug(slug)
        if not category:
            logger.warning("Category slug=%s not found", slug)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category '{slug}' not found",
            )

        def produce() -> dict:
            patterns = self._patterns.list_all(category_id=category.id, published_only=True)
            return {"locale": ctx.locale, "category": _category_block(category, patterns, ctx)}

        data = self._cache.remember_for(
            CacheKeys.category_show(slug, ctx.locale),
            settings.CACHE_TTL_CATEGORIES,
            produce,
            tags=[CacheTags.category(category.id), CacheTags.CATALOG],
        )
        return CategoryPage.model_validate(data)

    def pattern_page(self, slug: str, ctx: LocaleContext) -> PatternPage:
        logger.info("Building pattern page slug=%s locale=%s", slug, ctx.locale)
        pattern = self._patterns.get_by_slug(slug)
        if not pattern or not pattern.is_published:
            logger.warning("Published pattern slug=%s not found", slug)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Pattern '{slug}' not found",
            )

        def produce_body() -> dict:
            resolved = self._content.resolve(pattern, ctx)
            return {
                "html": self._renderer.render(resolved.text),
                "content_locale": resolved.locale,
                "content_pending": resolved.is_placeholder,
            }

        body = self._cache.remember_for(
            CacheKeys.pattern_html(pattern.id, ctx.locale),
            settings.CACHE_TTL_PATTERN_CONTENT,
            produce_body,
            tags=[CacheTags.pattern(pattern.id)],
        )

        related = self._related(pattern, ctx)
        category = self._categories.get_by_id(pattern.category_id)
        category_summary = None
        if category:
            category_summary = {
                "id": category.id,
                "slug": category.slug,
                "name": category.display_name(ctx),
                "description": category.display_description(ctx),
                "sort_order": category.sort_order,
            }

        return PatternPage(
            locale=ctx.locale,
            content_locale=body["content_locale"],
            content_pending=body["content_pending"],
            id=pattern.id,
            slug=pattern.slug,
            name=pattern.display_name(ctx),
            description=pattern.display_description(ctx),
            category=category_summary,
            html=body["html"],
            table_of_contents=self._pattern_service.get_headings(pattern, ctx.locale),
            related_patterns=related,
            available_locales=pattern.available_locales(),
        )

    def _related(self, pattern: Pattern, ctx: LocaleContext) -> list[PatternSummary]:
        limit = settings.RELATED_PATTERNS_LIMIT
        cached = self._cache.remember_for(
            CacheKeys.pattern_related(pattern.id, ctx.locale),
            settings.CACHE_TTL_CATEGORIES,
            lambda: [_summary(p, ctx) for p in self._patterns.list_related(pattern, limit)],
            tags=[CacheTags.pattern(pattern.id), CacheTags.category(pattern.category_id)],
        )
        return [PatternSummary(**item) for item in cached]

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def dashboard(self) -> DashboardPage:
        """Counts and the most recently created patterns; never cached."""
        logger.info("Building admin dashboard")
        ctx = LocaleContext.resolve(settings.DEFAULT_LOCALE)
        return DashboardPage(
            pattern_count=self._patterns.count(),
            category_count=self._categories.count(),
            recent_patterns=[
                _summary(p, ctx) for p in self._patterns.list_recent(DASHBOARD_RECENT_LIMIT)
            ],
        )
