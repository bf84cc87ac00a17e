"""
Design pattern management service.

Metadata lives in the database and Markdown bodies on disk, one file per
locale. Every mutation commits and then evicts the cache tags of the pattern
and of each category it belonged to before or after the change.
"""
import secrets
import sqlite3
from dataclasses import asdict
from typing import Iterable, Optional
import logging

from fastapi import HTTPException, status

from patternhub.core.cache import CacheStore, cache as default_cache
from patternhub.core.cache_keys import CacheKeys, CacheTags
from patternhub.core.config import settings
from patternhub.core.locale import LocaleContext, is_supported
from patternhub.core.text import slug_from_names, unique_slug
from patternhub.models.pattern import Pattern
from patternhub.repositories.category_repository import CategoryRepository
from patternhub.repositories.content_repository import ContentRepository
from patternhub.repositories.pattern_repository import PatternRepository
from patternhub.schemas.pages import HeadingItem
from patternhub.schemas.pattern import ContentResponse, PatternCreate, PatternUpdate
from patternhub.services.markdown_service import MarkdownRenderer, renderer as default_renderer

logger = logging.getLogger(__name__)


class PatternService:
    def __init__(
        self,
        conn: sqlite3.Connection,
        cache: Optional[CacheStore] = None,
        content: Optional[ContentRepository] = None,
        renderer: Optional[MarkdownRenderer] = None,
    ) -> None:
        logger.trace("Initializing PatternService")
        self._conn = conn
        self._repo = PatternRepository(conn)
        self._categories = CategoryRepository(conn)
        self._content = content or ContentRepository()
        self._renderer = renderer or default_renderer
        self._cache = cache or default_cache

    def _invalidate(self, pattern_id: int, category_ids: Iterable[int]) -> None:
        # Commit first: the cache writes through its own connection to the same file
        self._conn.commit()
        tags = [CacheTags.pattern(pattern_id), CacheTags.CATALOG]
        tags.extend(CacheTags.category(cid) for cid in set(category_ids))
        self._cache.forget_all(tags)

    def _require_category(self, category_id: int) -> None:
        if not self._categories.get_by_id(category_id):
            logger.warning("Category id=%s not found for pattern", category_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with id={category_id} not found",
            )

    @staticmethod
    def _require_locale(locale: str) -> None:
        if not is_supported(locale):
            logger.warning("Unsupported content locale: %s", locale)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported locale '{locale}'",
            )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_pattern(self, pattern_id: int) -> Pattern:
        logger.info("Fetching pattern id=%s", pattern_id)
        pattern = self._repo.get_by_id(pattern_id)
        if not pattern:
            logger.warning("Pattern id=%s not found", pattern_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Pattern with id={pattern_id} not found",
            )
        return pattern

    def list_patterns(self, category_id: Optional[int] = None) -> list[Pattern]:
        logger.info("Listing patterns category_id=%s", category_id)
        return self._repo.list_all(category_id=category_id)

    def get_headings(self, pattern: Pattern, locale: Optional[str] = None) -> list[HeadingItem]:
        """Table of contents of the body served for *locale* (default locale if omitted)."""
        ctx = LocaleContext.resolve(locale or settings.DEFAULT_LOCALE)

        def produce() -> list[dict]:
            text = self._content.resolve(pattern, ctx).text
            return [asdict(h) for h in self._renderer.headings(text)]

        cached = self._cache.remember_for(
            CacheKeys.pattern_headings(pattern.id, ctx.locale),
            settings.CACHE_TTL_PATTERN_HEADINGS,
            produce,
            tags=[CacheTags.pattern(pattern.id)],
        )
        return [HeadingItem(**item) for item in cached]

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_pattern(self, data: PatternCreate) -> Pattern:
        logger.info("Creating pattern %s", data.name)
        self._require_category(data.category_id)

        if data.slug:
            if self._repo.get_by_slug(data.slug):
                logger.warning("Duplicate pattern slug: %s", data.slug)
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Pattern with slug '{data.slug}' already exists",
                )
            slug = data.slug
        else:
            base = slug_from_names(data.name, [settings.DEFAULT_LOCALE, *settings.SUPPORTED_LOCALES])
            base = base or f"pattern-{secrets.token_hex(4)}"
            slug = unique_slug(base, lambda s: self._repo.get_by_slug(s) is not None)
            logger.trace("Derived pattern slug=%s", slug)

        pattern = self._repo.create(
            category_id=data.category_id,
            slug=slug,
            name=data.name,
            description=data.description,
            is_published=data.is_published,
            sort_order=data.sort_order,
        )

        if data.content:
            paths = {
                locale: self._content.save_content(pattern, body, locale)
                for locale, body in data.content.items()
            }
            pattern = self._repo.update(pattern.id, content_paths=paths)  # type: ignore[assignment]

        self._invalidate(pattern.id, [pattern.category_id])
        logger.info("Pattern created id=%s slug=%s", pattern.id, pattern.slug)
        return pattern

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_pattern(self, pattern_id: int, data: PatternUpdate) -> Pattern:
        logger.info("Updating pattern id=%s", pattern_id)
        pattern = self.get_pattern(pattern_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if "category_id" in fields and fields["category_id"] != pattern.category_id:
            self._require_category(fields["category_id"])

        # Check for slug conflict if renaming
        if "slug" in fields and fields["slug"] != pattern.slug:
            if self._repo.get_by_slug(fields["slug"]):
                logger.warning("Duplicate pattern slug rename attempt: %s", fields["slug"])
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Pattern with slug '{fields['slug']}' already exists",
                )

        updated = self._repo.update(pattern_id, **fields)
        self._invalidate(pattern_id, [pattern.category_id, updated.category_id])  # type: ignore[union-attr]
        logger.info("Pattern updated id=%s", pattern_id)
        return updated  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_pattern(self, pattern_id: int) -> None:
        logger.info("Deleting pattern id=%s", pattern_id)
        pattern = self.get_pattern(pattern_id)
        if not self._repo.delete(pattern_id):
            logger.warning("Pattern id=%s not found for deletion", pattern_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Pattern with id={pattern_id} not found",
            )
        self._invalidate(pattern_id, [pattern.category_id])
        self._content.delete_content(pattern)
        logger.info("Pattern deleted id=%s", pattern_id)

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def get_content(self, pattern_id: int, locale: str) -> ContentResponse:
        """Markdown body for one locale, following the usual fallback chain."""
        self._require_locale(locale)
        pattern = self.get_pattern(pattern_id)
        resolved = self._content.resolve(pattern, LocaleContext.resolve(locale))
        return ContentResponse(
            pattern_id=pattern.id,
            locale=resolved.locale,
            content=resolved.text,
            is_placeholder=resolved.is_placeholder,
        )

    def save_content(self, pattern_id: int, locale: str, content: str) -> ContentResponse:
        self._require_locale(locale)
        pattern = self.get_pattern(pattern_id)
        relative = self._content.save_content(pattern, content, locale)
        # Rewritten on every save; bumps updated_at
        self._repo.update(pattern_id, content_paths={**pattern.content_paths, locale: relative})
        self._invalidate(pattern_id, [pattern.category_id])
        logger.info("Pattern id=%s %s content saved", pattern_id, locale)
        return ContentResponse(
            pattern_id=pattern.id, locale=locale, content=content, is_placeholder=False
        )
