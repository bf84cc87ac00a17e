"""
Category management. Writes commit and then evict ``category:<id>`` and
``catalog`` so every cached page listing the category is rebuilt.
"""
import sqlite3
from typing import Optional
import logging

from fastapi import HTTPException, status

from patternhub.core.cache import CacheStore, cache as default_cache
from patternhub.core.cache_keys import CacheTags
from patternhub.core.config import settings
from patternhub.core.text import slug_from_names, unique_slug
from patternhub.models.category import Category
from patternhub.repositories.category_repository import CategoryRepository
from patternhub.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "category"


def _conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


class CategoryService:
    def __init__(self, conn: sqlite3.Connection, cache: Optional[CacheStore] = None) -> None:
        logger.trace("Initializing CategoryService")
        self._conn = conn
        self._repo = CategoryRepository(conn)
        self._cache = cache or default_cache

    def _evict(self, category_id: int) -> None:
        # The cache writes through its own connection to the same file
        self._conn.commit()
        self._cache.forget_all([CacheTags.category(category_id), CacheTags.CATALOG])

    def _slug_taken(self, slug: str) -> bool:
        return self._repo.get_by_slug(slug) is not None

    def _claim_slug(self, data: CategoryCreate) -> str:
        if data.slug:
            if self._slug_taken(data.slug):
                logger.warning("Category slug '%s' already in use", data.slug)
                raise _conflict(f"Category with slug '{data.slug}' already exists")
            return data.slug
        order = [settings.DEFAULT_LOCALE, *settings.SUPPORTED_LOCALES]
        base = slug_from_names(data.name, order) or FALLBACK_SLUG
        slug = unique_slug(base, self._slug_taken)
        logger.trace("Derived category slug=%s from %s", slug, data.name)
        return slug

    def get_category(self, category_id: int) -> Category:
        category = self._repo.get_by_id(category_id)
        if category is None:
            logger.warning("Category id=%s not found", category_id)
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with id={category_id} not found",
            )
        return category

    def list_categories(self) -> list[Category]:
        return self._repo.list_all()

    def create_category(self, data: CategoryCreate) -> Category:
        category = self._repo.create(
            slug=self._claim_slug(data),
            name=data.name,
            description=data.description,
            sort_order=data.sort_order,
        )
        self._evict(category.id)
        logger.info("Category created id=%s slug=%s", category.id, category.slug)
        return category

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        current = self.get_category(category_id)
        if data.slug and data.slug != current.slug and self._slug_taken(data.slug):
            logger.warning("Rename of category id=%s to taken slug '%s'", category_id, data.slug)
            raise _conflict(f"Category with slug '{data.slug}' already exists")

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = self._repo.update(category_id, **changes)
        self._evict(category_id)
        logger.info("Category id=%s updated fields=%s", category_id, sorted(changes))
        return updated  # type: ignore[return-value]

    def delete_category(self, category_id: int) -> None:
        """Refuse with 409 while any pattern, published or draft, belongs to the category."""
        self.get_category(category_id)
        owned = self._repo.count_patterns(category_id)
        if owned:
            logger.warning("Category id=%s still owns %s patterns", category_id, owned)
            raise _conflict(f"Cannot delete category: it still owns {owned} pattern(s)")

        try:
            self._repo.delete(category_id)
        except sqlite3.IntegrityError:
            # A pattern was attached between the count and the delete
            logger.warning("Category id=%s gained a pattern before deletion", category_id)
            raise _conflict("Cannot delete category: it still owns patterns")
        self._evict(category_id)
        logger.info("Category deleted id=%s", category_id)
