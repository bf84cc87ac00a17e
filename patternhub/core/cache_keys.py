"""
Cache key and tag builders.

Every cached read builds its key here and declares the tags of the entities
it depends on. Mutations evict by tag, so a new key is invalidated correctly
as long as it is written with the right tags.
"""


class CacheKeys:
    """Cache key patterns."""

    HOME_CATEGORIES = "home_categories"
    PATTERN_INDEX_CATEGORIES = "pattern_index_categories"
    CATEGORY_SHOW = "category_show"
    PATTERN_HEADINGS = "pattern_headings"
    PATTERN_HTML = "pattern_html"
    PATTERN_RELATED = "pattern_related"

    @staticmethod
    def home_categories(locale: str) -> str:
        return f"{CacheKeys.HOME_CATEGORIES}_{locale}"

    @staticmethod
    def pattern_index_categories(locale: str) -> str:
        return f"{CacheKeys.PATTERN_INDEX_CATEGORIES}_{locale}"

    @staticmethod
    def category_show(slug: str, locale: str) -> str:
        return f"{CacheKeys.CATEGORY_SHOW}_{slug}_{locale}"

    @staticmethod
    def pattern_headings(pattern_id: int, locale: str) -> str:
        return f"{CacheKeys.PATTERN_HEADINGS}_{pattern_id}_{locale}"

    @staticmethod
    def pattern_html(pattern_id: int, locale: str) -> str:
        return f"{CacheKeys.PATTERN_HTML}_{pattern_id}_{locale}"

    @staticmethod
    def pattern_related(pattern_id: int, locale: str) -> str:
        return f"{CacheKeys.PATTERN_RELATED}_{pattern_id}_{locale}"


class CacheTags:
    """Tags that tie cache entries to the entities they were built from."""

    # Any listing that spans the whole catalogue
    CATALOG = "catalog"

    @staticmethod
    def category(category_id: int) -> str:
        return f"category:{category_id}"

    @staticmethod
    def pattern(pattern_id: int) -> str:
        return f"pattern:{pattern_id}"

    @staticmethod
    def families() -> tuple[str, ...]:
        """Tag prefixes covered by the pattern cache maintenance command."""
        return (CacheTags.CATALOG, "category:", "pattern:")
