"""
View-models for the public pages, already localized for one request.

These are also the shapes stored in the page cache, so they must stay
JSON-serializable.
"""
from pydantic import BaseModel
from typing import Optional


class HeadingItem(BaseModel):
    level: int
    text: str
    anchor: str


class PatternSummary(BaseModel):
    id: int
    slug: str
    name: str
    description: str
    sort_order: int


class CategoryWithPatterns(BaseModel):
    id: int
    slug: str
    name: str
    description: str
    sort_order: int
    patterns: list[PatternSummary]


class CategoryListPage(BaseModel):
    locale: str
    categories: list[CategoryWithPatterns]


class CategoryPage(BaseModel):
    locale: str
    category: CategoryWithPatterns


class PatternPage(BaseModel):
    locale: str
    content_locale: str
    content_pending: bool
    id: int
    slug: str
    name: str
    description: str
    category: Optional[PatternSummary] = None
    html: str
    table_of_contents: list[HeadingItem]
    related_patterns: list[PatternSummary]
    available_locales: list[str]


class DashboardPage(BaseModel):
    pattern_count: int
    category_count: int
    recent_patterns: list[PatternSummary]
