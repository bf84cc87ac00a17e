"""
Pydantic schemas for DesignPattern request/response validation.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from patternhub.schemas.category import SLUG_PATTERN
from patternhub.schemas.localized import check_bodies, check_locales, require_some_text


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class PatternCreate(BaseModel):
    """Payload for creating patterns; ``content`` optionally seeds the bodies."""

    category_id: int = Field(..., gt=0)
    name: dict[str, str]
    description: Optional[dict[str, str]] = None
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    is_published: bool = False
    sort_order: int = Field(0, ge=0)
    content: Optional[dict[str, str]] = None

    @field_validator("name")
    @classmethod
    def _name(cls, value: dict[str, str]) -> dict[str, str]:
        return require_some_text(check_locales(value))

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        return check_locales(value)

    @field_validator("content")
    @classmethod
    def _content(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        return check_bodies(value)


class PatternUpdate(BaseModel):
    """Payload for updating pattern metadata (bodies are edited separately)."""

    category_id: Optional[int] = Field(None, gt=0)
    name: Optional[dict[str, str]] = None
    description: Optional[dict[str, str]] = None
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    is_published: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def _name(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        if value is None:
            return None
        return require_some_text(check_locales(value))

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        return check_locales(value)


class ContentUpdate(BaseModel):
    """Body of a single-locale Markdown edit."""

    content: str = Field(..., min_length=1)


class MarkdownPreviewRequest(BaseModel):
    content: str = ""


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class PatternResponse(BaseModel):
    """Admin view of a pattern with every translation and content path."""

    id: int
    category_id: int
    slug: str
    name: dict[str, str]
    description: dict[str, str]
    content_paths: dict[str, str]
    is_published: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ContentResponse(BaseModel):
    pattern_id: int
    locale: str
    content: str
    is_placeholder: bool


class MarkdownPreviewResponse(BaseModel):
    html: str
