"""
Pydantic schemas for Category request/response validation.
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from patternhub.schemas.localized import check_locales, require_some_text

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class CategoryCreate(BaseModel):
    """Payload for creating categories."""

    name: dict[str, str]
    description: Optional[dict[str, str]] = None
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    sort_order: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def _name(cls, value: dict[str, str]) -> dict[str, str]:
        return require_some_text(check_locales(value))

    @field_validator("description")
    @classmethod
    def _description(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        return check_locales(value)


class CategoryUpdate(BaseModel):
    """Payload for updating categories."""

    name: Optional[dict[str, str]] = None
    description: Optional[dict[str, str]] = None
    slug: Optional[str] = Field(None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
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


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class CategoryResponse(BaseModel):
    """Admin view of a category with every translation."""

    id: int
    slug: str
    name: dict[str, str]
    description: dict[str, str]
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
