"""
Shared validation for ``{locale: text}`` payload fields.
"""
from typing import Optional

from patternhub.core.config import settings


def check_locale_keys(value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
    """Reject unknown locale keys; values are returned untouched."""
    if value is None:
        return None
    unknown = sorted(set(value) - set(settings.SUPPORTED_LOCALES))
    if unknown:
        raise ValueError(f"Unsupported locale(s): {', '.join(unknown)}")
    return value


def check_locales(value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
    """Reject unknown locale keys and strip surrounding whitespace."""
    value = check_locale_keys(value)
    if value is None:
        return None
    return {k: v.strip() for k, v in value.items() if v and v.strip()}


def check_bodies(value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
    """Markdown bodies keep their exact text; blank ones are dropped."""
    value = check_locale_keys(value)
    if value is None:
        return None
    return {k: v for k, v in value.items() if v and v.strip()}


def require_some_text(value: dict[str, str]) -> dict[str, str]:
    if not value:
        raise ValueError("At least one localized value is required")
    return value
