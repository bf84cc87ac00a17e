"""
Request-scoped locale handling.

The active language is resolved once per request into a ``LocaleContext`` and
passed explicitly to services; nothing here mutates process-wide state.
"""
import json
from dataclasses import dataclass
from typing import Mapping, Optional
import logging

from patternhub.core.config import settings

logger = logging.getLogger(__name__)

# Shown when a pattern has no Markdown body in any usable locale.
PENDING_CONTENT = {
    "zh": "内容正在编写中...",
    "en": "Content is being written...",
}

UNTITLED = {
    "zh": "未命名",
    "en": "Untitled",
}


def is_supported(locale: Optional[str]) -> bool:
    return bool(locale) and locale in settings.SUPPORTED_LOCALES


@dataclass(frozen=True)
class LocaleContext:
    """The language a request is served in, plus the fallback language."""

    locale: str
    fallback: str = settings.DEFAULT_LOCALE

    @classmethod
    def resolve(cls, *candidates: Optional[str]) -> "LocaleContext":
        """Return a context for the first supported candidate, else the default."""
        for candidate in candidates:
            if is_supported(candidate):
                return cls(locale=candidate)  # type: ignore[arg-type]
        return cls(locale=settings.DEFAULT_LOCALE)

    def pick(self, values: Optional[Mapping[str, str]], default: str = "") -> str:
        """
        Choose the localized value for this context.

        Order: active locale, fallback locale, any other non-empty value.
        """
        if not values:
            return default
        for key in (self.locale, self.fallback):
            value = values.get(key)
            if value:
                return value
        for value in values.values():
            if value:
                return value
        return default

    def untitled(self) -> str:
        return UNTITLED.get(self.locale, UNTITLED[settings.DEFAULT_LOCALE])

    def pending_content(self) -> str:
        return PENDING_CONTENT.get(self.locale, PENDING_CONTENT["en"])


def parse_localized(raw: Optional[str]) -> dict[str, str]:
    """Decode a JSON ``{locale: value}`` column, dropping empty values."""
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring malformed localized value %r", raw)
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(k): str(v) for k, v in data.items() if v}


def dump_localized(values: Optional[Mapping[str, str]]) -> str:
    """Encode a ``{locale: value}`` mapping for storage."""
    cleaned = {k: v for k, v in (values or {}).items() if v}
    return json.dumps(cleaned, ensure_ascii=False, sort_keys=True)
