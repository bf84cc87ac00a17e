"""
Repository layer for pattern Markdown bodies.

Bodies live on disk, one file per (pattern, locale), under the configured
content root. The relational row only stores each file's relative path.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import logging
import os
import tempfile

from patternhub.core.config import settings
from patternhub.core.locale import LocaleContext
from patternhub.models.pattern import Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedContent:
    """Markdown served for a pattern and which locale it came from."""

    text: str
    locale: str
    is_placeholder: bool = False


class ContentRepository:
    def __init__(self, root: Union[str, Path, None] = None) -> None:
        self._root = Path(root or settings.CONTENT_ROOT).resolve()

    @property
    def root(self) -> Path:
        return self._root

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @staticmethod
    def derive_path(pattern: Pattern, locale: str) -> str:
        """Relative file name for a pattern body; the id keeps it unique per pattern."""
        return f"{pattern.slug}-{pattern.id}.{locale}.md"

    def _full_path(self, relative: str) -> Optional[Path]:
        """Resolve *relative* under the root, or None if it escapes it."""
        candidate = (self._root / relative).resolve()
        if candidate != self._root and self._root not in candidate.parents:
            logger.warning("Content path escapes content root: %s", relative)
            return None
        return candidate

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _read(self, relative: Optional[str]) -> Optional[str]:
        if not relative:
            return None
        path = self._full_path(relative)
        if path is None:
            return None
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Content file missing: %s", path)
        except (OSError, UnicodeDecodeError):
            logger.error("Content file unreadable: %s", path, exc_info=True)
        return None

    def resolve(self, pattern: Pattern, ctx: LocaleContext) -> ResolvedContent:
        """
        Load the body for ``ctx.locale``.

        Falls back to the default locale's file, then to a placeholder
        document so a half-translated pattern still renders.
        """
        for locale in dict.fromkeys((ctx.locale, ctx.fallback)):
            text = self._read(pattern.content_path(locale))
            if text is not None:
                if locale != ctx.locale:
                    logger.info(
                        "Serving pattern id=%s in %s (no %s content)",
                        pattern.id, locale, ctx.locale,
                    )
                return ResolvedContent(text=text, locale=locale)

        placeholder = f"# {pattern.display_name(ctx)}\n\n{ctx.pending_content()}\n"
        return ResolvedContent(text=placeholder, locale=ctx.locale, is_placeholder=True)

    def get_content(self, pattern: Pattern, locale: str) -> str:
        return self.resolve(pattern, LocaleContext.resolve(locale)).text

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def save_content(self, pattern: Pattern, content: str, locale: str) -> str:
        """
        Write *content* as the pattern's *locale* body and return its relative path.

        The file is written to a temporary sibling, flushed to disk, then
        renamed over the target so readers never see a partial body.
        """
        relative = pattern.content_path(locale) or self.derive_path(pattern, locale)
        path = self._full_path(relative)
        if path is None:
            relative = self.derive_path(pattern, locale)
            path = self._root / relative
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info("Saved %s content for pattern id=%s to %s", locale, pattern.id, relative)
        return relative

    def delete_content(self, pattern: Pattern) -> int:
        """Remove every body file of *pattern*; returns how many were deleted."""
        removed = 0
        for relative in pattern.content_paths.values():
            path = self._full_path(relative)
            if path is None:
                continue
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                logger.warning("Content file already gone: %s", path)
        logger.info("Deleted %s content files for pattern id=%s", removed, pattern.id)
        return removed
