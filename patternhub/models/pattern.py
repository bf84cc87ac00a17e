"""
Domain model representing a DesignPattern row from the DB.

The Markdown body is not part of the row: ``content_paths`` maps each locale
to a file path relative to the configured content root.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from patternhub.core.locale import LocaleContext, parse_localized


@dataclass
class Pattern:
    id: int
    category_id: int
    slug: str
    is_published: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime
    name: dict[str, str] = field(default_factory=dict)
    description: dict[str, str] = field(default_factory=dict)
    content_paths: dict[str, str] = field(default_factory=dict)

    def display_name(self, ctx: LocaleContext) -> str:
        return ctx.pick(self.name, default=ctx.untitled())

    def display_description(self, ctx: LocaleContext) -> str:
        return ctx.pick(self.description)

    def content_path(self, locale: str) -> Optional[str]:
        return self.content_paths.get(locale)

    def available_locales(self) -> list[str]:
        """Locales that have either a name or a content file."""
        return sorted(set(self.name) | set(self.content_paths))

    @classmethod
    def from_row(cls, row) -> "Pattern":
        """Build a Pattern from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            category_id=row["category_id"],
            slug=row["slug"],
            is_published=bool(row["is_published"]),
            sort_order=row["sort_order"],
            name=parse_localized(row["name"]),
            description=parse_localized(row["description"]),
            content_paths=parse_localized(row["content_paths"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
