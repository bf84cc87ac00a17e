"""
Domain model representing a PatternCategory row from the DB.
"""
from dataclasses import dataclass, field
from datetime import datetime

from patternhub.core.locale import LocaleContext, parse_localized


@dataclass
class Category:
    id: int
    slug: str
    sort_order: int
    created_at: datetime
    updated_at: datetime
    name: dict[str, str] = field(default_factory=dict)
    description: dict[str, str] = field(default_factory=dict)

    def display_name(self, ctx: LocaleContext) -> str:
        return ctx.pick(self.name, default=self.slug)

    def display_description(self, ctx: LocaleContext) -> str:
        return ctx.pick(self.description)

    @classmethod
    def from_row(cls, row) -> "Category":
        """Build a Category from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            slug=row["slug"],
            sort_order=row["sort_order"],
            name=parse_localized(row["name"]),
            description=parse_localized(row["description"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
