"""Text helpers shared by services."""
import re
import unicodedata
from typing import Callable, Iterable, Mapping

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """ASCII, lower-case, dash-separated slug; empty when nothing survives."""
    ascii_text = (
        unicodedata.normalize("NFKD", text or "")
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    return _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")


def slug_from_names(names: Mapping[str, str], locale_order: Iterable[str]) -> str:
    """First non-empty slug from the localized names, in *locale_order*."""
    order = list(locale_order)
    for locale in order + [k for k in names if k not in order]:
        slug = slugify(names.get(locale, ""))
        if slug:
            return slug
    return ""


def unique_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    """Return *base*, or *base* with the first free ``-2``, ``-3``... suffix."""
    candidate, n = base, 2
    while is_taken(candidate):
        candidate = f"{base}-{n}"
        n += 1
    return candidate
