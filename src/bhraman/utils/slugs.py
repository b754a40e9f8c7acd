"""URL slug helpers for package titles."""

import re
import unicodedata
from typing import Callable

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """Convert a title to a lower-case, hyphen-separated slug.

    Accents are folded to ASCII and punctuation is dropped, e.g.
    ``"Goa Beach & Backwaters!"`` becomes ``"goa-beach-backwaters"``.
    """
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    cleaned = _NON_WORD.sub("", normalized.lower())
    return _SEPARATORS.sub("-", cleaned).strip("-")


def unique_slug(title: str, is_taken: Callable[[str], bool]) -> str:
    """Derive a slug from a title, suffixing -1, -2, ... until it is free.

    Args:
        title: Package title
        is_taken: Predicate that reports whether a slug is already used

    Returns:
        A slug for which is_taken returned False
    """
    base = slugify(title) or "package"
    slug = base
    counter = 1
    while is_taken(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
