"""Anchor slug generation"""

import re


_NON_ALNUM_RE = re.compile(r"[\W_]+")


def slugify(text: str) -> str:
    """Lowercase text and collapse every run of non-alphanumerics to a single hyphen."""
    return _NON_ALNUM_RE.sub("-", text.lower()).strip("-")


def unique_slug(base: str, used: set[str]) -> str:
    """Return base, or base-1, base-2, ... whichever is first absent from used, and record it."""
    slug = base
    n = 0
    while slug in used:
        n += 1
        slug = f"{base}-{n}"
    used.add(slug)
    return slug
