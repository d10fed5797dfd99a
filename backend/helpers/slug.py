"""
Tag slug normalization.
"""

import re

SLUG_MAX_LENGTH = 64

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(value: str | None) -> str:
    """
    Derive a URL-safe slug from free text.

    Trims and lowercases the input, collapses every run of characters
    outside ``[a-z0-9]`` into a single hyphen, strips leading and trailing
    hyphens and truncates to 64 characters. Applying it twice yields the
    same result as applying it once.

    Examples:
        >>> slugify("  Google Play / Closed Testing ")
        'google-play-closed-testing'
        >>> slugify("---")
        ''
    """
    if not value:
        return ""
    slug = _NON_ALNUM_RUN.sub("-", value.strip().lower()).strip("-")
    # Truncation can expose a trailing hyphen
    return slug[:SLUG_MAX_LENGTH].rstrip("-")
