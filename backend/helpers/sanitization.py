"""
Sanitization utilities for user-supplied text and links.

Posts, comments and tags are rendered as plain text, so every markup tag is
stripped before storage. Links are only kept when they are absolute http(s)
URLs.
"""

import html
from typing import Optional
from urllib.parse import urlparse

import bleach

ALLOWED_URL_SCHEMES = ("http", "https")


def sanitize_plain_text(content: Optional[str]) -> Optional[str]:
    """
    Strip all HTML tags and surrounding whitespace.

    Entities escaped by bleach are decoded again: the result is stored as
    plain text and escaped by whoever renders it.

    Args:
        content: Raw content from user input

    Returns:
        Plain text with all HTML removed, or None if input is None

    Examples:
        >>> sanitize_plain_text('<script>alert(1)</script>Title')
        'alert(1)Title'
        >>> sanitize_plain_text(' <b>Bold</b> text ')
        'Bold text'
        >>> sanitize_plain_text('Health & Fitness')
        'Health & Fitness'
    """
    if content is None:
        return None

    return html.unescape(bleach.clean(content, tags=[], strip=True)).strip()


def sanitize_http_url(url: Optional[str]) -> Optional[str]:
    """
    Keep a URL only when it is an absolute http or https link.

    Anything else (javascript:, relative paths, blank strings) is treated as
    absent and returns None.

    Examples:
        >>> sanitize_http_url('https://play.google.com/store/apps/dev?id=1')
        'https://play.google.com/store/apps/dev?id=1'
        >>> sanitize_http_url('javascript:alert(1)') is None
        True
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    try:
        parsed = urlparse(url)
    except ValueError:
        return None

    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES or not parsed.netloc:
        return None
    return url
