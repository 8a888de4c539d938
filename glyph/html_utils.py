"""HTML utility functions for Glyph.

This module provides the HTML string helpers shared by the filter pipeline
and the function registry: escaping, unescaping, tag stripping and URL
joining.

Functions:
    escape_html: Escape special HTML characters in a string.
    unescape_html: Turn HTML entities back into characters.
    strip_tags: Remove markup tags, keeping the text.
    join_root_url: Join a base URL with a path.
"""

from __future__ import annotations

import html
import re

from markupsafe import escape

_TAG_RE = re.compile(r"<[^>]*>")


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for inclusion in HTML.

    Examples:
        >>> escape_html('<b>"Tom" & Jerry</b>')
        '&lt;b&gt;&#34;Tom&#34; &amp; Jerry&lt;/b&gt;'
    """
    return str(escape(text))


def unescape_html(text: str) -> str:
    """Convert HTML entities in ``text`` back to characters."""
    return html.unescape(text)


def strip_tags(text: str) -> str:
    """Remove anything that looks like a markup tag.

    Args:
        text: HTML fragment.

    Returns:
        The fragment with every ``<...>`` span removed.
    """
    return _TAG_RE.sub("", text)


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/about')
        'https://example.com/about'

        >>> join_root_url('https://example.com/', 'about')
        'https://example.com/about'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"
