"""Utility functions for Glyph.

String helpers used by the content model, the filter pipeline and the
function registry.

Key functions:
    slugify: Convert arbitrary text to a URL slug.
    titleize: Convert filenames to human-readable titles.
    humanize: Convert a path segment to a title.
    extract_date_from_name: Extract date from filename prefix.
    word_count: Count whitespace-separated words in text.
    reading_time: Estimate minutes needed to read text.
    truncate_text: Cut text down to a character budget with an ellipsis.
"""

from __future__ import annotations

import math
import re
import unicodedata
from datetime import datetime
from pathlib import Path

ELLIPSIS = "..."
WORDS_PER_MINUTE = 200


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL slug.

    Accented characters are folded to their ASCII base letter before
    everything outside ``[a-z0-9]`` collapses into single hyphens.

    Args:
        text: Any text, e.g. a page title.

    Returns:
        URL-friendly slug, empty when nothing usable remains.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'

        >>> slugify("Crème Brûlée")
        'creme-brulee'
    """
    folded = unicodedata.normalize("NFKD", text)
    folded = folded.encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r"[^a-z0-9]+", "-", folded.lower())
    return cleaned.strip("-")


def titleize(filename: str) -> str:
    """Convert a filename to a human-readable title.

    Removes date prefixes (YYYY-MM-DD), replaces hyphens and underscores
    with spaces, and capitalizes each word.

    Args:
        filename: Filename with or without extension.

    Returns:
        Human-readable title string.

    Examples:
        >>> titleize("2024-01-15-hello-world.md")
        'Hello World'
    """
    base = Path(filename).stem
    if "-" in base:
        parts = base.split("-")
        if len(parts) >= 4 and all(p.isdigit() for p in parts[:3]):
            base = "-".join(parts[3:])
    words = re.split(r"[\s\-_]+", base)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def humanize(segment: str) -> str:
    """Turn a path segment such as ``getting_started`` into ``Getting Started``."""
    return " ".join(part.capitalize() for part in re.split(r"[-_]", segment) if part)


def capitalize_words(text: str) -> str:
    """Capitalize every whitespace-separated word."""
    return " ".join(word.capitalize() for word in text.split())


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.
    """
    parts = name.split("-")
    if len(parts) >= 3 and all(p.isdigit() for p in parts[:3]):
        try:
            return datetime(int(parts[0]), int(parts[1]), int(parts[2]))
        except ValueError:
            return None
    return None


def word_count(text: str) -> int:
    return len(text.split())


def reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimate whole minutes needed to read ``text`` (at least 1 for non-empty text)."""
    words = word_count(text)
    if not words:
        return 0
    return max(1, math.ceil(words / max(words_per_minute, 1)))


def truncate_text(text: str, length: int, omission: str = ELLIPSIS) -> str:
    """Shorten ``text`` so that the result, omission included, fits ``length``.

    Args:
        text: Text to shorten.
        length: Total character budget.
        omission: Marker appended when text is cut.

    Returns:
        ``text`` unchanged when it already fits, otherwise its head plus
        ``omission``.

    Examples:
        >>> truncate_text("abcdefghij", 5)
        'ab...'
    """
    if len(text) <= length:
        return text
    keep = max(length - len(omission), 0)
    return f"{text[:keep]}{omission}"
