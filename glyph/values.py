"""Runtime values for Glyph templates.

Template values are plain Python objects: strings, numbers, booleans,
timestamps, sequences, mappings, ``None`` and the opaque content objects
(pages, the site, menu entries, navigation objects). This module holds the
three rules every other stage shares about them.

Key functions:
- format_value: Render any value to output text.
- is_truthy: Decide which branch a conditional takes.
- coerce_argument: Reduce a value to a primitive for function calls.
- representative: The title/name an opaque object stands for.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

DATE_FORMAT = "%Y-%m-%d"

# Attributes an opaque object is known by, in order of preference.
REPRESENTATIVE_FIELDS = ("title", "name")

PRIMITIVE_TYPES = (str, bool, int, float, date)


def is_sequence(value: Any) -> bool:
    """Return True for list-like values (strings and bytes excluded)."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def is_opaque(value: Any) -> bool:
    """Return True for content objects: anything that is not a primitive,
    a sequence, a mapping or None."""
    if value is None or isinstance(value, PRIMITIVE_TYPES):
        return False
    return not (is_sequence(value) or isinstance(value, Mapping))


def representative(value: Any) -> str | None:
    """Return the title or name an opaque object is known by.

    Args:
        value: Any value.

    Returns:
        The first non-empty representative field as a string, or None when
        ``value`` is not an opaque object or has no such field.
    """
    if not is_opaque(value):
        return None
    for field_name in REPRESENTATIVE_FIELDS:
        field_value = getattr(value, field_name, None)
        if isinstance(field_value, str):
            return field_value
    return None


def format_value(value: Any) -> str:
    """Convert a template value to output text.

    Args:
        value: Result of evaluating an expression, filter chain or call.

    Returns:
        Text for substitution into the template.

    Examples:
        >>> format_value(True)
        'true'

        >>> format_value(["a", "b"])
        'a, b'

        >>> format_value([1, 2, 3])
        '3'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, Mapping):
        return ", ".join(f"{key}: {format_value(item)}" for key, item in value.items())
    if is_sequence(value):
        items = list(value)
        if all(isinstance(item, str) for item in items):
            return ", ".join(items)
        names = [representative(item) for item in items]
        if all(name is not None for name in names):
            return ", ".join(names)
        return str(len(items))
    return representative(value) or ""


def is_truthy(value: Any) -> bool:
    """Decide whether a conditional takes its true branch.

    ``None``, ``False``, empty strings, empty sequences, empty mappings and
    numeric zero are false; everything else is true.
    """
    if value is None or value is False:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, (str, Mapping)) or is_sequence(value):
        return len(value) > 0
    return True


def coerce_argument(value: Any) -> Any:
    """Reduce an evaluated argument to something a registry function accepts.

    Primitives pass through. ``None`` becomes the empty string. An opaque
    object becomes its representative field; a sequence of opaque objects
    becomes their representative fields joined by ``","``; a mapping
    becomes ``"key: value"`` pairs joined by ``","``. A sequence of
    primitives stays a list.
    """
    if value is None:
        return ""
    if isinstance(value, PRIMITIVE_TYPES):
        return value
    if isinstance(value, Mapping):
        return ",".join(f"{key}: {format_value(item)}" for key, item in value.items())
    if is_sequence(value):
        items = list(value)
        if any(is_opaque(item) for item in items):
            return ",".join(representative(item) or "" for item in items)
        return [coerce_argument(item) for item in items]
    return representative(value) or ""
