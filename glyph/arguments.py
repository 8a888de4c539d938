"""Argument parsing shared by function calls and filters.

``name(arg, "literal", 3, true)`` appears both as a directive and as a
filter in a pipeline. This module splits such text into its parts and turns
each argument into a value.

Key functions:
- parse_call: Split ``name(args)`` into name and raw argument text.
- split_arguments: Comma-split an argument list, honouring quotes.
- split_pipeline: Split ``expr | f1 | f2(x)`` into expression and filters.
- parse_literal: Recognise quoted strings, booleans and integers.
"""

from __future__ import annotations

import re
from typing import Any

CALL_RE = re.compile(r"^([A-Za-z_][\w]*\??)\s*\((.*)\)$", re.DOTALL)
INTEGER_RE = re.compile(r"^-?\d+$")

NOT_LITERAL = object()


def parse_call(text: str) -> tuple[str, str] | None:
    """Split ``name(args)`` into ``(name, args)``.

    Returns:
        Tuple of the callable name and the raw text between the outer
        parentheses, or None when ``text`` is not a call.

    Examples:
        >>> parse_call('truncate(5)')
        ('truncate', '5')

        >>> parse_call('site.title') is None
        True
    """
    match = CALL_RE.match(text.strip())
    if not match:
        return None
    return match.group(1), match.group(2).strip()


def _split(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    current: list[str] = []
    quote = ""
    depth = 0
    for char in text:
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return parts


def split_arguments(text: str) -> list[str]:
    """Split an argument list on commas outside quotes.

    Args:
        text: Raw text between a call's parentheses.

    Returns:
        Trimmed arguments; an empty list for blank input.

    Examples:
        >>> split_arguments('"a, b", 3')
        ['"a, b"', '3']
    """
    if not text.strip():
        return []
    return [part.strip() for part in _split(text, ",")]


def split_pipeline(text: str) -> tuple[str, list[str]]:
    """Split a variable directive into its expression and filter names.

    Examples:
        >>> split_pipeline('title | strip | truncate(5)')
        ('title', ['strip', 'truncate(5)'])
    """
    parts = [part.strip() for part in _split(text, "|")]
    return parts[0], [part for part in parts[1:] if part]


def unquote(text: str) -> str | None:
    """Return the content of a quoted string, or None if unquoted."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'":
        return text[1:-1]
    return None


def parse_literal(text: str) -> Any:
    """Parse a literal argument.

    Quoted text becomes a string, ``true``/``false`` a boolean and an
    integer literal an int.

    Returns:
        The literal value, or ``NOT_LITERAL`` when ``text`` has to be
        evaluated as an expression.
    """
    quoted = unquote(text)
    if quoted is not None:
        return quoted
    if text == "true":
        return True
    if text == "false":
        return False
    if INTEGER_RE.match(text):
        return int(text)
    return NOT_LITERAL
