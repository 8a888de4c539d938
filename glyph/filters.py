"""Filter pipeline for Glyph.

``{{ expr | strip | truncate(20) }}`` evaluates ``expr`` and threads the
value through each filter from left to right. Filters work on template
values directly, so list filters such as ``first`` or ``sort`` keep pages
as pages for the next stage.

Key objects:
- FilterRegistry: Registry of filter callables ``(value, *args)``.
- default_filter_registry: The frozen built-in catalogue.
- apply_filters: Run a value through a chain of filter directives.
"""

from __future__ import annotations

import inspect
import logging
import random
from collections.abc import Callable, Mapping
from typing import Any

from .arguments import parse_call, split_arguments
from .content import render_markdown
from .functions import DEFAULT_TRUNCATE_LENGTH, Registry, squeeze
from .html_utils import escape_html, strip_tags
from .utils import capitalize_words, slugify, truncate_text
from .values import format_value, is_sequence, is_truthy, representative

logger = logging.getLogger(__name__)


class FilterRegistry(Registry):
    """Registry of template filters."""

    kind = "filter"


default_filter_registry = FilterRegistry()
_filter = default_filter_registry.register


def _text(value: Any) -> str:
    return format_value(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _sort_key(item: Any) -> Any:
    return representative(item) or format_value(item)


@_filter("upper")
@_filter("upcase")
def upper(value: Any) -> str:
    return _text(value).upper()


@_filter("lower")
@_filter("downcase")
def lower(value: Any) -> str:
    return _text(value).lower()


@_filter("title")
def title(value: Any) -> str:
    return capitalize_words(_text(value))


@_filter("capitalize")
def capitalize(value: Any) -> str:
    return _text(value).capitalize()


@_filter("slugify")
def slugify_(value: Any) -> str:
    return slugify(_text(value))


@_filter("strip")
def strip(value: Any) -> str:
    return _text(value).strip()


@_filter("lstrip")
def lstrip(value: Any) -> str:
    return _text(value).lstrip()


@_filter("rstrip")
def rstrip(value: Any) -> str:
    return _text(value).rstrip()


@_filter("plain")
@_filter("strip_html")
def plain(value: Any) -> str:
    return strip_tags(_text(value))


@_filter("escape")
@_filter("escape_html")
def escape(value: Any) -> str:
    return escape_html(_text(value))


@_filter("truncate")
def truncate(value: Any, length: Any = DEFAULT_TRUNCATE_LENGTH) -> Any:
    """Cut text to ``length`` characters, ellipsis included."""
    if not _is_int(length):
        return value
    return truncate_text(_text(value), length)


@_filter("first")
def first(value: Any, count: Any = None) -> Any:
    if not is_sequence(value):
        return value
    if count is None:
        return value[0] if len(value) else None
    return value[: max(count, 0)] if _is_int(count) else value


@_filter("last")
def last(value: Any, count: Any = None) -> Any:
    if not is_sequence(value):
        return value
    if count is None:
        return value[-1] if len(value) else None
    if not _is_int(count):
        return value
    return value[-count:] if count > 0 else value[:0]


@_filter("size")
@_filter("length")
def size(value: Any) -> int:
    if isinstance(value, (str, Mapping)) or is_sequence(value):
        return len(value)
    return 0


@_filter("join")
def join(value: Any, separator: Any = ", ") -> Any:
    if not is_sequence(value):
        return value
    return _text(separator).join(_text(item) for item in value)


@_filter("reverse")
def reverse(value: Any) -> Any:
    if isinstance(value, str):
        return value[::-1]
    if is_sequence(value):
        return list(reversed(value))
    return value


@_filter("sort")
def sort(value: Any) -> Any:
    if not is_sequence(value):
        return value
    items = list(value)
    if all(_is_int(item) or isinstance(item, float) for item in items):
        return sorted(items)
    return sorted(items, key=_sort_key)


@_filter("uniq")
@_filter("unique")
def uniq(value: Any) -> Any:
    if not is_sequence(value):
        return value
    unique: list[Any] = []
    for item in value:
        if item not in unique:
            unique.append(item)
    return unique


@_filter("sample")
def sample(value: Any, count: Any = 1) -> Any:
    if not is_sequence(value) or not _is_int(count):
        return value
    items = list(value)
    return random.sample(items, min(max(count, 0), len(items)))


@_filter("shuffle")
def shuffle(value: Any) -> Any:
    if not is_sequence(value):
        return value
    items = list(value)
    random.shuffle(items)
    return items


@_filter("compact")
def compact(value: Any) -> Any:
    if not is_sequence(value):
        return value
    return [item for item in value if item is not None and item != ""]


@_filter("any?")
def any_(value: Any) -> bool:
    return is_sequence(value) and any(item is not None for item in value)


@_filter("all?")
def all_(value: Any) -> bool:
    return is_sequence(value) and all(item is not None for item in value)


@_filter("none?")
def none_(value: Any) -> bool:
    return is_sequence(value) and all(item is None for item in value)


@_filter("one?")
def one_(value: Any) -> bool:
    return is_sequence(value) and sum(1 for item in value if item is not None) == 1


@_filter("clamp")
def clamp(value: Any, low: Any, high: Any = None) -> Any:
    """Clamp an integer into ``[low, high]``; a single bound is the maximum."""
    if high is None:
        low, high = 0, low
    if not (_is_int(value) and _is_int(low) and _is_int(high)):
        return value
    return min(max(value, low), high)


@_filter("min")
def min_(value: Any, bound: Any) -> Any:
    if not _is_int(bound):
        return value
    if _is_int(value):
        return min(value, bound)
    if is_sequence(value):
        return value[: max(bound, 0)]
    return value


@_filter("max")
def max_(value: Any, bound: Any) -> Any:
    if _is_int(value) and _is_int(bound):
        return max(value, bound)
    return value


@_filter("squeeze")
def squeeze_(value: Any) -> str:
    return squeeze(_text(value))


@_filter("char_count")
def char_count(value: Any) -> int:
    return len(_text(value))


@_filter("markdownify")
def markdownify(value: Any) -> str:
    return render_markdown(_text(value))


@_filter("default")
def default(value: Any, fallback: Any = "") -> Any:
    return value if is_truthy(value) else fallback


default_filter_registry.freeze()


def apply_filters(
    value: Any,
    directives: list[str],
    resolve_argument: Callable[[str], Any],
    registry: FilterRegistry = default_filter_registry,
) -> Any:
    """Thread ``value`` through each filter directive, left to right.

    Args:
        value: Evaluated expression.
        directives: Filter texts such as ``"strip"`` or ``"truncate(5)"``.
        resolve_argument: Turns one raw argument into a value.
        registry: Filters to dispatch to.

    Returns:
        The final value. Unknown filters, and filters given arguments they
        cannot take, leave the value unchanged.
    """
    for directive in directives:
        call = parse_call(directive)
        if call:
            name, raw_args = call
            args = [resolve_argument(raw) for raw in split_arguments(raw_args)]
        else:
            name, args = directive.strip(), []
        func = registry.get(name)
        if func is None:
            logger.debug("Unknown filter %r; passing value through", name)
            continue
        try:
            inspect.signature(func).bind(value, *args)
        except TypeError as exc:
            logger.warning("Filter %r called with unusable arguments: %s", name, exc)
            continue
        value = func(value, *args)
    return value
