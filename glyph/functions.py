"""Template function registry for Glyph.

Functions are what ``{{ name(args) }}`` calls. Each one is a plain Python
function over primitive values (strings, numbers, booleans, timestamps and
lists of those) returning a primitive. They are registered once, at import
time, into ``default_function_registry``, which is then frozen so renders
running on several threads can share it.

Key classes:
- Registry: Name to callable table that can be frozen.
- FunctionRegistry: Registry that validates arguments before calling.
- FunctionArgumentError: Raised for arguments a function cannot use.
"""

from __future__ import annotations

import inspect
import math
import random
import re
from collections.abc import Callable
from datetime import date, datetime, timezone
from types import MappingProxyType
from typing import Any
from urllib.parse import quote, unquote, urljoin, urlsplit

from .content import render_markdown
from .html_utils import escape_html, join_root_url, strip_tags, unescape_html
from .utils import (
    ELLIPSIS,
    WORDS_PER_MINUTE,
    capitalize_words,
    reading_time,
    slugify,
    truncate_text,
)
from .values import format_value, is_sequence, is_truthy

DEFAULT_TRUNCATE_LENGTH = 50
DEFAULT_TRUNCATE_WORDS = 15
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class FunctionArgumentError(ValueError):
    """A template function received arguments it cannot work with."""


class Registry:
    """Name to callable table, read-only once frozen.

    Attributes:
        kind: Label used in error messages ("function", "filter").
    """

    kind = "function"

    def __init__(self):
        self._entries: dict[str, Callable[..., Any]] = {}
        self._frozen = False

    def register(self, name: str, func: Callable[..., Any] | None = None):
        """Register ``func`` under ``name``; usable as a decorator.

        Args:
            name: Name templates use.
            func: Callable to register. When omitted a decorator is returned.

        Raises:
            RuntimeError: If the registry has been frozen.
        """
        if func is None:

            def decorator(target: Callable[..., Any]) -> Callable[..., Any]:
                self.register(name, target)
                return target

            return decorator
        if self._frozen:
            raise RuntimeError(f"{self.kind} registry is frozen; cannot register {name!r}")
        self._entries[name] = func
        return func

    def freeze(self) -> None:
        """Make the registry read-only."""
        self._entries = MappingProxyType(dict(self._entries))
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Callable[..., Any] | None:
        return self._entries.get(name)

    def names(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class FunctionRegistry(Registry):
    """Registry of template functions."""

    def call(self, name: str, args: list[Any]) -> Any:
        """Call the function registered under ``name``.

        Args:
            name: Registered function name.
            args: Primitive argument values.

        Returns:
            The function's result.

        Raises:
            KeyError: If no function is registered under ``name``.
            FunctionArgumentError: If the arguments do not fit the function.
        """
        func = self._entries[name]
        try:
            inspect.signature(func).bind(*args)
        except TypeError as exc:
            raise FunctionArgumentError(f"{name}: {exc}") from exc
        return func(*args)


default_function_registry = FunctionRegistry()
register = default_function_registry.register


def _text(value: Any) -> str:
    if is_sequence(value):
        return ",".join(_text(item) for item in value)
    return format_value(value)


def _items(value: Any) -> list[str]:
    """Read a list argument given either as a list or comma-joined text."""
    if is_sequence(value):
        return [_text(item) for item in value]
    text = _text(value)
    return text.split(",") if text else []


def _number(value: Any, name: str) -> int | float:
    if isinstance(value, bool):
        raise FunctionArgumentError(f"{name} arguments must be numeric")
    if isinstance(value, (int, float)):
        return value
    text = _text(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise FunctionArgumentError(f"{name} arguments must be numeric") from None


def _count(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _loose_float(value: Any) -> float:
    try:
        return float(_text(value))
    except ValueError:
        return 0.0


def _tidy(number: int | float) -> int | float:
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "false", "0")
    return is_truthy(value)


def _now() -> datetime:
    return datetime.now()


# Strings


@register("upper")
def upper(text: Any = "") -> str:
    return _text(text).upper()


@register("lower")
def lower(text: Any = "") -> str:
    return _text(text).lower()


@register("title")
def title(text: Any = "") -> str:
    return capitalize_words(_text(text))


@register("trim")
def trim(text: Any = "") -> str:
    return _text(text).strip()


@register("lstrip")
def lstrip(text: Any = "") -> str:
    return _text(text).lstrip()


@register("rstrip")
def rstrip(text: Any = "") -> str:
    return _text(text).rstrip()


@register("chomp")
def chomp(text: Any = "", suffix: Any = None) -> str:
    """Remove one trailing newline, or ``suffix`` when given."""
    value = _text(text)
    if suffix is None:
        if value.endswith("\r\n"):
            return value[:-2]
        return value[:-1] if value.endswith(("\n", "\r")) else value
    suffix = _text(suffix)
    return value[: -len(suffix)] if suffix and value.endswith(suffix) else value


@register("slugify")
def slugify_(text: Any = "") -> str:
    return slugify(_text(text))


@register("camelize")
def camelize(text: Any = "") -> str:
    return "".join(word.capitalize() for word in re.split(r"[-_\s]+", _text(text)) if word)


@register("underscore")
def underscore(text: Any = "") -> str:
    value = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", _text(text))
    value = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", value)
    return re.sub(r"[-\s]+", "_", value).lower()


@register("dasherize")
def dasherize(text: Any = "") -> str:
    return underscore(text).replace("_", "-")


@register("squeeze")
def squeeze(text: Any = "", chars: Any = "") -> str:
    """Collapse runs of the same character, limited to ``chars`` when given."""
    value = _text(text)
    charset = _text(chars)
    if charset:
        pattern = "([" + re.escape(charset) + r"])\1+"
    else:
        pattern = r"(.)\1+"
    return re.sub(pattern, r"\1", value, flags=re.DOTALL)


@register("delete")
def delete(text: Any = "", chars: Any = "") -> str:
    charset = set(_text(chars))
    return "".join(char for char in _text(text) if char not in charset)


@register("reverse")
def reverse(value: Any = "") -> str:
    if is_sequence(value):
        return ",".join(reversed(_items(value)))
    return _text(value)[::-1]


@register("repeat")
def repeat(text: Any = "", count: Any = 1) -> str:
    return _text(text) * max(_count(count, 1), 0)


@register("pluralize")
def pluralize(word: Any, count: Any = 1) -> str:
    value = _text(word)
    return value if _count(count, 1) == 1 else f"{value}s"


@register("singularize")
def singularize(word: Any) -> str:
    value = _text(word)
    return value[:-1] if value.endswith("s") else value


@register("truncate")
def truncate(text: Any, length: Any = DEFAULT_TRUNCATE_LENGTH, omission: Any = ELLIPSIS) -> str:
    """Shorten text to ``length`` characters, omission included."""
    size = _count(length, DEFAULT_TRUNCATE_LENGTH)
    if size < 0:
        raise FunctionArgumentError("truncate length must be positive")
    return truncate_text(_text(text), size, _text(omission))


@register("truncatewords")
def truncatewords(text: Any, count: Any = DEFAULT_TRUNCATE_WORDS, omission: Any = ELLIPSIS) -> str:
    limit = _count(count, DEFAULT_TRUNCATE_WORDS)
    if limit < 0:
        raise FunctionArgumentError("truncatewords count must be positive")
    value = _text(text)
    words = value.split()
    if len(words) <= limit:
        return value
    return " ".join(words[:limit]) + _text(omission)


@register("strip_newlines")
def strip_newlines(text: Any = "") -> str:
    return re.sub(r"\n+", " ", _text(text)).strip()


@register("newline_to_br")
def newline_to_br(text: Any = "") -> str:
    return _text(text).replace("\n", "<br>")


@register("escape")
def escape(text: Any = "") -> str:
    return escape_html(_text(text))


@register("unescape")
def unescape(text: Any = "") -> str:
    return unescape_html(_text(text))


@register("replace")
def replace(text: Any = "", search: Any = "", replacement: Any = "") -> str:
    needle = _text(search)
    if not needle:
        return _text(text)
    return _text(text).replace(needle, _text(replacement))


@register("remove")
def remove(text: Any = "", search: Any = "") -> str:
    return replace(text, search, "")


@register("char_count")
def char_count(text: Any = "") -> int:
    return len(_text(text))


# Logic


@register("eq")
def eq(left: Any, right: Any) -> bool:
    return _text(left) == _text(right)


@register("ne")
def ne(left: Any, right: Any) -> bool:
    return _text(left) != _text(right)


@register("gt")
def gt(left: Any, right: Any) -> bool:
    return _loose_float(left) > _loose_float(right)


@register("lt")
def lt(left: Any, right: Any) -> bool:
    return _loose_float(left) < _loose_float(right)


@register("gte")
def gte(left: Any, right: Any) -> bool:
    return _loose_float(left) >= _loose_float(right)


@register("lte")
def lte(left: Any, right: Any) -> bool:
    return _loose_float(left) <= _loose_float(right)


@register("and")
def and_(*values: Any) -> bool:
    return all(_flag(value) for value in values)


@register("or")
def or_(*values: Any) -> bool:
    return any(_flag(value) for value in values)


@register("not")
def not_(value: Any = "") -> bool:
    return not _flag(value)


@register("contains")
def contains(haystack: Any = "", needle: Any = "") -> bool:
    if is_sequence(haystack):
        return _text(needle) in _items(haystack)
    return _text(needle) in _text(haystack)


@register("starts_with")
def starts_with(text: Any = "", prefix: Any = "") -> bool:
    return _text(text).startswith(_text(prefix))


@register("ends_with")
def ends_with(text: Any = "", suffix: Any = "") -> bool:
    return _text(text).endswith(_text(suffix))


@register("in_range")
def in_range(value: Any, low: Any, high: Any) -> bool:
    """Inclusive integer range check."""
    return _count(low, 0) <= _count(value, 0) <= _count(high, 0)


# Math


@register("add")
def add(left: Any, right: Any) -> int | float:
    return _tidy(_number(left, "add") + _number(right, "add"))


@register("subtract")
def subtract(left: Any, right: Any) -> int | float:
    return _tidy(_number(left, "subtract") - _number(right, "subtract"))


@register("multiply")
def multiply(left: Any, right: Any) -> int | float:
    return _tidy(_number(left, "multiply") * _number(right, "multiply"))


@register("divide")
def divide(left: Any, right: Any) -> int | float:
    divisor = _number(right, "divide")
    if divisor == 0:
        raise FunctionArgumentError("divide by zero")
    return _tidy(_number(left, "divide") / divisor)


@register("modulo")
def modulo(left: Any, right: Any) -> int:
    dividend = _number(left, "modulo")
    divisor = _number(right, "modulo")
    if not isinstance(dividend, int) or not isinstance(divisor, int):
        raise FunctionArgumentError("modulo arguments must be integers")
    if divisor == 0:
        raise FunctionArgumentError("modulo by zero")
    return dividend % divisor


@register("round")
def round_(value: Any, precision: Any = 0) -> int | float:
    digits = _count(precision, 0)
    rounded = round(_number(value, "round"), digits)
    return int(rounded) if digits <= 0 else rounded


@register("ceil")
def ceil(value: Any) -> int:
    return math.ceil(_number(value, "ceil"))


@register("floor")
def floor(value: Any) -> int:
    return math.floor(_number(value, "floor"))


@register("abs")
def abs_(value: Any) -> int | float:
    return abs(_number(value, "abs"))


@register("sqrt")
def sqrt(value: Any) -> int | float:
    number = _number(value, "sqrt")
    if number < 0:
        raise FunctionArgumentError("sqrt of negative number")
    return _tidy(math.sqrt(number))


@register("pow")
def pow_(base: Any, exponent: Any) -> int | float:
    return _tidy(_number(base, "pow") ** _number(exponent, "pow"))


def _numbers(values: tuple[Any, ...], name: str) -> list[int | float]:
    flat: list[Any] = []
    for value in values:
        flat.extend(_items(value) if is_sequence(value) or isinstance(value, str) else [value])
    if not flat:
        raise FunctionArgumentError(f"{name} requires at least 1 argument")
    return [_number(value, name) for value in flat]


@register("min")
def min_(*values: Any) -> int | float:
    return min(_numbers(values, "min"))


@register("max")
def max_(*values: Any) -> int | float:
    return max(_numbers(values, "max"))


@register("sum")
def sum_(*values: Any) -> int | float:
    return _tidy(sum(_numbers(values, "sum")))


# Collections


@register("len")
def length(items: Any = "") -> int:
    return len(_items(items))


@register("uniq")
def uniq(items: Any = "") -> str:
    return ",".join(dict.fromkeys(_items(items)))


@register("sample")
def sample(items: Any = "", count: Any = 1) -> str:
    values = _items(items)
    if not values:
        return ""
    return ",".join(random.sample(values, min(max(_count(count, 1), 0), len(values))))


@register("shuffle")
def shuffle(items: Any = "") -> str:
    values = _items(items)
    random.shuffle(values)
    return ",".join(values)


@register("rotate")
def rotate(items: Any = "", count: Any = 1) -> str:
    """Move the first ``count`` items to the end."""
    values = _items(items)
    if not values:
        return ""
    shift = _count(count, 1) % len(values)
    return ",".join(values[shift:] + values[:shift])


@register("sort_by_length")
def sort_by_length(items: Any = "", descending: Any = False) -> str:
    return ",".join(sorted(_items(items), key=len, reverse=_flag(descending)))


@register("compact")
def compact(items: Any = "") -> str:
    return ",".join(item for item in _items(items) if item.strip())


@register("index")
def index(items: Any = "", item: Any = "") -> int:
    values = _items(items)
    wanted = _text(item)
    return values.index(wanted) if wanted in values else -1


@register("rindex")
def rindex(items: Any = "", item: Any = "") -> int:
    values = _items(items)
    wanted = _text(item)
    if wanted not in values:
        return -1
    return len(values) - 1 - values[::-1].index(wanted)


@register("first")
def first(value: Any = "", count: Any = 1) -> str:
    """First ``count`` items of a list, or first words of text."""
    limit = max(_count(count, 1), 0)
    if is_sequence(value):
        return ",".join(_items(value)[:limit])
    return " ".join(_text(value).split()[:limit])


@register("last")
def last(value: Any = "", count: Any = 1) -> str:
    limit = max(_count(count, 1), 0)
    if is_sequence(value):
        values = _items(value)
    else:
        values = _text(value).split()
    if not limit:
        return ""
    joiner = "," if is_sequence(value) else " "
    return joiner.join(values[-limit:])


@register("join")
def join(items: Any = "", separator: Any = ",") -> str:
    return _text(separator).join(_items(items))


# Time


def _format_time(args: tuple[Any, ...], default_format: str) -> str:
    """Format ``args[0]`` when it is a timestamp, otherwise the current time.

    The format string is the first non-timestamp argument.
    """
    if args and isinstance(args[0], date):
        moment, rest = args[0], args[1:]
    else:
        moment, rest = _now(), args
    fmt = _text(rest[0]) if rest else default_format
    return moment.strftime(fmt or default_format)


@register("now")
def now() -> str:
    return _now().strftime(DATETIME_FORMAT)


@register("date")
def date_(*args: Any) -> str:
    return _format_time(args, DATE_FORMAT)


@register("time")
def time_(*args: Any) -> str:
    return _format_time(args, TIME_FORMAT)


@register("datetime")
def datetime_(*args: Any) -> str:
    return _format_time(args, DATETIME_FORMAT)


@register("timestamp")
def timestamp() -> int:
    return int(datetime.now(timezone.utc).timestamp())


@register("rfc3339")
def rfc3339() -> str:
    return datetime.now(timezone.utc).strftime(RFC3339_FORMAT)


@register("iso8601")
def iso8601() -> str:
    return datetime.now(timezone.utc).strftime(RFC3339_FORMAT)


def _parse_moment(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = _text(value).strip()
    for fmt in (DATETIME_FORMAT, DATE_FORMAT):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _ago(amount: int, unit: str) -> str:
    return f"1 {unit} ago" if amount == 1 else f"{amount} {unit}s ago"


@register("time_ago")
def time_ago(value: Any = "") -> str:
    """Describe how long ago a timestamp was, e.g. ``"3 days ago"``."""
    moment = _parse_moment(value)
    if moment is None:
        return "Invalid date"
    current = datetime.now(moment.tzinfo) if moment.tzinfo else _now()
    seconds = (current - moment).total_seconds()
    days = seconds / 86400
    if days >= 365:
        return _ago(int(days // 365), "year")
    if days >= 30:
        return _ago(int(days // 30), "month")
    if days >= 1:
        return _ago(int(days), "day")
    if seconds >= 3600:
        return _ago(int(seconds // 3600), "hour")
    if seconds >= 60:
        return _ago(int(seconds // 60), "minute")
    return "Just now"


# Types


@register("string")
def string(value: Any = "") -> str:
    return _text(value)


@register("int")
def to_int(value: Any) -> int:
    return int(_number(value, "int"))


@register("float")
def to_float(value: Any) -> float:
    return float(_number(value, "float"))


@register("bool")
def to_bool(value: Any) -> bool:
    return _flag(value)


@register("array")
def array(*values: Any) -> str:
    return ",".join(_text(value) for value in values)


@register("size")
def size(value: Any) -> int:
    if is_sequence(value):
        return len(value)
    return len(_text(value))


@register("empty")
def empty(value: Any) -> bool:
    return size(value) == 0


@register("blank")
def blank(value: Any) -> bool:
    return not _text(value).strip()


# URLs


@register("urlize")
def urlize(text: Any = "") -> str:
    return slugify(_text(text))


def _is_absolute(url: str) -> bool:
    return url.startswith(("http://", "https://", "//"))


@register("relative_url")
def relative_url(url: Any = "", base: Any = "") -> str:
    """Prefix ``url`` with the path part of ``base``."""
    target = _text(url)
    if _is_absolute(target):
        return target
    base_path = urlsplit(_text(base)).path.rstrip("/")
    return f"{base_path}/{target.lstrip('/')}"


@register("absolute_url")
def absolute_url(url: Any = "", base: Any = "") -> str:
    target = _text(url)
    if _is_absolute(target):
        return target
    return join_root_url(_text(base), target)


@register("url_encode")
def url_encode(text: Any = "") -> str:
    return quote(_text(text), safe="/")


@register("url_decode")
def url_decode(text: Any = "") -> str:
    return unquote(_text(text))


@register("url_scheme")
def url_scheme(url: Any = "") -> str:
    return urlsplit(_text(url)).scheme


@register("url_host")
def url_host(url: Any = "") -> str:
    return urlsplit(_text(url)).hostname or ""


@register("url_path")
def url_path(url: Any = "") -> str:
    return urlsplit(_text(url)).path


@register("url_query")
def url_query(url: Any = "") -> str:
    return urlsplit(_text(url)).query


@register("url_fragment")
def url_fragment(url: Any = "") -> str:
    return urlsplit(_text(url)).fragment


@register("is_absolute_url")
def is_absolute_url(url: Any = "") -> bool:
    return bool(urlsplit(_text(url)).scheme)


@register("url_join")
def url_join(base: Any = "", path: Any = "") -> str:
    return urljoin(_text(base), _text(path))


# Text


@register("word_count")
def word_count(text: Any = "") -> int:
    return len(_text(text).split())


@register("reading_time")
def reading_time_(text: Any = "", words_per_minute: Any = WORDS_PER_MINUTE) -> str:
    minutes = reading_time(_text(text), _count(words_per_minute, WORDS_PER_MINUTE))
    return "1 min read" if minutes == 1 else f"{minutes} min read"


@register("markdownify")
def markdownify(text: Any = "") -> str:
    return render_markdown(_text(text))


@register("strip_html")
def strip_html(text: Any = "") -> str:
    return strip_tags(_text(text))


register("escape_html", escape)
register("unescape_html", unescape)

default_function_registry.freeze()
