"""Capability tables for Glyph.

Templates never reach Python attributes directly. For every object type a
template may see, this module lists the method names it is allowed to call
and the accessor that answers each one. Anything not listed resolves to nil.

Each accessor receives the object and the active render context (for
accessors that need the whole site, such as ``permalink`` or ``next``).
Theme-convention CamelCase names (``Title``, ``RelPermalink``) and
snake_case names are both listed.

Key objects:
- CAPABILITIES: Read-only mapping of type to its capability table.
- lookup_method: Find the accessor for a value and method name.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, datetime
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from . import __version__, filters
from .collections import PageCollection
from .content import BuildConfig, Page, Site
from .navigation import (
    BreadcrumbItem,
    MenuItem,
    SectionNavigation,
    children,
    parent,
    related,
    section_navigation,
)
from .values import is_sequence

if TYPE_CHECKING:
    from .context import Context

Accessor = Callable[[Any, "Context"], Any]
CapabilityTable = Mapping[str, Accessor]


def _table(entries: dict[str, Accessor], **aliases: str) -> CapabilityTable:
    """Build a read-only table, adding each alias for an existing entry."""
    table = dict(entries)
    for alias, target in aliases.items():
        table[alias] = entries[target]
    return MappingProxyType(table)


def _attr(name: str) -> Accessor:
    return lambda obj, ctx: getattr(obj, name)


def _page_next(page: Page, ctx: Context) -> Page | None:
    return section_navigation(page, ctx.site.pages).next


def _page_prev(page: Page, ctx: Context) -> Page | None:
    return section_navigation(page, ctx.site.pages).prev


def _site_home(site: Site, ctx: Context) -> Page | None:
    return next((p for p in site.pages if p.kind == "home"), None)


def _site_tags(site: Site, ctx: Context) -> list[str]:
    return sorted({tag for page in site.pages for tag in page.tags})


def _site_categories(site: Site, ctx: Context) -> list[str]:
    return sorted({name for page in site.pages for name in page.categories})


SITE_CAPABILITIES = _table(
    {
        "title": _attr("title"),
        "base_url": _attr("base_url"),
        "description": _attr("description"),
        "author": _attr("author"),
        "copyright": _attr("copyright"),
        "theme": _attr("theme"),
        "params": _attr("params"),
        "data": _attr("data"),
        "pages": _attr("pages"),
        "regular_pages": lambda site, ctx: site.regular_pages,
        "sections": lambda site, ctx: site.pages.of_kind("section"),
        "home": _site_home,
        "menus": _attr("menus"),
        "tags": _site_tags,
        "categories": _site_categories,
        "build_config": _attr("build"),
        "debug": _attr("debug"),
        "generator": lambda site, ctx: f"Glyph {__version__}",
    },
    Title="title",
    BaseURL="base_url",
    baseURL="base_url",
    Description="description",
    Author="author",
    Copyright="copyright",
    Theme="theme",
    Params="params",
    Data="data",
    Pages="pages",
    RegularPages="regular_pages",
    Sections="sections",
    Home="home",
    Menus="menus",
    Tags="tags",
    Categories="categories",
    BuildConfig="build_config",
    Debug="debug",
    Generator="generator",
)

PAGE_CAPABILITIES = _table(
    {
        "title": _attr("title"),
        "url": _attr("url"),
        "permalink": lambda page, ctx: ctx.site.permalink(page),
        "content": _attr("content"),
        "summary": _attr("summary"),
        "plain": _attr("plain"),
        "description": _attr("description"),
        "date": _attr("date"),
        "date_formatted": _attr("date_formatted"),
        "tags": _attr("tags"),
        "categories": _attr("categories"),
        "section": _attr("section"),
        "kind": _attr("kind"),
        "type": _attr("type"),
        "layout": _attr("layout"),
        "draft": _attr("draft"),
        "params": _attr("params"),
        "word_count": _attr("word_count"),
        "reading_time": _attr("reading_time"),
        "is_home": lambda page, ctx: page.kind == "home",
        "is_section": lambda page, ctx: page.kind == "section",
        "is_page": lambda page, ctx: page.kind == "single",
        "next": _page_next,
        "prev": _page_prev,
        "parent": lambda page, ctx: parent(page, ctx.site.pages),
        "children": lambda page, ctx: children(page, ctx.site.pages),
        "related": lambda page, ctx: related(page, ctx.site.pages),
    },
    Title="title",
    URL="url",
    RelPermalink="url",
    Permalink="permalink",
    Content="content",
    Summary="summary",
    Plain="plain",
    Description="description",
    Date="date",
    Tags="tags",
    Categories="categories",
    Section="section",
    Kind="kind",
    Type="type",
    Layout="layout",
    Draft="draft",
    Params="params",
    WordCount="word_count",
    ReadingTime="reading_time",
    IsHome="is_home",
    IsSection="is_section",
    IsPage="is_page",
    Next="next",
    Prev="prev",
    Parent="parent",
    Children="children",
    Related="related",
)

MENU_ITEM_CAPABILITIES = _table(
    {
        "name": _attr("name"),
        "url": _attr("url"),
        "weight": _attr("weight"),
        "external": _attr("external"),
    },
    Name="name",
    URL="url",
    Weight="weight",
    External="external",
)

BREADCRUMB_CAPABILITIES = _table(
    {
        "title": _attr("title"),
        "url": _attr("url"),
        "active": _attr("active"),
    },
    Title="title",
    URL="url",
    Active="active",
)

SECTION_NAV_CAPABILITIES = _table(
    {
        "prev": _attr("prev"),
        "next": _attr("next"),
        "has_prev": _attr("has_prev"),
        "has_next": _attr("has_next"),
    },
    Prev="prev",
    Next="next",
    HasPrev="has_prev",
    HasNext="has_next",
    **{"has_prev?": "has_prev", "has_next?": "has_next"},
)

BUILD_CONFIG_CAPABILITIES = _table(
    {
        "incremental": _attr("incremental"),
        "parallel": _attr("parallel"),
        "cache_dir": _attr("cache_dir"),
        "max_workers": _attr("max_workers"),
    },
    Incremental="incremental",
    Parallel="parallel",
    CacheDir="cache_dir",
    MaxWorkers="max_workers",
)

TIMESTAMP_CAPABILITIES = _table(
    {
        "year": _attr("year"),
        "month": _attr("month"),
        "day": _attr("day"),
        "hour": lambda value, ctx: getattr(value, "hour", 0),
        "minute": lambda value, ctx: getattr(value, "minute", 0),
        "weekday": lambda value, ctx: value.strftime("%A"),
        "month_name": lambda value, ctx: value.strftime("%B"),
        "formatted": lambda value, ctx: value.strftime("%B %d, %Y"),
        "iso8601": lambda value, ctx: value.isoformat(),
        "unix": lambda value, ctx: int(
            (value if isinstance(value, datetime) else datetime(value.year, value.month, value.day)).timestamp()
        ),
    },
    Year="year",
    Month="month",
    Day="day",
    Hour="hour",
    Minute="minute",
    Weekday="weekday",
    MonthName="month_name",
    Unix="unix",
)

SEQUENCE_CAPABILITIES = _table(
    {
        "size": lambda seq, ctx: len(seq),
        "first": lambda seq, ctx: seq[0] if len(seq) else None,
        "last": lambda seq, ctx: seq[-1] if len(seq) else None,
        "empty": lambda seq, ctx: len(seq) == 0,
        "reverse": lambda seq, ctx: list(reversed(seq)),
        "uniq": lambda seq, ctx: filters.uniq(seq),
        "sample": lambda seq, ctx: filters.sample(seq),
        "shuffle": lambda seq, ctx: filters.shuffle(seq),
        "compact": lambda seq, ctx: filters.compact(seq),
        "any?": lambda seq, ctx: filters.any_(seq),
        "all?": lambda seq, ctx: filters.all_(seq),
        "none?": lambda seq, ctx: filters.none_(seq),
        "one?": lambda seq, ctx: filters.one_(seq),
    },
    len="size",
    length="size",
    Len="size",
    Size="size",
    First="first",
    Last="last",
    Empty="empty",
    Reverse="reverse",
    Uniq="uniq",
    Sample="sample",
    Shuffle="shuffle",
    Compact="compact",
    **{"empty?": "empty"},
)

PAGE_COLLECTION_CAPABILITIES = _table(
    {
        **SEQUENCE_CAPABILITIES,
        "sorted": lambda pages, ctx: pages.sorted(),
        "by_date": lambda pages, ctx: pages.sorted(),
        "regular": lambda pages, ctx: pages.regular(),
        "published": lambda pages, ctx: pages.published(),
        "latest": lambda pages, ctx: pages.latest(),
    },
    ByDate="by_date",
)

CAPABILITIES: Mapping[type, CapabilityTable] = MappingProxyType(
    {
        Site: SITE_CAPABILITIES,
        Page: PAGE_CAPABILITIES,
        MenuItem: MENU_ITEM_CAPABILITIES,
        BreadcrumbItem: BREADCRUMB_CAPABILITIES,
        SectionNavigation: SECTION_NAV_CAPABILITIES,
        BuildConfig: BUILD_CONFIG_CAPABILITIES,
        PageCollection: PAGE_COLLECTION_CAPABILITIES,
        datetime: TIMESTAMP_CAPABILITIES,
        date: TIMESTAMP_CAPABILITIES,
    }
)


def lookup_method(value: Any, method: str) -> Accessor | None:
    """Find the accessor answering ``method`` on ``value``.

    The value's own class and its bases are consulted first, so subclasses
    of registered types inherit their table. Other list-like values use the
    sequence table. Strings, numbers, mappings and None have no methods.

    Args:
        value: The value a dotted path has reached.
        method: Method name from the template.

    Returns:
        Accessor callable, or None when the method is not allowed.
    """
    for cls in type(value).__mro__:
        table = CAPABILITIES.get(cls)
        if table is not None:
            return table.get(method)
    if is_sequence(value):
        return SEQUENCE_CAPABILITIES.get(method)
    return None


def method_names(value_type: type) -> list[str]:
    """List the method names templates may call on ``value_type``."""
    for cls in value_type.__mro__:
        table = CAPABILITIES.get(cls)
        if table is not None:
            return sorted(table)
    return []
