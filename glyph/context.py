"""Binding context for Glyph renders.

A render resolves root names (``site``, ``page``, ``title``, loop variables)
through a chain of scopes. Loop iterations push a scope on top of the
enclosing one; the bottom scope holds the page and site bindings, computed
lazily so a template only pays for the navigation values it uses.

Key classes:
- LazyScope: Read-only mapping whose values are computed on first access.
- Context: The scope chain plus the site/page a render is about.
"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Callable, Iterator, Mapping
from datetime import datetime
from typing import Any

from .content import Page, Site
from .navigation import breadcrumbs, related, section_navigation

RECENT_COUNT = 5
RELATED_COUNT = 5

_MISSING = object()


class LazyScope(Mapping[str, Any]):
    """Mapping of names to values produced by zero-argument factories.

    Each factory runs at most once per scope.
    """

    def __init__(self, factories: Mapping[str, Callable[[], Any]]):
        self._factories = dict(factories)
        self._values: dict[str, Any] = {}

    def __getitem__(self, name: str) -> Any:
        if name not in self._values:
            self._values[name] = self._factories[name]()
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)


def _as_count(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _tag_cloud(site: Site) -> dict[str, int]:
    counts: dict[str, int] = {}
    for page in site.regular_pages:
        for tag in page.tags:
            counts[tag] = counts.get(tag, 0) + 1
    return dict(sorted(counts.items()))


def _archive_by_year(site: Site) -> dict[str, list[Page]]:
    archive: dict[str, list[Page]] = {}
    for page in site.regular_pages.sorted():
        if page.date:
            archive.setdefault(str(page.date.year), []).append(page)
    return archive


def root_bindings(site: Site, page: Page | None, now: datetime) -> dict[str, Callable[[], Any]]:
    """Build the factories behind every root name a template can use.

    Args:
        site: Site being rendered.
        page: Page being rendered, or None for site-level templates.
        now: Render timestamp bound to ``now``.

    Returns:
        Dictionary of root name to zero-argument factory.
    """

    def from_page(name: str, default: Any = None) -> Callable[[], Any]:
        return lambda: getattr(page, name) if page is not None else default

    return {
        "site": lambda: site,
        "page": lambda: page,
        ".": lambda: page,
        "now": lambda: now,
        "title": lambda: page.title if page is not None else site.title,
        "description": lambda: (page.description if page is not None else "") or site.description,
        "content": from_page("content", ""),
        "summary": from_page("summary", ""),
        "url": from_page("url", "/"),
        "permalink": lambda: site.permalink(page) if page is not None else site.base_url,
        "date": from_page("date"),
        "date_formatted": from_page("date_formatted", ""),
        "tags": from_page("tags", []),
        "categories": from_page("categories", []),
        "reading_time": from_page("reading_time", 0),
        "word_count": from_page("word_count", 0),
        "params": lambda: page.params if page is not None else site.params,
        "data": lambda: site.data,
        "baseURL": lambda: site.base_url,
        "site_menu": lambda: site.menus.get("main", []),
        "breadcrumbs": lambda: breadcrumbs(page, site.pages, site.title) if page is not None else [],
        "section_nav": lambda: section_navigation(page, site.pages) if page is not None else None,
        "related_content": lambda: related(page, site.pages, RELATED_COUNT) if page is not None else [],
        "recent_posts": lambda: site.pages.latest(RECENT_COUNT),
        "posts": lambda: site.regular_pages.sorted(),
        "pages": lambda: site.pages,
        "tag_cloud": lambda: _tag_cloud(site),
        "archive_by_year": lambda: _archive_by_year(site),
    }


def root_queries(site: Site, page: Page | None) -> dict[str, Callable[..., Any]]:
    """Build the root-level query calls such as ``recent_posts(3)``.

    These return content objects, so they live beside the root bindings
    rather than in the primitive-only function registry.
    """

    def recent_posts(count: Any = RECENT_COUNT) -> Any:
        return site.pages.latest(_as_count(count, RECENT_COUNT))

    def related_content(count: Any = RELATED_COUNT) -> Any:
        if page is None:
            return []
        return related(page, site.pages, _as_count(count, RELATED_COUNT))

    def content_by_section(section: Any = "") -> Any:
        return site.regular_pages.in_section(str(section)).sorted()

    def content_by_tag(tag: Any = "") -> Any:
        return site.regular_pages.with_tag(str(tag)).sorted()

    return {
        "recent_posts": recent_posts,
        "related_content": related_content,
        "content_by_section": content_by_section,
        "content_by_tag": content_by_tag,
    }


class Context:
    """Scope chain for one render call.

    Attributes:
        scopes: ChainMap of scopes, innermost first.
        site: Site being rendered.
        page: Page being rendered, if any.
        queries: Root-level query calls by name.
    """

    def __init__(
        self,
        scopes: ChainMap,
        site: Site,
        page: Page | None = None,
        queries: Mapping[str, Callable[..., Any]] | None = None,
    ):
        self.scopes = scopes
        self.site = site
        self.page = page
        self.queries = dict(queries or {})

    @classmethod
    def create(
        cls,
        site: Site | None = None,
        page: Page | None = None,
        extra: Mapping[str, Any] | None = None,
        now: datetime | None = None,
    ) -> Context:
        """Create the root context for rendering ``page`` within ``site``.

        Args:
            site: Site model; an empty Site when omitted.
            page: Page being rendered, if any.
            extra: Additional root bindings. They shadow the built-in names.
            now: Timestamp bound to ``now``; the current time when omitted.

        Returns:
            A new Context.
        """
        site = site if site is not None else Site()
        root = LazyScope(root_bindings(site, page, now or datetime.now()))
        scopes = ChainMap(dict(extra or {}), root)
        return cls(scopes, site, page, root_queries(site, page))

    def child(self, bindings: Mapping[str, Any]) -> Context:
        """Return a context with ``bindings`` layered over this one."""
        return Context(self.scopes.new_child(dict(bindings)), self.site, self.page, self.queries)

    def lookup(self, name: str, default: Any = None) -> Any:
        """Resolve a root name, falling back from ``$name`` to ``name``."""
        value = self.scopes.get(name, _MISSING)
        if value is _MISSING and name.startswith("$") and len(name) > 1:
            value = self.scopes.get(name[1:], _MISSING)
        return default if value is _MISSING else value

    def __contains__(self, name: str) -> bool:
        if name in self.scopes:
            return True
        return name.startswith("$") and name[1:] in self.scopes
