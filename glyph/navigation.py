"""Navigation helpers for Glyph.

This module builds the navigation values templates iterate over: menu
entries from configuration, breadcrumb trails, previous/next links inside a
section, and tag-based related content.

Key classes:
- MenuItem: One configured menu entry.
- BreadcrumbItem: One step of a breadcrumb trail.
- SectionNavigation: Previous/next neighbours of a page in its section.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .utils import humanize

if TYPE_CHECKING:
    from .content import Page

_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class MenuItem:
    """A configured menu entry.

    Attributes:
        name: Label shown to readers.
        url: Target URL.
        weight: Ordering weight, lower first.
        external: Whether the URL points off-site.
    """

    name: str
    url: str
    weight: int = 0
    external: bool = False


@dataclass(frozen=True)
class BreadcrumbItem:
    title: str
    url: str
    active: bool = False


@dataclass(frozen=True)
class SectionNavigation:
    """Neighbouring pages of a single page within its section."""

    prev: Page | None = None
    next: Page | None = None

    @property
    def has_prev(self) -> bool:
        return self.prev is not None

    @property
    def has_next(self) -> bool:
        return self.next is not None


def build_menu_item(entry: Any) -> MenuItem | None:
    """Build a MenuItem from one configuration entry.

    Args:
        entry: Mapping with ``name``, ``url`` and optional ``weight``.

    Returns:
        MenuItem, or None when the entry lacks a name or URL.
    """
    if not isinstance(entry, Mapping):
        return None
    name = entry.get("name")
    url = entry.get("url")
    if not name or not url:
        return None
    try:
        weight = int(entry.get("weight", 0) or 0)
    except (TypeError, ValueError):
        weight = 0
    url = str(url)
    return MenuItem(
        name=str(name),
        url=url,
        weight=weight,
        external=url.startswith(("http://", "https://", "//")),
    )


def build_menus(config: Mapping[str, Any] | None) -> dict[str, list[MenuItem]]:
    """Build every configured menu, each sorted by weight.

    Args:
        config: The ``menus`` section of the site configuration.

    Returns:
        Dictionary mapping menu name to its ordered entries.
    """
    menus: dict[str, list[MenuItem]] = {}
    if not isinstance(config, Mapping):
        return menus
    for name, entries in config.items():
        if not isinstance(entries, list):
            continue
        items = [item for item in map(build_menu_item, entries) if item]
        menus[str(name)] = sorted(items, key=lambda item: item.weight)
    return menus


def breadcrumbs(page: Page, pages: Iterable[Page], home_title: str) -> list[BreadcrumbItem]:
    """Build the breadcrumb trail from the site root to ``page``.

    The home entry comes first, then one entry per section ancestor (titled
    after its section index page when one exists), then the page itself.
    The final entry is the active one.

    Args:
        page: Page being rendered.
        pages: All site pages, used to find section index titles.
        home_title: Label for the root entry.

    Returns:
        Ordered list of BreadcrumbItem.
    """
    pages = list(pages)
    trail = [BreadcrumbItem(title=home_title or "Home", url="/", active=page.kind == "home")]
    if page.kind == "home":
        return trail

    parts = [part for part in page.section.split("/") if part]
    for index, part in enumerate(parts):
        ancestor = "/".join(parts[: index + 1])
        index_page = _section_index(ancestor, pages)
        title = index_page.title if index_page else humanize(part)
        trail.append(BreadcrumbItem(title=title, url=f"/{ancestor}/"))

    if page.kind == "section":
        last = trail.pop()
        trail.append(BreadcrumbItem(title=last.title, url=last.url, active=True))
    else:
        trail.append(BreadcrumbItem(title=page.title, url=page.url, active=True))
    return trail


def section_pages(section: str, pages: Iterable[Page]) -> list[Page]:
    """Return single pages of ``section``, newest first."""
    members = [p for p in pages if p.section == section and p.kind == "single"]
    return sorted(members, key=lambda p: p.date or _EPOCH, reverse=True)


def section_navigation(page: Page, pages: Iterable[Page]) -> SectionNavigation:
    """Find the newer (prev) and older (next) neighbours of ``page``.

    Only single pages take part; any other kind gets an empty navigation.
    """
    if page.kind != "single":
        return SectionNavigation()
    ordered = section_pages(page.section, pages)
    try:
        position = next(i for i, p in enumerate(ordered) if p is page)
    except StopIteration:
        return SectionNavigation()
    prev_page = ordered[position - 1] if position > 0 else None
    next_page = ordered[position + 1] if position + 1 < len(ordered) else None
    return SectionNavigation(prev=prev_page, next=next_page)


def parent(page: Page, pages: Iterable[Page]) -> Page | None:
    """Return the section index page that owns ``page``, if any."""
    if page.kind == "section":
        parts = page.section.split("/")
        owner = "/".join(parts[:-1])
    else:
        owner = page.section
    if not owner and page.kind != "home":
        return next((p for p in pages if p.kind == "home"), None)
    return _section_index(owner, pages)


def children(page: Page, pages: Iterable[Page]) -> list[Page]:
    """Return the single pages directly under a section or home page."""
    if page.kind not in ("section", "home"):
        return []
    return section_pages(page.section, pages)


def related(page: Page, pages: Iterable[Page], count: int = 5) -> list[Page]:
    """Rank other pages by the number of tags shared with ``page``.

    Args:
        page: Reference page.
        pages: Candidate pages.
        count: Maximum number of results.

    Returns:
        Up to ``count`` pages sharing at least one tag, most overlap first,
        newest first among equals.
    """
    wanted = set(page.tags)
    if not wanted:
        return []
    scored = []
    for candidate in pages:
        if candidate is page or candidate.kind != "single":
            continue
        shared = len(wanted.intersection(candidate.tags))
        if shared:
            scored.append((shared, candidate.date or _EPOCH, candidate))
    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [candidate for _, _, candidate in scored[: max(count, 0)]]


def _section_index(section: str, pages: Iterable[Page]) -> Page | None:
    for candidate in pages:
        if candidate.kind == "section" and candidate.section == section:
            return candidate
    return None
