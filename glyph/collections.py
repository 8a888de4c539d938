from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content import Page

_EPOCH = datetime(1970, 1, 1)


class PageCollection(Sequence["Page"]):
    """Lightweight helper for working with lists of Pages in templates and code."""

    def __init__(self, pages: Iterable[Page] = ()):
        self._pages = list(pages)
        # Stable sort cache for .sorted()/latest() to avoid recomputing repeatedly
        self._sorted_cache: PageCollection | None = None

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PageCollection(self._pages[item])
        return self._pages[item]

    def in_section(self, section: str) -> PageCollection:
        return PageCollection(p for p in self._pages if p.section == section)

    def with_tag(self, tag: str) -> PageCollection:
        return PageCollection(p for p in self._pages if tag in p.tags)

    def of_kind(self, kind: str) -> PageCollection:
        return PageCollection(p for p in self._pages if p.kind == kind)

    def regular(self) -> PageCollection:
        """Single pages only: no home, section or list pages."""
        return self.of_kind("single")

    def published(self) -> PageCollection:
        return PageCollection(p for p in self._pages if not p.draft)

    def sorted(self, reverse: bool = True) -> PageCollection:
        """Sort pages by date, then by title.

        Args:
            reverse: If True (default), newest first. If False, oldest first.

        Returns:
            A new PageCollection with sorted pages.
        """
        if self._sorted_cache is None or reverse is False:

            def sort_key(p: Page):
                return (p.date or _EPOCH, p.title.lower())

            sorted_pages = PageCollection(sorted(self._pages, key=sort_key, reverse=reverse))
            if reverse:
                self._sorted_cache = sorted_pages
            return sorted_pages
        return self._sorted_cache

    def latest(self, count: int = 5) -> PageCollection:
        return self.regular().sorted()[: max(count, 0)]

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PageCollection({len(self._pages)} pages)"
