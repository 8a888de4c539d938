"""Content model for Glyph.

This module defines the objects templates see as ``page`` and ``site`` and
a small loader that turns a Markdown/HTML file with YAML frontmatter into a
Page.

Key classes:
- Page: Dataclass representing one piece of site content.
- Site: Dataclass representing the whole site and its configuration.
- BuildConfig: Build settings exposed to templates as ``site.build_config``.

Key functions:
- extract_frontmatter: Split YAML frontmatter from a document body.
- render_markdown: Convert Markdown to HTML with mistune.
- load_page: Build a Page from a file on disk.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

import mistune
import yaml

from .collections import PageCollection
from .html_utils import join_root_url, strip_tags
from .navigation import MenuItem
from .utils import (
    extract_date_from_name,
    reading_time,
    slugify,
    titleize,
    truncate_text,
    word_count,
)

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)
DATE_FORMAT_HUMAN = "%B %d, %Y"
SUMMARY_LENGTH = 200

_markdown = mistune.create_markdown(plugins=["strikethrough", "table", "url"])


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML frontmatter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (frontmatter dict, remaining content).
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1)) or {}
        if not isinstance(data, dict):
            return {}, text
        return data, text[match.end() :]
    except yaml.YAMLError:
        return {}, text


def render_markdown(text: str) -> str:
    """Render Markdown source to HTML."""
    return _markdown(text)


@dataclass
class Page:
    """Represents one piece of site content.

    Attributes:
        title: Human-readable title of the page.
        url: URL path for the page.
        content: Rendered HTML body.
        date: Publication date, if known.
        tags: Tag names.
        categories: Category names.
        section: Slash-separated section path ("" for the site root).
        kind: "home", "section" or "single".
        layout: Explicit layout name, empty to pick one from the kind.
        draft: Whether this is a draft page.
        description: Short description from frontmatter.
        excerpt: Explicit summary from frontmatter.
        params: Raw frontmatter.
        file_path: Source file, when loaded from disk.
    """

    title: str
    url: str = "/"
    content: str = ""
    date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    section: str = ""
    kind: str = "single"
    layout: str = ""
    draft: bool = False
    description: str = ""
    excerpt: str = ""
    params: dict[str, Any] = field(default_factory=dict)
    file_path: Path | None = None

    @property
    def plain(self) -> str:
        return " ".join(strip_tags(self.content).split())

    @property
    def summary(self) -> str:
        if self.excerpt:
            return self.excerpt
        return truncate_text(self.plain, SUMMARY_LENGTH)

    @property
    def word_count(self) -> int:
        return word_count(self.plain)

    @property
    def reading_time(self) -> int:
        return reading_time(self.plain)

    @property
    def date_formatted(self) -> str:
        return self.date.strftime(DATE_FORMAT_HUMAN) if self.date else ""

    @property
    def type(self) -> str:
        """Content type: the top-level section, or "page" at the root."""
        return self.section.split("/")[0] if self.section else "page"


@dataclass(frozen=True)
class BuildConfig:
    incremental: bool = True
    parallel: bool = True
    cache_dir: str = ".glyph-cache"
    max_workers: int = 4


@dataclass
class Site:
    """The whole site as templates see it.

    Attributes:
        title: Site title.
        base_url: Absolute base URL, used for permalinks.
        description: Site description.
        author: Site author.
        copyright: Copyright line.
        theme: Theme name.
        layouts_dir: Directory holding site layouts.
        params: Free-form parameters from configuration.
        data: Site data loaded from data/*.yaml.
        pages: Every page of the site.
        menus: Configured menus by name.
        build: Build settings.
        debug: Whether debug output is enabled.
    """

    title: str = ""
    base_url: str = ""
    description: str = ""
    author: str = ""
    copyright: str = ""
    theme: str = ""
    layouts_dir: str = "layouts"
    params: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    pages: PageCollection = field(default_factory=PageCollection)
    menus: dict[str, list[MenuItem]] = field(default_factory=dict)
    build: BuildConfig = field(default_factory=BuildConfig)
    debug: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pages, PageCollection):
            self.pages = PageCollection(self.pages)

    @property
    def regular_pages(self) -> PageCollection:
        return self.pages.regular()

    def permalink(self, page: Page) -> str:
        return join_root_url(self.base_url, page.url)


def _coerce_date(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d"):
            try:
                return datetime.strptime(value.strip(), fmt)
            except ValueError:
                continue
    return None


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []


def load_page(path: Path, content_dir: Path | None = None) -> Page:
    """Build a Page from a Markdown or HTML file.

    The section comes from the folder relative to ``content_dir``; the kind
    from the filename (``index`` at the root is home, ``_index`` is a
    section page, anything else is single).

    Args:
        path: Source file.
        content_dir: Root of the content tree, defaults to the file's folder.

    Returns:
        Page built from frontmatter and body.
    """
    raw = path.read_text(encoding="utf-8")
    frontmatter, body = extract_frontmatter(raw)
    html = render_markdown(body) if path.suffix.lower() == ".md" else body

    root = content_dir or path.parent
    rel = path.relative_to(root)
    section = rel.parent.as_posix() if rel.parent != Path(".") else ""
    stem = path.stem
    if stem == "_index":
        kind = "section"
    elif stem == "index" and not section:
        kind = "home"
    else:
        kind = "single"

    if kind == "home":
        url = "/"
    elif kind == "section":
        url = f"/{section}/"
    else:
        slug = slugify(str(frontmatter.get("slug") or stem))
        if extract_date_from_name(stem) and not frontmatter.get("slug"):
            slug = slugify("-".join(stem.split("-")[3:])) or slug
        url = "/".join(part for part in (section, slug or "index") if part)
        url = f"/{url}/"

    return Page(
        title=str(frontmatter.get("title") or titleize(path.name)),
        url=url,
        content=html,
        date=_coerce_date(frontmatter.get("date")) or extract_date_from_name(stem),
        tags=_string_list(frontmatter.get("tags")),
        categories=_string_list(frontmatter.get("categories")),
        section=section,
        kind=kind,
        layout=str(frontmatter.get("layout") or ""),
        draft=bool(frontmatter.get("draft", False)),
        description=str(frontmatter.get("description") or ""),
        excerpt=str(frontmatter.get("summary") or ""),
        params=frontmatter,
        file_path=path,
    )
