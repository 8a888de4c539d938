"""Layout resolution for Glyph.

Layouts are found by logical name. For a name ``N``, page kind ``K`` and
output format ``F`` the candidates are, most specific first::

    K/N.F.html, K/N.html, _default/N.F.html, _default/N.html,
    N.F.html, N.html, N

Key classes:
- LayoutNotFoundError: No candidate exists for a name.
- FileLayoutResolver: Looks candidates up in site and theme directories.
- DictLayoutResolver: Looks candidates up in an in-memory mapping.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DIR = "_default"


class LayoutNotFoundError(LookupError):
    """No layout answers to a logical name.

    Attributes:
        name: The logical name that was looked up.
        searched: Candidates tried, in order.
    """

    def __init__(self, name: str, searched: list[str]):
        self.name = name
        self.searched = searched
        super().__init__(f"No layout found for {name!r} (tried: {', '.join(searched)})")


def layout_candidates(name: str, kind: str | None = None, output_format: str = "html") -> list[str]:
    """List the relative template names tried for ``name``, most specific first.

    Examples:
        >>> layout_candidates("single", "post")[:2]
        ['post/single.html.html', 'post/single.html']
    """
    candidates: list[str] = []
    if kind:
        candidates += [f"{kind}/{name}.{output_format}.html", f"{kind}/{name}.html"]
    candidates += [
        f"{DEFAULT_DIR}/{name}.{output_format}.html",
        f"{DEFAULT_DIR}/{name}.html",
        f"{name}.{output_format}.html",
        f"{name}.html",
        name,
    ]
    return list(dict.fromkeys(candidates))


class FileLayoutResolver:
    """Resolves layouts from a site layouts directory and an optional theme.

    For each candidate the site directory is checked before the theme, so
    sites override theme layouts of the same name.

    Attributes:
        directories: Directories searched, site first.
    """

    def __init__(self, layouts_dir: Path, theme_layouts_dir: Path | None = None):
        self.directories = [Path(layouts_dir)]
        if theme_layouts_dir is not None:
            self.directories.append(Path(theme_layouts_dir))

    def find(self, name: str, kind: str | None = None, output_format: str = "html") -> Path:
        """Return the path of the winning layout file.

        Raises:
            LayoutNotFoundError: If no candidate file exists.
        """
        searched: list[str] = []
        for candidate in layout_candidates(name, kind, output_format):
            for directory in self.directories:
                path = directory / candidate
                searched.append(str(path))
                if path.is_file():
                    logger.debug("Layout %r resolved to %s", name, path)
                    return path
        logger.debug("Layout %r not found; tried %s", name, searched)
        raise LayoutNotFoundError(name, searched)

    def resolve(self, name: str, kind: str | None = None, output_format: str = "html") -> str:
        return self.find(name, kind, output_format).read_text(encoding="utf-8")


class DictLayoutResolver:
    """Resolves layouts from a mapping of relative template names to text."""

    def __init__(self, layouts: Mapping[str, str] | None = None):
        self.layouts = dict(layouts or {})

    def resolve(self, name: str, kind: str | None = None, output_format: str = "html") -> str:
        candidates = layout_candidates(name, kind, output_format)
        for candidate in candidates:
            if candidate in self.layouts:
                return self.layouts[candidate]
        raise LayoutNotFoundError(name, candidates)
