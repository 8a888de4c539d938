"""Project configuration for Glyph.

This module loads a Glyph project from disk: ``glyph.yaml`` for settings,
``data/*.yaml`` for site data and the content directory for pages, and
assembles them into the Site model templates see.

Key functions:
- load_config: Loads site configuration from glyph.yaml.
- load_data: Loads site data from YAML files in the data directory.
- load_pages: Loads every page of the content directory.
- build_site_model: Builds the Site object from configuration, data and pages.
- layout_resolver_for: Builds the file layout resolver for a project.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from .content import BuildConfig, Page, Site, load_page
from .layouts import FileLayoutResolver
from .navigation import build_menus

CONFIG_FILE = "glyph.yaml"
CONTENT_SUFFIXES = (".md", ".html")

DEFAULT_CONFIG: dict[str, Any] = {
    "title": "",
    "base_url": "",
    "description": "",
    "author": "",
    "copyright": "",
    "theme": "",
    "layouts_dir": "layouts",
    "theme_dir": "themes",
    "content_dir": "content",
    "params": {},
    "menus": {},
    "build": {
        "incremental": True,
        "parallel": True,
        "cache_dir": ".glyph-cache",
        "max_workers": 4,
    },
}


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from glyph.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = project_root / CONFIG_FILE
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            build = loaded.pop("build", None)
            config.update(loaded)
            if isinstance(build, dict):
                config["build"].update(build)
    return config


def load_data(project_root: Path) -> dict[str, Any]:
    """Load site data from YAML files in the data directory.

    ``data/site.yaml`` merges into the top level; every other file is
    stored under its stem.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing merged data from all YAML files.
    """
    data_dir = project_root / "data"
    data: dict[str, Any] = {}
    if not data_dir.exists():
        return data
    for path in sorted(data_dir.glob("*.yaml")):
        with open(path, encoding="utf-8") as f:
            payload = yaml.safe_load(f) or {}
        if not isinstance(payload, dict):
            continue
        if path.name == "site.yaml":
            data.update(payload)
        else:
            data[path.stem] = payload
    return data


def load_pages(content_dir: Path, include_drafts: bool = False) -> list[Page]:
    """Load every Markdown and HTML page under ``content_dir``."""
    if not content_dir.exists():
        return []
    pages = []
    for path in sorted(content_dir.rglob("*")):
        if path.is_file() and path.suffix.lower() in CONTENT_SUFFIXES:
            page = load_page(path, content_dir)
            if include_drafts or not page.draft:
                pages.append(page)
    return pages


def _build_config(settings: Any) -> BuildConfig:
    if not isinstance(settings, dict):
        return BuildConfig()
    defaults = DEFAULT_CONFIG["build"]
    return BuildConfig(
        incremental=bool(settings.get("incremental", defaults["incremental"])),
        parallel=bool(settings.get("parallel", defaults["parallel"])),
        cache_dir=str(settings.get("cache_dir", defaults["cache_dir"])),
        max_workers=int(settings.get("max_workers", defaults["max_workers"])),
    )


def build_site_model(
    config: dict[str, Any],
    data: dict[str, Any] | None = None,
    pages: Iterable[Page] = (),
) -> Site:
    """Build the Site object templates see as ``site``.

    Args:
        config: Configuration as returned by load_config.
        data: Site data as returned by load_data.
        pages: Every page of the site.

    Returns:
        The Site model.
    """
    params = config.get("params")
    return Site(
        title=str(config.get("title") or ""),
        base_url=str(config.get("base_url") or ""),
        description=str(config.get("description") or ""),
        author=str(config.get("author") or ""),
        copyright=str(config.get("copyright") or ""),
        theme=str(config.get("theme") or ""),
        layouts_dir=str(config.get("layouts_dir") or "layouts"),
        params=params if isinstance(params, dict) else {},
        data=dict(data or {}),
        pages=pages,
        menus=build_menus(config.get("menus")),
        build=_build_config(config.get("build")),
        debug=bool(config.get("debug", False)),
    )


def layout_resolver_for(project_root: Path, config: dict[str, Any]) -> FileLayoutResolver:
    """Build the layout resolver for a project: site layouts, then the theme's."""
    layouts_dir = project_root / str(config.get("layouts_dir") or "layouts")
    theme = config.get("theme")
    theme_layouts = None
    if theme:
        theme_layouts = project_root / str(config.get("theme_dir") or "themes") / str(theme) / "layouts"
    return FileLayoutResolver(layouts_dir, theme_layouts)


def load_site(project_root: Path, include_drafts: bool = False) -> tuple[dict[str, Any], Site]:
    """Load a whole project: configuration plus the Site built from it."""
    config = load_config(project_root)
    pages = load_pages(project_root / str(config.get("content_dir") or "content"), include_drafts)
    return config, build_site_model(config, load_data(project_root), pages)
