import logging

import pytest

from glyph.layouts import (
    DictLayoutResolver,
    FileLayoutResolver,
    LayoutNotFoundError,
    layout_candidates,
)
from glyph.protocols import LayoutResolver


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_candidates_most_specific_first():
    assert layout_candidates("single", "posts") == [
        "posts/single.html.html",
        "posts/single.html",
        "_default/single.html.html",
        "_default/single.html",
        "single.html.html",
        "single.html",
        "single",
    ]
    assert layout_candidates("feed", output_format="rss")[0] == "_default/feed.rss.html"


def test_file_resolver_prefers_specific_then_site(tmp_path):
    site = tmp_path / "layouts"
    theme = tmp_path / "themes" / "plain" / "layouts"
    write(site / "_default" / "single.html", "site default")
    write(theme / "posts" / "single.html", "theme posts")
    write(theme / "_default" / "list.html", "theme list")
    write(site / "_default" / "list.html", "site list")

    resolver = FileLayoutResolver(site, theme)
    assert resolver.resolve("single", "posts") == "theme posts"
    assert resolver.resolve("single", "docs") == "site default"
    assert resolver.resolve("list") == "site list"
    assert resolver.find("list") == site / "_default" / "list.html"


def test_file_resolver_raises_with_searched_paths(tmp_path, caplog):
    caplog.set_level(logging.DEBUG, logger="glyph.layouts")
    resolver = FileLayoutResolver(tmp_path / "layouts")
    with pytest.raises(LayoutNotFoundError) as exc_info:
        resolver.resolve("missing", "posts")
    error = exc_info.value
    assert error.name == "missing"
    assert len(error.searched) == 7
    assert "missing" in str(error)
    assert "Layout 'missing' not found" in caplog.text


def test_dict_resolver():
    resolver = DictLayoutResolver({"_default/list.html": "L", "partial": "P"})
    assert resolver.resolve("list", "posts") == "L"
    assert resolver.resolve("partial") == "P"
    with pytest.raises(LayoutNotFoundError):
        resolver.resolve("single")


def test_resolvers_satisfy_protocol(tmp_path):
    assert isinstance(FileLayoutResolver(tmp_path), LayoutResolver)
    assert isinstance(DictLayoutResolver(), LayoutResolver)
