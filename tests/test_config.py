from pathlib import Path

from glyph.config import (
    DEFAULT_CONFIG,
    build_site_model,
    layout_resolver_for,
    load_config,
    load_data,
    load_pages,
    load_site,
)
from glyph.content import BuildConfig


def write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_load_config_defaults_and_merge(tmp_path):
    assert load_config(tmp_path) == DEFAULT_CONFIG

    write(tmp_path / "glyph.yaml", "title: Blog\nbuild:\n  max_workers: 8\n")
    config = load_config(tmp_path)
    assert config["title"] == "Blog"
    assert config["build"]["max_workers"] == 8
    assert config["build"]["incremental"] is True
    assert DEFAULT_CONFIG["build"]["max_workers"] == 4


def test_load_config_ignores_non_mapping(tmp_path):
    write(tmp_path / "glyph.yaml", "- just\n- a list\n")
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_load_data(tmp_path):
    assert load_data(tmp_path) == {}
    write(tmp_path / "data" / "site.yaml", "tagline: Hello\n")
    write(tmp_path / "data" / "authors.yaml", "ann:\n  name: Ann\n")
    write(tmp_path / "data" / "ignored.yaml", "- not a mapping\n")
    data = load_data(tmp_path)
    assert data == {"tagline": "Hello", "authors": {"ann": {"name": "Ann"}}}


def test_build_site_model():
    config = dict(
        DEFAULT_CONFIG,
        title="Blog",
        base_url="https://example.com",
        params="not a mapping",
        menus={"main": [{"name": "Home", "url": "/"}]},
        build={"parallel": False, "max_workers": "2"},
        debug=True,
    )
    site = build_site_model(config, {"tagline": "Hi"})
    assert site.title == "Blog"
    assert site.params == {}
    assert site.data == {"tagline": "Hi"}
    assert site.menus["main"][0].name == "Home"
    assert site.build == BuildConfig(parallel=False, max_workers=2)
    assert site.debug is True
    assert len(site.pages) == 0


def test_load_pages_skips_drafts(tmp_path):
    content = tmp_path / "content"
    write(content / "posts" / "a.md", "A")
    write(content / "posts" / "b.md", "---\ndraft: true\n---\nB")
    write(content / "notes.txt", "ignored")
    assert [p.title for p in load_pages(content)] == ["A"]
    assert [p.title for p in load_pages(content, include_drafts=True)] == ["A", "B"]
    assert load_pages(tmp_path / "missing") == []


def test_load_site_and_layout_resolver(tmp_path):
    write(tmp_path / "glyph.yaml", "title: Blog\ntheme: plain\ncontent_dir: pages\n")
    write(tmp_path / "pages" / "about.md", "About")
    write(tmp_path / "themes" / "plain" / "layouts" / "_default" / "single.html", "theme")
    config, site = load_site(tmp_path)
    assert site.title == "Blog"
    assert [p.url for p in site.pages] == ["/about/"]

    resolver = layout_resolver_for(tmp_path, config)
    assert resolver.directories == [tmp_path / "layouts", tmp_path / "themes" / "plain" / "layouts"]
    assert resolver.resolve("single") == "theme"
