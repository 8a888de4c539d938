from datetime import datetime
from pathlib import Path

from glyph.content import (
    BuildConfig,
    Page,
    Site,
    extract_frontmatter,
    load_page,
    render_markdown,
)
from glyph.collections import PageCollection


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_extract_frontmatter():
    data, body = extract_frontmatter("---\ntitle: Hello\ntags: [a, b]\n---\nBody")
    assert data == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "Body"
    assert extract_frontmatter("No frontmatter") == ({}, "No frontmatter")
    assert extract_frontmatter("---\n- just\n- a list\n---\nBody")[0] == {}
    assert extract_frontmatter("---\ntitle: [broken\n---\nBody")[0] == {}


def test_render_markdown():
    html = render_markdown("# Title\n\nSome ~~old~~ text")
    assert "<h1>Title</h1>" in html
    assert "<del>old</del>" in html


def test_load_dated_post(tmp_path):
    content = tmp_path / "content"
    path = write(
        content / "posts" / "2024-01-15-my-post.md",
        "---\ntags: python, web\ncategories: [tutorials]\ndescription: A post\n---\n# Heading\n\nBody text here",
    )
    page = load_page(path, content)
    assert page.title == "My Post"
    assert page.url == "/posts/my-post/"
    assert page.date == datetime(2024, 1, 15)
    assert page.section == "posts"
    assert page.kind == "single"
    assert page.type == "posts"
    assert page.tags == ["python", "web"]
    assert page.categories == ["tutorials"]
    assert page.description == "A post"
    assert "<h1>Heading</h1>" in page.content
    assert page.file_path == path
    assert page.params["description"] == "A post"


def test_load_page_kinds_and_frontmatter_overrides(tmp_path):
    content = tmp_path / "content"
    home = load_page(write(content / "index.md", "Welcome"), content)
    assert home.kind == "home"
    assert home.url == "/"
    assert home.type == "page"

    section = load_page(write(content / "docs" / "_index.md", "---\ntitle: Docs\n---\n"), content)
    assert section.kind == "section"
    assert section.url == "/docs/"

    custom = load_page(
        write(
            content / "about.html",
            "---\ntitle: About Us\nslug: team\nlayout: wide\ndraft: true\ndate: 2023-06-01\nsummary: Short\n---\n<p>Hi</p>",
        ),
        content,
    )
    assert custom.title == "About Us"
    assert custom.url == "/team/"
    assert custom.layout == "wide"
    assert custom.draft is True
    assert custom.date == datetime(2023, 6, 1)
    assert custom.content == "<p>Hi</p>"
    assert custom.summary == "Short"


def test_page_derived_properties():
    page = Page(title="T", content="<p>" + "word " * 300 + "</p>", date=datetime(2024, 3, 5))
    assert page.plain.startswith("word word")
    assert page.word_count == 300
    assert page.reading_time == 2
    assert page.date_formatted == "March 05, 2024"
    assert len(page.summary) == 200
    assert page.summary.endswith("...")
    assert Page(title="Empty").reading_time == 0
    assert Page(title="Empty").date_formatted == ""


def test_site_model():
    page = Page(title="P", url="/p/")
    site = Site(base_url="https://example.com/", pages=[page, Page(title="Home", kind="home")])
    assert isinstance(site.pages, PageCollection)
    assert [p.title for p in site.regular_pages] == ["P"]
    assert site.permalink(page) == "https://example.com/p/"
    assert Site().permalink(page) == "/p/"
    assert site.build == BuildConfig()
