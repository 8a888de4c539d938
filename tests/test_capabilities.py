from datetime import date, datetime

import pytest

from glyph import __version__
from glyph.capabilities import CAPABILITIES, PAGE_CAPABILITIES, lookup_method, method_names
from glyph.collections import PageCollection
from glyph.content import BuildConfig, Page, Site
from glyph.context import Context
from glyph.navigation import MenuItem, SectionNavigation


def access(value, method, site=None):
    accessor = lookup_method(value, method)
    assert accessor is not None, method
    return accessor(value, Context.create(site))


def test_snake_and_camel_case_names_share_accessors():
    page = Page(title="Hello", url="/hello/")
    assert access(page, "title") == access(page, "Title") == "Hello"
    assert access(page, "RelPermalink") == "/hello/"
    site = Site(title="Blog", base_url="https://example.com")
    assert access(site, "base_url") == access(site, "BaseURL") == "https://example.com"
    assert access(site, "generator") == f"Glyph {__version__}"


def test_unlisted_methods_are_unavailable():
    page = Page(title="Hello")
    assert lookup_method(page, "__class__") is None
    assert lookup_method(page, "file_path") is None
    assert lookup_method("text", "upper") is None
    assert lookup_method(42, "real") is None
    assert lookup_method({"a": 1}, "items") is None
    assert lookup_method(None, "title") is None


def test_page_navigation_accessors_use_the_site():
    newer = Page(title="Newer", section="posts", date=datetime(2024, 2, 1))
    older = Page(title="Older", section="posts", date=datetime(2024, 1, 1))
    index = Page(title="Posts", section="posts", kind="section", url="/posts/")
    site = Site(base_url="https://example.com", pages=[index, newer, older])
    assert access(older, "prev", site) is newer
    assert access(newer, "next", site) is older
    assert access(newer, "parent", site) is index
    assert access(index, "children", site) == [newer, older]
    assert access(newer, "permalink", site) == "https://example.com/"


def test_sequence_and_collection_tables():
    items = ["a", "b"]
    assert access(items, "size") == 2
    assert access(items, "first") == "a"
    assert access(items, "last") == "b"
    assert access(items, "empty?") is False
    assert access(items, "reverse") == ["b", "a"]

    pages = PageCollection(
        [Page(title="Old", date=datetime(2023, 1, 1)), Page(title="New", date=datetime(2024, 1, 1))]
    )
    assert [p.title for p in access(pages, "by_date")] == ["New", "Old"]
    assert access(pages, "len") == 2


def test_sequence_methods_shared_with_filters():
    assert access(["a", "b", "a"], "uniq") == ["a", "b"]
    assert access(["a", None, ""], "compact") == ["a"]
    assert access(["a", "b"], "all?") is True
    assert access([None, "x"], "any?") is True
    assert access([None, "x"], "all?") is False
    assert access([None], "none?") is True
    assert access(["x"], "one?") is True
    assert access(["x", "y"], "one?") is False
    assert len(access([1, 2, 3], "sample")) == 1
    assert sorted(access([1, 2, 3], "Shuffle")) == [1, 2, 3]

    pages = PageCollection([Page(title="A"), Page(title="B")])
    assert access(pages, "any?") is True
    assert [p.title for p in access(pages, "compact")] == ["A", "B"]


def test_other_tables():
    assert access(MenuItem(name="Docs", url="/docs/"), "URL") == "/docs/"
    assert access(SectionNavigation(), "has_next") is False
    newer, older = Page(title="Newer"), Page(title="Older")
    assert access(SectionNavigation(prev=newer), "has_prev?") is True
    assert access(SectionNavigation(prev=newer), "has_next?") is False
    assert access(SectionNavigation(next=older), "has_next?") is True
    assert access(BuildConfig(), "max_workers") == 4
    moment = datetime(2024, 3, 9, 14, 5)
    assert access(moment, "year") == 2024
    assert access(moment, "month_name") == "March"
    assert access(moment, "weekday") == "Saturday"
    assert access(date(2024, 3, 9), "hour") == 0


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        CAPABILITIES[str] = PAGE_CAPABILITIES
    with pytest.raises(TypeError):
        PAGE_CAPABILITIES["file_path"] = lambda page, ctx: page.file_path


def test_method_names():
    names = method_names(MenuItem)
    assert "name" in names and "URL" in names
    assert method_names(str) == []
