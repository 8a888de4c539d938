from datetime import date, datetime

from glyph.content import Page
from glyph.navigation import MenuItem
from glyph.values import coerce_argument, format_value, is_opaque, is_truthy, representative


def test_format_value_primitives():
    assert format_value(None) == ""
    assert format_value("text") == "text"
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(42) == "42"
    assert format_value(2.5) == "2.5"
    assert format_value(datetime(2024, 1, 15, 10, 30)) == "2024-01-15"
    assert format_value(date(2024, 2, 1)) == "2024-02-01"


def test_format_value_collections_and_objects():
    assert format_value(["a", "b"]) == "a, b"
    assert format_value([]) == ""
    assert format_value([1, 2, 3]) == "3"
    assert format_value([Page(title="A"), MenuItem(name="Home", url="/")]) == "A, Home"
    assert format_value({"k": "v", "n": 1}) == "k: v, n: 1"
    assert format_value(Page(title="Solo")) == "Solo"
    assert format_value(object()) == ""


def test_is_truthy():
    for value in (None, False, 0, 0.0, "", [], (), {}):
        assert not is_truthy(value)
    for value in (True, 1, -1, "0", "false", [0], {"a": 1}, Page(title="")):
        assert is_truthy(value)


def test_representative_and_opacity():
    assert is_opaque(Page(title="A"))
    assert not is_opaque("text")
    assert not is_opaque([Page(title="A")])
    assert representative(Page(title="A")) == "A"
    assert representative(MenuItem(name="Docs", url="/docs/")) == "Docs"
    assert representative("text") is None


def test_coerce_argument():
    assert coerce_argument(None) == ""
    assert coerce_argument(3) == 3
    assert coerce_argument("x") == "x"
    assert coerce_argument(Page(title="A")) == "A"
    assert coerce_argument([Page(title="A"), Page(title="B")]) == "A,B"
    assert coerce_argument(["a", None, 2]) == ["a", "", 2]
    assert coerce_argument({"a": 1, "b": "two"}) == "a: 1,b: two"
