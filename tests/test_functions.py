import re
from datetime import datetime, timedelta

import pytest

from glyph import functions
from glyph.functions import FunctionArgumentError, FunctionRegistry, default_function_registry


def call(name, *args):
    return default_function_registry.call(name, list(args))


def test_registry_is_frozen_after_import():
    assert default_function_registry.frozen
    with pytest.raises(RuntimeError):
        default_function_registry.register("shout", lambda text: text.upper())
    assert "shout" not in default_function_registry


def test_registry_rejects_bad_arity():
    with pytest.raises(FunctionArgumentError):
        call("upper", "a", "b")
    with pytest.raises(FunctionArgumentError):
        call("add", 1)


def test_custom_registry_decorator():
    registry = FunctionRegistry()

    @registry.register("double")
    def double(value):
        return value * 2

    assert registry.call("double", [4]) == 8
    assert registry.names() == ["double"]
    registry.freeze()
    with pytest.raises(RuntimeError):
        registry.register("triple", lambda value: value * 3)


def test_string_functions():
    assert call("upper", "hi") == "HI"
    assert call("title", "hello big world") == "Hello Big World"
    assert call("truncate", "abcdefghij", 5) == "ab..."
    assert call("truncate", "short", 10) == "short"
    assert call("truncatewords", "one two three four", 2) == "one two..."
    assert call("slugify", "Hello, World!") == "hello-world"
    assert call("camelize", "hello_world") == "HelloWorld"
    assert call("underscore", "HelloWorld") == "hello_world"
    assert call("dasherize", "HelloWorld") == "hello-world"
    assert call("squeeze", "aaabbbc") == "abc"
    assert call("chomp", "line\n") == "line"
    assert call("chomp", "file.txt", ".txt") == "file"
    assert call("pluralize", "post", 2) == "posts"
    assert call("pluralize", "post", 1) == "post"
    assert call("repeat", "ab", 3) == "ababab"
    assert call("replace", "a-b-c", "-", "+") == "a+b+c"
    assert call("newline_to_br", "a\nb") == "a<br>b"
    assert call("escape", "<b>") == "&lt;b&gt;"
    assert call("unescape_html", "&lt;b&gt;") == "<b>"


def test_logic_functions():
    assert call("eq", 1, "1") is True
    assert call("ne", "a", "b") is True
    assert call("gt", "10", "9") is True
    assert call("lte", 2, 2) is True
    assert call("and", True, "false") is False
    assert call("or", "", "yes") is True
    assert call("not", "") is True
    assert call("contains", ["a", "b"], "b") is True
    assert call("contains", "hello", "ell") is True
    assert call("in_range", 5, 1, 10) is True


def test_math_functions():
    assert call("add", 2, 3) == 5
    assert call("add", "1.5", 1) == 2.5
    assert call("divide", 6, 2) == 3
    assert call("modulo", 7, 3) == 1
    assert call("round", 3.14159, 2) == 3.14
    assert call("ceil", 1.2) == 2
    assert call("sqrt", 16) == 4
    assert call("pow", 2, 10) == 1024
    assert call("min", 3, 1, 2) == 1
    assert call("sum", "1,2,3") == 6
    with pytest.raises(FunctionArgumentError):
        call("divide", 1, 0)
    with pytest.raises(FunctionArgumentError):
        call("add", "one", 2)


def test_collection_functions():
    assert call("len", ["a", "b"]) == 2
    assert call("len", "a,b,c") == 3
    assert call("uniq", "a,b,a") == "a,b"
    assert call("rotate", "a,b,c", 1) == "b,c,a"
    assert call("compact", ["a", "", " ", "b"]) == "a,b"
    assert call("index", "a,b,c", "b") == 1
    assert call("rindex", "a,b,a", "a") == 2
    assert call("index", "a,b", "z") == -1
    assert call("first", ["a", "b", "c"], 2) == "a,b"
    assert call("first", "one two three") == "one"
    assert call("last", "one two three", 2) == "two three"
    assert call("join", ["a", "b"], " / ") == "a / b"
    assert call("sort_by_length", "ccc,a,bb") == "a,bb,ccc"
    assert sorted(call("shuffle", "a,b,c").split(",")) == ["a", "b", "c"]


def test_time_functions():
    moment = datetime(2024, 1, 5, 8, 30, 0)
    assert call("date", moment) == "2024-01-05"
    assert call("date", moment, "%d/%m/%Y") == "05/01/2024"
    assert call("time", moment) == "08:30:00"
    assert call("datetime", moment) == "2024-01-05 08:30:00"
    assert re.match(r"^\d{4}-\d{2}-\d{2}$", call("date"))
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$", call("rfc3339"))
    assert isinstance(call("timestamp"), int)


def test_time_ago(monkeypatch):
    fixed = datetime(2024, 6, 1, 12, 0, 0)
    monkeypatch.setattr(functions, "_now", lambda: fixed)
    assert call("time_ago", fixed - timedelta(days=3)) == "3 days ago"
    assert call("time_ago", fixed - timedelta(days=1)) == "1 day ago"
    assert call("time_ago", fixed - timedelta(hours=2)) == "2 hours ago"
    assert call("time_ago", fixed - timedelta(days=400)) == "1 year ago"
    assert call("time_ago", fixed - timedelta(seconds=5)) == "Just now"
    assert call("time_ago", "2024-05-01") == "1 month ago"
    assert call("time_ago", "not a date") == "Invalid date"


def test_type_functions():
    assert call("string", 5) == "5"
    assert call("int", "42") == 42
    assert call("float", "1.5") == 1.5
    assert call("bool", "false") is False
    assert call("bool", "0") is False
    assert call("bool", "yes") is True
    assert call("array", "a", "b") == "a,b"
    assert call("size", ["a"]) == 1
    assert call("empty", "") is True
    assert call("blank", "   ") is True


def test_url_functions():
    assert call("relative_url", "about/", "https://example.com/blog/") == "/blog/about/"
    assert call("relative_url", "https://cdn.com/x.js", "https://example.com/") == "https://cdn.com/x.js"
    assert call("absolute_url", "/about", "https://example.com") == "https://example.com/about"
    assert call("url_encode", "a b/c") == "a%20b/c"
    assert call("url_decode", "a%20b") == "a b"
    assert call("url_host", "https://example.com:8080/x?q=1#top") == "example.com"
    assert call("url_path", "https://example.com/x/y") == "/x/y"
    assert call("url_query", "https://example.com/x?q=1") == "q=1"
    assert call("url_fragment", "https://example.com/x#top") == "top"
    assert call("is_absolute_url", "/x") is False
    assert call("url_join", "https://example.com/a/", "b") == "https://example.com/a/b"


def test_text_functions():
    assert call("word_count", "one two three") == 3
    assert call("reading_time", "word " * 400) == "2 min read"
    assert call("reading_time", "word") == "1 min read"
    assert "<strong>bold</strong>" in call("markdownify", "**bold**")
    assert call("strip_html", "<p>Hi <b>there</b></p>") == "Hi there"
