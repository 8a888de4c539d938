from pathlib import Path

from click.testing import CliRunner

from glyph import __version__
from glyph.cli import cli


def make_project(root: Path) -> Path:
    files = {
        "glyph.yaml": "title: Blog\nbase_url: https://example.com\n",
        "layouts/_default/single.html": '{{ extends "base" }}{{ block "main" }}<h1>{{ title }}</h1>{{ content }}{{ endblock }}',
        "layouts/base.html": "<title>{{ site.title }}</title>{{ block \"main\" }}{{ endblock }}",
        "layouts/loop.html": "{{ extends \"base\" }}{{ block \"main\" }}{{ for p in posts }}[{{ p.title }}]{{ endfor }}{{ endblock }}",
        "layouts/cycle.html": '{{ extends "cycle" }}',
        "content/posts/2024-01-15-hello.md": "---\ntitle: Hello\n---\nHi there",
        "content/posts/2024-02-01-second.md": "---\ntitle: Second\n---\nMore",
    }
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def test_cli_page_renders_with_layout(tmp_path):
    project = make_project(tmp_path / "site")
    runner = CliRunner()
    source = project / "content" / "posts" / "2024-01-15-hello.md"
    result = runner.invoke(cli, ["page", str(source), "--project", str(project)])
    assert result.exit_code == 0, result.output
    assert result.output.startswith("<title>Blog</title><h1>Hello</h1>")
    assert "<p>Hi there</p>" in result.output

    out = tmp_path / "out" / "hello.html"
    result = runner.invoke(cli, ["page", str(source), "--project", str(project), "-o", str(out)])
    assert result.exit_code == 0
    assert "Wrote" in result.output
    assert "<h1>Hello</h1>" in out.read_text(encoding="utf-8")


def test_cli_page_reports_render_errors(tmp_path):
    project = make_project(tmp_path / "site")
    source = project / "content" / "posts" / "2024-01-15-hello.md"
    result = CliRunner().invoke(
        cli, ["page", str(source), "--project", str(project), "--layout", "cycle"]
    )
    assert result.exit_code == 1
    assert "Circular layout inheritance" in result.output


def test_cli_render_template(tmp_path):
    project = make_project(tmp_path / "site")
    template = tmp_path / "snippet.html"
    template.write_text("{{ site.title }}: {{ for p in posts }}{{ p.title }};{{ endfor }}", encoding="utf-8")
    result = CliRunner().invoke(cli, ["render", str(template), "--project", str(project)])
    assert result.exit_code == 0, result.output
    assert result.output == "Blog: Second;Hello;"

    page = project / "content" / "posts" / "2024-01-15-hello.md"
    template.write_text("{{ title }} -> {{ permalink }}", encoding="utf-8")
    result = CliRunner().invoke(
        cli, ["render", str(template), "--project", str(project), "--page", str(page)]
    )
    assert result.output == "Hello -> https://example.com/posts/hello/"


def test_cli_layout(tmp_path):
    project = make_project(tmp_path / "site")
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", "loop", "--project", str(project)])
    assert result.exit_code == 0, result.output
    assert result.output == "<title>Blog</title>[Second][Hello]"

    result = runner.invoke(cli, ["layout", "missing", "--project", str(project)])
    assert result.exit_code == 1
    assert "No layout found for 'missing'" in result.output


def test_cli_lists_functions_and_filters():
    runner = CliRunner()
    functions = runner.invoke(cli, ["functions"])
    assert functions.exit_code == 0
    assert "truncate" in functions.output.split()
    assert "time_ago" in functions.output.split()
    filters = runner.invoke(cli, ["filters"])
    assert "any?" in filters.output.split()


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
