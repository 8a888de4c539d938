"""Command-line interface for Glyph.

This module defines the CLI commands using Click framework.
It renders templates, layouts and pages of a Glyph project and lists the
template functions and filters available to theme authors.

Commands:
- render: Render a template file against the project.
- layout: Resolve a layout by name and render it.
- page: Render a content page with its layout.
- functions: List template functions.
- filters: List template filters.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, NoReturn

import click

from . import __version__
from .config import layout_resolver_for, load_site
from .content import Page, Site, load_page
from .context import Context
from .filters import default_filter_registry
from .functions import default_function_registry
from .inheritance import TemplateInheritanceError
from .layouts import LayoutNotFoundError
from .templates import RenderError, TemplateEngine

_project_option = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project root containing glyph.yaml",
)


@click.group()
@click.version_option(version=__version__, prog_name="glyph")
@click.option("--verbose", "-v", is_flag=True, help="Log template diagnostics")
def cli(verbose: bool):
    """Glyph static site template processor."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(title: str, message: str) -> NoReturn:
    click.echo(click.style(title, fg="red", bold=True), err=True)
    click.echo(click.style(f"  Error: {message}", fg="white"), err=True)
    raise SystemExit(1) from None


def _find_page(site: Site, project: Path, config: dict[str, Any], path: Path | None) -> Page | None:
    """Return the site page loaded from ``path``, loading it if needed."""
    if path is None:
        return None
    target = path.resolve()
    for page in site.pages:
        if page.file_path and page.file_path.resolve() == target:
            return page
    content_dir = (project / str(config.get("content_dir") or "content")).resolve()
    if content_dir in target.parents:
        return load_page(target, content_dir)
    return load_page(target)


def _emit(output: str, destination: Path | None) -> None:
    if destination is None:
        click.echo(output, nl=False)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(output, encoding="utf-8")
    click.echo(f"Wrote {destination}")


@cli.command()
@click.argument("template", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--page",
    "page_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Content file bound as page",
)
@_project_option
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write output to a file")
def render(template: Path, page_path: Path | None, project: Path, output: Path | None):
    """Render a template file against the project."""
    config, site = load_site(project)
    engine = TemplateEngine(layout_resolver_for(project, config))
    context = Context.create(site, _find_page(site, project, config, page_path))
    try:
        result = engine.render(template.read_text(encoding="utf-8"), context)
    except (LayoutNotFoundError, TemplateInheritanceError) as exc:
        _fail("Render failed:", str(exc))
    _emit(result, output)


@cli.command()
@click.argument("name")
@click.option(
    "--page",
    "page_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Content file bound as page",
)
@click.option("--kind", default=None, help="Page kind or type used for layout lookup")
@click.option("--format", "output_format", default="html", show_default=True, help="Output format")
@_project_option
def layout(name: str, page_path: Path | None, kind: str | None, output_format: str, project: Path):
    """Resolve the layout NAME and render it."""
    config, site = load_site(project)
    engine = TemplateEngine(layout_resolver_for(project, config))
    context = Context.create(site, _find_page(site, project, config, page_path))
    try:
        result = engine.render_by_name(name, context, kind, output_format)
    except (LayoutNotFoundError, TemplateInheritanceError) as exc:
        _fail("Layout failed:", str(exc))
    _emit(result, None)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_project_option
@click.option("--layout", "layout_name", default=None, help="Layout overriding the page's own")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write output to a file")
def page(source: Path, project: Path, layout_name: str | None, output: Path | None):
    """Render the content file SOURCE with its layout."""
    config, site = load_site(project)
    engine = TemplateEngine(layout_resolver_for(project, config))
    target = _find_page(site, project, config, source)
    try:
        result = engine.render_page(target, site, layout=layout_name)
    except RenderError as exc:
        _fail(f"Rendering {source} failed:", exc.message)
    _emit(result, output)


@cli.command()
def functions():
    """List template functions."""
    for name in default_function_registry.names():
        click.echo(name)


@cli.command()
def filters():
    """List template filters."""
    for name in default_filter_registry.names():
        click.echo(name)


def main():
    """Entry point for the glyph console script."""
    cli()
