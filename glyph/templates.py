"""Template rendering engine for Glyph.

This module is the entry point for rendering: it ties layout resolution,
inheritance and the directive processor together.

Key class:
- TemplateEngine: Renders template text, named layouts and whole pages.

Key objects:
- RenderError: A page failed to render, with the layout it was using.
- DEFAULT_LAYOUT: Built-in layout used when no layout file answers.
"""

from __future__ import annotations

import logging
from typing import Any

from .content import Page, Site
from .context import Context
from .expressions import ExpressionEvaluator
from .filters import FilterRegistry, default_filter_registry
from .functions import FunctionRegistry, default_function_registry
from .inheritance import TemplateInheritanceError, resolve_inheritance
from .layouts import DictLayoutResolver, LayoutNotFoundError
from .processor import TemplateProcessor
from .protocols import LayoutResolver

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_LAYOUT", "RenderError", "TemplateEngine"]

DEFAULT_LAYOUT_BY_KIND = {
    "home": "home",
    "section": "list",
    "single": "single",
}

DEFAULT_LAYOUT = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}{{ if site.title }} | {{ site.title }}{{ endif }}</title>
{{ if description }}<meta name="description" content="{{ description | escape }}">{{ endif }}
</head>
<body>
<header>
<a href="/">{{ site.title }}</a>
{{ if site_menu }}<nav>{{ for item in site_menu }}<a href="{{ item.url }}">{{ item.name }}</a>{{ endfor }}</nav>{{ endif }}
</header>
<main>
<article>
<h1>{{ title }}</h1>
{{ if date }}<time datetime="{{ date }}">{{ date_formatted }}</time>{{ endif }}
{{ content }}
</article>
</main>
</body>
</html>
"""


class RenderError(Exception):
    """Error while rendering a page, with template context.

    Attributes:
        template_name: Layout being rendered when the error happened.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        template_name: str,
        message: str,
        original_error: Exception | None = None,
    ):
        self.template_name = template_name
        self.message = message
        self.original_error = original_error
        super().__init__(f"{template_name}: {message}")


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message."""
    error_type = type(exc).__name__
    if error_type == "AttributeError":
        return f"Attribute error: {exc}"
    if error_type == "TypeError":
        return f"Type error: {exc}"
    return f"{error_type}: {exc}"


class TemplateEngine:
    """Template rendering engine.

    Attributes:
        layout_resolver: Finds layout text by name for ``render_by_name``,
            ``render_page`` and ``extends``.
        processor: Directive processor used for every render.
    """

    def __init__(
        self,
        layout_resolver: LayoutResolver | None = None,
        functions: FunctionRegistry = default_function_registry,
        filters: FilterRegistry = default_filter_registry,
    ):
        """Initialize the template engine.

        Args:
            layout_resolver: Layout lookup; an empty in-memory resolver when
                omitted.
            functions: Registry for ``name(args)`` calls.
            filters: Registry for ``| filter`` pipelines.
        """
        self.layout_resolver = layout_resolver or DictLayoutResolver()
        self.processor = TemplateProcessor(ExpressionEvaluator(functions), filters)

    def _load_parent(self, name: str) -> str:
        return self.layout_resolver.resolve(name)

    def render(self, template: str, context: Context, name: str | None = None) -> str:
        """Render template text.

        Args:
            template: Template text, possibly extending a layout.
            context: Bindings for this render.
            name: The template's own layout name, used to detect loops in
                ``extends`` chains.

        Returns:
            Rendered text.

        Raises:
            LayoutNotFoundError: If an ``extends`` parent cannot be found.
            TemplateInheritanceError: If ``extends`` chains loop.
        """
        composed = resolve_inheritance(template, self._load_parent, name)
        return self.processor.render(composed, context)

    def render_by_name(
        self,
        name: str,
        context: Context,
        kind: str | None = None,
        output_format: str = "html",
    ) -> str:
        """Resolve a layout by name, then render it.

        Raises:
            LayoutNotFoundError: If no layout answers to ``name``.
        """
        template = self.layout_resolver.resolve(name, kind, output_format)
        return self.render(template, context, name)

    def render_page(
        self,
        page: Page,
        site: Site | None = None,
        layout: str | None = None,
        **extra: Any,
    ) -> str:
        """Render a page with its layout.

        The layout is ``layout``, else the page's own ``layout``, else the
        default for its kind. When no layout file answers, the built-in
        DEFAULT_LAYOUT is used.

        Args:
            page: Page to render.
            site: Site the page belongs to.
            layout: Layout name overriding the page's choice.
            **extra: Additional root bindings.

        Returns:
            Rendered HTML.

        Raises:
            RenderError: If a content accessor or the layout chain fails.
        """
        name = layout or page.layout or DEFAULT_LAYOUT_BY_KIND.get(page.kind, "single")
        context = Context.create(site, page, extra)
        try:
            template = self.layout_resolver.resolve(name, page.type)
        except LayoutNotFoundError:
            logger.warning("No layout found for %r; using the built-in default", name)
            template, name = DEFAULT_LAYOUT, "<default>"

        try:
            return self.render(template, context, name)
        except (LayoutNotFoundError, TemplateInheritanceError) as exc:
            raise RenderError(name, str(exc), exc) from exc
        except Exception as exc:
            raise RenderError(name, _format_error_message(exc), exc) from exc
