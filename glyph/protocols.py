"""Protocol definitions for Glyph.

The template processor depends on its collaborators only through these
interfaces, so embedders can supply their own layout lookup or wrap the
engine without subclassing.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .context import Context


@runtime_checkable
class LayoutResolver(Protocol):
    """Protocol for finding layout text by logical name.

    Implementations decide which concrete template answers to a name,
    typically by trying several naming conventions in order.
    """

    @abstractmethod
    def resolve(self, name: str, kind: str | None = None, output_format: str = "html") -> str:
        """Return the text of the layout that answers to ``name``.

        Args:
            name: Logical layout or partial name (e.g. "single", "base").
            kind: Page kind hint ("home", "section", "single").
            output_format: Output format hint (e.g. "html", "rss").

        Returns:
            Template text.

        Raises:
            LayoutNotFoundError: If no candidate exists.
        """
        ...


@runtime_checkable
class TemplateRenderer(Protocol):
    """Protocol for rendering template text.

    This is the surface the build driver uses, independent of how layouts
    are stored.
    """

    @abstractmethod
    def render(self, template: str, context: Context) -> str:
        """Render template text against a context.

        Args:
            template: Template text.
            context: Bindings for the render.

        Returns:
            Rendered text.
        """
        ...

    @abstractmethod
    def render_by_name(
        self,
        name: str,
        context: Context,
        kind: str | None = None,
        output_format: str = "html",
    ) -> str:
        """Resolve a layout by name and render it.

        Args:
            name: Logical layout name.
            context: Bindings for the render.
            kind: Page kind hint for layout lookup.
            output_format: Output format hint for layout lookup.

        Returns:
            Rendered text.
        """
        ...
