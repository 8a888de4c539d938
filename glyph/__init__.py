"""Glyph static site template processor.

This package renders pages of a static site through a small text-embedded
template language: ``{{ expr | filter }}`` substitution, ``if``/``else``
conditionals, ``for`` and ``range`` loops, registry function calls and
``extends``/``block`` layout inheritance.

The main entry point for embedding is ``glyph.templates.TemplateEngine``;
the ``glyph`` command line tool lives in ``glyph.cli``.
"""

__all__ = ["__version__"]
__version__ = "0.3.0"
