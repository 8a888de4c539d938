"""Directive nesting matcher for Glyph.

A regular expression cannot pair ``{{ if }}`` with the right ``{{ endif }}``
once blocks nest, so block pairing is done by a forward scan that counts
nesting depth. The same scan serves every block kind: conditionals (with
their optional ``else``), ``for`` and ``range`` loops, and inheritance
``block`` sections.

Key objects:
- BlockSpec: Opener, closer and optional divider patterns of one block kind.
- BlockMatch: Where a block's divider and closer were found.
- find_block_end: The nesting-aware scan.
- IF, FOR, RANGE, BLOCK: Specs for the four block kinds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class BlockSpec:
    """Patterns describing one kind of block.

    Attributes:
        name: Block kind, used in log messages.
        opener: Matches the opening directive (with capture groups for its
            arguments).
        closer: Matches the closing directive.
        divider: Matches the optional divider (``else``), if the kind has one.
    """

    name: str
    opener: re.Pattern
    closer: re.Pattern
    divider: re.Pattern | None = None


@dataclass(frozen=True)
class BlockMatch:
    """Location of a block's parts, as offsets into the scanned text.

    Attributes:
        body_start: Offset just past the opening directive.
        divider: Span of the block's own divider, or None.
        closer: Span of the block's own closing directive.
    """

    body_start: int
    divider: tuple[int, int] | None
    closer: tuple[int, int]

    def first_body(self, text: str) -> str:
        """Text between the opener and the divider (or closer)."""
        end = self.divider[0] if self.divider else self.closer[0]
        return text[self.body_start : end]

    def second_body(self, text: str) -> str:
        """Text between the divider and the closer; empty without a divider."""
        if not self.divider:
            return ""
        return text[self.divider[1] : self.closer[0]]


IF = BlockSpec(
    name="if",
    opener=re.compile(r"\{\{\s*if\s+([^}]+?)\s*\}\}"),
    closer=re.compile(r"\{\{\s*endif\s*\}\}"),
    divider=re.compile(r"\{\{\s*else\s*\}\}"),
)

FOR = BlockSpec(
    name="for",
    opener=re.compile(r"\{\{\s*for\s+(\w+)\s+in\s+([^}]+?)\s*\}\}"),
    closer=re.compile(r"\{\{\s*endfor\s*\}\}"),
)

RANGE = BlockSpec(
    name="range",
    opener=re.compile(r"\{\{\s*range\s+([^}]+?)\s*\}\}"),
    closer=re.compile(r"\{\{\s*end\s*\}\}"),
)

BLOCK = BlockSpec(
    name="block",
    opener=re.compile(r"\{\{\s*block\s+[\"']([^\"']+)[\"']\s*\}\}"),
    closer=re.compile(r"\{\{\s*endblock\s*\}\}"),
)


def find_block_end(text: str, spec: BlockSpec, body_start: int) -> BlockMatch | None:
    """Find the divider and closer that belong to a block.

    Scans forward from ``body_start`` (just past the block's opener). A
    nested opener increases the depth; a closer at depth zero ends the
    block, any other closer decreases the depth. A divider counts only at
    depth zero, and only the first one does; dividers of nested blocks are
    stepped over.

    Args:
        text: Text containing the block.
        spec: The kind of block being matched.
        body_start: Offset just past the block's opening directive.

    Returns:
        BlockMatch, or None when the block is never closed.

    Examples:
        >>> text = "{{ if a }}{{ if b }}X{{ else }}Y{{ endif }}{{ else }}W{{ endif }}"
        >>> match = find_block_end(text, IF, 10)
        >>> match.second_body(text)
        'W'
    """
    depth = 0
    pos = body_start
    divider: tuple[int, int] | None = None
    # Every step moves past a non-empty directive, so this bound is never
    # reached on well-formed input.
    for _ in range(len(text) + 1):
        closer = spec.closer.search(text, pos)
        if closer is None:
            return None
        opener = spec.opener.search(text, pos, closer.start())
        found_divider = spec.divider.search(text, pos, closer.start()) if spec.divider else None

        if opener and (found_divider is None or opener.start() < found_divider.start()):
            depth += 1
            pos = opener.end()
        elif found_divider:
            if depth == 0 and divider is None:
                divider = found_divider.span()
            pos = found_divider.end()
        elif depth == 0:
            return BlockMatch(body_start, divider, closer.span())
        else:
            depth -= 1
            pos = closer.end()
    return None
