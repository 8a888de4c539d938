"""Layout inheritance for Glyph templates.

A child template names its parent with ``{{ extends "base" }}`` and
overrides the parent's ``{{ block "name" }}default{{ endblock }}`` sections
with blocks of its own. Chains of any length are composed from the top
down, and only block contents of the child survive; text outside its blocks
is dropped.

Key functions:
- extract_blocks: Collect a template's block contents by name.
- splice_blocks: Put overrides into a parent's blocks.
- unwrap_blocks: Replace every block with its content.
- resolve_inheritance: Compose a template with its ancestors.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from .matcher import BLOCK, find_block_end

EXTENDS_RE = re.compile(r"\{\{\s*extends\s+[\"']([^\"']+)[\"']\s*\}\}")


class TemplateInheritanceError(Exception):
    """An ``extends`` chain leads back to a layout already in the chain."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(f"Circular layout inheritance: {' -> '.join(chain)}")


def extends_name(template: str) -> str | None:
    """Return the parent named by ``{{ extends "..." }}``, if any."""
    match = EXTENDS_RE.search(template)
    return match.group(1) if match else None


def extract_blocks(template: str) -> dict[str, str]:
    """Collect every block's content by name, nested blocks included.

    When a name repeats, the first block wins.
    """
    blocks: dict[str, str] = {}
    for opener in BLOCK.opener.finditer(template):
        match = find_block_end(template, BLOCK, opener.end())
        if match is not None:
            blocks.setdefault(opener.group(1), match.first_body(template))
    return blocks


def _block_markup(name: str, content: str) -> str:
    return f'{{{{ block "{name}" }}}}{content}{{{{ endblock }}}}'


def _rewrite_blocks(text: str, rewrite: Callable[[str, str], str]) -> str:
    parts: list[str] = []
    pos = 0
    while True:
        opener = BLOCK.opener.search(text, pos)
        if opener is None:
            break
        match = find_block_end(text, BLOCK, opener.end())
        if match is None:
            parts.append(text[pos : opener.end()])
            pos = opener.end()
            continue
        parts.append(text[pos : opener.start()])
        parts.append(rewrite(opener.group(1), match.first_body(text)))
        pos = match.closer[1]
    parts.append(text[pos:])
    return "".join(parts)


def splice_blocks(parent: str, blocks: dict[str, str]) -> str:
    """Replace the parent's block contents with overrides from ``blocks``.

    Block markers are kept so a further descendant can override again.

    Args:
        parent: Parent template text.
        blocks: Overrides by block name.

    Returns:
        The parent text with overrides in place.
    """

    def rewrite(name: str, default: str) -> str:
        if name in blocks:
            return _block_markup(name, blocks[name])
        return _block_markup(name, splice_blocks(default, blocks))

    return _rewrite_blocks(parent, rewrite)


def unwrap_blocks(text: str) -> str:
    """Replace every block, nested ones included, with its content."""
    return _rewrite_blocks(text, lambda name, content: unwrap_blocks(content))


def _compose(template: str, load: Callable[[str], str], chain: list[str]) -> str:
    parent_name = extends_name(template)
    if parent_name is None:
        return template
    if parent_name in chain:
        raise TemplateInheritanceError(chain + [parent_name])
    parent = _compose(load(parent_name), load, chain + [parent_name])
    return splice_blocks(parent, extract_blocks(template))


def resolve_inheritance(template: str, load: Callable[[str], str], name: str | None = None) -> str:
    """Compose ``template`` with its ancestors and unwrap all blocks.

    Args:
        template: Template text, possibly starting with ``extends``.
        load: Returns a layout's text by name; raises when it is missing.
        name: The template's own layout name, if it has one.

    Returns:
        Text ready for the ordinary render stages.

    Raises:
        TemplateInheritanceError: If the chain of parents loops.
    """
    chain = [name] if name else []
    return unwrap_blocks(_compose(template, load, chain))
