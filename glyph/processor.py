"""Directive processing for Glyph templates.

``TemplateProcessor.render`` runs a template through five stages:

1. function calls: ``{{ name(args) }}`` outside loop bodies
2. loops: ``{{ for x in expr }}`` and ``{{ range expr }}`` blocks
3. conditionals: ``{{ if cond }}...{{ else }}...{{ endif }}`` blocks
4. variables: ``{{ expr | filter }}`` substitution
5. cleanup: removal of directive leftovers

Loop bodies and chosen conditional branches are rendered by calling
``render`` again on that fragment, so any directive nests inside any other.
A spliced block has already been through every stage, and the later
stages of the enclosing render scan the spliced text again.

Key objects:
- TemplateProcessor: Renders template text against a Context.
- cleanup: The final stage, usable on its own.
"""

from __future__ import annotations

import logging
import re

from .arguments import parse_call, split_pipeline
from .context import Context
from .expressions import ExpressionEvaluator
from .filters import FilterRegistry, apply_filters, default_filter_registry
from .matcher import FOR, IF, RANGE, BlockSpec, find_block_end
from .values import format_value, is_sequence, is_truthy

logger = logging.getLogger(__name__)

DIRECTIVE_RE = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")
RANGE_ASSIGN_RE = re.compile(r"^\$?(\w+)\s*:=\s*(.+)$")

CONTROL_KEYWORDS = frozenset(
    {"if", "else", "endif", "for", "endfor", "range", "end", "block", "endblock", "extends"}
)

# Leftovers removed by cleanup, in order.
STRAY_DIRECTIVE_PATTERNS = (
    re.compile(r"\{\{\s*endfor\s*\}\}"),
    re.compile(r"\{\{\s*endif\s*\}\}"),
    re.compile(r"\{\{\s*else\s*\}\}"),
    re.compile(r"\{\{\s*end\s*\}\}"),
    re.compile(r"\{\{\s*for\s+\w+\s+in\s+[^}]*\}\}"),
    re.compile(r"\{\{\s*if\s+[^}]*\}\}"),
    re.compile(r"\{\{\s*[^}]*\s*\}\}"),
)
UNMATCHED_OPENER_RE = re.compile(r"\{\{\s*(?:if|for|range|block)\b[^}]*\}\}")
MARKUP_REPAIRS = (
    (re.compile(r">\s*\">\s*<"), "><"),
    (re.compile(r">\s*\">\s*\n"), ">\n"),
    (re.compile(r">\s*\">"), ">"),
)


def is_control(directive: str) -> bool:
    """Return True when a directive's inner text is a block keyword."""
    keyword = directive.split(None, 1)[0] if directive.strip() else ""
    return keyword in CONTROL_KEYWORDS


def cleanup(text: str) -> str:
    """Strip unmatched directive leftovers and repair the markup they leave.

    Runs until a pass changes nothing, so applying it again is a no-op.

    Args:
        text: Rendered text that may still contain directive fragments.

    Returns:
        Text without any ``{{ ... }}`` span.
    """
    for opener in UNMATCHED_OPENER_RE.finditer(text):
        logger.warning("Removing unmatched directive %r", opener.group(0))
    # Every pass that changes the text shortens it.
    for _ in range(len(text) + 1):
        previous = text
        for pattern in STRAY_DIRECTIVE_PATTERNS:
            text = pattern.sub("", text)
        for pattern, replacement in MARKUP_REPAIRS:
            text = pattern.sub(replacement, text)
        if text == previous:
            break
    return text


class TemplateProcessor:
    """Renders template text against a Context.

    Attributes:
        evaluator: Expression evaluator used for every stage.
        filters: Filter registry for variable pipelines.
    """

    def __init__(
        self,
        evaluator: ExpressionEvaluator | None = None,
        filters: FilterRegistry = default_filter_registry,
    ):
        self.evaluator = evaluator or ExpressionEvaluator()
        self.filters = filters

    def render(self, template: str, context: Context) -> str:
        """Render ``template`` through every stage.

        Args:
            template: Template text.
            context: Bindings for this render.

        Returns:
            Rendered text.
        """
        text = self.process_calls(template, context)
        text = self.process_loops(text, context)
        text = self.process_conditionals(text, context)
        text = self.process_variables(text, context)
        return cleanup(text)

    def process_calls(self, text: str, context: Context) -> str:
        """Substitute ``{{ name(args) }}`` directives outside loop bodies.

        Calls inside a loop body depend on the loop variables, so they are
        left for the loop stage to render per iteration.
        """
        parts: list[str] = []
        pos = 0
        scan = 0
        while True:
            directive = DIRECTIVE_RE.search(text, scan)
            if directive is None:
                break
            inner = directive.group(1)
            spec = self._loop_spec(directive)
            if spec is not None:
                match = find_block_end(text, spec, directive.end())
                scan = match.closer[1] if match else directive.end()
                continue
            call = None if is_control(inner) else parse_call(inner)
            if call and not split_pipeline(inner)[1]:
                parts.append(text[pos : directive.start()])
                value = self.evaluator.call(call[0], call[1], context)
                parts.append(format_value(value))
                pos = directive.end()
            scan = directive.end()
        parts.append(text[pos:])
        return "".join(parts)

    @staticmethod
    def _loop_spec(directive: re.Match) -> BlockSpec | None:
        for spec in (FOR, RANGE):
            if spec.opener.fullmatch(directive.group(0)):
                return spec
        return None

    def process_loops(self, text: str, context: Context) -> str:
        """Expand ``for`` and ``range`` blocks."""
        parts: list[str] = []
        pos = 0
        while True:
            opener, spec = self._next_loop(text, pos)
            if opener is None:
                break
            match = find_block_end(text, spec, opener.end())
            if match is None:
                parts.append(text[pos : opener.end()])
                pos = opener.end()
                continue
            parts.append(text[pos : opener.start()])
            parts.append(self._render_loop(spec, opener, match.first_body(text), context))
            pos = match.closer[1]
        parts.append(text[pos:])
        return "".join(parts)

    @staticmethod
    def _next_loop(text: str, pos: int) -> tuple[re.Match | None, BlockSpec | None]:
        found = []
        for spec in (FOR, RANGE):
            opener = spec.opener.search(text, pos)
            if opener:
                found.append((opener, spec))
        if not found:
            return None, None
        return min(found, key=lambda item: item[0].start())

    def _render_loop(self, spec: BlockSpec, opener: re.Match, body: str, context: Context) -> str:
        if spec is FOR:
            name, expression = opener.group(1), opener.group(2)
        else:
            name, expression = None, opener.group(1)
            assignment = RANGE_ASSIGN_RE.match(expression)
            if assignment:
                name, expression = assignment.group(1), assignment.group(2)

        items = self.evaluator.evaluate(expression, context)
        if not is_sequence(items):
            return ""

        output: list[str] = []
        for index, item in enumerate(items):
            bindings = {".": item, "$index": index}
            if name:
                bindings[name] = item
            output.append(self.render(body, context.child(bindings)))
        return "".join(output)

    def process_conditionals(self, text: str, context: Context) -> str:
        """Resolve ``if``/``else``/``endif`` blocks.

        The chosen branch is rendered in full before it is spliced in and
        the scan resumes after it, so nested and sibling conditionals are all
        resolved by the time the variable stage runs over the result.
        """
        parts: list[str] = []
        pos = 0
        while True:
            opener = IF.opener.search(text, pos)
            if opener is None:
                break
            match = find_block_end(text, IF, opener.end())
            if match is None:
                parts.append(text[pos : opener.end()])
                pos = opener.end()
                continue
            condition = self.evaluator.evaluate(opener.group(1), context)
            if is_truthy(condition):
                branch = match.first_body(text)
            else:
                branch = match.second_body(text)
            parts.append(text[pos : opener.start()])
            parts.append(self.render(branch, context))
            pos = match.closer[1]
        parts.append(text[pos:])
        return "".join(parts)

    def process_variables(self, text: str, context: Context) -> str:
        """Substitute ``{{ expr | filters }}`` directives.

        Block keywords are left in place for cleanup.
        """

        def substitute(directive: re.Match) -> str:
            inner = directive.group(1)
            if is_control(inner):
                return directive.group(0)
            expression, filters = split_pipeline(inner)
            value = self.evaluator.evaluate(expression, context)
            if filters:
                value = apply_filters(
                    value,
                    filters,
                    lambda raw: self.evaluator.resolve_argument(raw, context),
                    self.filters,
                )
            return format_value(value)

        return DIRECTIVE_RE.sub(substitute, text)
