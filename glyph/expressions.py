"""Expression evaluation for Glyph templates.

An expression is a literal (``"text"``, ``42``, ``true``), a call
(``name(args)``) or a dotted path (``site.title``, ``.url``, ``$item.tags``).
Paths start at a root binding and continue through capability tables, so a
template can only reach what those tables list.

Nothing here raises for names the template gets wrong: unknown roots,
disallowed methods and unknown functions all evaluate to None. Exceptions
raised by content accessors themselves are not caught.

Key class:
- ExpressionEvaluator: Evaluates expressions and call arguments.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import Any

from .arguments import NOT_LITERAL, parse_call, parse_literal, split_arguments
from .capabilities import lookup_method
from .context import Context
from .functions import FunctionArgumentError, FunctionRegistry, default_function_registry
from .values import coerce_argument

logger = logging.getLogger(__name__)


class ExpressionEvaluator:
    """Evaluates template expressions against a Context.

    Attributes:
        functions: Registry consulted for ``name(args)`` calls and for
            root names that match no binding.
    """

    def __init__(self, functions: FunctionRegistry = default_function_registry):
        self.functions = functions

    def evaluate(self, expression: str, context: Context) -> Any:
        """Evaluate one expression.

        Args:
            expression: Expression text, without braces or filters.
            context: Bindings to resolve root names against.

        Returns:
            The resulting value, or None when anything along the way is
            unknown.
        """
        expression = expression.strip()
        if not expression:
            return None

        literal = parse_literal(expression)
        if literal is not NOT_LITERAL:
            return literal

        call = parse_call(expression)
        if call:
            return self.call(call[0], call[1], context)

        return self.resolve_path(expression, context)

    def resolve_path(self, expression: str, context: Context) -> Any:
        """Resolve a dotted path such as ``page.section_nav.prev.title``."""
        if expression == ".":
            return context.lookup(".")
        if expression.startswith("."):
            value = context.lookup(".")
            methods = expression[1:].split(".")
        else:
            root, *methods = expression.split(".")
            value = self._resolve_root(root, context)

        for method in methods:
            if value is None:
                return None
            value = self._step(value, method, context)
        return value

    def _resolve_root(self, name: str, context: Context) -> Any:
        if name in context:
            return context.lookup(name)
        if name in self.functions:
            return self._call_function(name, [])
        logger.debug("Unknown template name %r", name)
        return None

    def _step(self, value: Any, method: str, context: Context) -> Any:
        if isinstance(value, Mapping):
            return value.get(method)
        accessor = lookup_method(value, method)
        if accessor is None:
            logger.debug("Method %r is not available on %s", method, type(value).__name__)
            return None
        return accessor(value, context)

    def resolve_argument(self, raw: str, context: Context) -> Any:
        """Turn one raw argument into a value: a literal, else an expression."""
        literal = parse_literal(raw)
        if literal is not NOT_LITERAL:
            return literal
        return self.evaluate(raw, context)

    def call(self, name: str, raw_args: str, context: Context) -> Any:
        """Evaluate ``name(raw_args)``.

        Registered functions get their arguments coerced to primitives.
        Otherwise the root query calls (``recent_posts(3)``) are tried.

        Args:
            name: Called name.
            raw_args: Argument text between the parentheses.
            context: Bindings for argument evaluation.

        Returns:
            The call's result, or None for unknown names and for arguments
            the function rejects.
        """
        if name in self.functions:
            args = [
                coerce_argument(self.resolve_argument(raw, context))
                for raw in split_arguments(raw_args)
            ]
            return self._call_function(name, args)

        query = context.queries.get(name)
        if query is not None:
            args = [
                coerce_argument(self.resolve_argument(raw, context))
                for raw in split_arguments(raw_args)
            ]
            try:
                inspect.signature(query).bind(*args)
            except TypeError as exc:
                logger.warning("Query %r called with unusable arguments: %s", name, exc)
                return None
            return query(*args)

        logger.debug("Unknown function %r", name)
        return None

    def _call_function(self, name: str, args: list[Any]) -> Any:
        try:
            return self.functions.call(name, args)
        except FunctionArgumentError as exc:
            logger.warning("Function %r failed: %s", name, exc)
            return None
