"""
Expression processor.

Evaluates one token value: references are substituted first, and if the
result is a ``name(args)`` call it is evaluated depth-first, resolving
references and nested calls inside each argument before dispatching to the
function catalog.

Problems never raise. An unknown function, a call that re-enters itself
or a function that rejects its arguments leaves the expression as written
and records a diagnostic.

Example:
    processor = ExpressionProcessor(build_default_catalog())
    processor.resolve("tint({color.brand}, 80%)", tree)
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from tokensmith.core.catalog import FunctionCatalog
from tokensmith.core.diagnostics import Diagnostic, DiagnosticKind, report
from tokensmith.core.errors import (
    IncompatibleUnitsError,
    InvalidValueError,
    make_function_error,
)
from tokensmith.core.references import (
    MISSING,
    REFERENCE_RE,
    lookup_token,
    resolve_references,
)
from tokensmith.core.settings import DEFAULT_SETTINGS, TokensmithSettings
from tokensmith.core.value_parser import FunctionCall, parse_function_call

logger = logging.getLogger(__name__)

# CSS functions that are valid output as-is when the catalog cannot evaluate them
CSS_NATIVE_FUNCTIONS = frozenset(
    {
        "attr",
        "calc",
        "clamp",
        "color",
        "counter",
        "env",
        "hsl",
        "hsla",
        "hwb",
        "lab",
        "lch",
        "max",
        "min",
        "oklab",
        "oklch",
        "repeat",
        "rgb",
        "rgba",
        "steps",
        "url",
        "var",
    }
)


class ExpressionProcessor:
    """
    Resolves single token values against a token tree.

    The processor holds no per-call state: the reference guard and the call
    stack are created for each resolve() and threaded through recursion.
    """

    def __init__(
        self,
        catalog: FunctionCatalog,
        settings: TokensmithSettings | None = None,
    ):
        self.catalog = catalog
        self.settings = settings or DEFAULT_SETTINGS

    def resolve(
        self,
        value: Any,
        tree: Mapping[str, Any],
        *,
        diagnostics: list[Diagnostic] | None = None,
        functions: bool = True,
        path: str | None = None,
    ) -> Any:
        """
        Resolve references and function calls in a single value.

        Args:
            value: Raw token value; non-strings are returned unchanged
            tree: Full token tree to resolve references against
            diagnostics: Optional list collecting recoverable problems
            functions: Evaluate function calls (False resolves references only)
            path: Dot-path of the owning token, used in log messages

        Returns:
            The resolved value. Usually a string; generator functions such as
            colorScale return a mapping, and an alias of a non-string token
            returns a copy of that token's value.
        """
        if not isinstance(value, str):
            return value

        alias = self._alias_target(value, tree)
        if alias is not MISSING:
            return copy.deepcopy(alias)

        expanded: set[str] = set()
        resolved = resolve_references(
            value,
            tree,
            diagnostics=diagnostics,
            value_key=self.settings.value_key,
            expanded=expanded,
        )
        if not functions:
            return resolved

        call = parse_function_call(resolved)
        if call is None:
            return resolved
        return self._evaluate_call(call, tree, [], frozenset(expanded), diagnostics, path)

    def evaluate(
        self,
        expression: str,
        tree: Mapping[str, Any],
        stack: list[str] | None = None,
        *,
        diagnostics: list[Diagnostic] | None = None,
        path: str | None = None,
    ) -> Any:
        """
        Evaluate a function call expression.

        Non-call input is returned unchanged.

        Args:
            expression: ``name(args)`` string
            tree: Token tree for references inside arguments
            stack: Signatures of calls currently being evaluated
            diagnostics: Optional list collecting recoverable problems
            path: Dot-path of the owning token, used in log messages
        """
        call = parse_function_call(expression)
        if call is None:
            return expression
        return self._evaluate_call(
            call, tree, stack if stack is not None else [], frozenset(), diagnostics, path
        )

    # =========================================================================
    # Internals
    # =========================================================================

    def _alias_target(self, value: str, tree: Mapping[str, Any]) -> Any:
        """Value of the token when ``value`` is exactly one non-string reference."""
        match = REFERENCE_RE.fullmatch(value.strip())
        if match is None:
            return MISSING
        target = lookup_token(tree, match.group(1).strip(), self.settings.value_key)
        if target is MISSING or isinstance(target, str):
            return MISSING
        return target

    def _evaluate_call(
        self,
        call: FunctionCall,
        tree: Mapping[str, Any],
        stack: list[str],
        expanded: frozenset[str],
        diagnostics: list[Diagnostic] | None,
        path: str | None,
    ) -> Any:
        """Evaluate ``call`` and its nested calls depth-first.

        ``stack`` holds the signatures of the enclosing calls. ``expanded``
        holds every reference path already substituted on the way down to
        this call; those stay placeholders if they turn up again, so
        mutually referencing calls cannot grow without bound.
        """
        signature = call.signature
        if signature in stack:
            report(
                diagnostics,
                logger,
                DiagnosticKind.RECURSIVE_CALL,
                f"Recursive function call detected: {signature}",
                call.raw,
                path,
            )
            return call.raw

        stack.append(signature)
        try:
            args = [
                self._resolve_argument(arg, tree, stack, expanded, diagnostics, path)
                for arg in call.args
            ]
            return self._dispatch(call, args, diagnostics, path)
        finally:
            stack.pop()

    def _resolve_argument(
        self,
        arg: str,
        tree: Mapping[str, Any],
        stack: list[str],
        expanded: frozenset[str],
        diagnostics: list[Diagnostic] | None,
        path: str | None,
    ) -> Any:
        substituted: set[str] = set()
        resolved = resolve_references(
            arg,
            tree,
            set(expanded),
            diagnostics=diagnostics,
            value_key=self.settings.value_key,
            expanded=substituted,
        )
        nested = parse_function_call(resolved)
        if nested is None:
            return resolved
        return self._evaluate_call(
            nested, tree, stack, expanded | substituted, diagnostics, path
        )

    def _dispatch(
        self,
        call: FunctionCall,
        args: list[Any],
        diagnostics: list[Diagnostic] | None,
        path: str | None,
    ) -> Any:
        fn = self.catalog.get(call.name)
        if fn is None:
            if call.name.lower() in CSS_NATIVE_FUNCTIONS:
                logger.debug(f"Passing through CSS function: {call.raw}")
                return _rebuild(call, args)
            report(
                diagnostics,
                logger,
                DiagnosticKind.UNKNOWN_FUNCTION,
                f"Unknown token function: {call.name}",
                call.raw,
                path,
            )
            return call.raw

        try:
            return fn(*args)
        except Exception as e:
            if call.name.lower() in CSS_NATIVE_FUNCTIONS and isinstance(
                e, (InvalidValueError, IncompatibleUnitsError)
            ):
                # e.g. clamp(1rem, 2vw + 1rem, 2rem) is CSS, not arithmetic
                logger.debug(f"Passing through CSS function: {call.raw}")
                return _rebuild(call, args)
            error = make_function_error(str(e), call.raw, function=call.name, path=path)
            report(
                diagnostics,
                logger,
                DiagnosticKind.FUNCTION_ERROR,
                f"Error evaluating {call.name}(): {error}",
                call.raw,
                path,
            )
            return call.raw


def _rebuild(call: FunctionCall, args: list[Any]) -> str:
    """CSS call text carrying the already evaluated arguments."""
    if tuple(args) == call.args:
        return call.raw
    return f"{call.name}({', '.join(str(arg) for arg in args)})"
