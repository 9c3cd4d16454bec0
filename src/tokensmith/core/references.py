"""
Token reference resolution.

Replaces every ``{dot.path}`` occurrence in a value with the referenced
token's value. Substitution is textual, so references may sit inside
longer strings (``"1px solid {color.border}"``) and inside function
arguments.

Cycle safety: the paths currently being expanded are kept in ``visited``.
A path is added before recursing into its value and removed afterwards, so
siblings may reference the same token while a token can never expand into
itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from tokensmith.core.diagnostics import Diagnostic, DiagnosticKind, report
from tokensmith.core.value_parser import format_number

logger = logging.getLogger(__name__)

VALUE_KEY = "$value"

# {path}; bodies with ":" or "," are inline object literals, not references
REFERENCE_RE = re.compile(r"\{([^{}:,]+)\}")


class _Missing:
    """Sentinel for a path that does not end at a token."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def find_references(value: Any) -> list[str]:
    """List the dot-paths referenced by ``value``, in order of appearance."""
    if not isinstance(value, str):
        return []
    return [match.group(1).strip() for match in REFERENCE_RE.finditer(value)]


def lookup_token(tree: Mapping[str, Any], path: str, value_key: str = VALUE_KEY) -> Any:
    """Walk ``tree`` along the dot-separated ``path`` and return the token's raw value.

    Returns:
        The token's value, or MISSING if the path is absent or ends at a group.
    """
    current: Any = tree
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]

    if isinstance(current, Mapping) and value_key in current:
        return current[value_key]
    return MISSING


def _scalar_text(value: Any) -> str | None:
    """Text form of a scalar token value, or None for mappings and lists."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return None


def resolve_references(
    value: Any,
    tree: Mapping[str, Any],
    visited: set[str] | None = None,
    *,
    diagnostics: list[Diagnostic] | None = None,
    value_key: str = VALUE_KEY,
    expanded: set[str] | None = None,
) -> Any:
    """Substitute every ``{path}`` in ``value`` with the referenced token value.

    Non-string values are returned unchanged. Unresolvable references and
    cycles leave the placeholder verbatim and report a diagnostic.

    Args:
        value: Raw value that may contain references.
        tree: Full token tree to resolve against.
        visited: Paths currently being expanded (cycle guard).
        diagnostics: Optional list that collects reported problems.
        value_key: Key holding a token's value.
        expanded: If given, collects every path that was substituted.

    Returns:
        The value with all resolvable references substituted.
    """
    if not isinstance(value, str):
        return value

    active = visited if visited is not None else set()

    def substitute(match: re.Match[str]) -> str:
        placeholder = match.group(0)
        path = match.group(1).strip()

        if path in active:
            report(
                diagnostics,
                logger,
                DiagnosticKind.REFERENCE_CYCLE,
                f"Circular token reference detected: {path}",
                value,
                path,
            )
            return placeholder

        target = lookup_token(tree, path, value_key)
        if target is MISSING:
            report(
                diagnostics,
                logger,
                DiagnosticKind.UNRESOLVED_REFERENCE,
                f"Unresolved token reference: {path}",
                value,
                path,
            )
            return placeholder

        text = _scalar_text(target)
        if text is None:
            report(
                diagnostics,
                logger,
                DiagnosticKind.NON_SCALAR_REFERENCE,
                f"Token {path} holds a {type(target).__name__} and cannot be embedded in text",
                value,
                path,
            )
            return placeholder

        if expanded is not None:
            expanded.add(path)
        active.add(path)
        try:
            return resolve_references(
                text,
                tree,
                active,
                diagnostics=diagnostics,
                value_key=value_key,
                expanded=expanded,
            )
        finally:
            active.discard(path)

    return REFERENCE_RE.sub(substitute, value)
