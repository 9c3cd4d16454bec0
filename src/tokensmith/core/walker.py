"""
Token tree walker.

Produces a resolved copy of a token tree. Every Token (a mapping holding
``$value``) is resolved against the whole input tree, so any token may
reference any other regardless of nesting. The input is never mutated.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from tokensmith.core.diagnostics import Diagnostic
from tokensmith.core.errors import TokenTreeError
from tokensmith.core.processor import ExpressionProcessor

logger = logging.getLogger(__name__)

META_KEY = "$meta"


def functions_enabled(tree: Mapping[str, Any]) -> bool:
    """False when the tree opts out with ``$meta: {functions: false}``."""
    meta = tree.get(META_KEY)
    return not (isinstance(meta, Mapping) and meta.get("functions") is False)


def resolve_all(
    tree: Mapping[str, Any],
    processor: ExpressionProcessor,
    *,
    diagnostics: list[Diagnostic] | None = None,
) -> dict[str, Any]:
    """
    Resolve every token in ``tree``.

    Args:
        tree: Token tree (nested mappings, Tokens carry ``$value``)
        processor: Expression processor holding the catalog and settings
        diagnostics: Optional list collecting recoverable problems

    Returns:
        A new tree of the same shape with resolved values. Tokens whose value
        changed also carry the unresolved expression under ``$original``.

    Raises:
        TokenTreeError: If ``tree`` is not a mapping with string keys
    """
    if not isinstance(tree, Mapping):
        raise TokenTreeError(f"Expected a token tree mapping, got {type(tree).__name__}")

    use_functions = functions_enabled(tree)
    if not use_functions:
        logger.debug("Token functions disabled by $meta.functions; resolving references only")

    return _walk_group(tree, tree, processor, "", use_functions, diagnostics)


def _walk_group(
    group: Mapping[str, Any],
    root: Mapping[str, Any],
    processor: ExpressionProcessor,
    prefix: str,
    use_functions: bool,
    diagnostics: list[Diagnostic] | None,
) -> dict[str, Any]:
    settings = processor.settings
    result: dict[str, Any] = {}

    for key, node in group.items():
        if not isinstance(key, str):
            raise TokenTreeError(f"Token tree keys must be strings, got {key!r} under '{prefix}'")

        path = f"{prefix}.{key}" if prefix else key

        if key.startswith(settings.metadata_prefix):
            result[key] = copy.deepcopy(node)
        elif isinstance(node, Mapping) and settings.value_key in node:
            result[key] = _resolve_token(node, root, processor, path, use_functions, diagnostics)
        elif isinstance(node, Mapping):
            result[key] = _walk_group(node, root, processor, path, use_functions, diagnostics)
        else:
            result[key] = copy.deepcopy(node)

    return result


def _resolve_token(
    token: Mapping[str, Any],
    root: Mapping[str, Any],
    processor: ExpressionProcessor,
    path: str,
    use_functions: bool,
    diagnostics: list[Diagnostic] | None,
) -> dict[str, Any]:
    settings = processor.settings
    raw = token[settings.value_key]
    resolved = processor.resolve(
        raw, root, diagnostics=diagnostics, functions=use_functions, path=path
    )

    output = copy.deepcopy(dict(token))
    output[settings.value_key] = resolved
    if settings.record_original and resolved != raw:
        output[settings.original_key] = raw
    return output
