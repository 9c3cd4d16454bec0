"""
Function catalog.

The catalog maps the names used in token expressions (``tint``,
``fluidType``...) to plain Python callables. Every callable receives its
arguments as already-resolved strings and returns a scalar string or, for
a few generators such as ``colorScale``, a mapping.

Catalogs are ordinary objects: build one with ``build_default_catalog()``,
``copy()`` it for an isolated variation, and hand it to the processor.
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tokensmith.core.errors import CatalogError

logger = logging.getLogger(__name__)

TokenFunction = Callable[..., Any]

CUSTOM_FAMILY = "custom"

# Names must be callable from expression syntax: name(args)
_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9]*")


class FunctionDoc(BaseModel):
    """Documentation entry for a catalog function."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Name used in token expressions")
    family: str = Field(default=CUSTOM_FAMILY, description="Group used in listings")
    signature: str = Field(description="Call form, e.g. 'tint(color, amount%)'")
    description: str = Field(default="", description="One-line summary")


def describe_signature(name: str, fn: TokenFunction) -> str:
    """Derive ``name(a, b, c)`` from the positional parameters of ``fn``."""
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return f"{name}(...)"

    parts: list[str] = []
    for param in params:
        if param.kind is param.VAR_POSITIONAL:
            parts.append(f"...{param.name}")
        elif param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            parts.append(param.name)
    return f"{name}({', '.join(parts)})"


class FunctionCatalog:
    """
    Name to function registry used by the expression processor.

    Supports:
    - register()/unregister() at runtime (later registrations overwrite)
    - Lookup by name and membership tests
    - Listing in registration order, optionally per family
    """

    def __init__(self) -> None:
        self._functions: dict[str, TokenFunction] = {}
        self._docs: dict[str, FunctionDoc] = {}

    def register(
        self,
        name: str,
        fn: TokenFunction,
        *,
        family: str = CUSTOM_FAMILY,
        signature: str | None = None,
        description: str = "",
    ) -> None:
        """
        Register a function, replacing any existing one with the same name.

        Args:
            name: Name used in token expressions
            fn: Callable taking string arguments
            family: Group for listings and docs
            signature: Human-readable call form (derived from ``fn`` if omitted)
            description: One-line summary

        Raises:
            CatalogError: If ``fn`` is not callable or ``name`` is not an identifier
        """
        if not callable(fn):
            raise CatalogError(f"Cannot register '{name}': {fn!r} is not callable")
        if not isinstance(name, str) or not _NAME_RE.fullmatch(name):
            raise CatalogError(
                f"Invalid function name {name!r}: must be a letter followed by letters or digits"
            )

        if name in self._functions:
            logger.debug(f"Overwriting token function: {name}")
        # re-registering moves the name to the end of the listing order
        self._functions.pop(name, None)
        self._docs.pop(name, None)
        self._functions[name] = fn
        self._docs[name] = FunctionDoc(
            name=name,
            family=family,
            signature=signature or describe_signature(name, fn),
            description=description,
        )
        logger.debug(f"Registered token function: {name} ({family})")

    def unregister(self, name: str) -> None:
        """Remove a function. Unknown names are ignored."""
        if self._functions.pop(name, None) is not None:
            self._docs.pop(name, None)
            logger.debug(f"Unregistered token function: {name}")

    def get(self, name: str) -> TokenFunction | None:
        """Get a function by name, or None."""
        return self._functions.get(name)

    def doc(self, name: str) -> FunctionDoc | None:
        return self._docs.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def list_functions(self, family: str | None = None) -> list[str]:
        """List function names in registration order."""
        if family is None:
            return list(self._functions)
        return [name for name, doc in self._docs.items() if doc.family == family]

    def families(self) -> list[str]:
        """Family names in order of first registration."""
        return list(dict.fromkeys(doc.family for doc in self._docs.values()))

    def docs(self) -> dict[str, dict[str, FunctionDoc]]:
        """Documentation grouped by family: ``{family: {name: FunctionDoc}}``."""
        grouped: dict[str, dict[str, FunctionDoc]] = {}
        for name, doc in self._docs.items():
            grouped.setdefault(doc.family, {})[name] = doc
        return grouped

    def copy(self) -> FunctionCatalog:
        """Independent catalog with the same registrations."""
        clone = FunctionCatalog()
        clone._functions = dict(self._functions)
        clone._docs = dict(self._docs)
        return clone
