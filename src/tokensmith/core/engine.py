"""
Token engine facade.

Bundles a function catalog, settings and the expression processor behind
the operations build tooling needs:

    engine = TokenEngine()
    resolved = engine.resolve_all(tree)
    engine.resolve_one("fluidType(1rem, 2rem)")

Every call allocates its own guard state and diagnostics list, so one
engine may serve concurrent callers as long as nobody registers functions
mid-run.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from tokensmith.core.catalog import CUSTOM_FAMILY, FunctionCatalog, FunctionDoc, TokenFunction
from tokensmith.core.diagnostics import Diagnostic, DiagnosticKind
from tokensmith.core.errors import TokenTreeError
from tokensmith.core.processor import ExpressionProcessor
from tokensmith.core.settings import DEFAULT_SETTINGS, TokensmithSettings, load_settings
from tokensmith.core.walker import functions_enabled
from tokensmith.core.walker import resolve_all as walk_tree
from tokensmith.functions import build_default_catalog

logger = logging.getLogger(__name__)


@dataclass
class ResolutionReport:
    """Result of a resolution run together with the problems worked around."""

    value: Any
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def by_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]


class TokenEngine:
    """
    Resolves token trees and ad-hoc values.

    Args:
        catalog: Function catalog (a fresh default catalog when omitted)
        settings: Engine settings (defaults when omitted)
    """

    def __init__(
        self,
        catalog: FunctionCatalog | None = None,
        settings: TokensmithSettings | None = None,
    ):
        self.settings = settings or DEFAULT_SETTINGS
        self.catalog = catalog if catalog is not None else build_default_catalog(self.settings)
        self.processor = ExpressionProcessor(self.catalog, self.settings)

    @classmethod
    def from_project(cls, project_root: Path) -> TokenEngine:
        """Engine configured from ``tokensmith.toml`` or ``pyproject.toml`` in ``project_root``."""
        return cls(settings=load_settings(project_root))

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve_all_with_report(self, tree: dict[str, Any]) -> ResolutionReport:
        diagnostics: list[Diagnostic] = []
        resolved = walk_tree(tree, self.processor, diagnostics=diagnostics)
        if diagnostics:
            logger.info(f"Resolved token tree with {len(diagnostics)} unresolved expression(s)")
        return ResolutionReport(value=resolved, diagnostics=diagnostics)

    def resolve_one_with_report(
        self, value: Any, tree: dict[str, Any] | None = None
    ) -> ResolutionReport:
        if tree is None:
            tree = {}
        elif not isinstance(tree, Mapping):
            raise TokenTreeError(f"Expected a token tree mapping, got {type(tree).__name__}")

        diagnostics: list[Diagnostic] = []
        resolved = self.processor.resolve(
            value, tree, diagnostics=diagnostics, functions=functions_enabled(tree)
        )
        return ResolutionReport(value=resolved, diagnostics=diagnostics)

    def resolve_all(self, tree: dict[str, Any]) -> dict[str, Any]:
        """
        Resolve every token in ``tree`` into a new tree.

        Raises:
            TokenTreeError: If ``tree`` is not a mapping
        """
        return self.resolve_all_with_report(tree).value

    def resolve_one(self, value: Any, tree: dict[str, Any] | None = None) -> Any:
        """Resolve a single value against ``tree`` (an empty tree by default)."""
        return self.resolve_one_with_report(value, tree).value

    # =========================================================================
    # Catalog
    # =========================================================================

    def register(
        self,
        name: str,
        fn: TokenFunction,
        *,
        family: str = CUSTOM_FAMILY,
        signature: str | None = None,
        description: str = "",
    ) -> None:
        self.catalog.register(
            name, fn, family=family, signature=signature, description=description
        )

    def unregister(self, name: str) -> None:
        self.catalog.unregister(name)

    def list_functions(self, family: str | None = None) -> list[str]:
        return self.catalog.list_functions(family)

    def function_docs(self) -> dict[str, dict[str, FunctionDoc]]:
        return self.catalog.docs()


@lru_cache(maxsize=1)
def default_engine() -> TokenEngine:
    """Shared engine with default settings and the built-in catalog."""
    return TokenEngine()


def resolve_all(tree: dict[str, Any]) -> dict[str, Any]:
    """Resolve a token tree with the default engine."""
    return default_engine().resolve_all(tree)


def resolve_one(value: Any, tree: dict[str, Any] | None = None) -> Any:
    """Resolve one value with the default engine."""
    return default_engine().resolve_one(value, tree)
