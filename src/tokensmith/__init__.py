"""
tokensmith - a design token expression engine.

Resolves ``{dot.path}`` references and ``name(args)`` function calls in
W3C-style design token trees: OKLCH color manipulation, WCAG contrast,
fluid typography and unit-aware math.
"""

from __future__ import annotations

from ._version import get_version
from .core.catalog import FunctionCatalog, FunctionDoc
from .core.diagnostics import Diagnostic, DiagnosticKind
from .core.engine import ResolutionReport, TokenEngine, resolve_all, resolve_one
from .core.errors import (
    CatalogError,
    SettingsError,
    TokenFunctionError,
    TokensmithError,
    TokenTreeError,
)
from .core.settings import TokensmithSettings, UnitSettings, load_settings
from .functions import build_default_catalog

__version__ = get_version()

__all__ = [
    "__version__",
    "CatalogError",
    "Diagnostic",
    "DiagnosticKind",
    "FunctionCatalog",
    "FunctionDoc",
    "ResolutionReport",
    "SettingsError",
    "TokenEngine",
    "TokenFunctionError",
    "TokenTreeError",
    "TokensmithError",
    "TokensmithSettings",
    "UnitSettings",
    "build_default_catalog",
    "load_settings",
    "resolve_all",
    "resolve_one",
]
