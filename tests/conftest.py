"""Shared pytest fixtures for tokensmith tests."""

from __future__ import annotations

from typing import Any

import pytest

from tokensmith.core.catalog import FunctionCatalog
from tokensmith.core.engine import TokenEngine
from tokensmith.core.processor import ExpressionProcessor
from tokensmith.functions import build_default_catalog


@pytest.fixture
def catalog() -> FunctionCatalog:
    """A fresh default catalog; safe to mutate."""
    return build_default_catalog()


@pytest.fixture
def processor(catalog: FunctionCatalog) -> ExpressionProcessor:
    return ExpressionProcessor(catalog)


@pytest.fixture
def engine() -> TokenEngine:
    return TokenEngine()


@pytest.fixture
def token_tree() -> dict[str, Any]:
    """A small DTCG token tree exercising references and every family."""
    return {
        "$description": "Example tokens",
        "color": {
            "$type": "color",
            "brand": {"$value": "#6366f1"},
            "light": {"$value": "tint({color.brand}, 80%)"},
            "dark": {"$value": "shade({color.brand}, 40%)"},
            "text": {"$value": "accessibleText({color.brand})"},
            "border": {"$value": "1px solid {color.brand}"},
        },
        "space": {
            "base": {"$value": "1rem", "$type": "dimension"},
            "lg": {"$value": "multiply({space.base}, 2)"},
            "gutter": {"$value": "add({space.base}, 8px)"},
        },
        "font": {
            "body": {"$value": "fluidType(1rem, 1.25rem)"},
        },
        "shadow": {
            "card": {"$value": {"x": "0", "y": "2px", "blur": "4px", "color": "#0000001a"}},
            "alias": {"$value": "{shadow.card}"},
        },
    }
