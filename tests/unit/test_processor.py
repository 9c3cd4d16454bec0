"""Tests for the expression processor."""

from __future__ import annotations

import logging

import pytest

from tokensmith.core.diagnostics import DiagnosticKind
from tokensmith.core.processor import ExpressionProcessor
from tokensmith.functions import color

TREE = {
    "color": {
        "brand": {"$value": "#6366f1"},
        "ref": {"$value": "{color.brand}"},
    },
    "space": {"base": {"$value": "1rem"}},
    "shadow": {"card": {"$value": {"x": "0", "y": "2px"}}},
    "size": {"count": {"$value": 4}},
}


def kinds(diagnostics):
    return [d.kind for d in diagnostics]


class TestPlainValues:
    def test_non_string_unchanged(self, processor):
        assert processor.resolve(42, TREE) == 42
        assert processor.resolve(None, TREE) is None

    def test_literal_unchanged(self, processor):
        assert processor.resolve("#ff0000", TREE) == "#ff0000"

    def test_references_in_text(self, processor):
        assert processor.resolve("1px solid {color.ref}", TREE) == "1px solid #6366f1"

    def test_number_reference(self, processor):
        assert processor.resolve("multiply(2px, {size.count})", TREE) == "8px"

    def test_alias_of_structured_value_is_copied(self, processor):
        resolved = processor.resolve("{shadow.card}", TREE)
        assert resolved == {"x": "0", "y": "2px"}
        resolved["x"] = "changed"
        assert TREE["shadow"]["card"]["$value"]["x"] == "0"

    def test_alias_of_number_keeps_type(self, processor):
        assert processor.resolve("{size.count}", TREE) == 4


class TestFunctionCalls:
    def test_references_in_arguments(self, processor):
        assert processor.resolve("tint({color.brand}, 80%)", TREE) == color.tint("#6366f1", "80%")

    def test_nested_calls(self, processor):
        expected = color.tint(color.shade("#6366f1", "20%"), "50%")
        assert processor.resolve("tint(shade({color.brand}, 20%), 50%)", TREE) == expected

    def test_nested_math(self, processor):
        assert processor.resolve("add(multiply({space.base}, 2), 8px)", TREE) == "2.5rem"

    def test_structured_result(self, processor):
        scale = processor.resolve("colorScale({color.brand}, 5)", TREE)
        assert list(scale) == ["step1", "step2", "step3", "step4", "step5"]

    def test_functions_disabled(self, processor):
        assert (
            processor.resolve("tint({color.brand}, 80%)", TREE, functions=False)
            == "tint(#6366f1, 80%)"
        )

    def test_evaluate_non_call(self, processor):
        assert processor.evaluate("#fff", TREE) == "#fff"


class TestPassThrough:
    @pytest.mark.parametrize(
        "expression",
        [
            "rgb(10, 20, 30)",
            "calc(100% - 2rem)",
            "var(--brand)",
            "clamp(1rem, 2vw + 1rem, 2rem)",
            "min(100%, 60ch)",
        ],
    )
    def test_css_functions_untouched(self, processor, expression):
        diagnostics = []
        assert processor.resolve(expression, TREE, diagnostics=diagnostics) == expression
        assert diagnostics == []

    def test_catalog_clamp_still_evaluates_dimensions(self, processor):
        assert processor.resolve("clamp(3rem, 1rem, 2rem)", TREE) == "2rem"

    def test_nested_calls_inside_css_min_are_evaluated(self, processor):
        diagnostics = []
        result = processor.resolve("min(100%, add(1rem, 8px))", TREE, diagnostics=diagnostics)
        assert result == "min(100%, 1.5rem)"
        assert diagnostics == []

    def test_nested_calls_inside_unknown_css_function(self, processor):
        assert processor.resolve("rgb(multiply(2, 5), 20, 30)", TREE) == "rgb(10, 20, 30)"

    def test_css_spacing_kept_when_nothing_evaluated(self, processor):
        assert processor.resolve("rgb(10,20,30)", TREE) == "rgb(10,20,30)"

    def test_fluid_type_output_is_stable(self, processor):
        fluid = processor.resolve("fluidType(1rem, 2rem)", TREE)
        diagnostics = []
        assert processor.resolve(fluid, TREE, diagnostics=diagnostics) == fluid
        assert diagnostics == []


class TestFailures:
    def test_unknown_function(self, processor):
        diagnostics = []
        assert processor.resolve("sparkle(#fff)", TREE, diagnostics=diagnostics) == "sparkle(#fff)"
        assert kinds(diagnostics) == [DiagnosticKind.UNKNOWN_FUNCTION]

    def test_function_error_logged(self, processor, caplog):
        diagnostics = []
        with caplog.at_level(logging.WARNING, logger="tokensmith"):
            result = processor.resolve(
                "divide(1rem, 0)", TREE, diagnostics=diagnostics, path="space.bad"
            )
        assert result == "divide(1rem, 0)"
        assert kinds(diagnostics) == [DiagnosticKind.FUNCTION_ERROR]
        assert diagnostics[0].path == "space.bad"
        assert "Error evaluating divide()" in caplog.text

    def test_invalid_color(self, processor):
        diagnostics = []
        assert processor.resolve("tint(nope, 10%)", TREE, diagnostics=diagnostics) == "tint(nope, 10%)"
        assert kinds(diagnostics) == [DiagnosticKind.FUNCTION_ERROR]

    def test_failed_inner_call_stays_textual(self, processor):
        diagnostics = []
        result = processor.resolve("tint(shade(nope, 10%), 10%)", TREE, diagnostics=diagnostics)
        assert result == "tint(shade(nope, 10%), 10%)"
        assert kinds(diagnostics) == [DiagnosticKind.FUNCTION_ERROR] * 2

    def test_any_exception_is_contained(self, catalog):
        def explode(value):
            raise RuntimeError("kaboom")

        catalog.register("explode", explode)
        diagnostics = []
        result = ExpressionProcessor(catalog).resolve("explode(1)", {}, diagnostics=diagnostics)
        assert result == "explode(1)"
        assert "kaboom" in diagnostics[0].message

    def test_unresolved_reference_in_argument(self, processor):
        diagnostics = []
        result = processor.resolve("tint({color.missing}, 80%)", TREE, diagnostics=diagnostics)
        assert result == "tint({color.missing}, 80%)"
        assert DiagnosticKind.UNRESOLVED_REFERENCE in kinds(diagnostics)
        assert DiagnosticKind.FUNCTION_ERROR in kinds(diagnostics)

    def test_recursive_call(self, processor):
        diagnostics = []
        result = processor.evaluate(
            "multiply(2px, 2)", TREE, stack=["multiply(2px,2)"], diagnostics=diagnostics
        )
        assert result == "multiply(2px, 2)"
        assert kinds(diagnostics) == [DiagnosticKind.RECURSIVE_CALL]

    def test_mutually_referencing_calls_terminate(self, processor):
        tree = {"a": {"$value": "tint({b}, 10%)"}, "b": {"$value": "shade({a}, 10%)"}}
        diagnostics = []
        result = processor.resolve("tint({b}, 10%)", tree, diagnostics=diagnostics)
        assert result == "tint(shade(tint({b}, 10%), 10%), 10%)"
        assert DiagnosticKind.REFERENCE_CYCLE in kinds(diagnostics)

    def test_evaluate_guards_mutual_references(self, processor):
        tree = {"a": {"$value": "tint({b}, 10%)"}, "b": {"$value": "shade({a}, 10%)"}}
        diagnostics = []
        result = processor.evaluate("mix({a}, {b})", tree, diagnostics=diagnostics)
        assert result == "mix({a}, {b})"
        assert DiagnosticKind.REFERENCE_CYCLE in kinds(diagnostics)

    def test_stack_is_restored(self, processor):
        stack = []
        processor.evaluate("tint(shade(#6366f1, 10%), 10%)", TREE, stack=stack)
        assert stack == []

    def test_repeated_sibling_calls_are_not_recursion(self, processor):
        diagnostics = []
        result = processor.resolve("mix(tint(#000, 50%), tint(#000, 50%))", TREE, diagnostics=diagnostics)
        assert result.startswith("#")
        assert diagnostics == []
