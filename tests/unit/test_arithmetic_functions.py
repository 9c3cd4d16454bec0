"""Tests for the math function family."""

from __future__ import annotations

import pytest

from tokensmith.core.errors import (
    DivisionByZeroError,
    IncompatibleUnitsError,
    InvalidValueError,
    TokenFunctionError,
)
from tokensmith.core.settings import UnitSettings
from tokensmith.functions import arithmetic


class TestAddSubtract:
    def test_mixed_units_convert_to_first(self):
        assert arithmetic.add("1rem", "8px") == "1.5rem"
        assert arithmetic.add("8px", "1rem") == "24px"

    def test_subtract(self):
        assert arithmetic.subtract("2rem", "8px") == "1.5rem"
        assert arithmetic.subtract("10px", "15px") == "-5px"

    def test_unitless_operands(self):
        assert arithmetic.add("10px", "5") == "15px"
        assert arithmetic.add("5", "10px") == "15px"
        assert arithmetic.add("1", "2") == "3"

    def test_same_unknown_unit(self):
        assert arithmetic.add("2vw", "1vw") == "3vw"

    def test_incompatible_units(self):
        with pytest.raises(IncompatibleUnitsError) as exc_info:
            arithmetic.add("1rem", "2vw")
        assert "add()" in str(exc_info.value)

    def test_custom_base_font_size(self):
        units = UnitSettings(base_font_size_px=10)
        assert arithmetic.add("1rem", "5px", units=units) == "1.5rem"

    def test_absolute_units(self):
        assert arithmetic.add("1in", "96px") == "2in"
        assert arithmetic.add("12pt", "0px") == "12pt"

    def test_not_a_dimension(self):
        with pytest.raises(InvalidValueError):
            arithmetic.add("1vw + 1rem", "1rem")


class TestScaling:
    def test_multiply(self):
        assert arithmetic.multiply("1.5rem", "2") == "3rem"
        assert arithmetic.multiply("4px", "0.5") == "2px"

    def test_multiply_invalid(self):
        with pytest.raises(InvalidValueError):
            arithmetic.multiply("abc", "2")

    def test_divide(self):
        assert arithmetic.divide("10px", "4") == "2.5px"

    def test_divide_by_dimension_gives_ratio(self):
        assert arithmetic.divide("32px", "1rem") == "2"

    def test_divide_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            arithmetic.divide("1rem", "0")

    def test_division_by_zero_is_domain_error(self):
        with pytest.raises(TokenFunctionError):
            arithmetic.divide("1rem", "0px")
        with pytest.raises(ZeroDivisionError):
            arithmetic.divide("1rem", "0")

    def test_percent(self):
        assert arithmetic.percent("200px", "25%") == "50px"
        assert arithmetic.percent("200px", "25") == "50px"

    def test_mod(self):
        assert arithmetic.mod("10px", "3") == "1px"
        assert arithmetic.mod("-10px", "3") == "-1px"

    def test_mod_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            arithmetic.mod("1px", "0")

    def test_abs_and_negate(self):
        assert arithmetic.abs_("-4px") == "4px"
        assert arithmetic.negate("4px") == "-4px"
        assert arithmetic.negate("-1.5rem") == "1.5rem"


class TestRounding:
    def test_round_default_precision(self):
        assert arithmetic.round_("1.23456rem") == "1.23rem"

    def test_round_half_up(self):
        assert arithmetic.round_("2.5px", "0") == "3px"

    def test_floor_and_ceil(self):
        assert arithmetic.floor("1.7px") == "1px"
        assert arithmetic.ceil("1.2px") == "2px"
        assert arithmetic.ceil("1.234rem", "2") == "1.24rem"

    def test_precision_must_be_whole(self):
        with pytest.raises(InvalidValueError):
            arithmetic.round_("1px", "1.5")


class TestComparisons:
    def test_min_returns_original_unit(self):
        assert arithmetic.min_("1rem", "12px") == "12px"

    def test_max_variadic(self):
        assert arithmetic.max_("1rem", "12px", "2rem") == "2rem"

    def test_min_single(self):
        assert arithmetic.min_("3px") == "3px"

    def test_min_requires_value(self):
        with pytest.raises(InvalidValueError):
            arithmetic.min_()

    def test_css_min_not_evaluated(self):
        with pytest.raises(IncompatibleUnitsError):
            arithmetic.min_("100%", "60ch")

    @pytest.mark.parametrize(
        "value,expected", [("40px", "2rem"), ("8px", "1rem"), ("20px", "20px")]
    )
    def test_clamp(self, value, expected):
        assert arithmetic.clamp(value, "1rem", "2rem") == expected


class TestConvert:
    @pytest.mark.parametrize(
        "value,unit,expected",
        [
            ("24px", "rem", "1.5rem"),
            ("1in", "px", "96px"),
            ("1.5rem", "px", "24px"),
            ("12pt", "px", "16px"),
            ("16", "rem", "1rem"),
            ("2.54cm", "in", "1in"),
        ],
    )
    def test_conversions(self, value, unit, expected):
        assert arithmetic.convert(value, unit) == expected

    def test_explicit_base(self):
        assert arithmetic.convert("2rem", "px", "10") == "20px"

    def test_unknown_target(self):
        with pytest.raises(IncompatibleUnitsError):
            arithmetic.convert("1rem", "vw")

    def test_unknown_source(self):
        with pytest.raises(IncompatibleUnitsError):
            arithmetic.convert("50%", "px")
