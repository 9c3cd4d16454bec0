"""Tests for the typography function family."""

from __future__ import annotations

import re

import pytest

from tokensmith.core.errors import IncompatibleUnitsError, InvalidValueError
from tokensmith.core.settings import UnitSettings
from tokensmith.functions import typography

CLAMP_RE = re.compile(r"clamp\((\S+)rem, (\S+)vw ([+-]) (\S+)rem, (\S+)rem\)")


class TestFluidType:
    def test_rem_sizes(self):
        assert typography.fluid_type("1rem", "2rem") == "clamp(1rem, 1.6667vw + 0.6667rem, 2rem)"

    def test_shape_and_positive_slope(self):
        match = CLAMP_RE.fullmatch(typography.fluid_type("1rem", "2rem"))
        assert match is not None
        assert float(match.group(2)) > 0

    def test_px_sizes(self):
        assert (
            typography.fluid_type("16px", "24px", "320px", "1280px")
            == "clamp(1rem, 0.8333vw + 0.8333rem, 1.5rem)"
        )

    def test_negative_intercept(self):
        assert (
            typography.fluid_type("1rem", "4rem", "320px", "640px")
            == "clamp(1rem, 15vw - 2rem, 4rem)"
        )

    def test_configured_viewports(self):
        units = UnitSettings(min_viewport="400px", max_viewport="1200px")
        assert typography.fluid_type("16px", "32px", units=units) == (
            "clamp(1rem, 2vw + 0.5rem, 2rem)"
        )

    def test_equal_viewports(self):
        with pytest.raises(InvalidValueError):
            typography.fluid_type("1rem", "2rem", "800px", "800px")

    def test_unconvertible_unit(self):
        with pytest.raises(IncompatibleUnitsError):
            typography.fluid_type("1rem", "5vw")

    def test_fluid_space_matches(self):
        assert typography.fluid_space("1rem", "2rem") == typography.fluid_type("1rem", "2rem")


class TestModularScale:
    def test_named_ratio(self):
        assert typography.modular_scale("1rem", "2", "majorThird") == "1.5625rem"

    def test_negative_step(self):
        assert typography.modular_scale("16px", "-1", "octave") == "8px"

    def test_numeric_ratio(self):
        assert typography.modular_scale("1", "1", "1.5") == "1.5rem"

    def test_snake_case_alias(self):
        assert typography.modular_scale("1rem", "1", "golden_ratio") == "1.618rem"

    def test_default_ratio(self):
        assert typography.modular_scale("1rem", "1") == "1.25rem"

    def test_unknown_ratio(self):
        with pytest.raises(InvalidValueError):
            typography.modular_scale("1rem", "1", "enormous")

    def test_fractional_step(self):
        with pytest.raises(InvalidValueError):
            typography.modular_scale("1rem", "1.5")


class TestTypeScale:
    def test_names(self):
        scale = typography.type_scale("1rem", "majorThird", "2")
        assert scale == {
            "xs": "0.64rem",
            "sm": "0.8rem",
            "base": "1rem",
            "lg": "1.25rem",
            "xl": "1.5625rem",
        }

    def test_default_steps(self):
        scale = typography.type_scale("1rem")
        assert list(scale) == ["3xs", "2xs", "xs", "sm", "base", "lg", "xl", "2xl", "3xl"]

    def test_beyond_named_steps(self):
        scale = typography.type_scale("1rem", "octave", "9")
        assert scale["step9"] == "512rem"
        assert "3xs" in scale and "step-5" not in scale


class TestTextMetrics:
    @pytest.mark.parametrize(
        "size,expected", [("16px", "1.5"), ("2rem", "1.34"), ("48px", "1.2"), ("4px", "1.62")]
    )
    def test_line_height(self, size, expected):
        assert typography.line_height(size) == expected

    def test_line_height_custom_base(self):
        assert typography.line_height("16px", "1.8") == "1.8"

    @pytest.mark.parametrize(
        "size,expected", [("16px", "65ch"), ("1rem", "65ch"), ("56px", "85ch"), ("8px", "61ch")]
    )
    def test_optimal_measure(self, size, expected):
        assert typography.optimal_measure(size) == expected

    @pytest.mark.parametrize(
        "size,expected", [("16px", "0.048em"), ("48px", "-0.016em"), ("100px", "-0.05em")]
    )
    def test_letter_spacing(self, size, expected):
        assert typography.letter_spacing(size) == expected

    def test_base_font_size_applies(self):
        units = UnitSettings(base_font_size_px=20)
        assert typography.optimal_measure("1rem", units=units) == "67ch"


class TestResponsiveType:
    def test_keys_and_sizes(self):
        result = typography.responsive_type("1rem", "1.5rem", "2rem")
        assert list(result) == [
            "mobile",
            "tablet",
            "desktop",
            "fluidMobileTablet",
            "fluidTabletDesktop",
            "fluidFull",
        ]
        assert result["mobile"] == "1rem"
        assert result["fluidFull"] == typography.fluid_type("1rem", "2rem", "320px", "1280px")
        assert result["fluidMobileTablet"].startswith("clamp(1rem, ")
