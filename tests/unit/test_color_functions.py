"""Tests for the color function family."""

from __future__ import annotations

import re

import pytest

from tokensmith.core.errors import InvalidColorError, InvalidValueError
from tokensmith.functions import color
from tokensmith.functions.colorspace import parse_color, to_oklch

HEX_RE = re.compile(r"#[0-9a-f]{6}")

BRAND = "#6366f1"
EMERALD = "#10b981"


def lightness(value: str) -> float:
    return to_oklch(value).l


class TestTintShade:
    def test_tint_lightens(self):
        result = color.tint(BRAND, "50%")
        assert HEX_RE.fullmatch(result)
        assert lightness(result) > lightness(BRAND)

    def test_tint_full_is_white(self):
        assert color.tint("#000000", "100%") == "#ffffff"

    def test_tint_zero_is_identity(self):
        assert color.tint(BRAND, "0%") == BRAND

    def test_tint_80_is_near_white(self):
        result = color.tint(BRAND, "80%")
        rgb = parse_color(result)
        assert min(rgb.r, rgb.g, rgb.b) * 255 >= 200

    def test_shade_darkens(self):
        result = color.shade(BRAND, "30%")
        assert HEX_RE.fullmatch(result)
        assert lightness(result) < lightness(BRAND)

    def test_shade_full_is_black(self):
        assert color.shade("#ffffff", "100%") == "#000000"

    def test_fraction_amounts(self):
        assert color.tint(BRAND, "0.5") == color.tint(BRAND, "50%")

    def test_order_matters(self):
        tinted_shade = color.tint(color.shade("#ff0000", "20%"), "50%")
        shaded_tint = color.shade(color.tint("#ff0000", "50%"), "20%")
        assert HEX_RE.fullmatch(tinted_shade)
        assert tinted_shade != shaded_tint

    def test_invalid_color(self):
        with pytest.raises(InvalidColorError):
            color.tint("blurple", "10%")

    def test_invalid_amount(self):
        with pytest.raises(InvalidValueError):
            color.shade(BRAND, "some")


class TestMix:
    def test_identity_at_zero(self):
        assert color.mix(BRAND, EMERALD, "0") == BRAND

    def test_identity_at_one(self):
        assert color.mix(BRAND, EMERALD, "1") == EMERALD

    def test_endpoint_returned_as_written(self):
        assert color.mix("#6366F1", EMERALD, "0") == "#6366F1"
        assert color.mix(BRAND, " #10B981 ", "1") == "#10B981"

    def test_short_endpoint_normalised(self):
        assert color.mix("#F00", "#00f", "0") == "#ff0000"
        assert color.mix("red", "#00f", "1") == "#0000ff"

    def test_ratio_is_clamped(self):
        assert color.mix(BRAND, EMERALD, "1.5") == EMERALD
        assert color.mix(BRAND, EMERALD, "-2") == BRAND

    @pytest.mark.parametrize("ratio", ["0.1", "25%", "0.5", "0.75", "0.999"])
    def test_always_hex(self, ratio):
        assert HEX_RE.fullmatch(color.mix(BRAND, EMERALD, ratio))

    def test_black_white_midpoint(self):
        # OKLab L 0.5 is sRGB 99
        assert color.mix("#000000", "#ffffff") == "#636363"

    def test_achromatic_endpoint_keeps_hue(self):
        mixed = to_oklch(color.mix("#ffffff", BRAND, "0.5"))
        assert mixed.h == pytest.approx(to_oklch(BRAND).h, abs=2.0)


class TestAdjust:
    def test_zero_adjustment_is_identity(self):
        assert color.adjust("#808080", "{ l: 0, c: 0, h: 0 }") == "#808080"

    def test_lightness_in_hundredths(self):
        result = color.adjust("#808080", "{ l: 10 }")
        assert lightness(result) == pytest.approx(lightness("#808080") + 0.1, abs=0.005)

    def test_long_names(self):
        assert color.adjust(BRAND, "{ lightness: -10 }") == color.adjust(BRAND, "{ l: -10 }")

    def test_hue_wraps(self):
        result = to_oklch(color.adjust(BRAND, "{ h: 360 }"))
        assert result.h == pytest.approx(to_oklch(BRAND).h, abs=0.5)

    def test_requires_object(self):
        with pytest.raises(InvalidValueError):
            color.adjust(BRAND, "10")


class TestAlpha:
    def test_rgba_output(self):
        assert color.alpha("#ff0000", "50%") == "rgba(255, 0, 0, 0.5)"

    def test_fraction(self):
        assert color.alpha("#000000", "0.25") == "rgba(0, 0, 0, 0.25)"

    def test_clamped(self):
        assert color.alpha("#ffffff", "2") == "rgba(255, 255, 255, 1)"


class TestHueAndChroma:
    def test_complement_rotates_hue(self):
        original = to_oklch(BRAND)
        result = to_oklch(color.complement(BRAND))
        delta = abs((result.h - original.h) % 360 - 180)
        assert delta < 5.0

    def test_grey_complement_is_grey(self):
        assert color.complement("#808080") == "#808080"

    def test_saturate_increases_chroma(self):
        muted = "#7a7ab8"
        assert to_oklch(color.saturate(muted, "50%")).c > to_oklch(muted).c

    def test_desaturate_full_is_grayscale(self):
        assert color.desaturate(BRAND, "100%") == color.grayscale(BRAND)

    def test_grayscale_has_no_chroma(self):
        assert to_oklch(color.grayscale(BRAND)).c < 0.001

    def test_hue_rotate_grey_unchanged(self):
        assert color.hue_rotate("#808080", "90deg") == "#808080"

    def test_hue_rotate_full_turn(self):
        assert color.hue_rotate(BRAND, "360") == BRAND

    def test_invert_black(self):
        assert color.invert("#000000") == "#ffffff"


class TestLightenDarken:
    def test_lighten_is_absolute(self):
        result = color.lighten("#000000", "50%")
        assert lightness(result) == pytest.approx(0.5, abs=0.005)

    def test_darken_to_black(self):
        assert color.darken("#ffffff", "100%") == "#000000"

    def test_lighten_caps_at_white(self):
        assert color.lighten("#808080", "100%") == "#ffffff"


class TestDarkMode:
    def test_light_becomes_dark(self):
        assert lightness(color.dark_mode("#ffffff")) == pytest.approx(0.1, abs=0.01)

    def test_dark_becomes_light(self):
        assert lightness(color.dark_mode("#000000")) == pytest.approx(0.6, abs=0.01)

    def test_chroma_reduced_by_default(self):
        assert to_oklch(color.dark_mode(BRAND)).c < to_oklch(BRAND).c

    def test_preserve_hue_false_rotates(self):
        kept = to_oklch(color.dark_mode(BRAND))
        rotated = to_oklch(color.dark_mode(BRAND, "{ preserveHue: false }"))
        delta = abs((rotated.h - kept.h) % 360 - 180)
        assert delta < 10.0


class TestColorScale:
    def test_default_twelve_steps(self):
        scale = color.color_scale(BRAND)
        assert list(scale) == [f"step{i}" for i in range(1, 13)]
        assert all(HEX_RE.fullmatch(v) for v in scale.values())

    def test_light_to_dark(self):
        scale = color.color_scale(BRAND, "5")
        values = [lightness(v) for v in scale.values()]
        assert values == sorted(values, reverse=True)
        assert values[0] == pytest.approx(0.97, abs=0.01)

    @pytest.mark.parametrize("steps", ["1", "2.5", "many"])
    def test_invalid_steps(self, steps):
        with pytest.raises(InvalidValueError):
            color.color_scale(BRAND, steps)


class TestToOklch:
    def test_black(self):
        assert color.to_oklch_css("#000000") == "oklch(0.000 0.0000 none)"

    def test_red(self):
        assert color.to_oklch_css("#ff0000") == "oklch(0.628 0.2577 29.2)"
