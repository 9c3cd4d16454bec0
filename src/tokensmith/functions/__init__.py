"""
Built-in token functions.

Four families are registered under their expression names:

- color: OKLCH color manipulation
- contrast: WCAG contrast and accessibility checks
- typography: fluid clamps, modular scales, text metrics
- math: unit-aware dimension arithmetic
"""

from __future__ import annotations

from functools import partial

from tokensmith.core.catalog import FunctionCatalog, TokenFunction
from tokensmith.core.settings import DEFAULT_SETTINGS, TokensmithSettings
from tokensmith.functions import arithmetic, color, contrast, typography

COLOR = "color"
CONTRAST = "contrast"
TYPOGRAPHY = "typography"
MATH = "math"

FAMILIES = (COLOR, CONTRAST, TYPOGRAPHY, MATH)

# (name, function, signature, description)
_Entry = tuple[str, TokenFunction, str, str]

_COLOR_FUNCTIONS: list[_Entry] = [
    ("tint", color.tint, "tint(color, amount%)", "Lighten toward white in OKLCH"),
    ("shade", color.shade, "shade(color, amount%)", "Darken toward black in OKLCH"),
    ("mix", color.mix, "mix(color1, color2, ratio)", "Blend two colors in OKLCH"),
    ("adjust", color.adjust, "adjust(color, {l, c, h})", "Shift OKLCH lightness, chroma and hue"),
    ("alpha", color.alpha, "alpha(color, opacity)", "Set transparency (rgba output)"),
    ("complement", color.complement, "complement(color)", "180 degree hue shift"),
    ("saturate", color.saturate, "saturate(color, amount%)", "Increase chroma"),
    ("desaturate", color.desaturate, "desaturate(color, amount%)", "Decrease chroma"),
    ("invert", color.invert, "invert(color)", "Invert lightness"),
    ("grayscale", color.grayscale, "grayscale(color)", "Remove chroma"),
    (
        "darkMode",
        color.dark_mode,
        "darkMode(color, {chromaAdjust, preserveHue})",
        "Dark theme variant",
    ),
    ("colorScale", color.color_scale, "colorScale(color, steps)", "Generate an N-step scale"),
    ("lighten", color.lighten, "lighten(color, amount%)", "Add lightness"),
    ("darken", color.darken, "darken(color, amount%)", "Reduce lightness"),
    ("hueRotate", color.hue_rotate, "hueRotate(color, degrees)", "Rotate hue"),
    ("toOklch", color.to_oklch_css, "toOklch(color)", "Express a color as CSS oklch()"),
]

_CONTRAST_FUNCTIONS: list[_Entry] = [
    ("contrastRatio", contrast.contrast_ratio, "contrastRatio(fg, bg)", "WCAG contrast ratio"),
    (
        "meetsContrast",
        contrast.meets_contrast,
        "meetsContrast(fg, bg, level)",
        "Check AA/AAA compliance",
    ),
    (
        "accessibleText",
        contrast.accessible_text,
        "accessibleText(bg, preferLight)",
        "Black or white text for a background",
    ),
    (
        "ensureContrast",
        contrast.ensure_contrast,
        "ensureContrast(color, against, min)",
        "Adjust lightness to meet a contrast ratio",
    ),
    ("luminance", contrast.luminance, "luminance(color)", "Perceptual lightness (0-1)"),
    ("isLight", contrast.is_light, "isLight(color)", "Check if light (L > 0.5)"),
    ("isDark", contrast.is_dark, "isDark(color)", "Check if dark (L <= 0.5)"),
    (
        "accessiblePair",
        contrast.accessible_pair,
        "accessiblePair(color, level)",
        "Background and text pair",
    ),
]


def _typography_functions(settings: TokensmithSettings) -> list[_Entry]:
    units = settings.units
    return [
        (
            "fluidType",
            partial(typography.fluid_type, units=units),
            "fluidType(min, max, minVp, maxVp)",
            "CSS clamp() for fluid type",
        ),
        (
            "modularScale",
            typography.modular_scale,
            "modularScale(base, step, ratio)",
            "Scale by ratio^step",
        ),
        ("typeScale", typography.type_scale, "typeScale(base, ratio, steps)", "Full type scale"),
        (
            "fluidSpace",
            partial(typography.fluid_space, units=units),
            "fluidSpace(min, max, minVp, maxVp)",
            "Fluid spacing clamp",
        ),
        (
            "lineHeight",
            partial(typography.line_height, units=units),
            "lineHeight(fontSize, base)",
            "Line height for a font size",
        ),
        (
            "optimalMeasure",
            partial(typography.optimal_measure, units=units),
            "optimalMeasure(fontSize)",
            "Optimal line length in ch",
        ),
        (
            "responsiveType",
            partial(typography.responsive_type, units=units),
            "responsiveType(mobile, tablet, desktop)",
            "Breakpoint sizes and fluid clamps",
        ),
        (
            "letterSpacing",
            partial(typography.letter_spacing, units=units),
            "letterSpacing(fontSize)",
            "Tracking for a font size",
        ),
    ]


def _math_functions(settings: TokensmithSettings) -> list[_Entry]:
    units = settings.units
    return [
        ("multiply", arithmetic.multiply, "multiply(value, factor)", "Multiply dimension"),
        (
            "divide",
            partial(arithmetic.divide, units=units),
            "divide(value, divisor)",
            "Divide dimension",
        ),
        ("add", partial(arithmetic.add, units=units), "add(val1, val2)", "Add dimensions"),
        (
            "subtract",
            partial(arithmetic.subtract, units=units),
            "subtract(val1, val2)",
            "Subtract dimensions",
        ),
        ("round", arithmetic.round_, "round(value, precision)", "Round to decimals"),
        ("floor", arithmetic.floor, "floor(value, precision)", "Round down"),
        ("ceil", arithmetic.ceil, "ceil(value, precision)", "Round up"),
        ("min", partial(arithmetic.min_, units=units), "min(val1, val2, ...)", "Smallest value"),
        ("max", partial(arithmetic.max_, units=units), "max(val1, val2, ...)", "Largest value"),
        (
            "clamp",
            partial(arithmetic.clamp, units=units),
            "clamp(value, min, max)",
            "Clamp between bounds",
        ),
        (
            "convert",
            partial(arithmetic.convert, units=units),
            "convert(value, toUnit, base)",
            "Unit conversion",
        ),
        ("mod", arithmetic.mod, "mod(value, divisor)", "Remainder"),
        ("abs", arithmetic.abs_, "abs(value)", "Absolute value"),
        ("negate", arithmetic.negate, "negate(value)", "Negate value"),
        ("percent", arithmetic.percent, "percent(value, pct)", "Percentage of value"),
    ]


def register_family(
    catalog: FunctionCatalog, family: str, entries: list[_Entry]
) -> FunctionCatalog:
    for name, fn, signature, description in entries:
        catalog.register(name, fn, family=family, signature=signature, description=description)
    return catalog


def build_default_catalog(settings: TokensmithSettings | None = None) -> FunctionCatalog:
    """
    Create a catalog holding every built-in function.

    Args:
        settings: Settings whose unit context is bound into the typography
            and math functions (defaults when omitted)

    Returns:
        A new, independent FunctionCatalog
    """
    settings = settings or DEFAULT_SETTINGS
    catalog = FunctionCatalog()
    register_family(catalog, COLOR, _COLOR_FUNCTIONS)
    register_family(catalog, CONTRAST, _CONTRAST_FUNCTIONS)
    register_family(catalog, TYPOGRAPHY, _typography_functions(settings))
    register_family(catalog, MATH, _math_functions(settings))
    return catalog


__all__ = [
    "COLOR",
    "CONTRAST",
    "FAMILIES",
    "MATH",
    "TYPOGRAPHY",
    "build_default_catalog",
    "register_family",
]
