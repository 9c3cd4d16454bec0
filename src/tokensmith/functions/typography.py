"""
Typography functions: fluid clamps, modular scales and text metrics.

Sizes are converted to pixels for the arithmetic and emitted in rem so the
output respects user font size preferences.
"""

from __future__ import annotations

import math

from tokensmith.core.errors import InvalidValueError
from tokensmith.core.settings import UnitSettings
from tokensmith.core.value_parser import (
    format_dimension,
    format_number,
    parse_number,
    require_dimension,
    round_half_up,
)
from tokensmith.functions.arithmetic import DEFAULT_UNITS, to_px

# =============================================================================
# Scale ratios
# =============================================================================

SCALE_RATIOS: dict[str, float] = {
    "minorSecond": 1.067,
    "majorSecond": 1.125,
    "minorThird": 1.2,
    "majorThird": 1.25,
    "perfectFourth": 1.333,
    "augmentedFourth": 1.414,
    "perfectFifth": 1.5,
    "minorSixth": 1.6,
    "goldenRatio": 1.618,
    "majorSixth": 1.667,
    "minorSeventh": 1.778,
    "majorSeventh": 1.875,
    "octave": 2.0,
}

_RATIO_LOOKUP = {name.lower(): value for name, value in SCALE_RATIOS.items()}

TYPE_SCALE_NAMES: dict[int, str] = {
    -4: "3xs",
    -3: "2xs",
    -2: "xs",
    -1: "sm",
    0: "base",
    1: "lg",
    2: "xl",
    3: "2xl",
    4: "3xl",
    5: "4xl",
    6: "5xl",
    7: "6xl",
    8: "7xl",
}

# Breakpoints used by responsiveType()
MOBILE_VIEWPORT = "320px"
TABLET_VIEWPORT = "768px"
DESKTOP_VIEWPORT = "1280px"


def resolve_ratio(ratio: str) -> float:
    """Turn a named ratio (``majorThird``, ``major_third``) or a number into a float."""
    key = str(ratio).strip().replace("_", "").replace("-", "").lower()
    if key in _RATIO_LOOKUP:
        return _RATIO_LOOKUP[key]
    value = parse_number(ratio)
    if value <= 0:
        raise InvalidValueError(f"Scale ratio must be positive, got {ratio!r}")
    return value


def _whole(value: str, what: str) -> int:
    number = parse_number(value)
    if not number.is_integer():
        raise InvalidValueError(f"{what} must be a whole number, got {value!r}")
    return int(number)


# =============================================================================
# Fluid sizing
# =============================================================================


def fluid_type(
    min_size: str,
    max_size: str,
    min_viewport: str | None = None,
    max_viewport: str | None = None,
    *,
    units: UnitSettings = DEFAULT_UNITS,
) -> str:
    """
    Build a CSS ``clamp()`` that scales linearly between two viewport widths.

    The preferred value is the line through (min_viewport, min_size) and
    (max_viewport, max_size), written as ``<slope>vw ± <intercept>rem``.

    Args:
        min_size: Size at and below ``min_viewport``.
        max_size: Size at and above ``max_viewport``.
        min_viewport: Lower viewport width (defaults to the configured one).
        max_viewport: Upper viewport width (defaults to the configured one).
        units: Unit settings (base font size and default viewports).

    Returns:
        e.g. ``clamp(1rem, 1.6667vw + 0.6667rem, 2rem)``
    """
    base = units.base_font_size_px
    min_px = to_px(min_size, "fluidType", units)
    max_px = to_px(max_size, "fluidType", units)
    min_vp = to_px(min_viewport or units.min_viewport, "fluidType", units)
    max_vp = to_px(max_viewport or units.max_viewport, "fluidType", units)

    if max_vp == min_vp:
        raise InvalidValueError("fluidType viewports must differ")

    slope = (max_px - min_px) / (max_vp - min_vp)
    intercept = min_px - slope * min_vp

    slope_vw = format_number(slope * 100)
    intercept_rem = round_half_up(intercept / base, 4)
    sign = "-" if intercept_rem < 0 else "+"
    preferred = f"{slope_vw}vw {sign} {format_number(abs(intercept_rem))}rem"

    return (
        f"clamp({format_dimension(min_px / base, 'rem')}, "
        f"{preferred}, "
        f"{format_dimension(max_px / base, 'rem')})"
    )


def fluid_space(
    min_space: str,
    max_space: str,
    min_viewport: str | None = None,
    max_viewport: str | None = None,
    *,
    units: UnitSettings = DEFAULT_UNITS,
) -> str:
    """Fluid spacing; same interpolation as fluid_type()."""
    return fluid_type(min_space, max_space, min_viewport, max_viewport, units=units)


def responsive_type(
    min_size: str, mid_size: str, max_size: str, *, units: UnitSettings = DEFAULT_UNITS
) -> dict[str, str]:
    """Sizes per breakpoint plus fluid clamps between each pair."""
    return {
        "mobile": min_size,
        "tablet": mid_size,
        "desktop": max_size,
        "fluidMobileTablet": fluid_type(
            min_size, mid_size, MOBILE_VIEWPORT, TABLET_VIEWPORT, units=units
        ),
        "fluidTabletDesktop": fluid_type(
            mid_size, max_size, TABLET_VIEWPORT, DESKTOP_VIEWPORT, units=units
        ),
        "fluidFull": fluid_type(
            min_size, max_size, MOBILE_VIEWPORT, DESKTOP_VIEWPORT, units=units
        ),
    }


# =============================================================================
# Modular scale
# =============================================================================


def modular_scale(base: str, step: str, ratio: str = "majorThird") -> str:
    """``base * ratio ** step``; negative steps scale down. Unitless bases get rem."""
    dim = require_dimension(base)
    scaled = dim.value * resolve_ratio(ratio) ** _whole(step, "Scale step")
    return format_dimension(scaled, dim.unit or "rem")


def type_scale(base: str, ratio: str = "majorThird", steps: str = "4") -> dict[str, str]:
    """Named sizes from up to four steps below ``base`` to ``steps`` above it.

    Steps map to ``3xs`` ... ``base`` ... ``7xl``; steps beyond 8 are named
    ``stepN``.
    """
    count = _whole(steps, "Type scale steps")
    if count < 0:
        raise InvalidValueError(f"Type scale steps must not be negative, got {steps!r}")

    scale: dict[str, str] = {}
    for step in range(-min(count, 4), count + 1):
        name = TYPE_SCALE_NAMES.get(step, f"step{step}")
        scale[name] = modular_scale(base, str(step), ratio)
    return scale


# =============================================================================
# Text metrics
# =============================================================================


def line_height(
    font_size: str, base_line_height: str = "1.5", *, units: UnitSettings = DEFAULT_UNITS
) -> str:
    """Unitless line height that tightens as text grows, kept within 1.2-2."""
    size_px = to_px(font_size, "lineHeight", units)
    adjusted = parse_number(base_line_height) - (size_px - 16) * 0.01
    return format_number(max(1.2, min(2.0, adjusted)), 2)


def optimal_measure(font_size: str, *, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Comfortable line length in ``ch``: 65 at 16px, within 45-85."""
    size_px = to_px(font_size, "optimalMeasure", units)
    chars = max(45.0, min(85.0, 65 + (size_px - 16) * 0.5))
    return f"{math.floor(chars + 0.5)}ch"


def letter_spacing(font_size: str, *, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Tracking in ``em``: looser for small text, tighter for display sizes."""
    size_px = to_px(font_size, "letterSpacing", units)
    tracking = max(-0.05, min(0.1, 0.08 - size_px * 0.002))
    return format_dimension(tracking, "em", 3)
