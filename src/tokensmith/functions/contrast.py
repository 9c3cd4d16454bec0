"""
Contrast and accessibility functions (WCAG 2.x).

Token values are text, so numeric results are formatted numbers and
predicates return the strings ``"true"`` / ``"false"``.
"""

from __future__ import annotations

from dataclasses import replace

from tokensmith.core.value_parser import format_number, parse_number, round_half_up
from tokensmith.functions.colorspace import (
    RGB,
    clamp_chroma,
    format_hex,
    oklch_to_hex,
    parse_color,
    rgb_to_oklch,
    wcag_contrast,
)

WCAG_THRESHOLDS = {"AA": 4.5, "AAA": 7.0}

WHITE = "#ffffff"
BLACK = "#000000"

# ensure_contrast stops searching once this close to the target ratio
_CONTRAST_TOLERANCE = 0.1
_SEARCH_ITERATIONS = 20


def _bool_text(flag: bool) -> str:
    return "true" if flag else "false"


def _ratio(foreground: str, background: str) -> float:
    return round_half_up(wcag_contrast(parse_color(foreground), parse_color(background)), 2)


def contrast_ratio(foreground: str, background: str) -> str:
    """WCAG contrast ratio between two colors, 1-21, rounded to 2 decimals."""
    return format_number(_ratio(foreground, background), 2)


def meets_contrast(foreground: str, background: str, level: str = "AA") -> str:
    """``"true"`` if the pair reaches 4.5:1 (AA) or 7:1 (AAA)."""
    threshold = WCAG_THRESHOLDS["AAA"] if level.strip().upper() == "AAA" else WCAG_THRESHOLDS["AA"]
    return _bool_text(_ratio(foreground, background) >= threshold)


def _text_for(background: RGB, prefer_light: bool = False) -> str:
    white = wcag_contrast(parse_color(WHITE), background)
    black = wcag_contrast(parse_color(BLACK), background)
    if white == black:
        return WHITE if prefer_light else BLACK
    return WHITE if white > black else BLACK


def accessible_text(background: str, prefer_light: str = "false") -> str:
    """Black or white, whichever contrasts more with ``background``.

    ``prefer_light="true"`` picks white on an exact tie.
    """
    return _text_for(parse_color(background), prefer_light.strip().lower() == "true")


def ensure_contrast(color: str, against: str, min_contrast: str = "4.5") -> str:
    """Adjust the lightness of ``color`` until it contrasts with ``against``.

    Colors that already pass are only normalised to hex. Otherwise the
    OKLCH lightness is binary-searched, lighter when ``against`` is dark
    and darker when it is light, keeping chroma and hue.

    Args:
        color: Color to adjust.
        against: Fixed reference color.
        min_contrast: Target ratio, default 4.5.

    Returns:
        Hex color at (or as close as the search gets to) the target ratio.
    """
    target = parse_number(min_contrast)
    source = parse_color(color)
    reference = parse_color(against)
    base = rgb_to_oklch(source)

    if wcag_contrast(source, reference) >= target:
        return oklch_to_hex(base)

    go_lighter = rgb_to_oklch(reference).l < 0.5
    low, high = (base.l, 1.0) if go_lighter else (0.0, base.l)

    for _ in range(_SEARCH_ITERATIONS):
        mid = (low + high) / 2
        candidate = clamp_chroma(replace(base, l=mid))
        ratio = wcag_contrast(candidate, reference)

        if abs(ratio - target) < _CONTRAST_TOLERANCE:
            return format_hex(candidate)

        # Moving toward the extreme raises contrast in both directions
        if go_lighter:
            if ratio < target:
                low = mid
            else:
                high = mid
        elif ratio < target:
            high = mid
        else:
            low = mid

    return oklch_to_hex(replace(base, l=high if go_lighter else low))


def _perceptual_lightness(color: str) -> float:
    return round_half_up(rgb_to_oklch(parse_color(color)).l, 3)


def luminance(color: str) -> str:
    """Perceptual lightness (OKLCH L, 0-1) rounded to 3 decimals."""
    return format_number(_perceptual_lightness(color), 3)


def is_light(color: str) -> str:
    return _bool_text(_perceptual_lightness(color) > 0.5)


def is_dark(color: str) -> str:
    return _bool_text(_perceptual_lightness(color) <= 0.5)


def accessible_pair(color: str, level: str = "AA") -> dict[str, str]:
    """Background/text pair built from ``color``.

    ``level`` is accepted for symmetry with meetsContrast; black or white
    text is always the highest-contrast choice available.
    """
    background = oklch_to_hex(rgb_to_oklch(parse_color(color)))
    return {"background": background, "text": _text_for(parse_color(background))}
