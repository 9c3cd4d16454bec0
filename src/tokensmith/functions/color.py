"""
Color functions.

Every function converts its input to OKLCH, adjusts lightness, chroma or
hue there, and maps the result back into sRGB as a 6-digit hex string.
``alpha`` is the exception and returns ``rgba(...)``; ``colorScale``
returns a mapping of hex steps.

All arguments arrive as strings from the expression processor. Amounts
accept either percentages (``"20%"``) or fractions (``"0.2"``).
"""

from __future__ import annotations

import re
from dataclasses import replace

from tokensmith.core.errors import InvalidValueError
from tokensmith.core.value_parser import (
    parse_number,
    parse_object_literal,
    parse_percentage,
)
from tokensmith.functions.colorspace import (
    MAX_CHROMA,
    OKLCH,
    RGB,
    format_hex,
    format_rgba,
    oklch_to_css,
    oklch_to_hex,
    parse_color,
    to_oklch,
)


_HEX6_RE = re.compile(r"#[0-9a-fA-F]{6}")


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _wrap_hue(hue: float) -> float:
    return hue % 360


def tint(color: str, amount: str) -> str:
    """Move a color toward white, softening chroma as it lightens."""
    t = parse_percentage(amount)
    base = to_oklch(color)
    return oklch_to_hex(
        replace(
            base,
            l=min(1.0, base.l + (1 - base.l) * t),
            c=max(0.0, base.c * (1 - t * 0.5)),
        )
    )


def shade(color: str, amount: str) -> str:
    """Move a color toward black with a slight chroma boost."""
    t = parse_percentage(amount)
    base = to_oklch(color)
    return oklch_to_hex(
        replace(
            base,
            l=max(0.0, base.l * (1 - t)),
            c=min(MAX_CHROMA, base.c * (1 + t * 0.1)),
        )
    )


def _interpolate_hue(h1: float | None, h2: float | None, t: float) -> float | None:
    # Achromatic endpoints take the other side's hue
    if h1 is None:
        return h2
    if h2 is None:
        return h1
    delta = ((h2 - h1 + 180) % 360) - 180
    return _wrap_hue(h1 + delta * t)


def _endpoint(text: str, parsed: RGB) -> str:
    text = text.strip()
    return text if _HEX6_RE.fullmatch(text) else format_hex(parsed)


def mix(color1: str, color2: str, ratio: str = "0.5") -> str:
    """Interpolate two colors in OKLCH.

    Args:
        color1: Color at ratio 0.
        color2: Color at ratio 1.
        ratio: Position between the two, clamped to 0-1.

    Returns:
        Hex color. At ratio 0 or 1 the endpoint comes back as written when
        it is already 6-digit hex, otherwise normalised to lowercase hex.
    """
    t = _clamp(parse_percentage(ratio), 0.0, 1.0)
    first = parse_color(color1)
    second = parse_color(color2)
    if t == 0:
        return _endpoint(color1, first)
    if t == 1:
        return _endpoint(color2, second)

    a = to_oklch(color1)
    b = to_oklch(color2)
    mixed = OKLCH(
        l=a.l + (b.l - a.l) * t,
        c=a.c + (b.c - a.c) * t,
        h=_interpolate_hue(a.h, b.h, t),
        alpha=a.alpha + (b.alpha - a.alpha) * t,
    )
    return oklch_to_hex(mixed)


def _pick(adjustments: dict, short: str, long: str) -> float:
    raw = adjustments.get(short, adjustments.get(long, 0))
    return parse_number(raw)


def adjust(color: str, adjustments: str = "{}") -> str:
    """Shift lightness, chroma and hue additively.

    ``adjustments`` is an inline object such as ``{ l: 10, c: -5, h: 30 }``
    (long names ``lightness``/``chroma``/``hue`` also work). Lightness and
    chroma are given in hundredths, hue in degrees.
    """
    base = to_oklch(color)
    parsed = parse_object_literal(adjustments)
    if parsed is None:
        raise InvalidValueError(f"Expected an object literal, got {adjustments!r}")

    return oklch_to_hex(
        OKLCH(
            l=_clamp(base.l + _pick(parsed, "l", "lightness") / 100, 0.0, 1.0),
            c=_clamp(base.c + _pick(parsed, "c", "chroma") / 100, 0.0, MAX_CHROMA),
            h=_wrap_hue((base.h or 0.0) + _pick(parsed, "h", "hue")),
            alpha=base.alpha,
        )
    )


def alpha(color: str, value: str) -> str:
    """Set opacity, returning ``rgba(r, g, b, a)``."""
    opacity = _clamp(parse_percentage(value), 0.0, 1.0)
    return format_rgba(replace(parse_color(color), alpha=opacity))


def complement(color: str) -> str:
    base = to_oklch(color)
    return oklch_to_hex(replace(base, h=_wrap_hue((base.h or 0.0) + 180)))


def saturate(color: str, amount: str) -> str:
    t = parse_percentage(amount)
    base = to_oklch(color)
    return oklch_to_hex(replace(base, c=min(MAX_CHROMA, base.c * (1 + t))))


def desaturate(color: str, amount: str) -> str:
    t = parse_percentage(amount)
    base = to_oklch(color)
    return oklch_to_hex(replace(base, c=max(0.0, base.c * (1 - t))))


def invert(color: str) -> str:
    """Invert perceptual lightness, keeping chroma and hue."""
    base = to_oklch(color)
    return oklch_to_hex(replace(base, l=1 - base.l))


def grayscale(color: str) -> str:
    base = to_oklch(color)
    return oklch_to_hex(replace(base, c=0.0))


def dark_mode(color: str, options: str = "{}") -> str:
    """Derive a dark-theme counterpart of a light-theme color.

    Light colors (L > 0.5) map into 0.1-0.4, dark colors into 0.6-0.95.

    Options (inline object):
        chromaAdjust: Percentage change to chroma, default -10.
        preserveHue: ``false`` rotates the hue by 180 degrees.
    """
    base = to_oklch(color)
    opts = parse_object_literal(options) or {}

    if base.l > 0.5:
        lightness = 0.1 + (1 - base.l) * 0.6
    else:
        lightness = 0.6 + base.l * 0.7

    chroma_adjust = parse_number(opts.get("chromaAdjust", -10)) / 100
    chroma = _clamp(base.c * (1 + chroma_adjust), 0.0, MAX_CHROMA)

    hue = base.h
    if str(opts.get("preserveHue", "true")).lower() == "false" and hue is not None:
        hue = _wrap_hue(hue + 180)

    return oklch_to_hex(OKLCH(l=lightness, c=chroma, h=hue, alpha=base.alpha))


def color_scale(color: str, steps: str = "12") -> dict[str, str]:
    """Generate ``step1`` (near white) to ``stepN`` (near black).

    Lightness runs linearly from 0.97 to 0.15; chroma peaks at the middle
    step and falls to half the base chroma at the ends.
    """
    count = parse_number(steps)
    if not count.is_integer() or count < 2:
        raise InvalidValueError(f"colorScale needs a whole number of steps >= 2, got {steps!r}")
    n = int(count)
    base = to_oklch(color)

    scale: dict[str, str] = {}
    for i in range(1, n + 1):
        t = (i - 1) / (n - 1)
        falloff = abs(i - n / 2) / (n / 2)
        scale[f"step{i}"] = oklch_to_hex(
            OKLCH(
                l=_clamp(0.97 - t * 0.82, 0.0, 1.0),
                c=_clamp(base.c * (1 - falloff * 0.5), 0.0, MAX_CHROMA),
                h=base.h,
            )
        )
    return scale


def lighten(color: str, amount: str) -> str:
    """Add ``amount`` to OKLCH lightness (absolute, not relative)."""
    base = to_oklch(color)
    return oklch_to_hex(replace(base, l=min(1.0, base.l + parse_percentage(amount))))


def darken(color: str, amount: str) -> str:
    """Subtract ``amount`` from OKLCH lightness."""
    base = to_oklch(color)
    return oklch_to_hex(replace(base, l=max(0.0, base.l - parse_percentage(amount))))


def hue_rotate(color: str, degrees: str) -> str:
    text = str(degrees).strip()
    if text.lower().endswith("deg"):
        text = text[:-3]
    base = to_oklch(color)
    return oklch_to_hex(replace(base, h=_wrap_hue((base.h or 0.0) + parse_number(text))))


def to_oklch_css(color: str) -> str:
    """Express a color as a CSS ``oklch()`` string."""
    value = to_oklch(color)
    return oklch_to_css(value.l, value.c, value.h, value.alpha)
