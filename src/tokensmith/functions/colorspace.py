"""
Pure-Python sRGB / OKLab / OKLCH conversion.

Parses CSS color strings, converts between sRGB and the perceptually
uniform OKLCH space, maps out-of-gamut colors back into sRGB by reducing
chroma, and computes WCAG relative luminance. No external color libraries
required.

OKLab matrices are Björn Ottosson's reference values.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace

from tokensmith.core.errors import InvalidColorError
from tokensmith.core.value_parser import split_arguments

# Chroma above this is never produced by the color functions
MAX_CHROMA = 0.4
# Below this chroma the hue is meaningless (greys)
ACHROMATIC_CHROMA = 1e-7
# Binary search resolution for gamut mapping: chroma range / 2**13
_GAMUT_RESOLUTION = MAX_CHROMA / 2**13
_GAMUT_EPSILON = 1e-7


@dataclass(frozen=True)
class RGB:
    """Gamma-encoded sRGB, channels 0-1 (may fall outside 0-1 before gamut mapping)."""

    r: float
    g: float
    b: float
    alpha: float = 1.0


@dataclass(frozen=True)
class OKLab:
    l: float
    a: float
    b: float
    alpha: float = 1.0


@dataclass(frozen=True)
class OKLCH:
    """OKLCH color. ``h`` is None for achromatic colors."""

    l: float
    c: float
    h: float | None
    alpha: float = 1.0


# =============================================================================
# Parsing
# =============================================================================

_NAMED_COLORS: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "lime": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "cyan": "#00ffff",
    "aqua": "#00ffff",
    "magenta": "#ff00ff",
    "fuchsia": "#ff00ff",
    "silver": "#c0c0c0",
    "gray": "#808080",
    "grey": "#808080",
    "maroon": "#800000",
    "olive": "#808000",
    "purple": "#800080",
    "teal": "#008080",
    "navy": "#000080",
    "orange": "#ffa500",
    "pink": "#ffc0cb",
    "brown": "#a52a2a",
    "gold": "#ffd700",
    "indigo": "#4b0082",
    "violet": "#ee82ee",
    "coral": "#ff7f50",
    "crimson": "#dc143c",
    "tomato": "#ff6347",
    "salmon": "#fa8072",
    "turquoise": "#40e0d0",
    "slategray": "#708090",
    "rebeccapurple": "#663399",
    "transparent": "#00000000",
}

_HEX_RE = re.compile(r"#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")
_FUNC_RE = re.compile(r"(rgba?|hsla?|oklch)\((.*)\)", re.IGNORECASE | re.DOTALL)


def _parse_hex(digits: str) -> RGB:
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    channels = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
    alpha = channels[3] if len(channels) == 4 else 1.0
    return RGB(channels[0], channels[1], channels[2], alpha)


def _color_components(body: str) -> tuple[list[str], str | None]:
    """Split ``"255, 0, 0 / 50%"`` style bodies into channels and alpha."""
    alpha: str | None = None
    if "/" in body:
        body, alpha = (part.strip() for part in body.split("/", 1))
    if "," in body:
        parts = split_arguments(body)
    else:
        parts = body.split()
    if alpha is None and len(parts) == 4:
        alpha = parts.pop()
    return parts, alpha


def _number(text: str, source: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise InvalidColorError(source) from None


def _channel(text: str, scale: float, source: str) -> float:
    """Parse a channel as a fraction of ``scale``; percentages are fractions of 100."""
    text = text.strip()
    if text.endswith("%"):
        return _number(text[:-1], source) / 100
    return _number(text, source) / scale


def _parse_alpha(text: str | None, source: str) -> float:
    if text is None:
        return 1.0
    return max(0.0, min(1.0, _channel(text, 1.0, source)))


def _hue(text: str, source: str) -> float:
    text = text.strip().lower()
    if text.endswith("deg"):
        text = text[:-3]
    elif text.endswith("turn"):
        return _number(text[:-4], source) * 360
    return _number(text, source)


def _hsl_to_rgb(h: float, s: float, lightness: float, alpha: float) -> RGB:
    h = h % 360

    def f(n: int) -> float:
        k = (n + h / 30) % 12
        a = s * min(lightness, 1 - lightness)
        return lightness - a * max(-1.0, min(k - 3, 9 - k, 1.0))

    return RGB(f(0), f(8), f(4), alpha)


def parse_color(value: object) -> RGB:
    """Parse a CSS color string into sRGB.

    Supports ``#rgb``, ``#rgba``, ``#rrggbb``, ``#rrggbbaa``, ``rgb()``,
    ``rgba()``, ``hsl()``, ``hsla()``, ``oklch()`` and common named colors.

    Raises:
        InvalidColorError: If the value is not a recognised color.
    """
    text = str(value).strip()
    lowered = text.lower()

    if lowered in _NAMED_COLORS:
        text = _NAMED_COLORS[lowered]

    hex_match = _HEX_RE.fullmatch(text)
    if hex_match:
        return _parse_hex(hex_match.group(1))

    func_match = _FUNC_RE.fullmatch(text)
    if func_match is None:
        raise InvalidColorError(value)

    kind = func_match.group(1).lower()
    parts, alpha_text = _color_components(func_match.group(2))
    if len(parts) != 3:
        raise InvalidColorError(value)
    alpha = _parse_alpha(alpha_text, text)

    if kind in ("rgb", "rgba"):
        r, g, b = (_channel(p, 255, text) for p in parts)
        return RGB(r, g, b, alpha)

    if kind in ("hsl", "hsla"):
        h = _hue(parts[0], text)
        s = _channel(parts[1], 100, text)
        lightness = _channel(parts[2], 100, text)
        return _hsl_to_rgb(h, s, lightness, alpha)

    # oklch(L C H): L as 0-1 or percentage, C as number, H in degrees
    lightness = _channel(parts[0], 1.0, text)
    chroma = _number(parts[1], text)
    hue_text = parts[2].strip().lower()
    h = None if hue_text == "none" else _hue(hue_text, text)
    return oklch_to_rgb(OKLCH(lightness, chroma, h, alpha))


def to_oklch(value: object) -> OKLCH:
    """Parse any supported CSS color and convert it to OKLCH."""
    return rgb_to_oklch(parse_color(value))


# =============================================================================
# Conversion
# =============================================================================


def _to_linear(channel: float) -> float:
    sign = -1.0 if channel < 0 else 1.0
    c = abs(channel)
    if c <= 0.04045:
        return channel / 12.92
    return sign * ((c + 0.055) / 1.055) ** 2.4


def _to_gamma(channel: float) -> float:
    sign = -1.0 if channel < 0 else 1.0
    c = abs(channel)
    if c <= 0.0031308:
        return channel * 12.92
    return sign * (1.055 * c ** (1 / 2.4) - 0.055)


def rgb_to_oklab(color: RGB) -> OKLab:
    r, g, b = _to_linear(color.r), _to_linear(color.g), _to_linear(color.b)

    lms_l = math.cbrt(0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b)
    lms_m = math.cbrt(0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b)
    lms_s = math.cbrt(0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b)

    return OKLab(
        l=0.2104542553 * lms_l + 0.7936177850 * lms_m - 0.0040720468 * lms_s,
        a=1.9779984951 * lms_l - 2.4285922050 * lms_m + 0.4505937099 * lms_s,
        b=0.0259040371 * lms_l + 0.7827717662 * lms_m - 0.8086757660 * lms_s,
        alpha=color.alpha,
    )


def oklab_to_rgb(color: OKLab) -> RGB:
    lms_l = (color.l + 0.3963377774 * color.a + 0.2158037573 * color.b) ** 3
    lms_m = (color.l - 0.1055613458 * color.a - 0.0638541728 * color.b) ** 3
    lms_s = (color.l - 0.0894841775 * color.a - 1.2914855480 * color.b) ** 3

    r = 4.0767416621 * lms_l - 3.3077115913 * lms_m + 0.2309699292 * lms_s
    g = -1.2684380046 * lms_l + 2.6097574011 * lms_m - 0.3413193965 * lms_s
    b = -0.0041960863 * lms_l - 0.7034186147 * lms_m + 1.7076147010 * lms_s

    return RGB(_to_gamma(r), _to_gamma(g), _to_gamma(b), color.alpha)


def oklab_to_oklch(color: OKLab) -> OKLCH:
    c = math.hypot(color.a, color.b)
    h: float | None = None
    if c >= ACHROMATIC_CHROMA:
        h = math.degrees(math.atan2(color.b, color.a)) % 360
    return OKLCH(color.l, c, h, color.alpha)


def oklch_to_oklab(color: OKLCH) -> OKLab:
    if color.h is None or color.c == 0:
        return OKLab(color.l, 0.0, 0.0, color.alpha)
    rad = math.radians(color.h)
    return OKLab(color.l, color.c * math.cos(rad), color.c * math.sin(rad), color.alpha)


def rgb_to_oklch(color: RGB) -> OKLCH:
    return oklab_to_oklch(rgb_to_oklab(color))


def oklch_to_rgb(color: OKLCH) -> RGB:
    return oklab_to_rgb(oklch_to_oklab(color))


# =============================================================================
# Gamut mapping and formatting
# =============================================================================


def in_gamut(color: RGB) -> bool:
    """True if every channel lies within sRGB (with float tolerance)."""
    lo, hi = -_GAMUT_EPSILON, 1 + _GAMUT_EPSILON
    return lo <= color.r <= hi and lo <= color.g <= hi and lo <= color.b <= hi


def _clip(color: RGB) -> RGB:
    return RGB(
        max(0.0, min(1.0, color.r)),
        max(0.0, min(1.0, color.g)),
        max(0.0, min(1.0, color.b)),
        max(0.0, min(1.0, color.alpha)),
    )


def clamp_chroma(color: OKLCH) -> RGB:
    """Map an OKLCH color into sRGB, reducing chroma until it fits.

    Lightness and hue are preserved; when even the grey at that lightness
    is out of gamut (L outside 0-1) the channels are clipped.
    """
    rgb = oklch_to_rgb(color)
    if in_gamut(rgb):
        return _clip(rgb)

    grey = replace(color, c=0.0)
    if not in_gamut(oklch_to_rgb(grey)):
        return _clip(oklch_to_rgb(grey))

    start, end = 0.0, color.c
    last_good = 0.0
    while end - start > _GAMUT_RESOLUTION:
        mid = start + (end - start) * 0.5
        if in_gamut(oklch_to_rgb(replace(color, c=mid))):
            last_good = mid
            start = mid
        else:
            end = mid
    return _clip(oklch_to_rgb(replace(color, c=last_good)))


def _byte(channel: float) -> int:
    return int(math.floor(max(0.0, min(1.0, channel)) * 255 + 0.5))


def format_hex(color: RGB) -> str:
    """Format as 6-digit lowercase hex (alpha is dropped)."""
    return f"#{_byte(color.r):02x}{_byte(color.g):02x}{_byte(color.b):02x}"


def format_rgba(color: RGB) -> str:
    """Format as ``rgba(r, g, b, a)`` with alpha rounded to 2 decimals."""
    alpha = math.floor(max(0.0, min(1.0, color.alpha)) * 100 + 0.5) / 100
    alpha_text = str(int(alpha)) if alpha.is_integer() else repr(alpha)
    return f"rgba({_byte(color.r)}, {_byte(color.g)}, {_byte(color.b)}, {alpha_text})"


def oklch_to_hex(color: OKLCH) -> str:
    """Gamut-map an OKLCH color and format it as hex."""
    return format_hex(clamp_chroma(color))


def oklch_to_css(L: float, C: float, H: float | None, alpha: float = 1.0) -> str:
    """Format an OKLCH color as a CSS string.

    Args:
        L: Lightness (0-1).
        C: Chroma (0-0.4).
        H: Hue (0-360), None for achromatic colors.
        alpha: Opacity (0-1).

    Returns:
        CSS oklch() string.
    """
    L_fmt = f"{L:.3f}"
    C_fmt = f"{C:.4f}"
    H_fmt = "none" if H is None else f"{H:.1f}"
    if alpha < 1.0:
        return f"oklch({L_fmt} {C_fmt} {H_fmt} / {alpha:.2f})"
    return f"oklch({L_fmt} {C_fmt} {H_fmt})"


# =============================================================================
# WCAG
# =============================================================================


def relative_luminance(color: RGB) -> float:
    """WCAG 2.x relative luminance of a gamma-encoded sRGB color."""
    r, g, b = (_to_linear(max(0.0, min(1.0, ch))) for ch in (color.r, color.g, color.b))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def wcag_contrast(first: RGB, second: RGB) -> float:
    """Unrounded WCAG contrast ratio, always >= 1."""
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)
