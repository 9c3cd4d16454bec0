"""
Value parser for token expressions.

Recognises ``name(args)`` call syntax, segments argument lists, and parses
primitive values (numbers, percentages, dimensions, inline object literals).

The parser never evaluates anything: nested calls and ``{path}`` references
inside arguments are returned as opaque substrings.

Usage:
    from tokensmith.core.value_parser import parse_function_call

    call = parse_function_call("tint(shade(#ff0000, 20%), 50%)")
    # call.name == "tint"
    # call.args == ("shade(#ff0000, 20%)", "50%")
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, NamedTuple

from tokensmith.core.errors import InvalidValueError

# Identifier immediately followed by "(" at the start of the value
_CALL_HEAD_RE = re.compile(r"([a-zA-Z][a-zA-Z0-9]*)\(")
# Number with optional sign and a trailing unit of letters or %
_DIMENSION_RE = re.compile(r"([+-]?(?:\d+\.?\d*|\.\d+))([a-zA-Z%]+)?")
# Plain number; also matched as a prefix for the lenient fallback
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class FunctionCall:
    """A parsed ``name(arg0, arg1, ...)`` expression."""

    name: str
    args: tuple[str, ...]
    raw: str

    @property
    def signature(self) -> str:
        """Stable identity of the call, used by the re-entrancy guard."""
        return f"{self.name}({','.join(self.args)})"


class Dimension(NamedTuple):
    """A numeric magnitude with an optional CSS unit."""

    value: float
    unit: str


# =============================================================================
# Function calls
# =============================================================================


def _closing_paren_index(text: str, open_index: int) -> int:
    """Return the index of the ")" matching the "(" at ``open_index``, or -1."""
    depth = 0
    for i in range(open_index, len(text)):
        char = text[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _match_call(value: Any) -> tuple[str, str] | None:
    """Return (name, body) when ``value`` is a single call spanning the string."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    head = _CALL_HEAD_RE.match(trimmed)
    if head is None:
        return None
    open_index = head.end() - 1
    if _closing_paren_index(trimmed, open_index) != len(trimmed) - 1:
        return None
    return head.group(1), trimmed[head.end() : -1]


def is_function_call(value: Any) -> bool:
    """True iff the trimmed string is ``identifier(...)`` spanning the whole string."""
    return _match_call(value) is not None


def parse_function_call(value: Any) -> FunctionCall | None:
    """Split a call expression into its name and top-level arguments.

    Args:
        value: Raw token value.

    Returns:
        FunctionCall, or None if ``value`` is not a call expression.
    """
    matched = _match_call(value)
    if matched is None:
        return None
    name, body = matched
    return FunctionCall(name=name, args=tuple(split_arguments(body)), raw=value.strip())


def split_arguments(args: str) -> list[str]:
    """Split an argument list on commas outside of ``(...)`` and ``{...}``.

    Paren depth and brace depth are tracked independently; a comma only
    separates arguments when both are zero.
    """
    if not args or not args.strip():
        return []

    parts: list[str] = []
    current: list[str] = []
    depth = 0
    brace_depth = 0

    for char in args:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "{":
            brace_depth += 1
        elif char == "}":
            brace_depth -= 1
        elif char == "," and depth == 0 and brace_depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    last = "".join(current).strip()
    if last:
        parts.append(last)
    return parts


# =============================================================================
# Numbers and dimensions
# =============================================================================


def round_half_up(value: float, precision: int = 4) -> float:
    """Round like CSS tooling does (halves go up), not banker's rounding."""
    factor = 10**precision
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float, precision: int = 4) -> str:
    """Format a number without float artifacts or a trailing ``.0``."""
    rounded = round_half_up(float(value), precision)
    if rounded == 0:
        return "0"
    if rounded.is_integer():
        return str(int(rounded))
    return repr(rounded)


def parse_number(value: Any) -> float:
    """Parse a plain number strictly.

    Raises:
        InvalidValueError: If ``value`` is not entirely numeric.
    """
    if isinstance(value, bool):
        raise InvalidValueError(f"Expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not _NUMBER_RE.fullmatch(text):
        raise InvalidValueError(f"Expected a number, got {value!r}")
    return float(text)


def parse_percentage(value: Any) -> float:
    """Parse ``"80%"`` as 0.8 and ``"0.8"`` / ``0.8`` as 0.8."""
    text = str(value).strip()
    if text.endswith("%"):
        return parse_number(text[:-1]) / 100
    return parse_number(text)


def parse_dimension(value: Any) -> Dimension:
    """Parse ``"16px"``, ``"1.5rem"``, ``"-8px"`` or ``"2"`` into a Dimension.

    Input that does not match falls back to its leading numeric prefix (or 0)
    with an empty unit.
    """
    text = str(value).strip()
    match = _DIMENSION_RE.fullmatch(text)
    if match is None:
        leading = _NUMBER_RE.match(text)
        return Dimension(float(leading.group(0)) if leading else 0.0, "")
    return Dimension(float(match.group(1)), match.group(2) or "")


def is_dimension(value: Any) -> bool:
    """True if ``value`` is a number with an optional unit and nothing else."""
    return _DIMENSION_RE.fullmatch(str(value).strip()) is not None


def require_dimension(value: Any) -> Dimension:
    """Strict form of parse_dimension().

    Raises:
        InvalidValueError: If ``value`` is not a well-formed dimension.
    """
    if not is_dimension(value):
        raise InvalidValueError(f"Expected a dimension, got {value!r}")
    return parse_dimension(value)


def format_dimension(value: float, unit: str, precision: int = 4) -> str:
    """Round to ``precision`` decimals and append ``unit``."""
    return f"{format_number(value, precision)}{unit}"


# =============================================================================
# Object literals
# =============================================================================


def is_object_literal(value: Any) -> bool:
    """True for ``{ key: value, ... }`` (or ``{}``), false for a ``{path}`` reference."""
    if not isinstance(value, str):
        return False
    text = value.strip()
    if not (text.startswith("{") and text.endswith("}")):
        return False
    inner = text[1:-1].strip()
    return not inner or ":" in inner


def parse_object_literal(value: Any) -> dict[str, Any] | None:
    """Parse a simple inline object such as ``{ l: 10, c: -5, h: 0 }``.

    Values that look numeric become floats; everything else stays a string.

    Returns:
        The parsed dict, or None if ``value`` is not an object literal.
    """
    if not is_object_literal(value):
        return None

    inner = value.strip()[1:-1].strip()
    result: dict[str, Any] = {}
    for pair in split_arguments(inner):
        key, sep, raw = pair.partition(":")
        key = key.strip()
        raw = raw.strip()
        if not sep or not key:
            continue
        result[key] = float(raw) if _NUMBER_RE.fullmatch(raw) else raw
    return result


__all__ = [
    "Dimension",
    "FunctionCall",
    "format_dimension",
    "format_number",
    "is_dimension",
    "is_function_call",
    "is_object_literal",
    "parse_dimension",
    "parse_function_call",
    "parse_number",
    "parse_object_literal",
    "parse_percentage",
    "require_dimension",
    "round_half_up",
    "split_arguments",
]
