"""
Math functions on CSS dimensions.

Operands are well-formed dimensions (``16px``, ``1.5rem``, ``-2``); mixed
units are converted through pixels using the unit table below, with
``rem``/``em`` tied to the configured base font size. Units outside the
table (``vw``, ``%``, ``ch``...) only combine with the same unit or with a
unitless number.

Anything that is not a plain dimension raises InvalidValueError, which
leaves the expression unresolved. That keeps CSS-native expressions such as
``min(100%, 60ch)`` untouched when they are written with the same names.
"""

from __future__ import annotations

import math

from tokensmith.core.errors import (
    DivisionByZeroError,
    IncompatibleUnitsError,
    InvalidValueError,
)
from tokensmith.core.settings import UnitSettings
from tokensmith.core.value_parser import (
    Dimension,
    format_dimension,
    parse_number,
    require_dimension,
    round_half_up,
)

DEFAULT_UNITS = UnitSettings()

# Absolute units, in CSS pixels
PX_PER_UNIT: dict[str, float] = {
    "px": 1.0,
    "pt": 96 / 72,
    "pc": 16.0,
    "in": 96.0,
    "cm": 96 / 2.54,
    "mm": 96 / 25.4,
}

FONT_RELATIVE_UNITS = ("rem", "em")


def px_per_unit(unit: str, units: UnitSettings = DEFAULT_UNITS) -> float | None:
    """Pixels per ``unit``, or None for units that cannot be converted."""
    key = unit.lower()
    if key in FONT_RELATIVE_UNITS:
        return units.base_font_size_px
    return PX_PER_UNIT.get(key)


def in_unit(
    dim: Dimension, unit: str, operation: str, units: UnitSettings = DEFAULT_UNITS
) -> float:
    """Express ``dim`` in ``unit``.

    Unitless values and identical units need no conversion.

    Raises:
        IncompatibleUnitsError: If either unit is outside the conversion table.
    """
    if dim.unit == unit or not dim.unit or not unit:
        return dim.value
    source = px_per_unit(dim.unit, units)
    target = px_per_unit(unit, units)
    if source is None or target is None:
        raise IncompatibleUnitsError(dim.unit, unit, operation)
    return dim.value * source / target


def to_px(value: str, operation: str, units: UnitSettings = DEFAULT_UNITS) -> float:
    """Parse ``value`` and convert it to pixels (unitless counts as px)."""
    return in_unit(require_dimension(value), "px", operation, units)


def _precision(value: str) -> int:
    places = parse_number(value)
    if not places.is_integer():
        raise InvalidValueError(f"Precision must be a whole number, got {value!r}")
    return int(places)


# =============================================================================
# Scaling
# =============================================================================


def multiply(value: str, multiplier: str) -> str:
    dim = require_dimension(value)
    return format_dimension(dim.value * parse_number(multiplier), dim.unit)


def divide(value: str, divisor: str, *, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Divide a dimension by a number, or by another dimension for a plain ratio.

    Raises:
        DivisionByZeroError: If ``divisor`` is zero.
    """
    dim = require_dimension(value)
    by = require_dimension(divisor)
    if by.value == 0:
        raise DivisionByZeroError("divide")
    if by.unit:
        return format_dimension(in_unit(dim, by.unit, "divide", units) / by.value, "")
    return format_dimension(dim.value / by.value, dim.unit)


def percent(value: str, percentage: str) -> str:
    """``percent(200px, 25%)`` is ``50px``; a bare ``25`` means the same."""
    dim = require_dimension(value)
    factor = parse_number(str(percentage).strip().rstrip("%")) / 100
    return format_dimension(dim.value * factor, dim.unit)


def mod(value: str, divisor: str) -> str:
    """Remainder with the sign of ``value``.

    Raises:
        DivisionByZeroError: If ``divisor`` is zero.
    """
    dim = require_dimension(value)
    by = parse_number(divisor)
    if by == 0:
        raise DivisionByZeroError("mod")
    return format_dimension(math.fmod(dim.value, by), dim.unit)


def abs_(value: str) -> str:
    dim = require_dimension(value)
    return format_dimension(abs(dim.value), dim.unit)


def negate(value: str) -> str:
    dim = require_dimension(value)
    return format_dimension(-dim.value, dim.unit)


# =============================================================================
# Combining
# =============================================================================


def _combine(value1: str, value2: str, operation: str, units: UnitSettings) -> tuple[float, float, str]:
    first = require_dimension(value1)
    second = require_dimension(value2)
    # A unitless first operand adopts the second operand's unit
    unit = first.unit or second.unit
    return (
        in_unit(first, unit, operation, units),
        in_unit(second, unit, operation, units),
        unit,
    )


def add(value1: str, value2: str, *, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Sum two dimensions in the unit of the first."""
    a, b, unit = _combine(value1, value2, "add", units)
    return format_dimension(a + b, unit)


def subtract(value1: str, value2: str, *, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Difference of two dimensions in the unit of the first."""
    a, b, unit = _combine(value1, value2, "subtract", units)
    return format_dimension(a - b, unit)


def _pick_extreme(values: tuple[str, ...], operation: str, units: UnitSettings, largest: bool) -> str:
    if not values:
        raise InvalidValueError(f"{operation}() needs at least one value")
    dims = [require_dimension(v) for v in values]
    reference = next((d.unit for d in dims if d.unit), "")

    best = dims[0]
    best_value = in_unit(best, reference, operation, units)
    for dim in dims[1:]:
        current = in_unit(dim, reference, operation, units)
        if (current > best_value) if largest else (current < best_value):
            best, best_value = dim, current
    return format_dimension(best.value, best.unit)


def min_(*values: str, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Smallest of the given dimensions, returned in its own unit."""
    return _pick_extreme(values, "min", units, largest=False)


def max_(*values: str, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Largest of the given dimensions, returned in its own unit."""
    return _pick_extreme(values, "max", units, largest=True)


def clamp(value: str, min_value: str, max_value: str, *, units: UnitSettings = DEFAULT_UNITS) -> str:
    """Bound ``value`` between ``min_value`` and ``max_value``, compared in ``value``'s unit."""
    dim = require_dimension(value)
    low = require_dimension(min_value)
    high = require_dimension(max_value)
    unit = dim.unit or low.unit or high.unit

    current = in_unit(dim, unit, "clamp", units)
    if current < in_unit(low, unit, "clamp", units):
        return format_dimension(low.value, low.unit)
    if current > in_unit(high, unit, "clamp", units):
        return format_dimension(high.value, high.unit)
    return format_dimension(dim.value, dim.unit)


def convert(
    value: str,
    to_unit: str,
    base_font_size: str | None = None,
    *,
    units: UnitSettings = DEFAULT_UNITS,
) -> str:
    """Convert a dimension to ``to_unit``.

    Args:
        value: Dimension to convert; unitless counts as px.
        to_unit: Target unit from the conversion table.
        base_font_size: Pixels per rem/em for this call only.
        units: Unit settings supplying the default base font size.

    Raises:
        IncompatibleUnitsError: If either unit is not convertible.
    """
    if base_font_size is not None:
        units = units.model_copy(update={"base_font_size_px": parse_number(base_font_size)})
    if units.base_font_size_px <= 0:
        raise InvalidValueError(f"Base font size must be positive, got {base_font_size!r}")

    dim = require_dimension(value)
    target = to_unit.strip()
    if px_per_unit(target, units) is None:
        raise IncompatibleUnitsError(dim.unit or "px", target, "convert")
    source = dim if dim.unit else Dimension(dim.value, "px")
    return format_dimension(in_unit(source, target, "convert", units), target)


# =============================================================================
# Rounding
# =============================================================================


def round_(value: str, precision: str = "2") -> str:
    """Round half up to ``precision`` decimals, keeping the unit."""
    dim = require_dimension(value)
    return format_dimension(round_half_up(dim.value, _precision(precision)), dim.unit)


def floor(value: str, precision: str = "0") -> str:
    dim = require_dimension(value)
    factor = 10 ** _precision(precision)
    return format_dimension(math.floor(dim.value * factor) / factor, dim.unit)


def ceil(value: str, precision: str = "0") -> str:
    dim = require_dimension(value)
    factor = 10 ** _precision(precision)
    return format_dimension(math.ceil(dim.value * factor) / factor, dim.unit)
