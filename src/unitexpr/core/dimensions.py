"""Dimension vectors for the expression engine.

A dimension vector holds one real exponent per base axis in the fixed order
``(mass, length, time, temperature, amount, current, luminous, currency)``.
Exponents are floats so fractional powers such as ``sqrt`` stay closed under
the algebra. Currency is a non-physical eighth axis which keeps monetary
values from being summed with physical quantities.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Tuple

from ..config import get_settings
from .errors import EvalError

Dims = Tuple[float, ...]

BASE_FIELDS: Tuple[str, ...] = (
    "mass",
    "length",
    "time",
    "temperature",
    "amount",
    "current",
    "luminous",
    "currency",
)
BASE_SYMBOLS: Tuple[str, ...] = ("kg", "m", "s", "K", "mol", "A", "cd", "USD")
BASE_ORDER: Tuple[str, ...] = ("M", "L", "T", "Θ", "N", "I", "J", "$")
NDIM = len(BASE_FIELDS)


def dims_vector(
    mass: float = 0,
    length: float = 0,
    time: float = 0,
    temperature: float = 0,
    amount: float = 0,
    current: float = 0,
    luminous: float = 0,
    currency: float = 0,
) -> Dims:
    """Build a dimension vector from keyword exponents."""
    return tuple(
        float(value)
        for value in (mass, length, time, temperature, amount, current, luminous, currency)
    )


def zero_dims() -> Dims:
    return (0.0,) * NDIM


def normalize_dims(values: Iterable[float]) -> Dims:
    """Coerce ``values`` into an 8-float tuple, rejecting other lengths."""
    dims = tuple(float(value) for value in values)
    if len(dims) != NDIM:
        raise EvalError(f"Dimension vector must have {NDIM} entries, got {len(dims)}")
    return dims


# -- Algebra --------------------------------------------------------------
def add_dims(a: Dims, b: Dims) -> Dims:
    return tuple(x + y for x, y in zip(a, b))


def sub_dims(a: Dims, b: Dims) -> Dims:
    return tuple(x - y for x, y in zip(a, b))


def scale_dims(a: Dims, factor: float) -> Dims:
    return tuple(x * factor for x in a)


def same_dims(a: Dims, b: Dims, tolerance: Optional[float] = None) -> bool:
    """Return ``True`` when every exponent of ``a`` and ``b`` agrees within tolerance."""
    if tolerance is None:
        tolerance = get_settings().dimension_tolerance
    return all(abs(x - y) < tolerance for x, y in zip(a, b))


def is_dimensionless(dims: Dims, tolerance: Optional[float] = None) -> bool:
    if tolerance is None:
        tolerance = get_settings().dimension_tolerance
    return all(abs(x) < tolerance for x in dims)


# -- Formatting -----------------------------------------------------------
def _format_exponent(exponent: float) -> str:
    rounded = round(exponent)
    if math.isclose(exponent, rounded, abs_tol=1e-9):
        return str(int(rounded))
    return f"{exponent:g}"


def format_dims(dims: Dims) -> str:
    """Render ``dims`` with base symbols, e.g. ``kg/(m*s^2*K)``."""

    numerator = []
    denominator = []
    for symbol, exponent in zip(BASE_SYMBOLS, dims):
        if abs(exponent) < 1e-12:
            continue
        target = numerator if exponent > 0 else denominator
        formatted = _format_exponent(abs(exponent))
        target.append(symbol if formatted == "1" else f"{symbol}^{formatted}")

    unit_str = "*".join(numerator) if numerator else "1"
    if not denominator:
        return unit_str
    if len(denominator) == 1:
        return f"{unit_str}/{denominator[0]}"
    return f"{unit_str}/({'*'.join(denominator)})"


def dims_to_pretty(dims: Dims) -> str:
    parts = []
    for axis, value in zip(BASE_ORDER, dims):
        if abs(value) < 1e-12:
            continue
        parts.append(f"{axis}^{_format_exponent(value)}")
    return "1" if not parts else " · ".join(parts)


DIMENSIONLESS = zero_dims()
MASS = dims_vector(mass=1)
LENGTH = dims_vector(length=1)
TIME = dims_vector(time=1)
TEMPERATURE = dims_vector(temperature=1)
AMOUNT = dims_vector(amount=1)
CURRENT = dims_vector(current=1)
LUMINOUS = dims_vector(luminous=1)
CURRENCY = dims_vector(currency=1)

AREA = scale_dims(LENGTH, 2)
VOLUME = scale_dims(LENGTH, 3)
VELOCITY = sub_dims(LENGTH, TIME)
FORCE = dims_vector(mass=1, length=1, time=-2)
PRESSURE = sub_dims(FORCE, AREA)
ENERGY = add_dims(FORCE, LENGTH)
POWER = sub_dims(ENERGY, TIME)
MASS_FLOW = sub_dims(MASS, TIME)


__all__ = [
    "Dims",
    "BASE_FIELDS",
    "BASE_SYMBOLS",
    "BASE_ORDER",
    "NDIM",
    "dims_vector",
    "zero_dims",
    "normalize_dims",
    "add_dims",
    "sub_dims",
    "scale_dims",
    "same_dims",
    "is_dimensionless",
    "format_dims",
    "dims_to_pretty",
    "DIMENSIONLESS",
    "MASS",
    "LENGTH",
    "TIME",
    "TEMPERATURE",
    "AMOUNT",
    "CURRENT",
    "LUMINOUS",
    "CURRENCY",
    "AREA",
    "VOLUME",
    "VELOCITY",
    "FORCE",
    "PRESSURE",
    "ENERGY",
    "POWER",
    "MASS_FLOW",
]
