"""Unit registry and conversion utilities."""

from .algebra import (
    PREFIXES,
    UnitDescriptor,
    dimensionless_unit,
    from_base,
    parse_unit,
    resolve_unit_atom,
    to_base,
    unit_table,
)

__all__ = [
    "PREFIXES",
    "UnitDescriptor",
    "dimensionless_unit",
    "from_base",
    "parse_unit",
    "resolve_unit_atom",
    "to_base",
    "unit_table",
]
