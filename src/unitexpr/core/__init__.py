"""Core primitives for unitexpr."""

from .dimensions import (
    DIMENSIONLESS,
    Dims,
    format_dims,
    is_dimensionless,
    same_dims,
)
from .errors import (
    ConfigurationError,
    EvalError,
    ExpressionError,
    InvalidIdentifier,
    MissingOperand,
    ParseError,
    UnitMismatch,
    UnknownFunction,
    UnknownOperator,
    UnknownSymbol,
    UnknownUnit,
)
from .quantity import Quantity, as_quantity

__all__ = [
    "DIMENSIONLESS",
    "Dims",
    "format_dims",
    "is_dimensionless",
    "same_dims",
    "ConfigurationError",
    "EvalError",
    "ExpressionError",
    "InvalidIdentifier",
    "MissingOperand",
    "ParseError",
    "UnitMismatch",
    "UnknownFunction",
    "UnknownOperator",
    "UnknownSymbol",
    "UnknownUnit",
    "Quantity",
    "as_quantity",
]
