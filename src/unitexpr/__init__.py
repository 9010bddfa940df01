"""Dimension-checked formula language.

Typical use::

    from unitexpr import MappingContext, compile_expression, evaluate

    compiled = compile_expression("(P2 - P1) / T")
    ctx = MappingContext.from_values(
        {"P2": 5, "P1": 1, "T": 300}, {"P2": "bar", "P1": "bar", "T": "K"}
    )
    value, dims = evaluate(compiled, ctx)
"""

from .config import EngineSettings, get_settings, reset_settings
from .core import (
    ConfigurationError,
    EvalError,
    ExpressionError,
    InvalidIdentifier,
    MissingOperand,
    ParseError,
    Quantity,
    UnitMismatch,
    UnknownFunction,
    UnknownOperator,
    UnknownSymbol,
    UnknownUnit,
    format_dims,
    is_dimensionless,
    same_dims,
)
from .expression import (
    FunctionContext,
    MappingContext,
    evaluate,
    evaluate_quantity,
    identifiers_with_prefix,
    validate_identifiers,
)
from .parser import CompiledExpression, compile_expression
from .units import UnitDescriptor, from_base, parse_unit, to_base

__all__ = [
    "EngineSettings",
    "get_settings",
    "reset_settings",
    "ConfigurationError",
    "EvalError",
    "ExpressionError",
    "InvalidIdentifier",
    "MissingOperand",
    "ParseError",
    "Quantity",
    "UnitMismatch",
    "UnknownFunction",
    "UnknownOperator",
    "UnknownSymbol",
    "UnknownUnit",
    "format_dims",
    "is_dimensionless",
    "same_dims",
    "FunctionContext",
    "MappingContext",
    "evaluate",
    "evaluate_quantity",
    "identifiers_with_prefix",
    "validate_identifiers",
    "CompiledExpression",
    "compile_expression",
    "UnitDescriptor",
    "from_base",
    "parse_unit",
    "to_base",
]
