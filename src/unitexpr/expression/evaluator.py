"""Stack machine executing compiled expressions with dimension checks.

Every value on the stack is a :class:`~unitexpr.core.quantity.Quantity` in base
units. Arithmetic goes through numpy ufuncs under ``numpy.errstate`` so IEEE
results (``inf``, ``nan``) propagate instead of raising; downstream consumers
treat NaN as an infeasibility signal.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Sequence, Tuple, Union

import numpy as np

from ..config import get_settings
from ..core.dimensions import (
    DIMENSIONLESS,
    Dims,
    add_dims,
    format_dims,
    is_dimensionless,
    same_dims,
    scale_dims,
    sub_dims,
)
from ..core.errors import EvalError, MissingOperand, UnitMismatch, UnknownFunction, UnknownOperator
from ..core.quantity import Quantity, as_quantity
from ..parser.shunting_yard import CompiledExpression
from ..parser.tokens import (
    FUNCTION_ARITY,
    LOGICAL_NOT,
    UNARY_MINUS,
    FunctionToken,
    IdentifierToken,
    NumberToken,
    OperatorToken,
)
from ..units.algebra import parse_unit
from .context import EvaluationContext

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Any]
ContextLike = Union[EvaluationContext, Lookup]


def _quantity(value: Any, dims: Dims) -> Quantity:
    return Quantity(float(value), dims)


def _boolean(flag: bool) -> Quantity:
    return Quantity(1.0 if flag else 0.0, DIMENSIONLESS)


def _require_same(operation: str, a: Quantity, b: Quantity, what: str = "matching units") -> None:
    if not same_dims(a.dims, b.dims):
        raise UnitMismatch(
            operation,
            f"requires {what}, got [{format_dims(a.dims)}] and [{format_dims(b.dims)}]",
        )


def _require_dimensionless(operation: str, *operands: Quantity) -> None:
    for operand in operands:
        if not is_dimensionless(operand.dims):
            raise UnitMismatch(
                operation,
                f"requires dimensionless input, got [{format_dims(operand.dims)}]",
            )


# -- Operators ------------------------------------------------------------
def _add(a: Quantity, b: Quantity) -> Quantity:
    _require_same("+", a, b)
    return _quantity(np.add(a.value, b.value), a.dims)


def _subtract(a: Quantity, b: Quantity) -> Quantity:
    _require_same("-", a, b)
    return _quantity(np.subtract(a.value, b.value), a.dims)


def _multiply(a: Quantity, b: Quantity) -> Quantity:
    return _quantity(np.multiply(a.value, b.value), add_dims(a.dims, b.dims))


def _divide(a: Quantity, b: Quantity) -> Quantity:
    return _quantity(np.divide(a.value, b.value), sub_dims(a.dims, b.dims))


def _power(a: Quantity, b: Quantity) -> Quantity:
    _require_dimensionless("^ exponent", b)
    if not math.isfinite(b.value):
        raise EvalError(f"Invalid exponent value {b.value!r}")
    return _quantity(np.power(a.value, b.value), scale_dims(a.dims, b.value))


def _comparison(symbol: str, compare: Callable[[float, float], bool]) -> Callable[[Quantity, Quantity], Quantity]:
    def apply(a: Quantity, b: Quantity) -> Quantity:
        _require_same(symbol, a, b)
        return _boolean(compare(a.value, b.value))

    return apply


def _logical(symbol: str, combine: Callable[[bool, bool], bool]) -> Callable[[Quantity, Quantity], Quantity]:
    def apply(a: Quantity, b: Quantity) -> Quantity:
        _require_dimensionless(symbol, a, b)
        return _boolean(combine(a.value != 0, b.value != 0))

    return apply


def _negate(a: Quantity) -> Quantity:
    return _quantity(np.negative(a.value), a.dims)


def _logical_not(a: Quantity) -> Quantity:
    _require_dimensionless(LOGICAL_NOT, a)
    return _boolean(a.value == 0)


BINARY_OPERATORS: Dict[str, Callable[[Quantity, Quantity], Quantity]] = {
    "+": _add,
    "-": _subtract,
    "*": _multiply,
    "/": _divide,
    "^": _power,
    "<": _comparison("<", lambda x, y: x < y),
    "<=": _comparison("<=", lambda x, y: x <= y),
    ">": _comparison(">", lambda x, y: x > y),
    ">=": _comparison(">=", lambda x, y: x >= y),
    "==": _comparison("==", lambda x, y: x == y),
    "!=": _comparison("!=", lambda x, y: x != y),
    "&&": _logical("&&", lambda x, y: x and y),
    "||": _logical("||", lambda x, y: x or y),
}

UNARY_OPERATORS: Dict[str, Callable[[Quantity], Quantity]] = {
    UNARY_MINUS: _negate,
    LOGICAL_NOT: _logical_not,
}


# -- Functions ------------------------------------------------------------
def _if(cond: Quantity, when_true: Quantity, when_false: Quantity) -> Quantity:
    # Both branches are already evaluated by the time this runs.
    _require_dimensionless("if() condition", cond)
    _require_same("if()", when_true, when_false, "branches with matching units")
    return when_true if cond.value != 0 else when_false


def _min(a: Quantity, b: Quantity) -> Quantity:
    _require_same("min()", a, b)
    return _quantity(np.fmin(a.value, b.value), a.dims)


def _max(a: Quantity, b: Quantity) -> Quantity:
    _require_same("max()", a, b)
    return _quantity(np.fmax(a.value, b.value), a.dims)


def _abs(a: Quantity) -> Quantity:
    return _quantity(np.abs(a.value), a.dims)


def _sqrt(a: Quantity) -> Quantity:
    return _quantity(np.sqrt(a.value), scale_dims(a.dims, 0.5))


def _dimensionless_ufunc(name: str, ufunc: Callable[[float], Any]) -> Callable[[Quantity], Quantity]:
    def apply(a: Quantity) -> Quantity:
        _require_dimensionless(f"{name}()", a)
        return _quantity(ufunc(a.value), DIMENSIONLESS)

    return apply


FUNCTIONS: Dict[str, Callable[..., Quantity]] = {
    "if": _if,
    "min": _min,
    "max": _max,
    "abs": _abs,
    "sqrt": _sqrt,
    "log": _dimensionless_ufunc("log", np.log),
    "log10": _dimensionless_ufunc("log10", np.log10),
    "exp": _dimensionless_ufunc("exp", np.exp),
}


# -- Stack machine --------------------------------------------------------
def _pop(stack: List[Quantity], count: int, operation: str) -> Sequence[Quantity]:
    if len(stack) < count:
        raise MissingOperand(operation, count, len(stack))
    args = stack[-count:]
    del stack[-count:]
    return args


def _apply_operator(stack: List[Quantity], symbol: str) -> None:
    if symbol in UNARY_OPERATORS:
        (operand,) = _pop(stack, 1, symbol)
        stack.append(UNARY_OPERATORS[symbol](operand))
        return
    handler = BINARY_OPERATORS.get(symbol)
    if handler is None:
        raise UnknownOperator(symbol)
    left, right = _pop(stack, 2, symbol)
    stack.append(handler(left, right))


def _apply_function(stack: List[Quantity], token: FunctionToken) -> None:
    handler = FUNCTIONS.get(token.name)
    if handler is None:
        raise UnknownFunction(token.name)
    expected = FUNCTION_ARITY[token.name]
    if token.arity != expected:
        raise EvalError(f"{token.name}() takes {expected} argument(s), program declares {token.arity}")
    args = _pop(stack, expected, f"{token.name}()")
    stack.append(handler(*args))


def _literal(token: NumberToken) -> Quantity:
    unit = parse_unit(token.unit_text)
    return Quantity(token.value * unit.scale, unit.dims)


def _identifier(token: IdentifierToken, lookup: Lookup) -> Quantity:
    item = as_quantity(lookup(token.path))
    if token.unit_text:
        unit = parse_unit(token.unit_text)
        if not same_dims(item.dims, unit.dims):
            raise UnitMismatch(
                token.path,
                f"declared [{token.unit_text}] but value has [{format_dims(item.dims)}]",
            )
    return item


def _resolve_lookup(context: ContextLike) -> Lookup:
    lookup = getattr(context, "lookup", None)
    if callable(lookup):
        return lookup
    if callable(context):
        return context
    raise EvalError("Evaluation context must provide a lookup callable")


def evaluate_quantity(compiled: CompiledExpression, context: ContextLike) -> Quantity:
    """Run ``compiled`` against ``context`` and return the resulting quantity.

    ``context`` is anything with a ``lookup(name)`` method, or a bare callable.
    The lookup is called once per identifier occurrence, left to right.
    """

    lookup = _resolve_lookup(context)
    stack: List[Quantity] = []
    with np.errstate(all=get_settings().float_errors):
        for token in compiled.program:
            if isinstance(token, NumberToken):
                stack.append(_literal(token))
            elif isinstance(token, IdentifierToken):
                stack.append(_identifier(token, lookup))
            elif isinstance(token, OperatorToken):
                _apply_operator(stack, token.symbol)
            elif isinstance(token, FunctionToken):
                _apply_function(stack, token)
            else:
                raise EvalError(f"Invalid token in program: {token!r}")

    if len(stack) != 1:
        raise EvalError(
            f"Invalid evaluation state for {compiled.source!r}: {len(stack)} values left on stack"
        )
    result = stack[0]
    logger.debug("Evaluated %r -> %s", compiled.source, result)
    return result


def evaluate(compiled: CompiledExpression, context: ContextLike) -> Tuple[float, Dims]:
    """Evaluate ``compiled`` and return ``(value, dims)``."""

    return evaluate_quantity(compiled, context).as_tuple()


__all__ = [
    "BINARY_OPERATORS",
    "UNARY_OPERATORS",
    "FUNCTIONS",
    "evaluate",
    "evaluate_quantity",
]
