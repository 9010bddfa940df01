"""Token variants produced by the lexer and consumed by the evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class NumberToken:
    """Numeric literal with its verbatim unit annotation (``""`` when absent)."""

    value: float
    unit_text: str = ""


@dataclass(frozen=True)
class IdentifierToken:
    """Variable reference; ``unit_text`` is an optional dimension assertion."""

    path: str
    unit_text: str = ""


@dataclass(frozen=True)
class OperatorToken:
    symbol: str


@dataclass(frozen=True)
class FunctionToken:
    name: str
    arity: int


@dataclass(frozen=True)
class LeftParen:
    pass


@dataclass(frozen=True)
class RightParen:
    pass


@dataclass(frozen=True)
class Comma:
    pass


Token = Union[
    NumberToken,
    IdentifierToken,
    OperatorToken,
    FunctionToken,
    LeftParen,
    RightParen,
    Comma,
]

# Postfix programs only ever hold these four.
ProgramToken = Union[NumberToken, IdentifierToken, OperatorToken, FunctionToken]

UNARY_MINUS = "u-"
LOGICAL_NOT = "!"

FUNCTION_ARITY: Dict[str, int] = {
    "if": 3,
    "min": 2,
    "max": 2,
    "abs": 1,
    "sqrt": 1,
    "log": 1,
    "log10": 1,
    "exp": 1,
}

# Higher binds tighter.
PRECEDENCE: Dict[str, int] = {
    UNARY_MINUS: 5,
    LOGICAL_NOT: 5,
    "^": 4,
    "*": 3,
    "/": 3,
    "+": 2,
    "-": 2,
    "<": 1,
    "<=": 1,
    ">": 1,
    ">=": 1,
    "==": 1,
    "!=": 1,
    "&&": 0,
    "||": -1,
}
RIGHT_ASSOCIATIVE = frozenset({"^", UNARY_MINUS, LOGICAL_NOT})
UNARY_OPERATORS = frozenset({UNARY_MINUS, LOGICAL_NOT})

TWO_CHAR_OPERATORS = ("<=", ">=", "==", "!=", "&&", "||")
ONE_CHAR_OPERATORS = "+-*/^<>!"


__all__ = [
    "NumberToken",
    "IdentifierToken",
    "OperatorToken",
    "FunctionToken",
    "LeftParen",
    "RightParen",
    "Comma",
    "Token",
    "ProgramToken",
    "UNARY_MINUS",
    "LOGICAL_NOT",
    "FUNCTION_ARITY",
    "PRECEDENCE",
    "RIGHT_ASSOCIATIVE",
    "UNARY_OPERATORS",
    "TWO_CHAR_OPERATORS",
    "ONE_CHAR_OPERATORS",
]
