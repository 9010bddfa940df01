"""Lexer turning formula text into a flat token stream."""

from __future__ import annotations

import math
from typing import List, Tuple

from ..core.errors import ParseError
from .tokens import (
    FUNCTION_ARITY,
    LOGICAL_NOT,
    ONE_CHAR_OPERATORS,
    TWO_CHAR_OPERATORS,
    UNARY_MINUS,
    Comma,
    FunctionToken,
    IdentifierToken,
    LeftParen,
    NumberToken,
    OperatorToken,
    RightParen,
    Token,
)


def _is_identifier_start(ch: str) -> bool:
    return ch.isalpha() or ch in "_$"


def _is_identifier_part(ch: str) -> bool:
    return ch.isalnum() or ch in "_.$"


def _read_number(text: str, start: int) -> Tuple[float, int]:
    pos = start
    seen_exponent = False
    while pos < len(text):
        ch = text[pos]
        if ch.isdigit() or ch == ".":
            pos += 1
        elif ch in "eE" and not seen_exponent:
            seen_exponent = True
            pos += 1
            if pos < len(text) and text[pos] in "+-":
                pos += 1
        else:
            break

    literal = text[start:pos]
    try:
        value = float(literal)
    except ValueError:
        raise ParseError(f"Invalid number '{literal}'", text, start) from None
    if not math.isfinite(value):
        raise ParseError(f"Number '{literal}' is not finite", text, start)
    return value, pos


def _read_unit_bracket(text: str, start: int) -> Tuple[str, int]:
    """Read ``[...]`` starting at ``start``; nested brackets are balanced by depth."""

    depth = 0
    pos = start
    while pos < len(text):
        if text[pos] == "[":
            depth += 1
        elif text[pos] == "]":
            depth -= 1
            if depth == 0:
                return text[start + 1 : pos].strip(), pos + 1
        pos += 1
    raise ParseError("Unclosed unit bracket", text, start)


def _read_identifier(text: str, start: int) -> Tuple[str, int]:
    pos = start + 1
    while pos < len(text) and _is_identifier_part(text[pos]):
        pos += 1
    return text[start:pos], pos


def _followed_by_paren(text: str, pos: int) -> bool:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos < len(text) and text[pos] == "("


def _unary_context(previous: Token | None) -> bool:
    return previous is None or isinstance(previous, (OperatorToken, LeftParen, Comma))


def tokenize(text: str) -> List[Token]:
    """Split ``text`` into tokens.

    Numbers and identifiers may carry a ``[unit]`` suffix stored verbatim.
    Identifiers followed by ``(`` become :class:`FunctionToken` only for the
    built-in functions.
    """

    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch.isspace():
            pos += 1
            continue

        previous = tokens[-1] if tokens else None

        if ch.isdigit() or ch == ".":
            value, pos = _read_number(text, pos)
            unit_text = ""
            if pos < len(text) and text[pos] == "[":
                unit_text, pos = _read_unit_bracket(text, pos)
            tokens.append(NumberToken(value, unit_text))
            continue

        if _is_identifier_start(ch):
            name, pos = _read_identifier(text, pos)
            if name in FUNCTION_ARITY and _followed_by_paren(text, pos):
                tokens.append(FunctionToken(name, FUNCTION_ARITY[name]))
                continue
            unit_text = ""
            if pos < len(text) and text[pos] == "[":
                unit_text, pos = _read_unit_bracket(text, pos)
            tokens.append(IdentifierToken(name, unit_text))
            continue

        pair = text[pos : pos + 2]
        if pair in TWO_CHAR_OPERATORS:
            tokens.append(OperatorToken(pair))
            pos += 2
            continue

        if ch == "(":
            tokens.append(LeftParen())
        elif ch == ")":
            tokens.append(RightParen())
        elif ch == ",":
            tokens.append(Comma())
        elif ch == "-" and _unary_context(previous):
            tokens.append(OperatorToken(UNARY_MINUS))
        elif ch == "!":
            tokens.append(OperatorToken(LOGICAL_NOT))
        elif ch in ONE_CHAR_OPERATORS:
            tokens.append(OperatorToken(ch))
        else:
            raise ParseError(f"Unexpected character '{ch}'", text, pos)
        pos += 1

    return tokens


__all__ = ["tokenize"]
