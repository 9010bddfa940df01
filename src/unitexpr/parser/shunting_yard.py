"""Shunting-yard conversion of infix tokens into a postfix program."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Sequence, Tuple, Union

from ..core.errors import ParseError
from .lexer import tokenize
from .tokens import (
    PRECEDENCE,
    RIGHT_ASSOCIATIVE,
    Comma,
    FunctionToken,
    IdentifierToken,
    LeftParen,
    NumberToken,
    OperatorToken,
    ProgramToken,
    RightParen,
    Token,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledExpression:
    """Immutable result of :func:`compile_expression`, reusable across evaluations.

    Attributes
    ----------
    source:
        The expression text as given.
    program:
        Postfix token sequence executed by the evaluator.
    identifiers:
        Free identifier names in order of first appearance.
    """

    source: str
    program: Tuple[ProgramToken, ...]
    identifiers: Tuple[str, ...]

    @property
    def free_identifiers(self) -> FrozenSet[str]:
        return frozenset(self.identifiers)


_StackEntry = Union[OperatorToken, FunctionToken, LeftParen]


def _should_pop(top: OperatorToken, incoming: OperatorToken) -> bool:
    top_prec = PRECEDENCE[top.symbol]
    incoming_prec = PRECEDENCE[incoming.symbol]
    if incoming.symbol in RIGHT_ASSOCIATIVE:
        return top_prec > incoming_prec
    return top_prec >= incoming_prec


def to_postfix(tokens: Sequence[Token], text: str = "") -> List[ProgramToken]:
    """Reorder ``tokens`` into postfix form, validating parens and commas."""

    output: List[ProgramToken] = []
    stack: List[_StackEntry] = []
    for token in tokens:
        if isinstance(token, (NumberToken, IdentifierToken)):
            output.append(token)
        elif isinstance(token, FunctionToken):
            stack.append(token)
        elif isinstance(token, Comma):
            while stack and not isinstance(stack[-1], LeftParen):
                output.append(stack.pop())
            if not stack:
                raise ParseError("Misplaced comma", text)
        elif isinstance(token, OperatorToken):
            while stack and isinstance(stack[-1], OperatorToken) and _should_pop(stack[-1], token):
                output.append(stack.pop())
            stack.append(token)
        elif isinstance(token, LeftParen):
            stack.append(token)
        elif isinstance(token, RightParen):
            while stack and not isinstance(stack[-1], LeftParen):
                output.append(stack.pop())
            if not stack:
                raise ParseError("Mismatched parentheses", text)
            stack.pop()
            if stack and isinstance(stack[-1], FunctionToken):
                output.append(stack.pop())
        else:
            raise ParseError(f"Unknown token {token!r}", text)

    while stack:
        entry = stack.pop()
        if isinstance(entry, LeftParen):
            raise ParseError("Mismatched parentheses", text)
        output.append(entry)
    return output


def collect_identifiers(tokens: Sequence[Token]) -> Tuple[str, ...]:
    seen: List[str] = []
    for token in tokens:
        if isinstance(token, IdentifierToken) and token.path not in seen:
            seen.append(token.path)
    return tuple(seen)


def compile_expression(text: str) -> CompiledExpression:
    """Tokenize and parse ``text`` into a :class:`CompiledExpression`.

    Unit annotations are kept verbatim and only resolved at evaluation time,
    so an unknown unit inside ``[...]`` does not fail compilation.
    """

    if text is None:
        raise ParseError("Expression text is required")
    text = str(text)
    tokens = tokenize(text)
    program = tuple(to_postfix(tokens, text))
    identifiers = collect_identifiers(tokens)
    logger.debug(
        "Compiled expression %r into %d postfix tokens",
        text,
        len(program),
        extra={"payload": {"identifiers": list(identifiers)}},
    )
    return CompiledExpression(source=text, program=program, identifiers=identifiers)


__all__ = ["CompiledExpression", "to_postfix", "collect_identifiers", "compile_expression"]
