"""Formula tokenizer and shunting-yard parser."""

from .lexer import tokenize
from .shunting_yard import CompiledExpression, compile_expression, to_postfix
from .tokens import (
    Comma,
    FunctionToken,
    IdentifierToken,
    LeftParen,
    NumberToken,
    OperatorToken,
    RightParen,
    Token,
)

__all__ = [
    "tokenize",
    "CompiledExpression",
    "compile_expression",
    "to_postfix",
    "Comma",
    "FunctionToken",
    "IdentifierToken",
    "LeftParen",
    "NumberToken",
    "OperatorToken",
    "RightParen",
    "Token",
]
