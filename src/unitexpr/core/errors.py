"""Exception hierarchy shared by the unit registry, parser and evaluator."""

from __future__ import annotations


class ExpressionError(Exception):
    """Base class for every error raised by :mod:`unitexpr`."""


class ParseError(ExpressionError, ValueError):
    """Raised when expression or unit text is malformed."""

    def __init__(self, message: str, text: str = "", position: int | None = None) -> None:
        pointer = ""
        if text and position is not None and 0 <= position <= len(text):
            pointer = f"\n{text}\n{' ' * position}^"
        super().__init__(f"{message}{pointer}")
        self.message = message
        self.text = text
        self.position = position


class UnknownUnit(ParseError):
    """Raised when a unit atom cannot be resolved against the unit table."""

    def __init__(self, token: str, text: str = "") -> None:
        super().__init__(f"Unknown unit token '{token}'")
        self.token = token
        self.text = text


class UnknownFunction(ExpressionError):
    """Raised when a program references a function the engine does not define."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown function '{name}'")
        self.name = name


class UnknownOperator(ExpressionError):
    """Raised when a program contains an operator the engine does not define."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unknown operator '{symbol}'")
        self.symbol = symbol


class UnitMismatch(ExpressionError):
    """Raised when operand dimensions violate an operator's rule."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail


class EvalError(ExpressionError):
    """Raised when the stack machine reaches an invalid state."""


class MissingOperand(EvalError):
    """Raised when an operator or function finds too few values on the stack."""

    def __init__(self, operation: str, required: int, available: int) -> None:
        super().__init__(
            f"'{operation}' needs {required} operand(s) but only {available} available"
        )
        self.operation = operation
        self.required = required
        self.available = available


class UnknownSymbol(EvalError):
    """Raised by mapping-backed contexts when a name has no binding."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown symbol '{name}'")
        self.name = name


class InvalidIdentifier(ExpressionError):
    """Raised by static validation when an identifier is outside the allowed namespaces."""

    def __init__(self, label: str, name: str, allowed: tuple[str, ...]) -> None:
        prefixes = "/".join(allowed)
        super().__init__(f"{label} uses invalid symbol '{name}'. Use {prefixes} prefixes.")
        self.label = label
        self.name = name
        self.allowed = allowed


class ConfigurationError(ExpressionError, ValueError):
    """Raised when an ``UNITEXPR_*`` environment variable holds an invalid value."""

    def __init__(self, variable: str, value: str, detail: str) -> None:
        super().__init__(f"Invalid {variable}={value!r}: {detail}")
        self.variable = variable
        self.value = value
        self.detail = detail


__all__ = [
    "ExpressionError",
    "ConfigurationError",
    "ParseError",
    "UnknownUnit",
    "UnknownFunction",
    "UnknownOperator",
    "UnitMismatch",
    "EvalError",
    "MissingOperand",
    "UnknownSymbol",
    "InvalidIdentifier",
]
