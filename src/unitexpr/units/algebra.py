"""Unit registry and unit expression parsing.

Unit strings such as ``kg*m/s^2``, ``m2``, ``kW*h`` or ``$/ton`` compile into a
:class:`UnitDescriptor` holding the factor to base SI units and the dimension
vector. The unit table is built once per process and never mutated.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import List, Mapping, NamedTuple, Optional, Tuple, Union

from ..core.dimensions import (
    AMOUNT,
    CURRENCY,
    CURRENT,
    ENERGY,
    FORCE,
    LENGTH,
    LUMINOUS,
    MASS,
    POWER,
    PRESSURE,
    TEMPERATURE,
    TIME,
    VOLUME,
    Dims,
    add_dims,
    is_dimensionless,
    normalize_dims,
    scale_dims,
    sub_dims,
    zero_dims,
)
from ..core.errors import ParseError, UnknownUnit


@dataclass(frozen=True)
class UnitDescriptor:
    """Scale to base units plus dimension vector for a parsed unit string."""

    scale: float
    dims: Dims
    text: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "scale", float(self.scale))
        object.__setattr__(self, "dims", normalize_dims(self.dims))

    def __mul__(self, other: "UnitDescriptor") -> "UnitDescriptor":
        return UnitDescriptor(self.scale * other.scale, add_dims(self.dims, other.dims))

    def __truediv__(self, other: "UnitDescriptor") -> "UnitDescriptor":
        return UnitDescriptor(self.scale / other.scale, sub_dims(self.dims, other.dims))

    def __pow__(self, exponent: float) -> "UnitDescriptor":
        return UnitDescriptor(self.scale ** exponent, scale_dims(self.dims, exponent))

    def is_dimensionless(self) -> bool:
        return is_dimensionless(self.dims)


def dimensionless_unit() -> UnitDescriptor:
    return UnitDescriptor(1.0, zero_dims())


# SI prefixes in the order they are tried; "da" must precede "d".
PREFIXES: Tuple[Tuple[str, float], ...] = (
    ("da", 1e1),
    ("Y", 1e24),
    ("Z", 1e21),
    ("E", 1e18),
    ("P", 1e15),
    ("T", 1e12),
    ("G", 1e9),
    ("M", 1e6),
    ("k", 1e3),
    ("h", 1e2),
    ("d", 1e-1),
    ("c", 1e-2),
    ("m", 1e-3),
    ("u", 1e-6),
    ("n", 1e-9),
    ("p", 1e-12),
    ("f", 1e-15),
)

HOUR_SECONDS = 3600.0
# Plant operating hours per year and operating days per year.
OPERATING_HOURS_PER_YEAR = 8000.0
OPERATING_DAYS_PER_YEAR = 330.0


def _build_table() -> dict[str, UnitDescriptor]:
    table: dict[str, UnitDescriptor] = {}

    def register(symbol: str, scale: float, dims: Dims, *aliases: str) -> None:
        unit = UnitDescriptor(scale, dims, symbol)
        for key in (symbol, *aliases):
            table[key] = unit

    # Base units
    register("kg", 1.0, MASS)
    register("g", 1e-3, MASS)
    register("m", 1.0, LENGTH)
    register("s", 1.0, TIME)
    register("K", 1.0, TEMPERATURE)
    register("mol", 1.0, AMOUNT)
    register("A", 1.0, CURRENT)
    register("cd", 1.0, LUMINOUS)
    register("USD", 1.0, CURRENCY, "$")

    # Time
    register("min", 60.0, TIME)
    register("h", HOUR_SECONDS, TIME, "hr")
    register("day", 24 * HOUR_SECONDS, TIME)
    register(
        "workday",
        (OPERATING_HOURS_PER_YEAR / OPERATING_DAYS_PER_YEAR) * HOUR_SECONDS,
        TIME,
    )
    register("year", OPERATING_HOURS_PER_YEAR * HOUR_SECONDS, TIME, "yr")

    # Mass
    register("ton", 1000.0, MASS, "tonne", "t")

    # Derived
    register("N", 1.0, FORCE)
    register("Pa", 1.0, PRESSURE)
    register("bar", 1e5, PRESSURE)
    register("J", 1.0, ENERGY)
    register("W", 1.0, POWER)
    register("Wh", HOUR_SECONDS, ENERGY)
    register("L", 1e-3, VOLUME)
    return table


@lru_cache(maxsize=1)
def unit_table() -> Mapping[str, UnitDescriptor]:
    """Return the read-only unit table, built on first use."""

    return MappingProxyType(_build_table())


@lru_cache(maxsize=1)
def _unit_table_lower() -> Mapping[str, UnitDescriptor]:
    return MappingProxyType({key.lower(): unit for key, unit in unit_table().items()})


def resolve_unit_atom(token: str) -> UnitDescriptor:
    """Resolve one unit atom: exact, case-insensitive, then SI prefix + remainder."""

    table = unit_table()
    lower = _unit_table_lower()
    if token in table:
        return table[token]
    if token.lower() in lower:
        return lower[token.lower()]

    for prefix, factor in PREFIXES:
        if not token.startswith(prefix) or len(token) == len(prefix):
            continue
        remainder = token[len(prefix) :]
        base = table.get(remainder) or lower.get(remainder.lower())
        if base is None:
            continue
        return UnitDescriptor(base.scale * factor, base.dims, token)

    raise UnknownUnit(token)


# -- Text normalisation ---------------------------------------------------
_LOCALE_REPLACEMENTS: Tuple[Tuple[str, str], ...] = (
    ("年", "year"),
    ("小时", "h"),
    ("天", "day"),
    ("吨", "ton"),
    ("μ", "u"),
    ("µ", "u"),
)
_OPERATOR_SPACING = re.compile(r"\s*([*/^])\s*")
_PAREN_SPACING = re.compile(r"(?<=\()\s+|\s+(?=\))")
_WHITESPACE = re.compile(r"\s+")


def _normalize_input(text: str) -> str:
    text = text.strip().replace("·", "*").replace("×", "*")
    # Drop spacing around operators and inside parens; other runs mean "*".
    text = _OPERATOR_SPACING.sub(r"\1", text)
    text = _PAREN_SPACING.sub("", text)
    text = _WHITESPACE.sub("*", text)
    for source, target in _LOCALE_REPLACEMENTS:
        text = text.replace(source, target)
    return text


# -- Tokenizer ------------------------------------------------------------
class _Token(NamedTuple):
    kind: str
    value: Union[str, float]
    position: int


_TOKEN_RE = re.compile(
    r"""
    (?P<lpar>\()
    |(?P<rpar>\))
    |(?P<op>[*/])
    |(?P<pow>\^)
    |(?P<num>(?:\d+(?:\.\d*)?|\.\d+))
    |(?P<signed>[+-](?:\d+(?:\.\d*)?|\.\d+))
    |(?P<sym>(?:[^\W\d_]|\$)+\d*)
    """,
    re.VERBOSE,
)
_SUFFIX_EXPONENT = re.compile(r"^(?P<base>(?:[^\W\d_]|\$)+)(?P<exp>\d+)$")


def _exponent_position(tokens: List[_Token]) -> bool:
    """A sign is allowed right after ``^`` or after ``^(``."""
    if tokens and tokens[-1].kind == "pow":
        return True
    return len(tokens) >= 2 and tokens[-1].kind == "lpar" and tokens[-2].kind == "pow"


def _tokenize(text: str) -> List[_Token]:
    tokens: List[_Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise ParseError(f"Unexpected character '{text[pos]}' in unit expression", text, pos)
        kind = match.lastgroup
        raw = match.group(0)
        if kind == "signed":
            if not _exponent_position(tokens):
                raise ParseError(f"Unexpected sign '{raw[0]}' in unit expression", text, pos)
            tokens.append(_Token("num", float(raw), pos))
        elif kind == "num":
            tokens.append(_Token("num", float(raw), pos))
        elif kind == "sym":
            suffix = _SUFFIX_EXPONENT.match(raw)
            if suffix:
                exp_pos = pos + len(suffix.group("base"))
                tokens.append(_Token("sym", suffix.group("base"), pos))
                tokens.append(_Token("pow", "^", exp_pos))
                tokens.append(_Token("num", float(suffix.group("exp")), exp_pos))
            else:
                tokens.append(_Token("sym", raw, pos))
        else:
            tokens.append(_Token(kind, raw, pos))
        pos = match.end()
    return tokens


# -- Parser ---------------------------------------------------------------
_PRECEDENCE = {"^": 3, "*": 2, "/": 2}


def _to_rpn(tokens: List[_Token], text: str) -> List[_Token]:
    output: List[_Token] = []
    stack: List[_Token] = []
    for token in tokens:
        if token.kind in ("op", "pow"):
            right_assoc = token.kind == "pow"
            while stack and stack[-1].kind in ("op", "pow"):
                top = _PRECEDENCE[stack[-1].value]
                current = _PRECEDENCE[token.value]
                if top > current or (not right_assoc and top == current):
                    output.append(stack.pop())
                else:
                    break
            stack.append(token)
        elif token.kind == "lpar":
            stack.append(token)
        elif token.kind == "rpar":
            while stack and stack[-1].kind != "lpar":
                output.append(stack.pop())
            if not stack:
                raise ParseError("Mismatched parentheses in unit", text, token.position)
            stack.pop()
        else:
            output.append(token)
    while stack:
        token = stack.pop()
        if token.kind == "lpar":
            raise ParseError("Mismatched parentheses in unit", text, token.position)
        output.append(token)
    return output


_Item = Union[float, UnitDescriptor]


def _as_descriptor(item: _Item) -> UnitDescriptor:
    if isinstance(item, UnitDescriptor):
        return item
    return UnitDescriptor(item, zero_dims())


def _apply_operator(stack: List[_Item], token: _Token, text: str) -> None:
    if len(stack) < 2:
        raise ParseError(f"Operator '{token.value}' is missing an operand", text, token.position)
    right = stack.pop()
    left = stack.pop()
    try:
        if token.value == "^":
            if not isinstance(right, float):
                raise ParseError("Unit exponent must be numeric", text, token.position)
            stack.append(left ** right)
        elif isinstance(left, float) and isinstance(right, float):
            stack.append(left * right if token.value == "*" else left / right)
        elif token.value == "*":
            stack.append(_as_descriptor(left) * _as_descriptor(right))
        else:
            stack.append(_as_descriptor(left) / _as_descriptor(right))
    except (ZeroDivisionError, OverflowError) as exc:
        raise ParseError(f"Invalid unit arithmetic: {exc}", text, token.position) from exc


def parse_unit(text: Optional[str]) -> UnitDescriptor:
    """Parse ``text`` into a :class:`UnitDescriptor`.

    Empty or ``None`` text is the dimensionless unit. Unresolvable atoms raise
    :class:`UnknownUnit`; malformed expressions raise :class:`ParseError`.
    """

    if text is None:
        return dimensionless_unit()
    normalized = _normalize_input(str(text))
    if not normalized:
        return dimensionless_unit()

    stack: List[_Item] = []
    for token in _to_rpn(_tokenize(normalized), normalized):
        if token.kind in ("op", "pow"):
            _apply_operator(stack, token, normalized)
        elif token.kind == "num":
            stack.append(float(token.value))
        else:
            stack.append(resolve_unit_atom(str(token.value)))

    if len(stack) != 1:
        raise ParseError(f"Unable to parse unit '{text}'", normalized)
    unit = _as_descriptor(stack[0])
    if not math.isfinite(unit.scale) or unit.scale <= 0:
        raise ParseError(f"Unit '{text}' has non-positive or non-finite scale", normalized)
    return UnitDescriptor(unit.scale, unit.dims, str(text))


def to_base(value: float, unit: Optional[str]) -> float:
    """Convert ``value`` expressed in ``unit`` to base units."""
    return value * parse_unit(unit).scale


def from_base(value: float, unit: Optional[str]) -> float:
    """Convert a base-unit ``value`` into ``unit``."""
    return value / parse_unit(unit).scale


__all__ = [
    "UnitDescriptor",
    "PREFIXES",
    "dimensionless_unit",
    "unit_table",
    "resolve_unit_atom",
    "parse_unit",
    "to_base",
    "from_base",
]
