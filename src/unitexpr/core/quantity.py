"""Runtime value type carried through every evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .dimensions import Dims, format_dims, is_dimensionless, normalize_dims, same_dims, zero_dims
from .errors import EvalError


@dataclass(frozen=True)
class Quantity:
    """A float64 value paired with its dimension vector (base SI units)."""

    value: float
    dims: Dims

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", float(self.value))
        object.__setattr__(self, "dims", normalize_dims(self.dims))

    @classmethod
    def scalar(cls, value: float) -> "Quantity":
        """Construct a dimensionless quantity."""
        return cls(value, zero_dims())

    def is_dimensionless(self) -> bool:
        return is_dimensionless(self.dims)

    def same_dims(self, other: "Quantity") -> bool:
        return same_dims(self.dims, other.dims)

    def as_tuple(self) -> tuple[float, Dims]:
        return self.value, self.dims

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        if self.is_dimensionless():
            return f"{self.value:g}"
        return f"{self.value:g} [{format_dims(self.dims)}]"


def as_quantity(item: Any) -> Quantity:
    """Accept a :class:`Quantity` or a ``(value, dims)`` pair from a lookup."""

    if isinstance(item, Quantity):
        return item
    if isinstance(item, tuple) and len(item) == 2:
        value, dims = item
        if isinstance(dims, Iterable):
            try:
                return Quantity(float(value), tuple(dims))
            except (TypeError, ValueError) as exc:
                raise EvalError(f"Lookup returned an invalid (value, dims) pair: {item!r}") from exc
    raise EvalError(f"Lookup must return a Quantity or (value, dims) pair, got {type(item).__name__}")


__all__ = ["Quantity", "as_quantity"]
