"""Ready-made evaluation contexts.

The evaluator only needs an object with a ``lookup(name)`` method returning a
:class:`~unitexpr.core.quantity.Quantity`. These helpers cover the common cases
of a fixed mapping of bound names and a plain callable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, runtime_checkable

from ..core.errors import UnknownSymbol
from ..core.quantity import Quantity, as_quantity
from ..units.algebra import parse_unit


@runtime_checkable
class EvaluationContext(Protocol):
    def lookup(self, name: str) -> Quantity:  # pragma: no cover - protocol
        ...


@dataclass(frozen=True)
class MappingContext:
    """Context backed by a read-only mapping of names to quantities."""

    bindings: Mapping[str, Quantity] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {name: as_quantity(item) for name, item in self.bindings.items()}
        object.__setattr__(self, "bindings", MappingProxyType(frozen))

    def lookup(self, name: str) -> Quantity:
        try:
            return self.bindings[name]
        except KeyError:
            raise UnknownSymbol(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def bind(self, name: str, item: Any) -> "MappingContext":
        """Return a new context with ``name`` bound to ``item``."""
        merged: Dict[str, Any] = dict(self.bindings)
        merged[name] = item
        return MappingContext(merged)

    @classmethod
    def from_values(
        cls,
        values: Mapping[str, float],
        units: Optional[Mapping[str, str]] = None,
        *,
        prefix: str = "",
    ) -> "MappingContext":
        """Bind raw numbers, converting each from its unit string to base units.

        Names missing from ``units`` are dimensionless. ``prefix`` namespaces
        every binding, e.g. ``prefix="x."`` binds ``T_in`` as ``x.T_in``.
        """

        units = units or {}
        bindings: Dict[str, Quantity] = {}
        for name, raw in values.items():
            unit = parse_unit(units.get(name, ""))
            bindings[f"{prefix}{name}"] = Quantity(float(raw) * unit.scale, unit.dims)
        return cls(bindings)

    def merged(self, other: "MappingContext") -> "MappingContext":
        """Return a context holding both binding sets; ``other`` wins on clashes."""
        combined: Dict[str, Any] = dict(self.bindings)
        combined.update(other.bindings)
        return MappingContext(combined)


@dataclass(frozen=True)
class FunctionContext:
    """Adapter turning a bare ``name -> Quantity`` callable into a context."""

    func: Callable[[str], Any]

    def lookup(self, name: str) -> Quantity:
        return as_quantity(self.func(name))


__all__ = ["EvaluationContext", "MappingContext", "FunctionContext"]
