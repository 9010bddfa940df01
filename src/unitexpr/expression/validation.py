"""Static checks on compiled expressions, run before any evaluation."""

from __future__ import annotations

from typing import List, Sequence

from ..core.errors import InvalidIdentifier
from ..parser.shunting_yard import CompiledExpression

DEFAULT_NAMESPACES = ("x.", "param.", "result.", "derived.")


def validate_identifiers(
    compiled: CompiledExpression,
    allowed_prefixes: Sequence[str] = DEFAULT_NAMESPACES,
    label: str = "Expression",
) -> None:
    """Raise :class:`InvalidIdentifier` for the first name outside ``allowed_prefixes``."""

    allowed = tuple(allowed_prefixes)
    for name in compiled.identifiers:
        if not name.startswith(allowed):
            raise InvalidIdentifier(label, name, allowed)


def identifiers_with_prefix(compiled: CompiledExpression, prefix: str) -> List[str]:
    """Return sorted names under ``prefix`` with the prefix stripped.

    Useful for working out which external results a formula needs, e.g.
    ``result.W_net`` -> ``W_net``.
    """

    return sorted(
        {name[len(prefix) :] for name in compiled.free_identifiers if name.startswith(prefix)}
    )


__all__ = ["DEFAULT_NAMESPACES", "validate_identifiers", "identifiers_with_prefix"]
