"""Evaluation of compiled expressions."""

from .context import EvaluationContext, FunctionContext, MappingContext
from .evaluator import evaluate, evaluate_quantity
from .validation import DEFAULT_NAMESPACES, identifiers_with_prefix, validate_identifiers

__all__ = [
    "EvaluationContext",
    "FunctionContext",
    "MappingContext",
    "evaluate",
    "evaluate_quantity",
    "DEFAULT_NAMESPACES",
    "identifiers_with_prefix",
    "validate_identifiers",
]
