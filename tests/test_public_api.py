import pytest

import unitexpr
from unitexpr import (
    MappingContext,
    ParseError,
    UnitMismatch,
    compile_expression,
    evaluate,
    format_dims,
    parse_unit,
)


def test_documented_workflow():
    compiled = compile_expression("(P2 - P1) / T")
    assert compiled.free_identifiers == {"P1", "P2", "T"}
    context = MappingContext.from_values(
        {"P2": 5, "P1": 1, "T": 300}, {"P2": "bar", "P1": "bar", "T": "K"}
    )
    value, dims = evaluate(compiled, context)
    assert value == pytest.approx(1333.333, rel=1e-6)
    assert format_dims(dims) == "kg/(m*s^2*K)"


def test_errors_share_a_base_class():
    with pytest.raises(unitexpr.ExpressionError):
        compile_expression("(1 + 2")
    with pytest.raises(unitexpr.ExpressionError):
        evaluate(compile_expression("1[m] + 1[s]"), MappingContext())
    assert issubclass(ParseError, ValueError)
    assert not issubclass(UnitMismatch, ParseError)


def test_exports():
    for name in unitexpr.__all__:
        assert hasattr(unitexpr, name)
    assert parse_unit("kW").scale == 1000.0
