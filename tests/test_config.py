import pytest
from pydantic import ValidationError

from unitexpr.config import EngineSettings, get_settings, reset_settings
from unitexpr.core.dimensions import FORCE, same_dims
from unitexpr.core.errors import ConfigurationError, ExpressionError
from unitexpr.expression.evaluator import evaluate
from unitexpr.parser.shunting_yard import compile_expression


def test_defaults():
    settings = get_settings()
    assert settings.dimension_tolerance == 1e-9
    assert settings.float_errors == "ignore"
    assert get_settings() is settings


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("UNITEXPR_DIMENSION_TOLERANCE", "1e-3")
    monkeypatch.setenv("UNITEXPR_FLOAT_ERRORS", "WARN")
    reset_settings()
    settings = get_settings()
    assert settings.dimension_tolerance == 1e-3
    assert settings.float_errors == "warn"
    assert same_dims(FORCE, tuple(x + 1e-4 for x in FORCE))


def test_validation():
    with pytest.raises(ValidationError):
        EngineSettings(dimension_tolerance=0)
    with pytest.raises(ValidationError):
        EngineSettings(float_errors="raise")
    with pytest.raises(ValidationError):
        EngineSettings(unknown=True)


def test_settings_are_frozen():
    settings = EngineSettings()
    with pytest.raises(ValidationError):
        settings.dimension_tolerance = 1.0


@pytest.mark.parametrize(
    "variable, value",
    [
        ("UNITEXPR_FLOAT_ERRORS", "raise"),
        ("UNITEXPR_DIMENSION_TOLERANCE", "abc"),
        ("UNITEXPR_DIMENSION_TOLERANCE", "-1"),
    ],
)
def test_bad_environment_raises_configuration_error(monkeypatch, variable, value):
    monkeypatch.setenv(variable, value)
    reset_settings()
    with pytest.raises(ConfigurationError) as excinfo:
        get_settings()
    assert excinfo.value.variable == variable
    assert excinfo.value.value == value
    assert variable in str(excinfo.value)


def test_bad_environment_surfaces_from_evaluate(monkeypatch):
    monkeypatch.setenv("UNITEXPR_FLOAT_ERRORS", "raise")
    reset_settings()
    with pytest.raises(ExpressionError):
        evaluate(compile_expression("1 + 1"), lambda name: None)
