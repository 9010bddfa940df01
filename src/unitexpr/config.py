"""Process-wide settings for the expression engine."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class EngineSettings(BaseModel):
    """Tunables read once per process.

    ``dimension_tolerance`` is the absolute tolerance used when two dimension
    vectors are compared. ``float_errors`` is handed to ``numpy.errstate``
    during evaluation; inf and NaN always propagate, the mode only decides
    whether numpy emits ``RuntimeWarning``.
    """

    dimension_tolerance: float = Field(default=1e-9, gt=0.0)
    float_errors: Literal["ignore", "warn"] = "ignore"

    model_config = ConfigDict(extra="forbid", frozen=True)


def _settings_from_env() -> EngineSettings:
    from .core.errors import ConfigurationError

    payload = {}
    sources = {}
    tolerance = os.getenv("UNITEXPR_DIMENSION_TOLERANCE")
    if tolerance:
        sources["dimension_tolerance"] = ("UNITEXPR_DIMENSION_TOLERANCE", tolerance)
        payload["dimension_tolerance"] = tolerance.strip()
    float_errors = os.getenv("UNITEXPR_FLOAT_ERRORS")
    if float_errors:
        sources["float_errors"] = ("UNITEXPR_FLOAT_ERRORS", float_errors)
        payload["float_errors"] = float_errors.strip().lower()
    try:
        return EngineSettings(**payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        variable, raw = sources[error["loc"][0]]
        raise ConfigurationError(variable, raw, error["msg"]) from None


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Return the cached settings, reading the environment on first use."""

    return _settings_from_env()


def reset_settings() -> None:
    """Forget cached settings so the next call re-reads the environment."""

    get_settings.cache_clear()


__all__ = ["EngineSettings", "get_settings", "reset_settings"]
