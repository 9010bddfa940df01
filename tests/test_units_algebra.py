import math

import pytest

from unitexpr.core.dimensions import (
    AREA,
    CURRENCY,
    DIMENSIONLESS,
    ENERGY,
    FORCE,
    LENGTH,
    MASS,
    MASS_FLOW,
    POWER,
    PRESSURE,
    TIME,
    VELOCITY,
    dims_vector,
    sub_dims,
)
from unitexpr.core.errors import ParseError, UnknownUnit
from unitexpr.units.algebra import from_base, parse_unit, resolve_unit_atom, to_base, unit_table


def test_empty_and_missing_text_is_dimensionless():
    for text in (None, "", "   "):
        unit = parse_unit(text)
        assert unit.scale == 1.0
        assert unit.dims == DIMENSIONLESS


def test_prefix_resolution():
    km = parse_unit("km")
    assert km.scale == 1000.0
    assert km.dims == LENGTH

    kw = parse_unit("kW")
    assert kw.scale == 1000.0
    assert kw.dims == POWER
    assert kw.dims == dims_vector(mass=1, length=2, time=-3)


@pytest.mark.parametrize(
    "text, scale",
    [
        ("mm", 1e-3),
        ("cm", 1e-2),
        ("dm", 1e-1),
        ("dam", 10.0),
        ("hm", 100.0),
        ("um", 1e-6),
        ("µm", 1e-6),
        ("μm", 1e-6),
        ("nm", 1e-9),
        ("Mm", 1e6),
        ("Gm", 1e9),
    ],
)
def test_length_prefixes(text, scale):
    unit = parse_unit(text)
    assert math.isclose(unit.scale, scale)
    assert unit.dims == LENGTH


def test_exact_match_beats_prefix():
    assert parse_unit("min").scale == 60.0
    assert parse_unit("cd").dims == dims_vector(luminous=1)
    assert parse_unit("h").scale == 3600.0
    assert parse_unit("mol").dims == dims_vector(amount=1)


def test_case_insensitive_fallback():
    assert parse_unit("BAR").scale == 1e5
    assert parse_unit("pa").dims == PRESSURE
    # Prefixes themselves stay case-sensitive.
    with pytest.raises(UnknownUnit):
        parse_unit("KW")


def test_static_table_values():
    assert parse_unit("g").scale == 1e-3
    assert parse_unit("ton").scale == parse_unit("tonne").scale == parse_unit("t").scale == 1000.0
    assert parse_unit("hr").scale == 3600.0
    assert parse_unit("day").scale == 86400.0
    assert parse_unit("year").scale == parse_unit("yr").scale == 8000 * 3600.0
    assert parse_unit("workday").scale == pytest.approx(8000 / 330 * 3600.0)
    assert parse_unit("bar").dims == PRESSURE
    assert parse_unit("Wh").scale == 3600.0
    assert parse_unit("Wh").dims == ENERGY
    assert parse_unit("L").scale == pytest.approx(1e-3)
    assert parse_unit("$").dims == parse_unit("USD").dims == CURRENCY


def test_table_is_read_only():
    with pytest.raises(TypeError):
        unit_table()["furlong"] = parse_unit("m")  # type: ignore[index]


def test_compound_expressions():
    newton = parse_unit("N")
    combo = parse_unit("kg*m/s^2")
    assert newton.dims == combo.dims == FORCE
    assert math.isclose(newton.scale, combo.scale)

    assert parse_unit("kg/h").dims == MASS_FLOW
    assert parse_unit("kg/h").scale == pytest.approx(1 / 3600)
    assert parse_unit("km/h").dims == VELOCITY
    assert parse_unit("km/h").scale == pytest.approx(1 / 3.6)

    kwh = parse_unit("kW*h")
    assert kwh.scale == pytest.approx(3.6e6)
    assert kwh.dims == ENERGY
    assert parse_unit("kWh").scale == pytest.approx(3.6e6)

    per_ton = parse_unit("$/ton")
    assert per_ton.scale == pytest.approx(1e-3)
    assert per_ton.dims == sub_dims(CURRENCY, MASS)


def test_suffix_exponent():
    assert parse_unit("m2").dims == AREA
    assert parse_unit("km2").scale == pytest.approx(1e6)
    assert parse_unit("m3").dims == dims_vector(length=3)
    assert parse_unit("kg/m3").dims == dims_vector(mass=1, length=-3)


def test_exponents():
    assert parse_unit("s^-2").dims == dims_vector(time=-2)
    assert parse_unit("s^(-2)").dims == dims_vector(time=-2)
    assert parse_unit("m^(-1/2)").dims == dims_vector(length=-0.5)
    assert parse_unit("m^0.5").dims == dims_vector(length=0.5)
    assert parse_unit("m^(1/2)").dims == dims_vector(length=0.5)
    assert parse_unit("(km)^2").scale == pytest.approx(1e6)
    assert parse_unit("kg*m^2/s^2").dims == ENERGY


def test_whitespace_and_separators():
    assert parse_unit("kg m").dims == parse_unit("kg*m").dims
    assert parse_unit("kg * m").dims == parse_unit("kg*m").dims
    assert parse_unit("m ^ 2").dims == AREA
    assert parse_unit("N·m").dims == ENERGY
    assert parse_unit("kg (m/s)").dims == dims_vector(mass=1, length=1, time=-1)
    assert parse_unit("(kg) (m)").dims == dims_vector(mass=1, length=1)
    assert parse_unit("kg (m)").dims == dims_vector(mass=1, length=1)
    assert parse_unit("J/( kg K )").dims == parse_unit("J/(kg*K)").dims
    assert parse_unit("(km) ^ 2").scale == pytest.approx(1e6)


def test_locale_tokens():
    assert parse_unit("年").scale == parse_unit("year").scale
    assert parse_unit("t/小时").scale == pytest.approx(1000 / 3600)
    assert parse_unit("天").dims == TIME
    assert parse_unit("$/吨").dims == sub_dims(CURRENCY, MASS)


def test_numeric_factor():
    unit = parse_unit("1000*kg")
    assert unit.scale == 1000.0
    assert unit.dims == MASS
    assert parse_unit("100").dims == DIMENSIONLESS


def test_descriptor_keeps_source_text():
    assert parse_unit("kg/h").text == "kg/h"
    assert resolve_unit_atom("kW").text == "kW"


@pytest.mark.parametrize("text", ["furlong", "kg/furlong", "xyz2"])
def test_unknown_units(text):
    with pytest.raises(UnknownUnit):
        parse_unit(text)


@pytest.mark.parametrize(
    "text",
    ["kg/(m", "kg)", "m^kg", "kg%", "kg-2", "m^", "*", "kg/0", "0^-1", "kg m(", "m^-", "kg*(-2)"],
)
def test_malformed_units(text):
    with pytest.raises(ParseError):
        parse_unit(text)


def test_unknown_unit_is_parse_error():
    with pytest.raises(ParseError):
        parse_unit("furlong")
    with pytest.raises(ValueError):
        parse_unit("furlong")


def test_conversion_helpers():
    assert to_base(2, "bar") == 2e5
    assert from_base(2e5, "bar") == 2.0
    assert to_base(1, "km") == 1000.0
    assert from_base(3600.0, "h") == 1.0
    assert to_base(5, "") == 5
