from __future__ import annotations

import math
from math import isclose

from first_million.core.numbers import clamp, growth_factor, parse_number_br, safe_divide


def test_parses_brazilian_formatted_numbers():
    assert isclose(parse_number_br("1.234,56"), 1234.56)
    assert parse_number_br("  7.000  ") == 7000
    assert isclose(parse_number_br("R$ -2,5"), -2.5)


def test_unparseable_text_becomes_zero():
    assert parse_number_br("") == 0.0
    assert parse_number_br("abc") == 0.0
    assert parse_number_br("-") == 0.0
    assert parse_number_br("1-2") == 0.0


def test_numbers_pass_through():
    assert parse_number_br(12) == 12.0
    assert parse_number_br(0.5) == 0.5


def test_clamp_bounds_and_nan():
    assert clamp(5, 0, 1) == 1
    assert clamp(-5, 0, 1) == 0
    assert clamp(0.3, 0, 1) == 0.3
    assert clamp(math.nan, -0.99, 10) == -0.99


def test_growth_factor_saturates_instead_of_raising():
    assert isclose(growth_factor(0.1, 2), 1.21)
    assert growth_factor(10.0, 5000) == math.inf


def test_safe_divide_follows_float_semantics():
    assert safe_divide(1.0, 4.0) == 0.25
    assert safe_divide(3.0, 0.0) == math.inf
    assert safe_divide(-3.0, 0.0) == -math.inf
    assert math.isnan(safe_divide(0.0, 0.0))
