from fractions import Fraction

import pytest

from pantrycart.services.scaler import format_quantity, parse_leading_quantity, scale


def test_scale_doubles_leading_amounts():
    lines = ["2 cups flour", "1/2 tsp salt", "a pinch of love"]
    assert scale(lines, 2) == ["4 cups flour", "1 tsp salt", "a pinch of love"]


def test_scale_factor_one_is_identity():
    lines = ["1 1/2 cups sugar", "weird  spacing ", "3.75 oz cheese"]
    assert scale(lines, 1) == lines


def test_mixed_fraction_is_parsed_before_whole_number():
    assert parse_leading_quantity("1 1/2 cups milk") == (1.5, "cups milk")
    assert scale(["1 1/2 cups milk"], 2) == ["3 cups milk"]


def test_decimal_and_fraction_factor():
    assert scale(["2.5 tbsp butter"], 2) == ["5 tbsp butter"]
    assert scale(["3 eggs"], Fraction(1, 3)) == ["1 eggs"]


def test_halving_snaps_to_common_fractions():
    assert scale(["1 cup rice", "3 cloves garlic"], 0.5) == ["1/2 cup rice", "1 1/2 cloves garlic"]
    assert scale(["1/2 cup oil"], 0.5) == ["1/4 cup oil"]


def test_thirds():
    assert scale(["1 cup stock"], Fraction(1, 3)) == ["1/3 cup stock"]
    assert scale(["1/3 cup stock"], 2) == ["2/3 cup stock"]


def test_unsnappable_value_uses_two_decimals():
    assert scale(["1 cup water"], 0.4) == ["0.40 cup water"]


def test_line_without_space_after_number_is_left_alone():
    assert scale(["2cups flour", "salt to taste"], 3) == ["2cups flour", "salt to taste"]


def test_zero_denominator_is_not_a_quantity():
    assert scale(["1/0 cup nothing"], 2) == ["1/0 cup nothing"]


def test_zero_quantity_leaves_line_unchanged():
    assert scale(["0 cups sugar"], 2) == ["0 cups sugar"]


def test_non_positive_factor_is_rejected():
    with pytest.raises(ValueError):
        scale(["1 cup flour"], 0)


@pytest.mark.parametrize("value,expected", [
    (4.0, "4"),
    (2.995, "3"),
    (0.75, "3/4"),
    (2.25, "2 1/4"),
    (0.66, "2/3"),
    (0, ""),
])
def test_format_quantity(value, expected):
    assert format_quantity(value) == expected


def test_double_then_halve_restores_quantities():
    lines = ["1/2 tsp salt", "1 1/2 cups flour", "3 eggs", "1/3 cup milk"]
    assert scale(scale(lines, 2), 0.5) == lines


def test_tiny_scaled_amount_is_not_shown_as_zero():
    assert format_quantity(0.004) == ""
    assert scale(["0.01 tsp saffron"], 0.4) == ["0.01 tsp saffron"]
