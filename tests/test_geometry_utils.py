# -*- coding: utf-8 -*-
"""Tests for the measurement converter functions."""

import math

import pytest

from takeoff_wizard.geometry_utils import (
    area_to_units, compute_value, count_value, format_quantity, is_degenerate,
    length_to_units, polygon_area_px, polyline_length_px, validate_scale,
)

UNIT_SQUARE = [(0, 0), (100, 0), (100, 100), (0, 100)]


def test_unit_square_area_is_one_in_either_direction():
    assert area_to_units(UNIT_SQUARE, 100) == 1.0
    assert area_to_units(list(reversed(UNIT_SQUARE)), 100) == 1.0


def test_triangle_area_half_square_unit():
    assert area_to_units([(0, 0), (100, 0), (0, 100)], 100) == 0.5


def test_area_scales_with_square_of_scale():
    assert area_to_units(UNIT_SQUARE, 50) == 4.0


def test_polygon_area_needs_three_points():
    assert polygon_area_px([(0, 0), (10, 10)]) == 0.0


def test_collinear_polyline_length():
    assert length_to_units([(0, 0), (100, 0), (200, 0)], 100) == 2.0


def test_polyline_length_is_euclidean():
    assert polyline_length_px([(0, 0), (30, 40)]) == 50.0
    assert polyline_length_px([(0, 0)]) == 0.0


def test_length_is_rounded_to_two_decimals():
    assert length_to_units([(0, 0), (1, 0)], 3) == 0.33


def test_count_is_one():
    assert count_value() == 1
    assert compute_value('count', [(5, 5)], 100) == 1.0


@pytest.mark.parametrize("value", [0, -5, "abc", "", None, True, math.nan, math.inf])
def test_invalid_scale_rejected(value):
    with pytest.raises(ValueError):
        validate_scale(value)


def test_scale_accepts_numeric_strings():
    assert validate_scale(" 150 ") == 150.0
    assert validate_scale(12) == 12.0


def test_converters_reject_invalid_scale():
    with pytest.raises(ValueError):
        area_to_units(UNIT_SQUARE, 0)
    with pytest.raises(ValueError):
        compute_value('count', [(0, 0)], -1)


def test_degenerate_traces():
    assert is_degenerate('area', [(0, 0), (10, 0)])
    assert is_degenerate('area', [(0, 0), (10, 0), (20, 0)])
    assert is_degenerate('linear', [(5, 5)])
    assert is_degenerate('linear', [(5, 5), (5, 5)])
    assert is_degenerate('count', [])
    assert not is_degenerate('area', UNIT_SQUARE)
    assert not is_degenerate('linear', [(0, 0), (1, 0)])
    assert not is_degenerate('count', [(0, 0)])


def test_float_noise_does_not_make_a_trace_measurable():
    assert is_degenerate('area', [(0.1, 0.3), (0.2, 0.6), (0.3, 0.9)])
    assert is_degenerate('area', [(1000.1, 0.3), (2000.2, 0.6), (3000.3, 0.9)])
    assert is_degenerate('linear', [(0.1, 0.2), (0.1 + 1e-12, 0.2)])
    assert not is_degenerate('area', [(0.1, 0.1), (0.2, 0.1), (0.2, 0.2)])


def test_unknown_kind_rejected():
    with pytest.raises(ValueError):
        compute_value('volume', UNIT_SQUARE, 100)


def test_format_quantity():
    assert format_quantity('area', 12.5) == "12.50"
    assert format_quantity('linear', 0) == "0.00"
    assert format_quantity('count', 3.0) == "3"
