from math import isclose, pi

import pytest

from starrate.curve import Bezier, Curve, Linear, Perfect, get_center
from starrate.position import Position


def assert_position_close(actual, expected, abs_tol=1e-6):
    assert isclose(actual.x, expected[0], abs_tol=abs_tol), (actual, expected)
    assert isclose(actual.y, expected[1], abs_tol=abs_tol), (actual, expected)


def test_from_kind_and_points():
    points = [(0, 0), (50, 50), (100, 0)]
    assert isinstance(Curve.from_kind_and_points('L', points), Linear)
    assert isinstance(Curve.from_kind_and_points('B', points), Bezier)
    assert isinstance(Curve.from_kind_and_points('P', points), Perfect)

    with pytest.raises(ValueError):
        Curve.from_kind_and_points('X', points)


def test_linear():
    curve = Linear([(0, 0), (100, 0), (100, 100)])
    assert curve.length == 200
    assert_position_close(curve(0), (0, 0))
    assert_position_close(curve(0.25), (50, 0))
    assert_position_close(curve(0.75), (100, 50))
    assert_position_close(curve(1), (100, 100))


def test_linear_req_length():
    shorter = Linear([(0, 0), (100, 0)], req_length=50)
    assert_position_close(shorter(1), (50, 0))

    # the last segment is extended past its control point
    longer = Linear([(0, 0), (100, 0)], req_length=150)
    assert_position_close(longer(1), (150, 0))


def test_single_point():
    curve = Linear([(10, 20)])
    assert curve(0) == Position(10, 20)
    assert curve(1) == Position(10, 20)


def test_bezier():
    curve = Bezier([(0, 0), (100, 0)])
    assert isclose(curve.length, 100)
    assert_position_close(curve(0.5), (50, 0))

    arc = Bezier([(0, 0), (50, 100), (100, 0)])
    assert_position_close(arc(0), (0, 0))
    assert_position_close(arc(1), (100, 0))
    # symmetric about x = 50
    assert_position_close(arc(0.5), (50, 50), abs_tol=1)


def test_bezier_repeated_point_starts_segment():
    curve = Bezier([(0, 0), (100, 0), (100, 0), (100, 100)])
    assert isclose(curve.length, 200)
    assert_position_close(curve(0.75), (100, 50))


def test_perfect():
    curve = Perfect([(0, 0), (50, 50), (100, 0)])
    assert isclose(curve.length, 50 * pi)
    assert_position_close(curve(0), (0, 0))
    assert_position_close(curve(0.5), (50, 50))
    assert_position_close(curve(1), (100, 0))


def test_perfect_collinear_falls_back_to_bezier():
    curve = Perfect([(0, 0), (50, 0), (100, 0)])
    assert isinstance(curve, Bezier)
    assert_position_close(curve(0.5), (50, 0))


def test_get_center():
    assert get_center((0, 0), (50, 50), (100, 0)) == Position(50, 0)

    with pytest.raises(ValueError):
        get_center((0, 0), (0, 0), (10, 10))

    with pytest.raises(ValueError):
        get_center((0, 0), (5, 5), (10, 10))
