import math

import pytest

from movement_coach.exercise_analysis.pose_utils import (
    angle_at,
    angular_difference,
    circular_mean,
    direction_angle,
    mean_deviation,
    midpoint,
    vertical_deviation,
    wrap_angle_delta,
)


def test_right_angle():
    assert angle_at((0.0, 1.0), (0.0, 0.0), (1.0, 0.0)) == pytest.approx(90.0)


@pytest.mark.parametrize("p1, p2, p3, expected", [
    ((0.0, 0.0), (0.5, 0.5), (1.0, 1.0), 180.0),
    ((0.1, 0.3), (0.2, 0.6), (0.3, 0.9), 180.0),
    ((1.0, 1.0), (0.0, 0.0), (2.0, 2.0), 0.0),
    ((0.3, 0.1), (0.1, 0.1), (0.7, 0.1), 0.0),
])
def test_collinear_points_are_exact(p1, p2, p3, expected):
    assert angle_at(p1, p2, p3) == expected


def test_angle_range():
    points = [(0.13, 0.77), (0.42, 0.05), (0.9, 0.31), (0.5, 0.5), (0.01, 0.99)]
    for a in points:
        for b in points:
            for c in points:
                assert 0.0 <= angle_at(a, b, c) <= 180.0


def test_degenerate_ray_does_not_raise():
    angle = angle_at((0.5, 0.5), (0.5, 0.5), (0.9, 0.1))
    assert angle == pytest.approx(90.0)


def test_vertical_deviation():
    assert vertical_deviation((0.5, 0.2), (0.5, 0.8)) == pytest.approx(0.0)
    assert vertical_deviation((0.8, 0.2), (0.5, 0.5)) == pytest.approx(45.0)
    assert vertical_deviation((0.2, 0.5), (0.8, 0.5)) == pytest.approx(90.0)


def test_midpoint():
    assert midpoint((0.0, 0.0), (1.0, 0.5)) == (0.5, 0.25)


def test_direction_angle_uses_upward_y():
    origin = (0.5, 0.5)
    assert direction_angle(origin, (0.7, 0.5)) == pytest.approx(0.0)
    assert direction_angle(origin, (0.5, 0.3)) == pytest.approx(90.0)
    assert direction_angle(origin, (0.3, 0.5)) == pytest.approx(180.0)
    assert direction_angle(origin, (0.5, 0.7)) == pytest.approx(270.0)


def test_wrap_angle_delta():
    assert wrap_angle_delta(10.0) == 10.0
    assert wrap_angle_delta(350.0) == -10.0
    assert wrap_angle_delta(-350.0) == 10.0
    assert wrap_angle_delta(180.0) == 180.0


def test_angular_difference_wraps():
    assert angular_difference(350.0, 10.0) == pytest.approx(20.0)
    assert angular_difference(90.0, 270.0) == pytest.approx(180.0)


def test_circular_mean_across_zero():
    mean = circular_mean([350.0, 10.0])
    assert min(mean, 360.0 - mean) == pytest.approx(0.0, abs=1e-9)
    assert circular_mean([80.0, 100.0]) == pytest.approx(90.0)


def test_mean_deviation():
    assert mean_deviation([(0.5, 0.5)] * 4) == 0.0
    square = [(0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0)]
    assert mean_deviation(square) == pytest.approx(math.sqrt(0.5))
