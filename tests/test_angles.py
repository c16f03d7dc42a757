import math

import numpy as np
import pytest

from geometry.angles import (
    TWO_PI,
    angle_mod_2pi,
    is_angle_between,
    is_angle_between_ccw,
    is_angle_between_cw,
    rotate_90deg,
    rotation_angle,
    vector_angle,
    vector_angles,
    vector_vector_angle,
    vector_vector_angles,
)


@pytest.mark.parametrize(
    "a",
    [0.0, 1.0, -1.0, TWO_PI, -TWO_PI, 3 * TWO_PI, -5 * TWO_PI, 1e6, -1e6, -1e-20, 7.5],
)
def test_angle_mod_2pi_stays_in_half_open_range(a):
    result = angle_mod_2pi(a)
    assert 0.0 <= result < TWO_PI


def test_angle_mod_2pi_values():
    assert angle_mod_2pi(0.5) == pytest.approx(0.5)
    assert angle_mod_2pi(-0.5) == pytest.approx(TWO_PI - 0.5)
    assert angle_mod_2pi(TWO_PI + 0.25) == pytest.approx(0.25)
    assert angle_mod_2pi(-TWO_PI) == 0.0


def test_vector_angle_axis_rays():
    assert vector_angle((1.0, 0.0)) == 0.0
    assert vector_angle((0.0, 1.0)) == pytest.approx(math.pi / 2)
    assert vector_angle((-1.0, 0.0)) == pytest.approx(math.pi)
    assert vector_angle((0.0, -1.0)) == pytest.approx(3 * math.pi / 2)
    # The zero vector falls into the x == 0, y >= 0 branch.
    assert vector_angle((0.0, 0.0)) == pytest.approx(math.pi / 2)


def test_vector_angle_quadrants():
    assert vector_angle((1.0, 1.0)) == pytest.approx(math.pi / 4)
    assert vector_angle((-1.0, 1.0)) == pytest.approx(3 * math.pi / 4)
    assert vector_angle((-1.0, -1.0)) == pytest.approx(5 * math.pi / 4)
    assert vector_angle((1.0, -1.0)) == pytest.approx(7 * math.pi / 4)


def test_vector_angle_agrees_with_atan2_away_from_axes(rng):
    for p in rng.normal(size=(50, 2)):
        expected = math.atan2(p[1], p[0]) % TWO_PI
        assert vector_angle(p) == pytest.approx(expected, abs=1e-6)


def test_vectorized_vector_angle_matches_scalar(rng):
    points = np.vstack(
        (
            rng.normal(size=(40, 2)),
            [[1.0, 0.0], [0.0, 1.0], [-1.0, 0.0], [0.0, -1.0], [0.0, 0.0], [-2.0, -0.0]],
        )
    )
    expected = np.array([vector_angle(p) for p in points])
    assert np.allclose(vector_angles(points), expected, rtol=0.0, atol=1e-12)


def test_vector_angle_of_tiny_vectors():
    points = np.array(
        [[1e-170, 0.0], [1e-170, 1e-170], [-1e-170, -1e-170], [-1e-170, 1e-200], [1e-300, -1e-300]]
    )
    expected = [0.0, math.pi / 4, 5 * math.pi / 4, math.pi, 7 * math.pi / 4]
    scalar = [vector_angle(p) for p in points]
    assert scalar == pytest.approx(expected, abs=1e-12)
    assert np.allclose(vector_angles(points), scalar, rtol=0.0, atol=1e-12)


def test_vector_vector_angle_of_tiny_vectors():
    assert vector_vector_angle((1e-160, 0.0), (1e-160, 0.0)) == 0.0
    assert vector_vector_angle((1e-160, 0.0), (0.0, 1e-160)) == pytest.approx(math.pi / 2)
    assert vector_vector_angle((1e-160, 0.0), (0.0, -1e-160)) == pytest.approx(-math.pi / 2)


def test_rotation_angle():
    assert rotation_angle(0.0, math.pi / 2) == pytest.approx(math.pi / 2)
    assert rotation_angle(math.pi / 2, 0.0) == pytest.approx(3 * math.pi / 2)
    assert rotation_angle(1.0, 1.0) == 0.0
    assert rotation_angle(-0.25, 0.25) == pytest.approx(0.5)


def test_is_angle_between_boundaries():
    a1, a2 = 0.5, 2.0
    assert is_angle_between(a1, a1, a2)
    assert not is_angle_between(a2, a1, a2)
    assert is_angle_between(1.0, a1, a2)
    assert not is_angle_between(3.0, a1, a2)


def test_is_angle_between_clockwise_when_a1_not_less():
    # cw arc from 2.0 down to 0.5 is (0.5, 2.0]
    assert is_angle_between(2.0, 2.0, 0.5)
    assert not is_angle_between(0.5, 2.0, 0.5)
    assert is_angle_between(1.0, 2.0, 0.5)
    assert not is_angle_between(3.0, 2.0, 0.5)


def test_is_angle_between_wraps_through_zero():
    assert is_angle_between_ccw(0.1, 6.0, 0.5)
    assert is_angle_between_ccw(6.1, 6.0, 0.5)
    assert not is_angle_between_ccw(3.0, 6.0, 0.5)
    assert is_angle_between_cw(0.1, 0.5, 6.0)
    assert not is_angle_between_cw(3.0, 0.5, 6.0)


def test_is_angle_between_uses_raw_values():
    # -1 < 1 raw, so the ccw arc from -1 (i.e. 2π-1) to 1 is used.
    assert is_angle_between(0.0, -1.0, 1.0)
    assert not is_angle_between(math.pi, -1.0, 1.0)


def test_vector_vector_angle_signed():
    assert vector_vector_angle((1.0, 0.0), (0.0, 1.0)) == pytest.approx(math.pi / 2)
    assert vector_vector_angle((0.0, 1.0), (1.0, 0.0)) == pytest.approx(-math.pi / 2)
    assert vector_vector_angle((1.0, 0.0), (-1.0, 0.0)) == pytest.approx(math.pi)
    assert vector_vector_angle((2.0, 2.0), (3.0, 3.0)) == 0.0


def test_vector_vector_angle_range_and_vectorized(rng):
    v1 = rng.normal(size=(60, 2))
    v2 = rng.normal(size=(60, 2))
    angles = vector_vector_angles(v1, v2)
    assert np.all(angles > -math.pi) and np.all(angles <= math.pi)
    expected = np.array([vector_vector_angle(a, b) for a, b in zip(v1, v2)])
    assert np.allclose(angles, expected, rtol=0.0, atol=1e-12)


def test_rotate_90deg():
    assert np.allclose(rotate_90deg([2.0, 1.0]), [-1.0, 2.0])
    assert vector_vector_angle((2.0, 1.0), rotate_90deg([2.0, 1.0])) == pytest.approx(
        math.pi / 2
    )
