"""Circular angle arithmetic on the plane.

All angles are radians. ``vector_angle`` uses an explicit case split rather
than ``atan2``; the split fixes which quadrant owns each axis ray, and the
scalar and vectorized versions must agree on it.
"""

from __future__ import annotations

import math

import numpy as np

TWO_PI = 2.0 * math.pi


def rotate_90deg(vec) -> np.ndarray:
    """Rotate a 2D vector counter-clockwise by a quarter turn."""
    return np.array([-vec[1], vec[0]], dtype=float)


def angle_mod_2pi(a: float) -> float:
    """Map ``a`` to ``[0, 2π)``.

    Negative inputs use ``2π + fmod(a, 2π)``, which lands exactly on ``2π``
    for negative multiples of ``2π`` (and for tiny negatives); that value is
    folded back to ``0.0``.
    """
    if a >= 0:
        return math.fmod(a, TWO_PI)
    angle = TWO_PI + math.fmod(a, TWO_PI)
    if angle >= TWO_PI:
        return 0.0
    return angle


def vector_angle(p) -> float:
    """Return the polar angle of the 2D vector ``p`` in ``[0, 2π)``."""
    x = float(p[0])
    y = float(p[1])
    if x == 0:
        if y >= 0:
            return math.pi / 2
        return 3 * math.pi / 2
    # hypot does not underflow: it is positive for x != 0 and at least |y|.
    s = math.asin(y / math.hypot(x, y))
    if x > 0:
        if y >= 0:
            return s
        return TWO_PI + s
    # x < 0
    return math.pi - s


def rotation_angle(a1: float, a2: float) -> float:
    """Counter-clockwise angle needed to rotate from ``a1`` to ``a2``."""
    angle1 = angle_mod_2pi(a1)
    angle2 = angle_mod_2pi(a2)
    if angle1 <= angle2:
        return angle2 - angle1
    return angle2 + TWO_PI - angle1


def is_angle_between_ccw(a: float, a1: float, a2: float) -> bool:
    """True if ``a`` lies on the ccw arc ``[a1, a2)``."""
    angle = angle_mod_2pi(a)
    angle1 = angle_mod_2pi(a1)
    angle2 = angle_mod_2pi(a2)
    if angle1 <= angle2:
        return angle1 <= angle < angle2
    return angle < angle2 or angle >= angle1


def is_angle_between_cw(a: float, a1: float, a2: float) -> bool:
    """True if ``a`` lies on the cw arc from ``a1`` down to ``a2``, i.e. ``(a2, a1]``."""
    angle = angle_mod_2pi(a)
    angle1 = angle_mod_2pi(a1)
    angle2 = angle_mod_2pi(a2)
    if angle2 <= angle1:
        return angle2 < angle <= angle1
    return angle <= angle1 or angle > angle2


def is_angle_between(a: float, a1: float, a2: float) -> bool:
    """Arc membership test; the arc runs ccw when ``a1 < a2`` and cw otherwise.

    The comparison uses the raw (unmodded) ``a1`` and ``a2``.
    """
    if a1 < a2:
        return is_angle_between_ccw(a, a1, a2)
    return is_angle_between_cw(a, a1, a2)


def vector_vector_angle(vec1, vec2) -> float:
    """Signed angle from ``vec1`` to ``vec2`` in ``(-π, π]``."""
    cos = float(vec1[0]) * float(vec2[0]) + float(vec1[1]) * float(vec2[1])
    sin = float(vec1[0]) * float(vec2[1]) - float(vec1[1]) * float(vec2[0])
    angle = vector_angle((cos, sin))
    if angle > math.pi:
        angle -= TWO_PI
    return angle


def vector_angles(points: np.ndarray) -> np.ndarray:
    """Vectorized :func:`vector_angle` over an ``(n, 2)`` array."""
    points = np.asarray(points, dtype=float)
    x = points[:, 0]
    y = points[:, 1]
    r = np.hypot(x, y)
    # r == 0 only when x == y == 0, and that branch does not use asin.
    safe_r = np.where(r > 0, r, 1.0)
    s = np.arcsin(y / safe_r)
    return np.select(
        [
            (x == 0) & (y >= 0),
            x == 0,
            (x > 0) & (y >= 0),
            x > 0,
        ],
        [
            np.full_like(x, math.pi / 2),
            np.full_like(x, 3 * math.pi / 2),
            s,
            TWO_PI + s,
        ],
        default=math.pi - s,
    )


def vector_vector_angles(vec1: np.ndarray, vec2: np.ndarray) -> np.ndarray:
    """Vectorized :func:`vector_vector_angle` over paired ``(n, 2)`` arrays."""
    vec1 = np.asarray(vec1, dtype=float)
    vec2 = np.asarray(vec2, dtype=float)
    cos = vec1[:, 0] * vec2[:, 0] + vec1[:, 1] * vec2[:, 1]
    sin = vec1[:, 0] * vec2[:, 1] - vec1[:, 1] * vec2[:, 0]
    angles = vector_angles(np.column_stack((cos, sin)))
    return np.where(angles > math.pi, angles - TWO_PI, angles)


__all__ = [
    "TWO_PI",
    "rotate_90deg",
    "angle_mod_2pi",
    "vector_angle",
    "rotation_angle",
    "is_angle_between_ccw",
    "is_angle_between_cw",
    "is_angle_between",
    "vector_vector_angle",
    "vector_angles",
    "vector_vector_angles",
]
