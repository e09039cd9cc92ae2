"""
pose_utils.py - Shared 2-D geometry for joint angles and body alignment.

Points are (x, y) pairs in normalized image coordinates. All functions are
pure and deterministic.
"""
from typing import Iterable, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]

_EPSILON = 1e-9
_COLLINEAR_TOLERANCE = 1e-12


# --- Math & Geometry Utilities ---
def angle_at(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> float:
    """
    Calculate the angle at p2 formed by the rays p2->p1 and p2->p3.

    Point ordering convention:
    - p1: First point (e.g., hip for knee angle)
    - p2: Vertex (e.g., knee for knee angle) - angle is calculated here
    - p3: Last point (e.g., ankle for knee angle)

    The cosine is clipped to [-1, 1] before arccos so floating-point drift never
    produces a domain error. A zero-length ray yields 90 degrees.

    Returns:
        Angle in degrees in the range [0, 180]
    """
    a = np.array([p1[0], p1[1]], dtype=float)
    b = np.array([p2[0], p2[1]], dtype=float)
    c = np.array([p3[0], p3[1]], dtype=float)
    ba = a - b
    bc = c - b
    norm_product = np.linalg.norm(ba) * np.linalg.norm(bc)
    cosine_angle = np.dot(ba, bc) / max(norm_product, _EPSILON)
    cosine_angle = np.clip(cosine_angle, -1.0, 1.0)
    # Collinear rays land on exactly 0 or 180
    if abs(cosine_angle) > 1.0 - _COLLINEAR_TOLERANCE:
        cosine_angle = np.sign(cosine_angle)
    return float(np.degrees(np.arccos(cosine_angle)))


def vertical_deviation(top: Sequence[float], bottom: Sequence[float]) -> float:
    """Angle of the segment top->bottom away from vertical, in [0, 90] degrees."""
    dx = abs(top[0] - bottom[0])
    dy = abs(top[1] - bottom[1])
    return float(np.degrees(np.arctan2(dx, dy)))


def midpoint(a: Sequence[float], b: Sequence[float]) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def direction_angle(origin: Sequence[float], target: Sequence[float]) -> float:
    """
    Direction of the vector origin->target in [0, 360) degrees.

    Image y grows downward, so the y component is flipped to get the usual
    counter-clockwise orientation (0 = right, 90 = up).
    """
    dx = target[0] - origin[0]
    dy = origin[1] - target[1]
    angle = float(np.degrees(np.arctan2(dy, dx)))
    if angle < 0:
        angle += 360.0
    return angle % 360.0


def wrap_angle_delta(delta: float) -> float:
    """Bring a frame-to-frame angle delta back into (-180, 180]."""
    if delta > 180.0:
        return delta - 360.0
    if delta < -180.0:
        return delta + 360.0
    return delta


def angular_difference(a: float, b: float) -> float:
    """Smallest absolute difference between two directions, in [0, 180]."""
    diff = abs(a - b) % 360.0
    return 360.0 - diff if diff > 180.0 else diff


def circular_mean(angles: Iterable[float]) -> float:
    """Mean direction of a set of angles, in [0, 360) degrees."""
    radians = np.radians(np.array(list(angles), dtype=float))
    if radians.size == 0:
        return 0.0
    mean = float(np.degrees(np.arctan2(np.sin(radians).mean(), np.cos(radians).mean())))
    if mean < 0:
        mean += 360.0
    return mean % 360.0


def mean_deviation(points: Sequence[Sequence[float]]) -> float:
    """Mean Euclidean distance of the points from their centroid."""
    arr = np.array([[p[0], p[1]] for p in points], dtype=float)
    deviations = np.linalg.norm(arr - arr.mean(axis=0), axis=1)
    return float(deviations.mean())
