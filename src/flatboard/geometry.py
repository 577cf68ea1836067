"""
Rotation and trigonometry helpers.

Angles are given in degrees, positions in millimeters.
"""
import math

import numpy as np

from .model import ORIGIN, Point2D


def normalize_degrees(degrees: float) -> float:
    return degrees % 360.0


def rotation_matrix(degrees: float) -> np.ndarray:
    angle = math.radians(degrees)
    return np.array(
        [
            [math.cos(angle), -math.sin(angle)],
            [math.sin(angle), math.cos(angle)],
        ]
    )


def rotate_point(point: Point2D, pivot: Point2D = ORIGIN, degrees: float = 0.0) -> Point2D:
    """
    Rotate `point` counter-clockwise about `pivot`.
    """
    if not degrees:
        return Point2D(*point)

    delta = np.array([point[0] - pivot[0], point[1] - pivot[1]])
    x, y = np.matmul(rotation_matrix(degrees), delta)
    return Point2D(pivot[0] + float(x), pivot[1] + float(y))


def rotate_offset(offset_x: float, offset_y: float, degrees: float) -> Point2D:
    return rotate_point(Point2D(offset_x, offset_y), ORIGIN, degrees)


def absolute_cosine_sine(degrees: float) -> float:
    angle = math.radians(normalize_degrees(degrees))
    return abs(math.cos(angle)) + abs(math.sin(angle))


def projected_half_extent(degrees: float, size: float) -> float:
    """
    Half of the axis-aligned extent of a square of side `size` rotated by `degrees`.

    The same value applies on both axes.
    """
    return 0.5 * absolute_cosine_sine(degrees) * size


def half_index(count: int) -> float:
    return (count - 1) / 2
