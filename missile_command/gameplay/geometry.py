"""
Point and vector helpers for scene coordinates.
NO UI DEPENDENCIES.
"""
import math
from typing import NamedTuple


class Point(NamedTuple):
    """A position in scene units (origin top-left, y increases downward)."""
    x: float
    y: float


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def angle_to(start: Point, end: Point) -> float:
    """Direction in radians from start towards end."""
    return math.atan2(end.y - start.y, end.x - start.x)


def advance(point: Point, angle: float, step: float) -> Point:
    """Move point by step units along angle."""
    return Point(point.x + math.cos(angle) * step, point.y + math.sin(angle) * step)


def is_finite_point(point) -> bool:
    """
    Check that point is a two-element pair of finite real numbers.
    Anything else (None, strings, NaN, inf) is rejected.
    """
    try:
        x, y = point
        return math.isfinite(x) and math.isfinite(y)
    except (TypeError, ValueError):
        return False
