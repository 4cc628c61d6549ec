"""Uniform Catmull-Rom evaluation of rib control points."""

import numpy as np
from scipy.interpolate import CubicHermiteSpline


def catmull_rom_tangents(points: np.ndarray) -> np.ndarray:
    """Central-difference tangents; end points are treated as duplicated."""
    padded = np.vstack([points[:1], points, points[-1:]])
    return (padded[2:] - padded[:-2]) * 0.5


def evaluate_spline_curve(control_points: np.ndarray, resolution: int) -> np.ndarray:
    """
    Evaluate a smooth curve through the control points.

    The curve is a cubic Hermite spline on integer knots with Catmull-Rom
    tangents, sampled at resolution + 1 evenly spaced curve parameters.

    Args:
        control_points: (N, 2) array, N >= 2
        resolution: Number of divisions

    Returns:
        (resolution + 1, 2) array passing through every control point.
    """
    points = np.asarray(control_points, dtype=float)
    if points.ndim != 2 or len(points) < 2:
        raise ValueError("Spline evaluation needs at least 2 control points")

    resolution = max(int(resolution), 1)
    knots = np.arange(len(points), dtype=float)
    curve = CubicHermiteSpline(knots, points, catmull_rom_tangents(points), axis=0)

    u = np.arange(resolution + 1) / resolution * (len(points) - 1)
    dense = curve(u)

    # Pin the ends so the curve meets the first/last control point exactly
    dense[0] = points[0]
    dense[-1] = points[-1]
    return dense
