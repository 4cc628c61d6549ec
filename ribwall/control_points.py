"""
Control point generation for a single rib.

Each rib is sampled at evenly spaced positions along its run. The depth at
each sample comes from one of two sources, chosen once per rib:

- ImageDepth: brightness of the active pattern image (column = rib)
- WaveDepth: the configured wave, phase-shifted per rib

Points are returned as an (N, 2) array of (depth, position) rows with
strictly increasing position, which is what the spline evaluator expects.
"""

from __future__ import annotations

import math
from typing import Optional

import numpy as np

from config import RibParams, round_half_up
from .sampler import BrightnessSampler
from .waves import wave_function

MIN_CONTROL_POINTS = 2


def rib_phase_shift(params: RibParams, rib_index: int) -> float:
    """Phase shift in radians for a rib: index x phase x 2pi."""
    return rib_index * params.phase * math.pi * 2


def rib_column(params: RibParams, rib_index: int) -> float:
    """Horizontal image coordinate for a rib (0.5 for a single rib)."""
    if params.rib_count > 1:
        return rib_index / (params.rib_count - 1)
    return 0.5


class WaveDepth:
    """Unit depth from the wave function."""

    def __init__(self, params: RibParams, rib_index: int):
        self.frequency = params.frequency
        self.wave_type = params.wave_type
        self.phase_shift = rib_phase_shift(params, rib_index)

    def unit(self, t: float) -> float:
        wave = wave_function(t, self.frequency, self.wave_type, self.phase_shift)
        return (wave + 1) / 2


class ImageDepth:
    """Unit depth from pattern image brightness."""

    def __init__(self, sampler: BrightnessSampler, u: float, image_scale: float):
        self.sampler = sampler
        self.u = u
        self.image_scale = image_scale

    def unit(self, t: float) -> float:
        return self.sampler.sample(self.u, t, self.image_scale)


def select_depth_source(
    params: RibParams,
    rib_index: int,
    image_scale: float,
    sampler: Optional[BrightnessSampler] = None,
):
    """Pick the image source when an image is loaded, else the wave."""
    if sampler is not None and sampler.has_image:
        return ImageDepth(sampler, rib_column(params, rib_index), image_scale)
    return WaveDepth(params, rib_index)


def _sample_run(params: RibParams, source, num_points: int, run_length: float) -> np.ndarray:
    """Sample num_points evenly over [0, run_length]."""
    min_depth = params.min_depth
    depth_range = params.max_depth - params.min_depth

    points = np.empty((num_points, 2))
    for i in range(num_points):
        t = i / (num_points - 1) if num_points > 1 else 0.0
        points[i, 0] = min_depth + source.unit(t) * depth_range
        points[i, 1] = t * run_length

    return points


def generate_control_points(
    params: RibParams,
    rib_index: int,
    image_scale: float = 1.0,
    sampler: Optional[BrightnessSampler] = None,
) -> np.ndarray:
    """
    Generate control points over a straight run of length params.height.

    Args:
        params: Rib parameters (depths assumed already ordered)
        rib_index: Index of the rib in the array
        image_scale: Pattern tile size
        sampler: Brightness sampler holding the active image, if any

    Returns:
        (control_points, 2) array of (depth, position).
    """
    num_points = max(int(params.control_points), MIN_CONTROL_POINTS)
    source = select_depth_source(params, rib_index, image_scale, sampler)
    return _sample_run(params, source, num_points, params.height)


def lpath_point_count(params: RibParams, total_path: float) -> int:
    """Control point count for an L-path, keeping density per inch constant."""
    ratio = total_path / params.height if params.height > 0 else 1.0
    count = round_half_up(max(int(params.control_points), MIN_CONTROL_POINTS) * ratio)
    return max(count, MIN_CONTROL_POINTS)


def generate_control_points_lpath(
    params: RibParams,
    rib_index: int,
    total_path: float,
    image_scale: float = 1.0,
    sampler: Optional[BrightnessSampler] = None,
) -> np.ndarray:
    """
    Generate control points over a wall + ceiling L-path.

    Position t is normalized over total_path so the wave or image continues
    around the corner. Positions run continuously from 0 to total_path.
    """
    num_points = lpath_point_count(params, total_path)
    source = select_depth_source(params, rib_index, image_scale, sampler)
    return _sample_run(params, source, num_points, total_path)
