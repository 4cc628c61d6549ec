"""
Rib Wall PDE: Rib Profile Generator
===================================

Turns one RibParams set into a depth profile per rib.

Straight runs (wall or ceiling) are sampled and evaluated over [0, height].
Corner runs (BOTH) are generated as a single L-path over height + ceiling_run
so the pattern flows around the bend, then split at the corner into a wall
profile and a ceiling profile re-based to start at 0.

Index order of the returned profiles is a hard contract: rib i is placed at
a lateral offset computed from i, so profiles are never reordered or merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
import logging

import numpy as np

from config import InstallationMode, RibParams, round_half_up
from .control_points import generate_control_points, generate_control_points_lpath
from .sampler import BrightnessSampler
from .spline import evaluate_spline_curve

logger = logging.getLogger(__name__)

MIN_RESOLUTION = 2


@dataclass
class RibProfile:
    """Depth profile of one rib; arrays hold (depth, position) rows."""

    index: int
    profile: np.ndarray
    control_points: np.ndarray
    height: float
    thickness: float
    ceiling_profile: Optional[np.ndarray] = None
    ceiling_run: Optional[float] = None

    @property
    def num_points(self) -> int:
        return len(self.profile)

    @property
    def has_ceiling(self) -> bool:
        return self.ceiling_profile is not None


@dataclass
class ProfileSet:
    """Output of one generation pass."""

    profiles: List[RibProfile] = field(default_factory=list)
    ceiling_segments: List[np.ndarray] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.profiles)

    def __iter__(self):
        return iter(self.profiles)

    def __getitem__(self, index: int) -> RibProfile:
        return self.profiles[index]


def rib_lateral_offset(index: int, params: RibParams) -> float:
    """Lateral position of rib `index`, centered on the array."""
    start = -params.total_width / 2
    return start + index * params.spacing - params.thickness / 2


def split_at_corner(full_profile: np.ndarray, height: float, total_path: float):
    """
    Split an L-path profile into wall and ceiling segments.

    The split index is round(height / total_path * len(full_profile)), so the
    split may land up to one sample away from the geometric corner. The wall
    slice includes the split sample; the ceiling slice starts at it.

    Returns:
        (wall_profile, ceiling_profile) with ceiling positions re-based to 0.
    """
    fraction = height / total_path if total_path > 0 else 1.0
    split_index = round_half_up(fraction * len(full_profile))
    wall = full_profile[: split_index + 1].copy()
    ceiling = full_profile[split_index:].copy()
    ceiling[:, 1] -= height
    return wall, ceiling


def _corner_profile(
    params: RibParams,
    rib_index: int,
    resolution: int,
    image_scale: float,
    sampler: Optional[BrightnessSampler],
):
    height = params.height
    ceiling_run = params.ceiling_length
    total_path = height + ceiling_run
    ratio = total_path / height if height > 0 else 1.0

    full_controls = generate_control_points_lpath(
        params, rib_index, total_path, image_scale, sampler
    )
    total_resolution = max(round_half_up(resolution * ratio), MIN_RESOLUTION)
    full_profile = evaluate_spline_curve(full_controls, total_resolution)

    wall, ceiling = split_at_corner(full_profile, height, total_path)
    wall_controls = full_controls[full_controls[:, 1] <= height]
    return wall, wall_controls, ceiling, ceiling_run


def generate_rib_profiles(
    params: RibParams,
    installation_mode: InstallationMode = InstallationMode.WALL,
    image_scale: float = 1.0,
    sampler: Optional[BrightnessSampler] = None,
) -> ProfileSet:
    """
    Generate the profile of every rib in the array.

    NOTE: params.min_depth / params.max_depth are reordered in place, so the
    corrected ordering is visible to anything else holding the same params.

    Args:
        params: Rib parameters
        installation_mode: WALL, CEILING, or BOTH (corner wrap)
        image_scale: Pattern tile size
        sampler: Brightness sampler holding the active image, if any

    Returns:
        ProfileSet with one RibProfile per rib in index order.
    """
    params.normalize_depths()
    installation_mode = InstallationMode.parse(installation_mode)

    count = params.rib_count
    resolution = max(int(params.display_resolution), MIN_RESOLUTION)
    result = ProfileSet()

    for i in range(count):
        if installation_mode is InstallationMode.BOTH:
            profile, controls, ceiling, ceiling_run = _corner_profile(
                params, i, resolution, image_scale, sampler
            )
            result.ceiling_segments.append(ceiling)
        else:
            controls = generate_control_points(params, i, image_scale, sampler)
            profile = evaluate_spline_curve(controls, resolution)
            ceiling, ceiling_run = None, None

        result.profiles.append(
            RibProfile(
                index=i,
                profile=profile,
                control_points=controls,
                height=params.height,
                thickness=params.thickness,
                ceiling_profile=ceiling,
                ceiling_run=ceiling_run,
            )
        )

    logger.debug(
        "Generated %d rib profiles (%s, %d pts each)",
        count, installation_mode.value, len(result.profiles[0].profile),
    )
    return result
