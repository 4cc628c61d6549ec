"""
Rib profile generation across the array.

Covers the ordering contract, depth normalization, clamping of invalid
counts, image-driven ribs, and the wall/ceiling corner split.
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from config import InstallationMode, RibParams  # noqa: E402
from ribwall.profiles import (  # noqa: E402
    generate_rib_profiles,
    rib_lateral_offset,
    split_at_corner,
)
from ribwall.sampler import BrightnessSampler, ImageSource  # noqa: E402


class TestArrayContract:

    @pytest.mark.parametrize("count", [1, 2, 7, 40])
    @pytest.mark.parametrize("mode", list(InstallationMode))
    def test_one_profile_per_rib_in_order(self, count, mode):
        params = RibParams(count=count, control_points=8, display_resolution=40)
        result = generate_rib_profiles(params, mode)

        assert len(result.profiles) == count
        assert [rib.index for rib in result.profiles] == list(range(count))

    def test_profile_shape(self):
        params = RibParams(count=3, control_points=12, display_resolution=90, height=120)
        result = generate_rib_profiles(params, InstallationMode.WALL)

        for rib in result:
            assert rib.profile.shape == (91, 2)
            assert rib.control_points.shape == (12, 2)
            assert rib.height == 120
            assert rib.thickness == params.thickness
            assert rib.ceiling_profile is None
            assert rib.profile[0, 1] == 0.0
            assert rib.profile[-1, 1] == 120
            assert np.all(np.diff(rib.profile[:, 1]) > 0)
        assert result.ceiling_segments == []

    def test_ceiling_mode_is_a_straight_run(self):
        params = RibParams(count=4, control_points=10, display_resolution=50)
        wall = generate_rib_profiles(params, InstallationMode.WALL)
        ceiling = generate_rib_profiles(params, InstallationMode.CEILING)
        for a, b in zip(wall, ceiling):
            assert np.array_equal(a.profile, b.profile)

    def test_full_recompute_is_deterministic(self):
        params = RibParams(count=5)
        first = generate_rib_profiles(params, InstallationMode.BOTH)
        second = generate_rib_profiles(params, InstallationMode.BOTH)
        for a, b in zip(first, second):
            assert np.array_equal(a.profile, b.profile)
            assert np.array_equal(a.ceiling_profile, b.ceiling_profile)

    def test_mode_accepts_string_tag(self):
        params = RibParams(count=2, control_points=5, display_resolution=20)
        result = generate_rib_profiles(params, "both")
        assert result[0].has_ceiling


class TestNormalization:

    def test_reversed_depths_produce_identical_profiles(self):
        reversed_params = RibParams(min_depth=12, max_depth=4, count=6)
        ordered_params = RibParams(min_depth=4, max_depth=12, count=6)

        reversed_result = generate_rib_profiles(reversed_params, InstallationMode.WALL)
        ordered_result = generate_rib_profiles(ordered_params, InstallationMode.WALL)

        for a, b in zip(reversed_result, ordered_result):
            assert np.array_equal(a.profile, b.profile)
            assert np.array_equal(a.control_points, b.control_points)

    def test_normalization_is_visible_on_params(self):
        params = RibParams(min_depth=12, max_depth=4, count=1)
        generate_rib_profiles(params, InstallationMode.WALL)
        assert (params.min_depth, params.max_depth) == (4, 12)

    def test_invalid_counts_are_clamped(self):
        params = RibParams(count=0, control_points=1, display_resolution=0)
        result = generate_rib_profiles(params, InstallationMode.WALL)

        assert len(result) == 1
        assert len(result[0].control_points) == 2
        assert len(result[0].profile) == 3


class TestImageDriven:

    def test_uniform_image_gives_flat_ribs(self):
        pixels = np.full((8, 8, 3), 128, dtype=np.uint8)
        sampler = BrightnessSampler(ImageSource(pixels))
        params = RibParams(count=3, min_depth=4, max_depth=12)

        result = generate_rib_profiles(params, InstallationMode.WALL, 1.0, sampler)
        expected = 4 + 128 / 255 * 8
        for rib in result:
            assert np.allclose(rib.profile[:, 0], expected)

    def test_columns_map_to_ribs(self):
        # Left half black, right half white
        pixels = np.zeros((4, 9, 3), dtype=np.uint8)
        pixels[:, 4:, :] = 255
        sampler = BrightnessSampler(ImageSource(pixels))
        params = RibParams(count=3, min_depth=2, max_depth=6, control_points=5)

        result = generate_rib_profiles(params, InstallationMode.WALL, 1.0, sampler)
        assert np.allclose(result[0].control_points[:, 0], 2)
        assert np.allclose(result[1].control_points[:, 0], 6)
        # u = 1.0 wraps back onto the first column
        assert np.allclose(result[2].control_points[:, 0], 2)


class TestCornerSplit:

    def test_wall_and_ceiling_meet_at_corner(self):
        params = RibParams(height=100, ceiling_run=50, count=3)
        result = generate_rib_profiles(params, InstallationMode.BOTH)

        assert len(result.ceiling_segments) == 3
        for rib, segment in zip(result, result.ceiling_segments):
            assert rib.ceiling_profile is segment
            assert rib.ceiling_run == 50
            assert rib.profile[-1, 1] == pytest.approx(100, abs=1.0)
            assert rib.ceiling_profile[0, 1] == pytest.approx(0, abs=1.0)
            assert rib.ceiling_profile[-1, 1] == pytest.approx(50)
            # The split sample is shared by both sides
            assert rib.profile[-1, 0] == rib.ceiling_profile[0, 0]

    def test_dense_resolution_scales_with_path(self):
        params = RibParams(height=100, ceiling_run=50, count=1, display_resolution=200)
        rib = generate_rib_profiles(params, InstallationMode.BOTH)[0]
        # 300 divisions -> 301 samples, split at round(2/3 * 301) = 201
        assert len(rib.profile) == 202
        assert len(rib.ceiling_profile) == 100

    def test_wall_control_points_stop_at_corner(self):
        params = RibParams(height=100, ceiling_run=50, count=1, control_points=20)
        rib = generate_rib_profiles(params, InstallationMode.BOTH)[0]
        assert np.all(rib.control_points[:, 1] <= 100)
        assert len(rib.control_points) < 30

    def test_split_helper(self):
        full = np.column_stack([np.ones(11), np.linspace(0, 150, 11)])
        wall, ceiling = split_at_corner(full, 100, 150)
        # round(100/150 * 11) = 7
        assert len(wall) == 8
        assert len(ceiling) == 4
        assert wall[-1, 1] == full[7, 1]
        assert ceiling[0, 1] == pytest.approx(full[7, 1] - 100)
        assert full[7, 1] == 105  # source array untouched

    def test_zero_ceiling_run(self):
        params = RibParams(height=100, ceiling_run=0, count=1, display_resolution=20)
        rib = generate_rib_profiles(params, InstallationMode.BOTH)[0]
        assert rib.profile[-1, 1] == pytest.approx(100)


def test_lateral_offset_centers_array():
    params = RibParams(count=5, spacing=10, thickness=0.5)
    offsets = [rib_lateral_offset(i, params) for i in range(5)]
    assert offsets[0] == -20.25
    assert offsets[-1] == 19.75
    assert np.allclose(np.diff(offsets), 10)
