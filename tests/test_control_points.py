"""Control point sampling for straight and L-shaped runs."""

import math
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402

from config import RibParams  # noqa: E402
from ribwall.control_points import (  # noqa: E402
    ImageDepth,
    WaveDepth,
    generate_control_points,
    generate_control_points_lpath,
    lpath_point_count,
    rib_column,
    round_half_up,
    select_depth_source,
)
from ribwall.sampler import BrightnessSampler, ImageSource  # noqa: E402


def _gray_sampler(value: int) -> BrightnessSampler:
    pixels = np.full((6, 6, 3), value, dtype=np.uint8)
    return BrightnessSampler(ImageSource(pixels))


class TestStraightRun:

    def test_count_and_positions(self):
        params = RibParams(height=120, control_points=7)
        points = generate_control_points(params, 0)

        assert points.shape == (7, 2)
        assert np.allclose(points[:, 1], np.linspace(0, 120, 7))
        assert np.all(np.diff(points[:, 1]) > 0)

    def test_wave_depths(self):
        params = RibParams(min_depth=4, max_depth=12, frequency=2, phase=0.25, control_points=11)
        rib_index = 3
        points = generate_control_points(params, rib_index)

        shift = rib_index * 0.25 * 2 * math.pi
        for i, (depth, _) in enumerate(points):
            t = i / 10
            wave = math.sin(t * 2 * 2 * math.pi + shift)
            assert depth == pytest.approx(4 + (wave + 1) / 2 * 8)

    def test_depths_within_range(self):
        params = RibParams(min_depth=3, max_depth=9, wave_type=2, control_points=33)
        points = generate_control_points(params, 5)
        assert points[:, 0].min() >= 3 - 1e-9
        assert points[:, 0].max() <= 9 + 1e-9

    def test_phase_travels_across_ribs(self):
        params = RibParams(phase=0.5, control_points=5)
        first = generate_control_points(params, 0)
        second = generate_control_points(params, 1)
        # Half a cycle later the sine is mirrored about mid-depth
        mid = (params.min_depth + params.max_depth) / 2
        assert np.allclose(first[:, 0] - mid, -(second[:, 0] - mid))

    def test_image_depths(self):
        params = RibParams(min_depth=2, max_depth=10, control_points=6)
        sampler = _gray_sampler(255)
        points = generate_control_points(params, 0, 1.0, sampler)
        assert np.allclose(points[:, 0], 10.0)

        sampler = _gray_sampler(0)
        points = generate_control_points(params, 0, 1.0, sampler)
        assert np.allclose(points[:, 0], 2.0)

    def test_empty_sampler_uses_wave(self):
        params = RibParams(control_points=6)
        with_empty = generate_control_points(params, 2, 1.0, BrightnessSampler())
        without = generate_control_points(params, 2)
        assert np.array_equal(with_empty, without)

    @pytest.mark.parametrize("requested", [1, 0, -4])
    def test_too_few_points_clamped(self, requested):
        params = RibParams(control_points=requested)
        points = generate_control_points(params, 0)
        assert len(points) == 2
        assert points[0, 1] == 0.0
        assert points[-1, 1] == params.height


class TestDepthSource:

    def test_selects_wave_without_image(self):
        assert isinstance(select_depth_source(RibParams(), 0, 1.0, None), WaveDepth)
        assert isinstance(select_depth_source(RibParams(), 0, 1.0, BrightnessSampler()), WaveDepth)

    def test_selects_image_when_loaded(self):
        source = select_depth_source(RibParams(count=5), 2, 0.5, _gray_sampler(10))
        assert isinstance(source, ImageDepth)
        assert source.u == pytest.approx(0.5)
        assert source.image_scale == 0.5

    def test_rib_column(self):
        assert rib_column(RibParams(count=1), 0) == 0.5
        assert rib_column(RibParams(count=5), 0) == 0.0
        assert rib_column(RibParams(count=5), 4) == 1.0
        assert rib_column(RibParams(count=5), 1) == 0.25


class TestLPath:

    def test_point_count_scales_with_path(self):
        params = RibParams(height=100, control_points=20)
        assert lpath_point_count(params, 150) == 30

        points = generate_control_points_lpath(params, 0, 150)
        assert len(points) == 30
        assert points[0, 1] == 0.0
        assert points[-1, 1] == pytest.approx(150)

    def test_half_rounds_up(self):
        params = RibParams(height=100, control_points=5)
        assert lpath_point_count(params, 110) == 6
        # 5 x 0.5 = 2.5 -> 3 (banker's rounding would give 2)
        assert lpath_point_count(params, 50) == 3

    def test_wave_normalized_over_full_path(self):
        params = RibParams(height=100, control_points=10, frequency=1, phase=0)
        points = generate_control_points_lpath(params, 0, 200)
        n = len(points)
        for i, (depth, pos) in enumerate(points):
            t = i / (n - 1)
            assert pos == pytest.approx(t * 200)
            expected = params.min_depth + (math.sin(t * 2 * math.pi) + 1) / 2 * params.depth_range
            assert depth == pytest.approx(expected)

    def test_zero_height_does_not_divide_by_zero(self):
        params = RibParams(height=0, control_points=4)
        assert lpath_point_count(params, 50) == 4


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(200.67) == 201
