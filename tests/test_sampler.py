"""Pattern image decoding and brightness sampling."""

import io
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import numpy as np  # noqa: E402
import pytest  # noqa: E402
from PIL import Image  # noqa: E402

from ribwall.sampler import BrightnessSampler, ImageDecodeError, ImageSource  # noqa: E402


def _column_ramp(width: int = 5, height: int = 4) -> np.ndarray:
    """Gray image where every pixel has a distinct value."""
    values = np.arange(width * height, dtype=np.uint8).reshape(height, width) * 10
    return np.repeat(values[:, :, None], 3, axis=2)


def _png_bytes(pixels: np.ndarray, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(pixels).convert(mode).save(buffer, format="PNG")
    return buffer.getvalue()


class TestImageSource:

    def test_decode_from_path(self, tmp_path):
        path = tmp_path / "pattern.png"
        Image.fromarray(_column_ramp()).save(path)

        image = ImageSource.decode(path)
        assert (image.width, image.height) == (5, 4)
        assert image.name == "pattern"

    def test_decode_rgba_and_grayscale(self):
        pixels = _column_ramp()
        for mode in ("RGBA", "L"):
            image = ImageSource.decode(_png_bytes(pixels, mode))
            assert (image.width, image.height) == (5, 4)
            assert tuple(image.pixel(1, 0)) == (10, 10, 10)

    def test_decode_from_pil_image(self):
        image = ImageSource.decode(Image.new("RGB", (3, 2), (255, 0, 0)))
        assert tuple(image.pixel(2, 1)) == (255, 0, 0)

    def test_garbage_bytes_raise(self):
        with pytest.raises(ImageDecodeError):
            ImageSource.decode(b"definitely not a png")

    def test_oversized_image_raises(self, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        with pytest.raises(ImageDecodeError):
            ImageSource.decode(_png_bytes(np.zeros((8, 8, 3), dtype=np.uint8)))

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ImageDecodeError):
            ImageSource.decode(tmp_path / "missing.png")


class TestBrightnessSampler:

    def test_no_image_returns_neutral(self):
        sampler = BrightnessSampler()
        assert not sampler.has_image
        for u, v in [(0, 0), (0.3, 0.8), (-2.5, 7.1)]:
            assert sampler.sample(u, v, 1.0) == 0.5

    def test_luminance_weights(self):
        red = BrightnessSampler(ImageSource.decode(Image.new("RGB", (2, 2), (255, 0, 0))))
        green = BrightnessSampler(ImageSource.decode(Image.new("RGB", (2, 2), (0, 255, 0))))
        blue = BrightnessSampler(ImageSource.decode(Image.new("RGB", (2, 2), (0, 0, 255))))
        white = BrightnessSampler(ImageSource.decode(Image.new("RGB", (2, 2), (255, 255, 255))))

        assert red.sample(0.5, 0.5) == pytest.approx(0.299)
        assert green.sample(0.5, 0.5) == pytest.approx(0.587)
        assert blue.sample(0.5, 0.5) == pytest.approx(0.114)
        assert white.sample(0.5, 0.5) == pytest.approx(1.0)

    def test_v_axis_is_flipped(self):
        pixels = np.zeros((4, 4, 3), dtype=np.uint8)
        pixels[0, :, :] = 255  # top row white
        sampler = BrightnessSampler(ImageSource(pixels))

        assert sampler.sample(0.5, 0.99) == pytest.approx(1.0)
        assert sampler.sample(0.5, 0.0) == pytest.approx(0.0)

    def test_nearest_neighbor_pixel_lookup(self):
        pixels = _column_ramp()
        sampler = BrightnessSampler(ImageSource(pixels))
        # u = 0.6 -> px = floor(0.6 * 4) = 2; v = 0.2 -> py = floor(0.8 * 3) = 2
        expected = pixels[2, 2, 0] / 255.0
        assert sampler.sample(0.6, 0.2) == pytest.approx(expected)

    @pytest.mark.parametrize("scale", [1.0, 0.5, 0.25, 2.0])
    def test_tiling_periodicity(self, scale):
        sampler = BrightnessSampler(ImageSource(_column_ramp()))
        # Sample at pixel centers so float error never crosses a pixel edge
        for k in range(4):
            for j in range(3):
                u = (k + 0.5) / 4 * scale
                v = (j + 0.5) / 3 * scale
                base = sampler.sample(u, v, scale)
                assert sampler.sample(u + scale, v, scale) == base
                assert sampler.sample(u, v + scale, scale) == base
                assert sampler.sample(u - scale, v - scale, scale) == base

    def test_unit_scale_shift_by_one(self):
        sampler = BrightnessSampler(ImageSource(_column_ramp()))
        assert sampler.sample(0.375 + 1.0, 0.5, 1.0) == sampler.sample(0.375, 0.5, 1.0)

    def test_non_positive_scale_treated_as_unit(self):
        sampler = BrightnessSampler(ImageSource(_column_ramp()))
        assert sampler.sample(0.375, 0.5, 0.0) == sampler.sample(0.375, 0.5, 1.0)

    def test_results_stay_in_unit_interval(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 255, size=(9, 11, 3)).astype(np.uint8)
        sampler = BrightnessSampler(ImageSource(pixels))
        for u, v in rng.uniform(-5, 5, size=(200, 2)):
            assert 0.0 <= sampler.sample(u, v, 0.7) <= 1.0
