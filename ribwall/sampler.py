"""
Pattern image ingestion and brightness sampling.

A decoded raster drives rib depth: each rib reads one column of the image
and each control point one row, with luminance mapped onto the depth range.
Coordinates wrap so a scaled-down image tiles across the array.
"""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Rec. 601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])
NEUTRAL_BRIGHTNESS = 0.5

ImageInput = Union[str, Path, bytes, Image.Image]


class ImageDecodeError(ValueError):
    """Raised when a pattern image cannot be decoded."""


class ImageSource:
    """Decoded RGB raster held as an (H, W, 3) uint8 array."""

    def __init__(self, pixels: np.ndarray, name: str = "pattern"):
        if pixels.ndim != 3 or pixels.shape[2] != 3 or pixels.size == 0:
            raise ImageDecodeError(f"Expected non-empty (H, W, 3) pixels, got {pixels.shape}")
        self.name = name
        self._pixels = pixels

    @classmethod
    def decode(cls, source: ImageInput) -> "ImageSource":
        """
        Decode an image from a path, raw bytes, or an open PIL image.

        Raises:
            ImageDecodeError: If the data is not a readable raster.
        """
        if isinstance(source, Image.Image):
            return cls(np.asarray(source.convert("RGB"), dtype=np.uint8), name="image")

        if isinstance(source, (bytes, bytearray)):
            name = "bytes"
            stream = io.BytesIO(source)
        else:
            path = Path(source)
            name = path.stem
            if not path.exists():
                raise ImageDecodeError(f"Pattern image not found: {path}")
            stream = path

        try:
            with Image.open(stream) as img:
                pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ImageDecodeError(f"Could not decode pattern image {name!r}: {exc}") from exc

        logger.debug("Decoded pattern %s (%dx%d)", name, pixels.shape[1], pixels.shape[0])
        return cls(pixels, name=name)

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def pixel(self, px: int, py: int) -> np.ndarray:
        return self._pixels[py, px]


class BrightnessSampler:
    """Answers luminance queries against the active image, if any."""

    def __init__(self, image: Optional[ImageSource] = None):
        self.image = image

    @property
    def has_image(self) -> bool:
        return self.image is not None

    def sample(self, u: float, v: float, image_scale: float = 1.0) -> float:
        """
        Sample brightness at normalized (u, v) with wraparound tiling.

        Args:
            u: Horizontal coordinate (rib position across the array)
            v: Vertical coordinate (position along the run, 0 = bottom)
            image_scale: Tile size; values below 1 repeat the image

        Returns:
            Luminance in [0, 1], or 0.5 when no image is loaded.
        """
        if self.image is None:
            return NEUTRAL_BRIGHTNESS

        if image_scale <= 0:
            image_scale = 1.0

        su = (u / image_scale) % 1.0
        sv = (v / image_scale) % 1.0

        img = self.image
        px = int(math.floor(su * (img.width - 1)))
        py = int(math.floor((1.0 - sv) * (img.height - 1)))

        rgb = img.pixel(px, py)
        return float(np.dot(LUMA_WEIGHTS, rgb)) / 255.0
