"""
Rib Wall PDE: Engine Handle
===========================

Owns the one piece of mutable state in the pipeline, the active pattern
image, and threads it into every generation pass. Every call recomputes
from scratch; nothing is cached between passes.
"""

from __future__ import annotations

import logging
from typing import Optional

from config import InstallationMode, RibParams, config
from .exporters import export_csv, export_dxf
from .pricing import PricingResult, calculate_pricing
from .profiles import ProfileSet, generate_rib_profiles
from .sampler import BrightnessSampler, ImageInput, ImageSource

logger = logging.getLogger(__name__)


class RibEngine:
    """Generation context: active image plus the entry points that use it."""

    def __init__(self, image: Optional[ImageSource] = None):
        self._sampler = BrightnessSampler(image)

    @property
    def sampler(self) -> BrightnessSampler:
        return self._sampler

    @property
    def image(self) -> Optional[ImageSource]:
        return self._sampler.image

    @property
    def has_image(self) -> bool:
        return self._sampler.has_image

    def load_image(self, source: ImageInput) -> ImageSource:
        """
        Decode and install a pattern image, replacing any previous one.

        The new image is fully decoded before it is installed, so a decode
        failure (ImageDecodeError) leaves the previous state untouched.
        """
        image = source if isinstance(source, ImageSource) else ImageSource.decode(source)
        self._sampler = BrightnessSampler(image)
        logger.info("Pattern image %r active (%dx%d)", image.name, image.width, image.height)
        return image

    def clear_image(self) -> None:
        """Drop the active image; ribs fall back to the wave function."""
        self._sampler = BrightnessSampler()

    def generate(
        self,
        params: RibParams,
        installation_mode: InstallationMode = InstallationMode.WALL,
        image_scale: float = 1.0,
    ) -> ProfileSet:
        """Generate every rib profile (reorders params depths in place)."""
        return generate_rib_profiles(params, installation_mode, image_scale, self._sampler)

    def pricing(
        self,
        params: RibParams,
        installation_mode: InstallationMode = InstallationMode.WALL,
        led_enabled: bool = False,
    ) -> PricingResult:
        return calculate_pricing(params, installation_mode, led_enabled, config.pricing)

    def dxf(
        self,
        params: RibParams,
        installation_mode: InstallationMode = InstallationMode.WALL,
        image_scale: float = 1.0,
        profiles: Optional[ProfileSet] = None,
    ) -> str:
        """DXF cut file; regenerates profiles unless a fresh set is passed."""
        if profiles is None:
            profiles = self.generate(params, installation_mode, image_scale)
        return export_dxf(profiles, params)

    def csv(
        self,
        params: RibParams,
        installation_mode: InstallationMode = InstallationMode.WALL,
        led_enabled: bool = False,
    ) -> str:
        return export_csv(params, installation_mode, led_enabled)
