"""
Rib Wall PDE: Single Source of Truth (SSOT)
===========================================

This configuration file defines ALL parametric constants for the rib wall.
NEVER hard-code dimensions or rates elsewhere. Geometry, pricing, and the
fabrication exports all derive from these variables.

Units: inches unless noted. Prices in USD.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping
import logging
import math

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


class InstallationMode(Enum):
    """Where the rib array is mounted."""
    WALL = "wall"
    CEILING = "ceiling"
    BOTH = "both"          # Wraps one inside corner: wall run + ceiling run

    @classmethod
    def parse(cls, value: Any) -> "InstallationMode":
        """Parse a mode tag, falling back to WALL for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown installation mode %r, using 'wall'", value)
            return cls.WALL


class WaveType(Enum):
    """Periodic depth functions used when no pattern image is active."""
    SINE = 0
    SMOOTH = 1             # sin * |sin|, biased toward the extremes
    SHARP = 2              # Triangle wave derived from sine

    @property
    def label(self) -> str:
        return self.name.capitalize()


WAVE_TYPE_LABELS = [w.label for w in WaveType]


@dataclass
class RibParams:
    """Array and per-rib shape parameters - all dimensions in inches."""

    # === RIB SHAPE ===
    height: float = 144.0                 # Wall run length (12 ft)
    min_depth: float = 4.0                # Shallowest point off the wall
    max_depth: float = 12.0               # Deepest point off the wall
    thickness: float = 0.5                # Sheet thickness: 0.5 or 1.0

    # === ARRAY ===
    count: int = 40                       # Number of ribs
    spacing: float = 7.0                  # Center-to-center spacing

    # === WAVE PATTERN ===
    frequency: float = 2.0                # Cycles over the run
    phase: float = 0.25                   # Phase offset per rib (cycles)
    wave_type: int = WaveType.SINE.value

    # === CURVE SAMPLING ===
    control_points: int = 20              # Sparse samples per run
    display_resolution: int = 200         # Dense curve divisions per run

    # === FINISH / CORNER ===
    color: str = "#ffffff"
    ceiling_run: float = 96.0             # Ceiling extension (BOTH mode only)

    @property
    def rib_count(self) -> int:
        """Number of ribs actually generated (at least one)."""
        return max(int(self.count), 1)

    @property
    def ceiling_length(self) -> float:
        """Ceiling run actually generated (never negative)."""
        return max(float(self.ceiling_run), 0.0)

    @property
    def total_width(self) -> float:
        """Array width from first to last rib center."""
        return (self.rib_count - 1) * self.spacing

    @property
    def depth_range(self) -> float:
        return self.max_depth - self.min_depth

    def normalize_depths(self) -> None:
        """Reorder min/max depth in place so min_depth <= max_depth."""
        lo = min(self.min_depth, self.max_depth)
        hi = max(self.min_depth, self.max_depth)
        self.min_depth = lo
        self.max_depth = hi

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class PricingRates:
    """Material and installation rates."""

    price_per_sqft: float = 45.0          # Rib surface, incl. hardware
    led_price_per_lf: float = 30.0        # LED strip per linear foot

    # === RAW SHEET STOCK (48" x 144" solid surface) ===
    sheet_width: float = 48.0
    sheet_height: float = 144.0
    sheet_price: float = 1800.0


@dataclass
class ExportParams:
    """Fabrication export settings."""

    dxf_spacing_factor: float = 1.2       # Flat-layout gap: max_depth x factor
    scene_scale: float = 0.1              # 1 in = 0.1 scene units
    stl_tolerance: float = 0.01           # Mesh tessellation tolerance
    file_stem: str = "mr-walls-ribs"
    sheet_margin: float = 0.0             # Edge trim on stock sheets


# Chat/UI collaborators speak camelCase; the engine speaks snake_case.
_PARAM_ALIASES = {
    "minDepth": "min_depth",
    "maxDepth": "max_depth",
    "waveType": "wave_type",
    "controlPoints": "control_points",
    "displayResolution": "display_resolution",
    "ceilingRun": "ceiling_run",
}
_INT_PARAMS = ("count", "wave_type", "control_points", "display_resolution")


def apply_param_update(params: RibParams, update: Mapping[str, Any]) -> RibParams:
    """
    Apply a partial parameter update and return a new RibParams.

    Args:
        params: Current parameters (left untouched)
        update: Mapping of parameter names (camelCase or snake_case) to values,
            typically parsed from an assistant response

    Returns:
        New RibParams with recognised keys coerced to their field types.
    """
    known = {f.name for f in fields(RibParams)}
    changes: Dict[str, Any] = {}

    for key, value in update.items():
        name = _PARAM_ALIASES.get(key, key)
        if name not in known or value is None:
            logger.debug("Ignoring parameter update key %r", key)
            continue
        if name == "color":
            changes[name] = str(value)
        elif name in _INT_PARAMS:
            changes[name] = round_half_up(float(value))
        else:
            changes[name] = float(value)

    return replace(params, **changes)


@dataclass
class RibWallConfig:
    """
    Master configuration singleton.

    ALL downstream modules import this. Changes here propagate through:
    - Rib profile generation
    - DXF / CSV fabrication exports
    - Pricing and sheet estimates
    """

    ribs: RibParams = field(default_factory=RibParams)
    pricing: PricingRates = field(default_factory=PricingRates)
    export: ExportParams = field(default_factory=ExportParams)
    installation_mode: InstallationMode = InstallationMode.WALL
    led_enabled: bool = False
    image_scale: float = 1.0

    # Project metadata
    project_name: str = "Rib Wall PDE"
    version: str = "0.1.0"

    def validate(self) -> List[str]:
        """Report parameter values the engine will clamp or reorder."""
        errors = []
        ribs = self.ribs

        if ribs.count < 1:
            errors.append(f"RIB COUNT: {ribs.count} is below 1; generation uses 1 rib.")

        if ribs.control_points < 2:
            errors.append(
                f"CONTROL POINTS: {ribs.control_points} is below 2; generation uses 2."
            )

        if ribs.display_resolution < 2:
            errors.append(
                f"RESOLUTION: {ribs.display_resolution} is below 2; generation uses 2."
            )

        if ribs.min_depth > ribs.max_depth:
            errors.append(
                f"DEPTH ORDER: min depth {ribs.min_depth} exceeds max depth "
                f"{ribs.max_depth}; values will be swapped."
            )

        if ribs.height <= 0:
            errors.append(f"HEIGHT: {ribs.height} must be positive.")

        if ribs.ceiling_run < 0:
            errors.append(f"CEILING RUN: {ribs.ceiling_run} is negative; treated as 0.")

        if ribs.wave_type not in [w.value for w in WaveType]:
            errors.append(f"WAVE TYPE: {ribs.wave_type} is unknown; sine is used.")

        if max(ribs.min_depth, ribs.max_depth) > self.pricing.sheet_width:
            errors.append(
                f"SHEET FIT: max depth exceeds the {self.pricing.sheet_width:.0f}\" sheet width."
            )

        return errors

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        ribs = self.ribs
        wave = WAVE_TYPE_LABELS[ribs.wave_type] if 0 <= ribs.wave_type < len(WaveType) else "Sine"
        return f"""
Rib Wall PDE Configuration Summary
==================================
Version: {self.version}
Installation: {self.installation_mode.value}

ARRAY
-----
Ribs: {ribs.count} @ {ribs.spacing}" spacing
Total Width: {ribs.total_width / 12:.1f} ft
Height: {ribs.height / 12:.1f} ft
Ceiling Run: {ribs.ceiling_run / 12:.1f} ft

PROFILE
-------
Depth: {ribs.min_depth}" - {ribs.max_depth}"
Thickness: {ribs.thickness}"
Wave: {wave} x{ribs.frequency}, phase {ribs.phase}
Control Points: {ribs.control_points}
Resolution: {ribs.display_resolution}

PRICING
-------
Ribs: ${self.pricing.price_per_sqft:.0f}/sf
LED: ${self.pricing.led_price_per_lf:.0f}/lf ({'ON' if self.led_enabled else 'OFF'})
Sheets: {self.pricing.sheet_width:.0f}" x {self.pricing.sheet_height:.0f}" @ ${self.pricing.sheet_price:,.0f}
"""


# Singleton instance - import this throughout the project
config = RibWallConfig()

# Validate on import
_errors = config.validate()
if _errors:
    import warnings
    for err in _errors:
        warnings.warn(err, UserWarning)
