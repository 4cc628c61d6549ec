"""
Pricing and material estimates for a rib array.

Everything here is a pure function of the parameters and the install mode,
recomputed on every change.

Sheet usage is a count-based estimate: ribs are treated as fixed-width
strips laid side by side across a 48" sheet, and ribs longer than one sheet
are spliced into sections. It does not nest profiles against each other, so
real yield can be better or worse than the estimate.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Optional

from config import InstallationMode, PricingRates, RibParams, config


@dataclass(frozen=True)
class PricingResult:
    """Derived pricing and material figures."""

    total_width: float
    rib_length: float
    total_surface_area_sqft: float
    rib_price: float
    led_linear_feet: float
    led_price: float
    total_price: float
    ribs_per_sheet: int
    sections_per_rib: int
    sheets_needed: int
    sheet_total_cost: float
    wall_coverage: str
    count: int = 0

    @property
    def surface_area_per_rib_sqft(self) -> float:
        if self.count <= 0:
            return 0.0
        return self.total_surface_area_sqft / self.count


def rib_length(params: RibParams, installation_mode: InstallationMode) -> float:
    """Run length of one rib: wall height, plus the ceiling run for BOTH."""
    if InstallationMode.parse(installation_mode) is InstallationMode.BOTH:
        return params.height + params.ceiling_length
    return params.height


def sheet_estimate(
    count: int, max_depth: float, length: float, rates: PricingRates
):
    """
    Estimate raw sheets for `count` ribs of the given depth and length.

    Returns:
        (ribs_per_sheet, sections_per_rib, sheets_needed)
    """
    ribs_per_sheet = int(math.floor(rates.sheet_width / max_depth)) if max_depth > 0 else 0
    sections_per_rib = int(math.ceil(length / rates.sheet_height))
    total_slots = count * sections_per_rib
    sheets_needed = int(math.ceil(total_slots / max(ribs_per_sheet, 1)))
    return ribs_per_sheet, sections_per_rib, sheets_needed


def wall_coverage(params: RibParams, installation_mode: InstallationMode) -> str:
    """Human-readable coverage summary in feet."""
    width_ft = params.total_width / 12
    height_ft = params.height / 12
    if InstallationMode.parse(installation_mode) is InstallationMode.BOTH:
        return (
            f"{width_ft:.1f}' wide x {height_ft:.1f}' wall + "
            f"{params.ceiling_length / 12:.1f}' ceiling"
        )
    return f"{width_ft:.1f}' wide x {height_ft:.1f}' tall"


def calculate_pricing(
    params: RibParams,
    installation_mode: InstallationMode = InstallationMode.WALL,
    led_enabled: bool = False,
    rates: Optional[PricingRates] = None,
) -> PricingResult:
    """
    Compute price, LED footage, and sheet count for the array.

    Args:
        params: Rib parameters (not modified)
        installation_mode: WALL, CEILING, or BOTH
        led_enabled: Include LED strip cost in the total
        rates: Override rates (defaults to config.pricing)

    Returns:
        PricingResult
    """
    rates = rates or config.pricing
    count = params.rib_count
    max_depth = max(params.min_depth, params.max_depth)
    length = rib_length(params, installation_mode)

    area_per_rib_sqin = length * max_depth
    total_sqft = area_per_rib_sqin / 144 * count
    rib_price = total_sqft * rates.price_per_sqft

    led_feet = (length / 12) * count
    led_price = led_feet * rates.led_price_per_lf
    total_price = rib_price + (led_price if led_enabled else 0.0)

    ribs_per_sheet, sections_per_rib, sheets_needed = sheet_estimate(
        count, max_depth, length, rates
    )

    return PricingResult(
        total_width=params.total_width,
        rib_length=length,
        total_surface_area_sqft=total_sqft,
        rib_price=rib_price,
        led_linear_feet=led_feet,
        led_price=led_price,
        total_price=total_price,
        ribs_per_sheet=ribs_per_sheet,
        sections_per_rib=sections_per_rib,
        sheets_needed=sheets_needed,
        sheet_total_cost=sheets_needed * rates.sheet_price,
        wall_coverage=wall_coverage(params, installation_mode),
        count=count,
    )
