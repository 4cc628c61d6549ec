"""
Rib Wall PDE: Fabrication Exporters
===================================

1. export_dxf: DXF R12 (AC1009) cut file, one closed outline per rib laid
   out flat side by side. The group sequence, layer names, and number format
   are relied on by the downstream CAM import and must not change.
2. export_csv: dimension and pricing report for quoting.

Both return text; write_export puts it on disk.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
import logging
from pathlib import Path
from typing import Iterable, List, Union

from config import WAVE_TYPE_LABELS, InstallationMode, RibParams, config
from .control_points import rib_phase_shift
from .pricing import calculate_pricing
from .profiles import RibProfile

logger = logging.getLogger(__name__)

EXPORT_MIME_TYPES = {
    "dxf": "application/dxf",
    "csv": "text/csv",
}

# Fixed R12 preamble: header (version + inch units) and the two-layer table.
DXF_HEADER = (
    "0\nSECTION\n2\nHEADER\n"
    "9\n$ACADVER\n1\nAC1009\n"
    "9\n$INSUNITS\n70\n1\n"
    "0\nENDSEC\n"
    "0\nSECTION\n2\nTABLES\n"
    "0\nTABLE\n2\nLAYER\n70\n2\n"
    "0\nLAYER\n2\nCURVES\n70\n0\n62\n5\n6\nCONTINUOUS\n"
    "0\nLAYER\n2\nLINES\n70\n0\n62\n7\n6\nCONTINUOUS\n"
    "0\nENDTAB\n"
    "0\nENDSEC\n"
    "0\nSECTION\n2\nENTITIES\n"
)
DXF_FOOTER = "0\nENDSEC\n0\nEOF\n"


def _fixed(value: float, places: int) -> str:
    """Fixed-point text with exact ties rounded away from zero."""
    # + 0.0 folds negative zero so it prints as 0.000000
    exact = Decimal(float(value) + 0.0)
    return format(exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP), "f")


def _f6(value: float) -> str:
    return _fixed(value, 6)


def _dxf_line(x1: float, y1: str, x2: float, y2: str) -> str:
    """LINE on the LINES layer; y values are preformatted."""
    return (
        "0\nLINE\n8\nLINES\n"
        f"10\n{_f6(x1)}\n20\n{y1}\n30\n0.0\n"
        f"11\n{_f6(x2)}\n21\n{y2}\n31\n0.0\n"
    )


def _rib_entities(rib: RibProfile, offset_x: float, height: float) -> str:
    profile = rib.profile
    first_depth, first_pos = profile[0]
    last_depth, last_pos = profile[-1]

    parts: List[str] = []

    # Bottom edge: wall line to first profile point
    parts.append(_dxf_line(offset_x, "0.0", offset_x + first_depth, _f6(first_pos)))

    # Curved face as a polyline
    parts.append("0\nPOLYLINE\n8\nCURVES\n66\n1\n70\n4\n")
    for depth, pos in profile:
        parts.append(
            "0\nVERTEX\n8\nCURVES\n"
            f"10\n{_f6(offset_x + depth)}\n20\n{_f6(pos)}\n30\n0.0\n70\n8\n"
        )
    parts.append("0\nSEQEND\n8\nCURVES\n")

    # Top edge: last profile point back to the wall at full height
    parts.append(_dxf_line(offset_x + last_depth, _f6(last_pos), offset_x, _f6(height)))

    # Wall edge
    parts.append(_dxf_line(offset_x, _f6(height), offset_x, "0.0"))

    return "".join(parts)


def export_dxf(profiles: Iterable[RibProfile], params: RibParams) -> str:
    """
    Serialize rib outlines as a DXF R12 document.

    Rib k (in list order) is offset along X by k x max_depth x 1.2. Ribs with
    fewer than 2 profile points are skipped but keep their slot.

    Args:
        profiles: Rib profiles in index order
        params: Rib parameters (height and max depth)

    Returns:
        DXF document text.
    """
    spacing = params.max_depth * config.export.dxf_spacing_factor
    body: List[str] = [DXF_HEADER]

    for slot, rib in enumerate(profiles):
        if rib.profile is None or len(rib.profile) < 2:
            logger.warning("Skipping rib %d in DXF export: degenerate profile", rib.index)
            continue
        body.append(_rib_entities(rib, slot * spacing, params.height))

    body.append(DXF_FOOTER)
    return "".join(body)


def _num(value: Union[int, float]) -> str:
    """Echo a parameter value as entered: 144.0 -> '144', 0.5 -> '0.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_csv(
    params: RibParams,
    installation_mode: InstallationMode = InstallationMode.WALL,
    led_enabled: bool = False,
) -> str:
    """
    Build the dimension and pricing report.

    Args:
        params: Rib parameters
        installation_mode: WALL, CEILING, or BOTH (affects rib length)
        led_enabled: Include the LED breakdown

    Returns:
        CSV text.
    """
    rates = config.pricing
    pricing = calculate_pricing(params, installation_mode, led_enabled, rates)

    rows: List[str] = [
        "Rib Index,Height (in),Min Depth (in),Max Depth (in),Thickness (in),Phase Shift (rad)"
    ]
    for i in range(params.rib_count):
        rows.append(
            f"{i},{_num(params.height)},{_num(params.min_depth)},{_num(params.max_depth)},"
            f"{_num(params.thickness)},{_fixed(rib_phase_shift(params, i), 4)}"
        )

    wave_label = (
        WAVE_TYPE_LABELS[params.wave_type]
        if 0 <= params.wave_type < len(WAVE_TYPE_LABELS)
        else WAVE_TYPE_LABELS[0]
    )
    rows += [
        "",
        "Array Settings",
        f"Total Ribs,{params.rib_count}",
        f'Spacing,{_num(params.spacing)}"',
        f'Total Width,{_fixed(pricing.total_width, 2)}"',
        f"Wave Frequency,{_num(params.frequency)}",
        f"Wave Type,{wave_label}",
        f"Control Points,{params.control_points}",
        f"Display Resolution,{params.display_resolution}",
    ]

    area_per_rib = pricing.rib_length * max(params.min_depth, params.max_depth) / 144
    rows += [
        "",
        "Pricing",
        f"Surface Area per Rib,{_fixed(area_per_rib, 2)} sf",
        f"Total Surface Area,{_fixed(pricing.total_surface_area_sqft, 2)} sf",
        f"Rib Price per SF,${_num(rates.price_per_sqft)}",
        f"Rib Total,${_fixed(pricing.rib_price, 2)}",
    ]

    rows += ["", f"LED Lighting,{'Yes' if led_enabled else 'No'}"]
    if led_enabled:
        rows += [
            f"LED Linear Feet,{_fixed(pricing.led_linear_feet, 2)} lf",
            f"LED Price per LF,${_num(rates.led_price_per_lf)}",
            f"LED Total,${_fixed(pricing.led_price, 2)}",
        ]

    rows += ["", f"Grand Total,${_fixed(pricing.total_price, 2)}"]
    return "\n".join(rows) + "\n"


def write_export(content: str, output_path: Path) -> Path:
    """Write an export artifact, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content)
    logger.info("Wrote %s (%s)", output_path.name, EXPORT_MIME_TYPES.get(
        output_path.suffix.lstrip(".").lower(), "text/plain"))
    return output_path
