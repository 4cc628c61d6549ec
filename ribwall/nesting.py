"""Sheet layout for rib blanks.

Lays out the count-based sheet estimate from pricing as drawings: every rib
(or rib section, when a rib is longer than a sheet) gets a rectangular blank
of max_depth x section length, filled in columns across 48" x 144" stock.
Emits one DXF per sheet plus a CSV manifest for the shop floor.

This mirrors the estimate exactly, so the sheet count always matches the
quote. It does not nest curved profiles into each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import ezdxf
from ezdxf import units
from ezdxf.enums import TextEntityAlignment

from config import InstallationMode, PricingRates, RibParams, config
from .pricing import rib_length, sheet_estimate


@dataclass
class SheetSlot:
    """One rib blank (or spliced section) placed on a sheet."""

    rib_index: int
    section: int
    sheet_index: int
    origin: Tuple[float, float]
    width: float
    length: float

    @property
    def label(self) -> str:
        return f"R{self.rib_index}-S{self.section}"

    @property
    def label_position(self) -> Tuple[float, float]:
        x0, y0 = self.origin
        return x0 + self.width / 2, y0 + self.length / 2


class SheetLayoutPlanner:
    """Column-fill planner matching the pricing sheet estimate."""

    def __init__(self, rates: Optional[PricingRates] = None, margin: Optional[float] = None):
        self.rates = rates or config.pricing
        self.margin = config.export.sheet_margin if margin is None else margin

    def plan(
        self,
        params: RibParams,
        installation_mode: InstallationMode = InstallationMode.WALL,
    ) -> List[SheetSlot]:
        """Assign every (rib, section) to a sheet column."""
        max_depth = max(params.min_depth, params.max_depth)
        length = rib_length(params, installation_mode)
        ribs_per_sheet, sections, _ = sheet_estimate(params.rib_count, max_depth, length, self.rates)
        per_sheet = max(ribs_per_sheet, 1)

        slots: List[SheetSlot] = []
        slot_number = 0
        for rib_index in range(params.rib_count):
            remaining = length
            for section in range(sections):
                section_length = min(remaining, self.rates.sheet_height)
                remaining -= section_length
                sheet_index, column = divmod(slot_number, per_sheet)
                slots.append(
                    SheetSlot(
                        rib_index=rib_index,
                        section=section,
                        sheet_index=sheet_index,
                        origin=(self.margin + column * max_depth, self.margin),
                        width=max_depth,
                        length=section_length,
                    )
                )
                slot_number += 1
        return slots

    def export(self, slots: List[SheetSlot], output_dir: Path) -> Path:
        """Export one DXF per sheet and a CSV manifest."""

        output_dir.mkdir(parents=True, exist_ok=True)
        manifest_rows: List[str] = ["sheet,rib,section,x,y,width,length"]

        grouped: Dict[int, List[SheetSlot]] = {}
        for slot in slots:
            grouped.setdefault(slot.sheet_index, []).append(slot)

        sheet_w, sheet_h = self.rates.sheet_width, self.rates.sheet_height
        for sheet_index, sheet_slots in grouped.items():
            doc = ezdxf.new("R2010")
            doc.units = units.IN
            msp = doc.modelspace()
            msp.add_lwpolyline(
                [(0, 0), (sheet_w, 0), (sheet_w, sheet_h), (0, sheet_h)],
                close=True,
                dxfattribs={"layer": "STOCK"},
            )

            for slot in sheet_slots:
                x0, y0 = slot.origin
                msp.add_lwpolyline(
                    [
                        (x0, y0),
                        (x0 + slot.width, y0),
                        (x0 + slot.width, y0 + slot.length),
                        (x0, y0 + slot.length),
                    ],
                    close=True,
                    dxfattribs={"layer": "BLANKS"},
                )
                msp.add_text(
                    slot.label,
                    height=max(min(slot.width * 0.25, 1.0), 0.1),
                    dxfattribs={"layer": "LABELS", "rotation": 90},
                ).set_placement(slot.label_position, align=TextEntityAlignment.MIDDLE_CENTER)

                manifest_rows.append(
                    ",".join(
                        [
                            str(sheet_index),
                            str(slot.rib_index),
                            str(slot.section),
                            f"{x0:.3f}",
                            f"{y0:.3f}",
                            f"{slot.width:.3f}",
                            f"{slot.length:.3f}",
                        ]
                    )
                )

            doc.saveas(output_dir / f"sheet_{sheet_index}.dxf")

        manifest_path = output_dir / "sheet_manifest.csv"
        manifest_path.write_text("\n".join(manifest_rows) + "\n")
        return manifest_path


__all__ = ["SheetSlot", "SheetLayoutPlanner"]
