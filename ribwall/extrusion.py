"""
Rib Wall PDE: Extrusion Geometry
================================

Converts 2D rib profiles into solids.

- rib_outline: closed 2D outline (wall edge + profile face) as an array
- RibExtrusion: one rib extruded to sheet thickness with CadQuery
- RibArrayModel: the whole array placed by rib index, with ceiling ribs
  swung up onto the ceiling in corner installs
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import cadquery as cq
import numpy as np

from config import InstallationMode, RibParams, config
from .profiles import ProfileSet, rib_lateral_offset

logger = logging.getLogger(__name__)

# Ceiling ribs with this many points or fewer are not rendered
MIN_CEILING_POINTS = 3


def rib_outline(profile: np.ndarray, height: float, scale: float = 1.0) -> np.ndarray:
    """
    Closed outline of one rib in the (depth, position) plane.

    Starts at the wall base, follows the profile face, returns to the wall
    at full height, and closes back to the base.

    Returns:
        (len(profile) + 3, 2) array.
    """
    base = np.array([[0.0, 0.0]])
    top = np.array([[0.0, height]])
    outline = np.vstack([base, np.asarray(profile, dtype=float), top, base])
    return outline * scale


class RibExtrusion:
    """Single rib solid extruded along Z by its thickness."""

    def __init__(self, name: str, profile: np.ndarray, height: float, thickness: float):
        self.name = name
        self.profile = profile
        self.height = height
        self.thickness = thickness
        self._geometry: Optional[cq.Workplane] = None

    @property
    def geometry(self) -> cq.Workplane:
        if self._geometry is None:
            raise ValueError(
                f"Geometry not generated for {self.name}. "
                "Call generate_geometry() first."
            )
        return self._geometry

    def generate_geometry(self) -> cq.Workplane:
        """Extrude the rib outline (duplicate closing point dropped)."""
        outline = rib_outline(self.profile, self.height)[:-1]
        points = [(float(x), float(y)) for x, y in outline]
        self._geometry = cq.Workplane("XY").polyline(points).close().extrude(self.thickness)
        return self._geometry


class RibArrayModel:
    """
    Full 3D rib array assembled from a ProfileSet.

    Wall ribs stand in the XY plane at Z = lateral offset. In corner installs
    each ceiling profile is rotated -90 deg about Z and lifted to the wall
    height so it runs along the ceiling away from the corner.
    """

    def __init__(
        self,
        profiles: ProfileSet,
        params: RibParams,
        installation_mode: InstallationMode = InstallationMode.WALL,
        name: str = "rib_array",
    ):
        self.name = name
        self.profiles = profiles
        self.params = params
        self.installation_mode = InstallationMode.parse(installation_mode)
        self._geometry: Optional[cq.Workplane] = None
        self._metadata: Dict[str, object] = {}

    def _place(self, solid: cq.Workplane, index: int) -> cq.Workplane:
        return solid.translate((0, 0, rib_lateral_offset(index, self.params)))

    def generate_geometry(self) -> cq.Workplane:
        solids: List[cq.Workplane] = []
        ceiling_count = 0

        for rib in self.profiles:
            wall = RibExtrusion(f"rib_{rib.index}", rib.profile, rib.height, rib.thickness)
            solids.append(self._place(wall.generate_geometry(), rib.index))

            if (
                self.installation_mode is InstallationMode.BOTH
                and rib.ceiling_profile is not None
                and len(rib.ceiling_profile) >= MIN_CEILING_POINTS
            ):
                ceiling = RibExtrusion(
                    f"rib_{rib.index}_ceiling", rib.ceiling_profile,
                    rib.ceiling_run or 0.0, rib.thickness,
                )
                solid = (
                    ceiling.generate_geometry()
                    .rotate((0, 0, 0), (0, 0, 1), -90)
                    .translate((0, rib.height, 0))
                )
                solids.append(self._place(solid, rib.index))
                ceiling_count += 1

        if not solids:
            raise ValueError("No rib profiles to build")

        model = solids[0]
        for solid in solids[1:]:
            model = model.add(solid)

        self._geometry = model
        self._metadata.update({
            "ribs": len(self.profiles),
            "ceiling_ribs": ceiling_count,
            "installation_mode": self.installation_mode.value,
        })
        logger.info("Built %d rib solids (%d ceiling)", len(solids), ceiling_count)
        return model

    def get_metadata(self) -> Dict[str, object]:
        return {"name": self.name, **self._metadata}

    def export_step(self, output_path: Path) -> Path:
        """Export the array as a STEP file for CAM software."""
        if self._geometry is None:
            self.generate_geometry()

        output_path.mkdir(parents=True, exist_ok=True)
        step_file = output_path / f"{self.name}.step"
        cq.exporters.export(self._geometry, str(step_file))
        return step_file

    def export_stl(self, output_path: Path, tolerance: Optional[float] = None) -> Path:
        """Export the array as STL for preview or printing a scale model."""
        if self._geometry is None:
            self.generate_geometry()

        output_path.mkdir(parents=True, exist_ok=True)
        stl_file = output_path / f"{self.name}.stl"
        cq.exporters.export(
            self._geometry,
            str(stl_file),
            exportType="STL",
            tolerance=tolerance if tolerance is not None else config.export.stl_tolerance,
        )
        return stl_file
