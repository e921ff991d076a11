"""
Bell geometry generation using build123d.

The bell is the most demanding sweep in the instrument: the bore follows
the empirical flare a + b / (1 + t/c), whose slope near the rim is steep
enough that an uncompensated wall would print several times thinner than
intended.
"""

import logging
from typing import Optional

from build123d import Part, Torus, Pos, Location

from ..calculator.paths import PlanarPath, Straight
from ..calculator.taper import BellCurve
from ..calculator.constants import DEFAULT_WALL_MM, DEFAULT_BELL_SLICES, BORE_OVERCUT_MM
from .geometry_base import BaseGeometry
from .geometry_repair import fuse_all, repair_geometry, largest_solid
from .tube import SweptTubeGeometry

logger = logging.getLogger(__name__)


class BellGeometry(BaseGeometry):
    """
    Generates a bell flare.

    The rim sits at z=0 and the throat at z=length, so the part prints
    rim-down. An optional rolled bead is fused at the rim, flush with the
    bore so it does not narrow the opening.
    """

    _part_name = "bell"

    def __init__(
        self,
        length_mm: float,
        rim_diameter_mm: float,
        throat_diameter_mm: float,
        flare: float,
        wall_thickness_mm: float = DEFAULT_WALL_MM,
        slices: int = DEFAULT_BELL_SLICES,
        rim_bead_diameter_mm: Optional[float] = None,
        ruled: bool = True,
        compensate_slope: bool = True,
        bore_overcut_mm: float = BORE_OVERCUT_MM,
        location: Optional[Location] = None,
        name: str = "bell",
    ):
        """
        Initialize bell geometry generator.

        Args:
            length_mm: Axial length from rim to throat
            rim_diameter_mm: Bore diameter at the rim
            throat_diameter_mm: Bore diameter at the throat
            flare: Flare constant c (small values flare late and hard)
            wall_thickness_mm: Nominal wall, normal to the surface
            slices: Loft slices along the axis (hundreds for a smooth flare)
            rim_bead_diameter_mm: Optional bead (torus) cross-section diameter
            ruled: Ruled loft between sections
            compensate_slope: Scale the wall for the flare slope
            bore_overcut_mm: Bore loft extension past both ends
            location: Placement applied after building
            name: Part name
        """
        if rim_diameter_mm <= throat_diameter_mm:
            raise ValueError(
                f"Bell rim ({rim_diameter_mm}mm) must be wider than its throat ({throat_diameter_mm}mm)"
            )
        if rim_bead_diameter_mm is not None and rim_bead_diameter_mm <= 0:
            raise ValueError(f"Rim bead diameter must be positive, got {rim_bead_diameter_mm}")

        self.length_mm = length_mm
        self.rim_diameter_mm = rim_diameter_mm
        self.throat_diameter_mm = throat_diameter_mm
        self.flare = flare
        self.rim_bead_diameter_mm = rim_bead_diameter_mm
        self.location = location
        self.name = name

        self.curve = BellCurve.fit(rim_diameter_mm / 2, throat_diameter_mm / 2, flare)
        self.tube = SweptTubeGeometry(
            PlanarPath([Straight(length_mm)]),
            self.curve,
            wall_thickness_mm,
            slices=slices,
            ruled=ruled,
            compensate_slope=compensate_slope,
            bore_overcut_mm=bore_overcut_mm,
            name=name,
        )

        self._part = None

    def _create_rim_bead(self) -> Part:
        """Torus sitting on the rim plane with its inside flush with the bore."""
        bead_radius = self.rim_bead_diameter_mm / 2
        rim_radius = self.rim_diameter_mm / 2
        return Pos(0, 0, bead_radius) * Torus(rim_radius + bead_radius, bead_radius)

    def build(self) -> Part:
        """
        Build the bell.

        Returns:
            build123d Part ready for export
        """
        if self._part is not None:
            return self._part

        rim_inner, rim_outer = self.tube.start_radii
        logger.info(
            f"Building {self.name}: rim Ø{2 * rim_inner:.1f}mm (outside Ø{2 * rim_outer:.1f}mm), "
            f"throat Ø{self.throat_diameter_mm:.2f}mm, flare c={self.flare}"
        )
        bell = self.tube.build()

        if self.rim_bead_diameter_mm is not None:
            logger.info(f"Adding rim bead Ø{self.rim_bead_diameter_mm:.2f}mm...")
            bell = fuse_all([bell, self._create_rim_bead()])
            bell = largest_solid(repair_geometry(bell))

        if self.location is not None:
            bell = self.location * bell

        logger.debug(f"Final {self.name} volume: {bell.volume:.2f} mm³")
        self._part = bell
        return bell
