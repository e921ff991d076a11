"""
Mouthpiece receiver geometry.

A straight tube whose bore tapers from the mouthpiece shank diameter down
into the leadpipe.
"""

from typing import Optional

from build123d import Location

from ..calculator.paths import PlanarPath, Straight
from ..calculator.taper import LinearTaper
from ..calculator.constants import DEFAULT_WALL_MM, RECEIVER_TAPER_PER_LENGTH, BORE_OVERCUT_MM
from .tube import SweptTubeGeometry


class ReceiverGeometry(SweptTubeGeometry):
    """Tapered mouthpiece receiver, entry at z=0."""

    _part_name = "receiver"

    def __init__(
        self,
        length_mm: float,
        entry_diameter_mm: float,
        exit_diameter_mm: Optional[float] = None,
        wall_thickness_mm: float = DEFAULT_WALL_MM,
        slices: int = 1,
        ruled: bool = True,
        compensate_slope: bool = True,
        bore_overcut_mm: float = BORE_OVERCUT_MM,
        location: Optional[Location] = None,
        name: str = "receiver",
    ):
        """
        Args:
            length_mm: Receiver length
            entry_diameter_mm: Bore at the mouthpiece end
            exit_diameter_mm: Bore at the leadpipe end (default: shank taper)
            slices: A straight taper is exact with one slice
        """
        if exit_diameter_mm is None:
            exit_diameter_mm = entry_diameter_mm - length_mm * RECEIVER_TAPER_PER_LENGTH

        self.entry_diameter_mm = entry_diameter_mm
        self.exit_diameter_mm = exit_diameter_mm

        super().__init__(
            PlanarPath([Straight(length_mm)]),
            LinearTaper(entry_diameter_mm / 2, exit_diameter_mm / 2),
            wall_thickness_mm,
            slices=slices,
            ruled=ruled,
            compensate_slope=compensate_slope,
            bore_overcut_mm=bore_overcut_mm,
            location=location,
            name=name,
        )
