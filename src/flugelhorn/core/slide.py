"""
Tuning slide crook geometry.

A U-bend: straight leg, 180 degree arc, straight leg. The legs run along Z,
the bend turns toward +X, and both open ends sit on the z=0 plane.
"""

from typing import Optional

from build123d import Location

from ..calculator.paths import PlanarPath, Straight, Arc
from ..calculator.taper import ConstantBore
from ..calculator.constants import DEFAULT_WALL_MM, DEFAULT_SLICES, BORE_OVERCUT_MM
from .tube import SweptTubeGeometry


def u_bend_path(leg_length_mm: float, bend_radius_mm: float) -> PlanarPath:
    """Leg, half turn, leg. Legs are 2 × bend radius apart (centre to centre)."""
    return PlanarPath([
        Straight(leg_length_mm),
        Arc(bend_radius_mm, 180.0),
        Straight(leg_length_mm),
    ])


class TuningSlideGeometry(SweptTubeGeometry):
    """U-shaped tuning slide crook."""

    _part_name = "slide"

    def __init__(
        self,
        leg_length_mm: float,
        bend_radius_mm: float,
        bore_diameter_mm: float,
        wall_thickness_mm: float = DEFAULT_WALL_MM,
        slices: int = DEFAULT_SLICES,
        ruled: bool = True,
        bore_overcut_mm: float = BORE_OVERCUT_MM,
        location: Optional[Location] = None,
        name: str = "slide",
    ):
        outer_radius = bore_diameter_mm / 2 + wall_thickness_mm
        if bend_radius_mm <= outer_radius:
            raise ValueError(
                f"Bend radius {bend_radius_mm}mm must exceed the tube outside radius {outer_radius}mm"
            )

        self.leg_length_mm = leg_length_mm
        self.bend_radius_mm = bend_radius_mm
        self.bore_diameter_mm = bore_diameter_mm

        super().__init__(
            u_bend_path(leg_length_mm, bend_radius_mm),
            ConstantBore(bore_diameter_mm / 2),
            wall_thickness_mm,
            slices=slices,
            ruled=ruled,
            compensate_slope=False,
            bore_overcut_mm=bore_overcut_mm,
            location=location,
            name=name,
        )

    @property
    def leg_spacing_mm(self) -> float:
        """Centre-to-centre distance between the legs."""
        return 2 * self.bend_radius_mm
