"""
Flugelhorn Core - swept tube geometry generation engine.

This module provides the 3D geometry generation capabilities using build123d.
No JSON dependencies - pure Python API.

Example:
    >>> from flugelhorn.calculator import PlanarPath, Straight, Arc, LinearTaper
    >>> from flugelhorn.core import SweptTubeGeometry
    >>>
    >>> path = PlanarPath([Straight(60.0), Arc(25.0, 90.0), Straight(30.0)])
    >>> bore = LinearTaper(5.5, 5.25)
    >>>
    >>> tube = SweptTubeGeometry(path, bore, wall_thickness_mm=1.2, slices=120)
    >>> part = tube.build()
    >>> part.export_step("leadpipe.step")
"""

from .tube import SweptTubeGeometry, section_face, placement_location, SEAM_DIRECTION
from .network import TubeNetwork
from .bell import BellGeometry
from .receiver import ReceiverGeometry
from .slide import TuningSlideGeometry, u_bend_path
from .valve import ValveCasingGeometry, PistonGeometry, Port, Passage, port_location
from .instrument import geometry_for_part, build_instrument_part, part_kinds

from .geometry_repair import repair_geometry, fuse_all, cut_all, largest_solid

# Wall thickness measurement
from .wall_thickness import (
    WallThicknessResult,
    measure_wall_thickness,
    measure_geometry_walls,
    wall_thickness_to_dict,
)

__all__ = [
    # Sweeps
    "SweptTubeGeometry",
    "TubeNetwork",
    "section_face",
    "placement_location",
    "SEAM_DIRECTION",

    # Instrument parts
    "BellGeometry",
    "ReceiverGeometry",
    "TuningSlideGeometry",
    "u_bend_path",
    "ValveCasingGeometry",
    "PistonGeometry",
    "Port",
    "Passage",
    "port_location",
    "geometry_for_part",
    "build_instrument_part",
    "part_kinds",

    # Booleans and repair
    "repair_geometry",
    "fuse_all",
    "cut_all",
    "largest_solid",

    # Wall thickness measurement
    "WallThicknessResult",
    "measure_wall_thickness",
    "measure_geometry_walls",
    "wall_thickness_to_dict",
]
