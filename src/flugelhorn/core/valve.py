"""
Piston valve geometry: casing with port stubs, and the matching piston.

The casing axis is Z with its bottom at z=0. Ports leave the axis radially
at a height and an angle around the axis; they are built as members of a
tube network so their bores open into the casing bore.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from build123d import Part, Cylinder, Align, Location, Pos, Rot

from ..calculator.paths import PlanarPath, Straight
from ..calculator.taper import ConstantBore
from ..calculator.constants import DEFAULT_WALL_MM, DEFAULT_PISTON_CLEARANCE_MM, BORE_OVERCUT_MM
from .geometry_base import BaseGeometry
from .geometry_repair import cut_all, repair_geometry, largest_solid
from .network import TubeNetwork
from .tube import SweptTubeGeometry

logger = logging.getLogger(__name__)


@dataclass
class Port:
    """Radial port on a valve casing."""
    height_mm: float
    bore_diameter_mm: float
    angle_deg: float = 0.0
    length_mm: float = 10.0


@dataclass
class Passage:
    """Windway through a piston, in piston coordinates."""
    path: PlanarPath
    bore_diameter_mm: float
    location: Optional[Location] = None


def port_location(port: Port) -> Location:
    """Lay a +Z path along the port direction: tip it onto +X, turn it, lift it."""
    return Pos(0, 0, port.height_mm) * Rot(0, 0, port.angle_deg) * Rot(0, 90, 0)


class ValveCasingGeometry(BaseGeometry):
    """Valve casing tube with its ports opened into the bore."""

    _part_name = "valve"

    def __init__(
        self,
        casing_bore_mm: float,
        casing_length_mm: float,
        ports: Sequence[Port] = (),
        wall_thickness_mm: float = DEFAULT_WALL_MM,
        bore_overcut_mm: float = BORE_OVERCUT_MM,
        location: Optional[Location] = None,
        name: str = "valve",
    ):
        self.casing_bore_mm = casing_bore_mm
        self.casing_length_mm = casing_length_mm
        self.ports = list(ports)
        self.wall_thickness_mm = wall_thickness_mm
        self.location = location
        self.name = name

        self.casing = SweptTubeGeometry(
            PlanarPath([Straight(casing_length_mm)]),
            ConstantBore(casing_bore_mm / 2),
            wall_thickness_mm,
            slices=1,
            bore_overcut_mm=bore_overcut_mm,
            name=f"{name}_casing",
        )

        casing_outer_r = casing_bore_mm / 2 + wall_thickness_mm
        self.port_tubes: List[SweptTubeGeometry] = []
        for i, port in enumerate(self.ports):
            if port.bore_diameter_mm >= casing_bore_mm:
                raise ValueError(
                    f"{name}: port {i} bore {port.bore_diameter_mm}mm must be smaller "
                    f"than the casing bore {casing_bore_mm}mm"
                )
            self.port_tubes.append(SweptTubeGeometry(
                PlanarPath([Straight(casing_outer_r + port.length_mm)]),
                ConstantBore(port.bore_diameter_mm / 2),
                wall_thickness_mm,
                slices=1,
                bore_overcut_mm=bore_overcut_mm,
                location=port_location(port),
                name=f"{name}_port{i}",
            ))

        self.network = TubeNetwork([self.casing] + self.port_tubes, name=name)
        self._part = None

    def build(self) -> Part:
        if self._part is not None:
            return self._part

        logger.info(
            f"Building {self.name}: casing Ø{self.casing_bore_mm:.2f}mm x {self.casing_length_mm:.1f}mm, "
            f"{len(self.ports)} port(s)"
        )
        casing = self.network.build()
        if self.location is not None:
            casing = self.location * casing

        self._part = casing
        return casing


class PistonGeometry(BaseGeometry):
    """
    Solid piston with windways cut through it.

    The piston is a cylinder sized to the casing bore less the clearance on
    each side. Each passage is swept in piston coordinates (bottom at z=0)
    and only its bore solid is used, as a cutting tool.
    """

    _part_name = "piston"

    def __init__(
        self,
        casing_bore_mm: float,
        length_mm: float,
        clearance_mm: float = DEFAULT_PISTON_CLEARANCE_MM,
        passages: Sequence[Passage] = (),
        slices: int = 1,
        ruled: bool = True,
        bore_overcut_mm: float = BORE_OVERCUT_MM,
        location: Optional[Location] = None,
        name: str = "piston",
    ):
        self.radius_mm = casing_bore_mm / 2 - clearance_mm
        if clearance_mm < 0 or self.radius_mm <= 0:
            raise ValueError(
                f"Clearance {clearance_mm}mm leaves no piston in a {casing_bore_mm}mm casing"
            )
        if length_mm <= 0:
            raise ValueError(f"Piston length must be positive, got {length_mm}")

        self.casing_bore_mm = casing_bore_mm
        self.length_mm = length_mm
        self.clearance_mm = clearance_mm
        self.location = location
        self.name = name

        # The wall of a passage never reaches the part, any positive value will do
        self.passages: List[SweptTubeGeometry] = [
            SweptTubeGeometry(
                p.path,
                ConstantBore(p.bore_diameter_mm / 2),
                1.0,
                slices=slices,
                ruled=ruled,
                compensate_slope=False,
                bore_overcut_mm=bore_overcut_mm,
                location=p.location,
                name=f"{name}_passage{i}",
            )
            for i, p in enumerate(passages)
        ]
        self._part = None

    def build(self) -> Part:
        if self._part is not None:
            return self._part

        logger.info(
            f"Building {self.name}: Ø{2 * self.radius_mm:.2f}mm x {self.length_mm:.1f}mm, "
            f"{len(self.passages)} passage(s)"
        )
        piston = Cylinder(
            self.radius_mm, self.length_mm,
            align=(Align.CENTER, Align.CENTER, Align.MIN),
        )
        if self.passages:
            piston = cut_all(piston, [p.inner_solid() for p in self.passages])
            piston = largest_solid(repair_geometry(piston))

        if self.location is not None:
            piston = self.location * piston

        logger.debug(f"Final {self.name} volume: {piston.volume:.2f} mm³")
        self._part = piston
        return piston
