"""
Swept tube geometry using build123d.

Creates hollow tubes by lofting circular sections along a planar path:
loft(outer sections) minus loft(inner sections). Both lofts are closed
solids, so the difference is a capped, manifold tube whatever the bore law.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from build123d import (
    Part, Face, Plane, BuildSketch, Circle, Location, Pos, Rot, loft,
)

from ..calculator.paths import PlanarPath
from ..calculator.sampling import ProfileSample, sample_profiles
from ..calculator.constants import BORE_OVERCUT_MM, DEFAULT_SLICES
from .geometry_base import BaseGeometry
from .geometry_repair import cut_all, repair_geometry, largest_solid

logger = logging.getLogger(__name__)

# Every path lies in the XZ plane, so +Y is normal to every tangent. Using it
# as the section x direction keeps the circle seams in line and the loft
# free of twist.
SEAM_DIRECTION = (0, 1, 0)


def placement_location(
    position: Sequence[float] = (0.0, 0.0, 0.0),
    rotation: Sequence[float] = (0.0, 0.0, 0.0),
) -> Location:
    """Translate to position, then rotate about X, Y and Z (degrees)."""
    return Pos(*position) * Rot(*rotation)


def section_face(position, tangent, radius: float) -> Face:
    """Circular face of the given radius, normal to the path tangent."""
    plane = Plane(origin=position, x_dir=SEAM_DIRECTION, z_dir=tangent)
    with BuildSketch(plane) as sk:
        Circle(radius)
    return sk.sketch.faces()[0]


class SweptTubeGeometry(BaseGeometry):
    """
    Generates a hollow tube swept along a path.

    The bore (inner) radius follows the bore law; the outer radius adds the
    wall, scaled by sqrt(slope^2 + 1) where the bore tapers so the wall
    measured normal to the surface keeps its nominal thickness.
    """

    _part_name = "tube"

    def __init__(
        self,
        path: PlanarPath,
        bore,
        wall_thickness_mm: float,
        slices: int = DEFAULT_SLICES,
        ruled: bool = True,
        compensate_slope: bool = True,
        bore_overcut_mm: float = BORE_OVERCUT_MM,
        location: Optional[Location] = None,
        name: str = "tube",
    ):
        """
        Initialize swept tube generator.

        Args:
            path: Planar sweep path
            bore: Bore law (ConstantBore, LinearTaper or BellCurve)
            wall_thickness_mm: Nominal wall thickness, normal to the surface
            slices: Uniform path intervals; segment joints are always added
            ruled: Ruled loft between sections (default) or smooth B-spline
            compensate_slope: Scale the wall for local bore slope
            bore_overcut_mm: Inner loft extension past both ends so the bore
                             opens cleanly in the boolean cut
            location: Placement applied after building
            name: Part name for logs and file names

        Raises:
            ValueError: If any section would have a degenerate wall
        """
        if bore_overcut_mm < 0:
            raise ValueError(f"Bore overcut must not be negative, got {bore_overcut_mm}")

        self.path = path
        self.bore = bore
        self.wall_thickness_mm = wall_thickness_mm
        self.slices = slices
        self.ruled = ruled
        self.compensate_slope = compensate_slope
        self.bore_overcut_mm = bore_overcut_mm
        self.location = location
        self.name = name

        # Sampling validates radii up front, before any CAD work
        self.samples: List[ProfileSample] = sample_profiles(
            path, bore, wall_thickness_mm, slices, compensate_slope=compensate_slope,
        )

        self._outer = None
        self._inner = None
        self._part = None

    def _place(self, part):
        if self.location is None:
            return part
        return self.location * part

    def _inner_sections(self) -> List[Tuple[tuple, tuple, float]]:
        """Inner sections, plus one extra at each end pushed out along the tangent."""
        sections = [(s.position, s.tangent, s.inner_radius) for s in self.samples]
        if self.bore_overcut_mm > 0:
            first, last = self.samples[0], self.samples[-1]
            d = self.bore_overcut_mm
            start = tuple(p - t * d for p, t in zip(first.position, first.tangent))
            end = tuple(p + t * d for p, t in zip(last.position, last.tangent))
            sections.insert(0, (start, first.tangent, first.inner_radius))
            sections.append((end, last.tangent, last.inner_radius))
        return sections

    def _loft(self, sections, label: str) -> Part:
        faces = [section_face(position, tangent, radius) for position, tangent, radius in sections]
        logger.debug(f"Lofting {len(faces)} {label} sections for {self.name}...")
        return loft(faces, ruled=self.ruled)

    def outer_solid(self, located: bool = True) -> Part:
        """Capped loft of the outside surface."""
        if self._outer is None:
            self._outer = self._loft(
                [(s.position, s.tangent, s.outer_radius) for s in self.samples], "outer"
            )
        return self._place(self._outer) if located else self._outer

    def inner_solid(self, located: bool = True) -> Part:
        """Capped loft of the bore, extended by the overcut at both ends."""
        if self._inner is None:
            self._inner = self._loft(self._inner_sections(), "inner")
        return self._place(self._inner) if located else self._inner

    def build(self) -> Part:
        """
        Build the hollow tube.

        Returns:
            build123d Part ready for export
        """
        if self._part is not None:
            return self._part

        logger.info(
            f"Building {self.name}: length={self.path.length:.1f}mm, "
            f"{len(self.samples)} sections, wall={self.wall_thickness_mm:.2f}mm"
        )

        tube = cut_all(self.outer_solid(located=False), [self.inner_solid(located=False)])
        tube = repair_geometry(tube)
        tube = largest_solid(tube)
        tube = self._place(tube)

        logger.debug(f"Final {self.name} volume: {tube.volume:.2f} mm³")
        self._part = tube
        return tube

    @property
    def start_radii(self) -> Tuple[float, float]:
        """(inner, outer) radius at the path start."""
        return self.samples[0].inner_radius, self.samples[0].outer_radius

    @property
    def end_radii(self) -> Tuple[float, float]:
        """(inner, outer) radius at the path end."""
        return self.samples[-1].inner_radius, self.samples[-1].outer_radius
