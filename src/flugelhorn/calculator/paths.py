"""
Planar sweep paths built from straight and circular-arc segments.

Every path starts at the origin heading along +Z and lies in the XZ plane.
The heading angle is measured from +Z toward +X. Positive arc angles turn
toward +X, negative angles toward -X. Placing a path in 3D is left to the
geometry layer (a build123d Location), which keeps this module free of any
CAD dependency.

Positions are parameterised by normalised arc length u in [0, 1].
"""

from dataclasses import dataclass
from math import cos, sin, radians, degrees, copysign
from typing import List, Sequence, Tuple, Union

Point3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Straight:
    """Straight run of tube."""
    length_mm: float

    def __post_init__(self):
        if self.length_mm <= 0:
            raise ValueError(f"Straight length must be positive, got {self.length_mm}")

    @property
    def length(self) -> float:
        return self.length_mm


@dataclass(frozen=True)
class Arc:
    """Circular bend; angle_deg is signed (positive turns toward +X)."""
    bend_radius_mm: float
    angle_deg: float

    def __post_init__(self):
        if self.bend_radius_mm <= 0:
            raise ValueError(f"Bend radius must be positive, got {self.bend_radius_mm}")
        if self.angle_deg == 0:
            raise ValueError("Arc angle must be non-zero")

    @property
    def length(self) -> float:
        return self.bend_radius_mm * radians(abs(self.angle_deg))


Segment = Union[Straight, Arc]


def _direction(heading: float) -> Point3:
    return (sin(heading), 0.0, cos(heading))


def _normal(heading: float) -> Point3:
    # In-plane normal pointing toward +X when heading is +Z
    return (cos(heading), 0.0, -sin(heading))


class PlanarPath:
    """
    Chain of straight and arc segments, tangent-continuous at the joints.

    Example:
        >>> u_bend = PlanarPath([Straight(50), Arc(20, 180), Straight(50)])
        >>> x, y, z = u_bend.end_point()  # back alongside the start, 40mm over
        >>> round(x, 6), round(z, 6)
        (40.0, 0.0)
    """

    def __init__(self, segments: Sequence[Segment]):
        if not segments:
            raise ValueError("Path needs at least one segment")
        self.segments: List[Segment] = list(segments)

        # Start point and heading of each segment
        self._starts: List[Tuple[Point3, float]] = []
        point: Point3 = (0.0, 0.0, 0.0)
        heading = 0.0
        for segment in self.segments:
            self._starts.append((point, heading))
            point, heading = self._advance(segment, point, heading, segment.length)
        self._end = (point, heading)

        self.length = sum(s.length for s in self.segments)

    @staticmethod
    def _advance(segment: Segment, point: Point3, heading: float, distance: float) -> Tuple[Point3, float]:
        """Move ``distance`` along ``segment`` from its start."""
        if isinstance(segment, Straight):
            dx, dy, dz = _direction(heading)
            return (point[0] + dx * distance, point[1] + dy * distance, point[2] + dz * distance), heading

        sign = copysign(1.0, segment.angle_deg)
        r = segment.bend_radius_mm
        n = _normal(heading)
        centre = (point[0] + sign * r * n[0], point[1], point[2] + sign * r * n[2])
        new_heading = heading + sign * distance / r
        n_new = _normal(new_heading)
        new_point = (centre[0] - sign * r * n_new[0], point[1], centre[2] - sign * r * n_new[2])
        return new_point, new_heading

    def _locate(self, u: float) -> Tuple[Point3, float]:
        u = min(max(u, 0.0), 1.0)
        distance = u * self.length
        travelled = 0.0
        for segment, (start, heading) in zip(self.segments, self._starts):
            if distance <= travelled + segment.length or segment is self.segments[-1]:
                local = min(max(distance - travelled, 0.0), segment.length)
                return self._advance(segment, start, heading, local)
            travelled += segment.length
        return self._end

    def point(self, u: float) -> Point3:
        """Position at normalised arc length u."""
        return self._locate(u)[0]

    def heading(self, u: float) -> float:
        """Heading angle in radians (from +Z toward +X) at u."""
        return self._locate(u)[1]

    def tangent(self, u: float) -> Point3:
        """Unit tangent at u."""
        return _direction(self.heading(u))

    def end_point(self) -> Point3:
        return self._end[0]

    def end_tangent(self) -> Point3:
        return _direction(self._end[1])

    def total_turn_deg(self) -> float:
        """Net change of heading along the path in degrees."""
        return degrees(self._end[1])

    def junctions(self) -> List[float]:
        """Normalised parameters of the interior segment boundaries."""
        result = []
        travelled = 0.0
        for segment in self.segments[:-1]:
            travelled += segment.length
            result.append(travelled / self.length)
        return result

    def min_bend_radius(self) -> float:
        """Tightest bend radius in the path (inf for all-straight paths)."""
        radii = [s.bend_radius_mm for s in self.segments if isinstance(s, Arc)]
        return min(radii) if radii else float("inf")

    def max_curvature(self) -> float:
        """Largest curvature (1/mm) along the path."""
        return 1.0 / self.min_bend_radius()

    def __repr__(self) -> str:
        return f"PlanarPath({self.segments!r})"
