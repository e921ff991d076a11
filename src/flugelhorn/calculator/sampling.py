"""
Profile sampling for swept tubes.

Turns a path and a bore law into the ordered list of cross-sections that
the geometry layer lofts. The outer radius carries the slope-compensated
wall so the wall measured normal to the surface never drops below the
nominal thickness.
"""

from dataclasses import dataclass
from math import acos, degrees
from typing import List

from .paths import PlanarPath, Point3
from .taper import compensated_wall_thickness

# Parameters closer than this are treated as the same sample
_DUPLICATE_U = 1e-9


@dataclass(frozen=True)
class ProfileSample:
    """One circular cross-section of a swept tube.

    Attributes:
        u: Normalised arc length along the path
        position: Centre of the section (path coordinates, mm)
        tangent: Unit path tangent (section plane normal)
        inner_radius: Bore radius in mm
        outer_radius: Outside radius in mm
        slope: Dimensionless dr/dl of the bore at this sample
    """
    u: float
    position: Point3
    tangent: Point3
    inner_radius: float
    outer_radius: float
    slope: float

    @property
    def radial_wall(self) -> float:
        return self.outer_radius - self.inner_radius


def sample_parameters(path: PlanarPath, slices: int) -> List[float]:
    """Uniform parameters plus every segment junction, sorted and unique."""
    if slices < 1:
        raise ValueError(f"Need at least 1 slice, got {slices}")

    values = [i / slices for i in range(slices + 1)] + path.junctions()
    values.sort()

    result: List[float] = []
    for u in values:
        if not result or u - result[-1] > _DUPLICATE_U:
            result.append(u)
    return result


def sample_profiles(
    path: PlanarPath,
    bore,
    wall_thickness_mm: float,
    slices: int,
    compensate_slope: bool = True,
) -> List[ProfileSample]:
    """
    Sample inner and outer radii along a path.

    Args:
        path: Sweep path
        bore: Bore law with radius(u) and derivative(u)
        wall_thickness_mm: Nominal wall, normal to the surface
        slices: Number of uniform intervals along the path
        compensate_slope: Scale the radial wall by sqrt(slope^2 + 1)

    Returns:
        Ordered list of ProfileSample

    Raises:
        ValueError: If the wall is not positive or any section degenerates
    """
    if wall_thickness_mm <= 0:
        raise ValueError(f"Wall thickness must be positive, got {wall_thickness_mm}")

    samples = []
    for u in sample_parameters(path, slices):
        inner = bore.radius(u)
        slope = bore.derivative(u) / path.length
        if compensate_slope:
            wall = compensated_wall_thickness(wall_thickness_mm, slope)
        else:
            wall = wall_thickness_mm
        outer = inner + wall

        if inner <= 0:
            raise ValueError(f"Bore radius {inner:.3f}mm at u={u:.3f} is not positive")
        if outer <= inner:
            raise ValueError(f"Degenerate wall at u={u:.3f}: outer={outer:.3f}mm, inner={inner:.3f}mm")

        samples.append(ProfileSample(
            u=u,
            position=path.point(u),
            tangent=path.tangent(u),
            inner_radius=inner,
            outer_radius=outer,
            slope=slope,
        ))
    return samples


def max_turn_per_slice_deg(samples: List[ProfileSample]) -> float:
    """Largest tangent change between consecutive samples, in degrees."""
    worst = 0.0
    for prev, cur in zip(samples, samples[1:]):
        dot = sum(a * b for a, b in zip(prev.tangent, cur.tangent))
        worst = max(worst, degrees(acos(max(-1.0, min(1.0, dot)))))
    return worst


def max_radius_step(samples: List[ProfileSample]) -> float:
    """Largest relative change in bore radius between consecutive samples."""
    worst = 0.0
    for prev, cur in zip(samples, samples[1:]):
        step = abs(cur.inner_radius - prev.inner_radius) / min(cur.inner_radius, prev.inner_radius)
        worst = max(worst, step)
    return worst


def max_slope(samples: List[ProfileSample]) -> float:
    return max(abs(s.slope) for s in samples)
