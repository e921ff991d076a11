"""Post-build wall thickness measurement.

Measures the wall of a built tube by casting rays outward from the bore
centreline and intersecting them with the part. The first hit is the bore
surface and the second the outside surface; their distance is the radial
wall. Where the bore tapers the wall is measured normal to the surface by
dividing the radial wall by sqrt(1 + slope^2).

Uses OpenCascade's IntCurvesFace_ShapeIntersector, as the rays must see the
actual built geometry rather than the intended profile.
"""

from dataclasses import dataclass
from math import sqrt, cos, sin, pi
from typing import List, Optional, Sequence, Tuple

from build123d import Part, Location

from OCP.gp import gp_Pnt, gp_Dir, gp_Lin
from OCP.IntCurvesFace import IntCurvesFace_ShapeIntersector

from ..calculator.constants import WALL_WARNING_THRESHOLD_MM
from ..calculator.sampling import ProfileSample


DEFAULT_ANGULAR_SAMPLES = 36  # Every 10 degrees
DEFAULT_AXIAL_SAMPLES = 9

# Hits closer than this to the ray origin are ignored
_MIN_PARAM = 1e-4

# A ray through a section edge reports one hit per adjacent face
_SAME_HIT = 1e-5


@dataclass
class WallThicknessResult:
    """Result of post-build wall thickness measurement.

    Attributes:
        minimum_radial_mm: Smallest wall measured along the section plane.
        minimum_normal_mm: Smallest wall measured normal to the surface.
            Equal to the radial value where the bore does not taper.
        measurement_point_inner: (x, y, z) on the bore surface at the minimum.
        measurement_point_outer: (x, y, z) on the outside surface at the minimum.
        samples_measured: Number of rays that found both surfaces.
        is_valid: Whether the measurement succeeded.
        has_warning: True if minimum_normal_mm < warning_threshold_mm.
        warning_threshold_mm: Threshold below which a warning is issued.
        message: Human-readable status message.
    """

    minimum_radial_mm: float
    minimum_normal_mm: float
    measurement_point_inner: Optional[Tuple[float, float, float]] = None
    measurement_point_outer: Optional[Tuple[float, float, float]] = None
    samples_measured: int = 0
    is_valid: bool = True
    has_warning: bool = False
    warning_threshold_mm: float = WALL_WARNING_THRESHOLD_MM
    message: str = ""


def _failed(message: str, warning_threshold_mm: float) -> WallThicknessResult:
    return WallThicknessResult(
        minimum_radial_mm=0.0,
        minimum_normal_mm=0.0,
        is_valid=False,
        warning_threshold_mm=warning_threshold_mm,
        message=message,
    )


def _cross(a, b):
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _pick(items: Sequence, count: int) -> List:
    """Up to count items spread evenly, first and last included."""
    if count >= len(items):
        return list(items)
    if count <= 1:
        return [items[len(items) // 2]]
    step = (len(items) - 1) / (count - 1)
    return [items[round(i * step)] for i in range(count)]


def _between(a: ProfileSample, b: ProfileSample, f: float):
    """Station a fraction f of the way from section a to section b."""
    position = tuple(pa + (pb - pa) * f for pa, pb in zip(a.position, b.position))
    tangent = tuple(ta + (tb - ta) * f for ta, tb in zip(a.tangent, b.tangent))
    norm = sqrt(sum(t * t for t in tangent))
    return position, tuple(t / norm for t in tangent), a.slope + (b.slope - a.slope) * f


def _transform_point(point, trsf) -> Tuple[float, float, float]:
    p = gp_Pnt(*point).Transformed(trsf)
    return p.X(), p.Y(), p.Z()


def _cast(intersector, origin, direction, trsf=None) -> Optional[Tuple[float, float]]:
    """Parameters of the first two hits in front of the origin, or None."""
    p = gp_Pnt(*origin)
    d = gp_Dir(*direction)
    if trsf is not None:
        p = p.Transformed(trsf)
        d = d.Transformed(trsf)
    intersector.Perform(gp_Lin(p, d), -1e6, 1e6)

    params = []
    for w in sorted(intersector.WParameter(j) for j in range(1, intersector.NbPnt() + 1)):
        if w > _MIN_PARAM and (not params or w - params[-1] > _SAME_HIT):
            params.append(w)
    if len(params) < 2:
        return None
    return params[0], params[1]


def measure_wall_thickness(
    part: Part,
    samples: Optional[Sequence[ProfileSample]] = None,
    location: Optional[Location] = None,
    warning_threshold_mm: float = WALL_WARNING_THRESHOLD_MM,
    axial_samples: int = DEFAULT_AXIAL_SAMPLES,
    angular_samples: int = DEFAULT_ANGULAR_SAMPLES,
) -> WallThicknessResult:
    """Measure the minimum wall of a built tube.

    Without samples, rays are cast radially from the Z axis at evenly spaced
    heights inside the part's bounding box, which suits straight parts
    (bell, receiver, casing) built along Z. With the profile samples of a
    swept tube, rays are cast from the path centreline in each section plane
    and the sample slope gives the normal correction.

    Args:
        part: Built Part (located as built).
        samples: Profile samples of the sweep, in unlocated coordinates.
        location: Placement applied to the part after sweeping, if any.
        warning_threshold_mm: Threshold for a thin wall warning.
        axial_samples: Number of stations along the part.
        angular_samples: Number of rays around each station.

    Returns:
        WallThicknessResult with measurement details and warning status.

    Example:
        >>> tube = SweptTubeGeometry(path, bore, 1.2, slices=120)
        >>> result = measure_wall_thickness(tube.build(), tube.samples)
        >>> print(f"Minimum wall: {result.minimum_normal_mm:.2f}mm")
        Minimum wall: 1.19mm
    """
    try:
        intersector = IntCurvesFace_ShapeIntersector()
        intersector.Load(part.wrapped, 0.001)
    except Exception as e:
        return _failed(f"Failed to create ray intersector: {e}", warning_threshold_mm)

    trsf = location.wrapped.Transformation() if location is not None else None

    if samples is not None:
        # Skip the end sections, where rays graze the open faces
        interior = [(s.position, s.tangent, s.slope) for s in samples[1:-1]]
        if not interior:
            interior = [
                _between(samples[0], samples[-1], (i + 1) / (axial_samples + 1))
                for i in range(axial_samples)
            ]
        stations = _pick(interior, axial_samples)
    else:
        try:
            bbox = part.bounding_box()
        except Exception as e:
            return _failed(f"Failed to get part bounding box: {e}", warning_threshold_mm)
        z_min, z_max = bbox.min.Z, bbox.max.Z
        margin = (z_max - z_min) * 0.05
        count = max(axial_samples, 2)
        stations = [
            ((0.0, 0.0, z_min + margin + (z_max - z_min - 2 * margin) * i / (count - 1)),
             (0.0, 0.0, 1.0), None)
            for i in range(count)
        ]

    # Per station: list of (direction, inner_param, outer_param)
    hits_by_station = []
    for position, tangent, _ in stations:
        x_dir = (0.0, 1.0, 0.0) if samples is not None else (1.0, 0.0, 0.0)
        y_dir = _cross(tangent, x_dir)
        hits = []
        for i in range(angular_samples):
            angle = i * 2 * pi / angular_samples
            direction = tuple(cos(angle) * a + sin(angle) * b for a, b in zip(x_dir, y_dir))
            hit = _cast(intersector, position, direction, trsf)
            if hit is not None:
                hits.append((direction, hit[0], hit[1]))
        hits_by_station.append(hits)

    # Slope for the axis mode: central difference of the mean bore radius over z
    slopes = []
    for k, (position, tangent, slope) in enumerate(stations):
        if slope is not None:
            slopes.append(slope)
            continue
        mean_inner = []
        for j in (max(k - 1, 0), min(k + 1, len(stations) - 1)):
            hits = hits_by_station[j]
            mean_inner.append(sum(h[1] for h in hits) / len(hits) if hits else None)
        dz = stations[min(k + 1, len(stations) - 1)][0][2] - stations[max(k - 1, 0)][0][2]
        if None in mean_inner or dz == 0:
            slopes.append(0.0)
        else:
            slopes.append((mean_inner[1] - mean_inner[0]) / dz)

    min_radial = float("inf")
    min_normal = float("inf")
    min_inner_point = None
    min_outer_point = None
    measured = 0

    for (position, _, _), slope, hits in zip(stations, slopes, hits_by_station):
        for direction, inner, outer in hits:
            measured += 1
            radial = outer - inner
            normal = radial / sqrt(1 + slope * slope)
            if normal < min_normal:
                min_normal = normal
                min_radial = radial
                min_inner_point = tuple(p + inner * d for p, d in zip(position, direction))
                min_outer_point = tuple(p + outer * d for p, d in zip(position, direction))

    if measured == 0:
        return _failed(
            "No wall found - geometry may be invalid or the rays missed the part",
            warning_threshold_mm,
        )

    if trsf is not None:
        min_inner_point = _transform_point(min_inner_point, trsf)
        min_outer_point = _transform_point(min_outer_point, trsf)

    has_warning = min_normal < warning_threshold_mm
    if has_warning:
        message = (
            f"Warning: wall thickness ({min_normal:.2f}mm) "
            f"is below recommended minimum ({warning_threshold_mm:.2f}mm)"
        )
    else:
        message = f"Wall thickness: {min_normal:.2f}mm"

    return WallThicknessResult(
        minimum_radial_mm=min_radial,
        minimum_normal_mm=min_normal,
        measurement_point_inner=tuple(min_inner_point),
        measurement_point_outer=tuple(min_outer_point),
        samples_measured=measured,
        is_valid=True,
        has_warning=has_warning,
        warning_threshold_mm=warning_threshold_mm,
        message=message,
    )


def _measure_member(part: Part, member, location: Optional[Location], **kwargs) -> WallThicknessResult:
    """Cast a member's rays against the whole built network."""
    if location is None:
        location = member.location
    elif member.location is not None:
        location = location * member.location
    return measure_wall_thickness(part, member.samples, location, **kwargs)


def measure_geometry_walls(geometry, **kwargs) -> Optional[WallThicknessResult]:
    """Measure the wall of a geometry generator's built part.

    Swept parts are measured from their centreline. A valve casing is
    measured from the centreline of each tube (casing, then each port)
    against the fused casing, so the walls where ports meet the casing are
    included, and the thinnest result is returned. Parts without a wall
    (pistons) return None.
    """
    from .tube import SweptTubeGeometry
    from .bell import BellGeometry
    from .valve import ValveCasingGeometry

    if isinstance(geometry, SweptTubeGeometry):
        return measure_wall_thickness(geometry.build(), geometry.samples, geometry.location, **kwargs)
    if isinstance(geometry, BellGeometry):
        return measure_wall_thickness(geometry.build(), geometry.tube.samples, geometry.location, **kwargs)
    if isinstance(geometry, ValveCasingGeometry):
        part = geometry.build()
        results = [
            _measure_member(part, member, geometry.location, **kwargs)
            for member in geometry.network.members
        ]
        valid = [r for r in results if r.is_valid]
        if not valid:
            return results[0]
        return min(valid, key=lambda r: r.minimum_normal_mm)
    return None


def wall_thickness_to_dict(result: WallThicknessResult) -> dict:
    """Convert WallThicknessResult to dictionary for JSON serialization."""
    d = {
        "minimum_radial_mm": round(result.minimum_radial_mm, 4),
        "minimum_normal_mm": round(result.minimum_normal_mm, 4),
        "samples_measured": result.samples_measured,
        "is_valid": result.is_valid,
        "has_warning": result.has_warning,
        "warning_threshold_mm": result.warning_threshold_mm,
        "message": result.message,
    }

    for key, point in (
        ("measurement_point_inner", result.measurement_point_inner),
        ("measurement_point_outer", result.measurement_point_outer),
    ):
        if point is not None:
            d[key] = {
                "x_mm": round(point[0], 4),
                "y_mm": round(point[1], 4),
                "z_mm": round(point[2], 4),
            }

    return d
