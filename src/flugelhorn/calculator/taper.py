"""
Bore laws - radius as a function of the normalised sweep parameter.

Every law exposes ``radius(u)`` and ``derivative(u)`` for u in [0, 1].
The derivative is with respect to u, so callers divide by the path length
to get a dimensionless slope.
"""

from dataclasses import dataclass
from math import sqrt
from typing import Optional

from ..enums import BoreLaw


@dataclass(frozen=True)
class ConstantBore:
    """Cylindrical bore."""
    radius_mm: float

    def radius(self, u: float) -> float:
        return self.radius_mm

    def derivative(self, u: float) -> float:
        return 0.0


@dataclass(frozen=True)
class LinearTaper:
    """Straight taper from start_radius_mm (u=0) to end_radius_mm (u=1)."""
    start_radius_mm: float
    end_radius_mm: float

    def radius(self, u: float) -> float:
        return self.start_radius_mm + (self.end_radius_mm - self.start_radius_mm) * u

    def derivative(self, u: float) -> float:
        return self.end_radius_mm - self.start_radius_mm


@dataclass(frozen=True)
class BellCurve:
    """
    Empirical bell flare: radius(t) = a + b / (1 + t/c).

    t runs from the rim (t=0) to the throat (t=1). With b > 0 the radius
    falls off hyperbolically from the rim; the flare constant c sets how
    tightly the flare hugs the rim.

    Attributes:
        a: Asymptotic radius term in mm
        b: Flare amplitude in mm
        c: Flare constant (dimensionless, c > 0 or c < -1)
    """
    a: float
    b: float
    c: float

    def __post_init__(self):
        # 1 + t/c must stay away from zero over t in [0, 1]
        if not (self.c > 0 or self.c < -1):
            raise ValueError(
                f"Bell flare constant must be > 0 or < -1, got {self.c}"
            )

    @classmethod
    def fit(cls, rim_radius_mm: float, throat_radius_mm: float, flare: float) -> "BellCurve":
        """
        Solve a and b so that radius(0) = rim and radius(1) = throat.

        Args:
            rim_radius_mm: Bore radius at the bell rim
            throat_radius_mm: Bore radius where the bell joins the tubing
            flare: Flare constant c

        Returns:
            BellCurve through both end radii
        """
        if rim_radius_mm <= 0 or throat_radius_mm <= 0:
            raise ValueError(
                f"Bell radii must be positive (rim={rim_radius_mm}, throat={throat_radius_mm})"
            )
        if not (flare > 0 or flare < -1):
            raise ValueError(f"Bell flare constant must be > 0 or < -1, got {flare}")

        # radius(0) - radius(1) = b * (1 - c / (c + 1)) = b / (c + 1)
        b = (rim_radius_mm - throat_radius_mm) * (flare + 1)
        a = rim_radius_mm - b
        return cls(a=a, b=b, c=flare)

    def radius(self, t: float) -> float:
        return self.a + self.b / (1 + t / self.c)

    def derivative(self, t: float) -> float:
        return -self.b / (self.c * (1 + t / self.c) ** 2)


def compensated_wall_thickness(nominal_mm: float, slope: float) -> float:
    """
    Radial wall offset that gives nominal_mm measured normal to the surface.

    A wall offset radially by w on a surface of slope m has a normal
    thickness of w / sqrt(m^2 + 1), so the radial offset is scaled up by
    the same factor.

    Args:
        nominal_mm: Required wall thickness normal to the surface
        slope: Local dr/dl (dimensionless)

    Returns:
        Radial offset in mm
    """
    return nominal_mm * sqrt(slope ** 2 + 1)


def make_bore_law(
    kind: BoreLaw,
    start_diameter_mm: Optional[float] = None,
    end_diameter_mm: Optional[float] = None,
    flare: Optional[float] = None,
    coefficients: Optional[tuple] = None,
):
    """
    Build a bore law from file-level parameters.

    For BELL, start is the rim and end is the throat unless explicit
    (a, b, c) coefficients are given.

    Raises:
        ValueError: If the parameters required by ``kind`` are missing
    """
    if isinstance(kind, str):
        kind = BoreLaw(kind.lower())

    if kind == BoreLaw.CONSTANT:
        if start_diameter_mm is None:
            raise ValueError("Constant bore requires start_diameter_mm")
        return ConstantBore(start_diameter_mm / 2)

    if kind == BoreLaw.LINEAR:
        if start_diameter_mm is None or end_diameter_mm is None:
            raise ValueError("Linear taper requires start_diameter_mm and end_diameter_mm")
        return LinearTaper(start_diameter_mm / 2, end_diameter_mm / 2)

    if kind == BoreLaw.BELL:
        if coefficients is not None:
            a, b, c = coefficients
            return BellCurve(a=a, b=b, c=c)
        if start_diameter_mm is None or end_diameter_mm is None or flare is None:
            raise ValueError(
                "Bell bore requires rim/throat diameters and flare, or coefficients"
            )
        return BellCurve.fit(start_diameter_mm / 2, end_diameter_mm / 2, flare)

    raise ValueError(f"Unknown bore law: {kind}")
