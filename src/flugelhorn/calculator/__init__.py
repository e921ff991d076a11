"""
Flugelhorn Calculator - bore laws, sweep paths, sampling and validation.

Pure Python; no geometry kernel needed.

Example:
    >>> from flugelhorn.calculator import BellCurve, PlanarPath, Straight, sample_profiles
    >>>
    >>> bell = BellCurve.fit(rim_radius_mm=76.2, throat_radius_mm=6.6, flare=0.08)
    >>> samples = sample_profiles(PlanarPath([Straight(300)]), bell, 1.2, slices=400)
    >>> samples[0].outer_radius > samples[0].inner_radius
    True
"""

from .taper import (
    ConstantBore,
    LinearTaper,
    BellCurve,
    compensated_wall_thickness,
    make_bore_law,
)

from .paths import (
    Straight,
    Arc,
    PlanarPath,
)

from .sampling import (
    ProfileSample,
    sample_parameters,
    sample_profiles,
    max_turn_per_slice_deg,
    max_radius_step,
    max_slope,
)

from .validation import (
    validate_design,
    Severity,
    ValidationMessage,
    ValidationResult,
)

from .constants import (
    MM_PER_INCH,
    inches,
)

from ..enums import (
    BoreLaw,
    SegmentKind,
    PartKind,
)

__all__ = [
    # Bore laws
    "ConstantBore",
    "LinearTaper",
    "BellCurve",
    "compensated_wall_thickness",
    "make_bore_law",

    # Paths
    "Straight",
    "Arc",
    "PlanarPath",

    # Sampling
    "ProfileSample",
    "sample_parameters",
    "sample_profiles",
    "max_turn_per_slice_deg",
    "max_radius_step",
    "max_slope",

    # Validation
    "validate_design",
    "Severity",
    "ValidationMessage",
    "ValidationResult",

    # Units
    "MM_PER_INCH",
    "inches",

    # Enums
    "BoreLaw",
    "SegmentKind",
    "PartKind",
]
