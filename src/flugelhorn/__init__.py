"""
Flugelhorn - swept tube generator for 3D-printable brass instrument parts.

Bell flares, tapered receivers, tuning slide crooks, valve casings and
pistons, built as capped manifold solids from a JSON instrument design.

Example:
    >>> from flugelhorn.io import load_design_json
    >>> from flugelhorn.calculator import validate_design
    >>> from flugelhorn.core import build_instrument_part
    >>>
    >>> design = load_design_json("examples/flugelhorn.json")
    >>> print(validate_design(design).valid)
    >>>
    >>> bell = build_instrument_part(design, "bell")
    >>> bell.export_step("bell.step")

Note: All imports are lazy-loaded for fast startup. The calculator can be
imported without triggering geometry (build123d) or IO (Pydantic) imports.
"""

__version__ = "0.3.0"

# Define which names come from which submodule
# All imports are lazy to minimize startup time

_ENUMS = {"BoreLaw", "SegmentKind", "PartKind"}

_CALCULATOR = {
    "ConstantBore",
    "LinearTaper",
    "BellCurve",
    "compensated_wall_thickness",
    "make_bore_law",
    "Straight",
    "Arc",
    "PlanarPath",
    "ProfileSample",
    "sample_profiles",
    "validate_design",
    "Severity",
    "ValidationResult",
    "MM_PER_INCH",
    "inches",
}

_IO = {
    "load_design_json",
    "save_design_json",
    "InstrumentDesign",
    "BellSpec",
    "ReceiverSpec",
    "SlideSpec",
    "ValveSpec",
    "TubeSpec",
    "ManufacturingParams",
}

_CORE = {
    "SweptTubeGeometry",
    "TubeNetwork",
    "BellGeometry",
    "ReceiverGeometry",
    "TuningSlideGeometry",
    "ValveCasingGeometry",
    "PistonGeometry",
    "geometry_for_part",
    "build_instrument_part",
    "measure_wall_thickness",
}

# Cache for lazy-loaded modules
_modules = {}


def __getattr__(name):
    """Lazy load submodules when their attributes are accessed."""
    global _modules

    if name in _ENUMS:
        if "enums" not in _modules:
            from . import enums
            _modules["enums"] = enums
        return getattr(_modules["enums"], name)

    if name in _CALCULATOR:
        if "calculator" not in _modules:
            from . import calculator
            _modules["calculator"] = calculator
        return getattr(_modules["calculator"], name)

    if name in _IO:
        if "io" not in _modules:
            from . import io
            _modules["io"] = io
        return getattr(_modules["io"], name)

    if name in _CORE:
        if "core" not in _modules:
            from . import core
            _modules["core"] = core
        return getattr(_modules["core"], name)

    raise AttributeError(f"module 'flugelhorn' has no attribute {name!r}")


__all__ = ["__version__"] + sorted(_ENUMS | _CALCULATOR | _IO | _CORE)
