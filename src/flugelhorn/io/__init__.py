"""
Flugelhorn IO - design models, JSON loaders and exporters.

Example:
    >>> from flugelhorn.io import load_design_json, save_design_json
    >>>
    >>> design = load_design_json("examples/flugelhorn.json")
    >>> design.part_names()
    >>> save_design_json(design, "copy.json")
"""

from .loaders import (
    load_design_json,
    save_design_json,
    path_from_specs,
    BoreSpec,
    PathSegmentSpec,
    PlacementSpec,
    TubeSpec,
    BellSpec,
    ReceiverSpec,
    SlideSpec,
    PortSpec,
    PassageSpec,
    PistonSpec,
    ValveSpec,
    ManufacturingParams,
    InstrumentDesign,
)

# Export/packaging requires build123d
try:
    from .package import (
        PackageFiles,
        generate_package,
        save_package_to_dir,
        create_package_zip,
    )
except ImportError:
    pass

from .schema import (
    SCHEMA_VERSION,
    get_design_schema,
    validate_json_schema,
)

__all__ = [
    # Loaders
    "load_design_json",
    "save_design_json",
    "path_from_specs",

    # Parameters
    "BoreSpec",
    "PathSegmentSpec",
    "PlacementSpec",
    "TubeSpec",
    "BellSpec",
    "ReceiverSpec",
    "SlideSpec",
    "PortSpec",
    "PassageSpec",
    "PistonSpec",
    "ValveSpec",
    "ManufacturingParams",
    "InstrumentDesign",

    # Package export
    "PackageFiles",
    "generate_package",
    "save_package_to_dir",
    "create_package_zip",

    # Schema
    "SCHEMA_VERSION",
    "get_design_schema",
    "validate_json_schema",
]
