"""
JSON input/output for flugelhorn part designs.

A design file lists the parts to generate (bell, receiver, slides, valves
and free-form tubes) plus shared manufacturing parameters.

Uses Pydantic for automatic validation and enum coercion.
"""

import json
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..enums import BoreLaw, SegmentKind
from ..calculator.constants import (
    MIN_WALL_MM,
    DEFAULT_WALL_MM,
    DEFAULT_SLICES,
    DEFAULT_BELL_SLICES,
    BORE_OVERCUT_MM,
    DEFAULT_PISTON_CLEARANCE_MM,
    RECEIVER_TAPER_PER_LENGTH,
)


class BoreSpec(BaseModel):
    """Bore law parameters.

    For "bell", start is the rim and end is the throat.
    """
    model_config = ConfigDict(extra='ignore')

    law: BoreLaw = BoreLaw.CONSTANT
    start_diameter_mm: Optional[float] = None
    end_diameter_mm: Optional[float] = None
    flare: Optional[float] = None  # Bell only
    coefficients: Optional[Tuple[float, float, float]] = None  # Bell (a, b, c)

    @field_validator('law', mode='before')
    @classmethod
    def coerce_law(cls, v):
        if isinstance(v, str):
            return BoreLaw(v.lower())
        return v

    def to_law(self):
        """Build the calculator bore law."""
        from ..calculator.taper import make_bore_law
        return make_bore_law(
            self.law,
            start_diameter_mm=self.start_diameter_mm,
            end_diameter_mm=self.end_diameter_mm,
            flare=self.flare,
            coefficients=self.coefficients,
        )


class PathSegmentSpec(BaseModel):
    """One straight or arc segment of a sweep path."""
    model_config = ConfigDict(extra='ignore')

    kind: SegmentKind = SegmentKind.STRAIGHT
    length_mm: Optional[float] = None  # Straight only
    bend_radius_mm: Optional[float] = None  # Arc only
    angle_deg: Optional[float] = None  # Arc only, signed

    @field_validator('kind', mode='before')
    @classmethod
    def coerce_kind(cls, v):
        if isinstance(v, str):
            return SegmentKind(v.lower())
        return v

    def to_segment(self):
        from ..calculator.paths import Straight, Arc
        if self.kind == SegmentKind.STRAIGHT:
            if self.length_mm is None:
                raise ValueError("Straight segment requires length_mm")
            return Straight(self.length_mm)
        if self.bend_radius_mm is None or self.angle_deg is None:
            raise ValueError("Arc segment requires bend_radius_mm and angle_deg")
        return Arc(self.bend_radius_mm, self.angle_deg)


def path_from_specs(segments: List[PathSegmentSpec]):
    """Build a PlanarPath from segment specs."""
    from ..calculator.paths import PlanarPath
    return PlanarPath([s.to_segment() for s in segments])


class PlacementSpec(BaseModel):
    """Where a part or sub-tube sits: translate, then rotate (degrees, X/Y/Z)."""
    model_config = ConfigDict(extra='ignore')

    position_mm: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation_deg: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def is_identity(self) -> bool:
        return self.position_mm == (0.0, 0.0, 0.0) and self.rotation_deg == (0.0, 0.0, 0.0)


class TubeSpec(BaseModel):
    """Free-form swept tube (leadpipe, branches, connecting tubing)."""
    model_config = ConfigDict(extra='ignore')

    name: str
    path: List[PathSegmentSpec]
    bore: BoreSpec
    wall_mm: Optional[float] = None  # Falls back to manufacturing.default_wall_mm
    slices: Optional[int] = None
    placement: PlacementSpec = Field(default_factory=PlacementSpec)

    def path_obj(self):
        return path_from_specs(self.path)


class BellSpec(BaseModel):
    """Bell flare. Rim at z=0, throat at z=length_mm."""
    model_config = ConfigDict(extra='ignore')

    name: str = "bell"
    length_mm: float
    rim_diameter_mm: float
    throat_diameter_mm: float
    flare: float
    wall_mm: Optional[float] = None
    slices: Optional[int] = None
    rim_bead_diameter_mm: Optional[float] = None
    placement: PlacementSpec = Field(default_factory=PlacementSpec)

    def bore(self) -> BoreSpec:
        return BoreSpec(
            law=BoreLaw.BELL,
            start_diameter_mm=self.rim_diameter_mm,
            end_diameter_mm=self.throat_diameter_mm,
            flare=self.flare,
        )


class ReceiverSpec(BaseModel):
    """Mouthpiece receiver: tapered bore from the shank entry."""
    model_config = ConfigDict(extra='ignore')

    name: str = "receiver"
    length_mm: float
    entry_diameter_mm: float
    exit_diameter_mm: Optional[float] = None  # Default: standard shank taper
    wall_mm: Optional[float] = None
    slices: Optional[int] = None
    placement: PlacementSpec = Field(default_factory=PlacementSpec)

    def resolved_exit_diameter_mm(self) -> float:
        if self.exit_diameter_mm is not None:
            return self.exit_diameter_mm
        return self.entry_diameter_mm - self.length_mm * RECEIVER_TAPER_PER_LENGTH

    def bore(self) -> BoreSpec:
        return BoreSpec(
            law=BoreLaw.LINEAR,
            start_diameter_mm=self.entry_diameter_mm,
            end_diameter_mm=self.resolved_exit_diameter_mm(),
        )


class SlideSpec(BaseModel):
    """U-shaped tuning slide crook: leg, 180 degree bend, leg."""
    model_config = ConfigDict(extra='ignore')

    name: str
    leg_length_mm: float
    bend_radius_mm: float
    bore_diameter_mm: float
    wall_mm: Optional[float] = None
    slices: Optional[int] = None
    placement: PlacementSpec = Field(default_factory=PlacementSpec)


class PortSpec(BaseModel):
    """Radial port on a valve casing."""
    model_config = ConfigDict(extra='ignore')

    height_mm: float  # Along the casing axis from its bottom
    angle_deg: float = 0.0  # Around the casing axis
    bore_diameter_mm: float
    length_mm: float = 10.0  # Stub length beyond the casing outside


class PassageSpec(BaseModel):
    """Swept bore through a piston (piston coordinates, axis +Z from bottom)."""
    model_config = ConfigDict(extra='ignore')

    path: List[PathSegmentSpec]
    bore_diameter_mm: float
    placement: PlacementSpec = Field(default_factory=PlacementSpec)

    def path_obj(self):
        return path_from_specs(self.path)


class PistonSpec(BaseModel):
    """Piston running in a valve casing."""
    model_config = ConfigDict(extra='ignore')

    clearance_mm: float = DEFAULT_PISTON_CLEARANCE_MM  # Radial, per side
    length_mm: Optional[float] = None  # Default: casing length
    passages: List[PassageSpec] = Field(default_factory=list)


class ValveSpec(BaseModel):
    """Piston valve casing with ports, optionally with its piston."""
    model_config = ConfigDict(extra='ignore')

    name: str
    casing_bore_mm: float
    casing_length_mm: float
    wall_mm: Optional[float] = None
    ports: List[PortSpec] = Field(default_factory=list)
    piston: Optional[PistonSpec] = None
    slices: Optional[int] = None
    placement: PlacementSpec = Field(default_factory=PlacementSpec)

    @property
    def piston_name(self) -> str:
        return f"{self.name}_piston"


class ManufacturingParams(BaseModel):
    """Manufacturing/generation parameters."""
    model_config = ConfigDict(extra='ignore')

    min_wall_mm: float = MIN_WALL_MM
    default_wall_mm: float = DEFAULT_WALL_MM
    slices: int = DEFAULT_SLICES
    bell_slices: int = DEFAULT_BELL_SLICES
    ruled: bool = True
    compensate_slope: bool = True
    bore_overcut_mm: float = BORE_OVERCUT_MM


class InstrumentDesign(BaseModel):
    """Complete set of parts for one instrument."""
    model_config = ConfigDict(extra='ignore')

    name: str = "flugelhorn"
    bell: Optional[BellSpec] = None
    receiver: Optional[ReceiverSpec] = None
    slides: List[SlideSpec] = Field(default_factory=list)
    valves: List[ValveSpec] = Field(default_factory=list)
    tubes: List[TubeSpec] = Field(default_factory=list)
    manufacturing: ManufacturingParams = Field(default_factory=ManufacturingParams)

    def part_names(self) -> List[str]:
        """Names of every generatable part, in build order."""
        names = []
        if self.receiver is not None:
            names.append(self.receiver.name)
        names.extend(t.name for t in self.tubes)
        for valve in self.valves:
            names.append(valve.name)
            if valve.piston is not None:
                names.append(valve.piston_name)
        names.extend(s.name for s in self.slides)
        if self.bell is not None:
            names.append(self.bell.name)
        return names

    def wall_for(self, spec) -> float:
        """Nominal wall for a part spec, falling back to the design default."""
        wall = getattr(spec, 'wall_mm', None)
        return wall if wall is not None else self.manufacturing.default_wall_mm

    def slices_for(self, spec) -> int:
        """Slice count for a part spec, falling back to the design default."""
        slices = getattr(spec, 'slices', None)
        if slices is not None:
            return slices
        if isinstance(spec, BellSpec):
            return self.manufacturing.bell_slices
        return self.manufacturing.slices

    def override_slices(self, slices: int) -> None:
        """Use one slice count for every swept part, including parts that set their own."""
        self.manufacturing.slices = slices
        self.manufacturing.bell_slices = slices
        specs = [self.receiver, self.bell, *self.tubes, *self.slides, *self.valves]
        for spec in specs:
            if spec is not None and spec.slices is not None:
                spec.slices = slices


def load_design_json(filepath: Union[str, Path]) -> InstrumentDesign:
    """
    Load an instrument design from JSON.

    Args:
        filepath: Path to JSON design file

    Returns:
        InstrumentDesign with all parts

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file has no part sections
        ValidationError: If fields are missing or of the wrong type
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise FileNotFoundError(f"Design file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    # Some exports wrap the design
    if 'design' in data:
        data = data['design']

    part_sections = ('bell', 'receiver', 'slides', 'valves', 'tubes')
    if not any(data.get(section) for section in part_sections):
        raise ValueError(
            "Invalid design JSON - must contain at least one of "
            "'bell', 'receiver', 'slides', 'valves' or 'tubes'"
        )

    return InstrumentDesign.model_validate(data)


def save_design_json(design: InstrumentDesign, filepath: Union[str, Path]) -> None:
    """
    Save an instrument design to JSON with the current schema version.

    Args:
        design: Instrument design
        filepath: Path to save JSON file
    """
    from .schema import SCHEMA_VERSION

    filepath = Path(filepath)

    # mode='json' turns enums into their values and tuples into lists
    data = design.model_dump(mode='json', exclude_none=True)
    data['schema_version'] = SCHEMA_VERSION

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)
