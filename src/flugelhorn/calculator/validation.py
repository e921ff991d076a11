"""
Flugelhorn Geometry - Validation Rules

Engineering and manufacturing checks run on a design before any solid is
built. Nothing here raises for a bad design: every finding is reported as a
ValidationMessage so the CLI can show all problems at once.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from ..enums import BoreLaw
from .constants import (
    MIN_PRODUCTION_SLICES,
    MAX_REASONABLE_SLICES,
    MAX_TURN_PER_SLICE_DEG,
    MAX_RADIUS_STEP_PERCENT,
    STEEP_FLARE_FACTOR,
    MAX_PISTON_CLEARANCE_MM,
)
from .sampling import sample_profiles, max_turn_per_slice_deg, max_radius_step, max_slope
from .taper import compensated_wall_thickness

if TYPE_CHECKING:
    from ..io.loaders import InstrumentDesign


class Severity(Enum):
    """Validation message severity"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationMessage:
    """A single validation finding"""
    severity: Severity
    code: str
    message: str
    suggestion: Optional[str] = None
    part: Optional[str] = None


@dataclass
class ValidationResult:
    """Complete validation result"""
    valid: bool  # True if no errors
    messages: List[ValidationMessage] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    @property
    def infos(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.INFO]

    def for_part(self, name: str) -> List[ValidationMessage]:
        return [m for m in self.messages if m.part == name]


def validate_design(design: "InstrumentDesign") -> ValidationResult:
    """
    Validate every part of an instrument design.

    Args:
        design: InstrumentDesign loaded from JSON

    Returns:
        ValidationResult with all findings
    """
    messages: List[ValidationMessage] = []

    messages.extend(_validate_names(design))

    if design.receiver is not None:
        spec = design.receiver
        messages.extend(_validate_swept(
            spec.name, _straight_path(spec.length_mm), spec.bore(),
            design.wall_for(spec), design.slices_for(spec), design,
        ))

    for tube in design.tubes:
        messages.extend(_validate_swept(
            tube.name, tube.path, tube.bore,
            design.wall_for(tube), design.slices_for(tube), design,
        ))

    for slide in design.slides:
        messages.extend(_validate_slide(slide, design))

    for valve in design.valves:
        messages.extend(_validate_valve(valve, design))

    if design.bell is not None:
        spec = design.bell
        messages.extend(_validate_swept(
            spec.name, _straight_path(spec.length_mm), spec.bore(),
            design.wall_for(spec), design.slices_for(spec), design,
        ))

    has_errors = any(m.severity == Severity.ERROR for m in messages)

    return ValidationResult(
        valid=not has_errors,
        messages=messages
    )


def _straight_path(length_mm: float):
    from ..io.loaders import PathSegmentSpec
    return [PathSegmentSpec(kind="straight", length_mm=length_mm)]


def _validate_names(design: "InstrumentDesign") -> List[ValidationMessage]:
    """Part names are used as file names and must be unique."""
    messages = []
    seen = set()
    for name in design.part_names():
        if name in seen:
            messages.append(ValidationMessage(
                severity=Severity.ERROR,
                code="DUPLICATE_PART_NAME",
                message=f"Part name '{name}' is used more than once",
                suggestion="Give every slide, valve and tube a unique name",
                part=name,
            ))
        seen.add(name)
    return messages


def _validate_swept(
    name: str,
    path_specs,
    bore_spec,
    wall_mm: float,
    slices: int,
    design: "InstrumentDesign",
    production: bool = True,
    cut_only: bool = False,
    part: Optional[str] = None,
) -> List[ValidationMessage]:
    """Checks shared by every swept tube: bore, wall, bends and slice density.

    cut_only marks bores that are only subtracted (piston passages): the
    wall is not checked and bends are compared against the bore radius.
    """
    from ..io.loaders import path_from_specs

    messages = []
    min_wall = design.manufacturing.min_wall_mm
    part = part or name

    if not cut_only and wall_mm < min_wall:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="WALL_BELOW_MINIMUM",
            message=f"{name}: wall {wall_mm:.2f}mm is below the printable minimum {min_wall:.2f}mm",
            suggestion=f"Increase wall_mm to at least {min_wall:.2f}mm",
            part=part,
        ))
        if wall_mm <= 0:
            return messages

    try:
        path = path_from_specs(path_specs)
    except ValueError as e:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="PATH_INVALID",
            message=f"{name}: {e}",
            part=part,
        ))
        return messages

    try:
        bore = bore_spec.to_law()
    except ValueError as e:
        code = "BELL_CURVE_INVALID" if bore_spec.law == BoreLaw.BELL else "BORE_INVALID"
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code=code,
            message=f"{name}: {e}",
            part=part,
        ))
        return messages

    try:
        samples = sample_profiles(
            path, bore, wall_mm, max(slices, 1),
            compensate_slope=design.manufacturing.compensate_slope,
        )
    except ValueError as e:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="BORE_NON_POSITIVE",
            message=f"{name}: {e}",
            suggestion="Check bore diameters and bell coefficients",
            part=part,
        ))
        return messages

    # A bend tighter than the outside radius folds the sweep onto itself
    if cut_only:
        max_outer = max(s.inner_radius for s in samples)
    else:
        max_outer = max(s.outer_radius for s in samples)
    bend = path.min_bend_radius()
    if bend <= max_outer:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="BEND_TOO_TIGHT",
            message=f"{name}: bend radius {bend:.2f}mm is not larger than the tube outside radius {max_outer:.2f}mm",
            suggestion=f"Use a bend radius above {max_outer * 1.5:.1f}mm",
            part=part,
        ))

    turn = max_turn_per_slice_deg(samples)
    # A ruled loft follows a linear taper exactly, only the bell curve facets
    step_percent = max_radius_step(samples) * 100 if bore_spec.law == BoreLaw.BELL else 0.0
    if turn > MAX_TURN_PER_SLICE_DEG or step_percent > MAX_RADIUS_STEP_PERCENT:
        messages.append(ValidationMessage(
            severity=Severity.WARNING,
            code="SLICES_TOO_FEW",
            message=(
                f"{name}: {slices} slices give {turn:.1f}° turn and "
                f"{step_percent:.1f}% radius change per slice - the loft will facet"
            ),
            suggestion="Increase slices",
            part=part,
        ))
    elif production and slices < MIN_PRODUCTION_SLICES and (bend != float("inf") or bore_spec.law == BoreLaw.BELL):
        messages.append(ValidationMessage(
            severity=Severity.WARNING,
            code="SLICES_TOO_FEW",
            message=f"{name}: {slices} slices is below {MIN_PRODUCTION_SLICES} for a curved or tapered part",
            suggestion=f"Use at least {MIN_PRODUCTION_SLICES} slices for printing",
            part=part,
        ))

    if slices > MAX_REASONABLE_SLICES:
        messages.append(ValidationMessage(
            severity=Severity.INFO,
            code="SLICES_EXCESSIVE",
            message=f"{name}: {slices} slices will loft slowly (above {MAX_REASONABLE_SLICES})",
            part=part,
        ))

    factor = compensated_wall_thickness(1.0, max_slope(samples))
    if design.manufacturing.compensate_slope and factor > STEEP_FLARE_FACTOR:
        messages.append(ValidationMessage(
            severity=Severity.INFO,
            code="STEEP_FLARE",
            message=(
                f"{name}: steepest section needs a radial wall {factor:.1f}× the nominal "
                f"({wall_mm * factor:.2f}mm)"
            ),
            part=part,
        ))

    return messages


def _validate_slide(slide, design: "InstrumentDesign") -> List[ValidationMessage]:
    from ..io.loaders import PathSegmentSpec, BoreSpec

    path = [
        PathSegmentSpec(kind="straight", length_mm=slide.leg_length_mm),
        PathSegmentSpec(kind="arc", bend_radius_mm=slide.bend_radius_mm, angle_deg=180.0),
        PathSegmentSpec(kind="straight", length_mm=slide.leg_length_mm),
    ]
    bore = BoreSpec(law="constant", start_diameter_mm=slide.bore_diameter_mm)
    return _validate_swept(
        slide.name, path, bore, design.wall_for(slide), design.slices_for(slide), design,
    )


def _validate_valve(valve, design: "InstrumentDesign") -> List[ValidationMessage]:
    from ..io.loaders import BoreSpec

    messages = []
    wall = design.wall_for(valve)

    if wall < design.manufacturing.min_wall_mm:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="WALL_BELOW_MINIMUM",
            message=f"{valve.name}: casing wall {wall:.2f}mm is below the printable minimum",
            part=valve.name,
        ))

    if valve.casing_bore_mm <= 0:
        messages.append(ValidationMessage(
            severity=Severity.ERROR,
            code="BORE_NON_POSITIVE",
            message=f"{valve.name}: casing bore must be positive",
            part=valve.name,
        ))
        return messages

    for i, port in enumerate(valve.ports):
        port_outer_r = port.bore_diameter_mm / 2 + wall
        if port.bore_diameter_mm <= 0:
            messages.append(ValidationMessage(
                severity=Severity.ERROR,
                code="BORE_NON_POSITIVE",
                message=f"{valve.name}: port {i} bore must be positive",
                part=valve.name,
            ))
            continue
        if (port.height_mm - port_outer_r < 0
                or port.height_mm + port_outer_r > valve.casing_length_mm
                or port.bore_diameter_mm >= valve.casing_bore_mm):
            messages.append(ValidationMessage(
                severity=Severity.ERROR,
                code="PORT_OUTSIDE_CASING",
                message=(
                    f"{valve.name}: port {i} (height {port.height_mm:.1f}mm, "
                    f"outside Ø{2 * port_outer_r:.1f}mm) does not fit the casing"
                ),
                suggestion="Move the port inside the casing length or reduce its bore",
                part=valve.name,
            ))
        if port.length_mm <= 0:
            messages.append(ValidationMessage(
                severity=Severity.ERROR,
                code="PATH_INVALID",
                message=f"{valve.name}: port {i} stub length must be positive",
                part=valve.name,
            ))

    if valve.piston is not None:
        piston = valve.piston
        name = valve.piston_name
        piston_r = valve.casing_bore_mm / 2 - piston.clearance_mm
        if piston.clearance_mm < 0 or piston_r <= 0:
            messages.append(ValidationMessage(
                severity=Severity.ERROR,
                code="PISTON_CLEARANCE",
                message=f"{name}: clearance {piston.clearance_mm:.2f}mm does not leave a piston that fits the casing",
                part=name,
            ))
        elif piston.clearance_mm > MAX_PISTON_CLEARANCE_MM:
            messages.append(ValidationMessage(
                severity=Severity.WARNING,
                code="PISTON_CLEARANCE",
                message=f"{name}: clearance {piston.clearance_mm:.2f}mm will leak air",
                suggestion=f"Keep clearance at or below {MAX_PISTON_CLEARANCE_MM:.2f}mm",
                part=name,
            ))

        for i, passage in enumerate(piston.passages):
            if passage.bore_diameter_mm <= 0:
                messages.append(ValidationMessage(
                    severity=Severity.ERROR,
                    code="BORE_NON_POSITIVE",
                    message=f"{name}: passage {i} bore must be positive",
                    part=name,
                ))
                continue
            bore = BoreSpec(law="constant", start_diameter_mm=passage.bore_diameter_mm)
            messages.extend(_validate_swept(
                f"{name} passage {i}", passage.path, bore,
                design.manufacturing.min_wall_mm, design.slices_for(valve), design,
                production=False, cut_only=True, part=name,
            ))

    return messages
