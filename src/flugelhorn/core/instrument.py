"""
Map instrument design parts to geometry generators.
"""

import logging
from typing import Dict, Optional, TYPE_CHECKING

from ..enums import PartKind
from .geometry_base import BaseGeometry
from .tube import SweptTubeGeometry, placement_location
from .bell import BellGeometry
from .receiver import ReceiverGeometry
from .slide import TuningSlideGeometry
from .valve import ValveCasingGeometry, PistonGeometry, Port, Passage

if TYPE_CHECKING:
    from ..io.loaders import InstrumentDesign, PlacementSpec

logger = logging.getLogger(__name__)


def _location(placement: "PlacementSpec"):
    if placement.is_identity():
        return None
    return placement_location(placement.position_mm, placement.rotation_deg)


def part_kinds(design: "InstrumentDesign") -> Dict[str, PartKind]:
    """Part name -> kind, in build order."""
    kinds = {}
    if design.receiver is not None:
        kinds[design.receiver.name] = PartKind.RECEIVER
    for tube in design.tubes:
        kinds[tube.name] = PartKind.TUBE
    for valve in design.valves:
        kinds[valve.name] = PartKind.VALVE
        if valve.piston is not None:
            kinds[valve.piston_name] = PartKind.PISTON
    for slide in design.slides:
        kinds[slide.name] = PartKind.SLIDE
    if design.bell is not None:
        kinds[design.bell.name] = PartKind.BELL
    return kinds


def geometry_for_part(
    design: "InstrumentDesign",
    name: str,
    slices: Optional[int] = None,
) -> BaseGeometry:
    """
    Create the geometry generator for one named part of a design.

    Args:
        design: Instrument design
        name: Part name (see InstrumentDesign.part_names())
        slices: Override the design's slice count for swept parts

    Returns:
        Unbuilt geometry generator; call build() for the Part

    Raises:
        KeyError: If the design has no part with that name
    """
    mfg = design.manufacturing
    common = dict(ruled=mfg.ruled, bore_overcut_mm=mfg.bore_overcut_mm)

    def slices_for(spec):
        return slices if slices is not None else design.slices_for(spec)

    if design.receiver is not None and design.receiver.name == name:
        spec = design.receiver
        return ReceiverGeometry(
            length_mm=spec.length_mm,
            entry_diameter_mm=spec.entry_diameter_mm,
            exit_diameter_mm=spec.resolved_exit_diameter_mm(),
            wall_thickness_mm=design.wall_for(spec),
            slices=slices_for(spec),
            compensate_slope=mfg.compensate_slope,
            location=_location(spec.placement),
            name=spec.name,
            **common,
        )

    for spec in design.tubes:
        if spec.name == name:
            return SweptTubeGeometry(
                spec.path_obj(),
                spec.bore.to_law(),
                design.wall_for(spec),
                slices=slices_for(spec),
                compensate_slope=mfg.compensate_slope,
                location=_location(spec.placement),
                name=spec.name,
                **common,
            )

    for spec in design.valves:
        if spec.name == name:
            return ValveCasingGeometry(
                casing_bore_mm=spec.casing_bore_mm,
                casing_length_mm=spec.casing_length_mm,
                ports=[
                    Port(p.height_mm, p.bore_diameter_mm, p.angle_deg, p.length_mm)
                    for p in spec.ports
                ],
                wall_thickness_mm=design.wall_for(spec),
                bore_overcut_mm=mfg.bore_overcut_mm,
                location=_location(spec.placement),
                name=spec.name,
            )
        if spec.piston is not None and spec.piston_name == name:
            piston = spec.piston
            return PistonGeometry(
                casing_bore_mm=spec.casing_bore_mm,
                length_mm=piston.length_mm or spec.casing_length_mm,
                clearance_mm=piston.clearance_mm,
                passages=[
                    Passage(p.path_obj(), p.bore_diameter_mm, _location(p.placement))
                    for p in piston.passages
                ],
                slices=slices_for(spec),
                location=_location(spec.placement),
                name=spec.piston_name,
                **common,
            )

    for spec in design.slides:
        if spec.name == name:
            return TuningSlideGeometry(
                leg_length_mm=spec.leg_length_mm,
                bend_radius_mm=spec.bend_radius_mm,
                bore_diameter_mm=spec.bore_diameter_mm,
                wall_thickness_mm=design.wall_for(spec),
                slices=slices_for(spec),
                location=_location(spec.placement),
                name=spec.name,
                **common,
            )

    if design.bell is not None and design.bell.name == name:
        spec = design.bell
        return BellGeometry(
            length_mm=spec.length_mm,
            rim_diameter_mm=spec.rim_diameter_mm,
            throat_diameter_mm=spec.throat_diameter_mm,
            flare=spec.flare,
            wall_thickness_mm=design.wall_for(spec),
            slices=slices_for(spec),
            rim_bead_diameter_mm=spec.rim_bead_diameter_mm,
            compensate_slope=mfg.compensate_slope,
            location=_location(spec.placement),
            name=spec.name,
            **common,
        )

    raise KeyError(f"No part named '{name}' in design '{design.name}'")


def build_instrument_part(design: "InstrumentDesign", name: str, slices: Optional[int] = None):
    """Build one named part of a design and return the Part."""
    return geometry_for_part(design, name, slices=slices).build()
