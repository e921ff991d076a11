"""
Tests for the instrument part generators and the design-to-geometry factory.

These tests require geometry building (slow).
"""

from math import pi

import pytest

from flugelhorn.calculator.paths import PlanarPath, Straight
from flugelhorn.core.bell import BellGeometry
from flugelhorn.core.receiver import ReceiverGeometry
from flugelhorn.core.slide import TuningSlideGeometry, u_bend_path
from flugelhorn.core.tube import SweptTubeGeometry, placement_location
from flugelhorn.core.valve import (
    ValveCasingGeometry,
    PistonGeometry,
    Port,
    Passage,
    port_location,
)
from flugelhorn.core.instrument import geometry_for_part, build_instrument_part, part_kinds
from flugelhorn.enums import PartKind

pytestmark = pytest.mark.slow


class TestBell:

    @pytest.fixture(scope="class")
    def bell(self):
        return BellGeometry(120.0, 80.0, 12.0, 0.3, wall_thickness_mm=1.2, slices=60)

    def test_builds_valid(self, bell):
        part = bell.build()
        assert part.is_valid
        assert part.volume > 0

    def test_rim_at_origin_throat_up(self, bell):
        bbox = bell.build().bounding_box()
        assert bbox.min.Z == pytest.approx(0.0, abs=0.01)
        assert bbox.max.Z == pytest.approx(120.0, abs=0.01)
        # Rim outside: bore radius plus the slope-compensated wall
        assert bbox.max.X == pytest.approx(bell.tube.start_radii[1], abs=0.05)

    def test_bore_open(self, bell):
        part = bell.build()
        assert not part.is_inside((0, 0, 1.0))
        assert not part.is_inside((0, 0, 119.0))

    def test_curve_fit(self, bell):
        assert bell.curve.radius(0.0) == pytest.approx(40.0)
        assert bell.curve.radius(1.0) == pytest.approx(6.0)

    def test_rim_bead(self):
        plain = BellGeometry(60.0, 50.0, 12.0, 0.3, slices=30).build()
        beaded = BellGeometry(60.0, 50.0, 12.0, 0.3, slices=30, rim_bead_diameter_mm=3.0).build()
        assert beaded.volume > plain.volume
        assert beaded.bounding_box().max.X == pytest.approx(25.0 + 3.0, abs=0.05)

    def test_rim_narrower_than_throat_rejected(self):
        with pytest.raises(ValueError, match="wider"):
            BellGeometry(120.0, 10.0, 12.0, 0.3)

    def test_bad_bead_rejected(self):
        with pytest.raises(ValueError):
            BellGeometry(120.0, 80.0, 12.0, 0.3, rim_bead_diameter_mm=0.0)


class TestReceiver:

    def test_default_exit_taper(self):
        receiver = ReceiverGeometry(30.0, 11.0, slices=1)
        inner_start, _ = receiver.start_radii
        inner_end, _ = receiver.end_radii
        assert inner_start == pytest.approx(5.5)
        assert inner_end == pytest.approx(4.75)

    def test_builds(self):
        part = ReceiverGeometry(30.0, 11.0, wall_thickness_mm=1.5, slices=1).build()
        assert part.is_valid
        assert part.bounding_box().max.Z == pytest.approx(30.0, abs=0.01)


class TestTuningSlide:

    def test_path(self):
        path = u_bend_path(20.0, 15.0)
        end = path.end_point()
        assert end[0] == pytest.approx(30.0)
        assert end[2] == pytest.approx(0.0, abs=1e-9)
        assert path.total_turn_deg() == pytest.approx(180.0)

    def test_builds_with_legs_on_base(self):
        slide = TuningSlideGeometry(20.0, 15.0, 10.5, wall_thickness_mm=1.0, slices=60)
        bbox = slide.build().bounding_box()
        assert slide.leg_spacing_mm == 30.0
        assert bbox.min.Z == pytest.approx(0.0, abs=0.01)
        assert bbox.min.X == pytest.approx(-6.25, abs=0.05)
        assert bbox.max.X == pytest.approx(36.25, abs=0.05)
        assert bbox.max.Z == pytest.approx(20.0 + 15.0 + 6.25, abs=0.3)

    def test_bend_too_tight(self):
        with pytest.raises(ValueError, match="Bend radius"):
            TuningSlideGeometry(20.0, 6.0, 10.5, wall_thickness_mm=1.0)


class TestValveCasing:

    @pytest.fixture(scope="class")
    def casing(self):
        return ValveCasingGeometry(
            16.0, 40.0,
            ports=[Port(20.0, 8.0, 0.0), Port(20.0, 8.0, 180.0)],
            wall_thickness_mm=1.2,
        )

    def test_single_solid(self, casing):
        part = casing.build()
        assert part.is_valid
        assert len(part.solids()) == 1

    def test_ports_open_into_casing(self, casing):
        part = casing.build()
        # Through the casing wall along each port
        assert not part.is_inside((8.6, 0.0, 20.0))
        assert not part.is_inside((-8.6, 0.0, 20.0))
        # Casing wall away from the ports
        assert part.is_inside((0.0, 8.6, 20.0))

    def test_port_extends_beyond_casing(self, casing):
        bbox = casing.build().bounding_box()
        assert bbox.max.X == pytest.approx(8.0 + 1.2 + 10.0, abs=0.01)
        assert bbox.min.X == pytest.approx(-(8.0 + 1.2 + 10.0), abs=0.01)

    def test_port_location(self):
        loc = port_location(Port(20.0, 8.0, 90.0))
        pos = loc.position
        assert (pos.X, pos.Y, pos.Z) == pytest.approx((0.0, 0.0, 20.0))

    def test_port_too_wide(self):
        with pytest.raises(ValueError, match="port 0"):
            ValveCasingGeometry(16.0, 40.0, ports=[Port(20.0, 16.0)])

    def test_located(self):
        casing = ValveCasingGeometry(16.0, 40.0, location=placement_location((24.0, 0.0, 0.0)))
        assert casing.build().bounding_box().center().X == pytest.approx(24.0, abs=0.01)


class TestPiston:

    def test_plain_piston(self):
        piston = PistonGeometry(16.0, 40.0, clearance_mm=0.15)
        assert piston.radius_mm == pytest.approx(7.85)
        assert piston.build().volume == pytest.approx(pi * 7.85 ** 2 * 40.0, rel=1e-4)

    def test_passage_cut(self):
        passage = Passage(
            PlanarPath([Straight(15.7)]), 8.0,
            placement_location((-7.85, 0.0, 20.0), (0.0, 90.0, 0.0)),
        )
        piston = PistonGeometry(16.0, 40.0, clearance_mm=0.15, passages=[passage])
        part = piston.build()
        full = pi * 7.85 ** 2 * 40.0
        assert part.volume < full - pi * 16.0 * 12.0
        assert not part.is_inside((0.0, 0.0, 20.0))
        assert part.is_inside((0.0, 0.0, 5.0))

    @pytest.mark.parametrize("clearance", [-0.1, 8.0])
    def test_bad_clearance(self, clearance):
        with pytest.raises(ValueError):
            PistonGeometry(16.0, 40.0, clearance_mm=clearance)

    def test_bad_length(self):
        with pytest.raises(ValueError):
            PistonGeometry(16.0, 0.0)


class TestGeometryForPart:

    def test_part_kinds(self, design):
        assert part_kinds(design) == {
            "receiver": PartKind.RECEIVER,
            "leadpipe": PartKind.TUBE,
            "valve1": PartKind.VALVE,
            "valve1_piston": PartKind.PISTON,
            "main_slide": PartKind.SLIDE,
            "bell": PartKind.BELL,
        }

    def test_generator_types(self, design):
        assert isinstance(geometry_for_part(design, "receiver"), ReceiverGeometry)
        assert isinstance(geometry_for_part(design, "leadpipe"), SweptTubeGeometry)
        assert isinstance(geometry_for_part(design, "valve1"), ValveCasingGeometry)
        assert isinstance(geometry_for_part(design, "valve1_piston"), PistonGeometry)
        assert isinstance(geometry_for_part(design, "main_slide"), TuningSlideGeometry)
        assert isinstance(geometry_for_part(design, "bell"), BellGeometry)

    def test_spec_values_passed(self, design):
        bell = geometry_for_part(design, "bell")
        assert bell.tube.slices == 120
        assert bell.tube.wall_thickness_mm == 1.2
        slide = geometry_for_part(design, "main_slide")
        assert slide.wall_thickness_mm == 1.0
        piston = geometry_for_part(design, "valve1_piston")
        assert piston.length_mm == 40.0
        assert len(piston.passages) == 1

    def test_slices_override(self, design):
        assert geometry_for_part(design, "leadpipe", slices=8).slices == 8

    def test_placement_applied(self, design):
        design.slides[0].placement.position_mm = (50.0, 0.0, 0.0)
        slide = geometry_for_part(design, "main_slide")
        assert slide.location is not None
        assert geometry_for_part(design, "leadpipe").location is None

    def test_unknown_part(self, design):
        with pytest.raises(KeyError):
            geometry_for_part(design, "tuba")

    def test_build_instrument_part(self, design):
        part = build_instrument_part(design, "receiver", slices=2)
        assert part.is_valid
        assert part.volume > 0
