"""Tests for post-build wall thickness measurement."""

import pytest
from build123d import Cylinder, Align

from flugelhorn.calculator.paths import PlanarPath, Straight, Arc
from flugelhorn.calculator.taper import ConstantBore, LinearTaper
from flugelhorn.core.tube import SweptTubeGeometry, placement_location
from flugelhorn.core.bell import BellGeometry
from flugelhorn.core.receiver import ReceiverGeometry
from flugelhorn.core.valve import ValveCasingGeometry, PistonGeometry, Port
from flugelhorn.core.wall_thickness import (
    measure_wall_thickness,
    measure_geometry_walls,
    wall_thickness_to_dict,
    WallThicknessResult,
)

pytestmark = pytest.mark.slow


def _pipe(outer, inner, height):
    align = (Align.CENTER, Align.CENTER, Align.MIN)
    return Cylinder(outer, height, align=align) - Cylinder(inner, height, align=align)


class TestAxisMode:

    def test_plain_pipe(self):
        result = measure_wall_thickness(_pipe(7.0, 5.5, 30.0))
        assert result.is_valid
        assert result.minimum_radial_mm == pytest.approx(1.5, abs=0.01)
        assert result.minimum_normal_mm == pytest.approx(1.5, abs=0.01)
        assert not result.has_warning
        assert result.samples_measured > 9 * 30

    def test_thin_pipe_warns(self):
        result = measure_wall_thickness(_pipe(6.0, 5.5, 30.0))
        assert result.has_warning
        assert "Warning" in result.message

    def test_custom_threshold(self):
        result = measure_wall_thickness(_pipe(7.0, 5.5, 30.0), warning_threshold_mm=2.0)
        assert result.has_warning
        assert result.warning_threshold_mm == 2.0

    def test_measurement_points(self):
        result = measure_wall_thickness(_pipe(7.0, 5.5, 30.0))
        x, y, _ = result.measurement_point_inner
        assert (x * x + y * y) ** 0.5 == pytest.approx(5.5, abs=0.01)
        x, y, _ = result.measurement_point_outer
        assert (x * x + y * y) ** 0.5 == pytest.approx(7.0, abs=0.01)

    def test_solid_rod_fails(self):
        rod = Cylinder(5.0, 20.0, align=(Align.CENTER, Align.CENTER, Align.MIN))
        result = measure_wall_thickness(rod)
        assert not result.is_valid
        assert result.samples_measured == 0


class TestCentrelineMode:

    def test_bent_tube(self):
        tube = SweptTubeGeometry(
            PlanarPath([Straight(10.0), Arc(20.0, 90.0), Straight(10.0)]),
            ConstantBore(4.0), 1.2, slices=40,
        )
        result = measure_wall_thickness(tube.build(), tube.samples)
        assert result.is_valid
        assert result.minimum_normal_mm == pytest.approx(1.2, abs=0.02)

    def test_taper_measured_normal(self):
        tube = SweptTubeGeometry(
            PlanarPath([Straight(20.0)]), LinearTaper(8.0, 3.0), 1.0, slices=8,
        )
        result = measure_wall_thickness(tube.build(), tube.samples)
        # Radial wall is scaled up by sqrt(1 + 0.25^2), normal wall is nominal
        assert result.minimum_radial_mm == pytest.approx(1.0 * (1 + 0.25 ** 2) ** 0.5, abs=0.02)
        assert result.minimum_normal_mm == pytest.approx(1.0, abs=0.02)

    def test_uncompensated_taper_is_thin(self):
        tube = SweptTubeGeometry(
            PlanarPath([Straight(20.0)]), LinearTaper(8.0, 3.0), 1.0, slices=8,
            compensate_slope=False,
        )
        result = measure_wall_thickness(tube.build(), tube.samples)
        assert result.minimum_normal_mm < 0.98

    def test_located_tube(self):
        loc = placement_location((30.0, 0.0, 10.0), (0.0, 90.0, 0.0))
        tube = SweptTubeGeometry(
            PlanarPath([Straight(20.0)]), ConstantBore(4.0), 1.2, slices=4, location=loc,
        )
        result = measure_wall_thickness(tube.build(), tube.samples, tube.location)
        assert result.minimum_normal_mm == pytest.approx(1.2, abs=0.02)
        # Reported points are in placed coordinates
        assert result.measurement_point_inner[0] > 29.0


class TestGeometryWalls:

    def test_bell(self):
        bell = BellGeometry(120.0, 80.0, 12.0, 0.3, wall_thickness_mm=1.2, slices=60)
        result = measure_geometry_walls(bell)
        assert result.is_valid
        assert result.minimum_normal_mm == pytest.approx(1.2, abs=0.05)

    def test_valve_casing(self):
        casing = ValveCasingGeometry(16.0, 40.0, wall_thickness_mm=1.2)
        result = measure_geometry_walls(casing)
        assert result.minimum_normal_mm == pytest.approx(1.2, abs=0.02)

    def test_valve_with_ports(self):
        casing = ValveCasingGeometry(
            16.0, 40.0, ports=[Port(20.0, 8.0, 0.0), Port(20.0, 8.0, 180.0)],
            wall_thickness_mm=1.2, location=placement_location((24.0, 0.0, 0.0)),
        )
        result = measure_geometry_walls(casing)
        assert result.is_valid
        assert result.minimum_normal_mm == pytest.approx(1.2, abs=0.02)

    def test_valve_measured_on_fused_casing(self, monkeypatch):
        casing = ValveCasingGeometry(
            16.0, 40.0, ports=[Port(20.0, 8.0, 90.0)], wall_thickness_mm=1.2,
        )
        casing.build()

        def _no_rebuild(self):
            raise AssertionError(f"{self.name} rebuilt on its own")

        monkeypatch.setattr(SweptTubeGeometry, "build", _no_rebuild)
        result = measure_geometry_walls(casing)
        assert result.is_valid
        assert result.minimum_normal_mm == pytest.approx(1.2, abs=0.02)

    def test_single_slice_receiver(self):
        result = measure_geometry_walls(ReceiverGeometry(30.0, 11.0, wall_thickness_mm=1.5, slices=1))
        assert result.samples_measured > 0
        assert result.minimum_normal_mm == pytest.approx(1.5, abs=0.02)

    def test_piston_has_no_wall(self):
        assert measure_geometry_walls(PistonGeometry(16.0, 40.0)) is None


class TestWallThicknessToDict:

    def test_valid_result(self):
        result = WallThicknessResult(
            minimum_radial_mm=1.23456,
            minimum_normal_mm=1.2,
            measurement_point_inner=(5.5, 0.0, 10.0),
            samples_measured=36,
            message="Wall thickness: 1.20mm",
        )
        d = wall_thickness_to_dict(result)
        assert d["minimum_radial_mm"] == 1.2346
        assert d["measurement_point_inner"] == {"x_mm": 5.5, "y_mm": 0.0, "z_mm": 10.0}
        assert "measurement_point_outer" not in d
        assert d["is_valid"] is True
