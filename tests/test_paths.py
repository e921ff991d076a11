"""
Tests for planar sweep paths.
"""

import math
import pytest

from flugelhorn.calculator.paths import Straight, Arc, PlanarPath


def _close(p, q, tol=1e-9):
    return all(abs(a - b) < tol for a, b in zip(p, q))


class TestSegments:

    def test_straight_length(self):
        assert Straight(25.0).length == 25.0

    def test_arc_length(self):
        assert Arc(10.0, 90.0).length == pytest.approx(10.0 * math.pi / 2)
        assert Arc(10.0, -90.0).length == pytest.approx(10.0 * math.pi / 2)

    @pytest.mark.parametrize("length", [0.0, -5.0])
    def test_straight_rejects_non_positive(self, length):
        with pytest.raises(ValueError):
            Straight(length)

    def test_arc_rejects_bad_values(self):
        with pytest.raises(ValueError):
            Arc(0.0, 90.0)
        with pytest.raises(ValueError):
            Arc(10.0, 0.0)


class TestPlanarPath:

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            PlanarPath([])

    def test_straight_path(self):
        path = PlanarPath([Straight(100.0)])
        assert path.length == 100.0
        assert _close(path.point(0.0), (0, 0, 0))
        assert _close(path.point(0.5), (0, 0, 50))
        assert _close(path.tangent(0.3), (0, 0, 1))
        assert path.min_bend_radius() == float("inf")
        assert path.max_curvature() == 0.0

    def test_quarter_turn_toward_positive_x(self):
        path = PlanarPath([Arc(20.0, 90.0)])
        assert _close(path.end_point(), (20.0, 0.0, 20.0))
        assert _close(path.end_tangent(), (1.0, 0.0, 0.0))
        assert path.total_turn_deg() == pytest.approx(90.0)

    def test_negative_arc_turns_toward_negative_x(self):
        path = PlanarPath([Arc(20.0, -90.0)])
        assert _close(path.end_point(), (-20.0, 0.0, 20.0))
        assert _close(path.end_tangent(), (-1.0, 0.0, 0.0))
        assert path.total_turn_deg() == pytest.approx(-90.0)

    def test_u_bend_returns_alongside_start(self):
        path = PlanarPath([Straight(50.0), Arc(20.0, 180.0), Straight(50.0)])
        assert _close(path.end_point(), (40.0, 0.0, 0.0))
        assert _close(path.end_tangent(), (0.0, 0.0, -1.0))

    def test_s_bend_has_no_net_turn(self):
        path = PlanarPath([Arc(30.0, 45.0), Arc(30.0, -45.0)])
        assert path.total_turn_deg() == pytest.approx(0.0, abs=1e-9)
        assert _close(path.end_tangent(), (0.0, 0.0, 1.0))

    def test_path_stays_in_xz_plane(self):
        path = PlanarPath([Straight(10.0), Arc(15.0, 120.0), Arc(8.0, -60.0), Straight(5.0)])
        for i in range(51):
            assert path.point(i / 50)[1] == 0.0
            assert path.tangent(i / 50)[1] == 0.0

    def test_points_move_along_arc_length(self):
        path = PlanarPath([Straight(30.0), Arc(20.0, 90.0), Straight(30.0)])
        prev = path.point(0.0)
        n = 200
        step = path.length / n
        for i in range(1, n + 1):
            cur = path.point(i / n)
            chord = math.dist(prev, cur)
            # chord never longer than the arc length travelled
            assert chord <= step + 1e-9
            assert chord > 0.99 * step
            prev = cur

    def test_tangent_is_unit(self):
        path = PlanarPath([Arc(12.0, 200.0)])
        for i in range(11):
            t = path.tangent(i / 10)
            assert math.hypot(*t) == pytest.approx(1.0)

    def test_continuity_at_junctions(self):
        path = PlanarPath([Straight(20.0), Arc(10.0, 90.0), Straight(20.0)])
        for u in path.junctions():
            before = path.point(u - 1e-9)
            after = path.point(u + 1e-9)
            assert math.dist(before, after) < 1e-6

    def test_junctions(self):
        path = PlanarPath([Straight(25.0), Straight(25.0), Straight(50.0)])
        assert path.junctions() == pytest.approx([0.25, 0.5])

    def test_parameter_clamped(self):
        path = PlanarPath([Straight(10.0)])
        assert _close(path.point(-0.5), (0, 0, 0))
        assert _close(path.point(1.5), (0, 0, 10))

    def test_min_bend_radius_and_curvature(self):
        path = PlanarPath([Arc(30.0, 45.0), Straight(5.0), Arc(12.0, -90.0)])
        assert path.min_bend_radius() == 12.0
        assert path.max_curvature() == pytest.approx(1 / 12.0)
