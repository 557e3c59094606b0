"""Tests for the geotiler.rendering.path module."""

import pytest

from geotiler.exceptions import IndexOutOfRangeError, InvalidGeometryError
from geotiler.rendering.labels import LabelPlacement, LabelPosition
from geotiler.rendering.path import (
    CatmullRomClosedCurve,
    CatmullRomCurve,
    Path,
    WindingOrder,
    bounding_box,
    winding_order,
)


class TestPathConstruction:
    """Tests for building Path objects."""

    def test_rejects_short_subpath(self):
        with pytest.raises(InvalidGeometryError):
            Path([[(0, 0), (1, 1)]])

    def test_rejects_short_hole(self, square_subpath):
        """A single bad subpath should invalidate the whole path."""
        with pytest.raises(InvalidGeometryError):
            Path([square_subpath, [(1, 1), (2, 2)]])

    def test_accepts_numpy_rows(self):
        import numpy as np
        path = Path([np.array([[0, 0], [10, 0], [10, 10]])])
        assert path.subpaths[0][1] == (10.0, 0.0)

    def test_len_counts_subpaths(self, square_subpath):
        assert len(Path([square_subpath, square_subpath])) == 2


class TestCoordinateAt:
    """Tests for Path.coordinate_at."""

    def test_index_wraps(self):
        path = Path([[(0, 0), (1, 0), (1, 1)]])
        assert path.coordinate_at(0, 3) == (0.0, 0.0)
        assert path.coordinate_at(0, 4) == (1.0, 0.0)
        assert path.coordinate_at(0, -1) == (1.0, 1.0)

    def test_subpath_out_of_range(self, square_subpath):
        path = Path([square_subpath])
        with pytest.raises(IndexOutOfRangeError):
            path.coordinate_at(1, 0)
        with pytest.raises(IndexOutOfRangeError):
            path.coordinate_at(-1, 0)

    def test_out_of_range_is_an_index_error(self, square_subpath):
        with pytest.raises(IndexError):
            Path([square_subpath]).coordinate_at(5, 0)


class TestGeometry:
    """Tests for bounding boxes and winding order."""

    def test_bounding_box(self):
        assert bounding_box([(3, 4), (-1, 10), (7, 2)]) == (-1, 2, 7, 10)

    def test_square_is_clockwise_on_screen(self, square_subpath):
        """Right, down, left, up is clockwise with y pointing down."""
        assert winding_order(square_subpath) is WindingOrder.CW

    def test_reversed_square_is_counter_clockwise(self, square_subpath):
        assert winding_order(list(reversed(square_subpath))) is WindingOrder.CCW

    def test_path_helpers(self, square_subpath):
        path = Path([square_subpath])
        assert path.bounding_box(0) == (0.0, 0.0, 100.0, 100.0)
        assert path.winding_order(0) is WindingOrder.CW
        assert path.closed

    def test_open_path(self):
        assert not Path([[(0, 0), (10, 0), (10, 10)]]).closed


class TestDrawing:
    """Tests for drawing paths onto a surface."""

    def test_draw_linear(self, surface):
        path = Path([[(0, 0), (10, 0), (10, 10)], [(20, 20), (30, 20), (30, 30)]])
        path.draw_linear(surface)

        assert surface.names() == ["move_to", "line_to", "line_to"] * 2
        assert surface.calls_named("move_to") == [(0.0, 0.0), (20.0, 20.0)]

    def test_open_catmull_rom_emits_beziers(self, surface):
        path = Path([[(0, 0), (10, 5), (20, 0), (30, 5)]])
        path.draw_catmull_rom(surface)

        names = surface.names()
        assert names[0] == "move_to"
        assert "bezier_curve_to" in names
        assert "line_to" not in names

    def test_open_catmull_rom_passes_through_points(self, surface):
        points = [(0, 0), (10, 5), (20, 0), (30, 5)]
        Path([points]).draw_catmull_rom(surface)

        assert surface.calls_named("move_to")[0] == (0.0, 0.0)
        endpoints = [args[4:] for args in surface.calls_named("bezier_curve_to")]
        assert endpoints == [(10.0, 5.0), (20.0, 0.0), (30.0, 5.0)]

    def test_three_point_open_curve(self, surface):
        Path([[(0, 0), (10, 10), (20, 0)]]).draw_catmull_rom(surface)
        endpoints = [args[4:] for args in surface.calls_named("bezier_curve_to")]
        assert endpoints == [(10.0, 10.0), (20.0, 0.0)]

    def test_closed_catmull_rom_visits_every_vertex(self, surface, square_subpath):
        Path([square_subpath]).draw_catmull_rom(surface)

        endpoints = {args[4:] for args in surface.calls_named("bezier_curve_to")}
        assert endpoints == {(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)}
        assert surface.calls_named("move_to") == [(100.0, 0.0)]

    def test_collinear_control_points_stay_on_line(self, surface):
        """Control points of a straight run should stay on that line."""
        Path([[(0, 0), (10, 0), (20, 0), (30, 0)]]).draw_catmull_rom(surface)
        for args in surface.calls_named("bezier_curve_to"):
            assert args[1] == pytest.approx(0.0)
            assert args[3] == pytest.approx(0.0)

    def test_curve_classes_reset_between_lines(self, surface):
        curve = CatmullRomCurve(surface)
        for _ in range(2):
            curve.line_start()
            for point in [(0, 0), (5, 5), (10, 0)]:
                curve.point(*point)
            curve.line_end()
        assert len(surface.calls_named("move_to")) == 2

    def test_closed_curve_with_two_points(self, surface):
        curve = CatmullRomClosedCurve(surface)
        curve.line_start()
        curve.point(0, 0)
        curve.point(10, 10)
        curve.line_end()
        assert surface.names() == ["move_to", "line_to", "close_path"]


class TestPlaceLabels:
    """Tests for Path.place_labels."""

    def test_outline_labels_per_subpath(self, square_subpath):
        placements = Path([square_subpath]).place_labels(LabelPosition.OUTLINE, 2)
        assert len(placements) == 2
        assert all(isinstance(p, LabelPlacement) for p in placements)

    def test_one_placement_per_subpath(self, square_subpath):
        hole = [(40, 40), (60, 40), (60, 60), (40, 60), (40, 40)]
        placements = Path([square_subpath, hole]).place_labels(LabelPosition.CENTER)
        assert [(p.x, p.y) for p in placements] == [(50.0, 50.0), (50.0, 50.0)]
