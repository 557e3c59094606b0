"""Tests for the geotiler.rendering.labels module."""

import math

import pytest

from geotiler.rendering.labels import (
    LabelAccessory,
    LabelPlacement,
    LabelPlacer,
    LabelPosition,
)


def _regular_polygon(n, radius=100.0, cx=200.0, cy=200.0):
    points = [
        (cx + radius * math.cos(2 * math.pi * i / n), cy + radius * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]
    return points + [points[0]]


class TestCenterPlacement:
    """Tests for the center strategy."""

    def test_center_of_bounding_box(self):
        placer = LabelPlacer([(10, 20), (110, 20), (60, 220)], LabelPosition.CENTER)
        assert placer.place() == [LabelPlacement(x=60.0, y=120.0, rotation=0.0)]

    def test_center_ignores_count(self, square_subpath):
        placements = LabelPlacer(square_subpath, LabelPosition.CENTER).place(5)
        assert len(placements) == 1

    def test_accepts_string_position(self, square_subpath):
        assert LabelPlacer(square_subpath, "center").position is LabelPosition.CENTER


class TestOutlinePlacement:
    """Tests for the outline strategy."""

    def test_square_picks_last_longest_segment(self, square_subpath):
        """Equal segments resolve to the last; its -90 degree heading flips to 90."""
        placements = LabelPlacer(square_subpath, LabelPosition.OUTLINE).place(1)

        assert len(placements) == 1
        placement = placements[0]
        assert (placement.x, placement.y) == (0.0, 50.0)
        assert placement.rotation == pytest.approx(90.0)

    def test_square_interior_is_up(self, square_subpath):
        """On the left edge reading downwards, the interior is above the text."""
        placement = LabelPlacer(square_subpath, LabelPosition.OUTLINE).place(1)[0]
        assert placement.inside_is_up is True
        assert placement.accessory is LabelAccessory.ARROW_UP

    def test_reversed_square_interior_flips(self, square_subpath):
        placement = LabelPlacer(list(reversed(square_subpath)), LabelPosition.OUTLINE).place(1)[0]
        assert placement.inside_is_up is False
        assert placement.accessory is LabelAccessory.ARROW_DOWN

    def test_small_subpath_falls_back_to_center(self):
        small = [(0, 0), (20, 0), (20, 100), (0, 100), (0, 0)]
        placements = LabelPlacer(small, LabelPosition.OUTLINE).place(2)
        assert placements == [LabelPlacement(x=10.0, y=50.0, rotation=0.0)]

    def test_second_label_uses_a_different_segment(self, square_subpath):
        placements = LabelPlacer(square_subpath, LabelPosition.OUTLINE).place(2)
        assert len(placements) == 2
        assert (placements[0].x, placements[0].y) != (placements[1].x, placements[1].y)

    def test_second_label_on_opposite_side(self):
        """Top and bottom edges are the longest; the bottom one wins the first pass."""
        hexagon = [(100, 100), (300, 100), (320, 150), (300, 200), (100, 200), (80, 150), (100, 100)]
        first, second = LabelPlacer(hexagon, LabelPosition.OUTLINE).place(2)
        assert (first.x, first.y) == (200.0, 200.0)
        assert (second.x, second.y) == (200.0, 100.0)
        assert first.rotation == pytest.approx(0.0)
        assert second.rotation == pytest.approx(0.0)

    def test_at_most_two_outline_labels(self):
        placements = LabelPlacer(_regular_polygon(12), LabelPosition.OUTLINE).place(5)
        assert len(placements) == 2

    @pytest.mark.parametrize("n", [3, 5, 8, 13])
    def test_rotation_never_upside_down(self, n):
        for subpath in (_regular_polygon(n), list(reversed(_regular_polygon(n)))):
            for placement in LabelPlacer(subpath, LabelPosition.OUTLINE).place(2):
                assert 0 <= placement.rotation < 360
                assert not (90 < placement.rotation < 270)

    def test_segments_outside_reference_frame_are_skipped(self):
        """The long edges start off-canvas, so the short right edge is used."""
        subpath = [(-500, 10), (10, 10), (10, 100), (-1, 100), (-500, 100), (-500, 10)]
        placement = LabelPlacer(subpath, LabelPosition.OUTLINE).place(1)[0]
        assert (placement.x, placement.y) == (10.0, 55.0)

    def test_no_qualifying_segment_yields_nothing(self):
        subpath = [(-500, -500), (-400, -500), (-400, -400), (-500, -500)]
        assert LabelPlacer(subpath, LabelPosition.OUTLINE).place(1) == []

    def test_deterministic(self):
        polygon = _regular_polygon(9)
        first = LabelPlacer(polygon, LabelPosition.OUTLINE).place(2)
        second = LabelPlacer(polygon, LabelPosition.OUTLINE).place(2)
        assert first == second
