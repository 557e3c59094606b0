"""Shared pytest fixtures for geotiler tests."""

import tempfile
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import pytest

from geotiler.logging_config import setup_logging
from geotiler.projection import BoundingBox
from geotiler.rendering.surface import DrawingSurface, TextMetrics


class RecordingSurface(DrawingSurface):
    """Drawing surface that records every call as ``(name, args)``."""

    def __init__(self, text_width_per_char=6.0, ascent=9.0, descent=3.0):
        self.calls = []
        self.text_width_per_char = text_width_per_char
        self.ascent = ascent
        self.descent = descent

    def _record(self, name, *args):
        self.calls.append((name, args))

    def names(self):
        return [name for name, _ in self.calls]

    def calls_named(self, name):
        return [args for call, args in self.calls if call == name]

    def clear_rect(self, x, y, width, height):
        self._record("clear_rect", x, y, width, height)

    def save(self):
        self._record("save")

    def restore(self):
        self._record("restore")

    def translate(self, dx, dy):
        self._record("translate", dx, dy)

    def rotate(self, angle):
        self._record("rotate", angle)

    def begin_path(self):
        self._record("begin_path")

    def move_to(self, x, y):
        self._record("move_to", x, y)

    def line_to(self, x, y):
        self._record("line_to", x, y)

    def bezier_curve_to(self, cp1x, cp1y, cp2x, cp2y, x, y):
        self._record("bezier_curve_to", cp1x, cp1y, cp2x, cp2y, x, y)

    def close_path(self):
        self._record("close_path")

    def ellipse(self, cx, cy, rx, ry):
        self._record("ellipse", cx, cy, rx, ry)

    def fill(self, color):
        self._record("fill", color)

    def stroke(self, color, line_width):
        self._record("stroke", color, line_width)

    def stroke_rect(self, x, y, width, height, color, line_width, dash=None):
        self._record("stroke_rect", x, y, width, height, color, line_width, dash)

    def measure_text(self, text, font_size):
        return TextMetrics(len(text) * self.text_width_per_char, self.ascent, self.descent)

    def fill_text(self, text, x, y, color, font_size):
        self._record("fill_text", text, x, y, color, font_size)

    def set_filter(self, blur):
        self._record("set_filter", blur)


def point_feature(lon, lat, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "properties": properties,
    }


def polygon_feature(rings, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": rings},
        "properties": properties,
    }


def grid_points(values, lons=None, lats=None, property_name="value"):
    """Build a point FeatureCollection from a matrix of rows (ascending latitude)."""
    lons = lons if lons is not None else list(range(len(values[0])))
    lats = lats if lats is not None else list(range(len(values)))
    features = []
    for row, lat in zip(values, lats):
        for value, lon in zip(row, lons):
            features.append(point_feature(lon, lat, **{property_name: value}))
    return {"type": "FeatureCollection", "features": features}


@pytest.fixture(autouse=True)
def reset_logging():
    """Rebind geotiler logging to the current stdout after every test."""
    yield
    setup_logging()


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def surface():
    """Provide a fresh recording surface."""
    return RecordingSurface()


@pytest.fixture
def unit_bbox():
    """Provide a 10x10 degree bounding box starting at the origin."""
    return BoundingBox(0.0, 0.0, 10.0, 10.0)


@pytest.fixture
def square_subpath():
    """Provide a closed 100px square in screen coordinates."""
    return [(0, 0), (100, 0), (100, 100), (0, 100), (0, 0)]


@pytest.fixture
def square_collection():
    """Provide a FeatureCollection with one square polygon covering most of a 10x10 box."""
    ring = [[1, 1], [9, 1], [9, 9], [1, 9], [1, 1]]
    return {
        "type": "FeatureCollection",
        "features": [polygon_feature([ring], name="square", stroke="#ff0000", fill="#00ff00")],
    }


@pytest.fixture
def cone_grid():
    """Provide a 5x5 point grid peaking at its centre."""
    values = [
        [0, 0, 0, 0, 0],
        [0, 1, 1, 1, 0],
        [0, 1, 2, 1, 0],
        [0, 1, 1, 1, 0],
        [0, 0, 0, 0, 0],
    ]
    return grid_points(values, lons=[10, 11, 12, 13, 14], lats=[50, 51, 52, 53, 54])


@pytest.fixture
def make_grid():
    """Provide the grid_points factory."""
    return grid_points


@pytest.fixture
def make_point():
    """Provide the point_feature factory."""
    return point_feature


@pytest.fixture
def make_polygon():
    """Provide the polygon_feature factory."""
    return polygon_feature
