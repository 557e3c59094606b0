"""
Rendering subsystem for geotiler.

This module draws GeoJSON features and their labels onto a pixel canvas. It
handles path construction, Catmull-Rom smoothing, label placement along
outlines, and paint resolution through delegates, independent of the
backend that finally rasterizes the drawing.

Main Classes:
    Tile: Projects a bounding box onto a canvas and drives the renderers
    Path: Pixel-space subpaths with label placement and curve drawing
    LabelPlacer: Chooses label anchors and rotations on one subpath
    MatplotlibSurface: Drawing surface backed by a matplotlib Agg canvas

Key Features:
    - Straight or Catmull-Rom (centripetal) path drawing
    - Outline labels on the longest segments, never upside down
    - Orientation arrows telling which side of a label is inside
    - Optional Gaussian blur of feature layers
    - Debug overlay with tile border and index

Coordinate System:
    - Canvas origin is the top-left corner, y grows downwards
    - Rotations are in degrees for placements and radians for surfaces

Example:
    >>> from geotiler.rendering import Tile, MatplotlibSurface, SimpleStyleDelegate
    >>> from geotiler.projection import BoundingBox
    >>>
    >>> tile = Tile(BoundingBox(4.0, 52.0, 5.0, 53.0), collection, 256, 256)
    >>> surface = MatplotlibSurface(*tile.canvas_size)
    >>> tile.draw_features(surface, SimpleStyleDelegate({"stroke": "black"}))
    >>> surface.write_png("tile.png")
"""

from .surface import DrawingSurface, MatplotlibSurface, TextMetrics
from .path import Path, WindingOrder, CatmullRomCurve, CatmullRomClosedCurve
from .labels import LabelPosition, LabelAccessory, LabelPlacement, LabelPlacer
from .paint import Paint
from .delegates import (
    FeatureRendererDelegate,
    LabelRendererDelegate,
    SimpleStyleDelegate,
    PropertyLabelDelegate
)
from .features import FeatureRenderer
from .label_renderer import LabelRenderer
from .tile import Tile

__all__ = [
    "DrawingSurface",
    "MatplotlibSurface",
    "TextMetrics",
    "Path",
    "WindingOrder",
    "CatmullRomCurve",
    "CatmullRomClosedCurve",
    "LabelPosition",
    "LabelAccessory",
    "LabelPlacement",
    "LabelPlacer",
    "Paint",
    "FeatureRendererDelegate",
    "LabelRendererDelegate",
    "SimpleStyleDelegate",
    "PropertyLabelDelegate",
    "FeatureRenderer",
    "LabelRenderer",
    "Tile",
]
