"""
geotiler - Render GeoJSON features onto map tiles with readable labels.

This package provides tools for projecting GeoJSON onto pixel tiles, drawing
straight or Catmull-Rom smoothed outlines, placing labels along feature
outlines so they never read upside down, and generating isoband polygons
from gridded point data.

Quick Start:
    >>> from geotiler import render_tile, BoundingBox, SimpleStyleDelegate
    >>>
    >>> # Render a tile to disk
    >>> render_tile(
    ...     collection,
    ...     BoundingBox.from_tile_index(6, 33, 21),
    ...     SimpleStyleDelegate({"stroke": "black"}),
    ...     output_path="tile.png"
    ... )

    >>> # Isobands from a point grid
    >>> from geotiler import isobands
    >>> bands = isobands(points, "temperature", [0, 5, 10, 15])

Advanced Usage:
    >>> # Direct access to components
    >>> from geotiler import Config, Tile, MatplotlibSurface, PropertyLabelDelegate
    >>>
    >>> config = Config(padding=16, projection="mercator")
    >>> tile = Tile(bbox, bands, config.width, config.height, config)
    >>> surface = MatplotlibSurface(*tile.canvas_size)
    >>> tile.draw_features(surface, SimpleStyleDelegate())
    >>> tile.draw_labels(surface, PropertyLabelDelegate("temperature", accessories=True))
    >>> surface.write_png("tile.png")
"""

__version__ = "0.1.0"

# Initialize logging with default settings
from .logging_config import setup_logging
setup_logging()

# Configuration
from .config import Config

# Projection
from .projection import BoundingBox, PixelRect, Projector

# Rendering components
from .rendering import (
    Tile,
    Path,
    Paint,
    LabelPosition,
    LabelAccessory,
    LabelPlacement,
    DrawingSurface,
    MatplotlibSurface,
    FeatureRendererDelegate,
    LabelRendererDelegate,
    SimpleStyleDelegate,
    PropertyLabelDelegate
)

# Calculations
from . import calculations
from .calculations import isobands, IsobandsOptions, grid_points_from_dataarray

# User-facing API
from .api import render_tile, isobands_from_file

# Exceptions
from .exceptions import (
    GeotilerError,
    InvalidGeometryError,
    IndexOutOfRangeError,
    InvalidParameterError,
    RenderError
)

__all__ = [
    # Version info
    "__version__",

    # Config and projection
    "Config",
    "BoundingBox",
    "PixelRect",
    "Projector",

    # Core components
    "Tile",
    "Path",
    "Paint",
    "LabelPosition",
    "LabelAccessory",
    "LabelPlacement",
    "DrawingSurface",
    "MatplotlibSurface",
    "FeatureRendererDelegate",
    "LabelRendererDelegate",
    "SimpleStyleDelegate",
    "PropertyLabelDelegate",
    "calculations",

    # Isobands
    "isobands",
    "IsobandsOptions",
    "grid_points_from_dataarray",

    # User-facing API
    "render_tile",
    "isobands_from_file",

    # Exceptions
    "GeotilerError",
    "InvalidGeometryError",
    "IndexOutOfRangeError",
    "InvalidParameterError",
    "RenderError",
]
