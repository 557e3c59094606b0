"""
Main API module for the geotiler package.

This module provides simplified user-facing functions that wire a tile, a
drawing surface and delegates together. `render_tile()` handles the complete
workflow from features to a PNG in a single call; `isobands_from_file()`
runs the isoband generator from a GeoJSON file to another.

Example:
    >>> from geotiler import render_tile, BoundingBox, SimpleStyleDelegate
    >>>
    >>> # Render a tile straight to disk
    >>> render_tile(
    ...     collection,
    ...     BoundingBox(4.0, 52.0, 5.0, 53.0),
    ...     SimpleStyleDelegate({"stroke": "black"}),
    ...     output_path="tile.png"
    ... )

    >>> # Interactive use (returns the surface)
    >>> surface = render_tile(collection, bbox, SimpleStyleDelegate())
    >>> image = surface.to_array()
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .calculations import IsobandsOptions, isobands
from .config import Config
from .exceptions import GeotilerError, InvalidParameterError, RenderError
from .geojson import Features, load_geojson, save_geojson
from .projection import BoundingBox
from .rendering import (
    FeatureRendererDelegate,
    LabelRendererDelegate,
    MatplotlibSurface,
    Tile,
)

logger = logging.getLogger("geotiler.api")


def render_tile(
    features: Features,
    bbox: BoundingBox,
    feature_delegate: FeatureRendererDelegate,
    label_delegate: Optional[LabelRendererDelegate] = None,
    config: Optional[Config] = None,
    output_path: Optional[Union[str, Path]] = None,
    tile_index: Optional[Tuple[int, int, int]] = None
) -> Union[MatplotlibSurface, str]:
    """
    Render features onto a tile.

    Args:
        features: GeoJSON FeatureCollection, Feature or iterable of Features
        bbox: Geographic extent of the tile
        feature_delegate: Style delegate for features
        label_delegate: Optional label delegate; no labels are drawn without one
        config: Rendering configuration (default: Config())
        output_path: If given, write a PNG there and return the path
        tile_index: Optional (z, x, y) shown by the debug overlay

    Returns:
        The path written if output_path is given, otherwise the surface

    Raises:
        InvalidParameterError: If the configuration is invalid
        RenderError: If the tile cannot be drawn or written
    """
    config = config if config is not None else Config()
    config.validate()

    logger.info(f"Rendering tile {bbox} at {config.width}x{config.height}px")

    tile = Tile(bbox, features, config.width, config.height, config)
    width, height = tile.canvas_size
    surface = MatplotlibSurface(width, height, dpi=config.dpi, background_color=config.background_color)

    try:
        tile.draw_features(surface, feature_delegate)
        if label_delegate is not None:
            tile.draw_labels(surface, label_delegate)
        if config.debug:
            z, x, y = tile_index if tile_index is not None else (0, 0, 0)
            tile.draw_debug_info(surface, z, x, y)
    except GeotilerError:
        raise
    except Exception as e:
        raise RenderError(f"Failed to render tile: {e}") from e

    if output_path is None:
        return surface

    path = surface.write_png(output_path)
    logger.info(f"Tile saved to {path}")
    return path


def isobands_from_file(
    input_path: Union[str, Path],
    property_name: str,
    breaks: Sequence[float],
    output_path: Union[str, Path],
    options: Optional[IsobandsOptions] = None
) -> Dict[str, Any]:
    """
    Generate isobands from a GeoJSON point grid file and save them.

    Args:
        input_path: GeoJSON file with a FeatureCollection of Points
        property_name: Property holding the gridded value
        breaks: Band break values
        output_path: Where to write the resulting FeatureCollection
        options: Optional IsobandsOptions

    Returns:
        The generated FeatureCollection

    Raises:
        FileNotFoundError: If the input file does not exist
        InvalidParameterError: If the input is not valid GeoJSON or breaks are empty
    """
    if not breaks:
        raise InvalidParameterError("At least one break value is required")

    points = load_geojson(input_path)
    result = isobands(points, property_name, list(breaks), options)
    save_geojson(result, output_path)

    logger.info(f"Wrote {len(result['features'])} isobands to {output_path}")
    return result
