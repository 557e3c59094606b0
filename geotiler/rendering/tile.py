"""
Tile orchestration.

A :class:`Tile` owns the bounding box, the pixel dimensions, the padding and
projection options, and the features to render. It projects coordinates and
drives the feature and label renderers over every feature. A feature that
fails to render is logged and skipped; the rest of the tile still renders.
"""

import logging
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from ..config import Config
from ..constants import (
    DEBUG_BORDER_COLOR,
    DEBUG_BORDER_DASH,
    DEBUG_FONT_SIZE,
    DEBUG_TEXT_COLOR,
)
from ..exceptions import GeotilerError
from ..geojson import Features, feature_list
from ..projection import BoundingBox, PixelRect, Projector
from .delegates import FeatureRendererDelegate, LabelRendererDelegate
from .features import FeatureRenderer
from .label_renderer import LabelRenderer
from .surface import DrawingSurface

logger = logging.getLogger("geotiler.rendering.tile")

# Malformed feature data surfaces from numpy and matplotlib as builtin errors
_FEATURE_ERRORS = (GeotilerError, ValueError, TypeError, IndexError)


class Tile:
    """
    A single map tile and the features drawn on it.

    Args:
        bbox: Geographic extent of the tile
        features: GeoJSON FeatureCollection, a single Feature or an iterable of Features
        width: Inner width of the tile in pixels
        height: Inner height of the tile in pixels
        config: Padding and projection options (default: Config())

    Example:
        >>> tile = Tile(BoundingBox(4.0, 52.0, 5.0, 53.0), collection, 256, 256)
        >>> surface = MatplotlibSurface(*tile.canvas_size)
        >>> tile.draw_features(surface, SimpleStyleDelegate({"stroke": "black"}))
        >>> tile.draw_labels(surface, PropertyLabelDelegate("name"))
    """

    def __init__(
        self,
        bbox: BoundingBox,
        features: Features,
        width: int,
        height: int,
        config: Optional[Config] = None
    ):
        self.bbox = bbox
        self.features = feature_list(features)
        self.width = width
        self.height = height
        self.config = config if config is not None else Config()

        self.projector = Projector(
            bbox,
            width,
            height,
            padding=self.config.padding,
            padding_unit=self.config.padding_unit,
            projection=self.config.projection,
        )

        logger.debug(f"Initialized tile {bbox} with {len(self.features)} features")

    # #region Projection

    @property
    def padding_in_px(self) -> Tuple[float, float]:
        return self.projector.padding_x, self.projector.padding_y

    @property
    def inner_bounds(self) -> PixelRect:
        return self.projector.inner_bounds

    @property
    def outer_bounds(self) -> PixelRect:
        return self.projector.outer_bounds

    @property
    def canvas_size(self) -> Tuple[int, int]:
        """Pixel size of the full canvas, padding included."""
        bounds = self.outer_bounds
        return int(round(bounds.width)), int(round(bounds.height))

    def project(self, lon: float, lat: float) -> Tuple[float, float]:
        return self.projector.project(lon, lat)

    def project_many(self, coordinates: Iterable[Sequence[float]]) -> np.ndarray:
        return self.projector.project_many(coordinates)

    # #endregion

    # #region Interface

    def draw_features(
        self,
        surface: DrawingSurface,
        delegate: FeatureRendererDelegate,
        blur: Optional[float] = None
    ) -> int:
        """
        Clear the canvas and render every feature.

        Args:
            surface: Drawing surface
            delegate: Style delegate
            blur: Optional blur radius in pixels (default: config.blur)

        Returns:
            Number of features rendered without error
        """
        bounds = self.outer_bounds
        surface.clear_rect(0, 0, bounds.width, bounds.height)

        blur = blur if blur is not None else self.config.blur
        if blur:
            surface.set_filter(blur)

        rendered = 0
        try:
            for index, feature in enumerate(self.features):
                renderer = FeatureRenderer(self, feature, delegate)
                try:
                    renderer.render(surface)
                    rendered += 1
                except _FEATURE_ERRORS as e:
                    logger.warning(f"Skipping feature {index}: {e}")
        finally:
            if blur:
                surface.set_filter(None)

        logger.info(f"Rendered {rendered}/{len(self.features)} features")
        return rendered

    def draw_labels(self, surface: DrawingSurface, delegate: LabelRendererDelegate) -> int:
        """
        Render the labels of every feature.

        Returns:
            Number of labels drawn
        """
        drawn = 0
        for index, feature in enumerate(self.features):
            renderer = LabelRenderer(self, feature, delegate)
            try:
                drawn += renderer.render(surface)
            except _FEATURE_ERRORS as e:
                logger.warning(f"Skipping labels of feature {index}: {e}")

        logger.info(f"Drew {drawn} labels for {len(self.features)} features")
        return drawn

    def draw_debug_info(self, surface: DrawingSurface, z: int, x: int, y: int) -> None:
        """Draw a dashed border around the inner bounds and the tile index."""
        inner = self.inner_bounds

        surface.save()
        surface.stroke_rect(
            inner.left, inner.top, inner.width, inner.height,
            DEBUG_BORDER_COLOR, 1.0, dash=DEBUG_BORDER_DASH,
        )
        surface.restore()

        surface.save()
        text = f"[{z},{x},{y}]"
        metrics = surface.measure_text(text, DEBUG_FONT_SIZE)
        surface.fill_text(
            text,
            inner.left + 5 + metrics.width / 2,
            inner.top + 15,
            DEBUG_TEXT_COLOR,
            DEBUG_FONT_SIZE,
        )
        surface.restore()

    # #endregion
