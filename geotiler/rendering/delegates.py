"""
Style and label delegates consumed by the renderers.

Renderers never decide how a feature looks. They ask a delegate, passed in
explicitly, for a paint mapping (see :class:`~geotiler.rendering.paint.Paint`
for the accepted keys) and, for labels, for the text of each placement.

Two ready-made delegates read styles from feature properties following the
simplestyle convention (``fill``, ``stroke``, ``stroke-width``) plus a few
geotiler-specific keys.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from .labels import LabelPlacement

logger = logging.getLogger("geotiler.rendering.delegates")


class FeatureRendererDelegate(ABC):
    """Supplies the paint of each feature drawn by a tile."""

    @abstractmethod
    def paint(self, properties: Mapping[str, Any], feature: Mapping[str, Any]) -> Mapping[str, Any]:
        """Return the paint mapping for ``feature``."""


class LabelRendererDelegate(ABC):
    """Supplies label text, and optionally label paint, for each feature."""

    @abstractmethod
    def label(
        self,
        properties: Mapping[str, Any],
        feature: Mapping[str, Any],
        placement: LabelPlacement
    ) -> Optional[str]:
        """Return the text for one placement, or None to skip it."""

    def paint(self, properties: Mapping[str, Any], feature: Mapping[str, Any]) -> Mapping[str, Any]:
        return {}


# simplestyle property -> Paint field
_FEATURE_STYLE_KEYS = {
    "fill": "fill",
    "stroke": "stroke",
    "stroke-width": "line_width",
    "bezier": "bezier",
}

_LABEL_STYLE_KEYS = {
    "label-color": "fill",
    "font-size": "font_size",
    "label-position": "label_position",
    "label-count": "label_count",
    "label-clear": "label_clear_rect",
}


def _collect(properties: Mapping[str, Any], keys: Mapping[str, str]) -> Dict[str, Any]:
    return {field: properties[key] for key, field in keys.items() if key in properties}


class SimpleStyleDelegate(FeatureRendererDelegate):
    """
    Paint features from their simplestyle properties.

    Args:
        defaults: Paint mapping used for properties a feature does not set

    Example:
        >>> delegate = SimpleStyleDelegate({"stroke": "black"})
        >>> delegate.paint({"fill": "#ff0000"}, feature)
        {'stroke': 'black', 'fill': '#ff0000'}
    """

    def __init__(self, defaults: Optional[Mapping[str, Any]] = None):
        self.defaults = dict(defaults or {})

    def paint(self, properties, feature):
        paint = dict(self.defaults)
        paint.update(_collect(properties or {}, _FEATURE_STYLE_KEYS))
        return paint


class PropertyLabelDelegate(LabelRendererDelegate):
    """
    Label features with the value of one of their properties.

    Args:
        property_name: Property holding the label value
        fmt: Format string applied to the value
        accessories: Whether to append the placement's accessory arrow
        defaults: Label paint mapping used for properties a feature does not set
    """

    def __init__(
        self,
        property_name: str,
        fmt: str = "{}",
        accessories: bool = False,
        defaults: Optional[Mapping[str, Any]] = None
    ):
        self.property_name = property_name
        self.fmt = fmt
        self.accessories = accessories
        self.defaults = dict(defaults or {})

    def label(self, properties, feature, placement):
        value = (properties or {}).get(self.property_name)
        if value is None:
            return None

        text = self.fmt.format(value)
        if self.accessories and placement.accessory is not None:
            text = f"{text} {placement.accessory.value}"
        return text

    def paint(self, properties, feature):
        paint = dict(self.defaults)
        paint.update(_collect(properties or {}, _LABEL_STYLE_KEYS))
        return paint
