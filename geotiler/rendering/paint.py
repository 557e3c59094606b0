"""
Paint style records for features and labels.

A :class:`Paint` is built once per feature from the mapping returned by a
style delegate and knows how to fill/stroke the surface's current path and
how to draw a rotated, padded label.
"""

import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from matplotlib.colors import is_color_like

from ..constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_LABEL_COUNT,
    DEFAULT_LINE_WIDTH,
    DEFAULT_TEXT_COLOR,
    DEFAULT_TEXT_PADDING,
)
from ..exceptions import InvalidParameterError
from .labels import LabelPosition
from .surface import DrawingSurface

logger = logging.getLogger("geotiler.rendering.paint")


@dataclass(frozen=True)
class Paint:
    """
    Style of a single feature or label.

    Attributes:
        fill: Fill color (any matplotlib color spec) or None for no fill
        stroke: Stroke color or None for no outline
        line_width: Stroke width in pixels
        font_size: Label font size in pixels
        text_padding: Padding around label text in pixels
        label_position: Label placement strategy
        label_count: Number of labels per subpath (outline labels stop at 2)
        label_clear_rect: Whether to clear the area behind each label
        bezier: Whether to draw paths as smoothed splines
    """

    fill: Optional[str] = None
    stroke: Optional[str] = None
    line_width: float = DEFAULT_LINE_WIDTH
    font_size: float = DEFAULT_FONT_SIZE
    text_padding: float = DEFAULT_TEXT_PADDING
    label_position: LabelPosition = LabelPosition.CENTER
    label_count: int = DEFAULT_LABEL_COUNT
    label_clear_rect: bool = False
    bezier: bool = False

    @classmethod
    def from_mapping(cls, init: Optional[Mapping[str, Any]] = None, **defaults: Any) -> "Paint":
        """
        Build a Paint from a delegate's style mapping.

        Keys in ``init`` override ``defaults``; ``label_position`` may be
        given as a LabelPosition or its string value.

        Raises:
            InvalidParameterError: If the mapping contains unknown keys, a
                fill or stroke that is not a color, or an unknown label position
        """
        values = dict(defaults)
        values.update(init or {})

        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise InvalidParameterError(f"Unknown paint properties: {', '.join(sorted(unknown))}")

        for key in ("fill", "stroke"):
            color = values.get(key)
            if color is not None and not is_color_like(color):
                raise InvalidParameterError(f"Invalid {key} color: {color!r}")

        if "label_position" in values:
            try:
                values["label_position"] = LabelPosition(values["label_position"])
            except ValueError as e:
                raise InvalidParameterError(
                    f"Unknown label position: {values['label_position']!r}"
                ) from e

        return cls(**values)

    def draw(self, surface: DrawingSurface) -> None:
        """Fill and/or stroke the surface's current path."""
        surface.save()
        try:
            if self.fill is not None:
                surface.fill(self.fill)
            if self.stroke is not None and self.line_width > 0:
                surface.stroke(self.stroke, self.line_width)
        finally:
            surface.restore()

    def draw_text(
        self,
        surface: DrawingSurface,
        text: str,
        cx: float,
        cy: float,
        rotation: float
    ) -> None:
        """
        Draw ``text`` centred on ``(cx, cy)``, rotated by ``rotation`` degrees.

        The padded text box is rotated about its centre; when
        ``label_clear_rect`` is set the box is cleared before drawing.
        """
        surface.save()
        try:
            metrics = surface.measure_text(text, self.font_size)
            width = metrics.width + 2 * self.text_padding
            height = metrics.height + 2 * self.text_padding
            rect_x = cx - width / 2
            rect_y = cy - height / 2

            surface.translate(cx, cy)
            surface.rotate(math.radians(rotation))
            surface.translate(-cx, -cy)

            if self.label_clear_rect:
                surface.clear_rect(rect_x, rect_y, width, height)

            baseline = rect_y + self.text_padding + metrics.ascent
            surface.fill_text(text, cx, baseline, self.fill or DEFAULT_TEXT_COLOR, self.font_size)
        finally:
            surface.restore()
