"""
Label placement along feature outlines.

:class:`LabelPlacer` picks anchor points and rotations for labels on a single
subpath. Two strategies exist, selected with :class:`LabelPosition`:

- ``CENTER`` puts one upright label in the middle of the subpath's bounding
  box.
- ``OUTLINE`` puts labels on the midpoints of long segments, rotated along
  the segment and flipped where needed so text never reads upside down.

Placement is deterministic: the same subpath, strategy and count always give
the same placements.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Iterator, List, Optional, Sequence

from ..constants import LABEL_REFERENCE_FRAME, MAX_OUTLINE_LABELS, MIN_OUTLINE_LABEL_EXTENT
from .geometry import Point, WindingOrder, bounding_box, winding_order

logger = logging.getLogger("geotiler.rendering.labels")


class LabelPosition(Enum):
    CENTER = "center"
    OUTLINE = "outline"


class LabelAccessory(Enum):
    """Glyphs pointing toward the interior of the labelled feature."""

    ARROW_UP = "⏶"
    ARROW_DOWN = "⏷"


@dataclass(frozen=True)
class LabelPlacement:
    """
    Where and how to draw one label.

    Attributes:
        x: Anchor x in tile pixels
        y: Anchor y in tile pixels
        rotation: Rotation in degrees, in [0, 360)
        accessory: Arrow pointing toward the feature interior, if known
        inside_is_up: Whether the feature interior lies above the text
            baseline, if known
    """

    x: float
    y: float
    rotation: float = 0.0
    accessory: Optional[LabelAccessory] = None
    inside_is_up: Optional[bool] = None


class LabelPlacer:
    """
    Place labels on one subpath with a given strategy.

    Outline placement searches every segment for the first label. The
    second label only considers the segment opposite the first one and its
    close neighbours; no further labels are produced.

    Args:
        subpath: Sequence of (x, y) points in tile pixels
        position: Placement strategy

    Example:
        >>> square = [(0, 0), (100, 0), (100, 100), (0, 100), (0, 0)]
        >>> LabelPlacer(square, LabelPosition.OUTLINE).place(1)
        [LabelPlacement(x=0.0, y=50.0, rotation=90.0, ...)]
    """

    def __init__(self, subpath: Sequence[Point], position: LabelPosition):
        self.subpath = [(float(p[0]), float(p[1])) for p in subpath]
        self.position = LabelPosition(position)

    def place(self, count: int = 1) -> List[LabelPlacement]:
        if self.position is LabelPosition.CENTER:
            return [self._center()]
        return self._outline(count)

    # #region Center

    @cached_property
    def _bounds(self):
        return bounding_box(self.subpath)

    def _center(self) -> LabelPlacement:
        min_x, min_y, max_x, max_y = self._bounds
        return LabelPlacement(x=(min_x + max_x) / 2, y=(min_y + max_y) / 2, rotation=0.0)

    # #endregion

    # #region Outline

    @cached_property
    def _winding_order(self) -> WindingOrder:
        return winding_order(self.subpath)

    def _outline(self, count: int) -> List[LabelPlacement]:
        min_x, min_y, max_x, max_y = self._bounds
        if abs(max_x - min_x) < MIN_OUTLINE_LABEL_EXTENT or abs(max_y - min_y) < MIN_OUTLINE_LABEL_EXTENT:
            logger.debug("Subpath too small for outline labels, placing a single centered label")
            return [self._center()]

        if count > MAX_OUTLINE_LABELS:
            logger.debug(
                f"Requested {count} outline labels, at most {MAX_OUTLINE_LABELS} are placed"
            )

        placements = []
        used_segments: List[int] = []
        for _ in range(count):
            segment = self._longest_segment(used_segments)
            if segment is None:
                continue
            used_segments.append(segment)
            placements.append(self._place_on_segment(segment))
        return placements

    def _candidate_segments(self, used_segments: List[int]) -> Iterator[int]:
        n = len(self.subpath)
        if not used_segments:
            yield from range(n)
        elif len(used_segments) == 1:
            opposite = (used_segments[0] + n // 2) % n
            yield opposite
            if n > 2:
                yield (opposite - 1) % n
                yield (opposite + 1) % n
            if n > 4:
                yield (opposite - 2) % n
                yield (opposite + 2) % n

    def _longest_segment(self, used_segments: List[int]) -> Optional[int]:
        low, high = LABEL_REFERENCE_FRAME
        n = len(self.subpath)

        best_index = None
        best_length = -math.inf
        for index in self._candidate_segments(used_segments):
            if index in used_segments:
                continue
            x1, y1 = self.subpath[index]
            x2, y2 = self.subpath[(index + 1) % n]
            if not (low <= x1 <= high and low <= y1 <= high):
                continue

            length = (x2 - x1) ** 2 + (y2 - y1) ** 2
            if length >= best_length:
                best_length = length
                best_index = index

        return best_index

    def _place_on_segment(self, index: int) -> LabelPlacement:
        x1, y1 = self.subpath[index]
        x2, y2 = self.subpath[(index + 1) % len(self.subpath)]
        x = (x1 + x2) / 2
        y = (y1 + y2) / 2

        rotation = math.degrees(math.atan2(y2 - y1, x2 - x1))
        while rotation < 0:
            rotation += 360
        if rotation >= 360:  # -1e-15 + 360 rounds up
            rotation -= 360

        if 90 < rotation <= 270:
            rotation = (rotation + 180) % 360
            inside_is_up = self._winding_order is WindingOrder.CW
        else:
            inside_is_up = self._winding_order is WindingOrder.CCW

        accessory = LabelAccessory.ARROW_UP if inside_is_up else LabelAccessory.ARROW_DOWN
        return LabelPlacement(
            x=x,
            y=y,
            rotation=rotation,
            accessory=accessory,
            inside_is_up=inside_is_up,
        )

    # #endregion
