"""
Drawing surfaces that tiles are rendered onto.

The renderers only talk to the abstract :class:`DrawingSurface`, a small
canvas-like interface: path construction, fill and stroke, text measurement
and rendering, and a save/restore transform stack. Any backend providing
these primitives can be substituted.

:class:`MatplotlibSurface` implements the interface on an off-screen Agg
figure whose axes map exactly onto the tile's pixels (y axis pointing down).
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.font_manager import FontProperties
from matplotlib.patches import PathPatch
from matplotlib.path import Path as MplPath
from matplotlib.textpath import TextPath
from scipy.ndimage import gaussian_filter

from ..exceptions import RenderError

logger = logging.getLogger("geotiler.rendering.surface")


@dataclass(frozen=True)
class TextMetrics:
    """Measured extent of a piece of text, in pixels."""

    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent + self.descent


class DrawingSurface(ABC):
    """Abstract 2D rendering target.

    Coordinates are tile pixels with the origin in the top-left corner and y
    growing downward. Path and text coordinates are interpreted through the
    current transform at the time of the call, like an HTML canvas.
    """

    @abstractmethod
    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Erase a rectangle back to the background."""

    @abstractmethod
    def save(self) -> None:
        """Push the current transform and filter state."""

    @abstractmethod
    def restore(self) -> None:
        """Pop the state pushed by the matching :meth:`save`."""

    @abstractmethod
    def translate(self, dx: float, dy: float) -> None:
        pass

    @abstractmethod
    def rotate(self, angle: float) -> None:
        """Rotate subsequent drawing by ``angle`` radians (clockwise on screen)."""

    @abstractmethod
    def begin_path(self) -> None:
        pass

    @abstractmethod
    def move_to(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    def line_to(self, x: float, y: float) -> None:
        pass

    @abstractmethod
    def bezier_curve_to(
        self,
        cp1x: float,
        cp1y: float,
        cp2x: float,
        cp2y: float,
        x: float,
        y: float
    ) -> None:
        pass

    @abstractmethod
    def close_path(self) -> None:
        pass

    @abstractmethod
    def ellipse(self, cx: float, cy: float, rx: float, ry: float) -> None:
        """Add a full, axis-aligned ellipse as a new closed subpath."""

    @abstractmethod
    def fill(self, color: str) -> None:
        """Fill the current path."""

    @abstractmethod
    def stroke(self, color: str, line_width: float) -> None:
        """Stroke the current path."""

    @abstractmethod
    def stroke_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        color: str,
        line_width: float,
        dash: Optional[Sequence[float]] = None
    ) -> None:
        pass

    @abstractmethod
    def measure_text(self, text: str, font_size: float) -> TextMetrics:
        pass

    @abstractmethod
    def fill_text(self, text: str, x: float, y: float, color: str, font_size: float) -> None:
        """Draw ``text`` horizontally centred on ``x`` with its baseline at ``y``."""

    @abstractmethod
    def set_filter(self, blur: Optional[float]) -> None:
        """Blur everything drawn afterwards by ``blur`` pixels (None disables)."""


class _GaussianBlur:
    """Agg filter blurring an artist's rendered image."""

    def __init__(self, sigma: float):
        self.sigma = sigma

    def __call__(self, image: np.ndarray, dpi: float) -> Tuple[np.ndarray, int, int]:
        pad = int(math.ceil(3 * self.sigma))
        padded = np.pad(image, ((pad, pad), (pad, pad), (0, 0)))
        blurred = gaussian_filter(padded, sigma=(self.sigma, self.sigma, 0))
        return blurred, -pad, -pad


class MatplotlibSurface(DrawingSurface):
    """
    Drawing surface backed by an off-screen matplotlib figure.

    The figure is exactly ``width`` x ``height`` pixels at ``dpi`` and has a
    single borderless axes whose data coordinates are the tile pixels. Pixel
    sizes (line widths, font sizes) are converted to points internally.

    ``clear_rect`` over the whole canvas removes everything drawn so far;
    partial clears paint the background color (white when the background is
    transparent), since vector artists cannot punch holes into each other.

    Example:
        >>> surface = MatplotlibSurface(256, 256)
        >>> surface.begin_path()
        >>> surface.ellipse(128, 128, 10, 10)
        >>> surface.fill("red")
        >>> surface.write_png("dot.png")
    """

    def __init__(
        self,
        width: int,
        height: int,
        dpi: int = 100,
        background_color: str = "none"
    ):
        self.width = width
        self.height = height
        self.dpi = dpi
        self.background_color = background_color

        self.figure = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        self.canvas = FigureCanvasAgg(self.figure)
        self.figure.patch.set_facecolor(background_color)

        self.ax = self.figure.add_axes([0, 0, 1, 1])
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.ax.set_axis_off()

        self._matrix = np.identity(3)
        self._blur: Optional[float] = None
        self._state_stack: List[Tuple[np.ndarray, Optional[float]]] = []
        self._vertices: List[Tuple[float, float]] = []
        self._codes: List[int] = []
        self._zorder = 0

        logger.debug(f"Created {width}x{height}px matplotlib surface at {dpi} dpi")

    # #region State

    def save(self) -> None:
        self._state_stack.append((self._matrix.copy(), self._blur))

    def restore(self) -> None:
        if not self._state_stack:
            logger.warning("restore() called without matching save()")
            return
        self._matrix, self._blur = self._state_stack.pop()

    def translate(self, dx: float, dy: float) -> None:
        self._matrix = self._matrix @ np.array([
            [1.0, 0.0, dx],
            [0.0, 1.0, dy],
            [0.0, 0.0, 1.0],
        ])

    def rotate(self, angle: float) -> None:
        cos, sin = math.cos(angle), math.sin(angle)
        self._matrix = self._matrix @ np.array([
            [cos, -sin, 0.0],
            [sin, cos, 0.0],
            [0.0, 0.0, 1.0],
        ])

    def set_filter(self, blur: Optional[float]) -> None:
        self._blur = blur if blur else None

    def _apply(self, x: float, y: float) -> Tuple[float, float]:
        px, py, _ = self._matrix @ np.array([x, y, 1.0])
        return float(px), float(py)

    def _add_artist(self, artist) -> None:
        self._zorder += 1
        artist.set_zorder(self._zorder)
        if self._blur:
            artist.set_agg_filter(_GaussianBlur(self._blur))

    def _px_to_pt(self, value: float) -> float:
        return value * 72.0 / self.dpi

    # #endregion

    # #region Paths

    def begin_path(self) -> None:
        self._vertices = []
        self._codes = []

    def move_to(self, x: float, y: float) -> None:
        self._vertices.append(self._apply(x, y))
        self._codes.append(MplPath.MOVETO)

    def line_to(self, x: float, y: float) -> None:
        if not self._codes:
            self.move_to(x, y)
            return
        self._vertices.append(self._apply(x, y))
        self._codes.append(MplPath.LINETO)

    def bezier_curve_to(self, cp1x, cp1y, cp2x, cp2y, x, y) -> None:
        if not self._codes:
            self.move_to(cp1x, cp1y)
        self._vertices.extend([
            self._apply(cp1x, cp1y),
            self._apply(cp2x, cp2y),
            self._apply(x, y),
        ])
        self._codes.extend([MplPath.CURVE4] * 3)

    def close_path(self) -> None:
        if not self._codes:
            return
        self._vertices.append((0.0, 0.0))
        self._codes.append(MplPath.CLOSEPOLY)

    def ellipse(self, cx: float, cy: float, rx: float, ry: float) -> None:
        circle = MplPath.unit_circle()
        for (ux, uy), code in zip(circle.vertices, circle.codes):
            if code == MplPath.CLOSEPOLY:
                self._vertices.append((0.0, 0.0))
            else:
                self._vertices.append(self._apply(cx + ux * rx, cy + uy * ry))
            self._codes.append(int(code))

    def _current_path(self) -> Optional[MplPath]:
        if not self._codes:
            return None
        return MplPath(self._vertices, self._codes)

    def fill(self, color: str) -> None:
        path = self._current_path()
        if path is None:
            return
        patch = PathPatch(
            path,
            facecolor=color,
            edgecolor="none",
            linewidth=0,
            transform=self.ax.transData,
        )
        self._add_artist(patch)
        self.ax.add_patch(patch)

    def stroke(self, color: str, line_width: float) -> None:
        path = self._current_path()
        if path is None:
            return
        patch = PathPatch(
            path,
            facecolor="none",
            edgecolor=color,
            linewidth=self._px_to_pt(line_width),
            transform=self.ax.transData,
        )
        self._add_artist(patch)
        self.ax.add_patch(patch)

    def _rect_path(self, x: float, y: float, width: float, height: float) -> MplPath:
        corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        vertices = [self._apply(cx, cy) for cx, cy in corners] + [(0.0, 0.0)]
        codes = [MplPath.MOVETO] + [MplPath.LINETO] * 3 + [MplPath.CLOSEPOLY]
        return MplPath(vertices, codes)

    def stroke_rect(self, x, y, width, height, color, line_width, dash=None) -> None:
        linestyle = "solid"
        if dash:
            linestyle = (0, tuple(self._px_to_pt(d) for d in dash))
        patch = PathPatch(
            self._rect_path(x, y, width, height),
            facecolor="none",
            edgecolor=color,
            linewidth=self._px_to_pt(line_width),
            linestyle=linestyle,
            transform=self.ax.transData,
        )
        self._add_artist(patch)
        self.ax.add_patch(patch)

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        path = self._rect_path(x, y, width, height)
        extents = path.get_extents()
        if (extents.x0 <= 0 and extents.y0 <= 0
                and extents.x1 >= self.width and extents.y1 >= self.height):
            for artist in list(self.ax.patches) + list(self.ax.texts):
                artist.remove()
            return

        color = "white" if self.background_color == "none" else self.background_color
        patch = PathPatch(path, facecolor=color, edgecolor="none", transform=self.ax.transData)
        self._add_artist(patch)
        self.ax.add_patch(patch)

    # #endregion

    # #region Text

    def measure_text(self, text: str, font_size: float) -> TextMetrics:
        if not text.strip():
            return TextMetrics(0.0, 0.0, 0.0)

        text_path = TextPath((0, 0), text, size=font_size, prop=FontProperties(family="sans-serif"))
        extents = text_path.get_extents()
        return TextMetrics(
            width=float(extents.width),
            ascent=max(float(extents.y1), 0.0),
            descent=max(float(-extents.y0), 0.0),
        )

    def fill_text(self, text: str, x: float, y: float, color: str, font_size: float) -> None:
        ax_x, ax_y = self._apply(x, y)
        # Screen rotation of the current transform; matplotlib counts
        # counter-clockwise in display space, where y points up.
        angle = math.degrees(math.atan2(self._matrix[1, 0], self._matrix[0, 0]))
        artist = self.ax.text(
            ax_x, ax_y, text,
            color=color,
            fontsize=self._px_to_pt(font_size),
            family="sans-serif",
            rotation=-angle,
            rotation_mode="anchor",
            ha="center",
            va="baseline",
            transform=self.ax.transData,
        )
        self._add_artist(artist)

    # #endregion

    # #region Output

    def to_array(self) -> np.ndarray:
        """Render the figure and return it as an RGBA array of shape (height, width, 4)."""
        self.canvas.draw()
        return np.asarray(self.canvas.buffer_rgba()).copy()

    def write_png(self, path: Union[str, Path]) -> str:
        """
        Write the surface to a PNG file.

        Args:
            path: Output file path

        Returns:
            The output path as a string

        Raises:
            RenderError: If the image cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            self.figure.savefig(
                path,
                dpi=self.dpi,
                transparent=self.background_color == "none",
            )
        except OSError as e:
            logger.error(f"Failed to write PNG to {path}: {e}")
            raise RenderError(f"Failed to write PNG to {path}: {e}") from e

        logger.info(f"Wrote {self.width}x{self.height}px tile to {path}")
        return str(path)

    # #endregion
