"""
Constants and fixed parameters for the geotiler package.

This module defines label placement thresholds, rendering defaults and the
web-map tiling constants used throughout the package.
"""

import math

# ============================================================================
# Label Placement
# ============================================================================

# Subpaths whose bounding box is narrower than this (in px) on either axis
# only get a single centered label.
MIN_OUTLINE_LABEL_EXTENT = 30.0

# Segments starting outside this square (in px) are never used for labels.
LABEL_REFERENCE_FRAME = (0.0, 512.0)

# Only the first label and the one opposite to it are placed along outlines.
MAX_OUTLINE_LABELS = 2

# ============================================================================
# Paint Defaults
# ============================================================================

DEFAULT_LINE_WIDTH = 1.0
DEFAULT_FONT_SIZE = 12.0
DEFAULT_TEXT_PADDING = 2.0
DEFAULT_LABEL_COUNT = 1
DEFAULT_LABEL_FILL = "#000000"
DEFAULT_TEXT_COLOR = "black"

# Radius (px) of the dot drawn for point features
POINT_RADIUS = 2.0

# ============================================================================
# Curves
# ============================================================================

# Centripetal Catmull-Rom parameterization
CATMULL_ROM_ALPHA = 0.5
CURVE_EPSILON = 1e-12

# ============================================================================
# Tiling
# ============================================================================

TILE_SIZE = 256
MERCATOR_MAX_LATITUDE = math.degrees(math.atan(math.sinh(math.pi)))  # ~85.0511

# Debug overlay styling
DEBUG_BORDER_COLOR = "#0000ff"
DEBUG_BORDER_DASH = (5.0, 5.0)
DEBUG_TEXT_COLOR = "#000000"
DEBUG_FONT_SIZE = 12.0
