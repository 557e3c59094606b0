"""
Grid calculations and isoband generation for geotiler.

This module turns gridded point values into classified isoband polygons:
- Value matrices built from point collections
- Gaussian smoothing of value grids with missing cells preserved
- Cumulative isobands traced with marching squares
- Conversion of xarray DataArrays into point collections

Main Functions:
    From isobands module:
        - isobands: Generate MultiPolygon isobands from gridded points
        - band_thresholds: Compute aligned thresholds and bandwidths
        - group_nested_rings: Group rings by containment

    From grid module:
        - value_matrix: Arrange points into a value matrix
        - smooth_grid: Apply Gaussian smoothing to a value matrix
        - grid_points_from_dataarray: Convert a DataArray into points

Example:
    >>> from geotiler.calculations import isobands, IsobandsOptions
    >>>
    >>> options = IsobandsOptions(common_properties={"stroke": "black"})
    >>> bands = isobands(points, "temperature", [0, 5, 10, 15], options)
    >>> print(f"Generated {len(bands['features'])} bands")
"""

from .grid import (
    value_matrix,
    smooth_grid,
    grid_points_from_dataarray
)
from .isobands import (
    IsobandsOptions,
    BandThresholds,
    isobands,
    band_thresholds,
    group_nested_rings
)

__all__ = [
    "value_matrix",
    "smooth_grid",
    "grid_points_from_dataarray",
    "IsobandsOptions",
    "BandThresholds",
    "isobands",
    "band_thresholds",
    "group_nested_rings",
]
