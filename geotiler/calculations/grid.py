"""
Gridded value helpers for the isoband generator.

This module turns point collections into value matrices and back, smooths
matrices with a Gaussian kernel while keeping missing cells missing, and
converts xarray DataArrays into the point collections the generator reads.
"""

import logging
import numbers
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np
import xarray as xr
from scipy.ndimage import gaussian_filter

from ..exceptions import InvalidParameterError
from ..geojson import Features, feature_collection, feature_list

logger = logging.getLogger("geotiler.calculations.grid")


def _numeric(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return np.nan
    return float(value)


def value_matrix(
    points: Features,
    property_name: str
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Arrange point features into a value matrix.

    Points are grouped by latitude into rows (ascending latitude) and placed
    in the column of their longitude (ascending longitude). Cells without a
    point, and points whose property is absent or not numeric, hold NaN.

    Args:
        points: GeoJSON Point features
        property_name: Property holding the value

    Returns:
        Tuple of (matrix, lons, lats) where matrix has shape (len(lats), len(lons))

    Raises:
        InvalidParameterError: If a feature is not a Point
    """
    cells: Dict[Tuple[float, float], float] = {}
    for feature in feature_list(points):
        geometry = feature.get("geometry") or {}
        if geometry.get("type") != "Point":
            raise InvalidParameterError(
                f"Isobands need Point features, got {geometry.get('type')}"
            )
        lon, lat = geometry["coordinates"][:2]
        properties = feature.get("properties") or {}
        cells[(float(lon), float(lat))] = _numeric(properties.get(property_name))

    lons = np.array(sorted({lon for lon, _ in cells}), dtype=float)
    lats = np.array(sorted({lat for _, lat in cells}), dtype=float)

    matrix = np.full((lats.size, lons.size), np.nan)
    columns = {lon: i for i, lon in enumerate(lons)}
    rows = {lat: i for i, lat in enumerate(lats)}
    for (lon, lat), value in cells.items():
        matrix[rows[lat], columns[lon]] = value

    logger.debug(f"Built {matrix.shape[0]}x{matrix.shape[1]} value matrix from {len(cells)} points")
    return matrix, lons, lats


def smooth_grid(matrix: np.ndarray, sigma: float) -> np.ndarray:
    """
    Apply Gaussian smoothing to a value matrix.

    NaN cells are filled with the mean for filtering and restored afterwards,
    so holes in the grid stay holes.

    Args:
        matrix: 2D value matrix, may contain NaN
        sigma: Standard deviation of the Gaussian kernel in grid cells

    Returns:
        Smoothed copy of the matrix

    Raises:
        InvalidParameterError: If sigma is negative
    """
    if sigma < 0:
        raise InvalidParameterError(f"Smoothing sigma must be non-negative, got {sigma}")
    if sigma == 0:
        return np.array(matrix, dtype=float)

    values = np.asarray(matrix, dtype=float)
    nan_mask = np.isnan(values)

    if nan_mask.all():
        return values.copy()

    if nan_mask.any():
        fill_value = np.nanmean(values)
        filled = np.where(nan_mask, fill_value, values)
        logger.debug(f"Filled {nan_mask.sum()} NaN values for smoothing")
    else:
        filled = values

    smoothed = gaussian_filter(filled, sigma=sigma, mode='nearest')

    if nan_mask.any():
        smoothed = np.where(nan_mask, np.nan, smoothed)

    logger.debug(f"Smoothed grid with sigma={sigma}")
    return smoothed


def _extract_lat_lon(da: xr.DataArray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Extract (lats, lons, values) from a DataArray with 1D or 2D coordinates."""

    def _coord(name_options: Tuple[str, ...]) -> Optional[xr.DataArray]:
        for name in name_options:
            if name in da.coords:
                return da.coords[name]
        return None

    lat_da = _coord(("lat", "latitude", "y"))
    lon_da = _coord(("lon", "longitude", "x"))

    if lat_da is None or lon_da is None:
        raise InvalidParameterError(
            f"Data must have latitude/longitude coordinates. Found coords={list(da.coords)}"
        )

    if da.ndim != 2:
        raise InvalidParameterError(f"Expected 2D data, got {da.ndim} dimensions")

    lats = lat_da.values
    lons = lon_da.values
    values = da.values

    if lats.ndim == 1 and lons.ndim == 1:
        lat_dim, lon_dim = lat_da.dims[0], lon_da.dims[0]
        if da.dims == (lon_dim, lat_dim):
            values = da.transpose(lat_dim, lon_dim).values
        if values.shape != (lats.size, lons.size):
            raise InvalidParameterError(
                f"Coordinate/value shape mismatch: values={values.shape}, "
                f"lat={lats.shape}, lon={lons.shape}"
            )
        lons, lats = np.meshgrid(lons, lats)
    elif lats.ndim == 1 and lons.ndim == 2:
        lats = np.broadcast_to(lats[:, None], values.shape)
    elif lons.ndim == 1 and lats.ndim == 2:
        lons = np.broadcast_to(lons[None, :], values.shape)

    if lats.shape != values.shape or lons.shape != values.shape:
        raise InvalidParameterError(
            f"2D coordinate/value shape mismatch: values={values.shape}, "
            f"lat={lats.shape}, lon={lons.shape}"
        )

    return lats, lons, values


def grid_points_from_dataarray(
    da: xr.DataArray,
    property_name: Optional[str] = None,
    skip_missing: bool = False
) -> Dict[str, Any]:
    """
    Convert a gridded DataArray into a FeatureCollection of Points.

    Args:
        da: 2D DataArray with lat/lon (or latitude/longitude) coordinates
        property_name: Property to store values under (default: da.name or "value")
        skip_missing: Leave NaN cells out instead of emitting them without a value

    Returns:
        GeoJSON FeatureCollection of Point features

    Example:
        >>> points = grid_points_from_dataarray(ds["t2m"], "temperature")
        >>> bands = isobands(points, "temperature", [270, 280, 290])
    """
    name = property_name or (str(da.name) if da.name is not None else "value")
    lats, lons, values = _extract_lat_lon(da)

    features: List[Mapping[str, Any]] = []
    for lat, lon, value in zip(lats.ravel(), lons.ravel(), values.ravel()):
        missing = value is None or np.isnan(float(value))
        if missing and skip_missing:
            continue
        properties = {} if missing else {name: float(value)}
        features.append({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [float(lon), float(lat)]},
            "properties": properties,
        })

    logger.info(f"Converted {values.shape[0]}x{values.shape[1]} grid to {len(features)} points")
    return feature_collection(features)
