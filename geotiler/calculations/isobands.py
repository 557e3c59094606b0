"""
Isoband generation from gridded point data.

This module classifies a regular grid of point values into bands and traces
their outlines as GeoJSON MultiPolygons. Bands are cumulative: for
increasing breaks each band covers every cell whose value reaches its break,
for decreasing breaks every cell whose value stays at or below it. Ring
tracing uses contourpy's marching squares, ring nesting uses shapely.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence

import contourpy
import numpy as np
import shapely

from ..geojson import Features, feature_collection
from .grid import smooth_grid, value_matrix

logger = logging.getLogger("geotiler.calculations.isobands")

Ring = np.ndarray


@dataclass
class IsobandsOptions:
    """
    Options for :func:`isobands`.

    Attributes:
        common_properties: Properties copied onto every emitted band
        breaks_properties: Per-break property overrides, index-aligned with breaks
        smoothing_sigma: Gaussian smoothing applied to the grid first (0 disables)
    """
    common_properties: Dict[str, Any] = field(default_factory=dict)
    breaks_properties: Optional[List[Mapping[str, Any]]] = None
    smoothing_sigma: float = 0.0


class BandThresholds(NamedTuple):
    """Index-aligned band parameters left after dropping empty bands."""
    breaks: List[float]
    thresholds: List[float]
    bandwidths: List[float]
    properties: Optional[List[Mapping[str, Any]]]


def band_thresholds(
    breaks: Sequence[float],
    extreme_max: float,
    extreme_min: float,
    breaks_properties: Optional[Sequence[Mapping[str, Any]]] = None
) -> BandThresholds:
    """
    Compute the threshold and bandwidth of every band.

    Breaks are increasing when the last is not below the first. Increasing
    bands run from their break up to the grid maximum; decreasing bands run
    from the grid minimum up to their break. Bands with a bandwidth of zero
    or less are dropped together with their break and property override.

    Args:
        breaks: Break values
        extreme_max: Maximum present grid value
        extreme_min: Minimum present grid value
        breaks_properties: Optional per-break property overrides

    Returns:
        BandThresholds with all lists index-aligned
    """
    increasing = breaks[-1] >= breaks[0]
    extreme = extreme_max if increasing else extreme_min

    kept = BandThresholds([], [], [], None if breaks_properties is None else [])
    for index, value in enumerate(breaks):
        threshold = value if increasing else extreme
        bandwidth = extreme - value if increasing else value - extreme
        if bandwidth <= 0:
            logger.debug(f"Dropping empty band for break {value}")
            continue

        kept.breaks.append(value)
        kept.thresholds.append(threshold)
        kept.bandwidths.append(bandwidth)
        if kept.properties is not None:
            override = breaks_properties[index] if index < len(breaks_properties) else None
            kept.properties.append(override or {})

    return kept


def band_rings(
    generator: contourpy.ContourGenerator,
    threshold: float,
    bandwidth: float
) -> List[Ring]:
    """
    Trace the rings of one band in grid coordinates.

    Both band limits are inclusive, so cells equal to the threshold (a
    plateau at the grid extreme) stay inside the band. Rings are returned
    open (without the repeated closing point) and without consecutive
    duplicate vertices; rings with fewer than 3 distinct points are
    discarded.
    """
    # contourpy fills lower < z <= upper
    lower = np.nextafter(threshold, -np.inf)
    points_list, offsets_list = generator.filled(lower, threshold + bandwidth)

    rings = []
    for points, offsets in zip(points_list, offsets_list):
        for start, end in zip(offsets[:-1], offsets[1:]):
            ring = points[start:end]
            keep = np.ones(len(ring), dtype=bool)
            keep[1:] = np.any(ring[1:] != ring[:-1], axis=1)
            ring = ring[keep]
            if len(ring) > 1 and np.array_equal(ring[0], ring[-1]):
                ring = ring[:-1]
            if len(np.unique(ring, axis=0)) < 3:
                continue
            rings.append(ring)
    return rings


def group_nested_rings(rings: Sequence[Ring]) -> List[List[Ring]]:
    """
    Group rings by containment.

    Rings are processed in the given order, which must be by descending area.
    The first ungrouped ring opens a group; every later ungrouped ring whose
    vertices all lie inside or on it joins that group.

    Args:
        rings: Open rings ordered by descending area

    Returns:
        List of groups, each starting with its containing ring
    """
    grouped = [False] * len(rings)
    groups = []

    for i, outer in enumerate(rings):
        if grouped[i]:
            continue

        grouped[i] = True
        group = [outer]
        outer_polygon = shapely.Polygon(outer)
        shapely.prepare(outer_polygon)

        for j in range(i + 1, len(rings)):
            if grouped[j]:
                continue
            if np.all(shapely.covers(outer_polygon, shapely.points(rings[j]))):
                group.append(rings[j])
                grouped[j] = True

        groups.append(group)

    return groups


def _ring_area(ring: Ring) -> float:
    return shapely.Polygon(ring).area


def _close(ring: np.ndarray) -> List[List[float]]:
    coordinates = ring.tolist()
    coordinates.append(list(coordinates[0]))
    return coordinates


def isobands(
    points: Features,
    property_name: str,
    breaks: Sequence[float],
    options: Optional[IsobandsOptions] = None
) -> Dict[str, Any]:
    """
    Generate isobands from a grid of point features.

    Args:
        points: FeatureCollection of Point features on a regular grid
        property_name: Property holding the gridded value
        breaks: Band break values, increasing or decreasing
        options: Optional IsobandsOptions

    Returns:
        FeatureCollection with one MultiPolygon per non-empty band, tagged
        with ``{property_name: break}``

    Raises:
        InvalidParameterError: If a feature is not a Point or sigma is negative

    Example:
        >>> bands = isobands(points, "temperature", [0, 10, 20])
        >>> [f["properties"]["temperature"] for f in bands["features"]]
        [0, 10, 20]
    """
    options = options or IsobandsOptions()

    if len(breaks) < 2:
        logger.debug("Fewer than 2 breaks, no isobands")
        return feature_collection([])

    matrix, lons, lats = value_matrix(points, property_name)

    if matrix.shape[0] < 2 or matrix.shape[1] < 2:
        logger.warning(f"Grid of shape {matrix.shape} is too small for isobands")
        return feature_collection([])
    if np.isnan(matrix).all():
        logger.warning(f"No values for property '{property_name}', no isobands")
        return feature_collection([])

    if options.smoothing_sigma > 0:
        matrix = smooth_grid(matrix, options.smoothing_sigma)

    bands = band_thresholds(
        breaks,
        float(np.nanmax(matrix)),
        float(np.nanmin(matrix)),
        options.breaks_properties,
    )

    generator = contourpy.contour_generator(
        z=np.ma.masked_invalid(matrix),
        fill_type=contourpy.FillType.OuterOffset,
    )

    # Grid coordinates -> lon/lat
    scale = np.array([
        (lons[-1] - lons[0]) / (lons.size - 1),
        (lats[-1] - lats[0]) / (lats.size - 1),
    ])
    origin = np.array([lons[0], lats[0]])

    features = []
    for index, (threshold, bandwidth) in enumerate(zip(bands.thresholds, bands.bandwidths)):
        rings = band_rings(generator, threshold, bandwidth)
        if not rings:
            continue

        rings.sort(key=_ring_area, reverse=True)
        groups = group_nested_rings(rings)

        properties = dict(options.common_properties)
        if bands.properties is not None:
            properties.update(bands.properties[index])
        properties[property_name] = bands.breaks[index]

        features.append({
            "type": "Feature",
            "geometry": {
                "type": "MultiPolygon",
                "coordinates": [
                    [_close(ring * scale + origin) for ring in group]
                    for group in groups
                ],
            },
            "properties": properties,
        })

    logger.info(f"Generated {len(features)} isobands from {len(breaks)} breaks")
    return feature_collection(features)
