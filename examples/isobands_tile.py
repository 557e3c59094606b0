"""
Isobands Tile Example

This example demonstrates the isoband workflow: build a gridded field as an
xarray DataArray, convert it to GeoJSON points, classify it into isobands
and render the bands onto a tile with outline labels.

Output: bands.geojson with one MultiPolygon per band and a PNG tile where
every band is labelled along its outline with an arrow pointing inside.
"""

import logging
from pathlib import Path

import numpy as np
import xarray as xr

from geotiler import (
    BoundingBox,
    Config,
    IsobandsOptions,
    PropertyLabelDelegate,
    SimpleStyleDelegate,
    grid_points_from_dataarray,
    isobands,
    render_tile,
)
from geotiler.geojson import save_geojson

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# ============================================================================
# Synthetic Temperature Field
# ============================================================================

print("Building synthetic temperature grid")
print("-" * 60)

lons = np.linspace(0.0, 10.0, 41)
lats = np.linspace(45.0, 55.0, 41)
lon2d, lat2d = np.meshgrid(lons, lats)

# Two warm cores over a north-south gradient
temperature = (
    18.0
    - 0.8 * (lat2d - 45.0)
    + 6.0 * np.exp(-((lon2d - 3.0) ** 2 + (lat2d - 48.0) ** 2) / 2.0)
    + 4.0 * np.exp(-((lon2d - 7.5) ** 2 + (lat2d - 52.0) ** 2) / 1.5)
)

field = xr.DataArray(
    temperature,
    coords={"lat": lats, "lon": lons},
    dims=("lat", "lon"),
    name="temperature",
)

print(f"Grid: {field.sizes['lon']}x{field.sizes['lat']} points")
print(f"Range: {float(field.min()):.1f} to {float(field.max()):.1f} °C")
print()

# ============================================================================
# Isobands
# ============================================================================

breaks = [10, 12, 14, 16, 18, 20, 22]
colors = ["#2c7bb6", "#65a9cf", "#abd9e9", "#ffffbf", "#fdae61", "#f46d43", "#d7191c"]

options = IsobandsOptions(
    common_properties={
        "stroke": "#444444",
        "stroke-width": 1,
        "bezier": True,
        "label-position": "outline",
        "label-count": 2,
    },
    breaks_properties=[{"fill": color} for color in colors],
    smoothing_sigma=1.0,
)

points = grid_points_from_dataarray(field)
bands = isobands(points, "temperature", breaks, options)

Path("output").mkdir(parents=True, exist_ok=True)
save_geojson(bands, "output/bands.geojson")

print(f"Generated {len(bands['features'])} bands:")
for feature in bands["features"]:
    polygons = feature["geometry"]["coordinates"]
    print(f"  >= {feature['properties']['temperature']:>4} °C: {len(polygons)} polygon(s)")
print()

# ============================================================================
# Render
# ============================================================================

print("Rendering isobands tile...")

output = render_tile(
    bands,
    BoundingBox(0.0, 45.0, 10.0, 55.0),
    SimpleStyleDelegate(),
    label_delegate=PropertyLabelDelegate(
        "temperature",
        fmt="{}°",
        accessories=True,
        defaults={"font_size": 10, "label_clear_rect": True},
    ),
    config=Config(width=512, height=512, background_color="white"),
    output_path="output/isobands_tile.png",
)

print(f"  Success: {output}")
print()
print("=" * 60)
print("Isobands tile complete!")
