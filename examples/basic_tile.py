"""
Basic Tile Rendering Example

This example demonstrates how to render a single map tile with the geotiler
package. It shows the simplest workflow: build a few GeoJSON features, pick a
slippy-map tile, and render the features with simplestyle paint and labels.

Output: A PNG file with two polygons, a smoothed route and a few labelled
points, plus the debug border and tile index.
"""

import logging
from pathlib import Path

from geotiler import (
    BoundingBox,
    Config,
    PropertyLabelDelegate,
    RenderError,
    SimpleStyleDelegate,
    render_tile,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# ============================================================================
# Features
# ============================================================================

# Tile 8/131/84 covers roughly 4.2-5.6E, 52.0-52.9N (the Amsterdam area)
tile_index = (8, 131, 84)
bbox = BoundingBox.from_tile_index(*tile_index)

print(f"Tile {tile_index}: {bbox}")
print()

features = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [[
                    [4.35, 52.15], [5.05, 52.10], [5.40, 52.45],
                    [5.00, 52.80], [4.40, 52.70], [4.35, 52.15],
                ]],
            },
            "properties": {
                "name": "Region A",
                "fill": "#cfe8cf",
                "stroke": "#2e7d32",
                "stroke-width": 2,
                "label-position": "outline",
                "label-count": 2,
            },
        },
        {
            "type": "Feature",
            "geometry": {
                "type": "Polygon",
                "coordinates": [[
                    [4.70, 52.35], [4.95, 52.35], [4.95, 52.55],
                    [4.70, 52.55], [4.70, 52.35],
                ]],
            },
            "properties": {
                "name": "Region B",
                "fill": "#ffe0b2",
                "stroke": "#ef6c00",
                "bezier": True,
            },
        },
        {
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [[4.25, 52.05], [4.60, 52.30], [4.90, 52.20], [5.50, 52.60]],
            },
            "properties": {"stroke": "#1565c0", "stroke-width": 3, "bezier": True},
        },
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [4.90, 52.37]},
            "properties": {"name": "Amsterdam", "fill": "#b71c1c"},
        },
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [4.48, 52.16]},
            "properties": {"name": "Leiden", "fill": "#b71c1c"},
        },
    ],
}

# ============================================================================
# Render
# ============================================================================

# Mercator latitudes line the tile up with standard web maps
config = Config(padding=8, projection="mercator", background_color="white", debug=True)

Path("output").mkdir(parents=True, exist_ok=True)

print("Rendering tile...")
try:
    output = render_tile(
        features,
        bbox,
        SimpleStyleDelegate({"stroke": "#333333"}),
        label_delegate=PropertyLabelDelegate("name", defaults={"font_size": 11}),
        config=config,
        output_path="output/basic_tile.png",
        tile_index=tile_index,
    )
    print(f"  Success: {output}")
except RenderError as e:
    print(f"  Error: {e}")

print()
print("=" * 60)
print("Basic tile complete!")
