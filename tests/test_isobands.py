"""Tests for the geotiler.calculations isoband and grid modules."""

import numpy as np
import pytest
import shapely
import xarray as xr

from geotiler.calculations import (
    IsobandsOptions,
    band_thresholds,
    grid_points_from_dataarray,
    group_nested_rings,
    isobands,
    smooth_grid,
    value_matrix,
)
from geotiler.exceptions import InvalidParameterError


def _rings_of(feature):
    return [ring for polygon in feature["geometry"]["coordinates"] for ring in polygon]


class TestBandThresholds:
    """Tests for the band_thresholds function."""

    def test_increasing_breaks(self):
        bands = band_thresholds([0, 1, 5], extreme_max=2, extreme_min=0)
        assert bands.breaks == [0, 1]
        assert bands.thresholds == [0, 1]
        assert bands.bandwidths == [2, 1]
        assert bands.properties is None

    def test_decreasing_breaks(self):
        bands = band_thresholds([5, 1, 0], extreme_max=3, extreme_min=0.5)
        assert bands.breaks == [5, 1]
        assert bands.thresholds == [0.5, 0.5]
        assert bands.bandwidths == [4.5, 0.5]

    def test_dropping_keeps_properties_aligned(self):
        bands = band_thresholds(
            [0, 3, 1],
            extreme_max=2,
            extreme_min=0,
            breaks_properties=[{"name": "zero"}, {"name": "three"}, {"name": "one"}],
        )
        assert bands.breaks == [0, 1]
        assert bands.properties == [{"name": "zero"}, {"name": "one"}]

    def test_short_properties_list(self):
        bands = band_thresholds([0, 1], extreme_max=2, extreme_min=0, breaks_properties=[{"a": 1}])
        assert bands.properties == [{"a": 1}, {}]

    def test_all_bands_positive(self):
        bands = band_thresholds([0, 1, 2, 3, 4], extreme_max=2.5, extreme_min=0)
        assert all(bandwidth > 0 for bandwidth in bands.bandwidths)


class TestGroupNestedRings:
    """Tests for the group_nested_rings function."""

    def test_groups_contained_rings(self):
        big = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=float)
        small = np.array([[2, 2], [4, 2], [4, 4], [2, 4]], dtype=float)
        apart = np.array([[20, 20], [22, 20], [22, 22], [20, 22]], dtype=float)

        groups = group_nested_rings([big, apart, small])

        assert len(groups) == 2
        assert groups[0][0] is big
        assert groups[0][1] is small
        assert len(groups[1]) == 1 and groups[1][0] is apart

    def test_ring_on_boundary_counts_as_inside(self):
        big = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=float)
        touching = np.array([[0, 0], [5, 0], [5, 5]], dtype=float)
        assert len(group_nested_rings([big, touching])) == 1

    def test_empty(self):
        assert group_nested_rings([]) == []


class TestValueMatrix:
    """Tests for the value_matrix function."""

    def test_rows_by_latitude_columns_by_longitude(self, make_grid):
        points = make_grid([[1, 2], [3, 4]], lons=[5, 6], lats=[40, 41])
        points["features"].reverse()

        matrix, lons, lats = value_matrix(points, "value")

        np.testing.assert_array_equal(matrix, [[1, 2], [3, 4]])
        np.testing.assert_array_equal(lons, [5, 6])
        np.testing.assert_array_equal(lats, [40, 41])

    def test_sparse_rows_keep_alignment(self, make_point):
        points = [
            make_point(0, 0, value=1), make_point(1, 0, value=2), make_point(2, 0, value=3),
            make_point(0, 1, value=4), make_point(2, 1, value=6),
        ]
        matrix, _, _ = value_matrix(points, "value")

        assert matrix[1, 0] == 4
        assert np.isnan(matrix[1, 1])
        assert matrix[1, 2] == 6

    def test_missing_and_non_numeric_values(self, make_point):
        points = [
            make_point(0, 0, value=1), make_point(1, 0, value="high"),
            make_point(0, 1), make_point(1, 1, value=True),
        ]
        matrix, _, _ = value_matrix(points, "value")
        assert matrix[0, 0] == 1
        assert np.isnan(matrix[0, 1])
        assert np.isnan(matrix[1, 0])
        assert np.isnan(matrix[1, 1])

    def test_rejects_non_point_features(self, make_polygon):
        with pytest.raises(InvalidParameterError):
            value_matrix([make_polygon([[[0, 0], [1, 0], [1, 1], [0, 0]]])], "value")


class TestSmoothGrid:
    """Tests for the smooth_grid function."""

    def test_reduces_peak(self):
        matrix = np.zeros((7, 7))
        matrix[3, 3] = 10.0
        smoothed = smooth_grid(matrix, 1.0)
        assert smoothed[3, 3] < 10.0
        assert smoothed[3, 4] > 0.0

    def test_preserves_nan_cells(self):
        matrix = np.arange(25, dtype=float).reshape(5, 5)
        matrix[0, 0] = np.nan
        smoothed = smooth_grid(matrix, 1.0)
        assert np.isnan(smoothed[0, 0])
        assert not np.isnan(smoothed[1:, 1:]).any()

    def test_zero_sigma_is_identity(self):
        matrix = np.array([[1.0, 2.0], [3.0, 4.0]])
        np.testing.assert_array_equal(smooth_grid(matrix, 0), matrix)

    def test_negative_sigma(self):
        with pytest.raises(InvalidParameterError):
            smooth_grid(np.zeros((3, 3)), -1)


class TestIsobands:
    """Tests for the isobands function."""

    def test_fewer_than_two_breaks(self, cone_grid):
        assert isobands(cone_grid, "value", [1]) == {"type": "FeatureCollection", "features": []}
        assert isobands(cone_grid, "value", [])["features"] == []

    def test_two_by_two_grid(self, make_grid):
        """The second band has zero width and is dropped."""
        points = make_grid([[0, 0], [1, 1]])
        result = isobands(points, "value", [0, 1])

        assert len(result["features"]) <= 1
        for feature in result["features"]:
            assert feature["properties"]["value"] == 0

    def test_increasing_bands_are_tagged_with_breaks(self, cone_grid):
        result = isobands(cone_grid, "value", [0.5, 1.5, 5])

        assert [f["properties"]["value"] for f in result["features"]] == [0.5, 1.5]
        for feature in result["features"]:
            assert feature["type"] == "Feature"
            assert feature["geometry"]["type"] == "MultiPolygon"

    def test_dropped_break_keeps_properties_aligned(self, cone_grid):
        options = IsobandsOptions(
            common_properties={"stroke": "black", "value": "overridden"},
            breaks_properties=[{"fill": "blue"}, {"fill": "green"}, {"fill": "red"}],
        )
        result = isobands(cone_grid, "value", [0.5, 5, 1.5], options)

        properties = [f["properties"] for f in result["features"]]
        assert properties == [
            {"stroke": "black", "value": 0.5, "fill": "blue"},
            {"stroke": "black", "value": 1.5, "fill": "red"},
        ]

    def test_decreasing_bands(self, cone_grid):
        result = isobands(cone_grid, "value", [1.5, 0.5])
        assert [f["properties"]["value"] for f in result["features"]] == [1.5, 0.5]

    def test_rings_are_closed_and_within_grid(self, cone_grid):
        result = isobands(cone_grid, "value", [0.5, 1.5])

        for feature in result["features"]:
            for ring in _rings_of(feature):
                assert len(ring) >= 4
                assert ring[0] == ring[-1]
                for lon, lat in ring:
                    assert 10 <= lon <= 14
                    assert 50 <= lat <= 54

    def test_inner_band_is_smaller(self, cone_grid):
        result = isobands(cone_grid, "value", [0.5, 1.5])
        outer, inner = (
            shapely.Polygon(_rings_of(f)[0]).area for f in result["features"]
        )
        assert inner < outer

    def test_annulus_becomes_polygon_with_hole(self, make_grid):
        values = [
            [0, 0, 0, 0, 0],
            [0, 2, 2, 2, 0],
            [0, 2, 0, 2, 0],
            [0, 2, 2, 2, 0],
            [0, 0, 0, 0, 0],
        ]
        result = isobands(make_grid(values), "value", [1, 3])

        assert len(result["features"]) == 1
        polygons = result["features"][0]["geometry"]["coordinates"]
        assert len(polygons) == 1
        outer, hole = polygons[0]
        assert shapely.Polygon(outer).covers(shapely.Polygon(hole))
        assert shapely.Polygon(hole).contains(shapely.Point(2, 2))

    def test_separate_peaks_become_separate_polygons(self, make_grid):
        values = [
            [0, 0, 0, 0, 0],
            [0, 2, 0, 2, 0],
            [0, 0, 0, 0, 0],
        ]
        result = isobands(make_grid(values), "value", [1, 3])

        polygons = result["features"][0]["geometry"]["coordinates"]
        assert len(polygons) == 2
        assert all(len(polygon) == 1 for polygon in polygons)

    def test_decreasing_band_covers_plateau_at_minimum(self, make_grid):
        """A flat low at the grid minimum is inside every decreasing band."""
        values = [[5.0] * 5 for _ in range(5)]
        for row in range(1, 4):
            for col in range(1, 4):
                values[row][col] = 0.0
        result = isobands(make_grid(values), "value", [3, 1])

        assert [f["properties"]["value"] for f in result["features"]] == [3, 1]
        for feature in result["features"]:
            polygons = feature["geometry"]["coordinates"]
            assert all(len(polygon) == 1 for polygon in polygons)
            band = shapely.MultiPolygon([(polygon[0], []) for polygon in polygons])
            assert band.covers(shapely.Point(2, 2))
            assert band.covers(shapely.Point(1, 1))

    def test_increasing_break_at_minimum_covers_whole_grid(self, make_grid):
        values = [
            [0, 0, 0],
            [0, 2, 0],
            [0, 0, 0],
        ]
        result = isobands(make_grid(values), "value", [0, 1])

        lowest = result["features"][0]
        assert lowest["properties"]["value"] == 0
        outer = shapely.Polygon(_rings_of(lowest)[0])
        assert outer.covers(shapely.Point(0.1, 0.1))
        assert outer.area == pytest.approx(4.0)

    def test_rings_have_no_repeated_vertices(self, make_grid):
        values = [[5.0] * 5 for _ in range(5)]
        for row in range(1, 4):
            for col in range(1, 4):
                values[row][col] = 0.0
        rng = np.random.default_rng(3)
        grids = [values, rng.uniform(0, 10, size=(8, 8)).tolist()]

        for grid in grids:
            for feature in isobands(make_grid(grid), "value", [3, 1, 7])["features"]:
                for ring in _rings_of(feature):
                    open_ring = ring[:-1]
                    for a, b in zip(open_ring, open_ring[1:] + open_ring[:1]):
                        assert a != b

    def test_grouped_rings_are_covered_by_first(self, make_grid):
        rng = np.random.default_rng(7)
        values = rng.uniform(0, 10, size=(12, 12)).tolist()
        result = isobands(make_grid(values), "value", [2, 4, 6, 8])

        for feature in result["features"]:
            for polygon in feature["geometry"]["coordinates"]:
                outer = shapely.Polygon(polygon[0])
                for ring in polygon[1:]:
                    assert outer.covers(shapely.MultiPoint(ring))

    def test_all_values_missing(self, make_grid):
        points = make_grid([[None, None], [None, None]])
        assert isobands(points, "value", [0, 1])["features"] == []

    def test_single_row_grid(self, make_grid):
        assert isobands(make_grid([[0, 1, 2]]), "value", [0, 1])["features"] == []

    def test_sparse_grid(self, make_grid):
        values = [
            [0, 1, 2, 1],
            [1, 2, None, 2],
            [0, 1, 2, 1],
        ]
        result = isobands(make_grid(values), "value", [0.5, 1.5])
        assert len(result["features"]) >= 1

    def test_smoothing_option(self, cone_grid):
        smoothed = isobands(cone_grid, "value", [0.5, 1.5], IsobandsOptions(smoothing_sigma=1.0))
        assert all(f["properties"]["value"] in (0.5, 1.5) for f in smoothed["features"])


class TestGridPointsFromDataArray:
    """Tests for the grid_points_from_dataarray function."""

    def _dataarray(self, dims=("lat", "lon")):
        lats = np.array([50.0, 51.0, 52.0])
        lons = np.array([4.0, 5.0])
        values = np.array([[1.0, 2.0], [3.0, np.nan], [5.0, 6.0]])
        da = xr.DataArray(values, coords={"lat": lats, "lon": lons}, dims=("lat", "lon"), name="t2m")
        return da.transpose(*dims)

    def test_points_from_1d_coords(self):
        collection = grid_points_from_dataarray(self._dataarray())

        features = collection["features"]
        assert len(features) == 6
        assert features[0]["geometry"]["coordinates"] == [4.0, 50.0]
        assert features[0]["properties"] == {"t2m": 1.0}
        assert features[3]["properties"] == {}

    def test_transposed_dims(self):
        collection = grid_points_from_dataarray(self._dataarray(("lon", "lat")), "temperature")
        assert collection["features"][1]["properties"] == {"temperature": 2.0}
        assert collection["features"][1]["geometry"]["coordinates"] == [5.0, 50.0]

    def test_skip_missing(self):
        collection = grid_points_from_dataarray(self._dataarray(), skip_missing=True)
        assert len(collection["features"]) == 5

    def test_missing_coordinates(self):
        da = xr.DataArray(np.zeros((2, 2)), dims=("a", "b"))
        with pytest.raises(InvalidParameterError):
            grid_points_from_dataarray(da)

    def test_feeds_isobands(self):
        da = xr.DataArray(
            np.array([[1.0, 2.0, 3.0], [2.0, 4.0, 6.0], [3.0, 6.0, 9.0]]),
            coords={"latitude": [50.0, 51.0, 52.0], "longitude": [4.0, 5.0, 6.0]},
            dims=("latitude", "longitude"),
            name="t2m",
        )
        points = grid_points_from_dataarray(da)
        result = isobands(points, "t2m", [2.5, 4.5])
        assert [f["properties"]["t2m"] for f in result["features"]] == [2.5, 4.5]
