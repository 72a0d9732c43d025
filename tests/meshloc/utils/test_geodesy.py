"""Unit tests for meshloc.utils.geodesy module."""

import numpy as np
import pytest

from meshloc.utils import EARTH_RADIUS_M, haversine_distance, offset_to_latlon


class TestHaversineDistance:
    """Test suite for haversine_distance()."""

    def test_one_degree_on_equator(self):
        d = haversine_distance(0.0, 0.0, 0.0, 1.0)
        assert d == pytest.approx(EARTH_RADIUS_M * np.pi / 180.0)

    def test_scalar_returns_float(self):
        assert isinstance(haversine_distance(1.0, 2.0, 1.0, 2.0), float)

    def test_vectorized(self):
        d = haversine_distance(np.zeros(3), np.zeros(3), np.array([0.0, 1.0, 0.0]), np.zeros(3))
        assert d.shape == (3,)
        assert d[0] == pytest.approx(0.0)
        assert d[1] == pytest.approx(EARTH_RADIUS_M * np.pi / 180.0)

    def test_symmetric(self):
        a = haversine_distance(52.52, 13.405, 48.8566, 2.3522)
        b = haversine_distance(48.8566, 2.3522, 52.52, 13.405)
        assert a == pytest.approx(b)


class TestOffsetToLatLon:
    """Test suite for offset_to_latlon()."""

    def test_zero_offset(self):
        assert offset_to_latlon(52.52, 13.405, 0.0, 0.0) == (52.52, 13.405)

    @pytest.mark.parametrize("east, north", [(10.0, 0.0), (0.0, 25.0), (-30.0, 40.0)])
    def test_distance_preserved(self, east, north):
        lat, lon = offset_to_latlon(52.52, 13.405, east, north)
        d = haversine_distance(52.52, 13.405, lat, lon)
        assert d == pytest.approx(np.hypot(east, north), rel=1e-4)

    def test_direction(self):
        lat, lon = offset_to_latlon(0.0, 0.0, 100.0, 0.0)
        assert lat == pytest.approx(0.0)
        assert lon > 0.0
