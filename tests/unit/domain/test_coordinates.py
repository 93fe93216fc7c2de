"""Tests for the Coordinates value object."""

import math

import pytest

from geoengine.domain.value_objects.coordinates import Coordinates


def test_haversine_same_point():
    """Distance from a point to itself should be 0."""
    p = Coordinates(latitude=5.6037, longitude=-0.1870)
    assert p.haversine_km(p) == 0.0


def test_haversine_accra_to_kumasi():
    """Accra to Kumasi is roughly 200 km in a straight line."""
    accra = Coordinates(latitude=5.6037, longitude=-0.1870)
    kumasi = Coordinates(latitude=6.6885, longitude=-1.6244)
    distance = accra.haversine_km(kumasi)
    assert 190 < distance < 210


def test_haversine_antipodes_is_half_circumference():
    a = Coordinates(latitude=0.0, longitude=0.0)
    b = Coordinates(latitude=0.0, longitude=180.0)
    assert a.haversine_km(b) == pytest.approx(math.pi * 6371.0, rel=1e-9)


def test_coordinates_is_frozen():
    """Coordinates should be immutable."""
    p = Coordinates(latitude=5.0, longitude=-0.1)
    with pytest.raises(AttributeError):
        p.latitude = 6.0


def test_coordinates_hashable_and_equal_by_value():
    assert Coordinates(1.0, 2.0) == Coordinates(1.0, 2.0)
    assert len({Coordinates(1.0, 2.0), Coordinates(1.0, 2.0)}) == 1


# ─── Validation ──────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "lat, lon",
    [(90.0, 180.0), (-90.0, -180.0), (0.0, 0.0), (5.6037, -0.187)],
)
def test_valid_ranges(lat, lon):
    c = Coordinates(latitude=lat, longitude=lon)
    assert c.is_valid()
    assert c.validation_error() is None


@pytest.mark.parametrize(
    "lat, lon, fragment",
    [
        (90.0001, 0.0, "Latitude"),
        (-91.0, 0.0, "Latitude"),
        (0.0, 180.5, "Longitude"),
        (0.0, -200.0, "Longitude"),
        (float("nan"), 0.0, "finite"),
        (0.0, float("inf"), "finite"),
    ],
)
def test_invalid_ranges(lat, lon, fragment):
    c = Coordinates(latitude=lat, longitude=lon)
    assert not c.is_valid()
    assert fragment in c.validation_error()


def test_to_dict():
    assert Coordinates(5.6, -0.18).to_dict() == {"latitude": 5.6, "longitude": -0.18}
