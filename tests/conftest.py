"""Pytest configuration and shared fixtures."""

import pytest
from fakes import ACCRA, FakeGeocoder

from geoengine.domain.value_objects.coordinates import Coordinates


@pytest.fixture
def fake_geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def accra() -> Coordinates:
    return ACCRA
