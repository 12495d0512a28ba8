"""Shared test fixtures for GeoCrop test suite."""

import pytest

from geocrop.core.config import DEFAULT_CONFIG
from geocrop.core.models import (
    Feature,
    MultiPolygon,
    Polygon,
)

SQUARE_RING = ((0, 0), (0, 10), (10, 10), (10, 0), (0, 0))

# A "U": two arms (x 0..3 and 7..10) joined by a base (y 0..3)
U_RING = (
    (0, 0), (10, 0), (10, 10), (7, 10), (7, 3),
    (3, 3), (3, 10), (0, 10), (0, 0),
)


@pytest.fixture
def config():
    return DEFAULT_CONFIG


@pytest.fixture
def square_boundary():
    return Polygon((SQUARE_RING,))


@pytest.fixture
def square_boundary_geojson():
    return {"type": "Polygon", "coordinates": [[list(c) for c in SQUARE_RING]]}


@pytest.fixture
def concave_boundary():
    return Polygon((U_RING,))


@pytest.fixture
def holed_boundary():
    hole = ((4, 4), (6, 4), (6, 6), (4, 6), (4, 4))
    return Polygon((SQUARE_RING, hole))


@pytest.fixture
def two_island_boundary():
    right = ((20, 0), (20, 10), (30, 10), (30, 0), (20, 0))
    return MultiPolygon(((SQUARE_RING,), (right,)))


@pytest.fixture
def make_feature():
    def _make(geometry, **properties):
        return Feature(geometry=geometry, properties=properties)

    return _make
