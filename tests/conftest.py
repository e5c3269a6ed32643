"""
Shared pytest fixtures for the survey planner tests.
Ensures the project root is on sys.path so the flat modules import.
"""
import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)


@pytest.fixture
def square():
    """10 x 10 square, open ring."""
    return [(0, 0), (10, 0), (10, 10), (0, 10)]


@pytest.fixture
def triangle():
    return [(-74.01, 40.70), (-74.00, 40.70), (-74.005, 40.71)]


@pytest.fixture
def drawn_polygon():
    """What the map's draw control returns for a rectangle (closed GeoJSON ring)."""
    return {
        "type": "Feature",
        "properties": {},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[
                [-74.01, 40.70],
                [-74.00, 40.70],
                [-74.00, 40.71],
                [-74.01, 40.71],
                [-74.01, 40.70],
            ]],
        },
    }
