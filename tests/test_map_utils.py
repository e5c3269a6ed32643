import folium
import pytest
from geopy.exc import GeocoderTimedOut

import map_utils
from flight_calculator import PlanningError, generate_path
from map_utils import (
    add_flight_path,
    calculate_area_bounds,
    circle_to_polygon,
    create_map,
    drawing_to_polygon,
    search_location,
)


def test_drawing_to_polygon_feature(drawn_polygon):
    polygon = drawing_to_polygon(drawn_polygon)

    assert len(polygon) == 5
    assert polygon[0] == (-74.01, 40.70)
    # closing point is left for the planner to drop
    assert len(generate_path(polygon, "perimeter")) == 4


def test_drawing_to_polygon_bare_geometry(drawn_polygon):
    assert drawing_to_polygon(drawn_polygon["geometry"]) == drawing_to_polygon(drawn_polygon)


@pytest.mark.parametrize("drawing", [None, {}, {"type": "Feature", "geometry": None}])
def test_nothing_drawn(drawing):
    assert drawing_to_polygon(drawing) is None


def test_circle_drawing_becomes_polygon():
    drawing = {
        "type": "Feature",
        "properties": {"radius": 111},
        "geometry": {"type": "Point", "coordinates": [10.0, 0.0]},
    }
    polygon = drawing_to_polygon(drawing)

    assert len(polygon) == map_utils.CIRCLE_VERTICES
    lats = [lat for _, lat in polygon]
    assert max(lats) == pytest.approx(0.001)
    assert min(lats) == pytest.approx(-0.001)
    assert polygon[0] == pytest.approx((10.001, 0.0))


def test_circle_to_polygon_scales_longitude():
    polygon = circle_to_polygon(0.0, 60.0, 111, vertices=4)

    # cos(60°) = 0.5 doubles the longitude radius
    assert polygon[0] == pytest.approx((0.002, 60.0))
    assert polygon[1] == pytest.approx((0.0, 60.001))


def test_unsupported_geometry():
    with pytest.raises(PlanningError, match="LineString"):
        drawing_to_polygon({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})


def test_calculate_area_bounds():
    bounds = calculate_area_bounds([(0.0, 0.0), (0.01, 0.0), (0.01, 0.02), (0.0, 0.02)])

    assert bounds["min_lon"] == 0.0
    assert bounds["max_lat"] == 0.02
    assert bounds["center_lat"] == pytest.approx(0.01)
    assert bounds["center_lon"] == pytest.approx(0.005)
    assert bounds["width"] == pytest.approx(1110, rel=1e-3)
    assert bounds["height"] == pytest.approx(2220)


@pytest.mark.parametrize("map_type", ["satellite", "street"])
def test_create_map(map_type):
    m = create_map((40.7, -74.0), map_type=map_type)

    assert isinstance(m, folium.Map)
    assert m.location == [40.7, -74.0]


def test_add_flight_path_draws_markers_and_line(square):
    path = generate_path(square, "grid", subdivisions=2)
    m = add_flight_path(folium.Map(location=[5, 5]), path)

    children = list(m._children.values())
    markers = [c for c in children if isinstance(c, folium.Marker)]
    lines = [c for c in children if isinstance(c, folium.PolyLine)]
    assert len(markers) == len(path)
    assert len(lines) == 1


def test_search_location_timeout(monkeypatch):
    class TimingOut:
        def __init__(self, **kwargs):
            pass

        def geocode(self, query):
            raise GeocoderTimedOut("slow")

    monkeypatch.setattr(map_utils, "Nominatim", TimingOut)
    assert search_location("Anywhere") == (None, None)


def test_search_location_found(monkeypatch):
    class Found:
        latitude = 40.7
        longitude = -74.0

    class Geocoder:
        def __init__(self, **kwargs):
            pass

        def geocode(self, query):
            return Found()

    monkeypatch.setattr(map_utils, "Nominatim", Geocoder)
    assert search_location("New York") == (40.7, -74.0)
