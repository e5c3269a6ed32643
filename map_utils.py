import logging

import folium
import numpy as np
from folium.plugins import Draw
from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import Nominatim

from flight_calculator import METERS_PER_DEGREE, BoundingBox, PlanningError

logger = logging.getLogger(__name__)

CIRCLE_VERTICES = 32

BASEMAPS = {
    "satellite": (
        "https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}",
        "Esri World Imagery"
    ),
    "street": ("OpenStreetMap", "© OpenStreetMap contributors")
}


def search_location(query):
    """Search for a location using Nominatim geocoding service"""
    try:
        geolocator = Nominatim(user_agent="survey_flight_planner", timeout=5)
        location = geolocator.geocode(query)
        if location:
            return location.latitude, location.longitude
        return None, None
    except (GeocoderTimedOut, GeocoderServiceError) as e:
        logger.warning(f"Location search error for {query!r}: {e}")
        return None, None


def create_map(center, zoom=16, map_type="satellite"):
    """Create a Folium map with polygon drawing controls on the chosen basemap."""
    tiles, attr = BASEMAPS[map_type]
    m = folium.Map(location=list(center), zoom_start=zoom, tiles=None)
    folium.TileLayer(tiles, attr=attr, name=map_type.title()).add_to(m)

    draw = Draw(
        draw_options={
            'polyline': False,
            'rectangle': True,
            'polygon': True,
            'circle': True,
            'marker': False,
            'circlemarker': False
        },
        edit_options={'edit': False}
    )
    m.add_child(draw)
    folium.LayerControl().add_to(m)
    return m


def circle_to_polygon(lon, lat, radius_meters, vertices=CIRCLE_VERTICES):
    # Convert radius from meters to approximate degrees
    radius_lat = radius_meters / METERS_PER_DEGREE
    radius_lon = radius_meters / (METERS_PER_DEGREE * np.cos(np.radians(lat)))
    angles = np.linspace(0, 2 * np.pi, vertices, endpoint=False)
    return [
        (float(lon + radius_lon * np.cos(a)), float(lat + radius_lat * np.sin(a)))
        for a in angles
    ]


def drawing_to_polygon(drawing):
    """Turn a Leaflet draw result (GeoJSON feature or geometry) into a vertex list.

    Returns None when nothing has been drawn yet.
    """
    if not drawing:
        return None

    geometry = drawing.get('geometry', drawing)
    if not geometry:
        return None
    properties = drawing.get('properties') or {}

    if geometry['type'] == 'Polygon':
        # First ring of coordinates; holes are ignored
        ring = geometry['coordinates'][0]
        return [(coord[0], coord[1]) for coord in ring]

    if geometry['type'] == 'Point':
        radius = geometry.get('radius', properties.get('radius'))
        if radius:
            lon, lat = geometry['coordinates'][:2]
            return circle_to_polygon(lon, lat, radius)

    raise PlanningError(f"Unsupported survey area geometry: {geometry['type']}")


def calculate_area_bounds(polygon):
    """Calculate the bounds, center and approximate size of the drawn area"""
    bounds = BoundingBox.from_points(polygon)
    center_lat = (bounds.min_y + bounds.max_y) / 2
    center_lon = (bounds.min_x + bounds.max_x) / 2

    # Width and height in meters (flat approximation)
    width = bounds.width * METERS_PER_DEGREE * np.cos(np.radians(center_lat))
    height = bounds.height * METERS_PER_DEGREE

    return {
        'min_lat': bounds.min_y,
        'max_lat': bounds.max_y,
        'min_lon': bounds.min_x,
        'max_lon': bounds.max_x,
        'center_lat': center_lat,
        'center_lon': center_lon,
        'width': float(width),
        'height': float(height)
    }


def add_survey_area(m, polygon, color="orange"):
    folium.Polygon(
        [(lat, lon) for lon, lat in polygon],
        color=color,
        weight=2,
        fill=True,
        fill_opacity=0.15,
        tooltip="Survey area"
    ).add_to(m)
    return m


def add_flight_path(m, path, color="blue"):
    """Draw the path as a connected line with a marker per waypoint."""
    points = [(lat, lon) for lon, lat in path]
    folium.PolyLine(points, weight=2, color=color, opacity=0.8).add_to(m)

    for i, point in enumerate(points):
        if i == 0:
            icon = folium.Icon(color="green", icon="play")
        elif i == len(points) - 1:
            icon = folium.Icon(color="red", icon="stop")
        else:
            icon = folium.Icon(color=color)
        folium.Marker(
            location=point,
            popup=f"Waypoint {i + 1}",
            icon=icon
        ).add_to(m)
    return m
