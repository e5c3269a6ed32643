"""
Coverage flight-path generation for survey missions.

Coordinates are handled as flat (longitude, latitude) pairs. Nothing here
touches the map widget or the session: the UI hands in a vertex list and a
pattern and gets a fresh list of waypoints back.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
WaypointPath = List[Point]

DEFAULT_SUBDIVISIONS = 10
MAX_WAYPOINTS = 100_000
METERS_PER_DEGREE = 111000


class PlanningError(ValueError):
    """Base class for every path generation failure."""

    user_message = "Could not generate a flight path."

    def __init__(self, message=None):
        super().__init__(message or self.user_message)


class NoAreaDefined(PlanningError):
    user_message = "Please define a survey area first by using the polygon tool."


class DegeneratePolygon(PlanningError):
    user_message = "The survey area needs at least 3 points. Please draw the area again."


class InvalidCoordinate(PlanningError):
    user_message = "The survey area contains an invalid coordinate."


class InvalidSubdivisions(PlanningError):
    user_message = "Line density must be a whole number of at least 1."


class ExcessiveDensity(PlanningError):
    user_message = "Too many waypoints for this survey area. Lower the line density."


class UnknownPattern(PlanningError):
    user_message = "Unknown mission pattern."


class UnknownTransitPolicy(PlanningError):
    user_message = "Unknown crosshatch transit policy."


class PatternKind(str, Enum):
    GRID = "grid"
    CROSSHATCH = "crosshatch"
    PERIMETER = "perimeter"

    @classmethod
    def parse(cls, value):
        """Accept a member or the UI tag ("grid", "Crosshatch", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownPattern(f"Unknown mission pattern: {value!r}") from None


class TransitPolicy(str, Enum):
    # DIRECT keeps the jump from the end of the horizontal pass to the
    # bottom-left corner; NEAREST_CORNER starts the vertical pass where the
    # horizontal one finished.
    DIRECT = "direct"
    NEAREST_CORNER = "nearest_corner"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownTransitPolicy(f"Unknown transit policy: {value!r}") from None


@dataclass(frozen=True)
class BoundingBox:
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "BoundingBox":
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min(xs), max(xs), min(ys), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def normalize_polygon(polygon: Optional[Iterable[Sequence[float]]]) -> List[Point]:
    """Copy the vertices into an open ring of float tuples and validate them."""
    if polygon is None:
        raise NoAreaDefined()

    try:
        vertices = list(polygon)
    except TypeError:
        raise InvalidCoordinate(f"Survey area is not a list of vertices: {polygon!r}") from None

    points = []
    for vertex in vertices:
        try:
            x, y = float(vertex[0]), float(vertex[1])
        except (TypeError, ValueError, IndexError):
            raise InvalidCoordinate(f"Invalid vertex: {vertex!r}") from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidCoordinate(f"Non-finite vertex: ({x}, {y})")
        points.append((x, y))

    if len(points) > 1 and points[0] == points[-1]:
        points.pop()

    if len(points) < 3:
        raise DegeneratePolygon(
            f"Survey area has {len(points)} vertices, at least 3 are required"
        )
    return points


def _line_positions(low, high, subdivisions, descending=False):
    if high <= low:
        return [low]
    step = (high - low) / subdivisions
    positions = [low + i * step for i in range(subdivisions)]
    # i * step can land an ulp short of the far edge
    positions.append(high)
    if descending:
        positions.reverse()
    return positions


def horizontal_sweep(bounds: BoundingBox, subdivisions: int) -> WaypointPath:
    """Boustrophedon over horizontal lines, bottom to top, first line flown west to east."""
    path = []
    for i, y in enumerate(_line_positions(bounds.min_y, bounds.max_y, subdivisions)):
        if i % 2 == 0:
            path.append((bounds.min_x, y))
            path.append((bounds.max_x, y))
        else:
            path.append((bounds.max_x, y))
            path.append((bounds.min_x, y))
    return path


def vertical_sweep(bounds: BoundingBox, subdivisions: int,
                   start_x_high: bool = False, start_y_high: bool = False) -> WaypointPath:
    """Boustrophedon over vertical lines.

    By default lines run west to east and the first one is flown bottom to
    top. ``start_x_high`` begins at the eastern edge instead and
    ``start_y_high`` flies the first line top to bottom.
    """
    low, high = bounds.min_y, bounds.max_y
    if start_y_high:
        low, high = high, low

    path = []
    xs = _line_positions(bounds.min_x, bounds.max_x, subdivisions, descending=start_x_high)
    for i, x in enumerate(xs):
        if i % 2 == 0:
            path.append((x, low))
            path.append((x, high))
        else:
            path.append((x, high))
            path.append((x, low))
    return path


def _check_subdivisions(subdivisions):
    if isinstance(subdivisions, bool) or not isinstance(subdivisions, numbers.Integral):
        raise InvalidSubdivisions(f"subdivisions must be an integer, got {subdivisions!r}")
    if subdivisions < 1:
        raise InvalidSubdivisions(f"subdivisions must be >= 1, got {subdivisions}")
    return int(subdivisions)


def _lines_per_pass(extent, subdivisions):
    # a flat box collapses to a single line
    return 1 if extent <= 0 else subdivisions + 1


def estimate_waypoint_count(pattern, subdivisions, points):
    """Exact number of waypoints ``generate_path`` will emit for ``points``."""
    pattern = PatternKind.parse(pattern)
    if pattern is PatternKind.PERIMETER:
        return len(points)
    bounds = BoundingBox.from_points(points)
    count = 2 * _lines_per_pass(bounds.height, subdivisions)
    if pattern is PatternKind.CROSSHATCH:
        count += 2 * _lines_per_pass(bounds.width, subdivisions)
    return count


def generate_path(polygon, pattern, subdivisions=DEFAULT_SUBDIVISIONS,
                  transit=TransitPolicy.DIRECT, max_waypoints=MAX_WAYPOINTS) -> WaypointPath:
    """Build the ordered waypoint list covering ``polygon`` with ``pattern``.

    Every input is checked before any waypoint is produced, so a call either
    returns the complete path or raises a ``PlanningError``.
    """
    pattern = PatternKind.parse(pattern)
    transit = TransitPolicy.parse(transit)
    points = normalize_polygon(polygon)
    subdivisions = _check_subdivisions(subdivisions)

    expected = estimate_waypoint_count(pattern, subdivisions, points)
    if expected > max_waypoints:
        logger.warning(
            "Rejected %s path: %d waypoints exceeds limit of %d",
            pattern.value, expected, max_waypoints,
        )
        if pattern is PatternKind.PERIMETER:
            cause = f"perimeter with {len(points)} vertices"
        else:
            cause = f"{pattern.value} with {subdivisions} subdivisions"
        raise ExcessiveDensity(
            f"{cause} would produce {expected} waypoints (limit {max_waypoints})"
        )

    if pattern is PatternKind.PERIMETER:
        path = list(points)
    elif pattern is PatternKind.GRID:
        path = horizontal_sweep(BoundingBox.from_points(points), subdivisions)
    elif pattern is PatternKind.CROSSHATCH:
        bounds = BoundingBox.from_points(points)
        path = horizontal_sweep(bounds, subdivisions)
        if transit is TransitPolicy.NEAREST_CORNER:
            last_x, last_y = path[-1]
            path += vertical_sweep(
                bounds, subdivisions,
                start_x_high=last_x == bounds.max_x and bounds.width > 0,
                start_y_high=last_y == bounds.max_y and bounds.height > 0,
            )
        else:
            path += vertical_sweep(bounds, subdivisions)
    else:
        raise UnknownPattern(f"No generator for pattern {pattern!r}")

    logger.info("Generated %s path with %d waypoints", pattern.value, len(path))
    return path


def validate_parameters(params, drone_specs):
    errors = []
    if params['altitude'] > drone_specs.get("max_altitude", 120):
        errors.append("Altitude exceeds drone's max altitude.")
    if params['altitude'] < drone_specs.get("min_altitude", 10):
        errors.append("Altitude is below the minimum survey altitude.")
    if params['speed'] > drone_specs.get("max_speed", 10):
        errors.append("Speed exceeds drone's max speed.")
    if params['speed'] <= 0:
        errors.append("Speed must be positive.")
    overlap = params.get('overlap')
    if overlap is not None and not 50 <= overlap <= 90:
        errors.append("Image overlap must be between 50% and 90%.")
    return errors


def estimate_flight_metrics(path, speed, drone_specs):
    """Distance (km), duration (min) and battery count for flying ``path``.

    Uses a flat metres-per-degree approximation around the mean latitude.
    """
    if len(path) < 2:
        return 0.0, 0.0, 1 if path else 0

    coords = np.asarray(path, dtype=float)
    mean_lat = np.radians(coords[:, 1].mean())
    dx = np.diff(coords[:, 0]) * METERS_PER_DEGREE * np.cos(mean_lat)
    dy = np.diff(coords[:, 1]) * METERS_PER_DEGREE
    dist_km = float(np.hypot(dx, dy).sum()) / 1000

    minutes = (dist_km * 1000) / speed / 60
    battery_time = drone_specs.get("battery_minutes", 20)
    batteries = max(1, math.ceil(minutes / battery_time))
    return dist_km, minutes, batteries
