import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from flight_calculator import DEFAULT_SUBDIVISIONS, MAX_WAYPOINTS, TransitPolicy

# ─────────────── Config from .env ───────────────
load_dotenv()

DEFAULT_MAP_CENTER = (40.7128, -74.0060)


@dataclass(frozen=True)
class Settings:
    default_subdivisions: int = DEFAULT_SUBDIVISIONS
    max_waypoints: int = MAX_WAYPOINTS
    transit_policy: TransitPolicy = TransitPolicy.DIRECT
    log_level: str = "INFO"
    map_center: tuple = DEFAULT_MAP_CENTER


def _int_env(environ, name, default, minimum=1):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _map_center_env(environ, name, default):
    raw = environ.get(name)
    if not raw:
        return default
    try:
        lat, lon = (float(part) for part in raw.split(","))
    except ValueError:
        raise ValueError(f"{name} must look like 'lat,lon', got {raw!r}") from None
    return (lat, lon)


def load_settings(environ=None):
    """Read planner settings from the environment (after .env is loaded)."""
    environ = os.environ if environ is None else environ

    log_level = environ.get("SURVEY_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"SURVEY_LOG_LEVEL is not a logging level: {log_level!r}")

    try:
        transit = TransitPolicy.parse(environ.get("SURVEY_TRANSIT_POLICY", "direct"))
    except ValueError as e:
        raise ValueError(f"SURVEY_TRANSIT_POLICY: {e}") from None

    return Settings(
        default_subdivisions=_int_env(environ, "SURVEY_DEFAULT_SUBDIVISIONS", DEFAULT_SUBDIVISIONS),
        max_waypoints=_int_env(environ, "SURVEY_MAX_WAYPOINTS", MAX_WAYPOINTS),
        transit_policy=transit,
        log_level=log_level,
        map_center=_map_center_env(environ, "SURVEY_MAP_CENTER", DEFAULT_MAP_CENTER),
    )
