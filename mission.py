"""
"Create mission" workflow: bundles a generated path with the mission settings
chosen in the planner panel. Missions are returned to the caller, not stored.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional

from drone_specs import get_drone_specs
from flight_calculator import (
    PatternKind,
    WaypointPath,
    estimate_flight_metrics,
    validate_parameters,
)

logger = logging.getLogger(__name__)


class MissionError(ValueError):
    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass
class MissionConfig:
    name: str
    drone_id: str = "drone1"
    pattern: PatternKind = PatternKind.GRID
    altitude: float = 50
    overlap: float = 70
    speed: float = 5
    auto_return: bool = True
    obstacle_avoidance: bool = True
    geofencing: bool = True
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None


@dataclass
class Mission:
    config: MissionConfig
    path: WaypointPath = field(default_factory=list)
    distance_km: float = 0.0
    duration_min: float = 0.0
    batteries: int = 0

    @property
    def waypoint_count(self):
        return len(self.path)

    def summary(self):
        return (
            f"{self.config.name}: {self.config.pattern.value} pattern, "
            f"{self.waypoint_count} waypoints, {self.distance_km:.2f} km, "
            f"{self.duration_min:.1f} min, {self.batteries} battery(s)"
        )


def create_mission(config: MissionConfig, path: WaypointPath) -> Mission:
    errors: List[str] = []
    if not config.name or not config.name.strip():
        errors.append("Mission name is required.")

    specs = get_drone_specs(config.drone_id)
    if specs is None:
        errors.append(f"Unknown drone: {config.drone_id}")
    else:
        errors += validate_parameters({
            "altitude": config.altitude,
            "speed": config.speed,
            "overlap": config.overlap,
        }, specs)

    if not path:
        errors.append("Generate a flight path before creating the mission.")

    if errors:
        logger.warning("Mission %r rejected: %s", config.name, errors)
        raise MissionError(errors)

    dist_km, minutes, batteries = estimate_flight_metrics(path, config.speed, specs)
    mission = Mission(
        config=config,
        path=list(path),
        distance_km=dist_km,
        duration_min=minutes,
        batteries=batteries,
    )
    logger.info("Created mission %s", mission.summary())
    return mission
