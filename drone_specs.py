"""
Survey fleet and per-model limits used when planning missions
"""

MODEL_SPECS = {
    "DJI Matrice 300 RTK": {
        "max_speed": 10.0,  # m/s, survey ceiling
        "min_altitude": 10,  # meters
        "max_altitude": 120,  # meters
        "camera_fov": 84.0,  # degrees
        "battery_minutes": 45
    },
    "Autel EVO II": {
        "max_speed": 10.0,
        "min_altitude": 10,
        "max_altitude": 120,
        "camera_fov": 82.0,
        "battery_minutes": 35
    }
}

# Drones offered in the mission planner
DRONE_FLEET = {
    "drone1": {"name": "Surveyor-1", "model": "DJI Matrice 300 RTK"},
    "drone2": {"name": "Surveyor-2", "model": "DJI Matrice 300 RTK"},
    "drone5": {"name": "Surveyor-5", "model": "Autel EVO II"}
}


def get_drone_specs(drone_id):
    """Return the model limits for a fleet drone, or None if it is unknown."""
    drone = DRONE_FLEET.get(drone_id)
    if drone is None:
        return None
    return MODEL_SPECS[drone["model"]]


def drone_label(drone_id):
    drone = DRONE_FLEET[drone_id]
    return f"{drone['name']} ({drone['model']})"
