import logging
from datetime import datetime

import streamlit as st
from streamlit_folium import st_folium

from drone_specs import DRONE_FLEET, drone_label, get_drone_specs
from exports import path_to_csv, path_to_dataframe, path_to_kmz
from flight_calculator import (
    PatternKind,
    PlanningError,
    TransitPolicy,
    estimate_flight_metrics,
    generate_path,
)
from map_utils import (
    add_flight_path,
    add_survey_area,
    calculate_area_bounds,
    create_map,
    drawing_to_polygon,
    search_location,
)
from mission import MissionConfig, MissionError, create_mission
from settings import load_settings
from utils import create_flight_path_plot

settings = load_settings()

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

PATTERN_HELP = {
    PatternKind.GRID: "Grid pattern for complete area coverage with parallel flight lines.",
    PatternKind.CROSSHATCH: "Crosshatch pattern with perpendicular flight lines for detailed mapping.",
    PatternKind.PERIMETER: "Perimeter pattern that follows the boundary of the defined area.",
}

st.set_page_config(page_title="Survey Mission Planner", page_icon="🛩️", layout="wide")

if "map_key" not in st.session_state:
    st.session_state.update({
        "map_key": 0,
        "map_center": list(settings.map_center),
        "survey_area": None,
        "flight_path": [],
        "path_pattern": None,
        "missions": [],
        "notice": None,
    })

if st.session_state.notice:
    # Queued before a rerun so the toast is not lost
    st.toast(st.session_state.notice)
    st.session_state.notice = None


def clear_area():
    # Remounting the map widget discards whatever was drawn on it
    st.session_state.map_key += 1
    st.session_state.survey_area = None
    st.session_state.flight_path = []
    st.session_state.path_pattern = None
    st.toast("Survey area and flight path have been cleared.")


st.title("🛩️ Survey Mission Planner")

left, right = st.columns([2, 1], gap="large")

with right:
    st.subheader("Mission Configuration")
    mission_name = st.text_input("Mission Name", placeholder="Enter mission name")
    drone_id = st.selectbox("Select Drone", list(DRONE_FLEET.keys()), format_func=drone_label)

    pattern = st.radio(
        "Mission Type",
        list(PatternKind),
        format_func=lambda p: p.value.title(),
        horizontal=True,
    )
    st.caption(PATTERN_HELP[pattern])

    subdivisions = st.number_input(
        "Flight lines per pass",
        min_value=1,
        max_value=max(1000, settings.default_subdivisions),
        value=settings.default_subdivisions,
        disabled=pattern is PatternKind.PERIMETER,
    )
    transit = settings.transit_policy
    if pattern is PatternKind.CROSSHATCH:
        transit = st.selectbox(
            "Crosshatch transit",
            list(TransitPolicy),
            index=list(TransitPolicy).index(settings.transit_policy),
            format_func=lambda t: "Return to start corner" if t is TransitPolicy.DIRECT else "Continue from nearest corner",
        )

    altitude = st.slider("Flight Altitude (m)", 10, 120, 50, step=5)
    overlap = st.slider("Image Overlap (%)", 50, 90, 70, step=5)
    speed = st.slider("Flight Speed (m/s)", 1.0, 10.0, 5.0, step=0.5)

    auto_return = st.toggle("Auto Return on Low Battery", value=True)
    obstacle_avoidance = st.toggle("Obstacle Avoidance", value=True)
    geofencing = st.toggle("Enable Geofencing", value=True)

    d_col, t_col = st.columns(2)
    with d_col:
        scheduled_date = st.date_input("Date", value=None)
    with t_col:
        scheduled_time = st.time_input("Time", value=None)

with left:
    st.subheader("Survey Area")
    st.caption("Define the survey area by drawing on the map")

    s_col, m_col = st.columns([3, 1])
    with s_col:
        location_query = st.text_input("Search Location", "")
    with m_col:
        map_type = st.selectbox("Map", ["satellite", "street"], format_func=str.title)

    if location_query:
        lat, lon = search_location(location_query)
        if lat is not None:
            st.session_state.map_center = [lat, lon]
        else:
            st.warning(f"Could not find {location_query!r}.")

    try:
        m = create_map(st.session_state.map_center, map_type=map_type)
        if st.session_state.flight_path:
            add_survey_area(m, st.session_state.survey_area)
            add_flight_path(m, st.session_state.flight_path)

        map_output = st_folium(
            m,
            height=500,
            use_container_width=True,
            returned_objects=["last_active_drawing"],
            key=f"survey_map_{st.session_state.map_key}",
        )
        drawing = (map_output or {}).get("last_active_drawing")
        polygon = drawing_to_polygon(drawing)
        if polygon and polygon != st.session_state.survey_area:
            logger.info(f"Received survey area with {len(polygon)} vertices")
            st.session_state.survey_area = polygon
            st.session_state.flight_path = []
            st.toast("Survey area defined. You can now generate a flight path for this area.")
    except PlanningError as e:
        st.error(e.user_message)
        logger.warning(f"Unusable drawing: {e}")
    except Exception as e:
        logger.error(f"Error handling map: {str(e)}")
        st.error(f"Error handling map: {str(e)}. Please try refreshing the page.")

    if st.session_state.survey_area:
        bounds = calculate_area_bounds(st.session_state.survey_area)
        st.caption(
            f"Center: ({bounds['center_lat']:.6f}, {bounds['center_lon']:.6f}) · "
            f"Area: {bounds['width']:.1f}m × {bounds['height']:.1f}m"
        )

    clear_col, gen_col = st.columns(2)
    with clear_col:
        st.button("Clear Area", on_click=clear_area, use_container_width=True)
    with gen_col:
        generate = st.button("Generate Flight Path", type="primary", use_container_width=True)

    if generate:
        try:
            path = generate_path(
                st.session_state.survey_area,
                pattern,
                subdivisions=int(subdivisions),
                transit=transit,
                max_waypoints=settings.max_waypoints,
            )
        except PlanningError as e:
            logger.warning(f"Flight path generation failed: {e}")
            st.error(e.user_message)
        else:
            st.session_state.flight_path = path
            st.session_state.path_pattern = pattern
            st.session_state.notice = f"Created a {pattern.value} pattern with {len(path)} waypoints."
            st.rerun()

if st.session_state.flight_path:
    path = st.session_state.flight_path
    specs = get_drone_specs(drone_id)

    st.subheader("🛰️ Flight Path")
    st.success(f"✅ {st.session_state.path_pattern.value.title()} pattern with {len(path)} waypoints")

    dist_km, minutes, batteries = estimate_flight_metrics(path, speed, specs)
    st.info(f"🧭 Distance: {dist_km:.2f} km   ⏱ Duration: {minutes:.1f} min   🔋 Batteries: {batteries}")

    plot_col, table_col = st.columns([2, 1])
    with plot_col:
        st.plotly_chart(
            create_flight_path_plot(path, st.session_state.survey_area),
            use_container_width=True,
        )
    with table_col:
        st.dataframe(path_to_dataframe(path), use_container_width=True, hide_index=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    dl1, dl2 = st.columns(2)
    with dl1:
        st.download_button("⬇️ CSV", data=path_to_csv(path), file_name=f"flight_plan_{ts}.csv", mime="text/csv")
    with dl2:
        st.download_button(
            "⬇️ KMZ",
            data=path_to_kmz(path, name=mission_name or "Flight Path", altitude=altitude),
            file_name=f"flight_path_{ts}.kmz",
            mime="application/vnd.google-earth.kmz"
        )

if st.button("Create Mission"):
    config = MissionConfig(
        name=mission_name,
        drone_id=drone_id,
        pattern=st.session_state.path_pattern or pattern,
        altitude=altitude,
        overlap=overlap,
        speed=speed,
        auto_return=auto_return,
        obstacle_avoidance=obstacle_avoidance,
        geofencing=geofencing,
        scheduled_date=scheduled_date,
        scheduled_time=scheduled_time,
    )
    try:
        mission = create_mission(config, st.session_state.flight_path)
    except MissionError as e:
        for error in e.errors:
            st.error(error)
    else:
        st.session_state.missions.append(mission)
        st.toast("Your mission has been created successfully.")
        st.success(mission.summary())

if st.session_state.missions:
    with st.expander(f"Missions this session ({len(st.session_state.missions)})"):
        for created in st.session_state.missions:
            st.write(created.summary())
