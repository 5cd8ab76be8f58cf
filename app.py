"""
Streamlit dashboard showing live steps, compass heading and location.

Sensor data comes from a recorded session replayed at real-time speed, or
from the simulated sources when no recording is selected.
"""
import asyncio
from typing import Optional

import streamlit as st

from fitsphere import (
    SensorConfig,
    UIConfig,
    RecordingLoader,
    RecordedPlatform,
    HeadlessPlatform,
    SensorSession,
    configure_logging,
)
from fitsphere.chart_renderer import ChartRenderer
from fitsphere.session import LABEL_IDLE
from fitsphere.ui_components import DashboardUI, LatestUpdateSink


# Initialize configurations and components
sensor_config = SensorConfig()
ui_config = UIConfig()
configure_logging(sensor_config.LOG_LEVEL, sensor_config.LOG_JSON)

st.set_page_config(page_title=ui_config.PAGE_TITLE)
ui = DashboardUI(ui_config, ChartRenderer(ui_config))
loader = RecordingLoader(sensor_config.DATA_DIR)

# === Session State Initialization ===
for key, default in [('running', False), ('last_update', None)]:
    if key not in st.session_state:
        st.session_state[key] = default

# === UI Setup ===
ui.render_header()
selected_recording = ui.render_source_selector(loader.get_available_sessions())
start_time, start_clicked, stop_clicked = ui.render_stream_controls(LABEL_IDLE, st.session_state.running)
placeholders = ui.create_placeholders()


async def run_dashboard(recording: Optional[str], start_from_time: float) -> None:
    """
    Run one sensor session until the user stops it or the recording ends.

    Args:
        recording: Recorded session to replay, or None to simulate sensors
        start_from_time: Time in seconds to start the recording from
    """
    if recording is not None:
        df = loader.load_session(recording)
        start_index = loader.time_to_sample_index(df, start_from_time)
        valid, error_msg = loader.validate_start_position(df, start_index)
        if not valid:
            placeholders['notice'].error(error_msg)
            return
        platform = RecordedPlatform(df, speed=sensor_config.PLAYBACK_SPEED, start_index=start_index)
    else:
        platform = HeadlessPlatform()

    sink = LatestUpdateSink()
    session = SensorSession(platform, sink, sensor_config)
    await session.start()

    try:
        while st.session_state.running:
            update = sink.take()
            if update is not None:
                ui.render_update(placeholders, update)
                st.session_state.last_update = update
            if isinstance(platform, RecordedPlatform) and platform.finished:
                placeholders['notice'].success(
                    f"Recording finished. Replayed {platform.samples_played} samples."
                )
                break
            await asyncio.sleep(ui_config.REFRESH_INTERVAL_MS / 1000)
    finally:
        session.stop()
        st.session_state.running = False


# Pre-populate UI with the frozen state of the last session
if not st.session_state.running:
    if st.session_state.last_update is not None:
        ui.render_update(placeholders, st.session_state.last_update)
    else:
        ui.render_empty(placeholders)


# === Session Control Logic ===
if start_clicked:
    st.session_state.running = True
    asyncio.run(run_dashboard(selected_recording, start_time))

if stop_clicked:
    st.session_state.running = False
    st.rerun()
