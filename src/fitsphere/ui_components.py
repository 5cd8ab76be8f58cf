"""UI components for the Streamlit dashboard."""

import streamlit as st
from typing import Dict, List, Optional, Tuple

from .chart_renderer import ChartRenderer
from .config import UIConfig
from .metrics_display import format_update
from .models import DashboardUpdate

SIMULATE_OPTION = "No recording (simulate sensors)"


class LatestUpdateSink:
    """
    UI sink that keeps only the most recent update.
    
    The session pushes from event-loop callbacks; the render loop polls
    ``take()`` at its own pace so bursts of updates cost one redraw.
    """
    
    def __init__(self):
        self.latest: Optional[DashboardUpdate] = None
        self.received = 0
        self._seen = 0
    
    def __call__(self, update: DashboardUpdate) -> None:
        self.latest = update
        self.received += 1
    
    def take(self) -> Optional[DashboardUpdate]:
        """Return the latest update if it has not been taken yet."""
        if self.received == self._seen:
            return None
        self._seen = self.received
        return self.latest


class DashboardUI:
    """Handles rendering of UI components for the dashboard."""
    
    def __init__(self, ui_config: UIConfig, renderer: ChartRenderer):
        """
        Initialize the UI component manager.
        
        Args:
            ui_config: UI configuration object
            renderer: Builds the chart figures
        """
        self.config = ui_config
        self.renderer = renderer
    
    def render_header(self):
        """Render app header."""
        st.title("FitSphere live dashboard")
        st.caption("Steps, heading and location from your device sensors")
    
    def render_source_selector(self, sessions: List[str]) -> Optional[str]:
        """
        Render recorded session selection dropdown.
        
        Args:
            sessions: Available recorded session names
            
        Returns:
            Selected session name, or None to simulate sensors
        """
        choice = st.selectbox("Sensor source", [SIMULATE_OPTION] + sessions, index=0)
        return None if choice == SIMULATE_OPTION else choice
    
    def render_stream_controls(self, start_label: str, running: bool) -> Tuple[float, bool, bool]:
        """
        Render start/stop controls.
        
        Args:
            start_label: Label for the start button
            running: Whether a session is running (disables start)
            
        Returns:
            Tuple of (start_time, start_clicked, stop_clicked)
        """
        start_time = st.number_input(
            "Start recording from (seconds)",
            min_value=0.0,
            value=0.0,
            step=10.0,
            help="Only used when replaying a recorded session"
        )
        col1, col2 = st.columns([1, 1])
        with col1:
            start = st.button(start_label, disabled=running)
        with col2:
            stop = st.button("⏹ Stop", disabled=not running)
        return start_time, start, stop
    
    def create_placeholders(self) -> Dict[str, st.delta_generator.DeltaGenerator]:
        """
        Create placeholders for every live widget.
        
        Returns:
            Dictionary of Streamlit empty placeholders keyed by widget
        """
        notice = st.empty()
        col1, col2, col3 = st.columns(3)
        with col1:
            steps = st.empty()
        with col2:
            minute_steps = st.empty()
        with col3:
            heading = st.empty()
        
        st.markdown("**Location**")
        location = st.empty()
        
        col_chart, col_compass = st.columns([2, 1])
        with col_chart:
            chart = st.empty()
        with col_compass:
            compass = st.empty()
        
        return {
            'notice': notice,
            'steps': steps,
            'minute_steps': minute_steps,
            'heading': heading,
            'location': location,
            'chart': chart,
            'compass': compass,
        }
    
    def render_update(self, placeholders: Dict, update: DashboardUpdate):
        """
        Apply a session update to the placeholders.
        
        Args:
            placeholders: Placeholders from create_placeholders()
            update: Snapshot pushed by the sensor session
        """
        text = format_update(update)
        tooltips = self.config.TOOLTIPS
        
        if text['notice']:
            placeholders['notice'].warning(text['notice'])
        else:
            placeholders['notice'].info(f"{text['mode']} sensors | {text['control_label']}")
        
        placeholders['steps'].metric("Steps", value=text['steps'], help=tooltips['steps'])
        placeholders['minute_steps'].metric("This Minute", value=text['minute_steps'],
                                            help=tooltips['minute_steps'])
        placeholders['heading'].metric("Heading", value=text['heading'], help=tooltips['heading'])
        placeholders['location'].markdown(f"{text['coords']}  \n_{text['location_label']}_")
        
        placeholders['chart'].plotly_chart(
            self.renderer.create_steps_chart(update.buckets),
            use_container_width=True, config={'displayModeBar': False}
        )
        placeholders['compass'].plotly_chart(
            self.renderer.create_compass_chart(update.compass),
            use_container_width=True, config={'displayModeBar': False}
        )
    
    def render_empty(self, placeholders: Dict):
        """Show empty widgets before the first session."""
        placeholders['notice'].info("Ready. Click the start button to begin.")
        placeholders['steps'].metric("Steps", value="--")
        placeholders['minute_steps'].metric("This Minute", value="--")
        placeholders['heading'].metric("Heading", value="--")
        placeholders['location'].markdown("-")
        placeholders['chart'].plotly_chart(
            self.renderer.create_steps_chart([]),
            use_container_width=True, config={'displayModeBar': False}, key='empty_chart'
        )
        placeholders['compass'].plotly_chart(
            self.renderer.create_compass_chart(None),
            use_container_width=True, config={'displayModeBar': False}, key='empty_compass'
        )
