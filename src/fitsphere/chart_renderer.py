"""Chart rendering utilities for the dashboard."""

import plotly.graph_objects as go
from typing import List, Optional

from .config import UIConfig
from .models import CompassState, MinuteBucket


class ChartRenderer:
    """Handles creation and styling of Plotly charts for the dashboard."""
    
    def __init__(self, ui_config: UIConfig):
        """
        Initialize the chart renderer.
        
        Args:
            ui_config: UI configuration object
        """
        self.config = ui_config
    
    def create_steps_chart(self, buckets: List[MinuteBucket]) -> go.Figure:
        """
        Create a bar chart of steps per completed minute.
        
        Args:
            buckets: Minute buckets in the order they were closed
            
        Returns:
            Plotly Figure object
        """
        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=[bucket.minute_label for bucket in buckets],
            y=[bucket.step_count for bucket in buckets],
            marker=dict(color=self.config.CHART_COLORS['steps']),
            name="Steps per Minute"
        ))
        
        fig.update_layout(
            title="Steps per Minute",
            height=self.config.CHART_HEIGHT,
            margin=self.config.CHART_MARGIN,
            showlegend=False,
            transition={'duration': 0},
            uirevision='constant',
            hovermode=False,
            dragmode=False,
            plot_bgcolor='white',
            paper_bgcolor='white',
        )
        # Labels repeat after an hour, so keep them categorical
        fig.update_xaxes(
            type='category',
            title_text="Minute",
            fixedrange=True,
        )
        fig.update_yaxes(
            rangemode='tozero',
            title_text="Steps",
            fixedrange=True,
            showgrid=True,
            gridcolor='rgba(220, 220, 220, 0.3)',
        )
        return fig
    
    def create_compass_chart(self, compass: Optional[CompassState]) -> go.Figure:
        """
        Create a polar compass with a needle pointing at the heading.
        
        Args:
            compass: Latest compass state, or None before the first heading
            
        Returns:
            Plotly Figure object
        """
        fig = go.Figure()
        if compass is not None:
            fig.add_trace(go.Scatterpolar(
                r=[0, 1],
                theta=[compass.heading_degrees, compass.heading_degrees],
                mode='lines+markers',
                line=dict(color=self.config.CHART_COLORS['needle'], width=4),
                marker=dict(size=[0, 10]),
                name=compass.direction
            ))
        
        fig.update_layout(
            height=self.config.COMPASS_HEIGHT,
            margin=self.config.CHART_MARGIN,
            showlegend=False,
            transition={'duration': 0},
            uirevision='constant',
            polar=dict(
                radialaxis=dict(visible=False, range=[0, 1]),
                angularaxis=dict(
                    direction='clockwise',
                    rotation=90,
                    tickmode='array',
                    tickvals=[0, 90, 180, 270],
                    ticktext=['N', 'E', 'S', 'W'],
                ),
            ),
        )
        return fig
