"""
Traffic Map Generator
=====================
Generates the interactive station traffic map.

Features:
- One circle per station, area proportional to trip volume
- Fill color by departure/arrival balance
- Time-of-day slider (+/- 60 minutes, or any time)
- Boston and Cambridge bike lane overlays
"""

from typing import List, Optional

import folium

from .base import BaseGenerator
from .elements import BikeLaneOverlay, TimeSliderControl
from ..data.repository import BikeShareData
from ..render.sync import MarkerStore, RenderSync
from ..config import (
    BIKE_LANE_LAYERS,
    DEFAULT_MAP_CENTER,
    DEFAULT_ZOOM,
    MARKER_STYLE,
    MAX_ZOOM,
    MIN_ZOOM,
    SLIDER_STEP,
)


class TrafficMapGenerator(BaseGenerator):
    """Generator for the interactive traffic map."""

    output_filename = "traffic_map.html"

    def __init__(self, data: Optional[BikeShareData] = None, step: int = SLIDER_STEP):
        super().__init__(data)
        self.step = step

    def generate(self) -> str:
        """Generate the traffic map HTML."""

        self._log_progress("Computing station traffic...")
        sync = RenderSync(self.data)

        self._log_progress(f"Pre-computing slider states every {self.step} minutes...")
        states = sync.render_states(self.step)

        self._log_progress(f"Building map with {len(sync.markers)} stations...")
        m = self._build_map()
        self._add_bike_lanes(m)
        marker_names = self._add_station_markers(m, sync.markers)
        TimeSliderControl(marker_names, states, self.step).add_to(m)

        return m.get_root().render()

    def _build_map(self) -> folium.Map:
        return folium.Map(
            location=list(DEFAULT_MAP_CENTER),
            zoom_start=DEFAULT_ZOOM,
            min_zoom=MIN_ZOOM,
            max_zoom=MAX_ZOOM,
            tiles='CartoDB positron',
            prefer_canvas=True,
        )

    def _add_bike_lanes(self, m: folium.Map) -> None:
        for layer in BIKE_LANE_LAYERS:
            BikeLaneOverlay(layer['url'], layer['color'], name=layer['name']).add_to(m)

    def _add_station_markers(self, m: folium.Map, markers: MarkerStore) -> List[str]:
        """Add a CircleMarker per station; returns their JS variable names in store order."""
        group = folium.FeatureGroup(name="Stations")
        names = []
        for marker in markers:
            circle = folium.CircleMarker(
                location=[marker.lat, marker.lon],
                radius=marker.radius,
                color=MARKER_STYLE['color'],
                weight=MARKER_STYLE['weight'],
                opacity=MARKER_STYLE['opacity'],
                fill=True,
                fill_color=marker.fill_color,
                fill_opacity=MARKER_STYLE['fill_opacity'],
                tooltip=marker.tooltip,
            )
            circle.add_to(group)
            names.append(circle.get_name())
        group.add_to(m)
        return names
