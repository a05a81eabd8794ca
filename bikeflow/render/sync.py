"""
Render Synchronization
======================
Keeps station markers consistent with the active time filter and the map
viewport.

Two independent triggers write into one MarkerStore:

- viewport changes update marker positions only
- time filter changes update marker traffic and styling only

Each handler recomputes from scratch, so running them in any order or
repeatedly converges to the same marker state.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterator, List, Optional

import pandas as pd

from ..config import FLOW_COLORS, MINUTES_PER_DAY, NO_FILTER, SLIDER_STEP, VIEWPORT_EVENTS, ZERO_TRAFFIC_FLOW
from ..core.scales import departure_ratio, derive_scales, flow_color
from ..core.time_filter import filter_trips_by_time, time_filter_label, validate_time_filter
from ..core.traffic import compute_station_traffic
from ..data.repository import BikeShareData
from .map_view import MapView
from .projector import Viewport, project

logger = logging.getLogger(__name__)


@dataclass
class Marker:
    """Render-side view of one station."""

    station_id: str
    name: str
    lon: float
    lat: float
    arrivals: int = 0
    departures: int = 0
    total_traffic: int = 0
    radius: float = 0.0
    departure_ratio: float = ZERO_TRAFFIC_FLOW
    fill_color: str = FLOW_COLORS[ZERO_TRAFFIC_FLOW]
    cx: Optional[float] = None
    cy: Optional[float] = None

    @property
    def tooltip(self) -> str:
        return (f"{self.total_traffic} trips ({self.departures} departures, "
                f"{self.arrivals} arrivals)")

    def to_dict(self) -> dict:
        return asdict(self)


class MarkerStore:
    """One marker per station, keyed by station id, in station feed order."""

    def __init__(self, stations: pd.DataFrame):
        self._markers: Dict[str, Marker] = {}
        for row in stations.itertuples(index=False):
            station_id = str(row.short_name)
            if station_id in self._markers:
                continue
            name = getattr(row, 'name', None)
            self._markers[station_id] = Marker(
                station_id=station_id,
                name=str(name) if pd.notna(name) else station_id,
                lon=float(row.lon),
                lat=float(row.lat),
            )

    def __len__(self) -> int:
        return len(self._markers)

    def __iter__(self) -> Iterator[Marker]:
        return iter(self._markers.values())

    def __contains__(self, station_id: str) -> bool:
        return station_id in self._markers

    def __getitem__(self, station_id: str) -> Marker:
        return self._markers[station_id]

    def get(self, station_id: str) -> Optional[Marker]:
        return self._markers.get(station_id)

    def ids(self) -> List[str]:
        return list(self._markers)


class RenderSync:
    """
    Applies time filter and viewport changes to a MarkerStore.

    Usage:
        sync = RenderSync(data)
        sync.bind(map_view)          # positions follow the map
        sync.on_time_filter_changed(480)   # 8:00 AM +/- 60 min
    """

    def __init__(self, data: BikeShareData, markers: Optional[MarkerStore] = None):
        self.data = data
        self.markers = markers if markers is not None else MarkerStore(data.stations)
        self.time_filter = NO_FILTER
        self.viewport: Optional[Viewport] = None
        self.on_time_filter_changed(NO_FILTER)

    # ========================================================================
    # VIEWPORT TRIGGER
    # ========================================================================

    def on_viewport_changed(self, viewport: Viewport) -> None:
        """Re-project every marker. Styling is left untouched."""
        self.viewport = viewport
        for marker in self.markers:
            marker.cx, marker.cy = project(marker.lon, marker.lat, viewport)

    def bind(self, map_view: MapView) -> None:
        """Follow every viewport event of `map_view` and sync positions now."""
        for event in VIEWPORT_EVENTS:
            map_view.on(event, self.on_viewport_changed)
        self.on_viewport_changed(map_view.viewport)

    def unbind(self, map_view: MapView) -> None:
        for event in VIEWPORT_EVENTS:
            map_view.off(event, self.on_viewport_changed)

    # ========================================================================
    # TIME FILTER TRIGGER
    # ========================================================================

    def on_time_filter_changed(self, time_filter: int) -> None:
        """Recompute traffic for the new window and restyle every marker."""
        time_filter = validate_time_filter(time_filter)
        self.time_filter = time_filter

        trips = filter_trips_by_time(self.data.trips.trips, time_filter)
        traffic = compute_station_traffic(self.data.stations, trips)
        scales = derive_scales(traffic, filter_active=time_filter != NO_FILTER)

        for row in traffic.itertuples(index=False):
            marker = self.markers.get(str(row.short_name))
            if marker is None:
                continue
            marker.arrivals = int(row.arrivals)
            marker.departures = int(row.departures)
            marker.total_traffic = int(row.total_traffic)
            marker.radius = scales.radius(marker.total_traffic)
            marker.departure_ratio = scales.flow(departure_ratio(marker.departures, marker.total_traffic))
            marker.fill_color = flow_color(marker.departure_ratio)

        logger.debug(f"Time filter {time_filter}: {len(trips):,} active trips")

    # ========================================================================
    # EXPORT
    # ========================================================================

    def style_state(self) -> dict:
        """Current marker styling as parallel lists in store order."""
        label, _ = time_filter_label(self.time_filter)
        markers = list(self.markers)
        return {
            'label': label,
            'radius': [round(m.radius, 2) for m in markers],
            'fill': [m.fill_color for m in markers],
            'arrivals': [m.arrivals for m in markers],
            'departures': [m.departures for m in markers],
        }

    def render_states(self, step: int = SLIDER_STEP) -> Dict[str, dict]:
        """
        Pre-compute style states for the slider.

        Covers NO_FILTER and every `step` minutes from midnight. The store
        is left in the state it had before the call.
        """
        if step <= 0:
            raise ValueError(f"Slider step must be positive, got {step}")

        previous = self.time_filter
        states = {}
        for time_filter in [NO_FILTER] + list(range(0, MINUTES_PER_DAY, step)):
            self.on_time_filter_changed(time_filter)
            states[str(time_filter)] = self.style_state()
        self.on_time_filter_changed(previous)
        return states
