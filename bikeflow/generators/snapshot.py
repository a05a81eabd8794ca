"""
Snapshot Generator
==================
Renders station markers for one viewport and time filter to a static SVG.
"""

from typing import Optional

from .base import BaseGenerator
from ..data.repository import BikeShareData
from ..render.map_view import MapView
from ..render.projector import Viewport
from ..render.sync import Marker, RenderSync
from ..core.time_filter import format_time
from ..utils.html_builder import build_svg_document, svg_circle
from ..config import NO_FILTER, TIME_WINDOW_MINUTES


class SnapshotGenerator(BaseGenerator):
    """Generator for a static SVG of the station markers."""

    output_filename = "traffic_snapshot.svg"

    def __init__(
        self,
        data: Optional[BikeShareData] = None,
        viewport: Optional[Viewport] = None,
        time_filter: int = NO_FILTER
    ):
        super().__init__(data)
        self.map_view = MapView(viewport)
        self.time_filter = time_filter

    def generate(self) -> str:
        """Generate the SVG document."""
        sync = RenderSync(self.data)
        sync.bind(self.map_view)
        sync.on_time_filter_changed(self.time_filter)

        viewport = self.map_view.viewport
        visible = [m for m in sync.markers if m.radius > 0 and _in_view(m, viewport)]
        # Largest first so small stations stay on top
        visible.sort(key=lambda m: m.radius, reverse=True)
        self._log_progress(f"Drawing {len(visible)} of {len(sync.markers)} stations...")

        circles = [svg_circle(m.cx, m.cy, m.radius, m.fill_color, m.tooltip) for m in visible]
        return build_svg_document(
            viewport.width,
            viewport.height,
            circles,
            title="Bluebikes station traffic",
            subtitle=self._subtitle(),
        )

    def _subtitle(self) -> str:
        if self.time_filter == NO_FILTER:
            return "Any time"
        return f"{format_time(self.time_filter)} ± {TIME_WINDOW_MINUTES} min"


def _in_view(marker: Marker, viewport: Viewport) -> bool:
    r = marker.radius
    return -r <= marker.cx <= viewport.width + r and -r <= marker.cy <= viewport.height + r
