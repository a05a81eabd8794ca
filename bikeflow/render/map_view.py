"""
Map View
========
In-process stand-in for the map engine's viewport and its change events.
"""

from collections import defaultdict
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from ..config import DEFAULT_MAP_CENTER, DEFAULT_VIEWPORT_SIZE, DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, VIEWPORT_EVENTS
from .projector import Viewport

ViewportHandler = Callable[[Viewport], None]


class MapView:
    """
    Owns the current viewport and notifies subscribers when it changes.

    Events follow the map engine: 'move' and 'zoom' while the view changes,
    'resize' when the container changes size, 'moveend' once it settles.
    """

    def __init__(self, viewport: Optional[Viewport] = None):
        if viewport is None:
            width, height = DEFAULT_VIEWPORT_SIZE
            viewport = Viewport(
                center_lon=DEFAULT_MAP_CENTER[1],
                center_lat=DEFAULT_MAP_CENTER[0],
                zoom=DEFAULT_ZOOM,
                width=width,
                height=height,
            )
        self._viewport = viewport
        self._handlers: Dict[str, List[ViewportHandler]] = defaultdict(list)

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    def on(self, event: str, handler: ViewportHandler) -> None:
        """Subscribe `handler` to a viewport event."""
        self._check_event(event)
        self._handlers[event].append(handler)

    def off(self, event: str, handler: ViewportHandler) -> None:
        """Remove a previously registered handler."""
        self._check_event(event)
        if handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    def pan_to(self, lon: float, lat: float) -> None:
        self._viewport = replace(self._viewport, center_lon=lon, center_lat=lat)
        self._fire('move')
        self._fire('moveend')

    def zoom_to(self, zoom: float) -> None:
        zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
        self._viewport = replace(self._viewport, zoom=zoom)
        self._fire('zoom')
        self._fire('move')
        self._fire('moveend')

    def resize(self, width: int, height: int) -> None:
        self._viewport = replace(self._viewport, width=width, height=height)
        self._fire('resize')

    def _fire(self, event: str) -> None:
        for handler in list(self._handlers[event]):
            handler(self._viewport)

    @staticmethod
    def _check_event(event: str) -> None:
        if event not in VIEWPORT_EVENTS:
            raise ValueError(f"Unknown viewport event {event!r}, expected one of {VIEWPORT_EVENTS}")
