"""
Viewport Projection
===================
Converts station coordinates to screen pixels for a map viewport.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from ..config import TILE_SIZE

# Web Mercator is undefined at the poles
MAX_LATITUDE = 85.0511287798


@dataclass(frozen=True)
class Viewport:
    """Pan/zoom state of the map, as reported by the map engine."""

    center_lon: float
    center_lat: float
    zoom: float
    width: int
    height: int
    tile_size: int = TILE_SIZE

    @property
    def world_size(self) -> float:
        return self.tile_size * 2 ** self.zoom


def _world_pixel(lon: float, lat: float, world_size: float) -> Tuple[float, float]:
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    x = (lon + 180.0) / 360.0 * world_size
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * world_size
    return x, y


def project(lon: float, lat: float, viewport: Viewport) -> Tuple[float, float]:
    """
    Project a longitude/latitude to pixel coordinates within the viewport.

    Args:
        lon, lat: Geographic coordinate in degrees
        viewport: Current map viewport

    Returns:
        (x, y) in pixels from the top-left corner of the map container
    """
    world_size = viewport.world_size
    x, y = _world_pixel(float(lon), float(lat), world_size)
    cx, cy = _world_pixel(viewport.center_lon, viewport.center_lat, world_size)
    return x - cx + viewport.width / 2, y - cy + viewport.height / 2
