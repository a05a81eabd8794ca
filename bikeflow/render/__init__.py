"""
Rendering
=========
Viewport projection and marker synchronization.
"""

from .projector import Viewport, project
from .map_view import MapView
from .sync import Marker, MarkerStore, RenderSync

__all__ = ['Viewport', 'project', 'MapView', 'Marker', 'MarkerStore', 'RenderSync']
