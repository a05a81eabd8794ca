"""
Generators package.
Contains the map and snapshot generators.
"""

from .base import BaseGenerator
from .traffic_map import TrafficMapGenerator
from .snapshot import SnapshotGenerator

__all__ = [
    'BaseGenerator',
    'TrafficMapGenerator',
    'SnapshotGenerator',
]
