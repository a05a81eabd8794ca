"""
Traffic Core
============
Time-window filtering, per-station aggregation and visual scales.
"""

from .time_filter import filter_trips_by_time, format_time, minutes_since_midnight, time_filter_label
from .traffic import compute_station_traffic
from .scales import Scales, derive_scales, departure_ratio

__all__ = [
    'filter_trips_by_time',
    'format_time',
    'minutes_since_midnight',
    'time_filter_label',
    'compute_station_traffic',
    'Scales',
    'derive_scales',
    'departure_ratio',
]
