"""
Data Loading Modules
====================
Station and trip feed loading, and the read-only trip repository.
"""

from .feed_loader import FeedLoader, LoadFailure
from .repository import BikeShareData, TripRepository

__all__ = ['FeedLoader', 'LoadFailure', 'BikeShareData', 'TripRepository']
