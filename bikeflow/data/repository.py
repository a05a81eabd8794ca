"""
Trip Repository
===============
Read-only containers for the station set and the month of trips.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import pandas as pd

from ..config import STATION_COLUMNS, TRIP_COLUMNS
from ..core.time_filter import minutes_since_midnight


class TripRepository:
    """
    Immutable set of parsed trips for the period.

    Minutes since midnight for both trip ends are computed once here so
    that every time-window pass is a plain column comparison.
    """

    def __init__(self, trips: Optional[pd.DataFrame] = None):
        if trips is None:
            trips = pd.DataFrame(columns=TRIP_COLUMNS)
        trips = trips.copy()
        if len(trips):
            trips['start_minute'] = minutes_since_midnight(trips['started_at'])
            trips['end_minute'] = minutes_since_midnight(trips['ended_at'])
        else:
            trips['start_minute'] = pd.Series(dtype='int64')
            trips['end_minute'] = pd.Series(dtype='int64')
        self._trips = trips.reset_index(drop=True)

    @property
    def trips(self) -> pd.DataFrame:
        """All trips, with start_minute / end_minute columns."""
        return self._trips

    def __len__(self) -> int:
        return len(self._trips)

    def date_range(self) -> Optional[Tuple[pd.Timestamp, pd.Timestamp]]:
        """First and last trip start time, or None when there are no trips."""
        if self._trips.empty:
            return None
        started = self._trips['started_at']
        return started.min(), started.max()


def empty_stations() -> pd.DataFrame:
    """Station frame with the expected columns and no rows."""
    return pd.DataFrame(columns=STATION_COLUMNS)


@dataclass
class BikeShareData:
    """Stations and trips for one session. loaded is False after a failed load."""

    stations: pd.DataFrame = field(default_factory=empty_stations)
    trips: TripRepository = field(default_factory=TripRepository)
    loaded: bool = True

    @classmethod
    def empty(cls) -> 'BikeShareData':
        """Absent state used when a feed could not be loaded."""
        return cls(stations=empty_stations(), trips=TripRepository(), loaded=False)
