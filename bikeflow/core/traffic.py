"""
Traffic Aggregation
===================
Reduces a set of trips into per-station arrival and departure counts.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)


def compute_station_traffic(stations: pd.DataFrame, trips: pd.DataFrame) -> pd.DataFrame:
    """
    Count departures and arrivals for every station.

    Trips are grouped once by start station and once by end station, so the
    cost is linear in trips plus stations. Station ids that appear only in
    trips are ignored.

    Args:
        stations: Station frame with a short_name column.
        trips: Trip frame with start_station_id / end_station_id columns.

    Returns:
        A copy of `stations` with integer arrivals, departures and
        total_traffic columns. Neither input is modified.
    """
    departures = trips['start_station_id'].value_counts()
    arrivals = trips['end_station_id'].value_counts()

    traffic = stations.copy()
    ids = traffic['short_name']
    traffic['departures'] = ids.map(departures).fillna(0).astype('int64')
    traffic['arrivals'] = ids.map(arrivals).fillna(0).astype('int64')
    traffic['total_traffic'] = traffic['arrivals'] + traffic['departures']

    unknown = set(departures.index).union(arrivals.index) - set(ids)
    if unknown:
        logger.debug(f"Ignoring {len(unknown)} station ids not in the station feed")

    return traffic


def busiest_stations(traffic: pd.DataFrame, limit: int = 10) -> pd.DataFrame:
    """Stations with the highest total traffic, busiest first."""
    return traffic.sort_values(
        ['total_traffic', 'short_name'], ascending=[False, True]
    ).head(limit)
