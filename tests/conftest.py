"""Shared fixtures for building small station and trip sets."""

from typing import List, Tuple

import pandas as pd
import pytest

from bikeflow.data.repository import BikeShareData, TripRepository


def make_stations(rows: List[Tuple[str, float, float]]) -> pd.DataFrame:
    """Station frame from (short_name, lat, lon) tuples."""
    return pd.DataFrame(
        [{'short_name': sid, 'name': f"Station {sid}", 'lat': lat, 'lon': lon} for sid, lat, lon in rows]
    )


def make_trips(rows: List[Tuple[str, str, str, str]]) -> pd.DataFrame:
    """Trip frame from (start_id, end_id, started_at, ended_at) tuples."""
    trips = pd.DataFrame(rows, columns=['start_station_id', 'end_station_id', 'started_at', 'ended_at'])
    trips['started_at'] = pd.to_datetime(trips['started_at'])
    trips['ended_at'] = pd.to_datetime(trips['ended_at'])
    return trips


def make_data(stations: pd.DataFrame, trips: pd.DataFrame) -> BikeShareData:
    return BikeShareData(stations=stations, trips=TripRepository(trips), loaded=True)


@pytest.fixture
def stations() -> pd.DataFrame:
    return make_stations([
        ('A32000', 42.36, -71.09),
        ('B32001', 42.35, -71.06),
        ('C32002', 42.37, -71.11),
    ])


@pytest.fixture
def trips() -> pd.DataFrame:
    return make_trips([
        # Morning commute: A -> B
        ('A32000', 'B32001', '2024-03-04 08:00:00', '2024-03-04 08:20:00'),
        ('A32000', 'B32001', '2024-03-05 08:10:00', '2024-03-05 08:30:00'),
        ('A32000', 'B32001', '2024-03-06 07:45:00', '2024-03-06 08:05:00'),
        # Evening return: B -> A
        ('B32001', 'A32000', '2024-03-04 18:00:00', '2024-03-04 18:25:00'),
    ])


@pytest.fixture
def data(stations: pd.DataFrame, trips: pd.DataFrame) -> BikeShareData:
    return make_data(stations, trips)
