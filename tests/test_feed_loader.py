"""Tests for station and trip feed loading."""

import json
from pathlib import Path

import pandas as pd
import pytest
import requests

from bikeflow.config import FEED_FILES
from bikeflow.data import feed_loader
from bikeflow.data.feed_loader import FeedLoader, LoadFailure, parse_stations, parse_timestamps

TRIPS_CSV = """ride_id,rideable_type,started_at,ended_at,start_station_id,end_station_id
r1,classic_bike,2024-03-01 07:05:00,2024-03-01 07:10:00,A32000,B32001
r2,classic_bike,2024-03-01 06:00:00,2024-03-01 06:10:00,B32001,A32000
r3,electric_bike,not a date,2024-03-01 06:10:00,B32001,A32000
r4,electric_bike,2024-03-02 17:30:00.123,2024-03-02 17:45:00.456,,A32000
"""

STATIONS = {
    "data": {
        "stations": [
            {"short_name": "A32000", "name": "MIT at Mass Ave", "lat": "42.3581", "lon": "-71.0936"},
            {"short_name": "B32001", "name": "Central Square", "lat": 42.3652, "lon": -71.1031},
            {"short_name": "C32002", "name": "No coordinates", "lat": "", "lon": None},
            {"name": "No id", "lat": 42.0, "lon": -71.0},
            {"short_name": "A32000", "name": "Duplicate", "lat": 40.0, "lon": -70.0},
        ]
    }
}


def _write_feeds(directory: Path, stations=STATIONS, trips=TRIPS_CSV) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    if stations is not None:
        (directory / FEED_FILES['stations']).write_text(json.dumps(stations), encoding='utf-8')
    if trips is not None:
        (directory / FEED_FILES['trips']).write_text(trips, encoding='utf-8')


class _FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def no_network(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("network disabled in tests")

    monkeypatch.setattr(feed_loader.requests, 'get', fail)


def test_loads_local_feeds_and_skips_malformed_rows(tmp_path: Path, no_network) -> None:
    _write_feeds(tmp_path / 'data')
    loader = FeedLoader(data_dir=tmp_path / 'data', cache_dir=tmp_path / 'cache')

    data = loader.load()

    assert data.loaded
    assert list(data.stations['short_name']) == ['A32000', 'B32001']
    assert data.stations.loc[0, 'name'] == 'MIT at Mass Ave'
    assert data.stations.loc[0, 'lat'] == pytest.approx(42.3581)
    assert len(data.trips) == 2
    assert list(data.trips.trips['start_minute']) == [425, 360]


def test_station_feed_may_be_a_bare_list(tmp_path: Path, no_network) -> None:
    _write_feeds(tmp_path, stations=STATIONS['data']['stations'])

    stations = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').stations

    assert list(stations['short_name']) == ['A32000', 'B32001']


def test_missing_feed_without_network_gives_empty_state(tmp_path: Path, no_network) -> None:
    _write_feeds(tmp_path / 'data', trips=None)
    loader = FeedLoader(data_dir=tmp_path / 'data', cache_dir=tmp_path / 'cache')

    data = loader.load()

    assert not data.loaded
    assert data.stations.empty
    assert len(data.trips) == 0


def test_direct_access_raises_load_failure(tmp_path: Path, no_network) -> None:
    loader = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache')

    with pytest.raises(LoadFailure) as excinfo:
        loader.trips

    assert excinfo.value.feed == 'trips'


def test_trip_feed_missing_columns_is_a_load_failure(tmp_path: Path, no_network) -> None:
    _write_feeds(tmp_path, trips="ride_id,started_at\nr1,2024-03-01 07:05:00\n")

    data = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').load()

    assert not data.loaded


def test_station_feed_without_station_list_is_a_load_failure(tmp_path: Path, no_network) -> None:
    _write_feeds(tmp_path, stations={"data": {"bikes": []}})

    with pytest.raises(LoadFailure):
        FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').stations


def test_downloads_are_cached(tmp_path: Path, monkeypatch) -> None:
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append(url)
        if url.endswith('.json'):
            return _FakeResponse(json.dumps(STATIONS).encode('utf-8'))
        return _FakeResponse(TRIPS_CSV.encode('utf-8'))

    monkeypatch.setattr(feed_loader.requests, 'get', fake_get)
    cache_dir = tmp_path / 'cache'

    first = FeedLoader(data_dir=tmp_path / 'data', cache_dir=cache_dir).load()
    second = FeedLoader(data_dir=tmp_path / 'data', cache_dir=cache_dir).load()

    assert first.loaded and second.loaded
    assert len(calls) == 2
    assert (cache_dir / FEED_FILES['stations']).exists()
    assert (cache_dir / FEED_FILES['trips']).exists()


def test_http_error_gives_empty_state(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(feed_loader.requests, 'get', lambda *a, **kw: _FakeResponse(b'', status_code=503))

    data = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').load()

    assert not data.loaded


def test_parsed_tables_are_cached_until_cleared(tmp_path: Path, no_network) -> None:
    _write_feeds(tmp_path)
    loader = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache')

    assert loader.stations is loader.stations
    first = loader.stations
    loader.clear_cache()

    assert loader.stations is not first


def test_parse_stations_coerces_numeric_strings() -> None:
    stations = parse_stations([{"short_name": 101, "name": "Numeric id", "lat": "42.1", "lon": "-71.2"}])

    assert stations.loc[0, 'short_name'] == '101'
    assert stations.loc[0, 'lon'] == pytest.approx(-71.2)


def test_offsets_across_dst_switch_parse_to_local_time(tmp_path: Path, no_network) -> None:
    trips = (
        "started_at,ended_at,start_station_id,end_station_id\n"
        "2024-03-09T08:00:00-05:00,2024-03-09T08:20:00-05:00,A32000,B32001\n"
        "2024-03-11T08:00:00-04:00,2024-03-11T08:20:00-04:00,B32001,A32000\n"
    )
    _write_feeds(tmp_path, trips=trips)

    data = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').load()

    assert data.loaded
    assert list(data.trips.trips['start_minute']) == [480, 480]
    assert list(data.trips.trips['end_minute']) == [500, 500]


def test_parse_timestamps_mixes_naive_and_offset_values() -> None:
    values = pd.Series(['2024-03-11T12:00:00Z', '2024-03-11 09:30:00', 'never'])

    parsed = parse_timestamps(values)

    assert parsed.dt.tz is None
    assert parsed.iloc[0] == pd.Timestamp('2024-03-11 08:00:00')
    assert parsed.iloc[1] == pd.Timestamp('2024-03-11 09:30:00')
    assert pd.isna(parsed.iloc[2])


def test_unparseable_trip_feed_gives_empty_state(tmp_path: Path, no_network, monkeypatch) -> None:
    _write_feeds(tmp_path)

    def broken(raw):
        raise ValueError("Mixed timezones detected")

    monkeypatch.setattr(feed_loader, 'parse_trips', broken)

    data = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').load()

    assert not data.loaded


def test_non_object_station_entries_are_skipped(tmp_path: Path, no_network, caplog) -> None:
    stations = {"data": {"stations": [1, "two", STATIONS['data']['stations'][1]]}}
    _write_feeds(tmp_path, stations=stations)

    with caplog.at_level('WARNING', logger='bikeflow.data.feed_loader'):
        data = FeedLoader(data_dir=tmp_path, cache_dir=tmp_path / 'cache').load()

    assert data.loaded
    assert list(data.stations['short_name']) == ['B32001']
    assert 'Skipped 2 malformed' in caplog.text


def test_station_list_without_objects_loads_no_stations() -> None:
    stations = parse_stations([1, 2])

    assert stations.empty
    assert list(stations.columns) == ['short_name', 'name', 'lat', 'lon']
