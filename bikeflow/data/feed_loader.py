"""
Feed Loader
===========
Loads the station feed and the monthly trip log, with lazy loading and a
download cache.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from ..config import (
    CACHE_DIR,
    DATA_DIR,
    FEED_FILES,
    LOCAL_TIMEZONE,
    REQUEST_HEADERS,
    REQUEST_TIMEOUT,
    STATION_COLUMNS,
    STATION_FEED_URL,
    TRIP_COLUMNS,
    TRIP_DTYPES,
    TRIP_FEED_URL,
)
from .repository import BikeShareData, TripRepository

logger = logging.getLogger(__name__)

# Trailing UTC offset such as Z, -05:00 or +0000
OFFSET_PATTERN = r"(?:Z|[+-]\d{2}:?\d{2})$"


class LoadFailure(Exception):
    """A feed could not be fetched or parsed."""

    def __init__(self, feed: str, reason: str):
        super().__init__(f"Failed to load {feed} feed: {reason}")
        self.feed = feed
        self.reason = reason


class FeedLoader:
    """
    Station and trip feed loader with lazy loading and caching.

    Usage:
        loader = FeedLoader()

        # Individual tables, parsed on first access
        stations = loader.stations
        trips = loader.trips

        # Both feeds, fetched concurrently; never raises
        data = loader.load()
        if not data.loaded:
            ...  # nothing to show
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
        station_url: str = STATION_FEED_URL,
        trip_url: str = TRIP_FEED_URL
    ):
        """
        Initialize the feed loader.

        Args:
            data_dir: Directory checked first for local copies of the feeds.
                      Defaults to the project's data/ directory.
            cache_dir: Directory that downloaded feeds are written to.
            station_url: Station feed URL used when no local copy exists.
            trip_url: Trip feed URL used when no local copy exists.
        """
        self.data_dir = Path(data_dir) if data_dir else DATA_DIR
        self.cache_dir = Path(cache_dir) if cache_dir else CACHE_DIR
        self.urls = {'stations': station_url, 'trips': trip_url}
        self._cache: Dict[str, pd.DataFrame] = {}

    # ========================================================================
    # RAW FEEDS
    # ========================================================================

    def _feed_path(self, feed: str) -> Path:
        """
        Return a local path for `feed`, downloading it if necessary.

        Raises:
            LoadFailure: if the feed is not available locally and the
                         download fails.
        """
        filename = FEED_FILES[feed]
        for directory in (self.data_dir, self.cache_dir):
            path = directory / filename
            if path.exists():
                return path

        url = self.urls[feed]
        logger.info(f"Downloading {feed} feed from {url}")
        try:
            response = requests.get(url, headers=REQUEST_HEADERS, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise LoadFailure(feed, str(e)) from e

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path = self.cache_dir / filename
        path.write_bytes(response.content)
        logger.info(f"  Cached {feed} feed at {path} ({len(response.content) / 1024:.0f} KB)")
        return path

    # ========================================================================
    # PARSING
    # ========================================================================

    def _load_stations(self) -> pd.DataFrame:
        if 'stations' in self._cache:
            return self._cache['stations']

        path = self._feed_path('stations')
        logger.info(f"Loading stations from {path}")
        try:
            payload = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise LoadFailure('stations', str(e)) from e

        try:
            stations = parse_stations(_station_records(payload))
        except (ValueError, TypeError) as e:
            raise LoadFailure('stations', str(e)) from e
        logger.info(f"  Loaded stations: {len(stations):,} rows")
        self._cache['stations'] = stations
        return stations

    def _load_trips(self) -> pd.DataFrame:
        if 'trips' in self._cache:
            return self._cache['trips']

        path = self._feed_path('trips')
        logger.info(f"Loading trips from {path}")
        try:
            raw = pd.read_csv(path, dtype=TRIP_DTYPES, low_memory=False)
        except (OSError, ValueError) as e:
            raise LoadFailure('trips', str(e)) from e

        missing = [c for c in TRIP_COLUMNS if c not in raw.columns]
        if missing:
            raise LoadFailure('trips', f"missing columns {missing}")

        try:
            trips = parse_trips(raw)
        except (ValueError, TypeError) as e:
            raise LoadFailure('trips', str(e)) from e
        logger.info(f"  Loaded trips: {len(trips):,} rows")
        self._cache['trips'] = trips
        return trips

    def load(self) -> BikeShareData:
        """
        Load both feeds concurrently.

        Returns:
            BikeShareData with loaded=True, or BikeShareData.empty() if
            either feed fails. Failures are logged, not raised.
        """
        with ThreadPoolExecutor(max_workers=2) as pool:
            stations_future = pool.submit(self._load_stations)
            trips_future = pool.submit(self._load_trips)
            try:
                stations = stations_future.result()
                trips = trips_future.result()
            except LoadFailure as e:
                logger.error(str(e))
                return BikeShareData.empty()

        try:
            repository = TripRepository(trips)
        except (ValueError, TypeError) as e:
            logger.error(str(LoadFailure('trips', str(e))))
            return BikeShareData.empty()

        return BikeShareData(stations=stations, trips=repository, loaded=True)

    def clear_cache(self) -> None:
        """Clear parsed tables to free memory. Downloaded files are kept."""
        self._cache.clear()
        logger.info("Cache cleared")

    # ========================================================================
    # LAZY PROPERTIES
    # ========================================================================

    @property
    def stations(self) -> pd.DataFrame:
        """Stations with short_name, name, lat, lon."""
        return self._load_stations()

    @property
    def trips(self) -> pd.DataFrame:
        """Trips with station ids and parsed timestamps."""
        return self._load_trips()


def _station_records(payload: Any) -> List[dict]:
    """Accept GBFS-style {'data': {'stations': [...]}} or a bare list."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get('data', payload)
        if isinstance(data, dict) and isinstance(data.get('stations'), list):
            return data['stations']
    raise LoadFailure('stations', "no station list found in feed")


def parse_stations(records: List[dict]) -> pd.DataFrame:
    """
    Build the station frame, skipping malformed rows.

    Entries that are not objects, rows without a short_name and rows with
    non-numeric coordinates are dropped; duplicate ids keep their first
    record.
    """
    objects = [r for r in records if isinstance(r, dict)]
    stations = pd.DataFrame.from_records(objects)
    for column in STATION_COLUMNS:
        if column not in stations.columns:
            stations[column] = pd.NA
    stations = stations[STATION_COLUMNS].copy()

    stations['lat'] = pd.to_numeric(stations['lat'], errors='coerce')
    stations['lon'] = pd.to_numeric(stations['lon'], errors='coerce')
    valid = stations.dropna(subset=['short_name', 'lat', 'lon'])
    valid = valid.assign(short_name=valid['short_name'].astype(str))
    valid = valid.drop_duplicates('short_name', keep='first').reset_index(drop=True)

    dropped = len(records) - len(valid)
    if dropped:
        logger.warning(f"Skipped {dropped} malformed or duplicate station rows")
    return valid


def parse_trips(raw: pd.DataFrame) -> pd.DataFrame:
    """
    Build the trip frame, skipping malformed rows.

    Rows with a missing station id or an unparseable timestamp are dropped.
    """
    trips = raw[TRIP_COLUMNS].copy()
    trips['started_at'] = parse_timestamps(trips['started_at'])
    trips['ended_at'] = parse_timestamps(trips['ended_at'])
    valid = trips.dropna(subset=TRIP_COLUMNS)
    valid = valid.assign(
        start_station_id=valid['start_station_id'].astype(str),
        end_station_id=valid['end_station_id'].astype(str),
    ).reset_index(drop=True)

    dropped = len(trips) - len(valid)
    if dropped:
        logger.warning(f"Skipped {dropped} malformed trip rows")
    return valid


def parse_timestamps(values: pd.Series) -> pd.Series:
    """
    Parse trip timestamps into naive local wall-clock datetimes.

    Values carrying a UTC offset are converted to LOCAL_TIMEZONE, so a log
    that spans a DST switch (-05:00 and -04:00 rows) parses to one column.
    Naive values are already local. Unparseable values become NaT.
    """
    has_offset = values.astype('string').str.contains(OFFSET_PATTERN, regex=True, na=False)
    if not has_offset.any():
        return pd.to_datetime(values, errors='coerce', format='mixed')

    aware = pd.to_datetime(values[has_offset], errors='coerce', format='mixed', utc=True)
    parts = [aware.dt.tz_convert(LOCAL_TIMEZONE).dt.tz_localize(None)]
    if not has_offset.all():
        parts.append(pd.to_datetime(values[~has_offset], errors='coerce', format='mixed'))
    return pd.concat(parts).sort_index()
