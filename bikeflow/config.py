"""
Configuration and Constants
============================
Centralized configuration for the Bluebikes station traffic map.
"""

from pathlib import Path

# ============================================================================
# PATHS
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUT_DIR = PROJECT_ROOT / "outputs"
CACHE_DIR = PROJECT_ROOT / "cache"

# ============================================================================
# FEED DEFINITIONS
# ============================================================================

STATION_FEED_URL = "https://dsc106.com/labs/lab07/data/bluebikes-stations.json"
TRIP_FEED_URL = "https://dsc106.com/labs/lab07/data/bluebikes-traffic-2024-03.csv"

# Local file names, looked up in DATA_DIR first and then CACHE_DIR
FEED_FILES = {
    'stations': 'bluebikes-stations.json',
    'trips': 'bluebikes-traffic-2024-03.csv',
}

# Column data types for consistent loading
TRIP_DTYPES = {
    'ride_id': str,
    'start_station_id': str,
    'end_station_id': str,
}

TRIP_COLUMNS = ['start_station_id', 'end_station_id', 'started_at', 'ended_at']
STATION_COLUMNS = ['short_name', 'name', 'lat', 'lon']

REQUEST_TIMEOUT = 30  # seconds
REQUEST_HEADERS = {
    'User-Agent': 'bikeflow/1.0 (+station traffic map)',
    'Accept': 'application/json,text/csv;q=0.9,*/*;q=0.8',
}

# Naive timestamps are already local; aware ones are converted to this zone
LOCAL_TIMEZONE = "America/New_York"

# ============================================================================
# TIME FILTER
# ============================================================================

NO_FILTER = -1
TIME_WINDOW_MINUTES = 60
MINUTES_PER_DAY = 24 * 60

# Slider states are pre-computed every SLIDER_STEP minutes
SLIDER_STEP = 15

# ============================================================================
# SCALES
# ============================================================================

RADIUS_RANGE_ALL = (0, 25)
RADIUS_RANGE_FILTERED = (3, 50)

FLOW_BUCKETS = (0, 0.5, 1)
# Bucket used when a station has no traffic (0 / 0 ratio)
ZERO_TRAFFIC_FLOW = 0.5

FLOW_COLORS = {
    0: "#ff8c00",    # arrivals dominate
    0.5: "#a2875a",  # balanced
    1: "#4682b4",    # departures dominate
}

MARKER_STYLE = {
    'color': 'white',
    'weight': 1,
    'opacity': 0.8,
    'fill_opacity': 0.6,
}

# ============================================================================
# MAP
# ============================================================================

# Cambridge / Boston
DEFAULT_MAP_CENTER = (42.36027, -71.09415)
DEFAULT_ZOOM = 12
MIN_ZOOM = 5
MAX_ZOOM = 18
TILE_SIZE = 512
DEFAULT_VIEWPORT_SIZE = (1024, 768)

VIEWPORT_EVENTS = ('move', 'zoom', 'resize', 'moveend')

BIKE_LANE_LAYERS = [
    {
        'name': 'Boston bike lanes',
        'url': "https://bostonopendata-boston.opendata.arcgis.com/datasets/boston::existing-bike-network-2022.geojson",
        'color': 'green',
    },
    {
        'name': 'Cambridge bike lanes',
        'url': "https://raw.githubusercontent.com/cambridgegis/cambridgegis_data/main/Recreation/Bike_Facilities/RECREATION_BikeFacilities.geojson",
        'color': 'blue',
    },
]
BIKE_LANE_WEIGHT = 3
BIKE_LANE_OPACITY = 0.4
