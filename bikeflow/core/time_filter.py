"""
Time Window Filter
==================
Selects the trips that are active around a chosen time of day.

A trip is active when either end of it falls within TIME_WINDOW_MINUTES
of the chosen minute. The distance is linear: a window centered at 00:05
does not reach 23:59 of the previous day.
"""

import re
from datetime import datetime, timedelta
from typing import Tuple

import pandas as pd

from ..config import LOCAL_TIMEZONE, MINUTES_PER_DAY, NO_FILTER, TIME_WINDOW_MINUTES


def minutes_since_midnight(timestamps: pd.Series) -> pd.Series:
    """
    Minutes since local midnight for each timestamp (date discarded).

    Timezone-aware values are converted to LOCAL_TIMEZONE first; naive
    values are taken as local wall-clock time.
    """
    timestamps = pd.to_datetime(timestamps)
    if timestamps.dt.tz is not None:
        timestamps = timestamps.dt.tz_convert(LOCAL_TIMEZONE)
    return (timestamps.dt.hour * 60 + timestamps.dt.minute).astype('int64')


def validate_time_filter(time_filter: int) -> int:
    """Return time_filter as an int, or raise ValueError if out of range."""
    time_filter = int(time_filter)
    if time_filter != NO_FILTER and not 0 <= time_filter < MINUTES_PER_DAY:
        raise ValueError(
            f"Time filter must be {NO_FILTER} or between 0 and {MINUTES_PER_DAY - 1}, "
            f"got {time_filter}"
        )
    return time_filter


def filter_trips_by_time(
    trips: pd.DataFrame,
    time_filter: int,
    window: int = TIME_WINDOW_MINUTES
) -> pd.DataFrame:
    """
    Select trips that started or ended within `window` minutes of `time_filter`.

    Args:
        trips: Trip frame. start_minute / end_minute are used when present,
               otherwise they are derived from started_at / ended_at.
        time_filter: Minutes since midnight, or NO_FILTER for all trips.
        window: Half-width of the window in minutes (inclusive).

    Returns:
        The input frame itself for NO_FILTER, otherwise the matching rows.
    """
    time_filter = validate_time_filter(time_filter)
    if time_filter == NO_FILTER:
        return trips
    if trips.empty:
        return trips

    if 'start_minute' in trips.columns:
        started = trips['start_minute']
        ended = trips['end_minute']
    else:
        started = minutes_since_midnight(trips['started_at'])
        ended = minutes_since_midnight(trips['ended_at'])

    active = ((started - time_filter).abs() <= window) | ((ended - time_filter).abs() <= window)
    return trips[active]


def format_time(minutes: int) -> str:
    """Format minutes since midnight as a 12-hour clock label, e.g. '8:00 AM'."""
    moment = datetime(2000, 1, 1) + timedelta(minutes=int(minutes))
    hour = moment.hour % 12 or 12
    suffix = 'AM' if moment.hour < 12 else 'PM'
    return f"{hour}:{moment.minute:02d} {suffix}"


def time_filter_label(time_filter: int) -> Tuple[str, bool]:
    """
    Slider label state.

    Returns:
        (selected time text, whether the "(any time)" indicator is shown)
    """
    if validate_time_filter(time_filter) == NO_FILTER:
        return "", True
    return format_time(time_filter), False


_CLOCK_RE = re.compile(r'^(\d{1,2}):(\d{2})\s*([AaPp][Mm])?$')


def parse_time_of_day(text: str) -> int:
    """
    Parse a command-line time value into minutes since midnight.

    Accepts 'any' / '-1' (no filter), a bare minute count ('480'),
    24-hour 'HH:MM' ('08:00') or 12-hour 'H:MM AM/PM' ('8:00 AM').
    """
    value = str(text).strip()
    if value.lower() in ('any', 'all', 'none', str(NO_FILTER)):
        return NO_FILTER
    if value.isdigit():
        return validate_time_filter(int(value))

    match = _CLOCK_RE.match(value)
    if not match:
        raise ValueError(f"Unrecognised time of day: {text!r}")

    hour, minute, suffix = int(match.group(1)), int(match.group(2)), match.group(3)
    if suffix:
        if not 1 <= hour <= 12:
            raise ValueError(f"Hour out of range for 12-hour time: {text!r}")
        hour = hour % 12 + (12 if suffix.upper() == 'PM' else 0)
    if hour > 23 or minute > 59:
        raise ValueError(f"Unrecognised time of day: {text!r}")
    return hour * 60 + minute
