# traffic.py: per-station traffic counts, time-of-day filtering and marker sizing
from dataclasses import dataclass
import numpy as np
import pandas as pd

NO_FILTER = -1
WINDOW_MINUTES = 60
UNFILTERED_RANGE = (0.0, 25.0)
FILTERED_RANGE = (3.0, 50.0)
COUNTER_COLS = ["arrivals", "departures", "total_traffic"]


@dataclass(frozen=True)
class TrafficData:
    """Loaded stations and trips, passed explicitly to the filter and aggregator."""
    stations: pd.DataFrame
    trips: pd.DataFrame


def minutes_since_midnight(ts: pd.Series) -> pd.Series:
    return ts.dt.hour * 60 + ts.dt.minute


def filter_trips_by_time(trips: pd.DataFrame, pivot: int) -> pd.DataFrame:
    if pivot == NO_FILTER: return trips
    started = minutes_since_midnight(trips["started_at"])
    ended = minutes_since_midnight(trips["ended_at"])
    keep = ((started - pivot).abs() <= WINDOW_MINUTES) | ((ended - pivot).abs() <= WINDOW_MINUTES)
    return trips[keep]


def compute_station_traffic(stations: pd.DataFrame, trips: pd.DataFrame) -> pd.DataFrame:
    """Count departures and arrivals per station.

    Returns a new frame indexed by ``short_name``, one row per station in input order.
    Trips whose station id is not in ``stations`` are counted but never read.
    """
    departures = trips.groupby("start_station_id").size()
    arrivals = trips.groupby("end_station_id").size()
    ids = pd.Index(stations["short_name"], name="short_name")
    out = pd.DataFrame(index=ids)
    out["arrivals"] = arrivals.reindex(ids, fill_value=0).to_numpy(dtype=np.int64)
    out["departures"] = departures.reindex(ids, fill_value=0).to_numpy(dtype=np.int64)
    out["total_traffic"] = out["arrivals"] + out["departures"]
    return out


def with_traffic(stations: pd.DataFrame, traffic: pd.DataFrame) -> pd.DataFrame:
    out = stations.drop(columns=[c for c in COUNTER_COLS if c in stations.columns])
    counts = traffic.reindex(out["short_name"]).fillna(0).astype(np.int64)
    for col in COUNTER_COLS:
        out[col] = counts[col].to_numpy()
    return out


def scale_range(pivot: int) -> tuple:
    return UNFILTERED_RANGE if pivot == NO_FILTER else FILTERED_RANGE


def radius_scale(values: pd.Series, radius_range=UNFILTERED_RANGE) -> pd.Series:
    """Square-root scale over ``[0, max(values)]``; zero traffic draws no bubble."""
    low, high = radius_range
    values = values.astype(float)
    max_value = values.max() if len(values) else 0.0
    if not max_value or pd.isna(max_value):
        return pd.Series(0.0, index=values.index)
    radius = low + (high - low) * np.sqrt(values.clip(lower=0) / max_value)
    return radius.where(values > 0, 0.0)


def traffic_label(total: int, departures: int, arrivals: int) -> str:
    return f"{total} trips ({departures} departures, {arrivals} arrivals)"


def format_time(minutes: int) -> str:
    hour, minute = divmod(int(minutes), 60)
    suffix = "AM" if hour % 24 < 12 else "PM"
    return f"{(hour % 12) or 12}:{minute:02d} {suffix}"


def time_label(pivot: int) -> str:
    return "(any time)" if pivot == NO_FILTER else format_time(pivot)


def hourly_profile(trips: pd.DataFrame, station_id: str) -> pd.DataFrame:
    """Departures and arrivals per hour of day (0-23) for one station."""
    hours = pd.RangeIndex(24, name="hour")
    dep = trips.loc[trips["start_station_id"] == station_id, "started_at"].dt.hour.value_counts()
    arr = trips.loc[trips["end_station_id"] == station_id, "ended_at"].dt.hour.value_counts()
    return pd.DataFrame({
        "departures": dep.reindex(hours, fill_value=0).to_numpy(dtype=np.int64),
        "arrivals": arr.reindex(hours, fill_value=0).to_numpy(dtype=np.int64),
    }, index=hours).reset_index()


def traffic_summary(stations: pd.DataFrame, trips: pd.DataFrame) -> dict:
    active = stations[stations["total_traffic"] > 0]
    busiest = None
    if not active.empty:
        top = active.loc[active["total_traffic"].idxmax()]
        label = top["name"] if "name" in top.index and pd.notna(top["name"]) else top["short_name"]
        busiest = (label, int(top["total_traffic"]))
    return {"trips": int(len(trips)), "active_stations": int(len(active)), "busiest": busiest}


def window_hours(pivot: int) -> tuple:
    """The ±60-minute window on an hour-of-day axis whose bars sit centred on each hour."""
    return (max(-0.5, (pivot - WINDOW_MINUTES) / 60 - 0.5), min(23.5, (pivot + WINDOW_MINUTES) / 60 - 0.5))
