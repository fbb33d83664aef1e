# data_sources.py: station list (JSON) and trip log (CSV) loaders
from pathlib import Path
import json
import logging
import pandas as pd
import requests
from traffic import TrafficData

logger = logging.getLogger(__name__)

STATION_COLS = ["short_name", "name", "lon", "lat"]
TRIP_COLS = ["start_station_id", "end_station_id", "started_at", "ended_at"]
REQUEST_TIMEOUT = 30
LOCAL_TZ = "America/New_York"
UTC_OFFSET = r"(?:Z|[+-]\d{2}:?\d{2})$"


class DataSourceError(Exception):
    """A station or trip source could not be fetched or parsed."""


def _is_url(source) -> bool:
    return str(source).startswith(("http://", "https://"))


def _read_json(source):
    if _is_url(source):
        resp = requests.get(source, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    with Path(source).open(encoding="utf-8") as fh:
        return json.load(fh)


def parse_timestamps(series: pd.Series, tz=LOCAL_TZ) -> pd.Series:
    """Naive timestamps stay as written; offset-aware ones are converted to local time."""
    if series.astype(str).str.contains(UTC_OFFSET, regex=True).any():
        return pd.to_datetime(series, format="ISO8601", utc=True).dt.tz_convert(tz)
    return pd.to_datetime(series, format="ISO8601")


def load_stations(source) -> pd.DataFrame:
    try:
        payload = _read_json(source)
    except (requests.RequestException, OSError, ValueError) as e:
        raise DataSourceError(f"Could not load stations from {source}: {e}") from e
    try:
        records = payload["data"]["stations"]
    except (KeyError, TypeError) as e:
        raise DataSourceError(f"Station document {source} has no data.stations array") from e
    if not records:
        logger.warning("Station document %s has an empty data.stations array", source)
        return pd.DataFrame({"short_name": pd.Series(dtype=str), "name": pd.Series(dtype=str),
                             "lon": pd.Series(dtype=float), "lat": pd.Series(dtype=float)})
    df = pd.json_normalize(records)
    missing = {"short_name", "lon", "lat"} - set(df.columns)
    if missing:
        raise DataSourceError(f"Station records missing fields: {sorted(missing)}")
    if "name" not in df.columns: df["name"] = df["short_name"]
    df = df[STATION_COLS].dropna(subset=["short_name"]).copy()
    if pd.api.types.is_numeric_dtype(df["short_name"]): df["short_name"] = df["short_name"].astype("Int64")
    df["short_name"] = df["short_name"].astype(str)
    df["lon"] = pd.to_numeric(df["lon"], errors="coerce")
    df["lat"] = pd.to_numeric(df["lat"], errors="coerce")
    df = df.dropna(subset=["lon", "lat"]).reset_index(drop=True)
    logger.info("Loaded %d stations from %s", len(df), source)
    return df


def load_trips(source) -> pd.DataFrame:
    try:
        df = pd.read_csv(source, dtype={"start_station_id": str, "end_station_id": str})
    except (OSError, ValueError) as e:
        raise DataSourceError(f"Could not load trips from {source}: {e}") from e
    missing = set(TRIP_COLS) - set(df.columns)
    if missing:
        raise DataSourceError(f"Trip log {source} missing columns: {sorted(missing)}")
    try:
        for col in ("started_at", "ended_at"):
            df[col] = parse_timestamps(df[col])
    except (ValueError, TypeError) as e:
        raise DataSourceError(f"Unparseable trip timestamps in {source}: {e}") from e
    logger.info("Loaded %d trips from %s", len(df), source)
    return df


def load_traffic_data(stations_source, trips_source) -> TrafficData:
    return TrafficData(stations=load_stations(stations_source), trips=load_trips(trips_source))
