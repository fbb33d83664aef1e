# settings.py: secrets.toml / environment configuration
from dataclasses import dataclass
from typing import Mapping, Optional
import os
import streamlit as st
from streamlit.errors import StreamlitAPIException

DEFAULT_STATIONS_URL = "https://dsc106.com/labs/lab07/data/bluebikes-stations.json"
DEFAULT_TRIPS_URL = "https://dsc106.com/labs/lab07/data/bluebikes-traffic-2024-03.csv"
BOSTON_LANES_URL = "https://bostonopendata-boston.opendata.arcgis.com/datasets/boston::existing-bike-network-2022.geojson"
CAMBRIDGE_LANES_URL = "https://raw.githubusercontent.com/cambridgegis/cambridgegis_data/main/Recreation/Bike_Facilities/RECREATION_BikeFacilities.geojson"
MAP_STYLE = "mapbox://styles/mapbox/streets-v12"
FALLBACK_MAP_STYLE = "light"


@dataclass(frozen=True)
class Settings:
    mapbox_token: str
    stations_url: str
    trips_url: str
    log_level: str = "INFO"


def _streamlit_secrets() -> Mapping:
    try:
        return dict(st.secrets)
    except (FileNotFoundError, StreamlitAPIException):
        return {}


def load_settings(secrets: Optional[Mapping] = None, environ: Optional[Mapping] = None) -> Settings:
    secrets = _streamlit_secrets() if secrets is None else secrets
    environ = os.environ if environ is None else environ
    def _get(key: str, default: str = "") -> str:
        return str(secrets.get(key, environ.get(key, default)))
    return Settings(
        mapbox_token=_get("MAPBOX_API_KEY"),
        stations_url=_get("BLUEBIKES_STATIONS_URL", DEFAULT_STATIONS_URL),
        trips_url=_get("BLUEBIKES_TRIPS_URL", DEFAULT_TRIPS_URL),
        log_level=_get("BLUEBIKES_LOG_LEVEL", "INFO").upper(),
    )
