# map_layers.py: pydeck layers for bike lanes and station traffic bubbles
import pandas as pd
import pydeck as pdk
from settings import BOSTON_LANES_URL, CAMBRIDGE_LANES_URL, MAP_STYLE, FALLBACK_MAP_STYLE
from traffic import radius_scale, traffic_label

CENTER_LON, CENTER_LAT = -71.09415, 42.36027
BIKE_LANES = [
    {"id": "bike-lanes", "url": BOSTON_LANES_URL, "color": [50, 212, 0], "width": 5, "opacity": 0.6},
    {"id": "cambridge-bike-lanes", "url": CAMBRIDGE_LANES_URL, "color": [0, 167, 255], "width": 4, "opacity": 0.7},
]
STATION_FILL = [70, 130, 180]
STATION_STROKE = [255, 255, 255]
TOOLTIP = {"text": "{label}", "style": {"backgroundColor": "rgba(0,0,0,0.7)", "color": "white"}}


def bike_lane_layers():
    return [pdk.Layer("GeoJsonLayer", data=lane["url"], id=lane["id"], stroked=True, filled=False,
                      get_line_color=lane["color"], get_line_width=lane["width"], line_width_units="pixels",
                      opacity=lane["opacity"]) for lane in BIKE_LANES]


def station_frame(stations: pd.DataFrame, radius_range) -> pd.DataFrame:
    """Plain records for the bubble layer: position, pixel radius and tooltip text."""
    df = stations[["short_name", "name", "lon", "lat", "arrivals", "departures", "total_traffic"]].copy()
    df["radius"] = radius_scale(df["total_traffic"], radius_range).round(2)
    df["label"] = [traffic_label(t, d, a) for t, d, a in zip(df["total_traffic"], df["departures"], df["arrivals"])]
    return df


def station_layer(stations: pd.DataFrame, radius_range) -> pdk.Layer:
    # deck.gl reprojects get_position on every pan/zoom/resize, so no Python-side repaint
    return pdk.Layer("ScatterplotLayer", data=station_frame(stations, radius_range), id="stations",
                     get_position="[lon, lat]", get_radius="radius", radius_units="pixels",
                     get_fill_color=STATION_FILL, get_line_color=STATION_STROKE, stroked=True,
                     line_width_min_pixels=1, opacity=0.8, pickable=True, auto_highlight=True)


def build_deck(stations: pd.DataFrame, radius_range, mapbox_token: str = "", show_lanes: bool = True) -> pdk.Deck:
    layers = (bike_lane_layers() if show_lanes else []) + [station_layer(stations, radius_range)]
    view = pdk.ViewState(longitude=CENTER_LON, latitude=CENTER_LAT, zoom=12, min_zoom=5, max_zoom=18)
    if mapbox_token:
        return pdk.Deck(layers=layers, initial_view_state=view, map_provider="mapbox", map_style=MAP_STYLE,
                        api_keys={"mapbox": mapbox_token}, tooltip=TOOLTIP)
    return pdk.Deck(layers=layers, initial_view_state=view, map_provider="carto", map_style=FALLBACK_MAP_STYLE, tooltip=TOOLTIP)
