# app.py: Boston Bluebikes Traffic Map (time-of-day filtered station bubbles)
import logging
import streamlit as st
import plotly.express as px
from data_sources import DataSourceError, load_traffic_data
from map_layers import build_deck, station_frame
from settings import load_settings
from traffic import (NO_FILTER, compute_station_traffic, filter_trips_by_time, hourly_profile, scale_range,
                     time_label, traffic_summary, window_hours, with_traffic)

st.set_page_config(page_title="Bluebikes Traffic Map", layout="wide", initial_sidebar_state="expanded")

SETTINGS = load_settings()
logging.basicConfig(level=SETTINGS.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("bluebikes_traffic")
if not SETTINGS.mapbox_token: st.warning("Mapbox API Key not found. Falling back to the Carto basemap.")

@st.cache_data(show_spinner="Loading stations and trips...")
def load_data(stations_url: str, trips_url: str):
    return load_traffic_data(stations_url, trips_url)

try:
    data = load_data(SETTINGS.stations_url, SETTINGS.trips_url)
except DataSourceError as e:
    logger.exception("Error loading station or traffic data")
    st.error(f"Data Loading Error: {e}")
    st.stop()

st.sidebar.header("Time Filter")
time_filter = st.sidebar.slider("Minutes since midnight (-1 = any time)", NO_FILTER, 1439, NO_FILTER, key="time_filter")
st.sidebar.markdown(f"**Selected:** {time_label(time_filter)}")
st.sidebar.header("Map Display Options")
show_lanes = st.sidebar.toggle("Show bike lanes", value=True, key="show_lanes_toggle")

filtered_trips = filter_trips_by_time(data.trips, time_filter)
stations = with_traffic(data.stations, compute_station_traffic(data.stations, filtered_trips))
radius_range = scale_range(time_filter)
logger.debug("time_filter=%s kept %d of %d trips", time_filter, len(filtered_trips), len(data.trips))

tab_map, tab_station = st.tabs(["🗺️ Traffic Map", "📍 Station Drilldown"])

with tab_map:
    st.header("Bluebikes Station Traffic")
    summary = traffic_summary(stations, filtered_trips)
    k1, k2, k3 = st.columns(3)
    k1.metric("Trips (selected)", f"{summary['trips']:,}")
    k2.metric("Active stations", f"{summary['active_stations']:,} / {len(stations):,}")
    k3.metric("Busiest station", f"{summary['busiest'][0]} ({summary['busiest'][1]:,})" if summary["busiest"] else "—")
    st.pydeck_chart(build_deck(stations, radius_range, SETTINGS.mapbox_token, show_lanes))
    st.caption("Circle size = arrivals + departures (square-root scale). Green: Boston bike lanes. Blue: Cambridge bike lanes.")
    table = station_frame(stations, radius_range).drop(columns=["radius", "label"]).sort_values("total_traffic", ascending=False)
    st.download_button("Download station traffic CSV", data=table.to_csv(index=False).encode("utf-8"), file_name="bluebikes_station_traffic.csv", mime="text/csv")

with tab_station:
    st.header("Station Drilldown")
    names = stations.set_index("short_name")["name"].to_dict()
    station_ids = stations.sort_values("total_traffic", ascending=False)["short_name"].tolist()
    if not station_ids:
        st.info("No stations loaded.")
    else:
        sel_station = st.selectbox("Select station", station_ids, format_func=lambda sid: f"{names.get(sid, sid)} ({sid})", key="station_select")
        row = stations[stations["short_name"] == sel_station].iloc[0]
        st.markdown(f"**{row['name']}**: {int(row['total_traffic']):,} trips ({int(row['departures']):,} departures, {int(row['arrivals']):,} arrivals) {time_label(time_filter)}")
        prof = hourly_profile(data.trips, sel_station).melt(id_vars="hour", var_name="direction", value_name="trips")
        fig = px.bar(prof, x="hour", y="trips", color="direction", barmode="group", color_discrete_map={"departures": "#4682B4", "arrivals": "#FDB366"}, labels={"hour": "Hour of day", "trips": "Trips (all days)"})
        if time_filter != NO_FILTER:
            x0, x1 = window_hours(time_filter)
            fig.add_vrect(x0=x0, x1=x1, fillcolor="steelblue", opacity=0.15, line_width=0)
        fig.update_layout(margin=dict(l=0, r=8, t=10, b=0), xaxis=dict(showgrid=False, range=[-0.5, 23.5]), legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1))
        st.plotly_chart(fig, use_container_width=True)

st.markdown("---")
st.caption("Data: Bluebikes station information and March 2024 trip data. Bike lanes: Boston Open Data, Cambridge GIS. Tiles: Mapbox.")
