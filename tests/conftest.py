"""Shared station and trip fixtures."""

import pandas as pd
import pytest


def make_trips(rows) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "start_station_id": start,
                "end_station_id": end,
                "started_at": pd.Timestamp(started),
                "ended_at": pd.Timestamp(ended),
            }
            for start, end, started, ended in rows
        ],
        columns=["start_station_id", "end_station_id", "started_at", "ended_at"],
    ).astype({"started_at": "datetime64[ns]", "ended_at": "datetime64[ns]"})


@pytest.fixture
def stations() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "short_name": ["A", "B", "C"],
            "name": ["Alpha St", "Bravo Ave", "Charlie Sq"],
            "lon": [-71.09, -71.08, -71.07],
            "lat": [42.36, 42.35, 42.34],
        }
    )


@pytest.fixture
def trips() -> pd.DataFrame:
    return make_trips(
        [
            ("A", "B", "2024-03-01 08:10:00", "2024-03-01 08:25:00"),
            ("A", "C", "2024-03-01 17:30:00", "2024-03-01 17:50:00"),
            ("B", "A", "2024-03-02 23:50:00", "2024-03-03 00:10:00"),
            ("Z", "A", "2024-03-02 12:00:00", "2024-03-02 12:15:00"),
        ]
    )
