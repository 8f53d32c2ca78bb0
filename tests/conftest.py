"""Pytest configuration and shared fixtures.

The sample airport is a single east-west runway (09/27) with a parallel
taxiway A to the north, three connectors (B, C, D) reaching into the
runway footprint, an unnamed service path, and an isolated taxiway E:

    A.0 (N1) ---------- (N2) A.1 ---------- (N3)
     |B.0                |D.0                |C.0
    =09===================================27===  runway
                                    E.0 far away, disconnected
"""

import sqlite3
from pathlib import Path

import pytest

from taxiguide.airports.geometry import GeoPosition
from taxiguide.airports.layout import (
    Airport,
    AirportLayout,
    Runway,
    RunwayEnd,
    TaxiPathRecord,
    assign_segment_indexes,
)

TAXI_PATHS = [
    # id, name, start_lat, start_long, end_lat, end_long, width
    (1, "A", 37.462, -122.120, 37.462, -122.115, 50.0),
    (2, "A", 37.462, -122.115, 37.462, -122.110, 50.0),
    (3, "B", 37.462, -122.120, 37.4601, -122.120, 40.0),
    (4, "C", 37.462, -122.110, 37.4601, -122.110, 40.0),
    (5, "D", 37.462, -122.115, 37.4601, -122.115, 40.0),
    (6, "", 37.463, -122.118, 37.463, -122.117, 20.0),
    (7, "E", 37.470, -122.130, 37.470, -122.129, 40.0),
]

RUNWAY_ENDS = [
    # id, name, heading, lat, long
    (10, "09", 90.0, 37.460, -122.121),
    (11, "27", 270.0, 37.460, -122.109),
]

N1 = GeoPosition(37.462, -122.120)
N2 = GeoPosition(37.462, -122.115)
N3 = GeoPosition(37.462, -122.110)
RWY09 = GeoPosition(37.460, -122.121)
RWY27 = GeoPosition(37.460, -122.109)
E_START = GeoPosition(37.470, -122.130)


@pytest.fixture
def taxi_path_records() -> list[TaxiPathRecord]:
    """Raw taxi path rows of the sample airport."""
    return [TaxiPathRecord(*row) for row in TAXI_PATHS]


@pytest.fixture
def sample_layout(taxi_path_records: list[TaxiPathRecord]) -> AirportLayout:
    """Sample airport layout."""
    ends = [
        RunwayEnd(id=row[0], name=row[1], position=GeoPosition(row[3], row[4]), heading=row[2])
        for row in RUNWAY_ENDS
    ]
    runway = Runway(id=1, primary_end=ends[0], secondary_end=ends[1], width_ft=100.0, length_ft=3500.0)
    airport = Airport(id=1, ident="KTST", name="Test Field", position=GeoPosition(37.461, -122.115))

    return AirportLayout(airport, [runway], ends, assign_segment_indexes(taxi_path_records))


@pytest.fixture
def sample_db(tmp_path: Path) -> Path:
    """SQLite export containing the sample airport plus an unrelated one."""
    db_path = tmp_path / "navdata.sqlite"
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE airport (
                airport_id INTEGER PRIMARY KEY, ident TEXT, name TEXT,
                city TEXT, state TEXT, lonx REAL, laty REAL
            );
            CREATE TABLE runway (
                runway_id INTEGER PRIMARY KEY, airport_id INTEGER, length REAL,
                width REAL, heading REAL, primary_end_id INTEGER, secondary_end_id INTEGER
            );
            CREATE TABLE runway_end (
                runway_end_id INTEGER PRIMARY KEY, name TEXT, heading REAL,
                lonx REAL, laty REAL
            );
            CREATE TABLE taxi_path (
                taxi_path_id INTEGER PRIMARY KEY, airport_id INTEGER, name TEXT,
                width REAL, start_lonx REAL, start_laty REAL, end_lonx REAL, end_laty REAL
            );
            """
        )
        conn.execute(
            "INSERT INTO airport VALUES (1, 'KTST', 'Test Field', 'Testville', 'CA', -122.115, 37.461)"
        )
        conn.execute(
            "INSERT INTO airport VALUES (2, 'KOTH', 'Other Field', 'Elsewhere', 'CA', -121.0, 36.0)"
        )
        conn.execute("INSERT INTO runway VALUES (1, 1, 3500, 100, 90.0, 10, 11)")
        for end_id, name, heading, lat, long in RUNWAY_ENDS:
            conn.execute(
                "INSERT INTO runway_end VALUES (?, ?, ?, ?, ?)", (end_id, name, heading, long, lat)
            )
        for path_id, name, s_lat, s_long, e_lat, e_long, width in TAXI_PATHS:
            conn.execute(
                "INSERT INTO taxi_path VALUES (?, 1, ?, ?, ?, ?, ?, ?)",
                (path_id, name, width, s_long, s_lat, e_long, e_lat),
            )
        conn.execute(
            "INSERT INTO taxi_path VALUES (100, 2, 'Z', 40, -121.0, 36.0, -121.001, 36.0)"
        )
        conn.commit()
    finally:
        conn.close()

    return db_path


@pytest.fixture
def sample_points() -> dict[str, GeoPosition]:
    """Named junction points of the sample airport."""
    return {
        "N1": N1,
        "N2": N2,
        "N3": N3,
        "RWY09": RWY09,
        "RWY27": RWY27,
        "E_START": E_START,
    }
