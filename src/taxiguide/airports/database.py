"""Airport layout loader for SQLite navigation database exports.

Reads the ``airport``, ``runway``, ``runway_end`` and ``taxi_path`` tables
of a Little Navmap style SQLite export and builds an AirportLayout.

Typical usage:
    from taxiguide.airports.database import load_airport_layout

    layout = load_airport_layout("data/little_navmap_navigraph.sqlite", "KPAO")
    print(f"{layout.airport.name}: {len(layout.segments)} taxi segments")
"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Optional

from taxiguide.airports.errors import DataIntegrityError, NotFoundError
from taxiguide.airports.geometry import GeoPosition
from taxiguide.airports.layout import (
    Airport,
    AirportLayout,
    Runway,
    RunwayEnd,
    TaxiPathRecord,
    assign_segment_indexes,
)
from taxiguide.core.config import RoutingSettings

logger = logging.getLogger(__name__)


def _connect(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    return conn


def _load_airport(conn: sqlite3.Connection, ident: str) -> Airport:
    row = conn.execute(
        "SELECT airport_id, ident, name, city, state, lonx, laty FROM airport WHERE ident = ?",
        (ident,),
    ).fetchone()
    if row is None:
        raise NotFoundError(f"Airport {ident} not found in database")

    return Airport(
        id=row["airport_id"],
        ident=row["ident"],
        name=row["name"] or "",
        position=GeoPosition(row["laty"], row["lonx"]),
        city=row["city"] or "",
        state=row["state"] or "",
    )


def _load_runway_ends(conn: sqlite3.Connection, end_ids: list[int]) -> dict[int, RunwayEnd]:
    if not end_ids:
        return {}

    placeholders = ", ".join("?" for _ in end_ids)
    rows = conn.execute(
        "SELECT runway_end_id, name, heading, lonx, laty FROM runway_end "
        f"WHERE runway_end_id IN ({placeholders}) ORDER BY runway_end_id",
        end_ids,
    ).fetchall()

    return {
        row["runway_end_id"]: RunwayEnd(
            id=row["runway_end_id"],
            name=row["name"],
            position=GeoPosition(row["laty"], row["lonx"]),
            heading=row["heading"] or 0.0,
        )
        for row in rows
    }


def load_airport_layout(
    db_path: str | Path, ident: str, settings: Optional[RoutingSettings] = None
) -> AirportLayout:
    """Load the ground layout of one airport.

    Args:
        db_path: Path to the SQLite database file.
        ident: Airport identifier (e.g., "KPAO").
        settings: Routing settings (feet-per-degree for runway footprints).

    Returns:
        AirportLayout with runways, runway ends and indexed taxi segments.

    Raises:
        FileNotFoundError: If the database file does not exist.
        NotFoundError: If the airport is unknown, or a runway references a
            runway end missing from the database.
        DataIntegrityError: If a runway has no width.
    """
    db_path = Path(db_path)
    if not db_path.exists():
        raise FileNotFoundError(f"Database file not found: {db_path}")

    settings = settings or RoutingSettings()

    with closing(_connect(db_path)) as conn:
        airport = _load_airport(conn, ident)
        logger.debug("Loaded airport %s (%s)", airport.ident, airport.name)

        runway_rows = conn.execute(
            "SELECT runway_id, width, length, heading, primary_end_id, secondary_end_id "
            "FROM runway WHERE airport_id = ? ORDER BY runway_id",
            (airport.id,),
        ).fetchall()
        logger.debug("Found %d runways", len(runway_rows))

        end_ids: list[int] = []
        for row in runway_rows:
            end_ids.extend([row["primary_end_id"], row["secondary_end_id"]])
        runway_ends_by_id = _load_runway_ends(conn, end_ids)

        runways: list[Runway] = []
        for row in runway_rows:
            ends = []
            for end_id in (row["primary_end_id"], row["secondary_end_id"]):
                if end_id not in runway_ends_by_id:
                    raise NotFoundError(
                        f"Runway {row['runway_id']} references missing runway end {end_id}"
                    )
                ends.append(runway_ends_by_id[end_id])

            if row["width"] is None:
                raise DataIntegrityError(f"Runway {row['runway_id']} has no width")

            runways.append(
                Runway(
                    id=row["runway_id"],
                    primary_end=ends[0],
                    secondary_end=ends[1],
                    width_ft=row["width"],
                    length_ft=row["length"] or 0.0,
                    heading=row["heading"] or 0.0,
                    feet_per_degree=settings.feet_per_degree,
                )
            )

        taxi_rows = conn.execute(
            "SELECT taxi_path_id, name, width, start_lonx, start_laty, end_lonx, end_laty "
            "FROM taxi_path WHERE airport_id = ? ORDER BY taxi_path_id",
            (airport.id,),
        ).fetchall()

    records = [
        TaxiPathRecord(
            id=row["taxi_path_id"],
            name=row["name"] or "",
            start_lat=row["start_laty"],
            start_long=row["start_lonx"],
            end_lat=row["end_laty"],
            end_long=row["end_lonx"],
            width_ft=row["width"] or 0.0,
        )
        for row in taxi_rows
    ]
    segments = assign_segment_indexes(records)

    runway_ends = [runway_ends_by_id[end_id] for end_id in end_ids]

    logger.info(
        "Loaded %s: %d runways, %d runway ends, %d taxi segments",
        airport.ident,
        len(runways),
        len(runway_ends),
        len(segments),
    )
    return AirportLayout(airport, runways, runway_ends, segments)
