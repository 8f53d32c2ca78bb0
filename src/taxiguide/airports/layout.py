"""Airport layout records consumed by the routing engine.

Provides the in-memory representation of an airport's ground geometry:
taxi segments, runway ends and runways with their footprints.

Typical usage:
    from taxiguide.airports.layout import AirportLayout, assign_segment_indexes

    segments = assign_segment_indexes(raw_taxi_paths)
    layout = AirportLayout(airport, runways, runway_ends, segments)
    runway_end = layout.get_runway_end("31")
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from taxiguide.airports.errors import NotFoundError
from taxiguide.airports.geometry import (
    FEET_PER_DEGREE,
    GeoPolygon,
    GeoPosition,
    buffered_polygon,
    midpoint,
)

logger = logging.getLogger(__name__)


@dataclass
class TaxiSegment:
    """A straight taxiway segment.

    Attributes:
        id: Source record identifier.
        name: Taxiway name (e.g., "A"). Empty for unnamed paths.
        index: Position of this segment among segments sharing its name.
        start: Start position.
        end: End position.
        width_ft: Width in feet.
        midpoint: Derived midpoint, computed once on creation.

    Examples:
        >>> seg = TaxiSegment(1, "A", 0, GeoPosition(0.0, 0.0), GeoPosition(0.0, 0.002), 50.0)
        >>> seg.label
        'A.0'
    """

    id: int
    name: str
    index: int
    start: GeoPosition
    end: GeoPosition
    width_ft: float = 0.0
    midpoint: GeoPosition = field(init=False)

    def __post_init__(self) -> None:
        self.midpoint = midpoint(self.start, self.end)

    @property
    def label(self) -> str:
        """Name and index, e.g. "A.3"."""
        return f"{self.name}.{self.index}"

    @property
    def is_named(self) -> bool:
        """Whether this segment belongs to a named taxiway."""
        return bool(self.name)


@dataclass
class TaxiPathRecord:
    """A raw taxi path row before index assignment.

    Attributes:
        id: Source record identifier.
        name: Taxiway name (may be empty).
        start_lat: Start latitude.
        start_long: Start longitude.
        end_lat: End latitude.
        end_long: End longitude.
        width_ft: Width in feet.
    """

    id: int
    name: str
    start_lat: float
    start_long: float
    end_lat: float
    end_long: float
    width_ft: float = 0.0


@dataclass(frozen=True)
class RunwayEnd:
    """A named terminal point of a runway.

    Attributes:
        id: Source record identifier.
        name: Runway end designator (e.g., "31", "28L").
        position: Threshold position.
        heading: Heading in degrees.
    """

    id: int
    name: str
    position: GeoPosition
    heading: float = 0.0


@dataclass
class Runway:
    """A runway with both ends and its footprint.

    The footprint is a buffered rectangle around the centerline, used only
    to detect taxiways touching the runway.

    Attributes:
        id: Source record identifier.
        primary_end: Primary runway end.
        secondary_end: Secondary runway end.
        width_ft: Width in feet.
        length_ft: Length in feet.
        heading: Heading in degrees.
        feet_per_degree: Conversion constant used for the footprint.
        footprint: Four-corner polygon, computed on creation.
    """

    id: int
    primary_end: RunwayEnd
    secondary_end: RunwayEnd
    width_ft: float
    length_ft: float = 0.0
    heading: float = 0.0
    feet_per_degree: float = FEET_PER_DEGREE
    footprint: GeoPolygon = field(init=False)

    def __post_init__(self) -> None:
        self.footprint = buffered_polygon(
            self.primary_end.position,
            self.secondary_end.position,
            self.width_ft,
            self.feet_per_degree,
        )

    @property
    def name(self) -> str:
        """Runway name, e.g. "13/31"."""
        return f"{self.primary_end.name}/{self.secondary_end.name}"


@dataclass
class Airport:
    """Airport identification.

    Attributes:
        id: Source record identifier.
        ident: ICAO identifier (e.g., "KPAO").
        name: Airport name.
        city: City name.
        state: State or region.
        position: Reference position.
    """

    id: int
    ident: str
    name: str
    position: GeoPosition
    city: str = ""
    state: str = ""


@dataclass
class AirportLayout:
    """All ground records of one airport.

    Attributes:
        airport: Airport identification.
        runways: Runways with footprints.
        runway_ends: All runway ends.
        segments: Taxi segments with assigned indexes.
    """

    airport: Airport
    runways: list[Runway]
    runway_ends: list[RunwayEnd]
    segments: list[TaxiSegment]

    def get_runway_end(self, name: str) -> RunwayEnd:
        """Look up a runway end by designator.

        Args:
            name: Runway end designator (e.g., "31").

        Returns:
            The first runway end with that name.

        Raises:
            NotFoundError: If no runway end has that name.
        """
        for runway_end in self.runway_ends:
            if runway_end.name == name:
                return runway_end

        raise NotFoundError(f"No runway end found for {name} at {self.airport.ident}")

    def named_segments(self) -> list[TaxiSegment]:
        """Segments belonging to a named taxiway."""
        return [segment for segment in self.segments if segment.is_named]


def assign_segment_indexes(records: Iterable[TaxiPathRecord]) -> list[TaxiSegment]:
    """Turn raw taxi path rows into indexed segments.

    Each segment gets a running index among the segments sharing its name,
    starting at 0, in input order.

    Args:
        records: Raw taxi path rows.

    Returns:
        Segments in input order.

    Examples:
        >>> segs = assign_segment_indexes([rec_a, rec_b, rec_a2])
        >>> [s.label for s in segs]
        ['A.0', 'B.0', 'A.1']
    """
    next_index: dict[str, int] = {}
    segments: list[TaxiSegment] = []

    for record in records:
        index = next_index.get(record.name, 0)
        next_index[record.name] = index + 1

        segments.append(
            TaxiSegment(
                id=record.id,
                name=record.name,
                index=index,
                start=GeoPosition(record.start_lat, record.start_long),
                end=GeoPosition(record.end_lat, record.end_long),
                width_ft=record.width_ft,
            )
        )

    logger.debug("Indexed %d taxi segments across %d names", len(segments), len(next_index))
    return segments
