"""Airport ground geometry and taxi routing.

This module turns an airport's taxi segments and runway ends into a
position-keyed taxiway graph and plans shortest ground routes on it.

Typical usage:
    from taxiguide.airports import GroundRouter, load_airport_layout

    layout = load_airport_layout("data/navdata.sqlite", "KPAO")
    router = GroundRouter(layout)
    route = router.route_to_runway(position, "31")
"""

from taxiguide.airports.database import load_airport_layout
from taxiguide.airports.errors import (
    DataIntegrityError,
    GeometryError,
    NotFoundError,
    TaxiGuideError,
)
from taxiguide.airports.geometry import GeoPosition
from taxiguide.airports.intersections import RunwayIntersection, find_intersections
from taxiguide.airports.layout import (
    Airport,
    AirportLayout,
    Runway,
    RunwayEnd,
    TaxiPathRecord,
    TaxiSegment,
    assign_segment_indexes,
)
from taxiguide.airports.locator import closest_segment_endpoint
from taxiguide.airports.pathfinding import PathResult, shortest_path
from taxiguide.airports.router import GroundRouter, TaxiRoute
from taxiguide.airports.taxiway import (
    RunwaySource,
    TaxiwayEdge,
    TaxiwayGraph,
    TaxiwayNode,
    TaxiwaySource,
    build_taxiway_graph,
)

__all__ = [
    "Airport",
    "AirportLayout",
    "DataIntegrityError",
    "GeoPosition",
    "GeometryError",
    "GroundRouter",
    "NotFoundError",
    "PathResult",
    "Runway",
    "RunwayEnd",
    "RunwayIntersection",
    "RunwaySource",
    "TaxiGuideError",
    "TaxiPathRecord",
    "TaxiRoute",
    "TaxiSegment",
    "TaxiwayEdge",
    "TaxiwayGraph",
    "TaxiwayNode",
    "TaxiwaySource",
    "assign_segment_indexes",
    "build_taxiway_graph",
    "closest_segment_endpoint",
    "find_intersections",
    "load_airport_layout",
    "shortest_path",
]
