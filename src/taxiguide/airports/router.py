"""Ground route planning from a position to a runway.

Ties the routing engine together: builds the taxiway graph of an airport
layout, anchors the aircraft position into it, and runs the shortest path
search to the requested runway end.

Typical usage:
    from taxiguide.airports.router import GroundRouter

    router = GroundRouter(layout)
    route = router.route_to_runway(GeoPosition(37.4605, -122.1142), "31")
    if route.found:
        print(" then ".join(route.taxiway_names))
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Optional

from taxiguide.airports.errors import NotFoundError
from taxiguide.airports.geometry import GeoPosition, distance
from taxiguide.airports.intersections import RunwayIntersection, find_intersections
from taxiguide.airports.layout import AirportLayout, RunwayEnd, TaxiSegment
from taxiguide.airports.locator import closest_segment_endpoint
from taxiguide.airports.pathfinding import PathResult, shortest_path
from taxiguide.airports.taxiway import TaxiwayGraph, build_taxiway_graph
from taxiguide.core.config import RoutingSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxiRoute:
    """A planned route, ready to be drawn.

    Attributes:
        start_key: Node the aircraft position was anchored to.
        end_key: Runway end node.
        runway_end: Target runway end.
        result: Raw pathfinder result.
        positions: Node positions along the path (empty if no route).
        taxiway_names: Edge names along the path with consecutive
            duplicates collapsed, e.g. ["A", "B", "RWY 31"].
    """

    start_key: str
    end_key: str
    runway_end: RunwayEnd
    result: PathResult
    positions: list[GeoPosition]
    taxiway_names: list[str]

    @property
    def found(self) -> bool:
        """Whether a route was found."""
        return self.result.found

    @property
    def total_distance(self) -> float:
        """Route length in km."""
        return self.result.total_distance


class GroundRouter:
    """Route planner for one airport layout.

    The graph is built on first use and never modified afterwards. Use
    rebuild() to get a router over a different segment list.

    Examples:
        >>> router = GroundRouter(layout)
        >>> route = router.route_to_runway(user_position, "31")
        >>> print(f"{route.total_distance:.2f} km via {route.taxiway_names}")
    """

    def __init__(self, layout: AirportLayout, settings: Optional[RoutingSettings] = None) -> None:
        """Initialize router.

        Args:
            layout: Airport layout.
            settings: Routing settings (defaults if None).
        """
        self.layout = layout
        self.settings = settings or RoutingSettings()
        self._graph: Optional[TaxiwayGraph] = None
        self._named_segments = layout.named_segments()

    @property
    def graph(self) -> TaxiwayGraph:
        """The taxiway graph, built on first access."""
        if self._graph is None:
            self._graph = build_taxiway_graph(
                self.layout.segments, self.layout.runway_ends, self.settings
            )
        return self._graph

    def rebuild(self, segments: Sequence[TaxiSegment]) -> "GroundRouter":
        """Create a router over a different segment list.

        Args:
            segments: Replacement taxi segments.

        Returns:
            A new router; this one is left untouched.
        """
        return GroundRouter(replace(self.layout, segments=list(segments)), self.settings)

    def intersections(self) -> list[RunwayIntersection]:
        """Named taxi segments touching a runway footprint."""
        return find_intersections(self.layout.runways, self._named_segments)

    def anchor(self, position: GeoPosition) -> str:
        """Anchor a position to the closest taxiway node.

        Args:
            position: Arbitrary position (e.g. the aircraft).

        Returns:
            Key of the node at the start of the closest segment.

        Raises:
            NotFoundError: If there are no named segments, or the closest one
                is farther than max_anchor_distance_km.
        """
        segment = closest_segment_endpoint(position, self._named_segments)

        limit = self.settings.max_anchor_distance_km
        if limit is not None:
            anchor_distance = distance(position, segment.start)
            if anchor_distance > limit:
                raise NotFoundError(
                    f"No taxiway within {limit:.3f} km of ({position.lat}, {position.long}); "
                    f"closest is {segment.label} at {anchor_distance:.3f} km"
                )

        key = self.graph.key_for(segment.start)
        if key is None:
            raise NotFoundError(f"Segment {segment.label} start is not a graph node")

        logger.debug("Anchored (%.6f, %.6f) to %s via %s", position.lat, position.long, key, segment.label)
        return key

    def route_to_runway(self, position: GeoPosition, runway_name: str) -> TaxiRoute:
        """Plan a route from a position to a runway end.

        Args:
            position: Current position.
            runway_name: Runway end designator (e.g. "31").

        Returns:
            TaxiRoute; check ``found`` for whether a route exists.

        Raises:
            NotFoundError: If the runway end does not exist or the position
                cannot be anchored.
        """
        runway_end = self.layout.get_runway_end(runway_name)
        end_key = self.graph.runway_end_key(runway_end.name)
        start_key = self.anchor(position)

        result = shortest_path(self.graph, start_key, end_key)
        if result.path is None:
            logger.warning("Could not find a path to runway %s", runway_name)
            return TaxiRoute(start_key, end_key, runway_end, result, [], [])

        positions = [self.graph.nodes[key].position for key in result.path]
        names = self._collapse_names(result.path)

        logger.info(
            "Route to runway %s: %s (%.3f km)",
            runway_name,
            ", ".join(names),
            result.total_distance,
        )
        return TaxiRoute(start_key, end_key, runway_end, result, positions, names)

    def _collapse_names(self, path: list[str]) -> list[str]:
        names: list[str] = []
        for from_key, to_key in zip(path, path[1:]):
            edge = self.graph.get_edge(from_key, to_key)
            name = edge.name if edge is not None else ""
            if not names or names[-1] != name:
                names.append(name)
        return names
