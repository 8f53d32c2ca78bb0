"""Shortest path search over the taxiway graph.

Typical usage:
    from taxiguide.airports.pathfinding import shortest_path

    result = shortest_path(graph, start_key, end_key)
    if result.path is None:
        print("No route")
    else:
        print(" -> ".join(result.path), f"{result.total_distance:.3f} km")
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from taxiguide.airports.errors import NotFoundError
from taxiguide.airports.taxiway import TaxiwayGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathResult:
    """Outcome of a shortest path search.

    Attributes:
        path: Node keys from start to end, or None when there is no route
            (disconnected nodes, or start equal to end).
        total_distance: Sum of traversed edge weights in km; infinite when
            the end is unreachable.
    """

    path: Optional[list[str]]
    total_distance: float

    @property
    def found(self) -> bool:
        """Whether a route was found."""
        return self.path is not None


def shortest_path(graph: TaxiwayGraph, start_key: str, end_key: str) -> PathResult:
    """Find the shortest path between two nodes using Dijkstra's algorithm.

    Selection scans unvisited nodes in graph order, so ties resolve to the
    node inserted first.

    Args:
        graph: Taxiway graph (not modified).
        start_key: Starting node key.
        end_key: Goal node key.

    Returns:
        PathResult. A missing route is reported as ``path=None``, not raised.

    Raises:
        NotFoundError: If start_key or end_key is not in the graph.

    Examples:
        >>> result = shortest_path(graph, "A", "C")
        >>> result.path, result.total_distance
        (['A', 'B', 'C'], 2.0)
    """
    for key in (start_key, end_key):
        if key not in graph.nodes:
            raise NotFoundError(f"Node {key} is not in the taxiway graph")

    distances: dict[str, float] = {key: math.inf for key in graph.nodes}
    previous: dict[str, Optional[str]] = {key: None for key in graph.nodes}
    visited: set[str] = set()
    distances[start_key] = 0.0

    while True:
        # Find unvisited node with smallest finite distance
        current: Optional[str] = None
        current_distance = math.inf
        for key in graph.nodes:
            if key not in visited and distances[key] < current_distance:
                current = key
                current_distance = distances[key]

        if current is None:
            break

        if current == end_key:
            break

        for neighbor, weight in graph.nodes[current].neighbors.items():
            new_distance = current_distance + weight
            if new_distance < distances[neighbor]:
                distances[neighbor] = new_distance
                previous[neighbor] = current

        visited.add(current)

    total_distance = distances[end_key]

    path: list[str] = []
    node: Optional[str] = end_key
    while node is not None:
        path.append(node)
        node = previous[node]
    path.reverse()

    if path[0] != start_key or len(path) < 2:
        if start_key != end_key:
            logger.warning("No path found from %s to %s", start_key, end_key)
        return PathResult(None, total_distance)

    logger.info(
        "Found path from %s to %s: %d nodes (%.3f km)",
        start_key,
        end_key,
        len(path),
        total_distance,
    )
    return PathResult(path, total_distance)
