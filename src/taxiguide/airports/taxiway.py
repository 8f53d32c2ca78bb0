"""Taxiway graph built from taxi segments and runway ends.

Nodes are physical junction points keyed by position; every named taxi
segment becomes one undirected edge between the nodes at its two ends,
weighted by geodesic distance. Segments sharing an endpoint attach to the
same node, which is what connects the network. Runway ends are leaves
attached to the closest segment start.

Typical usage:
    from taxiguide.airports.taxiway import build_taxiway_graph

    graph = build_taxiway_graph(layout.segments, layout.runway_ends)
    end_key = graph.runway_end_key("31")
    print(graph.get_node_count(), graph.get_edge_count())
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Optional

from taxiguide.airports.errors import DataIntegrityError, NotFoundError
from taxiguide.airports.geometry import (
    GeoPosition,
    angle_between_lines,
    distance,
    positions_equal,
)
from taxiguide.airports.layout import RunwayEnd, TaxiSegment
from taxiguide.airports.locator import closest_segment_endpoint
from taxiguide.core.config import RoutingSettings

logger = logging.getLogger(__name__)

EDGE_TAXIWAY = "taxiway"
EDGE_RUNWAY_LINK = "runway_link"


@dataclass(frozen=True)
class TaxiwaySource:
    """Node created from a taxi segment endpoint.

    Attributes:
        segment: The segment.
        endpoint: "start" or "end".
    """

    segment: TaxiSegment
    endpoint: str


@dataclass(frozen=True)
class RunwaySource:
    """Node created from a runway end.

    Attributes:
        runway_end: The runway end.
    """

    runway_end: RunwayEnd


NodeSource = TaxiwaySource | RunwaySource


@dataclass
class TaxiwayNode:
    """A junction point in the taxiway graph.

    Attributes:
        key: Canonical position key ("lat,long").
        position: Position of the first endpoint that created the node.
        sources: Segment endpoints and runway ends located here.
        neighbors: Neighbor key -> edge weight in km.
        neighbor_angles: Arriving neighbor key -> leaving neighbor key ->
            turn angle in degrees (0 = straight through, 180 = reversal).
            Only filled for nodes with two or more taxiway neighbors.
    """

    key: str
    position: GeoPosition
    sources: list[NodeSource] = field(default_factory=list)
    neighbors: dict[str, float] = field(default_factory=dict)
    neighbor_angles: dict[str, dict[str, float]] = field(default_factory=dict)

    @property
    def is_runway_end(self) -> bool:
        """Whether a runway end is located at this node."""
        return any(isinstance(source, RunwaySource) for source in self.sources)

    @property
    def taxiway_names(self) -> list[str]:
        """Names of the taxiways meeting at this node, in first-seen order."""
        names: list[str] = []
        for source in self.sources:
            if isinstance(source, TaxiwaySource) and source.segment.name not in names:
                names.append(source.segment.name)
        return names


@dataclass
class TaxiwayEdge:
    """One direction of an undirected edge.

    Attributes:
        from_node: Source node key.
        to_node: Destination node key.
        distance_km: Edge weight in km.
        name: Taxiway name, or "RWY <end>" for runway links.
        edge_type: EDGE_TAXIWAY or EDGE_RUNWAY_LINK.
    """

    from_node: str
    to_node: str
    distance_km: float
    name: str = ""
    edge_type: str = EDGE_TAXIWAY


@dataclass(frozen=True)
class SharpTurn:
    """A transition through a node whose turn angle exceeds a threshold."""

    from_node: str
    via_node: str
    to_node: str
    angle_deg: float


class TaxiwayGraph:
    """Undirected, position-keyed taxiway graph.

    Every edge is stored in both directions. The graph is frozen once built;
    a changed segment list means building a new graph.

    Examples:
        >>> graph = TaxiwayGraph()
        >>> a = graph.resolve_node(GeoPosition(37.5, -122.0))
        >>> b = graph.resolve_node(GeoPosition(37.5, -122.001))
        >>> graph.add_edge(a.key, b.key, name="A")
        >>> graph.get_neighbors(a.key)
        ['37.5,-122.001']
    """

    def __init__(self, epsilon_deg: float = 0.0) -> None:
        """Initialize empty graph.

        Args:
            epsilon_deg: Tolerance for merging positions into one node.
        """
        self.epsilon_deg = epsilon_deg
        self.nodes: dict[str, TaxiwayNode] = {}
        self.edges: dict[str, list[TaxiwayEdge]] = {}
        self._runway_end_keys: dict[str, str] = {}
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RuntimeError("Taxiway graph is frozen; build a new graph instead")

    def freeze(self) -> None:
        """Reject any further mutation."""
        self._frozen = True

    def is_frozen(self) -> bool:
        """Whether the graph has been frozen."""
        return self._frozen

    def key_for(self, position: GeoPosition) -> Optional[str]:
        """Find the key of the node at a position.

        Args:
            position: Position to look up.

        Returns:
            Node key, or None if no node is at that position.
        """
        if self.epsilon_deg <= 0.0:
            key = position.key
            return key if key in self.nodes else None

        for key, node in self.nodes.items():
            if positions_equal(position, node.position, self.epsilon_deg):
                return key
        return None

    def resolve_node(self, position: GeoPosition, source: Optional[NodeSource] = None) -> TaxiwayNode:
        """Get the node at a position, creating it if needed.

        Args:
            position: Node position.
            source: What is located here (recorded on the node).

        Returns:
            The existing or newly created node.
        """
        self._check_mutable()

        key = self.key_for(position)
        if key is None:
            node = TaxiwayNode(position.key, position)
            self.nodes[node.key] = node
            self.edges[node.key] = []
            logger.debug("Added node %s", node.key)
        else:
            node = self.nodes[key]

        if source is not None:
            node.sources.append(source)
            if isinstance(source, RunwaySource):
                self._runway_end_keys.setdefault(source.runway_end.name, node.key)

        return node

    def add_edge(
        self,
        from_node: str,
        to_node: str,
        weight_km: Optional[float] = None,
        name: str = "",
        edge_type: str = EDGE_TAXIWAY,
    ) -> TaxiwayEdge:
        """Add an undirected edge between two nodes.

        When the two nodes are already joined, the shorter weight is kept.

        Args:
            from_node: First node key.
            to_node: Second node key.
            weight_km: Edge weight; defaults to the distance between nodes.
            name: Taxiway name.
            edge_type: EDGE_TAXIWAY or EDGE_RUNWAY_LINK.

        Returns:
            The edge in the from_node -> to_node direction.

        Raises:
            NotFoundError: If either node does not exist.
            DataIntegrityError: If the weight is not positive, or the edge
                would be a self loop.
        """
        self._check_mutable()

        if from_node not in self.nodes:
            raise NotFoundError(f"Node {from_node} does not exist")
        if to_node not in self.nodes:
            raise NotFoundError(f"Node {to_node} does not exist")
        if from_node == to_node:
            raise DataIntegrityError(f"Self loop at node {from_node}")

        if weight_km is None:
            weight_km = distance(self.nodes[from_node].position, self.nodes[to_node].position)
        if not weight_km > 0:
            raise DataIntegrityError(
                f"Edge {from_node} -> {to_node} has invalid weight {weight_km}"
            )

        existing = self.get_edge(from_node, to_node)
        if existing is not None:
            if existing.distance_km <= weight_km:
                return existing
            self.edges[from_node].remove(existing)
            reverse = self.get_edge(to_node, from_node)
            if reverse is not None:
                self.edges[to_node].remove(reverse)

        edge = TaxiwayEdge(from_node, to_node, weight_km, name, edge_type)
        self.edges[from_node].append(edge)
        self.edges[to_node].append(TaxiwayEdge(to_node, from_node, weight_km, name, edge_type))
        self.nodes[from_node].neighbors[to_node] = weight_km
        self.nodes[to_node].neighbors[from_node] = weight_km

        logger.debug("Added edge %s <-> %s (%.4f km, %s)", from_node, to_node, weight_km, name)
        return edge

    def get_node(self, key: str) -> Optional[TaxiwayNode]:
        """Get a node by key, or None."""
        return self.nodes.get(key)

    def get_edges_from(self, key: str) -> list[TaxiwayEdge]:
        """Get all edges leaving a node (empty if node not found)."""
        return self.edges.get(key, [])

    def get_edge(self, from_node: str, to_node: str) -> Optional[TaxiwayEdge]:
        """Get the edge from one node to another, or None."""
        for edge in self.get_edges_from(from_node):
            if edge.to_node == to_node:
                return edge
        return None

    def get_neighbors(self, key: str) -> list[str]:
        """Get keys of all nodes directly connected to a node."""
        return [edge.to_node for edge in self.get_edges_from(key)]

    def runway_end_key(self, name: str) -> str:
        """Get the node key of a runway end.

        Raises:
            NotFoundError: If no runway end with that name is in the graph.
        """
        try:
            return self._runway_end_keys[name]
        except KeyError:
            raise NotFoundError(f"No runway end {name} in taxiway graph") from None

    def get_node_count(self) -> int:
        """Get total number of nodes."""
        return len(self.nodes)

    def get_edge_count(self) -> int:
        """Get number of undirected edges."""
        return sum(len(edges) for edges in self.edges.values()) // 2

    def compute_neighbor_angles(self) -> None:
        """Fill neighbor_angles for nodes with two or more taxiway neighbors."""
        self._check_mutable()

        for key, node in self.nodes.items():
            taxiway_neighbors = [
                edge.to_node for edge in self.edges[key] if edge.edge_type == EDGE_TAXIWAY
            ]
            if len(taxiway_neighbors) < 2:
                continue

            for arriving in taxiway_neighbors:
                arriving_pos = self.nodes[arriving].position
                angles: dict[str, float] = {}
                for leaving in taxiway_neighbors:
                    if leaving == arriving:
                        continue
                    angles[leaving] = angle_between_lines(
                        (arriving_pos, node.position),
                        (node.position, self.nodes[leaving].position),
                    )
                node.neighbor_angles[arriving] = angles

    def sharp_turns(self, threshold_deg: float) -> list[SharpTurn]:
        """List transitions turning more sharply than a threshold.

        Continuing along the same taxiway name never counts as sharp. This is
        annotation only; routing does not consult it.

        Args:
            threshold_deg: Turn angle above which a transition is sharp.

        Returns:
            One entry per unordered neighbor pair.
        """
        turns: list[SharpTurn] = []

        for key, node in self.nodes.items():
            for arriving, angles in node.neighbor_angles.items():
                for leaving, angle in angles.items():
                    if arriving > leaving or angle <= threshold_deg:
                        continue

                    arriving_edge = self.get_edge(arriving, key)
                    leaving_edge = self.get_edge(key, leaving)
                    if (
                        arriving_edge is not None
                        and leaving_edge is not None
                        and arriving_edge.name == leaving_edge.name
                    ):
                        continue

                    turns.append(SharpTurn(arriving, key, leaving, angle))

        return turns


def build_taxiway_graph(
    segments: Sequence[TaxiSegment],
    runway_ends: Iterable[RunwayEnd],
    settings: Optional[RoutingSettings] = None,
) -> TaxiwayGraph:
    """Build the routable graph of an airport.

    Args:
        segments: Taxi segments; unnamed ones are not routable and skipped.
        runway_ends: Runway ends, attached as leaves.
        settings: Routing settings (node merge tolerance).

    Returns:
        A frozen TaxiwayGraph.

    Raises:
        DataIntegrityError: If a segment joins two distinct positions with a
            non-positive distance.
        GeometryError: If a coordinate is not finite.

    Examples:
        >>> graph = build_taxiway_graph(layout.segments, layout.runway_ends)
        >>> print(f"Graph has {graph.get_node_count()} nodes")
    """
    settings = settings or RoutingSettings()
    graph = TaxiwayGraph(epsilon_deg=settings.node_merge_epsilon_deg)

    named = [segment for segment in segments if segment.is_named]
    skipped = len(segments) - len(named)
    if skipped:
        logger.debug("Skipping %d unnamed taxi segments", skipped)

    for segment in named:
        start_node = graph.resolve_node(segment.start, TaxiwaySource(segment, "start"))
        end_node = graph.resolve_node(segment.end, TaxiwaySource(segment, "end"))

        if start_node is end_node:
            logger.warning("Skipping degenerate taxi segment %s (zero length)", segment.label)
            continue

        weight = distance(segment.start, segment.end)
        if weight <= 0:
            raise DataIntegrityError(
                f"Taxi segment {segment.label} has non-positive length {weight} "
                f"between distinct points {start_node.key} and {end_node.key}"
            )

        graph.add_edge(start_node.key, end_node.key, weight, segment.name, EDGE_TAXIWAY)

    if named:
        for runway_end in runway_ends:
            _attach_runway_end(graph, runway_end, named)
    else:
        logger.warning("No named taxi segments; runway ends left unattached")

    graph.compute_neighbor_angles()
    graph.freeze()

    logger.info(
        "Built taxiway graph: %d nodes, %d edges from %d segments",
        graph.get_node_count(),
        graph.get_edge_count(),
        len(named),
    )
    return graph


def _attach_runway_end(graph: TaxiwayGraph, runway_end: RunwayEnd, segments: Sequence[TaxiSegment]) -> None:
    anchor_segment = closest_segment_endpoint(runway_end.position, segments)
    anchor_key = graph.key_for(anchor_segment.start)
    if anchor_key is None:
        raise DataIntegrityError(f"Segment {anchor_segment.label} start is not a graph node")

    node = graph.resolve_node(runway_end.position, RunwaySource(runway_end))
    if node.key == anchor_key:
        logger.debug("Runway end %s coincides with node %s", runway_end.name, anchor_key)
        return

    weight = distance(runway_end.position, anchor_segment.start)
    if weight <= 0:
        raise DataIntegrityError(
            f"Runway end {runway_end.name} has non-positive distance {weight} to {anchor_key}"
        )

    graph.add_edge(node.key, anchor_key, weight, f"RWY {runway_end.name}", EDGE_RUNWAY_LINK)
    logger.debug("Attached runway end %s to %s (%.4f km)", runway_end.name, anchor_key, weight)
