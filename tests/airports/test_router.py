"""Tests for ground route planning."""

import pytest

from taxiguide.airports.errors import NotFoundError
from taxiguide.airports.geometry import GeoPosition, distance
from taxiguide.airports.layout import AirportLayout, TaxiSegment
from taxiguide.airports.router import GroundRouter
from taxiguide.core.config import RoutingSettings

NEAR_N1 = GeoPosition(37.4621, -122.1199)


class TestGroundRouter:
    """Test GroundRouter."""

    @pytest.fixture
    def router(self, sample_layout: AirportLayout) -> GroundRouter:
        """Router over the sample airport."""
        return GroundRouter(sample_layout)

    def test_graph_is_built_lazily_once(self, router: GroundRouter) -> None:
        """Test the graph is cached after first access."""
        assert router.graph is router.graph
        assert router.graph.is_frozen()

    def test_route_to_runway(self, router: GroundRouter, sample_points: dict[str, GeoPosition]) -> None:
        """Test routing along taxiway A to runway 27."""
        route = router.route_to_runway(NEAR_N1, "27")

        assert route.found
        assert route.start_key == sample_points["N1"].key
        assert route.end_key == sample_points["RWY27"].key
        assert route.result.path == [
            sample_points["N1"].key,
            sample_points["N2"].key,
            sample_points["N3"].key,
            sample_points["RWY27"].key,
        ]
        assert route.taxiway_names == ["A", "RWY 27"]
        assert route.runway_end.name == "27"

    def test_route_positions_and_distance(self, router: GroundRouter, sample_points: dict[str, GeoPosition]) -> None:
        """Test positions follow the path and distance sums its legs."""
        route = router.route_to_runway(NEAR_N1, "27")

        expected_positions = [sample_points[k] for k in ("N1", "N2", "N3", "RWY27")]
        assert route.positions == expected_positions

        expected = sum(distance(a, b) for a, b in zip(expected_positions, expected_positions[1:]))
        assert route.total_distance == pytest.approx(expected)

    def test_route_to_nearby_runway_end(self, router: GroundRouter, sample_points: dict[str, GeoPosition]) -> None:
        """Test a one-leg route straight onto the runway link."""
        route = router.route_to_runway(NEAR_N1, "09")

        assert route.result.path == [sample_points["N1"].key, sample_points["RWY09"].key]
        assert route.taxiway_names == ["RWY 09"]

    def test_disconnected_taxiway_has_no_route(self, router: GroundRouter) -> None:
        """Test starting on the isolated taxiway yields no route."""
        route = router.route_to_runway(GeoPosition(37.4701, -122.1301), "27")

        assert not route.found
        assert route.positions == []
        assert route.taxiway_names == []

    def test_unknown_runway_raises(self, router: GroundRouter) -> None:
        """Test unknown runway designators raise NotFoundError."""
        with pytest.raises(NotFoundError):
            router.route_to_runway(NEAR_N1, "99")

    def test_anchor(self, router: GroundRouter, sample_points: dict[str, GeoPosition]) -> None:
        """Test anchoring to the closest segment start."""
        assert router.anchor(GeoPosition(37.4619, -122.1151)) == sample_points["N2"].key

    def test_anchor_distance_limit(self, sample_layout: AirportLayout) -> None:
        """Test positions too far from any taxiway cannot be anchored."""
        router = GroundRouter(sample_layout, RoutingSettings(max_anchor_distance_km=0.5))

        assert router.anchor(NEAR_N1)
        with pytest.raises(NotFoundError):
            router.anchor(GeoPosition(37.5, -122.2))

    def test_intersections(self, router: GroundRouter) -> None:
        """Test intersections are exposed on the router."""
        assert [i.segment.label for i in router.intersections()] == ["B.0", "C.0", "D.0"]

    def test_intersections_skip_unnamed_segments(self, sample_layout: AirportLayout) -> None:
        """Test an unnamed path ending on the runway is not reported."""
        service_path = TaxiSegment(
            99, "", 1, GeoPosition(37.463, -122.113), GeoPosition(37.4601, -122.113)
        )
        router = GroundRouter(sample_layout).rebuild([*sample_layout.segments, service_path])

        assert [i.segment.label for i in router.intersections()] == ["B.0", "C.0", "D.0"]

    def test_rebuild_returns_new_router(self, router: GroundRouter, sample_layout: AirportLayout) -> None:
        """Test rebuilding with fewer segments leaves the original untouched."""
        original_graph = router.graph
        without_a1 = [seg for seg in sample_layout.segments if seg.label != "A.1"]

        rebuilt = router.rebuild(without_a1)

        assert rebuilt is not router
        assert router.graph is original_graph
        assert rebuilt.graph.get_edge_count() == original_graph.get_edge_count() - 1
        assert router.route_to_runway(NEAR_N1, "27").found
        assert not rebuilt.route_to_runway(NEAR_N1, "27").found
