"""Tests for runway intersection detection."""

from taxiguide.airports.geometry import GeoPosition
from taxiguide.airports.intersections import find_intersections
from taxiguide.airports.layout import AirportLayout, Runway, RunwayEnd, TaxiSegment


class TestFindIntersections:
    """Test taxi segment / runway footprint checks."""

    def test_connectors_are_found(self, sample_layout: AirportLayout) -> None:
        """Test each connector ending on the runway is reported once."""
        found = find_intersections(sample_layout.runways, sample_layout.segments)

        assert [i.segment.label for i in found] == ["B.0", "C.0", "D.0"]
        assert all(not i.at_start for i in found)
        assert all(i.runway is sample_layout.runways[0] for i in found)

    def test_position_is_inside_endpoint(self, sample_layout: AirportLayout) -> None:
        """Test the reported position is the endpoint on the runway."""
        found = find_intersections(sample_layout.runways, sample_layout.segments)
        assert found[0].position == GeoPosition(37.4601, -122.120)

    def test_start_inside(self) -> None:
        """Test a segment leaving the runway is reported with at_start."""
        runway = Runway(
            1,
            RunwayEnd(1, "09", GeoPosition(0.0, 0.0)),
            RunwayEnd(2, "27", GeoPosition(0.0, 0.01)),
            width_ft=100.0,
        )
        segment = TaxiSegment(1, "A", 0, GeoPosition(0.0, 0.005), GeoPosition(0.001, 0.005))

        found = find_intersections([runway], [segment])

        assert len(found) == 1
        assert found[0].at_start
        assert found[0].position == segment.start

    def test_segment_fully_inside_is_ignored(self) -> None:
        """Test a segment with both ends on the runway is not reported."""
        runway = Runway(
            1,
            RunwayEnd(1, "09", GeoPosition(0.0, 0.0)),
            RunwayEnd(2, "27", GeoPosition(0.0, 0.01)),
            width_ft=100.0,
        )
        segment = TaxiSegment(1, "A", 0, GeoPosition(0.0, 0.002), GeoPosition(0.0, 0.004))

        assert find_intersections([runway], [segment]) == []

    def test_segment_crossing_without_endpoint_inside_is_ignored(self) -> None:
        """Test only endpoints are considered, not the segment body."""
        runway = Runway(
            1,
            RunwayEnd(1, "09", GeoPosition(0.0, 0.0)),
            RunwayEnd(2, "27", GeoPosition(0.0, 0.01)),
            width_ft=100.0,
        )
        segment = TaxiSegment(1, "A", 0, GeoPosition(-0.001, 0.005), GeoPosition(0.001, 0.005))

        assert find_intersections([runway], [segment]) == []

    def test_no_runways(self, sample_layout: AirportLayout) -> None:
        """Test an airport without runways has no intersections."""
        assert find_intersections([], sample_layout.segments) == []
