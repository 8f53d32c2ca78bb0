"""Detection of taxi segments touching runways.

A segment is reported when exactly one of its endpoints lies inside a
runway footprint. The result is descriptive, for map annotation; routing
never reads it.

Typical usage:
    from taxiguide.airports.intersections import find_intersections

    for crossing in find_intersections(layout.runways, layout.segments):
        print(crossing.segment.label, crossing.runway.name, crossing.position)
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from taxiguide.airports.geometry import GeoPosition, point_in_polygon
from taxiguide.airports.layout import Runway, TaxiSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunwayIntersection:
    """A taxi segment ending inside a runway footprint.

    Attributes:
        runway: The runway.
        segment: The taxi segment.
        at_start: True if the segment's start is the endpoint inside.
    """

    runway: Runway
    segment: TaxiSegment
    at_start: bool

    @property
    def position(self) -> GeoPosition:
        """The endpoint lying inside the runway footprint."""
        return self.segment.start if self.at_start else self.segment.end


def find_intersections(
    runways: Sequence[Runway], segments: Iterable[TaxiSegment]
) -> list[RunwayIntersection]:
    """Find segments with exactly one endpoint inside a runway footprint.

    Args:
        runways: Runways with footprints.
        segments: Taxi segments.

    Returns:
        Intersections ordered by segment, then runway input order.
    """
    intersections: list[RunwayIntersection] = []

    for segment in segments:
        for runway in runways:
            start_inside = point_in_polygon(segment.start, runway.footprint)
            end_inside = point_in_polygon(segment.end, runway.footprint)

            if start_inside != end_inside:
                intersections.append(RunwayIntersection(runway, segment, start_inside))

    logger.info("Found %d runway intersections", len(intersections))
    logger.debug("Intersections: %s", [i.segment.label for i in intersections])
    return intersections
