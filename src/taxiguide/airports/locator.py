"""Nearest-node lookups on the airport surface.

Anchors an arbitrary position (the aircraft, or a runway end) to the
closest taxi segment start.

Typical usage:
    from taxiguide.airports.locator import closest_segment_endpoint

    segment = closest_segment_endpoint(user_position, layout.named_segments())
    start_key = graph.key_for(segment.start)
"""

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from taxiguide.airports.errors import NotFoundError
from taxiguide.airports.geometry import GeoPosition, distance
from taxiguide.airports.layout import TaxiSegment

logger = logging.getLogger(__name__)

T = TypeVar("T")


def closest_item(
    position: GeoPosition,
    items: Sequence[T],
    position_of: Callable[[T], GeoPosition],
) -> tuple[T, float]:
    """Find the item geodesically closest to a position.

    Linear scan; on ties the first item in input order wins.

    Args:
        position: Reference position.
        items: Candidates.
        position_of: Extracts a candidate's position.

    Returns:
        (item, distance_km) of the closest candidate.

    Raises:
        NotFoundError: If there are no candidates.
    """
    if not items:
        raise NotFoundError("No candidates to search")

    best = items[0]
    best_distance = distance(position, position_of(best))

    for item in items[1:]:
        item_distance = distance(position, position_of(item))
        if item_distance < best_distance:
            best = item
            best_distance = item_distance

    return best, best_distance


def closest_segment_endpoint(position: GeoPosition, segments: Sequence[TaxiSegment]) -> TaxiSegment:
    """Find the segment whose start is closest to a position.

    Args:
        position: Reference position.
        segments: Candidate segments.

    Returns:
        The closest segment (first encountered on ties).

    Raises:
        NotFoundError: If segments is empty.

    Examples:
        >>> seg = closest_segment_endpoint(GeoPosition(37.46, -122.11), segments)
        >>> print(seg.label)
        A.3
    """
    if not segments:
        raise NotFoundError("No taxi segments to anchor to")

    segment, distance_km = closest_item(position, segments, lambda s: s.start)

    logger.debug(
        "Closest segment start to (%.6f, %.6f) is %s at %.4f km",
        position.lat,
        position.long,
        segment.label,
        distance_km,
    )
    return segment
