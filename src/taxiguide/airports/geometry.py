"""Geographic primitives for airport surface geometry.

Pure functions operating on latitude/longitude positions: great-circle
distance, midpoints, buffered footprints around a centerline, point in
polygon tests and the angle between two lines.

Typical usage:
    from taxiguide.airports.geometry import GeoPosition, distance

    a = GeoPosition(37.4611, -122.1150)
    b = GeoPosition(37.4636, -122.1089)
    print(f"{distance(a, b):.3f} km")
"""

import math
from dataclasses import dataclass

import numpy as np

from taxiguide.airports.errors import DataIntegrityError, GeometryError

EARTH_RADIUS_KM = 6371.0
FEET_PER_DEGREE = 364000.0  # Approximate feet per degree of latitude
BOUNDARY_TOLERANCE_DEG = 1e-12


@dataclass(frozen=True)
class GeoPosition:
    """A point on the earth's surface.

    Attributes:
        lat: Latitude in degrees.
        long: Longitude in degrees.

    Examples:
        >>> pos = GeoPosition(37.5, -122.0)
        >>> pos.key
        '37.5,-122.0'
    """

    lat: float
    long: float

    @property
    def key(self) -> str:
        """Canonical node key for this position.

        Signed zeros are folded so that 0.0 and -0.0 share a key.
        """
        return f"{self.lat + 0.0},{self.long + 0.0}"

    def is_finite(self) -> bool:
        """Check that both coordinates are finite numbers."""
        return math.isfinite(self.lat) and math.isfinite(self.long)


GeoPolygon = list[GeoPosition]
GeoLine = tuple[GeoPosition, GeoPosition]


def _require_finite(*positions: GeoPosition) -> None:
    for pos in positions:
        if not pos.is_finite():
            raise GeometryError(f"Non-finite coordinate: ({pos.lat}, {pos.long})")


def positions_equal(a: GeoPosition, b: GeoPosition, epsilon: float = 0.0) -> bool:
    """Compare two positions.

    Args:
        a: First position.
        b: Second position.
        epsilon: Tolerance in degrees applied to each coordinate.
            Zero means exact equality.

    Returns:
        True if the positions are considered the same point.

    Raises:
        GeometryError: If a coordinate is not finite.

    Examples:
        >>> positions_equal(GeoPosition(1.0, 2.0), GeoPosition(1.0, 2.0))
        True
        >>> positions_equal(GeoPosition(1.0, 2.0), GeoPosition(1.0, 2.0 + 1e-9), 1e-7)
        True
    """
    _require_finite(a, b)
    if epsilon <= 0.0:
        return a.lat == b.lat and a.long == b.long
    return abs(a.lat - b.lat) <= epsilon and abs(a.long - b.long) <= epsilon


def distance(a: GeoPosition, b: GeoPosition) -> float:
    """Calculate great circle distance between two positions.

    Uses the Haversine formula.

    Args:
        a: First position.
        b: Second position.

    Returns:
        Distance in kilometers.

    Raises:
        GeometryError: If a coordinate is not finite.

    Examples:
        >>> distance(GeoPosition(0.0, 0.0), GeoPosition(0.0, 1.0))
        111.19492664455873
    """
    _require_finite(a, b)

    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = math.radians(b.lat - a.lat)
    dlon = math.radians(b.long - a.long)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_KM * c


def midpoint(a: GeoPosition, b: GeoPosition) -> GeoPosition:
    """Arithmetic mean of two positions.

    Good enough at airport scale; not a geodesic midpoint.

    Examples:
        >>> midpoint(GeoPosition(0.0, 0.0), GeoPosition(2.0, 2.0))
        GeoPosition(lat=1.0, long=1.0)
    """
    _require_finite(a, b)
    return GeoPosition((a.lat + b.lat) / 2.0, (a.long + b.long) / 2.0)


def feet_to_degrees(feet: float, feet_per_degree: float = FEET_PER_DEGREE) -> float:
    """Convert a distance in feet to degrees of latitude."""
    return feet / feet_per_degree


def buffered_polygon(
    start: GeoPosition,
    end: GeoPosition,
    width_ft: float,
    feet_per_degree: float = FEET_PER_DEGREE,
) -> GeoPolygon:
    """Build a rectangle of the given width centred on a line segment.

    Used as a runway footprint. The half-width is applied on each side of
    the centerline; the longitude offset is stretched by the cosine of the
    mean latitude since longitude degrees shrink towards the poles.

    Args:
        start: Centerline start.
        end: Centerline end.
        width_ft: Total width in feet.
        feet_per_degree: Feet per degree of latitude.

    Returns:
        Four corners: start-left, start-right, end-right, end-left.

    Raises:
        GeometryError: If a coordinate is not finite.
        DataIntegrityError: If start and end are the same point.

    Examples:
        >>> corners = buffered_polygon(GeoPosition(0.0, 0.0), GeoPosition(0.0, 0.01), 150)
        >>> len(corners)
        4
    """
    _require_finite(start, end)

    d_lat = end.lat - start.lat
    d_long = end.long - start.long
    length = math.hypot(d_lat, d_long)
    if length == 0.0:
        raise DataIntegrityError(f"Cannot buffer zero-length segment at ({start.lat}, {start.long})")

    unit_lat = d_lat / length
    unit_long = d_long / length

    half_width_deg = feet_to_degrees(width_ft / 2.0, feet_per_degree)
    mean_lat = math.radians((start.lat + end.lat) / 2.0)
    lat_offset = half_width_deg
    long_offset = half_width_deg / math.cos(mean_lat)

    # Left-hand normal of the direction vector
    left_lat = unit_long * lat_offset
    left_long = -unit_lat * long_offset

    return [
        GeoPosition(start.lat + left_lat, start.long + left_long),
        GeoPosition(start.lat - left_lat, start.long - left_long),
        GeoPosition(end.lat - left_lat, end.long - left_long),
        GeoPosition(end.lat + left_lat, end.long + left_long),
    ]


def _on_edge(pos: GeoPosition, a: GeoPosition, b: GeoPosition) -> bool:
    cross = (b.lat - a.lat) * (pos.long - a.long) - (b.long - a.long) * (pos.lat - a.lat)
    if abs(cross) > BOUNDARY_TOLERANCE_DEG:
        return False

    tol = BOUNDARY_TOLERANCE_DEG
    return (
        min(a.lat, b.lat) - tol <= pos.lat <= max(a.lat, b.lat) + tol
        and min(a.long, b.long) - tol <= pos.long <= max(a.long, b.long) + tol
    )


def point_in_polygon(pos: GeoPosition, polygon: GeoPolygon) -> bool:
    """Test whether a position lies inside a polygon.

    Standard ray casting. Points on an edge or a vertex count as inside.

    Args:
        pos: Position to test.
        polygon: Polygon corners in order (not closed).

    Returns:
        True if the position is inside or on the boundary.

    Raises:
        GeometryError: If a coordinate is not finite.
    """
    _require_finite(pos, *polygon)

    count = len(polygon)
    for i in range(count):
        if _on_edge(pos, polygon[i], polygon[i - 1]):
            return True

    inside = False
    j = count - 1
    for i in range(count):
        xi, yi = polygon[i].lat, polygon[i].long
        xj, yj = polygon[j].lat, polygon[j].long

        if (yi > pos.long) != (yj > pos.long):
            crossing_lat = (xj - xi) * (pos.long - yi) / (yj - yi) + xi
            if pos.lat < crossing_lat:
                inside = not inside
        j = i

    return inside


def angle_between_lines(line_a: GeoLine, line_b: GeoLine) -> float:
    """Angle between the direction vectors of two lines.

    Args:
        line_a: (start, end) of the first line.
        line_b: (start, end) of the second line.

    Returns:
        Angle in degrees within [0, 180]. Same direction is 0,
        perpendicular is 90, opposite is 180.

    Raises:
        GeometryError: If a coordinate is not finite.
        DataIntegrityError: If either line has zero length.

    Examples:
        >>> o = GeoPosition(0.0, 0.0)
        >>> angle_between_lines((o, GeoPosition(0.0, 1.0)), (o, GeoPosition(1.0, 0.0)))
        90.0
    """
    _require_finite(*line_a, *line_b)

    v1 = np.array([line_a[1].long - line_a[0].long, line_a[1].lat - line_a[0].lat], dtype=np.float64)
    v2 = np.array([line_b[1].long - line_b[0].long, line_b[1].lat - line_b[0].lat], dtype=np.float64)

    norm1 = np.linalg.norm(v1)
    norm2 = np.linalg.norm(v2)
    if norm1 == 0.0 or norm2 == 0.0:
        raise DataIntegrityError("Cannot compute angle of a zero-length line")

    cos_angle = np.clip(np.dot(v1 / norm1, v2 / norm2), -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_angle)))
