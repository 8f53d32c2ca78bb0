"""Exceptions raised by the airport ground routing modules.

Typical usage:
    from taxiguide.airports.errors import DataIntegrityError, NotFoundError

    try:
        graph = build_taxiway_graph(segments, runway_ends)
    except DataIntegrityError as e:
        logger.error("Bad airport data: %s", e)
"""


class TaxiGuideError(Exception):
    """Base class for ground routing errors."""


class GeometryError(TaxiGuideError, ValueError):
    """Raised when a non-finite coordinate reaches a geometry primitive."""


class DataIntegrityError(TaxiGuideError, ValueError):
    """Raised when source data is malformed.

    Examples are a non-positive edge weight between two distinct positions
    or a zero-length line handed to an angle computation.
    """


class NotFoundError(TaxiGuideError, LookupError):
    """Raised when a requested airport, runway end or node does not exist."""
