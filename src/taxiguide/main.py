#!/usr/bin/env python3
"""TaxiGuide command line entry point.

Loads an airport from a SQLite navigation database export and plans taxi
routes on it.

Usage:
    taxiguide route --db navdata.sqlite --airport KPAO --runway 31 --position 37.4605,-122.1142
    taxiguide intersections --db navdata.sqlite --airport KPAO
    taxiguide graph --db navdata.sqlite --airport KPAO
"""

import argparse
import logging
import sys
from pathlib import Path

from taxiguide.airports.database import load_airport_layout
from taxiguide.airports.errors import NotFoundError
from taxiguide.airports.geometry import GeoPosition
from taxiguide.airports.router import GroundRouter
from taxiguide.core.config import RoutingSettings
from taxiguide.core.logging_system import initialize_logging, shutdown_logging
from taxiguide.core.resource_path import get_config_path

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_ROUTE = 2

logger = logging.getLogger(__name__)


def parse_position(value: str) -> GeoPosition:
    """Parse a "LAT,LON" argument.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed.
    """
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Expected LAT,LON, got {value!r}")
    try:
        return GeoPosition(float(parts[0]), float(parts[1]))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid coordinates: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser.

    Returns:
        Configured parser with route, intersections and graph subcommands.
    """
    parser = argparse.ArgumentParser(description="TaxiGuide - airport taxi route planner")

    parser.add_argument(
        "--config",
        type=Path,
        help="Routing configuration YAML (default: config/routing.yaml if present)",
    )
    parser.add_argument(
        "--log-config",
        type=Path,
        help="Logging configuration YAML (default: config/logging.yaml if present)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_airport_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--db", type=Path, required=True, help="SQLite navigation database")
        sub.add_argument("--airport", required=True, help="Airport ident (e.g., KPAO)")

    route = subparsers.add_parser("route", help="Plan a taxi route to a runway")
    add_airport_args(route)
    route.add_argument("--runway", required=True, help="Runway end designator (e.g., 31)")
    route.add_argument(
        "--position",
        type=parse_position,
        required=True,
        help="Current position as LAT,LON",
    )

    intersections = subparsers.add_parser("intersections", help="List taxiways touching runways")
    add_airport_args(intersections)

    graph = subparsers.add_parser("graph", help="Summarize the taxiway graph")
    add_airport_args(graph)

    return parser


def _resolve_config(explicit: Path | None, default_name: str) -> Path | None:
    if explicit is not None:
        return explicit
    default = get_config_path(default_name)
    return default if default.exists() else None


def run_route(router: GroundRouter, position: GeoPosition, runway: str) -> int:
    """Print the route to a runway."""
    route = router.route_to_runway(position, runway)

    if not route.found:
        print(f"No route to runway {runway}")
        return EXIT_NO_ROUTE

    print(f"Route to runway {runway}: {' -> '.join(route.taxiway_names)}")
    print(f"Distance: {route.total_distance:.3f} km")
    for pos in route.positions:
        print(f"  {pos.lat:.6f}, {pos.long:.6f}")
    return EXIT_OK


def run_intersections(router: GroundRouter) -> int:
    """Print taxi segments touching runways."""
    found = router.intersections()
    for crossing in found:
        endpoint = "start" if crossing.at_start else "end"
        print(
            f"{crossing.segment.label} {endpoint} on runway {crossing.runway.name} "
            f"at {crossing.position.lat:.6f}, {crossing.position.long:.6f}"
        )
    print(f"{len(found)} intersections")
    return EXIT_OK


def run_graph(router: GroundRouter) -> int:
    """Print graph size and sharp turns."""
    graph = router.graph
    print(f"Nodes: {graph.get_node_count()}")
    print(f"Edges: {graph.get_edge_count()}")

    turns = graph.sharp_turns(router.settings.sharp_turn_threshold_deg)
    print(f"Sharp turns (> {router.settings.sharp_turn_threshold_deg:.0f} deg): {len(turns)}")
    for turn in turns:
        print(f"  {turn.from_node} -> {turn.via_node} -> {turn.to_node}: {turn.angle_deg:.1f} deg")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments (defaults to sys.argv).

    Returns:
        Exit code: 0 on success, 1 on error, 2 if no route exists.
    """
    args = build_parser().parse_args(argv)

    log_config = _resolve_config(args.log_config, "logging.yaml")
    initialize_logging(log_config, use_platform_dir=True)

    try:
        settings = RoutingSettings.load(_resolve_config(args.config, "routing.yaml"))
        layout = load_airport_layout(args.db, args.airport, settings)
        router = GroundRouter(layout, settings)

        if args.command == "route":
            return run_route(router, args.position, args.runway)
        if args.command == "intersections":
            return run_intersections(router)
        return run_graph(router)
    except NotFoundError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Fatal error: %s", e)
        return EXIT_ERROR
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
