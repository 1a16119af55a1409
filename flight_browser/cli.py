"""Terminal front end: load a flight page, optionally open one flight, print both."""

import argparse
import asyncio
import logging
import sys
from typing import Any, Iterable, List, Optional, Sequence, TextIO

from flight_browser.api.client import FlightApiClient
from flight_browser.config import REPO_ROOT, AppConfig, load_config
from flight_browser.fetch.orchestrator import FetchOrchestrator
from flight_browser.logging_utils import configure_logging, perf_span
from flight_browser.views.flight_detail import (
    ROSTER_SORT_COLUMNS,
    FlightDetailController,
    FlightDetailView,
)
from flight_browser.views.flight_list import (
    FLIGHT_SORT_COLUMNS,
    FlightListController,
    FlightListView,
)
from flight_browser.views.shell import NavigationShell

LOGGER = logging.getLogger(__name__)

FLIGHT_COLUMNS = (
    ("Flight", "flight_number"),
    ("Origin", "origin_airport"),
    ("Destination", "destination_airport"),
    ("Airline", "airline"),
    ("Avg age", "average_age"),
    ("Distance", "distance"),
    ("Aircraft", "aircraft_name"),
    ("Passengers", "passenger_count"),
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse flights and passenger rosters.")
    parser.add_argument("--page", type=int, default=1, help="Server page of flights to load (default: 1).")
    parser.add_argument("--search", default="", help="Case-insensitive text matched against every flight field.")
    parser.add_argument("--sort", choices=FLIGHT_SORT_COLUMNS, default=None, help="Flight column to sort by.")
    parser.add_argument("--desc", action="store_true", help="Sort flights in descending order.")
    parser.add_argument("--year", default=None, help="Only show flights of this year.")
    parser.add_argument("--month", default=None, help="Only show flights of this month.")
    parser.add_argument("--flight-number", default=None, help="Only show this flight number in the list.")
    parser.add_argument(
        "--show",
        metavar="FLIGHT_NUMBER",
        default=None,
        help="Open the detail view (route and passengers) for a flight on the loaded page.",
    )
    parser.add_argument("--roster-search", default="", help="Filter passengers by full name.")
    parser.add_argument("--roster-sort", choices=ROSTER_SORT_COLUMNS, default=None, help="Passenger column to sort by.")
    parser.add_argument("--roster-desc", action="store_true", help="Sort passengers in descending order.")
    parser.add_argument("--roster-page", type=int, default=1, help="Page of the passenger roster to show.")
    parser.add_argument("--quiet-log", action="store_true", help="Log to the session file only, not stderr.")
    return parser.parse_args(argv)


def _resolve_option(options: Iterable[Any], raw: Optional[str]) -> Any:
    """Map a command-line string onto the loaded filter value it names."""
    if raw is None:
        return None
    for option in options:
        if str(option) == raw:
            return option
    return raw


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> List[str]:
    cells = [[_cell(value) for value in row] for row in rows]
    widths = [len(header) for header in headers]
    for row in cells:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row)]
    lines = ["  ".join(header.ljust(width) for header, width in zip(headers, widths))]
    lines.append("  ".join("-" * width for width in widths))
    for row in cells:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row, widths)))
    return lines


def render_flight_list(view: FlightListView) -> List[str]:
    if view.error:
        return [f"Error: {view.error}"]
    lines = render_table(
        [header for header, _ in FLIGHT_COLUMNS],
        [[getattr(flight, key) for _, key in FLIGHT_COLUMNS] for flight in view.rows],
    )
    lines.append(view.page_label)
    return lines


def render_flight_detail(view: FlightDetailView, today_age: Any) -> List[str]:
    flight = view.flight
    lines = [
        f"Flight Number: {flight.flight_number}",
        f"Airline: {_cell(flight.airline)}",
        f"Aircraft: {_cell(flight.aircraft_name)}",
        f"Distance: {_cell(flight.distance)} km",
    ]
    if view.route is not None:
        route = view.route
        lines.append(
            f"Route: {route.origin.name} ({route.origin.latitude}, {route.origin.longitude})"
            f" -> {route.destination.name} ({route.destination.latitude}, {route.destination.longitude})"
        )
        lines.append(f"Great-circle distance: {route.great_circle_km:.0f} km")
    else:
        for slot in (view.origin, view.destination):
            if slot.is_error:
                lines.append(f"Error: {slot.error}")

    lines.append("Passengers")
    if view.roster_message:
        lines.append(view.roster_message)
    else:
        lines.extend(
            render_table(
                ["Full Name", "Age", "Gender", "Weight (kg)", "Height (cm)", "Avatar"],
                [
                    [p.full_name, today_age(p), p.gender, p.weight_kg, p.height_cm, p.avatar]
                    for p in view.passengers
                ],
            )
        )
    lines.append(view.page_label)
    return lines


async def browse(args: argparse.Namespace, config: AppConfig, out: TextIO) -> int:
    """Drive the controllers the way the interactive screens would."""
    with FlightApiClient(config.api_base_url, timeout=config.request_timeout) as client:
        orchestrator = FetchOrchestrator(client)
        detail = FlightDetailController(orchestrator, page_size=config.roster_page_size)
        shell = NavigationShell(FlightListController(orchestrator), detail)
        flight_list = shell.flight_list

        await flight_list.refresh()
        if args.page != 1:
            await flight_list.go_to_page(args.page)

        options = flight_list.filter_options()
        flight_list.set_filter("year", _resolve_option(options["year"], args.year))
        flight_list.set_filter("month", _resolve_option(options["month"], args.month))
        flight_list.set_filter("flight_number", args.flight_number)
        flight_list.set_search(args.search)
        if args.sort:
            flight_list.toggle_sort(args.sort)
            if args.desc:
                flight_list.toggle_sort(args.sort)

        list_view = flight_list.snapshot()
        print("\n".join(render_flight_list(list_view)), file=out)
        if list_view.error:
            return 1
        if not args.show:
            return 0

        matches = [flight for flight in flight_list.records if flight.flight_number == args.show]
        if not matches:
            print(f"Flight {args.show} is not on page {list_view.page}", file=out)
            return 1

        await shell.select(matches[0])
        detail.set_search(args.roster_search)
        if args.roster_sort:
            detail.toggle_sort(args.roster_sort)
            if args.roster_desc:
                detail.toggle_sort(args.roster_sort)
        detail.go_to_page(args.roster_page)

        today = detail.today()
        print("", file=out)
        print("\n".join(render_flight_detail(detail.snapshot(), lambda p: p.age_on(today))), file=out)
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config()
    except ValueError as exc:
        # Fall back to a default log location so the failure is still recorded.
        fallback = AppConfig(
            api_base_url="http://invalid",
            log_directory=REPO_ROOT / "logs",
            log_level="INFO",
        )
        configure_logging(fallback, include_console=False)
        LOGGER.error("Failed to load configuration: %s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config, include_console=not args.quiet_log, console_stream=sys.stderr)
    with perf_span("cli.browse", tags={"page": args.page, "show": args.show}, logger=LOGGER):
        return asyncio.run(browse(args, config, sys.stdout))


if __name__ == "__main__":  # pragma: no cover - module entrypoint
    raise SystemExit(main())
