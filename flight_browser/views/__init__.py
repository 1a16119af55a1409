"""View controllers for the flight list and flight detail screens."""

from flight_browser.views.flight_detail import FlightDetailController, FlightDetailView, MapRoute
from flight_browser.views.flight_list import FlightListController, FlightListView
from flight_browser.views.query import QueryState, reduce
from flight_browser.views.shell import NavigationShell

__all__ = [
    "FlightDetailController",
    "FlightDetailView",
    "FlightListController",
    "FlightListView",
    "MapRoute",
    "NavigationShell",
    "QueryState",
    "reduce",
]
