"""Record decoding and the search/filter/sort pipeline."""

from flight_browser.transform.pipeline import SortOrder, filter_options, transform
from flight_browser.transform.records import (
    AirportDetails,
    FlightPage,
    FlightSummary,
    Passenger,
)

__all__ = [
    "AirportDetails",
    "FlightPage",
    "FlightSummary",
    "Passenger",
    "SortOrder",
    "filter_options",
    "transform",
]
