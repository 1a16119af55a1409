"""HTTP access to the flight data API."""

from flight_browser.api.client import FlightApiClient

__all__ = ["FlightApiClient"]
