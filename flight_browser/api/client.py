"""Client for the flights/airport/passengers HTTP API.

Transport and decoding failures surface as ``flight_browser.errors`` types so
callers only ever deal with one taxonomy.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from flight_browser.config import DEFAULT_API_BASE_URL
from flight_browser.errors import HttpError, MalformedPayload, NetworkFailure, NotFound
from flight_browser.logging_utils import perf
from flight_browser.transform.records import (
    AirportDetails,
    FlightPage,
    Passenger,
    parse_airport,
    parse_flight_page,
    parse_passengers,
)

LOGGER = logging.getLogger(__name__)

HEADERS = {"accept": "application/json"}


class FlightApiClient:
    """Blocking wrapper around the three read endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Scheme and host of the API, without the ``/api`` prefix.
            session: Optional pre-configured Requests session.
            timeout: Per-request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}{path}"
        LOGGER.debug("GET %s params=%s", url, params)
        try:
            response = self._session.get(
                url,
                headers=HEADERS,
                params=params,
                timeout=self._timeout,
            )
        except requests.Timeout as exc:
            raise NetworkFailure(f"request to {path} timed out") from exc
        except requests.RequestException as exc:
            raise NetworkFailure(f"request to {path} failed: {exc}") from exc

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = getattr(exc.response, "status_code", None)
            if status is None:
                status = response.status_code
            if status == 404:
                raise NotFound(f"{path} was not found") from exc
            raise HttpError(f"HTTP {status}", status_code=status) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedPayload(f"{path} did not return JSON") from exc

    @perf("api.fetch_flights", tags={"component": "api"})
    def fetch_flights(self, page: int) -> FlightPage:
        """Fetch one server-side page of flight summaries."""
        if page < 1:
            raise ValueError("page must be >= 1")
        return parse_flight_page(self._get_json("/api/flights", params={"page": page}))

    @perf("api.fetch_airport", tags={"component": "api"})
    def fetch_airport(self, name: str) -> AirportDetails:
        if not name:
            raise ValueError("airport name must be provided")
        return parse_airport(self._get_json(f"/api/airport/{quote(name, safe='')}"))

    @perf("api.fetch_passengers", tags={"component": "api"})
    def fetch_passengers(self, flight_number: str) -> List[Passenger]:
        """Fetch the complete roster of one flight."""
        if not flight_number:
            raise ValueError("flight_number must be provided")
        return parse_passengers(self._get_json(f"/api/passengers/{quote(flight_number, safe='')}"))

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> "FlightApiClient":
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()


__all__ = ["FlightApiClient", "HEADERS"]
