"""Shared pytest fixtures for the flight_browser tests.

Provides payload builders, an in-memory API client and a gated runner that
lets tests decide the order in which concurrent fetches complete.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Hashable, Optional

import pytest

from flight_browser.config import AppConfig
from flight_browser.errors import NotFound
from flight_browser.transform.records import parse_flight_page, parse_passengers


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Application config fixture.

    Points logging to a temporary directory and uses a placeholder API URL.
    Avoids touching real user config or network.
    """
    return AppConfig(
        api_base_url="http://api.test",
        log_directory=tmp_path,
        log_level="INFO",
    )


def make_flight(flight_number: str = "LA100", **overrides: Any) -> Dict[str, Any]:
    """Wire-format flight summary."""
    base = {
        "flightNumber": flight_number,
        "originAirport": "Arturo Merino Benitez",
        "destinationAirport": "El Loa",
        "airline": "LATAM",
        "aircraftName": "Airbus A320",
        "distance": 1240,
        "averageAge": 41.5,
        "passengerCount": 150,
        "year": 2023,
        "month": 5,
    }
    base.update(overrides)
    return base


def make_passenger(
    passenger_id: Any,
    first_name: str,
    last_name: str = "Perez",
    birth_date: str = "1990-05-01",
    weight: str = "70",
    height: str = "170",
    gender: str = "female",
) -> Dict[str, Any]:
    """Wire-format roster entry."""
    return {
        "passengerID": passenger_id,
        "firstName": first_name,
        "lastName": last_name,
        "gender": gender,
        "birthDate": birth_date,
        "weight(kg)": weight,
        "height(cm)": height,
        "avatar": f"https://avatars.test/{passenger_id}.png",
    }


def flight_page(flights, total_pages: int = 1):
    return parse_flight_page({"flights": list(flights), "totalPages": total_pages})


def roster(*entries):
    return parse_passengers(list(entries))


class FakeClient:
    """In-memory stand-in for ``FlightApiClient``.

    Each table maps a request key to the value to return or an exception to
    raise; unknown keys raise ``NotFound``.
    """

    def __init__(
        self,
        pages: Optional[Dict[int, Any]] = None,
        airports: Optional[Dict[str, Any]] = None,
        rosters: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.pages = pages or {}
        self.airports = airports or {}
        self.rosters = rosters or {}
        self.calls = []

    def _answer(self, table: Dict[Any, Any], key: Any, label: str) -> Any:
        self.calls.append((label, key))
        if key not in table:
            raise NotFound(f"{label} {key} was not found")
        value = table[key]
        if isinstance(value, Exception):
            raise value
        return value

    def fetch_flights(self, page: int):
        return self._answer(self.pages, page, "flights")

    def fetch_airport(self, name: str):
        return self._answer(self.airports, name, "airport")

    def fetch_passengers(self, flight_number: str):
        return self._answer(self.rosters, flight_number, "passengers")


class GatedRunner:
    """``run_blocking`` replacement that holds selected calls until released.

    Calls are keyed by their first argument (page number, airport name or
    flight number). Ungated calls complete immediately.
    """

    def __init__(self) -> None:
        self._gates: Dict[Hashable, asyncio.Event] = {}

    def hold(self, key: Hashable) -> None:
        self._gates[key] = asyncio.Event()

    def release(self, key: Hashable) -> None:
        self._gates[key].set()

    async def __call__(self, func, *args):
        gate = self._gates.get(args[0]) if args else None
        if gate is not None:
            await gate.wait()
        return func(*args)


async def settle() -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()
