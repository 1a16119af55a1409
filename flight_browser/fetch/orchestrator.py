"""Issue fetches for flight pages, airports and rosters.

Each fetch resolves to a ``Slot``: READY with the decoded records, or ERROR
with a message scoped to the section of the view it feeds. ``FetchError`` never
escapes this module; any other exception is a bug and propagates.

The blocking API client runs through ``run_blocking`` (``asyncio.to_thread``
by default) so that network I/O is the only suspension point and every state
commit happens on the event loop thread.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from flight_browser.api.client import FlightApiClient
from flight_browser.errors import FetchError
from flight_browser.fetch.slots import Slot
from flight_browser.transform.records import FlightSummary

LOGGER = logging.getLogger(__name__)

FLIGHTS = "flights"
ORIGIN = "origin"
DESTINATION = "destination"
ROSTER = "roster"

SECTION_MESSAGES = {
    FLIGHTS: "Failed to load flights",
    ORIGIN: "Failed to load airport details",
    DESTINATION: "Failed to load airport details",
    ROSTER: "Failed to load passenger details",
}

RunBlocking = Callable[..., Awaitable[Any]]
Commit = Callable[[str, Slot], None]


class FetchOrchestrator:
    """Turns client calls into settled slots."""

    def __init__(self, client: FlightApiClient, run_blocking: Optional[RunBlocking] = None) -> None:
        self._client = client
        self._run_blocking = run_blocking or asyncio.to_thread

    async def _load(self, section: str, func: Callable[..., Any], *args: Any) -> Slot:
        try:
            value = await self._run_blocking(func, *args)
        except FetchError as exc:
            LOGGER.warning("Fetch failed section=%s args=%s reason=%s", section, args, exc.reason)
            return Slot.failed(f"{SECTION_MESSAGES[section]}: {exc.reason}")
        return Slot.ready(value)

    async def flight_page(self, page: int) -> Slot:
        return await self._load(FLIGHTS, self._client.fetch_flights, page)

    async def airport(self, name: str, section: str = ORIGIN) -> Slot:
        return await self._load(section, self._client.fetch_airport, name)

    async def passengers(self, flight_number: str) -> Slot:
        return await self._load(ROSTER, self._client.fetch_passengers, flight_number)

    async def load_flight_detail(self, flight: FlightSummary, commit: Commit) -> None:
        """Fetch both airports and the roster concurrently.

        ``commit`` is called once per section as soon as that section
        settles, in completion order; the caller decides whether the result is
        still current.
        """

        async def settle(section: str, pending: Awaitable[Slot]) -> None:
            commit(section, await pending)

        await asyncio.gather(
            settle(ORIGIN, self.airport(flight.origin_airport, ORIGIN)),
            settle(DESTINATION, self.airport(flight.destination_airport, DESTINATION)),
            settle(ROSTER, self.passengers(flight.flight_number)),
        )


__all__ = [
    "DESTINATION",
    "FLIGHTS",
    "FetchOrchestrator",
    "ORIGIN",
    "ROSTER",
    "SECTION_MESSAGES",
]
