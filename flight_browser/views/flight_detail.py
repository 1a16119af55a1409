"""Detail view for one selected flight: route map inputs and the passenger roster."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Tuple

from flight_browser.fetch.orchestrator import (
    DESTINATION,
    ORIGIN,
    ROSTER,
    FetchOrchestrator,
)
from flight_browser.fetch.slots import Slot
from flight_browser.pagination import Page, paginate
from flight_browser.transform.pipeline import (
    matches_full_name,
    passenger_sort_value,
    transform,
)
from flight_browser.transform.records import AirportDetails, FlightSummary, Passenger
from flight_browser.views.query import (
    GoToPage,
    NextPage,
    PreviousPage,
    QueryState,
    Reset,
    SetSearch,
    ToggleSort,
    reduce,
)

LOGGER = logging.getLogger(__name__)

ROSTER_SORT_COLUMNS: Tuple[str, ...] = (
    "full_name",
    "birth_date",
    "gender",
    "weight_kg",
    "height_cm",
)
EMPTY_ROSTER_MESSAGE = "No passengers on this flight"
LOADING_ROSTER_MESSAGE = "Loading passengers..."


@dataclass(frozen=True)
class MapRoute:
    """Everything the map surface needs to draw the flight."""

    origin: AirportDetails
    destination: AirportDetails
    flight_number: str
    aircraft_name: Optional[str]
    reported_distance: Optional[float]

    @property
    def polyline(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        return (self.origin.position, self.destination.position)

    @property
    def great_circle_km(self) -> float:
        return self.origin.distance_to(self.destination)


@dataclass(frozen=True)
class FlightDetailView:
    flight: Optional[FlightSummary]
    origin: Slot
    destination: Slot
    map_ready: bool
    route: Optional[MapRoute]
    roster: Slot
    passengers: Tuple[Passenger, ...]
    query: QueryState
    page: int
    total_pages: int
    roster_message: Optional[str]

    @property
    def page_label(self) -> str:
        return f"Page {self.page} of {self.total_pages}"


class FlightDetailController:
    """State for the currently selected flight.

    Every ``show`` or ``clear`` starts a new selection token. Fetch results are
    committed only while their token is still current, so a late answer for a
    previous flight never lands in the view of the next one.
    """

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        *,
        page_size: int = 10,
        today: Callable[[], date] = date.today,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._orchestrator = orchestrator
        self._page_size = page_size
        self._today = today
        self._token = 0
        self._query = QueryState()
        self._reset(None)

    def _reset(self, flight: Optional[FlightSummary]) -> None:
        self._flight = flight
        self._query = reduce(self._query, Reset())
        if flight is None:
            self._slots = {ORIGIN: Slot.idle(), DESTINATION: Slot.idle(), ROSTER: Slot.idle()}
        else:
            self._slots = {ORIGIN: Slot.loading(), DESTINATION: Slot.loading(), ROSTER: Slot.loading()}

    @property
    def flight(self) -> Optional[FlightSummary]:
        return self._flight

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def page_size(self) -> int:
        return self._page_size

    def slot(self, section: str) -> Slot:
        return self._slots[section]

    def today(self) -> date:
        """Reference date ages are computed against."""
        return self._today()

    async def show(self, flight: FlightSummary) -> None:
        """Start a fresh selection and load its airports and roster."""
        self._token += 1
        token = self._token
        self._reset(flight)
        LOGGER.info("Loading details flight=%s token=%s", flight.flight_number, token)
        await self._orchestrator.load_flight_detail(
            flight,
            lambda section, result: self._commit(token, section, result),
        )

    def clear(self) -> None:
        """Drop the selection; anything still in flight becomes stale."""
        self._token += 1
        self._reset(None)

    def _commit(self, token: int, section: str, result: Slot) -> None:
        if token != self._token:
            LOGGER.debug(
                "Discarding stale %s result token=%s current=%s",
                section,
                token,
                self._token,
            )
            return
        self._slots[section] = result
        if section == ROSTER:
            self._sync_page()

    @property
    def map_ready(self) -> bool:
        """Both airport lookups have settled, whatever the outcome."""
        return self._slots[ORIGIN].settled and self._slots[DESTINATION].settled

    @property
    def route(self) -> Optional[MapRoute]:
        origin = self._slots[ORIGIN]
        destination = self._slots[DESTINATION]
        if self._flight is None or not (origin.is_ready and destination.is_ready):
            return None
        return MapRoute(
            origin=origin.data,
            destination=destination.data,
            flight_number=self._flight.flight_number,
            aircraft_name=self._flight.aircraft_name,
            reported_distance=self._flight.distance,
        )

    @property
    def roster(self) -> List[Passenger]:
        slot = self._slots[ROSTER]
        if slot.is_ready:
            return list(slot.data)
        return []

    def roster_rows(self) -> List[Passenger]:
        return transform(
            self.roster,
            self._query.search_term,
            None,
            self._query.sort_criterion,
            self._query.sort_order,
            matcher=matches_full_name,
            sort_value=passenger_sort_value(self.today()),
        )

    def passenger_page(self) -> Page:
        return paginate(self.roster_rows(), self._page_size, self._query.page)

    def _sync_page(self) -> None:
        page = self.passenger_page()
        if page.effective_page != self._query.page:
            self._query = reduce(self._query, GoToPage(page.effective_page, page.total_pages))

    def set_search(self, term: str) -> None:
        self._query = reduce(self._query, SetSearch(term))
        self._sync_page()

    def toggle_sort(self, criterion: str) -> None:
        self._query = reduce(self._query, ToggleSort(criterion))

    def go_to_page(self, page: int) -> None:
        total = self.passenger_page().total_pages
        self._query = reduce(self._query, GoToPage(page, total))

    def next_page(self) -> None:
        total = self.passenger_page().total_pages
        self._query = reduce(self._query, NextPage(total))

    def previous_page(self) -> None:
        self._query = reduce(self._query, PreviousPage())

    def _roster_message(self, page: Page) -> Optional[str]:
        slot = self._slots[ROSTER]
        if slot.is_error:
            return slot.error
        if slot.is_loading:
            return LOADING_ROSTER_MESSAGE
        if slot.is_ready and not page.items:
            return EMPTY_ROSTER_MESSAGE
        return None

    def snapshot(self) -> FlightDetailView:
        page = self.passenger_page()
        return FlightDetailView(
            flight=self._flight,
            origin=self._slots[ORIGIN],
            destination=self._slots[DESTINATION],
            map_ready=self.map_ready,
            route=self.route,
            roster=self._slots[ROSTER],
            passengers=page.items,
            query=self._query,
            page=page.effective_page,
            total_pages=page.total_pages,
            roster_message=self._roster_message(page),
        )


__all__ = [
    "EMPTY_ROSTER_MESSAGE",
    "FlightDetailController",
    "FlightDetailView",
    "MapRoute",
    "ROSTER_SORT_COLUMNS",
]
