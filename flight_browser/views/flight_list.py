"""Aggregate flight list: one server page at a time, searched, filtered and sorted locally."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from flight_browser.fetch.orchestrator import FetchOrchestrator
from flight_browser.fetch.slots import Slot
from flight_browser.pagination import clamp_page
from flight_browser.transform.pipeline import filter_options, matches_any_field, transform
from flight_browser.transform.records import FlightSummary
from flight_browser.views.query import (
    GoToPage,
    NextPage,
    PreviousPage,
    QueryState,
    SetFilter,
    SetSearch,
    ToggleSort,
    reduce,
)

LOGGER = logging.getLogger(__name__)

FLIGHT_FILTER_DIMENSIONS: Tuple[str, ...] = ("year", "month", "flight_number")
FLIGHT_SORT_COLUMNS: Tuple[str, ...] = (
    "origin_airport",
    "destination_airport",
    "airline",
    "average_age",
    "distance",
    "aircraft_name",
    "passenger_count",
)


@dataclass(frozen=True)
class FlightListView:
    rows: Tuple[FlightSummary, ...]
    query: QueryState
    filter_options: Dict[str, List[Any]]
    page: int
    total_pages: int
    loading: bool
    error: Optional[str]

    @property
    def page_label(self) -> str:
        return f"Page {self.page} of {self.total_pages}"

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class FlightListController:
    """Binds list interactions to query-state transitions and page fetches.

    Page navigation re-fetches from the server and leaves search, filters and
    sort untouched; they apply to whichever page is loaded. Only the response
    for the most recently requested page is committed.
    """

    def __init__(
        self,
        orchestrator: FetchOrchestrator,
        *,
        filter_dimensions: Sequence[str] = FLIGHT_FILTER_DIMENSIONS,
    ) -> None:
        self._orchestrator = orchestrator
        self._dimensions = tuple(filter_dimensions)
        self._query = QueryState()
        self._slot = Slot.idle()
        self._total_pages = 1
        self._token = 0

    @property
    def query(self) -> QueryState:
        return self._query

    @property
    def slot(self) -> Slot:
        return self._slot

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def loading(self) -> bool:
        return self._slot.is_loading

    @property
    def records(self) -> Tuple[FlightSummary, ...]:
        if self._slot.is_ready:
            return self._slot.data.flights
        return ()

    async def _fetch(self, page: int) -> None:
        self._token += 1
        token = self._token
        self._slot = Slot.loading()
        LOGGER.info("Requesting flights page=%s token=%s", page, token)

        result = await self._orchestrator.flight_page(page)
        if token != self._token:
            LOGGER.debug(
                "Discarding stale flights page=%s token=%s current=%s",
                page,
                token,
                self._token,
            )
            return

        self._slot = result
        if not result.is_ready:
            return

        self._total_pages = max(result.data.total_pages, 1)
        effective = clamp_page(page, self._total_pages)
        if effective != page:
            LOGGER.info(
                "Page %s is beyond the %s available; loading page %s",
                page,
                self._total_pages,
                effective,
            )
            self._query = reduce(self._query, GoToPage(effective, self._total_pages))
            await self._fetch(effective)

    async def refresh(self) -> None:
        """(Re)load the current page."""
        await self._fetch(self._query.page)

    async def go_to_page(self, page: int) -> None:
        self._query = reduce(self._query, GoToPage(page, self._total_pages))
        await self._fetch(self._query.page)

    async def next_page(self) -> None:
        if self._query.page >= self._total_pages:
            return
        self._query = reduce(self._query, NextPage(self._total_pages))
        await self._fetch(self._query.page)

    async def previous_page(self) -> None:
        if self._query.page <= 1:
            return
        self._query = reduce(self._query, PreviousPage())
        await self._fetch(self._query.page)

    def set_search(self, term: str) -> None:
        self._query = reduce(self._query, SetSearch(term))

    def set_filter(self, dimension: str, value: Any = None) -> None:
        if dimension not in self._dimensions:
            raise ValueError(f"Unknown filter dimension {dimension!r}")
        self._query = reduce(self._query, SetFilter(dimension, value))

    def toggle_sort(self, criterion: str) -> None:
        self._query = reduce(self._query, ToggleSort(criterion))

    def rows(self) -> List[FlightSummary]:
        return transform(
            self.records,
            self._query.search_term,
            self._query.filter_values,
            self._query.sort_criterion,
            self._query.sort_order,
            matcher=matches_any_field,
        )

    def filter_options(self) -> Dict[str, List[Any]]:
        return filter_options(self.records, self._dimensions)

    def select_row(self, index: int) -> FlightSummary:
        """Return the flight shown at ``index`` of the current rows."""
        return self.rows()[index]

    def snapshot(self) -> FlightListView:
        return FlightListView(
            rows=tuple(self.rows()),
            query=self._query,
            filter_options=self.filter_options(),
            page=self._query.page,
            total_pages=self._total_pages,
            loading=self._slot.is_loading,
            error=self._slot.error,
        )


__all__ = [
    "FLIGHT_FILTER_DIMENSIONS",
    "FLIGHT_SORT_COLUMNS",
    "FlightListController",
    "FlightListView",
]
