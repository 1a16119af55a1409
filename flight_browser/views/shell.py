"""Switches between the flight list and the detail of one selected flight."""

import logging
from typing import Optional, Union

from flight_browser.logging_utils import perf
from flight_browser.transform.records import FlightSummary
from flight_browser.views.flight_detail import FlightDetailController
from flight_browser.views.flight_list import FlightListController

LOGGER = logging.getLogger(__name__)


class NavigationShell:
    """Owns the single selected-flight slot; there is no history beyond it."""

    def __init__(self, flight_list: FlightListController, flight_detail: FlightDetailController) -> None:
        self.flight_list = flight_list
        self.flight_detail = flight_detail
        self._selected: Optional[FlightSummary] = None

    @property
    def selected(self) -> Optional[FlightSummary]:
        return self._selected

    @property
    def in_detail(self) -> bool:
        return self._selected is not None

    @property
    def active(self) -> Union[FlightListController, FlightDetailController]:
        return self.flight_detail if self.in_detail else self.flight_list

    @perf("shell.select", tags={"component": "views"})
    async def select(self, flight: FlightSummary) -> None:
        LOGGER.info("Selected flight %s", flight.flight_number)
        self._selected = flight
        await self.flight_detail.show(flight)

    async def select_row(self, index: int) -> None:
        await self.select(self.flight_list.select_row(index))

    def back(self) -> None:
        if self._selected is not None:
            LOGGER.info("Leaving flight %s", self._selected.flight_number)
        self._selected = None
        self.flight_detail.clear()


__all__ = ["NavigationShell"]
