import asyncio

import pytest

from conftest import FakeClient, GatedRunner, flight_page, make_flight, make_passenger, roster, settle
from flight_browser.errors import HttpError, MalformedPayload, NetworkFailure
from flight_browser.fetch.orchestrator import (
    DESTINATION,
    ORIGIN,
    ROSTER,
    FetchOrchestrator,
)
from flight_browser.fetch.slots import SlotStatus
from flight_browser.transform.records import AirportDetails

ORIGIN_NAME = "Arturo Merino Benitez"
DESTINATION_NAME = "El Loa"


@pytest.fixture
def flight():
    return flight_page([make_flight("LA100")]).flights[0]


@pytest.fixture
def airports():
    return {
        ORIGIN_NAME: AirportDetails(ORIGIN_NAME, -33.393, -70.7858),
        DESTINATION_NAME: AirportDetails(DESTINATION_NAME, -22.4982, -68.9036),
    }


def test_flight_page_resolves_to_ready_slot():
    page = flight_page([make_flight("LA100")], total_pages=2)
    orchestrator = FetchOrchestrator(FakeClient(pages={1: page}))

    slot = asyncio.run(orchestrator.flight_page(1))

    assert slot.status is SlotStatus.READY
    assert slot.data == page


@pytest.mark.parametrize(
    "error,message",
    [
        (NetworkFailure("request to /api/flights failed"), "Failed to load flights: request to /api/flights failed"),
        (HttpError("HTTP 500", status_code=500), "Failed to load flights: HTTP 500"),
        (MalformedPayload("flight page must be an object"), "Failed to load flights: flight page must be an object"),
    ],
)
def test_fetch_errors_become_error_slots(error, message):
    orchestrator = FetchOrchestrator(FakeClient(pages={1: error}))

    slot = asyncio.run(orchestrator.flight_page(1))

    assert slot.status is SlotStatus.ERROR
    assert slot.error == message
    assert slot.data is None


def test_programming_errors_propagate():
    orchestrator = FetchOrchestrator(FakeClient(pages={1: KeyError("bug")}))

    with pytest.raises(KeyError):
        asyncio.run(orchestrator.flight_page(1))


def test_default_runner_uses_worker_thread(flight, airports):
    client = FakeClient(airports=airports)
    orchestrator = FetchOrchestrator(client)

    slot = asyncio.run(orchestrator.airport(ORIGIN_NAME))

    assert slot.data == airports[ORIGIN_NAME]
    assert client.calls == [("airport", ORIGIN_NAME)]


def test_detail_sections_commit_in_completion_order(flight, airports):
    client = FakeClient(
        airports=airports,
        rosters={"LA100": roster(make_passenger(1, "Ana"))},
    )
    runner = GatedRunner()
    orchestrator = FetchOrchestrator(client, run_blocking=runner)
    committed = []

    async def scenario():
        runner.hold(ORIGIN_NAME)
        runner.hold(DESTINATION_NAME)
        task = asyncio.ensure_future(
            orchestrator.load_flight_detail(flight, lambda section, slot: committed.append((section, slot)))
        )
        await settle()
        assert [section for section, _ in committed] == [ROSTER]

        runner.release(DESTINATION_NAME)
        await settle()
        runner.release(ORIGIN_NAME)
        await task

    asyncio.run(scenario())

    assert [section for section, _ in committed] == [ROSTER, DESTINATION, ORIGIN]
    assert all(slot.is_ready for _, slot in committed)


def test_roster_failure_does_not_block_airports(flight, airports):
    client = FakeClient(
        airports=airports,
        rosters={"LA100": HttpError("HTTP 500", status_code=500)},
    )
    orchestrator = FetchOrchestrator(client)
    committed = {}

    asyncio.run(orchestrator.load_flight_detail(flight, committed.__setitem__))

    assert committed[ORIGIN].is_ready
    assert committed[DESTINATION].is_ready
    assert committed[ROSTER].error == "Failed to load passenger details: HTTP 500"


def test_missing_airport_is_error_slot(flight, airports):
    del airports[DESTINATION_NAME]
    orchestrator = FetchOrchestrator(FakeClient(airports=airports, rosters={"LA100": []}))
    committed = {}

    asyncio.run(orchestrator.load_flight_detail(flight, committed.__setitem__))

    assert committed[ORIGIN].is_ready
    assert committed[DESTINATION].is_error
    assert committed[DESTINATION].error.startswith("Failed to load airport details")
    assert committed[ROSTER].data == []
