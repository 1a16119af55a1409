"""Asynchronous fetch orchestration and per-section load state."""

from flight_browser.fetch.orchestrator import FetchOrchestrator
from flight_browser.fetch.slots import Slot, SlotStatus

__all__ = ["FetchOrchestrator", "Slot", "SlotStatus"]
