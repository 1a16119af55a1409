"""Load state of one independently fetched piece of view data."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SlotStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class Slot:
    status: SlotStatus = SlotStatus.IDLE
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def idle(cls) -> "Slot":
        return cls()

    @classmethod
    def loading(cls) -> "Slot":
        return cls(status=SlotStatus.LOADING)

    @classmethod
    def ready(cls, data: Any) -> "Slot":
        return cls(status=SlotStatus.READY, data=data)

    @classmethod
    def failed(cls, message: str) -> "Slot":
        return cls(status=SlotStatus.ERROR, error=message)

    @property
    def is_loading(self) -> bool:
        return self.status is SlotStatus.LOADING

    @property
    def is_ready(self) -> bool:
        return self.status is SlotStatus.READY

    @property
    def is_error(self) -> bool:
        return self.status is SlotStatus.ERROR

    @property
    def settled(self) -> bool:
        """Resolved one way or the other."""
        return self.status in (SlotStatus.READY, SlotStatus.ERROR)


__all__ = ["Slot", "SlotStatus"]
