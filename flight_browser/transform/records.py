"""Decode flight, airport and passenger payloads into immutable records."""

import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterator, List, Mapping, Optional, Tuple, Union

from flight_browser.errors import InvalidBirthDate, MalformedPayload

GroupingKey = Union[int, str]

FLIGHT_KEYS: Mapping[str, str] = {
    "flightNumber": "flight_number",
    "originAirport": "origin_airport",
    "destinationAirport": "destination_airport",
    "airline": "airline",
    "aircraftName": "aircraft_name",
    "distance": "distance",
    "averageAge": "average_age",
    "passengerCount": "passenger_count",
    "year": "year",
    "month": "month",
}

EARTH_RADIUS_KM = 6371.0088

# date only, or date followed by a time part
ISO_BIRTH_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}(T.+)?$")


def _to_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _to_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_optional_str(value: Any) -> Optional[str]:
    """Return a trimmed string if non-empty; otherwise None."""
    if value is None:
        return None
    if isinstance(value, str):
        s = value.strip()
        return s or None
    return str(value)


def _require_str(item: Mapping[str, Any], key: str, context: str) -> str:
    value = _to_optional_str(item.get(key))
    if value is None:
        raise MalformedPayload(f"{context} is missing '{key}'")
    return value


def _grouping_key(value: Any) -> Optional[GroupingKey]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, str)):
        return value
    return None


@dataclass(frozen=True)
class FlightSummary:
    """One row of the aggregate flight list."""

    flight_number: str
    origin_airport: str
    destination_airport: str
    airline: Optional[str] = None
    aircraft_name: Optional[str] = None
    distance: Optional[float] = None
    average_age: Optional[float] = None
    passenger_count: int = 0
    year: Optional[GroupingKey] = None
    month: Optional[GroupingKey] = None
    extras: Tuple[Tuple[str, Any], ...] = field(default=(), compare=False)

    def search_values(self) -> Iterator[str]:
        """Yield the string form of every populated field, extras included."""
        for key in FLIGHT_KEYS.values():
            value = getattr(self, key)
            if value is not None:
                yield str(value)
        for _, value in self.extras:
            if value is not None:
                yield str(value)


@dataclass(frozen=True)
class FlightPage:
    flights: Tuple[FlightSummary, ...]
    total_pages: int


@dataclass(frozen=True)
class AirportDetails:
    name: str
    latitude: float
    longitude: float

    @property
    def position(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def distance_to(self, other: "AirportDetails") -> float:
        """Great-circle distance in kilometres (haversine)."""
        lat1 = math.radians(self.latitude)
        lon1 = math.radians(self.longitude)
        lat2 = math.radians(other.latitude)
        lon2 = math.radians(other.longitude)

        dlat = lat2 - lat1
        dlon = lon2 - lon1
        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class Passenger:
    """One entry of a flight's roster.

    ``weight_kg`` and ``height_cm`` are kept exactly as received; the sort
    stage coerces them to floats.
    """

    passenger_id: str
    first_name: str
    last_name: str
    birth_date: date
    gender: Optional[str] = None
    weight_kg: Optional[str] = None
    height_cm: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def age_on(self, today: date) -> int:
        return age_on(self.birth_date, today)


def age_on(birth_date: date, today: date) -> int:
    """Whole years elapsed between ``birth_date`` and ``today``."""
    before_birthday = (today.month, today.day) < (birth_date.month, birth_date.day)
    return today.year - birth_date.year - int(before_birthday)


def parse_birth_date(value: Any) -> date:
    """Parse an ISO ``YYYY-MM-DD`` birth date.

    A trailing time component (``1990-05-01T00:00:00Z``) is accepted and
    dropped. Locale renderings such as ``"1 de mayo de 1990"`` are rejected.
    """
    if not isinstance(value, str):
        raise InvalidBirthDate(f"birth date must be a string, got {value!r}")
    text = value.strip()
    if not ISO_BIRTH_DATE.match(text):
        raise InvalidBirthDate(f"birth date {value!r} is not in YYYY-MM-DD format")
    try:
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError as exc:
        raise InvalidBirthDate(f"birth date {value!r} is not a valid date") from exc


def parse_flight(item: Any) -> FlightSummary:
    if not isinstance(item, Mapping):
        raise MalformedPayload(f"flight entry must be an object, got {type(item).__name__}")

    flight_number = _require_str(item, "flightNumber", "flight entry")
    context = f"flight {flight_number}"
    passenger_count = _to_optional_int(item.get("passengerCount"))
    if passenger_count is not None and passenger_count < 0:
        raise MalformedPayload(f"{context} has a negative passengerCount")

    return FlightSummary(
        flight_number=flight_number,
        origin_airport=_require_str(item, "originAirport", context),
        destination_airport=_require_str(item, "destinationAirport", context),
        airline=_to_optional_str(item.get("airline")),
        aircraft_name=_to_optional_str(item.get("aircraftName")),
        distance=_to_optional_float(item.get("distance")),
        average_age=_to_optional_float(item.get("averageAge")),
        passenger_count=passenger_count or 0,
        year=_grouping_key(item.get("year")),
        month=_grouping_key(item.get("month")),
        extras=tuple(
            (key, value) for key, value in item.items() if key not in FLIGHT_KEYS
        ),
    )


def parse_flight_page(payload: Any) -> FlightPage:
    """Decode ``{flights: [...], totalPages: n}``."""
    if not isinstance(payload, Mapping):
        raise MalformedPayload("flight page must be an object")

    flights = payload.get("flights")
    if not isinstance(flights, list):
        raise MalformedPayload("flight page is missing the 'flights' list")

    total_pages = payload.get("totalPages")
    if isinstance(total_pages, bool) or not isinstance(total_pages, int) or total_pages < 0:
        raise MalformedPayload(f"flight page has an invalid totalPages {total_pages!r}")

    return FlightPage(
        flights=tuple(parse_flight(item) for item in flights),
        total_pages=total_pages,
    )


def parse_airport(payload: Any) -> AirportDetails:
    if not isinstance(payload, Mapping):
        raise MalformedPayload("airport details must be an object")

    name = _require_str(payload, "name", "airport details")
    latitude = _to_optional_float(payload.get("latitude"))
    longitude = _to_optional_float(payload.get("longitude"))
    if latitude is None or longitude is None:
        raise MalformedPayload(f"airport {name} is missing coordinates")
    if not -90.0 <= latitude <= 90.0 or not -180.0 <= longitude <= 180.0:
        raise MalformedPayload(f"airport {name} has out-of-range coordinates ({latitude}, {longitude})")

    return AirportDetails(name=name, latitude=latitude, longitude=longitude)


def parse_passenger(item: Any) -> Passenger:
    if not isinstance(item, Mapping):
        raise MalformedPayload(f"passenger entry must be an object, got {type(item).__name__}")

    passenger_id = _require_str(item, "passengerID", "passenger entry")
    context = f"passenger {passenger_id}"
    try:
        birth_date = parse_birth_date(item.get("birthDate"))
    except InvalidBirthDate as exc:
        raise InvalidBirthDate(f"{context}: {exc.reason}") from exc

    return Passenger(
        passenger_id=passenger_id,
        first_name=_require_str(item, "firstName", context),
        last_name=_require_str(item, "lastName", context),
        birth_date=birth_date,
        gender=_to_optional_str(item.get("gender")),
        weight_kg=_to_optional_str(item.get("weight(kg)")),
        height_cm=_to_optional_str(item.get("height(cm)")),
        avatar=_to_optional_str(item.get("avatar")),
    )


def parse_passengers(payload: Any) -> List[Passenger]:
    """Decode a roster; the body must be a JSON array."""
    if payload is None:
        raise MalformedPayload("passenger roster missing")
    if not isinstance(payload, list):
        raise MalformedPayload(f"passenger roster must be an array, got {type(payload).__name__}")
    passengers = [parse_passenger(item) for item in payload]
    seen = set()
    for passenger in passengers:
        if passenger.passenger_id in seen:
            raise MalformedPayload(f"passenger {passenger.passenger_id} appears twice in the roster")
        seen.add(passenger.passenger_id)
    return passengers


__all__ = [
    "AirportDetails",
    "FlightPage",
    "FlightSummary",
    "Passenger",
    "age_on",
    "parse_airport",
    "parse_birth_date",
    "parse_flight",
    "parse_flight_page",
    "parse_passenger",
    "parse_passengers",
]
