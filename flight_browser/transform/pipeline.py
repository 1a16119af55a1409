"""Search, filter and sort over an in-memory record set.

The stages are pure: the same records and parameters always produce the same
ordered output. Search and filter are predicates evaluated together on each
record; sorting always runs last on the surviving candidates.
"""

from datetime import date
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from flight_browser.transform.records import Passenger

Matcher = Callable[[Any, str], bool]
SortValue = Callable[[Any, str], Any]

NUMERIC_STRING_FIELDS = frozenset({"weight_kg", "height_cm"})
AGE_FIELD = "birth_date"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def is_unset(value: Any) -> bool:
    """An empty filter value lets every record through."""
    return value is None or value == ""


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison; missing values order after present ones."""
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    try:
        if a < b:
            return -1
        if b < a:
            return 1
        return 0
    except TypeError:
        # mixed types, e.g. year given as 2023 on one record and "2023" on another
        return compare_values(str(a), str(b))


def attribute_value(record: Any, criterion: str) -> Any:
    return getattr(record, criterion, None)


def matches_any_field(record: Any, needle: str) -> bool:
    """True when any field's string form contains ``needle`` (already lowercased)."""
    return any(needle in value.lower() for value in record.search_values())


def matches_full_name(passenger: Passenger, needle: str) -> bool:
    return needle in passenger.full_name.lower()


def passes_filters(record: Any, filters: Mapping[str, Any]) -> bool:
    for dimension, expected in filters.items():
        if is_unset(expected):
            continue
        if getattr(record, dimension, None) != expected:
            return False
    return True


def search_records(records: Iterable[Any], search_term: str, matcher: Matcher = matches_any_field) -> List[Any]:
    needle = search_term.lower()
    if not needle:
        return list(records)
    return [record for record in records if matcher(record, needle)]


def filter_records(records: Iterable[Any], filters: Optional[Mapping[str, Any]]) -> List[Any]:
    if not filters:
        return list(records)
    return [record for record in records if passes_filters(record, filters)]


def sort_records(
    records: Sequence[Any],
    criterion: Optional[str],
    order: SortOrder = SortOrder.ASC,
    sort_value: SortValue = attribute_value,
) -> List[Any]:
    """Stable sort on ``criterion``.

    Descending order negates each comparison instead of reversing the
    ascending result, so records with equal keys keep their input order in
    both directions. No criterion leaves the input order untouched.
    """
    if not criterion:
        return list(records)

    sign = -1 if SortOrder(order) is SortOrder.DESC else 1
    keyed = [(sort_value(record, criterion), record) for record in records]
    keyed.sort(key=cmp_to_key(lambda left, right: sign * compare_values(left[0], right[0])))
    return [record for _, record in keyed]


def transform(
    records: Iterable[Any],
    search_term: str = "",
    filters: Optional[Mapping[str, Any]] = None,
    sort_criterion: Optional[str] = None,
    sort_order: SortOrder = SortOrder.ASC,
    *,
    matcher: Matcher = matches_any_field,
    sort_value: SortValue = attribute_value,
) -> List[Any]:
    needle = search_term.lower()
    active = {key: value for key, value in (filters or {}).items() if not is_unset(value)}
    candidates = [
        record
        for record in records
        if passes_filters(record, active) and (not needle or matcher(record, needle))
    ]
    return sort_records(candidates, sort_criterion, sort_order, sort_value)


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def passenger_sort_value(today: date) -> SortValue:
    """Sort keys for roster columns.

    Weight and height arrive as numeric strings and compare as floats; the
    birth date compares as the age reached by ``today``.
    """

    def value(passenger: Passenger, criterion: str) -> Any:
        if criterion == AGE_FIELD:
            return passenger.age_on(today)
        if criterion in NUMERIC_STRING_FIELDS:
            return _as_float(getattr(passenger, criterion, None))
        return getattr(passenger, criterion, None)

    return value


def filter_options(records: Iterable[Any], dimensions: Sequence[str]) -> Dict[str, List[Any]]:
    """Sorted unique values per dimension over the records currently loaded."""
    collected: Dict[str, set] = {dimension: set() for dimension in dimensions}
    for record in records:
        for dimension in dimensions:
            value = getattr(record, dimension, None)
            if value is not None:
                collected[dimension].add(value)
    return {
        dimension: sorted(values, key=cmp_to_key(compare_values))
        for dimension, values in collected.items()
    }


__all__ = [
    "SortOrder",
    "compare_values",
    "filter_options",
    "filter_records",
    "matches_any_field",
    "matches_full_name",
    "passenger_sort_value",
    "search_records",
    "sort_records",
    "transform",
]
