"""User-controlled query parameters and the pure transition function over them."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple, Union

from flight_browser.pagination import clamp_page, next_page, previous_page
from flight_browser.transform.pipeline import SortOrder, is_unset


@dataclass(frozen=True)
class QueryState:
    search_term: str = ""
    filters: Tuple[Tuple[str, Any], ...] = ()
    sort_criterion: Optional[str] = None
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1

    @property
    def filter_values(self) -> Dict[str, Any]:
        return dict(self.filters)


@dataclass(frozen=True)
class SetSearch:
    term: str


@dataclass(frozen=True)
class SetFilter:
    """Select ``value`` for ``dimension``; ``None`` or ``""`` clears it."""

    dimension: str
    value: Any = None


@dataclass(frozen=True)
class ToggleSort:
    criterion: str


@dataclass(frozen=True)
class GoToPage:
    page: int
    total_pages: int


@dataclass(frozen=True)
class NextPage:
    total_pages: int


@dataclass(frozen=True)
class PreviousPage:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Action = Union[SetSearch, SetFilter, ToggleSort, GoToPage, NextPage, PreviousPage, Reset]


def _with_filter(filters: Tuple[Tuple[str, Any], ...], dimension: str, value: Any) -> Tuple[Tuple[str, Any], ...]:
    remaining = tuple((key, current) for key, current in filters if key != dimension)
    if is_unset(value):
        return remaining
    return remaining + ((dimension, value),)


def reduce(state: QueryState, action: Action) -> QueryState:
    """Return the state that follows ``action``; ``state`` is never modified."""
    if isinstance(action, SetSearch):
        return replace(state, search_term=action.term)
    if isinstance(action, SetFilter):
        return replace(state, filters=_with_filter(state.filters, action.dimension, action.value))
    if isinstance(action, ToggleSort):
        if state.sort_criterion == action.criterion:
            flipped = SortOrder.DESC if state.sort_order is SortOrder.ASC else SortOrder.ASC
            return replace(state, sort_order=flipped)
        return replace(state, sort_criterion=action.criterion, sort_order=SortOrder.ASC)
    if isinstance(action, GoToPage):
        return replace(state, page=clamp_page(action.page, action.total_pages))
    if isinstance(action, NextPage):
        return replace(state, page=next_page(state.page, action.total_pages))
    if isinstance(action, PreviousPage):
        return replace(state, page=previous_page(state.page))
    if isinstance(action, Reset):
        return QueryState()
    raise TypeError(f"Unsupported action {action!r}")


__all__ = [
    "Action",
    "GoToPage",
    "NextPage",
    "PreviousPage",
    "QueryState",
    "Reset",
    "SetFilter",
    "SetSearch",
    "ToggleSort",
    "reduce",
]
