import pytest

from flight_browser.pagination import (
    clamp_page,
    next_page,
    paginate,
    previous_page,
    total_pages_for,
)


def test_thirty_seven_records_in_pages_of_fifteen():
    records = list(range(37))

    first = paginate(records, 15, 1)
    second = paginate(records, 15, 2)
    third = paginate(records, 15, 3)

    assert first.total_pages == 3
    assert first.items == tuple(range(0, 15))
    assert second.items == tuple(range(15, 30))
    assert third.items == tuple(range(30, 37))
    assert third.label == "Page 3 of 3"


def test_out_of_range_page_clamps_to_last():
    page = paginate(list(range(37)), 15, 5)

    assert page.effective_page == 3
    assert len(page.items) == 7
    assert not page.has_next
    assert page.has_previous


@pytest.mark.parametrize("requested", [0, -4])
def test_page_before_first_clamps_to_one(requested):
    page = paginate(list(range(37)), 15, requested)

    assert page.effective_page == 1
    assert page.items == tuple(range(15))


def test_empty_sequence_is_page_one_of_one():
    page = paginate([], 10, 3)

    assert page.items == ()
    assert page.total_pages == 1
    assert page.effective_page == 1
    assert not page.has_previous and not page.has_next


@pytest.mark.parametrize(
    "count,page_size,expected",
    [
        (0, 1, 1),
        (1, 1, 1),
        (14, 15, 1),
        (15, 15, 1),
        (16, 15, 2),
        (37, 15, 3),
        (100, 7, 15),
    ],
)
def test_total_pages_for(count, page_size, expected):
    assert total_pages_for(count, page_size) == expected


@pytest.mark.parametrize("count,page_size", [(-1, 10), (10, 0), (10, -2)])
def test_total_pages_for_rejects_invalid_input(count, page_size):
    with pytest.raises(ValueError):
        total_pages_for(count, page_size)


@pytest.mark.parametrize("requested", range(-2, 9))
def test_effective_page_always_within_bounds(requested):
    for count in (0, 1, 9, 10, 11, 45):
        page = paginate(list(range(count)), 10, requested)
        assert 1 <= page.effective_page <= page.total_pages


def test_clamp_page():
    assert clamp_page(4, 3) == 3
    assert clamp_page(2, 3) == 2
    assert clamp_page(0, 3) == 1
    assert clamp_page(2, 0) == 1


def test_navigation_is_bounded():
    assert next_page(2, 3) == 3
    assert next_page(3, 3) == 3
    assert previous_page(2) == 1
    assert previous_page(1) == 1
