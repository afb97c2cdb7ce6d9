import pytest
from boxoffice.domain.seating.rules import SeatLocator, parse_seat_id, section_of, block_rules, is_seat_blocked, \
    is_seat_available, expand_section_seats, blocked_seat_ids, occupied_seat_set, blocking_stats
from tests.helper import make_event, make_section


def test_seat_locator_builds_seat_id():
    assert SeatLocator("VIP", 3, 12).seat_id == "VIP-3-12"


@pytest.mark.parametrize(
    "seat_id, expected",
    [
        ("A-1-5", SeatLocator("A", 1, 5)),
        ("NORTE-12-30", SeatLocator("NORTE", 12, 30)),
        ("A-1", None),
        ("A-x-5", None),
        ("-1-5", None),
        ("", None),
    ]
)
def test_parse_seat_id(seat_id, expected):
    assert parse_seat_id(seat_id) == expected


@pytest.mark.parametrize(
    "seat_id, expected",
    [
        ("A-1-5", "A"),
        ("VIP-2-1", "VIP"),
        ("A5", ""),
        ("", ""),
    ]
)
def test_section_of(seat_id, expected):
    assert section_of(seat_id) == expected


def test_seat_is_available_when_nothing_is_occupied():
    assert is_seat_available("A-1-1", set()) is True


def test_seat_is_unavailable_when_occupied():
    occupied = {"A-1-1", "A-1-2"}

    assert is_seat_available("A-1-1", occupied) is False
    assert is_seat_available("A-1-3", occupied) is True


def test_nested_configuration_blocks_seat_and_section():
    event = make_event(config=(["A-1-1"], ["B"]))

    assert is_seat_blocked(event, "A-1-1") is True
    assert is_seat_blocked(event, "B-7-7") is True
    assert is_seat_blocked(event, "A-1-2") is False


def test_nested_configuration_shadows_legacy_columns():
    event = make_event(blocked_seats=["A-1-1"], blocked_sections=["C"], config=(["A-2-2"], []))

    assert is_seat_blocked(event, "A-1-1") is False
    assert is_seat_blocked(event, "C-1-1") is False
    assert is_seat_blocked(event, "A-2-2") is True


def test_legacy_columns_are_read_without_nested_configuration():
    event = make_event(blocked_seats=["A-1-1"], blocked_sections=["C"])

    assert is_seat_blocked(event, "A-1-1") is True
    assert is_seat_blocked(event, "C-4-4") is True


def test_seat_without_dash_has_empty_section():
    event = make_event(config=([], ["A"]))

    assert is_seat_blocked(event, "A5") is False


def test_no_blocks_means_nothing_is_blocked():
    rules = block_rules(make_event())

    assert rules.is_empty
    assert is_seat_blocked(make_event(), "A-1-1") is False


def test_expand_section_seats():
    section = make_section("A", rows=2, seats_per_row=3)

    assert expand_section_seats(section) == ["A-1-1", "A-1-2", "A-1-3", "A-2-1", "A-2-2", "A-2-3"]


def test_blocked_seat_ids_expands_known_sections():
    event = make_event(
        sections=[make_section("A", rows=1, seats_per_row=2), make_section("B", rows=1, seats_per_row=1)],
        config=(["B-1-1"], ["A", "UNKNOWN"])
    )

    assert blocked_seat_ids(event) == {"A-1-1", "A-1-2", "B-1-1"}


def test_occupied_set_is_union_of_sold_and_blocked():
    event = make_event(config=(["A-1-1"], []))

    occupied = occupied_seat_set(["A-1-2", "A-1-2"], event)

    assert occupied == {"A-1-1", "A-1-2"}
    assert is_seat_available("A-1-1", occupied) is False
    assert is_seat_available("A-1-3", occupied) is True


def test_blocking_stats():
    assert blocking_stats(make_event(config=(["A-1-1", "A-1-2"], ["B"]))) == {
        "blocked_seats": 2,
        "blocked_sections": 1,
        "has_blocks": True,
    }
    assert blocking_stats(make_event())["has_blocks"] is False
