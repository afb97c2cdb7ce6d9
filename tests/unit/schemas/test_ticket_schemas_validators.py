import pytest
from pydantic import ValidationError
from boxoffice.domain.tickets.schemas import TicketPurchaseDTO
from boxoffice.domain.seating.schemas import SeatBlocksUpdateDTO, OccupiedSeatsDTO
from boxoffice.domain.locations.schemas import SeatMapCreateDTO


def test_seated_purchase_quantity_defaults_to_seat_count():
    dto = TicketPurchaseDTO(event_id=1, seats=["A-1-1", "A-1-2"])

    assert dto.requested == 2


def test_general_admission_purchase_uses_quantity():
    assert TicketPurchaseDTO(event_id=1, quantity=3).requested == 3


def test_purchase_requires_quantity_or_seats():
    with pytest.raises(ValidationError):
        TicketPurchaseDTO(event_id=1)


def test_quantity_must_match_seats():
    with pytest.raises(ValidationError):
        TicketPurchaseDTO(event_id=1, quantity=3, seats=["A-1-1"])


@pytest.mark.parametrize("seats", [["A-1"], ["A-x-1"], ["A-1-1", "A-1-1"]])
def test_invalid_or_duplicate_seats_rejected(seats):
    with pytest.raises(ValidationError):
        TicketPurchaseDTO(event_id=1, seats=seats)


def test_seat_blocks_are_trimmed_and_deduplicated():
    dto = SeatBlocksUpdateDTO(blocked_seats=[" A-1-1", "A-1-1", ""], blocked_sections=["B", "B "])

    assert dto.blocked_seats == ["A-1-1"]
    assert dto.blocked_sections == ["B"]


def test_occupied_seats_uses_camel_case_aliases():
    dto = OccupiedSeatsDTO(event_id=4, occupied_seats=["A-1-1"], count=1)

    assert dto.model_dump(by_alias=True) == {
        "success": True,
        "eventId": 4,
        "occupiedSeats": ["A-1-1"],
        "blockedSections": [],
        "count": 1,
    }


def _seat_map(**overrides):
    data = {
        "id": "bernabeu",
        "name": "Santiago Bernabeu",
        "type": "football",
        "sections": [
            {
                "section_id": "NORTE",
                "name": "Fondo Norte",
                "rows": 20,
                "seats_per_row": 40,
                "price": "35",
                "color": "#1E90FF",
                "position": "north",
                "order": 1,
            }
        ],
    }
    data.update(overrides)
    return data


def test_seat_map_is_valid():
    dto = SeatMapCreateDTO(**_seat_map())

    assert dto.sections[0].seats_per_row == 40


def test_seat_map_rejects_bad_color():
    data = _seat_map()
    data["sections"][0]["color"] = "blue"

    with pytest.raises(ValidationError):
        SeatMapCreateDTO(**data)


def test_seat_map_rejects_duplicate_sections():
    data = _seat_map()
    data["sections"] = data["sections"] * 2

    with pytest.raises(ValidationError):
        SeatMapCreateDTO(**data)
