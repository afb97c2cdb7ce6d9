from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple


class SeatLocator(NamedTuple):
    section_id: str
    row: int
    seat: int

    @property
    def seat_id(self) -> str:
        return f"{self.section_id}-{self.row}-{self.seat}"


def parse_seat_id(seat_id: str) -> SeatLocator | None:
    # section ids never contain "-", so the last two parts are row and seat
    parts = (seat_id or "").rsplit("-", 2)
    if len(parts) != 3 or not parts[0]:
        return None
    section_id, row, seat = parts
    if not (row.isdigit() and seat.isdigit()):
        return None
    return SeatLocator(section_id, int(row), int(seat))


def section_of(seat_id: str) -> str:
    if "-" not in seat_id:
        return ""
    return seat_id.split("-", 1)[0]


@dataclass(frozen=True)
class BlockRules:
    seats: frozenset[str] = frozenset()
    sections: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.seats and not self.sections


def block_rules(event: Any) -> BlockRules:
    config = getattr(event, "seat_map_configuration", None)
    if config is not None:
        seats, sections = config.blocked_seats, config.blocked_sections
    else:
        seats, sections = getattr(event, "blocked_seats", None), getattr(event, "blocked_sections", None)
    return BlockRules(frozenset(seats or ()), frozenset(sections or ()))


def is_seat_blocked(event: Any, seat_id: str) -> bool:
    rules = block_rules(event)
    if seat_id in rules.seats:
        return True
    return section_of(seat_id) in rules.sections


def is_seat_available(seat_id: str, occupied: Iterable[str]) -> bool:
    return seat_id not in occupied


def expand_section_seats(section: Any) -> list[str]:
    return [
        SeatLocator(section.section_id, row, seat).seat_id
        for row in range(1, section.rows + 1)
        for seat in range(1, section.seats_per_row + 1)
    ]


def blocked_seat_ids(event: Any) -> set[str]:
    rules = block_rules(event)
    blocked = set(rules.seats)
    if rules.sections:
        for section in event.section_pricing or []:
            if section.section_id in rules.sections:
                blocked.update(expand_section_seats(section))
    return blocked


def occupied_seat_set(sold: Iterable[str], event: Any) -> set[str]:
    return set(sold) | blocked_seat_ids(event)


def blocking_stats(event: Any) -> dict[str, Any]:
    rules = block_rules(event)
    return {
        "blocked_seats": len(rules.seats),
        "blocked_sections": len(rules.sections),
        "has_blocks": not rules.is_empty,
    }
