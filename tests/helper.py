from datetime import datetime, timezone
from decimal import Decimal
import boxoffice.domain  # noqa: F401  registers every mapper
from boxoffice.domain.events.models import Event, EventSection, RowPrice, EventState, EventType, SeatMapConfiguration
from boxoffice.domain.tickets.models import Ticket, TicketSeat, TicketStatus


def db_with_scalars_first(mocker, value):
    res = mocker.Mock()
    res.scalars.return_value.first.return_value = value
    db = mocker.Mock()
    db.execute = mocker.AsyncMock(return_value=res)
    return db, res


def db_with_scalar(mocker, value):
    db = mocker.Mock()
    db.scalar = mocker.AsyncMock(return_value=value)
    return db


def async_db(mocker):
    db = mocker.Mock()
    db.flush = mocker.AsyncMock()
    db.refresh = mocker.AsyncMock()
    db.execute = mocker.AsyncMock()
    return db


def make_section(section_id="A", *, capacity=100, rows=10, seats_per_row=10, default_price="30", row_prices=None):
    return EventSection(
        section_id=section_id,
        section_name=f"Section {section_id}",
        position=0,
        capacity=capacity,
        rows=rows,
        seats_per_row=seats_per_row,
        default_price=Decimal(default_price) if default_price is not None else None,
        row_pricing=[RowPrice(row=row, price=Decimal(price)) for row, price in (row_prices or {}).items()]
    )


def make_event(
        *,
        id=1,
        price="25",
        capacity=100,
        state=EventState.PROXIMO,
        date=None,
        sections=None,
        uses_section_pricing=None,
        currency="EUR",
        blocked_seats=None,
        blocked_sections=None,
        config=None,
        location_id=3
):
    sections = list(sections or [])
    event = Event(
        id=id,
        name="Clasico",
        type=EventType.FOOTBALL,
        description="Derby night",
        date=date or datetime(2026, 11, 1, 20, 0, tzinfo=timezone.utc),
        location_id=location_id,
        state=state,
        capacity=capacity,
        price=Decimal(price),
        currency=currency,
        uses_section_pricing=bool(sections) if uses_section_pricing is None else uses_section_pricing,
        section_pricing=sections,
        blocked_seats=blocked_seats,
        blocked_sections=blocked_sections,
        created_by=1,
        created_at=datetime(2026, 10, 1, tzinfo=timezone.utc),
        updated_at=datetime(2026, 10, 1, tzinfo=timezone.utc)
    )
    if config is not None:
        seats, block_sections = config
        event.seat_map_configuration = SeatMapConfiguration(
            seat_map_id="stadium-1",
            blocked_seats=list(seats),
            blocked_sections=list(block_sections),
            configured_at=datetime(2026, 10, 2, tzinfo=timezone.utc)
        )
    return event


def make_ticket(*, id=11, user_id=7, event_id=1, status=TicketStatus.PENDING, seats=()):
    return Ticket(
        id=id,
        user_id=user_id,
        event_id=event_id,
        price=sum((Decimal(p) for _, p in seats), Decimal("0")) or Decimal("25"),
        quantity=len(seats) or 1,
        status=status,
        qr_code="qr-token",
        ticket_number="TKT-ABC-123456",
        validation_code="F" * 32,
        purchased_at=datetime(2026, 10, 10, 12, 0, tzinfo=timezone.utc),
        seats=[
            TicketSeat(
                event_id=event_id,
                seat_id=seat_id,
                section_id=seat_id.split("-")[0],
                row=int(seat_id.split("-")[1]),
                seat=int(seat_id.split("-")[2]),
                price=Decimal(price),
                active=True
            )
            for seat_id, price in seats
        ]
    )
