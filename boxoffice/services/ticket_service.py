import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.config import MAX_TICKETS_PER_PURCHASE
from boxoffice.core.pagination import PageDTO
from boxoffice.core.utils.validators import validate_ticket_quantity, validate_event_capacity
from boxoffice.core.utils.generators import generate_ticket_number, generate_validation_code, generate_qr_token, \
    generate_qr_data, generate_purchase_id
from boxoffice.domain.events.models import Event, EventState
from boxoffice.domain.events import crud as events_crud
from boxoffice.domain.tickets.models import Ticket, TicketStatus
from boxoffice.domain.tickets.schemas import TicketPurchaseDTO, TicketReadDTO, TicketQrDTO, UserTicketsQueryDTO
from boxoffice.domain.tickets import crud
from boxoffice.domain.seating.schemas import OccupiedSeatsDTO
from boxoffice.domain.seating.rules import SeatLocator, parse_seat_id, block_rules, occupied_seat_set, \
    is_seat_available, is_seat_blocked
from boxoffice.domain.pricing.rules import resolve_seat_price, total_price
from boxoffice.domain.exceptions import NotFound, InvalidInput, Conflict, SeatUnavailable

logger = logging.getLogger("boxoffice.tickets")

ON_SALE_STATES = {EventState.PROXIMO, EventState.ACTIVO}

TICKET_TRANSITIONS = {
    TicketStatus.PENDING: {TicketStatus.PAID, TicketStatus.CANCELLED},
    TicketStatus.PAID: {TicketStatus.CANCELLED},
}


def _check_seat_in_event(event: Event, locator: SeatLocator) -> None:
    if not event.uses_section_pricing:
        return
    section = next((s for s in event.section_pricing if s.section_id == locator.section_id), None)
    if section is None:
        raise InvalidInput("Unknown section", ctx={"event_id": event.id, "section_id": locator.section_id})
    if not (1 <= locator.row <= section.rows and 1 <= locator.seat <= section.seats_per_row):
        raise InvalidInput("Seat outside of section", ctx={"event_id": event.id, "seat_id": locator.seat_id})


async def get_occupied_seats(db: AsyncSession, event_id: int) -> OccupiedSeatsDTO:
    event = await events_crud.get_event_by_id(db, event_id)
    if not event:
        raise NotFound("Event not found", ctx={"event_id": event_id})

    sold = await crud.list_sold_seat_ids(db, event_id)
    occupied = sorted(occupied_seat_set(sold, event))
    return OccupiedSeatsDTO(
        event_id=event_id,
        occupied_seats=occupied,
        blocked_sections=sorted(block_rules(event).sections),
        count=len(occupied)
    )


async def _seat_rows(db: AsyncSession, event: Event, seat_ids: list[str]) -> list[dict]:
    locators = [parse_seat_id(seat_id) for seat_id in seat_ids]
    if any(loc is None for loc in locators):
        raise InvalidInput("Invalid seat ids", ctx={"seat_ids": seat_ids})
    for locator in locators:
        _check_seat_in_event(event, locator)

    occupied = occupied_seat_set(await crud.list_sold_seat_ids(db, event.id), event)
    unavailable = [
        loc.seat_id for loc in locators
        if not is_seat_available(loc.seat_id, occupied) or is_seat_blocked(event, loc.seat_id)
    ]
    if unavailable:
        raise SeatUnavailable(unavailable, ctx={"event_id": event.id})

    return [
        {
            "event_id": event.id,
            "seat_id": loc.seat_id,
            "section_id": loc.section_id,
            "row": loc.row,
            "seat": loc.seat,
            "price": resolve_seat_price(event, loc.section_id, loc.row),
        }
        for loc in locators
    ]


async def purchase_tickets(db: AsyncSession, user_id: int, schema: TicketPurchaseDTO) -> Ticket:
    try:
        quantity = validate_ticket_quantity(schema.requested, MAX_TICKETS_PER_PURCHASE)
    except ValueError as e:
        raise InvalidInput(str(e), ctx={"quantity": schema.requested}) from e

    event = await events_crud.get_event_for_update(db, schema.event_id)
    if not event:
        raise NotFound("Event not found", ctx={"event_id": schema.event_id})
    if event.state not in ON_SALE_STATES:
        raise Conflict("Event is not on sale", ctx={"event_id": event.id, "state": event.state.value})

    if schema.seats:
        seats = await _seat_rows(db, event, schema.seats)
        price = total_price(seats)
    elif event.uses_section_pricing:
        raise InvalidInput("Seats are required for this event", ctx={"event_id": event.id})
    else:
        seats = []
        price = event.price * quantity

    sold = await crud.count_sold_tickets(db, event.id)
    try:
        validate_event_capacity(event.capacity, sold + quantity)
    except ValueError as e:
        raise Conflict(
            str(e),
            ctx={"event_id": event.id, "capacity": event.capacity, "sold": sold, "requested": quantity}
        ) from e

    data = {
        "user_id": user_id,
        "event_id": event.id,
        "price": price,
        "quantity": quantity,
        "status": TicketStatus.PENDING,
        "qr_code": generate_qr_token(),
        "ticket_number": generate_ticket_number(),
        "validation_code": generate_validation_code(),
    }
    ticket = await crud.create_ticket(db, data, seats)
    try:
        await db.flush()
        await db.refresh(ticket)
    except IntegrityError as e:
        if schema.seats:
            raise SeatUnavailable(schema.seats, ctx={"event_id": event.id}) from e
        raise Conflict("Ticket conflict", ctx={"event_id": event.id}) from e

    logger.info(
        "Ticket %s purchased by user %s for event %s (quantity=%d, price=%s)",
        ticket.id, user_id, event.id, quantity, price
    )
    return ticket


async def _get_owned_ticket_for_update(db: AsyncSession, user_id: int, ticket_id: int) -> Ticket:
    ticket = await crud.get_user_ticket_for_update(db, user_id, ticket_id)
    if not ticket:
        raise NotFound("Ticket not found", ctx={"ticket_id": ticket_id})
    return ticket


def _check_ticket_transition(ticket: Ticket, new_status: TicketStatus) -> None:
    if new_status not in TICKET_TRANSITIONS.get(ticket.status, set()):
        raise Conflict(
            "Invalid ticket status transition",
            ctx={"ticket_id": ticket.id, "from": ticket.status.value, "to": new_status.value}
        )


async def pay_ticket(db: AsyncSession, user_id: int, ticket_id: int) -> Ticket:
    ticket = await _get_owned_ticket_for_update(db, user_id, ticket_id)
    _check_ticket_transition(ticket, TicketStatus.PAID)

    ticket.status = TicketStatus.PAID
    await db.flush()
    await db.refresh(ticket)
    logger.info("Ticket %s paid by user %s", ticket.id, user_id)
    return ticket


async def cancel_ticket(db: AsyncSession, user_id: int, ticket_id: int) -> Ticket:
    ticket = await _get_owned_ticket_for_update(db, user_id, ticket_id)
    _check_ticket_transition(ticket, TicketStatus.CANCELLED)

    ticket.status = TicketStatus.CANCELLED
    await crud.release_ticket_seats(db, ticket.id)
    await db.flush()
    await db.refresh(ticket)
    logger.info("Ticket %s cancelled by user %s, %d seats released", ticket.id, user_id, len(ticket.seats))
    return ticket


async def get_ticket(db: AsyncSession, user_id: int, ticket_id: int, *, is_admin: bool = False) -> Ticket:
    ticket = await crud.get_ticket_by_id(db, ticket_id)
    if not ticket or (ticket.user_id != user_id and not is_admin):
        raise NotFound("Ticket not found", ctx={"ticket_id": ticket_id})
    return ticket


async def list_user_tickets(db: AsyncSession, user_id: int, query: UserTicketsQueryDTO) -> PageDTO[TicketReadDTO]:
    tickets, total = await crud.list_user_tickets(
        db,
        user_id,
        query.page,
        query.page_size,
        status=query.status,
        event_id=query.event_id
    )
    items = [TicketReadDTO.model_validate(ticket) for ticket in tickets]
    return PageDTO(items=items, total=total, page=query.page, page_size=query.page_size)


def ticket_qr_payload(ticket: Ticket) -> str:
    return generate_qr_data(ticket)


async def get_ticket_qr(db: AsyncSession, user_id: int, ticket_id: int) -> TicketQrDTO:
    ticket = await get_ticket(db, user_id, ticket_id)
    if ticket.status == TicketStatus.CANCELLED:
        raise Conflict("Ticket is cancelled", ctx={"ticket_id": ticket.id})
    return TicketQrDTO(
        ticket_id=ticket.id,
        purchase_id=generate_purchase_id(ticket.id),
        qr_data=ticket_qr_payload(ticket)
    )
