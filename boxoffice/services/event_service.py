import logging
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import PageDTO
from boxoffice.core.utils.validators import validate_event_date, validate_event_capacity
from boxoffice.domain.events.models import Event, EventState, SeatMapConfiguration
from boxoffice.domain.events.schemas import EventCreateDTO, EventUpdateDTO, EventReadDTO, EventDetailsDTO, \
    EventsQueryDTO
from boxoffice.domain.events.lifecycle import can_transition, FINAL_STATES, classify_event_state, \
    has_time_conflict, local_day_bounds, app_timezone
from boxoffice.domain.events import crud
from boxoffice.domain.pricing.schemas import SeatPriceDTO, EventPricingDTO, PriceRangeDTO, SectionPricingDTO
from boxoffice.domain.pricing.rules import resolve_seat_price, price_range, price_range_label, section_pricing_info, \
    sections_capacity
from boxoffice.domain.seating.schemas import SeatBlocksUpdateDTO, SeatMapConfigurationReadDTO, BlockingStatsDTO
from boxoffice.domain.seating.rules import block_rules, blocking_stats, parse_seat_id, section_of
from boxoffice.domain.tickets import crud as tickets_crud
from boxoffice.services.location_service import get_location
from boxoffice.domain.exceptions import NotFound, InvalidInput, Conflict

logger = logging.getLogger("boxoffice.events")


def _lowest_section_price(sections: list[SectionPricingDTO]) -> Decimal:
    prices = []
    for section in sections:
        prices.extend(rp.price for rp in section.row_pricing)
        if section.default_price is not None:
            prices.append(section.default_price)
    return min(prices) if prices else Decimal("0")


def _check_future_date(value: datetime, now: datetime | None) -> datetime:
    try:
        return validate_event_date(value, now)
    except ValueError as e:
        raise InvalidInput(str(e), ctx={"date": value}) from e


async def _check_time_conflicts(
        db: AsyncSession,
        location_id: int,
        event_date: datetime,
        exclude_event_id: int | None = None
) -> None:
    tz = app_timezone()
    day_start, day_end = local_day_bounds(event_date, tz)
    same_day = await crud.list_events_at_location_between(
        db,
        location_id,
        day_start,
        day_end,
        exclude_event_id=exclude_event_id
    )
    for other in same_day:
        if has_time_conflict(event_date, other.date, tz):
            raise Conflict(
                "Event time conflict",
                ctx={"location_id": location_id, "conflicting_event_id": other.id, "date": other.date}
            )


def _build_seat_map_configuration(seat_map_id: str | None, seats: list[str], sections: list[str]):
    return SeatMapConfiguration(
        seat_map_id=seat_map_id,
        blocked_seats=list(seats),
        blocked_sections=list(sections),
        configured_at=datetime.now(timezone.utc)
    )


async def get_event(db: AsyncSession, event_id: int) -> Event:
    event = await crud.get_event_by_id(db, event_id)
    if not event:
        raise NotFound("Event not found", ctx={"event_id": event_id})
    return event


async def list_events(db: AsyncSession, query: EventsQueryDTO) -> PageDTO[EventReadDTO]:
    events, total = await crud.list_events(
        db,
        page=query.page,
        page_size=query.page_size,
        states=[query.state] if query.state else None,
        event_type=query.type,
        location_id=query.location_id,
        name=query.name,
        date_from=query.date_from,
        date_to=query.date_to
    )

    items = [EventReadDTO.model_validate(event) for event in events]

    return PageDTO(
        items=items,
        total=total,
        page=query.page,
        page_size=query.page_size
    )


async def create_event(
        db: AsyncSession,
        schema: EventCreateDTO,
        created_by: int,
        now: datetime | None = None
) -> Event:
    event_date = _check_future_date(schema.date, now)
    location = await get_location(db, schema.location_id)
    await _check_time_conflicts(db, location.id, event_date)

    data = schema.model_dump(exclude={"section_pricing", "blocked_seats", "blocked_sections"})
    data["date"] = event_date
    data["created_by"] = created_by

    if schema.uses_section_pricing:
        data["section_pricing"] = crud.build_sections([s.model_dump() for s in schema.section_pricing])
        data["capacity"] = sections_capacity(schema.section_pricing)
        if schema.price is None:
            data["price"] = _lowest_section_price(schema.section_pricing)

    if schema.blocked_seats or schema.blocked_sections or location.seat_map_id:
        data["seat_map_configuration"] = _build_seat_map_configuration(
            location.seat_map_id,
            schema.blocked_seats,
            schema.blocked_sections
        )

    data["state"] = classify_event_state(
        EventState.PROXIMO,
        event_date,
        now or datetime.now(timezone.utc)
    )

    event = await crud.create_event(db, data)
    try:
        await db.flush()
        await db.refresh(event)
    except IntegrityError as e:
        raise Conflict("Event conflict", ctx={"location_id": schema.location_id}) from e

    logger.info(
        "Event %s created at location %s for %s (state=%s, capacity=%s)",
        event.id, event.location_id, event.date.isoformat(), event.state.value, event.capacity
    )
    return event


async def update_event(
        db: AsyncSession,
        event: Event,
        schema: EventUpdateDTO,
        now: datetime | None = None
) -> Event:
    if event.state in FINAL_STATES:
        raise Conflict(
            "Event can no longer be edited",
            ctx={"event_id": event.id, "state": event.state.value}
        )

    data = schema.model_dump(exclude_none=True, exclude={"section_pricing"})

    if "date" in data:
        data["date"] = _check_future_date(data["date"], now)
    if "location_id" in data and data["location_id"] != event.location_id:
        await get_location(db, data["location_id"])
    if "date" in data or "location_id" in data:
        await _check_time_conflicts(
            db,
            data.get("location_id", event.location_id),
            data.get("date", event.date),
            exclude_event_id=event.id
        )

    uses_sections = data.get("uses_section_pricing", event.uses_section_pricing)
    if schema.section_pricing is not None:
        # flush the removals first so replaced section ids do not collide
        event.section_pricing.clear()
        await db.flush()
        event.section_pricing.extend(crud.build_sections([s.model_dump() for s in schema.section_pricing]))
        if "price" not in data and uses_sections:
            data["price"] = _lowest_section_price(schema.section_pricing)

    if uses_sections:
        if not (schema.section_pricing or event.section_pricing):
            raise InvalidInput("section_pricing is required when uses_section_pricing is set", ctx={"event_id": event.id})
        data["capacity"] = sections_capacity(event.section_pricing)

    if "capacity" in data and data["capacity"] != event.capacity:
        sold = await tickets_crud.count_sold_tickets(db, event.id)
        try:
            validate_event_capacity(data["capacity"], sold)
        except ValueError as e:
            raise Conflict(str(e), ctx={"event_id": event.id, "capacity": data["capacity"], "sold": sold}) from e

    event = await crud.update_event(event, data)
    try:
        await db.flush()
        await db.refresh(event)
    except IntegrityError as e:
        raise Conflict("Event conflict", ctx={"event_id": event.id}) from e

    logger.info("Event %s updated (fields=%s)", event.id, sorted(schema.model_dump(exclude_none=True)))
    return event


async def delete_event(db: AsyncSession, event: Event) -> None:
    sold = await tickets_crud.count_sold_tickets(db, event.id)
    if sold:
        raise Conflict("Event has active tickets", ctx={"event_id": event.id, "sold": sold})

    await crud.delete_event(db, event)
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict("Event is still referenced", ctx={"event_id": event.id}) from e
    logger.info("Event %s deleted", event.id)


async def change_event_state(db: AsyncSession, event_id: int, new_state: EventState) -> Event:
    event = await crud.get_event_for_update(db, event_id)
    if not event:
        raise NotFound("Event not found", ctx={"event_id": event_id})

    current = event.state
    if new_state == current:
        raise InvalidInput("State is already set", ctx={"event_id": event.id, "state": current.value})

    if not can_transition(current, new_state):
        raise Conflict(
            "Invalid state transition",
            ctx={"event_id": event.id, "from": current.value, "to": new_state.value}
        )

    event.state = new_state
    try:
        await db.flush()
        await db.refresh(event)
    except IntegrityError as e:
        raise Conflict("States conflict", ctx={"event_id": event.id, "to": new_state.value}) from e

    logger.info("Event %s state %s -> %s", event.id, current.value, new_state.value)
    return event


async def get_seat_price(db: AsyncSession, event_id: int, section_id: str, row: int, seat: int) -> SeatPriceDTO:
    event = await get_event(db, event_id)
    price = resolve_seat_price(event, section_id, row)
    logger.debug("Seat %s-%s-%s of event %s priced at %s", section_id, row, seat, event_id, price)
    return SeatPriceDTO(price=price)


def _price_range_dto(event: Event) -> PriceRangeDTO:
    low, high = price_range(event)
    return PriceRangeDTO(min=low, max=high, display=price_range_label(event))


async def get_event_pricing(db: AsyncSession, event_id: int) -> EventPricingDTO:
    event = await get_event(db, event_id)
    return EventPricingDTO(
        event_id=event.id,
        uses_section_pricing=event.uses_section_pricing,
        currency=event.currency,
        price_range=_price_range_dto(event),
        sections=section_pricing_info(event)
    )


async def update_seat_blocks(db: AsyncSession, event_id: int, schema: SeatBlocksUpdateDTO) -> Event:
    event = await crud.get_event_for_update(db, event_id)
    if not event:
        raise NotFound("Event not found", ctx={"event_id": event_id})

    invalid = [seat_id for seat_id in schema.blocked_seats if parse_seat_id(seat_id) is None]
    if invalid:
        raise InvalidInput("Invalid seat ids", ctx={"event_id": event_id, "seat_ids": invalid})

    if event.uses_section_pricing:
        known = {s.section_id for s in event.section_pricing}
        unknown = sorted(
            {s for s in schema.blocked_sections if s not in known}
            | {section_of(s) for s in schema.blocked_seats if section_of(s) not in known}
        )
        if unknown:
            raise InvalidInput("Unknown sections", ctx={"event_id": event_id, "sections": unknown})

    config = event.seat_map_configuration
    if config is None:
        seat_map_id = event.location.seat_map_id if event.location else None
        event.seat_map_configuration = _build_seat_map_configuration(
            seat_map_id,
            schema.blocked_seats,
            schema.blocked_sections
        )
    else:
        config.blocked_seats = list(schema.blocked_seats)
        config.blocked_sections = list(schema.blocked_sections)
        config.configured_at = datetime.now(timezone.utc)

    event.blocked_seats = None
    event.blocked_sections = None

    try:
        await db.flush()
        await db.refresh(event)
    except IntegrityError as e:
        raise Conflict("Seat blocks conflict", ctx={"event_id": event_id}) from e

    logger.info(
        "Event %s seat blocks updated (%d seats, %d sections)",
        event_id, len(schema.blocked_seats), len(schema.blocked_sections)
    )
    return event


def event_details(event: Event) -> EventDetailsDTO:
    rules = block_rules(event)
    config = event.seat_map_configuration
    if config is not None:
        config_dto = SeatMapConfigurationReadDTO.model_validate(config)
    elif not rules.is_empty:
        config_dto = SeatMapConfigurationReadDTO(
            seat_map_id=None,
            blocked_seats=sorted(rules.seats),
            blocked_sections=sorted(rules.sections)
        )
    else:
        config_dto = None

    base = EventReadDTO.model_validate(event)
    return EventDetailsDTO(
        **base.model_dump(),
        seat_map_configuration=config_dto,
        price_range=_price_range_dto(event),
        blocking_stats=BlockingStatsDTO(**blocking_stats(event))
    )
