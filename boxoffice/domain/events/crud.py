from datetime import datetime
from typing import Iterable
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import paginate
from .models import Event, EventSection, RowPrice, EventState, EventType
from .lifecycle import SWEEPABLE_STATES


async def get_event_by_id(db: AsyncSession, event_id: int) -> Event | None:
    stmt = select(Event).where(Event.id == event_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_event_for_update(db: AsyncSession, event_id: int) -> Event | None:
    stmt = select(Event).where(Event.id == event_id).with_for_update()
    result = await db.execute(stmt)
    return result.scalars().first()


async def list_events(
        db: AsyncSession,
        page: int,
        page_size: int,
        *,
        states: Iterable[EventState] | None = None,
        event_type: EventType | None = None,
        location_id: int | None = None,
        name: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
) -> tuple[list[Event], int]:
    stmt = select(Event)
    where = []

    if states:
        where.append(Event.state.in_(states))
    if event_type is not None:
        where.append(Event.type == event_type)
    if location_id is not None:
        where.append(Event.location_id == location_id)
    if name:
        where.append(Event.name.ilike(f"%{name}%"))
    if date_from is not None:
        where.append(Event.date >= date_from)
    if date_to is not None:
        where.append(Event.date <= date_to)

    return await paginate(
        db,
        base_stmt=stmt,
        page=page,
        page_size=page_size,
        where=where,
        order_by=[Event.date.asc(), Event.id],
        count_by=Event.id
    )


async def list_events_at_location_between(
        db: AsyncSession,
        location_id: int,
        start: datetime,
        end: datetime,
        *,
        exclude_event_id: int | None = None
) -> list[Event]:
    stmt = select(Event).where(
        Event.location_id == location_id,
        Event.state != EventState.CANCELADO,
        Event.date >= start,
        Event.date < end
    )
    if exclude_event_id is not None:
        stmt = stmt.where(Event.id != exclude_event_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


def build_sections(sections: list[dict]) -> list[EventSection]:
    built = []
    for position, data in enumerate(sections):
        row_pricing = [RowPrice(row=rp["row"], price=rp["price"]) for rp in data.get("row_pricing", [])]
        built.append(EventSection(
            section_id=data["section_id"],
            section_name=data["section_name"],
            position=position,
            capacity=data["capacity"],
            rows=data["rows"],
            seats_per_row=data["seats_per_row"],
            default_price=data.get("default_price"),
            row_pricing=row_pricing
        ))
    return built


async def create_event(db: AsyncSession, data: dict) -> Event:
    event = Event(**data)
    db.add(event)
    return event


async def update_event(event: Event, data: dict) -> Event:
    for k, v in data.items():
        setattr(event, k, v)
    return event


async def delete_event(db: AsyncSession, event: Event) -> None:
    await db.delete(event)


async def finalize_past_events(db: AsyncSession, before: datetime) -> int:
    stmt = (
        update(Event)
        .where(Event.date < before, Event.state.in_(sorted(SWEEPABLE_STATES)))
        .values(state=EventState.FINALIZADO)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount or 0


async def activate_events_between(db: AsyncSession, start: datetime, end: datetime) -> int:
    stmt = (
        update(Event)
        .where(Event.date >= start, Event.date < end, Event.state == EventState.PROXIMO)
        .values(state=EventState.ACTIVO)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount or 0

