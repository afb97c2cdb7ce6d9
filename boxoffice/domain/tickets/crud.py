from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import paginate
from .models import Ticket, TicketSeat, TicketStatus, OCCUPYING_STATUSES


async def get_ticket_by_id(db: AsyncSession, ticket_id: int) -> Ticket | None:
    stmt = select(Ticket).where(Ticket.id == ticket_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def get_user_ticket_for_update(db: AsyncSession, user_id: int, ticket_id: int) -> Ticket | None:
    stmt = select(Ticket).where(Ticket.id == ticket_id, Ticket.user_id == user_id).with_for_update()
    result = await db.execute(stmt)
    return result.scalars().first()


async def list_user_tickets(
        db: AsyncSession,
        user_id: int,
        page: int,
        page_size: int,
        *,
        status: TicketStatus | None = None,
        event_id: int | None = None
) -> tuple[list[Ticket], int]:
    where = [Ticket.user_id == user_id]
    if status is not None:
        where.append(Ticket.status == status)
    if event_id is not None:
        where.append(Ticket.event_id == event_id)

    return await paginate(
        db,
        base_stmt=select(Ticket),
        page=page,
        page_size=page_size,
        where=where,
        order_by=[Ticket.purchased_at.desc(), Ticket.id.desc()],
        count_by=Ticket.id
    )


async def list_sold_seat_ids(db: AsyncSession, event_id: int) -> list[str]:
    stmt = (
        select(TicketSeat.seat_id)
        .join(Ticket, Ticket.id == TicketSeat.ticket_id)
        .where(
            TicketSeat.event_id == event_id,
            TicketSeat.active.is_(True),
            Ticket.status.in_(OCCUPYING_STATUSES)
        )
    )
    result = await db.scalars(stmt)
    return list(result.all())


async def count_sold_tickets(db: AsyncSession, event_id: int) -> int:
    stmt = select(func.coalesce(func.sum(Ticket.quantity), 0)).where(
        Ticket.event_id == event_id,
        Ticket.status.in_(OCCUPYING_STATUSES)
    )
    return int(await db.scalar(stmt) or 0)


async def create_ticket(db: AsyncSession, data: dict, seats: list[dict]) -> Ticket:
    ticket = Ticket(**data, seats=[TicketSeat(**s) for s in seats])
    db.add(ticket)
    return ticket


async def release_ticket_seats(db: AsyncSession, ticket_id: int) -> None:
    stmt = (
        update(TicketSeat)
        .where(TicketSeat.ticket_id == ticket_id)
        .values(active=False)
        .execution_options(synchronize_session="fetch")
    )
    await db.execute(stmt)
