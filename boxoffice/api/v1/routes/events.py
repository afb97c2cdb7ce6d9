from fastapi import APIRouter, status, Depends, Response, Query
from typing import Annotated
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.redis import get_redis
from boxoffice.core.dependencies.auth import require_roles
from boxoffice.core.dependencies.events import require_event, require_admin_event
from boxoffice.core.pagination import PageDTO
from boxoffice.domain.auth.schemas import Principal
from boxoffice.domain.events.models import Event
from boxoffice.domain.events.schemas import EventCreateDTO, EventReadDTO, EventUpdateDTO, EventStateDTO, \
    EventDetailsDTO, EventsQueryDTO, SweepResultDTO
from boxoffice.domain.pricing.schemas import SeatPriceDTO, EventPricingDTO
from boxoffice.domain.seating.schemas import SeatBlocksUpdateDTO
from boxoffice.services import event_service, event_state_service


router = APIRouter(tags=["events"])
db_dependency = Annotated[AsyncSession, Depends(get_db)]
redis_dependency = Annotated[Redis | None, Depends(get_redis)]
admin_dependency = Annotated[Principal, Depends(require_roles("ADMIN"))]


@router.get(
    "/events",
    status_code=status.HTTP_200_OK,
    response_model=PageDTO[EventReadDTO]
)
async def list_events(
        db: db_dependency,
        redis: redis_dependency,
        query: Annotated[EventsQueryDTO, Depends()],
        refresh: Annotated[bool, Query()] = False
):
    if refresh:
        await event_state_service.refresh_event_states(db, redis)
    return await event_service.list_events(db, query)


@router.post(
    "/events/update-states",
    status_code=status.HTTP_200_OK,
    response_model=SweepResultDTO | None
)
async def update_event_states(
        db: db_dependency,
        redis: redis_dependency,
        _: admin_dependency,
        force: Annotated[bool, Query()] = True
):
    return await event_state_service.refresh_event_states(db, redis, force=force)


@router.get(
    "/events/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=EventDetailsDTO
)
async def get_event(event: Annotated[Event, Depends(require_event)]):
    return event_service.event_details(event)


@router.post(
    "/events",
    status_code=status.HTTP_201_CREATED,
    response_model=EventDetailsDTO
)
async def create_event(
        schema: EventCreateDTO,
        db: db_dependency,
        principal: admin_dependency,
        response: Response
):
    event = await event_service.create_event(db, schema, principal.user_id)
    response.headers["Location"] = f"/events/{event.id}"
    return event_service.event_details(event)


@router.patch(
    "/events/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=EventDetailsDTO
)
async def update_event(
        schema: EventUpdateDTO,
        event: Annotated[Event, Depends(require_admin_event)],
        db: db_dependency
):
    event = await event_service.update_event(db, event, schema)
    return event_service.event_details(event)


@router.delete(
    "/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT
)
async def delete_event(event: Annotated[Event, Depends(require_admin_event)], db: db_dependency):
    await event_service.delete_event(db, event)


@router.patch(
    "/events/{event_id}/state",
    status_code=status.HTTP_200_OK,
    response_model=EventReadDTO
)
async def change_event_state(event_id: int, schema: EventStateDTO, db: db_dependency, _: admin_dependency):
    return await event_service.change_event_state(db, event_id, schema.new_state)


@router.get(
    "/events/{event_id}/pricing",
    status_code=status.HTTP_200_OK,
    response_model=EventPricingDTO
)
async def get_event_pricing(event_id: int, db: db_dependency):
    return await event_service.get_event_pricing(db, event_id)


@router.get(
    "/events/{event_id}/seat-price/{section_id}/{row}/{seat}",
    status_code=status.HTTP_200_OK,
    response_model=SeatPriceDTO
)
async def get_seat_price(event_id: int, section_id: str, row: int, seat: int, db: db_dependency):
    return await event_service.get_seat_price(db, event_id, section_id, row, seat)


@router.put(
    "/events/{event_id}/seat-blocks",
    status_code=status.HTTP_200_OK,
    response_model=EventDetailsDTO
)
async def update_seat_blocks(event_id: int, schema: SeatBlocksUpdateDTO, db: db_dependency, _: admin_dependency):
    event = await event_service.update_seat_blocks(db, event_id, schema)
    return event_service.event_details(event)
