import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import PageDTO
from boxoffice.domain.locations.models import Location, SeatMap
from boxoffice.domain.locations.schemas import LocationCreateDTO, LocationReadDTO, LocationsQueryDTO, \
    SeatMapCreateDTO, SeatMapsQueryDTO
from boxoffice.domain.locations import crud
from boxoffice.domain.exceptions import NotFound, Conflict

logger = logging.getLogger("boxoffice.locations")


async def get_location(db: AsyncSession, location_id: int) -> Location:
    location = await crud.get_location_by_id(db, location_id)
    if not location:
        raise NotFound("Location not found", ctx={"location_id": location_id})
    return location


async def list_locations(db: AsyncSession, query: LocationsQueryDTO) -> PageDTO[LocationReadDTO]:
    locations, total = await crud.list_locations(
        db,
        query.page,
        query.page_size,
        category=query.category,
        name=query.name
    )
    items = [LocationReadDTO.model_validate(location) for location in locations]
    return PageDTO(items=items, total=total, page=query.page, page_size=query.page_size)


async def save_location(db: AsyncSession, schema: LocationCreateDTO) -> tuple[Location, bool]:
    """Create a location, or update the one that already has the same name.

    Returns the location and whether it was created.
    """
    if schema.seat_map_id is not None:
        await get_seat_map(db, schema.seat_map_id)

    data = schema.model_dump()
    location = await crud.get_location_by_name(db, schema.name)
    if location:
        for k, v in data.items():
            setattr(location, k, v)
        await db.flush()
        logger.info("Location %s updated by name", location.id)
        return location, False

    location = await crud.create_location(db, data)
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict("Location conflict", ctx={"name": schema.name}) from e

    logger.info("Location %s created (%s)", location.id, location.category.value)
    return location, True


async def get_seat_map(db: AsyncSession, seat_map_id: str) -> SeatMap:
    seat_map = await crud.get_seat_map_by_id(db, seat_map_id)
    if not seat_map:
        raise NotFound("Seat map not found", ctx={"seat_map_id": seat_map_id})
    return seat_map


async def create_seat_map(db: AsyncSession, schema: SeatMapCreateDTO) -> SeatMap:
    if await crud.get_seat_map_by_id(db, schema.id):
        raise Conflict("Seat map already exists", ctx={"seat_map_id": schema.id})

    data = schema.model_dump(exclude={"sections"})
    sections = [s.model_dump() for s in schema.sections]
    seat_map = await crud.create_seat_map(db, data, sections)
    try:
        await db.flush()
    except IntegrityError as e:
        raise Conflict("Seat map conflict", ctx={"seat_map_id": schema.id}) from e

    logger.info("Seat map %s created with %d sections", seat_map.id, len(sections))
    return seat_map


async def list_seat_maps(db: AsyncSession, query: SeatMapsQueryDTO) -> list[SeatMap]:
    return await crud.list_seat_maps(db, seat_map_type=query.type, is_active=query.is_active)
