from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.pagination import paginate
from .models import Location, LocationCategory, SeatMap, SeatMapSection, SeatMapType


async def get_location_by_id(db: AsyncSession, location_id: int) -> Location | None:
    stmt = select(Location).where(Location.id == location_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def list_locations(
        db: AsyncSession,
        page: int,
        page_size: int,
        *,
        category: LocationCategory | None = None,
        name: str | None = None
) -> tuple[list[Location], int]:
    where = []
    if category is not None:
        where.append(Location.category == category)
    if name:
        where.append(Location.name.ilike(f"%{name}%"))

    return await paginate(
        db,
        base_stmt=select(Location),
        page=page,
        page_size=page_size,
        where=where,
        order_by=[Location.name, Location.id],
        count_by=Location.id
    )


async def get_location_by_name(db: AsyncSession, name: str) -> Location | None:
    stmt = select(Location).where(Location.name == name)
    result = await db.execute(stmt)
    return result.scalars().first()


async def create_location(db: AsyncSession, data: dict) -> Location:
    location = Location(**data)
    db.add(location)
    return location


async def get_seat_map_by_id(db: AsyncSession, seat_map_id: str) -> SeatMap | None:
    stmt = select(SeatMap).where(SeatMap.id == seat_map_id)
    result = await db.execute(stmt)
    return result.scalars().first()


async def create_seat_map(db: AsyncSession, data: dict, sections: list[dict]) -> SeatMap:
    seat_map = SeatMap(**data, sections=[SeatMapSection(**s) for s in sections])
    db.add(seat_map)
    return seat_map


async def list_seat_maps(
        db: AsyncSession,
        *,
        seat_map_type: SeatMapType | None = None,
        is_active: bool | None = None
) -> list[SeatMap]:
    stmt = select(SeatMap)
    if seat_map_type is not None:
        stmt = stmt.where(SeatMap.type == seat_map_type)
    if is_active is not None:
        stmt = stmt.where(SeatMap.is_active == is_active)
    stmt = stmt.order_by(SeatMap.type, SeatMap.name)
    result = await db.execute(stmt)
    return list(result.scalars().all())
