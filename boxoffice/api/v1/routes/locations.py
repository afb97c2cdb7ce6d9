from fastapi import APIRouter, status, Depends, Response
from typing import Annotated
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import require_roles
from boxoffice.core.pagination import PageDTO
from boxoffice.domain.locations.schemas import LocationCreateDTO, LocationReadDTO, LocationsQueryDTO, \
    SeatMapCreateDTO, SeatMapReadDTO, SeatMapsQueryDTO
from boxoffice.services import location_service


router = APIRouter(tags=["locations"])
db_dependency = Annotated[AsyncSession, Depends(get_db)]


@router.post(
    "/locations",
    status_code=status.HTTP_201_CREATED,
    response_model=LocationReadDTO,
    dependencies=[Depends(require_roles("ADMIN"))]
)
async def save_location(schema: LocationCreateDTO, db: db_dependency, response: Response):
    location, created = await location_service.save_location(db, schema)
    if not created:
        response.status_code = status.HTTP_200_OK
    response.headers["Location"] = f"/locations/{location.id}"
    return location


@router.get(
    "/locations",
    status_code=status.HTTP_200_OK,
    response_model=PageDTO[LocationReadDTO]
)
async def list_locations(db: db_dependency, query: Annotated[LocationsQueryDTO, Depends()]):
    return await location_service.list_locations(db, query)


@router.get(
    "/locations/{location_id}",
    status_code=status.HTTP_200_OK,
    response_model=LocationReadDTO
)
async def get_location(location_id: int, db: db_dependency):
    return await location_service.get_location(db, location_id)


@router.post(
    "/seatmaps",
    status_code=status.HTTP_201_CREATED,
    response_model=SeatMapReadDTO,
    dependencies=[Depends(require_roles("ADMIN"))]
)
async def create_seat_map(schema: SeatMapCreateDTO, db: db_dependency, response: Response):
    seat_map = await location_service.create_seat_map(db, schema)
    response.headers["Location"] = f"/seatmaps/{seat_map.id}"
    return seat_map


@router.get(
    "/seatmaps",
    status_code=status.HTTP_200_OK,
    response_model=list[SeatMapReadDTO]
)
async def list_seat_maps(db: db_dependency, query: Annotated[SeatMapsQueryDTO, Depends()]):
    return await location_service.list_seat_maps(db, query)


@router.get(
    "/seatmaps/{seat_map_id}",
    status_code=status.HTTP_200_OK,
    response_model=SeatMapReadDTO
)
async def get_seat_map(seat_map_id: str, db: db_dependency):
    return await location_service.get_seat_map(db, seat_map_id)
