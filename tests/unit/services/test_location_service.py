import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.dialects import postgresql
from boxoffice.services import location_service
from boxoffice.domain.locations import crud
from boxoffice.domain.locations.schemas import LocationCreateDTO, SeatMapCreateDTO, SeatMapsQueryDTO
from boxoffice.domain.locations.models import Location, LocationCategory, SeatMapType
from boxoffice.domain.exceptions import NotFound, Conflict
from tests.helper import async_db


def _seat_map_schema():
    return SeatMapCreateDTO(
        id="bernabeu",
        name="Santiago Bernabeu",
        type="football",
        sections=[{
            "section_id": "NORTE",
            "name": "Fondo Norte",
            "rows": 20,
            "seats_per_row": 40,
            "price": "35",
            "color": "#1E90FF",
            "position": "north",
        }]
    )


@pytest.mark.asyncio
async def test_get_location_not_found(mocker):
    mocker.patch(
        "boxoffice.services.location_service.crud.get_location_by_id",
        new=mocker.AsyncMock(return_value=None)
    )

    with pytest.raises(NotFound):
        await location_service.get_location(mocker.Mock(), 1)


@pytest.mark.asyncio
async def test_save_location_with_unknown_seat_map(mocker):
    mocker.patch(
        "boxoffice.services.location_service.crud.get_seat_map_by_id",
        new=mocker.AsyncMock(return_value=None)
    )
    schema = LocationCreateDTO(name="Bernabeu", category="stadium", address="Madrid", seat_map_id="missing")

    with pytest.raises(NotFound) as e:
        await location_service.save_location(async_db(mocker), schema)

    assert e.value.ctx == {"seat_map_id": "missing"}


@pytest.mark.asyncio
async def test_save_location_creates_new_location(mocker):
    mocker.patch(
        "boxoffice.services.location_service.crud.get_location_by_name",
        new=mocker.AsyncMock(return_value=None)
    )
    db = async_db(mocker)
    schema = LocationCreateDTO(name="  Bernabeu ", category="stadium", address="Madrid")

    location, created = await location_service.save_location(db, schema)

    assert created is True
    db.add.assert_called_once_with(location)
    assert location.name == "Bernabeu"
    assert location.seat_map_id is None


@pytest.mark.asyncio
async def test_create_seat_map_with_sections(mocker):
    mocker.patch(
        "boxoffice.services.location_service.crud.get_seat_map_by_id",
        new=mocker.AsyncMock(return_value=None)
    )
    db = async_db(mocker)

    seat_map = await location_service.create_seat_map(db, _seat_map_schema())

    assert seat_map.id == "bernabeu"
    assert [s.section_id for s in seat_map.sections] == ["NORTE"]
    assert seat_map.sections[0].seats_per_row == 40
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_duplicate_seat_map(mocker):
    mocker.patch(
        "boxoffice.services.location_service.crud.get_seat_map_by_id",
        new=mocker.AsyncMock(return_value=mocker.Mock())
    )

    with pytest.raises(Conflict):
        await location_service.create_seat_map(async_db(mocker), _seat_map_schema())


@pytest.mark.asyncio
async def test_create_seat_map_integrity_error(mocker):
    mocker.patch(
        "boxoffice.services.location_service.crud.get_seat_map_by_id",
        new=mocker.AsyncMock(return_value=None)
    )
    db = async_db(mocker)
    db.flush = mocker.AsyncMock(side_effect=IntegrityError("stmt", {}, Exception("dup")))

    with pytest.raises(Conflict):
        await location_service.create_seat_map(db, _seat_map_schema())


@pytest.mark.asyncio
async def test_save_location_updates_location_with_same_name(mocker):
    existing = Location(id=4, name="Bernabeu", category=LocationCategory.CONCERT, address="Old address")
    mocker.patch(
        "boxoffice.services.location_service.crud.get_location_by_name",
        new=mocker.AsyncMock(return_value=existing)
    )
    create = mocker.patch("boxoffice.services.location_service.crud.create_location", new=mocker.AsyncMock())
    db = async_db(mocker)
    schema = LocationCreateDTO(name="Bernabeu", category="stadium", address="Madrid", capacity=81044)

    location, created = await location_service.save_location(db, schema)

    assert created is False
    assert location is existing
    assert (location.category, location.address, location.capacity) == (LocationCategory.STADIUM, "Madrid", 81044)
    create.assert_not_awaited()
    db.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_list_seat_maps_passes_filters(mocker):
    seat_maps = [mocker.Mock(), mocker.Mock()]
    list_mock = mocker.patch(
        "boxoffice.services.location_service.crud.list_seat_maps",
        new=mocker.AsyncMock(return_value=seat_maps)
    )
    db = mocker.Mock()

    result = await location_service.list_seat_maps(db, SeatMapsQueryDTO(type="cinema", is_active=True))

    assert result == seat_maps
    list_mock.assert_awaited_once_with(db, seat_map_type=SeatMapType.CINEMA, is_active=True)


@pytest.mark.asyncio
async def test_list_seat_maps_query_filters_and_orders(mocker):
    res = mocker.Mock()
    res.scalars.return_value.all.return_value = []
    db = mocker.Mock()
    db.execute = mocker.AsyncMock(return_value=res)

    await crud.list_seat_maps(db, seat_map_type=SeatMapType.FOOTBALL, is_active=False)

    stmt = db.execute.await_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert "seat_maps.type = " in sql
    assert "seat_maps.is_active = " in sql
    assert sql.endswith("ORDER BY seat_maps.type, seat_maps.name")


@pytest.mark.asyncio
async def test_list_seat_maps_without_filters(mocker):
    res = mocker.Mock()
    res.scalars.return_value.all.return_value = []
    db = mocker.Mock()
    db.execute = mocker.AsyncMock(return_value=res)

    assert await crud.list_seat_maps(db) == []

    sql = str(db.execute.await_args.args[0].compile(dialect=postgresql.dialect()))
    assert "WHERE" not in sql
