import re
import pytest
from decimal import Decimal
from sqlalchemy.exc import IntegrityError
from boxoffice.services import ticket_service
from boxoffice.domain.events.models import EventState
from boxoffice.domain.tickets.models import TicketStatus
from boxoffice.domain.tickets.schemas import TicketPurchaseDTO, UserTicketsQueryDTO
from boxoffice.domain.exceptions import NotFound, InvalidInput, Conflict, SeatUnavailable
from tests.helper import async_db, make_event, make_section, make_ticket


def _stadium(**overrides):
    sections = [
        make_section("A", rows=10, seats_per_row=10, default_price="30", row_prices={1: "60"}),
        make_section("B", rows=1, seats_per_row=2, default_price="20"),
    ]
    return make_event(sections=sections, **overrides)


def _patch_purchase(mocker, event, *, sold_seats=(), sold_count=0):
    mocker.patch(
        "boxoffice.services.ticket_service.events_crud.get_event_for_update",
        new=mocker.AsyncMock(return_value=event)
    )
    mocker.patch(
        "boxoffice.services.ticket_service.crud.list_sold_seat_ids",
        new=mocker.AsyncMock(return_value=list(sold_seats))
    )
    mocker.patch(
        "boxoffice.services.ticket_service.crud.count_sold_tickets",
        new=mocker.AsyncMock(return_value=sold_count)
    )


@pytest.mark.asyncio
async def test_purchase_seats_captures_resolved_prices(mocker):
    _patch_purchase(mocker, _stadium())
    db = async_db(mocker)

    ticket = await ticket_service.purchase_tickets(db, 7, TicketPurchaseDTO(event_id=1, seats=["A-1-1", "A-2-1"]))

    db.add.assert_called_once_with(ticket)
    assert [(s.seat_id, s.price) for s in ticket.seats] == [("A-1-1", Decimal("60")), ("A-2-1", Decimal("30"))]
    assert ticket.price == Decimal("90")
    assert ticket.quantity == 2
    assert ticket.status == TicketStatus.PENDING
    assert ticket.user_id == 7
    assert re.fullmatch(r"TKT-[0-9A-Z]+-[0-9A-Z]{6}", ticket.ticket_number)
    assert re.fullmatch(r"[0-9A-F]{32}", ticket.validation_code)


@pytest.mark.asyncio
async def test_purchase_general_admission(mocker):
    _patch_purchase(mocker, make_event(price="25", capacity=100), sold_count=10)

    ticket = await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, quantity=3))

    assert ticket.price == Decimal("75")
    assert ticket.quantity == 3
    assert ticket.seats == []


@pytest.mark.asyncio
async def test_purchase_too_many_tickets(mocker):
    with pytest.raises(InvalidInput) as e:
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, quantity=7))

    assert str(e.value) == "Quantity must be between 1 and 6"


@pytest.mark.asyncio
async def test_purchase_unknown_event(mocker):
    _patch_purchase(mocker, None)

    with pytest.raises(NotFound):
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, quantity=1))


@pytest.mark.asyncio
@pytest.mark.parametrize("state", [EventState.FINALIZADO, EventState.CANCELADO])
async def test_purchase_for_closed_event(mocker, state):
    _patch_purchase(mocker, make_event(state=state))

    with pytest.raises(Conflict) as e:
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, quantity=1))

    assert e.value.ctx["state"] == state.value


@pytest.mark.asyncio
async def test_purchase_occupied_seat(mocker):
    _patch_purchase(mocker, _stadium(), sold_seats=["A-1-2"])

    with pytest.raises(SeatUnavailable) as e:
        await ticket_service.purchase_tickets(
            async_db(mocker), 7, TicketPurchaseDTO(event_id=1, seats=["A-1-1", "A-1-2"])
        )

    assert e.value.ctx["seat_ids"] == ["A-1-2"]


@pytest.mark.asyncio
async def test_purchase_seat_in_blocked_section(mocker):
    _patch_purchase(mocker, _stadium(config=([], ["B"])))

    with pytest.raises(SeatUnavailable):
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, seats=["B-1-1"]))


@pytest.mark.asyncio
async def test_purchase_blocked_seat_from_legacy_columns(mocker):
    _patch_purchase(mocker, _stadium(blocked_seats=["A-3-3"]))

    with pytest.raises(SeatUnavailable):
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, seats=["A-3-3"]))


@pytest.mark.asyncio
@pytest.mark.parametrize("seat_id", ["Z-1-1", "B-2-1", "B-1-3", "A-0-1"])
async def test_purchase_seat_outside_event_layout(mocker, seat_id):
    _patch_purchase(mocker, _stadium())

    with pytest.raises(InvalidInput):
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, seats=[seat_id]))


@pytest.mark.asyncio
async def test_purchase_without_seats_for_sectioned_event(mocker):
    _patch_purchase(mocker, _stadium())

    with pytest.raises(InvalidInput):
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, quantity=2))


@pytest.mark.asyncio
async def test_purchase_over_capacity(mocker):
    _patch_purchase(mocker, make_event(capacity=10), sold_count=9)

    with pytest.raises(Conflict) as e:
        await ticket_service.purchase_tickets(async_db(mocker), 7, TicketPurchaseDTO(event_id=1, quantity=2))

    assert str(e.value) == "Sold tickets exceed event capacity"


@pytest.mark.asyncio
async def test_purchase_losing_a_race_for_a_seat(mocker):
    _patch_purchase(mocker, _stadium())
    db = async_db(mocker)
    db.flush = mocker.AsyncMock(side_effect=IntegrityError("stmt", {}, Exception("uq_ticket_seats_event_seat_active")))

    with pytest.raises(SeatUnavailable) as e:
        await ticket_service.purchase_tickets(db, 7, TicketPurchaseDTO(event_id=1, seats=["A-1-1"]))

    assert str(e.value) == "Selected seat is not available"


@pytest.mark.asyncio
async def test_get_occupied_seats_merges_sold_and_blocked(mocker):
    event = _stadium(config=(["A-5-5"], ["B"]))
    mocker.patch(
        "boxoffice.services.ticket_service.events_crud.get_event_by_id",
        new=mocker.AsyncMock(return_value=event)
    )
    mocker.patch(
        "boxoffice.services.ticket_service.crud.list_sold_seat_ids",
        new=mocker.AsyncMock(return_value=["A-1-2", "A-1-1"])
    )

    result = await ticket_service.get_occupied_seats(mocker.Mock(), 1)

    assert result.occupied_seats == ["A-1-1", "A-1-2", "A-5-5", "B-1-1", "B-1-2"]
    assert result.blocked_sections == ["B"]
    assert result.count == 5
    assert result.success is True


@pytest.mark.asyncio
async def test_get_occupied_seats_unknown_event(mocker):
    mocker.patch(
        "boxoffice.services.ticket_service.events_crud.get_event_by_id",
        new=mocker.AsyncMock(return_value=None)
    )

    with pytest.raises(NotFound):
        await ticket_service.get_occupied_seats(mocker.Mock(), 1)


@pytest.mark.asyncio
async def test_pay_pending_ticket(mocker):
    ticket = make_ticket(status=TicketStatus.PENDING)
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_user_ticket_for_update",
        new=mocker.AsyncMock(return_value=ticket)
    )

    result = await ticket_service.pay_ticket(async_db(mocker), 7, 11)

    assert result.status == TicketStatus.PAID


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [TicketStatus.PAID, TicketStatus.CANCELLED])
async def test_pay_rejected_for_non_pending_ticket(mocker, status):
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_user_ticket_for_update",
        new=mocker.AsyncMock(return_value=make_ticket(status=status))
    )

    with pytest.raises(Conflict):
        await ticket_service.pay_ticket(async_db(mocker), 7, 11)


@pytest.mark.asyncio
async def test_pay_someone_elses_ticket(mocker):
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_user_ticket_for_update",
        new=mocker.AsyncMock(return_value=None)
    )

    with pytest.raises(NotFound):
        await ticket_service.pay_ticket(async_db(mocker), 8, 11)


@pytest.mark.asyncio
async def test_cancel_releases_seats_and_keeps_prices(mocker):
    ticket = make_ticket(status=TicketStatus.PAID, seats=[("A-1-1", "60")])
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_user_ticket_for_update",
        new=mocker.AsyncMock(return_value=ticket)
    )
    release = mocker.patch(
        "boxoffice.services.ticket_service.crud.release_ticket_seats",
        new=mocker.AsyncMock()
    )
    db = async_db(mocker)

    result = await ticket_service.cancel_ticket(db, 7, 11)

    assert result.status == TicketStatus.CANCELLED
    release.assert_awaited_once_with(db, 11)
    assert result.seats[0].price == Decimal("60")
    assert result.price == Decimal("60")


@pytest.mark.asyncio
async def test_cancel_twice_rejected(mocker):
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_user_ticket_for_update",
        new=mocker.AsyncMock(return_value=make_ticket(status=TicketStatus.CANCELLED))
    )

    with pytest.raises(Conflict):
        await ticket_service.cancel_ticket(async_db(mocker), 7, 11)


@pytest.mark.asyncio
async def test_get_ticket_hides_other_users_tickets(mocker):
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_ticket_by_id",
        new=mocker.AsyncMock(return_value=make_ticket(user_id=7))
    )

    with pytest.raises(NotFound):
        await ticket_service.get_ticket(mocker.Mock(), 8, 11)

    assert (await ticket_service.get_ticket(mocker.Mock(), 8, 11, is_admin=True)).user_id == 7


@pytest.mark.asyncio
async def test_list_user_tickets(mocker):
    ticket = make_ticket(seats=[("A-1-1", "60")])
    spy = mocker.patch(
        "boxoffice.services.ticket_service.crud.list_user_tickets",
        new=mocker.AsyncMock(return_value=([ticket], 1))
    )
    db = mocker.Mock()

    page = await ticket_service.list_user_tickets(db, 7, UserTicketsQueryDTO(status="paid"))

    spy.assert_awaited_once_with(db, 7, 1, 20, status=TicketStatus.PAID, event_id=None)
    assert page.total == 1
    assert page.items[0].seats[0].seat_id == "A-1-1"


@pytest.mark.asyncio
async def test_get_ticket_qr(mocker):
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_ticket_by_id",
        new=mocker.AsyncMock(return_value=make_ticket(id=11))
    )

    qr = await ticket_service.get_ticket_qr(mocker.Mock(), 7, 11)

    assert qr.purchase_id == "TKT-00000011"
    assert '"ticket_id": 11' in qr.qr_data


@pytest.mark.asyncio
async def test_cancelled_ticket_has_no_qr(mocker):
    mocker.patch(
        "boxoffice.services.ticket_service.crud.get_ticket_by_id",
        new=mocker.AsyncMock(return_value=make_ticket(status=TicketStatus.CANCELLED))
    )

    with pytest.raises(Conflict):
        await ticket_service.get_ticket_qr(mocker.Mock(), 7, 11)
