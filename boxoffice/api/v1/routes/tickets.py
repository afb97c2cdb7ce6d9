from fastapi import APIRouter, status, Depends, Response
from typing import Annotated
from sqlalchemy.ext.asyncio import AsyncSession
from boxoffice.core.database import get_db
from boxoffice.core.dependencies.auth import get_current_principal
from boxoffice.core.pagination import PageDTO
from boxoffice.domain.auth.schemas import Principal
from boxoffice.domain.tickets.schemas import TicketPurchaseDTO, TicketReadDTO, TicketQrDTO, UserTicketsQueryDTO
from boxoffice.domain.seating.schemas import OccupiedSeatsDTO
from boxoffice.services import ticket_service


router = APIRouter(prefix="/tickets", tags=["tickets"])
db_dependency = Annotated[AsyncSession, Depends(get_db)]
principal_dependency = Annotated[Principal, Depends(get_current_principal)]


@router.get(
    "/occupied/{event_id}",
    status_code=status.HTTP_200_OK,
    response_model=OccupiedSeatsDTO
)
async def get_occupied_seats(event_id: int, db: db_dependency):
    return await ticket_service.get_occupied_seats(db, event_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=TicketReadDTO
)
async def purchase_tickets(
        schema: TicketPurchaseDTO,
        db: db_dependency,
        principal: principal_dependency,
        response: Response
):
    ticket = await ticket_service.purchase_tickets(db, principal.user_id, schema)
    response.headers["Location"] = f"/tickets/{ticket.id}"
    return ticket


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=PageDTO[TicketReadDTO]
)
async def list_my_tickets(
        db: db_dependency,
        principal: principal_dependency,
        query: Annotated[UserTicketsQueryDTO, Depends()]
):
    return await ticket_service.list_user_tickets(db, principal.user_id, query)


@router.get(
    "/{ticket_id}",
    status_code=status.HTTP_200_OK,
    response_model=TicketReadDTO
)
async def get_ticket(ticket_id: int, db: db_dependency, principal: principal_dependency):
    return await ticket_service.get_ticket(db, principal.user_id, ticket_id, is_admin=principal.is_admin)


@router.get(
    "/{ticket_id}/qr",
    status_code=status.HTTP_200_OK,
    response_model=TicketQrDTO
)
async def get_ticket_qr(ticket_id: int, db: db_dependency, principal: principal_dependency):
    return await ticket_service.get_ticket_qr(db, principal.user_id, ticket_id)


@router.post(
    "/{ticket_id}/pay",
    status_code=status.HTTP_200_OK,
    response_model=TicketReadDTO
)
async def pay_ticket(ticket_id: int, db: db_dependency, principal: principal_dependency):
    return await ticket_service.pay_ticket(db, principal.user_id, ticket_id)


@router.post(
    "/{ticket_id}/cancel",
    status_code=status.HTTP_200_OK,
    response_model=TicketReadDTO
)
async def cancel_ticket(ticket_id: int, db: db_dependency, principal: principal_dependency):
    return await ticket_service.cancel_ticket(db, principal.user_id, ticket_id)
