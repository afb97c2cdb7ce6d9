from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from boxoffice.domain.tickets.models import TicketStatus
from boxoffice.domain.pricing.schemas import Money
from boxoffice.domain.seating.rules import parse_seat_id


class TicketPurchaseDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    event_id: int
    quantity: int | None = Field(default=None, ge=1)
    seats: list[str] = Field(default_factory=list)

    @field_validator("seats")
    @classmethod
    def _check_seat_ids(cls, seats: list[str]) -> list[str]:
        for seat_id in seats:
            if parse_seat_id(seat_id) is None:
                raise ValueError(f"Invalid seat id: {seat_id}")
        if len(seats) != len(set(seats)):
            raise ValueError("Duplicate seats in request")
        return seats

    @model_validator(mode="after")
    def _check_quantity(self):
        if self.seats and self.quantity is not None and self.quantity != len(self.seats):
            raise ValueError("quantity must match the number of seats")
        if not self.seats and self.quantity is None:
            raise ValueError("quantity or seats is required")
        return self

    @property
    def requested(self) -> int:
        return len(self.seats) if self.seats else self.quantity


class TicketSeatReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    seat_id: str
    section_id: str
    row: int
    seat: int
    price: Money


class TicketReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    user_id: int
    event_id: int
    price: Money
    quantity: int
    status: TicketStatus
    ticket_number: str
    validation_code: str
    purchased_at: datetime
    seats: list[TicketSeatReadDTO]


class TicketQrDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    ticket_id: int
    purchase_id: str
    qr_data: str


class UserTicketsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)
    status: TicketStatus | None = None
    event_id: int | None = None
