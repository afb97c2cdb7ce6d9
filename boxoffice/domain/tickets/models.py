from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, ForeignKey, Boolean, TIMESTAMP, Integer, Numeric, CheckConstraint, Index, \
    Enum as SQLEnum, func, text
from boxoffice.core.database import Base
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TicketStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


OCCUPYING_STATUSES = (TicketStatus.PAID, TicketStatus.PENDING)


class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[TicketStatus] = mapped_column(
        SQLEnum(TicketStatus, name="ticket_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TicketStatus.PENDING
    )
    qr_code: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    ticket_number: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    validation_code: Mapped[str] = mapped_column(Text, nullable=False)
    purchased_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    event: Mapped["Event"] = relationship(back_populates="tickets", lazy="selectin")
    seats: Mapped[list["TicketSeat"]] = relationship(
        back_populates="ticket",
        lazy="selectin",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_ticket_price_nonneg"),
        CheckConstraint("quantity > 0", name="chk_ticket_quantity_pos"),
        Index("ix_tickets_event_status", "event_id", "status"),
        Index("ix_tickets_user_status", "user_id", "status"),
    )


class TicketSeat(Base):
    __tablename__ = "ticket_seats"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    ticket_id: Mapped[int] = mapped_column(ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    seat_id: Mapped[str] = mapped_column(Text, nullable=False)
    section_id: Mapped[str] = mapped_column(Text, nullable=False)
    row: Mapped[int] = mapped_column(Integer, nullable=False)
    seat: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    ticket: Mapped["Ticket"] = relationship(back_populates="seats", lazy="selectin")

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_ticket_seat_price_nonneg"),
        Index(
            "uq_ticket_seats_event_seat_active",
            "event_id",
            "seat_id",
            unique=True,
            postgresql_where=text("active")
        ),
    )
