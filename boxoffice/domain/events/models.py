from sqlalchemy.orm import mapped_column, Mapped, relationship
from sqlalchemy import Identity, Text, Integer, ForeignKey, CheckConstraint, UniqueConstraint, Boolean, TIMESTAMP, \
    Numeric, String, func, Enum
from sqlalchemy.dialects.postgresql import ARRAY
from boxoffice.core.database import Base
from boxoffice.core.config import DEFAULT_CURRENCY
from datetime import datetime
from decimal import Decimal
import enum


class EventState(str, enum.Enum):
    PROXIMO = "proximo"
    ACTIVO = "activo"
    FINALIZADO = "finalizado"
    CANCELADO = "cancelado"


class EventType(str, enum.Enum):
    FOOTBALL = "football"
    CINEMA = "cinema"
    CONCERT = "concert"
    THEATER = "theater"
    FESTIVAL = "festival"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[EventType] = mapped_column(
        Enum(EventType, name="event_type", values_callable=_enum_values),
        nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, index=True)
    location_id: Mapped[int] = mapped_column(
        ForeignKey("locations.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    state: Mapped[EventState] = mapped_column(
        Enum(EventState, name="event_state", values_callable=_enum_values),
        nullable=False,
        default=EventState.PROXIMO,
        index=True
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    uses_section_pricing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # legacy block lists, superseded by seat_map_configuration
    blocked_seats: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    blocked_sections: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    location: Mapped['Location'] = relationship(back_populates='events', lazy='selectin')
    section_pricing: Mapped[list['EventSection']] = relationship(
        back_populates='event',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='EventSection.position'
    )
    seat_map_configuration: Mapped['SeatMapConfiguration | None'] = relationship(
        back_populates='event',
        lazy='selectin',
        cascade='all, delete-orphan',
        uselist=False
    )
    tickets: Mapped[list['Ticket']] = relationship(back_populates='event', lazy='raise', passive_deletes=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_event_price_nonneg"),
        CheckConstraint("capacity >= 0", name="chk_event_capacity_nonneg"),
    )


class EventSection(Base):
    __tablename__ = "event_sections"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id: Mapped[str] = mapped_column(Text, nullable=False)
    section_name: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    rows: Mapped[int] = mapped_column(Integer, nullable=False)
    seats_per_row: Mapped[int] = mapped_column(Integer, nullable=False)
    default_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    event: Mapped['Event'] = relationship(back_populates='section_pricing', lazy='selectin')
    row_pricing: Mapped[list['RowPrice']] = relationship(
        back_populates='section',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='RowPrice.row'
    )

    __table_args__ = (
        UniqueConstraint("event_id", "section_id", name="uq_event_section"),
        CheckConstraint("default_price >= 0", name="chk_section_default_price"),
        CheckConstraint("capacity >= 0", name="chk_section_capacity"),
        CheckConstraint("rows > 0", name="chk_section_rows"),
        CheckConstraint("seats_per_row > 0", name="chk_section_seats_per_row"),
    )


class RowPrice(Base):
    __tablename__ = "event_section_row_prices"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    section_pk: Mapped[int] = mapped_column(
        ForeignKey("event_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    row: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    section: Mapped['EventSection'] = relationship(back_populates='row_pricing', lazy='selectin')

    __table_args__ = (
        UniqueConstraint("section_pk", "row", name="uq_section_row"),
        CheckConstraint("price >= 0", name="chk_row_price_nonneg"),
    )


class SeatMapConfiguration(Base):
    __tablename__ = "seat_map_configurations"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    seat_map_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    blocked_seats: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    blocked_sections: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False, default=list)
    configured_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    event: Mapped['Event'] = relationship(back_populates='seat_map_configuration', lazy='selectin')
