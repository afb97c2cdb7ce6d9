from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, ForeignKey, Boolean, TIMESTAMP, Integer, Numeric, UniqueConstraint, \
    CheckConstraint, Enum, func
from boxoffice.core.database import Base
from datetime import datetime
from decimal import Decimal
import enum


class LocationCategory(str, enum.Enum):
    STADIUM = "stadium"
    CINEMA = "cinema"
    CONCERT = "concert"
    THEATER = "theater"
    FESTIVAL = "festival"


class SeatMapType(str, enum.Enum):
    FOOTBALL = "football"
    CINEMA = "cinema"
    THEATER = "theater"


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[LocationCategory] = mapped_column(
        Enum(LocationCategory, name="location_category", values_callable=_enum_values),
        nullable=False
    )
    address: Mapped[str] = mapped_column(Text, nullable=False)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    seat_map_id: Mapped[str | None] = mapped_column(ForeignKey("seat_maps.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    seat_map: Mapped['SeatMap | None'] = relationship(lazy='selectin')
    events: Mapped[list['Event']] = relationship(back_populates='location', lazy='raise', passive_deletes=True)


class SeatMap(Base):
    __tablename__ = "seat_maps"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[SeatMapType] = mapped_column(
        Enum(SeatMapType, name="seat_map_type", values_callable=_enum_values),
        nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    sections: Mapped[list['SeatMapSection']] = relationship(
        back_populates='seat_map',
        lazy='selectin',
        cascade='all, delete-orphan',
        order_by='SeatMapSection.order'
    )


class SeatMapSection(Base):
    __tablename__ = "seat_map_sections"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    seat_map_id: Mapped[str] = mapped_column(ForeignKey("seat_maps.id", ondelete="CASCADE"), nullable=False)
    section_id: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    rows: Mapped[int] = mapped_column(Integer, nullable=False)
    seats_per_row: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    color: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[str] = mapped_column(Text, nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    seat_map: Mapped['SeatMap'] = relationship(back_populates='sections', lazy='selectin')

    __table_args__ = (
        UniqueConstraint("seat_map_id", "section_id", name="uq_seat_map_section"),
        CheckConstraint("rows > 0", name="chk_seat_map_section_rows"),
        CheckConstraint("seats_per_row > 0", name="chk_seat_map_section_seats"),
        CheckConstraint("price >= 0", name="chk_seat_map_section_price"),
    )
