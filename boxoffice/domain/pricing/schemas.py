from decimal import Decimal
from typing import Annotated
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class RowPriceDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    row: int = Field(ge=1)
    price: Money = Field(ge=0)


class SectionPricingDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    section_id: str = Field(min_length=1, max_length=50, pattern=r"^[^-\s]+$")
    section_name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=0)
    rows: int = Field(ge=1)
    seats_per_row: int = Field(ge=1)
    default_price: Money | None = Field(default=None, ge=0)
    row_pricing: list[RowPriceDTO] = Field(default_factory=list)


class SectionPricingReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    section_id: str
    section_name: str
    capacity: int
    rows: int
    seats_per_row: int
    default_price: Money | None
    row_pricing: list[RowPriceDTO]


class SectionPricingInfo(BaseModel):
    model_config = ConfigDict(extra='forbid')

    section_id: str
    section_name: str
    capacity: int
    rows: int
    seats_per_row: int
    default_price: Money | None
    row_pricing: list[RowPriceDTO]
    min_price: Money
    max_price: Money
    price_range: str


class PriceRangeDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    min: Money
    max: Money
    display: str


class SeatPriceDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    price: Money


class EventPricingDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    event_id: int
    uses_section_pricing: bool
    currency: str
    price_range: PriceRangeDTO
    sections: list[SectionPricingInfo]
