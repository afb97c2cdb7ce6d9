from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from datetime import datetime
from boxoffice.domain.events.models import EventState, EventType
from boxoffice.domain.pricing.schemas import Money, SectionPricingDTO, SectionPricingReadDTO, PriceRangeDTO
from boxoffice.domain.seating.schemas import SeatMapConfigurationReadDTO, BlockingStatsDTO
from boxoffice.core.config import DEFAULT_CURRENCY
from boxoffice.core.utils.text_utils import strip_text, sanitize_input


def _clean_text(value):
    return sanitize_input(strip_text(value)) if isinstance(value, str) else value


def _check_unique_sections(sections: list[SectionPricingDTO] | None) -> list[SectionPricingDTO] | None:
    if not sections:
        return sections
    ids = [s.section_id for s in sections]
    if len(ids) != len(set(ids)):
        raise ValueError("Section ids must be unique within an event")
    for section in sections:
        rows = [rp.row for rp in section.row_pricing]
        if len(rows) != len(set(rows)):
            raise ValueError(f"Duplicate row pricing in section {section.section_id}")
        if any(r > section.rows for r in rows):
            raise ValueError(f"Row pricing outside of section {section.section_id}")
    return sections


class EventCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=3, max_length=200)
    type: EventType
    description: str = Field(min_length=1, max_length=5000)
    date: datetime
    location_id: int
    capacity: int | None = Field(default=None, ge=1)
    price: Money | None = Field(default=None, ge=0)
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    uses_section_pricing: bool = False
    section_pricing: list[SectionPricingDTO] = Field(default_factory=list)
    blocked_seats: list[str] = Field(default_factory=list)
    blocked_sections: list[str] = Field(default_factory=list)

    _clean_name = field_validator("name", mode="before")(_clean_text)
    _clean_desc = field_validator("description", mode="before")(_clean_text)
    _unique_sections = field_validator("section_pricing")(_check_unique_sections)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def _check_pricing(self):
        if self.uses_section_pricing:
            if not self.section_pricing:
                raise ValueError("section_pricing is required when uses_section_pricing is set")
        else:
            if self.price is None:
                raise ValueError("price is required without section pricing")
            if self.capacity is None:
                raise ValueError("capacity is required without section pricing")
        return self


class EventUpdateDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=3, max_length=200)
    type: EventType | None = None
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    date: datetime | None = None
    location_id: int | None = None
    capacity: int | None = Field(default=None, ge=1)
    price: Money | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    uses_section_pricing: bool | None = None
    section_pricing: list[SectionPricingDTO] | None = None

    _clean_name = field_validator("name", mode="before")(_clean_text)
    _clean_desc = field_validator("description", mode="before")(_clean_text)
    _unique_sections = field_validator("section_pricing")(_check_unique_sections)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str | None) -> str | None:
        return v.upper() if v else v


class EventReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    name: str
    type: EventType
    description: str
    date: datetime
    location_id: int
    state: EventState
    capacity: int
    price: Money
    currency: str
    uses_section_pricing: bool
    section_pricing: list[SectionPricingReadDTO]
    created_by: int
    created_at: datetime
    updated_at: datetime


class EventDetailsDTO(EventReadDTO):
    seat_map_configuration: SeatMapConfigurationReadDTO | None
    price_range: PriceRangeDTO
    blocking_stats: BlockingStatsDTO


class EventStateDTO(BaseModel):
    model_config = ConfigDict(extra="forbid")

    new_state: EventState


class EventsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)
    state: EventState | None = None
    type: EventType | None = None
    location_id: int | None = None
    name: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


class SweepResultDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    finalized: int
    activated: int
    timestamp: datetime
