from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from boxoffice.domain.locations.models import LocationCategory, SeatMapType
from boxoffice.domain.pricing.schemas import Money
from boxoffice.core.utils.text_utils import strip_text


class LocationCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str = Field(min_length=2, max_length=200)
    category: LocationCategory
    address: str = Field(min_length=2, max_length=300)
    capacity: int | None = Field(default=None, ge=1)
    seat_map_id: str | None = None

    _strip_name = field_validator("name", mode="before")(strip_text)
    _strip_address = field_validator("address", mode="before")(strip_text)


class LocationReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: int
    name: str
    category: LocationCategory
    address: str
    capacity: int | None
    seat_map_id: str | None
    created_at: datetime


class LocationsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=200)
    category: LocationCategory | None = None
    name: str | None = None


class SeatMapSectionDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    section_id: str = Field(min_length=1, max_length=50, pattern=r"^[^-\s]+$")
    name: str = Field(min_length=1, max_length=100)
    rows: int = Field(ge=1)
    seats_per_row: int = Field(ge=1)
    price: Money = Field(ge=0)
    color: str = Field(pattern=r"^#[0-9a-fA-F]{6}$")
    position: str = Field(min_length=1, max_length=50)
    order: int = Field(default=0, ge=0)


class SeatMapCreateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    id: str = Field(min_length=1, max_length=100)
    name: str = Field(min_length=1, max_length=200)
    type: SeatMapType
    sections: list[SeatMapSectionDTO] = Field(min_length=1)

    @field_validator("sections")
    @classmethod
    def _unique_sections(cls, sections: list[SeatMapSectionDTO]) -> list[SeatMapSectionDTO]:
        ids = [s.section_id for s in sections]
        if len(ids) != len(set(ids)):
            raise ValueError("Section ids must be unique within a seat map")
        return sections


class SeatMapReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    id: str
    name: str
    type: SeatMapType
    is_active: bool
    sections: list[SeatMapSectionDTO]


class SeatMapsQueryDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    type: SeatMapType | None = None
    is_active: bool | None = None
