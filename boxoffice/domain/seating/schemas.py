from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _dedupe(values: list[str]) -> list[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class SeatBlocksUpdateDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    blocked_seats: list[str] = Field(default_factory=list)
    blocked_sections: list[str] = Field(default_factory=list)

    _dedupe_seats = field_validator("blocked_seats")(_dedupe)
    _dedupe_sections = field_validator("blocked_sections")(_dedupe)


class SeatMapConfigurationReadDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra='forbid')

    seat_map_id: str | None
    blocked_seats: list[str]
    blocked_sections: list[str]
    configured_at: datetime | None = None


class BlockingStatsDTO(BaseModel):
    model_config = ConfigDict(extra='forbid')

    blocked_seats: int
    blocked_sections: int
    has_blocks: bool


class OccupiedSeatsDTO(BaseModel):
    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    success: bool = True
    event_id: int = Field(serialization_alias="eventId")
    occupied_seats: list[str] = Field(serialization_alias="occupiedSeats")
    blocked_sections: list[str] = Field(default_factory=list, serialization_alias="blockedSections")
    count: int
