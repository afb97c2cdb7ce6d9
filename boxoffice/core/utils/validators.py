from datetime import datetime, timezone
from typing import Any, Iterable, Mapping
from boxoffice.core.config import MAX_TICKETS_PER_PURCHASE


def _parse_date(value: datetime | str | None) -> datetime:
    if value is None or value == "":
        raise ValueError("Invalid date format")
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Invalid date format")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def validate_event_date(value: datetime | str | None, now: datetime | None = None) -> datetime:
    event_date = _parse_date(value)
    now = now or datetime.now(timezone.utc)
    if event_date <= now:
        raise ValueError("Event date must be in the future")
    return event_date


def validate_ticket_quantity(quantity: Any, maximum: int = MAX_TICKETS_PER_PURCHASE) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or not 1 <= quantity <= maximum:
        raise ValueError(f"Quantity must be between 1 and {maximum}")
    return quantity


def validate_event_capacity(capacity: int, sold: int) -> None:
    if sold > capacity:
        raise ValueError("Sold tickets exceed event capacity")


def missing_required_fields(data: Mapping[str, Any], fields: Iterable[str]) -> list[str]:
    return [f for f in fields if data.get(f) is None or data.get(f) == ""]


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    missing = missing_required_fields(data, fields)
    if missing:
        raise ValueError(f"Missing required fields: {', '.join(missing)}")
