from datetime import datetime, timezone
from typing import Any

_HTML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}


def strip_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def sanitize_input(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in value)


def format_date(value: datetime | str) -> str:
    """Render an instant as ``dd/mm/YYYY HH:MM`` in UTC."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%d/%m/%Y %H:%M")
