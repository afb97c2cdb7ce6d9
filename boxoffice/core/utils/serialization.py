from datetime import date, datetime
from typing import Any


def normalize(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool, type(None))):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, list, tuple)):
        return [normalize(v) for v in value]
    if hasattr(value, "quantize"):
        return str(value)
    try:
        return str(value)
    except Exception:
        return repr(value)


def normalize_ctx(ctx: dict[str, Any]) -> dict[str, Any]:
    return {k: normalize(v) for k, v in ctx.items()}
