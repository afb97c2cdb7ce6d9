import json
import secrets
import string
import time
from typing import Any

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_ticket_number() -> str:
    timestamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"TKT-{timestamp}-{suffix}".upper()


def generate_validation_code() -> str:
    return secrets.token_hex(16).upper()


def generate_qr_token() -> str:
    return secrets.token_urlsafe(24)


def generate_purchase_id(ticket_id: Any) -> str:
    id_string = str(ticket_id)
    suffix = id_string[-8:] if len(id_string) >= 8 else id_string.rjust(8, "0")
    return f"TKT-{suffix.upper()}"


def generate_qr_data(ticket: Any) -> str:
    return json.dumps({
        "ticket_id": ticket.id,
        "ticket_number": ticket.ticket_number,
        "event_id": ticket.event_id,
        "user_id": ticket.user_id,
        "validation_code": ticket.validation_code,
        "purchased_at": ticket.purchased_at.isoformat() if ticket.purchased_at else None,
        "status": getattr(ticket.status, "value", ticket.status),
        "quantity": ticket.quantity,
        "seats": [s.seat_id for s in (ticket.seats or [])],
    })
