"""Seat price resolution and price aggregates.

Every function here is pure: it reads an event (or a list of seats) and never
touches the database or raises a domain error. Events are duck-typed, so ORM
instances and DTOs both work.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Mapping
from boxoffice.core.config import DEFAULT_CURRENCY
from boxoffice.domain.pricing.schemas import SectionPricingInfo, RowPriceDTO

ZERO = Decimal("0")

CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
}


def _to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _find_section(event: Any, section_id: str) -> Any | None:
    for section in event.section_pricing or []:
        if section.section_id == section_id:
            return section
    return None


def _section_prices(section: Any) -> list[Decimal]:
    prices = [_to_decimal(rp.price) for rp in section.row_pricing or [] if rp.price is not None]
    if section.default_price is not None:
        prices.append(_to_decimal(section.default_price))
    return prices


def resolve_seat_price(event: Any, section_id: str, row: int | None) -> Decimal:
    if not event.uses_section_pricing:
        return _to_decimal(event.price)

    section = _find_section(event, section_id)
    if section is None:
        return _to_decimal(event.price)

    for row_price in section.row_pricing or []:
        if row_price.row == row:
            return _to_decimal(row_price.price)

    if section.default_price is not None:
        return _to_decimal(section.default_price)
    return _to_decimal(event.price)


def calculate_seat_price(base_price: Any, multiplier: float | None = None) -> int:
    factor = 1.0 if multiplier is None else float(multiplier)
    product = float(base_price or 0) * factor
    return int(Decimal(product).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _seat_price(seat: Any) -> Any:
    if isinstance(seat, Mapping):
        return seat.get("price")
    return getattr(seat, "price", None)


def total_price(seats: Iterable[Any]) -> Decimal:
    return sum((_to_decimal(_seat_price(seat)) for seat in seats), ZERO)


def _all_section_prices(event: Any) -> list[Decimal]:
    prices = []
    for section in event.section_pricing or []:
        prices.extend(_section_prices(section))
    return prices


def min_price(event: Any) -> Decimal:
    if not event.uses_section_pricing:
        return _to_decimal(event.price)
    prices = _all_section_prices(event)
    return min(prices) if prices else _to_decimal(event.price)


def max_price(event: Any) -> Decimal:
    if not event.uses_section_pricing:
        return _to_decimal(event.price)
    prices = _all_section_prices(event)
    return max(prices) if prices else _to_decimal(event.price)


def price_range(event: Any) -> tuple[Decimal, Decimal]:
    return min_price(event), max_price(event)


def format_amount(amount: Decimal, currency: str | None) -> str:
    code = (currency or DEFAULT_CURRENCY).upper()
    symbol = CURRENCY_SYMBOLS.get(code, f"{code} ")
    if amount == amount.to_integral_value():
        text = str(int(amount))
    else:
        text = str(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return f"{symbol}{text}"


def _label(low: Decimal, high: Decimal, currency: str | None) -> str:
    if low == high:
        return format_amount(low, currency)
    return f"{format_amount(low, currency)} - {format_amount(high, currency)}"


def price_range_label(event: Any) -> str:
    low, high = price_range(event)
    return _label(low, high, getattr(event, "currency", None))


def section_pricing_info(event: Any) -> list[SectionPricingInfo]:
    if not event.uses_section_pricing:
        return []

    currency = getattr(event, "currency", None)
    info = []
    for section in event.section_pricing or []:
        prices = _section_prices(section) or [_to_decimal(event.price)]
        low, high = min(prices), max(prices)
        info.append(SectionPricingInfo(
            section_id=section.section_id,
            section_name=section.section_name,
            capacity=section.capacity,
            rows=section.rows,
            seats_per_row=section.seats_per_row,
            default_price=section.default_price,
            row_pricing=[RowPriceDTO(row=rp.row, price=_to_decimal(rp.price)) for rp in section.row_pricing or []],
            min_price=low,
            max_price=high,
            price_range=_label(low, high, currency)
        ))
    return info


def sections_capacity(sections: Iterable[Any]) -> int:
    return sum(int(s.capacity or 0) for s in sections)
