"""Discount resolution for nightly room prices."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from hotel_api.core.dates import utcnow

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Discount:
    amount: Decimal
    type: str = "fixed"  # percentage | fixed
    valid_until: Optional[datetime] = None


def to_money(value) -> Decimal:
    if isinstance(value, Decimal):
        d = value
    else:
        d = Decimal(str(value if value is not None else 0))
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


def effective_price(base_price, discount: Optional[Discount]) -> Decimal:
    """Nightly price after applying ``discount``.

    Expiry is not looked at here; pass the result of :func:`active_discount`.
    """
    base = Decimal(str(base_price))
    if discount is None or discount.amount <= 0:
        return to_money(base)
    if discount.type == "percentage":
        price = base * (1 - Decimal(discount.amount) / 100)
    else:
        price = base - Decimal(discount.amount)
    return to_money(max(Decimal("0"), price))


def active_discount(amount, type_: Optional[str], valid_until: Optional[datetime], now: Optional[datetime] = None) -> Optional[Discount]:
    """Build the discount in force at ``now``, or None when absent or expired."""
    amount = Decimal(str(amount or 0))
    if amount <= 0:
        return None
    if valid_until is not None and valid_until < (now or utcnow()):
        return None
    return Discount(amount=amount, type=type_ or "fixed", valid_until=valid_until)


def room_discount(room, now: Optional[datetime] = None) -> Optional[Discount]:
    return active_discount(room.discount_amount, room.discount_type, room.discount_valid_until, now)


def room_final_price(room, now: Optional[datetime] = None) -> Decimal:
    return effective_price(room.price_per_night, room_discount(room, now))
