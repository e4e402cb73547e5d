# fooddelivery/ordering/pricing.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Tuple, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_money(value: Number) -> Decimal:
    # floats go through str() so 5.5 becomes Decimal("5.5"), not 5.4999...
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: Number, qty: int) -> Decimal:
    return to_money(to_money(unit_price) * int(qty))


def subtotal(lines: Iterable[Tuple[Number, int]]) -> Decimal:
    total = Decimal("0.00")
    for price, qty in lines:
        total += line_total(price, qty)
    return to_money(total)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal


def order_totals(sub: Number, tax_rate: Number, delivery_fee: Number) -> OrderTotals:
    """subtotal + delivery fee + tax, where tax is a percentage of the
    subtotal only (the delivery fee is not taxed)."""
    s = to_money(sub)
    rate = Decimal(str(tax_rate)) if isinstance(tax_rate, float) else Decimal(tax_rate)
    tax = to_money(s * rate)
    fee = to_money(delivery_fee)
    return OrderTotals(subtotal=s, tax=tax, delivery_fee=fee, total=to_money(s + fee + tax))
