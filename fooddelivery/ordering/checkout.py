# fooddelivery/ordering/checkout.py
from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..catalog import get_restaurant_or_404
from ..config import Settings, get_settings
from ..errors import Unexpected, ValidationError
from ..models import MenuItem, Order, OrderItem, User
from ..schemas import OrderCreateIn
from .pricing import OrderTotals, order_totals, subtotal, to_money

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "zip_code")


def _check_address(payload: OrderCreateIn) -> None:
    addr = payload.delivery_address
    missing = [f for f in ADDRESS_FIELDS if not (getattr(addr, f, None) or "").strip()]
    if missing:
        raise ValidationError("Please fill in all address fields")


def _merge_lines(payload: OrderCreateIn) -> "OrderedDict[int, int]":
    # the same item twice in one payload is one line
    qty_by_item: "OrderedDict[int, int]" = OrderedDict()
    for line in payload.items:
        qty_by_item[line.menu_item_id] = qty_by_item.get(line.menu_item_id, 0) + line.quantity
    return qty_by_item


def price_lines(menu: Dict[int, MenuItem], qty_by_item: Dict[int, int]) -> list[OrderItem]:
    """Snapshot live menu prices into order lines. Client-sent prices are
    never consulted."""
    out: list[OrderItem] = []
    for item_id, qty in qty_by_item.items():
        item = menu.get(item_id)
        if item is None:
            raise ValidationError(f"Menu item {item_id} is not on this restaurant's menu")
        if not item.available:
            raise ValidationError(f"{item.name} is currently unavailable")
        out.append(OrderItem(menu_item_id=item.id, name=item.name, price=to_money(item.price), quantity=qty))
    return out


def compute_totals(lines: list[OrderItem], settings: Optional[Settings] = None) -> OrderTotals:
    settings = settings or get_settings()
    sub = subtotal((x.price, x.quantity) for x in lines)
    return order_totals(sub, settings.tax_rate, settings.delivery_fee)


def assemble_order(db: Session, user: User, payload: OrderCreateIn, settings: Optional[Settings] = None) -> Order:
    """Turn a checked-out cart into a persisted order, in one transaction.

    Payment has already been confirmed by the caller, so the order starts
    as pending with a completed payment.
    """
    if not payload.items:
        raise ValidationError("Your cart is empty")
    _check_address(payload)

    restaurant = get_restaurant_or_404(db, payload.restaurant_id)
    menu = {m.id: m for m in restaurant.menu}
    lines = price_lines(menu, _merge_lines(payload))
    totals = compute_totals(lines, settings)

    if restaurant.min_order and totals.subtotal < to_money(restaurant.min_order):
        raise ValidationError(f"Minimum order for {restaurant.name} is {to_money(restaurant.min_order):.2f}")

    if payload.total_amount is not None and to_money(payload.total_amount) != totals.total:
        logger.warning(
            "Client total %s differs from computed %s for user %s; using computed",
            payload.total_amount,
            totals.total,
            user.id,
        )

    addr = payload.delivery_address
    order = Order(
        user_id=user.id,
        restaurant_id=restaurant.id,
        subtotal=totals.subtotal,
        tax=totals.tax,
        delivery_fee=totals.delivery_fee,
        total_amount=totals.total,
        street=addr.street,
        city=addr.city,
        state=addr.state,
        zip_code=addr.zip_code,
        payment_method=payload.payment_method,
        status="pending",
        payment_status="completed",
        items=lines,
    )

    try:
        db.add(order)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Order creation failed for user %s", user.id)
        raise Unexpected("Could not place your order, please try again") from e

    db.refresh(order)
    logger.info("Order %s created for user %s at restaurant %s total=%s", order.id, user.id, restaurant.id, order.total_amount)
    return order
