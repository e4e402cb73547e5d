# fooddelivery/ordering/orders.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from ..errors import Forbidden, NotFound, ValidationError
from ..models import ORDER_TRANSITIONS, Order, Restaurant, User

logger = logging.getLogger(__name__)


def list_for_user(db: Session, user: User) -> List[Order]:
    return db.query(Order).filter(Order.user_id == user.id).order_by(Order.id.desc()).all()


def list_for_restaurant(db: Session, restaurant: Restaurant) -> List[Order]:
    return db.query(Order).filter(Order.restaurant_id == restaurant.id).order_by(Order.id.desc()).all()


def get_order_or_404(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order not found")
    return order


def get_visible_order(db: Session, principal: User | Restaurant, order_id: int) -> Order:
    """An order is visible to the user who placed it and the restaurant it was placed with."""
    order = get_order_or_404(db, order_id)
    owner_id = order.user_id if isinstance(principal, User) else order.restaurant_id
    if owner_id != principal.id:
        raise Forbidden("You can only view your own orders")
    return order


def update_status(db: Session, restaurant: Restaurant, order_id: int, new_status: str) -> Order:
    order = get_order_or_404(db, order_id)
    if order.restaurant_id != restaurant.id:
        raise Forbidden("You can only manage your own orders")

    if new_status == order.status:
        return order

    allowed = ORDER_TRANSITIONS.get(order.status, set())
    if new_status not in allowed:
        raise ValidationError(f"Cannot move an order from {order.status} to {new_status}")

    order.status = new_status
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order %s moved to %s by restaurant %s", order.id, new_status, restaurant.id)
    return order
