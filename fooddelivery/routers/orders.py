# fooddelivery/routers/orders.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..deps import require_principal, require_restaurant, require_user
from ..models import Restaurant, User
from ..ordering import orders
from ..ordering.checkout import assemble_order
from ..schemas import OrderCreateIn, OrderOut, OrderStatusIn

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreateIn, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return OrderOut.from_order(assemble_order(db, user, payload))


@router.get("/mine", response_model=List[OrderOut])
def my_orders(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return [OrderOut.from_order(o) for o in orders.list_for_user(db, user)]


@router.get("/restaurant", response_model=List[OrderOut])
def restaurant_orders(me: Restaurant = Depends(require_restaurant), db: Session = Depends(get_db)):
    return [OrderOut.from_order(o) for o in orders.list_for_restaurant(db, me)]


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, principal=Depends(require_principal), db: Session = Depends(get_db)):
    return OrderOut.from_order(orders.get_visible_order(db, principal, order_id))


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    me: Restaurant = Depends(require_restaurant),
    db: Session = Depends(get_db),
):
    return OrderOut.from_order(orders.update_status(db, me, order_id, payload.status))
