# fooddelivery/catalog.py
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import String, cast, or_, select
from sqlalchemy.orm import Session

from .errors import NotFound, ValidationError
from .models import MenuItem, Restaurant
from .schemas import MenuItemIn, MenuItemUpdateIn, RestaurantUpdateIn

logger = logging.getLogger(__name__)


def _normalize_query(q: str) -> str:
    return " ".join((q or "").strip().split())


def _like_pattern(q: str) -> str:
    escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def list_restaurants(db: Session) -> List[Restaurant]:
    return db.query(Restaurant).order_by(Restaurant.id).all()


def get_restaurant_or_404(db: Session, restaurant_id: int) -> Restaurant:
    r = db.get(Restaurant, restaurant_id)
    if r is None:
        raise NotFound("Restaurant not found")
    return r


def search_restaurants(db: Session, query: str) -> List[Restaurant]:
    """Case-insensitive substring match on name, cuisine or any menu item name."""
    q = _normalize_query(query)
    if not q:
        raise ValidationError("Search query is empty")

    pattern = _like_pattern(q)
    dish_hits = select(MenuItem.restaurant_id).where(MenuItem.name.ilike(pattern, escape="\\"))
    return (
        db.query(Restaurant)
        .filter(
            or_(
                Restaurant.name.ilike(pattern, escape="\\"),
                cast(Restaurant.cuisine, String).ilike(pattern, escape="\\"),
                Restaurant.id.in_(dish_hits),
            )
        )
        .order_by(Restaurant.id)
        .all()
    )


def update_profile(db: Session, restaurant: Restaurant, payload: RestaurantUpdateIn) -> Restaurant:
    # email/password are not editable here; password only changes via set_password()
    changes = payload.model_dump(exclude_unset=True, exclude={"address"})
    for k, v in changes.items():
        setattr(restaurant, k, v)

    if payload.address is not None:
        for k, v in payload.address.model_dump(exclude_unset=True).items():
            setattr(restaurant, k, v)

    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


def _get_menu_item_or_404(restaurant: Restaurant, item_id: int) -> MenuItem:
    for m in restaurant.menu:
        if m.id == item_id:
            return m
    raise NotFound("Menu item not found")


def add_menu_item(db: Session, restaurant: Restaurant, payload: MenuItemIn) -> List[MenuItem]:
    restaurant.menu.append(MenuItem(**payload.model_dump()))
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    logger.info("Restaurant %s added menu item %r", restaurant.id, payload.name)
    return list(restaurant.menu)


def update_menu_item(db: Session, restaurant: Restaurant, item_id: int, payload: MenuItemUpdateIn) -> MenuItem:
    item = _get_menu_item_or_404(restaurant, item_id)
    for k, v in payload.model_dump(exclude_unset=True).items():
        if v is None and k in {"name", "price", "available"}:
            continue  # required columns; explicit null means "leave as is"
        setattr(item, k, v)

    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def delete_menu_item(db: Session, restaurant: Restaurant, item_id: int) -> None:
    item = _get_menu_item_or_404(restaurant, item_id)
    restaurant.menu.remove(item)  # delete-orphan cascade removes the row
    db.add(restaurant)
    db.commit()
    logger.info("Restaurant %s deleted menu item %s", restaurant.id, item_id)
