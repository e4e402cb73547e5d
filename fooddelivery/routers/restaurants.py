# fooddelivery/routers/restaurants.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import catalog
from ..accounts import require_owner
from ..db import get_db
from ..deps import require_restaurant
from ..models import Restaurant
from ..schemas import MenuItemIn, MenuItemOut, MenuItemUpdateIn, RestaurantOut, RestaurantUpdateIn

router = APIRouter(prefix="/api/restaurants", tags=["restaurants"])


@router.get("", response_model=List[RestaurantOut])
def list_restaurants(db: Session = Depends(get_db)):
    return [RestaurantOut.from_restaurant(r) for r in catalog.list_restaurants(db)]


# declared before /{restaurant_id} so "search" is never parsed as an id
@router.get("/search/{query}", response_model=List[RestaurantOut])
def search_restaurants(query: str, db: Session = Depends(get_db)):
    return [RestaurantOut.from_restaurant(r) for r in catalog.search_restaurants(db, query)]


@router.get("/{restaurant_id}", response_model=RestaurantOut)
def get_restaurant(restaurant_id: int, db: Session = Depends(get_db)):
    return RestaurantOut.from_restaurant(catalog.get_restaurant_or_404(db, restaurant_id))


@router.put("/{restaurant_id}", response_model=RestaurantOut)
def update_restaurant(
    restaurant_id: int,
    payload: RestaurantUpdateIn,
    me: Restaurant = Depends(require_restaurant),
    db: Session = Depends(get_db),
):
    restaurant = catalog.get_restaurant_or_404(db, restaurant_id)
    require_owner(me, restaurant.id)
    return RestaurantOut.from_restaurant(catalog.update_profile(db, restaurant, payload))


@router.post("/{restaurant_id}/menu", response_model=List[MenuItemOut], status_code=201)
def add_menu_item(
    restaurant_id: int,
    payload: MenuItemIn,
    me: Restaurant = Depends(require_restaurant),
    db: Session = Depends(get_db),
):
    restaurant = catalog.get_restaurant_or_404(db, restaurant_id)
    require_owner(me, restaurant.id)
    return [MenuItemOut.model_validate(m) for m in catalog.add_menu_item(db, restaurant, payload)]


@router.put("/{restaurant_id}/menu/{item_id}", response_model=MenuItemOut)
def update_menu_item(
    restaurant_id: int,
    item_id: int,
    payload: MenuItemUpdateIn,
    me: Restaurant = Depends(require_restaurant),
    db: Session = Depends(get_db),
):
    restaurant = catalog.get_restaurant_or_404(db, restaurant_id)
    require_owner(me, restaurant.id)
    return MenuItemOut.model_validate(catalog.update_menu_item(db, restaurant, item_id, payload))


@router.delete("/{restaurant_id}/menu/{item_id}")
def delete_menu_item(
    restaurant_id: int,
    item_id: int,
    me: Restaurant = Depends(require_restaurant),
    db: Session = Depends(get_db),
):
    restaurant = catalog.get_restaurant_or_404(db, restaurant_id)
    require_owner(me, restaurant.id)
    catalog.delete_menu_item(db, restaurant, item_id)
    return {"status": "success"}
