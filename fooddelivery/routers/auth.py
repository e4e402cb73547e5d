# fooddelivery/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import accounts
from ..auth import ROLE_RESTAURANT, ROLE_USER
from ..db import get_db
from ..schemas import AuthOut, LoginIn, RestaurantRegisterIn, UserRegisterIn

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/user/register", response_model=AuthOut, status_code=201)
def user_register(payload: UserRegisterIn, db: Session = Depends(get_db)):
    return accounts.register(db, ROLE_USER, payload).as_response()


@router.post("/user/login", response_model=AuthOut)
def user_login(payload: LoginIn, db: Session = Depends(get_db)):
    return accounts.login(db, ROLE_USER, payload.email, payload.password).as_response()


@router.post("/restaurant/register", response_model=AuthOut, status_code=201)
def restaurant_register(payload: RestaurantRegisterIn, db: Session = Depends(get_db)):
    return accounts.register(db, ROLE_RESTAURANT, payload).as_response()


@router.post("/restaurant/login", response_model=AuthOut)
def restaurant_login(payload: LoginIn, db: Session = Depends(get_db)):
    return accounts.login(db, ROLE_RESTAURANT, payload.email, payload.password).as_response()
