# fooddelivery/deps.py
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from . import accounts
from .auth import ROLE_RESTAURANT, ROLE_USER
from .db import get_db
from .errors import Unauthorized
from .models import Restaurant, User


def bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthorized("Missing Bearer token")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise Unauthorized("Missing Bearer token")
    return token


def require_user(token: str = Depends(bearer_token), db: Session = Depends(get_db)) -> User:
    return accounts.authenticate(db, token, ROLE_USER)


def require_restaurant(token: str = Depends(bearer_token), db: Session = Depends(get_db)) -> Restaurant:
    return accounts.authenticate(db, token, ROLE_RESTAURANT)


def require_principal(token: str = Depends(bearer_token), db: Session = Depends(get_db)) -> User | Restaurant:
    return accounts.authenticate(db, token)
