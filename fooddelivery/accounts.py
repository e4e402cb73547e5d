# fooddelivery/accounts.py
"""Registration and login for both principal kinds.

Users and restaurants live in separate tables, so the same email can be
registered once as each. Nothing here keeps server-side session state: the
signed token returned on success is the whole session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Type, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .auth import ROLE_RESTAURANT, ROLE_USER, create_token, decode_token, pwd
from .errors import Conflict, Forbidden, Unauthorized, Unexpected
from .models import Restaurant, User
from .schemas import AuthOut, PrincipalSummary, RestaurantRegisterIn, UserRegisterIn

logger = logging.getLogger(__name__)

Principal = Union[User, Restaurant]

PRINCIPAL_MODELS: Dict[str, Type[Any]] = {ROLE_USER: User, ROLE_RESTAURANT: Restaurant}

BAD_CREDENTIALS = "Incorrect email or password"
BAD_TOKEN = "Not authorized, please log in again"


@dataclass
class AuthResult:
    principal: Principal
    token: str

    def as_response(self) -> AuthOut:
        return AuthOut(
            token=self.token,
            data={self.principal.role: PrincipalSummary.model_validate(self.principal)},
        )


def _model_for(role: str) -> Type[Any]:
    try:
        return PRINCIPAL_MODELS[role]
    except KeyError:
        raise ValueError(f"Unknown role: {role!r}") from None


def find_by_email(db: Session, role: str, email: str) -> Principal | None:
    model = _model_for(role)
    return db.query(model).filter(model.email == email.strip().lower()).first()


def _build_principal(role: str, payload: Union[UserRegisterIn, RestaurantRegisterIn]) -> Principal:
    if role == ROLE_USER:
        return User(name=payload.name, email=payload.email, phone=payload.phone)

    addr = payload.address
    return Restaurant(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        cuisine=list(payload.cuisine),
        street=addr.street,
        city=addr.city,
        state=addr.state,
        zip_code=addr.zip_code,
        delivery_time=payload.delivery_time,
        min_order=payload.min_order,
    )


def register(db: Session, role: str, payload: Union[UserRegisterIn, RestaurantRegisterIn]) -> AuthResult:
    label = role.capitalize()
    if find_by_email(db, role, payload.email):
        raise Conflict(f"{label} already exists")

    principal = _build_principal(role, payload)
    try:
        principal.set_password(payload.password)
    except ValueError as e:
        logger.error("Password hashing failed for new %s: %s", role, e)
        raise Unexpected("Could not complete registration") from e

    try:
        db.add(principal)
        db.flush()  # get id
        token = create_token(principal.id, role)
        db.commit()
    except IntegrityError as e:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise Conflict(f"{label} already exists") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Registration failed for %s", role)
        raise Unexpected("Could not complete registration") from e

    db.refresh(principal)
    logger.info("Registered %s id=%s", role, principal.id)
    return AuthResult(principal=principal, token=token)


def login(db: Session, role: str, email: str, password: str) -> AuthResult:
    principal = find_by_email(db, role, email)
    if principal is None:
        # keep timing close to a real verify so missing accounts don't stand out
        pwd.dummy_verify()
        logger.info("Login failed for %s: unknown email", role)
        raise Unauthorized(BAD_CREDENTIALS)

    if not principal.check_password(password):
        logger.info("Login failed for %s id=%s: wrong password", role, principal.id)
        raise Unauthorized(BAD_CREDENTIALS)

    logger.info("Login ok for %s id=%s", role, principal.id)
    return AuthResult(principal=principal, token=create_token(principal.id, role))


def authenticate(db: Session, token: str | None, role: str | None = None) -> Principal:
    """Resolve a bearer token to a live principal. With `role` set, a token
    minted for the other role is refused."""
    claims = decode_token(token)
    if claims is None:
        raise Unauthorized(BAD_TOKEN)
    if role is not None and claims.role != role:
        logger.info("Token for %s used where %s is required", claims.role, role)
        raise Unauthorized(BAD_TOKEN)

    principal = db.get(_model_for(claims.role), claims.principal_id)
    if principal is None:
        # account removed after the token was issued
        raise Unauthorized(BAD_TOKEN)
    return principal


def require_owner(principal: Principal, owner_id: int) -> None:
    if principal.id != owner_id:
        raise Forbidden("You can only manage your own records")
