# fooddelivery/auth.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from .config import get_settings

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_RESTAURANT = "restaurant"
ROLES = (ROLE_USER, ROLE_RESTAURANT)

pwd = CryptContext(schemes=["argon2"], deprecated="auto")


# -------------------
# Credentials
# -------------------
def hash_password(p: str) -> str:
    if not p:
        raise ValueError("Cannot hash an empty password")
    h = pwd.hash(p)
    if not pwd.identify(h):
        raise ValueError("Password hashing produced an unrecognised hash")
    return h


def verify_password(p: str, h: str | None) -> bool:
    if not p or not h:
        return False
    try:
        return pwd.verify(p, h)
    except (ValueError, TypeError):
        # malformed or unknown stored hash never matches
        logger.warning("Stored password hash could not be parsed")
        return False


# -------------------
# Tokens
# -------------------
@dataclass(frozen=True)
class TokenClaims:
    principal_id: int
    role: str
    issued_at: datetime
    expires_at: datetime


def create_token(principal_id: int, role: str, now: Optional[datetime] = None) -> str:
    if role not in ROLES:
        raise ValueError(f"Unknown role: {role!r}")

    settings = get_settings()
    iat = now or datetime.now(timezone.utc)
    exp = iat + timedelta(days=settings.token_ttl_days)
    payload = {"sub": str(principal_id), "role": role, "iat": iat, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str | None) -> Optional[TokenClaims]:
    """Verify signature and expiry. Any failure returns None; the reason is
    only logged."""
    if not token:
        return None

    settings = get_settings()
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
    except ExpiredSignatureError:
        logger.info("Rejected token: expired")
        return None
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        return None

    role = data.get("role")
    try:
        principal_id = int(data.get("sub"))
        issued_at = datetime.fromtimestamp(int(data["iat"]), tz=timezone.utc)
        expires_at = datetime.fromtimestamp(int(data["exp"]), tz=timezone.utc)
    except (KeyError, TypeError, ValueError):
        logger.info("Rejected token: malformed claims")
        return None

    if role not in ROLES:
        logger.info("Rejected token: unknown role %r", role)
        return None

    return TokenClaims(principal_id=principal_id, role=role, issued_at=issued_at, expires_at=expires_at)
