# fooddelivery/client/session.py
"""Client-side login state.

A Session is passed explicitly to whatever makes authenticated calls. It
holds at most one active role at a time; logging in as a restaurant drops a
user login and vice versa.

    anonymous --login--> authenticated --(token exp passes)--> expired
                              |                                   |
                              +--logout--> logged_out <--logout---+
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from ..auth import ROLES
from ..errors import Unauthorized

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
AUTHENTICATED = "authenticated"
EXPIRED = "expired"
LOGGED_OUT = "logged_out"


def _token_expiry(token: str) -> Optional[datetime]:
    # the client has no signing secret; exp is read only to know when to re-login
    try:
        exp = jwt.get_unverified_claims(token).get("exp")
        return datetime.fromtimestamp(int(exp), tz=timezone.utc)
    except (JWTError, TypeError, ValueError):
        return None


class Session:
    def __init__(self) -> None:
        self.role: Optional[str] = None
        self.principal: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None
        self._ended = False
        self._rejected = False

    @property
    def expires_at(self) -> Optional[datetime]:
        return _token_expiry(self.token) if self.token else None

    def state(self, now: Optional[datetime] = None) -> str:
        if not self.token:
            return LOGGED_OUT if self._ended else ANONYMOUS
        if self._rejected:
            return EXPIRED
        exp = self.expires_at
        now = now or datetime.now(timezone.utc)
        # same boundary as token verification: still valid in the exp second itself
        if exp is None or now.replace(microsecond=0) > exp:
            return EXPIRED
        return AUTHENTICATED

    def is_authenticated(self, role: Optional[str] = None, now: Optional[datetime] = None) -> bool:
        if self.state(now) != AUTHENTICATED:
            return False
        return role is None or self.role == role

    @property
    def principal_id(self) -> Optional[int]:
        return int(self.principal["id"]) if self.principal else None

    def login(self, role: str, principal: Dict[str, Any], token: str) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role!r}")
        if self.role and self.role != role:
            logger.info("Switching session from %s to %s", self.role, role)
        self.role = role
        self.principal = dict(principal)
        self.token = token
        self._ended = False
        self._rejected = False

    def logout(self) -> None:
        self.role = None
        self.principal = None
        self.token = None
        self._ended = True
        self._rejected = False

    def mark_rejected(self) -> None:
        """The server refused the token (e.g. account gone); treat as expired."""
        if self.token:
            self._rejected = True

    def auth_headers(self, role: Optional[str] = None) -> Dict[str, str]:
        if not self.is_authenticated(role):
            if role:
                raise Unauthorized(f"Please log in as a {role}")
            raise Unauthorized("Please log in")
        return {"Authorization": f"Bearer {self.token}"}

    # -------------------
    # Persistence (survives restarts the way a browser keeps it across page loads)
    # -------------------
    def dump(self) -> str:
        return json.dumps({"role": self.role, "principal": self.principal, "token": self.token}, ensure_ascii=False)

    @classmethod
    def load(cls, raw: str | None) -> "Session":
        s = cls()
        try:
            v = json.loads(raw or "{}")
        except json.JSONDecodeError:
            return s
        if not isinstance(v, dict):
            return s

        role, principal, token = v.get("role"), v.get("principal"), v.get("token")
        if role in ROLES and isinstance(principal, dict) and isinstance(token, str) and token:
            s.login(role, principal, token)
        return s


class SessionStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> Session:
        if not self.path.exists():
            return Session()
        return Session.load(self.path.read_text(encoding="utf-8"))

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(session.dump(), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
