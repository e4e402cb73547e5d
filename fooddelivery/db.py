# fooddelivery/db.py
from __future__ import annotations

from typing import Generator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings

Base = declarative_base()

_ENGINE: Optional[Engine] = None
_ENGINE_URL: Optional[str] = None
_SESSIONMAKER: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Return a cached engine, rebuilt whenever DATABASE_URL changes
    (tests point it at a temp file before first use)."""
    global _ENGINE, _ENGINE_URL, _SESSIONMAKER

    url = get_settings().database_url
    if _ENGINE is not None and _ENGINE_URL == url:
        return _ENGINE

    if _ENGINE is not None:
        _ENGINE.dispose()

    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    _ENGINE = create_engine(url, future=True, connect_args=connect_args)
    _ENGINE_URL = url
    _SESSIONMAKER = sessionmaker(bind=_ENGINE, class_=Session, autocommit=False, autoflush=False)
    return _ENGINE


def db_session() -> Session:
    get_engine()
    assert _SESSIONMAKER is not None
    return _SESSIONMAKER()


def init_db() -> None:
    # models must be imported so their tables are registered on Base
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    db = db_session()
    try:
        yield db
    finally:
        db.close()
