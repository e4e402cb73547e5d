# fooddelivery/config.py
from __future__ import annotations

import os
from decimal import Decimal
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env locally (safe in prod too)
load_dotenv()


def _env(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def _split_csv(raw: str) -> List[str]:
    return [p.strip() for p in (raw or "").split(",") if p.strip()]


class Settings(BaseModel):
    """Env-driven settings. Fields are read when the model is built, so
    tests can monkeypatch the environment and call get_settings() again."""

    database_url: str = Field(default_factory=lambda: _env("DATABASE_URL", "sqlite:///./food_delivery.db"))

    jwt_secret: str = Field(default_factory=lambda: _env("JWT_SECRET", "dev-secret-change-me"))
    jwt_alg: str = Field(default_factory=lambda: _env("JWT_ALG", "HS256"))
    token_ttl_days: int = Field(default_factory=lambda: int(_env("TOKEN_TTL_DAYS", "7")))

    delivery_fee: Decimal = Field(default_factory=lambda: Decimal(_env("DELIVERY_FEE", "3.99")))
    tax_rate: Decimal = Field(default_factory=lambda: Decimal(_env("TAX_RATE", "0.08")))

    cors_origins: List[str] = Field(
        default_factory=lambda: _split_csv(_env("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"))
    )
    # LAN dev boxes, e.g. http://10.0.0.12:3000
    cors_origin_regex: str = Field(default_factory=lambda: _env("CORS_ORIGIN_REGEX", r"^http://10\.\d+\.\d+\.\d+:3000$"))

    log_level: str = Field(default_factory=lambda: _env("LOG_LEVEL", "INFO").upper())
    port: int = Field(default_factory=lambda: int(_env("PORT", "5001")))


def get_settings() -> Settings:
    return Settings()
