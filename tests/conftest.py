from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def _env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    db_path = tmp_path / "food_delivery_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("DELIVERY_FEE", "3.99")
    monkeypatch.setenv("TAX_RATE", "0.08")


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    from fooddelivery.main import app

    with TestClient(app) as c:
        yield c


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register_user(client: TestClient, email: str = "ann@example.com", password: str = "secret123") -> Dict[str, Any]:
    r = client.post(
        "/api/auth/user/register",
        json={"name": "Ann", "email": email, "password": password, "phone": "555-0101"},
    )
    assert r.status_code == 201, r.text
    return r.json()


def register_restaurant(
    client: TestClient,
    email: str = "luigi@example.com",
    password: str = "pizza-pass",
    menu: Optional[List[Dict[str, Any]]] = None,
    **fields: Any,
) -> Dict[str, Any]:
    body = {"name": "Luigi's", "email": email, "password": password, "cuisine": ["pizza", "italian"], **fields}
    r = client.post("/api/auth/restaurant/register", json=body)
    assert r.status_code == 201, r.text
    out = r.json()

    rid = out["data"]["restaurant"]["id"]
    for item in menu or []:
        m = client.post(f"/api/restaurants/{rid}/menu", json=item, headers=auth_header(out["token"]))
        assert m.status_code == 201, m.text
        out["menu"] = m.json()
    return out


@pytest.fixture()
def user(client: TestClient) -> Dict[str, Any]:
    return register_user(client)


@pytest.fixture()
def restaurant(client: TestClient) -> Dict[str, Any]:
    return register_restaurant(
        client,
        menu=[
            {"name": "Margherita", "price": 10.00, "category": "Pizza"},
            {"name": "Garlic Bread", "price": 5.50, "category": "Sides"},
        ],
    )
