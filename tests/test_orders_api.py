from __future__ import annotations

from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

from conftest import auth_header, register_restaurant, register_user

ADDRESS = {"street": "1 Main St", "city": "Springfield", "state": "IL", "zip_code": "62701"}


def _menu_id(restaurant: Dict[str, Any], name: str) -> int:
    return next(m["id"] for m in restaurant["menu"] if m["name"] == name)


def _order_body(restaurant: Dict[str, Any], **overrides: Any) -> Dict[str, Any]:
    body = {
        "restaurant_id": restaurant["data"]["restaurant"]["id"],
        "items": [{"menu_item_id": _menu_id(restaurant, "Margherita"), "quantity": 2}],
        "delivery_address": dict(ADDRESS),
        "payment_method": "card",
    }
    body.update(overrides)
    return body


def _place(client: TestClient, user: Dict[str, Any], body: Dict[str, Any]):
    return client.post("/api/orders", json=body, headers=auth_header(user["token"]))


def test_order_total_is_computed_server_side(client: TestClient, user, restaurant) -> None:
    body = _order_body(restaurant, total_amount=1.00)
    body["items"][0]["price"] = 0.01  # tampered client price

    r = _place(client, user, body)
    assert r.status_code == 201, r.text

    data = r.json()
    assert data["subtotal"] == 20.00
    assert data["tax"] == 1.60
    assert data["delivery_fee"] == 3.99
    assert data["total_amount"] == 25.59
    assert data["items"] == [{"menu_item_id": body["items"][0]["menu_item_id"], "name": "Margherita", "price": 10.0, "quantity": 2}]
    assert data["status"] == "pending"
    assert data["payment_status"] == "completed"
    assert data["delivery_address"] == ADDRESS
    assert data["user_id"] == user["data"]["user"]["id"]


def test_repeated_item_lines_are_merged(client: TestClient, user, restaurant) -> None:
    mid = _menu_id(restaurant, "Margherita")
    body = _order_body(restaurant, items=[{"menu_item_id": mid, "quantity": 1}, {"menu_item_id": mid, "quantity": 1}])
    data = _place(client, user, body).json()
    assert len(data["items"]) == 1
    assert data["items"][0]["quantity"] == 2
    assert data["subtotal"] == 20.00


@pytest.mark.parametrize("missing", ["street", "city", "state", "zip_code"])
def test_every_address_field_is_required(client: TestClient, user, restaurant, missing: str) -> None:
    addr = dict(ADDRESS)
    addr.pop(missing)
    r = _place(client, user, _order_body(restaurant, delivery_address=addr))
    assert r.status_code == 400
    assert missing in r.json()["message"]


def test_blank_address_field_is_rejected(client: TestClient, user, restaurant) -> None:
    r = _place(client, user, _order_body(restaurant, delivery_address={**ADDRESS, "city": "   "}))
    assert r.status_code == 400


def test_empty_cart_is_rejected(client: TestClient, user, restaurant) -> None:
    r = _place(client, user, _order_body(restaurant, items=[]))
    assert r.status_code == 400


def test_unknown_restaurant_is_not_found(client: TestClient, user, restaurant) -> None:
    r = _place(client, user, _order_body(restaurant, restaurant_id=9999))
    assert r.status_code == 404
    assert r.json() == {"message": "Restaurant not found"}


def test_item_from_another_restaurant_is_rejected(client: TestClient, user, restaurant) -> None:
    other = register_restaurant(client, email="wok@example.com", menu=[{"name": "Rice", "price": 6}])
    body = _order_body(restaurant, items=[{"menu_item_id": other["menu"][0]["id"], "quantity": 1}])
    r = _place(client, user, body)
    assert r.status_code == 400


def test_unavailable_item_is_rejected(client: TestClient, user, restaurant) -> None:
    rid = restaurant["data"]["restaurant"]["id"]
    mid = _menu_id(restaurant, "Margherita")
    client.put(
        f"/api/restaurants/{rid}/menu/{mid}",
        json={"available": False},
        headers=auth_header(restaurant["token"]),
    )
    r = _place(client, user, _order_body(restaurant))
    assert r.status_code == 400
    assert "unavailable" in r.json()["message"]


def test_minimum_order_is_enforced(client: TestClient, user) -> None:
    r = register_restaurant(client, email="min@example.com", min_order=30, menu=[{"name": "Margherita", "price": 10}])
    resp = _place(client, user, _order_body(r))
    assert resp.status_code == 400
    assert "Minimum order" in resp.json()["message"]


def test_restaurant_token_cannot_place_orders(client: TestClient, restaurant) -> None:
    r = client.post("/api/orders", json=_order_body(restaurant), headers=auth_header(restaurant["token"]))
    assert r.status_code == 401


def test_order_prices_do_not_follow_menu_changes(client: TestClient, user, restaurant) -> None:
    order = _place(client, user, _order_body(restaurant)).json()

    rid = restaurant["data"]["restaurant"]["id"]
    mid = _menu_id(restaurant, "Margherita")
    client.put(f"/api/restaurants/{rid}/menu/{mid}", json={"price": 99.00}, headers=auth_header(restaurant["token"]))

    again = client.get(f"/api/orders/{order['id']}", headers=auth_header(user["token"])).json()
    assert again["items"][0]["price"] == 10.0
    assert again["total_amount"] == 25.59


def test_order_listings(client: TestClient, user, restaurant) -> None:
    first = _place(client, user, _order_body(restaurant)).json()
    second = _place(client, user, _order_body(restaurant)).json()

    mine = client.get("/api/orders/mine", headers=auth_header(user["token"])).json()
    assert [o["id"] for o in mine] == [second["id"], first["id"]]

    theirs = client.get("/api/orders/restaurant", headers=auth_header(restaurant["token"])).json()
    assert {o["id"] for o in theirs} == {first["id"], second["id"]}

    other_user = register_user(client, email="bob@example.com")
    assert client.get("/api/orders/mine", headers=auth_header(other_user["token"])).json() == []


def test_order_visibility(client: TestClient, user, restaurant) -> None:
    order = _place(client, user, _order_body(restaurant)).json()
    path = f"/api/orders/{order['id']}"

    assert client.get(path, headers=auth_header(user["token"])).status_code == 200
    assert client.get(path, headers=auth_header(restaurant["token"])).status_code == 200

    stranger = register_user(client, email="eve@example.com")
    assert client.get(path, headers=auth_header(stranger["token"])).status_code == 403
    assert client.get("/api/orders/9999", headers=auth_header(user["token"])).status_code == 404


def test_restaurant_moves_order_status(client: TestClient, user, restaurant) -> None:
    order = _place(client, user, _order_body(restaurant)).json()
    path = f"/api/orders/{order['id']}/status"
    headers = auth_header(restaurant["token"])

    for status in ("confirmed", "preparing", "out_for_delivery", "delivered"):
        r = client.patch(path, json={"status": status}, headers=headers)
        assert r.status_code == 200, r.text
        assert r.json()["status"] == status

    r = client.patch(path, json={"status": "pending"}, headers=headers)
    assert r.status_code == 400


def test_status_update_rules(client: TestClient, user, restaurant) -> None:
    order = _place(client, user, _order_body(restaurant)).json()
    path = f"/api/orders/{order['id']}/status"

    assert client.patch(path, json={"status": "delivered"}, headers=auth_header(restaurant["token"])).status_code == 400
    assert client.patch(path, json={"status": "teleported"}, headers=auth_header(restaurant["token"])).status_code == 400
    assert client.patch(path, json={"status": "confirmed"}, headers=auth_header(user["token"])).status_code == 401

    other = register_restaurant(client, email="wok@example.com")
    assert client.patch(path, json={"status": "confirmed"}, headers=auth_header(other["token"])).status_code == 403
