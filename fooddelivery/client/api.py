# fooddelivery/client/api.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..auth import ROLE_RESTAURANT, ROLE_USER
from ..errors import AppError, ValidationError
from ..ordering.cart import Cart
from .session import Session

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5001"


class ApiError(AppError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class FoodDeliveryClient:
    """Thin typed wrapper over the HTTP API.

    `http` may be any httpx.Client (tests pass FastAPI's TestClient).
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[Session] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.session = session or Session()
        self.http = http or httpx.Client(base_url=base_url, timeout=10.0)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "FoodDeliveryClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, json: Any = None, role: Optional[str] = None) -> Any:
        headers = self.session.auth_headers(role) if role else {}
        r = self.http.request(method, path, json=json, headers=headers)

        try:
            data = r.json()
        except ValueError:
            data = {}

        if r.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            if r.status_code == 401 and headers:
                self.session.mark_rejected()
            logger.debug("%s %s -> %s %s", method, path, r.status_code, message)
            raise ApiError(message or "Something went wrong", r.status_code)
        return data

    # -------------------
    # Auth
    # -------------------
    def _start_session(self, role: str, data: Dict[str, Any]) -> Dict[str, Any]:
        principal = data["data"][role]
        self.session.login(role, principal, data["token"])
        return principal

    def register_user(self, name: str, email: str, password: str, phone: Optional[str] = None) -> Dict[str, Any]:
        body = {"name": name, "email": email, "password": password, "phone": phone}
        return self._start_session(ROLE_USER, self._request("POST", "/api/auth/user/register", json=body))

    def login_user(self, email: str, password: str) -> Dict[str, Any]:
        body = {"email": email, "password": password}
        return self._start_session(ROLE_USER, self._request("POST", "/api/auth/user/login", json=body))

    def register_restaurant(self, name: str, email: str, password: str, **fields: Any) -> Dict[str, Any]:
        body = {"name": name, "email": email, "password": password, **fields}
        return self._start_session(ROLE_RESTAURANT, self._request("POST", "/api/auth/restaurant/register", json=body))

    def login_restaurant(self, email: str, password: str) -> Dict[str, Any]:
        body = {"email": email, "password": password}
        return self._start_session(ROLE_RESTAURANT, self._request("POST", "/api/auth/restaurant/login", json=body))

    def logout(self) -> None:
        self.session.logout()

    # -------------------
    # Catalog
    # -------------------
    def restaurants(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/restaurants")

    def restaurant(self, restaurant_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/restaurants/{restaurant_id}")

    def search(self, query: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/restaurants/search/{quote(query, safe='')}")

    def add_menu_item(self, item: Dict[str, Any]) -> List[Dict[str, Any]]:
        rid = self.session.principal_id
        return self._request("POST", f"/api/restaurants/{rid}/menu", json=item, role=ROLE_RESTAURANT)

    def update_menu_item(self, item_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        rid = self.session.principal_id
        return self._request("PUT", f"/api/restaurants/{rid}/menu/{item_id}", json=changes, role=ROLE_RESTAURANT)

    # -------------------
    # Orders
    # -------------------
    def place_order(self, cart: Cart, delivery_address: Dict[str, str], payment_method: str = "card") -> Dict[str, Any]:
        """Checkout. The cart is cleared only once the server has created the
        order; on any failure it is left exactly as it was."""
        if cart.is_empty or cart.restaurant is None:
            raise ValidationError("Your cart is empty")

        body = {
            "restaurant_id": cart.restaurant.id,
            "items": cart.order_lines(),
            "delivery_address": delivery_address,
            "payment_method": payment_method,
            "total_amount": float(cart.total()),
        }
        order = self._request("POST", "/api/orders", json=body, role=ROLE_USER)
        cart.clear()
        return order

    def my_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/orders/mine", role=ROLE_USER)

    def restaurant_orders(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/orders/restaurant", role=ROLE_RESTAURANT)

    def update_order_status(self, order_id: int, status: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/orders/{order_id}/status", json={"status": status}, role=ROLE_RESTAURANT)

    def submit_feedback(self, order_id: int, rating: int, comment: str = "", **scores: int) -> Dict[str, Any]:
        body = {"order_id": order_id, "rating": rating, "comment": comment, **scores}
        return self._request("POST", "/api/feedback", json=body, role=ROLE_USER)
