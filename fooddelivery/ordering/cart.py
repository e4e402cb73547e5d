# fooddelivery/ordering/cart.py
from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from .pricing import line_total, subtotal, to_money

Confirm = Union[bool, Callable[[], bool]]


@dataclass
class CartLine:
    menu_item_id: int
    name: str
    unit_price: Decimal  # snapshot taken when the item was first added
    qty: int = 1

    @property
    def line_total(self) -> Decimal:
        return line_total(self.unit_price, self.qty)


@dataclass(frozen=True)
class BoundRestaurant:
    id: int
    name: str = ""


class Cart:
    """Client-side basket, bound to at most one restaurant.

    Empty: no lines and no restaurant. Active: one restaurant and >= 1 line.
    Every mutation keeps those two states the only reachable ones.
    """

    def __init__(self) -> None:
        self.restaurant: Optional[BoundRestaurant] = None
        self.lines: List[CartLine] = []

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def _find(self, menu_item_id: int) -> Optional[CartLine]:
        for line in self.lines:
            if line.menu_item_id == menu_item_id:
                return line
        return None

    def add_item(self, item: Mapping[str, Any], restaurant: Mapping[str, Any], confirm: Confirm = False) -> bool:
        """Add one of `item` (a menu item dict with id/name/price).

        Adding from a different restaurant than the bound one discards the
        current cart, but only if `confirm` (a bool or a zero-arg callable)
        agrees. Returns False and leaves the cart untouched otherwise.
        """
        rid = int(restaurant["id"])
        if self.restaurant is not None and self.restaurant.id != rid:
            agreed = confirm() if callable(confirm) else bool(confirm)
            if not agreed:
                return False
            self.clear()

        iid = int(item["id"])
        line = self._find(iid)
        if line:
            line.qty += 1
        else:
            self.lines.append(
                CartLine(
                    menu_item_id=iid,
                    name=str(item.get("name", "Item")),
                    unit_price=to_money(item["price"]),
                )
            )

        if self.restaurant is None:
            self.restaurant = BoundRestaurant(id=rid, name=str(restaurant.get("name", "")))
        return True

    def remove_item(self, menu_item_id: int) -> None:
        self.lines = [x for x in self.lines if x.menu_item_id != menu_item_id]
        if not self.lines:
            self.restaurant = None

    def set_quantity(self, menu_item_id: int, qty: int) -> None:
        if qty <= 0:
            self.remove_item(menu_item_id)
            return
        line = self._find(menu_item_id)
        if line:
            line.qty = int(qty)

    def clear(self) -> None:
        self.lines = []
        self.restaurant = None

    def total(self) -> Decimal:
        return subtotal((x.unit_price, x.qty) for x in self.lines)

    def order_lines(self) -> List[Dict[str, Any]]:
        return [
            {"menu_item_id": x.menu_item_id, "name": x.name, "price": float(x.unit_price), "quantity": x.qty}
            for x in self.lines
        ]

    # -------------------
    # Persistence
    # -------------------
    def dump(self) -> str:
        state = {
            "restaurant": (
                {"id": self.restaurant.id, "name": self.restaurant.name} if self.restaurant else None
            ),
            "lines": [
                {"menu_item_id": x.menu_item_id, "name": x.name, "unit_price": str(x.unit_price), "qty": x.qty}
                for x in self.lines
            ],
        }
        return json.dumps(state, ensure_ascii=False)

    @classmethod
    def load(cls, raw: str | None) -> "Cart":
        """Rebuild a cart from dump(). Anything unreadable yields an empty cart."""
        cart = cls()
        try:
            v = json.loads(raw or "{}")
        except json.JSONDecodeError:
            return cart
        if not isinstance(v, dict) or not isinstance(v.get("restaurant"), dict):
            return cart

        try:
            r = v["restaurant"]
            restaurant = BoundRestaurant(id=int(r["id"]), name=str(r.get("name", "")))
            lines = [
                CartLine(
                    menu_item_id=int(x["menu_item_id"]),
                    name=str(x.get("name", "Item")),
                    unit_price=to_money(x["unit_price"]),
                    qty=int(x.get("qty", 1)),
                )
                for x in (v.get("lines") or [])
            ]
        except (KeyError, TypeError, ValueError, ArithmeticError):
            return cart

        cart.lines = [x for x in lines if x.qty > 0]
        cart.restaurant = restaurant if cart.lines else None
        return cart


def build_summary(cart: Cart, currency_symbol: str = "$") -> Tuple[str, Decimal]:
    if cart.is_empty:
        return ("Your basket is empty.", Decimal("0.00"))

    lines: List[str] = []
    for i, line in enumerate(cart.lines, start=1):
        lines.append(f"{i}. x{line.qty} {line.name} = {currency_symbol}{line.line_total:.2f}")

    total = cart.total()
    header = f"Order summary ({cart.restaurant.name}):" if cart.restaurant and cart.restaurant.name else "Order summary:"
    return (header + "\n" + "\n".join(lines) + f"\n\nTotal: {currency_symbol}{total:.2f}", total)
