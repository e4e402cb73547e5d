# fooddelivery/models.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .auth import ROLE_RESTAURANT, ROLE_USER, hash_password, verify_password
from .db import Base

Money = Numeric(10, 2)


class PrincipalMixin:
    """Shared credential handling for users and restaurants.

    The hash is only ever written through set_password(); profile updates
    that don't touch the password simply never call it.
    """

    role = ""
    password_hash = Column(String, nullable=False)

    def set_password(self, plaintext: str) -> None:
        # hash first: a failure leaves the old value in place
        self.password_hash = hash_password(plaintext)

    def check_password(self, plaintext: str) -> bool:
        return verify_password(plaintext, self.password_hash)


class User(PrincipalMixin, Base):
    __tablename__ = "users"
    role = ROLE_USER

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    orders = relationship("Order", back_populates="user")


class Restaurant(PrincipalMixin, Base):
    __tablename__ = "restaurants"
    role = ROLE_RESTAURANT

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    cuisine = Column(JSON, default=list)  # ["pizza", "italian"]

    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)
    zip_code = Column(String, nullable=True)

    delivery_time = Column(String, nullable=True)  # free text, e.g. "30-40 min"
    min_order = Column(Money, nullable=True)
    rating = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    menu = relationship(
        "MenuItem",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="MenuItem.id",
    )
    orders = relationship("Order", back_populates="restaurant")


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Money, nullable=False)
    category = Column(String, nullable=True)
    image = Column(String, nullable=True)
    available = Column(Boolean, default=True, nullable=False)

    restaurant = relationship("Restaurant", back_populates="menu")


ORDER_STATUSES = ("pending", "confirmed", "preparing", "out_for_delivery", "delivered", "cancelled")

# restaurant-side workflow; delivered/cancelled are terminal
ORDER_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"preparing", "cancelled"},
    "preparing": {"out_for_delivery", "cancelled"},
    "out_for_delivery": {"delivered"},
    "delivered": set(),
    "cancelled": set(),
}


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)

    subtotal = Column(Money, nullable=False)
    tax = Column(Money, nullable=False)
    delivery_fee = Column(Money, nullable=False)
    total_amount = Column(Money, nullable=False)

    street = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)

    payment_method = Column(String, nullable=False, default="card")
    status = Column(String, nullable=False, default="pending")
    payment_status = Column(String, nullable=False, default="pending")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="orders")
    restaurant = relationship("Restaurant", back_populates="orders")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    # not a FK: the menu item may be edited or deleted after the order exists
    menu_item_id = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Money, nullable=False)  # snapshot of price at order time
    quantity = Column(Integer, nullable=False)

    order = relationship("Order", back_populates="items")


class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    food_quality = Column(Integer, nullable=True)
    delivery_time = Column(Integer, nullable=True)
    comment = Column(Text, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
