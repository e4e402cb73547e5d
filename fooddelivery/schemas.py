# fooddelivery/schemas.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer, field_validator

from .models import ORDER_STATUSES, Feedback, Order, Restaurant

# Money stays Decimal inside the app and goes out as a JSON number.
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class _In(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class _EmailIn(_In):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: str) -> str:
        return v.strip().lower()


# -------------------
# Auth
# -------------------
class RestaurantAddress(_In):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None


class UserRegisterIn(_EmailIn):
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, max_length=20)


class RestaurantRegisterIn(_EmailIn):
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, max_length=20)
    cuisine: List[str] = Field(default_factory=list)
    address: RestaurantAddress = Field(default_factory=RestaurantAddress)
    delivery_time: Optional[str] = None
    min_order: Optional[Decimal] = Field(None, ge=0)


class LoginIn(_EmailIn):
    password: str = Field(..., min_length=1)


class PrincipalSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class AuthOut(BaseModel):
    status: str = "success"
    token: str
    data: Dict[str, PrincipalSummary]


# -------------------
# Restaurants / menu
# -------------------
class MenuItemIn(_In):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image: Optional[str] = None
    available: bool = True


class MenuItemUpdateIn(_In):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    category: Optional[str] = None
    image: Optional[str] = None
    available: Optional[bool] = None


class MenuItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    price: Amount
    category: Optional[str] = None
    image: Optional[str] = None
    available: bool


class RestaurantUpdateIn(_In):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    cuisine: Optional[List[str]] = None
    address: Optional[RestaurantAddress] = None
    delivery_time: Optional[str] = None
    min_order: Optional[Decimal] = Field(None, ge=0)


class RestaurantOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    cuisine: List[str] = Field(default_factory=list)
    address: RestaurantAddress
    delivery_time: Optional[str] = None
    min_order: Optional[Amount] = None
    rating: float = 0.0
    menu: List[MenuItemOut] = Field(default_factory=list)

    @classmethod
    def from_restaurant(cls, r: Restaurant) -> "RestaurantOut":
        return cls(
            id=r.id,
            name=r.name,
            email=r.email,
            phone=r.phone,
            cuisine=list(r.cuisine or []),
            address=RestaurantAddress(street=r.street, city=r.city, state=r.state, zip_code=r.zip_code),
            delivery_time=r.delivery_time,
            min_order=r.min_order,
            rating=r.rating or 0.0,
            menu=[MenuItemOut.model_validate(m) for m in r.menu],
        )


# -------------------
# Orders
# -------------------
class DeliveryAddress(_In):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1, max_length=10)


class OrderLineIn(_In):
    menu_item_id: int
    quantity: int = Field(..., ge=1, le=99)
    # informational only; unit prices come from the menu
    name: Optional[str] = None
    price: Optional[Decimal] = None


class OrderCreateIn(_In):
    restaurant_id: int
    items: List[OrderLineIn] = Field(..., min_length=1)
    delivery_address: DeliveryAddress
    payment_method: Literal["card", "cash"] = "card"
    # ignored: the total is always recomputed server-side
    total_amount: Optional[Decimal] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    menu_item_id: int
    name: str
    price: Amount
    quantity: int


class OrderOut(BaseModel):
    id: int
    user_id: int
    restaurant_id: int
    items: List[OrderItemOut]
    subtotal: Amount
    tax: Amount
    delivery_fee: Amount
    total_amount: Amount
    delivery_address: DeliveryAddress
    payment_method: str
    status: str
    payment_status: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, o: Order) -> "OrderOut":
        return cls(
            id=o.id,
            user_id=o.user_id,
            restaurant_id=o.restaurant_id,
            items=[OrderItemOut.model_validate(it) for it in o.items],
            subtotal=o.subtotal,
            tax=o.tax,
            delivery_fee=o.delivery_fee,
            total_amount=o.total_amount,
            delivery_address=DeliveryAddress(street=o.street, city=o.city, state=o.state, zip_code=o.zip_code),
            payment_method=o.payment_method,
            status=o.status,
            payment_status=o.payment_status,
            created_at=o.created_at,
        )


class OrderStatusIn(_In):
    status: str

    @field_validator("status")
    @classmethod
    def _known_status(cls, v: str) -> str:
        v = v.lower()
        if v not in ORDER_STATUSES:
            raise ValueError(f"status must be one of: {', '.join(ORDER_STATUSES)}")
        return v


# -------------------
# Feedback
# -------------------
class FeedbackIn(_In):
    order_id: int
    rating: int = Field(..., ge=1, le=5)
    # 0 means "not rated"
    food_quality: Optional[int] = Field(None, ge=0, le=5)
    delivery_time: Optional[int] = Field(None, ge=0, le=5)
    comment: str = Field("", max_length=500)

    @field_validator("food_quality", "delivery_time")
    @classmethod
    def _zero_is_unset(cls, v: Optional[int]) -> Optional[int]:
        return v or None


class FeedbackOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    user_id: int
    restaurant_id: int
    rating: int
    food_quality: Optional[int] = None
    delivery_time: Optional[int] = None
    comment: str = ""
    created_at: Optional[datetime] = None

    @classmethod
    def from_feedback(cls, f: Feedback) -> "FeedbackOut":
        return cls.model_validate(f)
