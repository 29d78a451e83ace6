"""Records for the restaurant, order and location collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    delivered = "delivered"
    cancelled = "cancelled"


@dataclass(slots=True)
class Restaurant:
    restaurant_id: str
    name: str
    description: str | None
    image: str | None
    created_at: datetime


@dataclass(slots=True)
class OrderItem:
    """One line of an order; stored inside the order's JSON document."""

    name: str
    quantity: int
    price: float
    restaurant_id: str | None = None

    def to_document(self) -> dict:
        return {
            "restaurant_id": self.restaurant_id,
            "name": self.name,
            "quantity": self.quantity,
            "price": self.price,
        }

    @classmethod
    def from_document(cls, document: dict) -> "OrderItem":
        return cls(
            name=document["name"],
            quantity=int(document["quantity"]),
            price=float(document["price"]),
            restaurant_id=document.get("restaurant_id"),
        )


@dataclass(slots=True)
class Order:
    order_id: str
    username: str
    total: float
    status: OrderStatus
    created_at: datetime
    items: list[OrderItem] = field(default_factory=list)


@dataclass(slots=True)
class Location:
    username: str
    address: str
    lat: float
    lng: float
    updated_at: datetime
