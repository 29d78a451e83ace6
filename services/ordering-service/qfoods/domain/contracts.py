"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field

from .catalog import OrderItem


@dataclass(slots=True)
class SignupInput:
    """Raw signup fields; presence is checked by the signup flow itself."""

    username: str | None
    email: str | None
    password: str | None


@dataclass(slots=True)
class CreateRestaurantInput:
    name: str | None
    description: str | None = None
    image: str | None = None


@dataclass(slots=True)
class CreateOrderInput:
    username: str
    total: float
    items: list[OrderItem] = field(default_factory=list)


@dataclass(slots=True)
class SaveLocationInput:
    username: str
    address: str
    lat: float
    lng: float
