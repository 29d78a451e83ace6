"""Services for the restaurant, order and location collections."""

from __future__ import annotations

import logging
from typing import Protocol

from .catalog import Location, Order, OrderStatus, Restaurant
from .contracts import CreateOrderInput, CreateRestaurantInput, SaveLocationInput
from .errors import NotFound, ValidationError

logger = logging.getLogger(__name__)

STARTER_RESTAURANTS: tuple[tuple[str, str, str], ...] = (
    ("KFC", "Rosebank", "Fried Chicken"),
    ("McDonald's", "Sandton", "Fast Food"),
    ("Simply Asia", "Midrand", "Thai"),
    ("Panarottis", "Fourways", "Pizza"),
    ("Piato", "Melrose Arch", "Greek"),
    ("Spur", "Randburg", "Grill"),
    ("Ocean Basket", "Bryanston", "Seafood"),
    ("RocoMamas", "Parkhurst", "Burgers"),
    ("Debonairs", "Alexandra", "Pizza"),
)


class RestaurantStore(Protocol):
    async def list_restaurants(self) -> list[Restaurant]: ...

    async def create(self, payload: CreateRestaurantInput) -> Restaurant: ...

    async def create_many(self, payloads: list[CreateRestaurantInput]) -> list[Restaurant]: ...


class OrderStore(Protocol):
    async def create(self, payload: CreateOrderInput) -> Order: ...

    async def list_by_username(self, username: str) -> list[Order]: ...

    async def find_by_id(self, order_id: str) -> Order | None: ...

    async def update_status(self, order_id: str, status: OrderStatus) -> Order | None: ...

    async def delete(self, order_id: str) -> bool: ...


class LocationStore(Protocol):
    async def upsert(self, payload: SaveLocationInput) -> Location: ...

    async def find_by_username(self, username: str) -> Location | None: ...


class RestaurantService:
    def __init__(self, repository: RestaurantStore) -> None:
        self._repository = repository

    async def list_restaurants(self) -> list[Restaurant]:
        return await self._repository.list_restaurants()

    async def create(self, payload: CreateRestaurantInput) -> Restaurant:
        if not payload.name or not payload.name.strip():
            raise ValidationError("name is required")
        return await self._repository.create(payload)

    async def seed_defaults(self) -> list[Restaurant]:
        """Insert the starter catalogue used by fresh deployments."""
        created = await self._repository.create_many(
            [
                CreateRestaurantInput(name=name, description=f"{cuisine} in {area}")
                for name, area, cuisine in STARTER_RESTAURANTS
            ]
        )
        logger.info("seeded %d restaurants", len(created))
        return created


class OrderService:
    """Order placement and lifecycle; checkout is the pending -> paid flip."""

    def __init__(self, repository: OrderStore) -> None:
        self._repository = repository

    async def place_order(self, payload: CreateOrderInput) -> Order:
        if not payload.username.strip():
            raise ValidationError("username is required")
        order = await self._repository.create(payload)
        logger.info("order %s placed for %s", order.order_id, order.username)
        return order

    async def list_orders(self, username: str) -> list[Order]:
        return await self._repository.list_by_username(username)

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        order = await self._repository.update_status(order_id, status)
        if order is None:
            raise NotFound("order not found")
        return order

    async def delete(self, order_id: str) -> None:
        if not await self._repository.delete(order_id):
            raise NotFound("order not found")

    async def checkout(self, order_id: str) -> Order:
        """Mark a pending order paid; paying an already paid order is a no-op."""
        order = await self._repository.find_by_id(order_id)
        if order is None:
            raise NotFound("order not found")
        if order.status is OrderStatus.paid:
            return order
        if order.status is not OrderStatus.pending:
            raise ValidationError(f"order is {order.status.value}")
        paid = await self._repository.update_status(order_id, OrderStatus.paid)
        if paid is None:
            raise NotFound("order not found")
        logger.info("order %s paid", order_id)
        return paid


class LocationService:
    def __init__(self, repository: LocationStore) -> None:
        self._repository = repository

    async def save(self, payload: SaveLocationInput) -> Location:
        if not payload.username.strip() or not payload.address.strip():
            raise ValidationError("username and address are required")
        return await self._repository.upsert(payload)

    async def get(self, username: str) -> Location:
        location = await self._repository.find_by_username(username)
        if location is None:
            raise NotFound("location not found")
        return location
