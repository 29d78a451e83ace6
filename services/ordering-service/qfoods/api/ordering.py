"""HTTP routes for restaurants, orders, checkout and delivery locations.

Service errors raised here are rendered by the handlers in ``api.errors``.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from ..domain.catalog import Location, Order, OrderItem, OrderStatus, Restaurant
from ..domain.contracts import CreateOrderInput, CreateRestaurantInput, SaveLocationInput
from ..domain.ordering import LocationService, OrderService, RestaurantService

router = APIRouter()


class MessageResponse(BaseModel):
    message: str


class RestaurantRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    image: str | None = None


class RestaurantResponse(BaseModel):
    restaurant_id: str
    name: str
    description: str | None
    image: str | None
    created_at: datetime

    @classmethod
    def from_domain(cls, restaurant: Restaurant) -> "RestaurantResponse":
        return cls(
            restaurant_id=restaurant.restaurant_id,
            name=restaurant.name,
            description=restaurant.description,
            image=restaurant.image,
            created_at=restaurant.created_at,
        )


class RestaurantCreatedResponse(BaseModel):
    message: str
    restaurant_id: str


class SeedResponse(BaseModel):
    message: str
    inserted: int


class OrderItemPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    restaurant_id: str | None = Field(default=None, alias="restaurantId")
    name: str
    quantity: int = Field(default=1, ge=1)
    price: float = Field(ge=0)


class OrderRequest(BaseModel):
    username: str
    items: list[OrderItemPayload] = Field(default_factory=list)
    total: float = Field(ge=0)


class OrderResponse(BaseModel):
    order_id: str
    username: str
    items: list[OrderItemPayload]
    total: float
    status: OrderStatus
    created_at: datetime

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            order_id=order.order_id,
            username=order.username,
            items=[
                OrderItemPayload(
                    restaurant_id=item.restaurant_id,
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                )
                for item in order.items
            ],
            total=order.total,
            status=order.status,
            created_at=order.created_at,
        )


class OrderCreatedResponse(BaseModel):
    message: str
    order_id: str


class OrderStatusRequest(BaseModel):
    status: OrderStatus


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(alias="orderId", min_length=1)


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    order_id: str = Field(alias="orderId")


class LocationRequest(BaseModel):
    username: str
    address: str
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class LocationResponse(BaseModel):
    username: str
    address: str
    lat: float
    lng: float
    updated_at: datetime

    @classmethod
    def from_domain(cls, location: Location) -> "LocationResponse":
        return cls(
            username=location.username,
            address=location.address,
            lat=location.lat,
            lng=location.lng,
            updated_at=location.updated_at,
        )


def get_restaurant_service(request: Request) -> RestaurantService:
    return request.app.state.restaurant_service


def get_order_service(request: Request) -> OrderService:
    return request.app.state.order_service


def get_location_service(request: Request) -> LocationService:
    return request.app.state.location_service


@router.get("/restaurants", response_model=list[RestaurantResponse], tags=["restaurants"])
async def list_restaurants(
    service: RestaurantService = Depends(get_restaurant_service),
) -> list[RestaurantResponse]:
    return [RestaurantResponse.from_domain(r) for r in await service.list_restaurants()]


@router.post(
    "/restaurants",
    response_model=RestaurantCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["restaurants"],
)
async def create_restaurant(
    payload: RestaurantRequest,
    service: RestaurantService = Depends(get_restaurant_service),
) -> RestaurantCreatedResponse:
    restaurant = await service.create(
        CreateRestaurantInput(
            name=payload.name,
            description=payload.description,
            image=payload.image,
        )
    )
    return RestaurantCreatedResponse(
        message="restaurant created", restaurant_id=restaurant.restaurant_id
    )


@router.post("/restaurants/seed", response_model=SeedResponse, tags=["restaurants"])
async def seed_restaurants(
    service: RestaurantService = Depends(get_restaurant_service),
) -> SeedResponse:
    """Load the starter restaurant catalogue."""
    created = await service.seed_defaults()
    return SeedResponse(message="restaurants added", inserted=len(created))


@router.post(
    "/orders",
    response_model=OrderCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["orders"],
)
async def place_order(
    payload: OrderRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderCreatedResponse:
    order = await service.place_order(
        CreateOrderInput(
            username=payload.username,
            total=payload.total,
            items=[
                OrderItem(
                    name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    restaurant_id=item.restaurant_id,
                )
                for item in payload.items
            ],
        )
    )
    return OrderCreatedResponse(message="order placed successfully", order_id=order.order_id)


@router.get("/orders/{username}", response_model=list[OrderResponse], tags=["orders"])
async def list_orders(
    username: str,
    service: OrderService = Depends(get_order_service),
) -> list[OrderResponse]:
    """Return a user's orders, newest first."""
    return [OrderResponse.from_domain(order) for order in await service.list_orders(username)]


@router.put("/orders/{order_id}", response_model=OrderResponse, tags=["orders"])
async def update_order(
    order_id: str,
    payload: OrderStatusRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_domain(await service.update_status(order_id, payload.status))


@router.delete("/orders/{order_id}", response_model=MessageResponse, tags=["orders"])
async def delete_order(
    order_id: str,
    service: OrderService = Depends(get_order_service),
) -> MessageResponse:
    await service.delete(order_id)
    return MessageResponse(message="order deleted")


@router.post("/checkout", response_model=CheckoutResponse, tags=["orders"])
async def checkout(
    payload: CheckoutRequest,
    service: OrderService = Depends(get_order_service),
) -> CheckoutResponse:
    """Mark the order as paid. No payment provider is involved."""
    order = await service.checkout(payload.order_id)
    return CheckoutResponse(message="payment successful", order_id=order.order_id)


@router.post(
    "/location",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["location"],
)
async def save_location(
    payload: LocationRequest,
    service: LocationService = Depends(get_location_service),
) -> MessageResponse:
    await service.save(
        SaveLocationInput(
            username=payload.username,
            address=payload.address,
            lat=payload.lat,
            lng=payload.lng,
        )
    )
    return MessageResponse(message="location saved")


@router.get("/location/{username}", response_model=LocationResponse, tags=["location"])
async def get_location(
    username: str,
    service: LocationService = Depends(get_location_service),
) -> LocationResponse:
    return LocationResponse.from_domain(await service.get(username))
