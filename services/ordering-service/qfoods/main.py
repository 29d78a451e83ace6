"""FastAPI application wiring for the ordering service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import AsyncConnectionPool
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .api.errors import register_exception_handlers
from .api.ordering import router as ordering_router
from .api.routes import router as auth_router
from .config import Settings, get_settings
from .domain.ordering import LocationService, OrderService, RestaurantService
from .domain.service import AccountService
from .repository import (
    AccountRepository,
    LocationRepository,
    OrderRepository,
    RestaurantRepository,
    ensure_schema,
)
from .security.redis_throttle import RedisLoginThrottle
from .security.throttle import LoginThrottle, SlidingWindowLoginThrottle

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def _build_login_throttle(settings: Settings) -> tuple[LoginThrottle, Redis | None]:
    """Instantiate the configured throttle backend, preferring Redis when reachable."""
    if settings.login_throttle_backend == "redis" and settings.redis_url:
        client = Redis.from_url(settings.redis_url)
        try:
            await client.ping()
        except (RedisError, OSError) as exc:
            logger.warning("redis login throttle unavailable, falling back to in-memory: %s", exc)
            await client.aclose()
        else:
            logger.info("login throttle configured for redis backend")
            throttle = RedisLoginThrottle(
                client,
                max_failures=settings.login_max_failures,
                window_seconds=settings.login_failure_window_seconds,
            )
            return throttle, client

    logger.info("login throttle using in-memory backend")
    return (
        SlidingWindowLoginThrottle(
            max_failures=settings.login_max_failures,
            window_seconds=settings.login_failure_window_seconds,
        ),
        None,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the Postgres pool and build services for the app lifecycle."""
    pool = AsyncConnectionPool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        timeout=settings.db_pool_timeout_seconds,
        open=False,
    )
    await pool.open()
    await ensure_schema(pool)
    throttle, redis_client = await _build_login_throttle(settings)

    app.state.pool = pool
    app.state.account_service = AccountService(AccountRepository(pool), throttle)
    app.state.restaurant_service = RestaurantService(RestaurantRepository(pool))
    app.state.order_service = OrderService(OrderRepository(pool))
    app.state.location_service = LocationService(LocationRepository(pool))
    logger.info("%s %s ready", settings.app_name, settings.version)
    try:
        yield
    finally:
        if redis_client is not None:
            await redis_client.aclose()
        await pool.close()
        logger.info("store connections closed")


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)
register_exception_handlers(app)


@app.get("/healthz", tags=["health"])
def healthz() -> dict[str, str]:
    """Return a minimal readiness indicator used by orchestration systems."""
    return {"status": "ok"}


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(auth_router)
app.include_router(ordering_router)
