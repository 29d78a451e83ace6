"""Postgres-backed persistence for accounts and the ordering collections."""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator

import psycopg
from psycopg import AsyncConnection, AsyncCursor
from psycopg.errors import UniqueViolation
from psycopg.rows import tuple_row
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from .domain.account import Account
from .domain.catalog import Location, Order, OrderItem, OrderStatus, Restaurant
from .domain.contracts import CreateOrderInput, CreateRestaurantInput, SaveLocationInput
from .domain.errors import DuplicateKey, StoreUnavailable

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS accounts (
        username TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        secret TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS restaurants (
        restaurant_id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT,
        image TEXT,
        created_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS orders (
        order_id TEXT PRIMARY KEY,
        username TEXT NOT NULL,
        items JSONB NOT NULL DEFAULT '[]'::jsonb,
        total DOUBLE PRECISION NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        created_at TIMESTAMPTZ NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS orders_username_idx ON orders (username, created_at DESC)",
    """
    CREATE TABLE IF NOT EXISTS locations (
        username TEXT PRIMARY KEY,
        address TEXT NOT NULL,
        lat DOUBLE PRECISION NOT NULL,
        lng DOUBLE PRECISION NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
)


def _duplicate_field(exc: UniqueViolation) -> str:
    constraint = (exc.diag.constraint_name or "").lower()
    return "email" if "email" in constraint else "username"


class _PooledRepository:
    """Shared cursor handling that maps driver failures onto domain errors."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    @asynccontextmanager
    async def _cursor(self) -> AsyncIterator[tuple[AsyncConnection, AsyncCursor]]:
        try:
            async with self._pool.connection() as conn:
                async with conn.cursor(row_factory=tuple_row) as cur:
                    yield conn, cur
        except UniqueViolation as exc:
            field = _duplicate_field(exc)
            raise DuplicateKey(f"{field} already exists", field=field) from exc
        except (PoolTimeout, psycopg.OperationalError) as exc:
            logger.error("document store unavailable: %s", exc)
            raise StoreUnavailable("document store unavailable") from exc


async def ensure_schema(pool: AsyncConnectionPool) -> None:
    """Create the collection tables when they do not exist yet."""
    async with pool.connection() as conn:
        async with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                await cur.execute(statement)
        await conn.commit()


class AccountRepository(_PooledRepository):
    """Credential store keyed by username."""

    async def find_by_username(self, username: str) -> Account | None:
        """Return the account with exactly this username, or ``None``."""
        async with self._cursor() as (_, cur):
            await cur.execute(
                """
                SELECT username, email, secret, created_at
                FROM accounts
                WHERE username = %s
                """,
                (username,),
            )
            row = await cur.fetchone()
        if not row:
            return None
        return Account(*row)

    async def insert(self, account: Account) -> Account:
        """Persist a new account; unique constraints raise ``DuplicateKey``."""
        async with self._cursor() as (conn, cur):
            await cur.execute(
                """
                INSERT INTO accounts (username, email, secret, created_at)
                VALUES (%s, %s, %s, %s)
                RETURNING username, email, secret, created_at
                """,
                (account.username, account.email, account.secret, account.created_at),
            )
            row = await cur.fetchone()
            await conn.commit()
        return Account(*row)


class RestaurantRepository(_PooledRepository):
    async def list_restaurants(self) -> list[Restaurant]:
        async with self._cursor() as (_, cur):
            await cur.execute(
                """
                SELECT restaurant_id, name, description, image, created_at
                FROM restaurants
                ORDER BY created_at, name
                """
            )
            rows = await cur.fetchall()
        return [Restaurant(*row) for row in rows]

    async def create_many(self, payloads: list[CreateRestaurantInput]) -> list[Restaurant]:
        """Insert every payload in a single transaction."""
        now = datetime.now(timezone.utc)
        created: list[Restaurant] = []
        async with self._cursor() as (conn, cur):
            for payload in payloads:
                await cur.execute(
                    """
                    INSERT INTO restaurants (restaurant_id, name, description, image, created_at)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING restaurant_id, name, description, image, created_at
                    """,
                    (str(uuid.uuid4()), payload.name, payload.description, payload.image, now),
                )
                created.append(Restaurant(*(await cur.fetchone())))
            await conn.commit()
        return created

    async def create(self, payload: CreateRestaurantInput) -> Restaurant:
        (restaurant,) = await self.create_many([payload])
        return restaurant


class OrderRepository(_PooledRepository):
    _COLUMNS = "order_id, username, total, status, created_at, items"

    async def create(self, payload: CreateOrderInput) -> Order:
        async with self._cursor() as (conn, cur):
            await cur.execute(
                f"""
                INSERT INTO orders (order_id, username, items, total, status, created_at)
                VALUES (%s, %s, %s, %s, %s, %s)
                RETURNING {self._COLUMNS}
                """,
                (
                    str(uuid.uuid4()),
                    payload.username,
                    Jsonb([item.to_document() for item in payload.items]),
                    payload.total,
                    OrderStatus.pending.value,
                    datetime.now(timezone.utc),
                ),
            )
            row = await cur.fetchone()
            await conn.commit()
        return self._map_record(row)

    async def list_by_username(self, username: str) -> list[Order]:
        """Return the user's orders, newest first."""
        async with self._cursor() as (_, cur):
            await cur.execute(
                f"""
                SELECT {self._COLUMNS}
                FROM orders
                WHERE username = %s
                ORDER BY created_at DESC
                """,
                (username,),
            )
            rows = await cur.fetchall()
        return [self._map_record(row) for row in rows]

    async def find_by_id(self, order_id: str) -> Order | None:
        async with self._cursor() as (_, cur):
            await cur.execute(
                f"SELECT {self._COLUMNS} FROM orders WHERE order_id = %s",
                (order_id,),
            )
            row = await cur.fetchone()
        return self._map_record(row) if row else None

    async def update_status(self, order_id: str, status: OrderStatus) -> Order | None:
        """Set the order status and return the updated order, or ``None`` when absent."""
        async with self._cursor() as (conn, cur):
            await cur.execute(
                f"""
                UPDATE orders
                SET status = %s
                WHERE order_id = %s
                RETURNING {self._COLUMNS}
                """,
                (status.value, order_id),
            )
            row = await cur.fetchone()
            await conn.commit()
        return self._map_record(row) if row else None

    async def delete(self, order_id: str) -> bool:
        async with self._cursor() as (conn, cur):
            await cur.execute("DELETE FROM orders WHERE order_id = %s", (order_id,))
            deleted = cur.rowcount > 0
            await conn.commit()
        return deleted

    def _map_record(self, row: tuple) -> Order:
        return Order(
            order_id=row[0],
            username=row[1],
            total=row[2],
            status=OrderStatus(row[3]),
            created_at=row[4],
            items=[OrderItem.from_document(doc) for doc in row[5] or []],
        )


class LocationRepository(_PooledRepository):
    async def upsert(self, payload: SaveLocationInput) -> Location:
        """Store the user's single location, replacing any previous one."""
        async with self._cursor() as (conn, cur):
            await cur.execute(
                """
                INSERT INTO locations (username, address, lat, lng, updated_at)
                VALUES (%s, %s, %s, %s, %s)
                ON CONFLICT (username) DO UPDATE
                SET address = EXCLUDED.address,
                    lat = EXCLUDED.lat,
                    lng = EXCLUDED.lng,
                    updated_at = EXCLUDED.updated_at
                RETURNING username, address, lat, lng, updated_at
                """,
                (
                    payload.username,
                    payload.address,
                    payload.lat,
                    payload.lng,
                    datetime.now(timezone.utc),
                ),
            )
            row = await cur.fetchone()
            await conn.commit()
        return Location(*row)

    async def find_by_username(self, username: str) -> Location | None:
        async with self._cursor() as (_, cur):
            await cur.execute(
                """
                SELECT username, address, lat, lng, updated_at
                FROM locations
                WHERE username = %s
                """,
                (username,),
            )
            row = await cur.fetchone()
        return Location(*row) if row else None
