from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Protocol

import sqlalchemy as sa
import structlog
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from sqlalchemy.schema import CreateTable

from db import schema
from db.passwords import DEFAULT_ROUNDS, hash_password
from db.placeholder_data import PlaceholderDataset, placeholder_dataset
from db.settings import SETTINGS


logger = structlog.get_logger()

SEED_MESSAGE = "Database seeded successfully"


class SeedError(Exception):
    """Seeding failed and the transaction was rolled back. `message` is the cause's message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SeedExecutor(Protocol):
    async def execute(self, statement: Any) -> Any: ...


class SeedDatabase(Protocol):
    def transaction(self) -> AbstractAsyncContextManager[SeedExecutor]: ...


class EngineDatabase:
    """SeedDatabase over an AsyncEngine: commit on clean exit, roll back on error."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SeedExecutor]:
        async with self._engine.begin() as conn:
            yield conn


@dataclass(frozen=True)
class SeedResult:
    message: str
    counts: dict[str, int] = field(default_factory=dict)


def _error_message(exc: BaseException) -> str:
    # Report the driver's own message rather than SQLAlchemy's wrapper text.
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        exc = exc.orig
        # SQLAlchemy 2.0's asyncpg adapter prefixes the class name; the driver error is chained.
        if exc.__cause__ is not None:
            exc = exc.__cause__
    return str(exc) or exc.__class__.__name__


def _conflict_skip_insert(table: sa.Table, row: dict[str, Any], *, conflict_on: list[str] | None = None) -> Any:
    # conflict_on=None skips on any unique violation.
    return pg_insert(table).values(**row).on_conflict_do_nothing(index_elements=conflict_on)


class Seeder:
    def __init__(self, dataset: PlaceholderDataset, *, hash_rounds: int = DEFAULT_ROUNDS) -> None:
        self._dataset = dataset
        self._hash_rounds = hash_rounds

    async def seed(self, database: SeedDatabase) -> SeedResult:
        """
        Create the dashboard tables if missing and insert the dataset, all in one transaction.

        Order is users, customers, invoices, revenue. Rows that already exist are skipped,
        so running this twice leaves the tables unchanged.
        """
        logger.info("seed_started", tables=["users", "customers", "invoices", "revenue"])
        try:
            async with database.transaction() as tx:
                await tx.execute(schema.UUID_EXTENSION_DDL)
                counts = {
                    "users": await self._seed_users(tx),
                    "customers": await self._seed_customers(tx),
                    "invoices": await self._seed_invoices(tx),
                    "revenue": await self._seed_revenue(tx),
                }
        except Exception as e:
            message = _error_message(e)
            logger.error("seed_failed", error=message)
            raise SeedError(message) from e

        logger.info("seed_finished", counts=counts)
        return SeedResult(message=SEED_MESSAGE, counts=counts)

    async def _create(self, tx: SeedExecutor, table: sa.Table) -> None:
        await tx.execute(CreateTable(table, if_not_exists=True))

    async def _seed_users(self, tx: SeedExecutor) -> int:
        await self._create(tx, schema.users)
        for user in self._dataset.users:
            # bcrypt is CPU-bound; keep it off the event loop.
            hashed = await asyncio.to_thread(hash_password, user.password, self._hash_rounds)
            await tx.execute(
                _conflict_skip_insert(
                    schema.users,
                    dict(id=user.id, name=user.name, email=user.email, password=hashed),
                )
            )
        logger.info("seed_table_seeded", table="users", records=len(self._dataset.users))
        return len(self._dataset.users)

    async def _seed_customers(self, tx: SeedExecutor) -> int:
        await self._create(tx, schema.customers)
        for customer in self._dataset.customers:
            await tx.execute(
                _conflict_skip_insert(
                    schema.customers,
                    dict(id=customer.id, name=customer.name, email=customer.email, image_url=customer.image_url),
                    conflict_on=["id"],
                )
            )
        logger.info("seed_table_seeded", table="customers", records=len(self._dataset.customers))
        return len(self._dataset.customers)

    async def _seed_invoices(self, tx: SeedExecutor) -> int:
        await self._create(tx, schema.invoices)
        for invoice in self._dataset.invoices:
            await tx.execute(
                _conflict_skip_insert(
                    schema.invoices,
                    dict(
                        id=invoice.id,
                        customer_id=invoice.customer_id,
                        amount=invoice.amount,
                        status=invoice.status,
                        date=invoice.date,
                    ),
                    conflict_on=["id"],
                )
            )
        logger.info("seed_table_seeded", table="invoices", records=len(self._dataset.invoices))
        return len(self._dataset.invoices)

    async def _seed_revenue(self, tx: SeedExecutor) -> int:
        await self._create(tx, schema.revenue)
        for entry in self._dataset.revenue:
            await tx.execute(
                _conflict_skip_insert(
                    schema.revenue,
                    dict(month=entry.month, revenue=entry.revenue),
                    conflict_on=["month"],
                )
            )
        logger.info("seed_table_seeded", table="revenue", records=len(self._dataset.revenue))
        return len(self._dataset.revenue)


def normalize_database_url(database_url: str, ssl: str) -> tuple[sa.URL, str]:
    """
    Coerce common Postgres URL spellings onto the asyncpg driver.

    Hosted providers often hand out `postgres://...?sslmode=require`; asyncpg takes `ssl`
    as a connect argument instead, so a `sslmode` query parameter overrides `ssl`.
    """
    url = sa.make_url(database_url)
    if url.drivername in ("postgres", "postgresql", "postgresql+psycopg", "postgresql+psycopg2"):
        url = url.set(drivername="postgresql+asyncpg")
    sslmode = url.query.get("sslmode")
    if sslmode:
        url = url.difference_update_query(["sslmode"])
        ssl = str(sslmode)
    return url, ssl


def create_engine(database_url: str, ssl: str) -> AsyncEngine:
    url, ssl = normalize_database_url(database_url, ssl)
    return create_async_engine(url, pool_pre_ping=True, poolclass=NullPool, connect_args={"ssl": ssl})


async def _run(database_url: str, ssl: str, hash_rounds: int) -> SeedResult:
    engine = create_engine(database_url, ssl)
    try:
        return await Seeder(placeholder_dataset(), hash_rounds=hash_rounds).seed(EngineDatabase(engine))
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the dashboard database with placeholder data.")
    parser.add_argument("--database-url", default=SETTINGS.postgres_url)
    parser.add_argument("--ssl", default=SETTINGS.postgres_ssl, help="asyncpg ssl mode (require, disable, ...).")
    parser.add_argument("--hash-rounds", type=int, default=SETTINGS.hash_rounds)
    args = parser.parse_args()
    try:
        result = asyncio.run(_run(args.database_url, args.ssl, args.hash_rounds))
    except SeedError as e:
        print(json.dumps({"error": e.message}), file=sys.stderr)
        raise SystemExit(1) from e

    print(json.dumps({"message": result.message, "counts": result.counts}, indent=2))


if __name__ == "__main__":
    main()
