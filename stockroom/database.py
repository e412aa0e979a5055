"""
Stockroom: database wiring

One async engine per process, one AsyncSession per request. Queries are
written as plain SQL with sqlalchemy.text(); the table definitions below
exist so the schema can be created on both PostgreSQL and SQLite.
"""

import logging
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    func,
)
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)

metadata = MetaData()

products = Table(
    "products",
    metadata,
    Column("id", String(255), primary_key=True),
    Column("name", String(100), nullable=False),
    # no CHECK (stock >= 0): administrative corrections may go negative
    Column("stock", Integer, nullable=False),
    Column("price", Numeric(10, 2), nullable=False),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("product_id", String(255), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("total", Numeric(10, 2), nullable=False),
    Column("status", String(50), nullable=False, server_default="Pending"),
    Column("created_at", DateTime, server_default=func.now()),
)

metrics = Table(
    "metrics",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("value", Float, nullable=False),
    Column("time", BigInteger, nullable=False),
)

CENT = Decimal("0.01")


def create_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False)


def session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the products, orders and metrics tables if they are missing."""
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


def to_money(value) -> Decimal:
    """
    Normalise a NUMERIC column value to a two-place Decimal.

    asyncpg hands back Decimal, SQLite hands back int or float; going
    through str() keeps 2.5 as 2.50 rather than its binary expansion.
    """
    return Decimal(str(value)).quantize(CENT)
