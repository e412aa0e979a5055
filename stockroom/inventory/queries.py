"""
Inventory: read side

Plain lookups against the products table. Nothing here commits.
"""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import to_money
from ..errors import NotFound, StorageFailure
from ..models import Product


def _product_from_row(row) -> Product:
    return Product(id=row.id, name=row.name, stock=row.stock, price=to_money(row.price))


async def get_stock(session: AsyncSession, product_id: str) -> int:
    try:
        result = await session.execute(
            text("SELECT stock FROM products WHERE id = :id"),
            {"id": product_id},
        )
        row = result.first()
    except SQLAlchemyError as exc:
        raise StorageFailure("could not check stock") from exc
    if row is None:
        raise NotFound(f"product {product_id} not found")
    return row.stock


async def get_product(session: AsyncSession, product_id: str) -> Product:
    try:
        result = await session.execute(
            text("SELECT id, name, stock, price FROM products WHERE id = :id"),
            {"id": product_id},
        )
        row = result.first()
    except SQLAlchemyError as exc:
        raise StorageFailure("could not fetch product") from exc
    if row is None:
        raise NotFound(f"product {product_id} not found")
    return _product_from_row(row)


async def list_products(session: AsyncSession) -> list[Product]:
    try:
        result = await session.execute(
            text("SELECT id, name, stock, price FROM products ORDER BY id"),
        )
        rows = result.fetchall()
    except SQLAlchemyError as exc:
        raise StorageFailure("could not fetch products") from exc
    return [_product_from_row(row) for row in rows]
