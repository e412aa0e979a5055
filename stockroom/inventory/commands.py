"""
Inventory: write side

add_product and adjust_stock are complete units of work: they commit and
then publish an event. decrement_stock is the building block the order
workflow uses inside its own transaction, so it never commits.
"""

import logging

from sqlalchemy import Numeric, bindparam, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import DuplicateKey, NotFound, StorageFailure
from ..events import INVENTORY_CHANNEL, ProductAdded, StockAdjusted
from ..models import Product
from ..publisher import EventPublisher

logger = logging.getLogger(__name__)


async def add_product(
    session: AsyncSession,
    publisher: EventPublisher,
    product: Product,
) -> Product:
    """
    Register a new product.

    The primary key on products.id rejects a second product with the same
    id; the existing row is left as it was.
    """
    try:
        await session.execute(
            text("""
                INSERT INTO products (id, name, stock, price)
                VALUES (:id, :name, :stock, :price)
            """).bindparams(bindparam("price", type_=Numeric(10, 2))),
            {
                "id": product.id,
                "name": product.name,
                "stock": product.stock,
                "price": product.price,
            },
        )
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateKey(f"product {product.id} already exists") from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StorageFailure("could not add product") from exc

    logger.info("Product %s added with stock %d", product.id, product.stock)
    await publisher.publish(
        INVENTORY_CHANNEL,
        ProductAdded(
            product_id=product.id,
            name=product.name,
            stock=product.stock,
            price=product.price,
        ),
    )
    return product


async def adjust_stock(
    session: AsyncSession,
    publisher: EventPublisher,
    product_id: str,
    delta: int,
) -> int:
    """
    Add delta (possibly negative) to a product's stock and return the new level.

    No lower bound is enforced here; restocking corrections are allowed to
    take stock below zero.
    """
    try:
        result = await session.execute(
            text("""
                UPDATE products
                SET stock = stock + :delta
                WHERE id = :id
                RETURNING stock
            """),
            {"delta": delta, "id": product_id},
        )
        row = result.first()
        if row is None:
            await session.rollback()
            raise NotFound(f"product {product_id} not found")
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StorageFailure("could not update stock") from exc

    logger.info("Stock of %s adjusted by %+d to %d", product_id, delta, row.stock)
    await publisher.publish(
        INVENTORY_CHANNEL,
        StockAdjusted(product_id=product_id, delta=delta, stock=row.stock),
    )
    return row.stock


async def decrement_stock(session: AsyncSession, product_id: str, quantity: int) -> bool:
    """
    Take quantity units out of stock only if that many are available.

    Check and update happen in one statement, so two concurrent callers can
    never both succeed on the same units. Returns whether the decrement was
    applied. The caller owns the transaction.
    """
    try:
        result = await session.execute(
            text("""
                UPDATE products
                SET stock = stock - :qty
                WHERE id = :id AND stock >= :qty
            """),
            {"qty": quantity, "id": product_id},
        )
    except SQLAlchemyError as exc:
        raise StorageFailure("could not update stock") from exc
    return result.rowcount == 1
