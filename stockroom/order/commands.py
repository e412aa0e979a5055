"""
Order: write side

Placing an order touches two tables: the product's stock goes down and a
new orders row appears. Both changes are made in one transaction so that
neither can exist without the other.
"""

import logging

from sqlalchemy import Numeric, bindparam, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .. import inventory
from ..database import CENT
from ..errors import InsufficientStock, NotFound, StockroomError, StorageFailure
from ..events import ORDER_CHANNEL, OrderCreated, OrderStatusUpdated
from ..models import PENDING, Order, OrderCandidate
from ..publisher import EventPublisher
from .queries import get_order

logger = logging.getLogger(__name__)


async def create_order(
    session: AsyncSession,
    publisher: EventPublisher,
    candidate: OrderCandidate,
) -> Order:
    """
    Order creation command

    1. Read the current stock (NotFound if the product is unknown)
    2. Reject with InsufficientStock if it cannot cover the quantity
    3. Read the product for its price and compute the total
    4. Take the units out of stock, only if they are still there
    5. Insert the order row with status Pending
    6. Commit, then publish OrderCreated

    Any failure before the commit rolls back everything, stock included.
    """
    product_id, quantity = candidate.product_id, candidate.quantity
    try:
        stock = await inventory.get_stock(session, product_id)
        if stock < quantity:
            raise InsufficientStock(product_id, quantity, stock)

        product = await inventory.get_product(session, product_id)
        total = (product.price * quantity).quantize(CENT)

        # another order may have taken the units since the check above
        if not await inventory.decrement_stock(session, product_id, quantity):
            current = await inventory.get_stock(session, product_id)
            raise InsufficientStock(product_id, quantity, current)

        try:
            result = await session.execute(
                text("""
                    INSERT INTO orders (product_id, quantity, total, status)
                    VALUES (:product_id, :quantity, :total, :status)
                    RETURNING id
                """).bindparams(bindparam("total", type_=Numeric(10, 2))),
                {
                    "product_id": product_id,
                    "quantity": quantity,
                    "total": total,
                    "status": PENDING,
                },
            )
            order_id = result.scalar_one()
            await session.commit()
        except SQLAlchemyError as exc:
            raise StorageFailure("could not create order") from exc
    except InsufficientStock as exc:
        await session.rollback()
        logger.warning("Order rejected: %s", exc)
        raise
    except StockroomError:
        await session.rollback()
        raise

    order = Order(
        id=order_id,
        product_id=product_id,
        quantity=quantity,
        total=total,
        status=PENDING,
    )
    logger.info(
        "Order %d created: %d x %s, total %s", order.id, quantity, product_id, total
    )
    await publisher.publish(
        ORDER_CHANNEL,
        OrderCreated(
            order_id=order.id,
            product_id=order.product_id,
            quantity=order.quantity,
            total=order.total,
            status=order.status,
        ),
    )
    return order


async def update_order_status(
    session: AsyncSession,
    publisher: EventPublisher,
    order_id: int,
    status: str,
) -> Order:
    """
    Overwrite an order's status.

    Any string is accepted and there is no transition check: a delivered
    order can go back to Pending.
    """
    try:
        result = await session.execute(
            text("UPDATE orders SET status = :status WHERE id = :id"),
            {"status": status, "id": order_id},
        )
        if result.rowcount == 0:
            await session.rollback()
            raise NotFound(f"order {order_id} not found")
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        raise StorageFailure("could not update order status") from exc

    logger.info("Order %d status set to %r", order_id, status)
    await publisher.publish(
        ORDER_CHANNEL,
        OrderStatusUpdated(order_id=order_id, status=status),
    )
    return await get_order(session, order_id)
