"""
Order: read side
"""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import to_money
from ..errors import NotFound, StorageFailure
from ..models import Order


def _order_from_row(row) -> Order:
    return Order(
        id=row.id,
        product_id=row.product_id,
        quantity=row.quantity,
        total=to_money(row.total),
        status=row.status,
    )


async def get_order(session: AsyncSession, order_id: int) -> Order:
    try:
        result = await session.execute(
            text("SELECT id, product_id, quantity, total, status FROM orders WHERE id = :id"),
            {"id": order_id},
        )
        row = result.first()
    except SQLAlchemyError as exc:
        raise StorageFailure("could not fetch order") from exc
    if row is None:
        raise NotFound(f"order {order_id} not found")
    return _order_from_row(row)


async def list_orders(session: AsyncSession) -> list[Order]:
    """All orders, oldest first."""
    try:
        result = await session.execute(
            text("SELECT id, product_id, quantity, total, status FROM orders ORDER BY id"),
        )
        rows = result.fetchall()
    except SQLAlchemyError as exc:
        raise StorageFailure("could not fetch orders") from exc
    return [_order_from_row(row) for row in rows]
