"""
Stockroom: event definitions

Facts published after a change has been committed. Names are past tense
and payloads are never modified once built.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .models import Money

INVENTORY_CHANNEL = "inventory_events"
ORDER_CHANNEL = "order_events"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProductAdded(BaseModel):
    """A product was registered"""
    product_id: str
    name: str
    stock: int
    price: Money
    timestamp: datetime = Field(default_factory=_now)


class StockAdjusted(BaseModel):
    """Stock was changed by an explicit adjustment"""
    product_id: str
    delta: int
    stock: int
    timestamp: datetime = Field(default_factory=_now)


class OrderCreated(BaseModel):
    """An order was placed and its units taken out of stock"""
    order_id: int
    product_id: str
    quantity: int
    total: Money
    status: str
    timestamp: datetime = Field(default_factory=_now)


class OrderStatusUpdated(BaseModel):
    """An order's status was overwritten"""
    order_id: int
    status: str
    timestamp: datetime = Field(default_factory=_now)
