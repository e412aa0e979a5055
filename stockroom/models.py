"""
Stockroom: domain records

Product, Order and Metric as they are stored and returned. Money is kept
as Decimal internally and written out as a plain JSON number.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]

PENDING = "Pending"


class Product(BaseModel):
    id: str
    name: str
    # unbounded: adjust_stock may push it below zero
    stock: int
    price: Money


class NewProduct(Product):
    """What a caller submits to register a product."""
    stock: int = Field(ge=0)


class OrderCandidate(BaseModel):
    """What a caller submits to place an order."""
    product_id: str
    quantity: int = Field(gt=0)


class Order(BaseModel):
    id: int
    product_id: str
    quantity: int
    total: Money
    status: str = PENDING


class Metric(BaseModel):
    name: str
    value: float
    time: int
