"""Inventory store: products and their stock levels."""

from .commands import add_product, adjust_stock, decrement_stock
from .queries import get_product, get_stock, list_products

__all__ = [
    "add_product",
    "adjust_stock",
    "decrement_stock",
    "get_product",
    "get_stock",
    "list_products",
]
