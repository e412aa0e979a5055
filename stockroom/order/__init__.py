"""Order workflow: placing orders against stock and tracking their status."""

from .commands import create_order, update_order_status
from .queries import get_order, list_orders

__all__ = ["create_order", "get_order", "list_orders", "update_order_status"]
