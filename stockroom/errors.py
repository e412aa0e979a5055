"""
Stockroom: domain errors

Raised by the inventory, order and analytics modules and translated to
HTTP responses in main.py.
"""


class StockroomError(Exception):
    """Base class for every error the domain layer raises."""


class NotFound(StockroomError):
    """The referenced product or order does not exist."""


class DuplicateKey(StockroomError):
    """A product with the same id is already registered."""


class InsufficientStock(StockroomError):
    """The order asks for more units than the product has in stock."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"insufficient stock for {product_id}: requested={requested}, available={available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class StorageFailure(StockroomError):
    """The database rejected or failed a statement; the cause is chained."""
