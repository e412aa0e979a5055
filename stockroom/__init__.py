"""
Stockroom: inventory and order management service.

Products and their stock live in the inventory package, order placement
in the order package, numeric metrics in analytics. main.create_app()
wires them behind a FastAPI application.
"""

__version__ = "0.1.0"
