"""
Purpose: Package entry + stable exports.
What it does:

Marks orders as a Python package and re-exports the public API so other
modules can do:

from orders import Order

Should not contain business logic.
"""
from .models import Order, OrderId

__all__ = ["Order",
           "OrderId",
           ]
