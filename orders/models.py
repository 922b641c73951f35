"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines the Order data structure handed to the planner.

An order is identified by its id only. Pickup/dropoff details, timestamps and
statuses belong to the systems feeding the planner, not to the plan itself.

Rule: No planning logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass

OrderId = int


@dataclass(frozen=True)
class Order:
    """
    Represents a single delivery order waiting to be held by a rider.
    """

    id: OrderId

    @staticmethod
    def new(order_id: int | str) -> Order:
        return Order(id=int(order_id))
