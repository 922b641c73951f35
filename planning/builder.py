"""
Purpose: Builds the initial fair Plan (the "PlanBuilder").
What it does:
Accepts the full rider and order sets and deals the orders out in strict round
robin: the i-th order goes to the rider at input position i mod len(riders).

Every rider receives either floor(len(orders) / len(riders)) orders or one more,
so the fairness invariant holds by construction. With fewer orders than riders
the trailing riders keep an empty sequence; that is valid output, not an error.
"""

from __future__ import annotations

import logging
from typing import Sequence

from orders.models import Order
from riders.models import Rider

from .plan import Plan, PlanningError

logger = logging.getLogger(__name__)


class EmptyRiderSetError(PlanningError):
    """Raised when a plan is requested without any rider to hold the orders."""
    pass


def build_plan(riders: Sequence[Rider], orders: Sequence[Order]) -> Plan:
    """
    Pure function of its inputs.

    Rider and order ids are assumed unique within their collections. Duplicate
    rider ids collapse into one key; that is the caller's problem, not ours.
    """
    # Checked before any dealing so an empty rider set can never spin a loop.
    if not riders:
        raise EmptyRiderSetError("Cannot build a plan without riders.")

    plan: Plan = {}
    for rider in riders:
        plan.setdefault(rider.id, [])

    for order_index, order in enumerate(orders):
        rider = riders[order_index % len(riders)]
        plan[rider.id].append(order.id)

    logger.debug(
        "Built plan: %d riders, %d orders, %d riders left empty",
        len(plan),
        len(orders),
        sum(1 for order_ids in plan.values() if not order_ids),
    )
    return plan
