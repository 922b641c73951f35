"""
Purpose: The Plan value and the invariant checks shared by builder and processor.
What it does:
- Defines Plan: rider id -> ordered list of order ids (list order is delivery order).
- Provides derived, explicitly sorted views (rider ids, order ids, loads) so no
  caller ever relies on dict iteration order for a decision.
- verify_plan() checks the global invariants and raises PlanInvariantError.

Rule: Helpers here never mutate their input. Anything that changes a plan works
on copy_plan(plan).
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional

from orders.models import OrderId
from riders.models import RiderId

Plan = Dict[RiderId, List[OrderId]]


class PlanningError(Exception):
    """Base class for every error raised by the planner."""
    pass


class PlanInvariantError(PlanningError):
    """Raised when a plan violates one of the global invariants."""
    pass


def copy_plan(plan: Plan) -> Plan:
    """
    New dict, new lists. Keeps the rider key order of the source.
    """
    return {rider_id: list(order_ids) for rider_id, order_ids in plan.items()}


def plan_order_ids(plan: Plan) -> List[OrderId]:
    """
    Every order id held in the plan, duplicates included (multiset view).
    """
    return [order_id for order_ids in plan.values() for order_id in order_ids]


def sorted_rider_ids(plan: Plan) -> List[RiderId]:
    return sorted(set(plan.keys()))


def sorted_order_ids(plan: Plan) -> List[OrderId]:
    return sorted(set(plan_order_ids(plan)))


def rider_loads(plan: Plan) -> Dict[RiderId, int]:
    """
    Number of orders currently held by each rider.
    """
    return {rider_id: len(order_ids) for rider_id, order_ids in plan.items()}


def find_order_holder(plan: Plan, order_id: OrderId) -> Optional[RiderId]:
    """
    Rider currently holding order_id, or None. Scans riders in ascending id
    order so the answer is stable even for a plan that breaks invariant 1.
    """
    for rider_id in sorted_rider_ids(plan):
        if order_id in plan[rider_id]:
            return rider_id
    return None


def load_spread(plan: Plan) -> int:
    """
    Difference between the busiest and the idlest rider (0 for an empty plan).
    """
    loads = rider_loads(plan).values()
    if not loads:
        return 0
    return max(loads) - min(loads)


def verify_plan(
    plan: Plan,
    *,
    require_fairness: bool = False,
    require_coverage: bool = False,
) -> None:
    """
    Raise PlanInvariantError on the first violated invariant.

    - No order id may appear more than once anywhere in the plan (always checked).
    - require_fairness: sequence lengths differ by at most one. Guaranteed right
      after build_plan(); cancellations are allowed to widen the spread later.
    - require_coverage: every rider holds at least one order. Only meaningful for
      plans built with at least as many orders as riders.
    """
    duplicates = sorted(
        order_id for order_id, count in Counter(plan_order_ids(plan)).items() if count > 1
    )
    if duplicates:
        raise PlanInvariantError(f"Orders assigned more than once: {duplicates}")

    if require_fairness:
        spread = load_spread(plan)
        if spread > 1:
            loads = rider_loads(plan)
            raise PlanInvariantError(
                f"Unfair plan: min {min(loads.values())} orders, max {max(loads.values())} orders"
            )

    if require_coverage:
        idle = [rider_id for rider_id in sorted_rider_ids(plan) if not plan[rider_id]]
        if idle:
            raise PlanInvariantError(f"Riders without orders: {idle}")
