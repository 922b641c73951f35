"""
Purpose: Business rules for choosing which rider takes over a rejected order.
What it does:
Accepts the current plan and the rejecting rider, and picks one of the other
riders according to the policy's reassignment strategy.

Both strategies work from sorted rider ids, never from dict iteration order,
so the same plan always yields the same target.
"""

from typing import List, Optional

from riders.models import RiderId

from .plan import Plan, rider_loads, sorted_rider_ids
from .policy import LEAST_LOADED, ROUND_ROBIN, PlanningPolicy, default_planning_policy


def candidate_riders(plan: Plan, exclude: RiderId) -> List[RiderId]:
    """
    Every rider in the plan except `exclude`, ascending by id.
    """
    return [rider_id for rider_id in sorted_rider_ids(plan) if rider_id != exclude]


def least_loaded_rider(plan: Plan, exclude: RiderId) -> Optional[RiderId]:
    """
    Rider with the fewest held orders; ties go to the smallest id.
    """
    candidates = candidate_riders(plan, exclude)
    if not candidates:
        return None

    loads = rider_loads(plan)
    return min(candidates, key=lambda rider_id: (loads[rider_id], rider_id))


def next_rider_in_rotation(plan: Plan, exclude: RiderId) -> Optional[RiderId]:
    """
    First rider id greater than `exclude`, wrapping around to the smallest id.
    """
    candidates = candidate_riders(plan, exclude)
    if not candidates:
        return None

    for rider_id in candidates:
        if rider_id > exclude:
            return rider_id
    return candidates[0]


def select_alternate_rider(
    plan: Plan,
    rider_id: RiderId,
    policy: Optional[PlanningPolicy] = None,
) -> Optional[RiderId]:
    """
    Returns None when `rider_id` is the only rider in the plan.
    """
    policy = policy or default_planning_policy()

    if policy.reassignment_strategy == ROUND_ROBIN:
        return next_rider_in_rotation(plan, rider_id)
    if policy.reassignment_strategy == LEAST_LOADED:
        return least_loaded_rider(plan, rider_id)

    raise ValueError(f"Unknown reassignment strategy: {policy.reassignment_strategy!r}")
