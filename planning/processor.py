"""
Purpose: Applies one runtime Event to a Plan (the "EventProcessor").
What it does:
Takes the current Plan and a single event and returns the updated Plan:

- RiderRejected: the order leaves the rejecting rider and is appended to the
  rider picked by selection.select_alternate_rider().
- OrderCanceled: the order disappears from whichever rider held it.

Events that do not match the plan (unknown rider, order not held, order already
gone) are tolerated as no-ops; out-of-sync event sources are normal.

Rule: The input plan is never mutated. Every call either returns a fresh,
consistent plan or raises, leaving the caller's plan exactly as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from riders.models import RiderId

from .events import Event, OrderCanceled, RiderRejected
from .plan import Plan, PlanningError, copy_plan, find_order_holder, verify_plan
from .policy import PlanningPolicy, default_planning_policy
from .selection import select_alternate_rider

logger = logging.getLogger(__name__)


class NoAlternateRiderError(PlanningError):
    """Raised when a rejected order cannot move because no other rider exists."""
    pass


@dataclass(frozen=True)
class EventOutcome:
    """
    Result of applying one event.
    """
    plan: Plan
    changed: bool
    # Rider that received a rejected order; None for cancellations and no-ops.
    reassigned_to: Optional[RiderId] = None


class EventProcessor:
    """
    Stateless apart from its policy; safe to share between sessions.
    """

    def __init__(self, policy: Optional[PlanningPolicy] = None):
        self.policy = policy or default_planning_policy()
        self.policy.validate()

    def apply(self, plan: Plan, event: Event) -> Plan:
        return self.apply_with_outcome(plan, event).plan

    def apply_all(self, plan: Plan, events: Iterable[Event]) -> Plan:
        """
        Apply events one at a time, each output feeding the next call.
        The first error propagates; `plan` itself is never touched.
        """
        current = plan
        for event in events:
            current = self.apply(current, event)
        return current

    def apply_with_outcome(self, plan: Plan, event: Event) -> EventOutcome:
        if isinstance(event, RiderRejected):
            outcome = self._apply_rejection(plan, event)
        elif isinstance(event, OrderCanceled):
            outcome = self._apply_cancellation(plan, event)
        else:
            raise TypeError(f"Unsupported event: {event!r}")

        if self.policy.verify_invariants:
            verify_plan(outcome.plan)
        return outcome

    # --- Transitions ---

    def _apply_rejection(self, plan: Plan, event: RiderRejected) -> EventOutcome:
        rider_id, order_id = event.rider_id, event.order_id

        held = plan.get(rider_id)
        if held is None or order_id not in held:
            logger.warning(
                "Ignoring rejection of order %s by rider %s: order not held by that rider",
                order_id,
                rider_id,
            )
            return EventOutcome(plan=copy_plan(plan), changed=False)

        new_plan = copy_plan(plan)
        # First occurrence only, so the multiset of order ids is preserved.
        new_plan[rider_id].remove(order_id)

        # Selection sees the plan after removal, so loads reflect the rejection.
        target = select_alternate_rider(new_plan, rider_id, self.policy)
        if target is None:
            raise NoAlternateRiderError(
                f"Rider {rider_id} rejected order {order_id} but is the only rider in the plan."
            )

        new_plan[target].append(order_id)
        logger.debug("Order %s moved from rider %s to rider %s", order_id, rider_id, target)
        return EventOutcome(plan=new_plan, changed=True, reassigned_to=target)

    def _apply_cancellation(self, plan: Plan, event: OrderCanceled) -> EventOutcome:
        order_id = event.order_id
        new_plan = copy_plan(plan)
        changed = False

        holder = find_order_holder(new_plan, order_id)
        while holder is not None:
            new_plan[holder] = [held_id for held_id in new_plan[holder] if held_id != order_id]
            changed = True
            holder = find_order_holder(new_plan, order_id)

        if changed:
            logger.debug("Order %s canceled", order_id)
        else:
            logger.warning("Ignoring cancellation of order %s: not in plan", order_id)
        return EventOutcome(plan=new_plan, changed=changed)


def apply_event(plan: Plan, event: Event, policy: Optional[PlanningPolicy] = None) -> Plan:
    """
    One-shot convenience wrapper around EventProcessor.apply().
    """
    return EventProcessor(policy).apply(plan, event)
