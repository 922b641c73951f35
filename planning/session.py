"""
Purpose: Owns one live Plan and serialises the events applied to it.
What it does:
- Builds the starting plan from riders/orders.
- submit(event) applies exactly one event at a time (lock held for the whole
  transition) and swaps in the new plan only if the processor succeeded.
- Keeps a bounded history of applied events and exposes simple stats.

Rule: Session owns the current plan, the processor owns the transition logic.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Iterable, List, Optional, Sequence

from orders.models import Order
from riders.models import Rider, RiderId

from .builder import build_plan
from .events import Event
from .plan import Plan, copy_plan, plan_order_ids, rider_loads
from .policy import PlanningPolicy, default_planning_policy
from .processor import EventProcessor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedEvent:
    event: Event
    changed: bool
    reassigned_to: Optional[RiderId] = None
    applied_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class SessionStats:
    rider_count: int
    order_count: int
    applied_events: int
    noop_events: int
    min_load: int
    max_load: int


class PlanSession:
    """
    In-memory plan lifecycle manager:

    build -> submit(event) -> submit(event) -> ...

    Callers on different threads may submit concurrently; the lock guarantees
    each event sees the plan left by the previous one.
    """

    def __init__(self, plan: Plan, policy: Optional[PlanningPolicy] = None):
        self.policy = policy or default_planning_policy()
        self.processor = EventProcessor(self.policy)

        self._plan: Plan = copy_plan(plan)
        self._lock = threading.Lock()
        self._history: Deque[AppliedEvent] = deque(maxlen=self.policy.history_limit)
        self._applied_count = 0
        self._noop_count = 0

    @classmethod
    def start(
        cls,
        riders: Sequence[Rider],
        orders: Sequence[Order],
        policy: Optional[PlanningPolicy] = None,
    ) -> PlanSession:
        plan = build_plan(riders, orders)
        logger.info("Plan session started with %d riders and %d orders", len(plan), len(orders))
        return cls(plan, policy)

    # --- Public API ---

    def submit(self, event: Event) -> Plan:
        """
        Apply one event. On error the current plan stays as it was.
        """
        with self._lock:
            outcome = self.processor.apply_with_outcome(self._plan, event)
            self._plan = outcome.plan

            self._applied_count += 1
            if not outcome.changed:
                self._noop_count += 1
            self._history.append(
                AppliedEvent(event=event, changed=outcome.changed, reassigned_to=outcome.reassigned_to)
            )
            return copy_plan(self._plan)

    def submit_many(self, events: Iterable[Event]) -> Plan:
        """
        Apply events in order, stopping at the first error.
        """
        plan = self.snapshot()
        for event in events:
            plan = self.submit(event)
        return plan

    def snapshot(self) -> Plan:
        with self._lock:
            return copy_plan(self._plan)

    def history(self) -> List[AppliedEvent]:
        with self._lock:
            return list(self._history)

    def stats(self) -> SessionStats:
        with self._lock:
            loads = list(rider_loads(self._plan).values())
            return SessionStats(
                rider_count=len(self._plan),
                order_count=len(plan_order_ids(self._plan)),
                applied_events=self._applied_count,
                noop_events=self._noop_count,
                min_load=min(loads) if loads else 0,
                max_load=max(loads) if loads else 0,
            )
