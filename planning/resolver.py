"""
Purpose: Turns index-based event templates into concrete events for a Plan.
What it does:
Randomized tests and simulations cannot know ids up front, so they describe
events by position ("the 3rd rider rejects its 2nd order"). Resolution reads
the plan's sorted rider ids / sorted order ids and wraps every index with a
modulo, so any non-negative index resolves against any non-empty plan.

Nothing here is stored; it is a pure derived view over the plan.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Union

from .events import Event, OrderCanceled, RiderRejected
from .plan import Plan, sorted_order_ids, sorted_rider_ids


class UnresolvableEventError(ValueError):
    """Raised when a template cannot be mapped onto the given plan."""
    pass


@dataclass(frozen=True)
class RejectionTemplate:
    which_rider: int
    which_order: int


@dataclass(frozen=True)
class CancellationTemplate:
    which_order: int


EventTemplate = Union[RejectionTemplate, CancellationTemplate]


def resolve_event(template: EventTemplate, plan: Plan) -> Event:
    if isinstance(template, RejectionTemplate):
        rider_ids = sorted_rider_ids(plan)
        if not rider_ids:
            raise UnresolvableEventError("Plan has no riders to reject an order.")

        rider_id = rider_ids[template.which_rider % len(rider_ids)]
        held = plan[rider_id]
        if not held:
            raise UnresolvableEventError(f"Rider {rider_id} holds no order to reject.")

        return RiderRejected(rider_id=rider_id, order_id=held[template.which_order % len(held)])

    if isinstance(template, CancellationTemplate):
        order_ids = sorted_order_ids(plan)
        if not order_ids:
            raise UnresolvableEventError("Plan has no orders to cancel.")
        return OrderCanceled(order_id=order_ids[template.which_order % len(order_ids)])

    raise TypeError(f"Unsupported event template: {template!r}")


def random_templates(
    rng: random.Random,
    count: int,
    max_index: int = 1000,
    cancel_ratio: float = 0.5,
) -> List[EventTemplate]:
    """
    Draw `count` templates. Indices are arbitrary; resolve_event() wraps them.
    """
    templates: List[EventTemplate] = []
    for _ in range(count):
        if rng.random() < cancel_ratio:
            templates.append(CancellationTemplate(which_order=rng.randint(0, max_index)))
        else:
            templates.append(
                RejectionTemplate(
                    which_rider=rng.randint(0, max_index),
                    which_order=rng.randint(0, max_index),
                )
            )
    return templates
