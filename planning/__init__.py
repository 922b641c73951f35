#Expose the planning pipeline pieces:
#Plan building (round robin)
#Event processing (rejections / cancellations)
#Session (the serialised "one call per event" entry point)

from .plan import (
    Plan,
    PlanningError,
    PlanInvariantError,
    copy_plan,
    find_order_holder,
    load_spread,
    plan_order_ids,
    rider_loads,
    sorted_order_ids,
    sorted_rider_ids,
    verify_plan,
)
from .builder import EmptyRiderSetError, build_plan
from .events import Event, EventType, InvalidEventError, OrderCanceled, RiderRejected, event_from_dict
from .policy import PlanningPolicy, default_planning_policy, policy_from_env
from .processor import EventOutcome, EventProcessor, NoAlternateRiderError, apply_event
from .resolver import (
    CancellationTemplate,
    RejectionTemplate,
    UnresolvableEventError,
    random_templates,
    resolve_event,
)
from .session import AppliedEvent, PlanSession, SessionStats

__all__ = [
    "Plan",
    "PlanningError",
    "PlanInvariantError",
    "EmptyRiderSetError",
    "NoAlternateRiderError",
    "InvalidEventError",
    "UnresolvableEventError",
    "copy_plan",
    "find_order_holder",
    "load_spread",
    "plan_order_ids",
    "rider_loads",
    "sorted_order_ids",
    "sorted_rider_ids",
    "verify_plan",
    "build_plan",
    "Event",
    "EventType",
    "RiderRejected",
    "OrderCanceled",
    "event_from_dict",
    "PlanningPolicy",
    "default_planning_policy",
    "policy_from_env",
    "EventOutcome",
    "EventProcessor",
    "apply_event",
    "RejectionTemplate",
    "CancellationTemplate",
    "resolve_event",
    "random_templates",
    "AppliedEvent",
    "PlanSession",
    "SessionStats",
]
