"""
Purpose: Runtime events the planner reacts to.
What it does:
- RiderRejected: a rider declines an order it currently holds.
- OrderCanceled: an order is withdrawn entirely.
- event_from_dict() / to_dict(): the flat shape used by CSV rows and JSON payloads.

Rule: Events are plain immutable values. Applying them lives in processor.py.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Union

from orders.models import OrderId
from riders.models import RiderId


class InvalidEventError(ValueError):
    """Raised when an event payload cannot be turned into an Event."""
    pass


class EventType(str, Enum):
    RIDER_REJECTED = "rider_rejected"
    ORDER_CANCELED = "order_canceled"


@dataclass(frozen=True)
class RiderRejected:
    rider_id: RiderId
    order_id: OrderId

    @property
    def event_type(self) -> EventType:
        return EventType.RIDER_REJECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.event_type.value,
            "rider_id": self.rider_id,
            "order_id": self.order_id,
        }


@dataclass(frozen=True)
class OrderCanceled:
    order_id: OrderId

    @property
    def event_type(self) -> EventType:
        return EventType.ORDER_CANCELED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.event_type.value,
            "order_id": self.order_id,
        }


Event = Union[RiderRejected, OrderCanceled]


def _required_int(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key)
    if value is None or value == "":
        raise InvalidEventError(f"Event payload is missing '{key}': {dict(payload)}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidEventError(f"Event field '{key}' is not an integer: {value!r}") from exc


def event_from_dict(payload: Mapping[str, Any]) -> Event:
    """
    Parse {"type": ..., "rider_id": ..., "order_id": ...} into an Event.
    Extra keys are ignored; ids may arrive as strings (CSV).
    """
    raw_type = payload.get("type")
    try:
        event_type = EventType(raw_type)
    except ValueError as exc:
        raise InvalidEventError(f"Unknown event type: {raw_type!r}") from exc

    if event_type is EventType.RIDER_REJECTED:
        return RiderRejected(
            rider_id=_required_int(payload, "rider_id"),
            order_id=_required_int(payload, "order_id"),
        )
    return OrderCanceled(order_id=_required_int(payload, "order_id"))
