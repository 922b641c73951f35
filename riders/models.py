"""
Purpose: Core data models for the riders domain.
What it does:
Defines the structure of a Rider without relying on any storage layer.
The planner only needs a rider's identity; everything else about a rider
(position, vehicle, shift) lives outside this package.
"""

from __future__ import annotations

from dataclasses import dataclass

RiderId = int


@dataclass(frozen=True)
class Rider:
    """
    A purely stateless representation of a Rider known to the planner.
    """
    id: RiderId

    @classmethod
    def new(cls, rider_id: int | str) -> Rider:
        # CSV rows hand us strings
        return cls(id=int(rider_id))
