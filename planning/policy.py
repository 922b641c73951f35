"""
Purpose: Central configuration for the planner.
What it does:

Stores the tunable knobs for re-planning after events:

REASSIGNMENT_STRATEGY = "least_loaded"
VERIFY_INVARIANTS = False
HISTORY_LIMIT = 1000

Values can come from the environment (or a .env file):

PLAN_REASSIGNMENT_STRATEGY=round_robin
PLAN_VERIFY_INVARIANTS=true
PLAN_HISTORY_LIMIT=500

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import dotenv_values, find_dotenv

LEAST_LOADED = "least_loaded"
ROUND_ROBIN = "round_robin"
REASSIGNMENT_STRATEGIES = (LEAST_LOADED, ROUND_ROBIN)


@dataclass(frozen=True)
class PlanningPolicy:
    """
    Central configuration for building and re-planning.
    """

    # --- Rejected order relocation ---
    # least_loaded: rider with the fewest orders, ties broken by smallest id.
    # round_robin: next rider id after the rejecting one, wrapping around.
    reassignment_strategy: str = LEAST_LOADED

    # --- Debugging ---
    # Re-check the no-duplicate invariant after every event.
    verify_invariants: bool = False

    # --- PlanSession ---
    # How many applied events a session keeps around for inspection.
    history_limit: int = 1000

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.reassignment_strategy not in REASSIGNMENT_STRATEGIES:
            raise ValueError(
                f"reassignment_strategy must be one of {REASSIGNMENT_STRATEGIES}, "
                f"got {self.reassignment_strategy!r}"
            )

        if self.history_limit <= 0:
            raise ValueError("history_limit must be > 0")


def default_planning_policy() -> PlanningPolicy:
    """
    Convenience factory for the default policy.
    """
    p = PlanningPolicy()
    p.validate()
    return p


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def policy_from_env(dotenv_path: Optional[str] = None) -> PlanningPolicy:
    """
    Build a policy from PLAN_* variables. Values from the .env file (searched
    from the working directory unless `dotenv_path` is given) are overridden by
    the real environment. Unset variables keep their defaults.
    """
    settings = {
        **dotenv_values(dotenv_path or find_dotenv(usecwd=True)),
        **os.environ,
    }
    defaults = PlanningPolicy()

    strategy = settings.get("PLAN_REASSIGNMENT_STRATEGY") or defaults.reassignment_strategy
    verify = settings.get("PLAN_VERIFY_INVARIANTS")
    history_limit = settings.get("PLAN_HISTORY_LIMIT")

    try:
        limit = int(history_limit) if history_limit else defaults.history_limit
    except ValueError as exc:
        raise ValueError(f"PLAN_HISTORY_LIMIT must be an integer, got {history_limit!r}") from exc

    p = PlanningPolicy(
        reassignment_strategy=strategy.strip().lower(),
        verify_invariants=_env_flag(verify) if verify is not None else defaults.verify_invariants,
        history_limit=limit,
    )
    p.validate()
    return p
