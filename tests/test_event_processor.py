import logging
import random
from collections import Counter

import pytest

from planning.builder import build_plan
from planning.events import OrderCanceled, RiderRejected
from planning.plan import PlanInvariantError, copy_plan, plan_order_ids
from planning.policy import PlanningPolicy
from planning.processor import EventProcessor, NoAlternateRiderError, apply_event

from conftest import random_orders, random_riders


@pytest.fixture
def scenario_plan(scenario_riders, scenario_orders):
    return build_plan(scenario_riders, scenario_orders)


@pytest.fixture
def processor():
    return EventProcessor()


def test_scenario_rejection_then_cancellation(scenario_plan, processor):
    rejected = processor.apply(scenario_plan, RiderRejected(rider_id=1, order_id=10))
    assert rejected == {1: [40], 2: [20, 50], 3: [30, 10]}

    canceled = processor.apply(rejected, OrderCanceled(order_id=50))
    assert canceled == {1: [40], 2: [20], 3: [30, 10]}

    # The inputs are untouched snapshots
    assert scenario_plan == {1: [10, 40], 2: [20, 50], 3: [30]}
    assert rejected == {1: [40], 2: [20, 50], 3: [30, 10]}


def test_rejection_tie_goes_to_smallest_rider_id(processor):
    plan = {5: [1, 2], 9: [3], 4: [4], 7: [5, 6]}

    outcome = processor.apply_with_outcome(plan, RiderRejected(rider_id=5, order_id=2))

    # 4 and 9 both hold one order; 5 also drops to one but is excluded
    assert outcome.changed
    assert outcome.reassigned_to == 4
    assert outcome.plan == {5: [1], 9: [3], 4: [4, 2], 7: [5, 6]}


def test_rejection_uses_load_after_removal(processor):
    plan = {1: [10, 11], 2: [20, 21, 22]}

    new_plan = processor.apply(plan, RiderRejected(rider_id=1, order_id=10))

    # Only one other rider exists, it gets the order regardless of load
    assert new_plan == {1: [11], 2: [20, 21, 22, 10]}


def test_round_robin_strategy_moves_to_next_rider_id():
    processor = EventProcessor(PlanningPolicy(reassignment_strategy="round_robin"))
    plan = {3: [30], 1: [10, 11], 8: [80, 81, 82]}

    assert processor.apply(plan, RiderRejected(rider_id=1, order_id=10)) == {
        3: [30, 10], 1: [11], 8: [80, 81, 82],
    }
    # Wraps around past the largest id
    assert processor.apply(plan, RiderRejected(rider_id=8, order_id=81)) == {
        3: [30], 1: [10, 11, 81], 8: [80, 82],
    }


@pytest.mark.parametrize("event", [
    RiderRejected(rider_id=99, order_id=10),  # unknown rider
    RiderRejected(rider_id=2, order_id=10),   # order held by someone else
    RiderRejected(rider_id=1, order_id=999),  # unknown order
])
def test_mismatched_rejection_is_a_noop(scenario_plan, processor, event):
    outcome = processor.apply_with_outcome(scenario_plan, event)

    assert not outcome.changed
    assert outcome.reassigned_to is None
    assert outcome.plan == scenario_plan
    assert outcome.plan is not scenario_plan


def test_single_rider_cannot_relocate_rejection(processor):
    plan = {1: [10, 20]}

    with pytest.raises(NoAlternateRiderError):
        processor.apply(plan, RiderRejected(rider_id=1, order_id=10))

    # No partial mutation
    assert plan == {1: [10, 20]}


def test_single_rider_mismatched_rejection_is_still_a_noop(processor):
    assert processor.apply({1: [10]}, RiderRejected(rider_id=1, order_id=11)) == {1: [10]}


def test_cancellation_removes_only_that_order(scenario_plan, processor):
    outcome = processor.apply_with_outcome(scenario_plan, OrderCanceled(order_id=20))

    assert outcome.changed
    assert outcome.plan == {1: [10, 40], 2: [50], 3: [30]}


def test_cancellation_of_unknown_order_is_a_noop(scenario_plan, processor):
    outcome = processor.apply_with_outcome(scenario_plan, OrderCanceled(order_id=12345))

    assert not outcome.changed
    assert outcome.plan == scenario_plan
    assert outcome.plan is not scenario_plan


def test_cancellation_keeps_riders_that_become_empty(processor):
    plan = {1: [10], 2: [20]}

    assert processor.apply(plan, OrderCanceled(order_id=10)) == {1: [], 2: [20]}


def test_rejection_of_order_held_twice_keeps_multiset(processor):
    plan = {1: [10, 10, 11], 2: [20]}

    new_plan = processor.apply(plan, RiderRejected(rider_id=1, order_id=10))

    assert new_plan == {1: [10, 11], 2: [20, 10]}
    assert Counter(plan_order_ids(new_plan)) == Counter(plan_order_ids(plan))


def test_cancellation_clears_every_holder(processor):
    plan = {1: [10, 11], 2: [10, 20], 3: [30]}

    assert processor.apply(plan, OrderCanceled(order_id=10)) == {1: [11], 2: [20], 3: [30]}


def test_mismatched_events_log_warnings(scenario_plan, processor, caplog):
    with caplog.at_level(logging.WARNING, logger="planning.processor"):
        processor.apply(scenario_plan, OrderCanceled(order_id=12345))
        processor.apply(scenario_plan, RiderRejected(rider_id=2, order_id=10))

    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 2
    assert "12345" in warnings[0].getMessage()


@pytest.mark.parametrize("seed", range(20))
def test_cancellation_twice_equals_once(seed, processor):
    rng = random.Random(seed)
    riders = random_riders(rng, rng.randint(1, 8))
    orders = random_orders(rng, rng.randint(1, 40))
    plan = build_plan(riders, orders)
    target = rng.choice(orders).id

    once = processor.apply(plan, OrderCanceled(order_id=target))
    twice = processor.apply(once, OrderCanceled(order_id=target))

    assert once == twice
    assert set(plan_order_ids(once)) == set(plan_order_ids(plan)) - {target}


@pytest.mark.parametrize("seed", range(20))
def test_rejection_conserves_orders(seed, processor):
    rng = random.Random(seed)
    riders = random_riders(rng, rng.randint(2, 8))
    orders = random_orders(rng, rng.randint(len(riders), 40))
    plan = build_plan(riders, orders)

    rider = rng.choice(riders)
    order_id = rng.choice(plan[rider.id])

    outcome = processor.apply_with_outcome(plan, RiderRejected(rider_id=rider.id, order_id=order_id))
    new_plan = outcome.plan

    # 1. The order left the rejecting rider
    assert order_id not in new_plan[rider.id]

    # 2. Exactly one other rider holds it now
    holders = [rider_id for rider_id, order_ids in new_plan.items() if order_id in order_ids]
    assert holders == [outcome.reassigned_to]
    assert outcome.reassigned_to != rider.id

    # 3. Multiset of order ids is unchanged
    assert Counter(plan_order_ids(new_plan)) == Counter(plan_order_ids(plan))

    # 4. Rider set is unchanged
    assert set(new_plan) == set(plan)


@pytest.mark.parametrize("seed", range(10))
def test_rejected_order_goes_to_least_loaded_rider(seed, processor):
    """
    The receiving rider held no more orders than any other non-rejecting rider,
    and among equally loaded riders it has the smallest id.
    """
    rng = random.Random(seed)
    riders = random_riders(rng, rng.randint(2, 8))
    plan = build_plan(riders, random_orders(rng, rng.randint(len(riders), 40)))

    for _ in range(30):
        rider_id = rng.choice(sorted(plan))
        if not plan[rider_id]:
            continue
        order_id = rng.choice(plan[rider_id])

        outcome = processor.apply_with_outcome(plan, RiderRejected(rider_id=rider_id, order_id=order_id))
        others = {other: len(order_ids) for other, order_ids in plan.items() if other != rider_id}
        target = outcome.reassigned_to

        assert others[target] == min(others.values())
        assert target == min(other for other, load in others.items() if load == others[target])
        plan = outcome.plan


def test_apply_all_threads_each_output_into_the_next(scenario_plan, processor):
    events = [RiderRejected(rider_id=1, order_id=10), OrderCanceled(order_id=50)]

    assert processor.apply_all(scenario_plan, events) == {1: [40], 2: [20], 3: [30, 10]}
    assert scenario_plan == {1: [10, 40], 2: [20, 50], 3: [30]}


def test_apply_all_stops_at_first_error(processor):
    plan = {1: [10, 20]}
    events = [OrderCanceled(order_id=20), RiderRejected(rider_id=1, order_id=10)]

    with pytest.raises(NoAlternateRiderError):
        processor.apply_all(plan, events)

    assert plan == {1: [10, 20]}


def test_apply_event_wrapper(scenario_plan):
    assert apply_event(scenario_plan, OrderCanceled(order_id=10)) == {1: [40], 2: [20, 50], 3: [30]}


def test_unknown_event_type_raises(scenario_plan, processor):
    with pytest.raises(TypeError):
        processor.apply(scenario_plan, "cancel 10")


def test_verify_invariants_flags_a_broken_plan():
    processor = EventProcessor(PlanningPolicy(verify_invariants=True))
    broken = {1: [10], 2: [10, 20]}

    with pytest.raises(PlanInvariantError):
        processor.apply(broken, OrderCanceled(order_id=20))

    # Default policy does not check
    assert EventProcessor().apply(copy_plan(broken), OrderCanceled(order_id=20)) == {1: [10], 2: [10]}
