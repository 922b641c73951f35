import csv
import logging
import os
import time
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

from orders.models import Order
from planning import (
    CancellationTemplate,
    NoAlternateRiderError,
    OrderCanceled,
    PlanningPolicy,
    PlanSession,
    RejectionTemplate,
    UnresolvableEventError,
    load_spread,
    plan_order_ids,
    policy_from_env,
    resolve_event,
)
from planning.resolver import EventTemplate
from riders.models import Rider

logger = logging.getLogger(__name__)


@dataclass
class SimulationSummary:
    riders: int
    starting_orders: int
    remaining_orders: int
    canceled_orders: int
    applied_events: int
    skipped_events: int
    noop_events: int
    final_spread: int
    conserved: bool


def load_riders(filepath: str) -> List[Rider]:
    with open(filepath, 'r') as file:
        return [Rider.new(row['rider_id']) for row in csv.DictReader(file)]


def load_orders(filepath: str) -> List[Order]:
    with open(filepath, 'r') as file:
        return [Order.new(row['order_id']) for row in csv.DictReader(file)]


def load_event_templates(filepath: str) -> List[EventTemplate]:
    templates: List[EventTemplate] = []
    with open(filepath, 'r') as file:
        for row in csv.DictReader(file):
            if row['type'] == 'order_canceled':
                templates.append(CancellationTemplate(which_order=int(row['which_order'])))
            elif row['type'] == 'rider_rejected':
                templates.append(
                    RejectionTemplate(which_rider=int(row['which_rider']), which_order=int(row['which_order']))
                )
            else:
                raise ValueError(f"Unknown event type in {filepath}: {row['type']!r}")
    return templates


def run_simulation(
    data_dir: str = "sampledata",
    output_path: Optional[str] = None,
    policy: Optional[PlanningPolicy] = None,
) -> SimulationSummary:
    print("=== STARTING PLAN SIMULATION ===")

    # 1. Load Data
    riders = load_riders(os.path.join(data_dir, "riders.csv"))
    orders = load_orders(os.path.join(data_dir, "orders.csv"))
    templates = load_event_templates(os.path.join(data_dir, "events.csv"))
    print(f"Loaded {len(riders)} Riders, {len(orders)} Orders and {len(templates)} Events.\n")

    # 2. Build the starting plan
    start_time = time.time()
    session = PlanSession.start(riders, orders, policy or policy_from_env())
    starting_plan = session.snapshot()
    starting_orders = set(plan_order_ids(starting_plan))
    print(f"Built plan in {time.time() - start_time:.4f}s (spread {load_spread(starting_plan)}).\n")

    # 3. Replay events one by one against the live plan
    canceled = set()
    skipped = 0
    for template in templates:
        try:
            event = resolve_event(template, session.snapshot())
        except UnresolvableEventError as exc:
            # e.g. every order already canceled, or the chosen rider is empty
            skipped += 1
            logger.debug("Skipping event template %s: %s", template, exc)
            continue

        try:
            session.submit(event)
        except NoAlternateRiderError as exc:
            skipped += 1
            print(f"[SKIPPED] {exc}")
            continue

        if isinstance(event, OrderCanceled):
            canceled.add(event.order_id)

    final_plan = session.snapshot()
    remaining = set(plan_order_ids(final_plan))
    stats = session.stats()

    summary = SimulationSummary(
        riders=stats.rider_count,
        starting_orders=len(starting_orders),
        remaining_orders=len(remaining),
        canceled_orders=len(canceled),
        applied_events=stats.applied_events,
        skipped_events=skipped,
        noop_events=stats.noop_events,
        final_spread=stats.max_load - stats.min_load,
        conserved=(remaining | canceled) == starting_orders and not (remaining & canceled),
    )

    # 4. Save the final assignment
    output_path = output_path or os.path.join(data_dir, "plan_results.csv")
    with open(output_path, "w", newline='') as file:
        writer = csv.writer(file)
        writer.writerow(["rider_id", "order_count", "order_ids"])
        for rider_id in sorted(final_plan):
            order_ids = final_plan[rider_id]
            writer.writerow([rider_id, len(order_ids), " ".join(str(order_id) for order_id in order_ids)])

    print("=== SIMULATION COMPLETE ===")
    print(f"Orders Remaining: {summary.remaining_orders} / {summary.starting_orders} ({summary.canceled_orders} canceled)")
    print(f"Events Applied: {summary.applied_events} ({summary.noop_events} no-ops, {summary.skipped_events} skipped)")
    print(f"Final load spread: {summary.final_spread}")
    print(f"Conservation check: {'OK' if summary.conserved else 'FAILED'}")
    print(f"Results written to '{output_path}'.")

    return summary


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    run_simulation()
