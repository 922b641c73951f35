import os
import numpy as np
import pandas as pd
from typing import Dict, Optional

RIDERS_FILE = "riders.csv"
ORDERS_FILE = "orders.csv"
EVENTS_FILE = "events.csv"


def generate_mock_riders(num_riders: int, rng: np.random.Generator, id_space: int = 100_000) -> pd.DataFrame:
    """
    Unique rider ids drawn without replacement, shuffled so input order is not id order.
    """
    rider_ids = rng.choice(np.arange(1, id_space + 1), size=num_riders, replace=False)
    return pd.DataFrame({"rider_id": rider_ids.astype(np.int64)})


def generate_mock_orders(num_orders: int, rng: np.random.Generator, id_space: int = 10_000_000) -> pd.DataFrame:
    order_ids = rng.choice(np.arange(1, id_space + 1), size=num_orders, replace=False)
    return pd.DataFrame({"order_id": order_ids.astype(np.int64)})


def generate_mock_event_templates(
    num_events: int,
    rng: np.random.Generator,
    cancel_ratio: float = 0.4,
    max_index: int = 1000,
) -> pd.DataFrame:
    """
    Index-based event descriptions. Ids are unknown until the plan exists, so the
    simulation resolves each row against the plan it is about to change.
    """
    is_cancel = rng.random(num_events) < cancel_ratio
    return pd.DataFrame({
        "type": np.where(is_cancel, "order_canceled", "rider_rejected"),
        "which_rider": rng.integers(0, max_index, size=num_events),
        "which_order": rng.integers(0, max_index, size=num_events),
    })


def generate_mock_data(
    output_dir: str = "sampledata",
    num_riders: int = 20,
    num_orders: int = 200,
    num_events: int = 100,
    seed: Optional[int] = None,
) -> Dict[str, str]:
    """
    Generates riders, orders and event templates and saves them as CSV files.
    Returns the written paths keyed by "riders" / "orders" / "events".
    """
    if num_riders <= 0:
        raise ValueError("num_riders must be > 0")

    rng = np.random.default_rng(seed)
    os.makedirs(output_dir, exist_ok=True)

    frames = {
        "riders": (generate_mock_riders(num_riders, rng), RIDERS_FILE),
        "orders": (generate_mock_orders(num_orders, rng), ORDERS_FILE),
        "events": (generate_mock_event_templates(num_events, rng), EVENTS_FILE),
    }

    paths = {}
    for key, (df, filename) in frames.items():
        path = os.path.join(output_dir, filename)
        df.to_csv(path, index=False)
        paths[key] = path

    print(f"Generated {num_riders} riders, {num_orders} orders and {num_events} events into '{output_dir}'")

    # Quick preview of how the event mix came out
    counts = frames["events"][0]["type"].value_counts()
    for event_type, count in counts.items():
        print(f"  {event_type}: {count}")

    return paths


if __name__ == "__main__":
    generate_mock_data(num_riders=20, num_orders=200, num_events=100)
