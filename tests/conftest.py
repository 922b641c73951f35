import random
from typing import List

import pytest

from orders.models import Order
from riders.models import Rider


def random_riders(rng: random.Random, count: int) -> List[Rider]:
    # Unique ids, deliberately not in ascending order
    return [Rider.new(rider_id) for rider_id in rng.sample(range(1, 10_000), count)]


def random_orders(rng: random.Random, count: int) -> List[Order]:
    return [Order.new(order_id) for order_id in rng.sample(range(1, 1_000_000), count)]


@pytest.fixture
def scenario_riders():
    return [Rider.new(1), Rider.new(2), Rider.new(3)]


@pytest.fixture
def scenario_orders():
    return [Order.new(order_id) for order_id in (10, 20, 30, 40, 50)]
