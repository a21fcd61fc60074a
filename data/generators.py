# binpacking/data/generators.py
from __future__ import annotations
from typing import Tuple

from core.general_utils import make_rng
from core.models import PackingInstance


def generate_random_instance(
    capacity: float,
    num_items: int,
    seed: int,
    weight_bounds: Tuple[float, float] = (0.1, 0.7),
    item_types: int = 0,
) -> PackingInstance:
    """
    Random instance for benchmarks and tests.
    - weights ~ Uniform(weight_bounds) * capacity, rounded to integers (>= 1)
    - item_types > 0 groups items into that many types of equal weight
      (names T0_1, T0_2, ...), mimicking quantity-based item lists;
      otherwise each item gets its own type (I0_1, I1_1, ...)
    """
    lo, hi = weight_bounds
    assert 0.0 < lo <= hi <= 1.0, "weight_bounds must satisfy 0 < lower <= upper <= 1."
    assert num_items >= 0, "num_items must be non-negative."
    assert capacity >= 1, "weights are rounded to integers, so capacity must be >= 1."
    rng = make_rng(seed)
    inst = PackingInstance(capacity)
    if num_items == 0:
        return inst

    if item_types > 0:
        types = min(item_types, num_items)
        weights = rng.uniform(lo, hi, size=types) * capacity
        counts = rng.multinomial(num_items - types, [1.0 / types] * types) + 1
        for t in range(types):
            inst.add_items(f"T{t}", int(counts[t]), max(1.0, float(round(weights[t]))))
    else:
        weights = rng.uniform(lo, hi, size=num_items) * capacity
        for j in range(num_items):
            inst.add_items(f"I{j}", 1, max(1.0, float(round(weights[j]))))
    return inst
