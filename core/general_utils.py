# binpacking/core/general_utils.py
from __future__ import annotations
from typing import Optional
import random
import numpy as np

# relative slack for floating-point load comparisons
CAPACITY_EPS = 1e-9

def set_global_seed(seed: int) -> None:
    """
    Set seeds across Python's random and NumPy for reproducibility.
    """
    random.seed(seed)
    np.random.seed(seed)

def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Return a modern NumPy RNG (PCG64). If seed=None, it is non-deterministic.
    """
    return np.random.default_rng(seed)

def fits(load: float, capacity: float) -> bool:
    """True if `load` does not exceed `capacity` (up to floating-point noise)."""
    return load <= capacity * (1.0 + CAPACITY_EPS) + CAPACITY_EPS
