from __future__ import annotations
import math

from core.general_utils import CAPACITY_EPS
from core.models import PackingInstance
from offline.offline_heuristics.first_fit_decreasing import FirstFitDecreasing


def l1_bound(instance: PackingInstance) -> int:
    """
    Continuous-relaxation (L1) lower bound: ceil(total weight / capacity).

    Items are treated as divisible, so the bound can be strictly below the
    optimum (three items of 6 in bins of 10 give 2, the optimum is 3), but it
    never exceeds it. Zero items give 0.

    The relative slack that keeps exact multiples from rounding up also means
    a ratio within ~1e-9 above an integer k returns k, one below the exact
    ceiling. That is still a valid lower bound.
    """
    ratio = instance.total_weight / instance.bin_capacity
    # an exact multiple must not round up because of floating-point noise
    return max(0, math.ceil(ratio - CAPACITY_EPS * max(1.0, ratio)))


def ffd_upper_bound(instance: PackingInstance) -> int:
    """
    Bin count of a First-Fit-Decreasing packing. Any feasible packing is an
    upper bound on the optimum, so it can replace one-bin-per-item as the
    number of candidate bins in the MIP.
    """
    _, info = FirstFitDecreasing().solve(instance)
    return info.num_bins
