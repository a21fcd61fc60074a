from __future__ import annotations
from dataclasses import dataclass

@dataclass
class HeuristicSolutionInfo:
    """Information about heuristic solution"""
    runtime: float
    num_bins: int
    items_skipped: int
    utilization: float
