from __future__ import annotations
import time
from typing import List, Tuple

from core.general_utils import fits
from core.models import Assignment, Item, PackingInstance
from offline.offline_heuristics.core import HeuristicSolutionInfo

class FirstFitDecreasing:
    """First-Fit Decreasing heuristic for bin packing"""

    def solve(self, inst: PackingInstance) -> Tuple[Assignment, HeuristicSolutionInfo]:
        """
        Pack items in order of decreasing weight, each into the first open bin
        with room, opening a new bin when none fits. Items heavier than the
        capacity cannot be packed at all and are skipped.
        """
        start_time = time.perf_counter()
        capacity = inst.bin_capacity

        # Sort items by weight (decreasing); stable, so ties keep insertion order
        items_sorted = sorted(inst.items, key=lambda it: it.weight, reverse=True)

        loads: List[float] = []
        contents: List[List[Item]] = []
        skipped = 0

        for item in items_sorted:
            if not fits(item.weight, capacity):
                skipped += 1
                continue
            for bin_idx, load in enumerate(loads):
                if fits(load + item.weight, capacity):
                    loads[bin_idx] += item.weight
                    contents[bin_idx].append(item)
                    break
            else:
                loads.append(item.weight)
                contents.append([item])

        assignment = Assignment()
        for bin_idx, packed in enumerate(contents):
            assignment.bins[bin_idx] = packed
            assignment.loads[bin_idx] = loads[bin_idx]
            for item in packed:
                assignment.item_to_bin[item.name] = bin_idx

        info = HeuristicSolutionInfo(
            runtime=time.perf_counter() - start_time,
            num_bins=len(contents),
            items_skipped=skipped,
            utilization=(sum(loads) / (len(loads) * capacity)) if loads else 0.0,
        )
        return assignment, info
