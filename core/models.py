# binpacking/core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List
import math
import numbers

from core.errors import InvalidArgumentError

BinId = int

# ---------------------------
# Static problem definitions
# ---------------------------

@dataclass(frozen=True)
class Item:
    """
    Item to be packed.
    - name: unique within an instance
    - weight: positive weight
    """
    name: str
    weight: float


class PackingInstance:
    """
    A packing instance: one uniform bin capacity and the items to pack.
    Items are only ever appended (via add_items), insertion order is preserved.
    """

    def __init__(self, bin_capacity: float) -> None:
        if not _is_positive_number(bin_capacity):
            raise InvalidArgumentError(f"Bin capacity must be a positive number, got {bin_capacity!r}.")
        self._bin_capacity = float(bin_capacity)
        self._items: List[Item] = []
        self._names: set[str] = set()

    @property
    def bin_capacity(self) -> float:
        return self._bin_capacity

    @property
    def items(self) -> List[Item]:
        # copy, so the formulation stage cannot mutate the instance
        return list(self._items)

    @property
    def max_bins(self) -> int:
        """One item per bin is always feasible, so the item count is a safe upper bound."""
        return len(self._items)

    @property
    def total_weight(self) -> float:
        return float(sum(it.weight for it in self._items))

    def add_items(self, name: str, quantity: int, weight: float) -> List[Item]:
        """
        Append `quantity` copies of an item, named name_1 .. name_quantity.
        Returns the newly added items.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, numbers.Integral):
            raise InvalidArgumentError(f"Quantity of '{name}' must be an integer, got {quantity!r}.")
        if quantity < 0:
            raise InvalidArgumentError(f"Quantity of '{name}' must be >= 0, got {quantity}.")
        if not _is_positive_number(weight):
            raise InvalidArgumentError(f"Weight of '{name}' must be a positive number, got {weight!r}.")

        new_items = [Item(name=f"{name}_{k}", weight=float(weight)) for k in range(1, int(quantity) + 1)]
        clashes = [it.name for it in new_items if it.name in self._names]
        if clashes:
            raise InvalidArgumentError(f"Item names must be unique; already present: {clashes[:5]}")

        self._items.extend(new_items)
        self._names.update(it.name for it in new_items)
        return new_items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"PackingInstance(bin_capacity={self._bin_capacity}, items={len(self._items)})"


def _is_positive_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0

# ---------------------------
# Solve outcome
# ---------------------------

class SolveStatus(str, Enum):
    OPTIMAL = "OPTIMAL"
    INFEASIBLE = "INFEASIBLE"
    NOT_SOLVED = "NOT_SOLVED"


@dataclass
class Assignment:
    """
    Packing produced by one solve.
    - bins: bin index -> items packed into that bin (only used bins appear)
    - item_to_bin: item name -> bin index
    - loads: bin index -> packed weight
    """
    bins: Dict[BinId, List[Item]] = field(default_factory=dict)
    item_to_bin: Dict[str, BinId] = field(default_factory=dict)
    loads: Dict[BinId, float] = field(default_factory=dict)

    @property
    def used_bins(self) -> List[BinId]:
        return sorted(self.bins)

    @property
    def num_bins(self) -> int:
        return len(self.bins)

    @property
    def total_weight(self) -> float:
        return float(sum(self.loads.values()))
