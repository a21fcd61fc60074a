from __future__ import annotations
from pathlib import Path
from typing import Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns

from offline.models import PackingResult


def plot_bin_loads(result: PackingResult, capacity: float, save_path: Optional[Path] = None):
    """
    Stacked bar chart of a packing: one bar per used bin, one segment per item,
    with the capacity as a dashed line. Returns the figure; saves it if
    save_path is given.
    """
    if result.assignment is None:
        raise ValueError(f"No packing to plot (status {result.status.value})")
    assignment = result.assignment
    bins = assignment.used_bins

    # one colour per item type (name without the _k suffix)
    types = sorted({it.name.rsplit("_", 1)[0] for j in bins for it in assignment.bins[j]})
    palette = dict(zip(types, sns.color_palette("husl", max(len(types), 1))))

    fig, ax = plt.subplots(figsize=(max(6, 0.6 * len(bins) + 2), 5))
    for pos, j in enumerate(bins):
        bottom = 0.0
        for item in assignment.bins[j]:
            ax.bar(pos, item.weight, bottom=bottom, color=palette[item.name.rsplit("_", 1)[0]],
                   edgecolor="black", linewidth=0.5)
            bottom += item.weight

    ax.axhline(capacity, linestyle="--", color="red", linewidth=1.5, label=f"Capacity ({capacity:g})")
    ax.set_xticks(range(len(bins)))
    ax.set_xticklabels([str(j) for j in bins])
    ax.set_xlabel("Bin")
    ax.set_ylabel("Packed weight")
    ax.set_title(f"Packing: {assignment.num_bins} bins (L1 bound {result.lower_bound})",
                 fontsize=12, fontweight="bold")
    handles = [plt.Rectangle((0, 0), 1, 1, color=palette[t]) for t in types]
    ax.legend(handles + ax.get_legend_handles_labels()[0],
              types + ax.get_legend_handles_labels()[1],
              loc="upper left", bbox_to_anchor=(1.01, 1), fontsize=8)
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig
