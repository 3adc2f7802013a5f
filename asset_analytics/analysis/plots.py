"""Matplotlib charts for asset analytics.

Each function saves one PNG and closes the figure.  Uses the Agg backend
so no display is needed.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from asset_analytics.models.analytics import AssetAnalytics

_FIG_DPI = 120
_PLANNED_COLOR = "#3b82f6"
_UNPLANNED_COLOR = "#ef4444"
_AVAILABILITY_COLOR = "#16a34a"


def plot_availability_trend(analytics: AssetAnalytics, save_path: Path) -> None:
    """Stacked planned/unplanned downtime bars per period with availability on a second axis."""
    periods = analytics.performance_by_period
    if not periods:
        return

    labels = [p.period for p in periods]
    x = np.arange(len(periods))
    planned_h = np.array([p.planned_downtime for p in periods]) / 60
    unplanned_h = np.array([p.unplanned_downtime for p in periods]) / 60

    fig, ax = plt.subplots(figsize=(max(6, len(periods) * 0.6), 4))
    ax.bar(x, planned_h, color=_PLANNED_COLOR, label="Planned")
    ax.bar(x, unplanned_h, bottom=planned_h, color=_UNPLANNED_COLOR, label="Unplanned")
    ax.set_ylabel("Downtime (h)")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=8)

    ax2 = ax.twinx()
    ax2.plot(x, [p.availability for p in periods], color=_AVAILABILITY_COLOR, marker="o", linewidth=1.2)
    ax2.set_ylabel("Availability (%)")
    ax2.set_ylim(0, 105)

    ax.set_title(f"{analytics.asset_name or analytics.asset_id}: availability and downtime")
    ax.legend(loc="upper left", fontsize=8)

    fig.tight_layout()
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=_FIG_DPI)
    plt.close(fig)


def plot_downtime_breakdown(analytics: AssetAnalytics, save_path: Path) -> None:
    """Pie chart of planned vs unplanned downtime minutes."""
    breakdown = analytics.downtime_breakdown
    if breakdown.total <= 0:
        return

    fig, ax = plt.subplots(figsize=(4.5, 4.5))
    ax.pie(
        [breakdown.planned.total, breakdown.unplanned.total],
        labels=[
            f"Planned ({breakdown.planned.incidents})",
            f"Unplanned ({breakdown.unplanned.incidents})",
        ],
        colors=[_PLANNED_COLOR, _UNPLANNED_COLOR],
        autopct="%1.1f%%",
        startangle=90,
    )
    ax.set_title("Downtime by type")

    fig.tight_layout()
    save_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(save_path, dpi=_FIG_DPI)
    plt.close(fig)
