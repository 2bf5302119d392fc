"""
permitrack.viz
==============

Minimal plotting helpers for the report projections, used by the CLI
``chart`` command.  Outputs are PNGs written to
:data:`permitrack.settings.CHART_DIR` (created on first use).
Filenames can be overridden via keyword argument.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt

from .models import Expat, PermitStatus, ProcessStage, ProcessType
from .reports import pipeline_counts, status_distribution
from .settings import CHART_DIR

# One colour per permit status, matching the dashboard badges.
STATUS_COLOURS = {
    PermitStatus.ACTIVE: "#2b9348",
    PermitStatus.EXPIRES_SOON: "#e9c46a",
    PermitStatus.EXPIRED: "#d62828",
    PermitStatus.IN_PROCESS: "#277da1",
}


def _out(out_path: Optional[str | os.PathLike], default_name: str) -> Path:
    if out_path is not None:
        return Path(out_path)
    CHART_DIR.mkdir(parents=True, exist_ok=True)
    return CHART_DIR / default_name


# ---------------------------------------------------------------------
# Plot 1 – bar chart of expat counts by permit status
# ---------------------------------------------------------------------
def status_summary(
    expats: Sequence[Expat],
    out_path: Optional[str | os.PathLike] = None,
) -> Path:
    """
    Generate a bar chart of how many expats hold a permit in each status.

    Parameters
    ----------
    expats : sequence of Expat
        Roster with refreshed permit statuses.
    out_path : str or Path, optional
        Where to save the PNG (default ``<CHART_DIR>/status_snapshot.png``).

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    stats = status_distribution(expats)
    xs = list(PermitStatus)
    ys = [stats.counts[s] for s in xs]

    plt.figure()
    bars = plt.bar([s.value for s in xs], ys,
                   color=[STATUS_COLOURS[s] for s in xs], edgecolor="#333")
    # add counts on top of each bar
    for rect, cnt in zip(bars, ys):
        plt.text(rect.get_x() + rect.get_width() / 2,
                 cnt + 0.05,
                 str(cnt),
                 ha="center", va="bottom",
                 fontsize=8, color="#333")
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.title(f"Permit Status ({stats.total} expats)")
    plt.ylabel("Expat Count")
    plt.tight_layout()

    out_path = _out(out_path, "status_snapshot.png")
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path


# ---------------------------------------------------------------------
# Plot 2 – horizontal pipeline bars per process type
# ---------------------------------------------------------------------
def pipeline_chart(
    expats: Sequence[Expat],
    process_type: ProcessType = ProcessType.ONBOARDING,
    out_path: Optional[str | os.PathLike] = None,
) -> Path:
    """
    Draw how many expats sit at each stage of the onboarding or renewal
    pipeline.

    Returns
    -------
    pathlib.Path
        Final image path.
    """
    counts: Dict[ProcessStage, int] = pipeline_counts(expats, process_type)
    labels = [stage.value for stage in counts]

    plt.figure(figsize=(7, 3))
    plt.barh(labels, list(counts.values()), color="#1d4ed8")
    plt.gca().invert_yaxis()  # first stage on top
    plt.xlabel("Expats")
    plt.title(f"{process_type.value.title()} Pipeline")
    plt.tight_layout()

    out_path = _out(out_path, f"{process_type.value}_pipeline.png")
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path
