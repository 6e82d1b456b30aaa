from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import matplotlib

matplotlib.use("Agg")

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from sked_deconfliction.domain.flight import format_hhmm
from sked_deconfliction.domain.resources import Airspace, ResourceConfig
from sked_deconfliction.solver.solve_schedule import ScheduleSolution

MINUTES_PER_DAY = 24 * 60

AIRSPACE_COLORS = {
    Airspace.AREA4: "#1f77b4",
    Airspace.MOA2: "#2ca02c",
}
NO_AIRSPACE_COLOR = "#c7c7c7"
CONFLICT_EDGE = "#d62728"

ASSIGNMENT_COLUMNS = [
    "flight_id", "callsign", "flight_type", "event_type", "full_event_code",
    "brief", "takeoff", "land", "airspace", "physical_block", "block_units",
    "flexed_down", "tacan", "preset", "cms", "conflicts",
]
CONFLICT_COLUMNS = ["type", "message", "involved_flight_ids"]


@dataclass(frozen=True)
class ReportFrames:
    assignments: pd.DataFrame
    conflicts: pd.DataFrame
    utilization: pd.DataFrame
    summary: pd.DataFrame


def _usage_column(airspace: Airspace) -> str:
    return f"{airspace.value}_units"


def build_utilization(solution: ScheduleSolution, config: ResourceConfig) -> pd.DataFrame:
    """
    Per-minute resource usage over the flown part of the day.

    Each result holds its resources over [takeoff, land). The overlap
    buffer is not applied here, so the grid shows what is airborne.
    """
    columns = [_usage_column(a) for a in config.airspaces] + ["tacan_bases", "cms"]
    grid = np.zeros((MINUTES_PER_DAY, len(columns)), dtype=int)
    col = {name: i for i, name in enumerate(columns)}

    for r in solution.results:
        start = max(0, r.flight.start_minutes)
        end = min(MINUTES_PER_DAY, r.flight.end_minutes)
        if end <= start:
            continue
        if r.airspace is not None:
            grid[start:end, col[_usage_column(r.airspace.airspace)]] += r.airspace.block_units
        grid[start:end, col["tacan_bases"]] += len(r.tacan)
        grid[start:end, col["cms"]] += len(r.frequencies.cms)

    active = np.flatnonzero(grid.any(axis=1))
    if active.size == 0:
        return pd.DataFrame(columns=["minute", "time"] + columns)

    minutes = np.arange(active[0], active[-1] + 1)
    df = pd.DataFrame(grid[minutes], columns=columns)
    df.insert(0, "minute", minutes)
    df.insert(1, "time", [format_hhmm((m // 60) * 100 + m % 60) for m in minutes])
    return df


def build_report_frames(solution: ScheduleSolution, config: ResourceConfig) -> ReportFrames:
    rows = []
    for r in solution.results:
        f = r.flight
        rows.append(
            {
                "flight_id": f.flight_id,
                "callsign": f.callsign,
                "flight_type": f.flight_type.value,
                "event_type": f.event_type,
                "full_event_code": f.full_event_code,
                "brief": format_hhmm(f.brief_time),
                "takeoff": format_hhmm(f.scheduled_to),
                "land": format_hhmm(f.scheduled_land),
                "airspace": r.airspace.airspace.value if r.airspace else "",
                "physical_block": r.airspace.physical_block if r.airspace else "",
                "block_units": r.airspace.block_units if r.airspace else 0,
                "flexed_down": bool(r.airspace and r.airspace.flexed_down),
                "tacan": " ".join(t.label for t in r.tacan),
                "preset": r.frequencies.preset,
                "cms": " ".join(str(c) for c in r.frequencies.cms),
                "conflicts": len(r.conflicts),
            }
        )
    assignments = pd.DataFrame(rows, columns=ASSIGNMENT_COLUMNS)

    conflicts = pd.DataFrame(
        [
            {
                "type": c.conflict_type.value,
                "message": c.message,
                "involved_flight_ids": " ".join(c.involved_flight_ids),
            }
            for c in solution.conflicts
        ],
        columns=CONFLICT_COLUMNS,
    )

    utilization = build_utilization(solution, config)

    s = solution.summary()
    summary_rows: List[Dict[str, object]] = [
        {"metric": "lines_parsed", "value": s.lines_parsed},
        {"metric": "flights", "value": s.flights},
        {"metric": "assigned", "value": s.assigned},
        {"metric": "conflicts", "value": s.conflicts},
    ]
    for a, pool in config.airspaces.items():
        col = _usage_column(a)
        peak = int(utilization[col].max()) if not utilization.empty else 0
        summary_rows.append({"metric": f"peak_{col}", "value": peak})
        summary_rows.append({"metric": f"capacity_{col}", "value": pool.block_units})
    for col in ("tacan_bases", "cms"):
        peak = int(utilization[col].max()) if not utilization.empty else 0
        summary_rows.append({"metric": f"peak_{col}", "value": peak})
    summary = pd.DataFrame(summary_rows)

    return ReportFrames(
        assignments=assignments,
        conflicts=conflicts,
        utilization=utilization,
        summary=summary,
    )


def plot_timeline(solution: ScheduleSolution, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    results = solution.results

    fig, ax = plt.subplots(figsize=(12, max(3, 0.3 * len(results) + 1)))

    for i, r in enumerate(results):
        start = r.flight.start_minutes / 60.0
        width = max(r.flight.end_minutes - r.flight.start_minutes, 1) / 60.0
        color = AIRSPACE_COLORS.get(r.airspace.airspace, NO_AIRSPACE_COLOR) if r.airspace else NO_AIRSPACE_COLOR
        ax.barh(
            i,
            width,
            left=start,
            color=color,
            edgecolor=CONFLICT_EDGE if r.conflicts else "none",
            linewidth=2 if r.conflicts else 0,
        )

    ax.set_yticks(range(len(results)))
    ax.set_yticklabels([r.flight.flight_id for r in results], fontsize=8)
    ax.invert_yaxis()
    ax.set_xlabel("Hour of day", fontsize=12)
    ax.set_title("Flight Timeline by Airspace", fontsize=16, fontweight="bold")
    ax.xaxis.grid(True, linestyle="--", linewidth=0.6, alpha=0.4)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    legend_patches = [mpatches.Patch(color=c, label=a.value) for a, c in AIRSPACE_COLORS.items()]
    legend_patches.append(mpatches.Patch(color=NO_AIRSPACE_COLOR, label="no airspace"))
    legend_patches.append(mpatches.Patch(facecolor="white", edgecolor=CONFLICT_EDGE, label="conflict"))
    ax.legend(
        handles=legend_patches,
        fontsize=10,
        loc="upper left",
        bbox_to_anchor=(1.02, 1),
        borderaxespad=0,
    )

    plt.tight_layout()
    plt.savefig(out_dir / "timeline.png", dpi=160, bbox_inches="tight")
    plt.close(fig)


def plot_utilization(frames: ReportFrames, config: ResourceConfig, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    util = frames.utilization

    fig, ax = plt.subplots(figsize=(12, 5))
    if not util.empty:
        hours = util["minute"] / 60.0
        for a, pool in config.airspaces.items():
            color = AIRSPACE_COLORS.get(a)
            ax.step(hours, util[_usage_column(a)], where="post", color=color, label=f"{pool.label} used")
            ax.axhline(pool.block_units, color=color, linestyle=":", linewidth=1)

    ax.set_xlabel("Hour of day")
    ax.set_ylabel("Block units")
    ax.set_title("Airspace Utilization vs Capacity", fontsize=14, fontweight="bold")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    if not util.empty:
        ax.legend(fontsize=10, loc="upper right")

    plt.tight_layout()
    plt.savefig(out_dir / "utilization.png", dpi=160)
    plt.close(fig)


def save_plots(frames: ReportFrames, solution: ScheduleSolution, out_dir: Path, config: ResourceConfig) -> None:
    plot_timeline(solution, out_dir)
    plot_utilization(frames, config, out_dir)


def save_tables(frames: ReportFrames, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    frames.assignments.to_csv(out_dir / "assignments.csv", index=False)
    frames.conflicts.to_csv(out_dir / "conflicts.csv", index=False)
    frames.utilization.to_csv(out_dir / "utilization.csv", index=False)
    frames.summary.to_csv(out_dir / "summary.csv", index=False)
