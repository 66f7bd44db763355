"""Convergence plots for the Rock-Paper-Scissors CFR solver.

One public data-builder returns NumPy arrays that can be used
programmatically or passed to the plot helpers:

    build_convergence_data(result) — (iterations, averages, exploitability)

Two public plot functions render matplotlib figures:

    plot_convergence(result, ...)    — 1×2 figure: running average + exploitability
    plot_strategy_bars(result, ...)  — grouped bars: average vs final iterate

Array convention:
    iterations     : shape (n_checkpoints,)    int
    averages       : shape (n_checkpoints, 3)  P1 running average per move
    exploitability : shape (n_checkpoints,)    float
"""

from __future__ import annotations

import matplotlib
import matplotlib.axes
import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np

from src.engine.moves import MOVES, move_name
from src.solvers.cfr import CfrResult

# ─── Constants ────────────────────────────────────────────────────────────────

_MOVE_COLORS: list[str] = ["#1f77b4", "#2ca02c", "#d62728"]
_NASH_COLOR: str = "#7f7f7f"
_NASH_PROB: float = 1.0 / 3.0


# ─── Data builder ─────────────────────────────────────────────────────────────


def build_convergence_data(result: CfrResult) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return (iterations, averages, exploitability) arrays from a CfrResult.

    Args:
        result: CfrResult returned by cfr.solve().

    Returns:
        iterations (int64), averages (float64, shape (n, 3)),
        exploitability (float64).
    """
    iterations = np.array([it for it, _ in result.exploitability_trace], dtype=np.int64)
    exploitability = np.array([eps for _, eps in result.exploitability_trace], dtype=np.float64)
    averages = np.asarray(result.average_trace, dtype=np.float64).reshape(-1, len(MOVES))
    return iterations, averages, exploitability


# ─── Rendering helpers ────────────────────────────────────────────────────────


def _render_average_panel(
    ax: matplotlib.axes.Axes,
    iterations: np.ndarray,
    averages: np.ndarray,
) -> None:
    for move in MOVES:
        ax.plot(
            iterations,
            averages[:, move],
            marker="o",
            markersize=3,
            color=_MOVE_COLORS[move],
            label=move_name(move),
        )
    ax.axhline(_NASH_PROB, color=_NASH_COLOR, linestyle="--", linewidth=1, label="Nash (1/3)")
    ax.set_ylim(0.0, 1.0)
    ax.set_title("P1 running average strategy", fontsize=10)
    ax.set_xlabel("Iteration", fontsize=9)
    ax.set_ylabel("Probability", fontsize=9)
    ax.legend(fontsize=8)


def _render_exploitability_panel(
    ax: matplotlib.axes.Axes,
    iterations: np.ndarray,
    exploitability: np.ndarray,
) -> None:
    ax.plot(iterations, exploitability, marker="o", markersize=3, color="black")
    # Exploitability can be exactly 0; keep the log axis finite.
    if np.all(exploitability > 0.0):
        ax.set_yscale("log")
    ax.set_title("Exploitability of average profile", fontsize=10)
    ax.set_xlabel("Iteration", fontsize=9)
    ax.set_ylabel("Units per hand", fontsize=9)


def _finish(fig: matplotlib.figure.Figure, show: bool, save_path: str | None) -> None:
    plt.tight_layout()
    if save_path is not None:
        fig.savefig(save_path, bbox_inches="tight", dpi=120)
    if show:
        plt.show()


# ─── Public plot functions ────────────────────────────────────────────────────


def plot_convergence(
    result: CfrResult,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Plot the running average strategy and exploitability as a 1×2 figure.

    Args:
        result:    CfrResult from cfr.solve().
        show:      If True, call plt.show() after rendering.
        save_path: If not None, save the figure to this path before showing.

    Returns:
        matplotlib.figure.Figure with two axes.
    """
    iterations, averages, exploitability = build_convergence_data(result)

    fig, (ax_avg, ax_eps) = plt.subplots(1, 2, figsize=(11, 4.5))
    fig.suptitle(
        f"CFR Self-Play Convergence  ({result.n_iterations:,} iterations)",
        fontsize=13,
        fontweight="bold",
    )
    _render_average_panel(ax_avg, iterations, averages)
    _render_exploitability_panel(ax_eps, iterations, exploitability)

    _finish(fig, show, save_path)
    return fig


def plot_strategy_bars(
    result: CfrResult,
    *,
    show: bool = True,
    save_path: str | None = None,
) -> matplotlib.figure.Figure:
    """Grouped bar chart: P1/P2 average strategy vs final iterate.

    Args:
        result:    CfrResult from cfr.solve().
        show:      If True, call plt.show().
        save_path: If not None, save to path.

    Returns:
        matplotlib.figure.Figure with one axes holding four bar groups.
    """
    series = [
        ("P1 average", result.p1_strategy),
        ("P2 average", result.p2_strategy),
        ("P1 final", result.p1_final_strategy),
        ("P2 final", result.p2_final_strategy),
    ]
    x = np.arange(len(MOVES))
    width = 0.2

    fig, ax = plt.subplots(figsize=(7, 4.5))
    for i, (label, strategy) in enumerate(series):
        ax.bar(x + (i - 1.5) * width, strategy, width, label=label)
    ax.axhline(_NASH_PROB, color=_NASH_COLOR, linestyle="--", linewidth=1, label="Nash (1/3)")

    ax.set_xticks(x)
    ax.set_xticklabels([move_name(m) for m in MOVES], fontsize=9)
    ax.set_ylim(0.0, 1.0)
    ax.set_ylabel("Probability", fontsize=9)
    ax.set_title("Average vs final-iterate strategy", fontsize=12, fontweight="bold")
    ax.legend(fontsize=8)

    _finish(fig, show, save_path)
    return fig


# ─── Entry point ──────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from src.solvers.cfr import solve

    matplotlib.use("Agg")

    n_iter = int(sys.argv[1]) if len(sys.argv) > 1 else 10_000
    print(f"Running CFR for {n_iter} iterations …")
    result = solve(n_iterations=n_iter, convergence_check_every=max(n_iter // 50, 1))

    print("Generating convergence plots …")
    plot_convergence(result, show=False, save_path="cfr_convergence.png")
    plot_strategy_bars(result, show=False, save_path="cfr_strategy_bars.png")
    print("Saved: cfr_convergence.png, cfr_strategy_bars.png")
