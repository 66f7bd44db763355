"""Interactive Plotly figures for the Rock-Paper-Scissors CFR solver.

Three public functions:

    build_convergence_figure(result)
        — Running average strategy and exploitability, 1×2 subplots.
    build_strategy_figure(result)
        — Grouped bars of average vs final-iterate strategies.
    save_figure_html(fig, path)
        — Export any figure to a self-contained HTML file.

Hover over any point to see the iteration, move, and probability.
"""

from __future__ import annotations

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from src.analysis.convergence_plots import build_convergence_data
from src.engine.moves import MOVES, move_name
from src.solvers.cfr import CfrResult

_MOVE_COLORS: list[str] = ["#1f77b4", "#2ca02c", "#d62728"]
_NASH_PROB: float = 1.0 / 3.0


def build_convergence_figure(result: CfrResult) -> go.Figure:
    """Build an interactive convergence figure.

    Left panel: one line per move with P1's running average probability.
    Right panel: exploitability of the average profile.

    Args:
        result: CfrResult returned by cfr.solve().

    Returns:
        go.Figure with four traces (three moves + exploitability).
    """
    iterations, averages, exploitability = build_convergence_data(result)

    fig = make_subplots(
        rows=1,
        cols=2,
        subplot_titles=["P1 running average", "Exploitability"],
        horizontal_spacing=0.12,
    )

    for move in MOVES:
        fig.add_trace(
            go.Scatter(
                x=iterations,
                y=averages[:, move],
                mode="lines+markers",
                name=move_name(move),
                line={"color": _MOVE_COLORS[move]},
                hovertemplate=(
                    f"<b>{move_name(move)}</b><br>"
                    "Iteration: %{x}<br>P: %{y:.4f}<extra></extra>"
                ),
            ),
            row=1,
            col=1,
        )

    fig.add_trace(
        go.Scatter(
            x=iterations,
            y=exploitability,
            mode="lines+markers",
            name="Exploitability",
            line={"color": "black"},
            hovertemplate="Iteration: %{x}<br>Exploitability: %{y:.5f}<extra></extra>",
        ),
        row=1,
        col=2,
    )

    fig.add_hline(y=_NASH_PROB, line_dash="dash", line_color="grey", row=1, col=1)

    fig.update_layout(
        title_text=f"CFR Convergence — {result.n_iterations:,} iterations",
        title_font_size=15,
        height=420,
        width=900,
    )
    fig.update_yaxes(title_text="Probability", range=[0.0, 1.0], row=1, col=1)
    fig.update_yaxes(title_text="Units per hand", row=1, col=2)
    fig.update_xaxes(title_text="Iteration")
    return fig


def build_strategy_figure(result: CfrResult) -> go.Figure:
    """Build grouped bars comparing average and final-iterate strategies.

    Args:
        result: CfrResult returned by cfr.solve().

    Returns:
        go.Figure with four bar traces.
    """
    labels = [move_name(m) for m in MOVES]
    series = [
        ("P1 average", result.p1_strategy),
        ("P2 average", result.p2_strategy),
        ("P1 final", result.p1_final_strategy),
        ("P2 final", result.p2_final_strategy),
    ]

    fig = go.Figure()
    for name, strategy in series:
        fig.add_trace(
            go.Bar(
                x=labels,
                y=[float(p) for p in strategy],
                name=name,
                text=[f"{float(p):.3f}" for p in strategy],
                hovertemplate="%{x}: %{y:.4f}<extra>" + name + "</extra>",
            )
        )
    fig.add_hline(y=_NASH_PROB, line_dash="dash", line_color="grey")
    fig.update_layout(
        barmode="group",
        title_text="Average vs Final-Iterate Strategy",
        yaxis={"title": "Probability", "range": [0.0, 1.0]},
        height=420,
        width=700,
    )
    return fig


# ─── HTML export ───────────────────────────────────────────────────────────────


def save_figure_html(fig: go.Figure, path: str) -> None:
    """Save a Plotly figure to a self-contained HTML file.

    Plotly JS is loaded from the CDN so the file itself remains compact.

    Args:
        fig:  Any go.Figure produced by this module.
        path: Destination file path (e.g. ``"cfr_convergence.html"``).
    """
    fig.write_html(path, include_plotlyjs="cdn")


# ─── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import sys

    from src.solvers.cfr import solve

    n_iter = int(sys.argv[1]) if len(sys.argv) > 1 else 10_000
    print(f"Running CFR for {n_iter} iterations …")
    result = solve(n_iterations=n_iter, convergence_check_every=max(n_iter // 50, 1))

    save_figure_html(build_convergence_figure(result), "cfr_convergence.html")
    save_figure_html(build_strategy_figure(result), "cfr_strategy.html")
    print("Saved: cfr_convergence.html, cfr_strategy.html")
