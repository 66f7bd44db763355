"""Tests for convergence plots (src/analysis/convergence_plots.py).

Tests verify data-array shapes and value invariants (no display required)
plus that each plot function returns a well-formed matplotlib Figure.
The Agg backend is activated before any pyplot import so CI/CD environments
without a display server can run the suite safely.
"""

from __future__ import annotations

import os

import matplotlib

matplotlib.use("Agg")  # must precede any pyplot import

import matplotlib.figure
import matplotlib.pyplot as plt
import numpy as np
import pytest

from src.analysis.convergence_plots import (
    build_convergence_data,
    plot_convergence,
    plot_strategy_bars,
)
from src.solvers.cfr import CfrResult, solve


@pytest.fixture(scope="module")
def result() -> CfrResult:
    return solve(n_iterations=600, seed=13, convergence_check_every=100)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


# ─── build_convergence_data ───────────────────────────────────────────────────


class TestBuildConvergenceData:
    def test_shapes(self, result: CfrResult) -> None:
        iterations, averages, exploitability = build_convergence_data(result)
        assert iterations.shape == (6,)
        assert averages.shape == (6, 3)
        assert exploitability.shape == (6,)

    def test_iterations_increasing(self, result: CfrResult) -> None:
        iterations, _, _ = build_convergence_data(result)
        assert iterations.tolist() == [100, 200, 300, 400, 500, 600]

    def test_averages_are_distributions(self, result: CfrResult) -> None:
        _, averages, _ = build_convergence_data(result)
        np.testing.assert_allclose(averages.sum(axis=1), 1.0)

    def test_exploitability_non_negative(self, result: CfrResult) -> None:
        _, _, exploitability = build_convergence_data(result)
        assert np.all(exploitability >= 0.0)


# ─── plot_convergence ─────────────────────────────────────────────────────────


class TestPlotConvergence:
    def test_returns_figure(self, result: CfrResult) -> None:
        fig = plot_convergence(result, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_has_two_axes(self, result: CfrResult) -> None:
        fig = plot_convergence(result, show=False)
        assert len(fig.axes) == 2

    def test_average_panel_has_move_lines_and_nash_line(self, result: CfrResult) -> None:
        fig = plot_convergence(result, show=False)
        assert len(fig.axes[0].get_lines()) == 4

    def test_saves_png(self, result: CfrResult, tmp_path) -> None:
        path = tmp_path / "convergence.png"
        plot_convergence(result, show=False, save_path=str(path))
        assert os.path.exists(path)
        assert os.path.getsize(path) > 0


# ─── plot_strategy_bars ───────────────────────────────────────────────────────


class TestPlotStrategyBars:
    def test_returns_figure(self, result: CfrResult) -> None:
        fig = plot_strategy_bars(result, show=False)
        assert isinstance(fig, matplotlib.figure.Figure)

    def test_bar_count(self, result: CfrResult) -> None:
        fig = plot_strategy_bars(result, show=False)
        # Four series × three moves.
        assert len(fig.axes[0].patches) == 12

    def test_saves_png(self, result: CfrResult, tmp_path) -> None:
        path = tmp_path / "bars.png"
        plot_strategy_bars(result, show=False, save_path=str(path))
        assert os.path.exists(path)
