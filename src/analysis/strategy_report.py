"""Strategy report for the Rock-Paper-Scissors CFR solver.

Four public functions format solver and simulator output into human-readable
tables:

    print_average_strategy(result) — average vs final-iterate strategies, game value
    print_convergence(result)      — exploitability at each checkpoint
    print_regret_summary(result)   — cumulative regret per move for both players
    print_simulation(sim)          — Monte Carlo EV summary
"""

from __future__ import annotations

import numpy as np

from src.analysis.simulator import SimulationResult
from src.engine.moves import MOVES, move_name
from src.solvers.cfr import CfrResult, best_response

# Nash equilibrium of Rock-Paper-Scissors.
_NASH_PROB: float = 1.0 / 3.0


def format_strategy(strategy: np.ndarray) -> str:
    """Return 'R=0.3333 P=0.3333 S=0.3333' for a distribution."""
    return " ".join(f"{move_name(m)[0]}={float(strategy[m]):.4f}" for m in MOVES)


# ─── Public report functions ──────────────────────────────────────────────────


def print_average_strategy(result: CfrResult) -> None:
    """Print both players' average and final-iterate strategies.

    Args:
        result: CfrResult returned by cfr.solve().
    """
    print("=" * 56)
    print("Average Strategy (Nash approximation)")
    print("=" * 56)
    print(f"  {'Move':<9}  {'P1 avg':>8}  {'P2 avg':>8}  {'P1 last':>8}  {'P2 last':>8}")
    print(f"  {'-' * 9:<9}  {'-' * 8:>8}  {'-' * 8:>8}  {'-' * 8:>8}  {'-' * 8:>8}")
    for move in MOVES:
        print(
            f"  {move_name(move):<9}  "
            f"{result.p1_strategy[move]:>8.4f}  {result.p2_strategy[move]:>8.4f}  "
            f"{result.p1_final_strategy[move]:>8.4f}  {result.p2_final_strategy[move]:>8.4f}"
        )
    max_dev = float(np.max(np.abs(result.p1_strategy - _NASH_PROB)))
    print()
    print(f"  Iterations:        {result.n_iterations}")
    print(f"  Game value (P1):   {result.game_value:+.4f} units")
    print(f"  Exploitability:    {result.exploitability:.4f} units")
    print(f"  Max |P1 − 1/3|:    {max_dev:.4f}")
    print(f"  Best reply to P1:  {move_name(best_response(result.p1_strategy))}")
    print()


def print_convergence(result: CfrResult) -> None:
    """Print exploitability of the running average at each checkpoint.

    Args:
        result: CfrResult returned by cfr.solve().
    """
    print("=" * 56)
    print("Convergence  (exploitability of running average)")
    print("=" * 56)
    print(f"  {'Iteration':>10}  {'Exploitability':>14}  {'P1 running average':<24}")
    print(f"  {'-' * 10:>10}  {'-' * 14:>14}  {'-' * 24:<24}")
    for (iteration, eps), avg in zip(result.exploitability_trace, result.average_trace, strict=True):
        print(f"  {iteration:>10}  {eps:>14.5f}  {format_strategy(avg):<24}")
    print()


def print_regret_summary(result: CfrResult) -> None:
    """Print each player's cumulative regret per move after training.

    Args:
        result: CfrResult returned by cfr.solve().
    """
    print("=" * 56)
    print("Cumulative Regret")
    print("=" * 56)
    print(f"  {'Move':<9}  {'P1 regret':>10}  {'P2 regret':>10}")
    print(f"  {'-' * 9:<9}  {'-' * 10:>10}  {'-' * 10:>10}")
    for move in MOVES:
        print(
            f"  {move_name(move):<9}  "
            f"{result.p1_cumulative_regret[move]:>10.1f}  {result.p2_cumulative_regret[move]:>10.1f}"
        )
    # Average regret per iteration bounds the exploitability of the average strategy.
    p1_avg_regret = float(np.max(result.p1_cumulative_regret)) / result.n_iterations
    p2_avg_regret = float(np.max(result.p2_cumulative_regret)) / result.n_iterations
    print()
    print(f"  Max average regret:  P1 {p1_avg_regret:+.4f}  P2 {p2_avg_regret:+.4f}")
    print()


def print_simulation(sim: SimulationResult) -> None:
    """Print a Monte Carlo simulation summary.

    Args:
        sim: SimulationResult returned by simulator.simulate_hands().
    """
    print("=" * 56)
    print("Monte Carlo Simulation")
    print("=" * 56)
    print(f"  Hands:        {sim.n_hands:,}")
    print(f"  EV per hand:  P1 {sim.p1_ev:+.4f}   P2 {sim.p2_ev:+.4f}")
    print(f"  95% CI (P1):  [{sim.ci_95_low:+.4f}, {sim.ci_95_high:+.4f}]")
    print(f"  Std dev:      {sim.std_ev:.4f}")
    print(f"  P1 wins:      {sim.p1_wins:,}")
    print(f"  P2 wins:      {sim.p2_wins:,}")
    print(f"  Ties:         {sim.ties:,}")
    print()
