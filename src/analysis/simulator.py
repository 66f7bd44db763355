"""
Monte Carlo simulator for Rock-Paper-Scissors strategy match-ups.

Plays n_hands rounds between two fixed mixed strategies, sampling each move
with the solver's inverse-CDF sampler and scoring with the game rules, and
summarises per-hand payouts into EV statistics with confidence intervals.

Primary use: check a CFR average strategy against fixed opponents. Any
strategy facing the uniform Nash mix has EV 0, so a trained strategy should
land inside the confidence interval around 0 in that match-up.

Known targets (exact expected values):
    (0.1, 0.1, 0.8) vs (0.8, 0.2, 0.0) → P1 EV = -0.42 units/hand
    uniform vs uniform                 → P1 EV =  0.00 units/hand
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from src.engine.rules import Outcome, expected_utility, settle
from src.solvers.cfr import _check_positive_int, sample_move, uniform_strategy

logger = logging.getLogger(__name__)

# Sample match-up: scissors-heavy P1 against rock-heavy P2.
VALIDATION_P1: tuple[float, float, float] = (0.1, 0.1, 0.8)
VALIDATION_P2: tuple[float, float, float] = (0.8, 0.2, 0.0)


# ─── Result type ──────────────────────────────────────────────────────────────


@dataclass
class SimulationResult:
    """Aggregate statistics from a Monte Carlo simulation run.

    Attributes:
        n_hands:    Number of hands simulated.
        p1_ev:      Mean payout per hand for player 1.
        p2_ev:      Mean payout per hand for player 2 (always -p1_ev).
        std_ev:     Sample standard deviation of per-hand payouts.
        ci_95_low:  Lower bound of 95% confidence interval for p1_ev.
        ci_95_high: Upper bound of 95% confidence interval for p1_ev.
        p1_wins:    Hands won by player 1.
        p2_wins:    Hands won by player 2.
        ties:       Tied hands.
        payouts:    Raw per-hand P1 payout array (float64, length n_hands), or
                    None if simulate_hands() was called with return_payouts=False.
    """

    n_hands: int
    p1_ev: float
    p2_ev: float
    std_ev: float
    ci_95_low: float
    ci_95_high: float
    p1_wins: int
    p2_wins: int
    ties: int
    payouts: np.ndarray | None = None

    def __str__(self) -> str:
        return (
            f"Hands: {self.n_hands:,} | "
            f"P1 EV: {self.p1_ev:+.4f} | P2 EV: {self.p2_ev:+.4f} | "
            f"95% CI: [{self.ci_95_low:.4f}, {self.ci_95_high:.4f}] | "
            f"W/L/T: {self.p1_wins}/{self.p2_wins}/{self.ties}"
        )


# ─── Core simulation loop ─────────────────────────────────────────────────────


def simulate_hands(
    p1_strategy: np.ndarray,
    p2_strategy: np.ndarray,
    n_hands: int = 100_000,
    seed: int | None = 42,
    return_payouts: bool = False,
) -> SimulationResult:
    """Simulate n_hands rounds between two fixed strategies.

    Args:
        p1_strategy:    Player 1's distribution over (Rock, Paper, Scissors).
        p2_strategy:    Player 2's distribution.
        n_hands:        Number of hands to simulate (positive integer).
        seed:           Generator seed for reproducibility. None for a
                        non-deterministic run.
        return_payouts: If True, attach the raw per-hand P1 payout array to
                        SimulationResult.payouts.

    Returns:
        SimulationResult with EV statistics for the run.

    Raises:
        ValueError: if n_hands is not a positive integer or either strategy
                    is not a valid distribution.
    """
    _check_positive_int(n_hands, "n_hands")
    rng = np.random.default_rng(seed)

    payouts = np.empty(n_hands, dtype=np.float64)
    p1_wins = p2_wins = ties = 0

    for i in range(n_hands):
        p1_move = sample_move(p1_strategy, rng)
        p2_move = sample_move(p2_strategy, rng)
        outcome, payout = settle(p1_move, p2_move)
        payouts[i] = payout

        if outcome is Outcome.WIN:
            p1_wins += 1
        elif outcome is Outcome.LOSS:
            p2_wins += 1
        else:
            ties += 1

    mean = float(np.mean(payouts))
    std = float(np.std(payouts, ddof=1)) if n_hands > 1 else 0.0
    ci_margin = 1.96 * std / math.sqrt(n_hands)

    logger.debug("Simulated %d hands: p1_ev=%+.4f", n_hands, mean)

    return SimulationResult(
        n_hands=n_hands,
        p1_ev=mean,
        p2_ev=-mean,
        std_ev=std,
        ci_95_low=mean - ci_margin,
        ci_95_high=mean + ci_margin,
        p1_wins=p1_wins,
        p2_wins=p2_wins,
        ties=ties,
        payouts=payouts if return_payouts else None,
    )


# ─── Validation convenience ───────────────────────────────────────────────────


def run_validation(
    n_hands: int = 100_000,
    seed: int = 42,
) -> dict[str, SimulationResult]:
    """Run the sample match-up and uniform vs uniform.

    Results should match the exact expected values within the 95% CI:
        sample_matchup → p1_ev ≈ -0.42
        uniform        → p1_ev ≈  0.00

    Args:
        n_hands: Hands per run.
        seed:    Generator seed. Each match-up gets a separate seeded run.

    Returns:
        {'sample_matchup': SimulationResult, 'uniform': SimulationResult}
    """
    sample = simulate_hands(
        np.array(VALIDATION_P1),
        np.array(VALIDATION_P2),
        n_hands=n_hands,
        seed=seed,
    )
    uniform = simulate_hands(
        uniform_strategy(),
        uniform_strategy(),
        n_hands=n_hands,
        seed=seed,
    )
    return {"sample_matchup": sample, "uniform": uniform}


# ─── __main__ ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("Rock-Paper-Scissors Monte Carlo Validation — 100,000 hands per match-up\n")
    results = run_validation(n_hands=100_000)
    print(f"{VALIDATION_P1} vs {VALIDATION_P2}: {results['sample_matchup']}")
    print(f"uniform vs uniform:              {results['uniform']}")
    exact = expected_utility(np.array(VALIDATION_P1), np.array(VALIDATION_P2))
    print(f"\nExact P1 EV for the sample match-up: {exact:+.4f}")
