"""Sampled CFR self-play solver for Rock-Paper-Scissors.

Finds the Nash equilibrium of Rock-Paper-Scissors with Counterfactual Regret
Minimization (CFR) played against itself.

Game-theory summary
-------------------
Rock-Paper-Scissors is a two-player zero-sum simultaneous-move game with a
single decision point per player and three pure strategies. Its unique Nash
equilibrium is the uniform mix (1/3, 1/3, 1/3), with game value 0.

Algorithm: sampled CFR (regret matching in self-play)
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Each iteration, for both players independently:
  1. Current strategy ← regret matching on the player's cumulative regret.
  2. One move is sampled from each current strategy.
  3. Regret vector: r[c] = u(c, opp_move) − u(own_move, opp_move).
  4. Cumulative regret += regret vector (regrets may go negative; no floor).
  5. The current strategy (not the sampled move) is appended to the
     player's strategy history.

Nash equilibrium ← arithmetic mean of the strategy history. The final
iterate cycles around the equilibrium and does not converge on its own.

State ownership
~~~~~~~~~~~~~~~
All accumulators live on a CfrTrainer instance, so independent training
runs never share state. Randomness comes from an injected
numpy.random.Generator; pass a seed for reproducible runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from src.engine.moves import MOVES, NUM_MOVES, Move
from src.engine.rules import PAYOFF_MATRIX, expected_utility, utility

logger = logging.getLogger(__name__)

# ─── Defaults ──────────────────────────────────────────────────────────────────

DEFAULT_ITERATIONS: int = 10_000
DEFAULT_CHECK_EVERY: int = 1_000
DEFAULT_SEED: int | None = None

# Allowed deviation of a distribution's sum from 1.0.
_SUM_TOLERANCE: float = 1e-6


# ─── Result type ───────────────────────────────────────────────────────────────


@dataclass
class CfrResult:
    """Output of the CFR solver.

    Attributes:
        p1_strategy:          Average strategy for player 1, shape (3,).
        p2_strategy:          Average strategy for player 2, shape (3,).
        p1_final_strategy:    Strategy player 1 played at the last iteration.
        p2_final_strategy:    Strategy player 2 played at the last iteration.
        p1_cumulative_regret: Player 1's cumulative regret after training.
        p2_cumulative_regret: Player 2's cumulative regret after training.
        n_iterations:         Number of CFR iterations completed.
        exploitability:       Exploitability of the average profile, in
                              units per hand (0 at Nash equilibrium).
        game_value:           Expected player 1 payoff under the average
                              profile.
        exploitability_trace: (iteration, exploitability) at each checkpoint.
        average_trace:        Player 1's running average strategy at each
                              checkpoint, shape (n_checkpoints, 3).
    """

    p1_strategy: np.ndarray
    p2_strategy: np.ndarray
    p1_final_strategy: np.ndarray
    p2_final_strategy: np.ndarray
    p1_cumulative_regret: np.ndarray
    p2_cumulative_regret: np.ndarray
    n_iterations: int
    exploitability: float
    game_value: float
    exploitability_trace: list[tuple[int, float]] = field(default_factory=list)
    average_trace: np.ndarray = field(default_factory=lambda: np.empty((0, NUM_MOVES)))


# ─── Argument checks ───────────────────────────────────────────────────────────


def _check_positive_int(value: int, name: str) -> None:
    """Raise ValueError unless value is a positive integer (bools rejected)."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")


def _as_distribution(distribution: np.ndarray) -> np.ndarray:
    """Return distribution as a float64 array, validating the sampler precondition."""
    dist = np.asarray(distribution, dtype=np.float64)
    if dist.shape != (NUM_MOVES,):
        raise ValueError(f"Distribution must have shape ({NUM_MOVES},), got {dist.shape}")
    if np.any(dist < 0.0):
        raise ValueError(f"Distribution has negative entries: {dist}")
    if not np.isclose(dist.sum(), 1.0, rtol=0.0, atol=_SUM_TOLERANCE):
        raise ValueError(f"Distribution must sum to 1, got {dist.sum()!r}")
    return dist


# ─── Regret computation ────────────────────────────────────────────────────────


def regret_vector(actual_move: Move | int, opponent_move: Move | int) -> np.ndarray:
    """Return the counterfactual regret of every move against a realised opponent move.

    regret[c] = u(c, opponent_move) − u(actual_move, opponent_move)

    By construction regret[actual_move] == 0.

    Args:
        actual_move:   The move the player actually played.
        opponent_move: The opponent's realised move.

    Returns:
        float64 array of shape (3,), indexed by Move.

    Examples:
        >>> regret_vector(Move.ROCK, Move.PAPER).tolist()
        [0.0, 1.0, 2.0]
    """
    actual_payoff = utility(actual_move, opponent_move)
    return np.array(
        [utility(candidate, opponent_move) - actual_payoff for candidate in MOVES],
        dtype=np.float64,
    )


# ─── Regret matching ───────────────────────────────────────────────────────────


def uniform_strategy() -> np.ndarray:
    """Return the uniform distribution (1/3, 1/3, 1/3)."""
    return np.full(NUM_MOVES, 1.0 / NUM_MOVES)


def strategy_from_regret(cumulative_regret: np.ndarray) -> np.ndarray:
    """Return the current strategy for a cumulative regret vector (regret matching).

    Probability is proportional to positive regret. Moves with zero or
    negative regret get exactly zero probability. Falls back to uniform if
    no move has positive regret (including the all-zero starting state).

    Args:
        cumulative_regret: Cumulative regret, shape (3,). Not modified.

    Returns:
        New float64 distribution of shape (3,) summing to 1.

    Examples:
        >>> strategy_from_regret(np.array([3.0, 1.0, -2.0])).tolist()
        [0.75, 0.25, 0.0]
    """
    regrets = np.asarray(cumulative_regret, dtype=np.float64)
    if regrets.shape != (NUM_MOVES,):
        raise ValueError(f"Regret vector must have shape ({NUM_MOVES},), got {regrets.shape}")
    positive = np.maximum(regrets, 0.0)
    total = float(positive.sum())
    if total <= 0.0:
        return uniform_strategy()
    return positive / total


# ─── Sampling ──────────────────────────────────────────────────────────────────


def sample_move(
    distribution: np.ndarray,
    rng: np.random.Generator | None = None,
) -> Move:
    """Draw one move from a distribution by inverse-CDF sampling.

    Draws u in [0, 1) and walks the moves in index order, returning the first
    move with non-zero probability whose cumulative probability is >= u.
    Ties at a cumulative boundary go to the lower index. If round-off leaves
    u above the final cumulative sum, the last move with non-zero probability
    is returned.

    Args:
        distribution: Probability distribution, shape (3,).
        rng:          Random generator. A fresh unseeded generator if None.

    Returns:
        The sampled Move.

    Raises:
        ValueError: if distribution has the wrong shape, a negative entry, or
                    does not sum to 1.
    """
    dist = _as_distribution(distribution)
    if rng is None:
        rng = np.random.default_rng()

    roll = rng.random()
    cumulative = 0.0
    chosen = None
    for move in MOVES:
        prob = float(dist[move])
        if prob <= 0.0:
            continue
        cumulative += prob
        chosen = move
        if roll <= cumulative:
            return move
    return chosen


# ─── Averaging ─────────────────────────────────────────────────────────────────


def average_strategy(history: list[np.ndarray]) -> np.ndarray:
    """Return the element-wise mean of a strategy history.

    The average strategy is the CFR equilibrium approximation.

    Args:
        history: Sequence of distributions, one per iteration.

    Returns:
        float64 distribution of shape (3,).

    Raises:
        ValueError: if history is empty or its entries are not shape (3,).
    """
    if len(history) == 0:
        raise ValueError("Cannot average an empty strategy history")
    stacked = np.asarray(history, dtype=np.float64)
    if stacked.ndim != 2 or stacked.shape[1] != NUM_MOVES:
        raise ValueError(
            f"Strategy history entries must have shape ({NUM_MOVES},), got {stacked.shape[1:]}"
        )
    return stacked.mean(axis=0)


# ─── Trainer ───────────────────────────────────────────────────────────────────


@dataclass
class CfrTrainer:
    """Mutable CFR state: cumulative regrets and strategy histories per player.

    Both players start from zero regret and an empty history. Updated in
    place by step(). The strategy sums mirror the histories so checkpoint
    averages cost O(1) per call.
    """

    rng: np.random.Generator = field(default_factory=np.random.default_rng)
    p1_cumulative_regret: np.ndarray = field(default_factory=lambda: np.zeros(NUM_MOVES))
    p2_cumulative_regret: np.ndarray = field(default_factory=lambda: np.zeros(NUM_MOVES))
    p1_strategy_history: list[np.ndarray] = field(default_factory=list)
    p2_strategy_history: list[np.ndarray] = field(default_factory=list)
    p1_strategy_sum: np.ndarray = field(default_factory=lambda: np.zeros(NUM_MOVES))
    p2_strategy_sum: np.ndarray = field(default_factory=lambda: np.zeros(NUM_MOVES))
    iteration: int = 0

    @classmethod
    def from_seed(cls, seed: int | None = None) -> CfrTrainer:
        """Build a trainer whose generator is seeded with seed."""
        return cls(rng=np.random.default_rng(seed))

    def current_strategies(self) -> tuple[np.ndarray, np.ndarray]:
        """Return both players' regret-matching strategies for the next iteration."""
        return (
            strategy_from_regret(self.p1_cumulative_regret),
            strategy_from_regret(self.p2_cumulative_regret),
        )

    def step(self) -> tuple[Move, Move]:
        """Run one self-play iteration and return the sampled (p1, p2) moves."""
        s1, s2 = self.current_strategies()
        p1_move = sample_move(s1, self.rng)
        p2_move = sample_move(s2, self.rng)

        # Each player measures regret against the other's realised move.
        self.p1_cumulative_regret += regret_vector(p1_move, p2_move)
        self.p2_cumulative_regret += regret_vector(p2_move, p1_move)

        self.p1_strategy_history.append(s1)
        self.p2_strategy_history.append(s2)
        self.p1_strategy_sum += s1
        self.p2_strategy_sum += s2
        self.iteration += 1
        return p1_move, p2_move

    def train(self, n_iterations: int) -> None:
        """Run n_iterations self-play iterations."""
        _check_positive_int(n_iterations, "n_iterations")
        for _ in range(n_iterations):
            self.step()

    def average_strategies(self) -> tuple[np.ndarray, np.ndarray]:
        """Return both players' average strategies over their full histories."""
        return (
            average_strategy(self.p1_strategy_history),
            average_strategy(self.p2_strategy_history),
        )

    def running_averages(self) -> tuple[np.ndarray, np.ndarray]:
        """Return both players' average strategies from the running strategy sums.

        Equal to average_strategies() up to round-off.

        Raises:
            ValueError: if no iteration has been run yet.
        """
        if self.iteration == 0:
            raise ValueError("Cannot average an empty strategy history")
        return (
            self.p1_strategy_sum / self.iteration,
            self.p2_strategy_sum / self.iteration,
        )


# ─── Best response and exploitability ──────────────────────────────────────────


def best_response_value(opponent_strategy: np.ndarray) -> float:
    """Return the best expected payoff any pure move earns against opponent_strategy."""
    q = _as_distribution(opponent_strategy)
    return float(np.max(PAYOFF_MATRIX @ q))


def best_response(opponent_strategy: np.ndarray) -> Move:
    """Return the pure move with the highest expected payoff against opponent_strategy.

    Ties go to the lowest index.
    """
    q = _as_distribution(opponent_strategy)
    return Move(int(np.argmax(PAYOFF_MATRIX @ q)))


def compute_exploitability(p1_strategy: np.ndarray, p2_strategy: np.ndarray) -> float:
    """Compute the total exploitability of a strategy profile.

    Exploitability = (best P1 payoff vs p2_strategy) + (best P2 payoff vs p1_strategy)

    At Nash equilibrium, exploitability = 0.

    Args:
        p1_strategy: Player 1's (row) distribution.
        p2_strategy: Player 2's (column) distribution.

    Returns:
        Total exploitability in units per hand (non-negative).

    Examples:
        >>> compute_exploitability(uniform_strategy(), uniform_strategy())
        0.0
    """
    p = _as_distribution(p1_strategy)
    q = _as_distribution(p2_strategy)
    p1_gain = float(np.max(PAYOFF_MATRIX @ q))
    p2_gain = float(np.max(-(p @ PAYOFF_MATRIX)))
    return max(0.0, p1_gain + p2_gain)


# ─── Entry points ──────────────────────────────────────────────────────────────


def solve(
    n_iterations: int = DEFAULT_ITERATIONS,
    seed: int | None = DEFAULT_SEED,
    convergence_check_every: int = DEFAULT_CHECK_EVERY,
) -> CfrResult:
    """Run CFR self-play and return the average strategy profile.

    Exploitability of the running average is recorded every
    convergence_check_every iterations and after the last iteration. Training
    always runs the full n_iterations.

    Args:
        n_iterations:            Number of CFR iterations (positive integer).
        seed:                    Generator seed. None for a non-deterministic run.
        convergence_check_every: Record exploitability every N iterations.

    Returns:
        CfrResult with average strategies, exploitability, and traces.

    Raises:
        ValueError: if n_iterations or convergence_check_every is not a
                    positive integer.

    Examples:
        >>> result = solve(n_iterations=2_000, seed=7)
        >>> result.n_iterations
        2000
        >>> result.exploitability >= 0
        True
    """
    _check_positive_int(n_iterations, "n_iterations")
    _check_positive_int(convergence_check_every, "convergence_check_every")

    trainer = CfrTrainer.from_seed(seed)
    exploitability_trace: list[tuple[int, float]] = []
    average_rows: list[np.ndarray] = []

    logger.info("Running CFR self-play: %d iterations (seed=%s)", n_iterations, seed)

    for iteration in range(1, n_iterations + 1):
        trainer.step()

        if iteration % convergence_check_every == 0 or iteration == n_iterations:
            avg1, avg2 = trainer.running_averages()
            eps = compute_exploitability(avg1, avg2)
            exploitability_trace.append((iteration, eps))
            average_rows.append(avg1)
            logger.debug(
                "iteration %d: exploitability=%.5f p1_avg=%s",
                iteration,
                eps,
                np.round(avg1, 4).tolist(),
            )

    p1_strategy, p2_strategy = trainer.average_strategies()
    p1_final = trainer.p1_strategy_history[-1]
    p2_final = trainer.p2_strategy_history[-1]
    exploitability = exploitability_trace[-1][1]

    logger.info(
        "CFR finished after %d iterations: exploitability=%.5f", n_iterations, exploitability
    )

    return CfrResult(
        p1_strategy=p1_strategy,
        p2_strategy=p2_strategy,
        p1_final_strategy=p1_final,
        p2_final_strategy=p2_final,
        p1_cumulative_regret=trainer.p1_cumulative_regret.copy(),
        p2_cumulative_regret=trainer.p2_cumulative_regret.copy(),
        n_iterations=n_iterations,
        exploitability=exploitability,
        game_value=expected_utility(p1_strategy, p2_strategy),
        exploitability_trace=exploitability_trace,
        average_trace=np.array(average_rows),
    )


def train(
    n_iterations: int = DEFAULT_ITERATIONS,
    seed: int | None = DEFAULT_SEED,
) -> tuple[float, ...]:
    """Train by self-play and return player 1's average strategy.

    Args:
        n_iterations: Number of CFR iterations (positive integer).
        seed:         Generator seed. None for a non-deterministic run.

    Returns:
        (P(Rock), P(Paper), P(Scissors)) in fixed move order.

    Raises:
        ValueError: if n_iterations is not a positive integer.
    """
    trainer = CfrTrainer.from_seed(seed)
    trainer.train(n_iterations)
    p1_strategy, _ = trainer.average_strategies()
    return tuple(float(p) for p in p1_strategy)
