"""
Game rules, payoff lookup, and outcome settlement for Rock-Paper-Scissors.

Beats relation:
    ROCK     beats SCISSORS
    SCISSORS beats PAPER
    PAPER    beats ROCK

Payoff convention (from the row player's perspective):
    +1 = row player wins
    -1 = row player loses
     0 = tie

This module is the only place that knows the game; every solver and
analysis function works through utility() or PAYOFF_MATRIX.
"""

from __future__ import annotations

from enum import Enum, auto

import numpy as np

from .moves import NUM_MOVES, Move


class Outcome(Enum):
    WIN = auto()
    LOSS = auto()
    TIE = auto()


# Row = row player's move, column = column player's move.
_PAYOFFS: tuple[tuple[int, int, int], ...] = (
    #  R   P   S
    (0, -1, 1),   # ROCK
    (1, 0, -1),   # PAPER
    (-1, 1, 0),   # SCISSORS
)

PAYOFF_MATRIX: np.ndarray = np.array(_PAYOFFS, dtype=np.float64)
PAYOFF_MATRIX.setflags(write=False)


def utility(a: Move | int, b: Move | int) -> int:
    """Return the payoff to the row player for the pair (a, b).

    Args:
        a: Row player's move.
        b: Column player's move.

    Returns:
        +1 if a beats b, -1 if b beats a, 0 on a tie.

    Examples:
        >>> utility(Move.ROCK, Move.SCISSORS)
        1
        >>> utility(Move.ROCK, Move.PAPER)
        -1
        >>> utility(Move.PAPER, Move.PAPER)
        0
    """
    return _PAYOFFS[Move(a)][Move(b)]


def beats(a: Move | int, b: Move | int) -> bool:
    """True if move a beats move b."""
    return utility(a, b) == 1


def settle(a: Move | int, b: Move | int) -> tuple[Outcome, float]:
    """Determine the outcome and payout of one round for the row player.

    Returns:
        (Outcome, payout) where payout is from the row player's perspective.
    """
    payout = utility(a, b)
    if payout > 0:
        return Outcome.WIN, 1.0
    if payout < 0:
        return Outcome.LOSS, -1.0
    return Outcome.TIE, 0.0


def expected_utility(p: np.ndarray, q: np.ndarray) -> float:
    """Expected row-player payoff when mixed strategies p and q meet.

    Args:
        p: Row player's distribution, shape (3,).
        q: Column player's distribution, shape (3,).

    Returns:
        p^T A q where A is PAYOFF_MATRIX.
    """
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    if p.shape != (NUM_MOVES,) or q.shape != (NUM_MOVES,):
        raise ValueError(
            f"Strategies must have shape ({NUM_MOVES},), got {p.shape} and {q.shape}"
        )
    return float(p @ PAYOFF_MATRIX @ q)
