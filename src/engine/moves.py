"""
Move constants, encoding, and human-readable I/O helpers.

Move encoding (integer 0–2):
    0 = ROCK, 1 = PAPER, 2 = SCISSORS

The integer value is the position of the move in every strategy, regret,
and payoff vector. String representations are used exclusively at I/O
boundaries.
"""

from __future__ import annotations

from enum import IntEnum


class Move(IntEnum):
    ROCK = 0
    PAPER = 1
    SCISSORS = 2


# Fixed index order used for every vector indexed by move.
MOVES: tuple[Move, ...] = (Move.ROCK, Move.PAPER, Move.SCISSORS)
NUM_MOVES: int = len(MOVES)

MOVE_CODES: list[str] = ['R', 'P', 'S']
MOVE_NAMES: list[str] = ['Rock', 'Paper', 'Scissors']


def move_to_str(move: Move | int) -> str:
    """Convert a move to its one-letter code.

    Examples:
        >>> move_to_str(Move.ROCK)
        'R'
        >>> move_to_str(2)
        'S'
    """
    return MOVE_CODES[Move(move)]


def move_name(move: Move | int) -> str:
    """Return the display name of a move.

    Examples:
        >>> move_name(Move.PAPER)
        'Paper'
    """
    return MOVE_NAMES[Move(move)]


def str_to_move(s: str) -> Move:
    """Parse a one-letter code or full move name (case-insensitive).

    Examples:
        >>> str_to_move('R')
        <Move.ROCK: 0>
        >>> str_to_move('scissors')
        <Move.SCISSORS: 2>

    Raises:
        ValueError: if the string names no move.
    """
    key = s.strip().lower()
    for move, code, name in zip(MOVES, MOVE_CODES, MOVE_NAMES, strict=True):
        if key in (code.lower(), name.lower()):
            return move
    raise ValueError(f"Unknown move: {s!r}")
