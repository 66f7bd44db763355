"""Tests for src/engine/moves.py — move encoding and string I/O."""

from __future__ import annotations

import pytest

from src.engine.moves import (
    MOVE_CODES,
    MOVE_NAMES,
    MOVES,
    NUM_MOVES,
    Move,
    move_name,
    move_to_str,
    str_to_move,
)


class TestMoveEncoding:
    def test_fixed_ordering(self):
        assert Move.ROCK == 0
        assert Move.PAPER == 1
        assert Move.SCISSORS == 2

    def test_moves_tuple_in_index_order(self):
        assert MOVES == (Move.ROCK, Move.PAPER, Move.SCISSORS)
        assert [int(m) for m in MOVES] == list(range(NUM_MOVES))

    def test_three_moves(self):
        assert NUM_MOVES == 3
        assert len(MOVE_CODES) == NUM_MOVES
        assert len(MOVE_NAMES) == NUM_MOVES

    def test_move_usable_as_index(self):
        values = ['a', 'b', 'c']
        assert values[Move.SCISSORS] == 'c'


class TestMoveToStr:
    @pytest.mark.parametrize(
        "move,expected",
        [(Move.ROCK, 'R'), (Move.PAPER, 'P'), (Move.SCISSORS, 'S')],
    )
    def test_codes(self, move, expected):
        assert move_to_str(move) == expected

    def test_accepts_plain_int(self):
        assert move_to_str(1) == 'P'

    def test_move_name(self):
        assert move_name(Move.SCISSORS) == 'Scissors'

    def test_out_of_range_int_rejected(self):
        with pytest.raises(ValueError):
            move_to_str(3)


class TestStrToMove:
    @pytest.mark.parametrize("s", ['R', 'r', 'Rock', 'ROCK', ' rock '])
    def test_rock_spellings(self, s):
        assert str_to_move(s) is Move.ROCK

    def test_paper(self):
        assert str_to_move('paper') is Move.PAPER

    def test_scissors_code(self):
        assert str_to_move('S') is Move.SCISSORS

    def test_every_move_round_trips_through_its_code(self):
        for move in MOVES:
            assert str_to_move(move_to_str(move)) is move

    def test_unknown_string_raises(self):
        with pytest.raises(ValueError, match="Unknown move"):
            str_to_move('lizard')
