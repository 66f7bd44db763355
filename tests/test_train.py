"""Tests for the training command line (src/solvers/train.py)."""

from __future__ import annotations

import ast
import logging

import pytest

from src.solvers.train import build_parser, configure_logging, main


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParser:
    def test_defaults(self) -> None:
        args = build_parser().parse_args([])
        assert args.iterations == 10_000
        assert args.seed is None
        assert args.report is False

    def test_positional_iterations(self) -> None:
        args = build_parser().parse_args(["500", "--seed", "3"])
        assert args.iterations == 500
        assert args.seed == 3


class TestMain:
    def test_prints_strategy_triple(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["300", "--seed", "1"]) == 0
        line = capsys.readouterr().out.strip().splitlines()[0]
        triple = ast.literal_eval(line)
        assert len(triple) == 3
        assert sum(triple) == pytest.approx(1.0, abs=1e-5)

    def test_report_flag(self, capsys: pytest.CaptureFixture) -> None:
        main(["300", "--seed", "1", "--report"])
        out = capsys.readouterr().out
        assert "Average Strategy" in out
        assert "Cumulative Regret" in out

    def test_zero_iterations_rejected(self, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["0"])
        assert exc.value.code == 2
        assert "n_iterations" in capsys.readouterr().err


class TestConfigureLogging:
    def test_sets_level(self) -> None:
        root = configure_logging("DEBUG")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            configure_logging("LOUD")
