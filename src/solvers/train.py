"""Command-line entry point for CFR training.

Run:
    PYTHONPATH=. python -m src.solvers.train 10000 --seed 42

Prints player 1's average strategy as (P(Rock), P(Paper), P(Scissors)).
With --report, also prints the full strategy report.
"""

from __future__ import annotations

import argparse
import logging
import sys

from src.solvers.cfr import DEFAULT_CHECK_EVERY, DEFAULT_ITERATIONS, solve

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "WARNING") -> logging.Logger:
    """Configure the root logger with a single stdout handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).

    Returns:
        The configured root logger.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    return root


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.solvers.train",
        description="Train a Rock-Paper-Scissors strategy by CFR self-play.",
    )
    parser.add_argument(
        "iterations",
        nargs="?",
        type=int,
        default=DEFAULT_ITERATIONS,
        help=f"number of CFR iterations (default: {DEFAULT_ITERATIONS})",
    )
    parser.add_argument("--seed", type=int, default=None, help="random seed")
    parser.add_argument(
        "--check-every",
        type=int,
        default=DEFAULT_CHECK_EVERY,
        help="record exploitability every N iterations",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging verbosity",
    )
    parser.add_argument(
        "--report", action="store_true", help="print the full strategy report"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        result = solve(
            n_iterations=args.iterations,
            seed=args.seed,
            convergence_check_every=args.check_every,
        )
    except ValueError as exc:
        parser.error(str(exc))

    print(tuple(round(float(p), 6) for p in result.p1_strategy))

    if args.report:
        from src.analysis.strategy_report import (
            print_average_strategy,
            print_convergence,
            print_regret_summary,
        )

        print()
        print_average_strategy(result)
        print_convergence(result)
        print_regret_summary(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
