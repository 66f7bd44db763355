"""
Tests for src/analysis/simulator.py

Covers:
    - SimulationResult dataclass structure and __str__
    - simulate_hands(): reproducibility, counts, CI, EV antisymmetry
    - Deterministic match-ups with pure strategies
    - EV validation: Monte Carlo results within the CI of exact expected values
    - run_validation(): both match-ups present
"""

from __future__ import annotations

import pytest

from src.analysis.simulator import (
    VALIDATION_P1,
    VALIDATION_P2,
    SimulationResult,
    run_validation,
    simulate_hands,
)
from src.engine.rules import expected_utility
from src.solvers.cfr import uniform_strategy
from tests.conftest import dist


# ─── TestSimulationResult ─────────────────────────────────────────────────────


class TestSimulationResult:
    def test_fields_exist(self):
        result = SimulationResult(
            n_hands=100,
            p1_ev=0.1,
            p2_ev=-0.1,
            std_ev=0.9,
            ci_95_low=-0.08,
            ci_95_high=0.28,
            p1_wins=40,
            p2_wins=30,
            ties=30,
        )
        assert result.n_hands == 100
        assert result.payouts is None

    def test_str_contains_ev(self):
        result = SimulationResult(
            n_hands=1000,
            p1_ev=0.25,
            p2_ev=-0.25,
            std_ev=0.9,
            ci_95_low=0.19,
            ci_95_high=0.31,
            p1_wins=500,
            p2_wins=250,
            ties=250,
        )
        text = str(result)
        assert "P1 EV: +0.2500" in text
        assert "P2 EV: -0.2500" in text
        assert "1,000" in text


# ─── TestSimulateHandsBasic ───────────────────────────────────────────────────


class TestSimulateHandsBasic:
    @pytest.fixture(scope="class")
    def small_run(self):
        return simulate_hands(
            dist(0.5, 0.25, 0.25),
            uniform_strategy(),
            n_hands=5_000,
            seed=7,
            return_payouts=True,
        )

    def test_counts_sum_to_n_hands(self, small_run):
        assert small_run.p1_wins + small_run.p2_wins + small_run.ties == small_run.n_hands

    def test_ev_antisymmetric(self, small_run):
        assert small_run.p2_ev == -small_run.p1_ev

    def test_ev_matches_counts(self, small_run):
        expected = (small_run.p1_wins - small_run.p2_wins) / small_run.n_hands
        assert small_run.p1_ev == pytest.approx(expected)

    def test_ci_contains_mean(self, small_run):
        assert small_run.ci_95_low <= small_run.p1_ev <= small_run.ci_95_high

    def test_payouts_attached(self, small_run):
        assert small_run.payouts is not None
        assert len(small_run.payouts) == 5_000
        assert set(small_run.payouts.tolist()) <= {-1.0, 0.0, 1.0}

    def test_payouts_omitted_by_default(self):
        result = simulate_hands(uniform_strategy(), uniform_strategy(), n_hands=100, seed=1)
        assert result.payouts is None

    def test_same_seed_reproducible(self):
        a = simulate_hands(uniform_strategy(), uniform_strategy(), n_hands=2_000, seed=99)
        b = simulate_hands(uniform_strategy(), uniform_strategy(), n_hands=2_000, seed=99)
        assert a.p1_ev == b.p1_ev
        assert a.p1_wins == b.p1_wins

    def test_single_hand(self):
        result = simulate_hands(dist(1, 0, 0), dist(0, 0, 1), n_hands=1, seed=0)
        assert result.p1_ev == 1.0
        assert result.std_ev == 0.0


# ─── TestDeterministicMatchups ────────────────────────────────────────────────


class TestDeterministicMatchups:
    def test_rock_always_beats_scissors(self):
        result = simulate_hands(dist(1, 0, 0), dist(0, 0, 1), n_hands=500, seed=0)
        assert result.p1_ev == 1.0
        assert result.p1_wins == 500

    def test_paper_always_loses_to_scissors(self):
        result = simulate_hands(dist(0, 1, 0), dist(0, 0, 1), n_hands=500, seed=0)
        assert result.p1_ev == -1.0
        assert result.p2_ev == 1.0

    def test_mirror_is_all_ties(self):
        result = simulate_hands(dist(0, 1, 0), dist(0, 1, 0), n_hands=500, seed=0)
        assert result.ties == 500
        assert result.p1_ev == 0.0


# ─── TestEvValidation ─────────────────────────────────────────────────────────


class TestEvValidation:
    @pytest.fixture(scope="class")
    def results(self):
        return run_validation(n_hands=20_000, seed=42)

    def test_both_matchups_present(self, results):
        assert set(results) == {"sample_matchup", "uniform"}

    def test_sample_matchup_near_exact(self, results):
        exact = expected_utility(dist(*VALIDATION_P1), dist(*VALIDATION_P2))
        assert abs(results["sample_matchup"].p1_ev - exact) < 0.03

    def test_uniform_near_zero(self, results):
        assert abs(results["uniform"].p1_ev) < 0.03


# ─── TestErrors ───────────────────────────────────────────────────────────────


class TestErrors:
    @pytest.mark.parametrize("bad", [0, -1, 2.5])
    def test_bad_hand_count(self, bad):
        with pytest.raises(ValueError, match="n_hands"):
            simulate_hands(uniform_strategy(), uniform_strategy(), n_hands=bad)

    def test_malformed_strategy(self):
        with pytest.raises(ValueError):
            simulate_hands(dist(0.5, 0.5, 0.5), uniform_strategy(), n_hands=10)
