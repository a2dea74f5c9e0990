"""Tests for one-rep-max estimation."""

import datetime
import math

import pytest

from app.coach.one_rm import (
    _recommended_method,
    brzycki,
    calculate_composite,
    epley,
    estimate_one_rep_max,
    lombardi,
    mayhew,
    validate_set,
)
from app.schemas.performance import PerformanceSampleBase


def _make_sample(weight, reps, rpe=None, day=1):
    return PerformanceSampleBase(
        exercise_name="Bench Press",
        date=datetime.date(2026, 10, day),
        weight=weight,
        reps=reps,
        rpe=rpe,
    )


# ======================================================================
# Formulas
# ======================================================================


class TestFormulas:
    @pytest.mark.parametrize("formula", [epley, brzycki, lombardi, mayhew])
    def test_single_rep_returns_weight(self, formula):
        assert formula(140.0, 1) == 140.0

    def test_epley(self):
        assert epley(100.0, 5) == pytest.approx(116.667, abs=1e-3)

    def test_brzycki(self):
        assert brzycki(100.0, 5) == pytest.approx(112.5)

    def test_brzycki_guard_at_high_reps(self):
        assert brzycki(50.0, 37) == 50.0

    def test_lombardi(self):
        assert lombardi(100.0, 5) == pytest.approx(100 * 5 ** 0.1)

    def test_mayhew(self):
        expected = 10000 / (52.2 + 41.9 * math.exp(-0.275))
        assert mayhew(100.0, 5) == pytest.approx(expected)


# ======================================================================
# calculate_composite
# ======================================================================


class TestCalculateComposite:
    def test_single_rep_all_formulas_agree(self):
        result = calculate_composite(100.0, 1)
        assert result.composite == pytest.approx(100.0)
        assert result.confidence == pytest.approx(1.0)
        assert result.recommended_method == "brzycki"

    def test_rpe_scales_estimate(self):
        # RPE 8 → 90 % of max
        result = calculate_composite(90.0, 1, rpe=8.0)
        assert result.composite == pytest.approx(100.0)

    def test_unknown_rpe_uses_default_percentage(self):
        result = calculate_composite(80.0, 1, rpe=3.0)
        assert result.composite == pytest.approx(100.0)

    def test_estimate_exceeds_weight_for_multiple_reps(self):
        result = calculate_composite(100.0, 5)
        assert result.composite > 100.0
        assert set(result.estimates) == {"epley", "brzycki", "lombardi", "mayhew"}
        assert 0.0 < result.confidence < 1.0

    @pytest.mark.parametrize(
        "reps, method",
        [(1, "brzycki"), (3, "brzycki"), (5, "epley"), (7, "mayhew"), (10, "epley"), (12, "lombardi")],
    )
    def test_recommended_method(self, reps, method):
        assert _recommended_method(reps) == method


# ======================================================================
# validate_set
# ======================================================================


class TestValidateSet:
    @pytest.mark.parametrize("weight, reps", [(0.0, 5), (-10.0, 5), (100.0, 0), (100.0, 51)])
    def test_hard_failures(self, weight, reps):
        result = validate_set(weight, reps)
        assert not result.is_valid
        assert result.confidence == 0.0

    def test_clean_set(self):
        result = validate_set(100.0, 5, rpe=8.0)
        assert result.is_valid
        assert result.issues == []
        assert result.confidence == 1.0

    @pytest.mark.parametrize(
        "reps, rpe, confidence",
        [
            (20, None, 0.7),
            (1, None, 0.9),
            (5, 5.0, 0.8),
            (8, 10.0, 0.8),
        ],
    )
    def test_warnings_lower_confidence(self, reps, rpe, confidence):
        result = validate_set(100.0, reps, rpe)
        assert result.is_valid
        assert len(result.issues) == 1
        assert result.confidence == pytest.approx(confidence)


# ======================================================================
# estimate_one_rep_max
# ======================================================================


class TestEstimateOneRepMax:
    def test_empty_history(self):
        assert estimate_one_rep_max("Bench Press", []) is None

    def test_only_unusable_sets(self):
        assert estimate_one_rep_max("Bench Press", [_make_sample(0.0, 5)]) is None

    def test_uses_strongest_set(self):
        history = [_make_sample(100.0, 5, rpe=8.0, day=1), _make_sample(120.0, 3, rpe=9.0, day=8)]
        result = estimate_one_rep_max("Bench Press", history)
        assert result.based_on_weight == 120.0
        assert result.based_on_reps == 3
        assert result.based_on_date == datetime.date(2026, 10, 8)
        assert result.data_points == 2
        assert result.estimate > 120.0

    def test_confidence_combines_agreement_and_validation(self):
        single = estimate_one_rep_max("Bench Press", [_make_sample(100.0, 1)])
        # all formulas agree (1.0) × single-rep warning (0.9)
        assert single.confidence == pytest.approx(0.9)
        assert single.estimate == pytest.approx(100.0)
