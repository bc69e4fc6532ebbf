"""
Unit tests for src/scaling/rsss.py.

Covers the RSSS table properties:
- monotonicity of unrounded scale scores;
- anchor reproduction at the approaching and proficient rows;
- advanced-cut extrapolation override (integer, not the 4 d.p. value);
- classification coverage and half-open interval boundaries;
- percentile bounds and 100 at the maximum raw score;
- error paths: degenerate cuts, broken ordering, empty distribution;
- LOSS/HOSS clamping and infinite extreme measures;
- raw-score keyed row lookups with explicit boundary failures.
"""

from __future__ import annotations

import math

import pytest

from src.scaling.config import PERFORMANCE_LABEL_ORDER, PERFORMANCE_LEVELS
from src.scaling.errors import (
    CutPointError,
    DegenerateScaleError,
    EmptyDistributionError,
    InvariantViolationError,
    RaschTableError,
    TableBoundaryError,
)
from src.scaling.rsss import (
    build_scale_score_table,
    classify_performance,
    compute_percentile,
)
from src.scaling.transform import CutPoints, RoundingSettings, round_value

from .conftest import demo_measures, demo_standard_errors, make_points


# ---------------------------------------------------------------------------
# Class: table-wide properties
# ---------------------------------------------------------------------------

class TestScaleScoreTableProperties:

    def test_one_row_per_raw_score(self, demo_table, demo_points):
        assert [r.raw_score for r in demo_table.rows] == [p.raw_score for p in demo_points]

    def test_source_fields_carried_over(self, demo_table, demo_points):
        for row, point in zip(demo_table.rows, demo_points):
            assert row.frequency == point.frequency
            assert row.cumulative_frequency == point.cumulative_frequency
            assert row.logit_measure == point.logit_measure
            assert row.standard_error == point.standard_error

    def test_unrounded_scale_scores_monotone(self, demo_table):
        scores = [r.unrounded_scale_score for r in demo_table.rows]
        assert all(a <= b for a, b in zip(scores, scores[1:]))

    def test_anchor_reproduction(self, demo_table, demo_points):
        """Approaching and proficient rows reproduce their anchors (1e-6)."""
        constants = demo_table.constants
        assert constants.scale(demo_points[12].logit_measure) == pytest.approx(80.0, abs=1e-6)
        assert constants.scale(demo_points[20].logit_measure) == pytest.approx(100.0, abs=1e-6)
        assert demo_table.row_for_raw_score(12).unrounded_scale_score == pytest.approx(80.0, abs=1e-6)
        assert demo_table.row_for_raw_score(20).unrounded_scale_score == pytest.approx(100.0, abs=1e-6)

    def test_advanced_row_overridden_with_extrapolated_integer(self, demo_table, demo_points):
        constants = demo_table.constants
        bulk_value = round_value(constants.scale(demo_points[32].logit_measure), 4)
        expected = round_value(constants.scale(demo_points[32].logit_measure), 0)

        row = demo_table.row_for_raw_score(32)

        assert row.unrounded_scale_score == expected
        assert row.unrounded_scale_score == demo_table.advanced_scale_score
        assert row.unrounded_scale_score != bulk_value  # 4 d.p. precision deliberately lost

    def test_other_rows_keep_four_decimals(self, demo_table):
        row = demo_table.row_for_raw_score(31)
        expected = round_value(demo_table.constants.scale(row.logit_measure), 4)
        assert row.unrounded_scale_score == expected

    def test_rounded_scores_are_integers(self, demo_table):
        for row in demo_table.rows:
            assert isinstance(row.rounded_scale_score, int)
            assert isinstance(row.rounded_scale_score_se, int)
            assert row.rounded_scale_score == round_value(row.unrounded_scale_score, 0)

    def test_rounded_se_from_unrounded_se(self, demo_table):
        row = demo_table.row_for_raw_score(20)
        expected_se = round_value(demo_table.constants.slope * row.standard_error, 4)
        assert row.unrounded_scale_score_se == expected_se
        assert row.rounded_scale_score_se == round_value(expected_se, 0)

    def test_every_row_has_exactly_one_level(self, demo_table):
        for row in demo_table.rows:
            assert row.performance_level in PERFORMANCE_LEVELS
            assert row.performance_label == PERFORMANCE_LEVELS[row.performance_level]

    def test_level_is_non_decreasing_step_function(self, demo_table):
        levels = [r.performance_level for r in demo_table.rows]
        assert all(a <= b for a, b in zip(levels, levels[1:]))
        assert set(levels) == {1, 2, 3, 4}

    def test_cut_rows_open_their_levels(self, demo_table):
        assert demo_table.row_for_raw_score(11).performance_level == 1
        assert demo_table.row_for_raw_score(12).performance_level == 2
        assert demo_table.row_for_raw_score(19).performance_level == 2
        assert demo_table.row_for_raw_score(20).performance_level == 3
        assert demo_table.row_for_raw_score(31).performance_level == 3
        assert demo_table.row_for_raw_score(32).performance_level == 4

    def test_percentiles_bounded_and_end_at_100(self, demo_table):
        for row in demo_table.rows:
            assert 0 <= row.percentile <= 100
        assert demo_table.rows[-1].percentile == 100

    def test_percentiles_non_decreasing(self, demo_table):
        percentiles = [r.percentile for r in demo_table.rows]
        assert all(a <= b for a, b in zip(percentiles, percentiles[1:]))

    def test_cut_scale_scores(self, demo_table):
        cuts = demo_table.cut_scale_scores()
        assert list(cuts) == ["approaching", "proficient", "advanced"]
        assert cuts["approaching"] == 80
        assert cuts["proficient"] == 100
        assert cuts["advanced"] == demo_table.advanced_scale_score

    def test_inputs_not_mutated(self, demo_points, demo_cuts):
        snapshot = list(demo_points)
        build_scale_score_table(demo_points, demo_cuts)
        assert demo_points == snapshot


# ---------------------------------------------------------------------------
# Class: linear scenario
# ---------------------------------------------------------------------------

class TestLinearScenario:
    """Raw 10–20, measures -1.0 … 2.0, cuts 12 / 20, anchors 80 / 100."""

    def _table(self, linear_points):
        # Extend the table with one extra point so an advanced cut can exist
        points = make_points(
            [p.logit_measure for p in linear_points] + [2.3],
            start=10,
        )
        return build_scale_score_table(points, CutPoints(12, 20, 21, 80, 100))

    def test_slope(self, linear_points):
        table = self._table(linear_points)
        assert table.constants.slope == pytest.approx((100 - 80) / (2.0 - (-0.4)))

    def test_anchor_rows(self, linear_points):
        table = self._table(linear_points)
        assert table.row_for_raw_score(12).unrounded_scale_score == pytest.approx(80.0, abs=1e-6)
        assert table.row_for_raw_score(20).unrounded_scale_score == pytest.approx(100.0, abs=1e-6)

    def test_strictly_increasing_through_proficient(self, linear_points):
        table = self._table(linear_points)
        scores = [table.row_for_raw_score(r).unrounded_scale_score for r in range(10, 21)]
        assert all(a < b for a, b in zip(scores, scores[1:]))


# ---------------------------------------------------------------------------
# Class: error paths
# ---------------------------------------------------------------------------

class TestBuildErrors:

    def test_same_cut_raw_score_degenerate(self, demo_points):
        """approaching == proficient raw cut → DegenerateScaleError, not ordering."""
        with pytest.raises(DegenerateScaleError):
            build_scale_score_table(demo_points, CutPoints(12, 12, 32, 80, 100))

    def test_cut_missing_from_table(self, demo_points):
        with pytest.raises(CutPointError):
            build_scale_score_table(demo_points, CutPoints(12, 20, 50, 80, 100))

    def test_raw_cut_ordering_broken(self, demo_points):
        with pytest.raises(InvariantViolationError):
            build_scale_score_table(demo_points, CutPoints(20, 12, 32, 100, 120))

    def test_anchor_ordering_broken(self, demo_points):
        with pytest.raises(InvariantViolationError):
            build_scale_score_table(demo_points, CutPoints(12, 20, 32, 100, 80))

    def test_invalid_table(self, demo_points, demo_cuts):
        with pytest.raises(RaschTableError):
            build_scale_score_table(list(reversed(demo_points)), demo_cuts)

    def test_empty_distribution_raises(self, demo_cuts):
        points = make_points(
            demo_measures(),
            frequencies=[0] * 41,
            standard_errors=demo_standard_errors(),
        )
        with pytest.raises(EmptyDistributionError):
            build_scale_score_table(points, demo_cuts)

    def test_empty_distribution_allowed_reports_other_fields(self, demo_cuts):
        points = make_points(
            demo_measures(),
            frequencies=[0] * 41,
            standard_errors=demo_standard_errors(),
        )
        table = build_scale_score_table(points, demo_cuts, allow_empty_distribution=True)
        assert all(row.percentile is None for row in table.rows)
        assert table.row_for_raw_score(20).rounded_scale_score == 100

    def test_loss_above_hoss(self, demo_points, demo_cuts):
        with pytest.raises(InvariantViolationError, match="LOSS"):
            build_scale_score_table(demo_points, demo_cuts, loss=200, hoss=100)


# ---------------------------------------------------------------------------
# Class: LOSS / HOSS and extreme scores
# ---------------------------------------------------------------------------

class TestExtremes:

    def test_loss_hoss_clamp_rounded_scores(self, demo_points, demo_cuts):
        unclamped = build_scale_score_table(demo_points, demo_cuts)
        assert unclamped.rows[0].rounded_scale_score < 0
        assert unclamped.rows[-1].rounded_scale_score > 150

        table = build_scale_score_table(demo_points, demo_cuts, loss=0, hoss=150)

        assert table.rows[0].rounded_scale_score == 0
        assert table.rows[-1].rounded_scale_score == 150
        # unrounded values are not clamped
        assert table.rows[0].unrounded_scale_score == unclamped.rows[0].unrounded_scale_score

    def test_infinite_extreme_measures(self, demo_cuts):
        measures = demo_measures()
        measures[0], measures[-1] = float("-inf"), float("inf")
        ses = demo_standard_errors()
        ses[0], ses[-1] = float("inf"), float("inf")
        points = make_points(measures, frequencies=[3] * 41, standard_errors=ses)

        table = build_scale_score_table(points, demo_cuts)

        assert table.rows[0].unrounded_scale_score == float("-inf")
        assert table.rows[-1].unrounded_scale_score == float("inf")
        assert table.rows[0].performance_level == 1
        assert table.rows[-1].performance_level == 4
        assert math.isinf(table.rows[0].rounded_scale_score_se)

    def test_infinite_extremes_clamped_to_integers(self, demo_cuts):
        measures = demo_measures()
        measures[0], measures[-1] = float("-inf"), float("inf")
        points = make_points(measures, frequencies=[3] * 41)

        table = build_scale_score_table(points, demo_cuts, loss=10, hoss=190)

        assert table.rows[0].rounded_scale_score == 10
        assert table.rows[-1].rounded_scale_score == 190


# ---------------------------------------------------------------------------
# Class: half-even rounding configuration
# ---------------------------------------------------------------------------

def test_half_even_mode_flows_through_builder(demo_points, demo_cuts):
    table = build_scale_score_table(
        demo_points, demo_cuts, rounding=RoundingSettings(mode="half_even")
    )
    for row in table.rows:
        assert row.rounded_scale_score == round_value(row.unrounded_scale_score, 0, "half_even")


# ---------------------------------------------------------------------------
# Class: classify_performance
# ---------------------------------------------------------------------------

class TestClassifyPerformance:

    @pytest.mark.parametrize("score, level", [
        (-5, 1), (79, 1),
        (80, 2), (99, 2),
        (100, 3), (132, 3),
        (133, 4), (400, 4),
    ])
    def test_half_open_intervals(self, score, level):
        result_level, label = classify_performance(score, 80, 100, 133)
        assert result_level == level
        assert label == PERFORMANCE_LABEL_ORDER[level - 1]

    def test_infinite_scores(self):
        assert classify_performance(float("-inf"), 80, 100, 133)[0] == 1
        assert classify_performance(float("inf"), 80, 100, 133)[0] == 4

    def test_nan_matches_no_level(self):
        with pytest.raises(InvariantViolationError, match="no performance level"):
            classify_performance(float("nan"), 80, 100, 133)

    def test_unordered_anchors(self):
        with pytest.raises(InvariantViolationError):
            classify_performance(90, 80, 100, 100)


# ---------------------------------------------------------------------------
# Class: compute_percentile
# ---------------------------------------------------------------------------

class TestComputePercentile:

    def test_full_distribution_is_100(self):
        assert compute_percentile(250, 250) == 100

    def test_rounding_tie_pinned(self):
        """1/8 = 12.5% → 13 half-away-from-zero, 12 half-even."""
        assert compute_percentile(1, 8, "half_away_from_zero") == 13
        assert compute_percentile(1, 8, "half_even") == 12

    def test_zero_total_raises(self):
        with pytest.raises(EmptyDistributionError):
            compute_percentile(0, 0)


# ---------------------------------------------------------------------------
# Class: raw-score keyed lookups
# ---------------------------------------------------------------------------

class TestRowLookups:

    def test_row_for_raw_score(self, demo_table):
        assert demo_table.row_for_raw_score(25).raw_score == 25

    def test_adjacent_rows(self, demo_table):
        assert demo_table.adjacent_row(20, 1).raw_score == 21
        assert demo_table.adjacent_row(20, -1).raw_score == 19

    def test_below_table_raises(self, demo_table):
        with pytest.raises(TableBoundaryError):
            demo_table.adjacent_row(0, -1)

    def test_above_table_raises(self, demo_table):
        with pytest.raises(TableBoundaryError):
            demo_table.adjacent_row(40, 1)

    def test_total_frequency(self, demo_table, demo_points):
        assert demo_table.total_frequency == sum(p.frequency for p in demo_points)
