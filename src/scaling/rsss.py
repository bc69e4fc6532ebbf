"""
Raw-score-to-scale-score (RSSS) table construction.

Builds the published scoring table from a validated Rasch score table and
the standard-setting cuts:

1. scaling constants from the approaching/proficient anchors;
2. advanced scale-score cut extrapolated from the same line;
3. per-point unrounded scale score and SE (4 d.p.);
4. advanced row overridden with the extrapolated integer cut;
5. rounded scale score and SE (optionally clamped to LOSS/HOSS);
6. performance level and label from the rounded scale score;
7. percentile from cumulative frequency.

The result is an immutable ScaleScoreTable; nothing here reads or writes
files or mutates its inputs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from .config import (
    CONSTANTS_PRECISION,
    GRADE,
    HOSS,
    LOSS,
    PERFORMANCE_LABEL_ORDER,
    PERFORMANCE_LEVELS,
    ROUNDING_MODE,
    RSSS_COLUMNS,
    SUBJECT,
)
from .errors import EmptyDistributionError, InvariantViolationError, TableBoundaryError
from .rasch_table import RaschScorePoint, validate_rasch_points
from .transform import (
    CutPoints,
    RoundingSettings,
    ScalingConstants,
    check_cut_ordering,
    check_cut_points_exist,
    compute_scaling_constants,
    extrapolate_advanced_scale_score,
    round_value,
    transform_point,
)


# ---------------------------------------------------------------------------
# Output types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScaleScoreRow:
    """One published row: the source score point plus its derived fields."""

    raw_score: int
    frequency: int
    cumulative_frequency: int
    logit_measure: float
    standard_error: float
    unrounded_scale_score: float
    unrounded_scale_score_se: float
    rounded_scale_score: int | float
    rounded_scale_score_se: int | float
    performance_level: int
    performance_label: str
    percentile: int | None


@dataclass(frozen=True)
class ScaleScoreTable:
    """Complete RSSS table plus the constants and cuts it was built from."""

    rows: tuple[ScaleScoreRow, ...]
    constants: ScalingConstants
    cuts: CutPoints
    advanced_scale_score: int

    @property
    def min_raw_score(self) -> int:
        return self.rows[0].raw_score

    @property
    def max_raw_score(self) -> int:
        return self.rows[-1].raw_score

    @property
    def total_frequency(self) -> int:
        return self.rows[-1].cumulative_frequency

    def cut_scale_scores(self) -> dict[str, float]:
        """Scale-score cuts used for classification, lowest first."""
        return {
            "approaching": self.cuts.approaching_scale_score,
            "proficient": self.cuts.proficient_scale_score,
            "advanced": self.advanced_scale_score,
        }

    def row_for_raw_score(self, raw_score: int) -> ScaleScoreRow:
        """
        Row for an exact raw score.

        Raises:
            TableBoundaryError: ``raw_score`` lies outside the table.
        """
        if not self.min_raw_score <= raw_score <= self.max_raw_score:
            raise TableBoundaryError(
                f"Raw score {raw_score} outside table range "
                f"{self.min_raw_score}–{self.max_raw_score}."
            )
        # Rows are contiguous by construction
        return self.rows[raw_score - self.min_raw_score]

    def adjacent_row(self, raw_score: int, step: int) -> ScaleScoreRow:
        """Row ``step`` raw-score points away from ``raw_score``."""
        return self.row_for_raw_score(raw_score + step)


# ---------------------------------------------------------------------------
# Classification and percentiles
# ---------------------------------------------------------------------------

def classify_performance(
    scale_score: float,
    approaching_scale_score: float,
    proficient_scale_score: float,
    advanced_scale_score: float,
) -> tuple[int, str]:
    """
    Performance level and label for a rounded scale score.

    Half-open intervals: [approaching, proficient) is level 2,
    [proficient, advanced) is level 3, and the advanced cut itself is
    level 4.

    Returns:
        Tuple of (performance_level, performance_label).

    Raises:
        InvariantViolationError: Anchors not strictly increasing, or the
            score falls in no interval (NaN).
    """
    if not approaching_scale_score < proficient_scale_score < advanced_scale_score:
        raise InvariantViolationError(
            "Scale-score cuts must be strictly increasing; got "
            f"{approaching_scale_score}, {proficient_scale_score}, {advanced_scale_score}."
        )

    if scale_score < approaching_scale_score:
        level = 1
    elif scale_score < proficient_scale_score:
        level = 2
    elif scale_score < advanced_scale_score:
        level = 3
    elif scale_score >= advanced_scale_score:
        level = 4
    else:
        raise InvariantViolationError(f"Scale score {scale_score} matches no performance level.")

    return level, PERFORMANCE_LEVELS[level]


def compute_percentile(
    cumulative_frequency: int,
    total_frequency: int,
    mode: str = ROUNDING_MODE,
) -> int:
    """
    Percentile rank of a raw score: cumulative share of examinees × 100,
    rounded to an integer.

    Raises:
        EmptyDistributionError: ``total_frequency`` is zero.
    """
    if total_frequency <= 0:
        raise EmptyDistributionError(
            f"Total frequency is {total_frequency}; percentiles are undefined."
        )
    return int(round_value(cumulative_frequency / total_frequency * 100, 0, mode))


def _published(value: float, digits: int) -> int | float:
    """Integer when rounding to 0 d.p. yields a finite value, else unchanged."""
    if digits == 0 and math.isfinite(value):
        return int(value)
    return value


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def build_scale_score_table(
    points: list[RaschScorePoint],
    cuts: CutPoints,
    rounding: RoundingSettings = RoundingSettings(),
    constants_precision: int | None = CONSTANTS_PRECISION,
    loss: int | None = LOSS,
    hoss: int | None = HOSS,
    allow_empty_distribution: bool = False,
) -> ScaleScoreTable:
    """
    Build the raw-score-to-scale-score table.

    Args:
        points: Rasch score points sorted ascending by raw score.
        cuts: Raw-score cuts and the two fixed scale-score anchors.
        rounding: Decimal places and tie rule for derived columns.
        constants_precision: Optional rounding of slope/intercept.
        loss: Lowest obtainable scale score; rounded scores below it are
            raised to it.  None disables the clamp.
        hoss: Highest obtainable scale score; None disables the clamp.
        allow_empty_distribution: When True and no examinees are recorded,
            percentiles are None instead of raising.

    Returns:
        ScaleScoreTable with one row per raw score.

    Raises:
        RaschTableError: Table invariants broken.
        CutPointError: A cut raw score is not in the table.
        DegenerateScaleError: Anchoring cuts share an ability estimate.
        InvariantViolationError: Cut/anchor ordering broken, or LOSS > HOSS.
        EmptyDistributionError: Total frequency is zero (unless allowed).
    """
    validate_rasch_points(points)
    check_cut_points_exist(points, cuts)

    constants = compute_scaling_constants(
        points, cuts, precision=constants_precision, mode=rounding.mode
    )
    check_cut_ordering(cuts)
    advanced_ss = extrapolate_advanced_scale_score(points, cuts, constants, mode=rounding.mode)

    if loss is not None and hoss is not None and loss > hoss:
        raise InvariantViolationError(f"LOSS {loss} exceeds HOSS {hoss}.")

    total = points[-1].cumulative_frequency
    if total == 0 and not allow_empty_distribution:
        raise EmptyDistributionError(
            "Total frequency across all raw scores is zero; percentiles are undefined."
        )

    rows: list[ScaleScoreRow] = []
    for point in points:
        unrounded, unrounded_se = transform_point(point, constants, rounding)

        # Advanced cut is policy-set by extrapolation, not the fitted value
        if point.raw_score == cuts.advanced:
            unrounded = float(advanced_ss)

        rounded = round_value(unrounded, rounding.rounded, rounding.mode)
        if loss is not None:
            rounded = max(rounded, loss)
        if hoss is not None:
            rounded = min(rounded, hoss)
        rounded_se = round_value(unrounded_se, rounding.rounded, rounding.mode)

        level, label = classify_performance(
            rounded,
            cuts.approaching_scale_score,
            cuts.proficient_scale_score,
            advanced_ss,
        )

        percentile = (
            compute_percentile(point.cumulative_frequency, total, rounding.mode)
            if total > 0 else None
        )

        rows.append(ScaleScoreRow(
            raw_score=point.raw_score,
            frequency=point.frequency,
            cumulative_frequency=point.cumulative_frequency,
            logit_measure=point.logit_measure,
            standard_error=point.standard_error,
            unrounded_scale_score=unrounded,
            unrounded_scale_score_se=unrounded_se,
            rounded_scale_score=_published(rounded, rounding.rounded),
            rounded_scale_score_se=_published(rounded_se, rounding.rounded),
            performance_level=level,
            performance_label=label,
            percentile=percentile,
        ))

    return ScaleScoreTable(
        rows=tuple(rows),
        constants=constants,
        cuts=cuts,
        advanced_scale_score=advanced_ss,
    )


# ---------------------------------------------------------------------------
# Tabular view
# ---------------------------------------------------------------------------

def rsss_to_frame(
    table: ScaleScoreTable,
    subject: str = SUBJECT,
    grade: str = GRADE,
    rounding: RoundingSettings = RoundingSettings(),
) -> pd.DataFrame:
    """
    Publishable RSSS DataFrame in RSSS_COLUMNS order.

    theta_score and theta_score_se are rounded to ``rounding.unrounded``
    decimals; performance_label is an ordered categorical in level order.
    """
    records = [
        {
            "subject": subject,
            "grade": grade,
            "raw_score": row.raw_score,
            "frequency": row.frequency,
            "cumulative_frequency": row.cumulative_frequency,
            "theta_score": round_value(row.logit_measure, rounding.unrounded, rounding.mode),
            "theta_score_se": round_value(row.standard_error, rounding.unrounded, rounding.mode),
            "unrounded_scale_score": row.unrounded_scale_score,
            "unrounded_scale_score_se": row.unrounded_scale_score_se,
            "scale_score": row.rounded_scale_score,
            "scale_score_se": row.rounded_scale_score_se,
            "performance_level": row.performance_level,
            "performance_label": row.performance_label,
            "percentile": row.percentile,
        }
        for row in table.rows
    ]

    rsss_df = pd.DataFrame(records, columns=RSSS_COLUMNS)
    rsss_df["performance_label"] = pd.Categorical(
        rsss_df["performance_label"],
        categories=PERFORMANCE_LABEL_ORDER,
        ordered=True,
    )
    return rsss_df
