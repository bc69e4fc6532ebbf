"""
Linear scaling transform: rounding rules, cut points, scaling constants,
advanced-cut extrapolation, and the per-point theta → scale-score transform.

The scale is anchored at two standard-setting cuts: the logit measures of
the approaching and proficient raw-score cuts are mapped onto their
policy-chosen scale scores, which fixes

    slope     = (proficient_ss - approaching_ss) / (theta_pro - theta_app)
    intercept = proficient_ss - slope * theta_pro

The advanced cut is not anchored; its scale score is extrapolated from the
same line and rounded to an integer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

from .config import (
    CONSTANTS_PRECISION,
    RAW_SCORE_CUTS,
    ROUNDING_MODE,
    ROUNDING_PRECISION,
    SCALE_SCORE_ANCHORS,
)
from .errors import CutPointError, DegenerateScaleError, InvariantViolationError
from .rasch_table import RaschScorePoint, index_by_raw_score


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

# Decimal's ROUND_HALF_UP rounds ties away from zero
_DECIMAL_MODES: dict[str, str] = {
    "half_away_from_zero": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
}


def round_value(value: float, digits: int = 0, mode: str = ROUNDING_MODE) -> float:
    """
    Round to ``digits`` decimals using an explicit tie-breaking rule.

    The value is rounded on its shortest decimal representation (``repr``),
    so 2.675 rounds to 2.68 under either mode rather than to the binary
    neighbour 2.67.  Non-finite values (±inf, NaN) pass through unchanged.

    Args:
        value: Number to round.
        digits: Decimal places to keep.
        mode: "half_away_from_zero" (2.5 → 3.0, -2.5 → -3.0) or
              "half_even" (2.5 → 2.0, 3.5 → 4.0).

    Returns:
        Rounded value as a float.

    Raises:
        ValueError: Unknown rounding mode.
    """
    if mode not in _DECIMAL_MODES:
        raise ValueError(
            f"Unknown rounding mode {mode!r}; expected one of {sorted(_DECIMAL_MODES)}."
        )
    if not math.isfinite(value):
        return float(value)

    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=_DECIMAL_MODES[mode])
    return float(rounded)


@dataclass(frozen=True)
class RoundingSettings:
    """Decimal places for each family of output columns, plus the tie rule."""

    unrounded: int = ROUNDING_PRECISION["unrounded"]
    rounded: int = ROUNDING_PRECISION["rounded"]
    percent: int = ROUNDING_PRECISION["percent"]
    mode: str = ROUNDING_MODE


# ---------------------------------------------------------------------------
# Cut points
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CutPoints:
    """Standard-setting raw-score cuts and the two fixed scale-score anchors."""

    approaching: int
    proficient: int
    advanced: int
    approaching_scale_score: float
    proficient_scale_score: float

    @classmethod
    def from_config(cls) -> "CutPoints":
        """Cuts and anchors from config/scaling_params.py."""
        return cls(
            approaching=RAW_SCORE_CUTS["approaching"],
            proficient=RAW_SCORE_CUTS["proficient"],
            advanced=RAW_SCORE_CUTS["advanced"],
            approaching_scale_score=SCALE_SCORE_ANCHORS["approaching"],
            proficient_scale_score=SCALE_SCORE_ANCHORS["proficient"],
        )

    def raw_cuts(self) -> dict[str, int]:
        return {
            "approaching": self.approaching,
            "proficient": self.proficient,
            "advanced": self.advanced,
        }


def check_cut_points_exist(points: list[RaschScorePoint], cuts: CutPoints) -> None:
    """
    Raise CutPointError when any raw-score cut is absent from the table.
    """
    by_score = index_by_raw_score(points)
    for name, raw in cuts.raw_cuts().items():
        if raw not in by_score:
            raise CutPointError(
                f"{name} cut raw score {raw} not found in Rasch table "
                f"(raw scores {points[0].raw_score}–{points[-1].raw_score})."
            )


def check_cut_ordering(cuts: CutPoints) -> None:
    """
    Raise InvariantViolationError unless raw cuts and anchors strictly increase.
    """
    if not cuts.approaching < cuts.proficient < cuts.advanced:
        raise InvariantViolationError(
            "Raw-score cuts must satisfy approaching < proficient < advanced; "
            f"got {cuts.approaching}, {cuts.proficient}, {cuts.advanced}."
        )
    if not cuts.approaching_scale_score < cuts.proficient_scale_score:
        raise InvariantViolationError(
            "Scale-score anchors must satisfy approaching < proficient; got "
            f"{cuts.approaching_scale_score}, {cuts.proficient_scale_score}."
        )


# ---------------------------------------------------------------------------
# Scaling constants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScalingConstants:
    """Slope (a) and intercept (b) of the theta → scale-score line."""

    slope: float
    intercept: float

    def scale(self, logit_measure: float) -> float:
        return self.slope * logit_measure + self.intercept

    def scale_se(self, standard_error: float) -> float:
        return self.slope * standard_error


def _cut_measure(points: list[RaschScorePoint], raw_score: int, name: str) -> float:
    by_score = index_by_raw_score(points)
    if raw_score not in by_score:
        raise CutPointError(f"{name} cut raw score {raw_score} not found in Rasch table.")
    return by_score[raw_score].logit_measure


def compute_scaling_constants(
    points: list[RaschScorePoint],
    cuts: CutPoints,
    precision: int | None = CONSTANTS_PRECISION,
    mode: str = ROUNDING_MODE,
) -> ScalingConstants:
    """
    Derive slope and intercept by linear interpolation between the
    approaching and proficient cuts.

    Args:
        points: Validated score points.
        cuts: Cut raw scores and scale-score anchors.
        precision: If set, round the slope, then compute and round the
            intercept from the rounded slope.
        mode: Rounding tie rule used when ``precision`` is set.

    Returns:
        ScalingConstants.

    Raises:
        CutPointError: A cut raw score is not in the table.
        DegenerateScaleError: Both cuts have the same ability estimate, or a
            cut sits on an extreme score with no finite estimate.
    """
    theta_app = _cut_measure(points, cuts.approaching, "approaching")
    theta_pro = _cut_measure(points, cuts.proficient, "proficient")

    if not (math.isfinite(theta_app) and math.isfinite(theta_pro)):
        raise DegenerateScaleError(
            "Anchoring cuts need finite ability estimates; got "
            f"{theta_app} at raw score {cuts.approaching} and "
            f"{theta_pro} at raw score {cuts.proficient}."
        )
    if theta_pro == theta_app:
        raise DegenerateScaleError(
            f"Approaching cut (raw {cuts.approaching}) and proficient cut "
            f"(raw {cuts.proficient}) share the ability estimate {theta_pro}; "
            "the scale cannot be anchored."
        )

    slope = (
        (cuts.proficient_scale_score - cuts.approaching_scale_score)
        / (theta_pro - theta_app)
    )
    if precision is not None:
        slope = round_value(slope, precision, mode)

    intercept = cuts.proficient_scale_score - slope * theta_pro
    if precision is not None:
        intercept = round_value(intercept, precision, mode)

    return ScalingConstants(slope=slope, intercept=intercept)


def extrapolate_advanced_scale_score(
    points: list[RaschScorePoint],
    cuts: CutPoints,
    constants: ScalingConstants,
    mode: str = ROUNDING_MODE,
) -> int:
    """
    Scale score of the advanced cut, extrapolated from the anchoring line and
    rounded to an integer.

    Raises:
        CutPointError: The advanced cut raw score is not in the table.
        InvariantViolationError: The extrapolated score is not finite or does
            not exceed the proficient anchor.
    """
    theta_adv = _cut_measure(points, cuts.advanced, "advanced")
    advanced_ss = round_value(constants.scale(theta_adv), 0, mode)

    if not math.isfinite(advanced_ss):
        raise InvariantViolationError(
            f"Advanced cut (raw {cuts.advanced}) extrapolates to {advanced_ss}."
        )
    if not advanced_ss > cuts.proficient_scale_score:
        raise InvariantViolationError(
            f"Extrapolated advanced scale score {advanced_ss} does not exceed "
            f"the proficient anchor {cuts.proficient_scale_score}."
        )
    return int(advanced_ss)


# ---------------------------------------------------------------------------
# Per-point transform
# ---------------------------------------------------------------------------

def transform_point(
    point: RaschScorePoint,
    constants: ScalingConstants,
    rounding: RoundingSettings = RoundingSettings(),
) -> tuple[float, float]:
    """
    Apply the linear transform to one score point.

    Returns:
        Tuple of (unrounded_scale_score, unrounded_scale_score_se), each
        rounded to ``rounding.unrounded`` decimals.
    """
    unrounded = round_value(constants.scale(point.logit_measure), rounding.unrounded, rounding.mode)
    unrounded_se = round_value(
        constants.scale_se(point.standard_error), rounding.unrounded, rounding.mode
    )
    return unrounded, unrounded_se
