"""
Statistical target bands for future form assembly.

A target band is an interval of item difficulty (logits) that keeps a new
form aligned with the reporting scale to within one raw-score point.  Its
half-width at an anchor row is half the logit gap between the rows one raw
score above and one below:

    half_width(r) = (theta(r + 1) - theta(r - 1)) / 2

Two anchorings are provided:

- item_mean_target_band: anchored at the row nearest the mean operational
  item difficulty, centred on that mean;
- cut_aligned_target_band: half-widths at the three cut-score rows,
  averaged, so measurement precision near the cuts (and therefore the raw
  cuts themselves) stays stable year over year.

Neighbour rows are looked up by raw score, never by position; an anchor on
the first or last raw score raises TableBoundaryError.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from src.scaling.errors import CutPointError, EmptyDistributionError
from src.scaling.rsss import ScaleScoreRow, ScaleScoreTable
from src.scaling.transform import round_value

from .config import BAND_PRECISION, NEIGHBOUR_STEP, ROUNDING_MODE


@dataclass(frozen=True)
class TargetBand:
    """Target difficulty interval [low, high] around ``center`` (logits)."""

    center: float
    half_width: float
    low: float
    high: float

    def as_dict(self) -> dict:
        return {
            "center": self.center,
            "half_width": self.half_width,
            "low": self.low,
            "high": self.high,
        }


@dataclass(frozen=True)
class CutAlignedTargets:
    """Per-cut bands sharing the averaged half-width, plus an overall band."""

    half_width: float
    per_cut_half_widths: dict[str, float]
    per_cut: dict[str, TargetBand]
    overall: TargetBand


# ---------------------------------------------------------------------------
# Row lookups
# ---------------------------------------------------------------------------

def nearest_row(table: ScaleScoreTable, theta: float) -> ScaleScoreRow:
    """Row whose logit measure is closest to ``theta`` (lowest raw score on ties)."""
    return min(table.rows, key=lambda row: abs(theta - row.logit_measure))


def cut_anchor_rows(table: ScaleScoreTable) -> dict[str, ScaleScoreRow]:
    """
    First row attaining each scale-score cut (approaching, proficient,
    advanced).

    Raises:
        CutPointError: No row's rounded scale score equals a cut.
    """
    anchors: dict[str, ScaleScoreRow] = {}
    for name, cut_ss in table.cut_scale_scores().items():
        match = next(
            (row for row in table.rows if row.rounded_scale_score == cut_ss),
            None,
        )
        if match is None:
            raise CutPointError(f"No row has the {name} cut scale score {cut_ss}.")
        anchors[name] = match
    return anchors


def one_point_half_width(
    table: ScaleScoreTable,
    raw_score: int,
    step: int = NEIGHBOUR_STEP,
) -> float:
    """
    Half the logit gap between the rows ``step`` raw-score points either side
    of ``raw_score``.

    Raises:
        TableBoundaryError: A neighbour lies outside the table.
    """
    upper = table.adjacent_row(raw_score, step)
    lower = table.adjacent_row(raw_score, -step)
    return (upper.logit_measure - lower.logit_measure) / 2


def _band(center: float, half_width: float, precision: int, mode: str) -> TargetBand:
    return TargetBand(
        center=round_value(center, precision, mode),
        half_width=round_value(half_width, precision, mode),
        low=round_value(center - half_width, precision, mode),
        high=round_value(center + half_width, precision, mode),
    )


def _mean_difficulty(difficulties) -> float:
    values = np.asarray(list(difficulties), dtype=float)
    if values.size == 0:
        raise EmptyDistributionError("No item difficulties supplied.")
    return float(values.mean())


# ---------------------------------------------------------------------------
# Target bands
# ---------------------------------------------------------------------------

def item_mean_target_band(
    table: ScaleScoreTable,
    difficulties,
    precision: int = BAND_PRECISION,
    mode: str = ROUNDING_MODE,
) -> TargetBand:
    """
    Target band centred on the mean operational item difficulty.

    Args:
        table: Completed scale-score table.
        difficulties: Iterable of Rasch item difficulties (logits).
        precision: Decimal places for the reported band.
        mode: Rounding tie rule.

    Returns:
        TargetBand [mean - hw, mean + hw], hw taken at the row nearest the mean.

    Raises:
        EmptyDistributionError: ``difficulties`` is empty.
        TableBoundaryError: The nearest row is the first or last raw score.
    """
    mean_rid = _mean_difficulty(difficulties)
    anchor = nearest_row(table, mean_rid)
    half_width = one_point_half_width(table, anchor.raw_score)
    return _band(mean_rid, half_width, precision, mode)


def cut_aligned_target_band(
    table: ScaleScoreTable,
    difficulties=None,
    precision: int = BAND_PRECISION,
    mode: str = ROUNDING_MODE,
) -> CutAlignedTargets:
    """
    Target bands anchored at the three cut scores.

    The half-width is the mean of the per-cut one-point half-widths.  Each
    cut gets a band around its own logit measure; the overall band is
    centred on the mean cut logit, or on the mean item difficulty when
    ``difficulties`` is given.

    Raises:
        CutPointError: A cut scale score is attained by no row.
        EmptyDistributionError: ``difficulties`` given but empty.
        TableBoundaryError: A cut row is the first or last raw score.
    """
    anchors = cut_anchor_rows(table)

    per_cut_half_widths = {
        name: one_point_half_width(table, row.raw_score)
        for name, row in anchors.items()
    }
    half_width = float(np.mean(list(per_cut_half_widths.values())))

    per_cut = {
        name: _band(row.logit_measure, half_width, precision, mode)
        for name, row in anchors.items()
    }

    if difficulties is None:
        center = float(np.mean([row.logit_measure for row in anchors.values()]))
    else:
        center = _mean_difficulty(difficulties)

    return CutAlignedTargets(
        half_width=round_value(half_width, precision, mode),
        per_cut_half_widths={
            name: round_value(hw, precision, mode)
            for name, hw in per_cut_half_widths.items()
        },
        per_cut=per_cut,
        overall=_band(center, half_width, precision, mode),
    )
