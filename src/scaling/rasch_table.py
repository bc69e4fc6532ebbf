"""
Rasch raw-score table: score points, validation, calibration-file loading,
and the marginal reliability check.

A Rasch score table (RST) holds one row per attainable raw score with the
examinee frequency, cumulative frequency, logit ability measure, and its
standard error.  Every downstream computation assumes the table invariants
checked by ``validate_rasch_points``:

- non-empty, one point per integer raw score from min to max (no gaps,
  no duplicates), sorted ascending;
- logit measure strictly increasing in raw score (±inf allowed at the
  extremes);
- frequencies non-negative, cumulative frequency equal to the running sum.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from .config import RST_COLUMN_MAP, RST_PATH, RST_SCORE_OFFSET, RST_SKIP_ROWS
from .errors import EmptyDistributionError, RaschTableError


# ---------------------------------------------------------------------------
# Score point
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RaschScorePoint:
    """One row of the Rasch score table."""

    raw_score: int
    frequency: int
    cumulative_frequency: int
    logit_measure: float
    standard_error: float


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_rasch_points(points: list[RaschScorePoint]) -> None:
    """
    Check the Rasch table invariants.

    Args:
        points: Score points, expected sorted ascending by raw score.

    Raises:
        RaschTableError: First invariant violation found, with the offending
            raw score(s) in the message.
    """
    if not points:
        raise RaschTableError("Rasch score table is empty.")

    running_total = 0
    previous: RaschScorePoint | None = None

    for point in points:
        if point.frequency < 0:
            raise RaschTableError(
                f"Negative frequency {point.frequency} at raw score {point.raw_score}."
            )
        if point.standard_error < 0:
            raise RaschTableError(
                f"Negative standard error {point.standard_error} "
                f"at raw score {point.raw_score}."
            )

        running_total += point.frequency
        if point.cumulative_frequency != running_total:
            raise RaschTableError(
                f"Cumulative frequency {point.cumulative_frequency} at raw score "
                f"{point.raw_score} does not match running total {running_total}."
            )

        if previous is not None:
            if point.raw_score != previous.raw_score + 1:
                raise RaschTableError(
                    f"Raw scores not contiguous: {previous.raw_score} is followed "
                    f"by {point.raw_score}."
                )
            # NaN measures fail this comparison as well
            if not point.logit_measure > previous.logit_measure:
                raise RaschTableError(
                    f"Logit measure not strictly increasing between raw scores "
                    f"{previous.raw_score} ({previous.logit_measure}) and "
                    f"{point.raw_score} ({point.logit_measure})."
                )
        elif math.isnan(point.logit_measure):
            raise RaschTableError(f"Missing logit measure at raw score {point.raw_score}.")

        previous = point


# ---------------------------------------------------------------------------
# Construction from tabular data
# ---------------------------------------------------------------------------

def points_from_frame(
    rst_df: pd.DataFrame,
    column_map: dict[str, str] = RST_COLUMN_MAP,
    score_offset: int = 0,
) -> list[RaschScorePoint]:
    """
    Convert a calibration score-table DataFrame into validated score points.

    Rows are sorted by raw score before conversion so the input order of the
    file does not matter.

    Args:
        rst_df: DataFrame with one row per raw score.
        column_map: Internal field name → DataFrame column name.
        score_offset: Constant added to every raw score.

    Returns:
        List of RaschScorePoint sorted ascending by raw score.

    Raises:
        RaschTableError: Required columns missing, or table invariants broken.
    """
    missing = [col for col in column_map.values() if col not in rst_df.columns]
    if missing:
        raise RaschTableError(
            f"Rasch score table is missing columns {missing}; "
            f"found {list(rst_df.columns)}."
        )

    ordered = rst_df.sort_values(column_map["raw_score"])

    points = [
        RaschScorePoint(
            raw_score=int(row[column_map["raw_score"]]) + score_offset,
            frequency=int(row[column_map["frequency"]]),
            cumulative_frequency=int(row[column_map["cumulative_frequency"]]),
            logit_measure=float(row[column_map["logit_measure"]]),
            standard_error=float(row[column_map["standard_error"]]),
        )
        for _, row in ordered.iterrows()
    ]

    validate_rasch_points(points)
    return points


def load_rasch_table(
    rst_path: Path = RST_PATH,
    skiprows: int = RST_SKIP_ROWS,
    score_offset: int = RST_SCORE_OFFSET,
    column_map: dict[str, str] = RST_COLUMN_MAP,
) -> list[RaschScorePoint]:
    """
    Load a Rasch score table exported by the calibration software.

    Args:
        rst_path: CSV export of the score file.
        skiprows: Title lines before the column-name row.
        score_offset: Constant added to every SCORE value.
        column_map: Internal field name → CSV column name.

    Returns:
        Validated list of RaschScorePoint.

    Raises:
        FileNotFoundError: The score file does not exist.
        RaschTableError: Columns missing or table invariants broken.
    """
    if not rst_path.exists():
        raise FileNotFoundError(
            f"Rasch score table not found: {rst_path}\n"
            "Export the score file from the calibration run first."
        )

    rst_df = pd.read_csv(rst_path, skiprows=skiprows, skipinitialspace=True)
    rst_df.columns = [str(col).strip() for col in rst_df.columns]
    return points_from_frame(rst_df, column_map=column_map, score_offset=score_offset)


# ---------------------------------------------------------------------------
# Marginal reliability
# ---------------------------------------------------------------------------

def marginal_reliability(points: list[RaschScorePoint]) -> float:
    """
    Quick marginal reliability of the ability estimates.

    Expands each raw score by its frequency and computes

        (var(theta) - mean(SE^2)) / var(theta)

    with the sample variance.  Rows with a non-finite measure or standard
    error (the extreme scores) are left out.

    Args:
        points: Validated score points.

    Returns:
        Reliability coefficient (at most 1.0).

    Raises:
        EmptyDistributionError: Fewer than two examinees on finite rows.
        RaschTableError: All finite ability estimates are identical.
    """
    finite = [
        p for p in points
        if math.isfinite(p.logit_measure) and math.isfinite(p.standard_error)
    ]
    freqs = np.array([p.frequency for p in finite], dtype=int)

    if freqs.sum() < 2:
        raise EmptyDistributionError(
            "Marginal reliability needs at least two examinees on finite rows; "
            f"found {int(freqs.sum())}."
        )

    theta = np.repeat([p.logit_measure for p in finite], freqs)
    se = np.repeat([p.standard_error for p in finite], freqs)

    var_theta = float(np.var(theta, ddof=1))
    if var_theta == 0:
        raise RaschTableError("Ability estimates have zero variance.")

    return (var_theta - float(np.mean(se ** 2))) / var_theta


def index_by_raw_score(points: list[RaschScorePoint]) -> dict[int, RaschScorePoint]:
    """Map raw score → score point."""
    return {p.raw_score: p for p in points}
