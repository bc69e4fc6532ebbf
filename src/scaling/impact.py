"""
Impact data: share of examinees at each performance level.

Frequencies are summed per performance label and divided by the total
frequency.  Rows always follow the fixed four-level order (Below Proficient
→ Advanced Proficient), and a level nobody reached is reported as 0.0, so the
table shape does not depend on which levels the data happen to populate.

Each percentage is rounded independently, so the column sums to 100 only
within rounding tolerance.
"""

from __future__ import annotations

import pandas as pd

from .config import IMPACT_COLUMNS, PERFORMANCE_LEVELS
from .errors import EmptyDistributionError
from .rsss import ScaleScoreTable
from .transform import RoundingSettings, round_value


def compute_impact_data(
    table: ScaleScoreTable,
    rounding: RoundingSettings = RoundingSettings(),
) -> pd.DataFrame:
    """
    Build the impact table for an RSSS table.

    Args:
        table: Completed scale-score table.
        rounding: ``rounding.percent`` decimals and tie rule for percentages.

    Returns:
        DataFrame with columns performance_level, performance_label, count,
        percent — one row per level in level order.

    Raises:
        EmptyDistributionError: No examinees recorded in the table.
    """
    total = sum(row.frequency for row in table.rows)
    if total == 0:
        raise EmptyDistributionError("Total frequency is zero; impact data are undefined.")

    counts = {level: 0 for level in PERFORMANCE_LEVELS}
    for row in table.rows:
        counts[row.performance_level] += row.frequency

    records = [
        {
            "performance_level": level,
            "performance_label": label,
            "count": counts[level],
            "percent": round_value(counts[level] / total * 100, rounding.percent, rounding.mode),
        }
        for level, label in PERFORMANCE_LEVELS.items()
    ]
    return pd.DataFrame(records, columns=IMPACT_COLUMNS)


def print_impact_summary(impact_df: pd.DataFrame) -> None:
    """Print impact percentages, one aligned line per performance level."""
    print("\nImpact Data (% of examinees):")
    for _, row in impact_df.iterrows():
        print(
            f"  {row['performance_label']:<24} "
            f"{row['percent']:>6.2f}%  (n = {row['count']:,})"
        )
    print(f"  {'Total':<24} {impact_df['percent'].sum():>6.2f}%")
