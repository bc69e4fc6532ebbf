"""
Operational item difficulties: loading, filtering, and descriptive summary.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
from scipy import stats

from src.scaling.errors import EmptyDistributionError

from .config import (
    ITEM_DIFFICULTY_COLUMN,
    ITEM_METADATA_PATH,
    ITEM_STATUS_COLUMN,
    ITEM_TYPE_COLUMN,
    OPERATIONAL_STATUS,
)


def _finite_or_none(value) -> float | None:
    value = float(value)
    return value if np.isfinite(value) else None


def load_item_metadata(items_path: Path = ITEM_METADATA_PATH) -> pd.DataFrame:
    """
    Load the item metadata export (one row per item).

    Raises:
        FileNotFoundError: The metadata file does not exist.
    """
    if not items_path.exists():
        raise FileNotFoundError(
            f"Item metadata not found: {items_path}\n"
            "Export item statuses and difficulties from the item bank first."
        )
    return pd.read_csv(items_path)


def operational_items(
    items_df: pd.DataFrame,
    status_column: str = ITEM_STATUS_COLUMN,
    operational_status: str = OPERATIONAL_STATUS,
) -> pd.DataFrame:
    """Subset of items whose status marks them as operational."""
    if status_column not in items_df.columns:
        raise KeyError(f"Item metadata has no '{status_column}' column.")
    return items_df[items_df[status_column] == operational_status].copy()


def summarize_item_difficulties(
    items_df: pd.DataFrame,
    difficulty_column: str = ITEM_DIFFICULTY_COLUMN,
    type_column: str = ITEM_TYPE_COLUMN,
    status_column: str = ITEM_STATUS_COLUMN,
    operational_status: str = OPERATIONAL_STATUS,
) -> dict:
    """
    Describe operational item difficulties overall and by item type.

    Args:
        items_df: Item metadata with status, type, and difficulty columns.
        difficulty_column: Rasch item difficulty column.
        type_column: Item type column (e.g. MC, CR).  Skipped if absent.
        status_column: Item status column.
        operational_status: Status value marking operational items.

    Returns:
        Dict with keys n_items, overall (nobs, min, max, mean, variance,
        skewness, kurtosis), by_type (DataFrame of describe() per type or
        None), and difficulties (numpy array).  Overall variance, skewness
        and kurtosis are None where undefined (a single item, or identical
        difficulties).

    Raises:
        EmptyDistributionError: No operational items with a difficulty.
    """
    op_items = operational_items(items_df, status_column, operational_status)
    op_items = op_items.dropna(subset=[difficulty_column])
    if op_items.empty:
        raise EmptyDistributionError(
            f"No operational ('{operational_status}') items with a difficulty."
        )

    difficulties = op_items[difficulty_column].to_numpy(dtype=float)

    if difficulties.size > 1:
        desc = stats.describe(difficulties)
        overall = {
            "nobs": int(desc.nobs),
            "min": float(desc.minmax[0]),
            "max": float(desc.minmax[1]),
            "mean": float(desc.mean),
            "variance": _finite_or_none(desc.variance),
            "skewness": _finite_or_none(desc.skewness),
            "kurtosis": _finite_or_none(desc.kurtosis),
        }
    else:
        overall = {
            "nobs": 1,
            "min": float(difficulties[0]),
            "max": float(difficulties[0]),
            "mean": float(difficulties[0]),
            "variance": None,
            "skewness": None,
            "kurtosis": None,
        }

    by_type = None
    if type_column in op_items.columns:
        by_type = op_items.groupby(type_column)[difficulty_column].describe()

    return {
        "n_items": int(difficulties.size),
        "overall": overall,
        "by_type": by_type,
        "difficulties": np.asarray(difficulties),
    }
