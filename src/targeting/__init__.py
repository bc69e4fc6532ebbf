"""
src/targeting — Statistical targets for future form assembly.

Module layout
-------------
config.py  — Item metadata columns, operational status code, band precision
items.py   — Item metadata loading, operational subset, difficulty summary
bands.py   — One-point half-widths, item-mean and cut-aligned target bands

Public interface
----------------
    summarize_item_difficulties(items_df)
    item_mean_target_band(table, difficulties)
    cut_aligned_target_band(table, difficulties=None)
"""

from .bands import (
    CutAlignedTargets,
    TargetBand,
    cut_aligned_target_band,
    cut_anchor_rows,
    item_mean_target_band,
    nearest_row,
    one_point_half_width,
)
from .items import load_item_metadata, operational_items, summarize_item_difficulties

__all__ = [
    # Bands
    "TargetBand",
    "CutAlignedTargets",
    "nearest_row",
    "cut_anchor_rows",
    "one_point_half_width",
    "item_mean_target_band",
    "cut_aligned_target_band",
    # Items
    "load_item_metadata",
    "operational_items",
    "summarize_item_difficulties",
]
