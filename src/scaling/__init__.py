"""
src/scaling — Rasch scaling and performance-level classification.

Module layout
-------------
config.py       — Paths, calibration-file column map, RSSS schema, level taxonomy
errors.py       — ScalingError hierarchy
rasch_table.py  — RaschScorePoint, table validation, CSV loading, marginal reliability
transform.py    — Rounding rules, CutPoints, scaling constants, per-point transform
rsss.py         — ScaleScoreRow/Table, classification, percentiles, RSSS builder
impact.py       — Impact data (percent of examinees per performance level)
report.py       — CSV/JSON export and the Word scoring report
pipeline.py     — Orchestrates load → RSSS → impact → targets → export

Public interface
----------------
Build the scoring table from score points:
    build_scale_score_table(points, cuts)
    rsss_to_frame(table)
    compute_impact_data(table)

Run everything from the calibration export (import from .pipeline directly;
it depends on src.targeting, which itself imports from this package):
    from src.scaling.pipeline import run_scaling_pipeline
"""

from .errors import (
    CutPointError,
    DegenerateScaleError,
    EmptyDistributionError,
    InvariantViolationError,
    RaschTableError,
    ScalingError,
    TableBoundaryError,
)
from .impact import compute_impact_data, print_impact_summary
from .rasch_table import (
    RaschScorePoint,
    load_rasch_table,
    marginal_reliability,
    points_from_frame,
    validate_rasch_points,
)
from .rsss import (
    ScaleScoreRow,
    ScaleScoreTable,
    build_scale_score_table,
    classify_performance,
    compute_percentile,
    rsss_to_frame,
)
from .transform import (
    CutPoints,
    RoundingSettings,
    ScalingConstants,
    compute_scaling_constants,
    extrapolate_advanced_scale_score,
    round_value,
    transform_point,
)

__all__ = [
    # Errors
    "ScalingError",
    "RaschTableError",
    "CutPointError",
    "DegenerateScaleError",
    "InvariantViolationError",
    "EmptyDistributionError",
    "TableBoundaryError",
    # Rasch table
    "RaschScorePoint",
    "load_rasch_table",
    "points_from_frame",
    "validate_rasch_points",
    "marginal_reliability",
    # Transform
    "CutPoints",
    "RoundingSettings",
    "ScalingConstants",
    "compute_scaling_constants",
    "extrapolate_advanced_scale_score",
    "round_value",
    "transform_point",
    # RSSS
    "ScaleScoreRow",
    "ScaleScoreTable",
    "build_scale_score_table",
    "classify_performance",
    "compute_percentile",
    "rsss_to_frame",
    # Impact
    "compute_impact_data",
    "print_impact_summary",
]
