"""
Scaling-layer configuration: path constants, calibration-file column map,
output schema, and the performance-level taxonomy.

Policy values (cuts, anchors, rounding) live in config/scaling_params.py and
are re-exported here so scaling modules import from one place.
"""

from pathlib import Path

from config.scaling_params import (
    CONSTANTS_PRECISION,
    GRADE,
    HOSS,
    LOSS,
    RAW_SCORE_CUTS,
    ROUNDING_MODE,
    ROUNDING_PRECISION,
    SCALE_SCORE_ANCHORS,
    SUBJECT,
)

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DATA_DIR = PROJECT_ROOT / "data"
RST_DIR = DATA_DIR / "rst"
ITEMS_DIR = DATA_DIR / "items"
RESULTS_DIR = PROJECT_ROOT / "results"

# Input file paths
RST_PATH = RST_DIR / "rasch_demo_rst.csv"
ITEM_METADATA_PATH = ITEMS_DIR / "item_metadata.csv"

# Output file names (written under the pipeline's output_dir)
RSSS_FILENAME = "rsss_table.csv"
IMPACT_FILENAME = "impact_data.csv"
SUMMARY_FILENAME = "scaling_summary.json"
REPORT_FILENAME = "scoring_report.docx"

# ---------------------------------------------------------------------------
# Calibration score-file format (Winsteps SCFILE exported to CSV)
# ---------------------------------------------------------------------------

# Header lines preceding the column-name row
RST_SKIP_ROWS: int = 2

# Added to every SCORE value.  The workshop export's SCORE runs two points
# below the true raw score, so that file needs an offset of 2.
RST_SCORE_OFFSET: int = 0

# Internal field name → calibration-file column name
RST_COLUMN_MAP: dict[str, str] = {
    "raw_score": "SCORE",
    "frequency": "FREQ",
    "logit_measure": "MEASURE",
    "standard_error": "S.E.",
    "cumulative_frequency": "CUM.FREQ",
}

# ---------------------------------------------------------------------------
# Performance-level taxonomy (fixed order: level 1 → 4)
# ---------------------------------------------------------------------------

PERFORMANCE_LEVELS: dict[int, str] = {
    1: "Below Proficient",
    2: "Approaching Proficient",
    3: "Proficient",
    4: "Advanced Proficient",
}

PERFORMANCE_LABEL_ORDER: list[str] = list(PERFORMANCE_LEVELS.values())

# ---------------------------------------------------------------------------
# Published RSSS column order
# ---------------------------------------------------------------------------

RSSS_COLUMNS: list[str] = [
    "subject",
    "grade",
    "raw_score",
    "frequency",
    "cumulative_frequency",
    "theta_score",
    "theta_score_se",
    "unrounded_scale_score",
    "unrounded_scale_score_se",
    "scale_score",
    "scale_score_se",
    "performance_level",
    "performance_label",
    "percentile",
]

IMPACT_COLUMNS: list[str] = [
    "performance_level",
    "performance_label",
    "count",
    "percent",
]
