"""
Targeting-layer configuration: item metadata columns and band precision.
"""

from src.scaling.config import ITEM_METADATA_PATH, ROUNDING_MODE

# ---------------------------------------------------------------------------
# Item metadata (item bank export)
# ---------------------------------------------------------------------------

ITEM_STATUS_COLUMN: str = "Status"
ITEM_TYPE_COLUMN: str = "Type"
ITEM_DIFFICULTY_COLUMN: str = "RID_op"    # Rasch item difficulty, operational calibration

OPERATIONAL_STATUS: str = "OP"

# ---------------------------------------------------------------------------
# Target bands
# ---------------------------------------------------------------------------

# Band endpoints are reported in logits to 4 d.p.
BAND_PRECISION: int = 4

# Bands span ±1 raw-score point around the anchor row
NEIGHBOUR_STEP: int = 1
