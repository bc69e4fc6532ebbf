"""
Scaling policy parameters: standard-setting cuts, scale-score anchors,
rounding rules, and reporting labels.

This is the AUTHORITATIVE source for all policy constants.
src/scaling/config.py imports from here — do not maintain parallel copies.

Design rationale:
- Raw-score cuts come from the standard-setting panel; the two scale-score
  anchors are a reporting-policy decision and are never computed.
- The advanced scale-score cut is NOT listed here: it is extrapolated from
  the scaling constants at build time.
- Rounding precisions match the published scoring-table format.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Standard-setting raw-score cuts
# ---------------------------------------------------------------------------

RAW_SCORE_CUTS: dict[str, int] = {
    "approaching": 12,
    "proficient": 20,
    "advanced": 32,
}

# ---------------------------------------------------------------------------
# Pre-defined scale-score anchors (policy, not computed)
# ---------------------------------------------------------------------------

SCALE_SCORE_ANCHORS: dict[str, float] = {
    "approaching": 80,
    "proficient": 100,
}

# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

ROUNDING_PRECISION: dict[str, int] = {
    "unrounded": 4,   # theta, unrounded scale score and SE columns
    "rounded": 0,     # published scale score and SE
    "percent": 2,     # impact data percentages
}

# "half_away_from_zero" (2.5 → 3, -2.5 → -3) or "half_even" (2.5 → 2)
ROUNDING_MODE: str = "half_away_from_zero"

# Round slope/intercept before use.  None keeps full precision; the workshop
# tables were produced with 4.
CONSTANTS_PRECISION: int | None = None

# ---------------------------------------------------------------------------
# Lowest / highest obtainable scale score (None → no clamp)
# ---------------------------------------------------------------------------

LOSS: int | None = None
HOSS: int | None = None

# ---------------------------------------------------------------------------
# Reporting labels
# ---------------------------------------------------------------------------

SUBJECT: str = "Social Studies"
GRADE: str = "8"
