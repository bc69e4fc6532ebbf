"""
Error types raised by the scaling layer.

Every error is a ValueError subclass: each one signals bad input data or a
bad policy configuration, never a transient condition, so callers should not
retry.
"""

from __future__ import annotations


class ScalingError(ValueError):
    """Base class for all scaling and targeting errors."""


class RaschTableError(ScalingError):
    """Rasch score table is empty, non-contiguous, non-monotone, or malformed."""


class CutPointError(ScalingError):
    """A standard-setting raw-score cut does not exist in the Rasch table."""


class DegenerateScaleError(ScalingError):
    """The two anchoring cuts map to an identical ability estimate."""


class InvariantViolationError(ScalingError):
    """Cut or anchor ordering is broken, so classification is undefined."""


class EmptyDistributionError(ScalingError):
    """Total frequency across all raw scores is zero."""


class TableBoundaryError(ScalingError):
    """A raw-score neighbour lookup stepped past the end of the table."""
