"""
Shared pytest fixtures for scaling and targeting tests.

Two score tables are used throughout:

- LINEAR: raw scores 10–20 with measures linear from -1.0 to 2.0
  (0.3 logit per point).  Cuts 12 / 20 with anchors 80 / 100 give
  slope = 20 / 2.4 and intercept = 100 - 2.0 * slope.
- DEMO: raw scores 0–40 with a logistic-shaped measure curve, non-zero
  frequencies, and cuts 12 / 20 / 32 (the workshop policy values).
"""

from __future__ import annotations

import math

import pandas as pd
import pytest

from src.scaling.rasch_table import RaschScorePoint
from src.scaling.rsss import build_scale_score_table
from src.scaling.transform import CutPoints


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_points(
    measures: list[float],
    frequencies: list[int] | None = None,
    start: int = 0,
    standard_errors: list[float] | None = None,
) -> list[RaschScorePoint]:
    """Build contiguous score points from a measure list."""
    frequencies = frequencies or [1] * len(measures)
    standard_errors = standard_errors or [0.3] * len(measures)
    points = []
    running = 0
    for i, (theta, freq, se) in enumerate(zip(measures, frequencies, standard_errors)):
        running += freq
        points.append(RaschScorePoint(
            raw_score=start + i,
            frequency=freq,
            cumulative_frequency=running,
            logit_measure=theta,
            standard_error=se,
        ))
    return points


def linear_measures() -> list[float]:
    """Measures -1.0, -0.7, ..., 2.0 for raw scores 10–20."""
    return [round(-1.0 + 0.3 * i, 10) for i in range(11)]


def demo_measures(n_scores: int = 41) -> list[float]:
    """Logit measures shaped like a Rasch raw-score curve (steeper at ends)."""
    max_score = n_scores - 1
    measures = []
    for raw in range(n_scores):
        # Keep the extremes finite by pulling them half a point inward
        p = min(max(raw, 0.5), max_score - 0.5) / max_score
        measures.append(round(math.log(p / (1 - p)) + 0.25, 6))
    return measures


def demo_frequencies(n_scores: int = 41) -> list[int]:
    """Unimodal examinee counts peaking near the middle of the scale."""
    centre = (n_scores - 1) / 2
    return [int(round(200 * math.exp(-((raw - centre) / 8) ** 2))) + 1 for raw in range(n_scores)]


def demo_standard_errors(n_scores: int = 41) -> list[float]:
    max_score = n_scores - 1
    ses = []
    for raw in range(n_scores):
        p = min(max(raw, 0.5), max_score - 0.5) / max_score
        ses.append(round(1 / math.sqrt(max_score * p * (1 - p)), 6))
    return ses


def points_as_rst_frame(points: list[RaschScorePoint]) -> pd.DataFrame:
    """Score points as a calibration-file style DataFrame (SCORE, FREQ, ...)."""
    return pd.DataFrame([
        {
            "SCORE": p.raw_score,
            "MEASURE": p.logit_measure,
            "S.E.": p.standard_error,
            "FREQ": p.frequency,
            "CUM.FREQ": p.cumulative_frequency,
        }
        for p in points
    ])


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def linear_points():
    """Raw scores 10–20, measures linear from -1.0 to 2.0."""
    return make_points(linear_measures(), start=10)


@pytest.fixture
def linear_cuts():
    """Anchors 80 / 100 at raw 12 / 20; advanced cut placeholder at 20."""
    return CutPoints(
        approaching=12,
        proficient=20,
        advanced=20,
        approaching_scale_score=80,
        proficient_scale_score=100,
    )


@pytest.fixture
def demo_points():
    """Raw scores 0–40 with realistic measures, SEs, and frequencies."""
    return make_points(
        demo_measures(),
        frequencies=demo_frequencies(),
        standard_errors=demo_standard_errors(),
    )


@pytest.fixture
def demo_cuts():
    """Workshop policy: raw cuts 12 / 20 / 32, anchors 80 / 100."""
    return CutPoints(
        approaching=12,
        proficient=20,
        advanced=32,
        approaching_scale_score=80,
        proficient_scale_score=100,
    )


@pytest.fixture
def demo_table(demo_points, demo_cuts):
    """Completed RSSS table for the demo data."""
    return build_scale_score_table(demo_points, demo_cuts)
