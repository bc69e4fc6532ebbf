"""
Orchestrates the scaling pipeline end to end.

Pipeline steps:
  Step 1 — Load and validate the Rasch score table; marginal reliability
  Step 2 — Build the raw-score-to-scale-score table
  Step 3 — Impact data
  Step 4 — Statistical targets (only when item metadata is available;
             skipped with a warning when the bands cannot be formed)
  Step 5 — Export CSV tables, JSON summary, and the Word scoring report

Usage (from project root):
    python -m src.scaling.pipeline
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from src.targeting.bands import cut_aligned_target_band, item_mean_target_band
from src.targeting.items import load_item_metadata, summarize_item_difficulties

from .config import (
    GRADE,
    ITEM_METADATA_PATH,
    RESULTS_DIR,
    RST_PATH,
    RST_SCORE_OFFSET,
    RST_SKIP_ROWS,
    SUBJECT,
)
from .errors import EmptyDistributionError, ScalingError
from .impact import compute_impact_data, print_impact_summary
from .rasch_table import load_rasch_table, marginal_reliability
from .report import (
    export_impact_data,
    export_rsss_table,
    export_scoring_report,
    export_summary,
)
from .rsss import build_scale_score_table, rsss_to_frame
from .transform import CutPoints, RoundingSettings


def run_scaling_pipeline(
    rst_path: Path = RST_PATH,
    output_dir: Path = RESULTS_DIR,
    cuts: CutPoints | None = None,
    rounding: RoundingSettings = RoundingSettings(),
    items_path: Path | None = ITEM_METADATA_PATH,
    skiprows: int = RST_SKIP_ROWS,
    score_offset: int = RST_SCORE_OFFSET,
    subject: str = SUBJECT,
    grade: str = GRADE,
    write_report: bool = True,
) -> dict:
    """
    Execute the complete scaling pipeline.

    Args:
        rst_path: Rasch score table CSV from the calibration run.
        output_dir: Directory for the RSSS, impact, summary, and report files.
        cuts: Raw-score cuts and scale-score anchors; defaults to
            config/scaling_params.py.
        rounding: Rounding precisions and tie rule.
        items_path: Item metadata CSV for statistical targets.  None, or a
            path that does not exist, skips Step 4.
        skiprows: Title lines before the RST column-name row.
        score_offset: Constant added to every RST raw score.
        subject: Subject label for the published table.
        grade: Grade label for the published table.
        write_report: Also write the Word scoring report.

    Returns:
        Dict summary: constants, cuts, reliability, impact, targets, and
        output file paths.
    """
    pipeline_start = datetime.now()
    sep = "=" * 70
    cuts = cuts or CutPoints.from_config()

    print(f"\n{sep}")
    print("SCALING PIPELINE — START")
    print(f"  Rasch score table: {rst_path}")
    print(f"{sep}\n")

    # ------------------------------------------------------------------
    # Step 1: Rasch score table
    # ------------------------------------------------------------------
    print(f"\n{'—'*50}")
    print("STEP 1: Rasch Score Table")
    print(f"{'—'*50}")
    points = load_rasch_table(rst_path, skiprows=skiprows, score_offset=score_offset)
    print(f"Loaded {len(points)} raw scores "
          f"({points[0].raw_score}–{points[-1].raw_score}), "
          f"{points[-1].cumulative_frequency:,} examinees.")

    try:
        reliability = marginal_reliability(points)
        print(f"Marginal reliability: {reliability:.4f}")
    except EmptyDistributionError as exc:
        reliability = None
        print(f"WARNING: marginal reliability not computed — {exc}")

    # ------------------------------------------------------------------
    # Step 2: RSSS
    # ------------------------------------------------------------------
    print(f"\n{'—'*50}")
    print("STEP 2: Raw Score to Scale Score Table")
    print(f"{'—'*50}")
    table = build_scale_score_table(points, cuts, rounding=rounding)
    rsss_df = rsss_to_frame(table, subject=subject, grade=grade, rounding=rounding)

    print(f"  Slope (a):          {table.constants.slope:.4f}")
    print(f"  Intercept (b):      {table.constants.intercept:.4f}")
    print(f"  Scale-score cuts:   {cuts.approaching_scale_score:g} / "
          f"{cuts.proficient_scale_score:g} / {table.advanced_scale_score} (extrapolated)")

    # ------------------------------------------------------------------
    # Step 3: Impact data
    # ------------------------------------------------------------------
    print(f"\n{'—'*50}")
    print("STEP 3: Impact Data")
    print(f"{'—'*50}")
    impact_df = compute_impact_data(table, rounding=rounding)
    print_impact_summary(impact_df)

    # ------------------------------------------------------------------
    # Step 4: Statistical targets
    # ------------------------------------------------------------------
    print(f"\n{'—'*50}")
    print("STEP 4: Statistical Targets")
    print(f"{'—'*50}")
    targets: dict = {}
    if items_path is None or not items_path.exists():
        print(f"  Skipped — item metadata not found at {items_path}.")
    else:
        items_df = load_item_metadata(items_path)
        try:
            item_summary = summarize_item_difficulties(items_df)
            difficulties = item_summary["difficulties"]

            item_band = item_mean_target_band(table, difficulties)
            cut_targets = cut_aligned_target_band(table)
        except ScalingError as exc:
            print(f"WARNING: statistical targets not computed — {exc}")
        else:
            targets = {
                "n_operational_items": item_summary["n_items"],
                "item_difficulty_summary": item_summary["overall"],
                "item_mean_band": item_band.as_dict(),
                "cut_aligned_half_width": cut_targets.half_width,
                "cut_aligned_per_cut": {
                    name: band.as_dict() for name, band in cut_targets.per_cut.items()
                },
                "cut_aligned_band": cut_targets.overall.as_dict(),
            }
            print(f"  Operational items:  {item_summary['n_items']}")
            print(f"  Mean difficulty:    {item_band.center:.4f}")
            print(f"  Item-mean band:     [{item_band.low:.4f}, {item_band.high:.4f}]")
            print(f"  Cut-aligned band:   [{cut_targets.overall.low:.4f}, "
                  f"{cut_targets.overall.high:.4f}]")

    # ------------------------------------------------------------------
    # Step 5: Export
    # ------------------------------------------------------------------
    print(f"\n{'—'*50}")
    print("STEP 5: Export")
    print(f"{'—'*50}")
    output_files = {
        "rsss_table": str(export_rsss_table(rsss_df, output_dir)),
        "impact_data": str(export_impact_data(impact_df, output_dir)),
    }
    if write_report:
        output_files["scoring_report"] = str(export_scoring_report(
            table, rsss_df, impact_df, output_dir,
            subject=subject, grade=grade, reliability=reliability,
        ))

    duration = (datetime.now() - pipeline_start).total_seconds()

    summary = {
        "n_raw_scores": len(table.rows),
        "n_examinees": table.total_frequency,
        "marginal_reliability": reliability,
        "slope": table.constants.slope,
        "intercept": table.constants.intercept,
        "raw_score_cuts": cuts.raw_cuts(),
        "scale_score_cuts": table.cut_scale_scores(),
        "impact_percent": dict(zip(impact_df["performance_label"], impact_df["percent"])),
        "targets": targets,
        "duration_seconds": round(duration, 1),
        "output_files": output_files,
    }
    summary_path = export_summary(summary, output_dir)
    summary["output_files"]["scaling_summary"] = str(summary_path)

    print(f"\n{sep}")
    print("SCALING PIPELINE — COMPLETE")
    print(f"  Duration:            {duration:.1f}s")
    print(f"  Raw scores scaled:   {summary['n_raw_scores']}")
    print(f"  Examinees:           {summary['n_examinees']:,}")
    print(f"{sep}\n")

    return summary


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    run_scaling_pipeline()
