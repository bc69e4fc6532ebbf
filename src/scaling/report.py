"""
Export of the scoring tables: CSV files, a JSON summary, and a Word
scoring report for publication.

Word helpers follow the house report style: Times New Roman 12 pt body,
bold headings, 1" top/bottom and 1.25" side margins.
"""

from __future__ import annotations

import json
import math
from pathlib import Path

import numpy as np
import pandas as pd
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from .config import IMPACT_FILENAME, REPORT_FILENAME, RSSS_FILENAME, SUMMARY_FILENAME
from .rsss import ScaleScoreTable

REPORT_FONT = "Times New Roman"

# Columns shown in the Word table (the CSV keeps every column)
REPORT_RSSS_COLUMNS: dict[str, str] = {
    "raw_score": "Raw Score",
    "frequency": "Count",
    "theta_score": "Theta",
    "theta_score_se": "Theta SE",
    "scale_score": "Scale Score",
    "scale_score_se": "SS SE",
    "performance_label": "Performance Level",
    "percentile": "Percentile",
}


# ---------------------------------------------------------------------------
# CSV / JSON
# ---------------------------------------------------------------------------

def export_rsss_table(rsss_df: pd.DataFrame, output_dir: Path) -> Path:
    """Write the RSSS table to CSV and return the path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / RSSS_FILENAME
    rsss_df.to_csv(out_path, index=False)
    print(f"RSSS table saved: {out_path}")
    return out_path


def export_impact_data(impact_df: pd.DataFrame, output_dir: Path) -> Path:
    """Write the impact table to CSV and return the path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / IMPACT_FILENAME
    impact_df.to_csv(out_path, index=False)
    print(f"Impact data saved: {out_path}")
    return out_path


def _json_default(obj):
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, pd.DataFrame):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def export_summary(summary: dict, output_dir: Path) -> Path:
    """Write the scaling summary dict to JSON and return the path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / SUMMARY_FILENAME
    with out_path.open("w", encoding="utf-8") as fh:
        json.dump(summary, fh, indent=2, default=_json_default)
    print(f"Scaling summary saved: {out_path}")
    return out_path


# ---------------------------------------------------------------------------
# Word report helpers
# ---------------------------------------------------------------------------

def _set_margins(document, top=1, bottom=1, left=1.25, right=1.25):
    for section in document.sections:
        section.top_margin = Inches(top)
        section.bottom_margin = Inches(bottom)
        section.left_margin = Inches(left)
        section.right_margin = Inches(right)


def _heading(document, text, level=1):
    p = document.add_heading(text, level=level)
    p.runs[0].font.name = REPORT_FONT
    p.runs[0].font.size = Pt(14 if level == 1 else 12)
    p.runs[0].font.bold = True
    return p


def _body(document, text):
    p = document.add_paragraph(text)
    p.style = document.styles["Normal"]
    p.paragraph_format.space_after = Pt(6)
    return p


def _format_cell(value) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "—"
        if math.isinf(value):
            return "∞" if value > 0 else "−∞"
        return f"{value:g}"
    return str(value)


def _add_table(document, df: pd.DataFrame, headers: list[str]):
    """Add a grid table: header row, then one row per DataFrame row."""
    table = document.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"

    for cell, header in zip(table.rows[0].cells, headers):
        cell.text = header
        cell.paragraphs[0].runs[0].font.bold = True
        cell.paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER

    for values in df.itertuples(index=False):
        cells = table.add_row().cells
        for cell, value in zip(cells, values):
            cell.text = _format_cell(value)
            cell.paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER

    return table


# ---------------------------------------------------------------------------
# Word report
# ---------------------------------------------------------------------------

def export_scoring_report(
    table: ScaleScoreTable,
    rsss_df: pd.DataFrame,
    impact_df: pd.DataFrame,
    output_dir: Path,
    subject: str,
    grade: str,
    reliability: float | None = None,
) -> Path:
    """
    Write the publishable scoring report (.docx).

    Sections: scaling constants and cuts, raw-score-to-scale-score table,
    impact data.

    Returns:
        Path of the written report.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / REPORT_FILENAME

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = REPORT_FONT
    style.font.size = Pt(12)
    _set_margins(doc)

    _heading(doc, f"{subject} Grade {grade}: Raw Score to Scale Score Conversion", level=1)

    cuts = table.cuts
    _heading(doc, "Scaling Constants", level=2)
    _body(
        doc,
        f"Scale scores were obtained as SS = {table.constants.slope:.4f} × θ + "
        f"{table.constants.intercept:.4f}, anchored at the approaching cut "
        f"(raw score {cuts.approaching} → {cuts.approaching_scale_score:g}) and "
        f"the proficient cut (raw score {cuts.proficient} → "
        f"{cuts.proficient_scale_score:g}).  The advanced cut (raw score "
        f"{cuts.advanced}) was extrapolated to a scale score of "
        f"{table.advanced_scale_score}.",
    )
    if reliability is not None:
        _body(doc, f"Marginal reliability of the ability estimates: {reliability:.3f}.")

    _heading(doc, "Raw Score to Scale Score Table", level=2)
    report_df = rsss_df[list(REPORT_RSSS_COLUMNS)]
    _add_table(doc, report_df, list(REPORT_RSSS_COLUMNS.values()))

    _heading(doc, "Impact Data", level=2)
    _add_table(
        doc,
        impact_df[["performance_label", "count", "percent"]],
        ["Performance Level", "Count", "Percent"],
    )

    doc.save(out_path)
    print(f"Scoring report saved: {out_path}")
    return out_path
