from __future__ import annotations

"""
Run report generator
--------------------
This module writes a DOCX summary of one pipeline run: what was read, what
was excluded and why, and every non-fatal decode issue.

Design goals:
- Keep the pipeline usable without python-docx (lazy import).
- Put the numbers an operator checks first (storm/line counts, exclusions)
  at the top; the full issue list goes last.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import os

from .codes import codebook
from .engine import RunReport


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "Atlantic hurricane database (HURDAT2)"
    institutional_author: str = "NOAA National Hurricane Center"
    location: str = "Miami, Florida"
    website: str = "https://www.nhc.noaa.gov/data/#hurdat"
    file_name: Optional[str] = None


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "HURDAT2 Panel Build Report"
    subtitle: str = "stormpanel run summary"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # How many issues to list in full
    max_issues: int = 200

    # Optional: the command line that started the run
    command_line: Optional[List[str]] = None


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(
    run: RunReport,
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """Generate a DOCX report for one finished run and return its path."""
    config = config or ReportConfig()

    # Lazy import: only required when a report is requested.
    try:
        from docx import Document
        from docx.shared import Pt
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    def _table(header: List[str], rows: List[List[str]]) -> None:
        t = doc.add_table(rows=1, cols=len(header))
        for i, h in enumerate(header):
            t.rows[0].cells[i].text = h
        for r in rows:
            cells = t.add_row().cells
            for i, v in enumerate(r):
                cells[i].text = v

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Archive", run.archive_path or "(in memory)")
    _kv("Started at", run.started_at)
    _kv("Archive lines", str(run.n_lines))
    _kv("Storms", str(run.n_storms))
    _kv("Data lines", str(run.n_data_lines))
    _kv("Observations in panel", str(run.n_observations))
    _kv("Storm-month rows", str(run.n_storm_months))

    doc.add_heading("Dataset citation", level=1)
    cit = config.citation
    if cit.file_name:
        doc.add_paragraph(f"Data file used: {cit.file_name}")
    doc.add_paragraph(
        f"{cit.institutional_author}. {cit.database_name}. {cit.location}. {cit.website}."
    )

    doc.add_heading("Excluded observations", level=1)
    if run.excluded:
        _table(["Reason", "Rows"], [[k, str(v)] for k, v in sorted(run.excluded.items())])
    else:
        doc.add_paragraph("No observations were excluded.")

    doc.add_heading("Outputs", level=1)
    for name, path in sorted(run.outputs.items()):
        doc.add_paragraph(f"{name}: {path}", style="List Bullet")

    doc.add_heading("Code tables", level=1)
    for col, table in codebook().items():
        doc.add_paragraph(col)
        _table(["Code", "Letter", "Label"],
               [[str(code), letter, text] for code, (letter, text) in table.items()])

    doc.add_heading("Decode issues", level=1)
    counts = run.issue_counts()
    if not counts:
        doc.add_paragraph("No decode issues.")
    else:
        _table(["Kind", "Count"], [[k, str(v)] for k, v in sorted(counts.items())])
        shown = run.issues[:config.max_issues]
        doc.add_paragraph("")
        doc.add_paragraph(f"First {len(shown)} of {len(run.issues)} issues:")
        _table(["Line", "Kind", "Value"],
               [[str(i.line_number), i.kind, i.value] for i in shown])

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_heading("Reproducibility footer", level=1)
    from . import __version__
    from datetime import datetime as _dt
    doc.add_paragraph(f"stormpanel version: {__version__}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")
    if config.command_line:
        doc.add_paragraph("Command line: " + " ".join(config.command_line))

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
