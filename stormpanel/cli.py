"""
stormpanel Command Line Interface (CLI)
=======================================

Builds both panels from a HURDAT2 archive in one run:

    python -m stormpanel.cli --archive hurdat2-1851-2022-050423.txt --root ./out

Outputs land in `<root>/derived/`. Add `--excel` for a workbook copy and
`--report run.docx` for a DOCX run summary.

The archive file is only read, never modified.
"""

from __future__ import annotations
import argparse, logging, os, sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import PipelineConfig
from .engine import run_pipeline
from .errors import ArchiveError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="stormpanel",
                                 description="Build observation and storm-month panels from HURDAT2.")
    ap.add_argument("--archive", required=True, help="Path to the HURDAT2 text file")
    ap.add_argument("--root", required=True, help="Root directory; outputs go to <root>/derived")
    ap.add_argument("--first-year", type=int, default=1980, help="Drop observations before this year")
    ap.add_argument("--last-year", type=int, default=2022, help="Drop observations after this year")
    ap.add_argument("--workers", type=int, default=1, help="Processes used to decode lines")
    ap.add_argument("--excel", action="store_true", help="Also write an .xlsx copy of both panels")
    ap.add_argument("--report", help="Write a DOCX run report to this path")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--version", action="version", version=__version__)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the stormpanel CLI.

    1) Parse arguments into a PipelineConfig
    2) Run the pipeline
    3) Optionally write the DOCX report
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = PipelineConfig(
        root=Path(args.root),
        first_year=args.first_year,
        last_year=args.last_year,
        workers=args.workers,
        write_excel=args.excel,
    )

    print(f"Building panels from {args.archive}...")
    try:
        result = run_pipeline(args.archive, config)
    except ArchiveError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("No output was written.", file=sys.stderr)
        return 2

    run = result.report
    print(f"Storms: {run.n_storms} | Observations: {run.n_observations} | Storm-months: {run.n_storm_months}")
    if run.issues:
        print(f"Non-fatal issues: {run.issue_counts()}")
    for name, path in sorted(run.outputs.items()):
        print(f"  {name} -> {path}")

    if args.report:
        from .report import generate_docx_report, ReportConfig, DatasetCitation
        cfg = ReportConfig(
            citation=DatasetCitation(file_name=os.path.basename(args.archive)),
            command_line=["stormpanel"] + (argv if argv is not None else sys.argv[1:]),
        )
        generate_docx_report(run, args.report, config=cfg)
        print(f"Report written to {args.report}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
