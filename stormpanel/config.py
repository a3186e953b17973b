"""
Pipeline configuration
======================

Everything path-related hangs off one root directory. Outputs go to
`<root>/derived/`; `prepare_output_dir` creates it before a run.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

OUTPUT_SUBDIR = "derived"

OBSERVATIONS_FILE = "hurdat2_observations.csv"
STORM_MONTHS_FILE = "hurdat2_storm_months.csv"
CODEBOOK_FILE = "codebook.json"
RUN_REPORT_FILE = "run_report.json"
EXCEL_FILE = "hurdat2_panels.xlsx"

# Every file a run may leave in the output directory
ARTIFACT_FILES = (OBSERVATIONS_FILE, STORM_MONTHS_FILE, CODEBOOK_FILE, RUN_REPORT_FILE, EXCEL_FILE)


@dataclass(frozen=True)
class PipelineConfig:
    """Run settings. Only `root` is required."""
    root: Path
    first_year: int = 1980
    last_year: Optional[int] = 2022
    # >1 decodes lines in a process pool
    workers: int = 1
    write_excel: bool = False

    @property
    def output_dir(self) -> Path:
        return Path(self.root) / OUTPUT_SUBDIR


def prepare_output_dir(config: PipelineConfig) -> Path:
    """Create `<root>/derived` if needed and check it is writable."""
    out = config.output_dir
    out.mkdir(parents=True, exist_ok=True)
    if not os.access(out, os.W_OK):
        raise PermissionError(f"Output directory is not writable: {out}")
    return out
