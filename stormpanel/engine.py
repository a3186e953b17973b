"""
Pipeline engine
===============

This is where the stages are wired together:

1) Read the archive -> RawLine list
2) Extract headers and check the layout
3) Tag data lines with their storm (merge-join over header intervals)
4) Decode fields -> Observation list (+ non-fatal issues)
5) Drop rows outside the panel window, then add derived metrics
6) Collapse to storm-months
7) Write both panels, the codebook and the run report

Steps 1-6 only build records in memory. Step 7 writes into a staging
directory and moves the files into place once all of them exist, so a
failed run never leaves files under the final artifact names.
"""

from __future__ import annotations
import logging
import os
import shutil
import tempfile
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from . import __version__
from .config import (ARTIFACT_FILES, CODEBOOK_FILE, EXCEL_FILE, OBSERVATIONS_FILE, RUN_REPORT_FILE,
                     STORM_MONTHS_FILE, PipelineConfig, prepare_output_dir)
from .decoder import decode_lines, exclusion_reason
from .export import (codebook_payload, observations_frame, storm_months_frame,
                     write_csv, write_excel, write_json)
from .headers import extract_headers, validate_layout
from .metrics import enrich
from .models import DecodeIssue, Observation, RawLine, StormMonth
from .monthly import aggregate_monthly
from .source import read_archive
from .tagger import tag_blocks

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Counts and non-fatal issues collected during one run."""
    archive_path: Optional[str] = None
    n_lines: int = 0
    n_storms: int = 0
    n_data_lines: int = 0
    n_observations: int = 0
    n_storm_months: int = 0
    excluded: Dict[str, int] = field(default_factory=dict)
    issues: List[DecodeIssue] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)
    started_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    def issue_counts(self) -> Dict[str, int]:
        return dict(Counter(i.kind for i in self.issues))

    def to_dict(self) -> dict:
        return {
            "version": __version__,
            "archive_path": self.archive_path,
            "started_at": self.started_at,
            "n_lines": self.n_lines,
            "n_storms": self.n_storms,
            "n_data_lines": self.n_data_lines,
            "n_observations": self.n_observations,
            "n_storm_months": self.n_storm_months,
            "excluded": self.excluded,
            "issue_counts": self.issue_counts(),
            "issues": [{"kind": i.kind, "line_number": i.line_number, "value": i.value}
                       for i in self.issues],
            "outputs": self.outputs,
        }


@dataclass
class PipelineResult:
    observations: List[Observation]
    storm_months: List[StormMonth]
    report: RunReport


def build_panels(lines: Sequence[RawLine], config: PipelineConfig,
                 report: Optional[RunReport] = None) -> PipelineResult:
    """Run stages 2-6 over already-read lines. Nothing is written."""
    report = report or RunReport()
    report.n_lines = len(lines)

    headers = extract_headers(lines)
    validate_layout(lines, headers)
    report.n_storms = len(headers)

    tagged = tag_blocks(lines, headers)
    report.n_data_lines = len(tagged)

    decoded, issues = decode_lines(tagged, workers=config.workers)
    report.issues = issues

    kept: List[Observation] = []
    excluded: Counter = Counter()
    for obs in decoded:
        reason = exclusion_reason(obs, config.first_year, config.last_year)
        if reason is None:
            kept.append(obs)
        else:
            excluded[reason] += 1
    report.excluded = dict(excluded)
    if excluded:
        logger.info("Excluded %d observations: %s", sum(excluded.values()), dict(excluded))

    observations = enrich(kept)
    storm_months = aggregate_monthly(observations)
    report.n_observations = len(observations)
    report.n_storm_months = len(storm_months)
    return PipelineResult(observations=observations, storm_months=storm_months, report=report)


def write_outputs(result: PipelineResult, config: PipelineConfig) -> Dict[str, str]:
    """Write all artifacts via a staging directory; return name -> final path."""
    out_dir = prepare_output_dir(config)
    staging = tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir))
    try:
        names = [OBSERVATIONS_FILE, STORM_MONTHS_FILE, CODEBOOK_FILE, RUN_REPORT_FILE]
        obs_df = observations_frame(result.observations)
        sm_df = storm_months_frame(result.storm_months)
        write_csv(obs_df, os.path.join(staging, OBSERVATIONS_FILE))
        write_csv(sm_df, os.path.join(staging, STORM_MONTHS_FILE))
        write_json(codebook_payload(), os.path.join(staging, CODEBOOK_FILE))
        if config.write_excel:
            write_excel(obs_df, sm_df, os.path.join(staging, EXCEL_FILE))
            names.append(EXCEL_FILE)

        outputs = {name: str(out_dir / name) for name in names}
        result.report.outputs = outputs
        # written last so it lists every artifact
        write_json(result.report.to_dict(), os.path.join(staging, RUN_REPORT_FILE))

        # drop artifacts of earlier runs that this run does not produce
        for name in ARTIFACT_FILES:
            if name not in outputs and (out_dir / name).exists():
                os.remove(out_dir / name)
        for name in names:
            os.replace(os.path.join(staging, name), outputs[name])
    finally:
        shutil.rmtree(staging, ignore_errors=True)
    logger.info("Wrote %d artifacts to %s", len(outputs), out_dir)
    return outputs


def run_pipeline(archive_path: str, config: PipelineConfig) -> PipelineResult:
    """Read the archive, build both panels and write them under `config.root`.

    Fatal archive errors propagate before anything is written.
    """
    report = RunReport(archive_path=str(archive_path))
    lines = read_archive(archive_path)
    result = build_panels(lines, config, report=report)
    write_outputs(result, config)
    return result
