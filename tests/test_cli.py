import os

import pytest

from stormpanel.cli import main
from stormpanel.config import OBSERVATIONS_FILE
from stormpanel.engine import RunReport
from stormpanel.models import DecodeIssue
from stormpanel.report import ReportConfig, generate_docx_report


def test_cli_success(write_archive, example_text, tmp_path, capsys):
    root = tmp_path / "out"
    code = main(["--archive", write_archive(example_text), "--root", str(root)])
    assert code == 0
    assert (root / "derived" / OBSERVATIONS_FILE).exists()
    out = capsys.readouterr().out
    assert "Storms: 1 | Observations: 2 | Storm-months: 1" in out


def test_cli_fatal_error_exit_code(write_archive, header, data_line, tmp_path, capsys):
    path = write_archive([header("AL011980", "A", 3), data_line()])
    root = tmp_path / "out"
    assert main(["--archive", path, "--root", str(root)]) == 2
    assert "Error: line 1" in capsys.readouterr().err
    assert not root.exists()


def test_cli_writes_docx_report(write_archive, example_text, tmp_path):
    docx = pytest.importorskip("docx")
    report_path = tmp_path / "reports" / "run.docx"
    code = main(["--archive", write_archive(example_text), "--root", str(tmp_path / "out"),
                 "--report", str(report_path)])
    assert code == 0
    text = "\n".join(p.text for p in docx.Document(str(report_path)).paragraphs)
    assert "Observations in panel: 2" in text
    assert "hurdat2.txt" in text


def test_report_lists_issues(tmp_path):
    docx = pytest.importorskip("docx")
    run = RunReport(archive_path="a.txt", n_observations=5,
                    excluded={"before_first_year": 3},
                    issues=[DecodeIssue("UnknownStatusCode", 12, "ZZ")])
    path = generate_docx_report(run, os.path.join(tmp_path, "r.docx"),
                                config=ReportConfig(max_issues=1))
    doc = docx.Document(path)
    cells = [c.text for t in doc.tables for row in t.rows for c in row.cells]
    assert "before_first_year" in cells
    assert "ZZ" in cells and "12" in cells
