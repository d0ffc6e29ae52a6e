"""CLI integration tests for the run/validate/inspect commands."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from cardflow import cli

TEMPLATE = Path(__file__).resolve().parents[1] / "cardflow" / "config" / "memorial_template.yaml"
HEADER = "Name,Profession,Overdose,Year of Death,Age,Image Path"


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


def _csv(tmp_path: Path, *rows: str) -> Path:
    path = tmp_path / "people.csv"
    path.write_text("\n".join([HEADER, *rows]) + "\n", encoding="utf-8")
    return path


ROWS = (
    "Ada Lovelace,Mathematician,Illness,1852,36,",
    "Grace Hopper,Computer Scientist,Natural causes,1992,85,",
    "Alan Turing,Cryptanalyst,Poisoning,1954,41,",
)


def test_run_fills_document_and_writes_outputs(cli_runner: CliRunner, tmp_path: Path) -> None:
    source = _csv(tmp_path, *ROWS)
    reports = tmp_path / "reports"
    snapshot = tmp_path / "out" / "snapshot.yaml"

    result = cli_runner.invoke(
        cli.app,
        [
            "run",
            str(source),
            "--template",
            str(TEMPLATE),
            "--report-dir",
            str(reports),
            "--snapshot",
            str(snapshot),
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Processing finished" in result.stdout
    assert "Processed records: 3" in result.stdout
    assert "Document: 1.psd" in result.stdout

    assert (reports / "cardflow_report.md").exists()
    assert not (reports / "cardflow_issues.csv").exists()
    tree = yaml.safe_load(snapshot.read_text(encoding="utf-8"))
    assert tree["name"] == "1.psd"


def test_run_with_debug_log(cli_runner: CliRunner, tmp_path: Path) -> None:
    source = _csv(tmp_path, ROWS[0])
    result = cli_runner.invoke(
        cli.app,
        ["run", str(source), "--template", str(TEMPLATE), "--report-dir", str(tmp_path), "--debug"],
    )
    assert result.exit_code == 0, result.output
    debug_line = next(line for line in result.stdout.splitlines() if line.startswith("Debug log: "))
    log_text = Path(debug_line.removeprefix("Debug log: ")).read_text(encoding="utf-8")
    assert "=== Session ended ===" in log_text


def test_run_prompt_cancelled(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(
        cli.app,
        ["run", "--template", str(TEMPLATE), "--report-dir", str(tmp_path)],
        input="\n",
    )
    assert result.exit_code == 0, result.output
    assert "No CSV file selected" in result.stdout
    assert not (tmp_path / "cardflow_report.md").exists()


def test_run_rejects_invalid_csv(cli_runner: CliRunner, tmp_path: Path) -> None:
    source = _csv(tmp_path, "Ada Lovelace,Mathematician,Illness,eighteen,36,")
    result = cli_runner.invoke(
        cli.app,
        ["run", str(source), "--template", str(TEMPLATE), "--report-dir", str(tmp_path / "reports")],
    )
    assert result.exit_code == 2
    assert "CSV validation failed" in result.output
    assert (tmp_path / "reports" / "cardflow_report.md").exists()


def test_run_rejects_bad_layout(cli_runner: CliRunner, tmp_path: Path) -> None:
    layout = tmp_path / "layout.yaml"
    layout.write_text("max_profiles: 0\n", encoding="utf-8")
    result = cli_runner.invoke(
        cli.app,
        ["run", str(_csv(tmp_path, ROWS[0])), "--template", str(TEMPLATE), "--layout", str(layout)],
    )
    assert result.exit_code == 2
    assert "Unable to load layout configuration" in result.output


def test_validate_command(cli_runner: CliRunner, tmp_path: Path) -> None:
    good = cli_runner.invoke(cli.app, ["validate", str(_csv(tmp_path, ROWS[0], "", ROWS[1]))])
    assert good.exit_code == 0, good.output
    assert "Valid: 2 data row(s)" in good.stdout

    bad = cli_runner.invoke(cli.app, ["validate", str(_csv(tmp_path, "Ada Lovelace,,Illness,1852,36,"))])
    assert bad.exit_code == 2
    assert "Invalid:" in bad.output


def test_inspect_command(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli.app, ["inspect", str(TEMPLATE)])
    assert result.exit_code == 0, result.output
    lines = result.stdout.splitlines()
    assert lines[0] == "memorial (1920x1080)"
    assert "  [group] profile-1" in lines
    assert "    [text] profile-name" in lines
    assert "      [text] profile-age" in lines
    assert "  [frame] profile-frame-left 580x700 @ (40, 80)" in lines


def test_validate_reports_encoding_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    source = tmp_path / "export.csv"
    source.write_bytes(f"{HEADER}\nJos\xe9 Caf\xe9,Chef,Illness,1990,50,\n".encode("latin-1"))

    result = cli_runner.invoke(cli.app, ["validate", str(source)])
    assert result.exit_code == 2
    assert "not valid UTF-8" in result.output
