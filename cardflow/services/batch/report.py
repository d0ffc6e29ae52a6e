"""Reporting utilities for batch runs."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from .models import RunSummary


def issues_frame(summary: RunSummary) -> pd.DataFrame:
    columns = ["row", "kind", "slot", "message"]
    return pd.DataFrame([issue.model_dump() for issue in summary.issues], columns=columns)


def write_report(output_dir: Path, summary: RunSummary) -> tuple[Path, Path | None]:
    """Write a Markdown report and, when issues exist, an issues CSV."""

    output_dir.mkdir(parents=True, exist_ok=True)

    issues_path: Path | None = None
    if summary.issues:
        issues_path = output_dir / "cardflow_issues.csv"
        issues_frame(summary).to_csv(issues_path, index=False)

    report_path = output_dir / "cardflow_report.md"
    lines = ["# CardFlow Run Report", ""]
    lines.append(f"- Source: {summary.source_path or '-'}")
    lines.append(f"- State: {summary.state.value}")
    lines.append(f"- Processed records: {summary.processed}")
    lines.append(f"- Document: {summary.instance_name or '-'}")
    lines.append(f"- Issues: {len(summary.issues)}")
    lines.append("")

    if summary.validation_error:
        lines.append("## Validation")
        lines.append(summary.validation_error)
        lines.append("")

    if summary.issues:
        lines.append("## Issues by kind")
        counts = issues_frame(summary)["kind"].value_counts()
        for kind, count in counts.items():
            lines.append(f"- {kind}: {count}")
        lines.append("")
        lines.append(f"Issues exported to `{issues_path.name}`.")

    report_path.write_text("\n".join(lines), encoding="utf-8")
    return report_path, issues_path


__all__ = ["issues_frame", "write_report"]
