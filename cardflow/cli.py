"""Typer based command line entry points for CardFlow."""

from __future__ import annotations

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

import typer
import yaml

from cardflow.config import LayoutConfig, load_layout_config
from cardflow.core.errors import CardFlowError, ConfigError
from cardflow.core.logger import debug_session, get_logger
from cardflow.core.workspace import ensure_work_dirs
from cardflow.services.batch import BatchOrchestrator, RunState, write_report
from cardflow.services.document import LayerGroup, MemoryHost, PillowTextMeasurer, TextLayer
from cardflow.services.paths import PathResolver
from cardflow.services.tabular import is_blank_row, read_rows, validate_rows

app = typer.Typer(help="Fill template documents from CSV records.")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    logger = get_logger()
    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")
    logger.setLevel(level_value)


def _load_layout(layout: Optional[Path]) -> LayoutConfig:
    try:
        return load_layout_config(layout)
    except ConfigError as exc:
        get_logger().error("cli layout_error: %s", exc)
        typer.secho(f"Unable to load layout configuration: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc


def _prompt_for_source() -> str | None:
    answer = typer.prompt("Select a CSV file (leave empty to cancel)", default="", show_default=False)
    return answer.strip() or None


@app.command("run")
def run_command(
    csv_file: Optional[Path] = typer.Argument(None, help="CSV file with the records. Prompted for when omitted."),
    template: Path = typer.Option(..., "--template", "-t", exists=True, dir_okay=False, help="Template YAML layer tree."),
    layout: Optional[Path] = typer.Option(None, "--layout", help="Override layout YAML file."),
    font: Optional[Path] = typer.Option(None, "--font", exists=True, dir_okay=False, help="TTF/OTF font used to measure text."),
    report_dir: Optional[Path] = typer.Option(None, "--report-dir", help="Directory for the run report."),
    snapshot: Optional[Path] = typer.Option(None, "--snapshot", help="Write the filled layer tree as YAML."),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Append a detailed debug log for this run."),
) -> None:
    """Fill the template with up to the configured number of records."""

    logger = get_logger()
    config = _load_layout(layout)
    work_dirs = ensure_work_dirs()

    host = MemoryHost(PillowTextMeasurer(str(font) if font else None))
    try:
        master = host.open_template(template)
    except CardFlowError as exc:
        logger.error("cli template_error: %s", exc)
        typer.secho(f"Unable to open template: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    with ExitStack() as stack:
        if debug or config.debug.enabled:
            log_path = stack.enter_context(debug_session(work_dirs["logs"] / config.debug.log_file, logger))
            typer.echo(f"Debug log: {log_path}")
        orchestrator = BatchOrchestrator(host, master, config, logger=logger)
        summary = orchestrator.run(csv_file, select_source=_prompt_for_source)

    if summary.state is RunState.CANCELLED:
        typer.echo(f"{summary.cancel_reason}. Nothing to do.")
        return

    report_path, issues_path = write_report(report_dir or work_dirs["reports"], summary)

    if summary.state is RunState.VALIDATION_FAILED:
        typer.secho(f"CSV validation failed: {summary.validation_error}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    typer.echo("Processing finished")
    typer.echo(f"Processed records: {summary.processed}")
    typer.echo(f"Document: {summary.instance_name or '-'}")
    for issue in summary.issues:
        typer.secho(f"Row {issue.row}: {issue.message}", fg=typer.colors.YELLOW, err=True)
    typer.echo(f"Report: {report_path}")
    if issues_path:
        typer.echo(f"Issues CSV: {issues_path}")

    if snapshot and summary.instance_name:
        document = host.documents[summary.instance_name]
        snapshot.parent.mkdir(parents=True, exist_ok=True)
        snapshot.write_text(yaml.safe_dump(document.snapshot(), sort_keys=False, allow_unicode=True), encoding="utf-8")
        typer.echo(f"Snapshot: {snapshot}")
    logger.info("CLI run completed: processed=%d issues=%d", summary.processed, len(summary.issues))


@app.command("validate")
def validate_command(
    csv_file: Path = typer.Argument(..., help="CSV file to validate."),
    layout: Optional[Path] = typer.Option(None, "--layout", help="Override layout YAML file."),
    check_images: bool = typer.Option(True, "--check-images/--no-check-images", help="Probe that image paths exist."),
) -> None:
    """Validate a CSV file against the layout's schema without filling anything."""

    config = _load_layout(layout)
    paths = PathResolver(max_length=config.paths.max_path_length)
    source = str(csv_file)

    def _exists(image: str) -> bool:
        return Path(paths.resolve_relative(source, image)).is_file()

    try:
        paths.validate(source, config.paths.allowed_source_extensions)
        rows = read_rows(csv_file)
        validate_rows(rows, config.csv, exists=_exists if check_images else None)
    except (CardFlowError, OSError) as exc:
        typer.secho(f"Invalid: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    data_rows = sum(1 for row in rows[1:] if not is_blank_row(row))
    typer.echo(f"Valid: {data_rows} data row(s)")


@app.command("inspect")
def inspect_command(
    template: Path = typer.Argument(..., exists=True, dir_okay=False, help="Template YAML layer tree."),
) -> None:
    """Print a template's layer tree."""

    host = MemoryHost()
    try:
        document = host.open_template(template)
    except CardFlowError as exc:
        typer.secho(f"Unable to open template: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    typer.echo(f"{document.name} ({document.width:g}x{document.height:g})")

    def _print(group: LayerGroup, depth: int) -> None:
        for layer in group.layers:
            indent = "  " * depth
            if isinstance(layer, LayerGroup):
                typer.echo(f"{indent}[group] {layer.name}")
                _print(layer, depth + 1)
            elif isinstance(layer, TextLayer):
                typer.echo(f"{indent}[text] {layer.name}")
            else:
                b = layer.bounds
                typer.echo(f"{indent}[frame] {layer.name} {b.width:g}x{b.height:g} @ ({b.left:g}, {b.top:g})")

    _print(document.root, 1)


if __name__ == "__main__":
    app()
