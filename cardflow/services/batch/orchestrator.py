from __future__ import annotations

from pathlib import Path
from typing import Callable

from cardflow.config import LayoutConfig
from cardflow.core.errors import (
    ImageProcessingError,
    InputError,
    PathError,
    SlotResolutionError,
    ValidationError,
)
from cardflow.core.logger import get_logger
from cardflow.services.document.base import DocumentContext, DocumentHost
from cardflow.services.document.model import Document, SlotKind
from cardflow.services.fitting import ImageFitter, fit_width, set_content
from cardflow.services.paths import PathResolver
from cardflow.services.slots import SlotResolver
from cardflow.services.tabular import Record, is_blank_row, read_rows, validate_rows

from .models import RecordIssue, RunState, RunSummary


SourceSelector = Callable[[], "str | Path | None"]


class BatchOrchestrator:
    """Coordinates Select -> Validate -> Fill steps for one run.

    All processed records are written into a single document duplicated from
    the master on the first record; record *n* fills group ``<prefix><n>`` and
    frame ``frames[n - 1]``. Per-slot and per-record failures are collected
    into the run summary and never stop the batch.
    """

    def __init__(
        self,
        host: DocumentHost,
        master: Document,
        config: LayoutConfig,
        *,
        paths: PathResolver | None = None,
        exists: Callable[[str], bool] | None = None,
        logger=None,
    ) -> None:
        self.host = host
        self.master = master
        self.config = config
        self.logger = logger or get_logger()
        self.paths = paths or PathResolver(max_length=config.paths.max_path_length)
        self.slots = SlotResolver(subgroup_fallback=config.subgroup_fallback)
        self.exists = exists or (lambda p: Path(p).is_file())
        self.images = ImageFitter(
            self.paths,
            self.slots,
            config.paths.allowed_image_extensions,
            exists=self.exists,
        )

    def run(
        self,
        source: str | Path | None = None,
        select_source: SourceSelector | None = None,
    ) -> RunSummary:
        summary = RunSummary()

        self._enter(summary, RunState.AWAIT_INPUT, "waiting for a CSV source")
        try:
            source_path = self._select_source(source, select_source)
        except InputError as exc:
            summary.cancel_reason = str(exc)
            self._enter(summary, RunState.CANCELLED, str(exc))
            return summary
        summary.source_path = source_path

        self._enter(summary, RunState.VALIDATING, source_path)
        try:
            self.paths.validate(source_path, self.config.paths.allowed_source_extensions)
            rows = read_rows(Path(source_path))
            validate_rows(rows, self.config.csv, exists=self._image_probe(source_path))
        except (PathError, OSError, ValidationError) as exc:
            summary.validation_error = str(exc)
            self.logger.error("CSV validation failed: %s", exc)
            self._enter(summary, RunState.VALIDATION_FAILED, str(exc))
            return summary

        self._enter(summary, RunState.PROCESSING, f"{len(rows) - 1} data row(s)")
        ctx: DocumentContext | None = None
        for line, row in enumerate(rows[1:], start=2):
            if summary.processed >= self.config.max_profiles:
                self.logger.info("Reached max profile count (%d); remaining rows ignored", self.config.max_profiles)
                break
            if is_blank_row(row):
                self.logger.debug("Skipping empty row %d", line)
                continue
            self.logger.info("Processing entry at row %d", line)
            try:
                if ctx is None:
                    name = self.config.instance_name.format(sequence=summary.processed + 1)
                    document = self.host.duplicate(self.master, name)
                    ctx = DocumentContext(self.host, document, source_path=source_path)
                    summary.instance_name = name
                record = Record.from_row(row, source_row=line)
                self._fill_record(ctx, record, summary.processed, summary)
            except Exception as exc:  # noqa: BLE001 - isolate failures at the record boundary
                self.logger.error("Failed to process entry at row %d: %s", line, exc, exc_info=True)
                summary.issues.append(RecordIssue(row=line, kind="UnexpectedError", message=str(exc)))
                continue
            summary.processed += 1
            self.logger.info("Successfully processed entry at row %d", line)

        self._enter(summary, RunState.DONE, f"processed {summary.processed} entries")
        return summary

    # ------------------------------------------------------------------
    def _fill_record(self, ctx: DocumentContext, record: Record, position: int, summary: RunSummary) -> None:
        group_prefix = self.config.group_for(position)
        text = self.config.text
        for binding in self.config.slots:
            try:
                slot = self.slots.resolve(ctx.root, group_prefix, binding.slot, binding.subgroup, SlotKind.TEXT)
            except SlotResolutionError as exc:
                self.logger.warning("row %s: %s", record.source_row, exc)
                summary.issues.append(
                    RecordIssue(row=record.source_row or 0, kind="SlotResolutionError", message=str(exc), slot=binding.slot)
                )
                continue
            set_content(slot, record.value(binding.field))
            if binding.fit:
                fit_width(slot, text.max_width, text.initial_size, text.min_size, text.step)

        if not record.image_path:
            return
        frame = self.config.frame_for(position)
        try:
            self.images.place(ctx, record.image_path, frame)
        except (SlotResolutionError, ImageProcessingError) as exc:
            self.logger.warning("row %s: %s", record.source_row, exc)
            summary.issues.append(
                RecordIssue(row=record.source_row or 0, kind=type(exc).__name__, message=str(exc), slot=frame)
            )

    def _select_source(self, source: str | Path | None, select_source: SourceSelector | None) -> str:
        """Return the trimmed source path, raising ``InputError`` when none was chosen.

        A selector may also raise ``InputError`` itself to cancel with its own reason.
        """

        if source is None and select_source is not None:
            source = select_source()
        if source is None or not str(source).strip():
            raise InputError("No CSV file selected")
        return str(source).strip()

    def _image_probe(self, source_path: str) -> Callable[[str], bool]:
        def _exists(image: str) -> bool:
            return self.exists(self.images.resolve_source(image, source_path))

        return _exists

    def _enter(self, summary: RunSummary, state: RunState, detail: str = "") -> None:
        summary.state = state
        self.logger.info("%s - %s", state.value, detail)


__all__ = ["BatchOrchestrator", "SourceSelector"]
