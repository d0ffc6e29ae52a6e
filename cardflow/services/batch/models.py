"""Data models used by the batch orchestrator."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RunState(str, Enum):
    START = "start"
    AWAIT_INPUT = "await_input"
    CANCELLED = "cancelled"
    VALIDATING = "validating"
    VALIDATION_FAILED = "validation_failed"
    PROCESSING = "processing"
    DONE = "done"


class RecordIssue(BaseModel):
    """A recoverable failure recorded while filling one record."""

    model_config = ConfigDict(frozen=True)

    row: int
    kind: str
    message: str
    slot: str | None = None


class RunSummary(BaseModel):
    """Aggregated outcome returned to callers."""

    state: RunState = RunState.START
    source_path: str | None = None
    processed: int = 0
    instance_name: str | None = None
    cancel_reason: str | None = None
    validation_error: str | None = None
    issues: list[RecordIssue] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state in {RunState.DONE, RunState.CANCELLED}


__all__ = ["RecordIssue", "RunState", "RunSummary"]
