"""Batch orchestration service package."""

from .models import RecordIssue, RunState, RunSummary
from .orchestrator import BatchOrchestrator, SourceSelector
from .report import issues_frame, write_report

__all__ = [
    "BatchOrchestrator",
    "RecordIssue",
    "RunState",
    "RunSummary",
    "SourceSelector",
    "issues_frame",
    "write_report",
]
