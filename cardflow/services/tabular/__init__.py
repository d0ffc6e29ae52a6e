"""Tabular input: comma-split reader, record model and schema validation."""

from .models import Record, is_blank_row
from .reader import parse, read_rows
from .validate import validate_rows

__all__ = ["Record", "is_blank_row", "parse", "read_rows", "validate_rows"]
