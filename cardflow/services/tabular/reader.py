"""Comma-separated input reader.

The dialect is deliberately minimal: lines are split on ``\n`` and fields on
``,`` with no quoting or escaping, so a comma inside a value always acts as a
delimiter. Fields are trimmed of surrounding whitespace (this also drops the
``\r`` of CRLF files).
"""

from __future__ import annotations

import logging
from pathlib import Path

from cardflow.core.errors import SourceEncodingError

from .models import Row

LOGGER = logging.getLogger(__name__)

ENCODING = "utf-8-sig"


def parse(raw_text: str) -> list[Row]:
    """Split raw text into rows of trimmed fields."""

    rows: list[Row] = []
    for line in raw_text.split("\n"):
        rows.append([column.strip() for column in line.split(",")])
    return rows


def read_rows(path: Path) -> list[Row]:
    """Read and parse a tabular file.

    Raises:
        FileNotFoundError: When the file does not exist.
        SourceEncodingError: When the file is not UTF-8 text.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tabular source not found: {path}")
    LOGGER.info("Reading CSV file: %s", path)
    try:
        content = path.read_text(encoding=ENCODING)
    except UnicodeDecodeError as exc:
        raise SourceEncodingError(str(path), "UTF-8", exc) from exc
    LOGGER.debug("CSV content length: %d", len(content))
    rows = parse(content)
    LOGGER.info("CSV parsing complete. Rows: %d", len(rows))
    return rows


__all__ = ["parse", "read_rows"]
