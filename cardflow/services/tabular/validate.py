"""Schema and content validation for parsed rows."""

from __future__ import annotations

from typing import Callable, Sequence

from cardflow.config import CsvSchema
from cardflow.core.errors import (
    EmptyInputError,
    HeaderColumnCountError,
    HeaderNameError,
    ImageNotFoundError,
    MissingDataRowsError,
    MissingRequiredFieldError,
    NotANumberError,
    RowColumnCountError,
)

from .models import is_blank_row

IMAGE_COLUMN = 5

ExistsProbe = Callable[[str], bool]


def _parses_as_int(value: str) -> bool:
    try:
        int(value.strip())
    except ValueError:
        return False
    return True


def validate_rows(
    rows: Sequence[Sequence[str]],
    schema: CsvSchema,
    exists: ExistsProbe | None = None,
) -> None:
    """Raise the first validation error found, in row order then field order.

    Row numbers in errors are 1-based file lines (the header is row 1).
    ``exists`` receives each non-empty image path and reports whether it
    references a file; when omitted, image paths are not probed.
    """

    if not rows:
        raise EmptyInputError()
    if len(rows) < 2:
        raise MissingDataRowsError()

    header = rows[0]
    if len(header) != schema.expected_columns:
        raise HeaderColumnCountError(len(header), schema.headers)
    for index, expected in enumerate(schema.headers):
        actual = header[index].strip()
        if actual != expected:
            raise HeaderNameError(index, expected, actual)

    for row_index in range(1, len(rows)):
        row = rows[row_index]
        line = row_index + 1
        if is_blank_row(row):
            continue

        if len(row) != schema.expected_columns:
            raise RowColumnCountError(line, len(row), schema.expected_columns)

        for column in schema.required:
            if not row[column].strip():
                raise MissingRequiredFieldError(line, schema.headers[column])

        for column in schema.numeric:
            if not _parses_as_int(row[column]):
                raise NotANumberError(line, schema.headers[column], row[column])

        image = row[IMAGE_COLUMN].strip() if len(row) > IMAGE_COLUMN else ""
        if image and exists is not None and not exists(image):
            raise ImageNotFoundError(line, image)


__all__ = ["validate_rows"]
