"""Custom exceptions used across CardFlow."""

from __future__ import annotations


class CardFlowError(Exception):
    """Base error for the application."""


class ConfigError(CardFlowError):
    """Configuration related error."""


class InputError(CardFlowError):
    """Raised when no tabular source was selected; cancels the run cleanly."""


class PathError(CardFlowError):
    """Raised when a file path fails validation."""


class DocumentError(CardFlowError):
    """Raised when the document host cannot complete an operation."""


class SlotResolutionError(CardFlowError):
    """Raised when a named group, subgroup or slot cannot be located."""

    def __init__(self, slot: str, group_prefix: str | None = None, subgroup: str | None = None) -> None:
        self.slot = slot
        self.group_prefix = group_prefix
        self.subgroup = subgroup
        where = f" in group '{group_prefix}'" if group_prefix else " at document root"
        if subgroup:
            where += f" and subgroup '{subgroup}'"
        super().__init__(f"Slot '{slot}' not found{where}")


class ImageProcessingError(CardFlowError):
    """Raised when an image cannot be imported or placed into its frame."""

    def __init__(self, path: str, cause: str | BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Error processing image {path}: {cause}")


class ValidationError(CardFlowError):
    """Base class for tabular schema/content violations."""

    row: int | None = None


class EmptyInputError(ValidationError):
    def __init__(self) -> None:
        super().__init__("CSV file is empty")


class MissingDataRowsError(ValidationError):
    def __init__(self) -> None:
        super().__init__("CSV file must contain headers and at least one data row")


class HeaderColumnCountError(ValidationError):
    def __init__(self, actual: int, headers: tuple[str, ...]) -> None:
        self.actual = actual
        self.expected = len(headers)
        super().__init__(f"CSV must have exactly {len(headers)} columns: {', '.join(headers)} (found {actual})")


class HeaderNameError(ValidationError):
    def __init__(self, index: int, expected: str, actual: str) -> None:
        self.index = index
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid header in column {index + 1}: expected '{expected}' but found '{actual}'")


class RowColumnCountError(ValidationError):
    def __init__(self, row: int, actual: int, expected: int) -> None:
        self.row = row
        self.actual = actual
        self.expected = expected
        super().__init__(f"Row {row} has {actual} columns instead of {expected}")


class MissingRequiredFieldError(ValidationError):
    def __init__(self, row: int, field: str) -> None:
        self.row = row
        self.field = field
        super().__init__(f"Missing required value '{field}' in row {row}")


class NotANumberError(ValidationError):
    def __init__(self, row: int, field: str, value: str) -> None:
        self.row = row
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field} in row {row}: must be a number (got '{value}')")


class ImageNotFoundError(ValidationError):
    def __init__(self, row: int, path: str) -> None:
        self.row = row
        self.path = path
        super().__init__(f"Invalid image path in row {row}: file not found ({path})")


class SourceEncodingError(ValidationError):
    def __init__(self, path: str, encoding: str, cause: UnicodeDecodeError) -> None:
        self.path = path
        self.encoding = encoding
        super().__init__(f"CSV file {path} is not valid {encoding} text (byte {cause.start}: {cause.reason})")
