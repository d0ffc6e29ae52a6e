"""Data models used by the tabular reader."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


Row = list[str]


def is_blank_row(row: Sequence[str]) -> bool:
    """A row holding a single empty field (an empty line)."""

    return len(row) == 1 and not row[0].strip()


@dataclass(frozen=True, slots=True)
class Record:
    """One validated input row."""

    name: str
    profession: str
    cause: str
    year_of_death: str
    age: str
    image_path: str | None = None
    source_row: int | None = None

    @classmethod
    def from_row(cls, row: Sequence[str], source_row: int | None = None) -> "Record":
        values = [value.strip() for value in row]
        image = values[5] if len(values) > 5 and values[5] else None
        return cls(
            name=values[0],
            profession=values[1],
            cause=values[2],
            year_of_death=values[3],
            age=values[4],
            image_path=image,
            source_row=source_row,
        )

    def value(self, field: str) -> str:
        return getattr(self, field) or ""


__all__ = ["Record", "Row", "is_blank_row"]
