"""Typed table cells.

A cell is one of four immutable variants. Code that consumes cells
dispatches on the variant explicitly and treats anything else as a bug.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Self, TypeAlias, assert_never

from lsh.data.size import bytes_of

INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1


@dataclass(frozen=True, slots=True)
class StrCell:
    """Plain text value."""

    value: str

    def copy(self) -> Self:
        """Return an equal, distinct cell."""
        return type(self)(self.value)


@dataclass(frozen=True, slots=True)
class IntCell:
    """Signed 64-bit integer value."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"IntCell requires an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise OverflowError(f"IntCell value out of 64-bit range: {self.value}")

    def copy(self) -> Self:
        """Return an equal, distinct cell."""
        return type(self)(self.value)


@dataclass(frozen=True, slots=True)
class FloatCell:
    """Double-precision floating point value."""

    value: float

    def copy(self) -> Self:
        """Return an equal, distinct cell."""
        return type(self)(self.value)


@dataclass(frozen=True, slots=True)
class SizeCell:
    """Byte quantity kept in its written form, e.g. "10.5 KB".

    Attributes:
        text: The size exactly as produced. Parsed on demand.
    """

    text: str

    @property
    def byte_count(self) -> int:
        """Byte count of the size text, 0 if it does not parse."""
        return bytes_of(self.text)

    def copy(self) -> Self:
        """Return an equal, distinct cell."""
        return type(self)(self.text)


Cell: TypeAlias = StrCell | IntCell | FloatCell | SizeCell


def cell_text(cell: Cell) -> str:
    """Format a cell for display and substring matching."""
    if isinstance(cell, StrCell):
        return cell.value
    if isinstance(cell, SizeCell):
        return cell.text
    if isinstance(cell, IntCell):
        return str(cell.value)
    if isinstance(cell, FloatCell):
        return f"{cell.value:.2f}"
    assert_never(cell)


def cell_value(cell: Cell) -> Any:
    """Convert a cell to a JSON-compatible value."""
    if isinstance(cell, StrCell | IntCell | FloatCell):
        return cell.value
    if isinstance(cell, SizeCell):
        return cell.text
    assert_never(cell)


def is_textual(cell: Cell) -> bool:
    """Check whether a cell holds text (plain or size)."""
    if isinstance(cell, StrCell | SizeCell):
        return True
    if isinstance(cell, IntCell | FloatCell):
        return False
    assert_never(cell)
