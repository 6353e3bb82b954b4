"""Structured tables.

A table is an ordered tuple of headers and an ordered list of rows, each
row a tuple of cells aligned to the headers. Tables never share cells:
whenever rows move into a new table they are copied cell by cell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lsh.data.cell import Cell, cell_value

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

Row = tuple[Cell, ...]


class TableError(Exception):
    """Base exception for table errors."""


class TableShapeError(TableError, ValueError):
    """Raised when a row does not match the table's header count."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Row has {actual} cells, table has {expected} columns")


def copy_row(row: Sequence[Cell]) -> Row:
    """Copy every cell of a row."""
    return tuple(cell.copy() for cell in row)


class Table:
    """An ordered set of named columns and rows of typed cells.

    Header names are matched case-insensitively. Rows added with
    ``add_row`` become owned by the table; use ``with_rows`` or ``copy``
    to build a new table from rows that belong to another one.

    Example:
        table = Table(["Name", "Size"])
        table.add_row([StrCell("a.txt"), SizeCell("10kb")])
        table.field_index("size")  # 1
    """

    __slots__ = ("_headers", "_rows")

    def __init__(self, headers: Iterable[str], rows: Iterable[Sequence[Cell]] = ()) -> None:
        self._headers: tuple[str, ...] = tuple(headers)
        self._rows: list[Row] = []
        for row in rows:
            self.add_row(row)

    @property
    def headers(self) -> tuple[str, ...]:
        """Column names in order."""
        return self._headers

    @property
    def rows(self) -> tuple[Row, ...]:
        """Rows in order."""
        return tuple(self._rows)

    @property
    def column_count(self) -> int:
        return len(self._headers)

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def add_row(self, row: Sequence[Cell]) -> None:
        """Append a row.

        Raises:
            TableShapeError: If the row length differs from the header count.
        """
        if len(row) != len(self._headers):
            raise TableShapeError(len(self._headers), len(row))
        self._rows.append(tuple(row))

    def field_index(self, name: str) -> int | None:
        """Find a column by case-insensitive exact name.

        Returns:
            The index of the first matching header, or None.
        """
        wanted = name.casefold()
        for index, header in enumerate(self._headers):
            if header.casefold() == wanted:
                return index
        return None

    def column(self, name: str) -> list[Cell]:
        """Return the cells of a column.

        Raises:
            KeyError: If no header matches.
        """
        index = self.field_index(name)
        if index is None:
            raise KeyError(name)
        return [row[index] for row in self._rows]

    def with_rows(self, rows: Iterable[Sequence[Cell]]) -> Table:
        """Build a table with these headers and copies of the given rows."""
        return Table(self._headers, (copy_row(row) for row in rows))

    def copy(self) -> Table:
        """Deep copy of the table."""
        return self.with_rows(self._rows)

    def to_records(self) -> list[dict[str, Any]]:
        """Convert rows to header-keyed dicts of JSON-compatible values.

        Repeated headers keep the value of the last column with that name.
        """
        return [
            {header: cell_value(cell) for header, cell in zip(self._headers, row, strict=True)}
            for row in self._rows
        ]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(tuple(self._rows))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Table):
            return NotImplemented
        return self._headers == other._headers and self._rows == other._rows

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Table(headers={list(self._headers)!r}, rows={self.row_count})"
