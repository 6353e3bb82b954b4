"""Typed cells, tables, and byte-size parsing."""

from lsh.data.cell import (
    Cell,
    FloatCell,
    IntCell,
    SizeCell,
    StrCell,
    cell_text,
    cell_value,
    is_textual,
)
from lsh.data.size import SIZE_COLUMNS, bytes_of, format_size, is_size_column
from lsh.data.table import Row, Table, TableError, TableShapeError, copy_row

__all__ = [
    "SIZE_COLUMNS",
    "Cell",
    "FloatCell",
    "IntCell",
    "Row",
    "SizeCell",
    "StrCell",
    "Table",
    "TableError",
    "TableShapeError",
    "bytes_of",
    "cell_text",
    "cell_value",
    "copy_row",
    "format_size",
    "is_size_column",
    "is_textual",
]
