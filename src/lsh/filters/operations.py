"""Pipeline filter operations.

Each filter takes the table flowing through a pipeline plus its argument
vector and returns a new table built from copies of the cells it keeps.
Invalid arguments raise a ``FilterError``; the input table is never
modified.
"""

from __future__ import annotations

import operator
from functools import cmp_to_key
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, assert_never

from lsh.core.registry import FilterRegistry
from lsh.data.cell import Cell, FloatCell, IntCell, SizeCell, StrCell, cell_text, is_textual
from lsh.data.size import bytes_of, is_size_column
from lsh.data.table import Row, Table, copy_row

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

# Comparison operators accepted by `where`; `!=` is deliberately absent
WHERE_OPERATORS: Mapping[str, Callable[[Any, Any], bool]] = MappingProxyType(
    {
        ">": operator.gt,
        "<": operator.lt,
        "==": operator.eq,
        ">=": operator.ge,
        "<=": operator.le,
    }
)

DESCENDING_TOKENS: frozenset[str] = frozenset({"desc", "descending"})

WHERE_USAGE = "where FIELD OPERATOR VALUE"
SORT_BY_USAGE = "sort-by FIELD [asc|desc]"
SELECT_USAGE = "select FIELD[,FIELD...]"
CONTAINS_USAGE = "contains FIELD SUBSTRING"
LIMIT_USAGE = "limit N"

_EXAMPLES: dict[str, str] = {
    "where": "ls | where size > 10kb",
    "sort-by": "ls | sort-by size desc",
    "select": "ps | select name,memory",
    "contains": "ls | contains name .txt",
    "limit": "ps | sort-by memory desc | limit 5",
}


class FilterError(Exception):
    """Base exception for filter failures."""

    def __init__(self, filter_name: str, message: str) -> None:
        self.filter_name = filter_name
        self.message = message
        super().__init__(f"{filter_name}: {message}")


class FilterUsageError(FilterError):
    """Raised when a filter's arguments are missing or malformed."""

    def __init__(self, filter_name: str, message: str, usage: str) -> None:
        self.usage = usage
        super().__init__(filter_name, message)

    @property
    def hint(self) -> str:
        """Usage line with an example pipeline."""
        hint = f"Usage: ... | {self.usage}"
        example = _EXAMPLES.get(self.filter_name)
        if example:
            hint += f"\n  e.g.: {example}"
        return hint


class UnknownFieldError(FilterError):
    """Raised when a field name matches no column of the table."""

    def __init__(self, filter_name: str, field: str, available: Sequence[str]) -> None:
        self.field = field
        self.available = tuple(available)
        super().__init__(filter_name, f"unknown field '{field}'")

    @property
    def hint(self) -> str:
        return f"Available fields: {', '.join(self.available)}"


def resolve_field(table: Table, name: str, filter_name: str) -> int:
    """Resolve a field name to a column index of this table.

    Raises:
        UnknownFieldError: If no header matches.
    """
    index = table.field_index(name)
    if index is None:
        raise UnknownFieldError(filter_name, name, table.headers)
    return index


def _compare(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _parse_number(text: str) -> int | float | None:
    """Parse a numeric literal, preferring integers."""
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def _text_key(cell: StrCell | SizeCell) -> str:
    return cell_text(cell).casefold()


def compare_cells(left: Cell, right: Cell, *, size_column: bool) -> int:
    """Order two cells of the same column.

    Numbers compare numerically, text in a size column by parsed bytes,
    other text case-insensitively. Numbers sort before text.

    Returns:
        Negative, zero or positive like a classic comparator.
    """
    if isinstance(left, IntCell | FloatCell):
        if isinstance(right, IntCell | FloatCell):
            return _compare(left.value, right.value)
        if isinstance(right, StrCell | SizeCell):
            return -1
        assert_never(right)
    if isinstance(left, StrCell | SizeCell):
        if isinstance(right, IntCell | FloatCell):
            return 1
        if isinstance(right, StrCell | SizeCell):
            if size_column:
                return _compare(bytes_of(cell_text(left)), bytes_of(cell_text(right)))
            return _compare(_text_key(left), _text_key(right))
        assert_never(right)
    assert_never(left)


BUILTIN_FILTERS = FilterRegistry()


@BUILTIN_FILTERS.operation("where", usage=WHERE_USAGE)
def where(table: Table, args: Sequence[str]) -> Table:
    """Keep rows whose field compares true against a literal value."""
    if not args:
        raise FilterUsageError("where", "missing arguments", WHERE_USAGE)
    if len(args) < 3 or args[1] not in WHERE_OPERATORS:
        raise FilterUsageError("where", "invalid filter condition", WHERE_USAGE)

    field, op, value = args[0], args[1], " ".join(args[2:])
    index = resolve_field(table, field, "where")
    test = WHERE_OPERATORS[op]
    size_column = is_size_column(table.headers[index])

    literal_bytes = bytes_of(value)
    literal_text = value.casefold()
    # Non-numeric literals count as 0 against numeric cells
    literal_number = _parse_number(value) or 0

    def matches(cell: Cell) -> bool:
        if isinstance(cell, IntCell | FloatCell):
            return test(cell.value, literal_number)
        if isinstance(cell, StrCell | SizeCell):
            if size_column:
                return test(bytes_of(cell_text(cell)), literal_bytes)
            return test(_compare(_text_key(cell), literal_text), 0)
        assert_never(cell)

    return table.with_rows(row for row in table.rows if matches(row[index]))


@BUILTIN_FILTERS.operation("sort-by", usage=SORT_BY_USAGE)
def sort_by(table: Table, args: Sequence[str]) -> Table:
    """Stable sort of the rows by one field, ascending unless told otherwise."""
    if not args:
        raise FilterUsageError("sort-by", "missing field name", SORT_BY_USAGE)

    index = resolve_field(table, args[0], "sort-by")
    descending = len(args) > 1 and args[1].lower() in DESCENDING_TOKENS
    size_column = is_size_column(table.headers[index])
    direction = -1 if descending else 1

    def compare(left: Row, right: Row) -> int:
        return direction * compare_cells(left[index], right[index], size_column=size_column)

    rows = [copy_row(row) for row in table.rows]
    return Table(table.headers, sorted(rows, key=cmp_to_key(compare)))


def _select_tokens(args: Sequence[str]) -> list[str]:
    """Flatten positional and comma-separated field names."""
    tokens: list[str] = []
    for arg in args:
        for part in arg.split(","):
            token = part.strip()
            if token:
                tokens.append(token)
    return tokens


@BUILTIN_FILTERS.operation("select", usage=SELECT_USAGE)
def select(table: Table, args: Sequence[str]) -> Table:
    """Project the table onto the named fields, in the order given."""
    tokens = _select_tokens(args)
    if not tokens:
        raise FilterUsageError("select", "missing field names", SELECT_USAGE)

    indices = [resolve_field(table, token, "select") for token in tokens]
    return Table(
        tokens,
        (tuple(row[i].copy() for i in indices) for row in table.rows),
    )


@BUILTIN_FILTERS.operation("contains", usage=CONTAINS_USAGE)
def contains(table: Table, args: Sequence[str]) -> Table:
    """Keep rows whose text field contains a substring, ignoring case."""
    if len(args) < 2:
        raise FilterUsageError("contains", "missing arguments", CONTAINS_USAGE)

    index = resolve_field(table, args[0], "contains")
    needle = " ".join(args[1:]).casefold()

    def matches(cell: Cell) -> bool:
        # Numeric cells never match
        return is_textual(cell) and needle in cell_text(cell).casefold()

    return table.with_rows(row for row in table.rows if matches(row[index]))


@BUILTIN_FILTERS.operation("limit", usage=LIMIT_USAGE)
def limit(table: Table, args: Sequence[str]) -> Table:
    """Keep the first N rows."""
    if not args:
        raise FilterUsageError("limit", "missing row count", LIMIT_USAGE)
    if len(args) > 1:
        raise FilterUsageError("limit", "too many arguments", LIMIT_USAGE)

    try:
        count = int(args[0])
    except ValueError:
        raise FilterUsageError(
            "limit", f"'{args[0]}' is not a number", LIMIT_USAGE
        ) from None
    if count <= 0:
        raise FilterUsageError("limit", "row count must be positive", LIMIT_USAGE)

    return table.with_rows(table.rows[:count])


BUILTIN_FILTERS.freeze()
