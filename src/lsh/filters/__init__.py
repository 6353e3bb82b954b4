"""Table filters for structured pipelines."""

from lsh.filters.operations import (
    BUILTIN_FILTERS,
    WHERE_OPERATORS,
    FilterError,
    FilterUsageError,
    UnknownFieldError,
    compare_cells,
    contains,
    limit,
    resolve_field,
    select,
    sort_by,
    where,
)

__all__ = [
    "BUILTIN_FILTERS",
    "WHERE_OPERATORS",
    "FilterError",
    "FilterUsageError",
    "UnknownFieldError",
    "compare_cells",
    "contains",
    "limit",
    "resolve_field",
    "select",
    "sort_by",
    "where",
]
