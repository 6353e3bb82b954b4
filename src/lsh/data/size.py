"""Human-readable byte quantities.

Parses strings such as "10kb", "3.5 MB" or "2.5 KB" into byte counts and
formats byte counts back into the same style. Parsing is lenient: anything
that does not look like a size yields 0 instead of raising, so comparisons
against malformed values quietly treat them as empty.
"""

from __future__ import annotations

import math
import re

# Columns whose text cells denote byte quantities
SIZE_COLUMNS: frozenset[str] = frozenset({"size", "memory"})

_UNITS: dict[str, int] = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
    "t": 1024**4,
    "tb": 1024**4,
}

_SIZE_PATTERN = re.compile(
    r"""
    ^\s*
    (?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))
    \s*
    (?P<unit>[a-zA-Z]*)
    \s*$
    """,
    re.VERBOSE,
)

# Display units, largest first
_DISPLAY_UNITS: tuple[tuple[str, int], ...] = (
    ("TB", 1024**4),
    ("GB", 1024**3),
    ("MB", 1024**2),
    ("KB", 1024),
)


def bytes_of(text: str) -> int:
    """Convert a size string to a byte count.

    Args:
        text: Size text such as "10kb", "-1.5 MB" or "500".

    Returns:
        The byte count, truncated toward zero. 0 if the text is malformed
        or the unit is not recognized, and 0 for quantities too large to
        represent.
    """
    match = _SIZE_PATTERN.match(text)
    if match is None:
        return 0

    multiplier = _UNITS.get(match.group("unit").lower())
    if multiplier is None:
        return 0

    count = float(match.group("number")) * multiplier
    if not math.isfinite(count):
        return 0
    return int(count)


def format_size(num_bytes: int) -> str:
    """Format a byte count the way listings fill their size columns.

    Examples: "512 B", "10.5 KB", "2.0 MB".
    """
    magnitude = abs(num_bytes)
    for unit, factor in _DISPLAY_UNITS:
        if magnitude >= factor:
            return f"{num_bytes / factor:.1f} {unit}"
    return f"{num_bytes} B"


def is_size_column(header: str) -> bool:
    """Check whether a column is compared by parsed byte count."""
    return header.lower() in SIZE_COLUMNS
