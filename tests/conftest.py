"""Shared fixtures."""

from __future__ import annotations

import pytest

from lsh.data import SizeCell, StrCell, Table


@pytest.fixture
def files_table() -> Table:
    """Name/Size table used across filter and pipeline tests."""
    return Table(
        ["Name", "Size"],
        [
            (StrCell("a.txt"), SizeCell("10kb")),
            (StrCell("b.log"), SizeCell("2mb")),
            (StrCell("c.txt"), SizeCell("500b")),
        ],
    )
