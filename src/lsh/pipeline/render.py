"""Rendering finished tables for the terminal."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from lsh.data.cell import cell_text

if TYPE_CHECKING:
    from lsh.core.config import RenderSettings
    from lsh.data.table import Table

ELLIPSIS = "..."
EMPTY_TABLE_TEXT = "(empty table)"


def _truncate(text: str, max_width: int | None) -> str:
    if max_width is None or len(text) <= max_width:
        return text
    return text[: max_width - len(ELLIPSIS)] + ELLIPSIS


def render_table(
    table: Table,
    *,
    color: bool = False,
    max_width: int | None = None,
    empty_text: str = EMPTY_TABLE_TEXT,
) -> str:
    """Render a table as an ASCII box.

    Args:
        table: The table to render.
        color: Bold and colorize the header row.
        max_width: Truncate longer cells with "...".
        empty_text: Returned instead of a box when there are no rows.

    Returns:
        The rendered text without a trailing newline.
    """
    if table.row_count == 0:
        return empty_text

    headers = [_truncate(h, max_width) for h in table.headers]
    body = [[_truncate(cell_text(cell), max_width) for cell in row] for row in table.rows]

    widths = [len(h) for h in headers]
    for row in body:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells: list[str], *, header: bool = False) -> str:
        parts = []
        for text, width in zip(cells, widths, strict=True):
            padded = text.ljust(width)
            if header and color:
                padded = click.style(padded, fg="cyan", bold=True)
            parts.append(f" {padded} ")
        return "|" + "|".join(parts) + "|"

    lines = [border, line(headers, header=True), border]
    lines.extend(line(row) for row in body)
    lines.append(border)
    return "\n".join(lines)


def render_json(table: Table) -> str:
    """Render a table as a JSON list of header-keyed records."""
    return json.dumps(table.to_records(), indent=2)


def print_table(table: Table, settings: RenderSettings | None = None) -> None:
    """Print a table to stdout using render settings."""
    if settings is None:
        click.echo(render_table(table))
        return
    click.echo(
        render_table(
            table,
            color=settings.color,
            max_width=settings.max_column_width,
            empty_text=settings.empty_text,
        )
    )
