"""Commands that produce the first table of a pipeline."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from pathlib import Path
from types import MappingProxyType

import psutil

from lsh.data.cell import IntCell, SizeCell, StrCell
from lsh.data.size import format_size
from lsh.data.table import Table

# Type alias for producer functions
Producer = Callable[[Sequence[str]], Table]

DIRECTORY_HEADERS: tuple[str, ...] = ("Name", "Type", "Size", "Modified")
PROCESS_HEADERS: tuple[str, ...] = ("PID", "Name", "Memory", "Threads")

MODIFIED_FORMAT = "%Y-%m-%d %H:%M"


class ProducerError(Exception):
    """Raised when a producer cannot build its table."""


def list_directory(args: Sequence[str]) -> Table:
    """List a directory as Name, Type, Size, Modified rows.

    Args:
        args: Optional directory path; defaults to the current directory.

    Raises:
        ProducerError: If the path is missing or cannot be read.
    """
    if len(args) > 1:
        raise ProducerError("expected at most one directory")

    target = args[0] if args else "."
    try:
        path = Path(target) if args else Path.cwd()
        found = path.is_dir()
    except OSError as e:
        raise ProducerError(f"cannot read {target}: {e.strerror or e}") from e
    if not found:
        raise ProducerError(f"not a directory: {path}")

    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda entry: entry.name.casefold())
    except OSError as e:
        raise ProducerError(f"cannot read {path}: {e.strerror or e}") from e

    table = Table(DIRECTORY_HEADERS)
    for entry in entries:
        try:
            is_dir = entry.is_dir()
            stat = entry.stat()
        except OSError:
            # Entry vanished or is a dangling link
            continue
        table.add_row(
            (
                StrCell(entry.name),
                StrCell("Directory" if is_dir else "File"),
                SizeCell("-" if is_dir else format_size(stat.st_size)),
                StrCell(datetime.fromtimestamp(stat.st_mtime).strftime(MODIFIED_FORMAT)),
            )
        )
    return table


def list_processes(args: Sequence[str]) -> Table:
    """List running processes as PID, Name, Memory, Threads rows.

    Processes that cannot be inspected still appear, with "-" for memory.

    Raises:
        ProducerError: If the process table cannot be read.
    """
    if args:
        raise ProducerError("ps takes no arguments")

    table = Table(PROCESS_HEADERS)
    try:
        for proc in psutil.process_iter(
            ["pid", "name", "memory_info", "num_threads"],
            ad_value=None,
        ):
            info = proc.info
            memory = info.get("memory_info")
            table.add_row(
                (
                    IntCell(info["pid"]),
                    StrCell(info.get("name") or ""),
                    SizeCell(format_size(memory.rss) if memory is not None else "-"),
                    IntCell(info.get("num_threads") or 0),
                )
            )
    except psutil.Error as e:
        raise ProducerError(f"cannot read process table: {e}") from e
    return table


PRODUCERS: Mapping[str, Producer] = MappingProxyType(
    {
        "ls": list_directory,
        "dir": list_directory,
        "ps": list_processes,
    }
)
