"""Splitting input lines into pipeline commands.

A line is cut at every ``|`` outside quotes, then each segment is
tokenized with POSIX shell quoting rules.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import Any


class ParseError(Exception):
    """Raised when a line cannot be split into commands."""


@dataclass
class ShellCommand:
    """A single pipeline command with arguments."""

    command: str
    args: list[str] = field(default_factory=list)

    def to_string(self) -> str:
        """Convert to shell command string."""
        return shlex.join([self.command, *self.args])

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "command": self.command,
            "args": self.args,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ShellCommand:
        """Create from dictionary."""
        return cls(
            command=data["command"],
            args=data.get("args", []),
        )


def _split_segments(line: str) -> list[str]:
    """Cut a line at unquoted pipe characters."""
    segments: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False

    for char in line:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\" and quote != "'":
            current.append(char)
            escaped = True
        elif quote:
            current.append(char)
            if char == quote:
                quote = None
        elif char in "'\"":
            current.append(char)
            quote = char
        elif char == "|":
            segments.append("".join(current))
            current = []
        else:
            current.append(char)

    if quote:
        raise ParseError(f"unterminated {quote} quote")

    segments.append("".join(current))
    return segments


def split_pipeline(line: str) -> list[ShellCommand]:
    """Split an input line into pipeline commands.

    Args:
        line: Raw input, e.g. ``ls | where size > 10kb | limit 3``.

    Returns:
        Commands in order. Empty for a blank line.

    Raises:
        ParseError: On unterminated quotes or an empty pipeline stage.
    """
    if not line.strip():
        return []

    commands: list[ShellCommand] = []
    for segment in _split_segments(line):
        try:
            tokens = shlex.split(segment)
        except ValueError as e:
            raise ParseError(str(e)) from e
        if not tokens:
            raise ParseError("empty command in pipeline")
        commands.append(ShellCommand(command=tokens[0], args=tokens[1:]))

    return commands


def join_pipeline(commands: list[ShellCommand]) -> str:
    """Render commands back into a single pipeline line."""
    return " | ".join(cmd.to_string() for cmd in commands)
