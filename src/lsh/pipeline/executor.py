"""Structured pipeline execution.

A pipeline is one producer command followed by zero or more filters:

    ls | where size > 10kb | sort-by size desc | limit 5

The executor holds exactly one table at a time. The producer builds the
first table, each filter replaces it with a new one, and the last table is
handed to the renderer. Any failure stops the pipeline and discards the
held table; failures come back as a ``PipelineResult`` rather than an
exception so the interactive loop can report them and carry on.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from lsh.core.registry import FilterNotFoundError, FilterRegistry
from lsh.filters.operations import BUILTIN_FILTERS, FilterUsageError, UnknownFieldError
from lsh.observability.logging import bind_context, get_logger, unbind_context
from lsh.pipeline.parser import ParseError, ShellCommand, join_pipeline, split_pipeline
from lsh.pipeline.producers import PRODUCERS, Producer, ProducerError
from lsh.pipeline.render import print_table

if TYPE_CHECKING:
    from lsh.data.table import Table

Renderer = Callable[["Table"], None]

logger = get_logger(__name__)


class PipelineState(StrEnum):
    """Lifecycle of one pipeline run."""

    START = "start"
    FLOWING = "flowing"
    DONE = "done"
    ERROR = "error"


class PipelineErrorType(StrEnum):
    """Kinds of pipeline failure."""

    PARSE = "parse"
    USAGE = "usage"
    UNKNOWN_COMMAND = "unknown_command"
    UNSUPPORTED_SOURCE = "unsupported_source"
    PRODUCER_FAILED = "producer_failed"
    UNKNOWN_FILTER = "unknown_filter"
    UNKNOWN_FIELD = "unknown_field"
    RESOURCE_EXHAUSTED = "resource_exhausted"


@dataclass
class PipelineError:
    """Error information from a failed pipeline."""

    type: PipelineErrorType
    message: str
    command: str
    hint: str | None = None

    def format(self) -> str:
        """Format the diagnostic shown to the user."""
        text = f"lsh: {self.message}"
        if self.hint:
            text += f"\n{self.hint}"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "message": self.message,
            "command": self.command,
            "hint": self.hint,
        }


@dataclass
class PipelineResult:
    """Result of executing a pipeline."""

    state: PipelineState
    pipeline: str
    rows: int = 0
    error: PipelineError | None = None

    @property
    def success(self) -> bool:
        """Check if the pipeline ran to completion."""
        return self.state is PipelineState.DONE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "state": self.state.value,
            "pipeline": self.pipeline,
            "rows": self.rows,
            "success": self.success,
            "error": self.error.to_dict() if self.error else None,
        }


class PipelineExecutor:
    """Runs producer and filter commands over a single owned table.

    Example:
        executor = PipelineExecutor(renderer=print_table)
        result = executor.execute_line("ps | sort-by memory desc | limit 5")
        if not result.success:
            click.echo(result.error.format(), err=True)
    """

    def __init__(
        self,
        *,
        filters: FilterRegistry = BUILTIN_FILTERS,
        producers: Mapping[str, Producer] = PRODUCERS,
        renderer: Renderer = print_table,
    ) -> None:
        """Initialize the executor.

        Args:
            filters: Registry of filters allowed after the first command.
            producers: Commands allowed first, by name.
            renderer: Receives the final table of a successful pipeline.
        """
        self._filters = filters
        self._producers = producers
        self._renderer = renderer

    @property
    def filters(self) -> FilterRegistry:
        return self._filters

    @property
    def producers(self) -> Mapping[str, Producer]:
        return self._producers

    def execute_line(self, line: str) -> PipelineResult:
        """Split a raw input line and execute it."""
        try:
            commands = split_pipeline(line)
        except ParseError as e:
            return self._fail(line.strip(), PipelineErrorType.PARSE, f"parse error: {e}", "")
        return self.execute(commands)

    def execute(self, commands: Sequence[ShellCommand]) -> PipelineResult:
        """Execute a pipeline of commands.

        Args:
            commands: The producer followed by filters, in order.

        Returns:
            PipelineResult in state DONE, or ERROR with the failure.
        """
        pipeline_str = join_pipeline(list(commands))
        if not commands:
            return self._fail(pipeline_str, PipelineErrorType.USAGE, "empty pipeline", "")

        bind_context(pipeline=pipeline_str)
        try:
            return self._run(commands, pipeline_str)
        finally:
            unbind_context("pipeline")

    def _run(self, commands: Sequence[ShellCommand], pipeline_str: str) -> PipelineResult:
        first, rest = commands[0], commands[1:]

        # Start -> Flowing
        producer = self._producers.get(first.command)
        if producer is None:
            if not rest:
                return self._fail(
                    pipeline_str,
                    PipelineErrorType.UNKNOWN_COMMAND,
                    f"command not found: {first.command}",
                    first.command,
                )
            return self._fail(
                pipeline_str,
                PipelineErrorType.UNSUPPORTED_SOURCE,
                f"command '{first.command}' does not support piping",
                first.command,
            )

        try:
            table = producer(first.args)
        except ProducerError as e:
            return self._fail(
                pipeline_str,
                PipelineErrorType.PRODUCER_FAILED,
                f"error generating structured output for '{first.command}': {e}",
                first.command,
            )
        except MemoryError:
            return self._fail(
                pipeline_str,
                PipelineErrorType.RESOURCE_EXHAUSTED,
                f"allocation error in '{first.command}'",
                first.command,
            )

        logger.debug(
            "pipeline.stage",
            stage=0,
            command=first.command,
            state=PipelineState.FLOWING.value,
            rows_out=table.row_count,
        )

        # Flowing -> Flowing
        for stage, cmd in enumerate(rest, start=1):
            try:
                handler = self._filters.get_handler(cmd.command)
            except FilterNotFoundError as e:
                return self._fail(
                    pipeline_str, PipelineErrorType.UNKNOWN_FILTER, str(e), cmd.command
                )

            rows_in = table.row_count
            try:
                table = handler(table, cmd.args)
            except FilterUsageError as e:
                return self._fail(
                    pipeline_str, PipelineErrorType.USAGE, str(e), cmd.command, hint=e.hint
                )
            except UnknownFieldError as e:
                return self._fail(
                    pipeline_str,
                    PipelineErrorType.UNKNOWN_FIELD,
                    str(e),
                    cmd.command,
                    hint=e.hint,
                )
            except MemoryError:
                return self._fail(
                    pipeline_str,
                    PipelineErrorType.RESOURCE_EXHAUSTED,
                    f"allocation error in '{cmd.command}'",
                    cmd.command,
                )

            logger.debug(
                "pipeline.stage",
                stage=stage,
                command=cmd.command,
                rows_in=rows_in,
                rows_out=table.row_count,
            )

        # Flowing -> Done
        self._renderer(table)
        logger.debug("pipeline.done", rows=table.row_count)
        return PipelineResult(
            state=PipelineState.DONE,
            pipeline=pipeline_str,
            rows=table.row_count,
        )

    def _fail(
        self,
        pipeline_str: str,
        error_type: PipelineErrorType,
        message: str,
        command: str,
        *,
        hint: str | None = None,
    ) -> PipelineResult:
        logger.info("pipeline.failed", error_type=error_type.value, command=command)
        return PipelineResult(
            state=PipelineState.ERROR,
            pipeline=pipeline_str,
            error=PipelineError(type=error_type, message=message, command=command, hint=hint),
        )
