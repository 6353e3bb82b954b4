"""Pipeline parsing, producers, execution and rendering."""

from lsh.pipeline.executor import (
    PipelineError,
    PipelineErrorType,
    PipelineExecutor,
    PipelineResult,
    PipelineState,
)
from lsh.pipeline.parser import ParseError, ShellCommand, join_pipeline, split_pipeline
from lsh.pipeline.producers import (
    PRODUCERS,
    ProducerError,
    list_directory,
    list_processes,
)
from lsh.pipeline.render import print_table, render_json, render_table

__all__ = [
    "PRODUCERS",
    "ParseError",
    "PipelineError",
    "PipelineErrorType",
    "PipelineExecutor",
    "PipelineResult",
    "PipelineState",
    "ProducerError",
    "ShellCommand",
    "join_pipeline",
    "list_directory",
    "list_processes",
    "print_table",
    "render_json",
    "render_table",
    "split_pipeline",
]
