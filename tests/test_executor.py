"""Tests for structured pipeline execution."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from lsh.core import FilterRegistry
from lsh.data import SizeCell, StrCell, Table
from lsh.pipeline import (
    PipelineErrorType,
    PipelineExecutor,
    PipelineState,
    ProducerError,
    ShellCommand,
)
from lsh.pipeline import executor as executor_module


class Recorder:
    """Renderer that keeps the tables it was handed."""

    def __init__(self) -> None:
        self.tables: list[Table] = []

    def __call__(self, table: Table) -> None:
        self.tables.append(table)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def executor(files_table: Table, recorder: Recorder) -> PipelineExecutor:
    """Executor whose `ls` returns the shared files table."""

    def fake_ls(args: Sequence[str]) -> Table:
        return files_table.copy()

    def broken(args: Sequence[str]) -> Table:
        raise ProducerError("disk on fire")

    return PipelineExecutor(
        producers={"ls": fake_ls, "broken": broken},
        renderer=recorder,
    )


class TestSuccessfulPipelines:
    """Tests for pipelines that run to completion."""

    def test_producer_only(
        self, executor: PipelineExecutor, recorder: Recorder, files_table: Table
    ) -> None:
        result = executor.execute_line("ls")
        assert result.success
        assert result.state is PipelineState.DONE
        assert result.rows == 3
        assert recorder.tables == [files_table]

    def test_where_sort_limit(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("ls | where size > 1kb | sort-by size desc | limit 1")
        assert result.success
        assert result.rows == 1
        assert recorder.tables[0].rows == ((StrCell("b.log"), SizeCell("2mb")),)

    def test_select_then_limit(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("ls | select Name | limit 2")
        assert result.success
        assert recorder.tables == [Table(["Name"], [(StrCell("a.txt"),), (StrCell("b.log"),)])]

    def test_contains(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        executor.execute_line("ls | contains Name .txt")
        assert [row[0] for row in recorder.tables[0].rows] == [StrCell("a.txt"), StrCell("c.txt")]

    def test_empty_result_is_success(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("ls | where size > 1tb")
        assert result.success
        assert result.rows == 0
        assert recorder.tables[0].headers == ("Name", "Size")

    def test_execute_commands(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute([ShellCommand("ls"), ShellCommand("limit", ["1"])])
        assert result.success
        assert result.pipeline == "ls | limit 1"

    def test_producer_table_untouched_by_filters(
        self, files_table: Table, recorder: Recorder
    ) -> None:
        """Each stage builds a new table instead of mutating the previous one."""
        produced: list[Table] = []

        def tracking_ls(args: Sequence[str]) -> Table:
            table = files_table.copy()
            produced.append(table)
            return table

        executor = PipelineExecutor(producers={"ls": tracking_ls}, renderer=recorder)
        executor.execute_line("ls | sort-by size desc | limit 1")
        assert produced[0] == files_table
        assert recorder.tables[0] is not produced[0]

    def test_custom_registry(self, files_table: Table, recorder: Recorder) -> None:
        registry = FilterRegistry()

        @registry.operation("count")
        def count(table: Table, args: Sequence[str]) -> Table:
            return Table(["Count"], [(StrCell(str(table.row_count)),)])

        registry.freeze()
        executor = PipelineExecutor(
            filters=registry,
            producers={"ls": lambda args: files_table.copy()},
            renderer=recorder,
        )
        assert executor.execute_line("ls | count").success
        assert recorder.tables[0].rows == ((StrCell("3"),),)
        assert not executor.execute_line("ls | limit 1").success


class TestFailingPipelines:
    """Tests for pipelines that abort."""

    def test_unsupported_source(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("cat notes.txt | limit 2")
        assert not result.success
        assert result.state is PipelineState.ERROR
        assert result.error is not None
        assert result.error.type is PipelineErrorType.UNSUPPORTED_SOURCE
        assert "does not support piping" in result.error.message
        assert recorder.tables == []

    def test_filter_as_first_command(self, executor: PipelineExecutor) -> None:
        result = executor.execute_line("where size > 1kb | limit 2")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.UNSUPPORTED_SOURCE

    def test_unknown_single_command(self, executor: PipelineExecutor) -> None:
        result = executor.execute_line("vim")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.UNKNOWN_COMMAND

    def test_producer_failure(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("broken | limit 1")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.PRODUCER_FAILED
        assert "disk on fire" in result.error.message
        assert recorder.tables == []

    def test_unknown_filter(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("ls | grep txt")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.UNKNOWN_FILTER
        assert result.error.command == "grep"
        assert recorder.tables == []

    def test_filter_names_case_sensitive(self, executor: PipelineExecutor) -> None:
        result = executor.execute_line("ls | LIMIT 1")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.UNKNOWN_FILTER

    def test_unknown_field(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        """where Owner == root reports the available fields."""
        result = executor.execute_line("ls | where Owner == root")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.UNKNOWN_FIELD
        assert result.error.hint == "Available fields: Name, Size"
        assert "unknown field 'Owner'" in result.error.format()
        assert recorder.tables == []

    def test_usage_error_mid_pipeline(self, executor: PipelineExecutor, recorder: Recorder) -> None:
        result = executor.execute_line("ls | sort-by size | limit 0 | select Name")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.USAGE
        assert result.error.command == "limit"
        assert result.error.hint is not None
        assert result.error.hint.startswith("Usage: ... | limit N")
        assert recorder.tables == []

    def test_parse_error(self, executor: PipelineExecutor) -> None:
        result = executor.execute_line("ls | | limit 1")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.PARSE

    def test_empty_pipeline(self, executor: PipelineExecutor) -> None:
        result = executor.execute([])
        assert result.error is not None
        assert result.error.type is PipelineErrorType.USAGE

    def test_memory_error(self, files_table: Table, recorder: Recorder) -> None:
        registry = FilterRegistry()

        @registry.operation("explode")
        def explode(table: Table, args: Sequence[str]) -> Table:
            raise MemoryError

        executor = PipelineExecutor(
            filters=registry,
            producers={"ls": lambda args: files_table.copy()},
            renderer=recorder,
        )
        result = executor.execute_line("ls | explode")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.RESOURCE_EXHAUSTED
        assert recorder.tables == []

    def test_failure_does_not_affect_next_run(
        self, executor: PipelineExecutor, recorder: Recorder
    ) -> None:
        assert not executor.execute_line("ls | where Owner == root").success
        assert executor.execute_line("ls | limit 2").success
        assert recorder.tables[0].row_count == 2

    def test_oversized_literal_returns_result(
        self, executor: PipelineExecutor, recorder: Recorder
    ) -> None:
        """Unrepresentable sizes count as 0 bytes instead of raising."""
        result = executor.execute_line("ls | where size > " + "9" * 400)
        assert result.success
        assert result.rows == 3
        assert executor.execute_line("ls | where size < " + "9" * 400 + "kb").rows == 0

    def test_unreachable_directory(
        self, recorder: Recorder, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def deny(self: Path) -> bool:
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "is_dir", deny)
        result = PipelineExecutor(renderer=recorder).execute_line("ls /locked/sub | limit 1")
        assert result.error is not None
        assert result.error.type is PipelineErrorType.PRODUCER_FAILED
        assert "Permission denied" in result.error.message
        assert recorder.tables == []

    def test_failure_logged_at_info(
        self, executor: PipelineExecutor, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        events: list[tuple[str, str, dict[str, object]]] = []

        class RecordingLogger:
            def debug(self, event: str, **kw: object) -> None:
                events.append(("debug", event, kw))

            def info(self, event: str, **kw: object) -> None:
                events.append(("info", event, kw))

        monkeypatch.setattr(executor_module, "logger", RecordingLogger())
        executor.execute_line("ls | grep x")
        expected = {"error_type": "unknown_filter", "command": "grep"}
        assert ("info", "pipeline.failed", expected) in events

    def test_result_to_dict(self, executor: PipelineExecutor) -> None:
        data = executor.execute_line("ls | grep x").to_dict()
        assert data["success"] is False
        assert data["state"] == "error"
        assert data["error"]["type"] == "unknown_filter"
