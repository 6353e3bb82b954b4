"""Command-line interface for lsh."""

from __future__ import annotations

import json
from pathlib import Path

import click

from lsh.core.config import CONFIG_SEARCH_PATHS, Settings, find_config_file, get_settings
from lsh.data.table import Table
from lsh.filters.operations import BUILTIN_FILTERS
from lsh.observability.logging import setup_logging
from lsh.pipeline.executor import PipelineExecutor, PipelineResult
from lsh.pipeline.producers import PRODUCERS
from lsh.pipeline.render import print_table, render_json

EXIT_COMMANDS: frozenset[str] = frozenset({"exit", "quit"})


def _settings(ctx: click.Context) -> Settings:
    settings = get_settings(ctx.obj.get("config_path"))
    setup_logging(settings.general)
    return settings


def _make_executor(settings: Settings, output_format: str = "table") -> PipelineExecutor:
    def renderer(table: Table) -> None:
        if output_format == "json":
            click.echo(render_json(table))
        else:
            print_table(table, settings.render)

    return PipelineExecutor(renderer=renderer)


def _report(result: PipelineResult) -> None:
    if result.error is not None:
        click.echo(result.error.format(), err=True)


def _help_text() -> str:
    lines = ["Commands that start a pipeline:"]
    lines.extend(f"  {name}" for name in sorted(PRODUCERS))
    lines.append("Filters:")
    lines.extend(
        f"  {info.usage:<28} {info.description}" for info in BUILTIN_FILTERS.list_filters_info()
    )
    lines.append("Other: help, exit")
    return "\n".join(lines)


@click.group()
@click.version_option(package_name="lsh")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to config file.",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None) -> None:
    """lsh: a shell whose pipelines carry typed tables."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = str(config) if config else None


@main.command()
@click.argument("line")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="How to print the final table.",
)
@click.pass_context
def run(ctx: click.Context, line: str, output_format: str) -> None:
    """Run a single pipeline line.

    Example: lsh run "ls | where size > 10kb | sort-by size desc"
    """
    executor = _make_executor(_settings(ctx), output_format)
    try:
        result = executor.execute_line(line)
    except Exception as e:
        raise click.ClickException(f"internal error: {e}") from e
    if not result.success:
        _report(result)
        ctx.exit(1)


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Start the interactive shell."""
    settings = _settings(ctx)
    executor = _make_executor(settings)

    while True:
        try:
            line = click.prompt(
                "",
                prompt_suffix=settings.shell.prompt,
                default="",
                show_default=False,
            )
        except click.Abort:
            click.echo()
            break

        stripped = line.strip()
        if not stripped:
            continue
        if stripped in EXIT_COMMANDS:
            break
        if stripped == "help":
            click.echo(_help_text())
            continue

        try:
            result = executor.execute_line(line)
        except Exception as e:
            click.echo(f"lsh: internal error: {e}", err=True)
            continue
        _report(result)


@main.command("filters")
def filters_list() -> None:
    """List pipeline filters."""
    for info in BUILTIN_FILTERS.list_filters_info():
        click.echo(f"\n{click.style(info.name, fg='green', bold=True)}")
        click.echo(f"  {info.description}")
        click.echo(f"  Usage: ... | {info.usage}")


@main.group()
def config() -> None:
    """Configuration commands."""


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    settings = get_settings(ctx.obj.get("config_path"))
    click.echo(json.dumps(settings.to_dict(), indent=2))


@config.command("path")
def config_path() -> None:
    """Show config file search paths."""
    click.echo("Config file search paths:")
    for i, path in enumerate(CONFIG_SEARCH_PATHS, start=1):
        click.echo(f"  {i}. {path}")
    click.echo()

    found = find_config_file()
    if found:
        click.echo(f"Found: {click.style(str(found), fg='green')}")
    else:
        click.echo("No config file found, using defaults.")
