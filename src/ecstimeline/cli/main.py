"""CLI entry point and global options."""

from typing import Literal

import click

from ecstimeline import __version__
from ecstimeline.cli.build import build, connections, export, hosts
from ecstimeline.cli.output import OutputFormat, OutputFormatter, set_output_format
from ecstimeline.core.errors import handle_error
from ecstimeline.core.logging import configure_logging, set_verbose


@click.group()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "jsonl", "human"]),
    default="json",
    help="Output format (default: json)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging to stderr",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress informational output",
)
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Log format for stderr (default: text)",
)
@click.version_option(version=__version__, prog_name="ecstimeline")
@click.pass_context
def cli(
    ctx: click.Context,
    format: OutputFormat,
    verbose: bool,
    quiet: bool,
    log_format: Literal["text", "json"],
) -> None:
    """ecstimeline: build cross-host timelines from ECS telemetry.

    Reads Elastic Common Schema events (JSON, JSON arrays, NDJSON or
    Elasticsearch exports), attributes them to hosts and links hosts
    through the network flows they share.
    """
    ctx.ensure_object(dict)
    ctx.obj = {
        "format": format,
        "verbose": verbose,
        "quiet": quiet,
        "log_format": log_format,
        "formatter": OutputFormatter(format=format),
    }

    set_output_format(format)
    set_verbose(verbose)
    configure_logging(log_format=log_format, quiet=quiet)


cli.add_command(build)
cli.add_command(hosts)
cli.add_command(connections)
cli.add_command(export)


EXIT_SUCCESS = 0
EXIT_ERROR = 1


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except Exception as e:
        handle_error(e, exit_code=EXIT_ERROR)


if __name__ == "__main__":
    main()
