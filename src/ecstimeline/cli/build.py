"""Timeline CLI commands."""

import time
from pathlib import Path

import click

from ecstimeline.cli.output import OutputFormatter
from ecstimeline.core import logging as log
from ecstimeline.core.errors import EcsTimelineError, InputReadError
from ecstimeline.models.metrics import IngestMetrics
from ecstimeline.normalizer.events import CanonicalEvent
from ecstimeline.normalizer.pipeline import decode_text, parse_events
from ecstimeline.normalizer.timeline import (
    CATEGORIES,
    Timeline,
    build_timeline,
    export_raw,
    filter_events,
    merge_events,
    to_wire,
)

inputs_argument = click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path, allow_dash=True),
)


def _read_input(path: Path) -> str:
    if str(path) == "-":
        return decode_text(click.get_binary_stream("stdin").read())
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InputReadError(f"Cannot read {path}: {e.strerror or e}", path=str(path)) from e
    return decode_text(data)


def _load_timeline(step_name: str, inputs: tuple[Path, ...]) -> Timeline:
    """Ingest every input cumulatively, deduplicating by event id."""
    start = time.perf_counter()
    metrics = IngestMetrics(step_name=step_name, duration_ms=0)
    events: list[CanonicalEvent] = []

    for path in inputs:
        text = _read_input(path)
        metrics.inputs += 1
        metrics.bytes_read += len(text.encode("utf-8"))

        parsed = parse_events(text)
        events, added = merge_events(events, parsed)
        log.debug(f"Ingested {path}: {len(added)} new events", path=str(path))

        metrics.events_parsed += len(parsed)
        metrics.events_added += len(added)
        metrics.duplicates += len(parsed) - len(added)

    timeline = build_timeline(events)
    metrics.hosts = len(timeline.registry)
    metrics.connections = len(timeline.connections)
    metrics.duration_ms = int((time.perf_counter() - start) * 1000)
    log.debug("Ingestion complete", **metrics.model_dump())
    return timeline


@click.command()
@inputs_argument
@click.option(
    "--category",
    "-c",
    "categories",
    type=click.Choice(CATEGORIES),
    multiple=True,
    help="Only output events in this category (can be repeated)",
)
@click.option("--raw", "include_raw", is_flag=True, default=False, help="Include raw payloads")
@click.pass_context
def build(
    ctx: click.Context,
    inputs: tuple[Path, ...],
    categories: tuple[str, ...],
    include_raw: bool,
) -> None:
    """Build a timeline from ECS JSON, JSON array or NDJSON files.

    \b
    Examples:
      ecstimeline build events.ndjson
      ecstimeline build export.json alerts.json --category network
      cat events.json | ecstimeline build -
    """
    formatter: OutputFormatter = ctx.obj["formatter"]

    try:
        timeline = _load_timeline("build", inputs)
    except EcsTimelineError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)

    result = timeline.to_dict(include_raw=include_raw)
    if categories:
        visible = filter_events(timeline.events, categories)
        result["events"] = [e.to_dict(include_raw=include_raw) for e in visible]

    if formatter.is_human():
        formatter.stream(result["events"], title="Events")
        formatter.stream(result["hosts"], title="Hosts")
        formatter.stream(result["connections"], title="Connections")
        formatter.output(result["stats"], title="Stats")
    else:
        formatter.output(result)


@click.command()
@inputs_argument
@click.pass_context
def hosts(ctx: click.Context, inputs: tuple[Path, ...]) -> None:
    """List the hosts observed across all inputs."""
    formatter: OutputFormatter = ctx.obj["formatter"]

    try:
        timeline = _load_timeline("hosts", inputs)
    except EcsTimelineError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)

    formatter.stream(timeline.registry.get_host_list(), title="Hosts")


@click.command()
@inputs_argument
@click.pass_context
def connections(ctx: click.Context, inputs: tuple[Path, ...]) -> None:
    """List cross-host network connections."""
    formatter: OutputFormatter = ctx.obj["formatter"]

    try:
        timeline = _load_timeline("connections", inputs)
    except EcsTimelineError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)

    formatter.stream(list(timeline.connections), title="Connections")


@click.command()
@inputs_argument
@click.option(
    "--wire",
    is_flag=True,
    default=False,
    help="Tag each payload with its event id (_id), as exchanged with peers",
)
@click.pass_context
def export(ctx: click.Context, inputs: tuple[Path, ...], wire: bool) -> None:
    """Export the deduplicated raw payloads."""
    formatter: OutputFormatter = ctx.obj["formatter"]

    try:
        timeline = _load_timeline("export", inputs)
    except EcsTimelineError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(1)

    payloads = to_wire(timeline.events) if wire else export_raw(timeline.events)
    if formatter.is_human():
        formatter.output(payloads)
    else:
        formatter.stream(payloads)
